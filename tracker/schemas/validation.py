"""
Helpers turning pydantic validation failures into InputValidationError.

Messages name the offending field and the constraint, never the value, so a
rejected passkey is not echoed back.
"""
from typing import Any, Iterable, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import InputValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

PARSE_ERROR_MESSAGE = "Could not parse body"


def describe_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Render pydantic error dicts as 'field: message; ...'."""
    parts = []
    for error in errors:
        if error.get("type") == "json_invalid":
            return PARSE_ERROR_MESSAGE
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        msg = error.get("msg", "invalid value")
        # Drop pydantic's "Value error, " prefix on custom validator messages
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid request"


def parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` against ``model`` or raise InputValidationError."""
    if not isinstance(payload, Mapping):
        raise InputValidationError(PARSE_ERROR_MESSAGE)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InputValidationError(describe_errors(e.errors(include_url=False, include_input=False))) from e
