"""
Response shaping shared by the FastAPI app and the gateway handlers.

Error bodies have one shape:

    {"error": {"type": "BadRequest" | "Unauthorized" | "Internal", "message": str}}

Unauthorized and Internal messages are fixed strings; only BadRequest carries
a descriptive message.
"""
import logging
from typing import Any, Dict, List, Tuple

from ..core.errors import InputValidationError, StorageError, TrackerError, UnauthorizedError

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "success"
UNAUTHORIZED_MESSAGE = "Unauthorized"
INTERNAL_MESSAGE = "Internal server error"


def shape_error(error_type: str, message: str) -> Dict[str, Any]:
    return {
        "error": {
            "type": error_type,
            "message": message,
        }
    }


def shape_device(device_id: str) -> Dict[str, str]:
    return {"deviceID": device_id}


def shape_locations(readings: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"locations": list(readings)}


def error_status_and_body(exc: TrackerError) -> Tuple[int, Dict[str, Any]]:
    """Map a tracker error to (status code, body)."""
    if isinstance(exc, InputValidationError):
        return 400, shape_error("BadRequest", exc.message)
    if isinstance(exc, UnauthorizedError):
        return 401, shape_error("Unauthorized", UNAUTHORIZED_MESSAGE)
    if isinstance(exc, StorageError):
        return 500, shape_error("Internal", INTERNAL_MESSAGE)
    logger.error("Unmapped tracker error: %r", exc)
    return 500, shape_error("Internal", INTERNAL_MESSAGE)
