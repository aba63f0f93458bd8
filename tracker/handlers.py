"""
API Gateway proxy handlers.

Serverless entry points for the three operations. Each takes a proxy event
(``body`` plus ``isBase64Encoded``) and returns a proxy response dict. The
table store is built once per process and reused across invocations.

    register_device_handler   {passkey}                                   -> {deviceID}
    submit_location_handler   {deviceID, passkey, longitude, latitude,
                               timestamp}                                 -> "success"
    list_locations_handler    {deviceID, passkey}                         -> {locations: [...]}
"""
import base64
import binascii
import json
import logging
from typing import Any, Callable, Dict, Optional

from .core.config import validate_config
from .core.errors import InputValidationError, TrackerError
from .dependencies import build_device_registry, build_location_service, get_table_store
from .schemas.validation import PARSE_ERROR_MESSAGE
from .utils.responses import (
    INTERNAL_MESSAGE,
    SUCCESS_MARKER,
    error_status_and_body,
    shape_device,
    shape_error,
    shape_locations,
)

logger = logging.getLogger(__name__)

_config_validated = False


def decode_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the (optionally base64) JSON object body of a proxy event."""
    body = event.get("body")
    if body is None:
        raise InputValidationError(PARSE_ERROR_MESSAGE)
    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body, validate=True).decode("utf-8")
        payload = json.loads(body)
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError) as e:
        raise InputValidationError(PARSE_ERROR_MESSAGE) from e
    if not isinstance(payload, dict):
        raise InputValidationError(PARSE_ERROR_MESSAGE)
    return payload


def json_response(status_code: int, body: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def text_response(status_code: int, body: str) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain; charset=utf-8"},
        "body": body,
    }


def _ensure_config():
    global _config_validated
    if not _config_validated:
        validate_config()
        _config_validated = True


def _handle(event: Dict[str, Any], operation: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
    try:
        _ensure_config()
        payload = decode_body(event)
        return operation(payload)
    except TrackerError as exc:
        status_code, body = error_status_and_body(exc)
        if status_code >= 500:
            logger.error("Handler failed: %s", exc)
        return json_response(status_code, body)
    except Exception:
        logger.exception("Unhandled error in gateway handler")
        return json_response(500, shape_error("Internal", INTERNAL_MESSAGE))


def register_device_handler(event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
    def operation(payload):
        registry = build_device_registry(get_table_store())
        return json_response(200, shape_device(registry.register(payload.get("passkey"))))

    return _handle(event, operation)


def submit_location_handler(event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
    def operation(payload):
        service = build_location_service(get_table_store())
        service.submit(
            payload.get("deviceID"),
            payload.get("passkey"),
            payload.get("longitude"),
            payload.get("latitude"),
            payload.get("timestamp"),
        )
        return text_response(200, SUCCESS_MARKER)

    return _handle(event, operation)


def list_locations_handler(event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
    def operation(payload):
        service = build_location_service(get_table_store())
        readings = service.list_locations(payload.get("deviceID"), payload.get("passkey"))
        return json_response(200, shape_locations(readings))

    return _handle(event, operation)
