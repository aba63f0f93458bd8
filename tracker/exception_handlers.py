"""
Exception handlers for the FastAPI app.

Register on an app instance via `register_exception_handlers(app)`.
"""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.env import is_local_env
from .core.errors import StorageError, TrackerError
from .schemas.validation import describe_errors
from .utils.responses import INTERNAL_MESSAGE, error_status_and_body, shape_error

logger = logging.getLogger(__name__)

HTTP_ERROR_TYPES = {
    400: "BadRequest",
    401: "Unauthorized",
    403: "Unauthorized",
    404: "NotFound",
    405: "MethodNotAllowed",
    413: "PayloadTooLarge",
}


async def tracker_error_handler(request: Request, exc: TrackerError):
    """Shape InputValidationError / UnauthorizedError / StorageError."""
    if isinstance(exc, StorageError):
        # Details stay in the logs
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
    status_code, body = error_status_and_body(exc)
    return JSONResponse(status_code=status_code, content=body)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Body validation failures become 400 BadRequest."""
    return JSONResponse(
        status_code=400,
        content=shape_error("BadRequest", describe_errors(exc.errors())),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error_type = HTTP_ERROR_TYPES.get(exc.status_code, "Internal")
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=shape_error(error_type, detail),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)

    if is_local_env():
        # Detail only on a developer machine
        message = f"{INTERNAL_MESSAGE}: {exc}"
    else:
        message = INTERNAL_MESSAGE
    return JSONResponse(status_code=500, content=shape_error("Internal", message))


def register_exception_handlers(app):
    """Register all exception handlers on the given FastAPI app."""
    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
