"""
Request size limit middleware.

Rejects requests whose Content-Length exceeds the configured maximum. Location
payloads are a handful of fields, so the default limit is small.
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..utils.responses import shape_error

DEFAULT_MAX_REQUEST_BYTES = 64 * 1024


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests with Content-Length > max_size."""

    def __init__(self, app: ASGIApp, max_size: int = DEFAULT_MAX_REQUEST_BYTES):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                too_large = int(content_length) > self.max_size
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content=shape_error("BadRequest", "Invalid Content-Length header"),
                )
            if too_large:
                return JSONResponse(
                    status_code=413,
                    content=shape_error(
                        "PayloadTooLarge",
                        f"Request body too large. Maximum size is {self.max_size} bytes.",
                    ),
                )
        return await call_next(request)
