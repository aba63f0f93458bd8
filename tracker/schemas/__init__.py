# Schemas package
from .devices import RegisterDeviceRequest, RegisterDeviceResponse
from .locations import (
    ListLocationsRequest,
    LocationListResponse,
    LocationOut,
    SubmitLocationRequest,
)
from .validation import parse_payload, describe_errors

__all__ = [
    "RegisterDeviceRequest", "RegisterDeviceResponse",
    "SubmitLocationRequest", "ListLocationsRequest",
    "LocationOut", "LocationListResponse",
    "parse_payload", "describe_errors",
]
