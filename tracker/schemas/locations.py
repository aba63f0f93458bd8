"""
Request/response models for location ingestion and listing.

Wire names are camelCase ``deviceID``; attributes are snake_case and mapped
through aliases.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Largest and smallest non-zero magnitudes a DynamoDB number can hold
MAX_COORDINATE_MAGNITUDE = 9.999999999999999e125
MIN_COORDINATE_MAGNITUDE = 1e-130
# DynamoDB numbers carry at most 38 significant digits
MAX_TIMESTAMP = 10 ** 38 - 1


def _require_string(v):
    if not isinstance(v, str):
        raise ValueError("must be a string")
    return v


class DeviceCredentials(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(..., alias="deviceID", min_length=1)
    passkey: str = Field(..., min_length=1)

    @field_validator("device_id", "passkey", mode="before")
    @classmethod
    def credentials_must_be_strings(cls, v):
        return _require_string(v)


class ListLocationsRequest(DeviceCredentials):
    pass


class SubmitLocationRequest(DeviceCredentials):
    longitude: float = Field(..., allow_inf_nan=False)
    latitude: float = Field(..., allow_inf_nan=False)
    timestamp: int = Field(..., ge=0, le=MAX_TIMESTAMP)

    @field_validator("longitude", "latitude", mode="before")
    @classmethod
    def coordinate_must_be_number(cls, v):
        # bool is an int subclass; "1.5" would be coerced in lax mode
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("must be a number")
        return v

    @field_validator("longitude", "latitude")
    @classmethod
    def coordinate_must_be_storable(cls, v):
        if v != 0 and not MIN_COORDINATE_MAGNITUDE <= abs(v) <= MAX_COORDINATE_MAGNITUDE:
            raise ValueError("magnitude must be between 1e-130 and 9.99e125")
        return v

    @field_validator("timestamp", mode="before")
    @classmethod
    def timestamp_must_be_integer(cls, v):
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError("must be an integer")
        return v


class LocationOut(BaseModel):
    longitude: float
    latitude: float
    timestamp: int


class LocationListResponse(BaseModel):
    locations: List[LocationOut] = []
