from pydantic import BaseModel, Field, field_validator

from ..core.security import MAX_PASSKEY_LENGTH


class RegisterDeviceRequest(BaseModel):
    passkey: str = Field(..., min_length=1, max_length=MAX_PASSKEY_LENGTH)

    @field_validator("passkey", mode="before")
    @classmethod
    def passkey_must_be_string(cls, v):
        if not isinstance(v, str):
            raise ValueError("must be a string")
        return v


class RegisterDeviceResponse(BaseModel):
    device_id: str = Field(..., alias="deviceID")
