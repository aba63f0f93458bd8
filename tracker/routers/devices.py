"""
Device registration router: /v1/devices
"""
import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_device_registry
from ..schemas.devices import RegisterDeviceRequest, RegisterDeviceResponse
from ..services.device_registry import DeviceRegistry
from ..utils.responses import shape_device

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/devices", tags=["devices"])


@router.post("", response_model=RegisterDeviceResponse)
def register_device(payload: RegisterDeviceRequest, registry: DeviceRegistry = Depends(get_device_registry)):
    """Register a device under a client-chosen passkey. Returns the generated deviceID."""
    device_id = registry.register(payload.passkey)
    return shape_device(device_id)
