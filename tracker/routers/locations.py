"""
Location router: /v1/locations

Listing is a POST as well: the passkey travels in the body, never in the URL.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ..dependencies import get_location_service
from ..schemas.locations import ListLocationsRequest, LocationListResponse, SubmitLocationRequest
from ..services.location_service import LocationService
from ..utils.responses import SUCCESS_MARKER, shape_locations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/locations", tags=["locations"])


@router.post("", response_class=PlainTextResponse)
def submit_location(payload: SubmitLocationRequest, service: LocationService = Depends(get_location_service)):
    service.submit(
        payload.device_id,
        payload.passkey,
        payload.longitude,
        payload.latitude,
        payload.timestamp,
    )
    return PlainTextResponse(SUCCESS_MARKER)


@router.post("/query", response_model=LocationListResponse)
def list_locations(payload: ListLocationsRequest, service: LocationService = Depends(get_location_service)):
    readings = service.list_locations(payload.device_id, payload.passkey)
    return shape_locations(readings)
