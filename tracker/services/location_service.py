"""
Location ingestion and listing.

Both operations validate their input first, then authorize against the device
registry, then touch the location log. Ingestion only ever appends a new
record; listing only reads.
"""
import logging
import uuid
from typing import Any, Dict, List

from ..schemas.locations import ListLocationsRequest, SubmitLocationRequest
from ..schemas.validation import parse_payload
from .passkey_auth import PasskeyAuthorizer
from .table_store import TableStore

logger = logging.getLogger(__name__)


def shape_reading(record: Dict[str, Any]) -> Dict[str, Any]:
    """Public view of a stored reading: no readingID, no deviceID."""
    return {
        "longitude": float(record["longitude"]),
        "latitude": float(record["latitude"]),
        "timestamp": int(record["timestamp"]),
    }


class LocationService:
    """Append-only location log gated by device passkeys."""

    def __init__(self, store: TableStore, table_name: str, authorizer: PasskeyAuthorizer):
        self.store = store
        self.table_name = table_name
        self.authorizer = authorizer

    def submit(self, device_id: str, passkey: str, longitude: float, latitude: float, timestamp: int) -> None:
        """
        Append one reading for ``device_id``.

        Raises:
            InputValidationError: malformed input (no storage access happened)
            UnauthorizedError: unknown device or wrong passkey (nothing written)
            StorageError: the registry read or the log write failed
        """
        request = parse_payload(SubmitLocationRequest, {
            "deviceID": device_id,
            "passkey": passkey,
            "longitude": longitude,
            "latitude": latitude,
            "timestamp": timestamp,
        })
        self.authorizer.authorize(request.device_id, request.passkey)

        self.store.put(self.table_name, {
            "readingID": str(uuid.uuid4()),
            "deviceID": request.device_id,
            "longitude": request.longitude,
            "latitude": request.latitude,
            "timestamp": request.timestamp,
        })
        logger.debug("Stored location reading for device %s", request.device_id)

    def list_locations(self, device_id: str, passkey: str) -> List[Dict[str, Any]]:
        """
        All readings for ``device_id`` in store order (not sorted).

        An authorized device with no readings yields an empty list.
        """
        request = parse_payload(ListLocationsRequest, {"deviceID": device_id, "passkey": passkey})
        self.authorizer.authorize(request.device_id, request.passkey)

        records = self.store.scan(self.table_name, {"deviceID": request.device_id})
        return [shape_reading(record) for record in records]
