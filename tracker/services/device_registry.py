"""
Device registry: owns the deviceID -> passkey mapping.
"""
import logging
import uuid
from typing import Optional, Tuple

from ..core.security import PLAINTEXT, PasskeyContext
from ..schemas.devices import RegisterDeviceRequest
from ..schemas.validation import parse_payload
from .table_store import TableStore

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Registers devices and looks up their stored passkeys."""

    def __init__(self, store: TableStore, table_name: str, passkey_context: PasskeyContext):
        self.store = store
        self.table_name = table_name
        self.passkey_context = passkey_context

    def generate_device_id(self) -> str:
        return str(uuid.uuid4())

    def register(self, passkey: str) -> str:
        """
        Create a new device for ``passkey`` and return its deviceID.

        Passkeys need not be unique; every call yields a fresh identifier.
        Raises InputValidationError for a missing/empty passkey and
        StorageError if the write fails.
        """
        request = parse_payload(RegisterDeviceRequest, {"passkey": passkey})

        device_id = self.generate_device_id()
        self.store.put(self.table_name, {
            "deviceID": device_id,
            "passkey": self.passkey_context.hash(request.passkey),
            "passkeyScheme": self.passkey_context.scheme,
        })
        logger.info("Registered device %s", device_id)
        return device_id

    def lookup(self, device_id: str) -> Optional[str]:
        """Stored passkey for ``device_id``, or None when no such device exists."""
        credentials = self.lookup_credentials(device_id)
        if credentials is None:
            return None
        return credentials[0]

    def lookup_credentials(self, device_id: str) -> Optional[Tuple[str, str]]:
        """
        (stored passkey, storage scheme) for ``device_id``, or None.

        Records written without a scheme attribute hold the passkey verbatim.
        """
        record = self.store.get(self.table_name, device_id)
        if record is None:
            return None
        return record.get("passkey"), record.get("passkeyScheme") or PLAINTEXT
