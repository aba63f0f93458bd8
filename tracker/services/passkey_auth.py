"""
Passkey verification shared by location ingestion and listing.

An unknown device and a wrong passkey are the same outcome, both in the
return value and in what gets logged.
"""
import logging

from ..core.errors import UnauthorizedError
from ..core.security import PasskeyContext
from .device_registry import DeviceRegistry

logger = logging.getLogger(__name__)


class PasskeyAuthorizer:
    def __init__(self, registry: DeviceRegistry, passkey_context: PasskeyContext = None):
        self.registry = registry
        self.passkey_context = passkey_context or registry.passkey_context

    def verify(self, device_id: str, passkey: str) -> bool:
        """True iff the device is registered and ``passkey`` matches exactly. Read-only."""
        credentials = self.registry.lookup_credentials(device_id)
        if credentials is None:
            return False
        stored, scheme = credentials
        return self.passkey_context.verify(passkey, stored, scheme)

    def authorize(self, device_id: str, passkey: str) -> None:
        if not self.verify(device_id, passkey):
            logger.warning("Rejected unauthorized request for device %s", device_id)
            raise UnauthorizedError()
