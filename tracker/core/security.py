"""
Passkey storage and verification.

Passkeys are stored either verbatim ("plaintext") or as PBKDF2-SHA256 hashes.
The scheme a passkey was stored with is recorded next to it and verification
uses that scheme only, so a client-chosen passkey that happens to look like a
hash is still compared verbatim. Changing PASSKEY_SCHEME only affects newly
registered devices.
"""
from passlib.context import CryptContext

from .config import settings, PASSKEY_SCHEMES

PLAINTEXT = "plaintext"

# passlib rejects longer secrets with PasswordSizeError
MAX_PASSKEY_LENGTH = 4096


class PasskeyContext:
    """Hash-and-compare capability used by the device registry."""

    def __init__(self, scheme: str = None):
        scheme = scheme or settings.PASSKEY_SCHEME
        if scheme not in PASSKEY_SCHEMES:
            raise ValueError(f"Unsupported passkey scheme: {scheme}")
        self.scheme = scheme
        # One single-scheme context each, never identify() across schemes
        self._contexts = {name: CryptContext(schemes=[name]) for name in PASSKEY_SCHEMES}

    def hash(self, passkey: str) -> str:
        return self._contexts[self.scheme].hash(passkey)

    def verify(self, passkey: str, stored: str, scheme: str = PLAINTEXT) -> bool:
        """Exact match of ``passkey`` against ``stored``, read as ``scheme``."""
        if not isinstance(stored, str) or not stored:
            return False
        context = self._contexts.get(scheme)
        if context is None:
            return False
        try:
            return context.verify(passkey, stored)
        except (ValueError, TypeError):
            # malformed hash or oversized passkey
            return False
