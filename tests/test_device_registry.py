"""
Tests for device registration and passkey verification.
"""
import pytest
from unittest.mock import MagicMock

from tracker.core.errors import InputValidationError, StorageError, UnauthorizedError
from tracker.core.security import PasskeyContext
from tracker.services.device_registry import DeviceRegistry
from tracker.services.passkey_auth import PasskeyAuthorizer

from tracker.core.config import settings

DEVICE_TABLE = settings.DEVICE_TABLE


class TestRegister:
    def test_register_returns_uuid_device_id(self, registry):
        device_id = registry.register("abc123")

        assert isinstance(device_id, str)
        assert len(device_id) == 36

    def test_register_persists_passkey(self, registry, store):
        device_id = registry.register("abc123")

        record = store.get(DEVICE_TABLE, device_id)
        assert record == {"deviceID": device_id, "passkey": "abc123", "passkeyScheme": "plaintext"}

    def test_duplicate_passkeys_get_distinct_ids(self, registry):
        """Registering the same passkey twice yields two devices."""
        first = registry.register("abc123")
        second = registry.register("abc123")

        assert first != second
        assert registry.lookup(first) == "abc123"
        assert registry.lookup(second) == "abc123"

    def test_device_ids_pairwise_distinct(self, registry):
        ids = [registry.register(f"key-{i % 3}") for i in range(50)]
        assert len(set(ids)) == len(ids)

    @pytest.mark.parametrize("passkey", ["", None, 123, ["abc"]])
    def test_register_rejects_malformed_passkey(self, passkey):
        store = MagicMock()
        registry = DeviceRegistry(store, DEVICE_TABLE, PasskeyContext("plaintext"))

        with pytest.raises(InputValidationError) as exc_info:
            registry.register(passkey)

        assert "passkey" in exc_info.value.message
        store.put.assert_not_called()

    def test_register_surfaces_storage_failure(self):
        store = MagicMock()
        store.put.side_effect = StorageError("failed to write to 'devices'")
        registry = DeviceRegistry(store, DEVICE_TABLE, PasskeyContext("plaintext"))

        with pytest.raises(StorageError):
            registry.register("abc123")

    def test_register_hashes_passkey_when_configured(self, store):
        registry = DeviceRegistry(store, DEVICE_TABLE, PasskeyContext("pbkdf2_sha256"))

        device_id = registry.register("abc123")

        record = store.get(DEVICE_TABLE, device_id)
        assert record["passkey"] != "abc123"
        assert record["passkey"].startswith("$pbkdf2-sha256$")
        assert record["passkeyScheme"] == "pbkdf2_sha256"

    def test_register_rejects_passkey_over_hashing_limit(self):
        store = MagicMock()
        registry = DeviceRegistry(store, DEVICE_TABLE, PasskeyContext("plaintext"))

        with pytest.raises(InputValidationError) as exc_info:
            registry.register("x" * 5000)

        assert "passkey" in exc_info.value.message
        store.put.assert_not_called()


class TestLookup:
    def test_lookup_unknown_device_returns_none(self, registry):
        assert registry.lookup("nonexistent-id") is None

    def test_lookup_known_device(self, registry):
        device_id = registry.register("s3cret")
        assert registry.lookup(device_id) == "s3cret"

    def test_lookup_credentials_include_scheme(self, store):
        registry = DeviceRegistry(store, DEVICE_TABLE, PasskeyContext("pbkdf2_sha256"))
        device_id = registry.register("s3cret")

        stored, scheme = registry.lookup_credentials(device_id)

        assert stored.startswith("$pbkdf2-sha256$")
        assert scheme == "pbkdf2_sha256"

    def test_records_without_scheme_read_as_plaintext(self, registry, store):
        store.put(DEVICE_TABLE, {"deviceID": "legacy-1", "passkey": "$pbkdf2-sha256$mine"})

        assert registry.lookup_credentials("legacy-1") == ("$pbkdf2-sha256$mine", "plaintext")


class TestPasskeyAuthorizer:
    @pytest.fixture
    def authorizer(self, registry):
        return PasskeyAuthorizer(registry)

    def test_correct_passkey_verifies(self, registry, authorizer):
        device_id = registry.register("abc123")
        assert authorizer.verify(device_id, "abc123") is True

    @pytest.mark.parametrize("claimed", ["wrong", "abc1234", "ABC123", "abc123 ", ""])
    def test_other_passkeys_fail(self, registry, authorizer, claimed):
        device_id = registry.register("abc123")
        assert authorizer.verify(device_id, claimed) is False

    def test_unknown_device_fails(self, authorizer):
        assert authorizer.verify("nonexistent-id", "anything") is False

    def test_authorize_raises_same_error_for_both_failures(self, registry, authorizer):
        device_id = registry.register("abc123")

        with pytest.raises(UnauthorizedError) as wrong_passkey:
            authorizer.authorize(device_id, "wrong")
        with pytest.raises(UnauthorizedError) as unknown_device:
            authorizer.authorize("nonexistent-id", "abc123")

        assert str(wrong_passkey.value) == str(unknown_device.value)

    def test_verify_performs_no_writes(self):
        store = MagicMock()
        store.get.return_value = {"deviceID": "dev-1", "passkey": "abc123"}
        registry = DeviceRegistry(store, DEVICE_TABLE, PasskeyContext("plaintext"))

        assert PasskeyAuthorizer(registry).verify("dev-1", "abc123") is True
        store.put.assert_not_called()
        store.get.assert_called_once_with(DEVICE_TABLE, "dev-1")
