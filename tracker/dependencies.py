"""
FastAPI dependencies wiring the services to one process-wide table store.

Tests swap the store with ``app.dependency_overrides[get_table_store]``.
"""
import logging
from typing import Optional

from fastapi import Depends

from .core.config import settings
from .core.security import PasskeyContext
from .services.device_registry import DeviceRegistry
from .services.location_service import LocationService
from .services.passkey_auth import PasskeyAuthorizer
from .services.table_store import TableStore, build_table_store

logger = logging.getLogger(__name__)

# Global table store instance (lazily initialized)
_table_store: Optional[TableStore] = None
_passkey_context: Optional[PasskeyContext] = None


def get_table_store() -> TableStore:
    global _table_store
    if _table_store is None:
        _table_store = build_table_store(settings)
    return _table_store


def get_passkey_context() -> PasskeyContext:
    global _passkey_context
    if _passkey_context is None:
        _passkey_context = PasskeyContext(settings.PASSKEY_SCHEME)
    return _passkey_context


def reset_dependencies():
    """Drop cached store and context (useful for testing)"""
    global _table_store, _passkey_context
    _table_store = None
    _passkey_context = None


def build_device_registry(store: TableStore, passkey_context: PasskeyContext = None) -> DeviceRegistry:
    return DeviceRegistry(store, settings.DEVICE_TABLE, passkey_context or get_passkey_context())


def build_location_service(store: TableStore, passkey_context: PasskeyContext = None) -> LocationService:
    registry = build_device_registry(store, passkey_context)
    return LocationService(store, settings.LOCATION_TABLE, PasskeyAuthorizer(registry))


def get_device_registry(store: TableStore = Depends(get_table_store)) -> DeviceRegistry:
    return build_device_registry(store)


def get_location_service(store: TableStore = Depends(get_table_store)) -> LocationService:
    return build_location_service(store)
