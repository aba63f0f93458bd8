"""
Pytest configuration and fixtures for the device tracker tests.

Every test gets fresh in-memory collaborators; nothing touches a real
database or AWS.
"""
import sys
import pathlib

import pytest
from sqlalchemy.orm import sessionmaker

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tracker.core.config import settings  # noqa: E402
from tracker.core.security import PasskeyContext  # noqa: E402
from tracker.services.device_registry import DeviceRegistry  # noqa: E402
from tracker.services.location_service import LocationService  # noqa: E402
from tracker.services.passkey_auth import PasskeyAuthorizer  # noqa: E402
from tracker.services.table_store import InMemoryTableStore  # noqa: E402

DEVICE_TABLE = settings.DEVICE_TABLE
LOCATION_TABLE = settings.LOCATION_TABLE


@pytest.fixture
def key_schema():
    return settings.key_schema


@pytest.fixture
def memory_store(key_schema):
    return InMemoryTableStore(key_schema)


@pytest.fixture
def sql_store(key_schema):
    """SQL table store over a private in-memory SQLite database."""
    from tracker.db import init_db, make_engine
    from tracker.services.sql_store import SqlTableStore

    engine = make_engine("sqlite://")
    init_db(engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield SqlTableStore(key_schema, session_factory)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request, key_schema):
    """Run a test against each locally available store implementation."""
    if request.param == "memory":
        return InMemoryTableStore(key_schema)
    return request.getfixturevalue("sql_store")


@pytest.fixture
def passkey_context():
    return PasskeyContext("plaintext")


@pytest.fixture
def registry(store, passkey_context):
    return DeviceRegistry(store, DEVICE_TABLE, passkey_context)


@pytest.fixture
def location_service(store, registry):
    return LocationService(store, LOCATION_TABLE, PasskeyAuthorizer(registry))


@pytest.fixture
def client(memory_store):
    """
    FastAPI TestClient with the table store overridden by an in-memory one.
    """
    from fastapi.testclient import TestClient
    from tracker.dependencies import get_table_store
    from tracker.main import app

    app.dependency_overrides[get_table_store] = lambda: memory_store
    try:
        # raise_server_exceptions=False so unexpected errors become 500 responses
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def registered_device(client):
    """(deviceID, passkey) registered through the API."""
    response = client.post("/v1/devices", json={"passkey": "abc123"})
    assert response.status_code == 200
    return response.json()["deviceID"], "abc123"
