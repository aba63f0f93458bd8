"""
Tests for the API Gateway proxy handlers.
"""
import base64
import json
from unittest.mock import patch

import pytest

from tracker.core.errors import InputValidationError, StorageError
from tracker.handlers import (
    decode_body,
    list_locations_handler,
    register_device_handler,
    submit_location_handler,
)


def event(payload, encode=False):
    body = payload if isinstance(payload, str) else json.dumps(payload)
    if encode:
        return {"body": base64.b64encode(body.encode("utf-8")).decode("ascii"), "isBase64Encoded": True}
    return {"body": body, "isBase64Encoded": False}


@pytest.fixture(autouse=True)
def gateway_store(memory_store):
    with patch("tracker.handlers.get_table_store", return_value=memory_store):
        yield memory_store


class TestDecodeBody:
    def test_plain_body(self):
        assert decode_body(event({"passkey": "abc"})) == {"passkey": "abc"}

    def test_base64_body(self):
        assert decode_body(event({"passkey": "abc"}, encode=True)) == {"passkey": "abc"}

    @pytest.mark.parametrize("bad_event", [
        {"body": None},
        {"body": "{oops"},
        {"body": "[1, 2]"},
        {"body": "not base64!!", "isBase64Encoded": True},
        {"body": base64.b64encode(b"\xff\xfe").decode("ascii"), "isBase64Encoded": True},
    ])
    def test_unparseable_bodies(self, bad_event):
        with pytest.raises(InputValidationError) as exc_info:
            decode_body(bad_event)
        assert exc_info.value.message == "Could not parse body"


class TestHandlers:
    def test_register_submit_list_flow(self):
        registered = register_device_handler(event({"passkey": "abc123"}, encode=True))
        assert registered["statusCode"] == 200
        device_id = json.loads(registered["body"])["deviceID"]

        submitted = submit_location_handler(event({
            "deviceID": device_id,
            "passkey": "abc123",
            "longitude": -122.4,
            "latitude": 37.8,
            "timestamp": 1700000000,
        }, encode=True))
        assert submitted["statusCode"] == 200
        assert submitted["body"] == "success"

        listed = list_locations_handler(event({"deviceID": device_id, "passkey": "abc123"}))
        assert listed["statusCode"] == 200
        assert json.loads(listed["body"]) == {
            "locations": [{"longitude": -122.4, "latitude": 37.8, "timestamp": 1700000000}]
        }

    def test_unparseable_body_is_400(self):
        response = register_device_handler({"body": "{oops", "isBase64Encoded": False})

        assert response["statusCode"] == 400
        assert json.loads(response["body"]) == {
            "error": {"type": "BadRequest", "message": "Could not parse body"}
        }

    def test_missing_field_is_400(self):
        response = submit_location_handler(event({"deviceID": "dev-1", "passkey": "abc123"}))

        assert response["statusCode"] == 400
        assert "longitude" in json.loads(response["body"])["error"]["message"]

    def test_unauthorized_list(self):
        response = list_locations_handler(event({"deviceID": "nonexistent-id", "passkey": "anything"}))

        assert response["statusCode"] == 401
        assert json.loads(response["body"]) == {"error": {"type": "Unauthorized", "message": "Unauthorized"}}

    def test_wrong_passkey_matches_unknown_device(self, gateway_store):
        device_id = json.loads(register_device_handler(event({"passkey": "abc123"}))["body"])["deviceID"]

        wrong = submit_location_handler(event({
            "deviceID": device_id, "passkey": "wrong",
            "longitude": 0, "latitude": 0, "timestamp": 0,
        }))
        unknown = submit_location_handler(event({
            "deviceID": "nonexistent-id", "passkey": "abc123",
            "longitude": 0, "latitude": 0, "timestamp": 0,
        }))

        assert wrong == unknown
        assert gateway_store.count("locations") == 0

    def test_storage_failure_is_500(self, gateway_store):
        with patch.object(gateway_store, "put", side_effect=StorageError("throttled")):
            response = register_device_handler(event({"passkey": "abc123"}))

        assert response["statusCode"] == 500
        assert "throttled" not in response["body"]
