"""Tests for envelope unwrapping and API error classification."""

from __future__ import annotations

import json

import pytest
from fakes import envelope

from crunchbase_client.envelope import decode
from crunchbase_client.errors import ApiError, MalformedResponseError


@pytest.mark.parametrize(
    "data",
    [
        {"uuid": "abc", "properties": {"name": "Facebook"}},
        [{"name": "a"}, {"name": "b"}],
        [],
        None,
    ],
)
def test_decode_returns_data_slot_unchanged(data: object) -> None:
    """Given an envelope with `error: null`, when `decode()` runs, then the
    `data` slot comes back structurally unchanged."""
    assert decode(envelope(data)) == data


def test_decode_accepts_text_payloads() -> None:
    assert decode('{"data": {"name": "x"}}') == {"name": "x"}


def test_decode_raises_api_error_from_top_level_error() -> None:
    """Given a non-null top-level `error`, when `decode()` runs, then
    `ApiError` carries its message and status exactly."""
    body = envelope(data={"name": "ignored"}, error={"message": "Not Found", "status": 404})

    with pytest.raises(ApiError) as excinfo:
        decode(body)

    assert excinfo.value.message == "Not Found"
    assert excinfo.value.status_code == 404


def test_decode_reads_status_beside_string_error() -> None:
    body = json.dumps({"error": "Invalid user_key", "status": "401"})

    with pytest.raises(ApiError) as excinfo:
        decode(body)

    assert excinfo.value.message == "Invalid user_key"
    assert excinfo.value.status_code == 401
    assert "401" in str(excinfo.value)


def test_decode_raises_on_nested_data_error() -> None:
    """Given `data` holding its own `error`, when the code is not the generic
    server error, then `ApiError` is raised with the nested details."""
    body = envelope(data={"error": {"code": 401, "message": "Access denied"}})

    with pytest.raises(ApiError) as excinfo:
        decode(body)

    assert excinfo.value.message == "Access denied"
    assert excinfo.value.status_code == 401


def test_decode_ignores_nested_generic_server_error() -> None:
    data = {"error": {"code": 500, "message": "Internal error"}, "items": []}

    assert decode(envelope(data=data)) == data


def test_decode_raises_on_empty_nested_error() -> None:
    """Given `data.error` set to an empty object, when decoded, then the
    missing code is not the generic server error and `ApiError` is raised."""
    with pytest.raises(ApiError) as excinfo:
        decode(envelope(data={"error": {}, "items": []}))

    assert excinfo.value.status_code is None


def test_decode_ignores_error_keys_inside_list_payloads() -> None:
    data = [{"error": {"code": 401, "message": "per item"}}]

    assert decode(envelope(data=data)) == data


def test_top_level_error_takes_precedence_over_data() -> None:
    body = envelope(
        data={"error": {"code": 401, "message": "nested"}},
        error={"message": "outer", "status": 503},
    )

    with pytest.raises(ApiError) as excinfo:
        decode(body)

    assert excinfo.value.message == "outer"


@pytest.mark.parametrize("raw", [b"", b"<html>502 Bad Gateway</html>", b"{\"data\": ", b"\xff\xfe"])
def test_decode_raises_malformed_response_for_invalid_json(raw: bytes) -> None:
    with pytest.raises(MalformedResponseError):
        decode(raw)


def test_decode_raises_malformed_response_for_non_object_envelope() -> None:
    with pytest.raises(MalformedResponseError):
        decode(b"[1, 2, 3]")
