"""Decode the ``{data, error}`` JSON envelope returned by every endpoint."""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from .errors import ApiError, MalformedResponseError

# Nested ``data.error`` objects carrying this code are not treated as failures.
GENERIC_SERVER_ERROR_CODE = 500


def _as_status(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _api_error(error: Any, fallback_status: Any = None) -> ApiError:
    if isinstance(error, dict):
        message = error.get("message") or error.get("error") or json.dumps(error)
        status = error.get("status", error.get("code", fallback_status))
        return ApiError(str(message), _as_status(status))
    return ApiError(str(error), _as_status(fallback_status))


def parse_json(raw: bytes | str) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        logger.error(f"Response body is not valid JSON: {exc}")
        raise MalformedResponseError("Invalid JSON response from Crunchbase", text[:200]) from exc


def decode(raw: bytes | str) -> Any:
    """Return the ``data`` slot of an envelope, raising on reported errors.

    Two conventions are honoured: a top-level ``error`` (with its status either
    inside the error object or beside it as ``status``), and an ``error``
    object nested inside an object-valued ``data`` slot. The nested form is
    ignored when its code is the generic server error sentinel.
    """
    envelope = parse_json(raw)
    if not isinstance(envelope, dict):
        raise MalformedResponseError(
            f"Expected a JSON object envelope, got {type(envelope).__name__}",
            str(envelope)[:200],
        )

    error = envelope.get("error")
    if error is not None:
        raise _api_error(error, envelope.get("status"))

    data = envelope.get("data")
    if isinstance(data, dict):
        nested = data.get("error")
        if nested is not None and nested is not False:
            code = _as_status(nested.get("code")) if isinstance(nested, dict) else None
            if code != GENERIC_SERVER_ERROR_CODE:
                raise _api_error(nested)

    return data
