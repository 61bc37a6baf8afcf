"""Canonical query-string construction for list and search endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

ORDER_CREATED_AT_ASC = "created_at asc"
ORDER_CREATED_AT_DESC = "created_at desc"
ORDER_UPDATED_AT_ASC = "updated_at asc"
ORDER_UPDATED_AT_DESC = "updated_at desc"

DEFAULT_PAGE = 1
DEFAULT_ORDER = ORDER_CREATED_AT_ASC


def normalize_options(options: Mapping[str, Any] | None, *, ordered: bool = True) -> dict[str, Any]:
    """Return a copy of ``options`` with pagination and ordering defaults filled in.

    ``None`` values count as absent. Keys keep their original order; defaults
    for absent keys are appended.
    """
    normalized = {str(key): value for key, value in (options or {}).items()}
    if normalized.get("page") is None:
        normalized["page"] = DEFAULT_PAGE
    if ordered and normalized.get("order") is None:
        normalized["order"] = DEFAULT_ORDER
    return normalized


def _escape(value: Any) -> str:
    return quote(str(value), safe="")


def collect_parameters(options: Mapping[str, Any]) -> str:
    """Serialize ``options`` as ``key=value`` pairs in iteration order."""
    return "&".join(f"{_escape(key)}={_escape(value)}" for key, value in options.items())


def build_query(options: Mapping[str, Any] | None, *, ordered: bool = True) -> str:
    """Normalize then serialize ``options``; the caller's mapping is not modified.

    >>> build_query({"page": None, "order": None})
    'page=1&order=created_at%20asc'
    """
    return collect_parameters(normalize_options(options, ordered=ordered))


def parse_query(query: str) -> dict[str, str]:
    """Inverse of :func:`collect_parameters`, preserving pair order."""
    pairs: dict[str, str] = {}
    for chunk in query.split("&"):
        if not chunk:
            continue
        key, _, value = chunk.partition("=")
        pairs[unquote(key)] = unquote(value)
    return pairs
