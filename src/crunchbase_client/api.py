"""High-level Crunchbase API client.

Ties the pipeline together: build the URI, fetch it (following redirects),
unwrap the envelope, and resolve the payload into typed entities.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from .config import ClientSettings
from .entities import Entity, EntityReference
from .envelope import decode
from .errors import ConfigurationError, MissingParamsError
from .query import (
    ORDER_CREATED_AT_ASC,
    ORDER_CREATED_AT_DESC,
    ORDER_UPDATED_AT_ASC,
    ORDER_UPDATED_AT_DESC,
    build_query,
    collect_parameters,
    normalize_options,
)
from .registry import EntityRegistry, default_registry
from .results import BatchSearchResult, SearchResult
from .transport import Transport


class CrunchbaseAPI:
    """Read-only client for the Crunchbase REST API."""

    ORDER_CREATED_AT_ASC = ORDER_CREATED_AT_ASC
    ORDER_CREATED_AT_DESC = ORDER_CREATED_AT_DESC
    ORDER_UPDATED_AT_ASC = ORDER_UPDATED_AT_ASC
    ORDER_UPDATED_AT_DESC = ORDER_UPDATED_AT_DESC

    def __init__(
        self,
        settings: ClientSettings,
        client: httpx.Client | None = None,
        registry: EntityRegistry | None = None,
    ) -> None:
        self.settings = settings
        self.registry = (registry or default_registry()).copy(
            max_depth=settings.max_relationship_depth
        )
        self._transport = Transport(settings, client)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> CrunchbaseAPI:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def api_url(self) -> str:
        return self.settings.api_url

    def get_json_response(self, uri: str) -> Any:
        """Fetch ``uri`` with the user key appended and return the envelope's data."""
        user_key = self.settings.require_user_key()
        separator = "&" if "?" in uri else "?"
        body = self._transport.fetch(
            f"{uri}{separator}user_key={quote(user_key, safe='')}", self.settings.redirect_limit
        )
        return decode(body)

    def fetch(self, permalink: str, resource: str) -> Any:
        """Return the raw data payload for ``{resource}/{permalink}``."""
        return self.get_json_response(f"{self.api_url}{resource}/{permalink}")

    def single_entity(self, permalink: str, resource: str, kind: str | None = None) -> Entity:
        """Look up one entity by permalink and resolve it to its registered model.

        ``kind`` overrides the model used for the response, which otherwise is
        the one registered for ``resource``. Unregistered kinds fail before any
        request is sent.
        """
        kind = kind or resource
        self.registry.definition_for(kind)
        data = self.fetch(permalink, resource)
        return self.registry.resolve(kind, data)

    def organization(self, permalink: str) -> Entity:
        return self.single_entity(permalink, "organizations", kind="organization")

    def person(self, permalink: str) -> Entity:
        return self.single_entity(permalink, "people", kind="person")

    def resolve_reference(self, reference: EntityReference) -> Entity:
        return self.single_entity(reference.permalink, reference.resource)

    def search(self, options: Mapping[str, Any] | None, resource: str) -> SearchResult:
        """Search ``resource``; defaults to page 1 ordered by creation time."""
        query = normalize_options(options, ordered=True)
        uri = f"{self.api_url}{resource}?{build_query(query)}"
        return SearchResult.from_payload(query, self.get_json_response(uri), resource, self.registry)

    def list(self, options: Mapping[str, Any] | None, resource: str) -> SearchResult:
        """Page through ``resource``.

        A ``model_name`` option selects the kind used to resolve items and is
        not sent to the API.
        """
        query = normalize_options(options, ordered=False)
        kind = query.pop("model_name", None) or resource
        self.registry.definition_for(kind)
        uri = f"{self.api_url}{resource}?{build_query(query, ordered=False)}"
        return SearchResult.from_payload(query, self.get_json_response(uri), kind, self.registry)

    def lists_for_category(
        self,
        resource: str,
        permalink: str,
        category: str,
        options: Mapping[str, Any] | None = None,
    ) -> SearchResult:
        """List the ``category`` relation of one entity, e.g. an organization's ``current_team``."""
        query = normalize_options(options, ordered=True)
        kind = query.pop("model_name", None) or category
        self.registry.definition_for(kind)
        uri = f"{self.api_url}{resource}/{permalink}/{category}?{build_query(query)}"
        return SearchResult.from_payload(query, self.get_json_response(uri), kind, self.registry)

    def organization_lists(
        self, permalink: str, category: str, options: Mapping[str, Any] | None = None
    ) -> SearchResult:
        return self.lists_for_category("organizations", permalink, category, options)

    def person_lists(
        self, permalink: str, category: str, options: Mapping[str, Any] | None = None
    ) -> SearchResult:
        return self.lists_for_category("people", permalink, category, options)

    def funding_rounds_lists(
        self, permalink: str, category: str, options: Mapping[str, Any] | None = None
    ) -> SearchResult:
        return self.lists_for_category("funding-rounds", permalink, category, options)

    def batch_search(self, requests: Sequence[Mapping[str, Any]]) -> BatchSearchResult:
        """Run several lookups as one request; items keep their own kinds."""
        if not isinstance(requests, list):
            raise ConfigurationError("Invalid argument. Please pass in an array as an argument")
        if not requests:
            raise MissingParamsError("Array argument empty")

        query = {"requests": json.dumps(requests, separators=(",", ":"))}
        uri = f"{self.api_url}batch_search?{collect_parameters(query)}"
        logger.info(f"Batch search with {len(requests)} request(s)")
        data = self.get_json_response(uri)
        return BatchSearchResult.from_payload(query, data, self.registry)
