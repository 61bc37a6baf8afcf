"""Read-only client for the Crunchbase REST API."""

from .api import CrunchbaseAPI
from .config import ClientSettings
from .entities import Entity, EntityReference
from .errors import (
    ApiError,
    ConfigurationError,
    CrunchbaseError,
    MalformedResponseError,
    MissingCredentialError,
    MissingParamsError,
    RedirectLoopError,
    RelationshipDepthError,
    RequestTimeoutError,
    TransportError,
    UnsupportedEntityError,
)
from .query import (
    ORDER_CREATED_AT_ASC,
    ORDER_CREATED_AT_DESC,
    ORDER_UPDATED_AT_ASC,
    ORDER_UPDATED_AT_DESC,
)
from .registry import EntityRegistry, RelationshipSpec, default_registry
from .results import BatchSearchResult, ResultSet, SearchResult

__all__ = [
    "ORDER_CREATED_AT_ASC",
    "ORDER_CREATED_AT_DESC",
    "ORDER_UPDATED_AT_ASC",
    "ORDER_UPDATED_AT_DESC",
    "ApiError",
    "BatchSearchResult",
    "ClientSettings",
    "ConfigurationError",
    "CrunchbaseAPI",
    "CrunchbaseError",
    "Entity",
    "EntityReference",
    "EntityRegistry",
    "MalformedResponseError",
    "MissingCredentialError",
    "MissingParamsError",
    "RedirectLoopError",
    "RelationshipDepthError",
    "RelationshipSpec",
    "RequestTimeoutError",
    "ResultSet",
    "SearchResult",
    "TransportError",
    "UnsupportedEntityError",
    "default_registry",
]
