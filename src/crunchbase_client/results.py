"""Result sets wrapping list-shaped API payloads."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, overload

from pydantic import BaseModel, ConfigDict

from .entities import Entity
from .errors import MalformedResponseError
from .registry import EntityRegistry


class Paging(BaseModel):
    """Pagination block served beside ``items`` by list endpoints."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    total_items: int | None = None
    number_of_pages: int | None = None
    current_page: int | None = None
    items_per_page: int | None = None
    next_page_url: str | None = None
    prev_page_url: str | None = None
    sort_order: str | None = None


def _split_payload(payload: Any) -> tuple[list[Any], Paging | None]:
    if payload is None:
        return [], None
    if isinstance(payload, list):
        return payload, None
    if isinstance(payload, Mapping):
        items = payload.get("items") or []
        if not isinstance(items, list):
            raise MalformedResponseError("Expected `items` to be a list", str(items)[:200])
        paging = payload.get("paging")
        return items, Paging.model_validate(paging) if isinstance(paging, Mapping) else None
    raise MalformedResponseError(
        f"Expected a list payload, got {type(payload).__name__}", str(payload)[:200]
    )


@dataclass(frozen=True)
class ResultSet(Sequence[Entity]):
    """Ordered, fully materialized entities plus the query that produced them.

    ``kind`` is ``None`` for heterogeneous sets, where each item carried its
    own type tag.
    """

    query: Mapping[str, Any]
    items: tuple[Entity, ...] = ()
    kind: str | None = None
    paging: Paging | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))
        object.__setattr__(self, "items", tuple(self.items))

    @overload
    def __getitem__(self, index: int) -> Entity: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Entity, ...]: ...

    def __getitem__(self, index: int | slice) -> Entity | tuple[Entity, ...]:
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.items)

    @property
    def results(self) -> tuple[Entity, ...]:
        return self.items

    @property
    def total_items(self) -> int:
        if self.paging is not None and self.paging.total_items is not None:
            return self.paging.total_items
        return len(self.items)

    @property
    def has_next_page(self) -> bool:
        return bool(self.paging and self.paging.next_page_url)


class SearchResult(ResultSet):
    """Items that all share one declared kind."""

    @classmethod
    def from_payload(
        cls,
        query: Mapping[str, Any],
        payload: Any,
        kind: str,
        registry: EntityRegistry,
    ) -> SearchResult:
        items, paging = _split_payload(payload)
        registry.definition_for(kind)
        resolved = tuple(registry.resolve(kind, item) for item in items)
        return cls(query=query, items=resolved, kind=kind, paging=paging)


class BatchSearchResult(ResultSet):
    """Items of differing kinds, each resolved through its own ``type`` tag.

    One unregistered tag fails the whole set.
    """

    @classmethod
    def from_payload(
        cls,
        query: Mapping[str, Any],
        payload: Any,
        registry: EntityRegistry,
    ) -> BatchSearchResult:
        items, paging = _split_payload(payload)
        resolved: list[Entity] = []
        for item in items:
            if not isinstance(item, Mapping):
                raise MalformedResponseError("Batch item is not an object", str(item)[:200])
            resolved.append(registry.resolve(str(item.get("type") or ""), item))
        return cls(query=query, items=tuple(resolved), kind=None, paging=paging)
