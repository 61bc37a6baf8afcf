"""Kind-tag registry and recursive entity resolution.

The registry maps a kind tag (``"organizations"``, ``"people"``, ...) to the
model that represents it and the relationships that model declares. Lookup is
strict: an unknown tag raises :class:`UnsupportedEntityError` and never falls
back to an untyped representation. Host applications extend the catalogue by
registering more kinds on their own registry instance.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from pydantic import ValidationError

from . import entities as e
from .entities import Entity, EntityReference
from .errors import MalformedResponseError, RelationshipDepthError, UnsupportedEntityError

DEFAULT_MAX_DEPTH = 8


@dataclass(frozen=True, slots=True)
class RelationshipSpec:
    """Declared relationship slot: the kind it points to and how it is linked."""

    target: str
    reference: bool = False


@dataclass(frozen=True, slots=True)
class EntityDefinition:
    kind: str
    model: type[Entity]
    relationships: Mapping[str, RelationshipSpec] = field(default_factory=dict)


def _alias_key(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


def _permalink_of(node: Mapping[str, Any]) -> str | None:
    attributes = Entity.attributes_of(dict(node))
    permalink = attributes.get("permalink")
    if permalink:
        return str(permalink)
    for key in ("web_path", "api_path"):
        path = attributes.get(key)
        if path:
            return str(path).rstrip("/").rsplit("/", 1)[-1]
    return None


class EntityRegistry:
    """Map kind tags to entity definitions and resolve JSON nodes through them."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth
        self._definitions: dict[str, EntityDefinition] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self,
        kind: str,
        model: type[Entity],
        *,
        aliases: Iterable[str] = (),
        relationships: Mapping[str, RelationshipSpec | str] | None = None,
    ) -> EntityDefinition:
        """Register ``model`` under ``kind``.

        ``aliases`` are matched case-insensitively, ignoring ``_`` and ``-``;
        batch search items name their kind this way (``"FundingRound"``).
        Every relationship must have a slot on the model.
        """
        specs: dict[str, RelationshipSpec] = {}
        for name, spec in (relationships or {}).items():
            if isinstance(spec, str):
                spec = RelationshipSpec(spec)
            if name not in model.model_fields:
                raise ValueError(f"{model.__name__} declares no slot for relationship {name!r}")
            specs[name] = spec

        definition = EntityDefinition(kind=kind, model=model, relationships=specs)
        self._definitions[kind] = definition
        for alias in aliases:
            self._aliases[_alias_key(alias)] = kind
        return definition

    def extend(self, other: EntityRegistry) -> EntityRegistry:
        """Copy every definition and alias of ``other`` into this registry."""
        self._definitions.update(other._definitions)
        self._aliases.update(other._aliases)
        return self

    def copy(self, *, max_depth: int | None = None) -> EntityRegistry:
        clone = EntityRegistry(self.max_depth if max_depth is None else max_depth)
        return clone.extend(self)

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(self._definitions)

    def __contains__(self, tag: object) -> bool:
        if not isinstance(tag, str):
            return False
        return tag in self._definitions or _alias_key(tag) in self._aliases

    def definition_for(self, tag: str) -> EntityDefinition:
        definition = self._definitions.get(tag)
        if definition is None:
            kind = self._aliases.get(_alias_key(tag)) if tag else None
            definition = self._definitions.get(kind) if kind else None
        if definition is None:
            raise UnsupportedEntityError(tag)
        return definition

    def model_for(self, tag: str) -> type[Entity]:
        return self.definition_for(tag).model

    def validate(self, tags: Iterable[str] = ()) -> None:
        """Check that ``tags`` and every relationship target are registered."""
        for tag in tags:
            self.definition_for(tag)
        for definition in self._definitions.values():
            for spec in definition.relationships.values():
                self.definition_for(spec.target)

    def resolve(self, tag: str, node: Any, *, depth: int = 0) -> Entity:
        """Build the entity for ``node`` using the definition registered for ``tag``."""
        definition = self.definition_for(tag)
        if depth > self.max_depth:
            raise RelationshipDepthError(tag, depth)
        if not isinstance(node, Mapping):
            raise MalformedResponseError(
                f"Expected an object for {tag!r}, got {type(node).__name__}", str(node)[:200]
            )

        attributes = Entity.attributes_of(dict(node))
        # Relationship slots are filled from ``relationships`` only, never from
        # raw attribute keys, declared or not.
        for name in definition.model.relation_slots().union(definition.relationships):
            attributes.pop(name, None)
        try:
            entity = definition.model.model_validate(attributes)
        except ValidationError as exc:
            logger.error(f"{definition.model.__name__} validation failed: {exc}")
            raise MalformedResponseError(
                f"Invalid {tag!r} record received from Crunchbase", str(node)[:200]
            ) from exc

        relationships = node.get("relationships")
        if not isinstance(relationships, Mapping) or not definition.relationships:
            return entity

        resolved: dict[str, Any] = {}
        for name in definition.relationships:
            if name not in relationships:
                continue
            value = self.resolve_relationship(tag, name, relationships[name], depth=depth)
            if value is not None:
                resolved[name] = value
        return entity.model_copy(update=resolved) if resolved else entity

    def resolve_relationship(
        self, parent_tag: str, name: str, node: Any, *, depth: int = 0
    ) -> Entity | EntityReference | tuple[Entity, ...] | None:
        """Resolve relationship ``name`` of ``parent_tag`` from its JSON node.

        Null or absent data resolves to ``None``. Paged relationships (``items``)
        and list-valued ``data`` resolve to a tuple of entities.
        """
        spec = self.definition_for(parent_tag).relationships.get(name)
        if spec is None:
            raise UnsupportedEntityError(f"{parent_tag}.{name}")

        payload = _unwrap_relationship(node)
        if payload is None:
            return None

        if spec.reference:
            if isinstance(payload, list):
                payload = payload[0] if payload else None
            permalink = _permalink_of(payload) if isinstance(payload, Mapping) else None
            return EntityReference(resource=spec.target, permalink=permalink) if permalink else None

        if isinstance(payload, list):
            return tuple(self.resolve(spec.target, item, depth=depth + 1) for item in payload)
        return self.resolve(spec.target, payload, depth=depth + 1)


def _unwrap_relationship(node: Any) -> Any:
    """Return the entity payload carried by a relationship node, or ``None``."""
    if node is None:
        return None
    if isinstance(node, list):
        return node
    if not isinstance(node, Mapping):
        return None
    if "data" in node:
        return node["data"]
    if "items" in node:
        return node["items"]
    if "item" in node:
        return node["item"]
    return node or None


def default_registry(max_depth: int = DEFAULT_MAX_DEPTH) -> EntityRegistry:
    """Return a fresh registry holding the built-in Crunchbase catalogue."""
    registry = EntityRegistry(max_depth)
    person_links = {
        "primary_affiliation": RelationshipSpec("primary_affiliation"),
        "primary_location": RelationshipSpec("primary_location"),
        "degrees": RelationshipSpec("degrees"),
        "advisory_roles": RelationshipSpec("advisor_at"),
        "founded_companies": RelationshipSpec("founded_companies"),
        "videos": RelationshipSpec("videos"),
    }
    organization_links = {
        "headquarters": RelationshipSpec("locations"),
        "founders": RelationshipSpec("people"),
        "categories": RelationshipSpec("categories"),
        "current_team": RelationshipSpec("current_team"),
        "past_team": RelationshipSpec("past_team"),
        "board_members_and_advisors": RelationshipSpec("board_members_and_advisors"),
        "funding_rounds": RelationshipSpec("funding_rounds"),
        "acquisitions": RelationshipSpec("acquisitions"),
        "ipo": RelationshipSpec("ipos"),
        "offices": RelationshipSpec("offices"),
    }

    registry.register("categories", e.Category, aliases=["Category"])
    registry.register("locations", e.Location, aliases=["Location"])
    registry.register("primary_location", e.PrimaryLocation)
    registry.register("organizations", e.OrganizationSummary, relationships=organization_links)
    registry.register(
        "organization", e.Organization, aliases=["Organization"], relationships=organization_links
    )
    registry.register("founded_companies", e.FoundedCompany, relationships=organization_links)
    registry.register("people", e.PersonSummary, relationships=person_links)
    registry.register("person", e.Person, aliases=["Person"], relationships=person_links)
    registry.register(
        "products",
        e.ProductSummary,
        aliases=["Product"],
        relationships={"owner": RelationshipSpec("organizations", reference=True)},
    )
    funding_round_links = {"funded_organization": RelationshipSpec("organizations")}
    registry.register(
        "funding_rounds", e.FundingRound, aliases=["FundingRound"], relationships=funding_round_links
    )
    registry.register("funding-rounds", e.FundingRound, relationships=funding_round_links)
    registry.register(
        "acquisitions",
        e.Acquisition,
        aliases=["Acquisition"],
        relationships={
            "acquirer": RelationshipSpec("organizations"),
            "acquiree": RelationshipSpec("organizations"),
        },
    )
    registry.register(
        "ipos",
        e.Ipo,
        aliases=["Ipo"],
        relationships={"funded_company": RelationshipSpec("organizations")},
    )
    registry.register("offices", e.Office, aliases=["Address"])
    registry.register("customers", e.Customer, aliases=["Customer"])
    registry.register(
        "degrees",
        e.Degree,
        aliases=["Degree"],
        relationships={"school": RelationshipSpec("organizations")},
    )
    registry.register("videos", e.Video, aliases=["Video"])

    team_links = {"person": RelationshipSpec("people")}
    registry.register("current_team", e.CurrentTeam, relationships=team_links)
    registry.register("past_team", e.PastTeam, relationships=team_links)
    registry.register("board_members_and_advisors", e.BoardMembersAndAdvisor, relationships=team_links)
    affiliation_links = {"organization": RelationshipSpec("organizations")}
    registry.register(
        "primary_affiliation", e.PrimaryAffiliation, aliases=["Job"], relationships=affiliation_links
    )
    registry.register("advisor_at", e.AdvisoryRole, relationships=affiliation_links)

    registry.validate()
    return registry
