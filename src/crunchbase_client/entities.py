"""Typed entity models for Crunchbase API nodes.

One frozen model per entity kind. Every attribute is optional: a missing key
leaves the field ``None``. Relationship slots are declared as fields too, but
are only ever filled by :class:`crunchbase_client.registry.EntityRegistry`,
never from the node's attribute set.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny


class EntityReference(BaseModel):
    """Reference-only linkage to another entity, resolved by a separate lookup."""

    model_config = ConfigDict(frozen=True)

    resource: str = Field(description="Resource collection the permalink belongs to")
    permalink: str = Field(description="Stable slug of the referenced entity")


class Entity(BaseModel):
    """Immutable snapshot of one API node."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    RESOURCE_LIST: ClassVar[str] = "undefineds"

    uuid: str | None = None
    type: str | None = None

    @staticmethod
    def attributes_of(node: dict[str, Any]) -> dict[str, Any]:
        """Flatten a node into its attribute mapping.

        Attributes live under ``properties`` when the node has one; ``uuid`` and
        ``type`` sit beside it.
        """
        properties = node.get("properties")
        attributes = dict(properties) if isinstance(properties, dict) else dict(node)
        attributes.pop("relationships", None)
        for key in ("uuid", "type"):
            if key in node and key not in attributes:
                attributes[key] = node[key]
        return attributes

    @classmethod
    def relation_slots(cls) -> frozenset[str]:
        """Names of the fields typed :data:`Relation`."""
        return frozenset(
            name
            for name, field in cls.model_fields.items()
            if any(isinstance(marker, RelationSlot) for marker in field.metadata)
        )


class RelationSlot:
    """Marks a field that is filled by relationship resolution only."""

    def __repr__(self) -> str:
        return "RelationSlot()"


Relation = Annotated[
    Union[SerializeAsAny[Entity], EntityReference, tuple[SerializeAsAny[Entity], ...], None],
    RelationSlot(),
]


class Category(Entity):
    RESOURCE_LIST: ClassVar[str] = "categories"

    web_path: str | None = None
    name: str | None = None
    organizations_in_category: int | None = None
    products_in_category: int | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None


class Location(Entity):
    RESOURCE_LIST: ClassVar[str] = "locations"

    web_path: str | None = None
    name: str | None = None
    location_type: str | None = None
    parent_location_uuid: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None


class PrimaryLocation(Location):
    RESOURCE_LIST: ClassVar[str] = "primary_location"


class OrganizationSummary(Entity):
    RESOURCE_LIST: ClassVar[str] = "organizations"

    permalink: str | None = None
    api_path: str | None = None
    web_path: str | None = None
    name: str | None = None
    primary_role: str | None = None
    short_description: str | None = None
    profile_image_url: str | None = None
    domain: str | None = None
    homepage_url: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    stock_exchange: str | None = None
    stock_symbol: str | None = None
    city_name: str | None = None
    region_name: str | None = None
    country_code: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    headquarters: Relation = None
    founders: Relation = None
    categories: Relation = None
    current_team: Relation = None
    past_team: Relation = None
    board_members_and_advisors: Relation = None
    funding_rounds: Relation = None
    acquisitions: Relation = None
    ipo: Relation = None
    offices: Relation = None


class Organization(OrganizationSummary):
    """Full organization record as served by ``organizations/{permalink}``."""

    RESOURCE_LIST: ClassVar[str] = "organization"

    description: str | None = None
    founded_on: str | None = None
    closed_on: str | None = None
    is_closed: bool | None = None
    num_employees_min: int | None = None
    num_employees_max: int | None = None
    total_funding_usd: float | None = None
    number_of_investments: int | None = None
    role_company: bool | None = None
    role_investor: bool | None = None
    role_group: bool | None = None
    role_school: bool | None = None


class FoundedCompany(OrganizationSummary):
    RESOURCE_LIST: ClassVar[str] = "founded_companies"


class PersonSummary(Entity):
    RESOURCE_LIST: ClassVar[str] = "people"

    permalink: str | None = None
    api_path: str | None = None
    web_path: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    gender: str | None = None
    profile_image_url: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    city_name: str | None = None
    region_name: str | None = None
    country_code: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    primary_affiliation: Relation = None
    primary_location: Relation = None
    degrees: Relation = None
    advisory_roles: Relation = None
    founded_companies: Relation = None
    videos: Relation = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Person(PersonSummary):
    """Full person record as served by ``people/{permalink}``."""

    RESOURCE_LIST: ClassVar[str] = "person"

    bio: str | None = None
    born_on: str | None = None
    died_on: str | None = None
    role_investor: bool | None = None


class ProductSummary(Entity):
    RESOURCE_LIST: ClassVar[str] = "products"

    permalink: str | None = None
    api_path: str | None = None
    web_path: str | None = None
    name: str | None = None
    lifecycle_stage: str | None = None
    short_description: str | None = None
    homepage_url: str | None = None
    launched_on: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    owner: Relation = None


class FundingRound(Entity):
    RESOURCE_LIST: ClassVar[str] = "funding_rounds"

    permalink: str | None = None
    api_path: str | None = None
    web_path: str | None = None
    funding_type: str | None = None
    series: str | None = None
    announced_on: str | None = None
    closed_on: str | None = None
    money_raised: float | None = None
    money_raised_currency_code: str | None = None
    money_raised_usd: float | None = None
    target_money_raised: float | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    funded_organization: Relation = None


class Acquisition(Entity):
    RESOURCE_LIST: ClassVar[str] = "acquisitions"

    api_path: str | None = None
    web_path: str | None = None
    price: float | None = None
    price_currency_code: str | None = None
    price_usd: float | None = None
    payment_type: str | None = None
    acquisition_type: str | None = None
    acquisition_status: str | None = None
    disposition_of_acquired: str | None = None
    announced_on: str | None = None
    completed_on: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    acquirer: Relation = None
    acquiree: Relation = None


class Ipo(Entity):
    RESOURCE_LIST: ClassVar[str] = "ipos"

    api_path: str | None = None
    web_path: str | None = None
    went_public_on: str | None = None
    stock_exchange_symbol: str | None = None
    stock_symbol: str | None = None
    shares_sold: int | None = None
    opening_share_price: float | None = None
    money_raised: float | None = None
    money_raised_currency_code: str | None = None
    money_raised_usd: float | None = None
    opening_valuation_usd: float | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    funded_company: Relation = None


class Office(Entity):
    RESOURCE_LIST: ClassVar[str] = "offices"

    name: str | None = None
    street_1: str | None = None
    street_2: str | None = None
    postal_code: str | None = None
    city: str | None = None
    city_web_path: str | None = None
    region: str | None = None
    region_web_path: str | None = None
    country: str | None = None
    country_web_path: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None


class Customer(Entity):
    RESOURCE_LIST: ClassVar[str] = "customers"

    permalink: str | None = None
    api_path: str | None = None
    web_path: str | None = None
    name: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None


class Degree(Entity):
    RESOURCE_LIST: ClassVar[str] = "degrees"

    started_on: str | None = None
    completed_on: str | None = None
    degree_type_name: str | None = None
    degree_subject: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    school: Relation = None


class Video(Entity):
    RESOURCE_LIST: ClassVar[str] = "videos"

    title: str | None = None
    service_name: str | None = None
    url: str | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None


class Job(Entity):
    """Shared shape of every employment-like record."""

    RESOURCE_LIST: ClassVar[str] = "jobs"

    title: str | None = None
    job_type: str | None = None
    started_on: str | None = None
    ended_on: str | None = None
    is_current: bool | None = None
    created_at: int | str | None = None
    updated_at: int | str | None = None

    person: Relation = None
    organization: Relation = None


class CurrentTeam(Job):
    RESOURCE_LIST: ClassVar[str] = "current_team"


class PastTeam(Job):
    RESOURCE_LIST: ClassVar[str] = "past_team"


class BoardMembersAndAdvisor(Job):
    RESOURCE_LIST: ClassVar[str] = "board_members_and_advisors"


class PrimaryAffiliation(Job):
    RESOURCE_LIST: ClassVar[str] = "primary_affiliation"


class AdvisoryRole(Job):
    RESOURCE_LIST: ClassVar[str] = "advisor_at"
