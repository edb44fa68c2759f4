"""
Core types for the ContentChef delivery API.

Option dataclasses declare their query parameters explicitly; response
dataclasses are built from decoded JSON with from_dict().
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

from contentchef.core.query import QueryOptions, QueryParam, QueryValues


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as sent by the API (trailing Z allowed)."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


# =============================================================================
# Sorting
# =============================================================================


@dataclass
class SortingField:
    """A single sort key."""

    field_name: str
    ascending: bool = True


class Sorting(list[SortingField]):
    """
    Ordered sort specification, encoded as `+field,-other`.

    Entries whose field name is blank are skipped.
    """

    def serialize(self) -> str:
        tokens = []
        for sorting_field in self:
            name = sorting_field.field_name.strip()
            if not name:
                continue
            sign = "+" if sorting_field.ascending else "-"
            tokens.append(sign + name)
        return ",".join(tokens)

    def encode_values(self, key: str, values: QueryValues) -> None:
        serialized = self.serialize()
        # all-blank sortings send no `sorting` parameter rather than an empty one
        if serialized:
            values[key] = [serialized]


# =============================================================================
# Property Filters
# =============================================================================


@dataclass
class PropFilterItem:
    """
    A field/operator/value clause.

    Operators: CONTAINS, CONTAINS_IC, EQUALS, EQUALS_IC, IN, IN_IC,
    STARTS_WITH, STARTS_WITH_IC
    """

    field: str = ""
    operator: str = ""
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for the API, dropping empty fields."""
        result: dict[str, Any] = {}
        if self.field:
            result["field"] = self.field
        if self.operator:
            result["operator"] = self.operator
        if self.value is not None:
            result["value"] = self.value
        return result


@dataclass
class PropFilters:
    """Property filter: clauses joined by a logical condition (AND, OR)."""

    condition: str = ""
    items: list[PropFilterItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for the API, dropping empty fields."""
        result: dict[str, Any] = {}
        if self.condition:
            result["condition"] = self.condition
        if self.items:
            result["items"] = [item.to_dict() for item in self.items]
        return result

    def encode_values(self, key: str, values: QueryValues) -> None:
        if not self.items:
            return
        values[key] = [json.dumps(self.to_dict(), separators=(",", ":"))]


# =============================================================================
# Request Options
# =============================================================================


@dataclass
class ContentOptions(QueryOptions):
    """Parameters of a channel's content() call."""

    # The publicId of the content you want to retrieve
    public_id: str = ""
    legacy_metadata: bool = False

    QUERY_PARAMS: ClassVar[tuple[QueryParam, ...]] = (
        QueryParam("legacyMetadata", "legacy_metadata", omit_empty=True),
        QueryParam("publicId", "public_id"),
    )


@dataclass
class SearchOptions(QueryOptions):
    """Parameters of a channel's search() call."""

    skip: int = 0
    take: int = 0
    public_id: list[str] = field(default_factory=list)
    content_definition: list[str] = field(default_factory=list)
    repositories: list[str] = field(default_factory=list)
    legacy_metadata: bool = False
    tags: list[str] = field(default_factory=list)
    prop_filters: PropFilters = field(default_factory=PropFilters)
    sorting: Sorting = field(default_factory=Sorting)

    QUERY_PARAMS: ClassVar[tuple[QueryParam, ...]] = (
        QueryParam("skip", "skip"),
        QueryParam("take", "take"),
        QueryParam("publicId", "public_id", omit_empty=True),
        QueryParam("contentDefinition", "content_definition", omit_empty=True),
        QueryParam("repositories", "repositories", omit_empty=True),
        QueryParam("legacyMetadata", "legacy_metadata", omit_empty=True),
        QueryParam("tags", "tags", omit_empty=True),
        QueryParam("propFilters", "prop_filters", omit_empty=True),
        QueryParam("sorting", "sorting", omit_empty=True),
    )


@dataclass
class TargetDateOptions(QueryOptions):
    """Wraps another options object and adds `targetDate` when one is set."""

    options: QueryOptions | None = None
    target_date: datetime | str | None = None

    QUERY_PARAMS: ClassVar[tuple[QueryParam, ...]] = (QueryParam("targetDate", "target_date", omit_empty=True),)

    def query_values(self) -> QueryValues:
        values = self.options.query_values() if self.options is not None else {}
        values.update(super().query_values())
        return values


# =============================================================================
# Responses
# =============================================================================


@dataclass
class RequestContext:
    """Server-side context of a request."""

    publishing_channel: str = ""
    cloud_name: str = ""
    timestamp: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RequestContext":
        """Create from API response dict."""
        return cls(
            publishing_channel=data.get("publishingChannel", ""),
            cloud_name=data.get("cloudName", ""),
            timestamp=parse_timestamp(data.get("timestamp")),
        )


@dataclass
class Metadata:
    """Content metadata."""

    id: int = 0
    authoring_content_id: int = 0
    content_version: int = 0
    content_last_modified_date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    published_on: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metadata":
        """Create from API response dict."""
        return cls(
            id=data.get("id", 0),
            authoring_content_id=data.get("authoringContentId", 0),
            content_version=data.get("contentVersion", 0),
            content_last_modified_date=parse_timestamp(data.get("contentLastModifiedDate")),
            tags=data.get("tags") or [],
            published_on=parse_timestamp(data.get("publishedOn")),
        )


@dataclass
class ContentResponse:
    """A single content item."""

    public_id: str = ""
    definition: str = ""
    repository: str = ""
    payload: Any = None
    online_date: datetime | None = None
    offline_date: datetime | None = None
    metadata: Metadata = field(default_factory=Metadata)
    request_context: RequestContext = field(default_factory=RequestContext)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentResponse":
        """Create from API response dict."""
        return cls(
            public_id=data.get("publicId", ""),
            definition=data.get("definition", ""),
            repository=data.get("repository", ""),
            payload=data.get("payload"),
            online_date=parse_timestamp(data.get("onlineDate")),
            offline_date=parse_timestamp(data.get("offlineDate")),
            metadata=Metadata.from_dict(data.get("metadata") or {}),
            request_context=RequestContext.from_dict(data.get("requestContext") or {}),
        )


@dataclass
class PaginatedResponse:
    """A single page of search results."""

    items: list[ContentResponse] = field(default_factory=list)
    total: int = 0
    skip: int = 0
    take: int = 0
    request_context: RequestContext = field(default_factory=RequestContext)

    @property
    def has_more(self) -> bool:
        """Check if there are more results."""
        return self.skip + len(self.items) < self.total

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaginatedResponse":
        """Create from API response dict."""
        return cls(
            items=[ContentResponse.from_dict(item) for item in data.get("items") or []],
            total=data.get("total", 0),
            skip=data.get("skip", 0),
            take=data.get("take", 0),
            request_context=RequestContext.from_dict(data.get("requestContext") or {}),
        )


__all__ = [
    "ContentOptions",
    "ContentResponse",
    "Metadata",
    "PaginatedResponse",
    "PropFilterItem",
    "PropFilters",
    "RequestContext",
    "SearchOptions",
    "Sorting",
    "SortingField",
    "TargetDateOptions",
    "parse_timestamp",
]
