"""
Core layer - Raw types and HTTP client.

This layer provides:
- Typed dataclasses for options and responses
- Query encoding for option objects
- Low-level HTTP client with auth and error handling
"""

from contentchef.core.client import APIClient, check_response
from contentchef.core.context import Context
from contentchef.core.errors import (
    APIError,
    ConfigurationError,
    ContentChefError,
    ContextCancelledError,
    DeadlineExceededError,
    DecodeError,
    EncodingError,
    TransportError,
)
from contentchef.core.query import QueryOptions, QueryParam, QueryValuer, add_options
from contentchef.core.types import (
    ContentOptions,
    ContentResponse,
    Metadata,
    PaginatedResponse,
    PropFilterItem,
    PropFilters,
    RequestContext,
    SearchOptions,
    Sorting,
    SortingField,
)

__all__ = [
    "APIClient",
    "APIError",
    "ConfigurationError",
    "ContentChefError",
    "ContentOptions",
    "ContentResponse",
    "Context",
    "ContextCancelledError",
    "DeadlineExceededError",
    "DecodeError",
    "EncodingError",
    "Metadata",
    "PaginatedResponse",
    "PropFilterItem",
    "PropFilters",
    "QueryOptions",
    "QueryParam",
    "QueryValuer",
    "RequestContext",
    "SearchOptions",
    "Sorting",
    "SortingField",
    "TransportError",
    "add_options",
    "check_response",
]
