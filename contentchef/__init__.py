"""
ContentChef - Python client for the ContentChef delivery API.

Layers:
- core: Types, query encoding and HTTP client
- sdk: ContentChef client with online and preview channels
- cli: Command-line interface
"""

from contentchef.core import (
    APIError,
    ContentChefError,
    ContentOptions,
    Context,
    PropFilterItem,
    PropFilters,
    SearchOptions,
    Sorting,
    SortingField,
)
from contentchef.core.client import LIBRARY_VERSION
from contentchef.sdk import ContentChef, OnlineChannel, PreviewChannel

__version__ = LIBRARY_VERSION
__all__ = [
    "APIError",
    "ContentChef",
    "ContentChefError",
    "ContentOptions",
    "Context",
    "OnlineChannel",
    "PreviewChannel",
    "PropFilterItem",
    "PropFilters",
    "SearchOptions",
    "Sorting",
    "SortingField",
]
