"""
Query encoding for option objects.

Each options class lists its parameters explicitly in a QUERY_PARAMS table.
Values that need a custom wire format implement QueryValuer and write
themselves into the parameter set.
"""

import urllib.parse
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Protocol, runtime_checkable

from contentchef.core.errors import EncodingError

QueryValues = dict[str, list[str]]


@runtime_checkable
class QueryValuer(Protocol):
    """A value that knows how to contribute itself to a query parameter set."""

    def encode_values(self, key: str, values: QueryValues) -> None: ...


@dataclass(frozen=True)
class QueryParam:
    """Maps an options attribute to a query parameter name."""

    name: str
    attr: str
    omit_empty: bool = False


def format_timestamp(value: datetime) -> str:
    """Format a datetime as RFC 3339 with second precision. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bool, int, float)):
        return not value
    if isinstance(value, Sequence):
        return len(value) == 0
    return False


def _encode_scalar(value: Any) -> str:
    # bool first: it is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    raise EncodingError(f"Cannot encode query value of type {type(value).__name__}")


class QueryOptions:
    """Base class for option objects encoded through a QUERY_PARAMS table."""

    QUERY_PARAMS: ClassVar[tuple[QueryParam, ...]] = ()

    def query_values(self) -> QueryValues:
        """Encode every parameter in QUERY_PARAMS into a name -> values mapping."""
        values: QueryValues = {}
        for param in self.QUERY_PARAMS:
            value = getattr(self, param.attr)
            if isinstance(value, QueryValuer):
                value.encode_values(param.name, values)
                continue
            if param.omit_empty and _is_empty(value):
                continue
            if value is None:
                values[param.name] = [""]
            elif isinstance(value, (list, tuple)):
                values[param.name] = [_encode_scalar(v) for v in value]
            else:
                values[param.name] = [_encode_scalar(value)]
        return values


def encode_values(values: QueryValues) -> str:
    """Percent-encode values as a query string, sorted by key."""
    pairs = []
    for key in sorted(values):
        pairs.extend((key, v) for v in values[key])
    return urllib.parse.urlencode(pairs)


def add_options(path: str, options: QueryOptions | None) -> str:
    """
    Replace the query string of `path` with the encoded options.

    Args:
        path: Relative or absolute URL
        options: Options to encode, or None to leave the path untouched

    Returns:
        The path with its query set to the encoded options

    Raises:
        EncodingError: On a malformed path or an unencodable value

    """
    if options is None:
        return path

    try:
        parts = urllib.parse.urlsplit(path)
    except ValueError as e:
        raise EncodingError(f"Invalid path {path!r}: {e}") from e

    try:
        values = options.query_values()
    except (AttributeError, TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode query options: {e}") from e

    return urllib.parse.urlunsplit(parts._replace(query=encode_values(values)))
