"""Tests for query encoding of option objects."""

import json
import urllib.parse
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar

import pytest

from contentchef.core.errors import EncodingError
from contentchef.core.query import QueryOptions, QueryParam, QueryValuer, add_options, format_timestamp
from contentchef.core.types import (
    ContentOptions,
    PropFilterItem,
    PropFilters,
    SearchOptions,
    Sorting,
    SortingField,
    TargetDateOptions,
)


@dataclass
class FooOptions(QueryOptions):
    foo: Any = ""

    QUERY_PARAMS: ClassVar[tuple[QueryParam, ...]] = (QueryParam("foo", "foo"),)


def _query(url: str) -> dict[str, list[str]]:
    return urllib.parse.parse_qs(urllib.parse.urlsplit(url).query, keep_blank_values=True)


class TestSorting:
    """Sorting serialization."""

    @pytest.mark.parametrize(
        "sorting,expected",
        [
            ([SortingField("", ascending=False)], ""),
            ([SortingField(" publicId", ascending=True)], "+publicId"),
            ([SortingField("publicId", ascending=False)], "-publicId"),
            ([SortingField("publicId", ascending=True)], "+publicId"),
            ([SortingField("publicId", ascending=True), SortingField("onlineDate", ascending=False)], "+publicId,-onlineDate"),
            ([SortingField("a"), SortingField("   ", ascending=False), SortingField("b", ascending=False)], "+a,-b"),
        ],
    )
    def test_serialize(self, sorting, expected):
        assert Sorting(sorting).serialize() == expected

    def test_blank_sorting_is_not_sent(self):
        values: dict[str, list[str]] = {}
        Sorting([SortingField(" ")]).encode_values("sorting", values)
        assert values == {}

    def test_is_query_valuer(self):
        assert isinstance(Sorting(), QueryValuer)
        assert isinstance(PropFilters(), QueryValuer)


class TestPropFilters:
    """Property filter serialization."""

    def test_empty_items_are_omitted(self):
        values: dict[str, list[str]] = {}
        PropFilters(condition="AND").encode_values("propFilters", values)
        assert values == {}

    def test_compact_json(self):
        filters = PropFilters(
            condition="AND",
            items=[PropFilterItem(field="title", operator="CONTAINS", value="chef")],
        )
        values: dict[str, list[str]] = {}
        filters.encode_values("propFilters", values)
        assert values == {
            "propFilters": ['{"condition":"AND","items":[{"field":"title","operator":"CONTAINS","value":"chef"}]}']
        }

    def test_empty_fields_are_dropped(self):
        filters = PropFilters(items=[PropFilterItem(field="tags", operator="IN", value=["a", "b"])])
        assert filters.to_dict() == {"items": [{"field": "tags", "operator": "IN", "value": ["a", "b"]}]}


class TestAddOptions:
    """add_options() path handling."""

    def test_none_options_keep_path(self):
        assert add_options("/something?x=1", None) == "/something?x=1"

    def test_add_options(self):
        assert add_options("/something", FooOptions(foo="bar")) == "/something?foo=bar"

    def test_query_is_replaced(self):
        assert add_options("/something?old=1", FooOptions(foo="bar")) == "/something?foo=bar"

    def test_values_are_escaped(self):
        assert add_options("/something", FooOptions(foo="a b&c")) == "/something?foo=a+b%26c"

    def test_malformed_path(self):
        with pytest.raises(EncodingError):
            add_options("http://[::1", FooOptions(foo="bar"))

    def test_unencodable_value(self):
        with pytest.raises(EncodingError):
            add_options("/something", FooOptions(foo=object()))

    def test_unencodable_filter_value(self):
        options = SearchOptions(prop_filters=PropFilters(items=[PropFilterItem("f", "EQUALS", object())]))
        with pytest.raises(EncodingError):
            add_options("/search", options)


class TestContentOptions:
    """ContentOptions parameters."""

    def test_public_id(self):
        assert add_options("/content", ContentOptions(public_id="home")) == "/content?publicId=home"

    def test_public_id_is_always_sent(self):
        assert add_options("/content", ContentOptions()) == "/content?publicId="

    def test_legacy_metadata(self):
        url = add_options("/content", ContentOptions(public_id="home", legacy_metadata=True))
        assert url == "/content?legacyMetadata=true&publicId=home"


class TestSearchOptions:
    """SearchOptions parameters."""

    def test_defaults(self):
        assert add_options("/search", SearchOptions()) == "/search?skip=0&take=0"

    def test_all_fields(self):
        options = SearchOptions(
            skip=10,
            take=5,
            public_id=["a", "b"],
            content_definition=["article"],
            repositories=["blog"],
            legacy_metadata=True,
            tags=["news", "food"],
            prop_filters=PropFilters(condition="OR", items=[PropFilterItem("title", "EQUALS_IC", "Chef")]),
            sorting=Sorting([SortingField("onlineDate", ascending=False), SortingField("publicId")]),
        )
        query = _query(add_options("/search", options))

        assert query == {
            "skip": ["10"],
            "take": ["5"],
            "publicId": ["a", "b"],
            "contentDefinition": ["article"],
            "repositories": ["blog"],
            "legacyMetadata": ["true"],
            "tags": ["news", "food"],
            "propFilters": ['{"condition":"OR","items":[{"field":"title","operator":"EQUALS_IC","value":"Chef"}]}'],
            "sorting": ["-onlineDate,+publicId"],
        }
        assert json.loads(query["propFilters"][0])["condition"] == "OR"

    def test_keys_are_sorted(self):
        options = SearchOptions(take=10, tags=["news"], content_definition=["article"])
        assert add_options("/search", options) == "/search?contentDefinition=article&skip=0&tags=news&take=10"


class TestTargetDate:
    """Target date injection and timestamp formatting."""

    def test_target_date_is_added(self):
        options = TargetDateOptions(
            options=ContentOptions(public_id="home"),
            target_date=datetime(2030, 1, 1, tzinfo=timezone.utc),
        )
        assert _query(add_options("/c", options)) == {
            "publicId": ["home"],
            "targetDate": ["2030-01-01T00:00:00Z"],
        }

    def test_no_target_date(self):
        options = TargetDateOptions(options=ContentOptions(public_id="home"))
        assert add_options("/c", options) == "/c?publicId=home"

    def test_without_inner_options(self):
        assert add_options("/c", TargetDateOptions(target_date="2030-01-01T00:00:00Z")) == (
            "/c?targetDate=2030-01-01T00%3A00%3A00Z"
        )

    @pytest.mark.parametrize(
        "value,expected",
        [
            (datetime(2030, 1, 1, 12, 30, 15), "2030-01-01T12:30:15Z"),
            (datetime(2030, 1, 1, 12, 30, 15, 999, tzinfo=timezone.utc), "2030-01-01T12:30:15Z"),
            (datetime(2030, 1, 1, 12, 30, tzinfo=timezone(timedelta(hours=2))), "2030-01-01T12:30:00+02:00"),
        ],
    )
    def test_format_timestamp(self, value, expected):
        assert format_timestamp(value) == expected
