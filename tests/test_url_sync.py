"""Tests for url_sync module"""

import pytest

from http_inspector.query import Query
from http_inspector.url_sync import (
    decode_query,
    encode_query,
    foreign_params,
    parse_query_string,
    query_suffix,
    replace_url_script,
    to_query_string,
)


@pytest.fixture
def custom_query():
    """Query with every field moved off its default"""
    return Query(
        time_range="7d",
        service="billing",
        filter='status_code:>=500 AND uri:"/api/pay"',
        sort_by="avg_duration",
        sort_order="asc",
        limit=100,
        offset=200,
    )


# Tests for decoding

def test_decode_empty_params_gives_defaults():
    """Test a bare URL"""
    assert decode_query({}) == Query()


def test_decode_list_values():
    """Test parse_qs style values (first value wins)"""
    query = decode_query({"service": ["api", "web"], "limit": ["100"], "offset": ["200"]})
    assert query.service == "api"
    assert query.limit == 100
    assert query.offset == 200


@pytest.mark.parametrize("params, field, expected", [
    ({"limit": "abc"}, "limit", 50),
    ({"limit": "0"}, "limit", 50),
    ({"limit": "-10"}, "limit", 50),
    ({"offset": "-5"}, "offset", 0),
    ({"offset": "1.5"}, "offset", 0),
    ({"timeRange": "2h"}, "time_range", "24h"),
    ({"sortBy": "uri"}, "sort_by", "last_created_at"),
    ({"sortOrder": "sideways"}, "sort_order", "desc"),
])
def test_decode_invalid_values_fall_back_to_defaults(params, field, expected):
    """Test that a hand-edited URL never breaks the view"""
    assert getattr(decode_query(params), field) == expected


# Tests for encoding

def test_encode_default_query_is_empty():
    """Test that the default view has a bare URL"""
    assert encode_query(Query()) == {}
    assert to_query_string(Query()) == ""
    assert query_suffix(Query()) == ""


def test_encode_omits_defaults():
    """Test that only non-default fields are written"""
    assert encode_query(Query(service="api", limit=100)) == {"service": "api", "limit": "100"}


def test_round_trip(custom_query):
    """Test a shared link restores the same view"""
    assert parse_query_string("?" + to_query_string(custom_query)) == custom_query


def test_round_trip_default_sort_sends_no_sort():
    """Test that a URL without sort parameters keeps the default ordering"""
    query = parse_query_string("service=api&limit=25")
    assert query == Query(service="api", limit=25)
    assert encode_query(query) == {"service": "api", "limit": "25"}


# Tests for unrelated parameters

def test_foreign_params():
    """Test that parameters owned by other views are kept"""
    params = {"service": "api", "tab": "overview", "debug": ["1"]}
    assert foreign_params(params) == {"tab": "overview", "debug": "1"}


def test_query_suffix_keeps_foreign_params():
    """Test that foreign parameters survive a rewrite"""
    assert query_suffix(Query(), {"tab": "overview"}) == "?tab=overview"
    assert query_suffix(Query(service="api"), {"tab": "x"}) == "?tab=x&service=api"


def test_replace_url_script():
    """Test the history rewrite script"""
    script = replace_url_script(Query(service="api"))
    assert script.startswith("window.history.replaceState(")
    assert 'window.location.pathname + "?service=api"' in script


def test_replace_url_script_default_query():
    """Test that the default view drops the query string"""
    script = replace_url_script(Query())
    assert 'window.location.pathname + ""' in script
