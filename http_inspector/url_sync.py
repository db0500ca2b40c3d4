"""Two-way mapping between a Query and the address bar query string

Only values that differ from their defaults are written, so a default view
has a bare URL and any view can be restored from a pasted link.
"""

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qs, urlencode

from http_inspector.config import (
    QUERY_DEFAULTS,
    SORT_ORDERS,
    SORTABLE_COLUMNS,
    TIME_RANGES,
)
from http_inspector.query import Query


def _first(value: Any) -> Optional[str]:
    """Query parameter value (first one when repeated)"""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    return str(value)


def _parse_int(value: Optional[str], default: int, minimum: int) -> int:
    try:
        parsed = int(value) if value is not None else default
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _choice(value: Optional[str], choices, default: str) -> str:
    return value if value in choices else default


def decode_query(params: Mapping[str, Any]) -> Query:
    """Build a Query from URL parameters, falling back to defaults on bad input"""
    return Query(
        service=_first(params.get('service')) or QUERY_DEFAULTS['service'],
        time_range=_choice(_first(params.get('timeRange')), TIME_RANGES, QUERY_DEFAULTS['timeRange']),
        filter=_first(params.get('filter')) or QUERY_DEFAULTS['filter'],
        sort_by=_choice(_first(params.get('sortBy')), SORTABLE_COLUMNS, QUERY_DEFAULTS['sortBy']),
        sort_order=_choice(_first(params.get('sortOrder')), SORT_ORDERS, QUERY_DEFAULTS['sortOrder']),
        limit=_parse_int(_first(params.get('limit')), QUERY_DEFAULTS['limit'], 1),
        offset=_parse_int(_first(params.get('offset')), QUERY_DEFAULTS['offset'], 0),
    )


def parse_query_string(query_string: str) -> Query:
    """Decode a raw query string such as `?service=api&limit=100`"""
    return decode_query(parse_qs(query_string.lstrip("?")))


def encode_query(query: Query) -> Dict[str, str]:
    """URL parameters for a Query, omitting every field left at its default"""
    values = {
        'service': query.service,
        'timeRange': query.time_range,
        'filter': query.filter,
        'sortBy': query.sort_by,
        'sortOrder': query.sort_order,
        'limit': query.limit,
        'offset': query.offset,
    }
    return {
        name: str(value)
        for name, value in values.items()
        if value != QUERY_DEFAULTS[name]
    }


def foreign_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Parameters this view does not own; they are carried through untouched"""
    foreign = {}
    for name, value in params.items():
        if name in QUERY_DEFAULTS:
            continue
        first = _first(value)
        if first is not None:
            foreign[name] = first
    return foreign


def to_query_string(query: Query, extra: Optional[Mapping[str, str]] = None) -> str:
    params = dict(extra or {})
    params.update(encode_query(query))
    return urlencode(params)


def query_suffix(query: Query, extra: Optional[Mapping[str, str]] = None) -> str:
    """Query string with its leading "?", or "" for an all-default query"""
    query_string = to_query_string(query, extra)
    return f"?{query_string}" if query_string else ""


def replace_url_script(query: Query, extra: Optional[Mapping[str, str]] = None) -> str:
    """Browser script that swaps the current history entry for the Query's URL

    History is replaced rather than pushed so back/forward is not filled with
    one entry per edit. The path is left as it is.
    """
    suffix = json.dumps(query_suffix(query, extra))
    return (
        "window.history.replaceState(window.history.state, '', "
        f"window.location.pathname + {suffix})"
    )
