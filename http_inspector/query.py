"""Canonical query for the HTTP analysis view

A `Query` is immutable. Every transition returns a new `Query` and encodes
the paging rule: a change of service, time range or filter invalidates the
current page, so the offset goes back to 0. Sorting and page size changes
keep the offset.
"""

import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple, Union

from http_inspector.config import (
    DEFAULT_FILTER,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_SERVICE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    DEFAULT_TIME_RANGE,
    SORT_ORDERS,
    SORTABLE_COLUMNS,
    TIME_RANGES,
    TIMESTAMP_FORMAT,
)

RequestParams = Dict[str, Union[str, int]]

_SERVICE_CLAUSE = re.compile(
    r"(?<![\w.])service\s*:\s*(?:\"([^\"]+)\"|'([^']+)'|([\w.\-]+))",
    re.IGNORECASE,
)
_OR_KEYWORD = re.compile(r"\bOR\b", re.IGNORECASE)
_NOT_SUFFIX = re.compile(r"\bNOT\s*\(?\s*$", re.IGNORECASE)
_OPERATOR_WORDS = {"IN", "NOT", "LIKE"}


@dataclass(frozen=True)
class Query:
    """Filter, sort, pagination and time range of the HTTP calls table"""
    time_range: str = DEFAULT_TIME_RANGE
    service: str = DEFAULT_SERVICE
    filter: str = DEFAULT_FILTER
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    def __post_init__(self):
        if self.time_range not in TIME_RANGES:
            raise ValueError(f"Unknown time range: {self.time_range!r}")
        if self.sort_by not in SORTABLE_COLUMNS:
            raise ValueError(f"Unknown sort column: {self.sort_by!r}")
        if self.sort_order not in SORT_ORDERS:
            raise ValueError(f"Unknown sort order: {self.sort_order!r}")
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must not be negative, got {self.offset}")

    # Result-set changing transitions (reset offset)

    def with_service(self, service: Optional[str]) -> "Query":
        service = (service or "").strip()
        if service == self.service:
            return self
        return replace(self, service=service, offset=0)

    def with_time_range(self, time_range: Optional[str]) -> "Query":
        if time_range not in TIME_RANGES:
            time_range = DEFAULT_TIME_RANGE
        if time_range == self.time_range:
            return self
        return replace(self, time_range=time_range, offset=0)

    def with_filter(self, filter_expr: Optional[str]) -> "Query":
        filter_expr = (filter_expr or "").strip()
        if filter_expr == self.filter:
            return self
        return replace(self, filter=filter_expr, offset=0)

    def with_filters_reset(self) -> "Query":
        """Restore service, time range and filter defaults"""
        return (
            self.with_service(DEFAULT_SERVICE)
            .with_time_range(DEFAULT_TIME_RANGE)
            .with_filter(DEFAULT_FILTER)
        )

    # Ordering and paging transitions (offset kept)

    def with_sort_by(self, column: str) -> "Query":
        if column not in SORTABLE_COLUMNS:
            return self
        return replace(self, sort_by=column)

    def with_sort_order(self, order: str) -> "Query":
        if order not in SORT_ORDERS:
            return self
        return replace(self, sort_order=order)

    def toggled_sort(self, column: str) -> "Query":
        """Header click: flip the order on the active column, else sort desc by the new one"""
        if column not in SORTABLE_COLUMNS:
            return self
        if column == self.sort_by:
            return replace(self, sort_order="asc" if self.sort_order == "desc" else "desc")
        return replace(self, sort_by=column, sort_order="desc")

    def with_limit(self, limit: int) -> "Query":
        return replace(self, limit=max(1, int(limit)))

    def with_offset(self, offset: int) -> "Query":
        return replace(self, offset=max(0, int(offset)))

    def next_page(self) -> "Query":
        return self.with_offset(self.offset + self.limit)

    def previous_page(self) -> "Query":
        return self.with_offset(self.offset - self.limit)

    @property
    def has_custom_sort(self) -> bool:
        return (self.sort_by, self.sort_order) != (DEFAULT_SORT_BY, DEFAULT_SORT_ORDER)

    @property
    def active_filter_count(self) -> int:
        """Number of result-set filters that differ from their defaults"""
        return sum([
            self.service != DEFAULT_SERVICE,
            self.time_range != DEFAULT_TIME_RANGE,
            self.filter != DEFAULT_FILTER,
        ])


def resolve_time_range(time_range: str, now: Optional[datetime] = None) -> Tuple[str, str]:
    """Turn a relative range into absolute UTC `from`/`to` timestamps

    Resolution happens at call time, so "24h" always ends at `now`.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    window = TIME_RANGES.get(time_range, TIME_RANGES[DEFAULT_TIME_RANGE])
    start = now - timedelta(seconds=window)
    return start.strftime(TIMESTAMP_FORMAT), now.strftime(TIMESTAMP_FORMAT)


def build_request_params(query: Query, now: Optional[datetime] = None) -> RequestParams:
    """Query-string parameters for the HTTP calls endpoint

    Empty optional fields are left out entirely. Sort parameters are only sent
    when the ordering differs from the default, otherwise the backend's own
    ordering applies.
    """
    start, end = resolve_time_range(query.time_range, now)
    params: RequestParams = {
        "from": start,
        "to": end,
        "limit": query.limit,
        "offset": query.offset,
    }
    if query.service:
        params["service"] = query.service
    if query.filter:
        params["filter"] = query.filter
    if query.has_custom_sort:
        params["sort"] = query.sort_by
        params["order"] = query.sort_order
    return params


def extract_service(filter_expr: Optional[str]) -> Optional[str]:
    """Best-effort lookup of a plain `service:<name>` predicate in a filter

    Only an unambiguous clause is returned: exactly one service predicate, not
    negated, in an expression without OR. Anything else returns None and the
    backend stays the authority on how filter and service combine.
    """
    if not filter_expr or _OR_KEYWORD.search(filter_expr):
        return None
    matches = list(_SERVICE_CLAUSE.finditer(filter_expr))
    if len(matches) != 1:
        return None
    match = matches[0]
    if _NOT_SUFFIX.search(filter_expr[:match.start()]):
        return None
    value = next(group for group in match.groups() if group is not None)
    if value.upper() in _OPERATOR_WORDS:
        return None
    return value
