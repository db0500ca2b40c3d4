"""Fetch bookkeeping for the HTTP calls table

Every request gets a sequence number when it is issued. A completion is only
applied when it is newer than the result currently shown and was issued for
the most recent query; anything else is a stale answer and is dropped. There
is no network-level cancellation, the discard rule is what keeps a slow, old
response from overwriting a newer one.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Set

from http_inspector.api import ApiError
from http_inspector.config import FILTER_HINT, GENERIC_FETCH_ERROR
from http_inspector.query import Query
from http_inspector.results import ResultSet, summarize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchTicket:
    seq: int
    query: Query
    background: bool = False


def error_message(error: ApiError, filter_expr: str = "") -> str:
    """User-facing text for a failed fetch

    A 400 means the backend rejected the filter expression, so the message
    says so and points at the syntax. Everything else shows the most specific
    text available.
    """
    if error.status_code == 400:
        detail = error.message or "the server rejected the filter"
        message = f"Invalid filter: {detail}."
        if filter_expr:
            message += f' Current filter: "{filter_expr}".'
        return f"{message} {FILTER_HINT}"
    return error.message or GENERIC_FETCH_ERROR


@dataclass
class FetchController:
    """Loading/refreshing/error status plus the last good result set"""
    issued: int = 0
    applied: int = 0
    latest_query: Optional[Query] = None
    results: ResultSet = field(default_factory=ResultSet)
    error: str = ""
    _user_inflight: Set[int] = field(default_factory=set)
    _background_inflight: Set[int] = field(default_factory=set)

    @property
    def loading(self) -> bool:
        """A user-initiated fetch is in flight"""
        return bool(self._user_inflight)

    @property
    def refreshing(self) -> bool:
        """A background refresh is in flight"""
        return bool(self._background_inflight)

    @property
    def blocking(self) -> bool:
        """Only the very first load hides the table behind a spinner"""
        return self.loading and not self.results.records

    def begin(self, query: Query, background: bool = False) -> FetchTicket:
        self.issued += 1
        ticket = FetchTicket(seq=self.issued, query=query, background=background)
        self.latest_query = query
        if background:
            self._background_inflight.add(ticket.seq)
        else:
            self._user_inflight.add(ticket.seq)
        logger.info("Fetch #%d issued (background=%s)", ticket.seq, background)
        return ticket

    def is_stale(self, ticket: FetchTicket) -> bool:
        return ticket.seq <= self.applied or ticket.query != self.latest_query

    def _settle(self, ticket: FetchTicket) -> None:
        self._user_inflight.discard(ticket.seq)
        self._background_inflight.discard(ticket.seq)

    def complete(self, ticket: FetchTicket, payload: Mapping[str, Any]) -> bool:
        """Apply a successful response; returns False when it was discarded"""
        self._settle(ticket)
        if self.is_stale(ticket):
            logger.debug(
                "Discarding stale fetch #%d (applied #%d, issued #%d)",
                ticket.seq, self.applied, self.issued,
            )
            return False
        self.results = ResultSet.from_payload(payload)
        self.applied = ticket.seq
        self.error = ""
        logger.info("Fetch #%d applied: %s", ticket.seq, summarize(self.results))
        return True

    def fail(self, ticket: FetchTicket, error: ApiError) -> bool:
        """Record a failed fetch; the previous result set stays visible"""
        self._settle(ticket)
        logger.warning("Fetch #%d failed: %s", ticket.seq, error)
        if self.is_stale(ticket):
            return False
        self.error = error_message(error, ticket.query.filter)
        return True
