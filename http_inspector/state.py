"""Application state management for HTTP Inspector"""

import logging
from typing import Dict, List, Optional

import reflex as rx

from http_inspector import api
from http_inspector.config import (
    DEFAULT_FILTER,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_SERVICE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    DEFAULT_TIME_RANGE,
    MIRROR_SERVICE_FROM_FILTER,
    PAGE_SIZES,
)
from http_inspector.detail import CallDetail, Selection, detail_for
from http_inspector.fetcher import FetchController, FetchTicket
from http_inspector.poller import RefreshSchedule
from http_inspector.query import Query, build_request_params, extract_service
from http_inspector.results import CallRecord, CallRow, Pagination, to_rows
from http_inspector.results import total_calls_label as format_total_calls
from http_inspector.url_sync import decode_query, foreign_params, replace_url_script

logger = logging.getLogger(__name__)

ALL_SERVICES = "All Services"


class State(rx.State):
    """Query store for one browser session

    The query fields below are the single source of truth. Every edit goes
    through `_commit`, which writes the URL and triggers a fetch; nothing else
    issues table fetches apart from the refresh button and the refresh ticker.
    """

    # Query
    service: str = DEFAULT_SERVICE
    time_range: str = DEFAULT_TIME_RANGE
    filter_expr: str = DEFAULT_FILTER
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    # Text in the filter box, applied on Enter / Apply
    filter_draft: str = ""

    # Service choices from the services lookup
    services: List[str] = []

    # Latest result set
    calls: List[CallRecord] = []
    total: int = 0
    total_calls: int = 0

    # Fetch status
    loading: bool = True
    refreshing: bool = False
    error_message: str = ""
    auto_refresh: bool = True
    refresh_generation: int = 0

    # Detail panel selection
    selected_index: Optional[int] = None
    details_open: bool = False

    _fetcher: FetchController = FetchController()
    _schedule: RefreshSchedule = RefreshSchedule()
    _foreign_params: Dict[str, str] = {}

    # Query store

    def _query(self) -> Query:
        return Query(
            time_range=self.time_range,
            service=self.service,
            filter=self.filter_expr,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            limit=self.limit,
            offset=self.offset,
        )

    def _store(self, query: Query):
        self.time_range = query.time_range
        self.service = query.service
        self.filter_expr = query.filter
        self.sort_by = query.sort_by
        self.sort_order = query.sort_order
        self.limit = query.limit
        self.offset = query.offset

    def _replace_url(self, query: Query):
        return rx.call_script(replace_url_script(query, self._foreign_params))

    def _commit(self, query: Query):
        """Store a new query, mirror it into the URL and refetch"""
        if query == self._query():
            return None
        self._store(query)
        return [self._replace_url(query), State.fetch_http_calls]

    def load_page(self):
        """Restore the query from the URL and kick off the initial loads"""
        params = self.router.page.params
        query = decode_query(params)
        self._foreign_params = foreign_params(params)
        self._store(query)
        self.filter_draft = query.filter
        # Anything still in flight from before the reload is stale
        issued = self._fetcher.issued
        self._fetcher = FetchController(issued=issued, applied=issued)
        self.calls = []
        self.total = 0
        self.total_calls = 0
        self.error_message = ""
        self.loading = True
        self.selected_index = None
        self.details_open = False
        return [self._replace_url(query), State.load_services, State.fetch_http_calls]

    def set_service(self, value: str):
        """Update service filter ("All Services" clears it)"""
        service = "" if value == ALL_SERVICES else value
        return self._commit(self._query().with_service(service))

    def set_time_range(self, value: str):
        """Update relative time range"""
        return self._commit(self._query().with_time_range(value))

    def set_filter_draft(self, value: str):
        self.filter_draft = value

    def apply_filter(self):
        """Apply the filter box text to the query"""
        query = self._query().with_filter(self.filter_draft)
        if MIRROR_SERVICE_FROM_FILTER:
            service = extract_service(query.filter)
            if service:
                query = query.with_service(service)
        self.filter_draft = query.filter
        return self._commit(query)

    def handle_filter_key(self, key: str):
        if key == "Enter":
            return self.apply_filter()

    def clear_filter(self):
        self.filter_draft = ""
        return self._commit(self._query().with_filter(""))

    def reset_filters(self):
        """Reset service, time range and filter to their defaults"""
        self.filter_draft = ""
        return self._commit(self._query().with_filters_reset())

    def sort_by_column(self, column: str):
        """Sort by a column, flipping the order when it is already active"""
        return self._commit(self._query().toggled_sort(column))

    def set_page_size(self, value: str):
        try:
            limit = int(value)
        except ValueError:
            return None
        return self._commit(self._query().with_limit(limit))

    def next_page(self):
        """Go to next page of HTTP calls"""
        pagination = Pagination(total=self.total, limit=self.limit, offset=self.offset)
        if not pagination.has_next:
            return None
        return self._commit(self._query().next_page())

    def prev_page(self):
        """Go to previous page of HTTP calls"""
        return self._commit(self._query().previous_page())

    # Fetching

    def refresh(self):
        """Manual refresh"""
        return State.fetch_http_calls

    @rx.event(background=True)
    async def fetch_http_calls(self):
        """User-initiated fetch (query change, refresh button, initial load)"""
        await self._run_fetch(background=False)

    async def _run_fetch(self, background: bool):
        async with self:
            fetcher = self._fetcher
            ticket = fetcher.begin(self._query(), background=background)
            self._fetcher = fetcher
            self._project(fetcher, applied=False)

        try:
            payload = await api.list_http_calls(build_request_params(ticket.query))
        except api.ApiError as exc:
            await self._finish(ticket, error=exc)
        else:
            await self._finish(ticket, payload=payload)

    async def _finish(self, ticket: FetchTicket, payload=None, error: Optional[api.ApiError] = None):
        async with self:
            fetcher = self._fetcher
            if error is not None:
                fetcher.fail(ticket, error)
                applied = False
            else:
                applied = fetcher.complete(ticket, payload)
            self._fetcher = fetcher
            self._project(fetcher, applied=applied)

    def _project(self, fetcher: FetchController, applied: bool):
        """Copy fetch status (and a newly applied result set) into render vars"""
        self.loading = fetcher.loading
        self.refreshing = fetcher.refreshing
        self.error_message = fetcher.error
        if not applied:
            return
        self.calls = list(fetcher.results.records)
        self.total = fetcher.results.total
        self.total_calls = fetcher.results.total_calls
        selection = Selection(self.selected_index, self.details_open).reconciled(len(self.calls))
        self.selected_index = selection.index
        self.details_open = selection.open

    @rx.event(background=True)
    async def load_services(self):
        """Populate the service dropdown; failures only get logged"""
        try:
            services = await api.list_services()
        except api.ApiError as exc:
            logger.error("Error fetching services: %s", exc)
            return
        async with self:
            self.services = services

    # Auto-refresh

    def start_auto_refresh(self):
        """Subscribe the page's ticker (on mount, or on resume)"""
        if not self.auto_refresh:
            return
        self._schedule = self._schedule.started()
        self.refresh_generation = self._schedule.generation
        logger.info("Auto-refresh started (generation %d)", self.refresh_generation)

    def stop_auto_refresh(self):
        """Unsubscribe (on unmount, or on pause); late ticks are ignored"""
        self._schedule = self._schedule.stopped()
        self.refresh_generation = self._schedule.generation
        logger.info("Auto-refresh stopped")

    def toggle_auto_refresh(self):
        """Pause or resume background refresh"""
        self.auto_refresh = not self.auto_refresh
        if self.auto_refresh:
            self.start_auto_refresh()
        else:
            self.stop_auto_refresh()

    def refresh_tick(self, generation: int):
        """Ticker callback, every REFRESH_INTERVAL_SECONDS while mounted"""
        if self._schedule.should_refresh(generation, self._fetcher.refreshing):
            return State.background_refresh

    @rx.event(background=True)
    async def background_refresh(self):
        """Non-blocking refetch of the current query"""
        await self._run_fetch(background=True)

    # Detail panel

    def select_call(self, index: int):
        """Open the detail panel on a table row"""
        selection = Selection().select(index, len(self.calls))
        self.selected_index = selection.index
        self.details_open = selection.open

    def close_details(self):
        self.selected_index = None
        self.details_open = False

    def share_link(self):
        """Copy the current (already synced) URL to the clipboard"""
        return [
            rx.call_script("navigator.clipboard.writeText(window.location.href)"),
            rx.toast.info("Link copied to clipboard"),
        ]

    # Computed vars

    @rx.var
    def table_rows(self) -> List[CallRow]:
        return to_rows(self.calls)

    @rx.var
    def show_spinner(self) -> bool:
        """Spinner only while the very first page is loading"""
        return self.loading and len(self.calls) == 0

    @rx.var
    def show_empty(self) -> bool:
        return not self.loading and len(self.calls) == 0

    @rx.var
    def showing_label(self) -> str:
        pagination = Pagination(total=self.total, limit=self.limit, offset=self.offset)
        return pagination.showing_label(len(self.calls))

    @rx.var
    def total_calls_label(self) -> str:
        return format_total_calls(self.total_calls)

    @rx.var
    def page_label(self) -> str:
        return Pagination(total=self.total, limit=self.limit, offset=self.offset).page_label

    @rx.var
    def show_pagination(self) -> bool:
        return Pagination(total=self.total, limit=self.limit, offset=self.offset).visible

    @rx.var
    def prev_disabled(self) -> bool:
        pagination = Pagination(total=self.total, limit=self.limit, offset=self.offset)
        return not pagination.has_previous or self.loading

    @rx.var
    def next_disabled(self) -> bool:
        pagination = Pagination(total=self.total, limit=self.limit, offset=self.offset)
        return not pagination.has_next or self.loading

    @rx.var
    def show_details(self) -> bool:
        selection = Selection(self.selected_index, self.details_open)
        return selection.record(self.calls) is not None

    @rx.var
    def selected_detail(self) -> CallDetail:
        selection = Selection(self.selected_index, self.details_open)
        return detail_for(selection, self.calls) or CallDetail()

    @rx.var
    def active_filter_count(self) -> int:
        """Count how many result-set filters differ from their defaults"""
        query = Query(service=self.service, time_range=self.time_range, filter=self.filter_expr)
        return query.active_filter_count

    @rx.var
    def service_options(self) -> List[str]:
        options = [ALL_SERVICES] + list(self.services)
        if self.service and self.service not in options:
            options.append(self.service)
        return options

    @rx.var
    def service_choice(self) -> str:
        return self.service or ALL_SERVICES

    @rx.var
    def page_size_options(self) -> List[str]:
        sizes = sorted(set(PAGE_SIZES) | {self.limit})
        return [str(size) for size in sizes]
