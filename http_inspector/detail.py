"""Detail panel for the selected HTTP call row

The panel is bound to a row index, not to a copy of the row, so a refresh
that replaces the result set shows up in the open panel. When the index no
longer exists the selection is dropped and the panel closes.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from http_inspector.config import COLORS
from http_inspector.formatters import (
    display_method,
    display_uri,
    format_bytes,
    format_count,
    format_duration,
    format_error_rate,
    method_color,
    NOT_AVAILABLE,
)
from http_inspector.results import CallRecord


@dataclass(frozen=True)
class Selection:
    """Selected row index plus the panel open flag"""
    index: Optional[int] = None
    open: bool = False

    def select(self, index: int, row_count: int) -> "Selection":
        if 0 <= index < row_count:
            return Selection(index=index, open=True)
        return Selection()

    def closed(self) -> "Selection":
        return Selection()

    def reconciled(self, row_count: int) -> "Selection":
        """Drop a selection that points past the end of a new result set"""
        if self.index is None or not 0 <= self.index < row_count:
            return Selection()
        return self

    def record(self, records: Sequence[CallRecord]) -> Optional[CallRecord]:
        if not self.open or self.reconciled(len(records)).index is None:
            return None
        return records[self.index]


@dataclass
class Metric:
    label: str
    value: str
    subtext: str = ""
    color: str = ""


@dataclass
class DetailSection:
    title: str
    metrics: List[Metric] = field(default_factory=list)


@dataclass
class CallDetail:
    method: str = ""
    method_color: str = ""
    uri: str = ""
    service: str = ""
    sections: List[DetailSection] = field(default_factory=list)


def build_detail(record: CallRecord) -> CallDetail:
    """Group a record's metrics into the panel sections"""
    error_color = COLORS['error_text'] if record.error_count > 0 else COLORS['ok_text']
    return CallDetail(
        method=display_method(record.method),
        method_color=method_color(record.method),
        uri=display_uri(record.uri),
        service=record.service,
        sections=[
            DetailSection("Request Information", [
                Metric("URI", display_uri(record.uri)),
                Metric("Service", record.service or NOT_AVAILABLE),
            ]),
            DetailSection("Performance", [
                Metric("Call Count", format_count(record.call_count)),
                Metric(
                    "Average Duration",
                    format_duration(record.avg_duration),
                    subtext=(
                        f"Min: {format_duration(record.min_duration)} | "
                        f"Max: {format_duration(record.max_duration)}"
                    ),
                ),
            ]),
            DetailSection("Reliability", [
                Metric(
                    "Error Count",
                    format_count(record.error_count),
                    subtext=f"Error Rate: {format_error_rate(record.error_rate)}",
                    color=error_color,
                ),
            ]),
            DetailSection("Bandwidth", [
                Metric("Total Bytes Sent", format_bytes(record.total_bytes_sent)),
                Metric("Total Bytes Received", format_bytes(record.total_bytes_received)),
            ]),
        ],
    )


def detail_for(selection: Selection, records: Sequence[CallRecord]) -> Optional[CallDetail]:
    record = selection.record(records)
    return build_detail(record) if record is not None else None
