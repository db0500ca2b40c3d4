"""Result set of the HTTP calls endpoint and its paging/label projection"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

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


def _number(value: Any, default=0):
    """Numeric field from a JSON payload, tolerating null and strings"""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_number(value: Any) -> Optional[float]:
    return None if value is None else _number(value, None)


@dataclass
class CallRecord:
    """One aggregated (method, URI, service) row as returned by the backend"""
    method: str = ""
    uri: str = ""
    service: str = ""
    call_count: int = 0
    avg_duration: Optional[float] = None
    min_duration: Optional[float] = None
    max_duration: Optional[float] = None
    error_count: int = 0
    error_rate: float = 0.0
    total_bytes_sent: float = 0
    total_bytes_received: float = 0
    last_created_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CallRecord":
        return cls(
            method=data.get('method') or "",
            # request_uri carries the real path; uri/url are older field names
            uri=data.get('request_uri') or data.get('uri') or data.get('url') or "",
            service=data.get('service') or "",
            call_count=int(_number(data.get('call_count'))),
            avg_duration=_optional_number(data.get('avg_duration')),
            min_duration=_optional_number(data.get('min_duration')),
            max_duration=_optional_number(data.get('max_duration')),
            error_count=int(_number(data.get('error_count'))),
            error_rate=float(_number(data.get('error_rate'))),
            total_bytes_sent=_number(data.get('total_bytes_sent')),
            total_bytes_received=_number(data.get('total_bytes_received')),
            last_created_at=str(data.get('last_created_at') or ""),
        )


@dataclass
class ResultSet:
    """Latest successful fetch; replaced as a whole, never merged"""
    records: List[CallRecord] = field(default_factory=list)
    total: int = 0
    total_calls: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ResultSet":
        rows = payload.get('http_calls') or []
        return cls(
            records=[CallRecord.from_dict(row) for row in rows if isinstance(row, Mapping)],
            total=int(_number(payload.get('total'))),
            total_calls=int(_number(payload.get('total_calls'))),
        )

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class CallRow:
    """Display-ready table row (Reflex cannot format Vars at render time)"""
    index: int
    method: str
    method_color: str
    uri: str
    service: str
    call_count: str
    avg_duration: str
    min_duration: str
    max_duration: str
    error_count: str
    error_rate: str
    has_errors: bool
    bytes_sent: str
    bytes_received: str
    last_seen: str


def to_row(index: int, record: CallRecord) -> CallRow:
    return CallRow(
        index=index,
        method=display_method(record.method),
        method_color=method_color(record.method),
        uri=display_uri(record.uri),
        service=record.service or NOT_AVAILABLE,
        call_count=format_count(record.call_count),
        avg_duration=format_duration(record.avg_duration),
        min_duration=format_duration(record.min_duration),
        max_duration=format_duration(record.max_duration),
        error_count=format_count(record.error_count),
        error_rate=format_error_rate(record.error_rate),
        has_errors=record.error_count > 0 or record.error_rate > 0,
        bytes_sent=format_bytes(record.total_bytes_sent),
        bytes_received=format_bytes(record.total_bytes_received),
        last_seen=record.last_created_at or NOT_AVAILABLE,
    )


@dataclass(frozen=True)
class Pagination:
    """Page arithmetic over the current result set"""
    total: int
    limit: int
    offset: int

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def page_count(self) -> int:
        if self.total <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def has_previous(self) -> bool:
        return self.offset > 0

    @property
    def has_next(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def visible(self) -> bool:
        """Controls are only worth showing when there is more than one page"""
        return self.total > self.limit

    @property
    def page_label(self) -> str:
        current = self.current_page if self.total > 0 else 0
        return f"Page {current} of {self.page_count}"

    def showing_label(self, row_count: int) -> str:
        """e.g. "50 of 412 requests (1-50)" """
        noun = "request" if self.total == 1 else "requests"
        label = f"{row_count} of {self.total} {noun}"
        if self.total > 0:
            last = min(self.offset + row_count, self.total)
            label += f" ({self.offset + 1}-{last})"
        return label


def total_calls_label(total_calls: int) -> str:
    """e.g. "Total: 9,876 calls"; empty when there is nothing to report"""
    if total_calls <= 0:
        return ""
    return f"Total: {total_calls:,} calls"


def to_rows(records: List[CallRecord]) -> List[CallRow]:
    return [to_row(index, record) for index, record in enumerate(records)]


def summarize(result: ResultSet) -> Dict[str, int]:
    """Counts for log lines"""
    return {'rows': len(result), 'total': result.total, 'total_calls': result.total_calls}
