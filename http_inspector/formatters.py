"""Display formatting for raw HTTP call telemetry"""

from typing import Optional, Union

from http_inspector.config import METHOD_COLORS, DEFAULT_METHOD_COLOR

Number = Union[int, float]

NOT_AVAILABLE = "N/A"
INDEX_PHP_PREFIX = "/index.php"


def format_duration(ms: Optional[Number]) -> str:
    """Format a duration given in milliseconds (µs below 1ms, s above 1000ms)"""
    if ms is None:
        return NOT_AVAILABLE
    if ms < 1:
        return f"{ms * 1000:.0f}µs"
    if ms < 1000:
        return f"{ms:.2f}ms"
    return f"{ms / 1000:.2f}s"


def format_bytes(num_bytes: Optional[Number]) -> str:
    """Format a byte count using binary (1024) units"""
    if not num_bytes:
        return "0 B"
    if num_bytes < 1024:
        return f"{num_bytes:g} B"
    if num_bytes < 1024 ** 2:
        return f"{num_bytes / 1024:.2f} KB"
    if num_bytes < 1024 ** 3:
        return f"{num_bytes / 1024 ** 2:.2f} MB"
    return f"{num_bytes / 1024 ** 3:.2f} GB"


def format_count(value: Optional[Number]) -> str:
    """Format a count with thousands separators (None renders as 0)"""
    if not value:
        return "0"
    return f"{int(value):,}"


def format_error_rate(rate: Optional[Number]) -> str:
    """Format an error rate percentage with two decimals"""
    if not rate:
        return "0%"
    return f"{rate:.2f}%"


def strip_query_params(uri: Optional[str]) -> Optional[str]:
    """Drop everything after the first '?'"""
    if not uri:
        return uri
    return uri.split("?", 1)[0]


def clean_uri(uri: Optional[str]) -> Optional[str]:
    """Remove a leading /index.php front-controller prefix"""
    if not uri:
        return uri
    if uri.startswith(INDEX_PHP_PREFIX):
        rest = uri[len(INDEX_PHP_PREFIX):]
        return rest or "/"
    return uri


def display_uri(uri: Optional[str]) -> str:
    """URI as shown in the table and detail panel"""
    return clean_uri(strip_query_params(uri)) or NOT_AVAILABLE


def display_method(method: Optional[str]) -> str:
    return (method or "GET").upper()


def method_color(method: Optional[str]) -> str:
    """Badge color scheme for an HTTP method"""
    return METHOD_COLORS.get(display_method(method), DEFAULT_METHOD_COLOR)
