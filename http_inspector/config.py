"""Configuration constants for HTTP Inspector"""

# Query default values - single source of truth
DEFAULT_SERVICE = ""
DEFAULT_TIME_RANGE = "24h"
DEFAULT_FILTER = ""
DEFAULT_SORT_BY = "last_created_at"
DEFAULT_SORT_ORDER = "desc"
DEFAULT_LIMIT = 50
DEFAULT_OFFSET = 0

# Mapping of URL parameter names to their default values
QUERY_DEFAULTS = {
    'service': DEFAULT_SERVICE,
    'timeRange': DEFAULT_TIME_RANGE,
    'filter': DEFAULT_FILTER,
    'sortBy': DEFAULT_SORT_BY,
    'sortOrder': DEFAULT_SORT_ORDER,
    'limit': DEFAULT_LIMIT,
    'offset': DEFAULT_OFFSET,
}

# Relative time windows, in seconds before "now"
TIME_RANGES = {
    '1h': 3600,
    '6h': 21600,
    '24h': 86400,
    '7d': 604800,
    '30d': 2592000,
}

TIME_RANGE_LABELS = {
    '1h': "Last Hour",
    '6h': "Last 6 Hours",
    '24h': "Last 24 Hours",
    '7d': "Last 7 Days",
    '30d': "Last 30 Days",
}

SORTABLE_COLUMNS = (
    "service",
    "call_count",
    "avg_duration",
    "error_count",
    "error_rate",
    "last_created_at",
)
SORT_ORDERS = ("asc", "desc")

# Page sizes offered in the UI (URL may still carry any positive value)
PAGE_SIZES = (25, 50, 100, 200)

REFRESH_INTERVAL_SECONDS = 5
HTTP_TIMEOUT_SECONDS = 10.0

# Backend timestamp format (UTC, second precision)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

GENERIC_FETCH_ERROR = "Error fetching HTTP calls"
FILTER_HINT = "Check the filter syntax, e.g. service:api AND status_code:>=500"
FILTER_PLACEHOLDER = "e.g., service:api, status_code:>=500, (http.method:POST AND status_code:500)"

# Mirror an unambiguous `service:<name>` filter clause into the service dropdown
MIRROR_SERVICE_FROM_FILTER = True

# Badge color scheme per HTTP method
METHOD_COLORS = {
    'GET': 'blue',
    'POST': 'green',
    'PUT': 'orange',
    'DELETE': 'red',
    'PATCH': 'purple',
}
DEFAULT_METHOD_COLOR = 'gray'

# Color scheme constants
COLORS = {
    # Selected row highlighting
    'selected_row_bg': '#d4e3ff',
    'selected_row_border': '#5b8def',
    # Metric values
    'error_text': '#ef4444',
    'ok_text': '#22c55e',
    # Detail panel
    'panel_bg': '#ffffff',
    'panel_border': '#e5e7eb',
    'metric_card_bg': '#f9fafb',
    'section_title': '#6b7280',
    # Banners
    'error_bg': '#fef2f2',
    'error_border': '#fecaca',
}
