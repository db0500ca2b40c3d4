"""UI components for HTTP Inspector"""

import reflex as rx

from http_inspector.config import (
    COLORS,
    FILTER_PLACEHOLDER,
    REFRESH_INTERVAL_SECONDS,
    TIME_RANGE_LABELS,
)
from http_inspector.detail import DetailSection, Metric
from http_inspector.results import CallRow
from http_inspector.state import State


def method_badge(method, color) -> rx.Component:
    """Colored HTTP method badge"""
    return rx.badge(method, color_scheme=color, variant="solid", size="1")


def page_header() -> rx.Component:
    """Title bar with refresh controls and share button"""
    return rx.hstack(
        rx.heading("🌐 HTTP Requests", size="7"),
        rx.spacer(),
        rx.cond(
            State.refreshing,
            rx.badge("🔄 Refreshing...", color_scheme="gray", variant="soft"),
            rx.box()
        ),
        rx.button(
            rx.cond(State.auto_refresh, rx.icon("pause", size=16), rx.icon("play", size=16)),
            rx.cond(State.auto_refresh, "Pause", "Resume"),
            on_click=State.toggle_auto_refresh,
            size="2",
            variant="soft",
            color_scheme="gray"
        ),
        rx.button(
            rx.icon("refresh_cw", size=16),
            "Refresh",
            on_click=State.refresh,
            size="2",
            variant="soft",
            color_scheme="green",
            loading=State.loading
        ),
        rx.button(
            rx.icon("share_2", size=16),
            "Share",
            on_click=State.share_link,
            size="2",
            variant="soft"
        ),
        spacing="3",
        align_items="center",
        width="100%"
    )


def time_range_select() -> rx.Component:
    """Relative time range picker"""
    return rx.select.root(
        rx.select.trigger(),
        rx.select.content(
            rx.select.group(
                *[rx.select.item(label, value=key) for key, label in TIME_RANGE_LABELS.items()]
            )
        ),
        value=State.time_range,
        on_change=State.set_time_range,
        size="2"
    )


def filters_bar() -> rx.Component:
    """Service, time range, page size and free-text filter controls"""
    return rx.vstack(
        rx.hstack(
            rx.text("Service", weight="bold", size="2"),
            rx.select(
                State.service_options,
                value=State.service_choice,
                on_change=State.set_service,
                size="2"
            ),
            rx.text("Time Range", weight="bold", size="2"),
            time_range_select(),
            rx.text("Page Size", weight="bold", size="2"),
            rx.select(
                State.page_size_options,
                value=State.limit.to(str),
                on_change=State.set_page_size,
                size="2"
            ),
            rx.spacer(),
            rx.button(
                f"Reset Filters ({State.active_filter_count})",
                on_click=State.reset_filters,
                size="2",
                variant="soft",
                color_scheme="gray",
                disabled=State.active_filter_count == 0
            ),
            spacing="3",
            align_items="center",
            width="100%"
        ),
        rx.hstack(
            rx.text("Filter", weight="bold", size="2"),
            rx.input(
                placeholder=FILTER_PLACEHOLDER,
                value=State.filter_draft,
                on_change=State.set_filter_draft,
                on_key_down=State.handle_filter_key,
                font_family="monospace",
                flex="1"
            ),
            rx.button("Apply", on_click=State.apply_filter, size="2"),
            rx.button(
                "Clear",
                on_click=State.clear_filter,
                size="2",
                variant="soft",
                color_scheme="gray",
                disabled=State.filter_expr == ""
            ),
            spacing="3",
            align_items="center",
            width="100%"
        ),
        spacing="3",
        padding="10px",
        background_color="rgba(0,0,0,0.02)",
        border_radius="8px",
        width="100%"
    )


def error_banner() -> rx.Component:
    """Last fetch error; the table below keeps showing the previous page"""
    return rx.cond(
        State.error_message != "",
        rx.callout(
            State.error_message,
            icon="triangle_alert",
            color_scheme="red",
            width="100%"
        ),
        rx.box()
    )


def list_header() -> rx.Component:
    return rx.hstack(
        rx.cond(
            State.total_calls_label != "",
            rx.badge(State.total_calls_label, color_scheme="blue", size="2"),
            rx.box()
        ),
        rx.text(State.showing_label, size="2", color="gray"),
        spacing="3",
        align_items="center"
    )


def plain_header(label: str, align: str = "left") -> rx.Component:
    return rx.table.column_header_cell(label, text_align=align)


def sortable_header(label: str, column: str, align: str = "right") -> rx.Component:
    """Column header that sorts on click and shows the active direction"""
    arrow = rx.cond(
        State.sort_by == column,
        rx.cond(State.sort_order == "asc", " ↑", " ↓"),
        ""
    )
    return rx.table.column_header_cell(
        rx.text(label, arrow, as_="span"),
        on_click=State.sort_by_column(column),
        cursor="pointer",
        text_align=align,
        user_select="none"
    )


def call_row(row: CallRow) -> rx.Component:
    """Render one aggregated HTTP call row"""
    error_color = rx.cond(row.has_errors, COLORS['error_text'], "inherit")
    return rx.table.row(
        rx.table.cell(method_badge(row.method, row.method_color)),
        rx.table.cell(rx.code(row.uri, variant="ghost", word_break="break-all")),
        rx.table.cell(rx.text(row.service, title=row.service, size="2")),
        rx.table.cell(row.call_count, text_align="right"),
        rx.table.cell(row.avg_duration, text_align="right"),
        rx.table.cell(row.min_duration, text_align="right"),
        rx.table.cell(row.max_duration, text_align="right"),
        rx.table.cell(row.error_count, text_align="right", color=error_color),
        rx.table.cell(row.error_rate, text_align="right", color=error_color),
        rx.table.cell(row.bytes_sent, text_align="right"),
        rx.table.cell(row.bytes_received, text_align="right"),
        rx.table.cell(row.last_seen, text_align="right", white_space="nowrap"),
        on_click=State.select_call(row.index),
        cursor="pointer",
        background_color=rx.cond(
            State.selected_index == row.index,
            COLORS['selected_row_bg'],
            "transparent"
        )
    )


def calls_table() -> rx.Component:
    return rx.table.root(
        rx.table.header(
            rx.table.row(
                plain_header("Method"),
                plain_header("URI/Endpoint"),
                sortable_header("Service", "service", align="left"),
                sortable_header("Count", "call_count"),
                sortable_header("Avg", "avg_duration"),
                plain_header("Min", align="right"),
                plain_header("Max", align="right"),
                sortable_header("Errors", "error_count"),
                sortable_header("Rate", "error_rate"),
                plain_header("Sent", align="right"),
                plain_header("Recv", align="right"),
                sortable_header("Last Seen", "last_created_at"),
            )
        ),
        rx.table.body(
            rx.foreach(State.table_rows, call_row)
        ),
        variant="surface",
        size="1",
        width="100%"
    )


def pagination_controls() -> rx.Component:
    return rx.cond(
        State.show_pagination,
        rx.hstack(
            rx.button(
                rx.icon("chevron_left", size=16),
                "Previous",
                on_click=State.prev_page,
                size="2",
                disabled=State.prev_disabled
            ),
            rx.text(State.page_label, size="2", color="gray"),
            rx.button(
                "Next",
                rx.icon("chevron_right", size=16),
                on_click=State.next_page,
                size="2",
                disabled=State.next_disabled
            ),
            spacing="3",
            align_items="center",
            justify_content="center",
            width="100%"
        ),
        rx.box()
    )


def calls_list() -> rx.Component:
    """Table area: spinner on first load, empty state, or the current page"""
    return rx.cond(
        State.show_spinner,
        rx.vstack(
            rx.spinner(size="3"),
            rx.text("Loading HTTP requests...", size="2", color="gray"),
            align_items="center",
            justify_content="center",
            height="300px",
            width="100%"
        ),
        rx.vstack(
            list_header(),
            rx.cond(
                State.show_empty,
                rx.center(
                    rx.text("No HTTP requests found", size="3", color="gray"),
                    height="200px",
                    width="100%"
                ),
                rx.vstack(
                    rx.box(calls_table(), width="100%", overflow_x="auto"),
                    pagination_controls(),
                    spacing="3",
                    width="100%"
                )
            ),
            spacing="3",
            align_items="start",
            width="100%"
        )
    )


def metric_card(metric: Metric) -> rx.Component:
    return rx.box(
        rx.vstack(
            rx.text(metric.label, size="1", color=COLORS['section_title']),
            rx.text(
                metric.value,
                size="3",
                weight="bold",
                word_break="break-all",
                color=rx.cond(metric.color != "", metric.color, "inherit")
            ),
            rx.cond(
                metric.subtext != "",
                rx.text(metric.subtext, size="1", color="gray"),
                rx.box()
            ),
            spacing="1",
            align_items="start"
        ),
        padding="10px",
        border_radius="6px",
        background_color=COLORS['metric_card_bg'],
        width="100%"
    )


def detail_section(section: DetailSection) -> rx.Component:
    return rx.vstack(
        rx.text(section.title, size="1", weight="bold", color=COLORS['section_title'], text_transform="uppercase"),
        rx.foreach(section.metrics, metric_card),
        spacing="2",
        align_items="start",
        width="100%"
    )


def details_panel() -> rx.Component:
    """Side panel for the selected row; closes itself when the row goes away"""
    detail = State.selected_detail
    return rx.cond(
        State.show_details,
        rx.vstack(
            rx.hstack(
                rx.icon("globe", size=20),
                rx.vstack(
                    rx.hstack(
                        method_badge(detail.method, detail.method_color),
                        rx.code(detail.uri, variant="ghost", word_break="break-all"),
                        spacing="2",
                        align_items="center"
                    ),
                    rx.cond(
                        detail.service != "",
                        rx.hstack(rx.icon("server", size=14), rx.text(detail.service, size="2", color="gray")),
                        rx.box()
                    ),
                    spacing="1",
                    align_items="start",
                    flex="1"
                ),
                rx.icon_button(
                    rx.icon("x", size=16),
                    on_click=State.close_details,
                    variant="ghost",
                    color_scheme="gray",
                    aria_label="Close details panel"
                ),
                spacing="3",
                align_items="start",
                width="100%"
            ),
            rx.divider(),
            rx.foreach(detail.sections, detail_section),
            spacing="4",
            align_items="start",
            width="420px",
            min_width="420px",
            height="100vh",
            overflow_y="auto",
            padding="20px",
            background_color=COLORS['panel_bg'],
            border_left=f"1px solid {COLORS['panel_border']}"
        ),
        rx.box()
    )


def refresh_ticker() -> rx.Component:
    """Invisible clock driving the background refresh while auto-refresh is on"""
    return rx.cond(
        State.auto_refresh,
        rx.moment(
            interval=REFRESH_INTERVAL_SECONDS * 1000,
            on_change=lambda _value: State.refresh_tick(State.refresh_generation),
            display="none"
        ),
        rx.box()
    )


def main_view() -> rx.Component:
    return rx.vstack(
        page_header(),
        filters_bar(),
        error_banner(),
        calls_list(),
        spacing="4",
        align_items="start",
        width="100%"
    )
