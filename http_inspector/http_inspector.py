"""HTTP Inspector - Web UI for exploring aggregated HTTP call telemetry"""

import logging
import sys

import reflex as rx

import rxconfig
from http_inspector.components import details_panel, main_view, refresh_ticker
from http_inspector.state import State

logging.basicConfig(
    stream=sys.stdout,
    level=getattr(logging, rxconfig.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def index() -> rx.Component:
    """Main page"""
    return rx.hstack(
        # Request list
        rx.box(
            main_view(),
            flex="1",
            padding="20px 20px 5px 20px",
            overflow_y="auto",
            height="100vh"
        ),

        # Detail panel for the selected row
        details_panel(),

        refresh_ticker(),

        spacing="0",
        width="100%",
        height="100vh",
        align_items="stretch",
        on_mount=State.start_auto_refresh,
        on_unmount=State.stop_auto_refresh
    )


# Create the app
app = rx.App()
app.add_page(index, title="HTTP Requests", on_load=State.load_page)
