import os

import reflex as rx

# Base URL of the observability backend serving /api/http-calls
api_url = os.environ.get("API_URL", "http://localhost:8080")

log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

config = rx.Config(
    app_name="http_inspector",
)
