# src/server/server_config.py
"""Configuration constants for the HTTP server."""

ERROR_PAGE_TITLE: str = "Error"

# Status line used for every error page when legacy error statuses are enabled.
LEGACY_ERROR_STATUS: int = 404

DEFAULT_LOG_LEVEL: str = "info"
