"""Custom filters for uvicorn access logging."""

import logging


class ExcludeMetricsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Requests to paths like /metrics and /health will not appear in uvicorn's
    access logs.

    Note: uvicorn's logging config may import this class before the app
    starts, so settings are only read when filtering.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()

        try:
            from relay.settings import app_settings

            excluded_paths = app_settings.LOG_EXCLUDED_PATHS
        except Exception:
            # Fallback to hardcoded paths if settings can't be loaded
            excluded_paths = ["/metrics", "/health"]

        return not any(path in message for path in excluded_paths)
