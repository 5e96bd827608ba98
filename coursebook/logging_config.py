"""
Logging configuration for the Coursebook API.

Health check requests are kept out of the access log, and the
authentication gate writes its denial diagnostics through a separate
handler so they can be routed apart from request noise.
"""

import logging
import logging.config
from typing import Any, Dict

HEALTH_PATHS = ("/health", "/healthz")
AUTH_LOGGER = "coursebook.modules.auth"


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Drop uvicorn access lines for GET requests to a health path."""
        if record.name != "uvicorn.access":
            return True
        # uvicorn passes (client, method, path, http_version, status)
        if isinstance(record.args, tuple) and len(record.args) >= 3:
            method, path = record.args[1], str(record.args[2])
            return not (method == "GET" and path.split("?")[0] in HEALTH_PATHS)
        message = record.getMessage()
        return not ("GET" in message and any(f"{path} " in message for path in HEALTH_PATHS))


def get_logging_config(log_level: str = "INFO") -> Dict[str, Any]:
    """
    Build the dictConfig for the service.

    Args:
        log_level: Level for the coursebook loggers and the root logger
    """

    def _logger(handler: str, level: str = log_level) -> Dict[str, Any]:
        return {"handlers": [handler], "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
            "auth": {"format": "%(asctime)s - auth - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
            "auth": {
                "class": "logging.StreamHandler",
                "formatter": "auth",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "uvicorn": _logger("default", "INFO"),
            "uvicorn.error": _logger("default", "INFO"),
            "uvicorn.access": _logger("access", "INFO"),
            "coursebook": _logger("default"),
            AUTH_LOGGER: _logger("auth"),
        },
        "root": {"level": log_level, "handlers": ["default"]},
    }
