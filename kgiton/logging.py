"""
Structured logging configuration for the KGiTON SDK.

The SDK never configures logging on its own. Applications that want the
SDK's JSON output call :func:`configure_logging` once at startup.
"""

import sys
import structlog
import logging
import time
from typing import Any, Dict, Mapping

SDK_LOGGER_NAME = "kgiton"
SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key"})


def configure_logging(log_level: str = "info") -> None:
    """Configure structured logging for an application embedding the SDK."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_sdk_context,
            add_timestamp,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )
    set_sdk_log_level(log_level)


def set_sdk_log_level(log_level: str) -> None:
    """Set the level of the SDK's own stdlib logger; other loggers are untouched."""
    logging.getLogger(SDK_LOGGER_NAME).setLevel(getattr(logging, log_level.upper()))


def add_sdk_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag every event with the SDK name."""
    event_dict.setdefault("sdk", "kgiton")
    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add high-precision timestamp to log events."""
    event_dict["timestamp"] = time.time()
    return event_dict


def sanitize_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` with credential values masked."""
    return {
        key: ("***" if key.lower() in SENSITIVE_HEADERS else value)
        for key, value in headers.items()
    }


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
