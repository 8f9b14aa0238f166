"""Centralized logging configuration for authgate.

Authentication events are logged through structlog with keyword context
(``backend``, ``username``, ``path``). Everything ends up on one JSON stream:
structlog events via ``ProcessorFormatter`` and records from passlib and
starlette via ``JSONFormatter``.
"""

import json
import logging
import os
from collections.abc import MutableMapping
from datetime import datetime
from typing import Any

import structlog

THIRD_PARTY_LOGGERS = ("passlib", "starlette")

# Event keys whose values never reach the log output
SENSITIVE_KEYS = frozenset({"password", "secret", "token", "authorization"})
REDACTED = "[redacted]"


def redact_credentials(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential values in an event before it is rendered."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


class JSONFormatter(logging.Formatter):
    """Render stdlib records from third-party loggers as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "event": record.getMessage(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "timestamp": self.formatTime(record, self.datefmt),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        return datetime.fromtimestamp(record.created).isoformat() + "Z"


def get_log_level() -> int:
    """Get the log level from the LOG_LEVEL environment variable."""
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def _stream_handler(formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    return handler


def configure_logging() -> None:
    """Route authgate and third-party logs to a single JSON stream."""
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(
        _stream_handler(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
            )
        )
    )
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            redact_credentials,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    third_party_handler = _stream_handler(JSONFormatter())
    for logger_name in THIRD_PARTY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers.clear()
        logger.addHandler(third_party_handler)
        logger.setLevel(log_level)
        logger.propagate = False

    # passlib warns while probing the bcrypt backend version
    logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)
