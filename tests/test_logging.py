"""Unit tests for logging configuration."""

import json
import logging
import os
from unittest.mock import patch

from authgate.logging import (
    REDACTED,
    THIRD_PARTY_LOGGERS,
    JSONFormatter,
    configure_logging,
    get_log_level,
    redact_credentials,
)


def test_get_log_level_default() -> None:
    """Test INFO is used when LOG_LEVEL is unset."""
    with patch.dict(os.environ, {}, clear=True):
        assert get_log_level() == logging.INFO


def test_get_log_level_from_environment() -> None:
    """Test LOG_LEVEL is read case-insensitively."""
    with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
        assert get_log_level() == logging.DEBUG


def test_get_log_level_invalid() -> None:
    """Test unknown levels fall back to INFO."""
    with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
        assert get_log_level() == logging.INFO


def test_configure_logging() -> None:
    """Test root and third-party loggers are configured."""
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            configure_logging()

        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        for name in THIRD_PARTY_LOGGERS:
            logger = logging.getLogger(name)
            assert logger.level == logging.WARNING
            assert logger.propagate is False
            assert isinstance(logger.handlers[0].formatter, JSONFormatter)
    finally:
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)


def test_json_formatter() -> None:
    """Test the JSON formatter output fields."""
    record = logging.LogRecord(
        name="passlib",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="bcrypt %s",
        args=("missing",),
        exc_info=None,
    )

    entry = json.loads(JSONFormatter().format(record))

    assert entry["event"] == "bcrypt missing"
    assert entry["level"] == "warning"
    assert entry["logger"] == "passlib"
    assert entry["timestamp"].endswith("Z")


def test_redact_credentials() -> None:
    """Test credential values are masked and other context is kept."""
    event = {
        "event": "Authentication failed",
        "username": "alice",
        "password": "wonderland",
        "token": "YWxpY2U6d29uZGVybGFuZA==",
    }

    result = redact_credentials(None, "warning", event)

    assert result == {
        "event": "Authentication failed",
        "username": "alice",
        "password": REDACTED,
        "token": REDACTED,
    }
