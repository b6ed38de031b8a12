"""
Unit tests for logging utilities.
"""

import logging

import pytest

from idcollection import Collection
from idcollection.core.exceptions import InvalidArgumentError
from idcollection.utils.logging import (
    PACKAGE_LOGGER,
    LogContext,
    get_logger,
    resolve_level,
    set_level,
    setup_logger,
)


class TestLogging:
    """Logger setup."""

    def test_setup_logger(self):
        """Test level and handler configuration."""
        logger = setup_logger("idcollection.test_setup", level="WARNING")

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_setup_is_idempotent(self):
        """Test that repeated setup does not stack handlers."""
        setup_logger("idcollection.test_twice", level="INFO")
        logger = setup_logger("idcollection.test_twice", level="INFO")
        assert len(logger.handlers) == 1

    def test_get_logger_is_cached(self):
        """Test the logger cache."""
        assert get_logger("idcollection.test_cache") is get_logger("idcollection.test_cache")

    def test_module_loggers_share_package_handler(self):
        """Test that module loggers propagate to the package logger."""
        logger = get_logger("idcollection.test_child")
        package = get_logger(PACKAGE_LOGGER)

        assert logger.handlers == []
        assert logger.parent is package
        assert len(package.handlers) == 1

    def test_foreign_logger_is_configured(self):
        """Test that names outside the package get their own handler."""
        logger = get_logger("shelfapp.test_foreign")
        assert len(logger.handlers) == 1

    def test_resolve_level(self):
        """Test level names in any case and numeric levels."""
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("WARNING") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_level(self):
        """Test that an unknown level name is rejected."""
        with pytest.raises(InvalidArgumentError):
            resolve_level("chatty")

    def test_set_level(self):
        """Test changing the package level."""
        package = get_logger(PACKAGE_LOGGER)
        old_level = package.level
        try:
            set_level("error")
            assert package.level == logging.ERROR
        finally:
            package.setLevel(old_level)

    def test_log_context(self):
        """Test temporary level changes."""
        logger = setup_logger("idcollection.test_context", level="INFO")

        with LogContext(logger, "DEBUG"):
            assert logger.level == logging.DEBUG
        assert logger.level == logging.INFO

    def test_log_context_by_name(self):
        """Test LogContext with a logger name."""
        logger = get_logger("idcollection.test_context_name")

        with LogContext("idcollection.test_context_name", "debug") as active:
            assert active is logger
            assert logger.level == logging.DEBUG
        assert logger.level == logging.NOTSET

    def test_debug_messages(self, caplog):
        """Test that queries log at debug level."""
        logger = get_logger("idcollection.query.executor")

        with LogContext(logger, "DEBUG"), caplog.at_level(logging.DEBUG):
            Collection(["a", "b"]).query({"limit": 1})

        assert any("Executed query plan" in r.message for r in caplog.records)
