"""Test logging setup."""

import logging

import pytest

from membench.core.results import ResultStore
from membench.utils.logging import LOGGER_NAMESPACE, resolve_level, setup_logging


class TestResolveLevel:
    """Test level name resolution."""

    @pytest.mark.parametrize("name, value", [
        ("INFO", logging.INFO),
        ("debug", logging.DEBUG),
        ("Warning", logging.WARNING),
    ])
    def test_known_levels(self, name, value):
        assert resolve_level(name) == value

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("chatty")


class TestSetupLogging:
    """Test the membench logger tree."""

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "membench.log"

        logger = setup_logging(level="DEBUG", log_file=str(log_file))
        logging.getLogger(f"{LOGGER_NAMESPACE}.test").info("hello file")
        for handler in logger.handlers:
            handler.flush()

        assert logger.name == LOGGER_NAMESPACE
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 2
        assert "hello file" in log_file.read_text(encoding="utf-8")

        setup_logging(level="INFO")
        assert len(logger.handlers) == 1

    def test_logger_mixin_name(self, tmp_path):
        assert ResultStore(tmp_path).logger.name == "membench.resultstore"
