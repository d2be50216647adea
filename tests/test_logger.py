"""Tests for logging setup."""

import logging

import pytest

from logger import get_log_file_path, get_logger, setup_logging


@pytest.fixture
def configured_logging(test_config):
    """Install the keesti handlers for one test and remove them afterwards."""
    logger = setup_logging(test_config)
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestLogging:
    """Tests for the keesti logger hierarchy."""

    def test_get_logger_default_name(self):
        """Test that the default logger is the keesti logger."""
        assert get_logger().name == "keesti"

    def test_get_logger_child(self):
        """Test that a named logger is a child of keesti."""
        tree_logger = get_logger("tree")

        assert tree_logger.name == "keesti.tree"
        assert tree_logger.parent is logging.getLogger("keesti")

    def test_setup_creates_dated_log_file(self, test_config, configured_logging):
        """Test that setup creates the dated log file in the log directory."""
        log_path = get_log_file_path(test_config)

        assert log_path.parent == test_config.log_dir
        assert log_path.name.startswith("keesti-")
        assert log_path.exists()

    def test_child_records_reach_the_log_file(self, test_config, configured_logging):
        """Test that tree records are written with their logger name."""
        get_logger("tree").warning("Ignoring drop of a: a commit is in flight")
        for handler in configured_logging.handlers:
            handler.flush()

        content = get_log_file_path(test_config).read_text(encoding="utf-8")

        assert "keesti.tree - WARNING - Ignoring drop of a: a commit is in flight" in content

    def test_setup_twice_keeps_one_set_of_handlers(self, test_config, configured_logging):
        """Test that calling setup again replaces the handlers."""
        logger = setup_logging(test_config)

        assert len(logger.handlers) == 2
