"""Tests for correlation-aware logging."""

import logging

import pytest

from markup_tree.shared import GlobalConfig, configure_logging, get_logger


@pytest.fixture
def restore_logging():
    """Restore package logging state after a test."""
    package_logger = logging.getLogger("markup_tree")
    level = package_logger.level
    yield
    configure_logging(GlobalConfig())
    package_logger.setLevel(level)


class TestCorrelationLogger:
    """Test structured extra fields."""

    def test_component_defaults_to_module_name(self):
        """Test that the component is taken from the logger name."""
        logger = get_logger("markup_tree.tree.mutation")

        assert logger.component == "mutation"

    def test_records_carry_correlation_info(self, caplog):
        """Test that records carry component and correlation id."""
        logger = get_logger("markup_tree.test", "req-42", "tester")

        with caplog.at_level(logging.INFO, logger="markup_tree"):
            logger.info("Tree edited", extra={"element_count": 3})

        record = caplog.records[-1]
        assert record.component == "tester"
        assert record.correlation_id == "req-42"
        assert record.element_count == 3

    def test_bind_changes_only_correlation_id(self):
        """Test that bind keeps name and component."""
        logger = get_logger("markup_tree.test", "req-1", "tester")

        bound = logger.bind("req-2")

        assert bound.correlation_id == "req-2"
        assert bound.component == "tester"
        assert bound.logger is logger.logger
        assert logger.correlation_id == "req-1"


class TestConfigureLogging:
    """Test applying global configuration to logging."""

    def test_sets_package_level(self, restore_logging):
        """Test that the package logger level follows the config."""
        package_logger = configure_logging(GlobalConfig(logging_level="WARNING"))

        assert package_logger.name == "markup_tree"
        assert package_logger.level == logging.WARNING
        assert not get_logger("markup_tree.tree.search").is_debug_enabled

    def test_correlation_tracking_can_be_disabled(self, caplog, restore_logging):
        """Test that correlation ids are omitted when tracking is off."""
        configure_logging(
            GlobalConfig(logging_level="DEBUG", enable_correlation_tracking=False)
        )
        logger = get_logger("markup_tree.test", "req-9", "tester")

        with caplog.at_level(logging.DEBUG, logger="markup_tree"):
            logger.debug("Quiet record")

        record = caplog.records[-1]
        assert record.component == "tester"
        assert not hasattr(record, "correlation_id")
