"""Tests for logging configuration."""

import logging

from dining_planner.app_logging import configure_logging


def test_configure_logging_attaches_one_handler() -> None:
    logger = logging.getLogger("dining_planner")
    logger.handlers.clear()

    configure_logging()
    configure_logging("debug")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_service_loggers_inherit_package_level() -> None:
    logging.getLogger("dining_planner").handlers.clear()
    configure_logging("warning")
    child = logging.getLogger("dining_planner.services.scraper")

    assert child.getEffectiveLevel() == logging.WARNING
    assert not child.isEnabledFor(logging.INFO)
