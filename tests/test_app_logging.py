"""Tests for logging configuration."""

import logging

import pytest

from surplus_match.app_logging import configure_logging


@pytest.fixture(autouse=True)
def package_logger():
    logger = logging.getLogger("surplus_match")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_default_level_is_info(package_logger):
    configure_logging()
    assert package_logger.level == logging.INFO
    assert len(package_logger.handlers) == 1
    assert package_logger.propagate is False


def test_verbose_enables_debug(package_logger):
    configure_logging(verbose=True)
    assert package_logger.level == logging.DEBUG


def test_repeated_calls_do_not_stack_handlers(package_logger):
    configure_logging()
    configure_logging(verbose=True)
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG
