"""Tests for logging setup."""

import logging

import structlog

from pizzeria.infrastructure.log_config import configure_logging


def test_level_is_applied():
    configure_logging("info")
    assert logging.getLogger().level == logging.INFO
    assert structlog.is_configured()


def test_unknown_level_falls_back_to_warning():
    configure_logging("chatty")
    assert logging.getLogger().level == logging.WARNING
