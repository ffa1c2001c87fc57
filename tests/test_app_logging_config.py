# tests/test_app_logging_config.py

from __future__ import annotations

import logging

import pytest

from app.logging_config import LOG_FORMAT, configure_logging, parse_level


def test_parse_level_accepts_names_and_ints():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("WARNING") == logging.WARNING
    assert parse_level(logging.INFO) == logging.INFO
    with pytest.raises(ValueError):
        parse_level("loud")


def test_configure_logging_adds_one_handler():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    try:
        configure_logging("debug")
        configure_logging("info")  # second call is a no-op

        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == LOG_FORMAT
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
