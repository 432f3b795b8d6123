"""Tests for logging helpers."""

import logging

import pytest
import structlog

from isobatch.utils.logging import _coerce_level, configure_logging, log_context


@pytest.mark.unit
def test_coerce_level():
    assert _coerce_level("info") == logging.INFO
    assert _coerce_level(logging.DEBUG) == logging.DEBUG
    with pytest.raises(ValueError):
        _coerce_level("chatty")


@pytest.mark.unit
def test_log_context_binds_and_restores():
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run="outer")

    with log_context(group_index=3, run="inner"):
        assert structlog.contextvars.get_contextvars() == {
            "run": "inner",
            "group_index": 3,
        }

    assert structlog.contextvars.get_contextvars() == {"run": "outer"}
    structlog.contextvars.clear_contextvars()


@pytest.mark.unit
def test_configure_logging_sets_root_level():
    configure_logging(level="WARNING", json_output=True)

    assert logging.getLogger().level == logging.WARNING
