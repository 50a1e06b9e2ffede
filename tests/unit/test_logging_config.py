"""Unit tests for centralized logging configuration."""

from __future__ import annotations

import logging
import sys

import pytest

import summairpg.utils.logging_config as logging_config


def _capture_basic_config(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    def fake_basic_config(**kwargs: object) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)
    return calls


def test_configure_logging_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Default logging config should log INFO to stderr and quiet httpx."""
    calls = _capture_basic_config(monkeypatch)

    logging_config.configure_logging()

    assert calls[0]["level"] == logging.INFO
    assert calls[0]["stream"] is sys.stderr
    assert calls[0]["force"] is True
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_verbose(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verbose mode should set DEBUG and let HTTP client logs through."""
    calls = _capture_basic_config(monkeypatch)

    logging_config.configure_logging(verbose=True)

    assert calls[0]["level"] == logging.DEBUG
    assert logging.getLogger("httpcore").level == logging.DEBUG


def test_configure_logging_quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    """Quiet mode should only report errors."""
    calls = _capture_basic_config(monkeypatch)

    logging_config.configure_logging(quiet=True)

    assert calls[0]["level"] == logging.ERROR


def test_explicit_level_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    """An explicit level overrides the verbose and quiet flags."""
    calls = _capture_basic_config(monkeypatch)

    logging_config.configure_logging(level="WARNING", verbose=True)

    assert calls[0]["level"] == logging.WARNING


def test_get_logger_returns_logger() -> None:
    """get_logger should return a standard library logger."""
    logger = logging_config.get_logger("summairpg.tests")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "summairpg.tests"
