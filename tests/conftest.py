"""Shared test fixtures for the summairpg test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run every test in a temporary working directory without an API key.

    The CLI stores ``summairpg-config.json`` in the working directory and the
    OpenAI backend reads ``OPENAI_API_KEY``; neither may leak between tests
    or into the repository.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def _hide_tiktoken(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make ``import tiktoken`` fail so token counts use the heuristic.

    Tests that exercise the tiktoken path install their own fake module.
    """
    monkeypatch.setitem(sys.modules, "tiktoken", None)
