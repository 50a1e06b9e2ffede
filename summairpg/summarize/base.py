"""Summarization backend interface shared by all chat providers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from summairpg.timestamps.models import Line

__all__ = ["SummarizationError", "Summarizer"]


class SummarizationError(Exception):
    """Raised when a chat provider fails to return a summary.

    Attributes:
        status_code: HTTP status of the failed response, ``None`` for
            transport failures or empty answers.
        message: Response body or a short description.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        self.message = message
        if status_code is None:
            super().__init__(message)
        else:
            super().__init__(f"provider returned status {status_code}: {message}")


@runtime_checkable
class Summarizer(Protocol):
    """A chat provider able to summarize a speaker-attributed transcript."""

    model: str

    def summarize(self, lines: Sequence[Line]) -> str:
        """Return a summary of *lines*.

        Raises:
            SummarizationError: When the provider cannot produce one.
        """
        ...
