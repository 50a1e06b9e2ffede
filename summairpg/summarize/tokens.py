"""Token estimation and context-window lookup for chat prompts.

The estimate mirrors how OpenAI documents chat token accounting: every
message costs a fixed overhead plus the tokens of its role, content and
optional name, and every reply is primed with a few more tokens. The
per-text count is pluggable:

* :func:`tiktoken_counter` uses a real BPE encoding (``cl100k_base``) from
  the optional ``tiktoken`` extra.
* :func:`heuristic_token_count` needs no tokenizer files and is
  deterministic; it is "good enough" for deciding whether a prompt fits.

:func:`default_token_counter` picks the first when ``tiktoken`` is installed
and the second otherwise.

Context sizes are looked up by model family in a read-only table that callers
may replace, so nothing here depends on mutable module state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Final

from summairpg.timestamps.models import ChatMessage, ModelProfile
from summairpg.utils.constant import FALLBACK_CONTEXT_TOKENS

__all__ = [
    "DEFAULT_CONTEXT_TABLE",
    "DEFAULT_ELASTIC_FAMILIES",
    "REPLY_PRIMING_TOKENS",
    "TOKENS_PER_MESSAGE",
    "TOKENS_PER_NAME",
    "TokenCounter",
    "context_length_for_model",
    "default_token_counter",
    "estimate_message_tokens",
    "heuristic_token_count",
    "model_family",
    "resolve_model_profile",
    "tiktoken_counter",
]

logger = logging.getLogger(__name__)

TokenCounter = Callable[[str], int]

TOKENS_PER_MESSAGE: Final[int] = 3
TOKENS_PER_NAME: Final[int] = 1
# every reply is primed with <|start|>assistant<|message|>
REPLY_PRIMING_TOKENS: Final[int] = 3

DEFAULT_CONTEXT_TABLE: Final[Mapping[str, int]] = MappingProxyType({
    "llama2": 4096,
    "llama3": 8192,
    "mistral": 8192,
    "llama3-gradient": 32768,
    "phi3": 128000,
    "mixtral": 64000,
    "gpt-3.5-turbo": 16385,
    "gpt-4": 8192,
    "gpt-4-turbo": 128000,
    "gpt-4-turbo-preview": 128000,
    "gpt-4o": 128000,
    "gpt-4o-mini": 128000,
})

# Families whose runtime accepts a larger num_ctx than the nominal baseline.
DEFAULT_ELASTIC_FAMILIES: Final[frozenset[str]] = frozenset({"llama3-gradient"})


def heuristic_token_count(text: str) -> int:
    """Estimate the token count of *text* without a tokenizer.

    Takes the larger of a character-based estimate (~4 characters per token)
    and a word-based estimate (~0.75 words per token).

    Args:
        text: Input text.

    Returns:
        int: ``0`` for blank text, otherwise at least ``1``.
    """
    stripped = text.strip()
    if not stripped:
        return 0

    char_estimate = round(len(stripped) / 4)
    word_estimate = round(len(stripped.split()) / 0.75)
    return max(char_estimate, word_estimate, 1)


def tiktoken_counter(encoding_name: str = "cl100k_base") -> TokenCounter:
    """Return a counter backed by a ``tiktoken`` BPE encoding.

    Args:
        encoding_name: Name of the encoding to load.

    Returns:
        TokenCounter: Callable returning the exact number of BPE tokens.

    Raises:
        ModuleNotFoundError: When the ``tiktoken`` extra is not installed.
    """
    # Lazy import: optional dependency that downloads encodings on first use
    import tiktoken  # pylint: disable=import-outside-toplevel

    encoding = tiktoken.get_encoding(encoding_name)

    def _count(text: str) -> int:
        return len(encoding.encode(text, disallowed_special=()))

    return _count


def default_token_counter() -> TokenCounter:
    """Return the tiktoken counter when available, else the heuristic.

    Returns:
        TokenCounter: :func:`tiktoken_counter` output, or
        :func:`heuristic_token_count` when ``tiktoken`` is not installed.
    """
    try:
        return tiktoken_counter()
    except ModuleNotFoundError:
        logger.debug("tiktoken not installed; using heuristic token counts")
        return heuristic_token_count


def estimate_message_tokens(
    messages: Iterable[ChatMessage],
    count: TokenCounter = heuristic_token_count,
) -> int:
    """Estimate the prompt tokens a list of chat messages will consume.

    Args:
        messages: Messages in request order.
        count: Per-text token counter.

    Returns:
        int: Estimated prompt tokens. ``3`` for no messages at all; a single
        message with empty fields costs ``6``.
    """
    num_tokens = 0
    for message in messages:
        num_tokens += TOKENS_PER_MESSAGE
        num_tokens += count(message.role)
        num_tokens += count(message.content)
        num_tokens += count(message.name)
        if message.name:
            num_tokens += TOKENS_PER_NAME
    num_tokens += REPLY_PRIMING_TOKENS
    return num_tokens


def model_family(model: str) -> str:
    """Strip the tag from a model name (``"llama3:70b"`` -> ``"llama3"``)."""
    return model.split(":", 1)[0]


def context_length_for_model(
    model: str,
    table: Mapping[str, int] = DEFAULT_CONTEXT_TABLE,
    fallback: int = FALLBACK_CONTEXT_TOKENS,
) -> int:
    """Look up the nominal context window of *model*.

    Args:
        model: Model name, optionally with a ``:tag`` suffix.
        table: Family name to context size.
        fallback: Size used for families missing from *table*.

    Returns:
        int: Context window in tokens.
    """
    return table.get(model_family(model), fallback)


def resolve_model_profile(
    model: str,
    table: Mapping[str, int] = DEFAULT_CONTEXT_TABLE,
    elastic_families: frozenset[str] = DEFAULT_ELASTIC_FAMILIES,
    fallback: int = FALLBACK_CONTEXT_TOKENS,
) -> ModelProfile:
    """Build the :class:`ModelProfile` the budget planner works with."""
    return ModelProfile(
        name=model,
        base_context_tokens=context_length_for_model(model, table, fallback),
        is_elastic=model_family(model) in elastic_families,
    )
