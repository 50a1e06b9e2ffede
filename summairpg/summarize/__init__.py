"""Token budgeting and chat backends for transcript summaries.

Exactly one backend is active per run; :func:`create_summarizer` picks it from
the configuration so callers only see the :class:`Summarizer` interface.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from summairpg.config import OPENAI_API_KEY_ENV, AppConfig, ConfigError
from summairpg.summarize.base import SummarizationError, Summarizer
from summairpg.summarize.budget import plan_context, plan_prompt
from summairpg.summarize.ollama import OllamaClient
from summairpg.summarize.openai import OpenAIClient
from summairpg.summarize.tokens import (
    default_token_counter,
    estimate_message_tokens,
    heuristic_token_count,
    resolve_model_profile,
)

__all__ = [
    "OllamaClient",
    "OpenAIClient",
    "SummarizationError",
    "Summarizer",
    "create_summarizer",
    "default_token_counter",
    "estimate_message_tokens",
    "heuristic_token_count",
    "plan_context",
    "plan_prompt",
    "resolve_model_profile",
]


def create_summarizer(
    config: AppConfig,
    env: Mapping[str, str] | None = None,
) -> OllamaClient | OpenAIClient:
    """Instantiate the backend enabled in *config*.

    Args:
        config: Validated application configuration.
        env: Environment holding ``OPENAI_API_KEY``; defaults to ``os.environ``.

    Returns:
        The configured backend.

    Raises:
        ConfigError: When no backend is enabled.
    """
    env = os.environ if env is None else env
    if config.openai.enabled:
        return OpenAIClient(
            base_url=config.openai.url,
            model=config.openai.model,
            api_key=env.get(OPENAI_API_KEY_ENV, ""),
            org_id=config.openai.org_id,
            api_type=config.openai.api_type,
            api_version=config.openai.api_version,
        )
    if config.ollama.enabled:
        return OllamaClient(
            address=config.ollama.address,
            model=config.ollama.model,
            context_length_override=config.ollama.context_length_override,
        )
    raise ConfigError("enable either Ollama or OpenAI for summarization")
