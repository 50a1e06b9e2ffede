"""Fit a transcript prompt into a model's context window.

The planner never drops or shortens transcript content. When the estimated
prompt is too large it

* always logs a warning carrying ``estimated_tokens`` and
  ``base_context_tokens`` (as ``extra`` attributes on the log record), and
* for elastic model families declares a larger context window instead.

Non-elastic models keep their nominal window; the oversized request is still
sent and whatever the provider does with it (truncate or reject) is reported
by the backend.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from summairpg.summarize.prompts import SUMMARY_SYSTEM_PROMPT
from summairpg.summarize.tokens import (
    TokenCounter,
    estimate_message_tokens,
    heuristic_token_count,
)
from summairpg.timestamps.models import ChatMessage, Line, ModelProfile, PromptPlan
from summairpg.transcript.segmentation import render_transcript
from summairpg.utils.constant import REPLY_TOKEN_RESERVE

__all__ = [
    "REPLY_TOKEN_RESERVE",
    "plan_context",
    "plan_prompt",
]

logger = logging.getLogger(__name__)


def plan_context(
    estimated_tokens: int,
    profile: ModelProfile,
    context_length_override: int | None = None,
) -> tuple[int, bool]:
    """Decide the context length to declare and whether the prompt is too big.

    Args:
        estimated_tokens: Estimated prompt size.
        profile: Target model.
        context_length_override: Positive value replacing the model's
            nominal context window; ``None`` or ``0`` keeps the nominal one.

    Returns:
        tuple[int, bool]: ``(context_length, over_budget)``.

    Examples:
        >>> elastic = ModelProfile(name="llama3-gradient", base_context_tokens=8192, is_elastic=True)
        >>> plan_context(9000, elastic)
        (9500, True)
    """
    base = profile.base_context_tokens
    if context_length_override and context_length_override > 0:
        base = context_length_override

    over_budget = estimated_tokens > base - REPLY_TOKEN_RESERVE
    if not over_budget:
        return base, False

    logger.warning(
        "Input token count is very close to or above the context length "
        "(tokens=%d, context-length=%d)",
        estimated_tokens,
        base,
        extra={"estimated_tokens": estimated_tokens, "base_context_tokens": base},
    )
    if profile.is_elastic:
        context_length = estimated_tokens + REPLY_TOKEN_RESERVE
        logger.info(
            "Model %s supports a larger context; raising context length to %d",
            profile.name,
            context_length,
        )
        return context_length, True
    return base, True


def plan_prompt(
    lines: Sequence[Line],
    profile: ModelProfile,
    *,
    system_prompt: str = SUMMARY_SYSTEM_PROMPT,
    count: TokenCounter = heuristic_token_count,
    context_length_override: int | None = None,
) -> PromptPlan:
    """Build the budgeted two-message summary prompt for *lines*.

    Args:
        lines: Speaker turns of the transcript.
        profile: Target model.
        system_prompt: Instruction text for the system message.
        count: Per-text token counter used for the estimate.
        context_length_override: See :func:`plan_context`.

    Returns:
        PromptPlan: Prompt text, estimate and the context length to declare.
    """
    user_text = render_transcript(lines)
    estimated = estimate_message_tokens(
        [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_text),
        ],
        count=count,
    )
    context_length, over_budget = plan_context(
        estimated, profile, context_length_override=context_length_override
    )
    logger.debug(
        "Prompt planned for %s: %d lines, ~%d tokens, context length %d",
        profile.name,
        len(lines),
        estimated,
        context_length,
    )
    return PromptPlan(
        system_prompt=system_prompt,
        user_text=user_text,
        estimated_tokens=estimated,
        context_length=context_length,
        over_budget=over_budget,
    )
