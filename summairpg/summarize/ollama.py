"""Ollama chat backend.

Talks to the Ollama HTTP API (``/api/chat`` and ``/api/pull``) with
:mod:`httpx`. The context window is declared per request through the
``num_ctx`` option, sized by :func:`summairpg.summarize.budget.plan_prompt`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from summairpg.summarize.base import SummarizationError
from summairpg.summarize.budget import plan_prompt
from summairpg.summarize.tokens import TokenCounter, default_token_counter, resolve_model_profile
from summairpg.timestamps.models import Line, PromptPlan
from summairpg.utils.constant import HTTP_TIMEOUT_SEC

__all__ = ["OllamaClient"]

logger = logging.getLogger(__name__)


class OllamaClient:
    """Summarize transcripts with a model served by Ollama.

    Args:
        address: ``host:port`` of the Ollama HTTP API.
        model: Ollama model name, e.g. ``llama3:70b``.
        context_length_override: Positive value replacing the context length
            that would else be derived from the model family.
        http_client: Client to use; a new one is created when omitted.
        count: Per-text token counter for the prompt estimate; defaults to
            :func:`~summairpg.summarize.tokens.default_token_counter`.
    """

    def __init__(
        self,
        address: str,
        model: str,
        *,
        context_length_override: int = 0,
        http_client: httpx.Client | None = None,
        count: TokenCounter | None = None,
    ) -> None:
        self.address = address
        self.model = model
        self.profile = resolve_model_profile(model)
        self.context_length_override = context_length_override
        self._count = count if count is not None else default_token_counter()
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(HTTP_TIMEOUT_SEC, connect=30.0)
        )

    @property
    def base_url(self) -> str:
        """HTTP base URL derived from :attr:`address`."""
        return f"http://{self.address}"

    def build_request(self, plan: PromptPlan) -> dict[str, Any]:
        """Return the ``/api/chat`` JSON body for *plan*."""
        return {
            "model": self.model,
            "messages": [
                {"role": m.role, "content": m.content} for m in plan.messages()
            ],
            "stream": False,
            "options": {"num_ctx": plan.context_length},
        }

    def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        try:
            resp = self._http.post(f"{self.base_url}{path}", json=body)
        except httpx.HTTPError as exc:
            raise SummarizationError(
                f"could not reach Ollama at {self.address}: {exc}"
            ) from exc
        if resp.status_code >= 400:
            raise SummarizationError(resp.text, status_code=resp.status_code)
        return resp

    def summarize(self, lines: Sequence[Line]) -> str:
        """Summarize *lines* using the summary system prompt.

        Raises:
            SummarizationError: On transport errors, error statuses or an
                undecodable response.
        """
        plan = plan_prompt(
            lines,
            self.profile,
            count=self._count,
            context_length_override=self.context_length_override,
        )
        logger.info(
            "Requesting summary from Ollama (model=%s, num_ctx=%d, ~%d tokens)",
            self.model,
            plan.context_length,
            plan.estimated_tokens,
        )
        resp = self._post("/api/chat", self.build_request(plan))
        try:
            return resp.json()["message"]["content"]
        except (ValueError, KeyError, TypeError) as exc:
            raise SummarizationError(
                f"error while decoding response from Ollama: {exc}"
            ) from exc

    def update_model(self) -> None:
        """Pull the latest version of :attr:`model`.

        Raises:
            SummarizationError: When the pull request fails.
        """
        logger.info("Updating Ollama model %s", self.model)
        self._post(
            "/api/pull",
            {"name": self.model, "insecure": False, "stream": False},
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()
