"""OpenAI-compatible chat completion backend.

Works against api.openai.com, Azure OpenAI and any server exposing the
``/chat/completions`` endpoint. The provider owns its context window, so only
the budget warning is produced locally.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Literal

import httpx

from summairpg.summarize.base import SummarizationError
from summairpg.summarize.budget import plan_prompt
from summairpg.summarize.tokens import TokenCounter, default_token_counter, resolve_model_profile
from summairpg.timestamps.models import Line, PromptPlan
from summairpg.utils.constant import HTTP_TIMEOUT_SEC

__all__ = ["ApiType", "OpenAIClient"]

logger = logging.getLogger(__name__)

ApiType = Literal["OPEN_AI", "AZURE", "AZURE_AD"]


class OpenAIClient:
    """Summarize transcripts with an OpenAI-compatible chat model.

    Args:
        base_url: API root, usually ``https://host[:port]/v1``.
        model: Model name (Azure: deployment name).
        api_key: Secret sent with every request.
        org_id: Optional organization header.
        api_type: ``OPEN_AI``, ``AZURE`` or ``AZURE_AD``.
        api_version: Azure API version; ignored for ``OPEN_AI``.
        http_client: Client to use; a new one is created when omitted.
        count: Per-text token counter for the prompt estimate; defaults to
            :func:`~summairpg.summarize.tokens.default_token_counter`.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str,
        *,
        org_id: str = "",
        api_type: ApiType = "OPEN_AI",
        api_version: str = "",
        http_client: httpx.Client | None = None,
        count: TokenCounter | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_type = api_type
        self.api_version = api_version
        self.profile = resolve_model_profile(model)
        self._count = count if count is not None else default_token_counter()

        headers = {"Content-Type": "application/json"}
        if api_type == "AZURE":
            headers["api-key"] = api_key
        else:
            headers["Authorization"] = f"Bearer {api_key}"
        if org_id:
            headers["OpenAI-Organization"] = org_id
        self._headers = headers
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(HTTP_TIMEOUT_SEC, connect=30.0)
        )

    def completions_url(self) -> str:
        """Return the chat completions endpoint for the configured API type."""
        if self.api_type in ("AZURE", "AZURE_AD"):
            return f"{self.base_url}/openai/deployments/{self.model}/chat/completions"
        return f"{self.base_url}/chat/completions"

    def build_request(self, plan: PromptPlan) -> dict[str, Any]:
        """Return the chat completion JSON body for *plan*."""
        return {
            "model": self.model,
            "messages": [
                {"role": m.role, "content": m.content} for m in plan.messages()
            ],
        }

    def summarize(self, lines: Sequence[Line]) -> str:
        """Summarize *lines*; multiple choices are joined by a blank line.

        Raises:
            SummarizationError: On transport errors, error statuses or when
                no choice carries any content.
        """
        # Context length is not sent; the plan is used for the warning only.
        plan = plan_prompt(lines, self.profile, count=self._count)
        params = {"api-version": self.api_version} if self.api_version else None
        logger.info(
            "Requesting summary from %s (model=%s, ~%d tokens)",
            self.base_url,
            self.model,
            plan.estimated_tokens,
        )
        try:
            resp = self._http.post(
                self.completions_url(),
                json=self.build_request(plan),
                headers=self._headers,
                params=params,
            )
        except httpx.HTTPError as exc:
            raise SummarizationError(
                f"could not reach chat endpoint {self.base_url}: {exc}"
            ) from exc
        if resp.status_code >= 400:
            raise SummarizationError(resp.text, status_code=resp.status_code)

        try:
            choices = resp.json().get("choices") or []
            contents = [c["message"]["content"] or "" for c in choices]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise SummarizationError(
                f"error while decoding chat completion response: {exc}"
            ) from exc
        summary = "\n\n".join(c for c in contents if c)
        if not summary:
            raise SummarizationError("no summary returned by the chat endpoint")
        return summary

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()
