"""Generation client: the only boundary to the generative model.

``PlanGenerator`` is the capability the pipeline depends on; tests swap in a
fake. ``OpenAIPlanClient`` is the production implementation.
"""

from __future__ import annotations

import logging
from typing import Protocol

import openai
from openai import AsyncOpenAI

from app.config import settings
from app.planner.errors import EmptyResponse, GenerationTimeout, ServiceUnavailable, UpstreamError

logger = logging.getLogger(__name__)


class PlanGenerator(Protocol):
    async def generate(self, instructions: str, user_message: str) -> str: ...


def _upstream_message(exc: openai.OpenAIError) -> str:
    """Pull the provider's own message out of an SDK error when present."""
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        err = body.get("error", body)
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


class OpenAIPlanClient:
    """Chat-completions client requesting JSON output. No retries."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4-turbo",
        *,
        json_mode: bool = True,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.json_mode = json_mode
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

    @classmethod
    def from_settings(cls) -> OpenAIPlanClient:
        return cls(
            settings.openai_api_key,
            settings.openai_model,
            json_mode=settings.openai_json_mode,
            timeout=settings.openai_timeout_seconds,
        )

    def _get_client(self) -> AsyncOpenAI:
        if not self.api_key:
            raise ServiceUnavailable(error="OpenAI API key not configured.")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    async def generate(self, instructions: str, user_message: str) -> str:
        client = self._get_client()

        kwargs = {}
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info("Requesting plan from %s", self.model)
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instructions},
                    {"role": "user", "content": user_message},
                ],
                **kwargs,
            )
        except openai.APITimeoutError as exc:
            raise GenerationTimeout(_upstream_message(exc)) from exc
        except openai.APIConnectionError as exc:
            logger.warning("Generation service unreachable: %s", exc)
            raise ServiceUnavailable(_upstream_message(exc), error="Plan generation service is unreachable.") from exc
        except openai.OpenAIError as exc:
            logger.exception("Error calling OpenAI API")
            raise UpstreamError(_upstream_message(exc)) from exc

        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise EmptyResponse()

        logger.info("Received %d characters from %s", len(content), self.model)
        return content
