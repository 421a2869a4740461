"""OpenAI chat-completions backend."""

from __future__ import annotations

from typing import Any

import openai
from loguru import logger

from ..errors import BackendError
from .base import HOSTED_TIMEOUT_SECONDS


class OpenAIBackend:
    """Hosted backend authenticated with a bearer API key."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        timeout: float = HOSTED_TIMEOUT_SECONDS,
        client: Any = None,
    ) -> None:
        self.model = model
        self._client = client if client is not None else openai.OpenAI(api_key=api_key, timeout=timeout)

    def generate(self, prompt: str) -> str:
        logger.info("openai.request model={} prompt_chars={}", self.model, len(prompt))
        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIStatusError as exc:
            logger.error("openai.request.failed status={} error={}", exc.status_code, exc.message)
            raise BackendError(f"OpenAI API error ({exc.status_code}): {exc.message}") from exc
        except openai.OpenAIError as exc:
            logger.error("openai.request.failed error={}", exc)
            raise BackendError(f"OpenAI API error: {exc}") from exc

        choices = completion.choices or []
        logger.info("openai.response choices={}", len(choices))
        if not choices:
            raise BackendError("OpenAI returned no choices")
        content = choices[0].message.content or ""
        logger.info("openai.response.content chars={}", len(content))
        return content
