"""Anthropic messages backend."""

from __future__ import annotations

from typing import Any

import anthropic
from loguru import logger

from ..errors import BackendError, ModelNotFoundError
from .base import HOSTED_TIMEOUT_SECONDS

MAX_OUTPUT_TOKENS = 4096
KNOWN_CLAUDE_MODELS: tuple[str, ...] = (
    "claude-3-opus-20240229",
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
)


class ClaudeBackend:
    """Hosted backend for Claude models."""

    name = "claude"

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        timeout: float = HOSTED_TIMEOUT_SECONDS,
        client: Any = None,
    ) -> None:
        self.model = model
        self._client = client if client is not None else anthropic.Anthropic(api_key=api_key, timeout=timeout)

    def generate(self, prompt: str) -> str:
        logger.info("claude.request model={} max_tokens={}", self.model, MAX_OUTPUT_TOKENS)
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=MAX_OUTPUT_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as exc:
            error_type, message = error_details(exc)
            logger.error("claude.request.failed type={} message={}", error_type, message)
            if is_model_not_found(error_type, message):
                logger.info("claude.model_not_found model={} known={}", self.model, ", ".join(KNOWN_CLAUDE_MODELS))
                raise ModelNotFoundError("Claude", self.model, KNOWN_CLAUDE_MODELS) from exc
            raise BackendError(f"Claude API error (type: {error_type}): {message}") from exc
        except anthropic.APIError as exc:
            logger.error("claude.request.failed error={}", exc)
            raise BackendError(f"Claude API error: {exc}") from exc

        logger.info("claude.response id={} model={}", getattr(response, "id", "-"), getattr(response, "model", "-"))
        for block in response.content or []:
            if getattr(block, "type", None) == "text":
                return str(block.text)
        raise BackendError("Claude returned no text content")


def error_details(exc: anthropic.APIStatusError) -> tuple[str, str]:
    """Pull the provider error type and message out of an error payload."""
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("type") or "unknown"), str(error.get("message") or exc.message)
    return "unknown", str(exc.message)


def is_model_not_found(error_type: str, message: str) -> bool:
    return error_type == "not_found_error" and "model" in message.lower()
