"""Self-hosted HTTP backend speaking either the native chat API or the OpenAI shape."""

from __future__ import annotations

import json
from typing import Any
from urllib import error as urllib_error
from urllib import request as urllib_request

from loguru import logger

from ..config import WireDialect
from ..errors import BackendError
from .base import LOCAL_TIMEOUT_SECONDS, preview

NATIVE_HOST_MARKERS = ("localhost:11434", "127.0.0.1:11434")
NATIVE_CHAT_PATH = "/api/chat"
OPENAI_CHAT_PATH = "/v1/chat/completions"
USER_AGENT = "ticketsummary/0.1"


def normalize_base_url(raw_base_url: str) -> str:
    return raw_base_url.strip().rstrip("/")


def detect_dialect(base_url: str) -> WireDialect:
    """Guess the dialect from the address: the well-known local port means native."""
    if any(marker in base_url for marker in NATIVE_HOST_MARKERS):
        return WireDialect.NATIVE
    return WireDialect.OPENAI


def resolve_endpoint(raw_base_url: str, dialect: WireDialect = WireDialect.AUTO) -> tuple[WireDialect, str]:
    """Return the effective dialect and the full URL to post to."""
    base_url = normalize_base_url(raw_base_url)
    if dialect == WireDialect.AUTO:
        dialect = detect_dialect(base_url)

    if dialect == WireDialect.NATIVE:
        if base_url.endswith(NATIVE_CHAT_PATH):
            return dialect, base_url
        return dialect, base_url + NATIVE_CHAT_PATH

    if OPENAI_CHAT_PATH in base_url or "/chat/completions" in base_url:
        return dialect, base_url
    if base_url.endswith("/v1"):
        return dialect, base_url + "/chat/completions"
    return dialect, base_url + OPENAI_CHAT_PATH


class LocalBackend:
    """Backend for a model served on the user's own machine or network."""

    name = "local"

    def __init__(
        self,
        base_url: str,
        model: str,
        *,
        dialect: WireDialect = WireDialect.AUTO,
        timeout: float = LOCAL_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.dialect, self.endpoint = resolve_endpoint(base_url, dialect)

    def generate(self, prompt: str) -> str:
        logger.info("local.request endpoint={} dialect={} model={}", self.endpoint, self.dialect, self.model)
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.dialect == WireDialect.NATIVE:
            payload["stream"] = False

        data = self._post(payload)
        if self.dialect == WireDialect.NATIVE:
            content = _native_content(data)
        else:
            content = _openai_content(data)
        if not content:
            logger.warning("local.response.empty endpoint={}", self.endpoint)
        else:
            logger.info("local.response chars={} preview={}", len(content), preview(content))
        return content

    def _post(self, payload: dict[str, Any]) -> Any:
        request = urllib_request.Request(  # noqa: S310 - endpoint comes from the user's own configuration.
            self.endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            method="POST",
        )
        try:
            with urllib_request.urlopen(request, timeout=self.timeout) as response:  # noqa: S310
                body = response.read().decode("utf-8", errors="replace")
        except urllib_error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace").strip()
            logger.error("local.request.status code={} body={}", exc.code, preview(detail, 500))
            raise BackendError(f"Local LLM API returned {exc.code}: {detail}") from exc
        except urllib_error.URLError as exc:
            logger.error("local.request.failed endpoint={} error={}", self.endpoint, exc)
            raise BackendError(f"Local LLM API error: {exc.reason}") from exc
        except OSError as exc:
            logger.error("local.request.failed endpoint={} error={}", self.endpoint, exc)
            raise BackendError(f"Local LLM API error: {exc}") from exc

        logger.debug("local.response.raw bytes={} body={}", len(body), preview(body, 500))
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise BackendError(f"failed to parse local LLM response: {exc}") from exc


def _native_content(data: Any) -> str:
    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, dict) or not isinstance(message.get("content"), str):
        raise BackendError("failed to parse local LLM response: missing message.content")
    return str(message["content"])


def _openai_content(data: Any) -> str:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list):
        raise BackendError("failed to parse local LLM response: missing choices")
    if not choices:
        raise BackendError("No content returned from the LLM")
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise BackendError("failed to parse local LLM response: missing choices[0].message.content")
    return content
