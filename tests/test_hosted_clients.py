from types import SimpleNamespace
from typing import Any

import anthropic
import httpx
import openai
import pytest

from ticketsummary.backends.claude_client import KNOWN_CLAUDE_MODELS, ClaudeBackend
from ticketsummary.backends.openai_client import OpenAIBackend
from ticketsummary.errors import BackendError, ModelNotFoundError


class FakeCompletions:
    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _openai_client(result: Any) -> tuple[Any, FakeCompletions]:
    completions = FakeCompletions(result)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _claude_client(result: Any) -> tuple[Any, FakeCompletions]:
    messages = FakeCompletions(result)
    return SimpleNamespace(messages=messages), messages


def _response(status: int, url: str) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", url))


def test_openai_returns_first_choice_text() -> None:
    client, completions = _openai_client(
        SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Summary"))])
    )

    text = OpenAIBackend("sk-test", "gpt-4", client=client).generate("prompt")

    assert text == "Summary"
    assert completions.calls == [{"model": "gpt-4", "messages": [{"role": "user", "content": "prompt"}]}]


def test_openai_without_choices_is_an_error() -> None:
    client, _ = _openai_client(SimpleNamespace(choices=[]))

    with pytest.raises(BackendError, match="no choices"):
        OpenAIBackend("sk-test", "gpt-4", client=client).generate("prompt")


def test_openai_status_error_is_wrapped() -> None:
    error = openai.AuthenticationError(
        "Incorrect API key provided",
        response=_response(401, "https://api.openai.com/v1/chat/completions"),
        body=None,
    )
    client, _ = _openai_client(error)

    with pytest.raises(BackendError, match=r"OpenAI API error \(401\)"):
        OpenAIBackend("sk-test", "gpt-4", client=client).generate("prompt")


def test_claude_returns_first_text_block() -> None:
    client, messages = _claude_client(
        SimpleNamespace(
            id="msg_1",
            model="claude-3-haiku-20240307",
            content=[SimpleNamespace(type="tool_use"), SimpleNamespace(type="text", text="Drafted")],
        )
    )

    text = ClaudeBackend("sk-ant", "claude-3-haiku-20240307", client=client).generate("prompt")

    assert text == "Drafted"
    assert messages.calls[0]["max_tokens"] == 4096
    assert messages.calls[0]["messages"] == [{"role": "user", "content": "prompt"}]


def test_claude_unknown_model_lists_known_models() -> None:
    error = anthropic.NotFoundError(
        "model: claude-9",
        response=_response(404, "https://api.anthropic.com/v1/messages"),
        body={"type": "error", "error": {"type": "not_found_error", "message": "model: claude-9"}},
    )
    client, _ = _claude_client(error)

    with pytest.raises(ModelNotFoundError) as exc_info:
        ClaudeBackend("sk-ant", "claude-9", client=client).generate("prompt")

    message = str(exc_info.value)
    assert message.startswith("Claude API error: Model 'claude-9' not found.")
    for model in KNOWN_CLAUDE_MODELS:
        assert model in message


def test_claude_other_status_error_keeps_type_and_message() -> None:
    error = anthropic.RateLimitError(
        "slow down",
        response=_response(429, "https://api.anthropic.com/v1/messages"),
        body={"type": "error", "error": {"type": "rate_limit_error", "message": "slow down"}},
    )
    client, _ = _claude_client(error)

    with pytest.raises(BackendError) as exc_info:
        ClaudeBackend("sk-ant", "claude-3-haiku-20240307", client=client).generate("prompt")

    assert not isinstance(exc_info.value, ModelNotFoundError)
    assert str(exc_info.value) == "Claude API error (type: rate_limit_error): slow down"


def test_claude_without_text_is_an_error() -> None:
    client, _ = _claude_client(SimpleNamespace(id="msg_2", model="m", content=[]))

    with pytest.raises(BackendError, match="no text content"):
        ClaudeBackend("sk-ant", "m", client=client).generate("prompt")
