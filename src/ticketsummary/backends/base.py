"""Backend client contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

HOSTED_TIMEOUT_SECONDS = 60.0
LOCAL_TIMEOUT_SECONDS = 120.0


@runtime_checkable
class BackendClient(Protocol):
    """Turns one prompt into generated text.

    Implementations raise ``BackendError`` (or a subclass) on any failure and never
    return partial output.
    """

    name: str

    def generate(self, prompt: str) -> str: ...


def preview(text: str, limit: int = 100) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
