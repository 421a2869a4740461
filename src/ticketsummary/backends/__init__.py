"""Text-generation backends."""

from .base import BackendClient
from .claude_client import ClaudeBackend
from .factory import create_backend
from .local_client import LocalBackend
from .openai_client import OpenAIBackend

__all__ = [
    "BackendClient",
    "ClaudeBackend",
    "LocalBackend",
    "OpenAIBackend",
    "create_backend",
]
