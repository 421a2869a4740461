"""Backend selection from the active configuration entry."""

from __future__ import annotations

from loguru import logger

from ..config import DEFAULT_LOCAL_MODEL, BackendSettings, ProviderFamily
from ..errors import ConfigurationError
from .base import BackendClient
from .claude_client import ClaudeBackend
from .local_client import LocalBackend
from .openai_client import OpenAIBackend

MIN_EXPECTED_KEY_LENGTH = 20


def create_backend(settings: BackendSettings) -> BackendClient:
    """Instantiate the client for the entry's provider family."""
    logger.info("backend.create provider={} model={}", settings.provider, settings.model_name)

    if settings.provider == ProviderFamily.OPENAI:
        _check_api_key("OpenAI", settings.api_key)
        return OpenAIBackend(settings.api_key, settings.model_name)

    if settings.provider == ProviderFamily.CLAUDE:
        _check_api_key("Claude", settings.api_key)
        return ClaudeBackend(settings.api_key, settings.model_name)

    if settings.provider == ProviderFamily.LOCAL:
        if not settings.api_base_url:
            logger.error("backend.create.missing_base_url provider={}", settings.provider)
            raise ConfigurationError("API base URL is required for local models")
        if not settings.api_base_url.startswith(("http://", "https://")):
            logger.warning("backend.create.unusual_scheme base_url={}", settings.api_base_url)
        model_name = settings.model_name
        if not model_name:
            logger.warning("backend.create.empty_model default={}", DEFAULT_LOCAL_MODEL)
            model_name = DEFAULT_LOCAL_MODEL
        return LocalBackend(settings.api_base_url, model_name, dialect=settings.wire_dialect)

    raise ConfigurationError(f"unsupported provider: {settings.provider}")


def _check_api_key(provider: str, api_key: str) -> None:
    if not api_key:
        logger.error("backend.create.missing_api_key provider={}", provider)
        raise ConfigurationError(f"{provider} API key is required")
    logger.info("backend.create.api_key provider={} length={}", provider, len(api_key))
    if len(api_key) < MIN_EXPECTED_KEY_LENGTH:
        logger.warning("backend.create.short_api_key provider={} length={}", provider, len(api_key))
