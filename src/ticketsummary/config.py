"""Configuration management for ticket-summary."""

from __future__ import annotations

import json
import os
from enum import StrEnum
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import PersistenceError

APP_DIR_NAME = "ticketsummary"
CONFIG_FILE_NAME = "config.json"
DEFAULT_LOCAL_BASE_URL = "http://localhost:11434"
DEFAULT_LOCAL_MODEL = "llama3"


class ProviderFamily(StrEnum):
    """Provider families a backend entry can belong to."""

    OPENAI = "openai"
    CLAUDE = "claude"
    LOCAL = "local"


class WireDialect(StrEnum):
    """Request shape spoken by a self-hosted endpoint."""

    AUTO = "auto"
    NATIVE = "native"
    OPENAI = "openai"


DEFAULT_MODEL_NAMES: dict[ProviderFamily, str] = {
    ProviderFamily.OPENAI: "gpt-3.5-turbo",
    ProviderFamily.CLAUDE: "claude-3-sonnet-20240229",
    ProviderFamily.LOCAL: DEFAULT_LOCAL_MODEL,
}


class BackendSettings(BaseModel):
    """Settings for one configured backend."""

    provider: ProviderFamily
    model_name: str = ""
    api_key: str = ""
    api_base_url: str = ""
    wire_dialect: WireDialect = WireDialect.AUTO

    @property
    def is_local(self) -> bool:
        return self.provider == ProviderFamily.LOCAL

    @property
    def is_configured(self) -> bool:
        """Whether the credential (hosted) or base address (self-hosted) is present."""
        if self.is_local:
            return bool(self.api_base_url)
        return bool(self.api_key)


def default_backends() -> dict[str, BackendSettings]:
    return {
        "openai": BackendSettings(
            provider=ProviderFamily.OPENAI, model_name=DEFAULT_MODEL_NAMES[ProviderFamily.OPENAI]
        ),
        "anthropic": BackendSettings(
            provider=ProviderFamily.CLAUDE, model_name=DEFAULT_MODEL_NAMES[ProviderFamily.CLAUDE]
        ),
        "ollama": BackendSettings(
            provider=ProviderFamily.LOCAL,
            model_name=DEFAULT_LOCAL_MODEL,
            api_base_url=DEFAULT_LOCAL_BASE_URL,
        ),
    }


class BackendConfiguration(BaseModel):
    """Keyed backend settings with one entry marked active."""

    active_model: str = ""
    models: dict[str, BackendSettings] = Field(default_factory=default_backends)

    @property
    def active(self) -> BackendSettings | None:
        if not self.active_model:
            return None
        return self.models.get(self.active_model)

    def backend_keys(self) -> list[str]:
        return sorted(self.models)

    def backfill_defaults(self) -> None:
        for key, settings in default_backends().items():
            self.models.setdefault(key, settings)


class Settings(BaseSettings):
    """Process settings read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="TICKETSUMMARY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    home: Path | None = Field(default=None, description="Override for the configuration directory")
    log_level: str = Field(default="INFO", description="Log level for the log file")

    def resolve_home(self) -> Path:
        if self.home is not None:
            return self.home.expanduser()
        xdg_config_home = os.getenv("XDG_CONFIG_HOME")
        if xdg_config_home:
            return Path(xdg_config_home) / APP_DIR_NAME
        return Path.home() / f".{APP_DIR_NAME}"


def load_settings() -> Settings:
    return Settings()


class ConfigStore:
    """Reads and writes the backend configuration as JSON under one directory."""

    def __init__(self, home: Path) -> None:
        self.home = home

    @property
    def path(self) -> Path:
        return self.home / CONFIG_FILE_NAME

    def load(self) -> BackendConfiguration:
        """Load the stored configuration, or the built-in defaults if none exists.

        Default backends missing from a stored file are added back so a file written
        by an older release still lists every provider.
        """
        if not self.path.exists():
            return BackendConfiguration()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"failed to read config file: {exc}") from exc
        try:
            config = BackendConfiguration.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise PersistenceError(f"failed to parse config file: {exc}") from exc
        config.backfill_defaults()
        return config

    def save(self, config: BackendConfiguration) -> None:
        try:
            self.home.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"failed to create config directory: {exc}") from exc
        data = json.dumps(config.model_dump(mode="json"), indent=2)
        try:
            self.path.write_text(data, encoding="utf-8")
            self.path.chmod(0o600)
        except OSError as exc:
            raise PersistenceError(f"failed to write config file: {exc}") from exc
        logger.info("config.saved path={} active={}", self.path, config.active_model or "-")


def load_backend_configuration(store: ConfigStore) -> BackendConfiguration:
    """Load configuration for start-up, falling back to defaults on a broken file."""
    try:
        return store.load()
    except PersistenceError:
        logger.opt(exception=True).warning("config.load_failed path={}", store.path)
        return BackendConfiguration()
