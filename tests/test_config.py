import json
import stat
from pathlib import Path

import pytest

from ticketsummary.config import (
    DEFAULT_LOCAL_BASE_URL,
    BackendConfiguration,
    BackendSettings,
    ConfigStore,
    ProviderFamily,
    Settings,
    WireDialect,
    load_backend_configuration,
)
from ticketsummary.errors import PersistenceError


def test_missing_file_yields_default_backends(tmp_path: Path) -> None:
    config = ConfigStore(tmp_path).load()

    assert config.active_model == ""
    assert config.active is None
    assert config.backend_keys() == ["anthropic", "ollama", "openai"]
    assert config.models["ollama"].api_base_url == DEFAULT_LOCAL_BASE_URL
    assert config.models["ollama"].is_configured
    assert not config.models["openai"].is_configured


def test_save_then_load_round_trips(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path / "nested")
    config = BackendConfiguration(active_model="openai")
    config.models["openai"] = config.models["openai"].model_copy(update={"api_key": "sk-" + "x" * 30})
    config.models["lab"] = BackendSettings(
        provider=ProviderFamily.LOCAL,
        model_name="mistral",
        api_base_url="http://10.0.0.5:8000",
        wire_dialect=WireDialect.OPENAI,
    )

    store.save(config)
    loaded = store.load()

    assert loaded == config
    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_load_backfills_default_entries(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps({
            "active_model": "lab",
            "models": {"lab": {"provider": "local", "model_name": "phi3", "api_base_url": "http://box:1234"}},
        }),
        encoding="utf-8",
    )

    config = ConfigStore(tmp_path).load()

    assert config.backend_keys() == ["anthropic", "lab", "ollama", "openai"]
    assert config.active is not None
    assert config.active.model_name == "phi3"
    assert config.active.wire_dialect == WireDialect.AUTO


def test_corrupt_file_raises_persistence_error(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        ConfigStore(tmp_path).load()


def test_startup_load_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("[]", encoding="utf-8")

    config = load_backend_configuration(ConfigStore(tmp_path))

    assert config == BackendConfiguration()


def test_resolve_home_prefers_explicit_then_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert Settings(home=tmp_path / "explicit").resolve_home() == tmp_path / "explicit"
    assert Settings().resolve_home() == tmp_path / "xdg" / "ticketsummary"

    monkeypatch.delenv("XDG_CONFIG_HOME")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert Settings().resolve_home() == tmp_path / ".ticketsummary"


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TICKETSUMMARY_HOME", str(tmp_path))
    monkeypatch.setenv("TICKETSUMMARY_LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.home == tmp_path
    assert settings.log_level == "debug"
