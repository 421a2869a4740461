import importlib
from pathlib import Path

import pytest
from typer.testing import CliRunner

main_module = importlib.import_module("ticketsummary.__main__")


class FakeTerminalApp:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.ran = False

    def run(self) -> None:
        self.ran = True
        if self.error is not None:
            raise self.error


def test_run_loads_config_and_starts_terminal_app(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TICKETSUMMARY_HOME", str(tmp_path))
    (tmp_path / "config.json").write_text('{"active_model": "ollama", "models": {}}', encoding="utf-8")
    fake = FakeTerminalApp()
    seen: dict[str, object] = {}

    def _fake_build(config, store):
        seen["config"] = config
        seen["store"] = store
        return fake

    monkeypatch.setattr(main_module, "build_terminal_app", _fake_build)

    result = CliRunner().invoke(main_module.app, [])

    assert result.exit_code == 0
    assert fake.ran
    assert seen["config"].active_model == "ollama"
    assert seen["store"].path == tmp_path / "config.json"
    assert list((tmp_path / "logs").glob("ticketsummary_*.log"))


def test_run_reports_startup_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TICKETSUMMARY_HOME", str(tmp_path))
    failing = FakeTerminalApp(RuntimeError("boom"))
    monkeypatch.setattr(main_module, "build_terminal_app", lambda _config, _store: failing)

    result = CliRunner().invoke(main_module.app, [])

    assert result.exit_code == 1
    assert "Error starting program: boom" in result.output
    log_text = next((tmp_path / "logs").glob("ticketsummary_*.log")).read_text(encoding="utf-8")
    assert "startup.failed" in log_text
