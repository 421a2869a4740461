import asyncio
from pathlib import Path

import pytest
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import DummyOutput

from ticketsummary.config import BackendConfiguration, ConfigStore
from ticketsummary.machine import KeyPress
from ticketsummary.orchestrator import TickingIndicator
from ticketsummary.session import Screen
from ticketsummary.tui import build_terminal_app, normalize_key


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        (Keys.ControlM, KeyPress("enter")),
        (Keys.ControlH, KeyPress("backspace")),
        (Keys.Escape, KeyPress("esc")),
        (Keys.PageDown, KeyPress("pgdown")),
        (Keys.Up, KeyPress("up")),
        (Keys.ControlY, KeyPress("ctrl+y")),
        (Keys.ControlC, KeyPress("ctrl+c")),
        ("G", KeyPress("G")),
        (" ", KeyPress(" ")),
        ("~", KeyPress("~")),
    ],
)
def test_normalize_key_names(key, expected: KeyPress) -> None:
    assert normalize_key(key) == expected


def test_normalize_paste_flattens_newlines() -> None:
    assert normalize_key(Keys.BracketedPaste, "first\r\nsecond") == KeyPress("paste", "first second")


def test_normalize_ignores_terminal_reports() -> None:
    assert normalize_key(Keys.CPRResponse, "\x1b[1;1R") is None


def test_terminal_app_wires_busy_indicator(tmp_path: Path) -> None:
    with create_pipe_input() as pipe_input:
        app = build_terminal_app(
            BackendConfiguration(active_model="ollama"),
            ConfigStore(tmp_path),
            input=pipe_input,
            output=DummyOutput(),
        )

    assert isinstance(app.machine.orchestrator.indicator, TickingIndicator)


@pytest.mark.asyncio
async def test_keys_flow_through_machine_until_quit(tmp_path: Path) -> None:
    with create_pipe_input() as pipe_input:
        app = build_terminal_app(
            BackendConfiguration(active_model="ollama"),
            ConfigStore(tmp_path),
            input=pipe_input,
            output=DummyOutput(),
        )
        pipe_input.send_text("jj")
        pipe_input.send_text("q")

        await asyncio.wait_for(app.run_async(), timeout=5)

    assert app.session.screen == Screen.SELECT_DOCUMENT_TYPE
    assert app.session.document_cursor == 2
    assert app.session.viewport.width == 76
