"""Full-screen terminal front end built on prompt_toolkit."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from .config import BackendConfiguration, ConfigStore
from .machine import Event, KeyPress, Resize, SessionMachine
from .orchestrator import RequestOrchestrator, TickingIndicator
from .render import render_to_ansi
from .session import Session
from .views import view_session

ESCAPE_TIMEOUT_SECONDS = 0.05
KEY_NAMES: dict[str, str] = {
    "c-m": "enter",
    "c-j": "enter",
    "c-h": "backspace",
    "c-i": "tab",
    "escape": "esc",
    "pageup": "pgup",
    "pagedown": "pgdown",
    "<sigint>": "ctrl+c",
}


def normalize_key(key: Keys | str, data: str = "") -> KeyPress | None:
    """Translate a prompt_toolkit key into the names the session machine handles."""
    name = key.value if isinstance(key, Keys) else key
    if name == Keys.BracketedPaste.value:
        text = data.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
        return KeyPress("paste", text)
    if name in KEY_NAMES:
        return KeyPress(KEY_NAMES[name])
    if name.startswith("c-"):
        return KeyPress(f"ctrl+{name[2:]}")
    if name.startswith("<"):
        return None
    return KeyPress(name)


class TerminalApp:
    """Feeds terminal input to a ``SessionMachine`` and redraws its session.

    Events are handled one at a time by a single consumer task; each dispatch runs on a
    worker thread so a backend request never blocks redraws of the busy indicator.
    """

    def __init__(self, machine: SessionMachine, **app_kwargs: Any) -> None:
        self.machine = machine
        self.events: asyncio.Queue[Event] = asyncio.Queue()
        self._size: tuple[int, int] | None = None
        self.application: Application[None] = Application(
            layout=Layout(Window(FormattedTextControl(self._formatted_screen), always_hide_cursor=True)),
            key_bindings=self._key_bindings(),
            full_screen=True,
            before_render=self._check_size,
            **app_kwargs,
        )
        self.application.ttimeoutlen = ESCAPE_TIMEOUT_SECONDS
        machine.orchestrator.indicator = TickingIndicator(on_tick=self.application.invalidate)

    @property
    def session(self) -> Session:
        return self.machine.session

    def _key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add(Keys.Any)
        def _(event: KeyPressEvent) -> None:
            for pressed in event.key_sequence:
                normalized = normalize_key(pressed.key, pressed.data)
                if normalized is not None:
                    self.events.put_nowait(normalized)

        return bindings

    def _check_size(self, app: Application[None]) -> None:
        size = app.output.get_size()
        current = (size.columns, size.rows)
        if current != self._size:
            self._size = current
            self.events.put_nowait(Resize(columns=size.columns, rows=size.rows))

    def _formatted_screen(self) -> ANSI:
        columns = self._size[0] if self._size is not None else self.application.output.get_size().columns
        renderable = view_session(self.session, columns, self.machine.themes)
        return ANSI(render_to_ansi(renderable, columns, self.machine.theme).rstrip("\n"))

    async def _pump(self) -> None:
        while True:
            event = await self.events.get()
            transition = await asyncio.to_thread(self.machine.dispatch, event)
            self.application.invalidate()
            if transition.exit_requested:
                self.application.exit()
                return

    def _on_pump_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("tui.dispatch_failed screen={}", self.session.screen)
            if self.application.is_running:
                self.application.exit(exception=exc)

    async def run_async(self) -> None:
        logger.info("tui.start screen={}", self.session.screen)
        pump = asyncio.create_task(self._pump())
        pump.add_done_callback(self._on_pump_done)
        try:
            await self.application.run_async()
        finally:
            pump.cancel()
            logger.info("tui.stop")

    def run(self) -> None:
        asyncio.run(self.run_async())


def build_terminal_app(config: BackendConfiguration, store: ConfigStore, **app_kwargs: Any) -> TerminalApp:
    session = Session.start(config)
    machine = SessionMachine(session, store=store, orchestrator=RequestOrchestrator())
    return TerminalApp(machine, **app_kwargs)
