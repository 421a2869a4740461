"""Screen state machine for the interactive session."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from .clipboard import SystemClipboard
from .config import DEFAULT_LOCAL_BASE_URL, DEFAULT_MODEL_NAMES, ConfigStore
from .document import build_document, combine_prompt
from .errors import ClipboardError, PersistenceError, RenderError
from .orchestrator import RequestOrchestrator, RequestOutcome
from .render import STYLE_THEMES, MarkdownRenderer, StyleTheme, strip_styles
from .session import ConfigForm, FormField, Screen, Session, TopJump

UP_KEYS = frozenset({"up", "k"})
DOWN_KEYS = frozenset({"down", "j"})
CONFIRM_KEYS = frozenset({"enter", " "})
ERASE_KEYS = frozenset({"backspace", "delete"})


@dataclass(frozen=True)
class KeyPress:
    key: str
    text: str = ""


@dataclass(frozen=True)
class Resize:
    columns: int
    rows: int


Event = KeyPress | Resize


@dataclass(frozen=True)
class Transition:
    """Screen reached after handling one event."""

    screen: Screen
    exit_requested: bool = False


def move_cursor(cursor: int, step: int, length: int) -> int:
    if length <= 0:
        return cursor
    return min(max(cursor + step, 0), length - 1)


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def edit_text(value: str, key: str, text: str = "") -> str:
    """Apply one key press to a free-text value."""
    if key in ERASE_KEYS:
        return value[:-1]
    if key == "paste":
        return value + text
    if is_printable(key):
        return value + key
    return value


class SessionMachine:
    """Dispatches terminal events to the handler of the active screen."""

    def __init__(
        self,
        session: Session,
        *,
        store: ConfigStore,
        orchestrator: RequestOrchestrator,
        clipboard: SystemClipboard | None = None,
        themes: tuple[StyleTheme, ...] = STYLE_THEMES,
    ) -> None:
        self.session = session
        self.store = store
        self.orchestrator = orchestrator
        self.clipboard = clipboard or SystemClipboard()
        self.themes = themes
        self.renderer = MarkdownRenderer(themes[session.theme_index])
        self._handlers: dict[Screen, Callable[[str, str], None]] = {
            Screen.PICK_BACKEND: self._on_pick_backend,
            Screen.CONFIGURE_BACKEND: self._on_configure_backend,
            Screen.SELECT_DOCUMENT_TYPE: self._on_select_document_type,
            Screen.ANSWER_QUESTIONS: self._on_answer_questions,
            Screen.SHOW_RESULT: self._on_show_result,
            Screen.PICK_THEME: self._on_pick_theme,
        }

    @property
    def theme(self) -> StyleTheme:
        return self.themes[self.session.theme_index]

    def dispatch(self, event: Event) -> Transition:
        before = self.session.screen
        if isinstance(event, Resize):
            transition = self.handle_resize(event.columns, event.rows)
        else:
            transition = self.handle_key(event.key, event.text)
        if transition.screen != before:
            logger.debug("session.transition from={} to={}", before, transition.screen)
        return transition

    def handle_key(self, key: str, text: str = "") -> Transition:
        session = self.session
        session.notice = ""
        if key != "g":
            session.top_jump = TopJump.DISARMED

        if key == "ctrl+c" or (key == "q" and not session.is_text_entry):
            logger.info("session.quit screen={}", session.screen)
            return Transition(session.screen, exit_requested=True)
        if key == "esc":
            session.screen = Screen.SELECT_DOCUMENT_TYPE
            return Transition(session.screen)
        if key == "~":
            self._enter_pick_backend()
            return Transition(session.screen)
        if key == "ctrl+t":
            self._enter_pick_theme()
            return Transition(session.screen)

        self._handlers[session.screen](key, text)
        return Transition(session.screen)

    def handle_resize(self, columns: int, rows: int) -> Transition:
        session = self.session
        session.viewport.resize(columns, rows)
        if session.screen == Screen.SHOW_RESULT and session.document and not session.busy:
            session.rendered = self._render(session.document)
            session.viewport.scroll_to(session.viewport.offset, session.total_lines)
        return Transition(session.screen)

    # -- screens -----------------------------------------------------------------

    def _on_pick_backend(self, key: str, _text: str) -> None:
        session = self.session
        if key in UP_KEYS:
            session.backend_cursor = move_cursor(session.backend_cursor, -1, len(session.backend_keys))
        elif key in DOWN_KEYS:
            session.backend_cursor = move_cursor(session.backend_cursor, 1, len(session.backend_keys))
        elif key in CONFIRM_KEYS:
            self._activate_backend()
            self._persist()
            active = session.config.active
            if active is not None and active.is_configured:
                session.screen = Screen.SELECT_DOCUMENT_TYPE
            else:
                self._enter_configure()
        elif key == "c":
            self._activate_backend()
            self._enter_configure()

    def _on_configure_backend(self, key: str, text: str) -> None:
        form = self.session.form
        if key == "up":
            form.cycle(-1)
        elif key == "down":
            form.cycle(1)
        elif key == "enter":
            self._commit_form()
        elif form.focus == FormField.SAVE:
            if key == " ":
                form.save = not form.save
        elif form.focus == FormField.TARGET:
            form.target = edit_text(form.target, key, text)
        else:
            form.model_name = edit_text(form.model_name, key, text)

    def _on_select_document_type(self, key: str, _text: str) -> None:
        session = self.session
        if key in UP_KEYS:
            session.document_cursor = move_cursor(session.document_cursor, -1, len(session.document_types))
        elif key in DOWN_KEYS:
            session.document_cursor = move_cursor(session.document_cursor, 1, len(session.document_types))
        elif key in CONFIRM_KEYS:
            document_type = session.document_types[session.document_cursor]
            session.document_type = document_type
            session.answers = [""] * len(document_type.questions)
            session.question_index = 0
            session.input_buffer = ""
            session.screen = Screen.ANSWER_QUESTIONS

    def _on_answer_questions(self, key: str, text: str) -> None:
        session = self.session
        if key == "enter":
            self._commit_answer(session.input_buffer.strip())
        elif key == "ctrl+s":
            self._commit_answer("")
        else:
            session.input_buffer = edit_text(session.input_buffer, key, text)

    def _on_show_result(self, key: str, _text: str) -> None:
        session = self.session
        viewport = session.viewport
        total = session.total_lines
        if key in UP_KEYS:
            viewport.scroll_to(viewport.offset - 1, total)
        elif key in DOWN_KEYS:
            viewport.scroll_to(viewport.offset + 1, total)
        elif key == "pgup":
            viewport.scroll_to(viewport.offset - viewport.height, total)
        elif key == "pgdown":
            viewport.scroll_to(viewport.offset + viewport.height, total)
        elif key == "G":
            viewport.scroll_to(viewport.max_offset(total), total)
        elif key == "g":
            if session.top_jump is TopJump.ARMED:
                viewport.offset = 0
                session.top_jump = TopJump.DISARMED
            else:
                session.top_jump = TopJump.ARMED
        elif key == "ctrl+y":
            self._copy_response()

    def _on_pick_theme(self, key: str, _text: str) -> None:
        session = self.session
        if key in UP_KEYS:
            session.theme_cursor = move_cursor(session.theme_cursor, -1, len(self.themes))
        elif key in DOWN_KEYS:
            session.theme_cursor = move_cursor(session.theme_cursor, 1, len(self.themes))
        elif key in CONFIRM_KEYS:
            session.theme_index = session.theme_cursor
            self.renderer = MarkdownRenderer(self.theme)
            if session.document:
                session.rendered = self._render(session.document)
            logger.info("theme.applied name={}", self.theme.name)
            session.screen = Screen.SELECT_DOCUMENT_TYPE

    # -- transitions -------------------------------------------------------------

    def _enter_pick_backend(self) -> None:
        session = self.session
        if session.config.active_model in session.backend_keys:
            session.backend_cursor = session.backend_keys.index(session.config.active_model)
        session.screen = Screen.PICK_BACKEND

    def _enter_pick_theme(self) -> None:
        self.session.theme_cursor = self.session.theme_index
        self.session.screen = Screen.PICK_THEME

    def _enter_configure(self) -> None:
        session = self.session
        active = session.config.active
        if active is None:
            self._enter_pick_backend()
            return
        target = active.api_base_url if active.is_local else active.api_key
        session.form = ConfigForm(target=target, model_name=active.model_name)
        session.screen = Screen.CONFIGURE_BACKEND

    def _activate_backend(self) -> None:
        session = self.session
        session.config.active_model = session.backend_keys[session.backend_cursor]
        logger.info("backend.selected name={}", session.config.active_model)

    def _commit_form(self) -> None:
        session = self.session
        name = session.config.active_model
        current = session.config.active
        if current is None:
            self._enter_pick_backend()
            return

        target = session.form.target.strip()
        model_name = session.form.model_name.strip() or DEFAULT_MODEL_NAMES[current.provider]
        if current.is_local:
            updated = current.model_copy(
                update={"api_base_url": target or DEFAULT_LOCAL_BASE_URL, "model_name": model_name, "api_key": ""}
            )
        else:
            if not target:
                session.notice = "An API key is required for this provider"
                return
            updated = current.model_copy(update={"api_key": target, "model_name": model_name, "api_base_url": ""})
            logger.info("backend.configured name={} api_key_length={} model={}", name, len(target), model_name)

        session.config.models[name] = updated
        if session.form.save:
            self._persist()
        session.screen = Screen.SELECT_DOCUMENT_TYPE

    def _commit_answer(self, answer: str) -> None:
        session = self.session
        session.answers[session.question_index] = answer
        session.input_buffer = ""
        if session.question_index < len(session.answers) - 1:
            session.question_index += 1
            return
        self._submit()

    def _submit(self) -> None:
        session = self.session
        document_type = session.document_type
        if document_type is None:
            return
        document = build_document(document_type, session.answers)
        session.document = document
        session.raw_response = ""

        name = session.config.active_model
        settings = session.config.active
        if settings is None:
            logger.warning("request.skipped reason=no_active_backend")
            session.notice = "Select a backend before submitting"
            self._enter_pick_backend()
            return
        if not settings.is_configured:
            logger.warning("request.skipped reason=backend_not_configured backend={}", name)
            self._enter_configure()
            return

        session.viewport.offset = 0
        session.top_jump = TopJump.DISARMED
        session.screen = Screen.SHOW_RESULT
        session.busy = True
        try:
            outcome = self.orchestrator.submit(
                name,
                settings,
                combine_prompt(document_type, document),
                document,
                on_start=self._show_placeholder,
            )
        finally:
            session.busy = False
        self._apply_outcome(outcome)

    def _show_placeholder(self, markdown: str) -> None:
        self.session.rendered = self._render(markdown)

    def _apply_outcome(self, outcome: RequestOutcome) -> None:
        session = self.session
        session.raw_response = outcome.text
        session.document = outcome.document
        session.rendered = self._render(outcome.document)
        session.viewport.offset = 0
        session.screen = Screen.SHOW_RESULT

    def _copy_response(self) -> None:
        session = self.session
        if not session.raw_response:
            session.notice = "Nothing to copy yet"
            return
        try:
            self.clipboard.write_all(strip_styles(session.raw_response))
        except ClipboardError:
            logger.exception("clipboard.copy_failed")
            session.notice = "Failed to copy to clipboard"
            return
        session.notice = "Copied response to clipboard"

    def _persist(self) -> None:
        try:
            self.store.save(self.session.config)
        except PersistenceError as exc:
            logger.opt(exception=exc).error("config.save_failed path={}", self.store.path)
            self.session.notice = f"Failed to save config: {exc}"

    def _render(self, text: str) -> str:
        try:
            return self.renderer.render(text, self.session.viewport.width)
        except RenderError:
            logger.exception("render.failed width={}", self.session.viewport.width)
            return text
