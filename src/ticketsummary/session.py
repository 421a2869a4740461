"""Session state for one run of the interactive tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum

from .catalog import DOCUMENT_TYPES, DocumentType
from .config import BackendConfiguration

MIN_VIEWPORT_WIDTH = 40
MIN_VIEWPORT_HEIGHT = 10
VIEWPORT_MARGIN_WIDTH = 4
VIEWPORT_MARGIN_HEIGHT = 8


class Screen(StrEnum):
    PICK_BACKEND = "Model Select"
    CONFIGURE_BACKEND = "API Config"
    SELECT_DOCUMENT_TYPE = "Selection"
    ANSWER_QUESTIONS = "Question"
    SHOW_RESULT = "Display"
    PICK_THEME = "Style Select"


class TopJump(Enum):
    """Progress of the two-press jump-to-top gesture on the result screen."""

    DISARMED = "disarmed"
    ARMED = "armed"


class FormField(int, Enum):
    TARGET = 0
    MODEL_NAME = 1
    SAVE = 2


@dataclass
class ConfigForm:
    """Field values of the backend configuration screen."""

    target: str = ""
    model_name: str = ""
    save: bool = True
    focus: FormField = FormField.TARGET

    def cycle(self, step: int) -> None:
        self.focus = FormField((self.focus + step) % len(FormField))


@dataclass
class Viewport:
    width: int = 76
    height: int = MIN_VIEWPORT_HEIGHT
    offset: int = 0

    def resize(self, columns: int, rows: int) -> None:
        self.width = max(MIN_VIEWPORT_WIDTH, columns - VIEWPORT_MARGIN_WIDTH)
        self.height = max(MIN_VIEWPORT_HEIGHT, rows - VIEWPORT_MARGIN_HEIGHT)

    def max_offset(self, total_lines: int) -> int:
        return max(0, total_lines - self.height)

    def scroll_to(self, offset: int, total_lines: int) -> None:
        self.offset = min(max(0, offset), self.max_offset(total_lines))


@dataclass
class Session:
    """Single mutable state container, owned by the event-handling path."""

    config: BackendConfiguration
    screen: Screen = Screen.SELECT_DOCUMENT_TYPE
    document_types: tuple[DocumentType, ...] = DOCUMENT_TYPES
    backend_keys: list[str] = field(default_factory=list)
    document_cursor: int = 0
    backend_cursor: int = 0
    theme_cursor: int = 0
    theme_index: int = 0
    document_type: DocumentType | None = None
    answers: list[str] = field(default_factory=list)
    question_index: int = 0
    input_buffer: str = ""
    document: str = ""
    raw_response: str = ""
    rendered: str = ""
    viewport: Viewport = field(default_factory=Viewport)
    top_jump: TopJump = TopJump.DISARMED
    form: ConfigForm = field(default_factory=ConfigForm)
    busy: bool = False
    notice: str = ""

    @classmethod
    def start(cls, config: BackendConfiguration) -> Session:
        keys = config.backend_keys()
        screen = Screen.SELECT_DOCUMENT_TYPE if config.active is not None else Screen.PICK_BACKEND
        cursor = keys.index(config.active_model) if config.active_model in keys else 0
        return cls(config=config, screen=screen, backend_keys=keys, backend_cursor=cursor)

    @property
    def current_question(self) -> str:
        if self.document_type is None:
            return ""
        return self.document_type.questions[self.question_index]

    @property
    def rendered_lines(self) -> list[str]:
        return self.rendered.rstrip("\n").split("\n") if self.rendered else []

    @property
    def total_lines(self) -> int:
        return len(self.rendered_lines)

    @property
    def is_text_entry(self) -> bool:
        return self.screen in (Screen.ANSWER_QUESTIONS, Screen.CONFIGURE_BACKEND)
