"""Terminal rendering helpers built on Rich."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO

from rich.console import Console, RenderableType
from rich.markdown import Markdown
from rich.text import Text
from rich.theme import Theme

from .errors import RenderError


@dataclass(frozen=True)
class StyleTheme:
    """Colour set for one visual theme."""

    name: str
    base: str
    accent: str
    error: str
    success: str

    def rich_theme(self) -> Theme:
        return Theme({
            "header": f"bold {self.base}",
            "header.rule": self.base,
            "header.error": f"bold {self.error}",
            "highlight": self.base,
            "help": "color(241)",
            "success": self.success,
            "notice": self.error,
            "status.bar": "#C1C6B2 on #353533",
            "status.mode": f"bold #FFFDF5 on {self.base}",
            "markdown.h1": f"bold {self.base}",
            "markdown.h1.border": self.base,
            "markdown.h2": f"bold {self.base}",
            "markdown.h3": f"bold {self.base}",
            "markdown.hr": self.accent,
            "markdown.item.bullet": self.accent,
            "markdown.code": self.accent,
            "markdown.link": self.accent,
        })


STYLE_THEMES: tuple[StyleTheme, ...] = (
    StyleTheme(name="Default", base="#02BF87", accent="#7D56F4", error="#FF5F87", success="#02BF87"),
    StyleTheme(name="Ocean", base="#7571F9", accent="#00B4D8", error="#FF6B6B", success="#4ECDC4"),
    StyleTheme(name="Sunset", base="#FF6B6B", accent="#FFD166", error="#EF476F", success="#06D6A0"),
)


def _console(width: int, theme: StyleTheme) -> Console:
    return Console(
        file=StringIO(),
        width=width,
        force_terminal=True,
        color_system="truecolor",
        theme=theme.rich_theme(),
        legacy_windows=False,
        highlight=False,
    )


def render_to_ansi(renderable: RenderableType, width: int, theme: StyleTheme) -> str:
    """Print a Rich renderable to a string of ANSI-styled lines."""
    console = _console(width, theme)
    console.print(renderable)
    return console.file.getvalue()  # type: ignore[attr-defined]


class MarkdownRenderer:
    """Converts document Markdown to styled terminal text for one theme."""

    def __init__(self, theme: StyleTheme = STYLE_THEMES[0]) -> None:
        self.theme = theme

    def render(self, text: str, width: int) -> str:
        try:
            rendered = render_to_ansi(Markdown(text), width, self.theme)
        except Exception as exc:
            raise RenderError(f"failed to render markdown: {exc}") from exc
        return rendered.rstrip("\n") + "\n"


def strip_styles(text: str) -> str:
    """Remove terminal colour and style escape sequences."""
    return Text.from_ansi(text).plain
