"""Rich renderables for each screen of the session."""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

from .config import BackendSettings, ProviderFamily
from .render import StyleTheme
from .session import FormField, Screen, Session

PROVIDER_LABELS: dict[ProviderFamily, str] = {
    ProviderFamily.OPENAI: "OpenAI",
    ProviderFamily.CLAUDE: "Anthropic (Claude)",
    ProviderFamily.LOCAL: "Ollama (Local)",
}
MODEL_HINTS: dict[ProviderFamily, str] = {
    ProviderFamily.OPENAI: "For OpenAI: Examples include gpt-3.5-turbo, gpt-4, gpt-4-turbo",
    ProviderFamily.CLAUDE: (
        "For Claude: Examples include claude-3-opus-20240229, claude-3-sonnet-20240229, claude-3-haiku-20240307"
    ),
    ProviderFamily.LOCAL: "For Ollama: Use exactly the model name shown in 'ollama list'",
}
MENU_HELP = "Esc to return to menu • q to quit"


def header(title: str, width: int, *, style: str = "header") -> Text:
    """Title followed by a rule of slashes filling the row."""
    text = Text(f"  {title} ", style=style)
    remaining = max(0, width - text.cell_len)
    text.append("/" * remaining, style="header.rule")
    return text


def choice_list(labels: Sequence[str], cursor: int) -> Text:
    text = Text()
    for index, label in enumerate(labels):
        if index == cursor:
            text.append(f"> {label}\n", style="highlight")
        else:
            text.append(f"  {label}\n", style="help")
    return text


def help_lines(*lines: str) -> Text:
    return Text("\n".join(lines), style="help")


def backend_label(key: str, settings: BackendSettings) -> str:
    provider = PROVIDER_LABELS.get(settings.provider, str(settings.provider))
    if key not in ("openai", "anthropic", "ollama"):
        label = f"{key} ({provider})"
    elif settings.is_configured:
        label = f"{provider} - {settings.model_name}"
    else:
        label = f"{provider} (not configured)"
    if settings.is_configured:
        label += " ✓"
    return label


def view_select_document_type(session: Session, width: int) -> RenderableType:
    return Group(
        header("Select Report Type", width),
        Text(),
        choice_list([document_type.name for document_type in session.document_types], session.document_cursor),
        help_lines(
            "Use ↑/↓ or j/k to navigate • Enter to select",
            f"Current model: {session.config.active_model or '(none)'}",
            "~ to change model • Ctrl+t to change theme • q to quit",
        ),
    )


def view_answer_questions(session: Session, width: int) -> RenderableType:
    document_type = session.document_type
    if document_type is None:
        return Group(header("No report type selected", width, style="header.error"))
    title = f"{document_type.name} - Question {session.question_index + 1}/{len(document_type.questions)}"
    return Group(
        header(title, width),
        Text(),
        Text(session.current_question, style="bold highlight"),
        Text(),
        Text(f"> {session.input_buffer}"),
        Text(),
        help_lines("Enter to submit • Ctrl+s to skip", "Esc to return to menu • Ctrl+c to quit"),
    )


def view_show_result(session: Session, width: int) -> RenderableType:
    viewport = session.viewport
    visible = session.rendered_lines[viewport.offset : viewport.offset + viewport.height]
    body = Text.from_ansi("\n".join(visible), no_wrap=True, overflow="crop")
    parts: list[RenderableType] = [header("Generated Output", width), Text()]
    if session.busy:
        parts.append(Spinner("dots", text=Text("Waiting for the backend...", style="highlight"), style="highlight"))
    parts.append(
        Panel(body, box=box.ROUNDED, border_style="highlight", padding=(0, 1), width=viewport.width + 4)
    )
    last_visible = min(viewport.offset + viewport.height, session.total_lines)
    position = f"{viewport.offset + 1}-{last_visible}/{session.total_lines}"
    parts.append(
        help_lines(
            f"↑/↓: Scroll • PgUp/PgDn: Page • gg/G: Top/Bottom • Ctrl+y to copy • {position}",
            MENU_HELP,
        )
    )
    return Group(*parts)


def view_configure_backend(session: Session, width: int) -> RenderableType:
    active = session.config.active
    if active is None:
        return Group(header("No backend selected", width, style="header.error"))
    form = session.form
    if active.is_local:
        title = f"Configure Ollama: {session.config.active_model}"
        target_label = "API Base URL:"
        target_value = form.target
        target_hint = "For Ollama: Use http://localhost:11434 (without path segments)"
    else:
        provider = PROVIDER_LABELS.get(active.provider, str(active.provider))
        title = f"Configure {provider} API"
        target_label = "API Key:"
        target_value = "*" * len(form.target)
        target_hint = ""

    def label(text: str, field: FormField) -> Text:
        return Text(text, style="highlight" if form.focus == field else "")

    checkbox = "[x]" if form.save else "[ ]"
    parts: list[RenderableType] = [
        header(title, width),
        Text(),
        label(target_label, FormField.TARGET),
        Text(f"> {target_value}"),
    ]
    if target_hint:
        parts.append(help_lines(target_hint))
    parts.extend([
        Text(),
        label("Model Name:", FormField.MODEL_NAME),
        Text(f"> {form.model_name}"),
        help_lines(MODEL_HINTS[active.provider]),
        Text(),
        label(f"{checkbox} Save configuration to config file", FormField.SAVE),
        Text(),
        help_lines(
            "↑/↓: Cycle through fields • Space: Toggle checkbox • Enter: Confirm",
            "Esc to return to menu • Ctrl+c to quit",
        ),
    ])
    return Group(*parts)


def view_pick_backend(session: Session, width: int) -> RenderableType:
    config = session.config
    labels = [backend_label(key, config.models[key]) for key in session.backend_keys]
    lines = [
        "Use ↑/↓ or j/k to navigate • Enter to select",
        "c to configure provider • Ctrl+t to change theme",
    ]
    active = config.active
    if active is not None:
        lines.append(f"Current model: {config.active_model} - {active.model_name}")
    lines.append(MENU_HELP)
    return Group(
        header("Select AI Provider", width),
        Text(),
        choice_list(labels, session.backend_cursor),
        help_lines(*lines),
    )


def view_pick_theme(session: Session, width: int, themes: Sequence[StyleTheme]) -> RenderableType:
    return Group(
        header("Select Style Theme", width),
        Text(),
        choice_list([theme.name for theme in themes], session.theme_cursor),
        help_lines("Use ↑/↓ to navigate • Enter to select", MENU_HELP),
    )


def status_bar(session: Session, width: int) -> Text:
    bar = Text(f" {session.screen} ", style="status.mode")
    bar.append(f" Model: {session.config.active_model or '(none)'}", style="status.bar")
    if session.notice:
        bar.append(f" • {session.notice}", style="status.bar")
    remaining = max(0, width - bar.cell_len)
    bar.append(" " * remaining, style="status.bar")
    bar.truncate(width)
    return bar


def view_session(session: Session, width: int, themes: Sequence[StyleTheme]) -> RenderableType:
    screen = session.screen
    if screen == Screen.SELECT_DOCUMENT_TYPE:
        content = view_select_document_type(session, width)
    elif screen == Screen.ANSWER_QUESTIONS:
        content = view_answer_questions(session, width)
    elif screen == Screen.SHOW_RESULT:
        content = view_show_result(session, width)
    elif screen == Screen.CONFIGURE_BACKEND:
        content = view_configure_backend(session, width)
    elif screen == Screen.PICK_BACKEND:
        content = view_pick_backend(session, width)
    else:
        content = view_pick_theme(session, width, themes)
    return Group(content, Text(), status_bar(session, width))
