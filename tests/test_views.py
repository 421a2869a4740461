from ticketsummary.catalog import DOCUMENT_TYPES
from ticketsummary.config import BackendConfiguration
from ticketsummary.render import STYLE_THEMES, render_to_ansi, strip_styles
from ticketsummary.session import Screen, Session
from ticketsummary.views import header, view_session


def _plain(session: Session, width: int = 80) -> str:
    return strip_styles(render_to_ansi(view_session(session, width, STYLE_THEMES), width, STYLE_THEMES[0]))


def test_header_fills_row_with_rule() -> None:
    text = header("Select Report Type", 40)

    assert text.cell_len == 40
    assert text.plain.startswith("  Select Report Type /")


def test_selection_screen_marks_cursor_and_status_bar() -> None:
    session = Session.start(BackendConfiguration(active_model="ollama"))
    session.document_cursor = 1

    plain = _plain(session)

    assert "> Pull Request/Commit Message" in plain
    assert "  Incident Response" in plain
    assert "Selection" in plain
    assert "Model: ollama" in plain


def test_question_screen_shows_progress_and_buffer() -> None:
    session = Session.start(BackendConfiguration(active_model="ollama"))
    session.screen = Screen.ANSWER_QUESTIONS
    session.document_type = DOCUMENT_TYPES[1]
    session.answers = ["", "", ""]
    session.question_index = 1
    session.input_buffer = "because"

    plain = _plain(session)

    assert "Pull Request/Commit Message - Question 2/3" in plain
    assert "Why did you do it?" in plain
    assert "> because" in plain


def test_configure_screen_masks_api_key() -> None:
    session = Session.start(BackendConfiguration(active_model="openai"))
    session.screen = Screen.CONFIGURE_BACKEND
    session.form.target = "sk-secret"

    plain = _plain(session)

    assert "sk-secret" not in plain
    assert "> *********" in plain
    assert "[x] Save configuration to config file" in plain


def test_result_screen_shows_visible_slice_only() -> None:
    session = Session.start(BackendConfiguration(active_model="ollama"))
    session.screen = Screen.SHOW_RESULT
    session.rendered = "".join(f"line {index}\n" for index in range(30))
    session.viewport.offset = 5

    plain = _plain(session)

    assert "line 5" in plain
    assert "line 14" in plain
    assert "line 4 " not in plain
    assert "line 15" not in plain


def test_notice_is_shown_in_status_bar() -> None:
    session = Session.start(BackendConfiguration(active_model="ollama"))
    session.notice = "Copied response to clipboard"

    assert "Copied response to clipboard" in _plain(session, 100)
