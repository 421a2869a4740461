"""ticket-summary CLI bootstrap."""

from __future__ import annotations

import typer
from loguru import logger

from .config import ConfigStore, load_backend_configuration, load_settings
from .logging_utils import LogFile
from .tui import build_terminal_app

app = typer.Typer(
    name="ticketsummary",
    help="Draft tickets, pull requests and commit messages with an LLM backend.",
    add_completion=False,
)


@app.command()
def run() -> None:
    """Start the interactive questionnaire."""
    settings = load_settings()
    home = settings.resolve_home()
    log_file = LogFile(home / "logs", level=settings.log_level)
    try:
        log_file.open()
        store = ConfigStore(home)
        config = load_backend_configuration(store)
        logger.info("startup.config path={} active={}", store.path, config.active_model or "-")
        build_terminal_app(config, store).run()
    except Exception as exc:
        logger.exception("startup.failed")
        typer.echo(f"Error starting program: {exc}", err=True)
        raise typer.Exit(1) from exc
    finally:
        log_file.close()


if __name__ == "__main__":
    app()
