"""Application-level exception types for ticket-summary."""

from __future__ import annotations


class TicketSummaryError(Exception):
    """Base exception for ticket-summary."""


class ConfigurationError(TicketSummaryError):
    """Raised when the active backend lacks a credential or address."""


class BackendError(TicketSummaryError):
    """Raised when a backend call fails or returns an unusable body."""


class ModelNotFoundError(BackendError):
    """Raised when a provider reports that the requested model does not exist."""

    def __init__(self, provider: str, model: str, known_models: tuple[str, ...]) -> None:
        self.provider = provider
        self.model = model
        self.known_models = known_models
        choices = ", ".join(known_models[:-1])
        if len(known_models) > 1:
            choices = f"{choices}, or {known_models[-1]}"
        else:
            choices = known_models[0] if known_models else ""
        super().__init__(f"{provider} API error: Model '{model}' not found. Try using {choices}")


class PersistenceError(TicketSummaryError):
    """Raised when the configuration cannot be read or written."""


class RenderError(TicketSummaryError):
    """Raised when Markdown cannot be rendered for the terminal."""


class ClipboardError(TicketSummaryError):
    """Raised when text cannot be written to the system clipboard."""
