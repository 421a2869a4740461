"""ticket-summary - questionnaire-driven ticket drafting in the terminal."""

__version__ = "0.1.0"
