"""Markdown document assembly for completed questionnaires."""

from __future__ import annotations

from collections.abc import Sequence

from .catalog import DocumentType

RESULT_SEPARATOR = "\n---\n\n"
RESULT_HEADING = "Ticket Summary"


def build_document(document_type: DocumentType, answers: Sequence[str]) -> str:
    """Render the questionnaire as Markdown, one numbered section per question.

    Skipped questions keep their heading and get no body.
    """
    parts = [f"# {document_type.name}\n\n"]
    for index, question in enumerate(document_type.questions):
        parts.append(f"## {index + 1}. {question}\n\n")
        answer = answers[index] if index < len(answers) else ""
        if answer:
            parts.append(f"{answer}\n\n")
    return "".join(parts)


def append_result(document: str, heading: str, body: str) -> str:
    return f"{document.rstrip()}\n{RESULT_SEPARATOR}## {heading}\n\n{body}\n"


def combine_prompt(document_type: DocumentType, document: str) -> str:
    return f"{document_type.instruction}\n\n{document}"


def processing_document(backend_name: str) -> str:
    return f"## Processing with {backend_name}\n\nGenerating summary..."


def error_document(backend_name: str, error: str) -> str:
    return f"## Error\n\nFailed to get response from {backend_name}: {error}\n\nCheck the log file for details."
