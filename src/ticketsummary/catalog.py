"""Fixed catalog of questionnaire templates."""

from __future__ import annotations

from dataclasses import dataclass

_LENGTH_GUIDANCE = (
    "The output of your response should be a between 2 sentences and several paragraphs, "
    "depending on the amount of context offered. It does not need to restate the rubric questions."
)


@dataclass(frozen=True)
class DocumentType:
    """A named questionnaire with the instruction sent along with its answers."""

    name: str
    questions: tuple[str, ...]
    instruction: str


DOCUMENT_TYPES: tuple[DocumentType, ...] = (
    DocumentType(
        name="Incident Response",
        questions=(
            "What happened?",
            "What did you do?",
            "Why did you do it?",
            "Did it work? If not, what was the result?",
            "What did you learn?",
        ),
        instruction=(
            "Using the following text, craft an informative and detailed work note for an incident response. "
            f"{_LENGTH_GUIDANCE} Ensure clarity and conciseness, without referring explicitly to "
            "'the incident response'"
        ),
    ),
    DocumentType(
        name="Pull Request/Commit Message",
        questions=(
            "What did you do?",
            "Why did you do it?",
            "What did you learn?",
        ),
        instruction=(
            "Using the following text, craft an informative and detailed title and description for a commit "
            f"message or pull request. {_LENGTH_GUIDANCE} Ensure clarity and conciseness, without referring "
            "explicitly to 'the pull request' or 'the commit message'"
        ),
    ),
    DocumentType(
        name="Service Request",
        questions=(
            "What do you want?",
            "Why do you want it?",
            "How do you want it?",
            "What will you do with it?",
        ),
        instruction=(
            "Using the following text, craft an informative and detailed message for a service request that is "
            f"being made of a colleague. {_LENGTH_GUIDANCE} Ensure clarity and conciseness, without referring "
            "explicitly to 'the service request'"
        ),
    ),
    DocumentType(
        name="Development ticket",
        questions=(
            "Is this a feature, bug, or chore?",
            "What is the current behavior?",
            "How do you want to change, modify, or add behavior?",
            "Why do you want this change? What are the benefits?",
            "What are the acceptance criteria for this change?",
        ),
        instruction=(
            "Your task is to use the following text to create a detailed and informative ticket for a development "
            f"task. {_LENGTH_GUIDANCE} Ensure clarity and conciseness, without referring explicitly to 'the ticket' "
            "or 'the development task'"
        ),
    ),
)


def find_document_type(name: str) -> DocumentType | None:
    for document_type in DOCUMENT_TYPES:
        if document_type.name == name:
            return document_type
    return None
