"""Shared domain types and error classes for document artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PDFAssistantError(ValueError):
    """Base class for user-facing failures; the message is shown as-is."""


class InputRejectedError(PDFAssistantError):
    """Raised when an upload has the wrong type or size."""


class ExtractionFailedError(PDFAssistantError):
    """Raised when the PDF cannot be read or parsed."""


class GenerationFailedError(PDFAssistantError):
    """Raised when the hosted model call fails or returns an unusable payload."""


class NoDocumentError(PDFAssistantError):
    """Raised when generation is requested before a document is loaded."""


class ArtifactKind(str, Enum):
    SUMMARY = "summary"
    STRATEGY = "strategy"
    QUIZ = "quiz"


class SummaryLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    DETAILED = "detailed"

    @classmethod
    def coerce(cls, value: object) -> "SummaryLength":
        """Map any value onto a known length; unknown values fall back to MEDIUM."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.MEDIUM


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "Multiple Choice"
    TRUE_FALSE = "True/False"
    SHORT_ANSWER = "Short Answer"


class AppState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    READY = "ready"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Document:
    """Extracted PDF text plus upload metadata."""

    name: str
    byte_size: int
    extracted_text: str


@dataclass(frozen=True)
class QuizQuestion:
    """One quiz item. ``options`` is None for Short Answer questions."""

    question: str
    type: QuestionType
    answer: str
    options: tuple[str, ...] | None = None

    @property
    def has_choices(self) -> bool:
        return self.type in (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE) and bool(self.options)


@dataclass
class GenerationState:
    """Per-artifact generation record. Only ArtifactController mutates it."""

    content: str | list[QuizQuestion] | None = None
    pending: int = 0
    last_error: str | None = None
    succeeded_once: bool = False
    failed_once: bool = False

    @property
    def in_flight(self) -> bool:
        return self.pending > 0


@dataclass(frozen=True)
class GenerationView:
    """Read-only projection of a GenerationState handed to presentation."""

    kind: ArtifactKind
    content: str | tuple[QuizQuestion, ...] | None
    in_flight: bool
    last_error: str | None

    @property
    def has_content(self) -> bool:
        return bool(self.content)


@dataclass(frozen=True)
class GenerationOptions:
    summary_length: SummaryLength = SummaryLength.MEDIUM

    @classmethod
    def from_mapping(cls, options: dict[str, object] | None) -> "GenerationOptions":
        """Build options from a loose mapping; keys other than summary_length are ignored."""
        opts = options or {}
        return cls(summary_length=SummaryLength.coerce(opts.get("summary_length")))
