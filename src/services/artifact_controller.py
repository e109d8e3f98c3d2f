"""
Artifact store and generation lifecycle for one uploaded document.

Each artifact kind moves through Idle -> Generating -> (Succeeded | Failed)
independently of the others, and every new request re-enters Generating.
Requests for the same kind are neither queued nor de-duplicated: whichever
request resumes last overwrites the state, and superseded requests are not
cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from services.artifact_types import (
    AppState,
    ArtifactKind,
    Document,
    ExtractionFailedError,
    GenerationState,
    GenerationView,
    InputRejectedError,
    NoDocumentError,
    QuizQuestion,
)
from services.document_processor import PDFProcessor
from services.prompt_builder import build_prompt
from services.quiz_grading import QuizSession

LOGGER = logging.getLogger("pdf_assistant.lifecycle")


class GenerationClient(Protocol):
    async def generate(self, prompt: str, kind: ArtifactKind) -> str | list[QuizQuestion]: ...


def failure_message(kind: ArtifactKind) -> str:
    return f"Failed to generate {ArtifactKind(kind).value}. Please try again."


class ArtifactController:
    """Owns the document, every GenerationState and the QuizSession."""

    def __init__(self, client: GenerationClient, processor: PDFProcessor | None = None) -> None:
        self._client = client
        self._processor = processor or PDFProcessor()
        self._epoch = 0
        self.reset()

    # ---------- Session ----------

    def reset(self) -> None:
        """Drop the document and all generated artifacts, back to Idle."""
        self.document: Document | None = None
        self.upload_error: str | None = None
        self.quiz_session: QuizSession | None = None
        self._parsing = False
        self._extraction_failed = False
        self._states: dict[ArtifactKind, GenerationState] = {k: GenerationState() for k in ArtifactKind}
        self._epoch += 1
        LOGGER.info("session.reset")

    @property
    def app_state(self) -> AppState:
        """Coarse application state, derived from document and artifact history."""
        if self._parsing:
            return AppState.PARSING
        if self.document is None:
            return AppState.ERROR if self._extraction_failed else AppState.IDLE
        states = self._states.values()
        if any(s.succeeded_once for s in states):
            return AppState.SUCCESS
        if any(s.failed_once for s in states):
            return AppState.ERROR
        return AppState.READY

    async def load_document(self, name: str, mime_type: str, data: bytes) -> Document | None:
        """
        Validate and extract an upload.

        Returns:
            The new Document, or None when the upload was rejected or could
            not be parsed; ``upload_error`` then holds the message to show.
        """
        try:
            self._processor.validate_upload(name, mime_type, len(data or b""))
        except InputRejectedError as e:
            self.upload_error = str(e)
            return None

        self.reset()
        self._parsing = True
        LOGGER.info("document.parse(name=%s, bytes=%s)", name, len(data))
        try:
            text = await asyncio.to_thread(self._processor.extract_text_from_bytes, data)
        except ExtractionFailedError as e:
            LOGGER.exception("document.parse failed (name=%s)", name)
            self._extraction_failed = True
            self.upload_error = str(e)
            return None
        finally:
            self._parsing = False

        self.document = Document(name=name, byte_size=len(data), extracted_text=text)
        LOGGER.info("document.ready(name=%s, chars=%s)", name, len(text))
        return self.document

    # ---------- Generation ----------

    def view(self, kind: ArtifactKind) -> GenerationView:
        kind = ArtifactKind(kind)
        state = self._states[kind]
        content = state.content
        if isinstance(content, list):
            content = tuple(content)
        return GenerationView(kind=kind, content=content, in_flight=state.in_flight, last_error=state.last_error)

    def needs_generation(self, kind: ArtifactKind) -> bool:
        """True when a kind has never been attempted: no success, no failure, nothing pending."""
        state = self._states[ArtifactKind(kind)]
        return (
            self.document is not None
            and not state.succeeded_once
            and not state.failed_once
            and not state.in_flight
        )

    def _begin(self, kind: ArtifactKind) -> None:
        state = self._states[kind]
        state.last_error = None
        state.pending += 1
        LOGGER.info("generate.begin(kind=%s, pending=%s)", kind.value, state.pending)

    def _succeed(self, kind: ArtifactKind, content: str | list[QuizQuestion]) -> None:
        state = self._states[kind]
        state.pending = max(0, state.pending - 1)
        state.content = content
        state.last_error = None
        state.succeeded_once = True
        if kind is ArtifactKind.QUIZ:
            self.quiz_session = QuizSession(questions=tuple(content))
        LOGGER.info("generate.success(kind=%s, pending=%s)", kind.value, state.pending)

    def _fail(self, kind: ArtifactKind) -> None:
        state = self._states[kind]
        state.pending = max(0, state.pending - 1)
        state.last_error = failure_message(kind)
        state.failed_once = True
        LOGGER.info("generate.failed(kind=%s, pending=%s)", kind.value, state.pending)

    async def generate(self, kind: ArtifactKind, options: dict[str, Any] | None = None) -> GenerationView:
        """
        Run one generation request for ``kind`` and apply its outcome.

        Failures are recorded on the kind's state rather than raised; the
        previous content is kept.

        Raises:
            NoDocumentError: If no document has been loaded.
        """
        kind = ArtifactKind(kind)
        if self.document is None:
            raise NoDocumentError("No PDF content to analyze.")
        prompt = build_prompt(self.document.extracted_text, kind, options)
        epoch = self._epoch
        self._begin(kind)
        try:
            result = await self._client.generate(prompt, kind)
        except Exception:
            if epoch != self._epoch:
                LOGGER.info("generate.discarded(kind=%s) session was reset", kind.value)
                return self.view(kind)
            LOGGER.exception("generate.error(kind=%s)", kind.value)
            self._fail(kind)
        else:
            if epoch != self._epoch:
                LOGGER.info("generate.discarded(kind=%s) session was reset", kind.value)
                return self.view(kind)
            self._succeed(kind, result)
        return self.view(kind)
