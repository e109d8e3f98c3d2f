"""Tests for ArtifactController — upload handling and the per-kind generation lifecycle."""

from __future__ import annotations

import asyncio

import pytest

from services.artifact_controller import ArtifactController, failure_message
from services.artifact_types import (
    AppState,
    ArtifactKind,
    ExtractionFailedError,
    GenerationFailedError,
    NoDocumentError,
)
from services.document_processor import PDFProcessor


class RecordingProcessor(PDFProcessor):
    def __init__(self, text: str = "Hello world", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls = 0

    def extract_text_from_bytes(self, data: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def ctrl(fake_client, sample_document) -> ArtifactController:
    controller = ArtifactController(fake_client, processor=RecordingProcessor())
    controller.document = sample_document
    return controller


class TestLoadDocument:
    def test_successful_upload_is_ready(self, fake_client):
        processor = RecordingProcessor(text="Hello world Foo bar")
        controller = ArtifactController(fake_client, processor=processor)
        doc = asyncio.run(controller.load_document("a.pdf", "application/pdf", b"%PDF-1.4"))
        assert doc is not None
        assert doc.extracted_text == "Hello world Foo bar"
        assert doc.byte_size == len(b"%PDF-1.4")
        assert controller.app_state is AppState.READY
        assert controller.upload_error is None

    def test_oversized_upload_rejected_without_extraction(self, fake_client):
        processor = RecordingProcessor()
        controller = ArtifactController(fake_client, processor=processor)
        doc = asyncio.run(controller.load_document("big.pdf", "application/pdf", bytes(60 * 1024 * 1024)))
        assert doc is None
        assert processor.calls == 0
        assert "50MB" in (controller.upload_error or "")
        assert controller.app_state is AppState.IDLE

    def test_wrong_type_rejected(self, fake_client):
        processor = RecordingProcessor()
        controller = ArtifactController(fake_client, processor=processor)
        assert asyncio.run(controller.load_document("a.txt", "text/plain", b"hi")) is None
        assert processor.calls == 0
        assert controller.upload_error == "Please upload a valid PDF file."

    def test_extraction_failure_is_terminal_error(self, fake_client):
        processor = RecordingProcessor(error=ExtractionFailedError("Failed to parse the PDF file."))
        controller = ArtifactController(fake_client, processor=processor)
        assert asyncio.run(controller.load_document("a.pdf", "application/pdf", b"junk")) is None
        assert controller.app_state is AppState.ERROR
        assert controller.upload_error == "Failed to parse the PDF file."
        assert controller.document is None

    def test_reset_returns_to_idle(self, ctrl, fake_client, sample_questions):
        fake_client.push(ArtifactKind.QUIZ, list(sample_questions))
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        ctrl.reset()
        assert ctrl.app_state is AppState.IDLE
        assert ctrl.document is None
        assert ctrl.quiz_session is None
        for kind in ArtifactKind:
            view = ctrl.view(kind)
            assert view.content is None and not view.in_flight and view.last_error is None


class TestGenerate:
    def test_requires_document(self, fake_client):
        controller = ArtifactController(fake_client)
        with pytest.raises(NoDocumentError):
            asyncio.run(controller.generate(ArtifactKind.SUMMARY))

    def test_success_sets_content(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.SUMMARY, "# Summary")
        view = asyncio.run(ctrl.generate(ArtifactKind.SUMMARY, {"summary_length": "short"}))
        assert view.content == "# Summary"
        assert not view.in_flight
        assert view.last_error is None
        assert ctrl.app_state is AppState.SUCCESS
        kind, prompt = fake_client.prompts[-1]
        assert kind is ArtifactKind.SUMMARY and "provide a short summary" in prompt

    def test_in_flight_while_pending_and_stale_content_kept(self, ctrl, fake_client):
        async def scenario():
            fake_client.push(ArtifactKind.STRATEGY, "old plan")
            await ctrl.generate(ArtifactKind.STRATEGY)
            gate = asyncio.Event()
            fake_client.push(ArtifactKind.STRATEGY, (gate, "new plan"))
            task = asyncio.create_task(ctrl.generate(ArtifactKind.STRATEGY))
            await asyncio.sleep(0)
            during = ctrl.view(ArtifactKind.STRATEGY)
            gate.set()
            after = await task
            return during, after

        during, after = asyncio.run(scenario())
        assert during.in_flight and during.content == "old plan"
        assert not after.in_flight and after.content == "new plan"

    def test_failure_keeps_content_and_sets_kind_message(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.STRATEGY, "plan v1")
        fake_client.push(ArtifactKind.STRATEGY, GenerationFailedError("boom"))
        asyncio.run(ctrl.generate(ArtifactKind.STRATEGY))
        view = asyncio.run(ctrl.generate(ArtifactKind.STRATEGY))
        assert view.content == "plan v1"
        assert view.last_error == "Failed to generate strategy. Please try again."
        assert not view.in_flight

    def test_unexpected_exception_recorded_as_failure(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.SUMMARY, RuntimeError("socket closed"))
        view = asyncio.run(ctrl.generate(ArtifactKind.SUMMARY))
        assert view.last_error == failure_message(ArtifactKind.SUMMARY)

    def test_new_request_clears_previous_error(self, ctrl, fake_client):
        async def scenario():
            fake_client.push(ArtifactKind.SUMMARY, GenerationFailedError("x"))
            await ctrl.generate(ArtifactKind.SUMMARY)
            gate = asyncio.Event()
            fake_client.push(ArtifactKind.SUMMARY, (gate, "ok"))
            task = asyncio.create_task(ctrl.generate(ArtifactKind.SUMMARY))
            await asyncio.sleep(0)
            during = ctrl.view(ArtifactKind.SUMMARY)
            gate.set()
            await task
            return during

        during = asyncio.run(scenario())
        assert during.last_error is None and during.in_flight

    def test_malformed_quiz_only_affects_quiz(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.SUMMARY, "summary text")
        fake_client.push(ArtifactKind.STRATEGY, "strategy text")
        fake_client.push(ArtifactKind.QUIZ, GenerationFailedError("The AI returned an invalid format for the quiz."))
        asyncio.run(ctrl.generate(ArtifactKind.SUMMARY))
        asyncio.run(ctrl.generate(ArtifactKind.STRATEGY))
        before = (ctrl.view(ArtifactKind.SUMMARY), ctrl.view(ArtifactKind.STRATEGY))
        quiz = asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        assert quiz.last_error == "Failed to generate quiz. Please try again."
        assert quiz.content is None
        assert (ctrl.view(ArtifactKind.SUMMARY), ctrl.view(ArtifactKind.STRATEGY)) == before
        assert ctrl.app_state is AppState.SUCCESS

    def test_first_failure_without_success_is_error_state(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.SUMMARY, GenerationFailedError("x"))
        asyncio.run(ctrl.generate(ArtifactKind.SUMMARY))
        assert ctrl.app_state is AppState.ERROR
        fake_client.push(ArtifactKind.SUMMARY, "recovered")
        asyncio.run(ctrl.generate(ArtifactKind.SUMMARY))
        assert ctrl.app_state is AppState.SUCCESS


class TestConcurrency:
    def test_two_summary_requests_last_resume_wins(self, ctrl, fake_client):
        async def scenario():
            first_gate, second_gate = asyncio.Event(), asyncio.Event()
            fake_client.push(ArtifactKind.SUMMARY, (first_gate, "first result"))
            fake_client.push(ArtifactKind.SUMMARY, (second_gate, "second result"))
            opts = {"summary_length": "short"}
            first = asyncio.create_task(ctrl.generate(ArtifactKind.SUMMARY, opts))
            second = asyncio.create_task(ctrl.generate(ArtifactKind.SUMMARY, opts))
            await asyncio.sleep(0)
            second_gate.set()
            await second
            mid = ctrl.view(ArtifactKind.SUMMARY)
            first_gate.set()
            await first
            return mid, ctrl.view(ArtifactKind.SUMMARY)

        mid, final = asyncio.run(scenario())
        assert mid.content == "second result" and mid.in_flight
        assert final.content == "first result" and not final.in_flight

    def test_kinds_are_independent(self, ctrl, fake_client):
        async def scenario():
            gate = asyncio.Event()
            fake_client.push(ArtifactKind.QUIZ, (gate, []))
            fake_client.push(ArtifactKind.SUMMARY, "done")
            quiz_task = asyncio.create_task(ctrl.generate(ArtifactKind.QUIZ))
            await asyncio.sleep(0)
            await ctrl.generate(ArtifactKind.SUMMARY)
            views = (ctrl.view(ArtifactKind.QUIZ), ctrl.view(ArtifactKind.SUMMARY))
            gate.set()
            await quiz_task
            return views

        quiz_view, summary_view = asyncio.run(scenario())
        assert quiz_view.in_flight
        assert summary_view.content == "done" and not summary_view.in_flight

    def test_result_after_reset_is_discarded(self, ctrl, fake_client, sample_document):
        async def scenario():
            gate = asyncio.Event()
            fake_client.push(ArtifactKind.SUMMARY, (gate, "stale"))
            task = asyncio.create_task(ctrl.generate(ArtifactKind.SUMMARY))
            await asyncio.sleep(0)
            ctrl.reset()
            ctrl.document = sample_document
            gate.set()
            await task

        asyncio.run(scenario())
        assert ctrl.view(ArtifactKind.SUMMARY).content is None
        assert ctrl.app_state is AppState.READY


class TestQuizSessionLifecycle:
    def test_quiz_success_creates_session(self, ctrl, fake_client, sample_questions):
        fake_client.push(ArtifactKind.QUIZ, list(sample_questions))
        view = asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        assert view.content == tuple(sample_questions)
        assert ctrl.quiz_session is not None
        assert ctrl.quiz_session.questions == tuple(sample_questions)

    def test_regeneration_replaces_session_even_with_same_questions(self, ctrl, fake_client, sample_questions):
        fake_client.push(ArtifactKind.QUIZ, list(sample_questions))
        fake_client.push(ArtifactKind.QUIZ, list(sample_questions))
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        first = ctrl.quiz_session
        first.select(0, "Chloroplast")
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        assert ctrl.quiz_session is not first
        assert ctrl.quiz_session.selected_answers == {}

    def test_failed_regeneration_keeps_session(self, ctrl, fake_client, sample_questions):
        fake_client.push(ArtifactKind.QUIZ, list(sample_questions))
        fake_client.push(ArtifactKind.QUIZ, GenerationFailedError("x"))
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        session = ctrl.quiz_session
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        assert ctrl.quiz_session is session


class TestNeedsGeneration:
    def test_fresh_kind_needs_generation(self, ctrl):
        assert ctrl.needs_generation(ArtifactKind.STRATEGY)

    def test_not_after_success_or_failure(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.STRATEGY, "plan")
        fake_client.push(ArtifactKind.QUIZ, GenerationFailedError("x"))
        asyncio.run(ctrl.generate(ArtifactKind.STRATEGY))
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        assert not ctrl.needs_generation(ArtifactKind.STRATEGY)
        assert not ctrl.needs_generation(ArtifactKind.QUIZ)

    def test_not_without_document(self, fake_client):
        assert not ArtifactController(fake_client).needs_generation(ArtifactKind.SUMMARY)

    def test_empty_quiz_result_is_not_regenerated(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.QUIZ, [])
        asyncio.run(ctrl.generate(ArtifactKind.QUIZ))
        assert not ctrl.view(ArtifactKind.QUIZ).has_content
        assert not ctrl.needs_generation(ArtifactKind.QUIZ)

    def test_empty_strategy_result_is_not_regenerated(self, ctrl, fake_client):
        fake_client.push(ArtifactKind.STRATEGY, "")
        asyncio.run(ctrl.generate(ArtifactKind.STRATEGY))
        assert not ctrl.needs_generation(ArtifactKind.STRATEGY)
