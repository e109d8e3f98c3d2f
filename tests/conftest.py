"""Shared pytest fixtures for the PDF Study Assistant test suite."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path so all service imports resolve.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from services.artifact_types import ArtifactKind, Document, QuestionType, QuizQuestion  # noqa: E402


class FakeClient:
    """Generation client whose results are scripted per kind.

    Each scripted entry is either a value to return, an exception to raise,
    or an ``asyncio.Event``-gated pair ``(event, value)`` that waits before
    returning.
    """

    def __init__(self) -> None:
        self.script: dict[ArtifactKind, list[object]] = {k: [] for k in ArtifactKind}
        self.prompts: list[tuple[ArtifactKind, str]] = []

    def push(self, kind: ArtifactKind, outcome: object) -> None:
        self.script[kind].append(outcome)

    async def generate(self, prompt: str, kind: ArtifactKind):
        self.prompts.append((kind, prompt))
        outcome = self.script[kind].pop(0)
        if isinstance(outcome, tuple) and outcome and isinstance(outcome[0], asyncio.Event):
            event, outcome = outcome
            await event.wait()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def sample_document() -> Document:
    return Document(name="notes.pdf", byte_size=1024, extracted_text="Photosynthesis converts light into energy.")


@pytest.fixture
def sample_questions() -> list[QuizQuestion]:
    return [
        QuizQuestion(
            question="Which organelle performs photosynthesis?",
            type=QuestionType.MULTIPLE_CHOICE,
            answer="Chloroplast",
            options=("Nucleus", "Chloroplast", "Ribosome", "Vacuole"),
        ),
        QuizQuestion(
            question="Plants release oxygen.",
            type=QuestionType.TRUE_FALSE,
            answer="True",
            options=("True", "False"),
        ),
        QuizQuestion(
            question="Name the green pigment.",
            type=QuestionType.SHORT_ANSWER,
            answer="Chlorophyll",
        ),
    ]
