"""Offline smoke check for rendering, grading, prompts and the generation lifecycle."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import MAX_TEXT_LENGTH
from services.artifact_controller import ArtifactController
from services.artifact_types import AppState, ArtifactKind, Document, QuestionType, QuizQuestion
from services.document_processor import join_pages
from services.markdown_renderer import render_html
from services.prompt_builder import build_prompt
from services.quiz_grading import grade


SAMPLE_MARKDOWN = "# Title\n**Key** idea\n- one\n- two\n\nClosing line"


class _StaticClient:
    async def generate(self, prompt: str, kind: ArtifactKind):
        if kind is ArtifactKind.QUIZ:
            return [QuizQuestion(question="2+2?", type=QuestionType.SHORT_ANSWER, answer="4")]
        return f"# {kind.value}\n- done"


def check_renderer_deterministic() -> None:
    first = render_html(SAMPLE_MARKDOWN)
    second = render_html(SAMPLE_MARKDOWN)
    assert first == second, "renderer output differs between runs"
    assert first.count("<ul") == 1 and first.count("</ul>") == 1, f"unbalanced list markup: {first}"


def check_grading() -> None:
    questions = [QuizQuestion(question="Q", type=QuestionType.SHORT_ANSWER, answer="Paris")]
    result = grade(questions, {0: "  paris "})
    assert result.score == 1, f"expected case-insensitive match, got {result}"


def check_prompt_truncation() -> None:
    text = "a" * (MAX_TEXT_LENGTH + 10)
    prompt = build_prompt(text, ArtifactKind.STRATEGY)
    assert "a" * MAX_TEXT_LENGTH in prompt and "a" * (MAX_TEXT_LENGTH + 1) not in prompt, "truncation failed"


def check_page_join() -> None:
    assert join_pages([["Hello", "world"], ["Foo", "bar"]]) == "Hello worldFoo bar"


def check_lifecycle() -> None:
    ctrl = ArtifactController(_StaticClient())
    ctrl.document = Document(name="sample.pdf", byte_size=10, extracted_text="sample text")
    assert ctrl.app_state is AppState.READY
    for kind in ArtifactKind:
        view = asyncio.run(ctrl.generate(kind))
        assert view.has_content and not view.in_flight, f"{kind.value} did not succeed"
    assert ctrl.app_state is AppState.SUCCESS
    assert ctrl.quiz_session is not None and len(ctrl.quiz_session.questions) == 1
    ctrl.reset()
    assert ctrl.app_state is AppState.IDLE


def main() -> int:
    checks = [
        check_renderer_deterministic,
        check_grading,
        check_prompt_truncation,
        check_page_join,
        check_lifecycle,
    ]
    for check in checks:
        check()
        print(f"[ok] {check.__name__}")
    print("self-check passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
