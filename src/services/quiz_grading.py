"""Client-side quiz scoring and per-quiz answer session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from services.artifact_types import QuizQuestion


def _normalize(answer: str | None) -> str:
    return (answer or "").strip().lower()


def is_correct(recorded: str | None, canonical: str) -> bool:
    """Case-insensitive comparison ignoring surrounding whitespace; None counts as ''."""
    return _normalize(recorded) == _normalize(canonical)


@dataclass(frozen=True)
class GradeResult:
    score: int
    per_question_correct: tuple[bool, ...]


def grade(questions: Sequence[QuizQuestion], selected_answers: Mapping[int, str]) -> GradeResult:
    """Score every question against the learner's recorded answers."""
    flags = tuple(is_correct(selected_answers.get(i), q.answer) for i, q in enumerate(questions))
    return GradeResult(score=sum(flags), per_question_correct=flags)


@dataclass
class QuizSession:
    """Answers and submission state for one generated question list."""

    questions: tuple[QuizQuestion, ...]
    selected_answers: dict[int, str] = field(default_factory=dict)
    submitted: bool = False
    score: int = 0
    result: GradeResult | None = None

    def select(self, index: int, answer: str) -> None:
        """Record an answer; ignored once the quiz has been submitted."""
        if self.submitted:
            return
        if not 0 <= index < len(self.questions):
            raise IndexError(f"Question index out of range: {index}")
        self.selected_answers[index] = answer

    @property
    def can_submit(self) -> bool:
        return bool(self.questions) and all(i in self.selected_answers for i in range(len(self.questions)))

    def submit(self) -> GradeResult:
        if not self.can_submit:
            raise ValueError("Answer every question before submitting.")
        self.result = grade(self.questions, self.selected_answers)
        self.score = self.result.score
        self.submitted = True
        return self.result

    def try_again(self) -> None:
        """Clear answers and the submitted flag; the questions stay the same."""
        self.selected_answers = {}
        self.submitted = False
        self.score = 0
        self.result = None
