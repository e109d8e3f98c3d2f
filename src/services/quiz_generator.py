"""
Quiz response schema and boundary validation of model quiz JSON.
"""

from __future__ import annotations

import json
from typing import Any

from services.artifact_types import GenerationFailedError, QuestionType, QuizQuestion

MALFORMED_QUIZ_MESSAGE = "The AI returned an invalid format for the quiz. Please try again."

QUIZ_ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "question": {"type": "string", "description": "The question text."},
        "type": {
            "type": "string",
            "enum": [t.value for t in QuestionType],
            "description": "The type of the question.",
        },
        "options": {
            "type": ["array", "null"],
            "items": {"type": "string"},
            "description": (
                "An array of options. For Multiple Choice, provide 4 options. "
                "For True/False, provide ['True', 'False']. Null for Short Answer."
            ),
        },
        "answer": {"type": "string", "description": "The correct answer to the question."},
    },
    "required": ["question", "type", "options", "answer"],
    "additionalProperties": False,
}

# Structured output needs an object at the root, so the question list is wrapped.
QUIZ_RESPONSE_FORMAT: dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "quiz",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {"questions": {"type": "array", "items": QUIZ_ITEM_SCHEMA}},
            "required": ["questions"],
            "additionalProperties": False,
        },
    },
}


def parse_quiz_json(raw: str) -> list[Any]:
    """
    Trim and parse the model response; the result must be a list.

    A ``{"questions": [...]}`` envelope is unwrapped.

    Raises:
        GenerationFailedError: If the text is not JSON or not a list.
    """
    try:
        data = json.loads((raw or "").strip())
    except json.JSONDecodeError as e:
        raise GenerationFailedError(MALFORMED_QUIZ_MESSAGE) from e
    if isinstance(data, dict) and "questions" in data:
        data = data["questions"]
    if not isinstance(data, list):
        raise GenerationFailedError(MALFORMED_QUIZ_MESSAGE)
    return data


def _validate_question(item: Any) -> QuizQuestion:
    if not isinstance(item, dict):
        raise GenerationFailedError(MALFORMED_QUIZ_MESSAGE)
    question = item.get("question")
    answer = item.get("answer")
    if not isinstance(question, str) or not isinstance(answer, str):
        raise GenerationFailedError(MALFORMED_QUIZ_MESSAGE)
    try:
        q_type = QuestionType(item.get("type"))
    except ValueError as e:
        raise GenerationFailedError(MALFORMED_QUIZ_MESSAGE) from e
    raw_options = item.get("options")
    options: tuple[str, ...] | None = None
    if raw_options is not None:
        if not isinstance(raw_options, list) or not all(isinstance(o, str) for o in raw_options):
            raise GenerationFailedError(MALFORMED_QUIZ_MESSAGE)
        options = tuple(raw_options)
    return QuizQuestion(question=question, type=q_type, answer=answer, options=options)


def validate_quiz(items: list[Any]) -> list[QuizQuestion]:
    """Convert parsed items into QuizQuestion records, rejecting any malformed item."""
    return [_validate_question(item) for item in items]


def parse_quiz_response(raw: str) -> list[QuizQuestion]:
    """Parse and validate a raw quiz response in one step."""
    return validate_quiz(parse_quiz_json(raw))
