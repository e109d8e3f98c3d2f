"""Prompt construction for summary, strategy and quiz generation."""

from __future__ import annotations

from typing import Any

from config import MAX_TEXT_LENGTH, QUIZ_QUESTION_COUNT
from services.artifact_types import ArtifactKind, GenerationOptions

SUMMARY_PROMPT = (
    "Based on the following text from a document, please provide a {length} summary. "
    "The summary should capture the key points, main arguments, and conclusions. "
    "Format the output using markdown (e.g., headings, subheadings, bullet points) for readability. "
    'Text: "{text}"'
)

STRATEGY_PROMPT = (
    "Analyze the following text and generate a comprehensive 4-week learning or action strategy plan "
    "based on its content. Break it down week by week with clear, actionable steps and sub-points. "
    "The plan should be structured to help someone master the concepts or apply the information "
    "from the document. Format the output using markdown (e.g., using headings for each week and "
    'bullet points for actions). Text: "{text}"'
)

QUIZ_PROMPT = (
    "Generate a random quiz with exactly {count} questions based on the provided text. "
    "The quiz should include a mix of Multiple Choice, True/False, and Short Answer questions. "
    "For multiple-choice questions, provide 4 options. "
    'For True/False questions, the options array must contain only "True" and "False". '
    "For all questions, provide the correct answer. "
    'Text: "{text}"'
)


def truncate_text(text: str) -> str:
    """Keep at most MAX_TEXT_LENGTH leading characters."""
    if len(text) > MAX_TEXT_LENGTH:
        return text[:MAX_TEXT_LENGTH]
    return text


def build_prompt(text: str, kind: ArtifactKind, options: dict[str, Any] | None = None) -> str:
    """
    Build the model instruction for one artifact kind.

    Args:
        text: Extracted document text.
        kind: Which artifact to generate.
        options: Only ``summary_length`` is recognised; unknown lengths become medium.

    Returns:
        Prompt string with the (possibly truncated) source text embedded.
    """
    source = truncate_text(text or "")
    kind = ArtifactKind(kind)
    if kind is ArtifactKind.SUMMARY:
        length = GenerationOptions.from_mapping(options).summary_length
        return SUMMARY_PROMPT.format(length=length.value, text=source)
    if kind is ArtifactKind.STRATEGY:
        return STRATEGY_PROMPT.format(text=source)
    return QUIZ_PROMPT.format(count=QUIZ_QUESTION_COUNT, text=source)
