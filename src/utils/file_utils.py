"""
Export helpers for rendered artifacts.
"""

from services.artifact_types import ArtifactKind, QuizQuestion
from services.markdown_renderer import render_plain_text


def export_file_name(kind: ArtifactKind | str) -> str:
    """
    Download file name for an artifact.

    Args:
        kind: Artifact kind or its string value.

    Returns:
        "{kind}.txt", e.g. "summary.txt".
    """
    return f"{ArtifactKind(kind).value}.txt"


def quiz_to_text(questions: list[QuizQuestion] | tuple[QuizQuestion, ...]) -> str:
    lines: list[str] = []
    for i, q in enumerate(questions, 1):
        lines.append(f"{i}. {q.question}")
        for option in q.options or ():
            lines.append(f"   - {option}")
        lines.append(f"   Answer: {q.answer}")
    return "\n".join(lines)


def export_text(kind: ArtifactKind | str, content: object) -> str:
    """Plain text for copy-to-clipboard and download; markdown markup is stripped."""
    if not content:
        return ""
    if ArtifactKind(kind) is ArtifactKind.QUIZ:
        return quiz_to_text(content)  # type: ignore[arg-type]
    return render_plain_text(str(content))


def export_bytes(kind: ArtifactKind | str, content: object) -> bytes:
    return export_text(kind, content).encode("utf-8")
