"""Markdown-subset to HTML rendering for summary and strategy artifacts.

Supported: ``#`` headings, ``**bold**``, ``*``/``-`` bullet lists, paragraphs.
Rendering runs in two stages: an inline pass over the whole text (escaping
and bold spans), then a line pass that builds block fragments.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
HEADING_RE = re.compile(r"^(#+) ")
TAG_RE = re.compile(r"<[^>]+>")
MAX_HEADING_TAG = 6

HEADING_CLASSES = {
    1: "text-2xl font-bold",
    2: "text-xl font-semibold",
    3: "text-lg font-medium",
}
DEFAULT_HEADING_CLASS = "text-base font-medium"
LIST_OPEN = '<ul class="list-disc pl-6 space-y-2 my-4">'


@dataclass(frozen=True)
class Block:
    """One block-level fragment. ``items`` is only used by lists."""

    kind: str  # "heading" | "list" | "paragraph"
    text: str = ""
    level: int = 0
    items: tuple[str, ...] = ()


def render_inline(markdown: str) -> str:
    """Escape markup characters, then turn ``**text**`` spans into <strong>."""
    escaped = html.escape(markdown, quote=False)
    return BOLD_RE.sub(r"<strong>\1</strong>", escaped)


def parse_blocks(markdown: str) -> list[Block]:
    """Split rendered-inline text into heading, list and paragraph blocks."""
    if not markdown:
        return []

    blocks: list[Block] = []
    list_items: list[str] = []
    in_list = False

    def close_list() -> None:
        nonlocal in_list
        if in_list:
            blocks.append(Block(kind="list", items=tuple(list_items)))
            list_items.clear()
            in_list = False

    for line in render_inline(markdown).split("\n"):
        trimmed = line.strip()

        heading = HEADING_RE.match(trimmed)
        if heading:
            close_list()
            level = len(heading.group(1))
            blocks.append(Block(kind="heading", text=trimmed[level:].strip(), level=level))
            continue

        if trimmed.startswith("* ") or trimmed.startswith("- "):
            in_list = True
            list_items.append(trimmed[2:])
            continue

        close_list()
        if trimmed:
            blocks.append(Block(kind="paragraph", text=trimmed))

    close_list()
    return blocks


def _block_html(block: Block) -> str:
    if block.kind == "heading":
        tag = f"h{min(block.level + 1, MAX_HEADING_TAG)}"
        style = HEADING_CLASSES.get(block.level, DEFAULT_HEADING_CLASS)
        return f'<{tag} class="{style} mt-6 mb-3">{block.text}</{tag}>'
    if block.kind == "list":
        return LIST_OPEN + "".join(f"<li>{item}</li>" for item in block.items) + "</ul>"
    return f"<p>{block.text}</p>"


def render_html(markdown: str) -> str:
    """Render markdown-subset text to a flat sequence of HTML fragments."""
    return "".join(_block_html(b) for b in parse_blocks(markdown))


def _strip_tags(fragment: str) -> str:
    return html.unescape(TAG_RE.sub("", fragment))


def render_plain_text(markdown: str) -> str:
    """Rendered text with all markup removed, one block or list item per line."""
    lines: list[str] = []
    for block in parse_blocks(markdown):
        if block.kind == "list":
            lines.extend(_strip_tags(item) for item in block.items)
        else:
            lines.append(_strip_tags(block.text))
    return "\n".join(lines)
