"""Shared utility functions."""

from __future__ import annotations

import re
from typing import Iterable

# ```lang ... ```; the body may start on the tag line
_FENCE = re.compile(r"```([\w+#.-]*)\s*(.*?)```", re.DOTALL)
_MARKDOWN_TAGS = ("markdown", "md")


def format_size(size_bytes: int) -> str:
    """Format byte count to human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"


def extract_code_block(text: str, languages: Iterable[str] | None = None) -> str | None:
    """
    Return the body of the first fenced code block in *text*, or None.

    With *languages*, only blocks tagged with one of them are considered.  A
    markdown block runs to the last fence in the text, since generated
    documents usually contain fences of their own.
    """
    matches = list(_FENCE.finditer(text))
    if languages is not None:
        wanted = {lang.lower() for lang in languages}
        matches = [m for m in matches if m.group(1).lower() in wanted]
    if not matches:
        return None

    chosen = matches[0]
    body = chosen.group(2)

    if chosen.group(1).lower() in _MARKDOWN_TAGS:
        last = text.rfind("```")
        if last > chosen.start(2):
            body = text[chosen.start(2):last]

    return body.strip()


def extract_markdown(text: str) -> str | None:
    """Body of the first ```markdown block, or None."""
    return extract_code_block(text, languages=_MARKDOWN_TAGS)
