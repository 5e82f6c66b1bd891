"""
Inline expression segmenter for ordered text/expression segments.

Recognizes only ``{{ expression }}`` delimiters. File references are not
segmented here; they belong to message content (see ``content.py``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Literal, Optional

from promptweave.constants import EXPRESSION_PATTERN
from promptweave.models import Position


SegmentKind = Literal["text", "expression"]

_EXPRESSION_PATTERN = re.compile(EXPRESSION_PATTERN, re.DOTALL)


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    value: str = ""
    position: Optional[Position] = None
    start: int = 0
    end: int = 0


def _position_at(text: str, offset: int, base_line: int) -> Position:
    line = base_line + text.count("\n", 0, offset)
    last_newline = text.rfind("\n", 0, offset)
    return Position(line=line, column=offset - last_newline)


def parse_inline_segments(text: Optional[str], base_line: int = 1) -> List[Segment]:
    """
    Parse text into ordered text and expression segments.

    Args:
        text: Source text (frontmatter-scoped or included file content)
        base_line: Line number of the first line of ``text``

    Returns:
        Segments in source order; empty text segments are omitted.
    """
    if not text:
        return []

    segments: List[Segment] = []
    cursor = 0
    for match in _EXPRESSION_PATTERN.finditer(text):
        start, end = match.span()
        if start > cursor:
            segments.append(
                Segment(kind="text", value=text[cursor:start], start=cursor, end=start)
            )
        segments.append(
            Segment(
                kind="expression",
                value=match.group(1),
                position=_position_at(text, start, base_line),
                start=start,
                end=end,
            )
        )
        cursor = end

    if cursor < len(text):
        segments.append(
            Segment(kind="text", value=text[cursor:], start=cursor, end=len(text))
        )

    return segments
