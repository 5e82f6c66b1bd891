"""
Frontmatter extraction.

Supports a fenced code block on the first line (```python, ```json, ```yaml)
or an Obsidian-style YAML block between --- delimiters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from promptweave.constants import (
    FRONTMATTER_FENCE_CLOSE_PATTERN,
    FRONTMATTER_FENCE_PATTERN,
    YAML_FRONTMATTER_DELIMITER,
)
from promptweave.models import Position

_FENCE_OPEN = re.compile(FRONTMATTER_FENCE_PATTERN)
_FENCE_CLOSE = re.compile(FRONTMATTER_FENCE_CLOSE_PATTERN)


@dataclass(frozen=True)
class Frontmatter:
    language: str
    code: str
    position: Position
    # 1-based line of the first body line following the block
    body_line: int = 1


def _find_closing(lines, is_closing) -> Optional[int]:
    for index in range(1, len(lines)):
        if is_closing(lines[index]):
            return index
    return None


def extract_frontmatter(text: Optional[str]) -> Tuple[Optional[Frontmatter], str]:
    """Split ``text`` into (frontmatter, body).

    Returns ``(None, text)`` when the first line opens no block or the block
    is never closed.
    """
    if not text:
        return None, text or ""

    lines = text.split("\n")
    first = lines[0]

    fence = _FENCE_OPEN.match(first)
    if fence:
        language = fence.group(1)
        end_idx = _find_closing(lines, lambda line: bool(_FENCE_CLOSE.match(line)))
    elif first.strip() == YAML_FRONTMATTER_DELIMITER:
        language = "yaml"
        end_idx = _find_closing(
            lines, lambda line: line.strip() == YAML_FRONTMATTER_DELIMITER
        )
    else:
        return None, text

    if end_idx is None:
        return None, text

    frontmatter = Frontmatter(
        language=language,
        code="\n".join(lines[1:end_idx]),
        position=Position(line=1, column=1),
        body_line=end_idx + 2,
    )
    return frontmatter, "\n".join(lines[end_idx + 1:])
