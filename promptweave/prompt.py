"""
Build ordered pydantic-ai prompt payloads from classified parts.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

from pydantic_ai import BinaryContent
from pydantic_ai.messages import UserContent

from promptweave.constants import UNKNOWN_SOURCE
from promptweave.models import (
    FileWarning,
    ImagePart,
    Part,
    PdfPart,
    TextFilePart,
    TextPart,
    UnsupportedFilePart,
)

PromptInput = Union[str, Sequence[UserContent]]


@dataclass
class PromptBuildResult:
    prompt: PromptInput
    prompt_text: str
    attached_file_count: int = 0
    warnings: List[str] = field(default_factory=list)


def format_text_file(filename: str, text: str) -> str:
    return f"--- FILE: {filename} ---\n{text}\n--- END FILE: {filename} ---\n"


def format_unsupported_file(raw_filename: str) -> str:
    return f"@{raw_filename}"


def format_file_warnings(warnings: Iterable[FileWarning], source: Optional[str] = None) -> str:
    """Render a batch of @file warnings as a single notification message."""
    lines = [f"{source or UNKNOWN_SOURCE}: Some @file references could not be processed:"]
    for warning in warnings:
        lines.append(f"• {warning.raw_filename}: {warning.error}")
    return "\n".join(lines)


def _binary_content(part: Union[ImagePart, PdfPart]) -> BinaryContent:
    return BinaryContent(data=base64.b64decode(part.data), media_type=part.mime_type)


def to_user_content(parts: Iterable[Part]) -> List[UserContent]:
    """Map parts to pydantic-ai user content, preserving order."""
    content: List[UserContent] = []
    for part in parts:
        if isinstance(part, TextPart):
            content.append(part.text)
        elif isinstance(part, (ImagePart, PdfPart)):
            content.append(_binary_content(part))
        elif isinstance(part, TextFilePart):
            content.append(format_text_file(part.filename, part.text))
        elif isinstance(part, UnsupportedFilePart):
            content.append(format_unsupported_file(part.raw_filename))
    return content


def build_prompt(
    parts: Iterable[Part],
    warnings: Optional[Iterable[FileWarning]] = None,
) -> PromptBuildResult:
    """
    Build a prompt payload from rendered parts.

    The prompt is a plain string when the content is text only, otherwise an
    ordered list mixing strings and BinaryContent attachments.
    """
    content = to_user_content(parts)
    prompt_text = "".join(item for item in content if isinstance(item, str))
    attached = sum(1 for item in content if isinstance(item, BinaryContent))

    prompt: PromptInput
    if not content:
        prompt = ""
    elif attached == 0:
        prompt = prompt_text
    else:
        prompt = content

    return PromptBuildResult(
        prompt=prompt,
        prompt_text=prompt_text,
        attached_file_count=attached,
        warnings=[f"{warning.raw_filename}: {warning.error}" for warning in warnings or ()],
    )
