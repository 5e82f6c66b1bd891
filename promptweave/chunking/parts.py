"""
Classify chunked message content into provider-agnostic parts.
"""

from __future__ import annotations

import base64
from typing import Iterable, List, Optional, Tuple

from promptweave.constants import (
    PDF_MIME_TYPE,
    SUPPORTED_IMAGE_MIME_TYPES,
    TEXT_MIME_PREFIX,
)
from promptweave.logger import UnifiedLogger
from promptweave.models import (
    Chunk,
    FileChunk,
    FilePart,
    FileWarning,
    ImagePart,
    Part,
    PdfPart,
    TextChunk,
    TextFilePart,
    TextPart,
    UnsupportedFilePart,
    WarningsChunk,
)
from promptweave.utils.mime import MimeResolver

from .content import ChunkParser

logger = UnifiedLogger(tag="part-classifier")


def _data_url(mime_type: str, encoded: str) -> str:
    return f"data:{mime_type};base64,{encoded}"


def classify_file(
    *,
    filename: str,
    raw_filename: str,
    mime_type: str,
    data: bytes,
) -> Part:
    """Map file bytes to a part kind by MIME type."""
    if mime_type in SUPPORTED_IMAGE_MIME_TYPES:
        encoded = base64.b64encode(data).decode("ascii")
        return ImagePart(
            mime_type=mime_type,
            data=encoded,
            data_url=_data_url(mime_type, encoded),
            filename=filename,
        )
    if mime_type == PDF_MIME_TYPE:
        encoded = base64.b64encode(data).decode("ascii")
        return PdfPart(
            mime_type=mime_type,
            data=encoded,
            data_url=_data_url(mime_type, encoded),
            filename=filename,
        )
    if mime_type.startswith(TEXT_MIME_PREFIX):
        return TextFilePart(
            mime_type=mime_type,
            text=data.decode("utf-8", errors="replace"),
            filename=filename,
        )

    logger.debug(
        "Unsupported MIME type {mime_type} for {raw_filename}",
        mime_type=mime_type,
        raw_filename=raw_filename,
    )
    return UnsupportedFilePart(raw_filename=raw_filename or filename)


def classify_file_part(part: FilePart) -> Part:
    """Classify a file emitted by include() with the same policy as @file chunks."""
    return classify_file(
        filename=part.filename,
        raw_filename=part.filename,
        mime_type=part.mime_type,
        data=part.data,
    )


class PartClassifier:
    """Drain a chunk stream into parts and collected warnings."""

    def classify_chunk(self, chunk: FileChunk) -> Part:
        if chunk.readable and chunk.content is not None and chunk.mime_type:
            return classify_file(
                filename=chunk.filename,
                raw_filename=chunk.raw_filename,
                mime_type=chunk.mime_type,
                data=chunk.content,
            )
        return UnsupportedFilePart(raw_filename=chunk.raw_filename)

    def classify(self, chunks: Iterable[Chunk]) -> Tuple[List[Part], List[FileWarning]]:
        parts: List[Part] = []
        warnings: List[FileWarning] = []

        for chunk in chunks:
            if isinstance(chunk, WarningsChunk):
                warnings.extend(chunk.entries)
            elif isinstance(chunk, TextChunk):
                if chunk.value:
                    parts.append(TextPart(text=chunk.value))
            elif isinstance(chunk, FileChunk):
                parts.append(self.classify_chunk(chunk))

        return parts, warnings


def parse_message_parts(
    content: Optional[str],
    *,
    mime_resolver: Optional[MimeResolver] = None,
    base_dir: Optional[str] = None,
) -> Tuple[List[Part], List[FileWarning]]:
    """Chunk ``content`` for @file references and classify the result."""
    stream = ChunkParser(mime_resolver=mime_resolver, base_dir=base_dir).parse(content)
    return PartClassifier().classify(stream)
