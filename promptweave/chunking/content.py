"""
Message content chunker for ordered text and @file reference chunks.

Recognizes ``@./path`` and ``@../path`` references (with an optional
``;type=<mime>`` override) and yields text, file and warnings chunks lazily.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterator, List, Optional
from urllib.parse import unquote_plus

from promptweave.constants import (
    FILE_REFERENCE_PATTERN,
    MIME_OVERRIDE_PATTERN,
    TRAILING_PUNCTUATION,
)
from promptweave.errors import MimeDetectionError
from promptweave.logger import UnifiedLogger
from promptweave.models import Chunk, FileChunk, FileWarning, TextChunk, WarningsChunk
from promptweave.utils.mime import MimeResolver, get_default_mime_resolver

logger = UnifiedLogger(tag="content-parser")

_FILE_REFERENCE = re.compile(FILE_REFERENCE_PATTERN)
_MIME_OVERRIDE = re.compile(MIME_OVERRIDE_PATTERN)
_TRAILING_PUNCTUATION = re.compile(f"[{re.escape(TRAILING_PUNCTUATION)}]+$")


def strip_trailing_punctuation(value: str) -> str:
    return _TRAILING_PUNCTUATION.sub("", value)


def is_readable_file(path: str) -> bool:
    """True when ``path`` is an existing regular file the process may read."""
    candidate = Path(path)
    return candidate.is_file() and os.access(candidate, os.R_OK)


class ChunkStream:
    """Single-use pull iterator over the chunks of one content string.

    Each ``next()`` produces exactly one chunk. Once exhausted the stream
    stays exhausted; parse again for a fresh pass.
    """

    def __init__(self, chunks: Iterator[Chunk]):
        self._chunks = chunks

    def __iter__(self) -> "ChunkStream":
        return self

    def __next__(self) -> Chunk:
        return next(self._chunks)


class ChunkParser:
    """Tokenize message content into text, file and warnings chunks."""

    def __init__(
        self,
        mime_resolver: Optional[MimeResolver] = None,
        base_dir: Optional[str] = None,
    ):
        self.mime_resolver = mime_resolver or get_default_mime_resolver()
        self.base_dir = base_dir

    def parse(self, content: Optional[str]) -> ChunkStream:
        return ChunkStream(self._chunkify(content or ""))

    def _resolve_path(self, cleaned: str) -> str:
        if self.base_dir:
            return os.path.normpath(os.path.join(self.base_dir, cleaned))
        return cleaned

    def _chunkify(self, content: str) -> Iterator[Chunk]:
        warnings: List[FileWarning] = []
        cursor = 0

        while cursor < len(content):
            match = _FILE_REFERENCE.search(content, cursor)
            if match is None:
                break

            full_match = match.group(1)
            override_match = _MIME_OVERRIDE.match(full_match)
            if override_match:
                raw_file = override_match.group(1)
                mime_with_punct = override_match.group(2)
                mime_override: Optional[str] = strip_trailing_punctuation(mime_with_punct)
                tail_stripped = len(mime_with_punct) - len(mime_override)
            else:
                raw_file = full_match
                mime_override = None
                tail_stripped = len(raw_file) - len(strip_trailing_punctuation(raw_file))

            if match.start() > cursor:
                yield TextChunk(value=content[cursor:match.start()])

            filename_no_punct = strip_trailing_punctuation(raw_file)
            raw_filename = filename_no_punct
            if mime_override is not None:
                raw_filename = f"{filename_no_punct};type={mime_override}"
            cleaned = unquote_plus(filename_no_punct)
            filename = self._resolve_path(cleaned)

            logger.debug(
                "Found @file reference {raw_filename} -> {filename} (mime override: {mime_override})",
                raw_filename=raw_filename,
                filename=filename,
                mime_override=mime_override or "none",
            )

            chunk = self._read_reference(filename, raw_filename, mime_override)
            if not chunk.readable:
                warnings.append(
                    FileWarning(
                        filename=filename,
                        raw_filename=raw_filename,
                        error=chunk.error or "unknown error",
                    )
                )
            yield chunk

            cursor = match.end() - tail_stripped

        if cursor < len(content):
            yield TextChunk(value=content[cursor:])

        if warnings:
            logger.debug("Emitting warnings chunk with {count} warnings", count=len(warnings))
            yield WarningsChunk(entries=tuple(warnings))

    def _read_reference(
        self,
        filename: str,
        raw_filename: str,
        mime_override: Optional[str],
    ) -> FileChunk:
        def unreadable(error: str) -> FileChunk:
            return FileChunk(
                filename=filename,
                raw_filename=raw_filename,
                readable=False,
                error=error,
            )

        if not is_readable_file(filename):
            logger.warning("@file reference not found or not readable: {filename}", filename=filename)
            return unreadable("File not found or not readable")

        try:
            mime_type = self.mime_resolver.resolve(filename, override=mime_override)
        except MimeDetectionError as exc:
            logger.error("Failed to get MIME type for {filename}: {error}", filename=filename, error=str(exc))
            return unreadable(f"Failed to get MIME type: {exc}")

        try:
            handle = open(filename, "rb")
        except OSError as exc:
            logger.error("Failed to open file {filename}: {error}", filename=filename, error=str(exc))
            return unreadable(f"Failed to open file: {exc.strerror or exc}")

        with handle:
            try:
                data = handle.read()
            except OSError as exc:
                logger.error("Failed to read content from {filename}: {error}", filename=filename, error=str(exc))
                return unreadable("Failed to read content")

        return FileChunk(
            filename=filename,
            raw_filename=raw_filename,
            readable=True,
            content=data,
            mime_type=mime_type,
        )


def parse_content(
    content: Optional[str],
    *,
    mime_resolver: Optional[MimeResolver] = None,
    base_dir: Optional[str] = None,
) -> ChunkStream:
    """Convenience wrapper: build a ChunkParser and parse ``content``."""
    return ChunkParser(mime_resolver=mime_resolver, base_dir=base_dir).parse(content)
