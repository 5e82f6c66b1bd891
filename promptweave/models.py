"""
Data model shared by the chunking, evaluation and prompt layers.

Chunks are produced while tokenizing message content. Parts are the stable,
provider-agnostic output units. Both are immutable once created.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union


#######################################################################
## Positions and diagnostics
#######################################################################

@dataclass(frozen=True)
class Position:
    """1-based line/column of an inline expression within its source text."""
    line: int
    column: int


DiagnosticSeverity = Literal["error", "warning"]


@dataclass(frozen=True)
class Diagnostic:
    """Structured failure record.

    Callers render diagnostics for the user; internally they also serve as
    the typed payload of include failures (``type == "file"``).
    """
    type: str
    error: str
    severity: DiagnosticSeverity = "warning"
    filename: Optional[str] = None
    raw: Optional[str] = None
    expression: Optional[str] = None
    position: Optional[Position] = None
    source_file: Optional[str] = None


@dataclass(frozen=True)
class FileWarning:
    """A file reference that could not be turned into content."""
    filename: str
    raw_filename: str
    error: str


#######################################################################
## Chunks
#######################################################################

@dataclass(frozen=True)
class TextChunk:
    value: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class FileChunk:
    filename: str
    raw_filename: str
    readable: bool
    content: Optional[bytes] = None
    mime_type: Optional[str] = None
    error: Optional[str] = None
    kind: Literal["file"] = "file"


@dataclass(frozen=True)
class WarningsChunk:
    entries: Tuple[FileWarning, ...]
    kind: Literal["warnings"] = "warnings"


Chunk = Union[TextChunk, FileChunk, WarningsChunk]


#######################################################################
## Parts
#######################################################################

@dataclass(frozen=True)
class TextPart:
    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class FilePart:
    """Raw file output of the emit protocol, before classification."""
    filename: str
    mime_type: str
    data: bytes
    position: Optional[Position] = None
    kind: Literal["file"] = "file"


@dataclass(frozen=True)
class ImagePart:
    mime_type: str
    data: str
    data_url: str
    filename: str
    kind: Literal["image"] = "image"


@dataclass(frozen=True)
class PdfPart:
    mime_type: str
    data: str
    data_url: str
    filename: str
    kind: Literal["pdf"] = "pdf"


@dataclass(frozen=True)
class TextFilePart:
    mime_type: str
    text: str
    filename: str
    kind: Literal["text_file"] = "text_file"


@dataclass(frozen=True)
class UnsupportedFilePart:
    raw_filename: str
    kind: Literal["unsupported_file"] = "unsupported_file"


Part = Union[TextPart, ImagePart, PdfPart, TextFilePart, UnsupportedFilePart]

# Output of EmitBuilder: text runs and unclassified file payloads
EmittedPart = Union[TextPart, FilePart]
