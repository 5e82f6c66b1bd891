"""
Emit protocol for structured expression results.

Provides EmitBuilder (collects parts from emittable values), the Emittable
interface and the two IncludePart variants returned by include().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple, Union

from promptweave.models import Diagnostic, EmittedPart, FilePart, Position, TextPart


class Emittable(ABC):
    """A value that contributes parts to an EmitBuilder."""

    @abstractmethod
    def emit(self, builder: "EmitBuilder") -> None:
        pass


class EmitBuilder:
    """Ordered accumulator of emitted parts."""

    def __init__(
        self,
        position: Optional[Position] = None,
        diagnostics: Optional[List[Diagnostic]] = None,
        source_file: Optional[str] = None,
    ):
        self.parts: List[EmittedPart] = []
        self.position = position
        self.diagnostics = diagnostics
        self.source_file = source_file

    def append_text(self, text: Optional[str]) -> None:
        """Append a text part. No-op for None or empty strings."""
        if text:
            self.parts.append(TextPart(text=text))

    def append_file(self, filename: str, mime_type: str, data: bytes) -> None:
        """Append a file part tagged with the builder's position."""
        self.parts.append(
            FilePart(
                filename=filename,
                mime_type=mime_type,
                data=data,
                position=self.position,
            )
        )

    def emit(self, value: Any) -> None:
        """Emittable values emit themselves into this builder; others become text."""
        if isinstance(value, Emittable):
            value.emit(self)
        elif value is not None:
            self.append_text(str(value))

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        if self.diagnostics is not None:
            self.diagnostics.append(diagnostic)


class BinaryIncludePart(Emittable):
    """Leaf include result: a single file part."""

    def __init__(self, filename: str, mime_type: str, data: bytes):
        self.filename = filename
        self.mime_type = mime_type
        self.data = data

    def emit(self, builder: EmitBuilder) -> None:
        builder.append_file(self.filename, self.mime_type, self.data)

    def __repr__(self) -> str:
        return f"BinaryIncludePart({self.filename!r}, {self.mime_type!r}, {len(self.data)} bytes)"


IncludeChild = Union[str, Emittable]


class CompositeIncludePart(Emittable):
    """Text include result: strings and nested emittables, in source order."""

    def __init__(self, children: Sequence[IncludeChild]):
        self.children: Tuple[IncludeChild, ...] = tuple(children)

    def emit(self, builder: EmitBuilder) -> None:
        for child in self.children:
            builder.emit(child)

    def __repr__(self) -> str:
        return f"CompositeIncludePart({len(self.children)} children)"
