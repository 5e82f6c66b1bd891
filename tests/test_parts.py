"""Tests for chunk classification into parts."""

from __future__ import annotations

import base64
from pathlib import Path

from promptweave.chunking.parts import (
    PartClassifier,
    classify_file,
    classify_file_part,
    parse_message_parts,
)
from promptweave.models import (
    FileChunk,
    FilePart,
    FileWarning,
    ImagePart,
    PdfPart,
    TextChunk,
    TextFilePart,
    TextPart,
    UnsupportedFilePart,
    WarningsChunk,
)


class TestClassifyFile:

    def test_image(self) -> None:
        """Should base64-encode images and build a data URL."""
        part = classify_file(filename="/x/a.png", raw_filename="./a.png", mime_type="image/png", data=b"PNG")

        assert isinstance(part, ImagePart)
        assert part.data == base64.b64encode(b"PNG").decode("ascii")
        assert part.data_url == f"data:image/png;base64,{part.data}"
        assert part.filename == "/x/a.png"

    def test_pdf(self) -> None:
        """Should classify application/pdf as a pdf part."""
        part = classify_file(filename="/x/a.pdf", raw_filename="./a.pdf", mime_type="application/pdf", data=b"%PDF")

        assert isinstance(part, PdfPart)
        assert part.data_url.startswith("data:application/pdf;base64,")

    def test_text(self) -> None:
        """Should decode text/* payloads."""
        part = classify_file(filename="/x/a.md", raw_filename="./a.md", mime_type="text/markdown", data=b"# hi")

        assert part == TextFilePart(mime_type="text/markdown", text="# hi", filename="/x/a.md")

    def test_unsupported_keeps_reference(self) -> None:
        """Should fall back to the original reference for other types."""
        part = classify_file(
            filename="/x/a.zip",
            raw_filename="./a.zip",
            mime_type="application/zip",
            data=b"PK",
        )

        assert part == UnsupportedFilePart(raw_filename="./a.zip")

    def test_unsupported_image_type(self) -> None:
        """Should not treat image types outside the supported set as images."""
        part = classify_file(filename="/x/a.bmp", raw_filename="./a.bmp", mime_type="image/bmp", data=b"BM")

        assert isinstance(part, UnsupportedFilePart)

    def test_emitted_file_part(self) -> None:
        """Should apply the same policy to file parts emitted by include()."""
        part = classify_file_part(FilePart(filename="/x/a.gif", mime_type="image/gif", data=b"GIF"))

        assert isinstance(part, ImagePart)
        assert part.mime_type == "image/gif"


class TestPartClassifier:

    def test_order_and_warnings(self) -> None:
        """Should preserve chunk order and unpack warnings."""
        warning = FileWarning(filename="/x/missing", raw_filename="./missing", error="File not found or not readable")
        chunks = [
            TextChunk(value="a"),
            FileChunk(filename="/x/t.txt", raw_filename="./t.txt", readable=True, content=b"t", mime_type="text/plain"),
            TextChunk(value=""),
            FileChunk(filename="/x/missing", raw_filename="./missing", readable=False, error="File not found or not readable"),
            TextChunk(value="b"),
            WarningsChunk(entries=(warning,)),
        ]

        parts, warnings = PartClassifier().classify(iter(chunks))

        assert parts == [
            TextPart(text="a"),
            TextFilePart(mime_type="text/plain", text="t", filename="/x/t.txt"),
            UnsupportedFilePart(raw_filename="./missing"),
            TextPart(text="b"),
        ]
        assert warnings == [warning]

    def test_readable_chunk_without_content(self) -> None:
        """Should treat a chunk missing its data as unsupported."""
        chunk = FileChunk(filename="/x/a.txt", raw_filename="./a.txt", readable=True, content=None, mime_type="text/plain")

        assert PartClassifier().classify_chunk(chunk) == UnsupportedFilePart(raw_filename="./a.txt")


def test_parse_message_parts(resolver, tmp_path: Path, write_file) -> None:
    """Should chunk and classify content in one call."""
    write_file("pic.png", b"\x89PNG")

    parts, warnings = parse_message_parts(
        "Look: @./pic.png and @./gone.txt",
        mime_resolver=resolver,
        base_dir=str(tmp_path),
    )

    assert [part.kind for part in parts] == ["text", "image", "text", "unsupported_file"]
    assert len(warnings) == 1
    assert warnings[0].raw_filename == "./gone.txt"
