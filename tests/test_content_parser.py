"""Tests for @file reference chunking."""

from __future__ import annotations

import os
from pathlib import Path

from promptweave.chunking.content import ChunkParser, parse_content, strip_trailing_punctuation
from promptweave.models import FileChunk, TextChunk, WarningsChunk


def _parse(content, resolver, base_dir):
    return list(ChunkParser(mime_resolver=resolver, base_dir=str(base_dir)).parse(content))


class TestPlainContent:
    """Content without references."""

    def test_empty_content_yields_nothing(self, resolver, tmp_path: Path) -> None:
        """Should yield no chunks for empty or absent content."""
        assert _parse("", resolver, tmp_path) == []
        assert _parse(None, resolver, tmp_path) == []

    def test_plain_text_is_single_chunk(self, resolver, tmp_path: Path) -> None:
        """Should yield one text chunk equal to the input and no warnings."""
        content = "Just some text, with an @mention and a path like a/b.txt."

        chunks = _parse(content, resolver, tmp_path)

        assert chunks == [TextChunk(value=content)]


class TestFileReferences:
    """Content with @./file references."""

    def test_reference_between_text(self, resolver, tmp_path: Path, write_file) -> None:
        """Should yield text, file and text chunks in source order."""
        write_file("a.txt", "X")

        chunks = _parse("Hello @./a.txt world", resolver, tmp_path)

        assert len(chunks) == 3
        assert chunks[0] == TextChunk(value="Hello ")
        file_chunk = chunks[1]
        assert isinstance(file_chunk, FileChunk)
        assert file_chunk.readable is True
        assert file_chunk.content == b"X"
        assert file_chunk.mime_type == "text/plain"
        assert file_chunk.raw_filename == "./a.txt"
        assert file_chunk.filename == os.path.join(str(tmp_path), "a.txt")
        assert chunks[2] == TextChunk(value=" world")

    def test_missing_file_yields_unreadable_chunk_and_warning(self, resolver, tmp_path: Path) -> None:
        """Should degrade to an unreadable chunk followed by one warnings chunk."""
        chunks = _parse("@./missing.bin", resolver, tmp_path)

        assert len(chunks) == 2
        file_chunk, warnings_chunk = chunks
        assert isinstance(file_chunk, FileChunk)
        assert file_chunk.readable is False
        assert file_chunk.error == "File not found or not readable"
        assert isinstance(warnings_chunk, WarningsChunk)
        assert len(warnings_chunk.entries) == 1
        assert warnings_chunk.entries[0].raw_filename == "./missing.bin"

    def test_mime_override_with_trailing_period(self, resolver, tmp_path: Path, write_file) -> None:
        """Should strip punctuation from the override and leave it in the text."""
        write_file("data.bin", b"\x00\x01")

        chunks = _parse("See @./data.bin;type=application/json.", resolver, tmp_path)

        assert chunks[0] == TextChunk(value="See ")
        file_chunk = chunks[1]
        assert isinstance(file_chunk, FileChunk)
        assert file_chunk.readable is True
        assert file_chunk.mime_type == "application/json"
        assert file_chunk.raw_filename == "./data.bin;type=application/json"
        assert chunks[2] == TextChunk(value=".")
        assert len(chunks) == 3

    def test_trailing_punctuation_stays_in_text(self, resolver, tmp_path: Path, write_file) -> None:
        """Should exclude a trailing comma from the path."""
        write_file("notes.md", "# Notes")

        chunks = _parse("Read @./notes.md, then answer", resolver, tmp_path)

        assert isinstance(chunks[1], FileChunk)
        assert chunks[1].mime_type == "text/markdown"
        assert chunks[2] == TextChunk(value=", then answer")

    def test_percent_encoded_path(self, resolver, tmp_path: Path, write_file) -> None:
        """Should decode %XX and + before opening the file."""
        write_file("my notes.txt", "hello")

        chunks = _parse("@./my%20notes.txt @./my+notes.txt", resolver, tmp_path)

        file_chunks = [chunk for chunk in chunks if isinstance(chunk, FileChunk)]
        assert len(file_chunks) == 2
        assert all(chunk.readable for chunk in file_chunks)
        assert all(chunk.content == b"hello" for chunk in file_chunks)

    def test_parent_directory_reference(self, resolver, tmp_path: Path, write_file) -> None:
        """Should resolve ../ references against the base directory."""
        write_file("shared.txt", "shared")
        nested = tmp_path / "nested"
        nested.mkdir()

        chunks = _parse("@../shared.txt", resolver, nested)

        assert len(chunks) == 1
        assert chunks[0].readable is True
        assert chunks[0].filename == str(tmp_path / "shared.txt")

    def test_unknown_mime_is_unreadable(self, resolver, tmp_path: Path, write_file) -> None:
        """Should report a MIME failure when neither detection nor the table resolve."""
        write_file("blob.unknownext", b"data")

        chunks = _parse("@./blob.unknownext", resolver, tmp_path)

        assert chunks[0].readable is False
        assert chunks[0].error.startswith("Failed to get MIME type:")
        assert isinstance(chunks[1], WarningsChunk)

    def test_warnings_are_batched_after_all_chunks(self, resolver, tmp_path: Path, write_file) -> None:
        """Should emit a single warnings chunk after every text and file chunk."""
        write_file("ok.txt", "ok")

        chunks = _parse("@./one.txt and @./ok.txt and @./two.txt end", resolver, tmp_path)

        warning_indexes = [i for i, chunk in enumerate(chunks) if isinstance(chunk, WarningsChunk)]
        assert warning_indexes == [len(chunks) - 1]
        entries = chunks[-1].entries
        assert [entry.raw_filename for entry in entries] == ["./one.txt", "./two.txt"]
        assert chunks[-2] == TextChunk(value=" end")


class TestChunkStream:
    """Pull semantics of the chunk stream."""

    def test_stream_is_single_use(self, resolver, tmp_path: Path) -> None:
        """Should stay exhausted after the first pass."""
        stream = parse_content("hello", mime_resolver=resolver, base_dir=str(tmp_path))

        assert list(stream) == [TextChunk(value="hello")]
        assert list(stream) == []

    def test_stream_is_lazy(self, resolver, tmp_path: Path, write_file) -> None:
        """Should not read files the consumer never pulls."""
        path = write_file("late.txt", "late")
        stream = parse_content("first @./late.txt", mime_resolver=resolver, base_dir=str(tmp_path))

        assert next(stream) == TextChunk(value="first ")
        path.unlink()
        chunk = next(stream)

        assert isinstance(chunk, FileChunk)
        assert chunk.readable is False


def test_strip_trailing_punctuation() -> None:
    """Should strip every trailing punctuation character greedily."""
    assert strip_trailing_punctuation("./a.txt).,") == "./a.txt"
    assert strip_trailing_punctuation("./a.txt") == "./a.txt"
