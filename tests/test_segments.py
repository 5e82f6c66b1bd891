"""Tests for the inline expression segmenter."""

from __future__ import annotations

from promptweave.chunking.segments import parse_inline_segments
from promptweave.models import Position


class TestParseInlineSegments:

    def test_empty_text(self) -> None:
        """Should return no segments for empty input."""
        assert parse_inline_segments("") == []
        assert parse_inline_segments(None) == []

    def test_text_and_expressions_in_order(self) -> None:
        """Should interleave text and expression segments in source order."""
        segments = parse_inline_segments("Hi {{ name }}, you are {{age}}.")

        assert [segment.kind for segment in segments] == [
            "text", "expression", "text", "expression", "text",
        ]
        assert segments[1].value == " name "
        assert segments[3].value == "age"
        assert segments[4].value == "."

    def test_file_references_are_plain_text(self) -> None:
        """Should not recognize @./file references."""
        segments = parse_inline_segments("See @./a.txt")

        assert len(segments) == 1
        assert segments[0].kind == "text"
        assert segments[0].value == "See @./a.txt"

    def test_positions_are_one_based(self) -> None:
        """Should report line and column of each expression."""
        segments = parse_inline_segments("first line\n  {{x}}", base_line=5)

        expression = segments[-1]
        assert expression.position == Position(line=6, column=3)

    def test_multiline_expression(self) -> None:
        """Should match expressions spanning several lines."""
        segments = parse_inline_segments("{{ 1 +\n 2 }}")

        assert len(segments) == 1
        assert segments[0].kind == "expression"
        assert segments[0].value == " 1 +\n 2 "
