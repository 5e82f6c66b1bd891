"""Tests for frontmatter extraction, parser registry and evaluation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from promptweave.frontmatter import (
    DuplicateParserError,
    FrontmatterParser,
    FrontmatterParserRegistry,
    UnsupportedLanguageError,
    evaluate_frontmatter,
    extract_frontmatter,
    get_global_registry,
)
from promptweave.models import Position


class TestExtractFrontmatter:

    def test_no_frontmatter(self) -> None:
        """Should return the text unchanged."""
        assert extract_frontmatter("hello\nworld") == (None, "hello\nworld")

    def test_fenced_block(self) -> None:
        """Should split a fenced block from the body."""
        frontmatter, body = extract_frontmatter("```python\nx = 1\ny = 2\n```\nHello {{x}}")

        assert frontmatter.language == "python"
        assert frontmatter.code == "x = 1\ny = 2"
        assert frontmatter.position == Position(line=1, column=1)
        assert frontmatter.body_line == 5
        assert body == "Hello {{x}}"

    def test_yaml_block(self) -> None:
        """Should treat --- delimiters as YAML."""
        frontmatter, body = extract_frontmatter("---\ntitle: Notes\n---\nbody")

        assert frontmatter.language == "yaml"
        assert frontmatter.code == "title: Notes"
        assert body == "body"

    def test_unclosed_block(self) -> None:
        """Should treat an unclosed block as body text."""
        text = "```json\n{\"a\": 1}\n"

        assert extract_frontmatter(text) == (None, text)


class TestRegistry:

    def test_builtin_languages(self) -> None:
        """Should register python, json and yaml."""
        assert get_global_registry().supported_languages() == ["json", "python", "yaml"]

    def test_duplicate_registration(self) -> None:
        """Should reject a second parser for the same language."""

        class TomlParser(FrontmatterParser):
            def get_language(self) -> str:
                return "toml"

            def parse(self, code: str, *, filename: Optional[str] = None, mime_resolver=None) -> Any:
                return {}

        registry = FrontmatterParserRegistry()
        registry.register(TomlParser())

        assert registry.has("toml")
        with pytest.raises(DuplicateParserError):
            registry.register(TomlParser())

    def test_unknown_language(self) -> None:
        """Should raise for unregistered languages."""
        with pytest.raises(UnsupportedLanguageError):
            FrontmatterParserRegistry().get("lua")


class TestEvaluateFrontmatter:

    def test_python(self, resolver) -> None:
        """Should bind names defined by python frontmatter."""
        result = evaluate_frontmatter("```python\nx = 5\nname = 'Ada'\n```\nbody", mime_resolver=resolver)

        assert result.diagnostics == []
        assert result.bindings["x"] == 5
        assert result.bindings["name"] == "Ada"
        assert result.body == "body"

    def test_json(self, resolver) -> None:
        """Should bind the keys of a JSON object."""
        result = evaluate_frontmatter('```json\n{"topic": "tides", "n": 3}\n```\nbody', mime_resolver=resolver)

        assert result.bindings == {"topic": "tides", "n": 3}

    def test_json_must_be_object(self, resolver) -> None:
        """Should report non-object JSON as an error diagnostic."""
        result = evaluate_frontmatter("```json\n[1, 2]\n```\nbody", filename="doc.md", mime_resolver=resolver)

        assert result.bindings == {}
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.type == "frontmatter"
        assert diagnostic.severity == "error"
        assert diagnostic.source_file == "doc.md"
        assert "must be an object" in diagnostic.error

    def test_yaml(self, resolver) -> None:
        """Should bind YAML mappings."""
        result = evaluate_frontmatter("---\ntags:\n  - a\n  - b\n---\nbody", mime_resolver=resolver)

        assert result.bindings == {"tags": ["a", "b"]}

    def test_python_runtime_error(self, resolver) -> None:
        """Should turn execution failures into diagnostics and keep the body."""
        result = evaluate_frontmatter("```python\nx = 1 / 0\n```\nbody", mime_resolver=resolver)

        assert result.bindings == {}
        assert result.body == "body"
        assert result.diagnostics[0].severity == "error"
        assert "ZeroDivisionError" in result.diagnostics[0].error

    def test_unsupported_language(self, resolver) -> None:
        """Should report unregistered languages."""
        result = evaluate_frontmatter("```lua\nx = 1\n```\nbody", mime_resolver=resolver)

        assert result.diagnostics[0].error == "Unsupported frontmatter language: lua"
        assert result.diagnostics[0].source_file == "N/A"

    def test_non_mapping_result_is_warning(self, resolver) -> None:
        """Should warn when a parser returns something other than a mapping."""

        class ListParser(FrontmatterParser):
            def get_language(self) -> str:
                return "list"

            def parse(self, code: str, *, filename: Optional[str] = None, mime_resolver=None) -> Any:
                return [code]

        registry = FrontmatterParserRegistry()
        registry.register(ListParser())

        result = evaluate_frontmatter("```list\nx\n```\nbody", mime_resolver=resolver, registry=registry)

        assert result.diagnostics[0].severity == "warning"
        assert result.diagnostics[0].error == "Frontmatter must be an object, got list"

    def test_python_include_relative_to_document(self, resolver, tmp_path: Path, write_file) -> None:
        """Should resolve include() in frontmatter against the document directory."""
        write_file("snippet.txt", "from snippet")
        doc = tmp_path / "doc.md"

        result = evaluate_frontmatter(
            "```python\nsnippet = include('snippet.txt')\n```\n{{snippet}}",
            filename=str(doc),
            mime_resolver=resolver,
        )

        assert result.diagnostics == []
        assert result.bindings["snippet"].children == ("from snippet",)
