"""
Built-in frontmatter parsers: python, json and yaml.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Tuple, Type

import yaml

from promptweave.errors import FrontmatterError
from promptweave.eval.sandbox import create_environment, execute
from promptweave.utils.mime import MimeResolver

from .base import FrontmatterParser


class PythonFrontmatterParser(FrontmatterParser):
    """Runs the block in the sandbox and returns the names it bound."""

    def get_language(self) -> str:
        return "python"

    def parse(
        self,
        code: str,
        *,
        filename: Optional[str] = None,
        mime_resolver: Optional[MimeResolver] = None,
    ) -> Any:
        env = create_environment(filename, mime_resolver=mime_resolver)
        return execute(code, env)


class JsonFrontmatterParser(FrontmatterParser):

    def get_language(self) -> str:
        return "json"

    def parse(
        self,
        code: str,
        *,
        filename: Optional[str] = None,
        mime_resolver: Optional[MimeResolver] = None,
    ) -> Any:
        try:
            result = json.loads(code)
        except json.JSONDecodeError as exc:
            raise FrontmatterError(f"JSON parse error: {exc}") from exc

        if not isinstance(result, dict):
            raise FrontmatterError(
                f"JSON frontmatter must be an object, got {type(result).__name__}"
            )
        return result


class YamlFrontmatterParser(FrontmatterParser):

    def get_language(self) -> str:
        return "yaml"

    def parse(
        self,
        code: str,
        *,
        filename: Optional[str] = None,
        mime_resolver: Optional[MimeResolver] = None,
    ) -> Any:
        try:
            result = yaml.safe_load(code)
        except yaml.YAMLError as exc:
            raise FrontmatterError(f"YAML parse error: {exc}") from exc

        # An empty block is an empty mapping
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise FrontmatterError(
                f"YAML frontmatter must be a mapping, got {type(result).__name__}"
            )
        return result


BUILTIN_PARSERS: Tuple[Type[FrontmatterParser], ...] = (
    PythonFrontmatterParser,
    JsonFrontmatterParser,
    YamlFrontmatterParser,
)
