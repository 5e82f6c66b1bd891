"""Shared fixtures for promptweave tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Union

import pytest

from promptweave.utils.mime import MimeResolver


@pytest.fixture
def resolver() -> MimeResolver:
    """Resolver without live detection, so MIME types come from the extension table."""
    return MimeResolver(command=None)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, Union[str, bytes]], Path]:
    """Write a file under tmp_path and return its path."""

    def _write(name: str, content: Union[str, bytes]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write
