"""
Exception taxonomy for promptweave.

Every class accepts a single positional message; structured context is
passed as keyword arguments. The sandbox interpreter re-raises faults by
calling the exception class with one message string, so this signature is
required.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from promptweave.constants import UNKNOWN_SOURCE
from promptweave.models import Diagnostic, Position


class PromptweaveError(Exception):
    """Base exception for all promptweave errors."""

    error_type = "PromptweaveError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


#######################################################################
## Include failures (structured, passed through evaluators unchanged)
#######################################################################

class IncludeError(PromptweaveError):
    """Structured failure raised by include()."""

    error_type = "IncludeError"
    diagnostic_type = "file"

    def __init__(
        self,
        message: str,
        *,
        filename: Optional[str] = None,
        raw: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.filename = filename
        self.raw = raw
        super().__init__(
            message,
            details={"filename": filename, "raw": raw, **(details or {})},
        )

    def to_diagnostic(
        self,
        *,
        position: Optional[Position] = None,
        source_file: Optional[str] = None,
        severity: str = "warning",
    ) -> Diagnostic:
        return Diagnostic(
            type=self.diagnostic_type,
            error=self.message,
            severity=severity,  # type: ignore[arg-type]
            filename=self.filename,
            raw=self.raw,
            position=position,
            source_file=source_file,
        )


class FileNotFound(IncludeError):
    """Raised when an included path is not a readable file."""

    error_type = "FileNotFound"


class MimeUndetermined(IncludeError):
    """Raised when no MIME type can be determined for a binary include."""

    error_type = "MimeUndetermined"


class ReadFailure(IncludeError):
    """Raised when an included file cannot be read."""

    error_type = "ReadFailure"


class CircularInclude(IncludeError):
    """Raised when a text include would re-enter a file already being included."""

    error_type = "CircularInclude"

    def __init__(
        self,
        message: str,
        *,
        chain: Sequence[str] = (),
        filename: Optional[str] = None,
        raw: Optional[str] = None,
    ):
        self.chain: Tuple[str, ...] = tuple(chain)
        super().__init__(
            message,
            filename=filename,
            raw=raw,
            details={"chain": list(self.chain)},
        )


#######################################################################
## Script failures (wrapped with file/expression context)
#######################################################################

class ScriptError(PromptweaveError):
    """Base class for failures while running sandboxed code."""

    error_type = "ScriptError"

    def __init__(
        self,
        message: str,
        *,
        filename: Optional[str] = None,
        expression: Optional[str] = None,
    ):
        self.filename = filename or UNKNOWN_SOURCE
        self.expression = expression
        super().__init__(
            message,
            details={"filename": self.filename, "expression": expression},
        )


class LoadError(ScriptError):
    """Raised when a script does not compile against the capability set."""

    error_type = "LoadError"


class ExecutionError(ScriptError):
    """Raised when a script fails at runtime."""

    error_type = "ExecutionError"


class EvaluationError(ScriptError):
    """Raised when a single expression fails."""

    error_type = "EvaluationError"


#######################################################################
## Collaborator and configuration failures
#######################################################################

class MimeDetectionError(PromptweaveError):
    """Raised when a MIME type cannot be resolved for a path."""

    error_type = "MimeDetectionError"


class FrontmatterError(PromptweaveError):
    """Raised when frontmatter cannot be extracted or parsed."""

    error_type = "FrontmatterError"


class SettingsError(PromptweaveError):
    """Raised when application settings are invalid or unavailable."""

    error_type = "SettingsError"
