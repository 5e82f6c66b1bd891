"""
Frontmatter evaluation into bindings and diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from promptweave.constants import UNKNOWN_SOURCE
from promptweave.errors import PromptweaveError
from promptweave.logger import UnifiedLogger
from promptweave.models import Diagnostic
from promptweave.utils.mime import MimeResolver

from .extract import Frontmatter, extract_frontmatter
from .registry import FrontmatterParserRegistry, get_global_registry

logger = UnifiedLogger(tag="frontmatter")


@dataclass
class EvaluatedFrontmatter:
    bindings: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    body: str = ""
    frontmatter: Optional[Frontmatter] = None

    @property
    def body_line(self) -> int:
        return self.frontmatter.body_line if self.frontmatter else 1


def _diagnostic(
    frontmatter: Frontmatter,
    error: str,
    severity: str,
    source_file: str,
) -> Diagnostic:
    return Diagnostic(
        type="frontmatter",
        error=error,
        severity=severity,  # type: ignore[arg-type]
        position=frontmatter.position,
        source_file=source_file,
    )


def evaluate_frontmatter(
    text: Optional[str],
    filename: Optional[str] = None,
    mime_resolver: Optional[MimeResolver] = None,
    registry: Optional[FrontmatterParserRegistry] = None,
) -> EvaluatedFrontmatter:
    """
    Extract and evaluate the frontmatter of a document.

    Failures never raise: they are returned as ``frontmatter`` diagnostics and
    the body is still returned for templating.
    """
    frontmatter, body = extract_frontmatter(text)
    result = EvaluatedFrontmatter(body=body, frontmatter=frontmatter)
    if frontmatter is None:
        return result

    registry = registry or get_global_registry()
    source_file = filename or UNKNOWN_SOURCE

    if not registry.has(frontmatter.language):
        result.diagnostics.append(
            _diagnostic(
                frontmatter,
                f"Unsupported frontmatter language: {frontmatter.language}",
                "error",
                source_file,
            )
        )
        return result

    parser = registry.get(frontmatter.language)
    with logger.span("evaluate_frontmatter", language=frontmatter.language, source_file=source_file):
        try:
            value = parser.parse(
                frontmatter.code,
                filename=filename,
                mime_resolver=mime_resolver,
            )
        except PromptweaveError as exc:
            logger.warning(
                "Frontmatter evaluation failed in {source_file}: {error}",
                source_file=source_file,
                error=exc.message,
            )
            result.diagnostics.append(
                _diagnostic(frontmatter, exc.message, "error", source_file)
            )
            return result

    if isinstance(value, dict):
        result.bindings.update(value)
    else:
        result.diagnostics.append(
            _diagnostic(
                frontmatter,
                f"Frontmatter must be an object, got {type(value).__name__}",
                "warning",
                source_file,
            )
        )
    return result
