"""
Document templating: frontmatter, inline expressions and @file references.

A document is rendered in two passes:
    1. Frontmatter is evaluated into bindings
    2. The body is split into literal text and ``{{ expression }}`` segments.
       Literal text is chunked for @./file references; expression output
       (including included text) is passed through as already-formed parts.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from promptweave.chunking.parts import classify_file_part, parse_message_parts
from promptweave.chunking.segments import Segment, parse_inline_segments
from promptweave.constants import UNKNOWN_SOURCE
from promptweave.errors import IncludeError, PromptweaveError
from promptweave.eval.emittable import EmitBuilder, Emittable
from promptweave.eval.sandbox import Environment, create_environment, eval_expression
from promptweave.frontmatter import evaluate_frontmatter
from promptweave.logger import UnifiedLogger
from promptweave.models import Diagnostic, EmittedPart, FilePart, FileWarning, Part, TextPart
from promptweave.utils.mime import MimeResolver

logger = UnifiedLogger(tag="processor")


@dataclass
class EvaluatedContent:
    parts: List[EmittedPart] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass
class RenderedDocument:
    parts: List[Part] = field(default_factory=list)
    warnings: List[FileWarning] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        try:
            return json.dumps(value)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def build_environment(
    bindings: Optional[Dict[str, Any]] = None,
    filename: Optional[str] = None,
    mime_resolver: Optional[MimeResolver] = None,
) -> Environment:
    """Fresh environment for ``filename`` seeded with frontmatter bindings."""
    env = create_environment(filename, mime_resolver=mime_resolver)
    if bindings:
        env.update(bindings)
    return env


def _append_text(parts: List[EmittedPart], text: str) -> None:
    if text:
        parts.append(TextPart(text=text))


def _evaluate_segment(
    segment: Segment,
    env: Environment,
    source: str,
    diagnostics: List[Diagnostic],
) -> List[EmittedPart]:
    """Evaluate one expression segment into emitted parts.

    A failed expression yields its literal ``{{code}}`` text and appends a
    warning diagnostic.
    """
    parts: List[EmittedPart] = []
    literal = "{{" + segment.value + "}}"

    try:
        value = eval_expression(segment.value, env)
    except IncludeError as exc:
        diagnostics.append(exc.to_diagnostic(position=segment.position, source_file=source))
        _append_text(parts, literal)
        return parts
    except PromptweaveError as exc:
        diagnostics.append(
            Diagnostic(
                type="expression",
                error=exc.message,
                expression=segment.value,
                position=segment.position,
                source_file=source,
            )
        )
        _append_text(parts, literal)
        return parts

    if not isinstance(value, Emittable):
        _append_text(parts, _to_text(value))
        return parts

    builder = EmitBuilder(position=segment.position, diagnostics=diagnostics, source_file=source)
    try:
        value.emit(builder)
    except PromptweaveError as exc:
        diagnostics.append(
            Diagnostic(
                type="expression",
                error=f"Error during emit: {exc.message}",
                expression=segment.value,
                position=segment.position,
                source_file=source,
            )
        )
        _append_text(parts, literal)
        return parts
    return builder.parts


def evaluate_content(
    content: Optional[str],
    env: Environment,
    source_file: Optional[str] = None,
    base_line: int = 1,
) -> EvaluatedContent:
    """
    Evaluate the ``{{ }}`` expressions of ``content`` in ``env``.

    Failed expressions keep their literal text and produce a warning
    diagnostic; evaluation continues with the next segment.
    """
    result = EvaluatedContent()
    source = source_file or env.filename or UNKNOWN_SOURCE

    for segment in parse_inline_segments(content, base_line=base_line):
        if segment.kind == "text":
            _append_text(result.parts, segment.value)
        else:
            result.parts.extend(_evaluate_segment(segment, env, source, result.diagnostics))

    if result.diagnostics:
        logger.debug(
            "Evaluated content of {source} with {count} diagnostics",
            source=source,
            count=len(result.diagnostics),
        )
    return result


def _merge_text(parts: List[Part]) -> List[Part]:
    """Join adjacent text parts."""
    merged: List[Part] = []
    for part in parts:
        if isinstance(part, TextPart) and merged and isinstance(merged[-1], TextPart):
            merged[-1] = TextPart(text=merged[-1].text + part.text)
        else:
            merged.append(part)
    return merged


@logger.trace("render_document")
def render_document(
    text: Optional[str],
    filename: Optional[str] = None,
    mime_resolver: Optional[MimeResolver] = None,
) -> RenderedDocument:
    """
    Render a document into classified parts.

    Only literal body text is chunked for @./file references. Text produced
    by expressions or include() is never read as a file reference.

    Args:
        text: Full document text, optionally starting with frontmatter
        filename: Document path; include() and @./file references resolve
            relative to its directory
        mime_resolver: Resolver for @file references and binary includes

    Returns:
        RenderedDocument with parts in source order, the batched @file
        warnings and all frontmatter/expression diagnostics
    """
    evaluated_frontmatter = evaluate_frontmatter(
        text,
        filename=filename,
        mime_resolver=mime_resolver,
    )
    env = build_environment(
        evaluated_frontmatter.bindings,
        filename=filename,
        mime_resolver=mime_resolver,
    )
    source = filename or UNKNOWN_SOURCE
    base_dir = os.path.dirname(os.path.abspath(filename)) if filename else None

    rendered = RenderedDocument(diagnostics=list(evaluated_frontmatter.diagnostics))
    parts: List[Part] = []

    segments = parse_inline_segments(
        evaluated_frontmatter.body,
        base_line=evaluated_frontmatter.body_line,
    )
    for segment in segments:
        if segment.kind == "text":
            text_parts, warnings = parse_message_parts(
                segment.value,
                mime_resolver=env.mime_resolver,
                base_dir=base_dir,
            )
            parts.extend(text_parts)
            rendered.warnings.extend(warnings)
            continue

        for emitted in _evaluate_segment(segment, env, source, rendered.diagnostics):
            if isinstance(emitted, FilePart):
                parts.append(classify_file_part(emitted))
            else:
                parts.append(emitted)

    rendered.parts = _merge_text(parts)
    return rendered
