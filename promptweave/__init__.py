"""
promptweave: templated prompt documents with @file references, inline
expressions and sandboxed includes.
"""

from .processor import (
    EvaluatedContent,
    RenderedDocument,
    build_environment,
    evaluate_content,
    render_document,
)
from .prompt import PromptBuildResult, build_prompt, format_file_warnings, to_user_content

__all__ = [
    "EvaluatedContent",
    "RenderedDocument",
    "build_environment",
    "evaluate_content",
    "render_document",
    "PromptBuildResult",
    "build_prompt",
    "format_file_warnings",
    "to_user_content",
]
