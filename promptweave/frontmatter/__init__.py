"""
Frontmatter extraction, parser registry and evaluation.
"""

from .base import FrontmatterParser
from .evaluate import EvaluatedFrontmatter, evaluate_frontmatter
from .extract import Frontmatter, extract_frontmatter
from .registry import (
    DuplicateParserError,
    FrontmatterParserRegistry,
    FrontmatterRegistryError,
    UnsupportedLanguageError,
    get_global_registry,
    register_parser,
)

__all__ = [
    "FrontmatterParser",
    "EvaluatedFrontmatter",
    "evaluate_frontmatter",
    "Frontmatter",
    "extract_frontmatter",
    "DuplicateParserError",
    "FrontmatterParserRegistry",
    "FrontmatterRegistryError",
    "UnsupportedLanguageError",
    "get_global_registry",
    "register_parser",
]
