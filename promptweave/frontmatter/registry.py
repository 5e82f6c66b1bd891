"""
Frontmatter parser registry.

Manages the language parsers available to frontmatter evaluation and wires
the built-in set in on first use.
"""

from typing import Dict, List, Optional

from promptweave.logger import UnifiedLogger

from .base import FrontmatterParser
from .parsers import BUILTIN_PARSERS

logger = UnifiedLogger(tag="frontmatter-registry")


#######################################################################
## Exception Classes
#######################################################################

class FrontmatterRegistryError(Exception):
    """Base exception for frontmatter registry errors."""
    pass


class UnsupportedLanguageError(FrontmatterRegistryError):
    """Raised when looking up a language with no registered parser."""
    pass


class DuplicateParserError(FrontmatterRegistryError):
    """Raised when registering a parser for a language that already has one."""
    pass


#######################################################################
## Registry Implementation
#######################################################################

class FrontmatterParserRegistry:
    """Registry of frontmatter parsers keyed by language."""

    def __init__(self):
        self._parsers: Dict[str, FrontmatterParser] = {}

    def register(self, parser: FrontmatterParser) -> None:
        """Register a parser.

        Raises:
            DuplicateParserError: If a parser for this language is already registered
        """
        language = parser.get_language()
        if language in self._parsers:
            raise DuplicateParserError(
                f"Frontmatter language '{language}' is already registered"
            )
        self._parsers[language] = parser
        logger.debug("Registered frontmatter parser {language}", language=language)

    def has(self, language: str) -> bool:
        return language in self._parsers

    def get(self, language: str) -> FrontmatterParser:
        """Get the parser for a language.

        Raises:
            UnsupportedLanguageError: If the language is not registered
        """
        if language not in self._parsers:
            raise UnsupportedLanguageError(
                f"Unsupported frontmatter language: {language}"
            )
        return self._parsers[language]

    def supported_languages(self) -> List[str]:
        """Registered language identifiers, sorted."""
        return sorted(self._parsers)


#######################################################################
## Global Registry Instance
#######################################################################

_global_registry: Optional[FrontmatterParserRegistry] = None


def get_global_registry() -> FrontmatterParserRegistry:
    """Get the global registry, populated with the built-in parsers."""
    global _global_registry

    if _global_registry is None:
        registry = FrontmatterParserRegistry()
        for parser_cls in BUILTIN_PARSERS:
            registry.register(parser_cls())
        _global_registry = registry

    return _global_registry


def register_parser(parser: FrontmatterParser) -> None:
    """Register a parser with the global registry."""
    get_global_registry().register(parser)
