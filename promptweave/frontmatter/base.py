"""
Base class for frontmatter language parsers.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from promptweave.utils.mime import MimeResolver


class FrontmatterParser(ABC):
    """Base class for frontmatter parsers.

    Each supported frontmatter language (python, json, yaml) implements this
    interface to turn the block's source into a mapping of variables.
    """

    @abstractmethod
    def get_language(self) -> str:
        """Return the language identifier handled by this parser (e.g. "json")."""
        pass

    @abstractmethod
    def parse(
        self,
        code: str,
        *,
        filename: Optional[str] = None,
        mime_resolver: Optional[MimeResolver] = None,
    ) -> Any:
        """Parse frontmatter source and return the resulting variables.

        Args:
            code: The frontmatter block contents, without fences
            filename: Path of the document the block belongs to
            mime_resolver: Resolver used by include() during execution

        Returns:
            The parsed value; callers expect a mapping

        Raises:
            FrontmatterError, LoadError, ExecutionError: If the code cannot be parsed
        """
        pass
