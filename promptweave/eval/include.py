"""
The include() capability installed into sandbox environments.

Binary includes return a single file part. Text includes are segmented for
``{{ }}`` expressions, evaluated in an isolated child environment and
returned as a composite part. The include stack is a tuple passed explicitly
to each resolver; nested resolvers get an extended copy.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from promptweave.chunking.content import is_readable_file
from promptweave.chunking.segments import parse_inline_segments
from promptweave.errors import (
    CircularInclude,
    FileNotFound,
    MimeDetectionError,
    MimeUndetermined,
    ReadFailure,
)
from promptweave.logger import UnifiedLogger

from .emittable import BinaryIncludePart, CompositeIncludePart, Emittable, IncludeChild

if TYPE_CHECKING:
    from .sandbox import Environment

logger = UnifiedLogger(tag="include")

EvaluateFn = Callable[[str, "Environment"], Any]
CreateEnvFn = Callable[..., "Environment"]


class IncludeResolver:
    """Resolve include() calls made from one environment."""

    def __init__(
        self,
        env: "Environment",
        stack: Tuple[str, ...],
        *,
        evaluate: EvaluateFn,
        create_env: CreateEnvFn,
    ):
        self.env = env
        self.stack = stack
        self._evaluate = evaluate
        self._create_env = create_env

    def resolve_path(self, relative_path: str) -> str:
        if self.env.dirname:
            return os.path.abspath(os.path.join(self.env.dirname, relative_path))
        return relative_path

    def include(
        self,
        relative_path: str,
        binary: bool = False,
        mime: Optional[str] = None,
    ) -> Emittable:
        """
        Include a file relative to the current file.

        Args:
            relative_path: Path relative to the including file's directory
            binary: Return the raw bytes as a single file part
            mime: MIME type override for binary includes

        Raises:
            FileNotFound, MimeUndetermined, ReadFailure, CircularInclude
        """
        target_path = self.resolve_path(relative_path)

        if not is_readable_file(target_path):
            raise FileNotFound(
                f"File not found: {target_path}",
                filename=target_path,
                raw=relative_path,
            )

        if binary:
            return self._include_binary(target_path, relative_path, mime)
        return self._include_text(target_path, relative_path)

    def _include_binary(
        self,
        target_path: str,
        relative_path: str,
        mime: Optional[str],
    ) -> BinaryIncludePart:
        # Binary content never recurses, so the include stack is not consulted.
        try:
            mime_type = self.env.mime_resolver.resolve(target_path, override=mime)
        except MimeDetectionError as exc:
            raise MimeUndetermined(
                f"Could not determine MIME type for: {target_path}",
                filename=target_path,
                raw=relative_path,
            ) from exc

        try:
            with open(target_path, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise ReadFailure(
                f"Failed to read file: {exc.strerror or exc}",
                filename=target_path,
                raw=relative_path,
            ) from exc

        logger.debug(
            "Binary include {path} ({mime_type}, {size} bytes)",
            path=target_path,
            mime_type=mime_type,
            size=len(data),
        )
        return BinaryIncludePart(target_path, mime_type, data)

    def _include_text(self, target_path: str, relative_path: str) -> CompositeIncludePart:
        absolute_target = os.path.abspath(target_path)
        if absolute_target in self.stack:
            chain = self.stack + (absolute_target,)
            raise CircularInclude(
                f"Circular include for '{target_path}' (requested by "
                f"'{self.env.display_name}'). Include stack: {' -> '.join(chain)}",
                chain=chain,
                filename=target_path,
                raw=relative_path,
            )

        try:
            with open(target_path, "r", encoding="utf-8") as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadFailure(
                f"Failed to read file: {exc}",
                filename=target_path,
                raw=relative_path,
            ) from exc

        child_env = self._create_env(target_path, mime_resolver=self.env.mime_resolver)
        install_include(
            child_env,
            self.stack + (absolute_target,),
            evaluate=self._evaluate,
            create_env=self._create_env,
        )

        logger.debug(
            "Text include {path} at depth {depth}",
            path=target_path,
            depth=len(self.stack) + 1,
        )

        children: List[IncludeChild] = []
        for segment in parse_inline_segments(content):
            if segment.kind == "text":
                children.append(segment.value)
                continue
            result = self._evaluate(segment.value, child_env)
            if isinstance(result, Emittable):
                children.append(result)
            else:
                children.append("" if result is None else str(result))

        return CompositeIncludePart(children)


def install_include(
    env: "Environment",
    stack: Tuple[str, ...],
    *,
    evaluate: EvaluateFn,
    create_env: CreateEnvFn,
) -> IncludeResolver:
    """Bind a resolver for ``stack`` to ``env`` and expose it as ``include``."""
    resolver = IncludeResolver(env, stack, evaluate=evaluate, create_env=create_env)
    env.include = resolver
    env["include"] = resolver.include
    return resolver
