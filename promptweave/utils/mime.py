"""
MIME type resolution for referenced and included files.

Live detection shells out to the ``file`` command; an extension table is the
fallback. Availability of the command is probed once per resolver instance.
"""

from __future__ import annotations

import shutil
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Optional

from promptweave.constants import (
    DEFAULT_MIME_COMMAND,
    DEFAULT_MIME_TIMEOUT,
    MIME_BY_EXTENSION,
)
from promptweave.errors import MimeDetectionError
from promptweave.logger import UnifiedLogger
from promptweave.settings import get_app_settings

logger = UnifiedLogger(tag="mime")


def resolve_by_extension(path: str) -> Optional[str]:
    """Look up a MIME type from the file extension; None when unknown."""
    suffix = Path(path).suffix
    if not suffix:
        return None
    return MIME_BY_EXTENSION.get(suffix[1:].lower())


class MimeResolver:
    """Resolve MIME types with an optional live detection command."""

    def __init__(
        self,
        command: Optional[str] = DEFAULT_MIME_COMMAND,
        timeout: float = DEFAULT_MIME_TIMEOUT,
    ):
        self.command = command
        self.timeout = timeout
        self._executable = shutil.which(command) if command else None
        if command and self._executable is None:
            logger.warning(
                "MIME detection command {command} not found; using extension table only",
                command=command,
            )

    @property
    def live_detection_available(self) -> bool:
        return self._executable is not None

    def detect(self, path: str) -> str:
        """
        Detect the MIME type of a file with the external command.

        Raises:
            MimeDetectionError: If the command is unavailable or fails
        """
        if self._executable is None:
            raise MimeDetectionError(
                f"The '{self.command}' command is required to determine file MIME types but was not found."
            )

        try:
            result = subprocess.run(
                [self._executable, "-b", "--mime-type", path],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise MimeDetectionError(f'Timed out determining MIME type for "{path}"') from exc
        except OSError as exc:
            raise MimeDetectionError(f"Failed to execute '{self.command}' command: {exc}") from exc

        output = (result.stdout or "").strip()
        if result.returncode != 0:
            message = f'Failed to get MIME type for "{path}" (exit code: {result.returncode})'
            if output:
                message += f"\nOutput: {output}"
            raise MimeDetectionError(message)
        if not output:
            raise MimeDetectionError("Failed to determine MIME type (empty output)")

        logger.debug("Detected MIME type {mime_type} for {path}", mime_type=output, path=path)
        return output

    def resolve_by_extension(self, path: str) -> Optional[str]:
        return resolve_by_extension(path)

    def resolve(self, path: str, override: Optional[str] = None) -> str:
        """
        Resolve a MIME type: explicit override, live detection, then extension table.

        Raises:
            MimeDetectionError: If no strategy produced a MIME type
        """
        if override:
            return override

        detection_error: Optional[MimeDetectionError] = None
        if self.live_detection_available:
            try:
                return self.detect(path)
            except MimeDetectionError as exc:
                detection_error = exc
                logger.debug("Live MIME detection failed for {path}: {error}", path=path, error=str(exc))

        by_extension = resolve_by_extension(path)
        if by_extension:
            return by_extension

        if detection_error is not None:
            raise detection_error
        raise MimeDetectionError(f"Could not determine MIME type for: {path}")


@lru_cache(maxsize=1)
def get_default_mime_resolver() -> MimeResolver:
    """Return a resolver configured from application settings."""
    settings = get_app_settings()
    return MimeResolver(command=settings.mime_command, timeout=settings.mime_timeout)
