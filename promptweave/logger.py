"""Unified logger providing technical instrumentation on top of Logfire."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Optional, Tuple

import logfire

from promptweave.errors import SettingsError
from promptweave.settings import get_app_settings


_logfire_config_state: Optional[Tuple[bool, bool]] = None
_logger_internal = logging.getLogger(__name__)


def refresh_logfire_configuration(force: bool = False) -> None:
    """
    Reconfigure the global Logfire client based on current settings.

    Args:
        force: When True, always reapply configuration even if nothing changed.
    """
    global _logfire_config_state

    try:
        settings = get_app_settings()
        enabled = settings.logfire_enabled
        console = settings.log_to_console
    except SettingsError as exc:
        _logger_internal.error("Failed to read logging settings, defaulting to disabled: %s", exc)
        enabled = False
        console = False

    desired_state = (enabled, console)
    if not force and _logfire_config_state == desired_state:
        return

    send_option: str | bool = "if-token-present" if enabled else False

    logfire.configure(
        send_to_logfire=send_option,
        console=None if console else False,
        scrubbing=False,
    )

    _logfire_config_state = desired_state


# Initialize configuration eagerly so early logging honors current settings.
refresh_logfire_configuration(force=True)


class UnifiedLogger:
    """Unified logger providing tagged instrumentation for a module."""

    def __init__(self, tag: str):
        """
        Initialize unified logger for a module or component.

        Args:
            tag: Module or component identifier
        """
        self.tag = tag
        self._logfire_instance = None  # Lazy initialization

    @property
    def _logfire(self):
        """Lazy-loaded Logfire instance."""
        if self._logfire_instance is None:
            refresh_logfire_configuration()
            self._logfire_instance = logfire.with_tags(self.tag)
        return self._logfire_instance

    # Technical Instrumentation Methods

    def info(self, message: str, **extra: Any) -> None:
        """Technical info logging."""
        self._logfire.info(message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        """Technical warning logging."""
        self._logfire.warn(message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        """Technical error logging."""
        self._logfire.error(message, **extra)

    def debug(self, message: str, **extra: Any) -> None:
        """Technical debug logging."""
        self._logfire.debug(message, **extra)

    @contextmanager
    def span(self, operation: str, **span_data: Any):
        """
        Manual instrumentation span for critical code paths.

        Usage:
            with logger.span("render_document", filename=path):
                # critical operation
                pass
        """
        with self._logfire.span(f"{self.tag}:{operation}", **span_data):
            yield

    def trace(self, func_name_template: Optional[str] = None):
        """
        Decorator for function instrumentation with sensible defaults.

        Args:
            func_name_template: Optional template for span name

        Usage:
            @logger.trace()
            def evaluate_frontmatter(text: str): pass
        """
        def decorator(func):
            span_name = func_name_template or f"{self.tag}:{func.__name__}"
            return logfire.instrument(
                span_name,
                extract_args=False,
                record_return=False,
            )(func)
        return decorator
