"""Logging configuration helpers for brform."""

from __future__ import annotations

import logging
import os

from brform.constants import (
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_HANDLER,
    DEFAULT_LOG_LEVEL,
)

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_HANDLERS = ["console", "file"]


def _resolve_level(name: str) -> int:
    name = name.upper()
    if name not in VALID_LEVELS:
        return logging.INFO
    return getattr(logging, name)


def _create_handler(handler_type: str, log_file: str) -> logging.Handler:
    if handler_type == "console":
        return logging.StreamHandler()
    if handler_type == "file":
        return logging.FileHandler(log_file, encoding="utf-8")
    raise ValueError(
        f"Unsupported handler type: {handler_type} (expected one of {', '.join(VALID_HANDLERS)})"
    )


def configure_logging(
    *,
    level: str | None = None,
    log_format: str | None = None,
    handler_type: str | None = None,
    log_file: str | None = None,
) -> logging.Handler:
    """Install a single root handler for brform applications.

    Arguments win over the environment, which wins over the defaults:

    - ``BRFORM_LOG_LEVEL``: logging level (e.g. ``DEBUG``, ``INFO``)
    - ``BRFORM_LOG_FORMAT``: logging format string
    - ``BRFORM_LOG_HANDLER``: handler type (``console`` or ``file``)
    - ``BRFORM_LOG_FILE``: file path when using the ``file`` handler

    Calling it again replaces the previous handler. Unknown levels fall
    back to ``INFO``; unknown handler types raise ``ValueError``.
    """

    resolved_level = level or os.getenv("BRFORM_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    resolved_format = log_format or os.getenv("BRFORM_LOG_FORMAT", DEFAULT_LOG_FORMAT)
    resolved_handler = (handler_type or os.getenv("BRFORM_LOG_HANDLER", DEFAULT_LOG_HANDLER)).lower()
    resolved_file = log_file or os.getenv("BRFORM_LOG_FILE", DEFAULT_LOG_FILE)
    numeric_level = _resolve_level(resolved_level)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(numeric_level)

    handler = _create_handler(resolved_handler, resolved_file)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(resolved_format))
    root.addHandler(handler)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s handler=%s", logging.getLevelName(numeric_level), resolved_handler
    )
    return handler
