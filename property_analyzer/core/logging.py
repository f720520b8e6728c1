"""structlog setup for the engine.

Events go through the stdlib ``property_analyzer`` logger, so a host
application can raise, lower or silence them with ordinary logging calls.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

from property_analyzer.core.settings import get_settings

ROOT_LOGGER = "property_analyzer"

_configured = False


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Attach a stderr handler to the package logger and configure structlog.

    Only the first call has an effect.

    Args:
        level: Log level name. Defaults to env LOGLEVEL, then the log_level setting.
        json_output: Render JSON lines instead of key=value text. Defaults to
            the json_logs setting.
    """
    global _configured

    if _configured:
        return

    settings = get_settings()
    level_name = (level or os.environ.get("LOGLEVEL") or settings.log_level).upper()
    if json_output is None:
        json_output = settings.json_logs

    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for `name` (a module path under the package), configuring on first use."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name or ROOT_LOGGER)
