"""structlog configuration for gemini-rotator.

Modules obtain loggers with ``structlog.get_logger(__name__)`` and log
snake_case event names with keyword context. ``setup_logging`` wires the
renderer once per process; calling it again is a no-op unless ``force``
is set.
"""

import logging
import sys
from typing import Any

import structlog


_configured = False


def setup_logging(
    level: str = "INFO",
    json_logs: bool = False,
    *,
    force: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Minimum log level name (e.g. "DEBUG", "INFO")
        json_logs: Render JSON lines instead of the console renderer
        force: Reconfigure even if logging was already set up
    """
    global _configured
    if _configured and not force:
        return

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: Any
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(level=log_level, stream=sys.stderr, force=force)
    _configured = True