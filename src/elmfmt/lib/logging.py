"""Logging setup shared by the CLI and the MCP server."""

from __future__ import annotations

import logging as std_logging
import sys

import structlog

# -v count -> level; anything past the end is DEBUG.
_VERBOSITY_LEVELS: tuple[int, ...] = (std_logging.WARNING, std_logging.INFO, std_logging.DEBUG)


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Send structlog and stdlib log records to stderr.

    stdout carries formatted Elm source (or the JSON payload), so no log line
    may land there. `elmfmt serve` calls this twice: once from the CLI entry
    point and again with `json_mode=True` when the server starts, which is why
    loggers are not cached on first use.
    """

    level = _VERBOSITY_LEVELS[min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)]

    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_mode:
        # Failed invocations log with exc_info; JSON needs it rendered as text.
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
