"""
Structured logging configuration.

Three independent pipelines:
1. File (JSON) — If config.file is set. Level from config.level.
2. Human handler (stderr) — HUMAN events only: generation progress.
3. Technical console (stderr) — controlled by -v. Excludes HUMAN.

Default behavior (no -v): the user sees only the HUMAN progress lines and
warnings. With -v: adds INFO. With -vv: adds DEBUG. --quiet or --json
silence pipelines 2 and 3.

structlog events are always handed to stdlib logging through
ProcessorFormatter.wrap_for_formatter, so each handler renders them its own
way; foreign stdlib records (httpx, asyncio) go through the same pre-chain.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig
from .human import HumanLogHandler
from .levels import HUMAN

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "human": HUMAN,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(
    config: LoggingConfig,
    json_output: bool = False,
    quiet: bool = False,
) -> None:
    """Configure the complete logging system with three pipelines.

    Args:
        config: Logging configuration (level, file, verbose).
        json_output: If True, disables the human and console handlers (--json).
        quiet: If True, disables the human and console handlers (--quiet).
    """
    # Clear previous configuration
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger captures everything — handlers filter by level
    logging.root.setLevel(logging.DEBUG)

    # Shared processors for structlog → stdlib
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    show_streams = not quiet and not json_output

    # ── Pipeline 1: JSON file ─────────────────────────────────────────────
    if config.file:
        file_path = Path(config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(file_path), encoding="utf-8")
        file_handler.setLevel(_LEVELS.get(config.level, HUMAN))
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    structlog.processors.JSONRenderer(default=str),
                ],
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(file_handler)

    # ── Pipeline 2: Human handler ─────────────────────────────────────────
    if show_streams:
        human_handler = HumanLogHandler(stream=sys.stderr)
        # Exact HUMAN level only (25), not INFO nor DEBUG
        human_handler.addFilter(lambda record: record.levelno == HUMAN)
        logging.root.addHandler(human_handler)

    # ── Pipeline 3: Technical console ─────────────────────────────────────
    if show_streams:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_verbose_to_level(config.verbose))
        # HUMAN events are already shown by the human handler
        console_handler.addFilter(lambda record: record.levelno != HUMAN)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
                ],
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(console_handler)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _verbose_to_level(verbose: int) -> int:
    """Map the -v counter to the console handler level.

    No -v  → WARNING (problems only; progress goes through the human handler)
    -v     → INFO (locale switches, configuration, summaries)
    -vv+   → DEBUG (per-file, per-issue and cache events)
    """
    levels = {
        0: logging.WARNING,
        1: logging.INFO,
    }
    return levels.get(verbose, logging.DEBUG)
