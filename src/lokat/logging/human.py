"""
Human Log — Formatter and helper for readable generation progress.

HUMAN-level records carry a dict message {"event": ..., **fields}. The
HumanLogHandler renders the events it knows through the CLI's i18n strings
and ignores the rest.

Example output:
    📂 Loaded 6 locale files for 2 locales
    ⚠️  3 namespaces validated, 1 issue
    ✓ Wrote 4 files to i18n/generated
"""

import logging
import sys
from typing import Any

from ..i18n import plural, t
from .levels import HUMAN

__all__ = ["HumanFormatter", "HumanLog", "HumanLogHandler"]


class HumanFormatter:
    """Turns structured generation events into translated, readable lines."""

    def format_event(self, event: str, **kw: Any) -> str | None:
        """Format one event.

        Returns:
            Text to print, or None if the event has no human format.
        """
        match event:
            case "gen.layout.loaded":
                files = kw.get("files", 0)
                locales = kw.get("locales", 0)
                return t(
                    "human.layout_loaded",
                    files=files, s=plural(files), locales=locales, ls=plural(locales),
                )

            case "gen.validate.complete":
                namespaces = kw.get("namespaces", 0)
                issues = kw.get("issues", 0)
                if not issues:
                    return t("human.validated_ok", namespaces=namespaces, s=plural(namespaces))
                return t(
                    "human.validated_issues",
                    namespaces=namespaces, s=plural(namespaces),
                    issues=issues, is_=plural(issues),
                )

            case "gen.emit.complete":
                files = kw.get("files", 0)
                return t(
                    "human.emitted",
                    files=files, s=plural(files), output_dir=kw.get("output_dir", "?"),
                )

            case _:
                return None


class HumanLogHandler(logging.Handler):
    """Logging handler that renders HUMAN events only.

    Writes to stderr so stdout stays clean for --json output.
    """

    def __init__(self, stream=None) -> None:
        super().__init__(level=HUMAN)
        self.stream = stream or sys.stderr
        self.formatter_inst = HumanFormatter()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno != HUMAN:
                return

            if isinstance(record.msg, dict):
                kw = dict(record.msg)
                event = str(kw.pop("event", ""))
            else:
                kw = {}
                event = record.getMessage()

            formatted = self.formatter_inst.format_event(event, **kw)
            if formatted is not None:
                self.stream.write(formatted + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


class HumanLog:
    """Typed helper to emit HUMAN-level events.

    Usage:
        hlog = HumanLog()
        hlog.layout_loaded(locales=2, files=6)
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger("lokat.gen")

    def _emit(self, event: str, **kw: Any) -> None:
        self._log.log(HUMAN, {"event": event, **kw})

    def layout_loaded(self, locales: int, files: int) -> None:
        self._emit("gen.layout.loaded", locales=locales, files=files)

    def validated(self, namespaces: int, issues: int) -> None:
        self._emit("gen.validate.complete", namespaces=namespaces, issues=issues)

    def emitted(self, output_dir: str, files: int) -> None:
        self._emit("gen.emit.complete", output_dir=output_dir, files=files)
