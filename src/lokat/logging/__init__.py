"""
Logging module - Structured logging system.

HUMAN level (25) carries readable generation progress; everything else is
structlog events rendered by the console or JSON file pipelines.
"""

from .human import HumanFormatter, HumanLog, HumanLogHandler
from .levels import HUMAN
from .setup import configure_logging

__all__ = [
    "configure_logging",
    "HUMAN",
    "HumanFormatter",
    "HumanLog",
    "HumanLogHandler",
]
