"""
Configuration module for lokat.

Exports the main components for convenient imports.
"""

from .loader import load_config
from .schema import AppConfig, GenConfig, LoggingConfig, RuntimeConfig

__all__ = [
    "load_config",
    "AppConfig",
    "GenConfig",
    "LoggingConfig",
    "RuntimeConfig",
]
