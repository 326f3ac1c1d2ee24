"""
Core module - Runtime dictionary cache, translators and locale switching.

Exports the DictionaryCache, both translator variants, the observable cell
and the LocaleSwitcher with its two keyspace helpers.
"""

from .cache import DictionaryCache, KeyStrategy, Loader, identity_key
from .cell import ObservableCell
from .switcher import (
    LocaleHooks,
    LocaleSwitcher,
    Settled,
    Switching,
    indexed_switcher,
    keyed_switcher,
)
from .translator import ABSENT, IndexedTranslator, KeyedTranslator, create_t

__all__ = [
    "ABSENT",
    "DictionaryCache",
    "IndexedTranslator",
    "KeyStrategy",
    "KeyedTranslator",
    "Loader",
    "LocaleHooks",
    "LocaleSwitcher",
    "ObservableCell",
    "Settled",
    "Switching",
    "create_t",
    "identity_key",
    "indexed_switcher",
    "keyed_switcher",
]
