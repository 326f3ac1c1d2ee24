"""
lokat - Instance-scoped locale dictionaries and integer keyspace generation.

Runtime:
    DictionaryCache       single-flight, poison-recovering dictionary cache
    KeyedTranslator       t(key) -> value, or the key on a miss
    IndexedTranslator     t(id) -> value, or ABSENT when out of range
    LocaleSwitcher        current locale + snapshot + rebound translator
    http_loader           default JSON-over-HTTP loader

Generation lives in lokat.gen; the command line in lokat.cli.

Usage:
    from lokat import keyed_switcher, mapping_loader

    switcher = keyed_switcher("en", mapping_loader(DICTS), initial_dictionary=DICTS["en"])
    switcher.t("home.title")
    await switcher.set_locale("id")
"""

__version__ = "0.3.0"

from .core import (
    ABSENT,
    DictionaryCache,
    IndexedTranslator,
    KeyedTranslator,
    LocaleHooks,
    LocaleSwitcher,
    ObservableCell,
    Settled,
    Switching,
    create_t,
    identity_key,
    indexed_switcher,
    keyed_switcher,
)
from .errors import GenerationError, LokatError, MalformedInputError, ReferenceLocaleMissingError
from .loaders import http_loader, mapping_loader

__all__ = [
    "ABSENT",
    "DictionaryCache",
    "GenerationError",
    "IndexedTranslator",
    "KeyedTranslator",
    "LocaleHooks",
    "LocaleSwitcher",
    "LokatError",
    "MalformedInputError",
    "ObservableCell",
    "ReferenceLocaleMissingError",
    "Settled",
    "Switching",
    "__version__",
    "create_t",
    "http_loader",
    "identity_key",
    "indexed_switcher",
    "keyed_switcher",
    "mapping_loader",
]
