"""
Internationalization (i18n) of the lokat CLI itself.

Public API:
    t(key, **kwargs)      — Translate a key with optional interpolation.
    set_language(lang)    — Set the active language ("en", "es").
    get_language()        — Get the current language code.
    plural(n)             — "" for 1, "s" otherwise (for {s}-style placeholders).

Usage:
    from lokat.i18n import t, set_language

    set_language("es")
    print(t("cli.generated_to", path="out/"))
"""

from .registry import LanguageRegistry

__all__ = [
    "t",
    "set_language",
    "get_language",
    "plural",
]


def t(key: str, **kwargs: object) -> str:
    """Translate a key with optional interpolation.

    Uses the current language with English fallback, then the raw key.
    """
    return LanguageRegistry.get().t(key, **kwargs)


def set_language(lang: str) -> None:
    """Set the active language.

    Raises:
        ValueError: If the language is not supported.
    """
    LanguageRegistry.get().set_language(lang)


def get_language() -> str:
    """Get the current language code."""
    return LanguageRegistry.get().language


def plural(n: int, suffix: str = "s") -> str:
    return "" if n == 1 else suffix
