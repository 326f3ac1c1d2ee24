"""
Language Registry — Thread-safe singleton serving the CLI's own messages.

Each language is served through one KeyedTranslator over the merged
dictionary {**en, **lang}, so resolution follows the fallback chain
current language → English → raw key with a single lookup.
"""

import threading

from ..core.translator import KeyedTranslator


class LanguageRegistry:
    """Thread-safe singleton that stores and resolves CLI strings.

    set_language() rebinds the one translator instance; code that grabbed
    registry.translator keeps working across language changes.

    Usage:
        registry = LanguageRegistry.get()
        registry.set_language("es")
        text = registry.t("human.emitted", files=3, s="s", output_dir="out")
    """

    _instance: "LanguageRegistry | None" = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._languages: dict[str, dict[str, str]] = {}
        self._current = "en"
        self.translator = KeyedTranslator()

    @classmethod
    def get(cls) -> "LanguageRegistry":
        """Get or create the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    inst = cls()
                    inst._load_defaults()
                    cls._instance = inst
        return cls._instance

    def _load_defaults(self) -> None:
        """Load built-in language packs (EN and ES)."""
        from . import en, es

        self._languages["en"] = en.STRINGS
        self._languages["es"] = es.STRINGS
        self._rebind()

    def _rebind(self) -> None:
        merged = {**self._languages.get("en", {}), **self._languages.get(self._current, {})}
        self.translator.rebind(merged)

    @property
    def language(self) -> str:
        """Current language code."""
        return self._current

    @property
    def available_languages(self) -> list[str]:
        """List of registered language codes."""
        return sorted(self._languages.keys())

    def set_language(self, lang: str) -> None:
        """Set the active language.

        Raises:
            ValueError: If the language is not registered.
        """
        if lang not in self._languages:
            raise ValueError(
                f"Unsupported language: {lang}. "
                f"Available: {sorted(self._languages)}"
            )
        self._current = lang
        self._rebind()

    def t(self, key: str, **kwargs: object) -> str:
        """Translate a key with optional interpolation.

        A template whose placeholders do not match `kwargs` is returned
        unformatted rather than raising.
        """
        template = self.translator(key)
        if kwargs:
            try:
                return template.format(**kwargs)
            except (KeyError, IndexError):
                return template
        return template

    def register_language(self, lang: str, strings: dict[str, str]) -> None:
        """Register (or replace) a language pack."""
        self._languages[lang] = strings
        if lang in (self._current, "en"):
            self._rebind()

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None
