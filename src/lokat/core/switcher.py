"""
Locale Switcher — Couples the current locale to a DictionaryCache.

Owns the current dictionary snapshot and the translator bound to it.

States:
    Settled(locale, dictionary)  the snapshot belongs to `locale`
    Switching(locale)            `locale` is committed, its dictionary is not

set_locale() commits the new locale synchronously, before its load even
starts. The commit is optimistic: if the load then fails, the locale stays
committed and the previous snapshot stays bound. Observers of the locale see
the change immediately; observers of the dictionary see it on settle.

Only the most recent set_locale() may rebind the snapshot. An older switch
that settles late still resolves for its own caller but leaves the snapshot
alone.
"""

import asyncio
import operator
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import structlog

from .cache import DictionaryCache, KeyStrategy
from .cell import ObservableCell
from .translator import IndexedTranslator, KeyedTranslator

logger = structlog.get_logger()

__all__ = [
    "LocaleHooks",
    "LocaleSwitcher",
    "Settled",
    "Switching",
    "indexed_switcher",
    "keyed_switcher",
]

L = TypeVar("L")
D = TypeVar("D")


@dataclass(frozen=True)
class Settled(Generic[L, D]):
    """The snapshot is the dictionary of `locale`."""

    locale: L
    dictionary: D


@dataclass(frozen=True)
class Switching(Generic[L]):
    """`locale` is committed; its dictionary has not been bound (yet)."""

    locale: L


@dataclass
class LocaleHooks(Generic[L]):
    """Lifecycle callbacks of a LocaleSwitcher.

    Attributes:
        on_locale_change: Called synchronously by set_locale() with the new
            locale, after the commit and before the load starts.
        on_error: Called with (error, locale) when a load issued by
            set_locale() (or the initial load) fails.
    """

    on_locale_change: Callable[[L], None] | None = None
    on_error: Callable[[BaseException, L], None] | None = None


class LocaleSwitcher(Generic[L, D]):
    """Current-locale state machine over an instance-scoped DictionaryCache.

    Usage:
        switcher = keyed_switcher("en", load_dict, initial_dictionary=EN)
        t = switcher.t
        t("home.title")                 # reads EN
        await switcher.set_locale("id")
        t("home.title")                 # same t, now reads ID

    If no initial dictionary is given, a load of the initial locale is started
    in the background (so a running event loop is required) and the snapshot
    starts empty. await ready() to wait for it.
    """

    def __init__(
        self,
        initial_locale: L,
        loader: Callable[[L], Awaitable[D]],
        *,
        translator: Any,
        empty: D,
        initial_dictionary: D | None = None,
        hooks: LocaleHooks[L] | None = None,
        disable_cache: bool = False,
        key_strategy: KeyStrategy = "value",
    ) -> None:
        """Initialize the switcher.

        Args:
            initial_locale: Locale committed at construction.
            loader: Caller-supplied coroutine function locale -> dictionary.
            translator: Reboundable translator (anything with rebind()).
            empty: Snapshot used until the initial load settles.
            initial_dictionary: Dictionary of `initial_locale`. When given, no
                load is issued and the switcher starts settled.
            hooks: Lifecycle callbacks.
            disable_cache: Diagnostics only; every load runs the loader.
            key_strategy: How locales are compared (see DictionaryCache).
        """
        self._cache: DictionaryCache[L, D] = DictionaryCache(
            loader,
            disable_cache=disable_cache,
            key_strategy=key_strategy,
        )
        self._hooks = hooks or LocaleHooks()
        self._generation = 0
        self._log = logger.bind(component="locale_switcher")

        snapshot = empty if initial_dictionary is None else initial_dictionary
        self.t = translator
        self.t.rebind(snapshot)
        self.locale_cell: ObservableCell[L] = ObservableCell(
            initial_locale, equals=self._cache.same_locale, name="locale",
        )
        self.dictionary_cell: ObservableCell[D] = ObservableCell(
            snapshot, equals=operator.is_, name="dictionary",
        )

        self._initial: asyncio.Task[D | None] | None = None
        if initial_dictionary is None:
            self._state: Settled[L, D] | Switching[L] = Switching(initial_locale)
            pending = self._cache.load(initial_locale)
            self._initial = asyncio.get_running_loop().create_task(
                self._hydrate(pending, initial_locale, self._generation)
            )
            self._log.debug("switcher.initial_load", locale=initial_locale)
        else:
            self._state = Settled(initial_locale, initial_dictionary)

    # ── Observed state ────────────────────────────────────────────────────

    @property
    def locale(self) -> L:
        """Committed locale (updated synchronously by set_locale)."""
        return self.locale_cell.get()

    @property
    def dictionary(self) -> D:
        """Current snapshot."""
        return self.dictionary_cell.get()

    def dict_ref(self) -> D:
        """Current snapshot (same object the translator reads)."""
        return self.dictionary_cell.get()

    @property
    def state(self) -> "Settled[L, D] | Switching[L]":
        return self._state

    @property
    def cache(self) -> DictionaryCache[L, D]:
        return self._cache

    # ── Transitions ───────────────────────────────────────────────────────

    def set_locale(self, locale: L) -> "asyncio.Task[D]":
        """Commit `locale` now and load its dictionary.

        The locale cell and on_locale_change fire before this returns. The
        returned task resolves to the loaded dictionary (after the snapshot
        is rebound) or raises the loader's error (after on_error ran).
        """
        self._generation += 1
        generation = self._generation
        self._state = Switching(locale)
        self.locale_cell.set(locale)
        self._log.info("switcher.locale_changed", locale=locale)
        if self._hooks.on_locale_change is not None:
            self._hooks.on_locale_change(locale)

        pending = self._cache.load(locale)
        return asyncio.get_running_loop().create_task(
            self._settle(pending, locale, generation)
        )

    def preload(self, locale: L) -> "asyncio.Future[D]":
        """Load and cache `locale` without touching the locale or the snapshot."""
        return self._cache.preload(locale)

    async def ready(self) -> D | None:
        """Wait for the initial background load, if any.

        Returns:
            The initial dictionary, or None if the initial load failed
            (the failure already went to on_error).
        """
        if self._initial is None:
            return self.dictionary
        return await asyncio.shield(self._initial)

    async def _settle(self, pending: Awaitable[D], locale: L, generation: int) -> D:
        try:
            dictionary = await pending
        except Exception as e:
            self._log.warning(
                "switcher.load_failed",
                locale=locale,
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._hooks.on_error is not None:
                self._hooks.on_error(e, locale)
            raise

        if generation == self._generation:
            self._commit(locale, dictionary)
        else:
            self._log.debug("switcher.stale_load", locale=locale)
        return dictionary

    async def _hydrate(self, pending: Awaitable[D], locale: L, generation: int) -> D | None:
        try:
            return await self._settle(pending, locale, generation)
        except Exception:
            # Already logged and routed to on_error by _settle.
            return None

    def _commit(self, locale: L, dictionary: D) -> None:
        self.t.rebind(dictionary)
        self._state = Settled(locale, dictionary)
        self.dictionary_cell.set(dictionary)
        self._log.debug("switcher.settled", locale=locale)


def keyed_switcher(
    initial_locale: L,
    loader: Callable[[L], Awaitable[Mapping[str, str]]],
    **kwargs: Any,
) -> "LocaleSwitcher[L, Mapping[str, str]]":
    """LocaleSwitcher over flat string dictionaries; `t(key)` falls back to the key."""
    return LocaleSwitcher(
        initial_locale,
        loader,
        translator=KeyedTranslator(),
        empty={},
        **kwargs,
    )


def indexed_switcher(
    initial_locale: L,
    loader: Callable[[L], Awaitable[Sequence[str]]],
    **kwargs: Any,
) -> "LocaleSwitcher[L, Sequence[str]]":
    """LocaleSwitcher over generated string arrays; `t(id)` returns ABSENT when out of range."""
    return LocaleSwitcher(
        initial_locale,
        loader,
        translator=IndexedTranslator(),
        empty=(),
        **kwargs,
    )
