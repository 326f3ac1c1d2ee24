"""
Dictionary Cache — Instance-scoped, single-flight cache of locale dictionaries.

Each entry maps a locale key to the asyncio.Task running the caller's loader
for that locale. The entry is created synchronously when load()/preload() is
called, so every call issued before the task settles shares it.

Invariants:
- The loader for a key runs at most once per set of calls issued before it settles
- Check-for-entry and insert-entry contain no await (atomic on one event loop)
- A failed task is removed from the map before any waiter observes the error
- Waiters that already hold the failed task still see the original exception
- Cancelling one waiter never cancels the shared load
- Two cache instances never share entries

A cache is bound to the event loop that runs its loads. It is not thread-safe;
use one instance per loop (or per request).
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, Generic, Literal, TypeVar

import structlog

logger = structlog.get_logger()

__all__ = [
    "DictionaryCache",
    "KeyStrategy",
    "Loader",
    "identity_key",
    "resolve_key_fn",
]

L = TypeVar("L")
D = TypeVar("D")

# Caller-supplied loader: locale -> awaitable dictionary.
Loader = Callable[[Any], Awaitable[Any]]

KeyStrategy = Literal["value", "identity"] | Callable[[Any], Hashable]


class _IdentityKey:
    """Hashable wrapper comparing by object identity.

    Holds a strong reference to the locale so its id() cannot be recycled
    while the entry is cached.
    """

    __slots__ = ("obj",)

    def __init__(self, obj: object) -> None:
        self.obj = obj

    def __hash__(self) -> int:
        return id(self.obj)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _IdentityKey) and other.obj is self.obj

    def __repr__(self) -> str:
        return f"identity({self.obj!r})"


def identity_key(locale: object) -> Hashable:
    """Key function that treats two locales as equal only if they are the same object."""
    return _IdentityKey(locale)


def _value_key(locale: object) -> Hashable:
    return locale  # type: ignore[return-value]


def _failed(task: "asyncio.Task[Any]") -> bool:
    return task.done() and (task.cancelled() or task.exception() is not None)


def resolve_key_fn(strategy: KeyStrategy) -> Callable[[Any], Hashable]:
    """Turn a key strategy name (or callable) into a key function.

    Args:
        strategy: "value" uses the locale's own __hash__/__eq__ (strings,
            enums, tuples, frozen dataclasses). "identity" compares by object
            identity and accepts unhashable locales such as dicts. A callable
            maps a locale to any hashable key.

    Raises:
        ValueError: If the strategy name is unknown.
    """
    if callable(strategy):
        return strategy
    if strategy == "value":
        return _value_key
    if strategy == "identity":
        return identity_key
    raise ValueError(f"Unknown key strategy: {strategy!r}. Available: ['identity', 'value']")


class DictionaryCache(Generic[L, D]):
    """Single-flight, poison-recovering cache of locale dictionaries.

    Usage:
        cache = DictionaryCache(load_from_disk)
        a, b = await asyncio.gather(cache.load("en"), cache.load("en"))
        # load_from_disk("en") ran once; a is b

    load() and preload() share the same entries and the same semantics. The
    distinction only matters to a LocaleSwitcher, where preload never touches
    the current dictionary.
    """

    def __init__(
        self,
        loader: Callable[[L], Awaitable[D]],
        *,
        disable_cache: bool = False,
        key_strategy: KeyStrategy = "value",
    ) -> None:
        """Initialize the cache.

        Args:
            loader: Caller-supplied coroutine function locale -> dictionary.
                Its result is cached as-is, without validation.
            disable_cache: Diagnostics only. Bypass the map entirely so every
                call runs the loader.
            key_strategy: How locales are compared as cache keys.
        """
        self._loader = loader
        self._disable_cache = disable_cache
        self._key_fn = resolve_key_fn(key_strategy)
        self._entries: dict[Hashable, asyncio.Task[D]] = {}
        self._log = logger.bind(component="dictionary_cache")

        if disable_cache:
            self._log.warning("cache.disabled")

    @property
    def disabled(self) -> bool:
        """True if the diagnostics mode is on and nothing is cached."""
        return self._disable_cache

    def same_locale(self, a: L, b: L) -> bool:
        """Return True if both locales map to the same cache key."""
        return self._key_fn(a) == self._key_fn(b)

    def load(self, locale: L) -> "asyncio.Future[D]":
        """Return an awaitable for the dictionary of `locale`.

        The entry is created (or joined) synchronously, so must be called with
        a running event loop. Awaiting the result raises whatever the loader
        raised; by then the failed entry is already gone and the next call
        starts a fresh attempt.
        """
        return self._join(locale, "load")

    def preload(self, locale: L) -> "asyncio.Future[D]":
        """Warm the cache for `locale`. Same single-flight semantics as load()."""
        return self._join(locale, "preload")

    def _join(self, locale: L, op: str) -> "asyncio.Future[D]":
        if self._disable_cache:
            self._log.debug(f"cache.{op}.bypass", locale=locale)
            return asyncio.get_running_loop().create_task(self._run(locale))

        key = self._key_fn(locale)
        task = self._entries.get(key)
        if task is not None and _failed(task):
            # Settled with an error but _on_settled has not run yet.
            del self._entries[key]
            task = None
        if task is None:
            self._log.debug(f"cache.{op}.miss", locale=locale)
            task = asyncio.get_running_loop().create_task(self._run(locale))
            # Registered before any waiter so the eviction runs first.
            task.add_done_callback(lambda done: self._on_settled(key, done))
            self._entries[key] = task
        else:
            self._log.debug(f"cache.{op}.hit", locale=locale, pending=not task.done())
        return asyncio.shield(task)

    async def _run(self, locale: L) -> D:
        return await self._loader(locale)

    def _on_settled(self, key: Hashable, task: "asyncio.Task[D]") -> None:
        if task.cancelled():
            error: BaseException | None = asyncio.CancelledError()
        else:
            error = task.exception()
        if error is None:
            return
        # Only evict if the entry still points at this task (clear() may have run).
        if self._entries.get(key) is task:
            del self._entries[key]
        self._log.warning(
            "cache.load.failed",
            key=repr(key),
            error=str(error),
            error_type=type(error).__name__,
        )

    def cached(self, locale: L) -> bool:
        """Return True if an entry (pending or resolved) exists for `locale`."""
        return self._key_fn(locale) in self._entries

    def peek(self, locale: L) -> D | None:
        """Return the resolved dictionary for `locale` without loading, or None."""
        task = self._entries.get(self._key_fn(locale))
        if task is None or not task.done() or task.cancelled() or task.exception():
            return None
        return task.result()

    def evict(self, locale: L) -> bool:
        """Drop the entry for `locale`. In-flight waiters still get their result.

        Returns:
            True if an entry was removed.
        """
        return self._entries.pop(self._key_fn(locale), None) is not None

    def clear(self) -> int:
        """Drop all entries.

        Returns:
            Number of entries removed.
        """
        count = len(self._entries)
        self._entries.clear()
        self._log.debug("cache.cleared", count=count)
        return count

    def __len__(self) -> int:
        return len(self._entries)
