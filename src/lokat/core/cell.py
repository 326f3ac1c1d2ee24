"""
Observable cell — A value holder with explicit subscribe/notify.

Stands in for a UI-reactive signal. Nothing here knows about caches or
locales; a reactive layer subscribes to the cells a LocaleSwitcher publishes.
"""

import operator
from collections.abc import Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

__all__ = ["ObservableCell"]

T = TypeVar("T")

Subscriber = Callable[[T], None]


class ObservableCell(Generic[T]):
    """Holds one value and notifies subscribers synchronously when it changes.

    A subscriber that raises is logged and skipped; it never prevents the
    value from changing or other subscribers from running.
    """

    def __init__(
        self,
        value: T,
        *,
        equals: Callable[[T, T], bool] = operator.eq,
        name: str = "cell",
    ) -> None:
        self._value = value
        self._equals = equals
        self._subscribers: list[Subscriber[T]] = []
        self._log = logger.bind(component="observable_cell", cell=name)

    def get(self) -> T:
        return self._value

    __call__ = get

    def set(self, value: T) -> bool:
        """Store `value` and notify if it differs from the current one.

        Returns:
            True if the value changed and subscribers were notified.
        """
        if self._equals(self._value, value):
            return False
        self._value = value
        for subscriber in list(self._subscribers):
            try:
                subscriber(value)
            except Exception as e:
                self._log.warning(
                    "cell.subscriber_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return True

    def subscribe(self, subscriber: Subscriber[T]) -> Callable[[], None]:
        """Register `subscriber`; returns a function that unsubscribes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"ObservableCell({self._value!r})"
