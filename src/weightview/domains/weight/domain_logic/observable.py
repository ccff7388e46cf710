"""Read-only observable state fields for the view layer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """A value the view can read and subscribe to but never assign.

    The owner writes through :class:`MutableObservable`; subscribers are
    called synchronously with the new value after every assignment.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class MutableObservable(Observable[T]):
    """Owner-side handle that can assign the value."""

    def set(self, value: T) -> None:
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def as_read_only(self) -> Observable[T]:
        """A view of this field without the ``set`` method."""
        return _ReadOnlyView(self)


class _ReadOnlyView(Observable[T]):
    def __init__(self, source: MutableObservable[T]) -> None:
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        return self._source.subscribe(callback)

    def __repr__(self) -> str:
        return f"Observable({self._source.value!r})"
