"""Single-writer mutable reference."""

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Cell(Generic[T]):
    """Mutable reference to an immutable value.

    Readers call ``get()`` once and work on the returned snapshot; a
    concurrent ``set()`` or ``update()`` never changes a snapshot that
    was already taken. Writers are serialized by a lock, so ``update()``
    never loses a concurrent write. Last writer wins.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value

    def update(self, func: Callable[[T], T]) -> T:
        """Replace the value with ``func(current)`` and return it."""
        with self._lock:
            self._value = func(self._value)
            return self._value
