"""Single-slot state container."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class State(Generic[T]):
    """Holds the current value and the default it was created with.

    Values are replaced wholesale by ``set()``; nothing is merged in place.
    """

    __slots__ = ("_default", "_state")

    def __init__(self, default: T | None = None) -> None:
        self._default = default
        self._state: T | None = default

    @property
    def state(self) -> T | None:
        return self._state

    def reset(self) -> None:
        """Restore the value this container was created with."""
        self._state = self._default

    def set(self, state: T | None) -> None:
        self._state = state
