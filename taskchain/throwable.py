"""ThrowableTask — try / catch over two actions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from .protocol import Action, Outcome
from .state import State
from .task import Task


class ThrowableTask:
    """Runs ``try_``; on failure runs ``catch`` and records a failed Outcome.

    ``catch`` receives a read-only mapping ``{"input": ..., "error": ...}``
    and whatever it returns becomes the ``error`` of the recorded Outcome.
    When ``catch`` itself fails, that failure propagates and the retained
    value is cleared.
    """

    def __init__(self, try_: Action, catch: Action) -> None:
        self._try = try_
        self._catch = catch
        self._state: State[Outcome] = State()

    def get_state(self) -> Outcome | None:
        return self._state.state

    async def execute(self, input: Any = None) -> Outcome:
        self._state = State()

        try:
            value = await Task(self._try).execute(input)
        except Exception as exc:
            try:
                refined = await Task(self._catch).execute(
                    MappingProxyType({"input": input, "error": exc})
                )
            except Exception:
                self._state.reset()
                raise
            outcome = Outcome.failure(refined)
        else:
            outcome = Outcome.success(value)

        self._state.set(outcome)
        return outcome
