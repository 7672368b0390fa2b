"""ConditionalTask — if / then / else over three actions."""

from __future__ import annotations

from typing import Any

from .protocol import Action
from .state import State
from .task import Task


class ConditionalTask:
    """Evaluates ``if_`` and runs exactly one of ``then`` / ``else_``.

    With a falsy predicate and no ``else_`` the result is ``None``.  A
    failure in any of the three actions propagates, and the retained value
    is cleared first so nothing from an earlier run stays visible.
    """

    def __init__(self, if_: Action, then: Action, else_: Action | None = None) -> None:
        self._if = if_
        self._then = then
        self._else = else_
        self._state: State[Any] = State()

    def get_state(self) -> Any:
        return self._state.state

    async def execute(self, input: Any = None) -> Any:
        self._state = State()

        try:
            if await Task(self._if).execute(input):
                value = await Task(self._then).execute(input)
            elif self._else is not None:
                value = await Task(self._else).execute(input)
            else:
                value = None
        except Exception:
            self._state.reset()
            raise

        self._state.set(value)
        return value
