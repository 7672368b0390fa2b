"""Task — lifts one user action into a single-settlement result."""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable
from typing import Any

from .protocol import Action
from .state import State


async def resolve_action(action: Action, input: Any = None) -> Any:
    """Call *action* with *input* and reduce whatever it returns to one value.

    - plain value: returned as-is
    - awaitable: awaited
    - async iterable / generator: drained, the last item wins (``None`` if
      nothing was produced)

    Exceptions raised by the call itself, the awaitable or the producer
    propagate unchanged, and any items produced before them are dropped.
    """
    result = action(input)

    if inspect.isawaitable(result):
        return await result

    if isinstance(result, AsyncIterable):
        latest = None
        async for item in result:
            latest = item
        return latest

    if inspect.isgenerator(result):
        latest = None
        for item in result:
            latest = item
        return latest

    return result


class Task:
    """Smallest executable: wraps one action.

    The retained value is only updated when the action completes; a failed
    call leaves whatever an earlier call retained.
    """

    def __init__(self, action: Action) -> None:
        self._action = action
        self._state: State[Any] = State()

    def get_state(self) -> Any:
        return self._state.state

    async def execute(self, input: Any = None) -> Any:
        value = await resolve_action(self._action, input)
        self._state.set(value)
        return value
