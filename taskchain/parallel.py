"""Parallel — concurrent fan-out with a join barrier that never fails."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .protocol import Action, Outcome
from .state import State
from .task import Task

logger = logging.getLogger(__name__)


class Parallel:
    """Runs named (tracked) and unnamed (untracked) actions concurrently.

    Every branch runs to completion before ``execute`` returns.  Tracked
    branches are recorded as an ``Outcome`` under their name; untracked
    branches run for their side effects only and both their values and
    their failures are dropped.

    Concurrency means interleaving on the running event loop, so a sync
    action still blocks the loop while it runs.

    The result is a dict ordered like the ``tracked`` mapping, whatever the
    order the branches settled in.

    A branch whose awaitable was cancelled on its own counts as a failed
    branch (``Outcome.failure(CancelledError())``).  Cancelling the task
    that awaits ``execute`` still cancels every branch and propagates.
    """

    def __init__(
        self,
        tracked: Mapping[Any, Action] | None = None,
        untracked: Sequence[Action] = (),
    ) -> None:
        self._tracked: dict[Any, Action] = dict(tracked or {})
        self._untracked: list[Action] = list(untracked)
        self._state: State[Mapping[Any, Outcome]] = State()

    def get_state(self) -> Mapping[Any, Outcome] | None:
        return self._state.state

    # ------------------------------------------------------------------
    # Branch runners
    # ------------------------------------------------------------------

    def _merge(self, settled: dict[Any, Outcome], key: Any, outcome: Outcome) -> None:
        # *settled* belongs to one execute() call; overlapping calls only
        # share the published snapshot.
        settled[key] = outcome
        self._state.set(MappingProxyType(dict(settled)))

    @staticmethod
    def _cancelled_from_outside() -> bool:
        task = asyncio.current_task()
        return task is not None and task.cancelling() > 0

    async def _run_tracked(
        self, settled: dict[Any, Outcome], key: Any, action: Action, input: Any
    ) -> None:
        try:
            value = await Task(action).execute(input)
        except asyncio.CancelledError as exc:
            if self._cancelled_from_outside():
                raise
            self._merge(settled, key, Outcome.failure(exc))
        except Exception as exc:
            self._merge(settled, key, Outcome.failure(exc))
        else:
            self._merge(settled, key, Outcome.success(value))

    async def _run_untracked(self, action: Action, input: Any) -> None:
        try:
            await Task(action).execute(input)
        except asyncio.CancelledError as exc:
            if self._cancelled_from_outside():
                raise
            logger.debug("Untracked parallel branch was cancelled: %r", exc)
        except Exception as exc:
            logger.debug("Untracked parallel branch failed: %r", exc)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self, input: Any = None) -> dict[Any, Outcome]:
        self._state.set(MappingProxyType({}))

        if not self._tracked and not self._untracked:
            return {}

        settled: dict[Any, Outcome] = {}
        await asyncio.gather(
            *[
                self._run_tracked(settled, key, action, input)
                for key, action in self._tracked.items()
            ],
            *[self._run_untracked(action, input) for action in self._untracked],
        )

        ordered = {key: settled[key] for key in self._tracked}
        self._state.set(MappingProxyType(ordered))
        return dict(ordered)
