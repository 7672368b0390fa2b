"""ExecutionContext — runs one step against its chain's shared snapshot."""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Any, Mapping

from .protocol import Outcome
from .state import State
from .steps import Step, StepConfig
from .task import Task

logger = logging.getLogger(__name__)

#: Key under which every step input carries the input of its parent.
PARENT_KEY = "parent_input"


class ExecutionContext:
    """Binds a step and its ``StepConfig`` to the owning chain's ``State``.

    The state is not owned here: it belongs to the chain, and this class
    only writes the step's own key into it.

    Recording rule for tracked steps:

    - ``abort_on_fail=True``: the raw value is stored; a failure
      propagates and nothing is stored.
    - ``abort_on_fail=False``: an ``Outcome`` is stored whether the step
      succeeded or failed, and a failure does not propagate.

    A failing guard condition always propagates, whatever the policy.
    """

    def __init__(self, step: Step, config: StepConfig, state: State[Mapping[Any, Any]]) -> None:
        self.step = step
        self.config = config
        self.task = step.build()
        self._state = state

    @property
    def abort_on_fail(self) -> bool:
        return self.step.abort_on_fail

    def _record(self, value: Any) -> None:
        self._state.set(MappingProxyType({**self._state.state, self.config.key: value}))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def _guard(self, input: Any) -> bool:
        guard_input = MappingProxyType({**self._state.state, PARENT_KEY: input})
        return bool(await Task(self.config.condition).execute(guard_input))

    async def _execute_task(self, input: Any) -> Any:
        try:
            value = await self.task.execute(input)
        except Exception as exc:
            if self.abort_on_fail:
                raise
            if self.config.tracked:
                self._record(Outcome.failure(exc))
            return None

        if self.config.tracked:
            self._record(value if self.abort_on_fail else Outcome.success(value))
        return value

    async def _run_finally(self, input: Any) -> None:
        try:
            await Task(self.config.finally_).execute(input)
        except Exception:
            logger.warning(
                "finally_ hook of step %r failed", self.config.key, exc_info=True
            )

    async def execute(self, input: Any = None) -> Any:
        """Run the step once and return its value (``None`` when skipped).

        The step always starts on a fresh event-loop iteration, whether the
        wrapped action is sync or async.
        """
        await asyncio.sleep(0)

        try:
            if self.config.condition is not None and not await self._guard(input):
                return None
            return await self._execute_task(input)
        finally:
            if self.config.finally_ is not None:
                await self._run_finally(input)
