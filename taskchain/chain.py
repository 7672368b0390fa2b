"""Chain — sequential step driver with a shared, append-by-replacement snapshot."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Callable, Hashable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .context import PARENT_KEY, ExecutionContext
from .errors import StepConfigError, TaskChainError
from .protocol import Action, Loggable
from .state import State
from .steps import (
    ChainStep,
    ConditionalStep,
    ParallelStep,
    Step,
    StepConfig,
    TaskStep,
    ThrowableStep,
)


def _random_id() -> str:
    return uuid.uuid4().hex[:12]


class ChainConfig(BaseModel):
    """Construction settings for a ``Chain``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(default_factory=_random_id, description="Identifier used in log lines")
    logger: Any = Field(
        default=None,
        description="Loggable diagnostics sink; the module logger when omitted",
    )


def _require_callable(value: Any, what: str) -> None:
    if not callable(value):
        raise StepConfigError(f"{what} must be callable, got {type(value).__name__}")


def _require_key(key: Hashable | None) -> None:
    if key is not None and (key == "" or not isinstance(key, Hashable)):
        raise StepConfigError(f"Step key must be a non-empty hashable, got {key!r}")


class Chain:
    """Ordered list of steps sharing one snapshot.  Can be nested as a step.

    Build via the fluent API::

        chain = (
            Chain()
            .task(lambda ctx: 1, "t1")
            .conditional(lambda ctx: False, lambda ctx: 9, lambda ctx: 2, "cond")
            .task(lambda ctx: "done")
        )
        snapshot = chain.run()
        # {"t1": 1, "cond": Outcome(failed=False, value=2)}

    Steps run strictly one after another.  Each receives a read-only
    mapping of the current snapshot plus ``"parent_input"`` (the input
    given to this chain).  A propagated failure stops the chain and is
    raised unchanged from ``execute()``.

    ``task``, ``parallel`` and ``throwable`` steps always abort on failure;
    ``conditional`` and ``chain`` steps only when ``abort_on_fail=True``.

    *logger* is any ``logging.Logger``-shaped object (see ``Loggable``),
    so the usual ``log`` / ``warn`` / ``error`` diagnostics map onto
    ``info`` / ``warning`` / ``error``: invocation and completion go to
    ``info``, each settled step to ``debug`` and the failure that stopped
    the chain to ``error``.  An object exposing only ``log`` / ``warn`` /
    ``error`` is rejected with ``TaskChainError``.
    """

    def __init__(
        self,
        id: str | None = None,
        logger: Loggable | None = None,
        *,
        config: ChainConfig | None = None,
    ) -> None:
        if config is None:
            settings: dict[str, Any] = {"logger": logger}
            if id is not None:
                settings["id"] = id
            config = ChainConfig(**settings)
        self.config = config
        if config.logger is not None and not isinstance(config.logger, Loggable):
            raise TaskChainError(
                "logger must provide debug/info/warning/error, got "
                f"{type(config.logger).__name__}"
            )
        self._log: Loggable = config.logger or logging.getLogger(__name__)
        self._state: State[Mapping[Any, Any]] = State(MappingProxyType({}))
        self._contexts: list[ExecutionContext] = []

    @property
    def id(self) -> str:
        return self.config.id

    def get_state(self) -> Mapping[Any, Any]:
        """Return the last-known snapshot (read-only)."""
        return self._state.state

    def __len__(self) -> int:
        return len(self._contexts)

    # ------------------------------------------------------------------
    # Fluent builder
    # ------------------------------------------------------------------

    def _add(
        self,
        step: Step,
        key: Hashable | None,
        condition: Action | None,
        finally_: Action | None,
    ) -> "Chain":
        _require_key(key)
        if condition is not None:
            _require_callable(condition, "condition")
        if finally_ is not None:
            _require_callable(finally_, "finally_")

        config = StepConfig(key=key, condition=condition, finally_=finally_)
        self._contexts.append(ExecutionContext(step, config, self._state))
        return self

    def task(
        self,
        action: Action,
        key: Hashable | None = None,
        *,
        condition: Action | None = None,
        finally_: Action | None = None,
    ) -> "Chain":
        """Append a single action.  Always aborts the chain on failure."""
        _require_callable(action, "task action")
        return self._add(TaskStep(action), key, condition, finally_)

    def parallel(
        self,
        tracked: Mapping[Any, Action] | Sequence[Action],
        key: Hashable | None = None,
        *,
        untracked: Sequence[Action] = (),
        condition: Action | None = None,
        finally_: Action | None = None,
    ) -> "Chain":
        """Append concurrent actions.

        *tracked* maps names to actions; passing a list or tuple instead
        registers every action as untracked.
        """
        if isinstance(tracked, (list, tuple)):
            tracked, untracked = {}, tuple(tracked) + tuple(untracked)
        if not isinstance(tracked, Mapping):
            raise StepConfigError(
                f"parallel actions must be a mapping or a list, got {type(tracked).__name__}"
            )
        for name, action in tracked.items():
            _require_callable(action, f"parallel action {name!r}")
        for action in untracked:
            _require_callable(action, "untracked parallel action")
        return self._add(
            ParallelStep(dict(tracked), tuple(untracked)), key, condition, finally_
        )

    def conditional(
        self,
        if_: Action,
        then: Action,
        else_: Action | None = None,
        key: Hashable | None = None,
        *,
        abort_on_fail: bool = False,
        condition: Action | None = None,
        finally_: Action | None = None,
    ) -> "Chain":
        """Append an if / then / else step."""
        _require_callable(if_, "if_")
        _require_callable(then, "then")
        if else_ is not None:
            _require_callable(else_, "else_")
        step = ConditionalStep(if_, then, else_, abort_on_fail=abort_on_fail)
        return self._add(step, key, condition, finally_)

    def throwable(
        self,
        try_: Action,
        catch: Action,
        key: Hashable | None = None,
        *,
        condition: Action | None = None,
        finally_: Action | None = None,
    ) -> "Chain":
        """Append a try / catch step.  A failing ``catch`` aborts the chain."""
        _require_callable(try_, "try_")
        _require_callable(catch, "catch")
        return self._add(ThrowableStep(try_, catch), key, condition, finally_)

    def chain(
        self,
        factory: Callable[["Chain"], "Chain"],
        key: Hashable | None = None,
        *,
        abort_on_fail: bool = False,
        condition: Action | None = None,
        finally_: Action | None = None,
    ) -> "Chain":
        """Append a nested chain built by *factory*.

        The factory receives a fresh child chain sharing this chain's
        logger and must return it (or another ``Chain``).
        """
        _require_callable(factory, "chain factory")
        child = Chain(id=f"{self.id}.{len(self)}", logger=self.config.logger)
        built = factory(child)
        if not isinstance(built, Chain):
            raise StepConfigError(
                f"chain factory must return a Chain, got {type(built).__name__}"
            )
        return self._add(ChainStep(built, abort_on_fail=abort_on_fail), key, condition, finally_)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def stream(self, input: Any = None) -> AsyncIterator[Mapping[Any, Any]]:
        """Run every step in order, yielding the snapshot after each one settles."""
        self._log.info("Executing chain %s with input: %r", self.id, input)

        for index, context in enumerate(self._contexts):
            step_input = MappingProxyType({**self.get_state(), PARENT_KEY: input})
            try:
                value = await context.execute(step_input)
            except Exception as exc:
                self._log.error(
                    "Chain %s failed at step %d (%s): %r",
                    self.id,
                    index,
                    type(context.step).__name__,
                    exc,
                )
                raise
            self._log.debug("Chain %s step %d settled with: %r", self.id, index, value)
            yield self.get_state()

        self._log.info("Chain %s is complete", self.id)

    async def execute(self, input: Any = None) -> Mapping[Any, Any]:
        """Run the chain and return the final snapshot."""
        async for _ in self.stream(input):
            pass
        return self.get_state()

    def run(self, input: Any = None) -> Mapping[Any, Any]:
        """Sync entry point: ``asyncio.run`` around ``execute()``."""
        return asyncio.run(self.execute(input))
