"""Step variants — the closed set of things a Chain can run.

Each variant carries its own payload and knows how to build its executable.
``abort_on_fail`` is part of the variant's type:

- ``TaskStep``, ``ParallelStep`` and ``ThrowableStep`` always abort: it is
  a class-level constant, not a constructor argument.
- ``ConditionalStep`` and ``ChainStep`` take ``abort_on_fail`` as a field
  (default ``False``), so their failures can be recorded as an ``Outcome``.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Union

from .conditional import ConditionalTask
from .parallel import Parallel
from .protocol import Action
from .task import Task
from .throwable import ThrowableTask

if TYPE_CHECKING:
    from .chain import Chain


@dataclass(frozen=True)
class StepConfig:
    """Per-step settings shared by every variant.

    ``key`` of ``None`` makes the step untracked: it runs, but nothing is
    written to the chain snapshot.
    """

    key: Hashable | None = None
    condition: Action | None = None
    finally_: Action | None = None

    @property
    def tracked(self) -> bool:
        return self.key is not None


@dataclass(frozen=True)
class TaskStep:
    action: Action

    abort_on_fail: ClassVar[bool] = True

    def build(self) -> Task:
        return Task(self.action)


@dataclass(frozen=True)
class ParallelStep:
    tracked: Mapping[Any, Action] = field(default_factory=dict)
    untracked: tuple = ()

    abort_on_fail: ClassVar[bool] = True

    def build(self) -> Parallel:
        return Parallel(self.tracked, self.untracked)


@dataclass(frozen=True)
class ConditionalStep:
    if_: Action
    then: Action
    else_: Action | None = None
    abort_on_fail: bool = False

    def build(self) -> ConditionalTask:
        return ConditionalTask(self.if_, self.then, self.else_)


@dataclass(frozen=True)
class ThrowableStep:
    try_: Action
    catch: Action

    abort_on_fail: ClassVar[bool] = True

    def build(self) -> ThrowableTask:
        return ThrowableTask(self.try_, self.catch)


@dataclass(frozen=True)
class ChainStep:
    chain: "Chain"
    abort_on_fail: bool = False

    def build(self) -> "Chain":
        return self.chain


Step = Union[TaskStep, ParallelStep, ConditionalStep, ThrowableStep, ChainStep]
