"""Task chain engine — compose async actions into sequences, parallel
groups, conditional branches and try/catch steps, accumulating named
results into one snapshot.

Public surface::

    from taskchain import (
        Chain,
        ChainConfig,
        Task,
        Parallel,
        ConditionalTask,
        ThrowableTask,
        ExecutionContext,
        Outcome,
        State,
        StepConfig,
        PARENT_KEY,
        StepConfigError,
    )
"""

from .chain import Chain, ChainConfig
from .conditional import ConditionalTask
from .context import PARENT_KEY, ExecutionContext
from .errors import StepConfigError, TaskChainError
from .parallel import Parallel
from .protocol import Executable, Loggable, Outcome, Stateful, is_stateful
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
from .task import Task, resolve_action
from .throwable import ThrowableTask

__all__ = [
    "Chain",
    "ChainConfig",
    "Task",
    "Parallel",
    "ConditionalTask",
    "ThrowableTask",
    "ExecutionContext",
    "PARENT_KEY",
    "Outcome",
    "State",
    "Step",
    "StepConfig",
    "TaskStep",
    "ParallelStep",
    "ConditionalStep",
    "ThrowableStep",
    "ChainStep",
    "Executable",
    "Stateful",
    "Loggable",
    "is_stateful",
    "resolve_action",
    "TaskChainError",
    "StepConfigError",
]
