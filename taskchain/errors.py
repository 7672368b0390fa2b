"""Task chain error types.

Failures raised by user actions are never wrapped: they propagate as the
original exception object.  The types below only cover mistakes in how a
chain is wired together.
"""

from __future__ import annotations


class TaskChainError(Exception):
    """Base class for errors raised by the task chain engine itself."""


class StepConfigError(TaskChainError):
    """Invalid step wiring detected while building a chain.

    Examples:
    - A non-callable action, guard condition or ``finally_`` hook.
    - A ``parallel`` step whose tracked actions are not a mapping.
    - A ``chain`` factory that does not return a ``Chain``.
    """
