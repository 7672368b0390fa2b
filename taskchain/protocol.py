"""Structural protocols and the Outcome record shared by every combinator."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

#: Anything callable with a single input: returns a value, an awaitable,
#: an async iterable or a generator.
Action = Callable[[Any], Any]


@runtime_checkable
class Executable(Protocol):
    """Anything that can run as a step: ``Task``, ``Parallel``, ``Chain`` ...

    ``execute`` settles exactly once: it returns the retained value or
    raises the failure unmodified.
    """

    def execute(self, input: Any = None) -> Awaitable[Any]: ...


@runtime_checkable
class Stateful(Protocol):
    """Exposes the last value it retained via ``get_state()``."""

    def get_state(self) -> Any: ...


@runtime_checkable
class Loggable(Protocol):
    """Diagnostics sink consumed by ``Chain``.

    Any ``logging.Logger`` satisfies it.
    """

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...


def is_stateful(obj: Any) -> bool:
    """Return True when *obj* exposes a callable ``get_state``."""
    return callable(getattr(obj, "get_state", None))


class Outcome(BaseModel):
    """Recorded result of a step whose failure must not propagate.

    ``failed=False`` carries ``value``; ``failed=True`` carries ``error``.
    For a ``ThrowableTask`` that recovered, ``error`` holds what the
    ``catch`` action returned, not the original exception.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    failed: bool = Field(..., description="Whether the step failed")
    value: Any = Field(default=None, description="Result when the step succeeded")
    error: Any = Field(default=None, description="Error when the step failed")

    @classmethod
    def success(cls, value: Any) -> "Outcome":
        return cls(failed=False, value=value)

    @classmethod
    def failure(cls, error: Any) -> "Outcome":
        return cls(failed=True, error=error)
