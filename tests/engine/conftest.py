"""Shared fixtures and reusable dummy actions for task chain tests.

Every action takes the single ``input`` argument the engine passes.
"""

from __future__ import annotations

import asyncio
import logging

import pytest

# ---------------------------------------------------------------------------
# Reusable dummy actions
# ---------------------------------------------------------------------------


def returns(value):
    """Sync action returning *value*."""

    def action(_):
        return value

    return action


def resolves(value, delay: float = 0):
    """Coroutine action resolving to *value* after *delay* seconds."""

    async def action(_):
        await asyncio.sleep(delay)
        return value

    return action


def emits(*values):
    """Async-generator action yielding every value in turn."""

    async def action(_):
        for value in values:
            await asyncio.sleep(0)
            yield value

    return action


def raises(exc: BaseException):
    """Sync action raising *exc* when called."""

    def action(_):
        raise exc

    return action


def rejects(exc: BaseException, delay: float = 0):
    """Coroutine action raising *exc* after *delay* seconds."""

    async def action(_):
        await asyncio.sleep(delay)
        raise exc

    return action


def emits_then_raises(exc: BaseException, *values):
    """Async-generator action yielding *values* and then raising *exc*."""

    async def action(_):
        for value in values:
            yield value
        raise exc

    return action


class Recorder:
    """Callable action recording every input it receives."""

    def __init__(self, result=None):
        self.calls: list = []
        self.result = result

    def __call__(self, input):
        self.calls.append(input)
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


class Never:
    """Action that must not be called."""

    def __call__(self, input):
        raise AssertionError("action should not have been called")


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def boom():
    return RuntimeError("boom")


@pytest.fixture
def chain_logger(caplog):
    """A stdlib logger whose records are captured at DEBUG level."""
    caplog.set_level(logging.DEBUG, logger="tests.chain")
    return logging.getLogger("tests.chain")
