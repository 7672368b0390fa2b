"""Unit tests for Task and resolve_action."""

from __future__ import annotations

import asyncio

import pytest

from taskchain import Task, resolve_action
from tests.engine.conftest import emits, emits_then_raises, raises, rejects, resolves, returns


@pytest.mark.unit
class TestTaskSync:
    def test_resolves_value(self):
        assert asyncio.run(Task(returns(1)).execute()) == 1

    def test_passes_input_to_action(self):
        task = Task(lambda x: x * 2)
        assert asyncio.run(task.execute(21)) == 42

    def test_raises_original_error(self, boom):
        with pytest.raises(RuntimeError) as exc_info:
            asyncio.run(Task(raises(boom)).execute())
        assert exc_info.value is boom

    def test_state_holds_value_after_completion(self):
        task = Task(returns(1))
        asyncio.run(task.execute())
        assert task.get_state() == 1

    def test_state_is_none_before_execution(self):
        assert Task(returns(1)).get_state() is None


@pytest.mark.unit
class TestTaskAwaitable:
    def test_resolves_coroutine(self):
        assert asyncio.run(Task(resolves(1)).execute()) == 1

    def test_raises_rejection(self, boom):
        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(Task(rejects(boom)).execute())

    def test_resolves_future(self):
        async def main():
            future = asyncio.get_running_loop().create_future()
            future.set_result("done")
            return await Task(lambda _: future).execute()

        assert asyncio.run(main()) == "done"

    def test_state_holds_value_after_completion(self):
        task = Task(resolves(1))
        asyncio.run(task.execute())
        assert task.get_state() == 1


@pytest.mark.unit
class TestTaskProducer:
    def test_single_value(self):
        assert asyncio.run(Task(emits(1)).execute()) == 1

    def test_latest_value_wins(self):
        assert asyncio.run(Task(emits(1, 2, 3, 4)).execute()) == 4

    def test_empty_producer_resolves_none(self):
        assert asyncio.run(Task(emits()).execute()) is None

    def test_sync_generator_latest_value_wins(self):
        def gen(_):
            yield "a"
            yield "b"

        assert asyncio.run(Task(gen).execute()) == "b"

    def test_error_discards_emitted_values(self, boom):
        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(Task(emits_then_raises(boom, 1, 2)).execute())

    def test_failed_call_keeps_previous_state(self, boom):
        calls = {"n": 0}

        async def flaky(_):
            calls["n"] += 1
            yield calls["n"]
            if calls["n"] > 1:
                raise boom

        task = Task(flaky)
        asyncio.run(task.execute())
        assert task.get_state() == 1

        with pytest.raises(RuntimeError):
            asyncio.run(task.execute())
        assert task.get_state() == 1

    def test_state_holds_latest_value(self):
        task = Task(emits(1, 2, 3, 4))
        asyncio.run(task.execute())
        assert task.get_state() == 4


@pytest.mark.unit
class TestResolveAction:
    def test_list_is_a_plain_value(self):
        assert asyncio.run(resolve_action(returns([1, 2, 3]))) == [1, 2, 3]

    def test_none_is_a_plain_value(self):
        assert asyncio.run(resolve_action(returns(None))) is None

    def test_call_error_propagates_when_awaited(self, boom):
        coro = resolve_action(raises(boom))
        with pytest.raises(RuntimeError):
            asyncio.run(coro)
