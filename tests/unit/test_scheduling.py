"""
Unit tests for bsa_discovery/scheduling.py.

Covers the virtual-time ManualScheduler, IntervalTimer, TimerRegistry and
DelayedTask, plus a smoke test of LoopScheduler on a real event loop.
"""

import asyncio

import pytest

from bsa_discovery.scheduling import (
    DelayedTask,
    IntervalTimer,
    LoopScheduler,
    ManualScheduler,
    TaskState,
    TimerRegistry,
)


class TestManualScheduler:
    """Tests for virtual-time scheduling."""

    def test_callbacks_wait_for_advance(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(1.0, calls.append, "a")
        assert calls == []
        scheduler.advance(0.5)
        assert calls == []
        scheduler.advance(0.5)
        assert calls == ["a"]

    def test_due_order_then_fifo(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(2.0, calls.append, "late")
        scheduler.call_later(1.0, calls.append, "first")
        scheduler.call_later(1.0, calls.append, "second")
        ran = scheduler.advance(5.0)
        assert calls == ["first", "second", "late"]
        assert ran == 3

    def test_cancelled_handle_never_runs(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.call_later(1.0, calls.append, "x")
        handle.cancel()
        assert scheduler.pending == 0
        scheduler.advance(2.0)
        assert calls == []

    def test_time_moves_to_target(self):
        scheduler = ManualScheduler(start=10.0)
        scheduler.advance(3.0)
        assert scheduler.time() == 13.0

    def test_callbacks_scheduled_inside_window_run(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(1.0, lambda: scheduler.call_later(1.0, calls.append, "nested"))
        scheduler.advance(2.0)
        assert calls == ["nested"]

    def test_run_until_idle_is_bounded(self):
        scheduler = ManualScheduler()
        timer = IntervalTimer(scheduler, 1.0, lambda: None).start()
        ran = scheduler.run_until_idle(max_callbacks=5)
        assert ran == 5
        assert timer.ticks == 5


class TestIntervalTimer:
    """Tests for the repeating timer."""

    def test_ticks_every_interval(self):
        scheduler = ManualScheduler()
        calls = []
        timer = IntervalTimer(scheduler, 1.0, calls.append, "t").start()
        for _ in range(3):
            scheduler.advance(1.0)
        assert calls == ["t", "t", "t"]
        assert timer.ticks == 3

    def test_cancel_stops_ticks(self):
        scheduler = ManualScheduler()
        calls = []
        timer = IntervalTimer(scheduler, 1.0, calls.append, 1).start()
        scheduler.advance(1.0)
        timer.cancel()
        scheduler.advance(5.0)
        assert calls == [1]
        assert not timer.active
        assert scheduler.pending == 0

    def test_callback_can_cancel_own_timer(self):
        scheduler = ManualScheduler()
        holder = {}

        def tick():
            holder["timer"].cancel()

        holder["timer"] = IntervalTimer(scheduler, 1.0, tick).start()
        scheduler.advance(1.0)
        assert scheduler.pending == 0
        assert holder["timer"].ticks == 1


class TestTimerRegistry:
    """Tests for the id → handle registry."""

    def test_register_and_cancel(self):
        scheduler = ManualScheduler()
        registry = TimerRegistry()
        registry.register("a", scheduler.call_later(1.0, lambda: None))
        assert "a" in registry
        assert registry.cancel("a") is True
        assert "a" not in registry
        assert scheduler.pending == 0

    def test_cancel_unknown_returns_false(self):
        assert TimerRegistry().cancel("missing") is False

    def test_register_replaces_and_cancels_previous(self):
        scheduler = ManualScheduler()
        registry = TimerRegistry()
        registry.register("a", scheduler.call_later(1.0, lambda: None))
        registry.register("a", scheduler.call_later(1.0, lambda: None))
        assert len(registry) == 1
        assert scheduler.pending == 1

    def test_cancel_all(self):
        scheduler = ManualScheduler()
        registry = TimerRegistry()
        for key in ("a", "b", "c"):
            registry.register(key, scheduler.call_later(1.0, lambda: None))
        assert registry.cancel_all() == 3
        assert len(registry) == 0
        assert scheduler.pending == 0


class TestDelayedTask:
    """Tests for the cancellable delayed task."""

    def test_result_after_delay(self):
        scheduler = ManualScheduler()
        task = DelayedTask(scheduler, 3.0, lambda: 42, name="answer")
        assert task.state is TaskState.PENDING
        with pytest.raises(asyncio.InvalidStateError):
            task.result()
        scheduler.advance(3.0)
        assert task.done()
        assert task.result() == 42
        assert task.exception() is None

    def test_done_callback_fires_once(self):
        scheduler = ManualScheduler()
        seen = []
        task = DelayedTask(scheduler, 1.0, lambda: "ok")
        task.add_done_callback(seen.append)
        scheduler.advance(1.0)
        scheduler.advance(1.0)
        assert seen == [task]

    def test_callback_added_after_done_runs_immediately(self):
        scheduler = ManualScheduler()
        task = DelayedTask(scheduler, 1.0, lambda: "ok")
        scheduler.advance(1.0)
        seen = []
        task.add_done_callback(seen.append)
        assert seen == [task]

    def test_cancel_prevents_run(self):
        scheduler = ManualScheduler()
        calls = []
        task = DelayedTask(scheduler, 1.0, lambda: calls.append("ran"))
        seen = []
        task.add_done_callback(seen.append)
        assert task.cancel() is True
        scheduler.advance(5.0)
        assert calls == []
        assert task.cancelled()
        assert seen == [task]
        with pytest.raises(asyncio.CancelledError):
            task.result()

    def test_cancel_after_done_returns_false(self):
        scheduler = ManualScheduler()
        task = DelayedTask(scheduler, 1.0, lambda: 1)
        scheduler.advance(1.0)
        assert task.cancel() is False
        assert task.state is TaskState.DONE

    def test_failure_is_captured(self):
        scheduler = ManualScheduler()

        def boom():
            raise RuntimeError("broken")

        task = DelayedTask(scheduler, 1.0, boom)
        scheduler.advance(1.0)
        assert task.state is TaskState.FAILED
        assert isinstance(task.exception(), RuntimeError)
        with pytest.raises(RuntimeError, match="broken"):
            task.result()


class TestLoopScheduler:
    """LoopScheduler runs callbacks on the asyncio event loop."""

    @pytest.mark.asyncio
    async def test_call_later_fires_on_running_loop(self):
        scheduler = LoopScheduler()
        calls = []
        scheduler.call_later(0.01, calls.append, "fired")
        await asyncio.sleep(0.05)
        assert calls == ["fired"]

    @pytest.mark.asyncio
    async def test_delayed_task_on_loop(self):
        scheduler = LoopScheduler()
        task = DelayedTask(scheduler, 0.01, lambda: "done")
        await asyncio.sleep(0.05)
        assert task.result() == "done"

    @pytest.mark.asyncio
    async def test_cancelled_loop_timer_does_not_fire(self):
        scheduler = LoopScheduler()
        calls = []
        handle = scheduler.call_later(0.01, calls.append, "fired")
        handle.cancel()
        await asyncio.sleep(0.05)
        assert calls == []
