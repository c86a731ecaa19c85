"""
Timer primitives shared by the wizard components.

All simulated work (upload ticks, generation delay, export delay) is driven
through a Scheduler so the same component code runs on the asyncio event
loop in the server and on virtual time in tests.

Usage:
    scheduler = LoopScheduler()                 # inside a running event loop
    timer = IntervalTimer(scheduler, 0.2, tick).start()
    task = DelayedTask(scheduler, 3.0, build_questionnaire)
    task.add_done_callback(on_ready)
"""

import asyncio
import heapq
import itertools
from enum import Enum
from typing import Any, Callable, Dict, Hashable, List, Optional, Protocol


class TimerHandle(Protocol):
    """Anything returned by ``call_later`` that can be cancelled."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Source of one-shot timers."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...

    def time(self) -> float:
        ...


# ---------------------------------------------------------------------------
# Schedulers
# ---------------------------------------------------------------------------


class LoopScheduler:
    """Scheduler backed by an asyncio event loop.

    When no loop is given, the running loop is looked up on every call, so
    one instance can be created at import time and used from any request
    handler.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self._get_loop().call_later(delay, callback, *args)

    def time(self) -> float:
        return self._get_loop().time()


class _ManualHandle:
    __slots__ = ("when", "callback", "args", "cancelled")

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler: callbacks run only when the clock is advanced.

    Callbacks run in due-time order (FIFO for equal times). Callbacks that
    schedule new timers inside the advanced window run in the same call.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[tuple] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(delay, 0.0), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def time(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every timer that comes due.

        Returns:
            Number of callbacks executed.
        """
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle.callback(*handle.args)
            ran += 1
        self._now = target
        return ran

    def run_until_idle(self, max_callbacks: int = 10_000) -> int:
        """Run timers until none are pending (bounded for runaway intervals)."""
        ran = 0
        while self._queue and ran < max_callbacks:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, when)
            handle.callback(*handle.args)
            ran += 1
        return ran


# ---------------------------------------------------------------------------
# Repeating timers
# ---------------------------------------------------------------------------


class IntervalTimer:
    """Fixed-interval repeating timer (setInterval semantics).

    The next tick is scheduled before the callback runs, so a callback may
    cancel its own timer.
    """

    def __init__(self, scheduler: Scheduler, interval: float, callback: Callable[..., Any], *args: Any):
        self._scheduler = scheduler
        self._interval = interval
        self._callback = callback
        self._args = args
        self._handle: Optional[TimerHandle] = None
        self._cancelled = False
        self.ticks = 0

    def start(self) -> "IntervalTimer":
        self._schedule()
        return self

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._schedule()
        self.ticks += 1
        self._callback(*self._args)

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def active(self) -> bool:
        return not self._cancelled


class TimerRegistry:
    """Explicit map from an owner key to its live timer handle."""

    def __init__(self):
        self._handles: Dict[Hashable, TimerHandle] = {}

    def register(self, key: Hashable, handle: TimerHandle) -> None:
        previous = self._handles.pop(key, None)
        if previous is not None:
            previous.cancel()
        self._handles[key] = handle

    def cancel(self, key: Hashable) -> bool:
        """Cancel and forget the timer for *key*. Returns False if none."""
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        count = len(self._handles)
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        return count

    def __contains__(self, key: Hashable) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)


# ---------------------------------------------------------------------------
# Delayed tasks
# ---------------------------------------------------------------------------


class TaskState(str, Enum):
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DelayedTask:
    """Future-like result of a callable run once after a delay.

    Cancelling a pending task guarantees its callable never runs and its
    done callbacks fire with the cancelled task.
    """

    def __init__(self, scheduler: Scheduler, delay: float, fn: Callable[[], Any], name: str = ""):
        self.name = name
        self._fn = fn
        self._state = TaskState.PENDING
        self._result: Any = None
        self._exception: Optional[BaseException] = None
        self._callbacks: List[Callable[["DelayedTask"], Any]] = []
        self._handle = scheduler.call_later(delay, self._run)

    @property
    def state(self) -> TaskState:
        return self._state

    def _run(self) -> None:
        if self._state is not TaskState.PENDING:
            return
        try:
            self._result = self._fn()
        except Exception as exc:
            self._exception = exc
            self._state = TaskState.FAILED
        else:
            self._state = TaskState.DONE
        self._fire_callbacks()

    def _fire_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb(self)

    def cancel(self) -> bool:
        if self._state is not TaskState.PENDING:
            return False
        self._handle.cancel()
        self._state = TaskState.CANCELLED
        self._fire_callbacks()
        return True

    def done(self) -> bool:
        return self._state is not TaskState.PENDING

    def cancelled(self) -> bool:
        return self._state is TaskState.CANCELLED

    def result(self) -> Any:
        if self._state is TaskState.PENDING:
            raise asyncio.InvalidStateError(f"Task {self.name!r} is still pending")
        if self._state is TaskState.CANCELLED:
            raise asyncio.CancelledError(f"Task {self.name!r} was cancelled")
        if self._exception is not None:
            raise self._exception
        return self._result

    def exception(self) -> Optional[BaseException]:
        if self._state is TaskState.PENDING:
            raise asyncio.InvalidStateError(f"Task {self.name!r} is still pending")
        return self._exception

    def add_done_callback(self, fn: Callable[["DelayedTask"], Any]) -> None:
        if self.done():
            fn(self)
        else:
            self._callbacks.append(fn)
