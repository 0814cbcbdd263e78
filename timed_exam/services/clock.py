"""
services/clock.py

Countdown timers for the exam clock and the feedback clock.

Timers never get a thread of their own. A CooperativeScheduler keeps a
virtual timeline; whoever hosts the session (a Streamlit rerun, an API
request) pumps it with the wall-clock time that passed since the previous
event, and every tick that fell due inside that window fires in time order.
Tests drive the same timeline with advance().
"""

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """One scheduled callback. cancel() is safe to call any number of times."""

    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class CooperativeScheduler:
    """
    Single-threaded timer queue on a virtual timeline.

    Args:
        clock: monotonic time source used by pump() (seconds).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._last_pump = clock()
        self._now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        handle = TimerHandle(self._now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move the timeline forward and fire everything that became due.

        Callbacks may schedule further callbacks; those fire too if they fall
        inside the same window.

        Returns:
            Number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError("cannot move the timeline backwards")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle.cancelled = True  # one-shot
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def pump(self) -> int:
        """Advance by the wall-clock time elapsed since the previous pump."""
        now = self._clock()
        elapsed = max(0.0, now - self._last_pump)
        self._last_pump = now
        return self.advance(elapsed)

    def resync(self) -> None:
        """Drop the wall-clock time elapsed since the previous pump."""
        self._last_pump = self._clock()

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)


class Countdown:
    """
    Cancellable countdown that ticks once per ``interval``.

    start() arms it at its full duration, stop() disarms it. When the
    remaining count reaches zero the countdown stops itself first and then
    calls ``on_expire`` exactly once.
    """

    def __init__(
        self,
        duration: int,
        on_expire: Callable[[], None],
        scheduler: CooperativeScheduler,
        interval: float = 1.0,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        if duration <= 0:
            raise ValueError("duration must be positive")
        self.duration = duration
        self.remaining = duration
        self.running = False
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._scheduler = scheduler
        self._interval = interval
        self._handle: Optional[TimerHandle] = None

    def start(self) -> None:
        self.stop()
        self.remaining = self.duration
        self.running = True
        self._schedule()

    def stop(self) -> None:
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self.running:
            return
        self.remaining = max(0, self.remaining - 1)
        if self._on_tick is not None:
            self._on_tick(self.remaining)
        if self.remaining == 0:
            self.running = False
            self._on_expire()
        else:
            self._schedule()
