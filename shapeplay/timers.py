"""
Cancelable timers on a virtual clock.

The engine never sleeps or spawns threads.  A host forwards wall-clock time
as ``Tick`` events; ``Scheduler.advance`` then runs every due callback
synchronously, in due-time order, before returning.  This keeps the whole
engine a single serialized state machine and makes timer behaviour
reproducible in tests.
"""

import heapq
import itertools
from dataclasses import dataclass


@dataclass(frozen=True)
class Tick:
    """Wall-clock time elapsed since the previous tick, in seconds."""
    seconds: float = 1.0


class ScheduledTask:
    """Handle returned by the scheduler; ``cancel()`` is idempotent."""

    def __init__(self, due, callback, interval=None):
        self.due = due
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled

    def __repr__(self):
        state = "cancelled" if self.cancelled else f"due={self.due:.2f}"
        return f"ScheduledTask({state}, interval={self.interval})"


class Scheduler:
    """Virtual clock with one-shot and repeating callbacks."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def _push(self, task):
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task

    def call_later(self, delay, callback) -> ScheduledTask:
        return self._push(ScheduledTask(self.now + delay, callback))

    def call_every(self, interval, callback) -> ScheduledTask:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        return self._push(ScheduledTask(self.now + interval, callback, interval))

    def advance(self, seconds):
        """Move the clock forward, firing everything that comes due."""
        if seconds < 0:
            raise ValueError(f"cannot move the clock backwards ({seconds})")
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self.now = due
            task.callback()
            if task.interval is not None and not task.cancelled:
                task.due = due + task.interval
                self._push(task)
        self.now = target

    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def cancel_all(self):
        for _, _, task in self._queue:
            task.cancel()
        self._queue.clear()


class ChallengeTimer:
    """Whole-second stopwatch for the active challenge.

    ``stop`` halts ticking but keeps the elapsed time (so scoring can read
    it); ``reset`` also zeroes it.  ``pause``/``resume`` are used by the
    time-freeze power-up.
    """

    def __init__(self, scheduler: Scheduler, on_tick=None):
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.elapsed = 0
        self._task = None
        self._started = False

    @property
    def running(self) -> bool:
        return self._task is not None and self._task.active

    @property
    def paused(self) -> bool:
        return self._started and not self.running

    def _tick(self):
        self.elapsed += 1
        if self.on_tick is not None:
            self.on_tick(self.elapsed)

    def start(self):
        if self.running:
            return
        self._started = True
        self._task = self.scheduler.call_every(1.0, self._tick)

    def pause(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def resume(self):
        if self._started and not self.running:
            self._task = self.scheduler.call_every(1.0, self._tick)

    def stop(self):
        self.pause()
        self._started = False

    def reset(self):
        self.stop()
        self.elapsed = 0

    def format(self) -> str:
        mins, secs = divmod(self.elapsed, 60)
        return f"{mins}:{secs:02d}"
