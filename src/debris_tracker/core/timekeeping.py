"""Wall-clock timing, the time-warped simulation clock and the frame/timer scheduler."""
from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from .config import TRACKER_CFG


def perf_ms() -> float:
    return time.perf_counter() * 1000.0


def wall_ms() -> float:
    return time.time() * 1000.0


@dataclass
class SimulationClock:
    """Virtual UTC time advancing at ``time_warp`` times real elapsed time.

    ``simulated_ms`` is milliseconds since the Unix epoch; ``wall_clock_last_tick``
    is on the :func:`perf_ms` timeline.
    """

    simulated_ms: float
    wall_clock_last_tick: float
    time_warp: float = TRACKER_CFG.default_time_warp

    @classmethod
    def start(
        cls,
        *,
        time_warp: float = TRACKER_CFG.default_time_warp,
        now_wall_ms: float | None = None,
        now_perf_ms: float | None = None,
    ) -> "SimulationClock":
        return cls(
            simulated_ms=wall_ms() if now_wall_ms is None else now_wall_ms,
            wall_clock_last_tick=perf_ms() if now_perf_ms is None else now_perf_ms,
            time_warp=time_warp,
        )

    def advance(self, real_elapsed_ms: float) -> float:
        self.simulated_ms += real_elapsed_ms * self.time_warp
        self.wall_clock_last_tick += real_elapsed_ms
        return self.simulated_ms

    def tick(self, now_ms: float) -> float:
        """Advance by the real time elapsed since the previous tick."""

        elapsed = now_ms - self.wall_clock_last_tick
        self.simulated_ms += elapsed * self.time_warp
        self.wall_clock_last_tick = now_ms
        return self.simulated_ms

    @property
    def simulated_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.simulated_ms / 1000.0, tz=timezone.utc)

    def format_utc(self) -> str:
        return self.simulated_datetime.strftime("%d %b %Y %H:%M:%S")


FrameCallback = Callable[[float], None]
TimerCallback = Callable[[], None]


@dataclass
class _Timer:
    callback: TimerCallback
    due: float
    interval: float | None


class Scheduler:
    """Cooperative single-queue scheduler for frame callbacks and timers.

    Every callback runs to completion before the next one starts. Frame
    callbacks requested while a pass is running are deferred to the next pass.
    """

    def __init__(self, time_source: Callable[[], float] = perf_ms) -> None:
        self._time_source = time_source
        self._handles = itertools.count(1)
        self._frames: dict[int, FrameCallback] = {}
        self._timers: dict[int, _Timer] = {}
        self._queue: list[tuple[float, int, int]] = []
        self._sequence = itertools.count()

    def now_ms(self) -> float:
        return self._time_source()

    @property
    def pending_frames(self) -> int:
        return len(self._frames)

    @property
    def active_timers(self) -> int:
        return len(self._timers)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._frames[handle] = callback
        return handle

    def cancel_frame(self, handle: int | None) -> None:
        if handle is not None:
            self._frames.pop(handle, None)

    def set_timeout(self, callback: TimerCallback, delay_ms: float) -> int:
        return self._add_timer(callback, delay_ms, None)

    def set_interval(self, callback: TimerCallback, interval_ms: float) -> int:
        if interval_ms <= 0.0:
            raise ValueError("interval must be positive")
        return self._add_timer(callback, interval_ms, interval_ms)

    def clear_timer(self, handle: int | None) -> None:
        if handle is not None:
            self._timers.pop(handle, None)

    def _add_timer(self, callback: TimerCallback, delay_ms: float, interval: float | None) -> int:
        handle = next(self._handles)
        due = self.now_ms() + max(0.0, delay_ms)
        self._timers[handle] = _Timer(callback, due, interval)
        heapq.heappush(self._queue, (due, next(self._sequence), handle))
        return handle

    def run_pending(self) -> None:
        now = self.now_ms()
        self._run_timers(now)
        for handle in list(self._frames):
            callback = self._frames.pop(handle, None)
            if callback is None:
                continue
            callback(now)

    def _run_timers(self, now: float) -> None:
        while self._queue and self._queue[0][0] <= now:
            due, _, handle = heapq.heappop(self._queue)
            timer = self._timers.get(handle)
            if timer is None or timer.due != due:
                continue
            if timer.interval is None:
                del self._timers[handle]
            else:
                timer.due = due + timer.interval
                if timer.due <= now:
                    timer.due = now + timer.interval
                heapq.heappush(self._queue, (timer.due, next(self._sequence), handle))
            timer.callback()


__all__ = ["Scheduler", "SimulationClock", "perf_ms", "wall_ms"]
