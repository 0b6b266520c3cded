#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/utils/scheduler.py
--------------------------------------------
Cooperative timer scheduling for the controller components.

All periodic work of the controller (odometry, watchdog, power supervision,
safety polling) and every command handler run on ONE cooperative scheduler, so
handlers never interleave and the controller needs no locks.

Implementations
---------------
- `ManualScheduler` (here): virtual clock driven by `advance()` / `run_until()`.
  Used by tests and offline simulation; fully deterministic.
- `RosTimerScheduler` (`swd_diff_drive.ros.timer_scheduler`): wraps
  `Node.create_timer` on a single-threaded executor.

Both return handles with the same small surface: `cancel()`, `reset()`,
`is_canceled()`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol


TimerCallback = Callable[[], None]

# Deadline comparisons tolerate float accumulation (e.g. 10 x 0.1 s)
_DUE_EPS_S = 1e-9


# =============================================================================
# Interfaces
# =============================================================================
class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...

    def reset(self) -> None:
        """Restart the countdown from now (re-arms a fired/canceled one-shot)."""
        ...

    def is_canceled(self) -> bool:
        ...


class Scheduler(Protocol):
    def now_s(self) -> float:
        ...

    def create_periodic(self, period_s: float, callback: TimerCallback) -> TimerHandle:
        ...

    def create_one_shot(self, delay_s: float, callback: TimerCallback) -> TimerHandle:
        ...


def _validate_period(period_s: float) -> float:
    p = float(period_s)
    if not math.isfinite(p) or p <= 0.0:
        raise ValueError(f"timer period must be finite and > 0, got {period_s!r}")
    return p


# =============================================================================
# Manual (virtual clock) scheduler
# =============================================================================
@dataclass
class ManualTimer:
    """
    One timer registered on a `ManualScheduler`.

    A one-shot timer becomes canceled once it fires; `reset()` re-arms it.
    Canceled timers are dropped from the scheduler until re-armed.
    """
    scheduler: "ManualScheduler"
    period_s: float
    callback: TimerCallback
    one_shot: bool
    next_due_s: float
    seq: int
    canceled: bool = False
    fire_count: int = 0

    def cancel(self) -> None:
        self.canceled = True
        self.scheduler._discard(self)

    def reset(self) -> None:
        self.canceled = False
        self.next_due_s = self.scheduler.now_s() + self.period_s
        self.scheduler._register(self)

    def is_canceled(self) -> bool:
        return self.canceled

    def time_until_due(self) -> Optional[float]:
        if self.canceled:
            return None
        return max(0.0, self.next_due_s - self.scheduler.now_s())


class ManualScheduler:
    """
    Deterministic scheduler with a virtual clock.

    `run_until(t)` repeatedly picks the earliest due timer (ties broken by
    creation order), moves the clock to its deadline and runs its callback,
    until no timer is due at or before `t`; the clock then rests at `t`.
    Callbacks may create, cancel or reset timers, including their own.
    """

    def __init__(self, start_s: float = 0.0) -> None:
        self._now_s = float(start_s)
        self._timers: List[ManualTimer] = []
        self._seq = 0

    # -------------------------------------------------------------------------
    # Scheduler API
    # -------------------------------------------------------------------------
    def now_s(self) -> float:
        return self._now_s

    def create_periodic(self, period_s: float, callback: TimerCallback) -> ManualTimer:
        return self._add(_validate_period(period_s), callback, one_shot=False)

    def create_one_shot(self, delay_s: float, callback: TimerCallback) -> ManualTimer:
        return self._add(_validate_period(delay_s), callback, one_shot=True)

    # -------------------------------------------------------------------------
    # Clock control
    # -------------------------------------------------------------------------
    def advance(self, dt_s: float) -> int:
        """Advance the clock by `dt_s`; returns the number of callbacks run."""
        if dt_s < 0.0:
            raise ValueError(f"cannot advance by a negative duration ({dt_s})")
        return self.run_until(self._now_s + float(dt_s))

    def run_until(self, t_s: float) -> int:
        t_s = float(t_s)
        if t_s < self._now_s:
            raise ValueError(f"cannot move clock backwards ({t_s} < {self._now_s})")

        fired = 0
        while True:
            timer = self._next_due(t_s)
            if timer is None:
                break
            self._now_s = max(self._now_s, timer.next_due_s)

            # State is updated before the callback so the callback can override it
            if timer.one_shot:
                timer.cancel()
            else:
                timer.next_due_s += timer.period_s
            timer.fire_count += 1
            fired += 1
            timer.callback()

        self._now_s = max(self._now_s, t_s)
        return fired

    def active_timers(self) -> List[ManualTimer]:
        return list(self._timers)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _add(self, period_s: float, callback: TimerCallback, *, one_shot: bool) -> ManualTimer:
        self._seq += 1
        timer = ManualTimer(
            scheduler=self,
            period_s=period_s,
            callback=callback,
            one_shot=one_shot,
            next_due_s=self._now_s + period_s,
            seq=self._seq,
        )
        self._timers.append(timer)
        return timer

    def _register(self, timer: ManualTimer) -> None:
        if not any(t is timer for t in self._timers):
            self._timers.append(timer)

    def _discard(self, timer: ManualTimer) -> None:
        self._timers = [t for t in self._timers if t is not timer]

    def _next_due(self, t_s: float) -> Optional[ManualTimer]:
        best: Optional[ManualTimer] = None
        for timer in self._timers:
            if timer.canceled or timer.next_due_s > t_s + _DUE_EPS_S:
                continue
            if best is None or (timer.next_due_s, timer.seq) < (best.next_due_s, best.seq):
                best = timer
        return best


__all__ = [
    "TimerCallback",
    "TimerHandle",
    "Scheduler",
    "ManualTimer",
    "ManualScheduler",
]
