#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/safety/command_watchdog.py
----------------------------------------------------
Command-loss watchdog for the drive controller.

Purpose
-------
Stop the vehicle when velocity commands stop arriving. Every accepted command
restarts a one-shot countdown; when it runs out the `on_timeout` callback
(zero-velocity dispatch) is invoked.

Semantics
---------
- Deadline, not cumulative: a command at t restarts the countdown from t.
- After an expiry the timer re-arms itself, so the zero command repeats every
  timeout period for as long as commands stay absent.
- `timeout_ms == 0` disables the watchdog entirely.
- Cancel + re-arm happen on the cooperative scheduler, so a command and a
  stale expiry can never interleave.

Design goals
------------
- Pure Python (no ROS dependency); timers come from an injected `Scheduler`
- Explicit phases and counters for logs / tests
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

from swd_diff_drive.utils.logging import get_logger_adapter
from swd_diff_drive.utils.scheduler import Scheduler, TimerHandle


# =============================================================================
# Dataclasses
# =============================================================================
class WatchdogPhase(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class WatchdogState:
    """
    Runtime state of the watchdog (snapshot).
    """
    phase: WatchdogPhase = WatchdogPhase.IDLE
    timeout_s: float = 0.0
    last_command_s: Optional[float] = None
    last_expiry_s: Optional[float] = None
    command_count: int = 0
    expiry_count: int = 0

    @property
    def expired(self) -> bool:
        return self.phase is WatchdogPhase.EXPIRED


# =============================================================================
# Core watchdog
# =============================================================================
class CommandWatchdog:
    """
    One-shot restartable deadline timer.

    Recommended pattern
    -------------------
    - controller start: `watchdog.start()`
    - every velocity command: `watchdog.on_command_received()`
    - controller stop: `watchdog.stop()`
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_timeout: Callable[[], None],
        *,
        timeout_ms: int,
        logger: Optional[Any] = None,
    ) -> None:
        if int(timeout_ms) < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {timeout_ms}")
        self._scheduler = scheduler
        self._on_timeout = on_timeout
        self._log = get_logger_adapter(logger)
        self.timeout_ms = int(timeout_ms)

        self._timer: Optional[TimerHandle] = None
        self._state = WatchdogState(timeout_s=self.timeout_s)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------
    @property
    def enabled(self) -> bool:
        return self.timeout_ms > 0

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def state(self) -> WatchdogState:
        return self._state

    @property
    def expired(self) -> bool:
        return self._state.expired

    @property
    def running(self) -> bool:
        return self._state.phase is not WatchdogPhase.IDLE

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    def start(self) -> None:
        """Arm the countdown from now."""
        if not self.enabled:
            self._log.info("Command watchdog disabled (watchdog_receive_ms = 0)")
            return
        if self._timer is None:
            self._timer = self._scheduler.create_one_shot(self.timeout_s, self._handle_timeout)
        else:
            self._timer.reset()
        self._state = replace(self._state, phase=WatchdogPhase.ARMED)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._state = replace(self._state, phase=WatchdogPhase.IDLE)

    def on_command_received(self) -> None:
        """Restart the countdown (no-op for the timer while stopped or disabled)."""
        now = self._scheduler.now_s()
        was_expired = self._state.expired
        self._state = replace(
            self._state,
            last_command_s=now,
            command_count=self._state.command_count + 1,
        )
        if not self.enabled or not self.running or self._timer is None:
            return

        self._timer.reset()
        self._state = replace(self._state, phase=WatchdogPhase.ARMED)
        if was_expired:
            self._log.info("Velocity commands resumed, watchdog re-armed")

    # -------------------------------------------------------------------------
    # Timer callback
    # -------------------------------------------------------------------------
    def _handle_timeout(self) -> None:
        if not self.running:
            return

        first = not self._state.expired
        self._state = replace(
            self._state,
            phase=WatchdogPhase.EXPIRED,
            last_expiry_s=self._scheduler.now_s(),
            expiry_count=self._state.expiry_count + 1,
        )
        if first:
            self._log.warn(
                f"No velocity command received for {self.timeout_ms} ms, stopping wheels"
            )

        # Re-arm first so the zero command keeps repeating while commands are absent
        if self._timer is not None:
            self._timer.reset()
        self._on_timeout()


__all__ = [
    "WatchdogPhase",
    "WatchdogState",
    "CommandWatchdog",
]
