# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/safety/__init__.py
--------------------------------------------
Command watchdog, safety-function monitor and power-stage supervisor.
"""

from __future__ import annotations

from .command_watchdog import CommandWatchdog, WatchdogPhase, WatchdogState
from .safety_monitor import SafetyMonitor, SafetyPollResult, sdi_function_ids
from .power_state_supervisor import PowerStateSupervisor, PowerSupervisorResult

__all__ = [
    "CommandWatchdog",
    "WatchdogPhase",
    "WatchdogState",
    "SafetyMonitor",
    "SafetyPollResult",
    "sdi_function_ids",
    "PowerStateSupervisor",
    "PowerSupervisorResult",
]
