#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/drivers/dryrun_actuator.py
----------------------------------------------------
Software-only wheel actuator for SWD Base (tests, offline simulation, bench).

Purpose
- Stand-in for the real wheel drive when no device stack is available
- Lets you run the full controller (kinematics, odometry, watchdog, safety and
  power supervision) without hardware
- Records every command for diagnostics and unit tests

Simulation model
- Position (mm) integrates the commanded motor rpm over the injected clock:
  travel = rpm / reduction / 60 * dt * pi * diameter
- The wheel only moves while the power stage is OPERATION_ENABLED and the soft
  brake is released
- Safety-function bits and the power-stage state are settable from the outside
- Any operation can be made to fail (once, N times, or until cleared)

Typical use
-----------
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator

act = DryRunActuator(name="left", clock=scheduler.now_s)
act.init({"diameter_m": 0.2, "gear_reduction": 14.0})
act.request_operation_enabled()
act.set_target_velocity(600)
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from swd_diff_drive.drivers.actuator import Actuator, PowerState, SafetyFunctionId
from swd_diff_drive.exceptions import (
    ActuatorClosedError,
    ActuatorErrorContext,
    ActuatorInitError,
    DeviceCommError,
    HaltCommandError,
    PositionReadError,
    PowerStateError,
    SafetyReadError,
    SetpointWriteError,
)


_INT32_SPAN = 1 << 32
_INT32_HALF = 1 << 31

# Operation name -> exception raised when a failure is injected
_FAILURE_TYPES: Dict[str, type] = {
    "get_position_value": PositionReadError,
    "set_target_velocity": SetpointWriteError,
    "set_halt": HaltCommandError,
    "get_safety_function_state": SafetyReadError,
    "get_power_stage_state": PowerStateError,
    "request_operation_enabled": PowerStateError,
}


def wrap_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range, like the device counter."""
    return ((int(value) + _INT32_HALF) % _INT32_SPAN) - _INT32_HALF


# =============================================================================
# Typed records
# =============================================================================
@dataclass(frozen=True)
class DryRunActuatorCommand:
    """
    Snapshot of one command accepted by the dry-run actuator.
    """
    timestamp_s: float
    operation: str
    value: Any = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "timestamp_s": self.timestamp_s,
            "operation": self.operation,
            "value": self.value,
        }


@dataclass
class DryRunActuatorState:
    """
    Mutable runtime state for the dry-run actuator.
    """
    is_open: bool = True
    initialized: bool = False
    position_mm: float = 0.0
    target_rpm: int = 0
    halted: bool = False
    power_state: PowerState = PowerState.SWITCH_ON_DISABLED
    last_update_s: Optional[float] = None
    command_count: int = 0
    enable_request_count: int = 0


# =============================================================================
# Dry-run actuator implementation
# =============================================================================
class DryRunActuator(Actuator):
    """
    Software-only wheel actuator.

    Test helpers
    ------------
    - set_position_mm(value)            jump the counter (e.g. device restart)
    - set_safety_function(id, active)
    - set_power_state(state)
    - inject_failure(operation, count=1) / clear_failures()
    - get_history() / reset_history()
    """

    def __init__(
        self,
        *,
        name: str = "dryrun",
        clock: Optional[Callable[[], float]] = None,
        diameter_m: float = 0.0,
        gear_reduction: float = 1.0,
        initial_position_mm: float = 0.0,
        power_state: PowerState = PowerState.SWITCH_ON_DISABLED,
        auto_enable: bool = True,
        max_history: int = 1000,
    ) -> None:
        self.name = str(name)
        self._clock: Callable[[], float] = clock or time.monotonic
        self.diameter_m = float(diameter_m)
        self.gear_reduction = float(gear_reduction)
        self.auto_enable = bool(auto_enable)

        if int(max_history) < 1:
            raise ActuatorInitError(
                f"max_history must be >= 1, got {max_history}",
                context=ActuatorErrorContext(wheel=self.name, parameter="max_history"),
            )
        self.max_history = int(max_history)

        self._state = DryRunActuatorState(
            position_mm=float(initial_position_mm),
            power_state=PowerState(power_state),
        )
        self._safety_bits: Dict[SafetyFunctionId, bool] = {f: False for f in SafetyFunctionId}
        self._failures: Dict[str, Optional[int]] = {}
        self._history: List[DryRunActuatorCommand] = []

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    def _ensure_open(self, operation: str) -> None:
        if not self._state.is_open:
            raise ActuatorClosedError(
                f"{self.name} actuator is closed",
                context=ActuatorErrorContext(wheel=self.name, operation=operation),
            )

    def _maybe_fail(self, operation: str) -> None:
        if operation not in self._failures:
            return
        remaining = self._failures[operation]
        if remaining is not None:
            if remaining <= 1:
                del self._failures[operation]
            else:
                self._failures[operation] = remaining - 1
        error_cls = _FAILURE_TYPES.get(operation, DeviceCommError)
        raise error_cls(
            f"Injected {operation} failure on {self.name} actuator",
            context=ActuatorErrorContext(wheel=self.name, operation=operation),
        )

    def _begin(self, operation: str) -> None:
        self._ensure_open(operation)
        self._maybe_fail(operation)

    def _wheel_moving(self) -> bool:
        return self._state.power_state.is_operational and not self._state.halted

    def _integrate(self) -> None:
        now = float(self._clock())
        last = self._state.last_update_s
        self._state.last_update_s = now
        if last is None or now <= last:
            return
        if not self._wheel_moving() or self.diameter_m <= 0.0:
            return
        wheel_rev_per_s = self._state.target_rpm / self.gear_reduction / 60.0
        self._state.position_mm += wheel_rev_per_s * (now - last) * math.pi * self.diameter_m * 1000.0

    def _record(self, operation: str, value: Any = None) -> None:
        self._state.command_count += 1
        self._history.append(
            DryRunActuatorCommand(timestamp_s=float(self._clock()), operation=operation, value=value)
        )
        if len(self._history) > self.max_history:
            # keep latest entries only
            self._history = self._history[-self.max_history :]

    # -------------------------------------------------------------------------
    # Actuator API
    # -------------------------------------------------------------------------
    def init(self, config: Mapping[str, Any]) -> None:
        """
        Accepts the wheel geometry (`diameter_m`, `gear_reduction`) plus
        optional dry-run options: `initial_position_mm`, `power_state`,
        `auto_enable`, `fail_init`.
        """
        self._ensure_open("init")
        if bool(config.get("fail_init", False)):
            raise ActuatorInitError(
                f"Failed initializing {self.name} actuator (fail_init requested)",
                context=ActuatorErrorContext(wheel=self.name, operation="init"),
            )
        try:
            if "diameter_m" in config:
                self.diameter_m = float(config["diameter_m"])
            if "gear_reduction" in config:
                self.gear_reduction = float(config["gear_reduction"])
            if "initial_position_mm" in config:
                self._state.position_mm = float(config["initial_position_mm"])
            if "power_state" in config:
                self._state.power_state = PowerState(str(config["power_state"]).upper())
        except (TypeError, ValueError) as e:
            raise ActuatorInitError(
                f"Invalid dry-run options for {self.name} actuator",
                context=ActuatorErrorContext(wheel=self.name, operation="init"),
                cause=e,
            ) from e
        if "auto_enable" in config:
            self.auto_enable = bool(config["auto_enable"])
        if self.gear_reduction <= 0.0:
            raise ActuatorInitError(
                f"gear_reduction must be > 0 for {self.name} actuator",
                context=ActuatorErrorContext(
                    wheel=self.name, parameter="gear_reduction", value=self.gear_reduction
                ),
            )

        self._state.initialized = True
        self._state.last_update_s = float(self._clock())
        self._record("init")

    def get_position_value(self) -> int:
        self._begin("get_position_value")
        self._integrate()
        return wrap_int32(int(round(self._state.position_mm)))

    def set_target_velocity(self, rpm: int) -> None:
        self._begin("set_target_velocity")
        self._integrate()
        self._state.target_rpm = int(rpm)
        self._record("set_target_velocity", int(rpm))

    def set_halt(self, enable: bool) -> None:
        self._begin("set_halt")
        self._integrate()
        self._state.halted = bool(enable)
        self._record("set_halt", bool(enable))

    def get_safety_function_state(self, function_id: SafetyFunctionId) -> bool:
        self._begin("get_safety_function_state")
        return self._safety_bits[SafetyFunctionId(function_id)]

    def get_power_stage_state(self) -> PowerState:
        self._begin("get_power_stage_state")
        return self._state.power_state

    def request_operation_enabled(self) -> None:
        self._begin("request_operation_enabled")
        self._integrate()
        self._state.enable_request_count += 1
        if self.auto_enable and self._state.power_state is not PowerState.FAULT:
            self._state.power_state = PowerState.OPERATION_ENABLED
        self._record("request_operation_enabled")

    def close(self) -> None:
        """
        Close the dry-run actuator (marks instance unusable for further calls).
        """
        if not self._state.is_open:
            return
        self._integrate()
        self._state.target_rpm = 0
        self._record("close")
        self._state.is_open = False

    # -------------------------------------------------------------------------
    # Test / simulation helpers
    # -------------------------------------------------------------------------
    def set_position_mm(self, value: float) -> None:
        self._integrate()
        self._state.position_mm = float(value)

    def set_safety_function(self, function_id: SafetyFunctionId, active: bool = True) -> None:
        self._safety_bits[SafetyFunctionId(function_id)] = bool(active)

    def set_power_state(self, state: PowerState) -> None:
        self._integrate()
        self._state.power_state = PowerState(state)

    def inject_failure(self, operation: str, count: Optional[int] = 1) -> None:
        """
        Make `operation` raise its DeviceCommError subclass for the next
        `count` calls (`count=None` fails until `clear_failures()`).
        """
        if operation not in _FAILURE_TYPES:
            raise ValueError(f"Unknown actuator operation: {operation!r}")
        if count is not None and int(count) < 1:
            raise ValueError(f"count must be >= 1 or None, got {count}")
        self._failures[operation] = None if count is None else int(count)

    def clear_failures(self) -> None:
        self._failures.clear()

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def target_rpm(self) -> int:
        return self._state.target_rpm

    @property
    def halted(self) -> bool:
        return self._state.halted

    @property
    def enable_request_count(self) -> int:
        return self._state.enable_request_count

    def reset_history(self) -> None:
        self._history.clear()

    def get_history(self, operation: Optional[str] = None) -> List[DryRunActuatorCommand]:
        """
        Return a shallow copy of command history records, optionally filtered.
        """
        if operation is None:
            return list(self._history)
        return [c for c in self._history if c.operation == operation]

    def get_state_dict(self) -> Dict[str, object]:
        """
        Structured state snapshot for logs/tests/diagnostics.
        """
        return {
            "name": self.name,
            "is_open": self._state.is_open,
            "initialized": self._state.initialized,
            "position_mm": self._state.position_mm,
            "target_rpm": self._state.target_rpm,
            "halted": self._state.halted,
            "power_state": self._state.power_state.value,
            "safety": {f.value: v for f, v in self._safety_bits.items()},
            "command_count": self._state.command_count,
            "enable_request_count": self._state.enable_request_count,
            "history_len": len(self._history),
        }

    def summary(self) -> str:
        """
        Compact human-readable status line.
        """
        return (
            f"{self.name}(open={self._state.is_open}, pds={self._state.power_state.value}, "
            f"halt={self._state.halted}, rpm={self._state.target_rpm}, "
            f"pos={self._state.position_mm:.1f}mm)"
        )

    # -------------------------------------------------------------------------
    # Context manager support
    # -------------------------------------------------------------------------
    def __enter__(self) -> "DryRunActuator":
        self._ensure_open("__enter__")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "DryRunActuatorCommand",
    "DryRunActuatorState",
    "DryRunActuator",
    "wrap_int32",
]
