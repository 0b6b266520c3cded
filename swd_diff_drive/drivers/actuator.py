#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/drivers/actuator.py
---------------------------------------------
Per-wheel actuator interface used by the drive controller.

One instance per wheel, exclusively owned by the controller for its lifetime.
Two conforming implementations ship with the package:
- `DryRunActuator` (software-only simulator / test double)
- any "plugin" class named in the wheel config (real device stack)

Error contract
--------------
Every method reports a device failure by raising a `DeviceCommError`
subclass (`PositionReadError`, `SetpointWriteError`, ...). `init()` raises
`ActuatorInitError`. Nothing else escapes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping


# =============================================================================
# Enums
# =============================================================================
class PowerState(str, Enum):
    """Power-stage (PDS) state machine, CiA-402 naming."""
    NOT_READY_TO_SWITCH_ON = "NOT_READY_TO_SWITCH_ON"
    SWITCH_ON_DISABLED = "SWITCH_ON_DISABLED"
    READY_TO_SWITCH_ON = "READY_TO_SWITCH_ON"
    SWITCHED_ON = "SWITCHED_ON"
    OPERATION_ENABLED = "OPERATION_ENABLED"
    QUICK_STOP_ACTIVE = "QUICK_STOP_ACTIVE"
    FAULT_REACTION_ACTIVE = "FAULT_REACTION_ACTIVE"
    FAULT = "FAULT"

    @property
    def is_operational(self) -> bool:
        return self is PowerState.OPERATION_ENABLED


class SafetyFunctionId(str, Enum):
    """Safety functions readable from a wheel actuator."""
    STO = "STO"
    SDIP_1 = "SDIP_1"
    SDIN_1 = "SDIN_1"
    SLS_1 = "SLS_1"


# =============================================================================
# Interface
# =============================================================================
class Actuator(ABC):
    """
    Capability of one wheel actuator.

    Units
    - position: cumulative wheel travel, int32 millimeters
    - velocity: motor-shaft speed, integer rpm (after gear reduction)
    """

    name: str = "actuator"

    @abstractmethod
    def init(self, config: Mapping[str, Any]) -> None:
        """Open transport / dispatcher. Raises ActuatorInitError."""

    @abstractmethod
    def get_position_value(self) -> int:
        ...

    @abstractmethod
    def set_target_velocity(self, rpm: int) -> None:
        ...

    @abstractmethod
    def set_halt(self, enable: bool) -> None:
        """True engages the soft brake, False releases it."""

    @abstractmethod
    def get_safety_function_state(self, function_id: SafetyFunctionId) -> bool:
        ...

    @abstractmethod
    def get_power_stage_state(self) -> PowerState:
        ...

    @abstractmethod
    def request_operation_enabled(self) -> None:
        """Fire-and-forget request to enter OPERATION_ENABLED."""

    def close(self) -> None:
        """Release the device handle (idempotent). Default: nothing to release."""
        return None


__all__ = [
    "PowerState",
    "SafetyFunctionId",
    "Actuator",
]
