#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/exceptions.py
---------------------------------------
Exception hierarchy for the differential-drive controller and its actuators.

Four families
- ConfigurationError: invalid/missing controller parameters (fatal at startup)
- ActuatorInitError: wheel config load / actuator init failure (fatal at startup)
- KinematicsError: a velocity command that cannot become wheel setpoints
  (non-fatal, the command is rejected)
- DeviceCommError: readback or command failure in steady state (non-fatal,
  bounded to the current tick)

Exceptions carry optional structured context (wheel, operation, value) so log
lines stay greppable on the real robot.

No ROS dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


# =============================================================================
# Base exception + structured context
# =============================================================================
@dataclass(frozen=True)
class ActuatorErrorContext:
    """
    Optional structured context attached to controller/actuator exceptions.

    Common fields (examples):
    - wheel="left"
    - operation="get_position_value"
    - parameter="baseline_m"
    - value=0.0
    - error_code=17   (vendor error code reported by the device stack)
    """
    wheel: Optional[str] = None
    operation: Optional[str] = None
    parameter: Optional[str] = None
    value: Optional[int | float | str] = None
    error_code: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Compact dict, excluding None values."""
        out: Dict[str, Any] = {}
        for key in ("wheel", "operation", "parameter", "value", "error_code"):
            v = getattr(self, key)
            if v is not None:
                out[key] = v
        if self.extra:
            out["extra"] = dict(self.extra)
        return out

    def format_compact(self) -> str:
        parts = []
        if self.wheel is not None:
            parts.append(f"wheel={self.wheel}")
        if self.operation is not None:
            parts.append(f"op={self.operation}")
        if self.parameter is not None:
            parts.append(f"param={self.parameter}")
        if self.value is not None:
            parts.append(f"value={self.value}")
        if self.error_code is not None:
            parts.append(f"err={self.error_code}")
        if self.extra:
            parts.append(f"extra={self.extra}")
        return ", ".join(parts)


class SwdDriveException(RuntimeError):
    """
    Base exception for all controller / actuator failures.

    Supports optional structured context and exception chaining.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ActuatorErrorContext] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.message = str(message)
        self.context = context
        self.cause = cause
        super().__init__(self.__str__())

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.context is None:
            return self.message
        ctx = self.context.format_compact()
        if not ctx:
            return self.message
        return f"{self.message} [{ctx}]"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "message": self.message,
        }
        if self.context is not None:
            out["context"] = self.context.to_dict()
        if self.cause is not None:
            out["cause_type"] = self.cause.__class__.__name__
            out["cause_message"] = str(self.cause)
        return out


# =============================================================================
# Startup errors (fatal)
# =============================================================================
class ConfigurationError(SwdDriveException):
    """
    Missing or invalid controller parameter (baseline, rate, config file path...).
    """


class ActuatorInitError(SwdDriveException):
    """
    Wheel config load, transport init or dispatcher init failed.
    """


class UnsupportedActuatorBackendError(ActuatorInitError):
    """
    Requested actuator backend is unknown or its class cannot be imported.
    """


# =============================================================================
# Command conversion errors (non-fatal)
# =============================================================================
class KinematicsError(SwdDriveException, ValueError):
    """
    Velocity command cannot be turned into wheel setpoints (non-finite
    input, bad geometry, setpoint outside the int32 actuator range).
    """


# =============================================================================
# Steady-state device errors (non-fatal)
# =============================================================================
class DeviceCommError(SwdDriveException):
    """
    Base class for readback / command failures during operation.
    """


class PositionReadError(DeviceCommError):
    """Position counter readback failed."""


class SetpointWriteError(DeviceCommError):
    """Target velocity write failed."""


class HaltCommandError(DeviceCommError):
    """Halt / release request failed."""


class SafetyReadError(DeviceCommError):
    """Safety-function state readback failed."""


class PowerStateError(DeviceCommError):
    """Power-stage state readback or transition request failed."""


class ActuatorClosedError(DeviceCommError):
    """Call made on an actuator handle that has already been released."""


# =============================================================================
# Helpers
# =============================================================================
def wrap_device_error(
    exc: BaseException,
    *,
    message: str,
    wheel: Optional[str] = None,
    operation: Optional[str] = None,
    value: Optional[int | float | str] = None,
    error_code: Optional[int] = None,
    error_cls: type = DeviceCommError,
) -> DeviceCommError:
    """
    Wrap a low-level exception (vendor stack, transport) into a DeviceCommError.
    """
    ctx = ActuatorErrorContext(
        wheel=wheel,
        operation=operation,
        value=value,
        error_code=error_code,
    )
    return error_cls(message, context=ctx, cause=exc)


def config_error(message: str, *, parameter: str, value: Any = None) -> ConfigurationError:
    """Build a ConfigurationError naming the offending parameter."""
    shown = value if value is None or isinstance(value, (int, float, str)) else repr(value)
    return ConfigurationError(
        message,
        context=ActuatorErrorContext(parameter=parameter, value=shown),
    )


__all__ = [
    "ActuatorErrorContext",
    "SwdDriveException",
    "ConfigurationError",
    "ActuatorInitError",
    "UnsupportedActuatorBackendError",
    "KinematicsError",
    "DeviceCommError",
    "PositionReadError",
    "SetpointWriteError",
    "HaltCommandError",
    "SafetyReadError",
    "PowerStateError",
    "ActuatorClosedError",
    "wrap_device_error",
    "config_error",
]
