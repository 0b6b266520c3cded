#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/kinematics/diff_drive.py
--------------------------------------------------
Differential-drive inverse kinematics and setpoint conversion.

Conventions
- Positive linear = forward, positive angular = counter-clockwise (REP-103)
- Wheel speeds are wheel angular speeds in rad/s, positive = forward travel
- Actuator setpoints are motor-shaft rpm (wheel speed x gear reduction),
  truncated toward zero

Speed limiting scales both wheels by the same factor so the commanded path
curvature is preserved.

Design notes
- Math only (no ROS imports, no hardware imports)
- Stateless; all inputs passed explicitly
"""

from __future__ import annotations

import math
from typing import Tuple

from swd_diff_drive.exceptions import KinematicsError
from swd_diff_drive.models.velocity_command import (
    TwistCommand,
    VelocityCommand,
    WheelSetpoints,
    WheelSpeedCommand,
)


_RAD_S_TO_RPM = 60.0 / (2.0 * math.pi)

# Actuator target velocity is an int32 register.
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


# =============================================================================
# Validation
# =============================================================================
def _require_finite(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise KinematicsError(f"{name} must be finite, got {value!r}")
    return v


def _require_positive(name: str, value: float) -> float:
    v = _require_finite(name, value)
    if v <= 0.0:
        raise KinematicsError(f"{name} must be > 0, got {value!r}")
    return v


# =============================================================================
# Conversions
# =============================================================================
def twist_to_wheel_speeds(
    linear_mps: float,
    angular_rad_s: float,
    *,
    baseline_m: float,
    left_diameter_m: float,
    right_diameter_m: float,
) -> WheelSpeedCommand:
    """
    left  = (2v - w*b) / d_left
    right = (2v + w*b) / d_right
    """
    v = _require_finite("linear_mps", linear_mps)
    w = _require_finite("angular_rad_s", angular_rad_s)
    b = _require_positive("baseline_m", baseline_m)
    d_l = _require_positive("left_diameter_m", left_diameter_m)
    d_r = _require_positive("right_diameter_m", right_diameter_m)

    return WheelSpeedCommand(
        left_rad_s=_require_finite("left_rad_s", (2.0 * v - w * b) / d_l),
        right_rad_s=_require_finite("right_rad_s", (2.0 * v + w * b) / d_r),
    )


def wheel_speed_to_setpoint(wheel_speed_rad_s: float, gear_reduction: float) -> int:
    """Wheel rad/s -> motor rpm, rounded toward zero; rejects values outside int32."""
    speed = _require_finite("wheel_speed_rad_s", wheel_speed_rad_s)
    reduction = _require_positive("gear_reduction", gear_reduction)
    rpm = _require_finite("motor_rpm", speed * reduction * _RAD_S_TO_RPM)
    setpoint = int(rpm)
    if not INT32_MIN <= setpoint <= INT32_MAX:
        raise KinematicsError(f"motor setpoint {setpoint} rpm is outside the int32 range")
    return setpoint


def wheel_rpm_to_rad_s(rpm: float) -> float:
    return float(rpm) / _RAD_S_TO_RPM


def wheel_rad_s_to_rpm(speed_rad_s: float) -> float:
    return float(speed_rad_s) * _RAD_S_TO_RPM


def command_to_wheel_speeds(
    cmd: VelocityCommand,
    *,
    baseline_m: float,
    left_diameter_m: float,
    right_diameter_m: float,
) -> WheelSpeedCommand:
    """
    Twist commands go through the inverse kinematics; per-wheel commands are
    passed through unchanged.
    """
    if isinstance(cmd, TwistCommand):
        return twist_to_wheel_speeds(
            cmd.linear_mps,
            cmd.angular_rad_s,
            baseline_m=baseline_m,
            left_diameter_m=left_diameter_m,
            right_diameter_m=right_diameter_m,
        )
    if isinstance(cmd, WheelSpeedCommand):
        return WheelSpeedCommand(
            left_rad_s=_require_finite("left_rad_s", cmd.left_rad_s),
            right_rad_s=_require_finite("right_rad_s", cmd.right_rad_s),
        )
    raise KinematicsError(f"Unsupported velocity command type: {type(cmd).__name__}")


def wheel_speeds_to_setpoints(
    speeds: WheelSpeedCommand,
    *,
    left_gear_reduction: float,
    right_gear_reduction: float,
) -> WheelSetpoints:
    """Each wheel uses its own reduction."""
    return WheelSetpoints(
        left=wheel_speed_to_setpoint(speeds.left_rad_s, left_gear_reduction),
        right=wheel_speed_to_setpoint(speeds.right_rad_s, right_gear_reduction),
    )


# =============================================================================
# Speed limiting
# =============================================================================
def is_backward_motion(speeds: WheelSpeedCommand) -> bool:
    """True when the wheel-center speed is negative."""
    return (speeds.left_rad_s + speeds.right_rad_s) < 0.0


def effective_speed_cap_rpm(
    *,
    max_speed_rpm: float,
    safety_limited_speed_rpm: float,
    safe_limit_speed_active: bool,
    have_backward_sls: bool,
    backward: bool,
) -> float:
    """
    Tightest applicable wheel-speed cap in wheel rpm (0.0 = no cap).

    - `max_speed_rpm` always applies
    - `safety_limited_speed_rpm` applies while SLS is reported, and for
      backward motion when the vehicle has a backward SLS zone
    """
    caps = []
    if max_speed_rpm > 0.0:
        caps.append(float(max_speed_rpm))
    if safety_limited_speed_rpm > 0.0 and (
        safe_limit_speed_active or (have_backward_sls and backward)
    ):
        caps.append(float(safety_limited_speed_rpm))
    return min(caps) if caps else 0.0


def limit_wheel_speeds(
    speeds: WheelSpeedCommand,
    max_wheel_rpm: float,
) -> Tuple[WheelSpeedCommand, bool]:
    """
    Scale both wheels proportionally so neither exceeds `max_wheel_rpm`.

    Returns
    -------
    (limited_speeds, was_limited)
    """
    if max_wheel_rpm <= 0.0:
        return speeds, False

    cap_rad_s = wheel_rpm_to_rad_s(max_wheel_rpm)
    peak = max(abs(speeds.left_rad_s), abs(speeds.right_rad_s))
    if peak <= cap_rad_s:
        return speeds, False

    k = cap_rad_s / peak
    return (
        WheelSpeedCommand(left_rad_s=speeds.left_rad_s * k, right_rad_s=speeds.right_rad_s * k),
        True,
    )


__all__ = [
    "INT32_MIN",
    "INT32_MAX",
    "KinematicsError",
    "twist_to_wheel_speeds",
    "wheel_speed_to_setpoint",
    "wheel_rpm_to_rad_s",
    "wheel_rad_s_to_rpm",
    "command_to_wheel_speeds",
    "wheel_speeds_to_setpoints",
    "is_backward_motion",
    "effective_speed_cap_rpm",
    "limit_wheel_speeds",
]
