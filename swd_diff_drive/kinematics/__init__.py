# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/kinematics/__init__.py
------------------------------------------------
Differential-drive kinematics (pure functions, no ROS).
"""

from __future__ import annotations

from .diff_drive import (
    KinematicsError,
    command_to_wheel_speeds,
    effective_speed_cap_rpm,
    is_backward_motion,
    limit_wheel_speeds,
    twist_to_wheel_speeds,
    wheel_rad_s_to_rpm,
    wheel_rpm_to_rad_s,
    wheel_speed_to_setpoint,
    wheel_speeds_to_setpoints,
)

__all__ = [
    "KinematicsError",
    "command_to_wheel_speeds",
    "effective_speed_cap_rpm",
    "is_backward_motion",
    "limit_wheel_speeds",
    "twist_to_wheel_speeds",
    "wheel_rad_s_to_rpm",
    "wheel_rpm_to_rad_s",
    "wheel_speed_to_setpoint",
    "wheel_speeds_to_setpoints",
]
