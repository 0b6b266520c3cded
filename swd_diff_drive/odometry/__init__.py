# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/odometry/__init__.py
----------------------------------------------
Wheel odometry: math helpers and the dead-reckoning integrator.
"""

from __future__ import annotations

from .odom_math import (
    Pose2D,
    Twist2D,
    int32_delta,
    quat_xyzw_to_yaw,
    wrap_to_pi,
    yaw_to_quat_xyzw,
)
from .integrator import OdometryIntegrator, OdometrySample

__all__ = [
    "Pose2D",
    "Twist2D",
    "int32_delta",
    "quat_xyzw_to_yaw",
    "wrap_to_pi",
    "yaw_to_quat_xyzw",
    "OdometryIntegrator",
    "OdometrySample",
]
