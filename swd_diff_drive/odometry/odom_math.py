#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/odometry/odom_math.py
-----------------------------------------------
Odometry math utilities.

ROS-agnostic (no rclpy imports) so it can be used by the integrator, the ROS
message adapters and unit tests alike.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


_INT32_SPAN = 1 << 32
_INT32_HALF = 1 << 31


# ---------------------------
# Basic helpers
# ---------------------------

def wrap_to_pi(angle_rad: float) -> float:
    """Wrap angle to (-pi, pi]."""
    a = (angle_rad + math.pi) % (2.0 * math.pi) - math.pi
    # Keep +pi instead of -pi
    if a <= -math.pi:
        a += 2.0 * math.pi
    return a


def int32_delta(new: int, prev: int) -> int:
    """
    Signed difference of two int32 counter readings, across a wrap.

    int32_delta(-2147483646, 2147483646) == 4
    """
    return ((int(new) - int(prev) + _INT32_HALF) % _INT32_SPAN) - _INT32_HALF


# ---------------------------
# Core data structures
# ---------------------------

@dataclass(frozen=True)
class Pose2D:
    """2D pose in odom frame."""
    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0  # rad, (-pi, pi]


@dataclass(frozen=True)
class Twist2D:
    """2D body twist (base frame convention)."""
    linear: float = 0.0   # m/s (forward)
    angular: float = 0.0  # rad/s (yaw rate)


# ---------------------------
# Quaternion helpers
# ---------------------------

def yaw_to_quat_xyzw(yaw_rad: float) -> Tuple[float, float, float, float]:
    """
    Convert yaw (rad) to quaternion (x,y,z,w) assuming roll=pitch=0.
    """
    half = 0.5 * yaw_rad
    return (0.0, 0.0, math.sin(half), math.cos(half))


def quat_xyzw_to_yaw(qx: float, qy: float, qz: float, qw: float) -> float:
    siny_cosp = 2.0 * (qw * qz + qx * qy)
    cosy_cosp = 1.0 - 2.0 * (qy * qy + qz * qz)
    return wrap_to_pi(math.atan2(siny_cosp, cosy_cosp))


__all__ = [
    "wrap_to_pi",
    "int32_delta",
    "Pose2D",
    "Twist2D",
    "yaw_to_quat_xyzw",
    "quat_xyzw_to_yaw",
]
