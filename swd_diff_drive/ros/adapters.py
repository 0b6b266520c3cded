#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/ros/adapters.py
-----------------------------------------
ROS 2 Jazzy adapter helpers for `swd_diff_drive`.

Small conversion helpers between:
- internal `swd_diff_drive` dataclasses (commands, odometry, safety)
- ROS messages (geometry_msgs / nav_msgs / std_msgs)
- compact JSON payloads on std_msgs/String

Design principles
-----------------
- No hardware access here
- No ROS node initialization here
- JSON outputs are compact and dashboard-friendly
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from geometry_msgs.msg import Point, Quaternion, TransformStamped, Twist
from nav_msgs.msg import Odometry
from std_msgs.msg import String

from swd_diff_drive.models.safety_state import SafetyState
from swd_diff_drive.models.velocity_command import TwistCommand, WheelSpeedCommand
from swd_diff_drive.odometry.integrator import OdometrySample
from swd_diff_drive.odometry.odom_math import yaw_to_quat_xyzw


# =============================================================================
# JSON helpers
# =============================================================================
def compact_json(data: Dict[str, Any]) -> str:
    """
    Compact JSON (stable key order) for std_msgs/String topics.
    """
    return json.dumps(data, separators=(",", ":"), sort_keys=True)


def safe_json_loads(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse JSON safely. Returns dict or None.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


# =============================================================================
# Command ingress
# =============================================================================
def twist_msg_to_command(msg: Twist) -> TwistCommand:
    """
    geometry_msgs/Twist -> TwistCommand (linear.x, angular.z; other axes ignored).
    """
    return TwistCommand(
        linear_mps=float(msg.linear.x),
        angular_rad_s=float(msg.angular.z),
    )


def point_msg_to_wheel_speeds(msg: Point) -> WheelSpeedCommand:
    """
    geometry_msgs/Point -> WheelSpeedCommand (x = left, y = right, rad/s).
    """
    return WheelSpeedCommand(left_rad_s=float(msg.x), right_rad_s=float(msg.y))


def wheel_speeds_to_point_msg(left_rad_s: float, right_rad_s: float) -> Point:
    msg = Point()
    msg.x = float(left_rad_s)
    msg.y = float(right_rad_s)
    msg.z = 0.0
    return msg


def make_twist_msg(linear_mps: float, angular_rad_s: float) -> Twist:
    msg = Twist()
    msg.linear.x = float(linear_mps)
    msg.angular.z = float(angular_rad_s)
    return msg


def string_to_msg(text: str) -> String:
    msg = String()
    msg.data = str(text)
    return msg


# =============================================================================
# Odometry output
# =============================================================================
def yaw_to_quaternion_msg(yaw_rad: float) -> Quaternion:
    """Planar yaw -> quaternion."""
    qx, qy, qz, qw = yaw_to_quat_xyzw(yaw_rad)
    q = Quaternion()
    q.x = qx
    q.y = qy
    q.z = qz
    q.w = qw
    return q


def odometry_sample_to_msg(sample: OdometrySample, stamp: Any) -> Odometry:
    """
    OdometrySample -> nav_msgs/Odometry (pose + finite-difference twist).

    `stamp` is a builtin_interfaces/Time (e.g. `node.get_clock().now().to_msg()`).
    """
    msg = Odometry()
    msg.header.stamp = stamp
    msg.header.frame_id = sample.frame_id
    msg.child_frame_id = sample.child_frame_id

    msg.pose.pose.position.x = float(sample.pose.x)
    msg.pose.pose.position.y = float(sample.pose.y)
    msg.pose.pose.position.z = 0.0
    msg.pose.pose.orientation = yaw_to_quaternion_msg(sample.pose.theta)

    msg.twist.twist.linear.x = float(sample.twist.linear)
    msg.twist.twist.angular.z = float(sample.twist.angular)
    return msg


def odometry_sample_to_transform(sample: OdometrySample, stamp: Any) -> TransformStamped:
    """
    OdometrySample -> TransformStamped (odom_frame -> base_frame).
    """
    t = TransformStamped()
    t.header.stamp = stamp
    t.header.frame_id = sample.frame_id
    t.child_frame_id = sample.child_frame_id
    t.transform.translation.x = float(sample.pose.x)
    t.transform.translation.y = float(sample.pose.y)
    t.transform.translation.z = 0.0
    t.transform.rotation = yaw_to_quaternion_msg(sample.pose.theta)
    return t


# =============================================================================
# Safety output
# =============================================================================
def safety_state_to_msg(state: SafetyState) -> String:
    """
    SafetyState -> std_msgs/String carrying compact JSON, e.g.
    {"safe_direction_indication_pos":false,"safe_limit_speed":false,
     "safe_torque_off":true,"stamp_s":12.4}
    """
    return string_to_msg(state.to_json())


def json_str_to_safety_state(text: str) -> Optional[SafetyState]:
    data = safe_json_loads(text)
    if data is None:
        return None
    return SafetyState(
        safe_torque_off=bool(data.get("safe_torque_off", False)),
        safe_direction_indication_pos=bool(data.get("safe_direction_indication_pos", False)),
        safe_limit_speed=bool(data.get("safe_limit_speed", False)),
        stamp_s=float(data.get("stamp_s", 0.0)),
    )


__all__ = [
    "compact_json",
    "safe_json_loads",
    "twist_msg_to_command",
    "point_msg_to_wheel_speeds",
    "wheel_speeds_to_point_msg",
    "make_twist_msg",
    "string_to_msg",
    "yaw_to_quaternion_msg",
    "odometry_sample_to_msg",
    "odometry_sample_to_transform",
    "safety_state_to_msg",
    "json_str_to_safety_state",
]
