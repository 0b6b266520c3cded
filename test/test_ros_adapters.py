# -*- coding: utf-8 -*-

import json
import math

import pytest

pytest.importorskip("geometry_msgs.msg")
pytest.importorskip("nav_msgs.msg")

from builtin_interfaces.msg import Time  # noqa: E402
from geometry_msgs.msg import Point  # noqa: E402

from swd_diff_drive.models.safety_state import SafetyState  # noqa: E402
from swd_diff_drive.odometry.integrator import OdometrySample  # noqa: E402
from swd_diff_drive.odometry.odom_math import Pose2D, Twist2D  # noqa: E402
from swd_diff_drive.ros.adapters import (  # noqa: E402
    json_str_to_safety_state,
    make_twist_msg,
    odometry_sample_to_msg,
    odometry_sample_to_transform,
    point_msg_to_wheel_speeds,
    safe_json_loads,
    safety_state_to_msg,
    twist_msg_to_command,
)


def _stamp():
    return Time(sec=3, nanosec=0)


def _sample():
    return OdometrySample(
        pose=Pose2D(1.0, 2.0, math.pi / 2),
        twist=Twist2D(0.5, 0.1),
        stamp_s=3.0,
        frame_id="odom",
        child_frame_id="base_link",
    )


def test_twist_msg_keeps_planar_axes_only():
    msg = make_twist_msg(0.3, -0.2)
    msg.linear.y = 9.0
    cmd = twist_msg_to_command(msg)
    assert cmd.linear_mps == pytest.approx(0.3)
    assert cmd.angular_rad_s == pytest.approx(-0.2)


def test_point_msg_is_left_right():
    msg = Point()
    msg.x, msg.y, msg.z = 1.0, 2.0, 7.0
    speeds = point_msg_to_wheel_speeds(msg)
    assert (speeds.left_rad_s, speeds.right_rad_s) == (1.0, 2.0)


def test_odometry_msg():
    msg = odometry_sample_to_msg(_sample(), stamp=_stamp())
    assert msg.header.frame_id == "odom"
    assert msg.child_frame_id == "base_link"
    assert msg.pose.pose.position.x == 1.0
    assert msg.pose.pose.orientation.z == pytest.approx(math.sin(math.pi / 4))
    assert msg.twist.twist.linear.x == 0.5
    assert msg.twist.twist.angular.z == 0.1


def test_transform_matches_pose():
    t = odometry_sample_to_transform(_sample(), stamp=_stamp())
    assert t.header.frame_id == "odom"
    assert t.child_frame_id == "base_link"
    assert t.transform.translation.y == 2.0
    assert t.transform.rotation.w == pytest.approx(math.cos(math.pi / 4))


def test_safety_round_trip_through_string():
    state = SafetyState(safe_limit_speed=True, stamp_s=1.25)
    msg = safety_state_to_msg(state)
    assert json.loads(msg.data)["safe_limit_speed"] is True
    assert json_str_to_safety_state(msg.data) == state
    assert json_str_to_safety_state("not json") is None
    assert safe_json_loads("[1, 2]") is None