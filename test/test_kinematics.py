# -*- coding: utf-8 -*-

import math

import pytest

from swd_diff_drive.exceptions import SwdDriveException
from swd_diff_drive.kinematics.diff_drive import (
    INT32_MAX,
    INT32_MIN,
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
from swd_diff_drive.models.velocity_command import TwistCommand, WheelSpeedCommand

GEOMETRY = dict(baseline_m=0.485, left_diameter_m=0.2, right_diameter_m=0.2)


def test_straight_line_gives_equal_wheel_speeds():
    speeds = twist_to_wheel_speeds(1.0, 0.0, **GEOMETRY)
    assert speeds.left_rad_s == pytest.approx(10.0)
    assert speeds.right_rad_s == pytest.approx(10.0)


def test_pure_rotation_gives_opposite_wheel_speeds():
    speeds = twist_to_wheel_speeds(0.0, 1.0, **GEOMETRY)
    assert speeds.left_rad_s == pytest.approx(-0.485 / 0.2)
    assert speeds.right_rad_s == pytest.approx(0.485 / 0.2)


def test_unequal_diameters_use_their_own_wheel():
    speeds = twist_to_wheel_speeds(0.5, 0.0, baseline_m=0.5, left_diameter_m=0.2, right_diameter_m=0.25)
    assert speeds.left_rad_s == pytest.approx(5.0)
    assert speeds.right_rad_s == pytest.approx(4.0)


def test_setpoint_truncates_toward_zero():
    # 10 rad/s * 14 * 60 / 2pi = 1336.9 rpm
    assert wheel_speed_to_setpoint(10.0, 14.0) == 1336
    assert wheel_speed_to_setpoint(-10.0, 14.0) == -1336
    assert wheel_speed_to_setpoint(0.0, 14.0) == 0


def test_each_wheel_uses_its_own_reduction():
    setpoints = wheel_speeds_to_setpoints(
        WheelSpeedCommand(10.0, 10.0),
        left_gear_reduction=14.0,
        right_gear_reduction=20.0,
    )
    assert setpoints.left == 1336
    assert setpoints.right == int(10.0 * 20.0 * 60.0 / (2.0 * math.pi))


def test_rpm_conversions_are_inverse():
    assert wheel_rpm_to_rad_s(wheel_rad_s_to_rpm(3.0)) == pytest.approx(3.0)
    assert wheel_rad_s_to_rpm(2.0 * math.pi) == pytest.approx(60.0)


def test_wheel_speed_command_passes_through():
    speeds = command_to_wheel_speeds(WheelSpeedCommand(1.5, -2.0), **GEOMETRY)
    assert speeds == WheelSpeedCommand(1.5, -2.0)


@pytest.mark.parametrize(
    "cmd",
    [
        TwistCommand(float("nan"), 0.0),
        TwistCommand(0.0, float("inf")),
        WheelSpeedCommand(float("nan"), 1.0),
    ],
)
def test_non_finite_commands_rejected(cmd):
    with pytest.raises(KinematicsError):
        command_to_wheel_speeds(cmd, **GEOMETRY)


def test_bad_geometry_rejected():
    with pytest.raises(KinematicsError):
        twist_to_wheel_speeds(1.0, 0.0, baseline_m=0.0, left_diameter_m=0.2, right_diameter_m=0.2)
    with pytest.raises(KinematicsError):
        wheel_speed_to_setpoint(1.0, 0.0)


def test_backward_motion_uses_wheel_center_speed():
    assert is_backward_motion(WheelSpeedCommand(-1.0, -1.0))
    assert not is_backward_motion(WheelSpeedCommand(-1.0, 1.0))
    assert not is_backward_motion(WheelSpeedCommand(1.0, 0.5))


def test_speed_cap_selection():
    base = dict(max_speed_rpm=100.0, safety_limited_speed_rpm=30.0, have_backward_sls=False, backward=False)
    assert effective_speed_cap_rpm(safe_limit_speed_active=False, **base) == 100.0
    assert effective_speed_cap_rpm(safe_limit_speed_active=True, **base) == 30.0

    backward = dict(base, have_backward_sls=True, backward=True)
    assert effective_speed_cap_rpm(safe_limit_speed_active=False, **backward) == 30.0

    none = dict(max_speed_rpm=0.0, safety_limited_speed_rpm=0.0, have_backward_sls=True, backward=True)
    assert effective_speed_cap_rpm(safe_limit_speed_active=True, **none) == 0.0


def test_limit_scales_both_wheels_proportionally():
    cap_rpm = 30.0
    speeds, limited = limit_wheel_speeds(WheelSpeedCommand(10.0, 5.0), cap_rpm)

    assert limited
    assert speeds.left_rad_s == pytest.approx(wheel_rpm_to_rad_s(cap_rpm))
    assert speeds.left_rad_s / speeds.right_rad_s == pytest.approx(2.0)


def test_limit_leaves_slow_commands_alone():
    cmd = WheelSpeedCommand(1.0, -1.0)
    assert limit_wheel_speeds(cmd, 30.0) == (cmd, False)
    assert limit_wheel_speeds(WheelSpeedCommand(100.0, 100.0), 0.0)[1] is False


def test_setpoint_must_fit_int32():
    top = wheel_speed_to_setpoint(wheel_rpm_to_rad_s(INT32_MAX), 1.0)
    assert top in (INT32_MAX - 1, INT32_MAX)

    with pytest.raises(KinematicsError):
        wheel_speed_to_setpoint(wheel_rpm_to_rad_s(INT32_MAX + 10), 1.0)
    with pytest.raises(KinematicsError):
        wheel_speed_to_setpoint(wheel_rpm_to_rad_s(INT32_MIN - 10), 1.0)
    with pytest.raises(KinematicsError):
        wheel_speeds_to_setpoints(
            WheelSpeedCommand(1e9, 0.0), left_gear_reduction=14.0, right_gear_reduction=14.0
        )


def test_finite_input_that_overflows_is_rejected():
    with pytest.raises(KinematicsError):
        command_to_wheel_speeds(TwistCommand(1e308, 0.0), **GEOMETRY)
    with pytest.raises(KinematicsError):
        wheel_speed_to_setpoint(1e307, 100.0)


def test_kinematics_error_is_a_package_error():
    assert issubclass(KinematicsError, SwdDriveException)
    assert issubclass(KinematicsError, ValueError)
