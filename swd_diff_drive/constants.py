#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/constants.py
--------------------------------------
Centralized defaults for the differential-drive controller.

Single source for:
- parameter defaults (rates, watchdog, frames, control mode)
- fixed supervisory periods (power stage, safety functions)
- topic names used by the controller node and the smoke-test CLI

No ROS imports here.
"""

from __future__ import annotations

from typing import Final


# =============================================================================
# Identity
# =============================================================================
PACKAGE_NAME: Final[str] = "swd_diff_drive"
NODE_NAME_DIFF_DRIVE: Final[str] = "diff_drive_controller"


# =============================================================================
# Parameter defaults
# =============================================================================
DEFAULT_PUB_FREQ_HZ: Final[int] = 50
DEFAULT_WATCHDOG_RECEIVE_MS: Final[int] = 1000
DEFAULT_BASE_FRAME: Final[str] = "base_link"
DEFAULT_ODOM_FRAME: Final[str] = "odom"
DEFAULT_CONTROL_MODE: Final[str] = "Twist"
DEFAULT_REFERENCE_WHEEL: Final[str] = "Right"

# 0.0 means "no cap"
DEFAULT_WHEEL_MAX_SPEED_RPM: Final[float] = 0.0
DEFAULT_WHEEL_SAFETY_LIMITED_SPEED_RPM: Final[float] = 0.0
DEFAULT_HAVE_BACKWARD_SLS: Final[bool] = False

DEFAULT_PUBLISH_ODOM: Final[bool] = True
DEFAULT_PUBLISH_TF: Final[bool] = True
DEFAULT_PUBLISH_SAFETY_FUNCTIONS: Final[bool] = True

# 0 disables counter-reset detection
DEFAULT_ODOM_MAX_WHEEL_JUMP_MM: Final[int] = 10_000

DEFAULT_ACTUATOR_BACKEND: Final[str] = "dryrun"


# =============================================================================
# Fixed supervisory periods
# =============================================================================
POWER_STATE_PERIOD_S: Final[float] = 1.0
SAFETY_MONITOR_PERIOD_S: Final[float] = 1.0 / 5.0


# =============================================================================
# Topics (relative names, resolved in the node namespace)
# =============================================================================
TOPIC_CMD_VEL: Final[str] = "cmd_vel"
TOPIC_SET_SPEED: Final[str] = "set_speed"
TOPIC_SOFT_BRAKE: Final[str] = "soft_brake"
TOPIC_ODOM: Final[str] = "odom"
TOPIC_SAFETY: Final[str] = "safety"

QOS_DEPTH_COMMAND: Final[int] = 5
QOS_DEPTH_OUTPUT: Final[int] = 5


# =============================================================================
# Soft brake text protocol
# =============================================================================
SOFT_BRAKE_RELEASE_TEXT: Final[str] = "disable"
SOFT_BRAKE_ENGAGE_TEXT: Final[str] = "enable"


__all__ = [
    "PACKAGE_NAME",
    "NODE_NAME_DIFF_DRIVE",
    "DEFAULT_PUB_FREQ_HZ",
    "DEFAULT_WATCHDOG_RECEIVE_MS",
    "DEFAULT_BASE_FRAME",
    "DEFAULT_ODOM_FRAME",
    "DEFAULT_CONTROL_MODE",
    "DEFAULT_REFERENCE_WHEEL",
    "DEFAULT_WHEEL_MAX_SPEED_RPM",
    "DEFAULT_WHEEL_SAFETY_LIMITED_SPEED_RPM",
    "DEFAULT_HAVE_BACKWARD_SLS",
    "DEFAULT_PUBLISH_ODOM",
    "DEFAULT_PUBLISH_TF",
    "DEFAULT_PUBLISH_SAFETY_FUNCTIONS",
    "DEFAULT_ODOM_MAX_WHEEL_JUMP_MM",
    "DEFAULT_ACTUATOR_BACKEND",
    "POWER_STATE_PERIOD_S",
    "SAFETY_MONITOR_PERIOD_S",
    "TOPIC_CMD_VEL",
    "TOPIC_SET_SPEED",
    "TOPIC_SOFT_BRAKE",
    "TOPIC_ODOM",
    "TOPIC_SAFETY",
    "QOS_DEPTH_COMMAND",
    "QOS_DEPTH_OUTPUT",
    "SOFT_BRAKE_RELEASE_TEXT",
    "SOFT_BRAKE_ENGAGE_TEXT",
]
