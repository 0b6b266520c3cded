#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/models
--------------------------------
Plain value types shared by the controller components (no ROS imports).
"""

from __future__ import annotations

from .wheel_config import WheelConfig
from .controller_config import ControlMode, ControllerConfig, ReferenceWheel
from .velocity_command import (
    TwistCommand,
    VelocityCommand,
    WheelSetpoints,
    WheelSpeedCommand,
)
from .safety_state import SafetyState

__all__ = [
    "WheelConfig",
    "ControlMode",
    "ControllerConfig",
    "ReferenceWheel",
    "TwistCommand",
    "VelocityCommand",
    "WheelSetpoints",
    "WheelSpeedCommand",
    "SafetyState",
]
