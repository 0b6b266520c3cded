# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/__init__.py
-------------------------------------
Package root exports for `swd_diff_drive`.

This file provides:
- package version helpers
- the controller entry points (`build_drive_controller`, `DriveController`)

Design notes
------------
- Keep imports lightweight: no rclpy here. ROS glue lives in
  `swd_diff_drive.ros` and `swd_diff_drive.nodes`.
"""

from __future__ import annotations

from .version import (
    __version__,
    VERSION,
    get_version,
    get_package_version_info,
)
from .constants import PACKAGE_NAME, NODE_NAME_DIFF_DRIVE
from .exceptions import (
    SwdDriveException,
    ConfigurationError,
    ActuatorInitError,
    DeviceCommError,
)
from .drive_controller import (
    ControllerBuildResult,
    ControllerOutputs,
    DriveController,
    build_drive_controller,
)

__all__ = [
    "__version__",
    "VERSION",
    "get_version",
    "get_package_version_info",
    "PACKAGE_NAME",
    "NODE_NAME_DIFF_DRIVE",
    "SwdDriveException",
    "ConfigurationError",
    "ActuatorInitError",
    "DeviceCommError",
    "ControllerBuildResult",
    "ControllerOutputs",
    "DriveController",
    "build_drive_controller",
]
