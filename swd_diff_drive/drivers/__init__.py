# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/drivers/__init__.py
---------------------------------------------
Wheel actuator interface, dry-run backend and factory.

Example
-------
    from swd_diff_drive.drivers import DryRunActuator, PowerState, SafetyFunctionId
"""

from __future__ import annotations

from .actuator import Actuator, PowerState, SafetyFunctionId
from .dryrun_actuator import DryRunActuator, DryRunActuatorCommand, wrap_int32
from .actuator_factory import (
    BACKEND_DRYRUN,
    BACKEND_PLUGIN,
    SUPPORTED_BACKENDS,
    create_actuator,
    create_wheel_actuators,
    load_wheel_config,
)

__all__ = [
    "Actuator",
    "PowerState",
    "SafetyFunctionId",
    "DryRunActuator",
    "DryRunActuatorCommand",
    "wrap_int32",
    "BACKEND_DRYRUN",
    "BACKEND_PLUGIN",
    "SUPPORTED_BACKENDS",
    "create_actuator",
    "create_wheel_actuators",
    "load_wheel_config",
]
