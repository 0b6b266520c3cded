#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/ros/params.py
---------------------------------------
ROS 2 parameter declaration and collection for the controller node.

The node declares every parameter from `CONTROLLER_PARAM_SPECS`, then
`collect_params(node)` reads them back into a plain dict that is handed to
`build_drive_controller(...)` (which owns all validation). Keeping the
validation on the ROS-free side means tests exercise exactly the same code.

Usage:
    declare_params(self, CONTROLLER_PARAM_SPECS)
    params = collect_params(self)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from swd_diff_drive import constants as C


# ---------------------------
# Types
# ---------------------------

ParamScalar = Union[bool, int, float, str]
ParamValue = Union[ParamScalar, Sequence[ParamScalar]]


@dataclass(frozen=True)
class ParamSpec:
    """
    Parameter declaration spec.

    name: parameter name
    default: default value
    description: shown via `ros2 param describe`
    dynamic_typing: accept any value type from YAML / CLI (numbers may be
        written as 1 or 1.0); ControllerConfig does the coercion
    """
    name: str
    default: ParamValue
    description: str = ""
    dynamic_typing: bool = False


CONTROLLER_PARAM_SPECS: Tuple[ParamSpec, ...] = (
    ParamSpec(
        "baseline_m",
        0.0,
        "Distance between the two wheel contact points (m), required > 0",
        dynamic_typing=True,
    ),
    ParamSpec("pub_freq_hz", C.DEFAULT_PUB_FREQ_HZ, "Odometry publish rate (Hz), > 0", dynamic_typing=True),
    ParamSpec(
        "watchdog_receive_ms",
        C.DEFAULT_WATCHDOG_RECEIVE_MS,
        "Command timeout (ms), 0 disables",
        dynamic_typing=True,
    ),
    ParamSpec("base_frame", "", f"Robot base frame id (empty: base_link alias, then '{C.DEFAULT_BASE_FRAME}')"),
    ParamSpec("base_link", "", "Legacy name of base_frame"),
    ParamSpec("odom_frame", C.DEFAULT_ODOM_FRAME, "Odometry frame id"),
    ParamSpec("control_mode", C.DEFAULT_CONTROL_MODE, "'Twist' (cmd_vel) or 'LeftRightSpeeds' (set_speed)"),
    ParamSpec("positive_polarity_wheel", "", f"'Right' or 'Left' (empty: ref_wheel, then '{C.DEFAULT_REFERENCE_WHEEL}')"),
    ParamSpec("ref_wheel", "", "Legacy name of positive_polarity_wheel"),
    ParamSpec("left_config_file", "", "Left wheel YAML config file, required"),
    ParamSpec("right_config_file", "", "Right wheel YAML config file, required"),
    ParamSpec(
        "wheel_max_speed_rpm",
        C.DEFAULT_WHEEL_MAX_SPEED_RPM,
        "Wheel speed cap (wheel rpm), 0 = none",
        dynamic_typing=True,
    ),
    ParamSpec(
        "wheel_safety_limited_speed_rpm",
        C.DEFAULT_WHEEL_SAFETY_LIMITED_SPEED_RPM,
        "Wheel speed cap while SLS is active (wheel rpm), 0 = none",
        dynamic_typing=True,
    ),
    ParamSpec("have_backward_sls", C.DEFAULT_HAVE_BACKWARD_SLS, "Apply the SLS cap to backward motion"),
    ParamSpec("publish_odom", C.DEFAULT_PUBLISH_ODOM, "Publish nav_msgs/Odometry"),
    ParamSpec("publish_tf", C.DEFAULT_PUBLISH_TF, "Broadcast odom_frame -> base_frame"),
    ParamSpec("publish_safety_functions", C.DEFAULT_PUBLISH_SAFETY_FUNCTIONS, "Publish the safety snapshot"),
    ParamSpec(
        "odom_max_wheel_jump_mm",
        C.DEFAULT_ODOM_MAX_WHEEL_JUMP_MM,
        "Per-tick wheel jump treated as a counter reset (mm), 0 disables",
        dynamic_typing=True,
    ),
    ParamSpec("actuator_backend", C.DEFAULT_ACTUATOR_BACKEND, "Default actuator backend ('dryrun' or 'plugin')"),
)


# ---------------------------
# Public API
# ---------------------------

def declare_params(node: Any, specs: Iterable[ParamSpec]) -> None:
    """
    Declare a set of parameters on a ROS2 node.
    """
    for spec in specs:
        if spec.description or spec.dynamic_typing:
            descriptor = _make_descriptor(spec.description, spec.dynamic_typing)
            if descriptor is not None:
                node.declare_parameter(spec.name, spec.default, descriptor)
                continue
        node.declare_parameter(spec.name, spec.default)


def get_param_value(node: Any, name: str, default: Optional[Any] = None) -> Any:
    p = node.get_parameter(name)
    value = getattr(p, "value", None)
    return default if value is None else value


def collect_params(
    node: Any,
    specs: Iterable[ParamSpec] = CONTROLLER_PARAM_SPECS,
) -> Dict[str, Any]:
    """Read declared parameters into a plain dict (no validation here)."""
    out: Dict[str, Any] = {}
    for spec in specs:
        out[spec.name] = get_param_value(node, spec.name, spec.default)
    return out


# ---------------------------
# Internal helpers
# ---------------------------

def _make_descriptor(description: str, dynamic_typing: bool = False) -> Optional[Any]:
    """
    ParameterDescriptor is imported lazily so this module stays importable
    without rcl_interfaces (e.g. in tests).
    """
    try:
        from rcl_interfaces.msg import ParameterDescriptor
    except ImportError:
        return None
    return ParameterDescriptor(description=description, dynamic_typing=dynamic_typing)


__all__ = [
    "ParamSpec",
    "CONTROLLER_PARAM_SPECS",
    "declare_params",
    "get_param_value",
    "collect_params",
]
