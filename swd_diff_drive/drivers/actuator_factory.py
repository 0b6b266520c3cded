#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/drivers/actuator_factory.py
-----------------------------------------------------
Wheel config loading and actuator construction.

Purpose
- Load one wheel's YAML config file into a `WheelConfig`
- Build and initialize the actuator backend named by that config
- Keep startup failure reporting uniform: everything raises `ActuatorInitError`

Supported backends
- "dryrun": `swd_diff_drive.drivers.dryrun_actuator.DryRunActuator`
- "plugin": any class given as "package.module:ClassName" in the wheel config
  `plugin` key; constructed as `cls(name=<wheel name>)`, then `init(config)`

Wheel config file (YAML)
------------------------
    diameter_mm: 200.0       # or diameter_m: 0.2
    reduction: 14.0          # motor revolutions per wheel revolution
    backend: dryrun          # optional, falls back to the node default
    plugin: ""               # "package.module:ClassName" for backend: plugin
    options: {}              # opaque, handed to Actuator.init()

Design notes
- No ROS imports
- Plugin classes are imported lazily so a missing device stack only fails the
  startup that asks for it
"""

from __future__ import annotations

import importlib
import os
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from swd_diff_drive import constants as C
from swd_diff_drive.drivers.actuator import Actuator
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator
from swd_diff_drive.exceptions import (
    ActuatorErrorContext,
    ActuatorInitError,
    UnsupportedActuatorBackendError,
)
from swd_diff_drive.models.wheel_config import WheelConfig


# =============================================================================
# Public constants / identifiers
# =============================================================================
BACKEND_DRYRUN = "dryrun"
BACKEND_PLUGIN = "plugin"

SUPPORTED_BACKENDS: Tuple[str, ...] = (
    BACKEND_DRYRUN,
    BACKEND_PLUGIN,
)

_REQUIRED_METHODS: Tuple[str, ...] = (
    "init",
    "get_position_value",
    "set_target_velocity",
    "set_halt",
    "get_safety_function_state",
    "get_power_stage_state",
    "request_operation_enabled",
)


# =============================================================================
# Wheel config loading
# =============================================================================
def load_wheel_config(path: str, name: str) -> WheelConfig:
    """
    Read one wheel config file.

    A top-level `wheel:` mapping is accepted as an alternative layout.
    """
    path = str(path)
    if not os.path.isfile(path):
        raise ActuatorInitError(
            f"Failed loading {name} motor's config file <{path}>: file not found",
            context=ActuatorErrorContext(wheel=name, operation="load_config"),
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ActuatorInitError(
            f"Failed loading {name} motor's config file <{path}>",
            context=ActuatorErrorContext(wheel=name, operation="load_config"),
            cause=e,
        ) from e

    if isinstance(data, dict) and isinstance(data.get("wheel"), dict):
        data = data["wheel"]
    if not isinstance(data, dict):
        raise ActuatorInitError(
            f"{name} motor's config file <{path}> must contain a mapping",
            context=ActuatorErrorContext(wheel=name, operation="load_config"),
        )

    return WheelConfig.from_mapping(data, name=name, config_file=path)


# =============================================================================
# Lazy import helpers
# =============================================================================
def _import_plugin_class(spec: str, wheel: str) -> type:
    """
    Resolve "package.module:ClassName" into a class.
    """
    module_name, sep, class_name = str(spec).partition(":")
    if not sep or not module_name.strip() or not class_name.strip():
        raise UnsupportedActuatorBackendError(
            f"Invalid plugin path {spec!r}, expected 'package.module:ClassName'",
            context=ActuatorErrorContext(wheel=wheel, parameter="plugin", value=str(spec)),
        )
    try:
        module = importlib.import_module(module_name.strip())
    except ImportError as e:
        raise UnsupportedActuatorBackendError(
            f"Could not import actuator plugin module {module_name!r}",
            context=ActuatorErrorContext(wheel=wheel, parameter="plugin", value=str(spec)),
            cause=e,
        ) from e

    cls = getattr(module, class_name.strip(), None)
    if cls is None or not isinstance(cls, type):
        raise UnsupportedActuatorBackendError(
            f"Actuator plugin class {class_name!r} not found in {module_name!r}",
            context=ActuatorErrorContext(wheel=wheel, parameter="plugin", value=str(spec)),
        )

    missing = [m for m in _REQUIRED_METHODS if not callable(getattr(cls, m, None))]
    if missing:
        raise UnsupportedActuatorBackendError(
            f"Actuator plugin {spec!r} does not implement: {', '.join(missing)}",
            context=ActuatorErrorContext(wheel=wheel, parameter="plugin", value=str(spec)),
        )
    return cls


def _init_config(wheel_config: WheelConfig) -> Dict[str, Any]:
    out: Dict[str, Any] = dict(wheel_config.options)
    out["diameter_m"] = wheel_config.diameter_m
    out["gear_reduction"] = wheel_config.gear_reduction
    return out


# =============================================================================
# Actuator construction
# =============================================================================
def create_actuator(
    wheel_config: WheelConfig,
    *,
    default_backend: str = C.DEFAULT_ACTUATOR_BACKEND,
    clock: Optional[Callable[[], float]] = None,
) -> Actuator:
    """
    Build and initialize the actuator for one wheel.

    `clock` is only used by the dry-run backend (simulated position).
    """
    backend = str(wheel_config.backend or default_backend).strip().lower()
    wheel = wheel_config.name

    if backend == BACKEND_DRYRUN:
        actuator: Any = DryRunActuator(name=wheel, clock=clock)
    elif backend == BACKEND_PLUGIN:
        if not wheel_config.plugin:
            raise UnsupportedActuatorBackendError(
                f"backend 'plugin' requires a 'plugin' entry in {wheel} wheel config",
                context=ActuatorErrorContext(wheel=wheel, parameter="plugin"),
            )
        cls = _import_plugin_class(wheel_config.plugin, wheel)
        try:
            actuator = cls(name=wheel)
        except Exception as e:
            raise ActuatorInitError(
                f"Failed constructing {wheel} actuator plugin {wheel_config.plugin!r}",
                context=ActuatorErrorContext(wheel=wheel, operation="construct"),
                cause=e,
            ) from e
    else:
        raise UnsupportedActuatorBackendError(
            f"Unsupported actuator backend {backend!r}. "
            f"Supported: {', '.join(SUPPORTED_BACKENDS)}",
            context=ActuatorErrorContext(wheel=wheel, parameter="backend", value=backend),
        )

    try:
        actuator.init(_init_config(wheel_config))
    except ActuatorInitError:
        raise
    except Exception as e:
        raise ActuatorInitError(
            f"Failed initializing {wheel} motor",
            context=ActuatorErrorContext(wheel=wheel, operation="init"),
            cause=e,
        ) from e

    return actuator


def create_wheel_actuators(
    left: WheelConfig,
    right: WheelConfig,
    *,
    default_backend: str = C.DEFAULT_ACTUATOR_BACKEND,
    clock: Optional[Callable[[], float]] = None,
) -> Tuple[Actuator, Actuator]:
    """
    Build both wheels (right first). If the second wheel fails, the first one
    is closed before the error propagates.
    """
    right_act = create_actuator(right, default_backend=default_backend, clock=clock)
    try:
        left_act = create_actuator(left, default_backend=default_backend, clock=clock)
    except ActuatorInitError:
        right_act.close()
        raise
    return left_act, right_act


__all__ = [
    "BACKEND_DRYRUN",
    "BACKEND_PLUGIN",
    "SUPPORTED_BACKENDS",
    "load_wheel_config",
    "create_actuator",
    "create_wheel_actuators",
]
