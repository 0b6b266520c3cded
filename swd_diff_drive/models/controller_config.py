#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/models/controller_config.py
-----------------------------------------------------
Immutable controller configuration and its parameter parsing.

Validation policy
-----------------
- Hard-required values (`baseline_m`, `pub_freq_hz`, wheel config paths) raise
  `ConfigurationError`; the controller is never constructed with them invalid.
- Enum-like strings (`control_mode`, `positive_polarity_wheel`) fall back to
  their default with a warning when the value is not recognized.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from swd_diff_drive import constants as C
from swd_diff_drive.exceptions import ConfigurationError, config_error
from swd_diff_drive.models.wheel_config import WheelConfig
from swd_diff_drive.utils.logging import LoggerAdapter, get_logger_adapter


# =============================================================================
# Enums
# =============================================================================
class ControlMode(str, Enum):
    """Command input selected at startup."""
    TWIST = "Twist"
    LEFT_RIGHT_SPEEDS = "LeftRightSpeeds"


class ReferenceWheel(str, Enum):
    """
    Wheel with positive polarity.

    Its sign multiplies the odometry rotation term and selects which
    wheel reports SDI+ vs SDI-.
    """
    RIGHT = "Right"
    LEFT = "Left"

    @property
    def sign(self) -> int:
        return 1 if self is ReferenceWheel.RIGHT else -1


def _parse_enum(
    enum_cls: type,
    value: Any,
    *,
    default: Enum,
    parameter: str,
    logger: LoggerAdapter,
) -> Any:
    if isinstance(value, enum_cls):
        return value
    text = "" if value is None else str(value).strip()
    for member in enum_cls:
        if member.value == text:
            return member
    accepted = ", ".join(f"'{m.value}'" for m in enum_cls)
    logger.warn(
        f"Invalid value '{text}' for parameter '{parameter}', accepted values: "
        f"[{accepted}]. Falling back to default ({default.value})."
    )
    return default


# =============================================================================
# Config
# =============================================================================
@dataclass(frozen=True)
class ControllerConfig:
    """
    Controller configuration, built once at startup and never mutated.
    """
    baseline_m: float
    left_wheel: WheelConfig
    right_wheel: WheelConfig
    pub_freq_hz: float = C.DEFAULT_PUB_FREQ_HZ
    watchdog_receive_ms: int = C.DEFAULT_WATCHDOG_RECEIVE_MS
    base_frame: str = C.DEFAULT_BASE_FRAME
    odom_frame: str = C.DEFAULT_ODOM_FRAME
    control_mode: ControlMode = ControlMode.TWIST
    reference_wheel: ReferenceWheel = ReferenceWheel.RIGHT
    wheel_max_speed_rpm: float = C.DEFAULT_WHEEL_MAX_SPEED_RPM
    wheel_safety_limited_speed_rpm: float = C.DEFAULT_WHEEL_SAFETY_LIMITED_SPEED_RPM
    have_backward_sls: bool = C.DEFAULT_HAVE_BACKWARD_SLS
    publish_odom: bool = C.DEFAULT_PUBLISH_ODOM
    publish_tf: bool = C.DEFAULT_PUBLISH_TF
    publish_safety_functions: bool = C.DEFAULT_PUBLISH_SAFETY_FUNCTIONS
    odom_max_wheel_jump_mm: int = C.DEFAULT_ODOM_MAX_WHEEL_JUMP_MM

    def __post_init__(self) -> None:
        if not _is_positive(self.baseline_m):
            raise config_error(
                "baseline_m parameter is mandatory and must be > 0",
                parameter="baseline_m",
                value=self.baseline_m,
            )
        if not _is_positive(self.pub_freq_hz):
            raise config_error(
                "pub_freq_hz parameter is mandatory and must be > 0",
                parameter="pub_freq_hz",
                value=self.pub_freq_hz,
            )
        if int(self.watchdog_receive_ms) < 0:
            raise config_error(
                "watchdog_receive_ms must be >= 0 (0 disables the watchdog)",
                parameter="watchdog_receive_ms",
                value=self.watchdog_receive_ms,
            )
        for name in (
            "wheel_max_speed_rpm",
            "wheel_safety_limited_speed_rpm",
            "odom_max_wheel_jump_mm",
        ):
            v = getattr(self, name)
            if not math.isfinite(float(v)) or float(v) < 0.0:
                raise config_error(f"{name} must be >= 0", parameter=name, value=v)
        for name in ("base_frame", "odom_frame"):
            if not str(getattr(self, name)).strip():
                raise config_error(f"{name} must not be empty", parameter=name)

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------
    @property
    def reference_sign(self) -> int:
        return self.reference_wheel.sign

    @property
    def odom_period_s(self) -> float:
        return 1.0 / float(self.pub_freq_hz)

    @property
    def watchdog_timeout_s(self) -> float:
        return int(self.watchdog_receive_ms) / 1000.0

    @property
    def watchdog_enabled(self) -> bool:
        return int(self.watchdog_receive_ms) > 0

    # -------------------------------------------------------------------------
    # Parameter parsing
    # -------------------------------------------------------------------------
    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        wheel_loader: Callable[[str, str], WheelConfig],
        logger: Optional[Any] = None,
    ) -> "ControllerConfig":
        """
        Build a config from a flat parameter mapping (ROS parameters or YAML).

        `wheel_loader(path, wheel_name)` loads one wheel config file; it is
        called right wheel first, then left, only after all scalar parameters
        validated.
        """
        log = get_logger_adapter(logger)

        baseline_m = _get_float(params, "baseline_m", 0.0)
        pub_freq_hz = _get_float(params, "pub_freq_hz", float(C.DEFAULT_PUB_FREQ_HZ))
        watchdog_ms = _get_int(params, "watchdog_receive_ms", C.DEFAULT_WATCHDOG_RECEIVE_MS)

        # "base_link" / "ref_wheel" are the historical parameter names
        base_frame = _first_set(params, ("base_frame", "base_link"), C.DEFAULT_BASE_FRAME)
        odom_frame = _first_set(params, ("odom_frame",), C.DEFAULT_ODOM_FRAME)

        control_mode = _parse_enum(
            ControlMode,
            params.get("control_mode", C.DEFAULT_CONTROL_MODE),
            default=ControlMode.TWIST,
            parameter="control_mode",
            logger=log,
        )
        ref_key = "positive_polarity_wheel"
        if not str(params.get(ref_key) or "").strip() and str(params.get("ref_wheel") or "").strip():
            ref_key = "ref_wheel"
        reference_wheel = _parse_enum(
            ReferenceWheel,
            _first_set(params, (ref_key,), C.DEFAULT_REFERENCE_WHEEL),
            default=ReferenceWheel.RIGHT,
            parameter=ref_key,
            logger=log,
        )

        # Scalar validation happens before any file is touched
        if not _is_positive(baseline_m):
            raise config_error(
                "baseline_m parameter is mandatory and must be > 0",
                parameter="baseline_m",
                value=baseline_m,
            )
        if not _is_positive(pub_freq_hz):
            raise config_error(
                "pub_freq_hz parameter is mandatory and must be > 0",
                parameter="pub_freq_hz",
                value=pub_freq_hz,
            )

        right_file = str(params.get("right_config_file", "") or "").strip()
        left_file = str(params.get("left_config_file", "") or "").strip()
        if not right_file:
            raise config_error(
                "Please specify the right_config_file parameter",
                parameter="right_config_file",
            )
        if not left_file:
            raise config_error(
                "Please specify the left_config_file parameter",
                parameter="left_config_file",
            )

        log.info(f"Motors config files, right : {right_file}, left : {left_file}")
        right_wheel = wheel_loader(right_file, "right")
        left_wheel = wheel_loader(left_file, "left")

        return cls(
            baseline_m=baseline_m,
            left_wheel=left_wheel,
            right_wheel=right_wheel,
            pub_freq_hz=pub_freq_hz,
            watchdog_receive_ms=watchdog_ms,
            base_frame=base_frame,
            odom_frame=odom_frame,
            control_mode=control_mode,
            reference_wheel=reference_wheel,
            wheel_max_speed_rpm=_get_float(
                params, "wheel_max_speed_rpm", C.DEFAULT_WHEEL_MAX_SPEED_RPM
            ),
            wheel_safety_limited_speed_rpm=_get_float(
                params,
                "wheel_safety_limited_speed_rpm",
                C.DEFAULT_WHEEL_SAFETY_LIMITED_SPEED_RPM,
            ),
            have_backward_sls=_get_bool(params, "have_backward_sls", C.DEFAULT_HAVE_BACKWARD_SLS),
            publish_odom=_get_bool(params, "publish_odom", C.DEFAULT_PUBLISH_ODOM),
            publish_tf=_get_bool(params, "publish_tf", C.DEFAULT_PUBLISH_TF),
            publish_safety_functions=_get_bool(
                params, "publish_safety_functions", C.DEFAULT_PUBLISH_SAFETY_FUNCTIONS
            ),
            odom_max_wheel_jump_mm=_get_int(
                params, "odom_max_wheel_jump_mm", C.DEFAULT_ODOM_MAX_WHEEL_JUMP_MM
            ),
        )

    def to_dict(self) -> dict:
        return {
            "baseline_m": self.baseline_m,
            "pub_freq_hz": self.pub_freq_hz,
            "watchdog_receive_ms": self.watchdog_receive_ms,
            "base_frame": self.base_frame,
            "odom_frame": self.odom_frame,
            "control_mode": self.control_mode.value,
            "reference_wheel": self.reference_wheel.value,
            "wheel_max_speed_rpm": self.wheel_max_speed_rpm,
            "wheel_safety_limited_speed_rpm": self.wheel_safety_limited_speed_rpm,
            "have_backward_sls": self.have_backward_sls,
            "publish_odom": self.publish_odom,
            "publish_tf": self.publish_tf,
            "publish_safety_functions": self.publish_safety_functions,
            "odom_max_wheel_jump_mm": self.odom_max_wheel_jump_mm,
            "left_wheel": self.left_wheel.to_dict(),
            "right_wheel": self.right_wheel.to_dict(),
        }


# =============================================================================
# Typed reads
# =============================================================================
def _first_set(params: Mapping[str, Any], names: tuple, default: str) -> str:
    """First non-empty string among `names`, else `default`."""
    for name in names:
        text = str(params.get(name) or "").strip()
        if text:
            return text
    return default


def _is_positive(value: Any) -> bool:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(v) and v > 0.0


def _get_float(params: Mapping[str, Any], name: str, default: float) -> float:
    value = params.get(name, default)
    if isinstance(value, bool):
        raise config_error(f"Parameter '{name}' expected a number", parameter=name, value=value)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise config_error(
            f"Parameter '{name}' expected a number", parameter=name, value=value
        ) from e


def _get_int(params: Mapping[str, Any], name: str, default: int) -> int:
    value = params.get(name, default)
    if isinstance(value, bool):
        raise config_error(f"Parameter '{name}' expected an integer", parameter=name, value=value)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise config_error(
            f"Parameter '{name}' expected an integer", parameter=name, value=value
        ) from e


def _get_bool(params: Mapping[str, Any], name: str, default: bool) -> bool:
    value = params.get(name, default)
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "t", "yes", "y", "on"):
        return True
    if text in ("0", "false", "f", "no", "n", "off"):
        return False
    raise config_error(f"Parameter '{name}' expected a boolean", parameter=name, value=value)


__all__ = [
    "ControlMode",
    "ReferenceWheel",
    "ControllerConfig",
    "ConfigurationError",
]
