#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/models/velocity_command.py
----------------------------------------------------
Velocity command value types.

Units
- TwistCommand: m/s forward, rad/s yaw rate (CCW positive)
- WheelSpeedCommand: wheel angular speed, rad/s
- WheelSetpoints: motor-shaft speed, integer rpm (after gear reduction)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class TwistCommand:
    linear_mps: float = 0.0
    angular_rad_s: float = 0.0

    @classmethod
    def zero(cls) -> "TwistCommand":
        return cls(0.0, 0.0)

    def is_finite(self) -> bool:
        return math.isfinite(self.linear_mps) and math.isfinite(self.angular_rad_s)

    def to_dict(self) -> Dict[str, float]:
        return {"linear_mps": self.linear_mps, "angular_rad_s": self.angular_rad_s}


@dataclass(frozen=True)
class WheelSpeedCommand:
    left_rad_s: float = 0.0
    right_rad_s: float = 0.0

    @classmethod
    def zero(cls) -> "WheelSpeedCommand":
        return cls(0.0, 0.0)

    def is_finite(self) -> bool:
        return math.isfinite(self.left_rad_s) and math.isfinite(self.right_rad_s)

    def to_dict(self) -> Dict[str, float]:
        return {"left_rad_s": self.left_rad_s, "right_rad_s": self.right_rad_s}


@dataclass(frozen=True)
class WheelSetpoints:
    """Per-wheel motor setpoints in rpm, as written to the actuators."""
    left: int = 0
    right: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"left": self.left, "right": self.right}


VelocityCommand = Union[TwistCommand, WheelSpeedCommand]


__all__ = [
    "TwistCommand",
    "WheelSpeedCommand",
    "WheelSetpoints",
    "VelocityCommand",
]
