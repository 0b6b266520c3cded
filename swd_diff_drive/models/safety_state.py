#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/models/safety_state.py
------------------------------------------------
Aggregated safety-function snapshot of both wheels.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class SafetyState:
    """
    One safety poll, both wheels combined (logical OR per function).

    safe_torque_off                STO active on at least one wheel
    safe_direction_indication_pos  SDI+ reported by the positive-polarity side
    safe_limit_speed               SLS_1 active on at least one wheel
    """
    safe_torque_off: bool = False
    safe_direction_indication_pos: bool = False
    safe_limit_speed: bool = False
    stamp_s: float = 0.0

    @property
    def any_active(self) -> bool:
        return self.safe_torque_off or self.safe_direction_indication_pos or self.safe_limit_speed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "safe_torque_off": self.safe_torque_off,
            "safe_direction_indication_pos": self.safe_direction_indication_pos,
            "safe_limit_speed": self.safe_limit_speed,
            "stamp_s": round(float(self.stamp_s), 6),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), sort_keys=True)


__all__ = ["SafetyState"]
