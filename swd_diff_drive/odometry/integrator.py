#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/odometry/integrator.py
------------------------------------------------
Dead-reckoning integrator for the differential-drive base.

Each tick consumes the cumulative wheel travel counters (int32, millimeters)
and advances the pose with a first-order (Euler) step:

    dL, dR   = counter deltas / 1000                       [m]
    dC       = (dL + dR) / 2
    dTheta   = sign * (dR - dL) / baseline
    x       += dC * cos(theta_prev)
    y       += dC * sin(theta_prev)
    theta    = wrap(theta_prev + dTheta)                   (-pi, pi]
    twist    = (dC, dTheta) / elapsed                      (0 if elapsed <= 0)

`sign` is +1 when the right wheel has positive polarity, -1 for the left.

Counter handling
----------------
- Deltas are taken modulo 2^32, so a counter wrapping past +/-2^31 is seamless.
- A per-tick jump larger than `max_wheel_jump_mm` is treated as a counter
  reset (e.g. actuator restart): the pose is kept, the previous readings are
  resynchronized to the new ones and the sample is flagged `resynced`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from swd_diff_drive import constants as C
from swd_diff_drive.exceptions import config_error
from swd_diff_drive.odometry.odom_math import Pose2D, Twist2D, int32_delta, wrap_to_pi
from swd_diff_drive.utils.logging import get_logger_adapter


@dataclass(frozen=True)
class OdometrySample:
    """Result of one integrator tick."""
    pose: Pose2D
    twist: Twist2D
    stamp_s: float
    frame_id: str
    child_frame_id: str
    d_left_m: float = 0.0
    d_right_m: float = 0.0
    resynced: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stamp_s": self.stamp_s,
            "frame_id": self.frame_id,
            "child_frame_id": self.child_frame_id,
            "x": self.pose.x,
            "y": self.pose.y,
            "theta": self.pose.theta,
            "linear": self.twist.linear,
            "angular": self.twist.angular,
            "d_left_m": self.d_left_m,
            "d_right_m": self.d_right_m,
            "resynced": self.resynced,
        }


class OdometryIntegrator:
    """
    Owns the previous pose and previous wheel readings.

    Not thread-safe; driven from the cooperative scheduler only.
    """

    def __init__(
        self,
        *,
        baseline_m: float,
        reference_sign: int = 1,
        max_wheel_jump_mm: int = C.DEFAULT_ODOM_MAX_WHEEL_JUMP_MM,
        frame_id: str = C.DEFAULT_ODOM_FRAME,
        child_frame_id: str = C.DEFAULT_BASE_FRAME,
        initial_left_mm: int = 0,
        initial_right_mm: int = 0,
        logger: Optional[Any] = None,
    ) -> None:
        if not math.isfinite(float(baseline_m)) or float(baseline_m) <= 0.0:
            raise config_error("baseline_m must be > 0", parameter="baseline_m", value=baseline_m)
        if int(reference_sign) not in (1, -1):
            raise config_error(
                "reference_sign must be +1 or -1",
                parameter="reference_sign",
                value=reference_sign,
            )

        self.baseline_m = float(baseline_m)
        self.reference_sign = int(reference_sign)
        self.max_wheel_jump_mm = max(0, int(max_wheel_jump_mm))
        self.frame_id = str(frame_id)
        self.child_frame_id = str(child_frame_id)
        self._log = get_logger_adapter(logger)

        self._pose = Pose2D()
        self._prev_left_mm = int(initial_left_mm)
        self._prev_right_mm = int(initial_right_mm)
        self.tick_count = 0
        self.resync_count = 0

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------
    @property
    def pose(self) -> Pose2D:
        return self._pose

    @property
    def previous_readings_mm(self) -> tuple:
        return (self._prev_left_mm, self._prev_right_mm)

    def reset(self, left_mm: int, right_mm: int, pose: Optional[Pose2D] = None) -> None:
        """Re-seed previous readings; pose goes back to the origin unless given."""
        self._prev_left_mm = int(left_mm)
        self._prev_right_mm = int(right_mm)
        if pose is None:
            self._pose = Pose2D()
        else:
            self._pose = Pose2D(pose.x, pose.y, wrap_to_pi(pose.theta))

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------
    def tick(
        self,
        left_mm: int,
        right_mm: int,
        elapsed_s: float,
        *,
        stamp_s: float = 0.0,
    ) -> OdometrySample:
        left_mm = int(left_mm)
        right_mm = int(right_mm)
        self.tick_count += 1

        dl_mm = int32_delta(left_mm, self._prev_left_mm)
        dr_mm = int32_delta(right_mm, self._prev_right_mm)

        if self.max_wheel_jump_mm > 0 and (
            abs(dl_mm) > self.max_wheel_jump_mm or abs(dr_mm) > self.max_wheel_jump_mm
        ):
            self._log.warn(
                f"Wheel counter jump detected (left={dl_mm} mm, right={dr_mm} mm, "
                f"limit={self.max_wheel_jump_mm} mm). Resynchronizing odometry, pose kept."
            )
            self._prev_left_mm = left_mm
            self._prev_right_mm = right_mm
            self.resync_count += 1
            return OdometrySample(
                pose=self._pose,
                twist=Twist2D(),
                stamp_s=float(stamp_s),
                frame_id=self.frame_id,
                child_frame_id=self.child_frame_id,
                resynced=True,
            )

        d_left = dl_mm / 1000.0
        d_right = dr_mm / 1000.0

        # Kinematic model
        d_center = (d_left + d_right) / 2.0
        d_theta = self.reference_sign * (d_right - d_left) / self.baseline_m

        # Euler step, heading from the previous tick
        prev = self._pose
        pose = Pose2D(
            x=prev.x + d_center * math.cos(prev.theta),
            y=prev.y + d_center * math.sin(prev.theta),
            theta=wrap_to_pi(prev.theta + d_theta),
        )

        elapsed = float(elapsed_s)
        if elapsed > 0.0 and math.isfinite(elapsed):
            twist = Twist2D(linear=d_center / elapsed, angular=d_theta / elapsed)
        else:
            twist = Twist2D()

        self._pose = pose
        self._prev_left_mm = left_mm
        self._prev_right_mm = right_mm

        return OdometrySample(
            pose=pose,
            twist=twist,
            stamp_s=float(stamp_s),
            frame_id=self.frame_id,
            child_frame_id=self.child_frame_id,
            d_left_m=d_left,
            d_right_m=d_right,
        )


__all__ = [
    "OdometrySample",
    "OdometryIntegrator",
]
