#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/safety/safety_monitor.py
--------------------------------------------------
Periodic aggregation of the wheels' safety functions.

Each poll reads, for both wheels:
- STO    (Safe Torque Off)
- SDI    (Safe Direction Indication; SDIP_1 / SDIN_1 depending on polarity)
- SLS_1  (Safe Limit Speed)

and ORs left and right into one `SafetyState`. A failed read logs an error
and leaves that wheel's contribution `False` for this poll only; nothing is
carried over between polls. Observational only: never blocks motion.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from swd_diff_drive.drivers.actuator import Actuator, SafetyFunctionId
from swd_diff_drive.exceptions import DeviceCommError
from swd_diff_drive.models.controller_config import ReferenceWheel
from swd_diff_drive.models.safety_state import SafetyState
from swd_diff_drive.utils.logging import get_logger_adapter, log_exception


@dataclass(frozen=True)
class SafetyPollResult:
    state: SafetyState
    sto_mismatch: bool = False
    read_errors: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.read_errors


def sdi_function_ids(reference_wheel: ReferenceWheel) -> Tuple[SafetyFunctionId, SafetyFunctionId]:
    """(left, right) SDI function ids for a polarity convention."""
    if reference_wheel is ReferenceWheel.RIGHT:
        return SafetyFunctionId.SDIP_1, SafetyFunctionId.SDIN_1
    return SafetyFunctionId.SDIN_1, SafetyFunctionId.SDIP_1


class SafetyMonitor:
    def __init__(
        self,
        left: Actuator,
        right: Actuator,
        *,
        reference_wheel: ReferenceWheel = ReferenceWheel.RIGHT,
        clock: Optional[Callable[[], float]] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self._left = left
        self._right = right
        self.reference_wheel = ReferenceWheel(reference_wheel)
        self._clock = clock or time.monotonic
        self._log = get_logger_adapter(logger)

        self.poll_count = 0
        self.mismatch_count = 0
        self.read_error_count = 0
        self.last_result: Optional[SafetyPollResult] = None

    def _read(
        self,
        actuator: Actuator,
        wheel: str,
        function_id: SafetyFunctionId,
        label: str,
        errors: list,
    ) -> Tuple[bool, bool]:
        """Returns (value, read_ok)."""
        try:
            return bool(actuator.get_safety_function_state(function_id)), True
        except DeviceCommError as e:
            self.read_error_count += 1
            errors.append(f"{wheel}:{function_id.value}")
            log_exception(
                self._log,
                e,
                message=f"Error reading {label} from {wheel} motor",
                component="safety",
            )
            return False, False

    def poll(self, stamp_s: Optional[float] = None) -> SafetyPollResult:
        stamp = float(self._clock()) if stamp_s is None else float(stamp_s)
        errors: list = []
        self.poll_count += 1

        # STO
        sto_l, ok_l = self._read(self._left, "left", SafetyFunctionId.STO, "STO", errors)
        sto_r, ok_r = self._read(self._right, "right", SafetyFunctionId.STO, "STO", errors)
        mismatch = ok_l and ok_r and sto_l != sto_r
        if mismatch:
            self.mismatch_count += 1
            self._log.warn(
                f"Inconsistent STO for left and right motors, left={int(sto_l)}, right={int(sto_r)}"
            )

        # SDI, mapping depends on polarity
        sdi_id_l, sdi_id_r = sdi_function_ids(self.reference_wheel)
        sdi_l, _ = self._read(self._left, "left", sdi_id_l, "SDI", errors)
        sdi_r, _ = self._read(self._right, "right", sdi_id_r, "SDI", errors)

        # SLS
        sls_l, _ = self._read(self._left, "left", SafetyFunctionId.SLS_1, "SLS", errors)
        sls_r, _ = self._read(self._right, "right", SafetyFunctionId.SLS_1, "SLS", errors)

        state = SafetyState(
            safe_torque_off=sto_l or sto_r,
            safe_direction_indication_pos=sdi_l or sdi_r,
            safe_limit_speed=sls_l or sls_r,
            stamp_s=stamp,
        )
        self._log.debug(
            f"STO: {int(state.safe_torque_off)}, SDI+: {int(state.safe_direction_indication_pos)}, "
            f"SLS: {int(state.safe_limit_speed)}"
        )

        result = SafetyPollResult(state=state, sto_mismatch=mismatch, read_errors=tuple(errors))
        self.last_result = result
        return result

    @property
    def latest_state(self) -> Optional[SafetyState]:
        return None if self.last_result is None else self.last_result.state


__all__ = [
    "SafetyPollResult",
    "SafetyMonitor",
    "sdi_function_ids",
]
