#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/safety/power_state_supervisor.py
----------------------------------------------------------
Keeps the wheel power stages in OPERATION_ENABLED.

Each tick reads both power-stage states. If neither wheel is operational, an
enable request is sent to each wheel once (fire-and-forget; the enable
handshake itself is the device's business). A failed readback counts as
"not operational" for this decision. Request failures are logged per wheel,
so one failing wheel never keeps the other from being requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from swd_diff_drive.drivers.actuator import Actuator, PowerState
from swd_diff_drive.exceptions import DeviceCommError
from swd_diff_drive.utils.logging import get_logger_adapter, log_exception


@dataclass(frozen=True)
class PowerSupervisorResult:
    left_state: Optional[PowerState]
    right_state: Optional[PowerState]
    enable_requested: bool = False
    request_errors: Tuple[str, ...] = ()

    @property
    def any_operational(self) -> bool:
        return any(
            s is not None and s.is_operational for s in (self.left_state, self.right_state)
        )


class PowerStateSupervisor:
    def __init__(
        self,
        left: Actuator,
        right: Actuator,
        *,
        logger: Optional[Any] = None,
    ) -> None:
        self._left = left
        self._right = right
        self._log = get_logger_adapter(logger)

        self.tick_count = 0
        self.request_count = 0
        self.read_error_count = 0
        self.last_result: Optional[PowerSupervisorResult] = None

    def _read_state(self, actuator: Actuator, wheel: str) -> Optional[PowerState]:
        try:
            return actuator.get_power_stage_state()
        except DeviceCommError as e:
            self.read_error_count += 1
            log_exception(
                self._log,
                e,
                message=f"Failed to get the power stage state for {wheel} motor",
                component="power",
            )
            return None

    def _request(self, actuator: Actuator, wheel: str) -> bool:
        try:
            actuator.request_operation_enabled()
            return True
        except DeviceCommError as e:
            log_exception(
                self._log,
                e,
                message=f"Failed to request OPERATION_ENABLED for {wheel} motor",
                component="power",
            )
            return False

    def tick(self) -> PowerSupervisorResult:
        self.tick_count += 1
        left_state = self._read_state(self._left, "left")
        right_state = self._read_state(self._right, "right")

        result = PowerSupervisorResult(left_state=left_state, right_state=right_state)
        if result.any_operational:
            self.last_result = result
            return result

        self._log.debug(
            f"No wheel in OPERATION_ENABLED (left={_name(left_state)}, "
            f"right={_name(right_state)}), requesting enable"
        )
        errors = []
        for wheel, actuator in (("left", self._left), ("right", self._right)):
            self.request_count += 1
            if not self._request(actuator, wheel):
                errors.append(wheel)

        result = PowerSupervisorResult(
            left_state=left_state,
            right_state=right_state,
            enable_requested=True,
            request_errors=tuple(errors),
        )
        self.last_result = result
        return result


def _name(state: Optional[PowerState]) -> str:
    return "UNKNOWN" if state is None else state.value


__all__ = [
    "PowerSupervisorResult",
    "PowerStateSupervisor",
]
