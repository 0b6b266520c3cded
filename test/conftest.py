# -*- coding: utf-8 -*-
"""
Shared fixtures for the swd_diff_drive tests.

Everything here is ROS-free: controllers run on a `ManualScheduler` with
dry-run actuators, and logs go to a `RecordingLogger`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from swd_diff_drive.drive_controller import ControllerOutputs, DriveController
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator
from swd_diff_drive.models.controller_config import ControllerConfig
from swd_diff_drive.models.wheel_config import WheelConfig
from swd_diff_drive.utils.scheduler import ManualScheduler


BASELINE_M = 0.485
WHEEL_DIAMETER_M = 0.2
GEAR_REDUCTION = 14.0


class RecordingLogger:
    """Duck-typed ROS-style logger that keeps every line."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def debug(self, msg: Any) -> None:
        self.records.append(("debug", str(msg)))

    def info(self, msg: Any) -> None:
        self.records.append(("info", str(msg)))

    def warn(self, msg: Any) -> None:
        self.records.append(("warn", str(msg)))

    def error(self, msg: Any) -> None:
        self.records.append(("error", str(msg)))

    def messages(self, level: str) -> List[str]:
        return [m for lvl, m in self.records if lvl == level]

    def clear(self) -> None:
        self.records.clear()


class OutputRecorder:
    def __init__(self) -> None:
        self.odometry: List[Any] = []
        self.safety: List[Any] = []
        self.setpoints: List[Any] = []

    def outputs(self) -> ControllerOutputs:
        return ControllerOutputs(
            on_odometry=self.odometry.append,
            on_safety=self.safety.append,
            on_setpoints=self.setpoints.append,
        )


def make_wheel(name: str, *, reduction: float = GEAR_REDUCTION, diameter_m: float = WHEEL_DIAMETER_M) -> WheelConfig:
    return WheelConfig(name=name, diameter_m=diameter_m, gear_reduction=reduction)


def make_config(**overrides: Any) -> ControllerConfig:
    fields: Dict[str, Any] = dict(
        baseline_m=BASELINE_M,
        left_wheel=make_wheel("left"),
        right_wheel=make_wheel("right"),
    )
    fields.update(overrides)
    return ControllerConfig(**fields)


def make_actuator(name: str, scheduler: ManualScheduler, wheel: WheelConfig) -> DryRunActuator:
    act = DryRunActuator(name=name, clock=scheduler.now_s)
    act.init({"diameter_m": wheel.diameter_m, "gear_reduction": wheel.gear_reduction})
    return act


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def recorder() -> OutputRecorder:
    return OutputRecorder()


@pytest.fixture
def make_controller(scheduler, logger, recorder):
    """Factory: make_controller(**config_overrides) -> DriveController (not started)."""

    def _make(**overrides: Any) -> DriveController:
        config = make_config(**overrides)
        left = make_actuator("left", scheduler, config.left_wheel)
        right = make_actuator("right", scheduler, config.right_wheel)
        return DriveController(
            config,
            left,
            right,
            scheduler,
            outputs=recorder.outputs(),
            logger=logger,
        )

    return _make


@pytest.fixture
def wheel_files(tmp_path):
    """Writes left/right wheel YAML files and returns their paths."""

    def _write(name: str, body: str) -> str:
        path = tmp_path / f"{name}_wheel.yaml"
        path.write_text(body, encoding="utf-8")
        return str(path)

    left = _write("left", "diameter_mm: 200.0\nreduction: 14.0\n")
    right = _write("right", "wheel:\n  diameter_m: 0.2\n  reduction: 14.0\n  backend: dryrun\n")
    return left, right
