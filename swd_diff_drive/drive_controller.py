#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/drive_controller.py
---------------------------------------------
Differential-drive controller core (ROS-free).

Owns one actuator per wheel plus:
- OdometryIntegrator       (tick every 1 / pub_freq_hz)
- CommandWatchdog          (one-shot, watchdog_receive_ms)
- PowerStateSupervisor     (tick every 1 s)
- SafetyMonitor            (tick every 0.2 s)

Command ingress
---------------
- submit_velocity_command(TwistCommand | WheelSpeedCommand)
- submit_brake_command(halt)

Everything runs on one cooperative `Scheduler`, so handlers never interleave.
Published data leaves through `ControllerOutputs` callbacks; the ROS node
turns them into messages.

Dispatch policy
---------------
Left wheel first. A left failure aborts the command; a right failure puts the
left wheel back on its previous setpoint, so the two wheels never run a
half-applied command. Device errors are logged and bounded to the call.

Lifecycle
---------
build_drive_controller(...) -> start() -> ... -> stop() -> close()
`close()` cancels timers first, then releases the actuators.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Tuple

from swd_diff_drive import constants as C
from swd_diff_drive.drivers.actuator import Actuator
from swd_diff_drive.drivers.actuator_factory import create_wheel_actuators, load_wheel_config
from swd_diff_drive.exceptions import (
    ActuatorInitError,
    ConfigurationError,
    DeviceCommError,
    KinematicsError,
    SwdDriveException,
)
from swd_diff_drive.kinematics.diff_drive import (
    command_to_wheel_speeds,
    effective_speed_cap_rpm,
    is_backward_motion,
    limit_wheel_speeds,
    wheel_speeds_to_setpoints,
)
from swd_diff_drive.models.controller_config import ControllerConfig
from swd_diff_drive.models.safety_state import SafetyState
from swd_diff_drive.models.velocity_command import (
    VelocityCommand,
    WheelSetpoints,
)
from swd_diff_drive.models.wheel_config import WheelConfig
from swd_diff_drive.odometry.integrator import OdometryIntegrator, OdometrySample
from swd_diff_drive.odometry.odom_math import Pose2D
from swd_diff_drive.safety.command_watchdog import CommandWatchdog
from swd_diff_drive.safety.power_state_supervisor import PowerStateSupervisor
from swd_diff_drive.safety.safety_monitor import SafetyMonitor
from swd_diff_drive.utils.logging import LoggerAdapter, get_logger_adapter, log_exception
from swd_diff_drive.utils.scheduler import Scheduler, TimerHandle


ActuatorPairFactory = Callable[[WheelConfig, WheelConfig], Tuple[Actuator, Actuator]]


# =============================================================================
# Helpers
# =============================================================================
def parse_soft_brake(text: str) -> bool:
    """
    Soft-brake text protocol: "disable" releases, anything else halts.

    Returns the halt flag.
    """
    return str(text).strip() != C.SOFT_BRAKE_RELEASE_TEXT


@dataclass
class ControllerOutputs:
    """
    Output sinks. Any of them may be None.
    """
    on_odometry: Optional[Callable[[OdometrySample], None]] = None
    on_safety: Optional[Callable[[SafetyState], None]] = None
    on_setpoints: Optional[Callable[[WheelSetpoints], None]] = None


# =============================================================================
# Controller
# =============================================================================
class DriveController:
    def __init__(
        self,
        config: ControllerConfig,
        left: Actuator,
        right: Actuator,
        scheduler: Scheduler,
        *,
        outputs: Optional[ControllerOutputs] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self.config = config
        self._left = left
        self._right = right
        self._scheduler = scheduler
        self.outputs = outputs or ControllerOutputs()
        self._log: LoggerAdapter = get_logger_adapter(logger)

        self._running = False
        self._closed = False
        self._timers: List[TimerHandle] = []
        self._last_odom_s: Optional[float] = None
        self._last_setpoints = WheelSetpoints(0, 0)
        self._latest_safety: Optional[SafetyState] = None

        left_mm, right_mm = self._read_initial_positions()
        self.integrator = OdometryIntegrator(
            baseline_m=config.baseline_m,
            reference_sign=config.reference_sign,
            max_wheel_jump_mm=config.odom_max_wheel_jump_mm,
            frame_id=config.odom_frame,
            child_frame_id=config.base_frame,
            initial_left_mm=left_mm,
            initial_right_mm=right_mm,
            logger=self._log,
        )
        self.watchdog = CommandWatchdog(
            scheduler,
            self._on_watchdog_timeout,
            timeout_ms=config.watchdog_receive_ms,
            logger=self._log,
        )
        self.safety_monitor = SafetyMonitor(
            left,
            right,
            reference_wheel=config.reference_wheel,
            clock=scheduler.now_s,
            logger=self._log,
        )
        self.power_supervisor = PowerStateSupervisor(left, right, logger=self._log)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._running

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pose(self) -> Pose2D:
        return self.integrator.pose

    @property
    def last_setpoints(self) -> WheelSetpoints:
        """Last setpoints successfully applied to both wheels."""
        return self._last_setpoints

    @property
    def latest_safety_state(self) -> Optional[SafetyState]:
        return self._latest_safety

    @property
    def left_actuator(self) -> Actuator:
        return self._left

    @property
    def right_actuator(self) -> Actuator:
        return self._right

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    def start(self) -> None:
        """Reset the pose to the origin and start the four timers."""
        if self._closed:
            raise RuntimeError("DriveController is closed")
        if self._running:
            return

        left_mm, right_mm = self._read_initial_positions(
            fallback=self.integrator.previous_readings_mm
        )
        self.integrator.reset(left_mm, right_mm)
        self._last_odom_s = None
        self._running = True

        cfg = self.config
        self._timers = [
            self._scheduler.create_periodic(cfg.odom_period_s, self._on_odom_timer),
            self._scheduler.create_periodic(C.POWER_STATE_PERIOD_S, self._on_power_timer),
            self._scheduler.create_periodic(C.SAFETY_MONITOR_PERIOD_S, self._on_safety_timer),
        ]
        self.watchdog.start()

        self._log.info(
            f"Drive controller started: odom {cfg.pub_freq_hz:g} Hz, "
            f"watchdog {cfg.watchdog_receive_ms} ms, mode {cfg.control_mode.value}, "
            f"positive polarity {cfg.reference_wheel.value}"
        )

    def stop(self) -> None:
        """Cancel all timers. Later callbacks and commands become no-ops."""
        if not self._running:
            return
        self._running = False
        for timer in self._timers:
            timer.cancel()
        self._timers = []
        self.watchdog.stop()
        self._log.info("Drive controller stopped")

    def close(self) -> None:
        """Stop timers, then release both actuators (idempotent)."""
        if self._closed:
            return
        self.stop()
        self._closed = True
        for wheel, actuator in (("left", self._left), ("right", self._right)):
            try:
                actuator.close()
            except DeviceCommError as e:
                log_exception(self._log, e, message=f"Failed releasing {wheel} actuator")

    def __enter__(self) -> "DriveController":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Command ingress
    # -------------------------------------------------------------------------
    def submit_velocity_command(self, cmd: VelocityCommand) -> bool:
        """
        Restart the watchdog, convert and dispatch. Returns True when both
        wheels accepted the new setpoints.
        """
        if not self._running:
            return False

        self.watchdog.on_command_received()

        try:
            setpoints = self._command_to_setpoints(cmd)
        except KinematicsError as e:
            log_exception(self._log, e, message="Rejected velocity command", component="cmd")
            return False

        self._log.debug(
            f"Got {type(cmd).__name__} {cmd.to_dict()}, "
            f"sent to motors (left, right) = ({setpoints.left}, {setpoints.right}) rpm"
        )
        return self._dispatch(setpoints)

    def _command_to_setpoints(self, cmd: VelocityCommand) -> WheelSetpoints:
        """Kinematics, speed cap, rpm conversion. Raises KinematicsError."""
        cfg = self.config
        speeds = command_to_wheel_speeds(
            cmd,
            baseline_m=cfg.baseline_m,
            left_diameter_m=cfg.left_wheel.diameter_m,
            right_diameter_m=cfg.right_wheel.diameter_m,
        )

        cap = effective_speed_cap_rpm(
            max_speed_rpm=cfg.wheel_max_speed_rpm,
            safety_limited_speed_rpm=cfg.wheel_safety_limited_speed_rpm,
            safe_limit_speed_active=bool(
                self._latest_safety is not None and self._latest_safety.safe_limit_speed
            ),
            have_backward_sls=cfg.have_backward_sls,
            backward=is_backward_motion(speeds),
        )
        speeds, limited = limit_wheel_speeds(speeds, cap)
        if limited:
            self._log.debug(f"Wheel speeds scaled to the {cap:g} rpm limit")

        return wheel_speeds_to_setpoints(
            speeds,
            left_gear_reduction=cfg.left_wheel.gear_reduction,
            right_gear_reduction=cfg.right_wheel.gear_reduction,
        )

    def submit_brake_command(self, halt: bool) -> bool:
        """Halt (True) or release (False) each wheel independently."""
        if not self._running:
            return False

        verb = "braking" if halt else "releasing"
        ok = True
        for wheel, actuator in (("left", self._left), ("right", self._right)):
            try:
                actuator.set_halt(bool(halt))
            except DeviceCommError as e:
                ok = False
                log_exception(self._log, e, message=f"SoftBrake: Failed {verb} {wheel} wheel")
        return ok

    def submit_brake_text(self, text: str) -> bool:
        return self.submit_brake_command(parse_soft_brake(text))

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------
    def _dispatch(self, setpoints: WheelSetpoints) -> bool:
        previous = self._last_setpoints

        try:
            self._left.set_target_velocity(setpoints.left)
        except DeviceCommError as e:
            log_exception(self._log, e, message="Failed setting velocity of left motor")
            return False

        try:
            self._right.set_target_velocity(setpoints.right)
        except DeviceCommError as e:
            log_exception(self._log, e, message="Failed setting velocity of right motor")
            try:
                self._left.set_target_velocity(previous.left)
            except DeviceCommError as revert_error:
                log_exception(
                    self._log,
                    revert_error,
                    message=f"Failed restoring left motor to {previous.left} rpm",
                )
            return False

        self._last_setpoints = setpoints
        if self.outputs.on_setpoints is not None:
            self.outputs.on_setpoints(setpoints)
        return True

    # -------------------------------------------------------------------------
    # Timer callbacks
    # -------------------------------------------------------------------------
    def _on_watchdog_timeout(self) -> None:
        if not self._running:
            return
        self._dispatch(WheelSetpoints(0, 0))

    def _on_odom_timer(self) -> None:
        if not self._running:
            return

        try:
            left_mm = self._left.get_position_value()
        except DeviceCommError as e:
            log_exception(self._log, e, message="Failed reading from left motor", component="odom")
            return
        try:
            right_mm = self._right.get_position_value()
        except DeviceCommError as e:
            log_exception(self._log, e, message="Failed reading from right motor", component="odom")
            return

        now = self._scheduler.now_s()
        if self._last_odom_s is None:
            elapsed = self.config.odom_period_s
        else:
            elapsed = now - self._last_odom_s
        self._last_odom_s = now

        sample = self.integrator.tick(left_mm, right_mm, elapsed, stamp_s=now)
        if self.outputs.on_odometry is not None:
            self.outputs.on_odometry(sample)

    def _on_power_timer(self) -> None:
        if not self._running:
            return
        self.power_supervisor.tick()

    def _on_safety_timer(self) -> None:
        if not self._running:
            return
        result = self.safety_monitor.poll()
        self._latest_safety = result.state
        if self.outputs.on_safety is not None:
            self.outputs.on_safety(result.state)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _read_initial_positions(self, fallback: Tuple[int, int] = (0, 0)) -> Tuple[int, int]:
        left_mm, right_mm = fallback
        try:
            left_mm = self._left.get_position_value()
        except DeviceCommError as e:
            log_exception(self._log, e, message="Failed initial reading from left motor")
        try:
            right_mm = self._right.get_position_value()
        except DeviceCommError as e:
            log_exception(self._log, e, message="Failed initial reading from right motor")
        return int(left_mm), int(right_mm)

    def status_dict(self) -> dict:
        pose = self.integrator.pose
        wd = self.watchdog.state
        return {
            "running": self._running,
            "closed": self._closed,
            "pose": {"x": pose.x, "y": pose.y, "theta": pose.theta},
            "setpoints": self._last_setpoints.to_dict(),
            "watchdog": {"phase": wd.phase.value, "expiry_count": wd.expiry_count},
            "safety": None if self._latest_safety is None else self._latest_safety.to_dict(),
            "odom_resyncs": self.integrator.resync_count,
        }

    def status_json(self) -> str:
        return json.dumps(self.status_dict(), separators=(",", ":"), sort_keys=True)


# =============================================================================
# Fallible construction
# =============================================================================
@dataclass(frozen=True)
class ControllerBuildResult:
    """
    Outcome of `build_drive_controller`: a controller, or the startup error.
    """
    ok: bool
    controller: Optional[DriveController] = None
    error: Optional[SwdDriveException] = None

    @classmethod
    def success(cls, controller: DriveController) -> "ControllerBuildResult":
        return cls(ok=True, controller=controller)

    @classmethod
    def failure(cls, error: SwdDriveException) -> "ControllerBuildResult":
        return cls(ok=False, error=error)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def build_drive_controller(
    params: Mapping[str, Any],
    *,
    scheduler: Scheduler,
    outputs: Optional[ControllerOutputs] = None,
    logger: Optional[Any] = None,
    wheel_loader: Callable[[str, str], WheelConfig] = load_wheel_config,
    actuator_factory: Optional[ActuatorPairFactory] = None,
) -> ControllerBuildResult:
    """
    Validate parameters, load both wheel configs, build and init the
    actuators, then assemble the controller (not started).

    `actuator_factory(left_cfg, right_cfg) -> (left, right)` overrides the
    backend selection from the wheel configs.
    """
    log = get_logger_adapter(logger)

    try:
        config = ControllerConfig.from_params(params, wheel_loader=wheel_loader, logger=log)

        if actuator_factory is None:
            backend = str(params.get("actuator_backend", C.DEFAULT_ACTUATOR_BACKEND))
            left, right = create_wheel_actuators(
                config.left_wheel,
                config.right_wheel,
                default_backend=backend,
                clock=scheduler.now_s,
            )
        else:
            left, right = actuator_factory(config.left_wheel, config.right_wheel)
    except (ConfigurationError, ActuatorInitError) as e:
        log.error(f"Drive controller startup failed: {e}")
        return ControllerBuildResult.failure(e)

    controller = DriveController(
        config,
        left,
        right,
        scheduler,
        outputs=outputs,
        logger=log,
    )
    return ControllerBuildResult.success(controller)


__all__ = [
    "ControllerOutputs",
    "DriveController",
    "ControllerBuildResult",
    "build_drive_controller",
    "parse_soft_brake",
]
