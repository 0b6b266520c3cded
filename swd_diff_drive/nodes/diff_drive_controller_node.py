#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/nodes/diff_drive_controller_node.py
-------------------------------------------------------------
ROS 2 Jazzy node wrapping the differential-drive controller core.

Role in stack
-------------
Turns velocity commands into per-wheel motor setpoints, integrates wheel
odometry and reports the drive safety functions. All control logic lives in
`swd_diff_drive.drive_controller`; this node only declares parameters, wires
topics and converts messages.

Inputs
------
- cmd_vel      (geometry_msgs/Twist)   [control_mode = Twist]
- set_speed    (geometry_msgs/Point)   [control_mode = LeftRightSpeeds, x = left, y = right, rad/s]
- soft_brake   (std_msgs/String)       "disable" releases, anything else halts

Outputs
-------
- odom         (nav_msgs/Odometry)     [publish_odom]
- /tf          odom_frame -> base_frame [publish_tf]
- safety       (std_msgs/String JSON)  [publish_safety_functions]

Startup
-------
Parameter or wheel config errors are logged and the process exits with a
non-zero code before spinning.
"""

from __future__ import annotations

from typing import Optional

import rclpy
from rclpy.node import Node
from geometry_msgs.msg import Point, Twist
from nav_msgs.msg import Odometry
from std_msgs.msg import String
from tf2_ros import TransformBroadcaster

from swd_diff_drive import constants as C
from swd_diff_drive.drive_controller import (
    ControllerBuildResult,
    ControllerOutputs,
    DriveController,
    build_drive_controller,
)
from swd_diff_drive.models.controller_config import ControlMode
from swd_diff_drive.models.safety_state import SafetyState
from swd_diff_drive.odometry.integrator import OdometrySample
from swd_diff_drive.ros.adapters import (
    odometry_sample_to_msg,
    odometry_sample_to_transform,
    point_msg_to_wheel_speeds,
    safety_state_to_msg,
    twist_msg_to_command,
)
from swd_diff_drive.ros.params import CONTROLLER_PARAM_SPECS, collect_params, declare_params
from swd_diff_drive.ros.qos_profiles import qos_command, qos_output
from swd_diff_drive.ros.timer_scheduler import RosTimerScheduler
from swd_diff_drive.utils.logging import get_logger_adapter
from swd_diff_drive.version import get_package_version_info


# =============================================================================
# Node
# =============================================================================
class DiffDriveControllerNode(Node):
    def __init__(self) -> None:
        super().__init__(C.NODE_NAME_DIFF_DRIVE)

        self._log = get_logger_adapter(self)
        self._log.info(get_package_version_info().banner())

        declare_params(self, CONTROLLER_PARAM_SPECS)
        params = collect_params(self, CONTROLLER_PARAM_SPECS)

        self._scheduler = RosTimerScheduler(self)
        self._odom_pub = None
        self._safety_pub = None
        self._tf_broadcaster: Optional[TransformBroadcaster] = None

        self.build_result: ControllerBuildResult = build_drive_controller(
            params,
            scheduler=self._scheduler,
            outputs=ControllerOutputs(
                on_odometry=self._publish_odometry,
                on_safety=self._publish_safety,
            ),
            logger=self._log,
        )
        self.controller: Optional[DriveController] = self.build_result.controller
        if self.controller is None:
            return

        cfg = self.controller.config

        # ---------------------------------------------------------------------
        # Outputs
        # ---------------------------------------------------------------------
        if cfg.publish_odom:
            self._odom_pub = self.create_publisher(Odometry, C.TOPIC_ODOM, qos_output())
        if cfg.publish_tf:
            self._tf_broadcaster = TransformBroadcaster(self)
        if cfg.publish_safety_functions:
            self._safety_pub = self.create_publisher(String, C.TOPIC_SAFETY, qos_output())

        # ---------------------------------------------------------------------
        # Inputs
        # ---------------------------------------------------------------------
        if cfg.control_mode is ControlMode.TWIST:
            self.create_subscription(Twist, C.TOPIC_CMD_VEL, self._on_twist, qos_command())
            cmd_topic = C.TOPIC_CMD_VEL
        else:
            self.create_subscription(Point, C.TOPIC_SET_SPEED, self._on_wheel_speeds, qos_command())
            cmd_topic = C.TOPIC_SET_SPEED
        self.create_subscription(String, C.TOPIC_SOFT_BRAKE, self._on_soft_brake, qos_command())

        self.controller.start()
        self._log.info(
            f"Listening on '{cmd_topic}' and '{C.TOPIC_SOFT_BRAKE}' | "
            f"odom={cfg.publish_odom} tf={cfg.publish_tf} "
            f"safety={cfg.publish_safety_functions}"
        )

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------
    def _on_twist(self, msg: Twist) -> None:
        self.controller.submit_velocity_command(twist_msg_to_command(msg))

    def _on_wheel_speeds(self, msg: Point) -> None:
        self.controller.submit_velocity_command(point_msg_to_wheel_speeds(msg))

    def _on_soft_brake(self, msg: String) -> None:
        self.controller.submit_brake_text(msg.data)

    # -------------------------------------------------------------------------
    # Controller outputs
    # -------------------------------------------------------------------------
    def _publish_odometry(self, sample: OdometrySample) -> None:
        stamp = self.get_clock().now().to_msg()
        if self._odom_pub is not None:
            self._odom_pub.publish(odometry_sample_to_msg(sample, stamp))
        if self._tf_broadcaster is not None:
            self._tf_broadcaster.sendTransform(odometry_sample_to_transform(sample, stamp))

    def _publish_safety(self, state: SafetyState) -> None:
        if self._safety_pub is not None:
            self._safety_pub.publish(safety_state_to_msg(state))

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------
    def destroy_node(self) -> None:
        if self.controller is not None:
            self.controller.close()
        self._scheduler.destroy()
        super().destroy_node()


# =============================================================================
# Main
# =============================================================================
def main(args=None) -> int:
    rclpy.init(args=args)
    node: Optional[DiffDriveControllerNode] = None
    exit_code = 0
    try:
        node = DiffDriveControllerNode()
        exit_code = node.build_result.exit_code
        if node.build_result.ok:
            rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        if node is not None:
            node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
