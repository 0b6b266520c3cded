#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — scripts/drive_smoke_test_cli.py
---------------------------------------------------------
CLI smoke-test tool for `diff_drive_controller_node`.

Purpose
-------
Quickly validate the command path on real hardware or with dry-run actuators:
  cmd source -> cmd_vel / set_speed -> diff_drive_controller_node -> actuators

Also validates:
  - soft_brake text commands
  - watchdog timeout behavior (stop publishing and observe zero setpoints)

Examples
--------
# 1) Publish a zero Twist once
ros2 run swd_diff_drive drive_smoke_test_cli.py zero

# 2) Forward at low speed for 2 seconds
ros2 run swd_diff_drive drive_smoke_test_cli.py cmd --vx 0.15 --duration 2.0

# 3) Rotate in place
ros2 run swd_diff_drive drive_smoke_test_cli.py cmd --wz 0.30 --duration 2.0

# 4) Wheel speeds (LeftRightSpeeds mode), rad/s
ros2 run swd_diff_drive drive_smoke_test_cli.py wheels --left 1.0 --right 1.0 --duration 1.0

# 5) Engage / release the soft brake
ros2 run swd_diff_drive drive_smoke_test_cli.py brake --set true

# 6) Watchdog test: send command briefly then stop publishing
ros2 run swd_diff_drive drive_smoke_test_cli.py pulse --vx 0.15 --on 0.5 --off 1.5
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

import rclpy
from rclpy.executors import SingleThreadedExecutor
from rclpy.node import Node
from geometry_msgs.msg import Point, Twist
from std_msgs.msg import String

from swd_diff_drive import constants as C


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def parse_bool_text(text: str) -> bool:
    s = str(text).strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean value: {text!r}")


@dataclass
class MotionCmd:
    vx: float = 0.0
    wz: float = 0.0
    duration_s: float = 1.0
    label: str = "cmd"


# -----------------------------------------------------------------------------
# ROS CLI publisher node
# -----------------------------------------------------------------------------
class DriveSmokePublisher(Node):
    def __init__(self, *, cmd_topic: str, speed_topic: str, brake_topic: str) -> None:
        super().__init__("drive_smoke_test_cli")

        self.pub_cmd = self.create_publisher(Twist, cmd_topic, 10)
        self.pub_speed = self.create_publisher(Point, speed_topic, 10)
        self.pub_brake = self.create_publisher(String, brake_topic, 10)

        self.get_logger().info(
            "Drive smoke test CLI ready | "
            f"cmd_topic={cmd_topic} speed_topic={speed_topic} brake_topic={brake_topic}"
        )

    def publish_cmd(self, vx: float, wz: float) -> None:
        msg = Twist()
        msg.linear.x = float(vx)
        msg.angular.z = float(wz)
        self.pub_cmd.publish(msg)

    def publish_zero(self) -> None:
        self.publish_cmd(0.0, 0.0)

    def publish_wheels(self, left: float, right: float) -> None:
        msg = Point()
        msg.x = float(left)
        msg.y = float(right)
        self.pub_speed.publish(msg)

    def publish_brake(self, halt: bool) -> None:
        msg = String()
        msg.data = C.SOFT_BRAKE_ENGAGE_TEXT if halt else C.SOFT_BRAKE_RELEASE_TEXT
        self.pub_brake.publish(msg)


# -----------------------------------------------------------------------------
# Execution helpers
# -----------------------------------------------------------------------------
def spin_for(executor: SingleThreadedExecutor, duration_s: float) -> None:
    t_end = time.monotonic() + max(0.0, float(duration_s))
    while time.monotonic() < t_end and rclpy.ok():
        executor.spin_once(timeout_sec=0.0)
        time.sleep(0.02)


def publish_for_duration(
    node: DriveSmokePublisher,
    executor: SingleThreadedExecutor,
    publish,
    *,
    duration_s: float,
    rate_hz: float,
    tail=None,
) -> None:
    period = 1.0 / max(1.0, float(rate_hz))
    t_end = time.monotonic() + max(0.0, float(duration_s))
    while time.monotonic() < t_end and rclpy.ok():
        publish()
        executor.spin_once(timeout_sec=0.0)
        time.sleep(period)

    if tail is not None and rclpy.ok():
        tail()
        executor.spin_once(timeout_sec=0.0)
        node.get_logger().info("Published trailing zero command.")


def build_square_profile(speed: float, rot: float, step_s: float) -> List[MotionCmd]:
    s = float(speed)
    r = float(rot)
    d = float(step_s)
    return [
        MotionCmd(vx=0.0, wz=0.0, duration_s=0.4, label="zero"),
        MotionCmd(vx=+s, wz=0.0, duration_s=d, label="forward"),
        MotionCmd(vx=0.0, wz=+r, duration_s=d, label="rotate_ccw"),
        MotionCmd(vx=-s, wz=0.0, duration_s=d, label="reverse"),
        MotionCmd(vx=0.0, wz=-r, duration_s=d, label="rotate_cw"),
        MotionCmd(vx=+s, wz=+r, duration_s=d, label="arc_ccw"),
        MotionCmd(vx=0.0, wz=0.0, duration_s=0.4, label="zero_end"),
    ]


def run_sequence(
    node: DriveSmokePublisher,
    executor: SingleThreadedExecutor,
    cmds: Iterable[MotionCmd],
    *,
    rate_hz: float,
) -> None:
    for i, cmd in enumerate(cmds, start=1):
        node.get_logger().info(
            f"[{i}] {cmd.label}: vx={cmd.vx:.3f} wz={cmd.wz:.3f} for {cmd.duration_s:.2f}s"
        )
        publish_for_duration(
            node,
            executor,
            lambda c=cmd: node.publish_cmd(c.vx, c.wz),
            duration_s=cmd.duration_s,
            rate_hz=rate_hz,
        )
    node.publish_zero()
    node.get_logger().info("Sequence complete.")


# -----------------------------------------------------------------------------
# Argument parser
# -----------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="drive_smoke_test_cli.py",
        description="SWD Base smoke-test CLI for the differential-drive controller topics.",
    )
    p.add_argument("--cmd-topic", default=C.TOPIC_CMD_VEL, help="Twist command topic")
    p.add_argument("--speed-topic", default=C.TOPIC_SET_SPEED, help="Point wheel speed topic")
    p.add_argument("--brake-topic", default=C.TOPIC_SOFT_BRAKE, help="String soft brake topic")
    p.add_argument("--rate", type=float, default=20.0, help="Publish rate for command streams (Hz)")
    p.add_argument("--no-tail-zero", action="store_true", help="Do not publish zero after cmd/wheels/pulse")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sub.add_parser("zero", help="Publish zero Twist once (and exit)")

    p_cmd = sub.add_parser("cmd", help="Publish constant Twist for duration")
    p_cmd.add_argument("--vx", type=float, default=0.0, help="linear.x (m/s)")
    p_cmd.add_argument("--wz", type=float, default=0.0, help="angular.z (rad/s)")
    p_cmd.add_argument("--duration", type=float, default=1.0, help="seconds")

    p_wheels = sub.add_parser("wheels", help="Publish constant wheel speeds for duration")
    p_wheels.add_argument("--left", type=float, default=0.0, help="left wheel (rad/s)")
    p_wheels.add_argument("--right", type=float, default=0.0, help="right wheel (rad/s)")
    p_wheels.add_argument("--duration", type=float, default=1.0, help="seconds")

    p_pulse = sub.add_parser("pulse", help="Pulse Twist then stop publishing (watchdog test)")
    p_pulse.add_argument("--vx", type=float, default=0.15)
    p_pulse.add_argument("--wz", type=float, default=0.0)
    p_pulse.add_argument("--on", type=float, default=0.4, help="command publish duration in seconds")
    p_pulse.add_argument("--off", type=float, default=1.5, help="silent wait after pulse (observe watchdog)")

    p_brake = sub.add_parser("brake", help="Engage (true) or release (false) the soft brake")
    p_brake.add_argument("--set", type=parse_bool_text, required=True, help="true/false")

    p_seq = sub.add_parser("sequence", help="Run a low-speed forward/rotate/reverse sequence")
    p_seq.add_argument("--speed", type=float, default=0.12, help="linear command magnitude")
    p_seq.add_argument("--rot", type=float, default=0.30, help="rotation command magnitude")
    p_seq.add_argument("--step", type=float, default=1.0, help="seconds per step")

    return p


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------
def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.rate <= 0.0:
        print("ERROR: --rate must be > 0", file=sys.stderr)
        return 2
    if hasattr(args, "duration") and args.duration < 0.0:
        print("ERROR: --duration must be >= 0", file=sys.stderr)
        return 2
    for name in ("vx", "wz", "left", "right"):
        if hasattr(args, name) and not math.isfinite(getattr(args, name)):
            print(f"ERROR: --{name} must be finite", file=sys.stderr)
            return 2

    rclpy.init(args=None)
    node: Optional[DriveSmokePublisher] = None

    try:
        node = DriveSmokePublisher(
            cmd_topic=args.cmd_topic,
            speed_topic=args.speed_topic,
            brake_topic=args.brake_topic,
        )
        executor = SingleThreadedExecutor()
        executor.add_node(node)
        tail_zero = not args.no_tail_zero

        if args.subcmd == "zero":
            node.publish_zero()
            executor.spin_once(timeout_sec=0.0)
            node.get_logger().info("Published zero Twist once.")

        elif args.subcmd == "cmd":
            publish_for_duration(
                node,
                executor,
                lambda: node.publish_cmd(args.vx, args.wz),
                duration_s=args.duration,
                rate_hz=args.rate,
                tail=node.publish_zero if tail_zero else None,
            )

        elif args.subcmd == "wheels":
            publish_for_duration(
                node,
                executor,
                lambda: node.publish_wheels(args.left, args.right),
                duration_s=args.duration,
                rate_hz=args.rate,
                tail=(lambda: node.publish_wheels(0.0, 0.0)) if tail_zero else None,
            )

        elif args.subcmd == "pulse":
            publish_for_duration(
                node,
                executor,
                lambda: node.publish_cmd(args.vx, args.wz),
                duration_s=args.on,
                rate_hz=args.rate,
            )
            node.get_logger().info(
                f"Pulse complete. Silent waiting for {float(args.off):.2f}s "
                "(observe watchdog zero setpoints on diff_drive_controller)."
            )
            spin_for(executor, args.off)

        elif args.subcmd == "brake":
            node.publish_brake(bool(args.set))
            executor.spin_once(timeout_sec=0.0)
            node.get_logger().info(f"Published soft brake: {'engage' if args.set else 'release'}")

        elif args.subcmd == "sequence":
            run_sequence(
                node,
                executor,
                build_square_profile(args.speed, args.rot, args.step),
                rate_hz=args.rate,
            )

        # let the last messages leave before shutdown
        spin_for(executor, 0.2)
        return 0

    except KeyboardInterrupt:
        if node is not None:
            node.publish_zero()
        return 130
    finally:
        if node is not None:
            node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == "__main__":
    sys.exit(main())
