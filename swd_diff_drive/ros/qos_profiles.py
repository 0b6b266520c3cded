#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/ros/qos_profiles.py
---------------------------------------------
ROS 2 Jazzy QoS profiles for the differential-drive controller node.

Centralizes the QoS choices of the controller's topics so publishers and
subscribers stay consistent (QoS mismatches fail silently in ROS 2):
- commands: cmd_vel / set_speed / soft_brake  (RELIABLE, depth 5)
- outputs:  odom / safety                     (RELIABLE, depth 5)
"""

from __future__ import annotations

from rclpy.qos import (
    QoSProfile,
    ReliabilityPolicy,
    DurabilityPolicy,
    HistoryPolicy,
    LivelinessPolicy,
)

from swd_diff_drive import constants as C


# =============================================================================
# Low-level builders
# =============================================================================
def make_qos(
    *,
    depth: int,
    reliability: ReliabilityPolicy,
    durability: DurabilityPolicy = DurabilityPolicy.VOLATILE,
    history: HistoryPolicy = HistoryPolicy.KEEP_LAST,
    liveliness: LivelinessPolicy = LivelinessPolicy.AUTOMATIC,
) -> QoSProfile:
    """
    Build a QoSProfile with consistent explicit fields (depth clamped to >= 1).
    """
    depth_i = int(depth)
    if depth_i < 1:
        depth_i = 1

    return QoSProfile(
        history=history,
        depth=depth_i,
        reliability=reliability,
        durability=durability,
        liveliness=liveliness,
    )


# =============================================================================
# Named QoS profiles
# =============================================================================
# Velocity + brake commands; keep the latest few, never drop silently
QOS_COMMAND = make_qos(
    depth=C.QOS_DEPTH_COMMAND,
    reliability=ReliabilityPolicy.RELIABLE,
)

# Odometry and safety snapshots
QOS_OUTPUT = make_qos(
    depth=C.QOS_DEPTH_OUTPUT,
    reliability=ReliabilityPolicy.RELIABLE,
)


def qos_command(depth: int = C.QOS_DEPTH_COMMAND) -> QoSProfile:
    return make_qos(depth=depth, reliability=QOS_COMMAND.reliability)


def qos_output(depth: int = C.QOS_DEPTH_OUTPUT) -> QoSProfile:
    return make_qos(depth=depth, reliability=QOS_OUTPUT.reliability)


__all__ = [
    "make_qos",
    "QOS_COMMAND",
    "QOS_OUTPUT",
    "qos_command",
    "qos_output",
]
