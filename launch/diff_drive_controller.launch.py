#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — Differential Drive Controller Launch (swd_diff_drive)
----------------------------------------------------------------
Starts `diff_drive_controller_node` with the packaged parameter file and the
two packaged wheel config files.

Examples
--------
# Default (dry-run actuators, Twist on cmd_vel)
ros2 launch swd_diff_drive diff_drive_controller.launch.py

# Wheel speed input on set_speed
ros2 launch swd_diff_drive diff_drive_controller.launch.py control_mode:=LeftRightSpeeds

# Custom wheel configs
ros2 launch swd_diff_drive diff_drive_controller.launch.py \
    left_config_file:=/etc/swd/left.yaml right_config_file:=/etc/swd/right.yaml
"""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument, LogInfo
from launch.substitutions import LaunchConfiguration, PathJoinSubstitution
from launch_ros.actions import Node
from launch_ros.substitutions import FindPackageShare


def generate_launch_description() -> LaunchDescription:
    pkg_share = FindPackageShare("swd_diff_drive")

    params_file = LaunchConfiguration("params_file")
    left_config_file = LaunchConfiguration("left_config_file")
    right_config_file = LaunchConfiguration("right_config_file")
    control_mode = LaunchConfiguration("control_mode")
    actuator_backend = LaunchConfiguration("actuator_backend")
    namespace = LaunchConfiguration("namespace")

    return LaunchDescription([
        DeclareLaunchArgument(
            "params_file",
            default_value=PathJoinSubstitution([pkg_share, "config", "diff_drive_controller.yaml"]),
            description="Controller parameter file",
        ),
        DeclareLaunchArgument(
            "left_config_file",
            default_value=PathJoinSubstitution([pkg_share, "config", "wheels", "left_wheel.yaml"]),
            description="Left wheel config file",
        ),
        DeclareLaunchArgument(
            "right_config_file",
            default_value=PathJoinSubstitution([pkg_share, "config", "wheels", "right_wheel.yaml"]),
            description="Right wheel config file",
        ),
        DeclareLaunchArgument(
            "control_mode",
            default_value="Twist",
            description="Twist | LeftRightSpeeds",
        ),
        DeclareLaunchArgument(
            "actuator_backend",
            default_value="dryrun",
            description="Default actuator backend when a wheel config names none",
        ),
        DeclareLaunchArgument("namespace", default_value="", description="Node namespace"),

        LogInfo(msg=["[swd_diff_drive] params: ", params_file]),

        Node(
            package="swd_diff_drive",
            executable="diff_drive_controller_node",
            name="diff_drive_controller",
            namespace=namespace,
            output="screen",
            emulate_tty=True,
            parameters=[
                params_file,
                {
                    "left_config_file": left_config_file,
                    "right_config_file": right_config_file,
                    "control_mode": control_mode,
                    "actuator_backend": actuator_backend,
                },
            ],
        ),
    ])
