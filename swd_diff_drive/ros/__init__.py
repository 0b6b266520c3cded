# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/ros/__init__.py
-----------------------------------------
ROS 2 glue (rclpy, message adapters, QoS, parameters, timers).

Submodules import rclpy / message packages; import them explicitly:

    from swd_diff_drive.ros.adapters import odometry_sample_to_msg
    from swd_diff_drive.ros.timer_scheduler import RosTimerScheduler
"""
