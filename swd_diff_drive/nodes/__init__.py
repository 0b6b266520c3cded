# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/nodes/__init__.py
-------------------------------------------
ROS 2 node executables (`ros2 run swd_diff_drive diff_drive_controller_node`).
"""
