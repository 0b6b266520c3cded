#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/ros/timer_scheduler.py
------------------------------------------------
`Scheduler` implementation backed by rclpy node timers.

All timers share the node's default (mutually exclusive) callback group and
the node is spun by a single-threaded executor, so timer callbacks and
subscription callbacks never run concurrently.

One-shot timers are periodic rclpy timers that cancel themselves right before
running their callback; `reset()` re-arms them (rclpy `Timer.reset()` restarts
the countdown and clears the canceled flag).
"""

from __future__ import annotations

from typing import Any, List

from rclpy.node import Node

from swd_diff_drive.utils.scheduler import TimerCallback


class RosTimerHandle:
    def __init__(self, timer: Any) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()

    def reset(self) -> None:
        self._timer.reset()

    def is_canceled(self) -> bool:
        return bool(self._timer.is_canceled())


class RosTimerScheduler:
    def __init__(self, node: Node) -> None:
        self._node = node
        self._timers: List[Any] = []

    def now_s(self) -> float:
        return self._node.get_clock().now().nanoseconds / 1e9

    def create_periodic(self, period_s: float, callback: TimerCallback) -> RosTimerHandle:
        timer = self._node.create_timer(float(period_s), callback)
        self._timers.append(timer)
        return RosTimerHandle(timer)

    def create_one_shot(self, delay_s: float, callback: TimerCallback) -> RosTimerHandle:
        holder: List[Any] = []

        def _fire() -> None:
            holder[0].cancel()
            callback()

        timer = self._node.create_timer(float(delay_s), _fire)
        holder.append(timer)
        self._timers.append(timer)
        return RosTimerHandle(timer)

    def destroy(self) -> None:
        """Cancel and destroy every timer created through this scheduler."""
        for timer in self._timers:
            timer.cancel()
            self._node.destroy_timer(timer)
        self._timers = []


__all__ = [
    "RosTimerHandle",
    "RosTimerScheduler",
]
