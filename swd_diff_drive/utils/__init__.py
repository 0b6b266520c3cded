# -*- coding: utf-8 -*-
"""
SWD Base — swd_diff_drive/utils/__init__.py
-------------------------------------------
Shared helpers: logging adapter and cooperative scheduler.

Example
-------
    from swd_diff_drive.utils import get_logger_adapter, ManualScheduler
"""

from __future__ import annotations

from .logging import (
    DEFAULT_LOGGER_NAME,
    LoggerAdapter,
    format_kv,
    get_logger_adapter,
    log_exception,
)
from .scheduler import (
    ManualScheduler,
    ManualTimer,
    Scheduler,
    TimerCallback,
    TimerHandle,
)

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "LoggerAdapter",
    "format_kv",
    "get_logger_adapter",
    "log_exception",
    "ManualScheduler",
    "ManualTimer",
    "Scheduler",
    "TimerCallback",
    "TimerHandle",
]
