#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/utils/logging.py
------------------------------------------
Lightweight logging helpers for `swd_diff_drive`.

Controller components log through a `LoggerAdapter` so the same code runs:
- inside the ROS 2 node (rclpy node logger), or
- in plain Python (tests, offline simulation) via a stdlib logger

Typical usage
-------------
from swd_diff_drive.utils.logging import get_logger_adapter

logger = get_logger_adapter(self)   # self can be a ROS 2 node
logger.info("Left actuator initialized")
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional


_LEVEL_DEBUG = "DEBUG"
_LEVEL_INFO = "INFO"
_LEVEL_WARN = "WARN"
_LEVEL_ERROR = "ERROR"

DEFAULT_LOGGER_NAME = "swd_diff_drive"


def _stringify_message(msg: Any) -> str:
    try:
        return str(msg)
    except Exception:
        return "<unprintable message>"


def _ensure_std_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Return a configured stdlib logger (idempotent).

    Child loggers (e.g. "swd_diff_drive.safety") propagate to the package
    logger, which owns the single stdout handler.
    """
    root_name = name.split(".", 1)[0]
    root = logging.getLogger(root_name)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return logging.getLogger(name)


@dataclass
class LoggerAdapter:
    """
    Hides whether the underlying logger is a ROS 2 logger or a stdlib
    `logging.Logger`. Methods follow the ROS logger style: debug/info/warn/error.
    """
    target: Any = None
    name: str = DEFAULT_LOGGER_NAME

    def __post_init__(self) -> None:
        if self.target is None:
            self.target = _ensure_std_logger(self.name)

    @property
    def is_std_logger(self) -> bool:
        return isinstance(self.target, logging.Logger)

    def _emit(self, level: str, msg: Any) -> None:
        text = _stringify_message(msg)

        if self.is_std_logger:
            if level == _LEVEL_DEBUG:
                self.target.debug(text)
            elif level == _LEVEL_INFO:
                self.target.info(text)
            elif level == _LEVEL_WARN:
                self.target.warning(text)
            else:
                self.target.error(text)
            return

        # rclpy RcutilsLogger (or any duck-typed logger with the ROS method names)
        if level == _LEVEL_DEBUG:
            self.target.debug(text)
        elif level == _LEVEL_INFO:
            self.target.info(text)
        elif level == _LEVEL_WARN:
            self.target.warn(text)
        else:
            self.target.error(text)

    def debug(self, msg: Any) -> None:
        self._emit(_LEVEL_DEBUG, msg)

    def info(self, msg: Any) -> None:
        self._emit(_LEVEL_INFO, msg)

    def warn(self, msg: Any) -> None:
        self._emit(_LEVEL_WARN, msg)

    def error(self, msg: Any) -> None:
        self._emit(_LEVEL_ERROR, msg)


def get_logger_adapter(source: Any = None, *, name: str = DEFAULT_LOGGER_NAME) -> LoggerAdapter:
    """
    Create a LoggerAdapter from a source object.

    Supported sources
    -----------------
    - LoggerAdapter (returned unchanged)
    - ROS 2 Node (`source.get_logger()`)
    - ROS 2 logger directly
    - stdlib logging.Logger
    - None (stdlib logger `name`)
    """
    if isinstance(source, LoggerAdapter):
        return source
    if source is None:
        return LoggerAdapter(target=_ensure_std_logger(name), name=name)
    if hasattr(source, "get_logger") and callable(source.get_logger):
        return LoggerAdapter(target=source.get_logger(), name=name)
    return LoggerAdapter(target=source, name=name)


def format_kv(**kwargs: Any) -> str:
    """
    format_kv(wheel="left", rpm=120) -> "wheel=left rpm=120"
    """
    return " ".join(f"{k}={v}" for k, v in kwargs.items())


def log_exception(
    logger: LoggerAdapter,
    exc: BaseException,
    *,
    message: str = "Unhandled exception",
    component: Optional[str] = None,
    level: str = _LEVEL_ERROR,
) -> None:
    """
    Emit a compact exception log line (no traceback; these fire in periodic loops).
    """
    text = f"{message} | {exc.__class__.__name__}: {exc}"
    if component:
        text = f"[{component}] {text}"
    if level == _LEVEL_WARN:
        logger.warn(text)
    else:
        logger.error(text)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "LoggerAdapter",
    "get_logger_adapter",
    "format_kv",
    "log_exception",
]
