#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/version.py
------------------------------------
Version and package metadata helpers for the `swd_diff_drive` package.

Imported by the controller node (startup banner), the smoke-test CLI and tests.
No ROS imports, no external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Tuple


# =============================================================================
# Semantic Version (edit here for releases)
# =============================================================================
VERSION_MAJOR: Final[int] = 1
VERSION_MINOR: Final[int] = 2
VERSION_PATCH: Final[int] = 0

# Optional prerelease / build metadata (SemVer-style), e.g. "rc.1" / "20261016"
PRERELEASE: Final[str] = ""
BUILD_METADATA: Final[str] = ""


# =============================================================================
# Package Identity Metadata
# =============================================================================
PACKAGE_NAME: Final[str] = "swd_diff_drive"
ROBOT_NAME: Final[str] = "SWD Base"
SUPPORTED_ROS_DISTRO: Final[str] = "jazzy"


def _build_version_string() -> str:
    base = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

    if PRERELEASE.strip():
        base += f"-{PRERELEASE.strip()}"

    if BUILD_METADATA.strip():
        base += f"+{BUILD_METADATA.strip()}"

    return base


__version__: Final[str] = _build_version_string()
VERSION: Final[str] = __version__
VERSION_TUPLE: Final[Tuple[int, int, int]] = (VERSION_MAJOR, VERSION_MINOR, VERSION_PATCH)


@dataclass(frozen=True)
class PackageVersionInfo:
    package_name: str
    robot_name: str
    version: str
    ros_distro: str

    def to_dict(self) -> dict:
        return {
            "package_name": self.package_name,
            "robot_name": self.robot_name,
            "version": self.version,
            "ros_distro": self.ros_distro,
        }

    def banner(self) -> str:
        return (
            f"{self.robot_name} | {self.package_name} {self.version} "
            f"(ROS 2 {self.ros_distro})"
        )


def get_version() -> str:
    """Return package version string (SemVer-style)."""
    return VERSION


def get_package_version_info() -> PackageVersionInfo:
    """Return structured package version metadata."""
    return PackageVersionInfo(
        package_name=PACKAGE_NAME,
        robot_name=ROBOT_NAME,
        version=VERSION,
        ros_distro=SUPPORTED_ROS_DISTRO,
    )


__all__ = [
    "__version__",
    "VERSION",
    "VERSION_TUPLE",
    "PACKAGE_NAME",
    "ROBOT_NAME",
    "SUPPORTED_ROS_DISTRO",
    "PackageVersionInfo",
    "get_version",
    "get_package_version_info",
]
