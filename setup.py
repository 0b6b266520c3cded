# setup.py
# SWD Base — swd_diff_drive (ROS 2 Jazzy)
#
# ament_python package:
# - swd_diff_drive core (ROS-free controller, kinematics, odometry, safety)
# - ROS glue + diff_drive_controller_node
#
# Notes:
# - Wheel config files live under config/wheels/ and are installed with config/.
# - launch/config folders are installed if present.

from setuptools import find_packages, setup
from glob import glob
import os

package_name = "swd_diff_drive"


def _maybe_glob(pattern: str):
    """Return glob(pattern) if any files exist; otherwise return empty list."""
    return glob(pattern) or []


setup(
    name=package_name,
    version="1.2.0",
    packages=find_packages(exclude=["test", "test.*"]),
    data_files=[
        # ament index resource marker + package manifest
        ("share/ament_index/resource_index/packages", [os.path.join("resource", package_name)]),
        ("share/" + package_name, ["package.xml"]),

        # launch + config
        (os.path.join("share", package_name, "launch"), _maybe_glob("launch/*.py")),
        (os.path.join("share", package_name, "config"), _maybe_glob("config/*.yaml") + _maybe_glob("config/*.yml")),
        (os.path.join("share", package_name, "config", "wheels"), _maybe_glob("config/wheels/*.yaml")),

        # operator tools, run as `ros2 run swd_diff_drive <script>.py`
        (os.path.join("lib", package_name), _maybe_glob("scripts/*.py")),
    ],
    install_requires=["setuptools", "PyYAML"],
    extras_require={"test": ["pytest"]},
    zip_safe=True,
    maintainer="Ahnaf Tahmid",
    maintainer_email="tahmidahnaf998@gmail.com",
    description=(
        "SWD Base differential-drive controller: twist / wheel-speed commands to motor setpoints, "
        "wheel odometry, command watchdog and drive safety function reporting."
    ),
    license="Proprietary",
    entry_points={
        "console_scripts": [
            "diff_drive_controller_node = swd_diff_drive.nodes.diff_drive_controller_node:main",
        ],
    },
)
