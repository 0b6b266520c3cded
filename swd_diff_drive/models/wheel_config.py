#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SWD Base — swd_diff_drive/models/wheel_config.py
------------------------------------------------
Per-wheel actuator configuration (geometry + opaque backend options).

One instance per wheel, built once from the wheel's YAML config file by
`swd_diff_drive.drivers.actuator_factory.load_wheel_config` and never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from swd_diff_drive.exceptions import ActuatorInitError, ActuatorErrorContext


@dataclass(frozen=True)
class WheelConfig:
    """
    Geometry and actuator options of one drive wheel.

    diameter_m      wheel diameter (m, > 0)
    gear_reduction  motor revolutions per wheel revolution (> 0)
    backend         actuator backend name ("dryrun", "plugin", ...)
    plugin          "package.module:ClassName" when backend == "plugin"
    options         opaque mapping handed to `Actuator.init`
    """
    name: str
    diameter_m: float
    gear_reduction: float
    config_file: str = ""
    backend: Optional[str] = None
    plugin: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for attr in ("diameter_m", "gear_reduction"):
            v = getattr(self, attr)
            if not isinstance(v, (int, float)) or not math.isfinite(v) or v <= 0.0:
                raise ActuatorInitError(
                    f"Invalid {attr} in {self.name} wheel config, must be > 0",
                    context=ActuatorErrorContext(
                        wheel=self.name, parameter=attr, value=repr(v)
                    ),
                )

    @property
    def radius_m(self) -> float:
        return 0.5 * self.diameter_m

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        name: str,
        config_file: str = "",
    ) -> "WheelConfig":
        """
        Build from a parsed wheel config file.

        Accepted keys: `diameter_mm` or `diameter_m`, `reduction` (alias
        `gear_reduction`), optional `backend`, `plugin`, `options`.
        """
        if "diameter_m" in data:
            diameter_m = _as_float(data["diameter_m"], name, "diameter_m")
        elif "diameter_mm" in data:
            diameter_m = _as_float(data["diameter_mm"], name, "diameter_mm") * 1e-3
        else:
            raise ActuatorInitError(
                f"Missing wheel diameter in {name} wheel config <{config_file}>",
                context=ActuatorErrorContext(wheel=name, parameter="diameter_mm"),
            )

        reduction_raw = data.get("reduction", data.get("gear_reduction"))
        if reduction_raw is None:
            raise ActuatorInitError(
                f"Missing gear reduction in {name} wheel config <{config_file}>",
                context=ActuatorErrorContext(wheel=name, parameter="reduction"),
            )

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise ActuatorInitError(
                f"'options' must be a mapping in {name} wheel config <{config_file}>",
                context=ActuatorErrorContext(wheel=name, parameter="options"),
            )

        backend = data.get("backend")
        return cls(
            name=name,
            diameter_m=diameter_m,
            gear_reduction=_as_float(reduction_raw, name, "reduction"),
            config_file=str(config_file),
            backend=None if backend is None else str(backend).strip().lower(),
            plugin=str(data.get("plugin") or ""),
            options=dict(options),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "diameter_m": self.diameter_m,
            "gear_reduction": self.gear_reduction,
            "config_file": self.config_file,
            "backend": self.backend,
            "plugin": self.plugin,
            "options": dict(self.options),
        }


def _as_float(value: Any, wheel: str, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ActuatorInitError(
            f"{key} must be a number in {wheel} wheel config, got {value!r}",
            context=ActuatorErrorContext(wheel=wheel, parameter=key),
            cause=e,
        ) from e


__all__ = ["WheelConfig"]
