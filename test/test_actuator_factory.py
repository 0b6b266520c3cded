# -*- coding: utf-8 -*-

import pytest

import swd_diff_drive.drivers.actuator_factory as factory
from swd_diff_drive.drivers.actuator_factory import (
    create_actuator,
    create_wheel_actuators,
    load_wheel_config,
)
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator
from swd_diff_drive.exceptions import ActuatorInitError, UnsupportedActuatorBackendError
from swd_diff_drive.models.wheel_config import WheelConfig


def _write(tmp_path, body, name="wheel.yaml"):
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")
    return str(path)


def test_load_flat_wheel_config(tmp_path):
    path = _write(tmp_path, "diameter_mm: 180\nreduction: 20\noptions:\n  initial_position_mm: 5\n")
    cfg = load_wheel_config(path, "left")

    assert cfg.name == "left"
    assert cfg.diameter_m == pytest.approx(0.18)
    assert cfg.gear_reduction == 20.0
    assert cfg.backend is None
    assert cfg.options == {"initial_position_mm": 5}
    assert cfg.config_file == path


def test_load_nested_wheel_config(wheel_files):
    _, right = wheel_files
    cfg = load_wheel_config(right, "right")
    assert cfg.diameter_m == pytest.approx(0.2)
    assert cfg.backend == "dryrun"


def test_missing_file(tmp_path):
    with pytest.raises(ActuatorInitError) as exc_info:
        load_wheel_config(str(tmp_path / "nope.yaml"), "right")
    assert "right" in str(exc_info.value)


@pytest.mark.parametrize(
    "body",
    [
        "diameter_mm: [unclosed\n",
        "- just\n- a list\n",
        "reduction: 14\n",
        "diameter_mm: 200\n",
        "diameter_mm: -200\nreduction: 14\n",
        "diameter_mm: 200\nreduction: 14\noptions: 3\n",
    ],
)
def test_invalid_wheel_configs(tmp_path, body):
    with pytest.raises(ActuatorInitError):
        load_wheel_config(_write(tmp_path, body), "left")


def test_create_dryrun_actuator_applies_options():
    cfg = WheelConfig(
        name="left",
        diameter_m=0.2,
        gear_reduction=14.0,
        options={"initial_position_mm": 1234},
    )
    act = create_actuator(cfg, clock=lambda: 0.0)

    assert isinstance(act, DryRunActuator)
    assert act.gear_reduction == 14.0
    assert act.get_position_value() == 1234


def test_wheel_backend_overrides_default():
    cfg = WheelConfig(name="left", diameter_m=0.2, gear_reduction=14.0, backend="dryrun")
    assert isinstance(create_actuator(cfg, default_backend="plugin"), DryRunActuator)


def test_unknown_backend():
    cfg = WheelConfig(name="left", diameter_m=0.2, gear_reduction=14.0, backend="canopen")
    with pytest.raises(UnsupportedActuatorBackendError):
        create_actuator(cfg)


@pytest.mark.parametrize(
    "plugin",
    [
        "",
        "no_colon_here",
        "swd_diff_drive.missing_module:Thing",
        "swd_diff_drive.drivers.dryrun_actuator:Missing",
        "swd_diff_drive.models.wheel_config:WheelConfig",
    ],
)
def test_bad_plugin_paths(plugin):
    cfg = WheelConfig(name="right", diameter_m=0.2, gear_reduction=14.0, backend="plugin", plugin=plugin)
    with pytest.raises(UnsupportedActuatorBackendError):
        create_actuator(cfg)


def test_plugin_backend_loads_class():
    cfg = WheelConfig(
        name="right",
        diameter_m=0.2,
        gear_reduction=10.0,
        backend="plugin",
        plugin="swd_diff_drive.drivers.dryrun_actuator:DryRunActuator",
    )
    act = create_actuator(cfg)
    assert isinstance(act, DryRunActuator)
    assert act.name == "right"
    assert act.gear_reduction == 10.0


def test_init_failure_is_reported():
    cfg = WheelConfig(name="left", diameter_m=0.2, gear_reduction=14.0, options={"fail_init": True})
    with pytest.raises(ActuatorInitError):
        create_actuator(cfg)


def test_left_failure_closes_right(monkeypatch):
    closed = []

    class TrackingActuator(DryRunActuator):
        def close(self):
            closed.append(self.name)
            super().close()

    monkeypatch.setattr(factory, "DryRunActuator", TrackingActuator)
    right = WheelConfig(name="right", diameter_m=0.2, gear_reduction=14.0)
    left = WheelConfig(name="left", diameter_m=0.2, gear_reduction=14.0, options={"fail_init": True})

    with pytest.raises(ActuatorInitError):
        create_wheel_actuators(left, right)
    assert closed == ["right"]
