# -*- coding: utf-8 -*-

import pytest

from swd_diff_drive.exceptions import ConfigurationError
from swd_diff_drive.models.controller_config import ControlMode, ControllerConfig, ReferenceWheel

from conftest import RecordingLogger, make_config, make_wheel


class RecordingLoader:
    def __init__(self):
        self.calls = []

    def __call__(self, path, name):
        self.calls.append((path, name))
        return make_wheel(name)


def _params(**overrides):
    params = {
        "baseline_m": 0.485,
        "pub_freq_hz": 50,
        "left_config_file": "/cfg/left.yaml",
        "right_config_file": "/cfg/right.yaml",
    }
    params.update(overrides)
    return params


def test_defaults():
    loader = RecordingLoader()
    cfg = ControllerConfig.from_params(_params(), wheel_loader=loader, logger=RecordingLogger())

    assert cfg.baseline_m == 0.485
    assert cfg.watchdog_receive_ms == 1000
    assert cfg.base_frame == "base_link"
    assert cfg.odom_frame == "odom"
    assert cfg.control_mode is ControlMode.TWIST
    assert cfg.reference_wheel is ReferenceWheel.RIGHT
    assert cfg.reference_sign == 1
    assert cfg.odom_period_s == pytest.approx(0.02)
    assert cfg.watchdog_timeout_s == pytest.approx(1.0)
    assert cfg.publish_odom and cfg.publish_tf and cfg.publish_safety_functions


def test_right_wheel_config_is_loaded_first():
    loader = RecordingLoader()
    ControllerConfig.from_params(_params(), wheel_loader=loader)
    assert loader.calls == [("/cfg/right.yaml", "right"), ("/cfg/left.yaml", "left")]


def test_explicit_values():
    cfg = ControllerConfig.from_params(
        _params(
            watchdog_receive_ms=250,
            base_frame="chassis",
            odom_frame="world",
            control_mode="LeftRightSpeeds",
            positive_polarity_wheel="Left",
            wheel_max_speed_rpm=120.0,
            have_backward_sls="true",
            publish_tf=False,
        ),
        wheel_loader=RecordingLoader(),
    )
    assert cfg.watchdog_receive_ms == 250
    assert cfg.base_frame == "chassis"
    assert cfg.odom_frame == "world"
    assert cfg.control_mode is ControlMode.LEFT_RIGHT_SPEEDS
    assert cfg.reference_wheel is ReferenceWheel.LEFT
    assert cfg.reference_sign == -1
    assert cfg.wheel_max_speed_rpm == 120.0
    assert cfg.have_backward_sls is True
    assert cfg.publish_tf is False


def test_legacy_parameter_names():
    cfg = ControllerConfig.from_params(
        _params(base_link="robot_base", ref_wheel="Left"),
        wheel_loader=RecordingLoader(),
    )
    assert cfg.base_frame == "robot_base"
    assert cfg.reference_wheel is ReferenceWheel.LEFT


def test_new_parameter_names_win_over_legacy():
    cfg = ControllerConfig.from_params(
        _params(base_frame="chassis", base_link="robot_base", positive_polarity_wheel="Right", ref_wheel="Left"),
        wheel_loader=RecordingLoader(),
    )
    assert cfg.base_frame == "chassis"
    assert cfg.reference_wheel is ReferenceWheel.RIGHT


def test_invalid_enum_falls_back_with_warning():
    log = RecordingLogger()
    cfg = ControllerConfig.from_params(
        _params(control_mode="Joystick", positive_polarity_wheel="Middle"),
        wheel_loader=RecordingLoader(),
        logger=log,
    )
    assert cfg.control_mode is ControlMode.TWIST
    assert cfg.reference_wheel is ReferenceWheel.RIGHT
    warnings = log.messages("warn")
    assert len(warnings) == 2
    assert "control_mode" in warnings[0]


@pytest.mark.parametrize("baseline", [0.0, -0.3, "abc", float("nan")])
def test_bad_baseline_fails_before_loading_files(baseline):
    loader = RecordingLoader()
    with pytest.raises(ConfigurationError):
        ControllerConfig.from_params(_params(baseline_m=baseline), wheel_loader=loader)
    assert loader.calls == []


def test_bad_frequency_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        ControllerConfig.from_params(_params(pub_freq_hz=0), wheel_loader=RecordingLoader())
    assert exc_info.value.context.parameter == "pub_freq_hz"


@pytest.mark.parametrize("missing", ["right_config_file", "left_config_file"])
def test_missing_wheel_config_path(missing):
    with pytest.raises(ConfigurationError) as exc_info:
        ControllerConfig.from_params(_params(**{missing: ""}), wheel_loader=RecordingLoader())
    assert f"Please specify the {missing} parameter" in str(exc_info.value)


def test_type_errors_rejected():
    with pytest.raises(ConfigurationError):
        ControllerConfig.from_params(_params(watchdog_receive_ms=True), wheel_loader=RecordingLoader())
    with pytest.raises(ConfigurationError):
        ControllerConfig.from_params(_params(publish_odom="maybe"), wheel_loader=RecordingLoader())


def test_direct_construction_validates():
    with pytest.raises(ConfigurationError):
        make_config(watchdog_receive_ms=-1)
    with pytest.raises(ConfigurationError):
        make_config(odom_frame=" ")
    with pytest.raises(ConfigurationError):
        make_config(wheel_safety_limited_speed_rpm=-5.0)


def test_watchdog_zero_disables():
    assert not make_config(watchdog_receive_ms=0).watchdog_enabled


def test_to_dict_round_trips_enums_as_text():
    d = make_config(control_mode=ControlMode.LEFT_RIGHT_SPEEDS).to_dict()
    assert d["control_mode"] == "LeftRightSpeeds"
    assert d["reference_wheel"] == "Right"
    assert d["left_wheel"]["gear_reduction"] == 14.0
