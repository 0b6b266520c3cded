# -*- coding: utf-8 -*-

from swd_diff_drive.drivers.actuator import PowerState
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator
from swd_diff_drive.safety.power_state_supervisor import PowerStateSupervisor

from conftest import RecordingLogger


def _setup(left_state=PowerState.SWITCH_ON_DISABLED, right_state=PowerState.SWITCH_ON_DISABLED):
    left = DryRunActuator(name="left", power_state=left_state)
    right = DryRunActuator(name="right", power_state=right_state)
    log = RecordingLogger()
    return left, right, PowerStateSupervisor(left, right, logger=log), log


def test_requests_enable_when_no_wheel_is_operational():
    left, right, sup, _ = _setup()

    result = sup.tick()

    assert result.enable_requested
    assert result.request_errors == ()
    assert left.enable_request_count == 1
    assert right.enable_request_count == 1
    assert left.get_power_stage_state() is PowerState.OPERATION_ENABLED


def test_no_request_while_one_wheel_is_operational():
    left, right, sup, _ = _setup(right_state=PowerState.OPERATION_ENABLED)

    result = sup.tick()

    assert not result.enable_requested
    assert result.any_operational
    assert left.enable_request_count == 0
    assert right.enable_request_count == 0


def test_read_failure_counts_as_not_operational():
    left, right, sup, log = _setup(right_state=PowerState.FAULT)
    left.inject_failure("get_power_stage_state")

    result = sup.tick()

    assert result.left_state is None
    assert result.enable_requested
    assert sup.read_error_count == 1
    assert len(log.messages("error")) == 1
    # FAULT is not cleared by an enable request
    assert right.get_power_stage_state() is PowerState.FAULT


def test_left_request_failure_still_requests_right():
    left, right, sup, log = _setup()
    left.inject_failure("request_operation_enabled")

    result = sup.tick()

    assert result.request_errors == ("left",)
    assert left.enable_request_count == 0
    assert right.enable_request_count == 1
    assert sup.request_count == 2
    assert len(log.messages("error")) == 1


def test_steady_state_is_quiet():
    left, right, sup, log = _setup()
    sup.tick()
    log.clear()

    for _ in range(5):
        assert not sup.tick().enable_requested
    assert sup.tick_count == 6
    assert log.records == []
