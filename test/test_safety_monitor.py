# -*- coding: utf-8 -*-

import pytest

from swd_diff_drive.drivers.actuator import SafetyFunctionId
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator
from swd_diff_drive.models.controller_config import ReferenceWheel
from swd_diff_drive.safety.safety_monitor import SafetyMonitor, sdi_function_ids

from conftest import RecordingLogger


@pytest.fixture
def wheels():
    return DryRunActuator(name="left"), DryRunActuator(name="right")


def _monitor(wheels, reference_wheel=ReferenceWheel.RIGHT):
    log = RecordingLogger()
    left, right = wheels
    mon = SafetyMonitor(left, right, reference_wheel=reference_wheel, clock=lambda: 42.0, logger=log)
    return mon, log


def test_all_clear(wheels):
    mon, log = _monitor(wheels)
    result = mon.poll()

    assert not result.state.any_active
    assert result.ok
    assert result.state.stamp_s == 42.0
    assert log.messages("warn") == []


def test_functions_are_or_of_both_wheels(wheels):
    left, right = wheels
    right.set_safety_function(SafetyFunctionId.SLS_1)
    left.set_safety_function(SafetyFunctionId.SDIP_1)
    mon, _ = _monitor(wheels)

    state = mon.poll(stamp_s=1.5).state

    assert state.safe_limit_speed
    assert state.safe_direction_indication_pos
    assert not state.safe_torque_off
    assert state.stamp_s == 1.5


def test_sto_mismatch_warns_once_per_poll(wheels):
    left, _ = wheels
    left.set_safety_function(SafetyFunctionId.STO)
    mon, log = _monitor(wheels)

    result = mon.poll()
    assert result.sto_mismatch
    assert result.state.safe_torque_off
    assert len(log.messages("warn")) == 1

    mon.poll()
    assert len(log.messages("warn")) == 2
    assert mon.mismatch_count == 2


def test_sto_agreement_does_not_warn(wheels):
    for act in wheels:
        act.set_safety_function(SafetyFunctionId.STO)
    mon, log = _monitor(wheels)

    result = mon.poll()
    assert result.state.safe_torque_off
    assert not result.sto_mismatch
    assert log.messages("warn") == []


def test_sdi_mapping_right_reference(wheels):
    left, right = wheels
    assert sdi_function_ids(ReferenceWheel.RIGHT) == (SafetyFunctionId.SDIP_1, SafetyFunctionId.SDIN_1)

    # left is read on SDI+, so an SDI- bit on the left is ignored
    left.set_safety_function(SafetyFunctionId.SDIN_1)
    mon, _ = _monitor(wheels, ReferenceWheel.RIGHT)
    assert not mon.poll().state.safe_direction_indication_pos

    right.set_safety_function(SafetyFunctionId.SDIN_1)
    assert mon.poll().state.safe_direction_indication_pos


def test_sdi_mapping_left_reference(wheels):
    left, right = wheels
    right.set_safety_function(SafetyFunctionId.SDIP_1)
    mon, _ = _monitor(wheels, ReferenceWheel.LEFT)
    assert mon.poll().state.safe_direction_indication_pos

    right.set_safety_function(SafetyFunctionId.SDIP_1, False)
    left.set_safety_function(SafetyFunctionId.SDIP_1)
    assert not mon.poll().state.safe_direction_indication_pos


def test_read_failure_counts_as_inactive(wheels):
    left, right = wheels
    right.set_safety_function(SafetyFunctionId.STO)
    left.inject_failure("get_safety_function_state", count=1)
    mon, log = _monitor(wheels)

    result = mon.poll()

    assert not result.ok
    assert result.read_errors == ("left:STO",)
    assert result.state.safe_torque_off  # right still reports it
    assert not result.sto_mismatch
    assert log.messages("warn") == []
    assert len(log.messages("error")) == 1
    assert mon.read_error_count == 1
    assert mon.latest_state == result.state
