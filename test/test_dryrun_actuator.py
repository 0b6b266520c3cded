# -*- coding: utf-8 -*-

import math

import pytest

from swd_diff_drive.drivers.actuator import PowerState
from swd_diff_drive.drivers.dryrun_actuator import DryRunActuator, wrap_int32
from swd_diff_drive.exceptions import (
    ActuatorClosedError,
    ActuatorInitError,
    PositionReadError,
    SetpointWriteError,
)


class FakeClock:
    def __init__(self):
        self.t = 0.0

    def __call__(self):
        return self.t


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def act(clock):
    a = DryRunActuator(name="left", clock=clock)
    a.init({"diameter_m": 0.2, "gear_reduction": 14.0})
    return a


def test_position_integrates_only_when_enabled(act, clock):
    act.set_target_velocity(840)  # 1 wheel rev/s
    clock.t = 1.0
    assert act.get_position_value() == 0

    act.request_operation_enabled()
    clock.t = 2.0
    assert act.get_position_value() == round(math.pi * 200.0)


def test_halt_stops_motion(act, clock):
    act.request_operation_enabled()
    act.set_target_velocity(840)
    act.set_halt(True)
    clock.t = 1.0
    assert act.get_position_value() == 0
    assert act.halted


def test_fault_is_not_cleared_by_enable_request(act):
    act.set_power_state(PowerState.FAULT)
    act.request_operation_enabled()
    assert act.get_power_stage_state() is PowerState.FAULT
    assert act.enable_request_count == 1


def test_position_counter_wraps_like_int32(act):
    act.set_position_mm(2**31 + 10)
    assert act.get_position_value() == -(2**31) + 10
    assert wrap_int32(2**31 - 1) == 2**31 - 1
    assert wrap_int32(-(2**31) - 1) == 2**31 - 1


def test_injected_failures_are_typed_and_counted(act):
    act.inject_failure("get_position_value", count=2)
    for _ in range(2):
        with pytest.raises(PositionReadError):
            act.get_position_value()
    assert act.get_position_value() == 0

    act.inject_failure("set_target_velocity", count=None)
    for _ in range(3):
        with pytest.raises(SetpointWriteError):
            act.set_target_velocity(10)
    act.clear_failures()
    act.set_target_velocity(10)
    assert act.target_rpm == 10


def test_unknown_failure_operation_rejected(act):
    with pytest.raises(ValueError):
        act.inject_failure("explode")


def test_closed_actuator_rejects_calls(act):
    act.set_target_velocity(100)
    act.close()
    assert not act.is_open
    assert act.target_rpm == 0
    with pytest.raises(ActuatorClosedError):
        act.get_position_value()
    act.close()


def test_init_options(clock):
    a = DryRunActuator(name="right", clock=clock)
    a.init({"gear_reduction": 10.0, "initial_position_mm": 77, "power_state": "operation_enabled"})
    assert a.get_position_value() == 77
    assert a.get_power_stage_state() is PowerState.OPERATION_ENABLED

    with pytest.raises(ActuatorInitError):
        DryRunActuator(name="x").init({"fail_init": True})
    with pytest.raises(ActuatorInitError):
        DryRunActuator(name="x").init({"power_state": "SLEEPING"})
    with pytest.raises(ActuatorInitError):
        DryRunActuator(name="x").init({"gear_reduction": 0.0})


def test_history_and_state(act):
    act.set_target_velocity(5)
    act.set_halt(False)
    assert [c.operation for c in act.get_history()] == ["init", "set_target_velocity", "set_halt"]
    assert act.get_history("set_halt")[0].value is False
    state = act.get_state_dict()
    assert state["target_rpm"] == 5
    assert "left(" in act.summary()
