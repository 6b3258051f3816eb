import math

import pytest

from spacetime_sim.core.config import SimulationCfg
from spacetime_sim.core.timekeeping import FrameTimer, SimulationClock, clamp_speed, tick_dt


def test_clamp_speed_bounds():
    assert clamp_speed(0.01) == 0.1
    assert clamp_speed(9.0) == 5.0
    assert clamp_speed(2.5) == 2.5
    assert clamp_speed(math.inf) == 1.0


def test_tick_dt_uses_fixed_frame_by_default():
    assert tick_dt(1.0) == pytest.approx(1.0 / 60.0)
    assert tick_dt(3.0) == pytest.approx(3.0 / 60.0)
    assert tick_dt(3.0, SimulationCfg(frame_rate=30.0)) == pytest.approx(0.1)


def test_tick_dt_with_measured_frame():
    assert tick_dt(2.0, frame_seconds=0.02) == pytest.approx(0.04)
    assert tick_dt(1.0, frame_seconds=-1.0) == pytest.approx(1.0 / 60.0)
    assert tick_dt(1.0, frame_seconds=math.nan) == pytest.approx(1.0 / 60.0)


def test_clock_advance_and_reset():
    clock = SimulationClock()
    clock.advance(0.5)
    clock.advance(0.25)
    assert clock.ticks == 2
    assert clock.time == pytest.approx(0.75)
    clock.reset()
    assert (clock.ticks, clock.time) == (0, 0.0)


def test_frame_timer_is_monotonic():
    timer = FrameTimer()
    assert timer.tick() >= 0.0
    assert timer.tick() >= 0.0
