"""Frame timing and the speed-to-time-step mapping."""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, field

from .config import SIMULATION_CFG, SimulationCfg
from .vector import clamp


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class SimulationClock:
    """Counts ticks and simulated seconds since the last reset."""

    ticks: int = 0
    time: float = 0.0

    def advance(self, dt: float) -> None:
        self.ticks += 1
        self.time += dt

    def reset(self) -> None:
        self.ticks = 0
        self.time = 0.0


def clamp_speed(speed: float, cfg: SimulationCfg = SIMULATION_CFG) -> float:
    if not math.isfinite(speed):
        return cfg.default_speed
    return clamp(speed, cfg.min_speed, cfg.max_speed)


def tick_dt(
    speed: float,
    cfg: SimulationCfg = SIMULATION_CFG,
    frame_seconds: float | None = None,
) -> float:
    """Simulated seconds covered by one frame at the given speed multiplier."""

    if frame_seconds is None or not math.isfinite(frame_seconds) or frame_seconds <= 0.0:
        frame_seconds = cfg.frame_seconds
    return clamp_speed(speed, cfg) * frame_seconds


__all__ = ["FrameTimer", "SimulationClock", "clamp_speed", "tick_dt"]
