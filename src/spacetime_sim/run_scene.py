"""Run a demo scene headless and record it to a run directory."""
from __future__ import annotations

import argparse
import time
from pathlib import Path

from spacetime_sim import __version__
from spacetime_sim.core.config import SIMULATION_CFG
from spacetime_sim.core.logging_utils import RunLogger
from spacetime_sim.core.model import RunStatus
from spacetime_sim.core.simulation import Simulation
from spacetime_sim.core.timekeeping import FrameTimer
from spacetime_sim.data.scenarios import DEFAULT_SCENARIO_KEY, SCENARIO_DISPLAY_ORDER, SCENARIOS


def run_scene(
    scenario_key: str,
    ticks: int,
    *,
    speed: float = SIMULATION_CFG.default_speed,
    trails: bool = True,
    trail_length: int = SIMULATION_CFG.default_trajectory_length,
    runs_dir: str | Path = "data/runs",
    realtime: bool = False,
) -> Path:
    """Simulate *ticks* frames of a scene and return the run directory."""

    scenario = SCENARIOS[scenario_key]
    with RunLogger(runs_dir, label=scenario.key) as logger:
        sim = Simulation(logger=logger)
        sim.set_speed(speed)
        sim.set_trails(trails)
        sim.set_trail_length(trail_length)
        sim.apply_snapshot(scenario.object_list())

        logger.write_meta(
            {
                "scenario_key": scenario.key,
                "scenario_name": scenario.name,
                "objects": [obj.to_dict() for obj in scenario.objects],
                "G": sim.physics_cfg.gravitational_constant,
                "speed": sim.speed,
                "frame_rate": sim.sim_cfg.frame_rate,
                "ticks": ticks,
                "trails": trails,
                "trail_length": sim.trajectories.max_length,
                "grid_size": sim.grid_cfg.size if sim.grid_cfg else None,
                "grid_divisions": sim.grid_cfg.divisions if sim.grid_cfg else None,
                "code_version": __version__,
            }
        )

        logger.log_ts(sim.sample())
        sim.set_status(RunStatus.RUNNING)
        timer = FrameTimer()
        frame = sim.sim_cfg.frame_seconds
        for _ in range(ticks):
            sim.tick()
            if realtime:
                remaining = frame - timer.tick()
                if remaining > 0.0:
                    time.sleep(remaining)
                timer.tick()
        if sim.clock.ticks % max(1, sim.sim_cfg.log_every_ticks) != 0:
            logger.log_ts(sim.sample())

        snap = sim.snapshot()
        print(f"Scene: {scenario.name} ({ticks} ticks, t = {snap.time:.2f})")
        for body_id, position in snap.positions.items():
            x, y, z = position
            print(
                f"  {body_id}: pos = ({x:.2f}, {y:.2f}, {z:.2f})"
                f"  |F| = {snap.net_forces[body_id]:.3f}"
                f"  trail = {len(snap.trails.get(body_id, []))}"
            )
        print(f"  stability faults: {sim.fault_count}")

    print(f"Simulation saved to {logger.run_dir}")
    return logger.run_dir


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a demo scene without a renderer.")
    parser.add_argument(
        "scenario",
        nargs="?",
        default=DEFAULT_SCENARIO_KEY,
        choices=SCENARIO_DISPLAY_ORDER,
        help="Scene to simulate",
    )
    parser.add_argument("-n", "--ticks", type=int, default=600, help="Number of frames to simulate")
    parser.add_argument("-s", "--speed", type=float, default=SIMULATION_CFG.default_speed)
    parser.add_argument("--trail-length", type=int, default=SIMULATION_CFG.default_trajectory_length)
    parser.add_argument("--no-trails", action="store_true", help="Disable trajectory trails")
    parser.add_argument("--runs-dir", default="data/runs", help="Where run directories are created")
    parser.add_argument("--realtime", action="store_true", help="Pace ticks at the frame rate")
    args = parser.parse_args()

    if args.ticks < 0:
        parser.error("--ticks must be non-negative")

    run_scene(
        args.scenario,
        args.ticks,
        speed=args.speed,
        trails=not args.no_trails,
        trail_length=args.trail_length,
        runs_dir=args.runs_dir,
        realtime=args.realtime,
    )


if __name__ == "__main__":
    main()
