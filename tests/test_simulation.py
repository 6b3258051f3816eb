import csv
import math

import numpy as np
import pytest

from spacetime_sim.core.config import GridCfg, SimulationCfg
from spacetime_sim.core.logging_utils import RunLogger
from spacetime_sim.core.model import RunStatus
from spacetime_sim.core.simulation import Simulation

from conftest import make_object

SMALL_GRID = GridCfg(size=2000.0, divisions=20)


@pytest.fixture
def sim():
    return Simulation(grid_cfg=SMALL_GRID)


def _two_body():
    return [
        make_object("sun", mass=10_000.0, radius=10.0),
        make_object("planet", mass=1.0, radius=1.0, position=(100.0, 0.0, 0.0), velocity=(0.0, 0.0, 10.0)),
    ]


def test_tick_does_nothing_unless_running(sim):
    sim.apply_snapshot(_two_body())
    before = sim.store.by_id("planet").position.copy()
    sim.tick()
    sim.set_status(RunStatus.PAUSED)
    sim.tick()
    np.testing.assert_array_equal(sim.store.by_id("planet").position, before)
    assert sim.clock.ticks == 0
    assert sim.trajectories.points(sim.store.handle_of("planet")) == []


def test_running_moves_bodies_and_grows_trails(sim):
    sim.apply_snapshot(_two_body())
    sim.set_status("running")
    for _ in range(5):
        sim.tick()

    planet = sim.store.by_id("planet")
    assert planet.position[2] > 0.0
    assert planet.net_force > 0.0
    assert len(sim.trajectories.points(sim.store.handle_of("planet"))) == 5
    assert sim.clock.ticks == 5
    assert sim.clock.time == pytest.approx(5 / 60)


def test_trail_length_is_bounded(sim):
    sim.apply_snapshot(_two_body())
    sim.set_trail_length(3)
    sim.set_status(RunStatus.RUNNING)
    for _ in range(10):
        sim.tick()
    assert len(sim.trajectories.points(sim.store.handle_of("planet"))) == 3


def test_stopping_resets_to_declared_state(sim):
    objects = _two_body()
    sim.apply_snapshot(objects)
    sim.set_status(RunStatus.RUNNING)
    for _ in range(10):
        sim.tick()

    sim.set_status(RunStatus.STOPPED)
    planet = sim.store.by_id("planet")
    np.testing.assert_array_equal(planet.position, [100.0, 0.0, 0.0])
    np.testing.assert_array_equal(planet.velocity, [0.0, 0.0, 10.0])
    assert sim.clock.ticks == 0
    assert all(sim.trajectories.points(h) == [] for h in sim.store.handles())


def test_reset_is_idempotent(sim):
    sim.apply_snapshot(_two_body())
    sim.set_status(RunStatus.RUNNING)
    sim.tick()
    sim.reset()
    first = sim.snapshot()
    sim.reset()
    second = sim.snapshot()
    assert first.positions == second.positions
    assert first.trails == second.trails
    np.testing.assert_array_equal(first.grid_vertices, second.grid_vertices)


def test_speed_is_clamped_and_scales_dt(sim):
    assert sim.set_speed(100.0) == 5.0
    assert sim.set_speed(0.0) == 0.1
    assert sim.set_speed(math.nan) == 1.0

    sim.set_speed(2.0)
    sim.apply_snapshot([make_object("drifter", mass=0.0, velocity=(6.0, 0.0, 0.0))])
    sim.set_status(RunStatus.RUNNING)
    sim.tick()
    assert sim.store.by_id("drifter").position[0] == pytest.approx(6.0 * 2.0 / 60.0)


def test_disabling_trails_discards_history(sim):
    sim.apply_snapshot(_two_body())
    sim.set_status(RunStatus.RUNNING)
    sim.tick()
    sim.tick()
    sim.set_trails(False)
    handle = sim.store.handle_of("planet")
    assert sim.trajectories.points(handle) == []
    sim.tick()
    assert sim.trajectories.points(handle) == []

    sim.set_trails(True)
    sim.tick()
    assert len(sim.trajectories.points(handle)) == 1


def test_grid_returns_to_baseline_when_last_mass_removed(sim):
    sim.apply_snapshot([make_object("sun", mass=5000.0)])
    assert sim.grid.max_depth() > 0.0

    sim.set_status(RunStatus.RUNNING)
    sim.tick()
    sim.apply_snapshot([make_object("dust", mass=0.0)])
    sim.tick()
    np.testing.assert_array_equal(sim.grid.elevation, sim.grid.baseline)


def test_grid_refreshes_on_edit_while_stopped(sim):
    sim.apply_snapshot([make_object("sun", mass=5000.0)])
    sim.apply_snapshot([])
    np.testing.assert_array_equal(sim.grid.elevation, sim.grid.baseline)


def test_grid_can_be_disabled():
    sim = Simulation(grid_cfg=None)
    sim.apply_snapshot(_two_body())
    sim.set_status(RunStatus.RUNNING)
    sim.tick()
    snap = sim.snapshot()
    assert snap.grid_vertices is None
    assert sim.sample()[7] == 0.0


def test_snapshot_shape(sim):
    sim.apply_snapshot(_two_body())
    snap = sim.snapshot()
    assert set(snap.positions) == {"sun", "planet"}
    assert snap.positions["planet"] == (100.0, 0.0, 0.0)
    assert snap.trails == {"sun": [], "planet": []}
    assert snap.grid_vertices.shape == (21 * 21, 3)
    assert snap.tick == 0


def test_external_edits_merge_while_running(sim):
    sim.apply_snapshot(_two_body())
    sim.set_status(RunStatus.RUNNING)
    sim.tick()
    moved = sim.store.by_id("planet").position.copy()

    renamed = _two_body()
    renamed[1] = make_object(
        "planet", mass=1.0, radius=3.0, position=(100.0, 0.0, 0.0), velocity=(0.0, 0.0, 10.0), name="Home"
    )
    sim.apply_snapshot(renamed + [make_object("moon", mass=0.0, position=(120.0, 0.0, 0.0))])

    planet = sim.store.by_id("planet")
    assert planet.name == "Home"
    assert planet.radius == 3.0
    np.testing.assert_array_equal(planet.position, moved)
    assert "moon" in sim.store
    assert sim.trajectories.points(sim.store.handle_of("moon")) == []


def test_merge_notification_converges_while_running(sim):
    sim.apply_snapshot(_two_body())
    sim.set_status(RunStatus.RUNNING)
    for _ in range(3):
        sim.tick()
    absorber = sim.store.by_id("sun")
    absorber_handle = sim.store.handle_of("sun")
    planet_handle = sim.store.handle_of("planet")

    declared = make_object("sun", mass=10_001.0, radius=10.0)
    diff = sim.apply_snapshot([declared])

    assert diff.removed == [planet_handle]
    assert diff.reset == [absorber_handle]
    assert len(sim.store) == 1
    assert absorber.mass == 10_001.0
    np.testing.assert_array_equal(absorber.position, [0.0, 0.0, 0.0])
    assert planet_handle not in sim.trajectories
    assert sim.trajectories.points(absorber_handle) == []

    sim.tick()
    assert sim.fault_count == 0
    assert len(sim.trajectories.points(absorber_handle)) == 1


def test_non_finite_state_is_recorded_as_fault(sim):
    sim.apply_snapshot(_two_body())
    sim.set_status(RunStatus.RUNNING)
    sim.store.by_id("planet").velocity = np.array([math.nan, 0.0, 0.0])
    sim.tick()

    assert sim.fault_count == 1
    assert sim.faults[-1].body_id == "planet"
    assert sim.faults[-1].stage == "state"
    sun = sim.store.by_id("sun")
    assert np.isfinite(sun.position).all()


def test_fault_history_is_bounded():
    sim = Simulation(grid_cfg=None, sim_cfg=SimulationCfg(max_recorded_faults=2))
    sim.apply_snapshot([make_object("ghost", mass=0.0)])
    sim.set_status(RunStatus.RUNNING)
    sim.store.by_id("ghost").position = np.array([math.inf, 0.0, 0.0])
    for _ in range(5):
        sim.tick()
    assert sim.fault_count == 5
    assert len(sim.faults) == 2


def test_dict_records_are_accepted(sim):
    sim.apply_snapshot(
        [{"id": "a", "type": "massive", "mass": 10.0, "position": {"x": 1.0, "y": 2.0, "z": 3.0}}]
    )
    assert sim.store.by_id("a").position.tolist() == [1.0, 2.0, 3.0]


def test_logger_records_membership_and_samples(tmp_path):
    with RunLogger(tmp_path, run_id="session") as logger:
        sim = Simulation(grid_cfg=SMALL_GRID, sim_cfg=SimulationCfg(log_every_ticks=2), logger=logger)
        sim.apply_snapshot(_two_body())
        sim.set_status(RunStatus.RUNNING)
        for _ in range(4):
            sim.tick()
        sim.apply_snapshot(_two_body()[:1])
        sim.set_status(RunStatus.STOPPED)

    with (tmp_path / "session" / "timeseries.csv").open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [int(row["tick"]) for row in rows] == [2, 4]
    assert int(rows[0]["bodies"]) == 2

    with (tmp_path / "session" / "events.csv").open(newline="") as fh:
        events = list(csv.DictReader(fh))
    kinds = [(row["type"], row["body"]) for row in events]
    assert kinds[:2] == [("added", "sun"), ("added", "planet")]
    assert ("removed", "planet") in kinds
    assert kinds[-1][0] == "reset"
