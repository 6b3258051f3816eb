import math

import numpy as np

from spacetime_sim.core.trajectory import TrajectoryTracker

from conftest import make_body


def _walk(tracker, handle, body, steps, enabled=True):
    history = []
    for i in range(steps):
        body.position = np.array([float(i), 0.0, float(-i)])
        history.append((float(i), 0.0, float(-i)))
        tracker.update([(handle, body)], enabled)
    return history


def test_buffer_keeps_most_recent_points_in_order():
    tracker = TrajectoryTracker(max_length=5)
    tracker.track(0)
    body = make_body("a")
    history = _walk(tracker, 0, body, 12)

    assert tracker.points(0) == history[-5:]


def test_buffer_never_exceeds_bound():
    tracker = TrajectoryTracker(max_length=3)
    tracker.track(7)
    body = make_body("a")
    for i in range(20):
        body.position = np.array([float(i), 1.0, 2.0])
        tracker.update([(7, body)], True)
        assert len(tracker.points(7)) <= 3


def test_disabling_trails_discards_history():
    tracker = TrajectoryTracker(max_length=10)
    tracker.track(0)
    body = make_body("a")
    _walk(tracker, 0, body, 4)
    tracker.update([(0, body)], False)
    assert tracker.points(0) == []


def test_non_finite_position_is_not_appended():
    tracker = TrajectoryTracker(max_length=10)
    tracker.track(0)
    body = make_body("a")
    history = _walk(tracker, 0, body, 3)
    body.position = np.array([math.nan, 0.0, 0.0])
    tracker.update([(0, body)], True)
    assert tracker.points(0) == history


def test_shrinking_max_length_drops_oldest():
    tracker = TrajectoryTracker(max_length=10)
    tracker.track(0)
    body = make_body("a")
    history = _walk(tracker, 0, body, 8)
    tracker.set_max_length(2)
    assert tracker.points(0) == history[-2:]
    tracker.set_max_length(-4)
    assert tracker.max_length == 0
    assert tracker.points(0) == []


def test_clear_and_forget():
    tracker = TrajectoryTracker(max_length=10)
    body = make_body("a")
    tracker.track(0)
    tracker.track(1)
    _walk(tracker, 0, body, 2)
    _walk(tracker, 1, body, 2)

    tracker.clear(0)
    assert tracker.points(0) == []
    assert len(tracker.points(1)) == 2

    tracker.forget(1)
    assert 1 not in tracker
    assert tracker.points(1) == []

    tracker.clear_all()
    assert tracker.points(0) == []
