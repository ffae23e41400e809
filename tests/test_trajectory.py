"""
Tests for environments/trajectory.py

History only grows, and only whole iterations become visible.
"""

import numpy as np
import pytest

from tadro_swarm.core.errors import IncompleteTrajectory, SimulationStateError
from tadro_swarm.environments.trajectory import Trajectory


def filled(size: int = 2, iterations: int = 2) -> Trajectory:
    trajectory = Trajectory(size, iterations)
    for t in range(iterations + 1):
        trajectory.commit(t, np.full((size, 2), float(t)) + np.arange(size)[:, None])
    return trajectory


class TestTrajectory:
    """Tests for the append-only store."""

    def test_initially_empty(self):
        trajectory = Trajectory(3, 5)
        assert trajectory.last_committed == -1
        assert len(trajectory) == 0
        assert not trajectory.is_complete

    def test_commit_in_order(self):
        trajectory = Trajectory(2, 3)
        trajectory.commit(0, np.zeros((2, 2)))
        trajectory.commit(1, np.ones((2, 2)))
        assert trajectory.last_committed == 1
        assert len(trajectory) == 2

    def test_commit_out_of_order_rejected(self):
        trajectory = Trajectory(2, 3)
        trajectory.commit(0, np.zeros((2, 2)))
        with pytest.raises(SimulationStateError):
            trajectory.commit(2, np.zeros((2, 2)))

    def test_recommit_rejected(self):
        """A committed iteration cannot be rewritten."""
        trajectory = Trajectory(2, 3)
        trajectory.commit(0, np.zeros((2, 2)))
        with pytest.raises(SimulationStateError):
            trajectory.commit(0, np.ones((2, 2)))

    def test_commit_beyond_end_rejected(self):
        trajectory = filled(iterations=1)
        with pytest.raises(SimulationStateError):
            trajectory.commit(2, np.zeros((2, 2)))

    def test_commit_wrong_shape_rejected(self):
        trajectory = Trajectory(2, 3)
        with pytest.raises(ValueError):
            trajectory.commit(0, np.zeros((3, 2)))

    def test_uncommitted_snapshot_hidden(self):
        trajectory = Trajectory(2, 3)
        trajectory.commit(0, np.zeros((2, 2)))
        with pytest.raises(IncompleteTrajectory):
            trajectory.snapshot(1)

    def test_snapshot_read_only(self):
        trajectory = filled()
        view = trajectory.snapshot(1)
        with pytest.raises(ValueError):
            view[0, 0] = 42.0

    def test_position_uses_one_based_ids(self):
        trajectory = filled(size=3)
        np.testing.assert_array_equal(trajectory.position(2, 1), [2.0, 2.0])
        np.testing.assert_array_equal(trajectory.position(2, 3), [4.0, 4.0])
        with pytest.raises(IndexError):
            trajectory.position(2, 0)

    def test_to_records_order(self):
        trajectory = filled(size=2, iterations=1)
        records = trajectory.to_records()
        assert records == [
            (0, 1, 0.0, 0.0),
            (0, 2, 1.0, 1.0),
            (1, 1, 1.0, 1.0),
            (1, 2, 2.0, 2.0),
        ]

    def test_exports_require_complete(self):
        trajectory = Trajectory(2, 3)
        trajectory.commit(0, np.zeros((2, 2)))
        with pytest.raises(IncompleteTrajectory):
            trajectory.to_records()
        with pytest.raises(IncompleteTrajectory):
            trajectory.as_array()

    def test_as_array_is_copy(self):
        trajectory = filled()
        array = trajectory.as_array()
        array[0, 0, 0] = 99.0
        assert trajectory.snapshot(0)[0, 0] == 0.0

    def test_repr(self):
        assert "iterations=2/2" in repr(filled())
