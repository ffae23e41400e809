"""
environments/trajectory.py

Where every Tadro was, at every iteration.

An (iteration, agent) grid that only grows.
Once an iteration is committed, it is history: never rewritten.
Nothing of an iteration is visible until all of it is written.
"""

from __future__ import annotations
from typing import List, Tuple
import numpy as np

from tadro_swarm.core.errors import IncompleteTrajectory, SimulationStateError


class Trajectory:
    """
    Append-only record of positions.

    Backed by one (iteration_count + 1, size, 2) array.
    Row 0 is the initial placement; row t is iteration t.
    Agent ids in exported records are 1-based.
    """

    def __init__(self, size: int, iteration_count: int):
        self.size = size
        self.iteration_count = iteration_count
        self._positions = np.full((iteration_count + 1, size, 2), np.nan)
        self._committed = -1        # Last iteration fully written

    # ==================== Writing ====================

    def commit(self, iteration: int, positions: np.ndarray) -> None:
        """
        Write a whole iteration at once.

        Iterations must arrive in order, starting from 0.
        """
        if iteration != self._committed + 1:
            raise SimulationStateError(
                f"Cannot commit iteration {iteration}; "
                f"next expected is {self._committed + 1}"
            )
        if iteration > self.iteration_count:
            raise SimulationStateError(
                f"Trajectory holds only {self.iteration_count} iterations"
            )

        positions = np.asarray(positions, dtype=np.float64)
        if positions.shape != (self.size, 2):
            raise ValueError(
                f"Expected positions of shape ({self.size}, 2), got {positions.shape}"
            )

        self._positions[iteration] = positions
        self._committed = iteration

    # ==================== Reading ====================

    @property
    def last_committed(self) -> int:
        """Index of the newest complete iteration, -1 if none."""
        return self._committed

    @property
    def is_complete(self) -> bool:
        return self._committed == self.iteration_count

    def snapshot(self, iteration: int) -> np.ndarray:
        """Read-only view of all positions at a committed iteration."""
        if not 0 <= iteration <= self._committed:
            raise IncompleteTrajectory(
                f"Iteration {iteration} not committed "
                f"(last committed: {self._committed})"
            )
        view = self._positions[iteration]
        view.flags.writeable = False
        return view

    def position(self, iteration: int, agent_id: int) -> np.ndarray:
        """Position of one Tadro (1-based id) at a committed iteration."""
        if not 1 <= agent_id <= self.size:
            raise IndexError(f"agent_id {agent_id} outside 1..{self.size}")
        return self.snapshot(iteration)[agent_id - 1]

    def as_array(self) -> np.ndarray:
        """Copy of the full (iteration, agent, xy) array. Complete runs only."""
        self._require_complete()
        return self._positions.copy()

    def to_records(self) -> List[Tuple[int, int, float, float]]:
        """
        Flat table of (iteration, agent_id, x, y).

        Ordered by iteration, then agent - the shape a plotting
        layer wants.
        """
        self._require_complete()
        return [
            (t, i + 1, float(self._positions[t, i, 0]), float(self._positions[t, i, 1]))
            for t in range(self.iteration_count + 1)
            for i in range(self.size)
        ]

    def _require_complete(self) -> None:
        if not self.is_complete:
            raise IncompleteTrajectory(
                f"Trajectory has {self._committed} of {self.iteration_count} iterations"
            )

    def __len__(self) -> int:
        return self._committed + 1

    def __repr__(self) -> str:
        return (
            f"Trajectory(size={self.size}, "
            f"iterations={self._committed}/{self.iteration_count})"
        )
