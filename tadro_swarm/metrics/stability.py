"""
tadro_swarm/metrics/stability.py

How stable was the group while it moved?

Observed instability (Io): how much the pairwise distances changed
between consecutive iterations.
Reference instability (Ii): how far everyone travelled in that step.
Stability ratio (Sg): 1 / (Io / Ii), i.e. Ii / Io.

A high Sg means the Tadros moved a lot but kept their arrangement.
Sg is unbounded. An iteration with no rearrangement at all (Io = 0)
has no ratio; it is marked undefined rather than reported as inf.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional, Tuple
import numpy as np

from tadro_swarm.core.errors import IncompleteTrajectory
from tadro_swarm.environments.trajectory import Trajectory

logger = logging.getLogger(__name__)


@dataclass
class StabilityRecord:
    """
    Stability of one iteration.

    `stability_ratio` is None exactly when `undefined` is True.
    """

    iteration: int
    observed_instability: float       # Io
    reference_instability: float      # Ii
    stability_ratio: Optional[float]  # Sg
    undefined: bool = False

    def to_tuple(self) -> Tuple[int, float, float, Optional[float]]:
        return (
            self.iteration,
            self.observed_instability,
            self.reference_instability,
            self.stability_ratio,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iteration": self.iteration,
            "Io": self.observed_instability,
            "Ii": self.reference_instability,
            "Sg": self.stability_ratio,
            "undefined": self.undefined,
        }


@dataclass
class StabilityTable:
    """Ordered stability records for iterations 1..N."""

    records: List[StabilityRecord]

    def to_records(self) -> List[Tuple[int, float, float, Optional[float]]]:
        """Flat table of (iteration, Io, Ii, Sg); Sg is None where undefined."""
        return [r.to_tuple() for r in self.records]

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Column arrays; undefined ratios become NaN here, and only here."""
        return {
            "iteration": np.array([r.iteration for r in self.records], dtype=int),
            "Io": np.array([r.observed_instability for r in self.records]),
            "Ii": np.array([r.reference_instability for r in self.records]),
            "Sg": np.array([
                np.nan if r.undefined else r.stability_ratio for r in self.records
            ]),
        }

    @property
    def undefined_iterations(self) -> List[int]:
        return [r.iteration for r in self.records if r.undefined]

    def summary(self) -> Dict[str, Any]:
        """Aggregate over the iterations that have a ratio."""
        ratios = [r.stability_ratio for r in self.records if not r.undefined]
        if not ratios:
            return {
                "iterations": len(self.records),
                "undefined": len(self.records),
                "mean_sg": None,
                "min_sg": None,
                "max_sg": None,
            }
        return {
            "iterations": len(self.records),
            "undefined": len(self.records) - len(ratios),
            "mean_sg": float(np.mean(ratios)),
            "min_sg": float(np.min(ratios)),
            "max_sg": float(np.max(ratios)),
        }

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


def pairwise_distances(positions: np.ndarray) -> np.ndarray:
    """Full symmetric (size, size) Euclidean distance matrix."""
    positions = np.asarray(positions, dtype=np.float64)
    diff = positions[:, None, :] - positions[None, :, :]
    return np.linalg.norm(diff, axis=2)


def observed_instability(previous: np.ndarray, current: np.ndarray) -> float:
    """
    Io: half the summed change of the full distance matrix.

    Every unordered pair appears twice in the matrix, hence the half.
    """
    change = np.abs(pairwise_distances(current) - pairwise_distances(previous))
    return float(change.sum() / 2)


def reference_instability(previous: np.ndarray, current: np.ndarray) -> float:
    """Ii: total distance travelled by all Tadros in one step."""
    moved = np.asarray(current, dtype=np.float64) - np.asarray(previous, dtype=np.float64)
    return float(np.linalg.norm(moved, axis=1).sum())


def stability_record(
    iteration: int,
    previous: np.ndarray,
    current: np.ndarray
) -> StabilityRecord:
    """Io, Ii and Sg for one pair of consecutive snapshots."""
    io = observed_instability(previous, current)
    ii = reference_instability(previous, current)

    if io == 0:
        logger.warning(f"Iteration {iteration}: no rearrangement (Io = 0), Sg undefined")
        return StabilityRecord(iteration, io, ii, None, undefined=True)

    # 1 / (Io / Ii); Io > 0 implies Ii > 0 by the triangle inequality
    return StabilityRecord(iteration, io, ii, 1 / (io / ii))


def compute_stability(trajectory: Trajectory) -> StabilityTable:
    """
    Stability table for a finished run.

    Read-only: the trajectory is never touched.
    """
    if not trajectory.is_complete:
        raise IncompleteTrajectory(
            f"Stability needs a complete run; have {trajectory.last_committed} "
            f"of {trajectory.iteration_count} iterations"
        )

    records = [
        stability_record(t, trajectory.snapshot(t - 1), trajectory.snapshot(t))
        for t in range(1, trajectory.iteration_count + 1)
    ]

    table = StabilityTable(records)
    logger.info(
        f"Stability computed for {len(table)} iterations "
        f"({len(table.undefined_iterations)} undefined)"
    )
    return table
