"""
core/integrator.py

Sum the pulls. Respect the speed limit. Move.

No Tadro ever travels further than max_speed in one iteration.
Whatever the forces say.
"""

from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .forces import Forces


@dataclass
class Step:
    """Outcome of integrating one Tadro for one iteration."""
    position: np.ndarray          # New position
    displacement: np.ndarray      # What was applied; next iteration's inertia source
    clamped: bool = False         # True if the speed limit bit

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.displacement))


def clamp_displacement(raw: np.ndarray, max_speed: float) -> np.ndarray:
    """
    Scale `raw` down to `max_speed` if it is longer.

    A zero vector stays zero: the Tadro simply does not move.
    """
    raw = np.asarray(raw, dtype=np.float64)
    magnitude = np.linalg.norm(raw)

    if magnitude == 0:
        return np.zeros(2)
    if magnitude > max_speed:
        return raw * (max_speed / magnitude)
    return raw.copy()


def integrate(position: np.ndarray, forces: Forces, max_speed: float) -> Step:
    """Combine the three displacements, clamp, and advance the position."""
    raw = forces.total()
    displacement = clamp_displacement(raw, max_speed)

    return Step(
        position=np.asarray(position, dtype=np.float64) + displacement,
        displacement=displacement,
        clamped=bool(np.linalg.norm(raw) > max_speed),
    )
