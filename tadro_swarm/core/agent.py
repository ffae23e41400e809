"""
core/agent.py

A Tadro is almost nothing:
where it is, and how it last moved.

Everything else - the light, the others, the drag -
is the world acting on it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import numpy as np


@dataclass
class AgentState:
    """
    What a Tadro IS at one iteration.

    Not what it will do. Just its current being.
    """
    agent_id: int                 # 1..size, the only thing that tells Tadros apart
    position: np.ndarray          # Where on the plane
    last_displacement: np.ndarray = field(
        default_factory=lambda: np.zeros(2)
    )                             # Step applied last iteration, feeds inertia

    def __post_init__(self):
        # Ensure arrays are proper numpy arrays
        self.position = np.asarray(self.position, dtype=np.float64)
        self.last_displacement = np.asarray(self.last_displacement, dtype=np.float64)

    def distance_to(self, other: AgentState) -> float:
        """Euclidean distance to another Tadro."""
        return float(np.linalg.norm(self.position - other.position))

    def __repr__(self) -> str:
        return (
            f"AgentState(id={self.agent_id}, "
            f"pos=[{self.position[0]:.2f}, {self.position[1]:.2f}], "
            f"last=[{self.last_displacement[0]:.2f}, {self.last_displacement[1]:.2f}])"
        )
