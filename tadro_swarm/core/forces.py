"""
core/forces.py

Three pulls on every Tadro, every iteration.

1. ATTRACTION - toward the light, blended with a random heading
2. INERTIA    - the last step, carried forward by drag
3. REPULSION  - away from every other Tadro, exponentially
                stronger as they close in

Every function here is pure: it reads the frozen previous
snapshot and returns displacement vectors. Nothing is written.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
import numpy as np

from .config import SimulationConfig
from .errors import DegenerateDistance


@dataclass
class Forces:
    """Displacement vectors for one Tadro at one iteration."""
    attraction: np.ndarray
    inertia: np.ndarray
    repulsion: np.ndarray

    def total(self) -> np.ndarray:
        """Raw combined displacement, before any clamping."""
        return self.attraction + self.inertia + self.repulsion


def attraction(
    position: np.ndarray,
    config: SimulationConfig,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Step toward the light, diluted by randomness.

    g * v * unit(light - p) + (1 - g) * v * unit(random heading)

    One heading is drawn on every call, whatever g is, so the
    generator advances identically for every configuration.
    """
    v = config.base_speed
    g = config.goal_directedness

    angle = rng.uniform(0.0, 2 * np.pi)
    random_step = np.array([np.cos(angle), np.sin(angle)])

    to_light = np.asarray(config.light_position, dtype=np.float64) - position
    distance = np.linalg.norm(to_light)

    if distance > 0:
        directed_step = to_light / distance
    else:
        # Already at the light: nowhere to go
        directed_step = np.zeros(2)

    return g * v * directed_step + (1 - g) * v * random_step


def inertia(last_displacement: np.ndarray, config: SimulationConfig) -> np.ndarray:
    """Persistence of the previous step, scaled by drag."""
    return np.asarray(last_displacement, dtype=np.float64) * config.drag_coefficient


def repulsion_magnitude(distance, config: SimulationConfig):
    """
    How hard one Tadro pushes another at a given distance.

    exp(-d / a) * v. Strictly decreasing in d. Accepts a scalar
    or an array of distances.
    """
    return np.exp(-np.asarray(distance, dtype=np.float64) / config.interaction_range) * config.base_speed


def repulsion(
    agent_index: int,
    positions: np.ndarray,
    config: SimulationConfig,
    ignore: Optional[Iterable[int]] = None
) -> np.ndarray:
    """
    Sum of pushes from every other Tadro.

    Each push points from the other Tadro toward this one.
    `agent_index` and `ignore` are 0-based rows of `positions`.

    Raises DegenerateDistance if any non-ignored Tadro sits exactly
    on top of this one; the push would have no direction.
    """
    ignored = set(ignore or ())
    current = positions[agent_index]

    offsets = current - positions               # From each other toward current
    distances = np.linalg.norm(offsets, axis=1)

    others = np.array([
        j for j in range(len(positions))
        if j != agent_index and j not in ignored
    ], dtype=int)

    if len(others) == 0:
        return np.zeros(2)

    d = distances[others]
    magnitude = repulsion_magnitude(d, config)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        scale = magnitude / d

    # Exact overlap, or so close that the push overflows
    degenerate = others[~np.isfinite(scale)]
    if len(degenerate) > 0:
        raise DegenerateDistance(
            agent_id=agent_index + 1,
            other_ids=[int(j) + 1 for j in degenerate],
        )

    pushes = offsets[others] * scale[:, None]

    return pushes.sum(axis=0)


def compute_forces(
    agent_index: int,
    positions: np.ndarray,
    last_displacement: np.ndarray,
    config: SimulationConfig,
    rng: np.random.Generator,
    ignore: Optional[Iterable[int]] = None
) -> Forces:
    """
    All three displacements for one Tadro, from the previous snapshot.

    Repulsion is resolved before the generator is touched, so a call
    that raises DegenerateDistance leaves `rng` where it was.
    """
    push = repulsion(agent_index, positions, config, ignore=ignore)
    return Forces(
        attraction=attraction(positions[agent_index], config, rng),
        inertia=inertia(last_displacement, config),
        repulsion=push,
    )
