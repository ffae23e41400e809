"""
environments/light_field.py

A plane, a light, and a handful of Tadros.

The field drives the run: it places the Tadros, then advances
them iteration by iteration. Every Tadro in iteration t sees the
same frozen world of iteration t - 1; no one sees a half-written
present.

Inspired by:
- Light-seeking robotic fish (Tadros)
- Reynolds boids simulation
- Double-buffered particle updates
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
from typing import List, Optional, Tuple
import numpy as np

from tadro_swarm.core.agent import AgentState
from tadro_swarm.core.config import SimulationConfig
from tadro_swarm.core.errors import DegenerateDistance, SimulationStateError
from tadro_swarm.core.forces import Forces, compute_forces
from tadro_swarm.core.integrator import integrate

from .trajectory import Trajectory

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Lifecycle of a run."""
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"           # Iteration 0 placed
    RUNNING = "running"         # Some iterations computed
    COMPLETE = "complete"       # All iterations computed


@dataclass
class DegenerateEvent:
    """A coincident pair skipped instead of halting the run. Ids are 1-based."""
    iteration: int
    agent_id: int
    other_ids: Tuple[int, ...]


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Seeded generator for reproducible runs; None draws fresh entropy."""
    return np.random.default_rng(seed)


class LightField:
    """
    Simulation driver.

    Owns the trajectory while the run is in progress:
    - seed() places every Tadro (iteration 0)
    - step() computes one iteration from the previous one
    - run() does both until complete

    Randomness comes only from the injected generator.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.config = config or SimulationConfig()
        self.rng = rng if rng is not None else make_rng()

        self.trajectory = Trajectory(self.config.size, self.config.iteration_count)
        self.last_displacements = np.zeros((self.config.size, 2))
        self.degenerate_events: List[DegenerateEvent] = []
        self.state = RunState.UNINITIALIZED

    @property
    def time(self) -> int:
        """Newest committed iteration, -1 before seeding."""
        return self.trajectory.last_committed

    # ==================== Lifecycle ====================

    def seed(self, positions: Optional[np.ndarray] = None) -> None:
        """
        Populate iteration 0.

        Without explicit positions, each Tadro is placed uniformly
        and independently in the placement square.
        """
        if self.state is not RunState.UNINITIALIZED:
            raise SimulationStateError(f"Cannot seed a run in state {self.state.value}")

        if positions is None:
            low, high = self.config.placement_bounds
            positions = self.rng.uniform(low, high, size=(self.config.size, 2))
        else:
            positions = np.asarray(positions, dtype=np.float64)
            if positions.shape != (self.config.size, 2):
                raise ValueError(
                    f"Expected {self.config.size} initial positions of shape (2,), "
                    f"got array of shape {positions.shape}"
                )
            if not np.all(np.isfinite(positions)):
                raise ValueError("Initial positions must be finite")

        self.trajectory.commit(0, positions)
        self.state = RunState.SEEDED

        logger.info(
            f"Seeded {self.config.size} Tadros "
            f"(goal_directedness={self.config.goal_directedness}, "
            f"iterations={self.config.iteration_count})"
        )

    def step(self) -> None:
        """
        Advance one iteration.

        Phase 1: compute every Tadro's step from the frozen snapshot
        Phase 2: commit the whole iteration at once

        If a DegenerateDistance halts the step, nothing of this
        iteration is committed.
        """
        if self.state is RunState.UNINITIALIZED:
            raise SimulationStateError("Run must be seeded before stepping")
        if self.state is RunState.COMPLETE:
            raise SimulationStateError("Run is already complete")

        t = self.time + 1
        previous = self.trajectory.snapshot(t - 1)

        next_positions = np.empty_like(previous)
        next_displacements = np.empty_like(self.last_displacements)

        # Phase 1: compute (reads previous only)
        for i in range(self.config.size):
            forces = self._forces_for(t, i, previous)
            step = integrate(previous[i], forces, self.config.max_speed)
            next_positions[i] = step.position
            next_displacements[i] = step.displacement

        # Phase 2: commit
        self.trajectory.commit(t, next_positions)
        self.last_displacements = next_displacements

        if t == self.config.iteration_count:
            self.state = RunState.COMPLETE
            logger.info(
                f"Run complete after {t} iterations "
                f"({len(self.degenerate_events)} degenerate events)"
            )
        else:
            self.state = RunState.RUNNING
            logger.debug(f"Committed iteration {t}")

    def run(self) -> Trajectory:
        """Seed if needed, then step until complete."""
        if self.state is RunState.UNINITIALIZED:
            self.seed()

        while self.state is not RunState.COMPLETE:
            self.step()

        return self.trajectory

    # ==================== Forces ====================

    def _forces_for(self, t: int, i: int, previous: np.ndarray) -> Forces:
        """Force Model for Tadro i (0-based) computing iteration t."""
        last = self.last_displacements[i]

        try:
            return compute_forces(i, previous, last, self.config, self.rng)
        except DegenerateDistance as e:
            if self.config.halt_on_degenerate:
                raise e.at_iteration(t) from e

            event = DegenerateEvent(iteration=t, agent_id=e.agent_id, other_ids=e.other_ids)
            self.degenerate_events.append(event)
            logger.warning(
                f"Iteration {t}: Tadro {e.agent_id} coincides with {list(e.other_ids)}; "
                f"skipping those pairs"
            )
            skip = [j - 1 for j in e.other_ids]
            return compute_forces(i, previous, last, self.config, self.rng, ignore=skip)

    # ==================== Inspection ====================

    def agent_states(self) -> List[AgentState]:
        """Current state of every Tadro at the newest committed iteration."""
        if self.time < 0:
            return []
        positions = self.trajectory.snapshot(self.time)
        return [
            AgentState(
                agent_id=i + 1,
                position=positions[i].copy(),
                last_displacement=self.last_displacements[i].copy(),
            )
            for i in range(self.config.size)
        ]

    def get_positions(self) -> np.ndarray:
        """Positions of all Tadros at the newest committed iteration."""
        return self.trajectory.snapshot(self.time).copy()

    def __repr__(self) -> str:
        return (
            f"LightField(size={self.config.size}, "
            f"time={self.time}, "
            f"state={self.state.value})"
        )
