"""
core/errors.py

What can go wrong, named.

Bad parameters are refused before the first step.
Coincident agents are reported, never turned into NaN.
"""

from __future__ import annotations
from typing import Optional, Sequence


class TadroSwarmError(Exception):
    """Base class for every error raised by tadro_swarm."""


class InvalidConfiguration(TadroSwarmError, ValueError):
    """A simulation parameter is outside its allowed range."""

    def __init__(self, field_name: str, value, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field_name}={value!r}: {reason}")


class DegenerateDistance(TadroSwarmError, ArithmeticError):
    """
    Two agents occupy exactly the same position.

    Repulsion divides by the distance between agents, so a zero
    distance has no defined direction. Agent ids are 1-based.
    """

    def __init__(
        self,
        agent_id: int,
        other_ids: Sequence[int],
        iteration: Optional[int] = None
    ):
        self.agent_id = agent_id
        self.other_ids = tuple(other_ids)
        self.iteration = iteration
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f" at iteration {self.iteration}" if self.iteration is not None else ""
        others = ", ".join(str(o) for o in self.other_ids)
        return f"Tadro {self.agent_id} coincides with Tadro(s) {others}{where}"

    def at_iteration(self, iteration: int) -> DegenerateDistance:
        """Return a copy annotated with the iteration being computed."""
        return DegenerateDistance(self.agent_id, self.other_ids, iteration)


class SimulationStateError(TadroSwarmError, RuntimeError):
    """The driver was asked to do something its current state forbids."""


class IncompleteTrajectory(TadroSwarmError, RuntimeError):
    """A trajectory was read before every iteration was committed."""
