"""
Core components of the tadro-swarm system.

- config: SimulationConfig - every parameter of a run, validated once
- agent: AgentState - where a Tadro is and how it last moved
- forces: attraction, inertia, repulsion
- integrator: combine, clamp, move
"""

from .agent import AgentState
from .config import SimulationConfig, load_config
from .errors import (
    DegenerateDistance,
    IncompleteTrajectory,
    InvalidConfiguration,
    SimulationStateError,
    TadroSwarmError,
)

__all__ = [
    "AgentState",
    "SimulationConfig",
    "load_config",
    "DegenerateDistance",
    "IncompleteTrajectory",
    "InvalidConfiguration",
    "SimulationStateError",
    "TadroSwarmError",
]
