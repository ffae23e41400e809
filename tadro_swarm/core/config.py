"""
core/config.py

The unchanging nature of a run.
Set before the first step, honored throughout.

Defaults are the parameters of the original light-seeking model:
eight Tadros, fully goal-directed, fifty iterations.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Tuple, Union
import math
import numbers

import yaml

from .errors import InvalidConfiguration


@dataclass(frozen=True)
class SimulationConfig:
    """
    Every scalar that governs a run.

    Frozen: pass it around, never mutate it.
    """
    size: int = 8                                   # Number of Tadros in the group
    goal_directedness: float = 1.0                  # 0 = random walk, 1 = straight at the light
    iteration_count: int = 50                       # Steps after initial placement
    base_speed: float = 0.5                         # v, internal velocity of a Tadro
    max_speed: float = 1.5                          # Vmax, cap on any single displacement
    drag_coefficient: float = 1.0                   # Cd, how much of the last step carries over
    interaction_range: float = 1.0                  # a, decay scale of repulsion
    light_position: Tuple[float, float] = (0.0, 0.0)
    placement_bounds: Tuple[float, float] = (-5.0, 5.0)  # Initial square, per axis
    halt_on_degenerate: bool = True                 # Raise on coincident agents, else skip the pair

    def __post_init__(self):
        # Tuples from YAML arrive as lists
        object.__setattr__(self, "light_position", _pair("light_position", self.light_position))
        object.__setattr__(self, "placement_bounds", _pair("placement_bounds", self.placement_bounds))
        self.validate()

    def validate(self) -> None:
        """Reject anything a run cannot honor."""
        _require_int("size", self.size, minimum=1)
        _require_int("iteration_count", self.iteration_count, minimum=1)

        _require_finite("goal_directedness", self.goal_directedness)
        if not 0.0 <= self.goal_directedness <= 1.0:
            raise InvalidConfiguration(
                "goal_directedness", self.goal_directedness, "must lie in [0, 1]"
            )

        for name in ("base_speed", "max_speed", "interaction_range"):
            value = getattr(self, name)
            _require_finite(name, value)
            if value <= 0:
                raise InvalidConfiguration(name, value, "must be positive")

        _require_finite("drag_coefficient", self.drag_coefficient)
        if self.drag_coefficient < 0:
            raise InvalidConfiguration(
                "drag_coefficient", self.drag_coefficient, "must be non-negative"
            )

        if self.max_speed < self.base_speed:
            raise InvalidConfiguration(
                "max_speed", self.max_speed,
                f"must be at least base_speed ({self.base_speed})"
            )

        low, high = self.placement_bounds
        if not low < high:
            raise InvalidConfiguration(
                "placement_bounds", self.placement_bounds, "lower bound must be below upper"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SimulationConfig:
        """Build a config from a plain mapping; unknown keys are refused."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(
                unknown[0], data[unknown[0]], "is not a recognized option"
            )
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["light_position"] = list(self.light_position)
        result["placement_bounds"] = list(self.placement_bounds)
        return result


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """Load a SimulationConfig from a YAML mapping."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise InvalidConfiguration("config", str(path), "YAML root must be a mapping")

    return SimulationConfig.from_dict(data)


# ==================== Validation helpers ====================

def _require_int(name: str, value: Any, minimum: int) -> None:
    # bool is an int subclass; True is not a group size
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(name, value, "must be an integer")
    if value < minimum:
        raise InvalidConfiguration(name, value, f"must be at least {minimum}")


def _require_finite(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfiguration(name, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidConfiguration(name, value, "must be finite")


def _pair(name: str, value: Any) -> Tuple[float, float]:
    try:
        x, y = value
    except (TypeError, ValueError):
        raise InvalidConfiguration(name, value, "must be a pair of numbers") from None
    _require_finite(name, x)
    _require_finite(name, y)
    return (float(x), float(y))
