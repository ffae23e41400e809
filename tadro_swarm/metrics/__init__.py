"""
Metrics: what a finished run tells us.

- stability: observed vs reference instability, and their ratio
"""

from .stability import (
    StabilityRecord,
    StabilityTable,
    compute_stability,
    observed_instability,
    pairwise_distances,
    reference_instability,
)

__all__ = [
    "StabilityRecord",
    "StabilityTable",
    "compute_stability",
    "observed_instability",
    "pairwise_distances",
    "reference_instability",
]
