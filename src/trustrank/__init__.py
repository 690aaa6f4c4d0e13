"""trustrank - trust-aware reputation scoring over attestation graphs.

trustrank provides:
- A directed, weighted attestation graph (GraphComputer)
- Trust-aware PageRank: seed-boosted teleportation, seed edge multiplier,
  and decay by hop distance from the nearest trusted seed
- Exact largest-remainder distribution of an integer reward pool
"""

__version__ = "1.0.0"

from .core import (
    DistanceMode,
    InvalidConfigError,
    InvalidDistributionError,
    InvalidEdgeError,
    InvalidWeightError,
    PageRankConfig,
    TrustConfig,
    TrustRankError,
    WeightNormalization,
    configure_logging,
)
from .graph import (
    DistributionResult,
    GraphComputer,
    PageRankResult,
    TrustStatistics,
    apply_min_score,
    distribute_points,
)

__all__ = [
    "GraphComputer",
    "PageRankConfig",
    "TrustConfig",
    "DistanceMode",
    "WeightNormalization",
    "PageRankResult",
    "DistributionResult",
    "TrustStatistics",
    "apply_min_score",
    "distribute_points",
    "configure_logging",
    "TrustRankError",
    "InvalidEdgeError",
    "InvalidWeightError",
    "InvalidConfigError",
    "InvalidDistributionError",
]
