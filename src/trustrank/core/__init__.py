"""trustrank core - configuration, defaults, exceptions and logging."""

from .config import DistanceMode, PageRankConfig, TrustConfig, WeightNormalization
from .exceptions import (
    InvalidConfigError,
    InvalidDistributionError,
    InvalidEdgeError,
    InvalidWeightError,
    TrustRankError,
)
from .logging import configure_logging

__all__ = [
    # Config
    "DistanceMode",
    "PageRankConfig",
    "TrustConfig",
    "WeightNormalization",
    # Exceptions
    "TrustRankError",
    "InvalidEdgeError",
    "InvalidWeightError",
    "InvalidConfigError",
    "InvalidDistributionError",
    # Logging
    "configure_logging",
]
