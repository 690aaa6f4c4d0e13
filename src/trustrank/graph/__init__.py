"""Attestation graph scoring and point distribution."""

from __future__ import annotations

from .computer import GraphComputer
from .distances import trust_distances
from .distribution import (
    DistributionResult,
    allocate_points,
    apply_min_score,
    distribute_points,
)
from .solver import PageRankResult, solve_pagerank
from .statistics import RankedNode, TrustStatistics, compute_trust_statistics

__all__ = [
    "GraphComputer",
    # Solver
    "PageRankResult",
    "solve_pagerank",
    "trust_distances",
    # Distribution
    "DistributionResult",
    "allocate_points",
    "apply_min_score",
    "distribute_points",
    # Statistics
    "RankedNode",
    "TrustStatistics",
    "compute_trust_statistics",
]
