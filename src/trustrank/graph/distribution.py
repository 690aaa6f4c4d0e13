"""Largest-remainder (Hamilton) point distribution.

Converts a score vector and an integer pool into integer allocations that
sum exactly to the pool:

1. Each node's exact share is ``score / sum(scores) * pool``.
2. Every node gets the floor of its share.
3. The shortfall goes out one unit at a time to the largest fractional
   remainders, ties broken by identifier (ascending).

Shares are computed with ``fractions.Fraction`` so the arithmetic is exact
for any pool size, including token amounts far beyond float precision.
"""

from __future__ import annotations

import logging
import math
import operator
from collections.abc import Mapping
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any

from ..core.exceptions import InvalidDistributionError

logger = logging.getLogger(__name__)


@dataclass
class DistributionResult:
    """Allocations plus what (if anything) was left undistributed."""

    allocations: dict[str, int] = field(default_factory=dict)
    total_pool: int = 0

    @property
    def distributed(self) -> int:
        return sum(self.allocations.values())

    @property
    def undistributed(self) -> int:
        """Units not handed out. Non-zero only for empty or zero-sum scores."""
        return self.total_pool - self.distributed

    def to_dict(self) -> dict[str, Any]:
        return {
            "allocations": self.allocations,
            "total_pool": self.total_pool,
            "distributed": self.distributed,
            "undistributed": self.undistributed,
        }


def _validate_pool(total_pool: Any) -> int:
    if isinstance(total_pool, bool):
        raise InvalidDistributionError(f"total_pool must be an integer, got {total_pool!r}")
    try:
        pool = operator.index(total_pool)
    except TypeError:
        raise InvalidDistributionError(
            f"total_pool must be an integer, got {type(total_pool).__name__}"
        ) from None
    if pool < 0:
        raise InvalidDistributionError(f"total_pool must be >= 0, got {pool}")
    return pool


def _validate_scores(scores: Mapping[str, float]) -> dict[str, Fraction]:
    exact: dict[str, Fraction] = {}
    for node, score in scores.items():
        if isinstance(score, bool) or not isinstance(score, int | float):
            raise InvalidDistributionError(f"Score for {node!r} is not a number: {score!r}")
        if not math.isfinite(score) or score < 0:
            raise InvalidDistributionError(f"Score for {node!r} must be finite and >= 0, got {score}")
        exact[node] = Fraction(score)
    return exact


def allocate_points(scores: Mapping[str, float], total_pool: int) -> DistributionResult:
    """Distribute ``total_pool`` integer units proportionally to ``scores``.

    Args:
        scores: Node identifier to non-negative score. Need not sum to 1.
        total_pool: Non-negative integer number of units to distribute.

    Returns:
        DistributionResult with an allocation for every node in ``scores``.
        If ``scores`` is empty or sums to 0, every node gets 0 and the whole
        pool is reported as undistributed.

    Raises:
        InvalidDistributionError: If the pool is negative or not an integer,
            or a score is negative, NaN or infinite.
    """
    pool = _validate_pool(total_pool)
    exact = _validate_scores(scores)
    allocations = {node: 0 for node in exact}

    total_score = sum(exact.values(), Fraction(0))
    if pool == 0:
        return DistributionResult(allocations=allocations, total_pool=pool)
    if total_score == 0:
        logger.warning(
            f"No score mass across {len(exact)} nodes; {pool} units left undistributed"
        )
        return DistributionResult(allocations=allocations, total_pool=pool)

    remainders: list[tuple[Fraction, str]] = []
    for node, score in exact.items():
        share = score * pool / total_score
        floor = share.numerator // share.denominator
        allocations[node] = floor
        remainders.append((share - floor, node))

    shortfall = pool - sum(allocations.values())
    # Largest remainder first, then identifier ascending
    remainders.sort(key=lambda item: (-item[0], item[1]))
    for _, node in remainders[:shortfall]:
        allocations[node] += 1

    logger.debug(
        f"Distributed {pool} units across {len(allocations)} nodes "
        f"({shortfall} by largest remainder)"
    )
    return DistributionResult(allocations=allocations, total_pool=pool)


def distribute_points(scores: Mapping[str, float], total_pool: int) -> dict[str, int]:
    """Allocation vector for ``scores``; see allocate_points."""
    return allocate_points(scores, total_pool).allocations


def apply_min_score(scores: Mapping[str, float], min_score: float) -> dict[str, float]:
    """Drop nodes scoring below ``min_score`` before distribution.

    Nodes with a zero score are always dropped.
    """
    if not math.isfinite(min_score) or min_score < 0:
        raise InvalidDistributionError(f"min_score must be finite and >= 0, got {min_score}")
    kept = {node: score for node, score in scores.items() if score > 0 and score >= min_score}
    dropped = len(scores) - len(kept)
    if dropped:
        logger.debug(f"Dropped {dropped} nodes below minimum score {min_score}")
    return kept
