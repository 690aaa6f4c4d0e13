"""Trust statistics for a computed score vector.

Summarises how score mass ended up split between trusted seeds, nodes
reachable from them, and isolated nodes no seed reaches.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core import defaults

logger = logging.getLogger(__name__)


@dataclass
class RankedNode:
    """A node in the top-N listing."""

    node: str
    score: float
    distance: int | None  # None = isolated

    def to_dict(self) -> dict[str, Any]:
        return {"node": self.node, "score": self.score, "distance": self.distance}


@dataclass
class TrustStatistics:
    """Score totals per node category."""

    seed_count: int = 0
    seed_total_score: float = 0.0
    regular_count: int = 0
    regular_total_score: float = 0.0
    isolated_count: int = 0
    isolated_total_score: float = 0.0
    self_vouching_count: int = 0
    top_regular: list[RankedNode] = field(default_factory=list)

    @property
    def seed_average(self) -> float:
        return self.seed_total_score / self.seed_count if self.seed_count else 0.0

    @property
    def regular_average(self) -> float:
        return self.regular_total_score / self.regular_count if self.regular_count else 0.0

    @property
    def trust_advantage(self) -> float | None:
        """Average seed score over average regular score, if both exist."""
        if not self.seed_count or not self.regular_count or self.regular_average == 0:
            return None
        return self.seed_average / self.regular_average

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed_count": self.seed_count,
            "seed_total_score": self.seed_total_score,
            "seed_average": self.seed_average,
            "regular_count": self.regular_count,
            "regular_total_score": self.regular_total_score,
            "regular_average": self.regular_average,
            "isolated_count": self.isolated_count,
            "isolated_total_score": self.isolated_total_score,
            "self_vouching_count": self.self_vouching_count,
            "trust_advantage": self.trust_advantage,
            "top_regular": [n.to_dict() for n in self.top_regular],
        }


def compute_trust_statistics(
    scores: Mapping[str, float],
    trusted_seeds: Collection[str],
    distances: Mapping[str, int],
    self_vouching_count: int = 0,
    top_n: int = defaults.TOP_NODES_REPORTED,
) -> TrustStatistics:
    """Categorise scored nodes as seed, regular (reachable) or isolated.

    Args:
        scores: Node identifier to score.
        trusted_seeds: Configured trusted seeds.
        distances: Hop distance from the nearest seed; unreachable nodes absent.
            Pass an empty mapping when trust was inactive, in which case every
            non-seed node counts as regular.
        self_vouching_count: Nodes with a self-loop (ignored by the solver).
        top_n: How many non-seed nodes to list, best first.

    Returns:
        TrustStatistics
    """
    stats = TrustStatistics(self_vouching_count=self_vouching_count)
    track_isolation = bool(distances)

    for node in sorted(scores):
        score = scores[node]
        if node in trusted_seeds:
            stats.seed_count += 1
            stats.seed_total_score += score
        elif track_isolation and node not in distances:
            stats.isolated_count += 1
            stats.isolated_total_score += score
        else:
            stats.regular_count += 1
            stats.regular_total_score += score

    non_seed = [node for node in scores if node not in trusted_seeds]
    non_seed.sort(key=lambda node: (-scores[node], node))
    stats.top_regular = [
        RankedNode(node=node, score=scores[node], distance=distances.get(node))
        for node in non_seed[:top_n]
    ]
    return stats


def log_trust_statistics(stats: TrustStatistics) -> None:
    """Write a TrustStatistics summary to the debug log."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug(
        f"Trusted seeds: {stats.seed_count} nodes with {stats.seed_total_score:.4f} "
        f"total score (avg {stats.seed_average:.6f})"
    )
    logger.debug(
        f"Regular nodes: {stats.regular_count} nodes with {stats.regular_total_score:.4f} "
        f"total score (avg {stats.regular_average:.6f})"
    )
    logger.debug(f"Isolated nodes: {stats.isolated_count} (unreachable from trusted seeds)")
    logger.debug(f"Self-vouching nodes: {stats.self_vouching_count} (ignored in calculation)")
    if stats.trust_advantage is not None:
        logger.debug(f"Trust advantage: {stats.trust_advantage:.2f}x average score")
    for rank, entry in enumerate(stats.top_regular, start=1):
        where = f"distance {entry.distance}" if entry.distance is not None else "isolated"
        logger.debug(f"  {rank}. {entry.node}: {entry.score:.6f} ({where})")
