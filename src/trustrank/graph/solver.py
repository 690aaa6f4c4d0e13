"""Trust-aware PageRank power iteration.

The solver works on a canonical snapshot of the graph: node identifiers in
sorted order and edges as parallel numpy arrays (source index, target index,
base weight) in a fixed order. Every summation runs in that order, so a solve
is bit-for-bit reproducible regardless of how edges were inserted.

Per iteration:

    new = (1 - d) * teleport + d * (incoming + dangling / N)

then ``new`` is normalised to sum 1. ``teleport`` is the trust-boosted prior
scaled by ``trust_decay ** distance`` from the nearest seed; ``dangling`` is
the mass held by nodes that can't pass it on (no outgoing weight, or unused
capacity under WeightNormalization.CAPACITY), spread uniformly so no mass is
lost.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..core import defaults
from ..core.config import DistanceMode, PageRankConfig, WeightNormalization
from .distances import trust_distances

logger = logging.getLogger(__name__)


@dataclass
class PageRankResult:
    """Scores plus solve diagnostics."""

    scores: dict[str, float] = field(default_factory=dict)
    iterations: int = 0
    converged: bool = True
    delta: float = 0.0

    # Whether at least one trusted seed was present in the graph
    trust_active: bool = False

    # Hop distance from the nearest seed; unreachable nodes are absent
    distances: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return sum(self.scores.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": self.scores,
            "iterations": self.iterations,
            "converged": self.converged,
            "delta": self.delta,
            "trust_active": self.trust_active,
            "distances": self.distances,
        }


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


def initial_distribution(seed_mask: np.ndarray, trust_share: float) -> np.ndarray:
    """Build the trust-boosted prior.

    Seeds split ``trust_share`` evenly, the remaining nodes split
    ``1 - trust_share``. Without seeds the prior is uniform. The result
    always sums to 1.

    Promoting a node to seed only raises its prior when ``trust_share / k``
    (k seeds present) is at least what it held as a regular node: ``1 / N``
    with no other seeds, else ``(1 - trust_share) / (N - k + 1)``. Below that
    a new seed can score lower than before.
    """
    n = len(seed_mask)
    seed_count = int(seed_mask.sum())
    if seed_count == 0:
        return np.full(n, 1.0 / n)

    regular_count = n - seed_count
    seed_score = trust_share / seed_count
    regular_score = (1.0 - trust_share) / regular_count if regular_count else 0.0
    prior = np.where(seed_mask, seed_score, regular_score)

    total = prior.sum()
    if total <= 0:
        # e.g. every node is a seed and trust_share is 0
        return np.full(n, 1.0 / n)
    return prior / total


def effective_weights(
    base_weights: np.ndarray,
    source_is_seed: np.ndarray,
    config: PageRankConfig,
) -> np.ndarray:
    """Apply the seed multiplier, then clamp into [min_weight, max_weight]."""
    multiplier = config.trust_config.trust_multiplier
    boosted = np.where(source_is_seed, base_weights * multiplier, base_weights)
    return np.clip(boosted, config.min_weight, config.max_weight)


def transition_shares(
    sources: np.ndarray,
    weights: np.ndarray,
    n: int,
    config: PageRankConfig,
) -> tuple[np.ndarray, np.ndarray]:
    """Turn effective weights into per-edge shares of the source's mass.

    Returns:
        (shares, dangling_fraction): the fraction of its source's mass each
        edge carries, and for each node the fraction of its mass that no
        edge carries.
    """
    if config.normalization is WeightNormalization.CAPACITY:
        positive_edges = np.bincount(sources[weights > 0], minlength=n)
        out_degree = positive_edges * config.max_weight
    else:
        out_degree = np.bincount(sources, weights=weights, minlength=n)

    has_out = out_degree > 0
    shares = np.zeros_like(weights)
    flowing = has_out[sources]
    shares[flowing] = weights[flowing] / out_degree[sources[flowing]]

    if config.normalization is WeightNormalization.CAPACITY:
        carried = np.bincount(sources, weights=shares, minlength=n)
        dangling_fraction = np.clip(1.0 - carried, 0.0, 1.0)
    else:
        dangling_fraction = np.zeros(n)
    dangling_fraction[~has_out] = 1.0
    return shares, dangling_fraction


def seed_distances(
    sources: np.ndarray,
    targets: np.ndarray,
    weights: np.ndarray,
    seed_mask: np.ndarray,
    mode: DistanceMode,
) -> dict[int, int]:
    """BFS hop distance from the nearest seed over edges with positive weight."""
    n = len(seed_mask)
    successors: list[list[int]] = [[] for _ in range(n)]
    predecessors: list[list[int]] = [[] for _ in range(n)]
    for source, target, weight in zip(sources.tolist(), targets.tolist(), weights.tolist()):
        if weight > 0:
            successors[source].append(target)
            predecessors[target].append(source)
    return trust_distances(successors, predecessors, np.flatnonzero(seed_mask).tolist(), mode)


def decay_factors(
    n: int,
    distances: dict[int, int],
    trust_decay: float,
) -> np.ndarray:
    """``trust_decay ** distance`` per node; 0 for nodes no seed reaches."""
    factors = np.zeros(n)
    for index, distance in distances.items():
        factors[index] = trust_decay**distance
    return factors


# =============================================================================
# SOLVER
# =============================================================================


def solve_pagerank(
    node_ids: Sequence[str],
    sources: np.ndarray,
    targets: np.ndarray,
    base_weights: np.ndarray,
    config: PageRankConfig,
) -> PageRankResult:
    """Run trust-aware power iteration to a fixed point.

    Args:
        node_ids: Node identifiers in canonical order.
        sources: Source index per edge (self-loops already removed).
        targets: Target index per edge.
        base_weights: Base weight per edge.
        config: Solver and trust parameters.

    Returns:
        PageRankResult. Hitting max_iterations is not an error: the last
        vector is returned with ``converged=False``.
    """
    n = len(node_ids)
    if n == 0:
        logger.debug("Empty graph, nothing to rank")
        return PageRankResult()

    trust = config.trust_config
    seed_mask = np.fromiter((trust.is_trusted_seed(node) for node in node_ids), dtype=bool, count=n)
    trust_active = bool(seed_mask.any())

    if trust_active:
        logger.info(
            f"Starting trust-aware PageRank for {n} nodes "
            f"({int(seed_mask.sum())} of {len(trust.trusted_seeds)} trusted seeds present)"
        )
    elif trust.has_trust_enabled:
        logger.warning(
            f"None of the {len(trust.trusted_seeds)} trusted seeds are in the graph; "
            "falling back to standard PageRank"
        )
    else:
        logger.info(f"Starting standard PageRank for {n} nodes")

    weights = effective_weights(base_weights, seed_mask[sources], config)
    shares, dangling_fraction = transition_shares(sources, weights, n, config)

    prior = initial_distribution(seed_mask, trust.trust_share)
    distances: dict[int, int] = {}
    if trust_active:
        distances = seed_distances(sources, targets, weights, seed_mask, trust.distance_mode)
        logger.debug(
            f"Trust distance analysis: {len(distances)} reachable, "
            f"{n - len(distances)} unreachable from trusted seeds"
        )
        teleport = prior * decay_factors(n, distances, trust.trust_decay)
    else:
        teleport = prior

    damping = config.damping_factor
    scores = prior.copy()
    delta = 0.0
    converged = False
    iteration = 0

    for iteration in range(1, config.max_iterations + 1):
        incoming = np.bincount(targets, weights=scores[sources] * shares, minlength=n)
        dangling = float(np.dot(scores, dangling_fraction))

        updated = (1.0 - damping) * teleport + damping * (incoming + dangling / n)
        updated /= updated.sum()

        delta = float(np.abs(updated - scores).sum())
        scores = updated

        if iteration % defaults.PROGRESS_LOG_INTERVAL == 0:
            logger.debug(f"PageRank iteration {iteration}: L1 delta = {delta:.8f}")

        if delta < config.tolerance:
            converged = True
            break

    if converged:
        logger.info(f"PageRank converged after {iteration} iterations")
    else:
        logger.warning(
            f"PageRank did not converge within {config.max_iterations} iterations "
            f"(L1 delta {delta:.3e} >= tolerance {config.tolerance:.3e})"
        )

    return PageRankResult(
        scores={node: float(score) for node, score in zip(node_ids, scores.tolist())},
        iterations=iteration,
        converged=converged,
        delta=delta,
        trust_active=trust_active,
        distances={node_ids[index]: distance for index, distance in sorted(distances.items())},
    )
