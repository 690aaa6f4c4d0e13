"""GraphComputer - the attestation graph and its two entry points.

Nodes live in an arena: a list of identifiers indexed by integer plus an
identifier -> index table. Edges are stored per source node as
``(target_index, base_weight)`` pairs.

Duplicate edges:
- allow_duplicates=True: parallel edges are all kept and all count.
- allow_duplicates=False: re-adding (source, target) overwrites the earlier
  weight (last write wins).

Scoring runs on a canonical snapshot (identifiers sorted) so results don't
depend on insertion order. The snapshot is rebuilt lazily after mutation.

Not safe for concurrent mutation and reads; callers synchronise.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np

from ..core.config import PageRankConfig
from ..core.exceptions import InvalidEdgeError, InvalidWeightError
from .distribution import DistributionResult, allocate_points
from .solver import PageRankResult, effective_weights, seed_distances, solve_pagerank
from .statistics import TrustStatistics, compute_trust_statistics, log_trust_statistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """Canonical view of the graph used by the solver."""

    node_ids: list[str]
    sources: np.ndarray
    targets: np.ndarray
    base_weights: np.ndarray
    self_vouching: frozenset[str]


class GraphComputer:
    """A directed, weighted attestation graph for trust-aware PageRank."""

    def __init__(self, allow_duplicates: bool = True) -> None:
        self.allow_duplicates = allow_duplicates
        self._nodes: list[str] = []
        self._index: dict[str, int] = {}
        self._outgoing: list[list[tuple[int, float]]] = []
        self._incoming: list[int] = []
        # (source, target) -> slot in _outgoing[source]; used when overwriting
        self._edge_slots: dict[tuple[int, int], int] = {}
        self._edge_count = 0
        self._snapshot: _Snapshot | None = None

    # -------------------------------------------------------------------------
    # CONSTRUCTION
    # -------------------------------------------------------------------------

    def _node_index(self, node: str) -> int:
        index = self._index.get(node)
        if index is None:
            index = len(self._nodes)
            self._nodes.append(node)
            self._index[node] = index
            self._outgoing.append([])
            self._incoming.append(0)
        return index

    def add_edge(self, source: str, target: str, base_weight: float) -> None:
        """Add an attestation edge ``source -> target``.

        Both nodes are registered if new. With allow_duplicates=False an
        existing (source, target) edge has its weight overwritten.

        Raises:
            InvalidEdgeError: If either identifier is empty or not a string.
            InvalidWeightError: If the weight is negative, NaN or infinite.
        """
        for role, node in (("source", source), ("target", target)):
            if not isinstance(node, str) or not node:
                raise InvalidEdgeError(f"Edge {role} must be a non-empty string, got {node!r}")
        if isinstance(base_weight, bool) or not isinstance(base_weight, int | float):
            raise InvalidWeightError(base_weight, source, target)
        if not math.isfinite(base_weight) or base_weight < 0:
            raise InvalidWeightError(base_weight, source, target)

        src = self._node_index(source)
        dst = self._node_index(target)
        weight = float(base_weight)
        edges = self._outgoing[src]

        slot = self._edge_slots.get((src, dst))
        if not self.allow_duplicates and slot is not None:
            edges[slot] = (dst, weight)
        else:
            self._edge_slots.setdefault((src, dst), len(edges))
            edges.append((dst, weight))
            self._incoming[dst] += 1
            self._edge_count += 1

        self._snapshot = None

    def add_edges(self, edges: Iterable[tuple[str, str, float]]) -> None:
        """Add many ``(source, target, base_weight)`` edges in order."""
        for source, target, base_weight in edges:
            self.add_edge(source, target, base_weight)

    # -------------------------------------------------------------------------
    # INSPECTION
    # -------------------------------------------------------------------------

    def nodes(self) -> list[str]:
        """All nodes, in insertion order."""
        return list(self._nodes)

    def outgoing(self, node: str) -> list[tuple[str, float]]:
        """Outgoing ``(target, base_weight)`` edges of ``node``."""
        index = self._index.get(node)
        if index is None:
            return []
        return [(self._nodes[dst], weight) for dst, weight in self._outgoing[index]]

    def incoming_count(self, node: str) -> int:
        index = self._index.get(node)
        return self._incoming[index] if index is not None else 0

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._index

    def __repr__(self) -> str:
        return (
            f"GraphComputer(nodes={len(self._nodes)}, edges={self._edge_count}, "
            f"allow_duplicates={self.allow_duplicates})"
        )

    def _canonical(self) -> _Snapshot:
        if self._snapshot is not None:
            return self._snapshot

        order = sorted(range(len(self._nodes)), key=self._nodes.__getitem__)
        rank = [0] * len(order)
        for position, index in enumerate(order):
            rank[index] = position

        sources: list[int] = []
        targets: list[int] = []
        weights: list[float] = []
        self_vouching: set[str] = set()
        for index in order:
            # sorted() is stable, so parallel edges keep insertion order
            for dst, weight in sorted(self._outgoing[index], key=lambda edge: rank[edge[0]]):
                if dst == index:
                    self_vouching.add(self._nodes[index])
                    continue
                sources.append(rank[index])
                targets.append(rank[dst])
                weights.append(weight)

        self._snapshot = _Snapshot(
            node_ids=[self._nodes[index] for index in order],
            sources=np.array(sources, dtype=np.intp),
            targets=np.array(targets, dtype=np.intp),
            base_weights=np.array(weights, dtype=np.float64),
            self_vouching=frozenset(self_vouching),
        )
        return self._snapshot

    def effective_edges(self, config: PageRankConfig) -> list[tuple[str, str, float]]:
        """Every non-self-loop edge with its clamped effective weight.

        Canonical order: source identifier, then target identifier.
        """
        snap = self._canonical()
        if not snap.node_ids:
            return []
        seed_mask = np.array([config.trust_config.is_trusted_seed(n) for n in snap.node_ids], dtype=bool)
        weights = effective_weights(snap.base_weights, seed_mask[snap.sources], config)
        return [
            (snap.node_ids[src], snap.node_ids[dst], weight)
            for src, dst, weight in zip(snap.sources.tolist(), snap.targets.tolist(), weights.tolist())
        ]

    # -------------------------------------------------------------------------
    # SCORING
    # -------------------------------------------------------------------------

    def solve(self, config: PageRankConfig) -> PageRankResult:
        """Run trust-aware PageRank and return scores with diagnostics."""
        snap = self._canonical()
        result = solve_pagerank(snap.node_ids, snap.sources, snap.targets, snap.base_weights, config)
        if snap.self_vouching:
            logger.debug(f"Ignored self-vouching edges on {len(snap.self_vouching)} nodes")
        if result.trust_active and logger.isEnabledFor(logging.DEBUG):
            log_trust_statistics(
                compute_trust_statistics(
                    result.scores,
                    config.trust_config.trusted_seeds,
                    result.distances,
                    self_vouching_count=len(snap.self_vouching),
                )
            )
        return result

    def calculate_pagerank(self, config: PageRankConfig) -> dict[str, float]:
        """Trust-aware PageRank scores, summing to 1. Empty graph -> {}."""
        return self.solve(config).scores

    def trust_statistics(self, scores: Mapping[str, float], config: PageRankConfig) -> TrustStatistics:
        """Summarise ``scores`` by seed / regular / isolated node category."""
        snap = self._canonical()
        trust = config.trust_config
        seed_mask = np.array([trust.is_trusted_seed(n) for n in snap.node_ids], dtype=bool)

        distances: dict[str, int] = {}
        if seed_mask.any():
            weights = effective_weights(snap.base_weights, seed_mask[snap.sources], config)
            by_index = seed_distances(snap.sources, snap.targets, weights, seed_mask, trust.distance_mode)
            distances = {snap.node_ids[index]: distance for index, distance in by_index.items()}

        return compute_trust_statistics(
            scores,
            trust.trusted_seeds,
            distances,
            self_vouching_count=len(snap.self_vouching),
        )

    # -------------------------------------------------------------------------
    # DISTRIBUTION
    # -------------------------------------------------------------------------

    def allocate_points(self, scores: Mapping[str, float], total_pool: int) -> DistributionResult:
        """Largest-remainder allocation with the undistributed remainder reported."""
        return allocate_points(scores, total_pool)

    def distribute_points(self, scores: Mapping[str, float], total_pool: int) -> dict[str, int]:
        """Integer allocation per node, summing exactly to ``total_pool``.

        Nodes are those in ``scores`` (which may have been filtered or
        adjusted by the caller). Empty or zero-sum scores give every node 0
        and leave the pool undistributed.
        """
        return allocate_points(scores, total_pool).allocations
