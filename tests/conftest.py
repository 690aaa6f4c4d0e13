"""Shared fixtures for trustrank tests."""

from __future__ import annotations

import pytest

from trustrank import GraphComputer, PageRankConfig, TrustConfig


@pytest.fixture
def example_graph() -> GraphComputer:
    """A <-> B with C vouching for A at half weight."""
    graph = GraphComputer()
    graph.add_edge("A", "B", 1.0)
    graph.add_edge("B", "A", 1.0)
    graph.add_edge("C", "A", 0.5)
    return graph


@pytest.fixture
def example_trust() -> TrustConfig:
    return TrustConfig(
        trusted_seeds=frozenset({"C"}),
        trust_multiplier=2.0,
        trust_share=0.5,
        trust_decay=0.5,
    )


@pytest.fixture
def example_config(example_trust: TrustConfig) -> PageRankConfig:
    return PageRankConfig(
        damping_factor=0.85,
        max_iterations=100,
        tolerance=1e-6,
        trust_config=example_trust,
    )
