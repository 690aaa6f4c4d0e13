"""Centralized configurable defaults for trustrank.

All tunable parameters in one place. Environment overrides are read by
``PageRankConfig.from_env`` / ``TrustConfig.from_env`` using ``ENV_PREFIX``.
"""

from __future__ import annotations

ENV_PREFIX = "TRUSTRANK_"

# PageRank
DAMPING_FACTOR = 0.85
MAX_ITERATIONS = 100
TOLERANCE = 1e-6
MIN_WEIGHT = 0.0
MAX_WEIGHT = 100.0

# Trust (no boost unless seeds are configured)
TRUST_MULTIPLIER = 1.0
TRUST_SHARE = 0.0
TRUST_DECAY = 0.0

# Seeded defaults used by TrustConfig.with_seeds()
SEEDED_TRUST_MULTIPLIER = 2.0  # 2x weight for trusted attestors
SEEDED_TRUST_SHARE = 0.15  # 15% of initial mass goes to trusted seeds
SEEDED_TRUST_DECAY = 0.8

# Solver progress is logged every N iterations
PROGRESS_LOG_INTERVAL = 10

# Number of top non-seed nodes reported in trust statistics
TOP_NODES_REPORTED = 5
