"""Configuration for trust-aware PageRank.

Two frozen dataclasses:
- TrustConfig: trusted seeds and the three trust tuning parameters
- PageRankConfig: solver parameters plus one TrustConfig

Both validate in ``__post_init__`` and raise InvalidConfigError on
out-of-range values. Being frozen, a config can only change through
``replace()``, which re-runs validation.
"""

from __future__ import annotations

import dataclasses
import math
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from . import defaults
from .exceptions import InvalidConfigError


class DistanceMode(str, Enum):
    """Which view of the graph the seed-distance BFS walks."""

    UNDIRECTED = "undirected"  # closeness to a seed regardless of direction
    DIRECTED = "directed"  # follow attestations outward from seeds
    REVERSE = "reverse"  # follow attestations back toward seeds

    @classmethod
    def from_string(cls, value: str) -> DistanceMode:
        """Convert string to DistanceMode, case-insensitive."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidConfigError("distance_mode", f"unknown mode {value!r}") from None


class WeightNormalization(str, Enum):
    """How a node's outgoing edge weights are turned into transition shares.

    Under OUT_DEGREE a closed cycle keeps nearly all of the mass, so a seed
    that only attests into the cycle can rank below it. Use CAPACITY if the
    seed is expected to lead.
    """

    OUT_DEGREE = "out_degree"  # divide by the sum of effective out weights
    CAPACITY = "capacity"  # divide by (positive out edges * max_weight)

    @classmethod
    def from_string(cls, value: str) -> WeightNormalization:
        """Convert string to WeightNormalization, case-insensitive."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidConfigError("normalization", f"unknown normalization {value!r}") from None


def _check_finite(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidConfigError(name, f"must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidConfigError(name, f"must be finite, got {value}")
    return float(value)


def _check_unit_interval(name: str, value: Any) -> float:
    value = _check_finite(name, value)
    if not 0.0 <= value <= 1.0:
        raise InvalidConfigError(name, f"must be in [0, 1], got {value}")
    return value


# =============================================================================
# TRUST CONFIG
# =============================================================================


@dataclass(frozen=True)
class TrustConfig:
    """Trusted seeds and how strongly they bias the ranking.

    Defaults disable every trust effect: no seeds, 1x multiplier, no
    reserved share and no decay.
    """

    trusted_seeds: frozenset[str] = field(default_factory=frozenset)

    # Multiplier on the weight of edges whose source is a trusted seed
    trust_multiplier: float = defaults.TRUST_MULTIPLIER

    # Fraction of initial / teleport mass reserved for trusted seeds
    trust_share: float = defaults.TRUST_SHARE

    # Per-hop decay of teleport mass by distance from the nearest seed
    trust_decay: float = defaults.TRUST_DECAY

    distance_mode: DistanceMode = DistanceMode.UNDIRECTED

    def __post_init__(self) -> None:
        seeds = self.trusted_seeds
        if isinstance(seeds, str):
            raise InvalidConfigError("trusted_seeds", "must be a collection of identifiers, not a string")
        try:
            seeds = frozenset(seeds)
        except TypeError:
            raise InvalidConfigError(
                "trusted_seeds", f"must be a collection of identifiers, got {type(seeds).__name__}"
            ) from None
        for seed in seeds:
            if not isinstance(seed, str) or not seed:
                raise InvalidConfigError("trusted_seeds", f"seed identifiers must be non-empty strings, got {seed!r}")
        object.__setattr__(self, "trusted_seeds", seeds)

        multiplier = _check_finite("trust_multiplier", self.trust_multiplier)
        if multiplier < 0:
            raise InvalidConfigError("trust_multiplier", f"must be >= 0, got {multiplier}")
        object.__setattr__(self, "trust_multiplier", multiplier)
        object.__setattr__(self, "trust_share", _check_unit_interval("trust_share", self.trust_share))
        object.__setattr__(self, "trust_decay", _check_unit_interval("trust_decay", self.trust_decay))

        if not isinstance(self.distance_mode, DistanceMode):
            object.__setattr__(self, "distance_mode", DistanceMode.from_string(str(self.distance_mode)))

    @classmethod
    def with_seeds(cls, seeds: Iterable[str], **overrides: Any) -> TrustConfig:
        """Build a config with seeds and the seeded defaults (2x, 15%, 0.8)."""
        params: dict[str, Any] = {
            "trust_multiplier": defaults.SEEDED_TRUST_MULTIPLIER,
            "trust_share": defaults.SEEDED_TRUST_SHARE,
            "trust_decay": defaults.SEEDED_TRUST_DECAY,
        }
        params.update(overrides)
        return cls(trusted_seeds=frozenset(seeds), **params)

    @property
    def has_trust_enabled(self) -> bool:
        return bool(self.trusted_seeds)

    def is_trusted_seed(self, node: str) -> bool:
        return node in self.trusted_seeds

    def replace(self, **changes: Any) -> TrustConfig:
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "trusted_seeds": sorted(self.trusted_seeds),
            "trust_multiplier": self.trust_multiplier,
            "trust_share": self.trust_share,
            "trust_decay": self.trust_decay,
            "distance_mode": self.distance_mode.value,
        }

    @classmethod
    def from_env(
        cls,
        prefix: str = defaults.ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> TrustConfig:
        """Load a TrustConfig from environment variables.

        Reads ``{prefix}TRUSTED_SEEDS`` (comma-separated),
        ``{prefix}TRUST_MULTIPLIER``, ``{prefix}TRUST_SHARE``,
        ``{prefix}TRUST_DECAY`` and ``{prefix}DISTANCE_MODE``. Unset
        variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        raw_seeds = env.get(f"{prefix}TRUSTED_SEEDS", "")
        seeds = frozenset(s.strip() for s in raw_seeds.split(",") if s.strip())
        return cls(
            trusted_seeds=seeds,
            trust_multiplier=_env_float(env, prefix, "TRUST_MULTIPLIER", defaults.TRUST_MULTIPLIER),
            trust_share=_env_float(env, prefix, "TRUST_SHARE", defaults.TRUST_SHARE),
            trust_decay=_env_float(env, prefix, "TRUST_DECAY", defaults.TRUST_DECAY),
            distance_mode=DistanceMode.from_string(env.get(f"{prefix}DISTANCE_MODE", DistanceMode.UNDIRECTED.value)),
        )


# =============================================================================
# PAGERANK CONFIG
# =============================================================================


@dataclass(frozen=True)
class PageRankConfig:
    """Solver parameters for trust-aware PageRank."""

    damping_factor: float = defaults.DAMPING_FACTOR
    max_iterations: int = defaults.MAX_ITERATIONS

    # Stop when the L1 change between iterations falls below this
    tolerance: float = defaults.TOLERANCE

    # Clamp applied to every effective edge weight
    min_weight: float = defaults.MIN_WEIGHT
    max_weight: float = defaults.MAX_WEIGHT

    normalization: WeightNormalization = WeightNormalization.OUT_DEGREE
    trust_config: TrustConfig = field(default_factory=TrustConfig)

    def __post_init__(self) -> None:
        damping = _check_finite("damping_factor", self.damping_factor)
        if not 0.0 < damping < 1.0:
            raise InvalidConfigError("damping_factor", f"must be in (0, 1), got {damping}")
        object.__setattr__(self, "damping_factor", damping)

        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise InvalidConfigError("max_iterations", f"must be an integer, got {self.max_iterations!r}")
        if self.max_iterations < 1:
            raise InvalidConfigError("max_iterations", f"must be >= 1, got {self.max_iterations}")

        tolerance = _check_finite("tolerance", self.tolerance)
        if tolerance <= 0:
            raise InvalidConfigError("tolerance", f"must be > 0, got {tolerance}")
        object.__setattr__(self, "tolerance", tolerance)

        min_weight = _check_finite("min_weight", self.min_weight)
        max_weight = _check_finite("max_weight", self.max_weight)
        if min_weight < 0:
            raise InvalidConfigError("min_weight", f"must be >= 0, got {min_weight}")
        if min_weight > max_weight:
            raise InvalidConfigError("min_weight", f"min_weight {min_weight} exceeds max_weight {max_weight}")
        object.__setattr__(self, "min_weight", min_weight)
        object.__setattr__(self, "max_weight", max_weight)

        if not isinstance(self.normalization, WeightNormalization):
            object.__setattr__(self, "normalization", WeightNormalization.from_string(str(self.normalization)))
        if not isinstance(self.trust_config, TrustConfig):
            raise InvalidConfigError("trust_config", f"must be a TrustConfig, got {type(self.trust_config).__name__}")

    def with_trust_config(self, trust_config: TrustConfig) -> PageRankConfig:
        return self.replace(trust_config=trust_config)

    def replace(self, **changes: Any) -> PageRankConfig:
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "damping_factor": self.damping_factor,
            "max_iterations": self.max_iterations,
            "tolerance": self.tolerance,
            "min_weight": self.min_weight,
            "max_weight": self.max_weight,
            "normalization": self.normalization.value,
            "trust_config": self.trust_config.to_dict(),
        }

    @classmethod
    def from_env(
        cls,
        prefix: str = defaults.ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> PageRankConfig:
        """Load a PageRankConfig (and its TrustConfig) from environment variables.

        Reads ``{prefix}DAMPING_FACTOR``, ``{prefix}MAX_ITERATIONS``,
        ``{prefix}TOLERANCE``, ``{prefix}MIN_WEIGHT``, ``{prefix}MAX_WEIGHT``
        and ``{prefix}NORMALIZATION``, plus everything TrustConfig.from_env
        reads.

        Raises:
            InvalidConfigError: If a variable can't be parsed or is out of range.
        """
        env = os.environ if environ is None else environ
        raw_iterations = env.get(f"{prefix}MAX_ITERATIONS")
        if raw_iterations is None or not raw_iterations.strip():
            max_iterations = defaults.MAX_ITERATIONS
        else:
            try:
                max_iterations = int(raw_iterations)
            except ValueError:
                raise InvalidConfigError(f"{prefix}MAX_ITERATIONS", f"not an integer: {raw_iterations!r}") from None

        return cls(
            damping_factor=_env_float(env, prefix, "DAMPING_FACTOR", defaults.DAMPING_FACTOR),
            max_iterations=max_iterations,
            tolerance=_env_float(env, prefix, "TOLERANCE", defaults.TOLERANCE),
            min_weight=_env_float(env, prefix, "MIN_WEIGHT", defaults.MIN_WEIGHT),
            max_weight=_env_float(env, prefix, "MAX_WEIGHT", defaults.MAX_WEIGHT),
            normalization=WeightNormalization.from_string(
                env.get(f"{prefix}NORMALIZATION", WeightNormalization.OUT_DEGREE.value)
            ),
            trust_config=TrustConfig.from_env(prefix=prefix, environ=env),
        )


def _env_float(env: Mapping[str, str], prefix: str, name: str, default: float) -> float:
    raw = env.get(f"{prefix}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidConfigError(f"{prefix}{name}", f"not a number: {raw!r}") from None
