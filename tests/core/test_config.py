"""Tests for TrustConfig and PageRankConfig.

Tests cover:
1. Defaults match the "no trust" configuration
2. Seeded defaults via TrustConfig.with_seeds
3. Range validation for every parameter
4. Frozen configs and validated replace()
5. Loading from environment variables
6. Enum parsing
7. Serialization
"""

from __future__ import annotations

import dataclasses
import math

import pytest

from trustrank.core.config import (
    DistanceMode,
    PageRankConfig,
    TrustConfig,
    WeightNormalization,
)
from trustrank.core.exceptions import InvalidConfigError


class TestTrustConfigDefaults:
    """Test TrustConfig construction."""

    def test_defaults_disable_trust(self):
        config = TrustConfig()
        assert config.trusted_seeds == frozenset()
        assert config.trust_multiplier == 1.0
        assert config.trust_share == 0.0
        assert config.trust_decay == 0.0
        assert config.distance_mode is DistanceMode.UNDIRECTED
        assert config.has_trust_enabled is False

    def test_seeds_collapse_duplicates(self):
        config = TrustConfig(trusted_seeds=["0xabc", "0xabc", "0xdef"])
        assert config.trusted_seeds == frozenset({"0xabc", "0xdef"})
        assert config.has_trust_enabled is True

    def test_is_trusted_seed(self):
        config = TrustConfig(trusted_seeds={"alice"})
        assert config.is_trusted_seed("alice")
        assert not config.is_trusted_seed("bob")

    def test_with_seeds_uses_seeded_defaults(self):
        config = TrustConfig.with_seeds(["alice"])
        assert config.trust_multiplier == 2.0
        assert config.trust_share == 0.15
        assert config.trust_decay == 0.8

    def test_with_seeds_overrides(self):
        config = TrustConfig.with_seeds(["alice"], trust_share=0.4)
        assert config.trust_share == 0.4
        assert config.trust_multiplier == 2.0

    def test_distance_mode_from_string_value(self):
        config = TrustConfig(distance_mode="directed")
        assert config.distance_mode is DistanceMode.DIRECTED


class TestTrustConfigValidation:
    """Test TrustConfig range checks."""

    @pytest.mark.parametrize("share", [-0.1, 1.1, math.nan, math.inf])
    def test_rejects_bad_share(self, share):
        with pytest.raises(InvalidConfigError) as exc_info:
            TrustConfig(trust_share=share)
        assert exc_info.value.field == "trust_share"

    @pytest.mark.parametrize("decay", [-0.5, 2.0])
    def test_rejects_bad_decay(self, decay):
        with pytest.raises(InvalidConfigError, match="trust_decay"):
            TrustConfig(trust_decay=decay)

    def test_rejects_negative_multiplier(self):
        with pytest.raises(InvalidConfigError, match="trust_multiplier"):
            TrustConfig(trust_multiplier=-1.0)

    def test_accepts_zero_multiplier(self):
        assert TrustConfig(trust_multiplier=0.0).trust_multiplier == 0.0

    def test_boundaries_accepted(self):
        config = TrustConfig(trust_share=1.0, trust_decay=0.0)
        assert config.trust_share == 1.0
        assert config.trust_decay == 0.0

    def test_rejects_string_as_seed_collection(self):
        with pytest.raises(InvalidConfigError, match="trusted_seeds"):
            TrustConfig(trusted_seeds="alice")

    @pytest.mark.parametrize("seeds", [5, 1.5, object()])
    def test_rejects_non_iterable_seeds(self, seeds):
        with pytest.raises(InvalidConfigError) as exc_info:
            TrustConfig(trusted_seeds=seeds)
        assert exc_info.value.field == "trusted_seeds"

    def test_rejects_empty_seed(self):
        with pytest.raises(InvalidConfigError, match="trusted_seeds"):
            TrustConfig(trusted_seeds=["alice", ""])

    def test_rejects_non_numeric(self):
        with pytest.raises(InvalidConfigError, match="trust_share"):
            TrustConfig(trust_share="0.5")

    def test_rejects_unknown_distance_mode(self):
        with pytest.raises(InvalidConfigError, match="distance_mode"):
            TrustConfig(distance_mode="sideways")


class TestPageRankConfigValidation:
    """Test PageRankConfig range checks."""

    def test_defaults(self):
        config = PageRankConfig()
        assert config.damping_factor == 0.85
        assert config.max_iterations == 100
        assert config.tolerance == 1e-6
        assert config.min_weight == 0.0
        assert config.max_weight == 100.0
        assert config.normalization is WeightNormalization.OUT_DEGREE
        assert config.trust_config == TrustConfig()

    @pytest.mark.parametrize("damping", [0.0, 1.0, -0.2, 1.5])
    def test_rejects_damping_outside_open_interval(self, damping):
        with pytest.raises(InvalidConfigError) as exc_info:
            PageRankConfig(damping_factor=damping)
        assert exc_info.value.field == "damping_factor"

    @pytest.mark.parametrize("tolerance", [0.0, -1e-6])
    def test_rejects_non_positive_tolerance(self, tolerance):
        with pytest.raises(InvalidConfigError, match="tolerance"):
            PageRankConfig(tolerance=tolerance)

    @pytest.mark.parametrize("iterations", [0, -5, 1.5, True])
    def test_rejects_bad_iterations(self, iterations):
        with pytest.raises(InvalidConfigError, match="max_iterations"):
            PageRankConfig(max_iterations=iterations)

    def test_rejects_min_above_max(self):
        with pytest.raises(InvalidConfigError, match="min_weight"):
            PageRankConfig(min_weight=10.0, max_weight=5.0)

    def test_rejects_negative_min_weight(self):
        with pytest.raises(InvalidConfigError, match="min_weight"):
            PageRankConfig(min_weight=-1.0)

    def test_equal_min_max_allowed(self):
        config = PageRankConfig(min_weight=3.0, max_weight=3.0)
        assert config.min_weight == config.max_weight == 3.0

    def test_rejects_non_trust_config(self):
        with pytest.raises(InvalidConfigError, match="trust_config"):
            PageRankConfig(trust_config={"trusted_seeds": ["a"]})

    def test_normalization_from_string(self):
        config = PageRankConfig(normalization="CAPACITY")
        assert config.normalization is WeightNormalization.CAPACITY


class TestImmutability:
    """Configs are frozen; replace() re-validates."""

    def test_assignment_rejected(self):
        config = PageRankConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.damping_factor = 0.5  # type: ignore[misc]

    def test_replace_returns_new_config(self):
        config = PageRankConfig()
        updated = config.replace(damping_factor=0.9)
        assert updated.damping_factor == 0.9
        assert config.damping_factor == 0.85

    def test_replace_validates(self):
        with pytest.raises(InvalidConfigError):
            PageRankConfig().replace(damping_factor=1.0)
        with pytest.raises(InvalidConfigError):
            TrustConfig().replace(trust_share=2.0)

    def test_with_trust_config(self):
        trust = TrustConfig.with_seeds(["alice"])
        config = PageRankConfig().with_trust_config(trust)
        assert config.trust_config is trust
        assert config.trust_config.has_trust_enabled


class TestFromEnv:
    """Test environment variable loading."""

    def test_empty_environment_gives_defaults(self):
        assert PageRankConfig.from_env(environ={}) == PageRankConfig()

    def test_reads_all_parameters(self):
        env = {
            "TRUSTRANK_DAMPING_FACTOR": "0.9",
            "TRUSTRANK_MAX_ITERATIONS": "250",
            "TRUSTRANK_TOLERANCE": "1e-8",
            "TRUSTRANK_MIN_WEIGHT": "1",
            "TRUSTRANK_MAX_WEIGHT": "50",
            "TRUSTRANK_NORMALIZATION": "capacity",
            "TRUSTRANK_TRUSTED_SEEDS": "0xaaa, 0xbbb,,",
            "TRUSTRANK_TRUST_MULTIPLIER": "3",
            "TRUSTRANK_TRUST_SHARE": "0.2",
            "TRUSTRANK_TRUST_DECAY": "0.7",
            "TRUSTRANK_DISTANCE_MODE": "reverse",
        }
        config = PageRankConfig.from_env(environ=env)

        assert config.damping_factor == 0.9
        assert config.max_iterations == 250
        assert config.tolerance == 1e-8
        assert config.min_weight == 1.0
        assert config.max_weight == 50.0
        assert config.normalization is WeightNormalization.CAPACITY
        assert config.trust_config.trusted_seeds == frozenset({"0xaaa", "0xbbb"})
        assert config.trust_config.trust_multiplier == 3.0
        assert config.trust_config.trust_share == 0.2
        assert config.trust_config.trust_decay == 0.7
        assert config.trust_config.distance_mode is DistanceMode.REVERSE

    def test_custom_prefix(self):
        config = PageRankConfig.from_env(prefix="PR_", environ={"PR_DAMPING_FACTOR": "0.5"})
        assert config.damping_factor == 0.5

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("TRUSTRANK_TRUST_SHARE", "0.3")
        assert TrustConfig.from_env().trust_share == 0.3

    def test_unparseable_float_names_variable(self):
        with pytest.raises(InvalidConfigError, match="TRUSTRANK_TOLERANCE"):
            PageRankConfig.from_env(environ={"TRUSTRANK_TOLERANCE": "tiny"})

    def test_blank_values_keep_defaults(self):
        env = {"TRUSTRANK_MAX_ITERATIONS": "  ", "TRUSTRANK_TOLERANCE": ""}
        config = PageRankConfig.from_env(environ=env)
        assert config.max_iterations == 100
        assert config.tolerance == 1e-6

    def test_unparseable_iterations_names_variable(self):
        with pytest.raises(InvalidConfigError, match="TRUSTRANK_MAX_ITERATIONS"):
            PageRankConfig.from_env(environ={"TRUSTRANK_MAX_ITERATIONS": "ten"})

    def test_out_of_range_value_rejected(self):
        with pytest.raises(InvalidConfigError, match="damping_factor"):
            PageRankConfig.from_env(environ={"TRUSTRANK_DAMPING_FACTOR": "1.0"})


class TestSerialization:
    """Test to_dict output."""

    def test_trust_config_to_dict(self):
        config = TrustConfig(trusted_seeds={"b", "a"}, trust_share=0.5)
        d = config.to_dict()
        assert d["trusted_seeds"] == ["a", "b"]
        assert d["trust_share"] == 0.5
        assert d["distance_mode"] == "undirected"

    def test_pagerank_config_to_dict(self):
        d = PageRankConfig(normalization=WeightNormalization.CAPACITY).to_dict()
        assert d["damping_factor"] == 0.85
        assert d["normalization"] == "capacity"
        assert d["trust_config"]["trusted_seeds"] == []
