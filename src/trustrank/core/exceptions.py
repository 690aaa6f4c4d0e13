"""Exceptions raised by the trust graph engine.

Structural and configuration errors are raised at the point of invalid
input. Degenerate inputs (empty graph, zero-sum scores) are not errors and
never raise.
"""

from __future__ import annotations


class TrustRankError(Exception):
    """Base exception for trustrank errors."""
    pass


class InvalidEdgeError(TrustRankError):
    """Raised when an edge references an empty or non-string identifier."""
    pass


class InvalidWeightError(InvalidEdgeError):
    """Raised when an edge weight is negative, NaN or infinite."""

    def __init__(self, weight: object, source: str | None = None, target: str | None = None):
        self.weight = weight
        self.source = source
        self.target = target
        edge = f" on edge {source} -> {target}" if source is not None else ""
        super().__init__(f"Invalid edge weight {weight!r}{edge}: must be a finite number >= 0")


class InvalidConfigError(TrustRankError):
    """Raised when a configuration parameter is out of range."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class InvalidDistributionError(TrustRankError):
    """Raised when the allocator is given a bad pool or bad scores."""
    pass
