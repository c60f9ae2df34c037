"""Tuning parameters for the spatial clustering engine."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from pitplan.constants import (
    LLOYD_ITERATIONS,
    PROXIMITY_MAX_PASSES,
    VERY_CLOSE_DISTANCE,
    VERY_CLOSE_RATIO,
    PROXIMITY_RATIO,
    MAX_CLUSTER_SPREAD,
    VERY_CLOSE_MAX_SPREAD,
    CLUSTER_SIZE_SLACK,
    SWAP_MAX_ITERATIONS,
    SWAP_NOISE_FLOOR,
    ROUTE_METHOD_NEAREST,
    ROUTE_METHODS,
    ROUTE_TIME_LIMIT_SECONDS,
)


@dataclass
class ClusteringConfig:
    # ── K-means ──
    lloyd_iterations: int = LLOYD_ITERATIONS

    # ── Proximity reassignment ──
    proximity_max_passes: int = PROXIMITY_MAX_PASSES
    very_close_distance: float = VERY_CLOSE_DISTANCE
    very_close_ratio: float = VERY_CLOSE_RATIO
    proximity_ratio: float = PROXIMITY_RATIO
    max_cluster_spread: float = MAX_CLUSTER_SPREAD
    very_close_max_spread: float = VERY_CLOSE_MAX_SPREAD
    cluster_size_slack: int = CLUSTER_SIZE_SLACK

    # ── Swap optimization ──
    swap_max_iterations: int = SWAP_MAX_ITERATIONS
    swap_noise_floor: float = SWAP_NOISE_FLOOR

    # ── Routing ──
    route_method: str = ROUTE_METHOD_NEAREST
    route_time_limit_seconds: int = ROUTE_TIME_LIMIT_SECONDS

    def validate(self) -> "ClusteringConfig":
        """Raise ValueError on values the engine cannot work with."""
        if self.lloyd_iterations < 1:
            raise ValueError(f"lloyd_iterations must be >= 1, got {self.lloyd_iterations}")
        counts = {
            "proximity_max_passes": self.proximity_max_passes,
            "swap_max_iterations": self.swap_max_iterations,
            "cluster_size_slack": self.cluster_size_slack,
        }
        for name, value in counts.items():
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
        if self.very_close_ratio < 1.0 or self.proximity_ratio < 1.0:
            raise ValueError("proximity ratios must be >= 1.0")
        if self.very_close_distance < 0 or self.swap_noise_floor < 0:
            raise ValueError("distances must be non-negative")
        if self.max_cluster_spread < 0 or self.very_close_max_spread < 0:
            raise ValueError("spread caps must be non-negative")
        if self.route_method not in ROUTE_METHODS:
            raise ValueError(
                f"Unknown route method '{self.route_method}' "
                f"(expected one of {', '.join(ROUTE_METHODS)})"
            )
        if self.route_time_limit_seconds <= 0:
            raise ValueError("route_time_limit_seconds must be positive")
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClusteringConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown clustering option(s): {', '.join(unknown)}")
        return cls(**dict(data)).validate()

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
