"""
Distance primitives shared by the extractor, clustering engine and reports.

Pit-map coordinates are treated as a flat plane; Euclidean distance is the
proxy for walking distance.
"""

import math
import numpy as np
from typing import Sequence, Tuple, Union

from scipy.spatial.distance import pdist, squareform

from pitplan.records import TeamPosition

Point = Union[TeamPosition, Tuple[float, float]]


def _xy(p: Point) -> Tuple[float, float]:
    if isinstance(p, TeamPosition):
        return p.xy
    return float(p[0]), float(p[1])


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return math.sqrt((ax - bx) ** 2 + (ay - by) ** 2)


def positions_to_array(positions: Sequence[Point]) -> np.ndarray:
    """(N, 2) float64 array of coordinates."""
    if len(positions) == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return np.array([_xy(p) for p in positions], dtype=np.float64)


def pairwise_distance_matrix(coords: np.ndarray) -> np.ndarray:
    """Full (N, N) distance matrix."""
    if len(coords) < 2:
        return np.zeros((len(coords), len(coords)), dtype=np.float64)
    return squareform(pdist(coords))


def cluster_spread(cluster: Sequence[Point]) -> float:
    """
    Maximum pairwise distance between any two members of a cluster.

    Returns 0.0 for clusters with fewer than two members.
    """
    if len(cluster) <= 1:
        return 0.0
    return float(np.max(pdist(positions_to_array(cluster))))


def spread_of_members(dist: np.ndarray, members: Sequence[int]) -> float:
    """Cluster spread for an index list into a precomputed distance matrix."""
    if len(members) <= 1:
        return 0.0
    idx = np.asarray(members, dtype=int)
    return float(dist[np.ix_(idx, idx)].max())
