"""
Spatial clustering engine: k-means with geographic-coherence refinement.

Pipeline:
  1. Seed centers on a near-square grid spanning the bounding box
  2. Fixed number of Lloyd iterations (assign to nearest center, recenter)
  3. Order each cluster into a walking route
  4. Proximity reassignment: move teams that sit next to another cluster
  5. Swap optimization: apply the single best spread-reducing swap per round
  6. Drop empty clusters

Plain k-means on pit coordinates balances counts but can leave a team in
cluster A while it is physically adjacent to cluster B. Steps 4-5 are
bounded local-search corrections for that.

Internally positions live in an arena (coordinate array + distance matrix)
and clusters are lists of arena indices. TeamPositions are only rebuilt on
return.
"""

import math
import numpy as np
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass

from scipy.spatial.distance import cdist

from pitplan.config import ClusteringConfig
from pitplan.constants import ROUTE_METHOD_ORTOOLS
from pitplan.geometry import (
    pairwise_distance_matrix,
    positions_to_array,
    spread_of_members,
)
from pitplan.records import TeamPosition
from pitplan.routing import nearest_neighbor_route, ortools_route, route_length
from pitplan.sequential import fair_share_sizes

SpatialCluster = List[TeamPosition]


@dataclass
class ClusteringResult:
    """Clusters (each in walking order) plus refinement diagnostics."""
    clusters: List[SpatialCluster]
    lloyd_iterations: int = 0
    proximity_passes: int = 0
    proximity_moves: int = 0
    swap_iterations: int = 0
    swaps_applied: int = 0

    @property
    def cluster_sizes(self) -> List[int]:
        return [len(c) for c in self.clusters]

    @property
    def team_numbers(self) -> List[List[int]]:
        return [[p.team_number for p in c] for c in self.clusters]

    @property
    def total_route_length(self) -> float:
        return sum(route_length(c) for c in self.clusters)


class SpatialClusterer:
    """Partitions team positions into balanced, walkable groups."""

    def __init__(self, config: Optional[ClusteringConfig] = None):
        self.config = (config or ClusteringConfig()).validate()

    def seed_centers(self, coords: np.ndarray, num_clusters: int) -> np.ndarray:
        """
        Lay out seed centers on a grid with ceil(sqrt(k)) columns, spanning
        the bounding box of all positions.
        """
        cols = math.ceil(math.sqrt(num_clusters))
        rows = math.ceil(num_clusters / cols)

        min_x, min_y = coords.min(axis=0)
        max_x, max_y = coords.max(axis=0)

        centers = np.zeros((num_clusters, 2), dtype=np.float64)
        for i in range(num_clusters):
            row, col = divmod(i, cols)
            centers[i, 0] = min_x + (col / ((cols - 1) or 1)) * (max_x - min_x)
            centers[i, 1] = min_y + (row / ((rows - 1) or 1)) * (max_y - min_y)
        return centers

    def run_lloyd(self, coords: np.ndarray, centers: np.ndarray) -> List[List[int]]:
        """
        Fixed-round k-means. Ties go to the lowest center index; centers
        with no members keep their previous position.
        """
        centers = centers.copy()
        clusters: List[List[int]] = []

        for _ in range(self.config.lloyd_iterations):
            labels = np.argmin(cdist(coords, centers), axis=1)

            clusters = [[] for _ in range(len(centers))]
            for idx, label in enumerate(labels):
                clusters[int(label)].append(idx)

            for c, members in enumerate(clusters):
                if members:
                    centers[c] = coords[members].mean(axis=0)

        return clusters

    def order_route(
        self, coords: np.ndarray, members: List[int], dist: np.ndarray
    ) -> List[int]:
        if self.config.route_method == ROUTE_METHOD_ORTOOLS:
            return ortools_route(
                coords, members, dist, self.config.route_time_limit_seconds
            )
        return nearest_neighbor_route(coords, members, dist)

    def apply_proximity_reassignment(
        self, clusters: List[List[int]], dist: np.ndarray
    ) -> Tuple[int, int]:
        """
        Move teams that are clearly closer to another cluster's nearest
        member than to their own cluster's nearest member.

        Guards per move:
          - destination stays within fair-share size + slack
          - source stays above max(1, fair-share size - slack)
          - destination spread stays under the cap

        Mutates `clusters` in place. Returns (passes, moves).
        """
        cfg = self.config
        num_clusters = len(clusters)
        total = sum(len(c) for c in clusters)
        targets = fair_share_sizes(total, num_clusters)

        passes = 0
        moves = 0
        changed = True

        while changed and passes < cfg.proximity_max_passes:
            changed = False
            passes += 1

            for i in range(num_clusters):
                for team_index in range(len(clusters[i]) - 1, -1, -1):
                    team = clusters[i][team_index]

                    # Closest other cluster, by distance to its nearest member
                    best_cluster = i
                    best_distance = math.inf
                    for j in range(num_clusters):
                        if j == i or not clusters[j]:
                            continue
                        d = float(dist[team, clusters[j]].min())
                        if d < best_distance:
                            best_distance = d
                            best_cluster = j

                    others = clusters[i][:team_index] + clusters[i][team_index + 1:]
                    current_distance = float(dist[team, others].min()) if others else math.inf

                    very_close = best_distance <= cfg.very_close_distance
                    ratio = cfg.very_close_ratio if very_close else cfg.proximity_ratio

                    if best_cluster == i or not best_distance < current_distance * ratio:
                        continue

                    spread = spread_of_members(dist, clusters[best_cluster] + [team])
                    max_spread = cfg.very_close_max_spread if very_close else cfg.max_cluster_spread

                    if (len(clusters[best_cluster]) < targets[best_cluster] + cfg.cluster_size_slack
                            and len(clusters[i]) > max(1, targets[i] - cfg.cluster_size_slack)
                            and spread <= max_spread):
                        del clusters[i][team_index]
                        clusters[best_cluster].append(team)
                        changed = True
                        moves += 1

        return passes, moves

    def apply_swap_optimization(
        self, clusters: List[List[int]], dist: np.ndarray
    ) -> Tuple[int, int]:
        """
        Evaluate every single team-for-team swap between every cluster pair
        and apply only the best one per iteration, if it reduces combined
        spread by more than the noise floor.

        Mutates `clusters` in place. Returns (iterations, swaps applied).
        """
        cfg = self.config
        num_clusters = len(clusters)

        iterations = 0
        swaps = 0
        improved = True

        while improved and iterations < cfg.swap_max_iterations:
            improved = False
            iterations += 1

            spreads = [spread_of_members(dist, c) for c in clusters]
            # Spread of each cluster with one member taken out
            without = [
                [spread_of_members(dist, c[:k] + c[k + 1:]) for k in range(len(c))]
                for c in clusters
            ]

            best = None  # (improvement, i, j, ti, tj)
            for i in range(num_clusters):
                for j in range(i + 1, num_clusters):
                    ci, cj = clusters[i], clusters[j]
                    current_total = spreads[i] + spreads[j]

                    for ti in range(len(ci)):
                        rest_i = ci[:ti] + ci[ti + 1:]
                        for tj in range(len(cj)):
                            rest_j = cj[:tj] + cj[tj + 1:]

                            new_i = without[i][ti]
                            if rest_i:
                                new_i = max(new_i, float(dist[cj[tj], rest_i].max()))
                            new_j = without[j][tj]
                            if rest_j:
                                new_j = max(new_j, float(dist[ci[ti], rest_j].max()))

                            improvement = current_total - (new_i + new_j)
                            if improvement > 0 and (best is None or improvement > best[0]):
                                best = (improvement, i, j, ti, tj)

            if best is not None and best[0] > cfg.swap_noise_floor:
                _, i, j, ti, tj = best
                clusters[i][ti], clusters[j][tj] = clusters[j][tj], clusters[i][ti]
                improved = True
                swaps += 1

        return iterations, swaps

    def cluster(
        self, team_positions: Sequence[TeamPosition], num_clusters: int
    ) -> ClusteringResult:
        """
        Partition positions into `num_clusters` groups, each in walking order.

        Empty input or num_clusters <= 0 gives no clusters. A single cluster
        is returned as given, without reordering.
        """
        if len(team_positions) == 0 or num_clusters <= 0:
            return ClusteringResult(clusters=[])

        if num_clusters == 1:
            return ClusteringResult(clusters=[list(team_positions)])

        coords = positions_to_array(team_positions)
        dist = pairwise_distance_matrix(coords)

        centers = self.seed_centers(coords, num_clusters)
        clusters = self.run_lloyd(coords, centers)

        clusters = [
            self.order_route(coords, members, dist) if len(members) > 1 else members
            for members in clusters
        ]

        proximity_passes, proximity_moves = self.apply_proximity_reassignment(clusters, dist)
        swap_iterations, swaps_applied = self.apply_swap_optimization(clusters, dist)

        return ClusteringResult(
            clusters=[
                [team_positions[idx] for idx in members]
                for members in clusters if members
            ],
            lloyd_iterations=self.config.lloyd_iterations,
            proximity_passes=proximity_passes,
            proximity_moves=proximity_moves,
            swap_iterations=swap_iterations,
            swaps_applied=swaps_applied,
        )


def create_spatial_clusters(
    team_positions: Sequence[TeamPosition],
    num_clusters: int,
    config: Optional[ClusteringConfig] = None,
) -> List[SpatialCluster]:
    """Convenience wrapper returning only the clusters."""
    return SpatialClusterer(config).cluster(team_positions, num_clusters).clusters
