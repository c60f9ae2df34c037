"""
Walking-route ordering within a cluster.

Routes start at the leftmost (minimum-x) pit and visit every member once;
the scout does not return to the start, so routes are open paths.

  - nearest_neighbor_route: greedy TSP approximation, O(n^2)
  - ortools_route: open-path TSP solved with the OR-Tools routing solver
"""

import numpy as np
from typing import List, Sequence

from pitplan.constants import ROUTE_DISTANCE_SCALE, ROUTE_TIME_LIMIT_SECONDS
from pitplan.geometry import Point, distance


def leftmost_member(coords: np.ndarray, members: Sequence[int]) -> int:
    """First member (in list order) with the minimum x coordinate."""
    best = members[0]
    for m in members[1:]:
        if coords[m, 0] < coords[best, 0]:
            best = m
    return best


def nearest_neighbor_route(
    coords: np.ndarray,
    members: Sequence[int],
    dist: np.ndarray,
) -> List[int]:
    """
    Order cluster members by repeatedly walking to the closest unvisited pit.

    Args:
        coords: (N, 2) coordinate arena
        members: indices into the arena belonging to this cluster
        dist: (N, N) pairwise distance matrix over the arena

    Returns:
        The same indices in walking order. Ties go to the earliest member.
    """
    if len(members) <= 1:
        return list(members)

    remaining = list(members)
    current = leftmost_member(coords, remaining)
    remaining.remove(current)
    route = [current]

    while remaining:
        nearest = remaining[0]
        min_distance = float("inf")
        for m in remaining:
            d = dist[current, m]
            if d < min_distance:
                min_distance = d
                nearest = m
        route.append(nearest)
        remaining.remove(nearest)
        current = nearest

    return route


def ortools_route(
    coords: np.ndarray,
    members: Sequence[int],
    dist: np.ndarray,
    time_limit_seconds: int = ROUTE_TIME_LIMIT_SECONDS,
) -> List[int]:
    """
    Order cluster members with the OR-Tools routing solver.

    Node layout:
      [0, n)  : cluster members (local indices)
      n       : dummy end node, free to reach from anywhere

    The start is pinned to the leftmost member. Uses the cheapest-arc first
    solution with plain local search so the result is deterministic. Keeps
    the nearest-neighbor order if the solver returns no solution.
    """
    if len(members) <= 2:
        return nearest_neighbor_route(coords, members, dist)

    from ortools.constraint_solver import routing_enums_pb2, pywrapcp

    members = list(members)
    n = len(members)
    dummy_end = n
    start = members.index(leftmost_member(coords, members))

    cost = [[0] * (n + 1) for _ in range(n + 1)]
    for i in range(n):
        for j in range(n):
            if i != j:
                cost[i][j] = int(round(dist[members[i], members[j]] * ROUTE_DISTANCE_SCALE))

    manager = pywrapcp.RoutingIndexManager(n + 1, 1, [start], [dummy_end])
    routing = pywrapcp.RoutingModel(manager)

    def distance_callback(from_index, to_index):
        from_node = manager.IndexToNode(from_index)
        to_node = manager.IndexToNode(to_index)
        return cost[from_node][to_node]

    transit_callback_index = routing.RegisterTransitCallback(distance_callback)
    routing.SetArcCostEvaluatorOfAllVehicles(transit_callback_index)

    search_parameters = pywrapcp.DefaultRoutingSearchParameters()
    search_parameters.first_solution_strategy = (
        routing_enums_pb2.FirstSolutionStrategy.PATH_CHEAPEST_ARC
    )
    search_parameters.time_limit.seconds = time_limit_seconds

    solution = routing.SolveWithParameters(search_parameters)
    if solution is None:
        return nearest_neighbor_route(coords, members, dist)

    route = []
    index = routing.Start(0)
    while not routing.IsEnd(index):
        node = manager.IndexToNode(index)
        if node < n:
            route.append(members[node])
        index = solution.Value(routing.NextVar(index))
    return route


def route_length(cluster: Sequence[Point]) -> float:
    """Total walking distance along an ordered cluster."""
    return sum(distance(a, b) for a, b in zip(cluster, cluster[1:]))
