"""
Assignment orchestrator.

Selects a strategy by mode and wraps its output into Assignment records:
  - sequential: numeric blocks per scout
  - spatial:    pit-map extraction -> clustering -> cluster i to scout i mod n,
                falling back to sequential when no team has coordinates
  - manual:     starts empty; filled through add/remove/toggle below

The manual mutators are pure: they return a new list and never modify the
caller's list or records.
"""

import time
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pitplan.clustering import ClusteringResult, SpatialClusterer
from pitplan.config import ClusteringConfig
from pitplan.extractor import ExtractionResult, extract_team_positions
from pitplan.records import Assignment, AssignmentMode, make_assignment
from pitplan.sequential import create_sequential_assignments


@dataclass
class PlanResult:
    """Result of one planning run."""
    assignments: List[Assignment]
    mode: str
    fell_back_to_sequential: bool = False
    extraction: Optional[ExtractionResult] = None   # spatial mode only
    clustering: Optional[ClusteringResult] = None   # spatial mode, no fallback

    @property
    def missing_teams(self) -> List[int]:
        if self.extraction is None:
            return []
        return self.extraction.missing_teams


def _log(verbose: bool, message: str) -> None:
    if verbose:
        print(f"[PitPlanner] {message}")


def plan_pit_assignments(
    mode: str,
    event_key: str,
    scouter_names: Sequence[str],
    teams: Sequence[int],
    pit_addresses: Optional[Mapping[Any, str]] = None,
    pit_map_data: Optional[Mapping[str, Any]] = None,
    config: Optional[ClusteringConfig] = None,
    assigned_at: Optional[float] = None,
    verbose: bool = False,
) -> PlanResult:
    """
    Build a fresh batch of assignments for one event.

    Args:
        mode: 'sequential', 'spatial' or 'manual'
        event_key: event the assignments belong to
        scouter_names: roster; order decides cluster/block binding
        teams: team numbers present at the event
        pit_addresses: optional team -> pit id table (spatial mode)
        pit_map_data: optional provider pit map with a 'pits' mapping
        config: clustering tuning (spatial mode)
        assigned_at: timestamp shared by the whole batch (default: now)
        verbose: print progress lines

    Returns:
        PlanResult with the assignments and diagnostics

    Raises:
        ValueError: unknown mode
    """
    if mode not in AssignmentMode.ALL:
        raise ValueError(
            f"Unknown assignment mode '{mode}' "
            f"(expected one of {', '.join(AssignmentMode.ALL)})"
        )

    stamp = time.time() if assigned_at is None else assigned_at

    if mode == AssignmentMode.MANUAL:
        return PlanResult(assignments=[], mode=mode)

    if mode == AssignmentMode.SEQUENTIAL:
        assignments = create_sequential_assignments(event_key, scouter_names, teams, stamp)
        _log(verbose, f"Sequential: {len(assignments)} teams -> {len(scouter_names)} scouts")
        return PlanResult(assignments=assignments, mode=mode)

    extraction = extract_team_positions(teams, pit_addresses, pit_map_data)
    _log(
        verbose,
        f"Positions resolved for {extraction.total_teams_found}/{len(teams)} teams"
        + (f", missing: {extraction.missing_teams}" if extraction.missing_teams else ""),
    )

    if extraction.total_teams_found == 0:
        _log(verbose, "No teams with pit coordinates, falling back to sequential")
        return PlanResult(
            assignments=create_sequential_assignments(event_key, scouter_names, teams, stamp),
            mode=mode,
            fell_back_to_sequential=True,
            extraction=extraction,
        )

    clustering = SpatialClusterer(config).cluster(
        extraction.team_positions, len(scouter_names)
    )

    assignments = []
    for index, cluster in enumerate(clustering.clusters):
        scouter_name = scouter_names[index % len(scouter_names)]
        _log(verbose, f"Cluster {index} -> {scouter_name}: {[p.team_number for p in cluster]}")
        for position in cluster:
            assignments.append(
                make_assignment(event_key, position.team_number, scouter_name, stamp)
            )

    _log(
        verbose,
        f"Spatial: {len(assignments)} teams in {len(clustering.clusters)} clusters "
        f"({clustering.proximity_moves} proximity moves, {clustering.swaps_applied} swaps)",
    )

    return PlanResult(
        assignments=assignments,
        mode=mode,
        extraction=extraction,
        clustering=clustering,
    )


def create_pit_assignments(
    mode: str,
    event_key: str,
    scouter_names: Sequence[str],
    teams: Sequence[int],
    pit_addresses: Optional[Mapping[Any, str]] = None,
    pit_map_data: Optional[Mapping[str, Any]] = None,
    config: Optional[ClusteringConfig] = None,
    assigned_at: Optional[float] = None,
    verbose: bool = False,
) -> List[Assignment]:
    """Same as plan_pit_assignments, returning only the assignments."""
    return plan_pit_assignments(
        mode, event_key, scouter_names, teams,
        pit_addresses=pit_addresses,
        pit_map_data=pit_map_data,
        config=config,
        assigned_at=assigned_at,
        verbose=verbose,
    ).assignments


# =============================================================================
# MANUAL MUTATORS
# =============================================================================

def add_manual_assignment(
    assignments: Iterable[Assignment],
    team_number: int,
    scouter_name: str,
    event_key: str,
    assigned_at: Optional[float] = None,
) -> List[Assignment]:
    """Upsert: drop any record for the team, then append the new one."""
    kept = [a for a in assignments if a.team_number != team_number]
    kept.append(make_assignment(event_key, team_number, scouter_name, assigned_at))
    return kept


def remove_manual_assignment(
    assignments: Iterable[Assignment], team_number: int
) -> List[Assignment]:
    return [a for a in assignments if a.team_number != team_number]


def toggle_assignment_completed(
    assignments: Iterable[Assignment], assignment_id: str
) -> List[Assignment]:
    return [
        replace(a, completed=not a.completed) if a.id == assignment_id else a
        for a in assignments
    ]


def clear_assignments(
    assignments: Iterable[Assignment], event_key: str
) -> List[Assignment]:
    """Drop every record of one event."""
    return [a for a in assignments if a.event_key != event_key]


def assignments_by_scouter(
    assignments: Iterable[Assignment], scouter_names: Sequence[str]
) -> Dict[str, List[Assignment]]:
    """
    Group records per scout in roster order. Records keep their list
    order, which for spatial plans is the walking route. Scouts not in the
    roster are appended after it.
    """
    grouped: Dict[str, List[Assignment]] = {name: [] for name in scouter_names}
    for a in assignments:
        grouped.setdefault(a.scouter_name, []).append(a)
    return grouped
