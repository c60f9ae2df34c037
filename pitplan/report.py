"""
Progress summaries, table rows and CSV export for assignment lists.
"""

import csv
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, TextIO

from pitplan.records import Assignment

STATUS_FILTERS = ("all", "completed", "pending")
SORT_KEYS = ("team", "scouter", "status", "assigned")
CSV_HEADER = ["Team Number", "Scouter", "Status", "Assigned At"]


@dataclass
class AssignmentProgress:
    total: int
    completed: int
    pending: int
    percentage: int  # rounded, 0 when there is nothing assigned


@dataclass
class AssignmentRow:
    """One team in the results table, assigned or not."""
    team_number: int
    scouter_name: Optional[str]
    completed: bool
    assigned: bool


def progress_summary(assignments: Iterable[Assignment]) -> AssignmentProgress:
    assignments = list(assignments)
    total = len(assignments)
    completed = sum(1 for a in assignments if a.completed)
    percentage = round(completed * 100 / total) if total else 0
    return AssignmentProgress(total, completed, total - completed, percentage)


def scouter_progress(
    assignments: Iterable[Assignment], scouter_names: Sequence[str]
) -> Dict[str, AssignmentProgress]:
    assignments = list(assignments)
    return {
        name: progress_summary(a for a in assignments if a.scouter_name == name)
        for name in scouter_names
    }


def display_rows(
    assignments: Iterable[Assignment], all_teams: Iterable[int] = ()
) -> List[AssignmentRow]:
    """Merge assigned teams with unassigned ones from `all_teams`."""
    by_team = {a.team_number: a for a in assignments}
    teams = list(dict.fromkeys(list(all_teams) + list(by_team)))
    rows = []
    for team in teams:
        a = by_team.get(team)
        rows.append(AssignmentRow(
            team_number=team,
            scouter_name=a.scouter_name if a else None,
            completed=a.completed if a else False,
            assigned=a is not None,
        ))
    return rows


def filter_rows(
    rows: Iterable[AssignmentRow], status: str = "all", search: str = ""
) -> List[AssignmentRow]:
    """
    Filter by completion status and by a search string matching either a
    team-number substring or a scouter-name substring (case-insensitive).
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter '{status}'")
    needle = search.strip().lower()

    def matches(row: AssignmentRow) -> bool:
        if status == "completed" and not row.completed:
            return False
        if status == "pending" and row.completed:
            return False
        if not needle:
            return True
        return needle in str(row.team_number) or (
            row.scouter_name is not None and needle in row.scouter_name.lower()
        )

    return [r for r in rows if matches(r)]


def sort_rows(
    rows: Iterable[AssignmentRow], by: str = "team", descending: bool = False
) -> List[AssignmentRow]:
    if by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{by}'")
    keys = {
        "team": lambda r: r.team_number,
        "scouter": lambda r: (r.scouter_name or "").lower(),
        "status": lambda r: r.completed,
        "assigned": lambda r: r.assigned,
    }
    return sorted(rows, key=keys[by], reverse=descending)


def export_csv(assignments: Iterable[Assignment], f: TextIO) -> int:
    """Write assignments as CSV. Returns the number of data rows."""
    writer = csv.writer(f)
    writer.writerow(CSV_HEADER)
    count = 0
    for a in assignments:
        writer.writerow([
            a.team_number,
            a.scouter_name,
            "Completed" if a.completed else "Pending",
            datetime.fromtimestamp(a.assigned_at).date().isoformat(),
        ])
        count += 1
    return count


def format_plan_report(plan, scouter_names: Sequence[str]) -> str:
    """Text summary of a PlanResult, one block per scout in route order."""
    lines = ["=" * 60, f"  Pit Assignments ({plan.mode})", "=" * 60]

    if plan.fell_back_to_sequential:
        lines.append("  [Warning] No pit coordinates found, used sequential blocks")
    if plan.missing_teams:
        lines.append(
            f"  [Warning] {len(plan.missing_teams)} teams could not be placed "
            f"on the pit map: {plan.missing_teams}"
        )

    overall = progress_summary(plan.assignments)
    per_scouter = scouter_progress(plan.assignments, scouter_names)
    for name in scouter_names:
        teams = [a.team_number for a in plan.assignments if a.scouter_name == name]
        p = per_scouter[name]
        lines.append(f"  {name:16s} {p.total:3d} teams  {p.completed}/{p.total} done")
        if teams:
            lines.append("    " + " -> ".join(str(t) for t in teams))

    lines.append("-" * 60)
    lines.append(
        f"  Total: {overall.total} assigned, {overall.completed} completed "
        f"({overall.percentage}%)"
    )
    if plan.clustering is not None:
        c = plan.clustering
        lines.append(
            f"  Clusters: {c.cluster_sizes}  route length: {c.total_route_length:.1f}  "
            f"moves: {c.proximity_moves}  swaps: {c.swaps_applied}"
        )
    lines.append("=" * 60)
    return "\n".join(lines)
