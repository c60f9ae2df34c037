"""
Sequential (block) assignment: sorted team numbers split into contiguous
blocks, one block per scout in roster order. Used on its own and as the
fallback when no pit coordinates are available.
"""

from typing import Iterable, List, Optional, Sequence

from pitplan.records import Assignment, make_assignment


def fair_share_sizes(total: int, n: int) -> List[int]:
    """
    Balanced group sizes: floor(total / n) each, with the first
    (total mod n) groups getting one extra.
    """
    if n <= 0:
        return []
    base, remainder = divmod(total, n)
    return [base + 1 if i < remainder else base for i in range(n)]


def create_sequential_assignments(
    event_key: str,
    scouter_names: Sequence[str],
    teams: Iterable[int],
    assigned_at: Optional[float] = None,
) -> List[Assignment]:
    """
    Assign sorted teams to scouts in contiguous blocks.

    Example: 10 teams, 3 scouts -> block sizes [4, 3, 3]; the first scout
    covers the 4 lowest team numbers.
    """
    sorted_teams = sorted(teams)
    if not sorted_teams or not scouter_names:
        return []

    assignments = []
    team_index = 0
    for scouter_name, block_size in zip(
        scouter_names, fair_share_sizes(len(sorted_teams), len(scouter_names))
    ):
        for team_number in sorted_teams[team_index:team_index + block_size]:
            assignments.append(
                make_assignment(event_key, team_number, scouter_name, assigned_at)
            )
        team_index += block_size

    return assignments
