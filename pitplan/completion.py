"""
Completion reconciliation.

Marks assignments completed when a pit-scouting record already exists for
the team. Completion only ever goes from False to True here; clearing a
flag is the manual toggle's job.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Callable, Iterable, List, Mapping, Optional, Set, Tuple

from pitplan.records import Assignment

# (event_key, team_number) -> has a pit-scouting record
CompletionOracle = Callable[[str, int], bool]


class ScoutedTeamsOracle:
    """Set-backed oracle over known pit-scouting records."""

    def __init__(self, scouted: Iterable[Tuple[str, int]] = ()):
        self._scouted: Set[Tuple[str, int]] = {(e, int(t)) for e, t in scouted}

    def __call__(self, event_key: str, team_number: int) -> bool:
        return (event_key, int(team_number)) in self._scouted

    def __len__(self) -> int:
        return len(self._scouted)

    def add(self, event_key: str, team_number: int) -> None:
        self._scouted.add((event_key, int(team_number)))

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, Any]], default_event: Optional[str] = None
    ) -> "ScoutedTeamsOracle":
        """
        Build from pit-scouting entries. Each entry needs a team number
        (`teamNumber`) and an event (`eventKey` or `eventName`); entries
        without an event use `default_event`, entries without either are
        skipped.
        """
        scouted = []
        for record in records:
            event_key = record.get("eventKey") or record.get("eventName") or default_event
            team = record.get("teamNumber")
            if event_key is None or team is None:
                continue
            try:
                scouted.append((event_key, int(team)))
            except (TypeError, ValueError):
                continue
        return cls(scouted)


def reconcile_completion(
    assignments: Iterable[Assignment],
    oracle: CompletionOracle,
    max_workers: Optional[int] = None,
) -> List[Assignment]:
    """
    Return a new list where every assignment the oracle reports as scouted
    is completed. Records already completed are not looked up.

    Args:
        assignments: current assignments
        oracle: (event_key, team_number) -> bool
        max_workers: > 1 runs lookups on a thread pool; output order is
            unchanged either way
    """
    assignments = list(assignments)
    pending = [i for i, a in enumerate(assignments) if not a.completed]
    if not pending:
        return assignments

    def lookup(i: int) -> bool:
        a = assignments[i]
        return bool(oracle(a.event_key, a.team_number))

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            found = list(pool.map(lookup, pending))
    else:
        found = [lookup(i) for i in pending]

    result = list(assignments)
    for i, scouted in zip(pending, found):
        if scouted:
            result[i] = replace(assignments[i], completed=True)
    return result
