"""
Assignment data model.

Two record types flow through the planner:
  - TeamPosition: a team's pit location in pit-map coordinates. Built fresh
    for every planning run, never persisted.
  - Assignment: the persisted unit binding one team at one event to one
    scout. The id is derived from (event_key, team_number) so re-assigning
    a team replaces the previous record instead of duplicating it.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pitplan.constants import ASSIGNMENT_ID_SEPARATOR


@dataclass(frozen=True)
class TeamPosition:
    """A team's pit location."""
    team_number: int
    x: float
    y: float

    @property
    def xy(self):
        return (self.x, self.y)


@dataclass
class Assignment:
    """One team at one event, bound to one scout."""
    id: str
    event_key: str
    team_number: int
    scouter_name: str
    assigned_at: float = field(default_factory=time.time)  # epoch seconds
    completed: bool = False
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Persisted shape (camelCase, assignedAt in epoch milliseconds)."""
        data = {
            "id": self.id,
            "eventKey": self.event_key,
            "teamNumber": self.team_number,
            "scouterName": self.scouter_name,
            "assignedAt": int(round(self.assigned_at * 1000)),
            "completed": self.completed,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Assignment":
        """Accepts both the persisted camelCase shape and snake_case keys."""
        def pick(camel: str, snake: str, default=None):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        event_key = pick("eventKey", "event_key")
        if not isinstance(event_key, str) or not event_key:
            raise ValueError("Assignment record is missing 'eventKey'")
        raw_team = pick("teamNumber", "team_number")
        if raw_team is None or isinstance(raw_team, bool):
            raise ValueError("Assignment record is missing 'teamNumber'")
        try:
            team_number = int(raw_team)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Assignment record has an invalid 'teamNumber': {raw_team!r}") from e

        if "assignedAt" in data:
            assigned_at = float(data["assignedAt"]) / 1000.0
        else:
            assigned_at = float(data.get("assigned_at", time.time()))

        return cls(
            id=data.get("id") or assignment_id(event_key, team_number),
            event_key=event_key,
            team_number=team_number,
            scouter_name=pick("scouterName", "scouter_name"),
            assigned_at=assigned_at,
            completed=bool(data.get("completed", False)),
            notes=data.get("notes"),
        )


class AssignmentMode:
    """Assignment mode enumeration."""
    SEQUENTIAL = "sequential"   # Numeric blocks, no geometry
    SPATIAL = "spatial"         # K-means over pit coordinates
    MANUAL = "manual"           # Starts empty, filled one team at a time

    ALL = (SEQUENTIAL, SPATIAL, MANUAL)


def assignment_id(event_key: str, team_number: int) -> str:
    return f"{event_key}{ASSIGNMENT_ID_SEPARATOR}{team_number}"


def make_assignment(
    event_key: str,
    team_number: int,
    scouter_name: str,
    assigned_at: Optional[float] = None,
) -> Assignment:
    return Assignment(
        id=assignment_id(event_key, team_number),
        event_key=event_key,
        team_number=team_number,
        scouter_name=scouter_name,
        assigned_at=time.time() if assigned_at is None else assigned_at,
        completed=False,
    )


def save_assignments(path: Union[str, Path], assignments: Iterable[Assignment]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([a.to_dict() for a in assignments], f, indent=2)


def load_assignments(path: Union[str, Path]) -> List[Assignment]:
    """Load a saved assignment list. A missing file means no assignments yet."""
    path = Path(path)
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return [Assignment.from_dict(item) for item in data]
