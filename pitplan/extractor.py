"""
Pit-map position extraction.

Resolves team number -> (x, y) from provider pit-map data. Providers are
inconsistent about how teams are linked to pits, so two paths exist:
  - address table: team -> pit id, then pit id -> pit record
  - direct scan: pit records carrying an embedded team field

Pit records are open mappings; coordinates may sit at the top level
(`x`/`y`) or inside `position` / `center`. Everything is normalized here
into TeamPosition so the clustering engine never sees the raw shape.

Teams that cannot be placed are reported in `missing_teams`; nothing here
raises for absent data.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pitplan.constants import PIT_COORDINATE_CONTAINERS, PIT_TEAM_FIELDS
from pitplan.records import TeamPosition


@dataclass
class ExtractionResult:
    """Resolved positions plus the teams that could not be placed."""
    team_positions: List[TeamPosition] = field(default_factory=list)
    total_teams_found: int = 0
    missing_teams: List[int] = field(default_factory=list)


def as_number(value: Any) -> Optional[float]:
    """Finite float from an int/float/numeric string, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_team_number(value: Any) -> Optional[int]:
    """Integer team number, else None (1.9, True and "abc" are rejected)."""
    number = as_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def normalize_pit_coordinates(pit: Any) -> Optional[Tuple[float, float]]:
    """
    Coordinates of a pit record, checking `x`/`y`, then `position.x/y`,
    then `center.x/y`. Returns None when no numeric pair is present.
    """
    if not isinstance(pit, Mapping):
        return None

    sources = [pit] + [pit.get(name) for name in PIT_COORDINATE_CONTAINERS]
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        x = as_number(source.get("x"))
        y = as_number(source.get("y"))
        if x is not None and y is not None:
            return x, y
    return None


def pit_team_number(pit: Any) -> Optional[int]:
    """Team number embedded in a pit record, if any."""
    if not isinstance(pit, Mapping):
        return None
    for name in PIT_TEAM_FIELDS:
        if name in pit:
            team = as_team_number(pit[name])
            if team is not None:
                return team
    return None


def _pits(pit_map_data: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if not isinstance(pit_map_data, Mapping):
        return None
    pits = pit_map_data.get("pits")
    return pits if isinstance(pits, Mapping) else None


def _lookup_address(pit_addresses: Mapping[Any, str], team_number: int) -> Optional[str]:
    address = pit_addresses.get(str(team_number))
    if address is None:
        address = pit_addresses.get(team_number)
    return address


def extract_from_addresses(
    team_numbers: Sequence[int],
    pit_addresses: Mapping[Any, str],
    pit_map_data: Mapping[str, Any],
) -> ExtractionResult:
    """Resolve teams through the team -> pit id address table."""
    pits = _pits(pit_map_data) or {}
    result = ExtractionResult()

    for team_number in team_numbers:
        address = _lookup_address(pit_addresses, team_number)
        coords = normalize_pit_coordinates(pits.get(address)) if address else None
        if coords is None:
            result.missing_teams.append(team_number)
        else:
            result.team_positions.append(TeamPosition(team_number, coords[0], coords[1]))

    result.total_teams_found = len(result.team_positions)
    return result


def extract_from_pit_map(
    team_numbers: Sequence[int],
    pit_map_data: Mapping[str, Any],
) -> ExtractionResult:
    """Resolve teams by scanning pit records for an embedded team field."""
    pits = _pits(pit_map_data)
    if pits is None:
        return ExtractionResult(missing_teams=list(team_numbers))

    # Reverse map built once; a later pit claiming the same team wins
    team_to_pit: Dict[int, str] = {}
    for pit_id, pit in pits.items():
        team = pit_team_number(pit)
        if team is not None:
            team_to_pit[team] = pit_id

    result = ExtractionResult()
    for team_number in team_numbers:
        pit_id = team_to_pit.get(team_number)
        coords = normalize_pit_coordinates(pits[pit_id]) if pit_id is not None else None
        if coords is None:
            result.missing_teams.append(team_number)
        else:
            result.team_positions.append(TeamPosition(team_number, coords[0], coords[1]))

    result.total_teams_found = len(result.team_positions)
    return result


def extract_team_positions(
    team_numbers: Sequence[int],
    pit_addresses: Optional[Mapping[Any, str]],
    pit_map_data: Optional[Mapping[str, Any]],
) -> ExtractionResult:
    """
    Resolve pit coordinates for the requested teams.

    No pit map -> every team missing. With an address table the address
    path is tried first; if it places nobody, the direct scan is used.
    """
    if _pits(pit_map_data) is None:
        return ExtractionResult(missing_teams=list(team_numbers))

    if pit_addresses:
        address_result = extract_from_addresses(team_numbers, pit_addresses, pit_map_data)
        if address_result.total_teams_found > 0:
            return address_result

    return extract_from_pit_map(team_numbers, pit_map_data)
