"""
Demo event generator for the pit planner.

Lays pits out the way a pit area usually looks: back-to-back pit rows
separated by walking aisles. Team numbers are random (mostly 4-digit),
and a share of teams can be marked as already pit-scouted.

Output:
  - event JSON: eventKey, teams, scouters, pitMap (+ pitAddresses)
  - scouted JSON (with --scouted-fraction > 0): <output stem>_scouted.json
"""

import sys
import json
import numpy as np
from pathlib import Path
from typing import Dict, List, Optional


# ==========================================
# Pit layout
# ==========================================
PIT_WIDTH = 100.0             # pit footprint along the row
PIT_DEPTH = 100.0             # pit footprint across the row
PITS_PER_ROW = 12
AISLE_WIDTH = 200.0           # walking aisle between row pairs
SCOUTER_NAMES = ["Alice", "Bob", "Carmen", "Dmitri", "Emeka", "Fatima", "Gus", "Hana"]


def pit_layout(num_pits: int) -> List[Dict]:
    """
    Pit records in row-major order. Rows come in back-to-back pairs; each
    pair is followed by an aisle.
    """
    pits = []
    for i in range(num_pits):
        row, col = divmod(i, PITS_PER_ROW)
        pair, side = divmod(row, 2)
        x = col * PIT_WIDTH + PIT_WIDTH / 2
        y = pair * (2 * PIT_DEPTH + AISLE_WIDTH) + side * PIT_DEPTH + PIT_DEPTH / 2
        pits.append({
            "id": f"P{i + 1:03d}",
            "x": x,
            "y": y,
            "size": {"x": PIT_WIDTH, "y": PIT_DEPTH},
        })
    return pits


def random_team_numbers(rng: np.random.Generator, count: int) -> List[int]:
    """Unique team numbers, roughly a quarter of them 3-digit."""
    teams = set()
    while len(teams) < count:
        if rng.random() < 0.25:
            teams.add(int(rng.integers(100, 1000)))
        else:
            teams.add(int(rng.integers(1000, 10000)))
    return sorted(teams)


def generate_event(
    num_teams: int = 60,
    num_scouters: int = 4,
    seed: Optional[int] = None,
    use_addresses: bool = False,
    scouted_fraction: float = 0.0,
    event_key: str = "2025demo",
) -> Dict:
    """
    Build a synthetic event.

    Args:
        num_teams: teams at the event, one pit each
        num_scouters: roster size (names wrap with a numeric suffix)
        seed: RNG seed; same seed -> same event
        use_addresses: link teams through pitAddresses instead of embedding
            the team number in each pit record
        scouted_fraction: share of teams that already have a pit-scouting
            record, returned under "scouted"
        event_key: event identifier

    Returns:
        event dict; the "scouted" key is not part of the event file
    """
    if num_teams < 0 or num_scouters < 0:
        raise ValueError("team and scouter counts must be non-negative")
    if not 0.0 <= scouted_fraction <= 1.0:
        raise ValueError(f"scouted_fraction must be in [0, 1], got {scouted_fraction}")

    rng = np.random.default_rng(seed)
    teams = random_team_numbers(rng, num_teams)

    # Pit order is unrelated to team number
    order = rng.permutation(num_teams)
    layout = pit_layout(num_teams)

    pits = {}
    addresses = {}
    for slot, team_index in enumerate(order):
        pit = dict(layout[slot])
        pit_id = pit.pop("id")
        team = teams[team_index]
        if use_addresses:
            addresses[str(team)] = pit_id
        else:
            pit["team"] = team
        pits[pit_id] = pit

    scouters = [
        SCOUTER_NAMES[i % len(SCOUTER_NAMES)]
        + (f" {i // len(SCOUTER_NAMES) + 1}" if i >= len(SCOUTER_NAMES) else "")
        for i in range(num_scouters)
    ]

    num_scouted = int(round(num_teams * scouted_fraction))
    scouted = sorted(int(t) for t in rng.choice(teams, size=num_scouted, replace=False)) \
        if num_scouted else []

    event = {
        "eventKey": event_key,
        "teams": teams,
        "scouters": scouters,
        "pitMap": {"pits": pits},
        "scouted": [{"teamNumber": t, "eventKey": event_key} for t in scouted],
    }
    if use_addresses:
        event["pitAddresses"] = addresses
    return event


def write_event(event: Dict, output: str) -> None:
    """Write the event file and, when present, the scouted list beside it."""
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    scouted = event.pop("scouted", [])
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(event, f, indent=2)
    print(f"Saved event: {out_path} ({len(event['teams'])} teams, "
          f"{len(event['scouters'])} scouters)")

    if scouted:
        scouted_path = out_path.with_name(f"{out_path.stem}_scouted.json")
        with open(scouted_path, "w", encoding="utf-8") as f:
            json.dump(scouted, f, indent=2)
        print(f"Saved scouted list: {scouted_path} ({len(scouted)} teams)")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate a demo pit-map event")
    parser.add_argument("--teams", type=int, default=60,
                        help="Number of teams (default: 60)")
    parser.add_argument("--scouters", type=int, default=4,
                        help="Number of scouters (default: 4)")
    parser.add_argument("--output", type=str, default="data/demo_event.json",
                        help="Output event file")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--addresses", action="store_true",
                        help="Link teams to pits through pitAddresses")
    parser.add_argument("--scouted-fraction", type=float, default=0.0,
                        help="Share of teams already pit-scouted (0-1)")
    args = parser.parse_args()

    try:
        event = generate_event(
            num_teams=args.teams,
            num_scouters=args.scouters,
            seed=args.seed,
            use_addresses=args.addresses,
            scouted_fraction=args.scouted_fraction,
        )
    except ValueError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    write_event(event, args.output)
    print("\nDone!")
