"""
Pit Assignment Planner CLI
==========================
이벤트 파일(JSON)을 읽어 스카우터별 pit 배정을 생성합니다.

Usage:
    python plan_pits.py data/demo_event.json
    python plan_pits.py data/demo_event.json --mode sequential --csv out.csv
    python plan_pits.py data/demo_event.json --scouted scouted.json --render map.png

Event file:
    {
      "eventKey": "2025demo",
      "teams": [254, 1678, ...],
      "scouters": ["Alice", "Bob"],
      "pitAddresses": {"254": "P1", ...},        (optional)
      "pitMap": {"pits": {"P1": {"x": .., "y": ..}}}, (optional)
      "clustering": {"lloyd_iterations": 10, ...}     (optional)
    }
"""

import argparse
import json
import sys
from pathlib import Path

from pitplan.assignment import plan_pit_assignments
from pitplan.completion import ScoutedTeamsOracle, reconcile_completion
from pitplan.config import ClusteringConfig
from pitplan.constants import ROUTE_METHODS
from pitplan.extractor import as_team_number
from pitplan.records import AssignmentMode, save_assignments
from pitplan.report import export_csv, format_plan_report

# CLI flag -> ClusteringConfig field
TUNING_FLAGS = {
    "route_method": "route_method",
    "route_time_limit": "route_time_limit_seconds",
    "lloyd_iterations": "lloyd_iterations",
    "proximity_passes": "proximity_max_passes",
    "max_spread": "max_cluster_spread",
    "size_slack": "cluster_size_slack",
    "swap_iterations": "swap_max_iterations",
    "swap_noise_floor": "swap_noise_floor",
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pit scouting assignment planner")
    parser.add_argument("event_file", type=str,
                        help="Event JSON (eventKey, teams, scouters, pitMap, ...)")
    parser.add_argument("--mode", type=str, default=AssignmentMode.SPATIAL,
                        choices=list(AssignmentMode.ALL),
                        help="Assignment strategy")
    parser.add_argument("--output", type=str, default=None,
                        help="Write assignments as JSON")
    parser.add_argument("--csv", type=str, default=None,
                        help="Write assignments as CSV")
    parser.add_argument("--scouted", type=str, default=None,
                        help="JSON list of pit-scouting records or team numbers")
    parser.add_argument("--render", type=str, default=None,
                        help="Render the pit map to an image file")
    parser.add_argument("--verbose", action="store_true")

    # Clustering overrides
    parser.add_argument("--route-method", type=str, default=None, choices=list(ROUTE_METHODS))
    parser.add_argument("--route-time-limit", type=int, default=None,
                        help="OR-Tools time limit per route (seconds)")
    parser.add_argument("--lloyd-iterations", type=int, default=None)
    parser.add_argument("--proximity-passes", type=int, default=None)
    parser.add_argument("--max-spread", type=float, default=None)
    parser.add_argument("--size-slack", type=int, default=None)
    parser.add_argument("--swap-iterations", type=int, default=None)
    parser.add_argument("--swap-noise-floor", type=float, default=None)
    return parser.parse_args(argv)


def load_event(path: str) -> dict:
    """Read and check the event file. Raises ValueError on bad content."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            event = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(event, dict):
        raise ValueError(f"{path}: top level must be an object")
    if not isinstance(event.get("eventKey"), str) or not event["eventKey"]:
        raise ValueError(f"{path}: 'eventKey' must be a non-empty string")

    teams = event.get("teams")
    if not isinstance(teams, list):
        raise ValueError(f"{path}: 'teams' must be a list of team numbers")
    team_numbers = [as_team_number(t) for t in teams]
    bad = [t for t, n in zip(teams, team_numbers) if n is None]
    if bad:
        raise ValueError(f"{path}: 'teams' must be a list of team numbers, got {bad}")
    event["teams"] = team_numbers

    scouters = event.get("scouters")
    if not isinstance(scouters, list) or not all(isinstance(s, str) for s in scouters):
        raise ValueError(f"{path}: 'scouters' must be a list of names")
    return event


def build_config(event: dict, args: argparse.Namespace) -> ClusteringConfig:
    """Event file `clustering` section, then CLI overrides on top."""
    options = dict(event.get("clustering") or {})
    for flag, field_name in TUNING_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            options[field_name] = value
    return ClusteringConfig.from_dict(options)


def load_scouted(path: str, event_key: str) -> ScoutedTeamsOracle:
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON list")
    # Bare team numbers belong to the planned event
    records = [r if isinstance(r, dict) else {"teamNumber": r} for r in records]
    return ScoutedTeamsOracle.from_records(records, default_event=event_key)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        event = load_event(args.event_file)
        config = build_config(event, args)
    except (OSError, ValueError, TypeError) as e:
        print(f"[ERROR] {e}")
        return 1

    event_key = event["eventKey"]
    scouters = event["scouters"]

    if not scouters and args.mode != AssignmentMode.MANUAL:
        print("[WARNING] No scouters in event file, nothing will be assigned")

    plan = plan_pit_assignments(
        mode=args.mode,
        event_key=event_key,
        scouter_names=scouters,
        teams=event["teams"],
        pit_addresses=event.get("pitAddresses"),
        pit_map_data=event.get("pitMap"),
        config=config,
        verbose=args.verbose,
    )

    if args.scouted:
        try:
            oracle = load_scouted(args.scouted, event_key)
        except (OSError, ValueError) as e:
            print(f"[ERROR] {e}")
            return 1
        plan.assignments = reconcile_completion(plan.assignments, oracle)
        if args.verbose:
            print(f"[PitPlanner] {len(oracle)} pit-scouting records checked")

    print(format_plan_report(plan, scouters))

    if args.output:
        save_assignments(args.output, plan.assignments)
        print(f"[Saved] {args.output} ({len(plan.assignments)} assignments)")

    if args.csv:
        Path(args.csv).parent.mkdir(parents=True, exist_ok=True)
        with open(args.csv, "w", newline="", encoding="utf-8") as f:
            rows = export_csv(plan.assignments, f)
        print(f"[Saved] {args.csv} ({rows} rows)")

    if args.render:
        from pit_map_visualizer import PitMapVisualizer

        viz = PitMapVisualizer()
        viz.render(
            plan.assignments,
            scouters,
            pit_map_data=event.get("pitMap"),
            team_positions=plan.extraction.team_positions if plan.extraction else None,
            title=f"{event_key} ({plan.mode})",
        )
        viz.save(args.render)
        viz.quit()
        print(f"[Saved] {args.render}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
