"""
Unit tests for assignment records and clustering config.
"""

import sys
import json
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest
from pitplan.config import ClusteringConfig
from pitplan.constants import LLOYD_ITERATIONS, SWAP_NOISE_FLOOR
from pitplan.records import (
    Assignment,
    TeamPosition,
    assignment_id,
    load_assignments,
    make_assignment,
    save_assignments,
)


class TestAssignmentRecord(unittest.TestCase):
    def test_id_from_event_and_team(self):
        self.assertEqual(assignment_id("2025casd", 254), "2025casd-254")
        a = make_assignment("2025casd", 254, "Ana", assigned_at=1.5)
        self.assertEqual(a.id, "2025casd-254")
        self.assertFalse(a.completed)

    def test_to_dict_shape(self):
        a = make_assignment("2025casd", 254, "Ana", assigned_at=1700000000.25)
        data = a.to_dict()
        self.assertEqual(data["eventKey"], "2025casd")
        self.assertEqual(data["teamNumber"], 254)
        self.assertEqual(data["scouterName"], "Ana")
        self.assertEqual(data["assignedAt"], 1700000000250)
        self.assertNotIn("notes", data)

    def test_from_dict_accepts_snake_case(self):
        a = Assignment.from_dict({
            "event_key": "e", "team_number": "33", "scouter_name": "Bo",
            "assigned_at": 12.0, "completed": True,
        })
        self.assertEqual(a.id, "e-33")
        self.assertEqual(a.team_number, 33)
        self.assertEqual(a.assigned_at, 12.0)
        self.assertTrue(a.completed)

    def test_from_dict_missing_keys(self):
        with self.assertRaisesRegex(ValueError, "eventKey"):
            Assignment.from_dict({"teamNumber": 5, "scouterName": "Bo"})
        with self.assertRaisesRegex(ValueError, "teamNumber"):
            Assignment.from_dict({"eventKey": "e", "scouterName": "Bo"})
        with self.assertRaisesRegex(ValueError, "teamNumber"):
            Assignment.from_dict({"eventKey": "e", "teamNumber": "n/a"})

    def test_team_position_xy(self):
        self.assertEqual(TeamPosition(254, 2.5, -1.0).xy, (2.5, -1.0))

    def test_save_and_load(self):
        records = [
            make_assignment("e", 1, "A", assigned_at=10.0),
            Assignment("e-2", "e", 2, "B", assigned_at=20.0, completed=True, notes="late"),
        ]
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "assignments.json"
            save_assignments(path, records)
            with open(path) as f:
                self.assertEqual(json.load(f)[1]["notes"], "late")
            self.assertEqual(load_assignments(path), records)

    def test_load_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(load_assignments(Path(tmp) / "none.json"), [])


class TestClusteringConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = ClusteringConfig().validate()
        self.assertEqual(cfg.lloyd_iterations, LLOYD_ITERATIONS)
        self.assertEqual(cfg.swap_noise_floor, SWAP_NOISE_FLOOR)
        self.assertEqual(cfg.route_method, "nearest_neighbor")

    def test_from_dict(self):
        cfg = ClusteringConfig.from_dict({"lloyd_iterations": 4, "route_method": "ortools"})
        self.assertEqual(cfg.lloyd_iterations, 4)
        self.assertEqual(cfg.to_dict()["route_method"], "ortools")

    def test_unknown_key(self):
        with self.assertRaises(ValueError):
            ClusteringConfig.from_dict({"iterations": 4})

    def test_invalid_values(self):
        bad = [
            {"lloyd_iterations": 0},
            {"proximity_max_passes": -1},
            {"proximity_ratio": 0.9},
            {"max_cluster_spread": -5.0},
            {"route_method": "genetic"},
            {"route_time_limit_seconds": 0},
        ]
        for options in bad:
            with self.subTest(options=options):
                with self.assertRaises(ValueError):
                    ClusteringConfig.from_dict(options)


if __name__ == "__main__":
    unittest.main()
