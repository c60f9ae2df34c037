"""
Unit tests for pit-map position extraction.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest
from pitplan.extractor import (
    as_number,
    extract_from_addresses,
    extract_from_pit_map,
    extract_team_positions,
    normalize_pit_coordinates,
    pit_team_number,
)
from pitplan.records import TeamPosition


class TestPitRecordParsing(unittest.TestCase):
    def test_coordinate_sources(self):
        self.assertEqual(normalize_pit_coordinates({"x": 1, "y": 2}), (1.0, 2.0))
        self.assertEqual(normalize_pit_coordinates({"position": {"x": 3, "y": 4}}), (3.0, 4.0))
        self.assertEqual(normalize_pit_coordinates({"center": {"x": 5, "y": 6}}), (5.0, 6.0))

    def test_top_level_wins(self):
        pit = {"x": 1, "y": 1, "position": {"x": 9, "y": 9}}
        self.assertEqual(normalize_pit_coordinates(pit), (1.0, 1.0))

    def test_origin_is_valid(self):
        self.assertEqual(normalize_pit_coordinates({"x": 0, "y": 0}), (0.0, 0.0))

    def test_non_numeric_rejected(self):
        self.assertIsNone(normalize_pit_coordinates({"x": "left", "y": 2}))
        self.assertIsNone(normalize_pit_coordinates({"x": True, "y": 2}))
        self.assertIsNone(normalize_pit_coordinates({"x": float("nan"), "y": 2}))
        self.assertIsNone(normalize_pit_coordinates({"x": 1}))
        self.assertIsNone(normalize_pit_coordinates(None))

    def test_numeric_strings(self):
        self.assertEqual(as_number(" 12.5 "), 12.5)
        self.assertEqual(normalize_pit_coordinates({"x": "10", "y": "20"}), (10.0, 20.0))

    def test_team_fields(self):
        self.assertEqual(pit_team_number({"team": 254}), 254)
        self.assertEqual(pit_team_number({"teamNumber": "1678"}), 1678)
        self.assertEqual(pit_team_number({"team_number": 33.0}), 33)
        self.assertIsNone(pit_team_number({"team": 12.5}))
        self.assertIsNone(pit_team_number({"label": "A1"}))


class TestExtraction(unittest.TestCase):
    def setUp(self):
        self.pit_map = {
            "pits": {
                "A1": {"x": 0, "y": 0, "team": 101},
                "A2": {"position": {"x": 100, "y": 0}, "teamNumber": 102},
                "A3": {"center": {"x": 200, "y": 0}},
                "A4": {"label": "no coordinates", "team": 104},
            }
        }

    def test_address_path(self):
        addresses = {"101": "A1", "103": "A3", "104": "A4", "105": "ZZ"}
        result = extract_from_addresses([101, 103, 104, 105], addresses, self.pit_map)
        self.assertEqual(result.team_positions, [
            TeamPosition(101, 0.0, 0.0), TeamPosition(103, 200.0, 0.0),
        ])
        self.assertEqual(result.total_teams_found, 2)
        self.assertEqual(result.missing_teams, [104, 105])

    def test_integer_address_keys(self):
        result = extract_from_addresses([103], {103: "A3"}, self.pit_map)
        self.assertEqual(result.team_positions, [TeamPosition(103, 200.0, 0.0)])

    def test_direct_scan(self):
        result = extract_from_pit_map([101, 102, 103, 104], self.pit_map)
        self.assertEqual([p.team_number for p in result.team_positions], [101, 102])
        self.assertEqual(result.missing_teams, [103, 104])

    def test_later_pit_claims_team(self):
        pit_map = {"pits": {"A": {"x": 0, "y": 0, "team": 7}, "B": {"x": 50, "y": 0, "team": 7}}}
        result = extract_from_pit_map([7], pit_map)
        self.assertEqual(result.team_positions, [TeamPosition(7, 50.0, 0.0)])

    def test_no_pit_map(self):
        result = extract_team_positions([1, 2], {"1": "A1"}, None)
        self.assertEqual(result.team_positions, [])
        self.assertEqual(result.total_teams_found, 0)
        self.assertEqual(result.missing_teams, [1, 2])

    def test_addresses_preferred(self):
        addresses = {"101": "A3"}
        result = extract_team_positions([101], addresses, self.pit_map)
        self.assertEqual(result.team_positions, [TeamPosition(101, 200.0, 0.0)])

    def test_falls_back_to_scan(self):
        """An address table that places nobody is ignored."""
        result = extract_team_positions([101, 102], {"101": "nope"}, self.pit_map)
        self.assertEqual([p.team_number for p in result.team_positions], [101, 102])

    def test_counts_consistent(self):
        result = extract_team_positions([101, 102, 103, 104, 999], None, self.pit_map)
        self.assertEqual(result.total_teams_found, len(result.team_positions))
        self.assertEqual(
            sorted([p.team_number for p in result.team_positions] + result.missing_teams),
            [101, 102, 103, 104, 999],
        )


if __name__ == "__main__":
    unittest.main()
