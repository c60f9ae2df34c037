"""
Unit tests for sequential block assignment.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest
from pitplan.sequential import create_sequential_assignments, fair_share_sizes


class TestFairShare(unittest.TestCase):
    def test_remainder_goes_first(self):
        self.assertEqual(fair_share_sizes(10, 3), [4, 3, 3])
        self.assertEqual(fair_share_sizes(9, 3), [3, 3, 3])
        self.assertEqual(fair_share_sizes(2, 3), [1, 1, 0])

    def test_no_groups(self):
        self.assertEqual(fair_share_sizes(5, 0), [])


class TestSequentialAssignments(unittest.TestCase):
    def test_blocks_in_roster_order(self):
        """10 teams / 3 scouts: first scout takes the 4 lowest numbers."""
        teams = [1690, 254, 118, 1114, 2056, 971, 4414, 33, 67, 195]
        assignments = create_sequential_assignments(
            "2025test", ["Ana", "Ben", "Cy"], teams, assigned_at=1000.0
        )
        by_scout = {}
        for a in assignments:
            by_scout.setdefault(a.scouter_name, []).append(a.team_number)

        self.assertEqual(by_scout["Ana"], [33, 67, 118, 195])
        self.assertEqual(by_scout["Ben"], [254, 971, 1114])
        self.assertEqual(by_scout["Cy"], [1690, 2056, 4414])

    def test_record_fields(self):
        a = create_sequential_assignments("2025test", ["Ana"], [254], assigned_at=5.0)[0]
        self.assertEqual(a.id, "2025test-254")
        self.assertEqual(a.event_key, "2025test")
        self.assertEqual(a.assigned_at, 5.0)
        self.assertFalse(a.completed)

    def test_balance(self):
        assignments = create_sequential_assignments(
            "e", ["A", "B", "C", "D"], range(1, 24)
        )
        counts = [sum(1 for a in assignments if a.scouter_name == s) for s in "ABCD"]
        self.assertLessEqual(max(counts) - min(counts), 1)
        self.assertEqual(sum(counts), 23)

    def test_more_scouts_than_teams(self):
        assignments = create_sequential_assignments("e", ["A", "B", "C"], [7, 3])
        self.assertEqual([(a.team_number, a.scouter_name) for a in assignments],
                         [(3, "A"), (7, "B")])

    def test_empty(self):
        self.assertEqual(create_sequential_assignments("e", ["A"], []), [])
        self.assertEqual(create_sequential_assignments("e", [], [1, 2]), [])


if __name__ == "__main__":
    unittest.main()
