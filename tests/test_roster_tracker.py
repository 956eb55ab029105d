import unittest

from courtside.services import ActiveRosterTracker


class ActiveRosterTrackerTests(unittest.TestCase):
    def test_add_remove_and_current(self) -> None:
        roster = ActiveRosterTracker()
        roster.add("p1")
        roster.add("p2")
        roster.remove("p1")
        roster.remove("bench")

        self.assertEqual(roster.current(), frozenset({"p2"}))
        self.assertIn("p2", roster)
        self.assertEqual(len(roster), 1)

    def test_tracker_does_not_enforce_the_cap(self) -> None:
        roster = ActiveRosterTracker()
        for pid in ["p1", "p2", "p3", "p4", "p5", "p6"]:
            roster.add(pid)
        self.assertEqual(len(roster), 6)

    def test_current_is_a_snapshot(self) -> None:
        roster = ActiveRosterTracker(["p1"])
        current = roster.current()
        roster.clear()
        self.assertEqual(current, frozenset({"p1"}))
        self.assertEqual(len(roster), 0)


if __name__ == "__main__":
    unittest.main()
