import unittest

from courtside.errors import InvalidStateError, ValidationError
from courtside.models import GameStatus, Player
from courtside.services import GameStore

STARTERS = ["p1", "p2", "p3", "p4", "p5"]


def make_players(count: int = 7):
    return [Player(id=f"p{i}", number=str(i), name=f"Player {i}") for i in range(1, count + 1)]


class PeriodLifecycleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = GameStore.create("Hawks", "Owls", make_players())

    def test_new_game_starts_first_half(self) -> None:
        game = self.store.snapshot()
        self.assertEqual(len(game.periods), 1)
        self.assertEqual(game.current_period.period_number, 1)
        self.assertEqual(game.time_remaining, 1200)
        self.assertFalse(game.is_running)
        self.assertEqual(game.active_players, frozenset())
        self.assertEqual(game.status, GameStatus.IN_PROGRESS)

    def test_end_period_closes_intervals_at_zero(self) -> None:
        self.store.record_substitution(STARTERS, [])
        self.store.adjust_clock(-300)
        first_id = self.store.snapshot().current_period.id

        game = self.store.end_period()

        self.assertEqual(self.store.minutes_played("p1", first_id), 1200)
        self.assertEqual(game.active_players, frozenset())
        self.assertTrue(game.period(first_id).ended)
        self.assertEqual(game.current_period.period_number, 2)
        self.assertEqual(game.time_remaining, 1200)
        self.assertFalse(game.is_running)
        self.assertEqual(self.store.minutes_played("p1"), 0)

    def test_game_over_after_last_period(self) -> None:
        self.store.end_period()
        game = self.store.end_period()

        self.assertTrue(game.is_game_over)
        self.assertEqual(len(game.periods), 2)
        with self.assertRaises(InvalidStateError):
            self.store.end_period()
        with self.assertRaises(InvalidStateError):
            self.store.start_clock()
        with self.assertRaises(InvalidStateError):
            self.store.record_substitution(["p1"], [])

    def test_quarters_format(self) -> None:
        store = GameStore.create(
            "Hawks", "Owls", make_players(), period_count=4, period_length_minutes=10
        )
        self.assertEqual(store.snapshot().time_remaining, 600)
        for _ in range(3):
            store.end_period()
        game = store.snapshot()
        self.assertEqual(game.current_period.period_number, 4)
        self.assertFalse(game.is_game_over)
        self.assertTrue(store.end_period().is_game_over)

    def test_unsupported_format_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            GameStore.create("Hawks", "Owls", make_players(), period_count=3)
        with self.assertRaises(ValidationError):
            GameStore.create("Hawks", "Owls", make_players(), period_length_minutes=12)

    def test_closed_period_untouched_by_later_periods(self) -> None:
        self.store.record_substitution(STARTERS, [])
        first_id = self.store.snapshot().current_period.id
        self.store.end_period()

        self.store.record_substitution(["p6", "p7"], [])
        event_id = self.store.substitution_history()[0].id
        self.store.adjust_clock(-200)
        self.store.edit_substitution(event_id, event_time=1000)

        self.assertEqual(self.store.minutes_played("p1", first_id), 1200)
        self.assertEqual(self.store.minutes_played("p6", first_id), 0)

    def test_editing_closed_period_keeps_current_court(self) -> None:
        self.store.record_substitution(STARTERS, [])
        first_id = self.store.snapshot().current_period.id
        first_event = self.store.substitution_history()[0].id
        self.store.end_period()
        self.store.record_substitution(["p6"], [])

        game = self.store.edit_substitution(first_event, event_time=1100)

        self.assertEqual(self.store.minutes_played("p1", first_id), 1100)
        self.assertEqual(game.active_players, frozenset({"p6"}))

    def test_fouls_reset_per_period(self) -> None:
        self.store.record_substitution(["p1"], [])
        self.store.record_foul("p1")
        self.store.record_foul("p1")
        self.store.end_period()

        self.assertEqual(self.store.period_foul_count(), 0)
        self.assertEqual(self.store.cumulative_foul_count("p1"), 2)
        # Court is empty at the start of the new period
        with self.assertRaises(ValidationError):
            self.store.record_foul("p1")

    def test_ended_period_takes_no_more_fouls(self) -> None:
        self.store.record_substitution(["p1"], [])
        first_id = self.store.snapshot().current_period.id
        self.store.end_period()
        self.store.record_substitution(["p1"], [])

        with self.assertRaises(InvalidStateError):
            self.store.fouls.record_foul("p1", first_id, 0)
        self.assertEqual(self.store.period_foul_count(first_id), 0)


if __name__ == "__main__":
    unittest.main()
