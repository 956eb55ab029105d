import unittest

from courtside.models import Player
from courtside.services import AnalyticsService, GameStore

STARTERS = ["p1", "p2", "p3", "p4", "p5"]


class AnalyticsServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        players = [Player(id=f"p{i}", number=str(10 + i), name=f"Player {i}") for i in range(1, 7)]
        self.store = GameStore.create("Hawks", "Owls", players)
        self.store.record_substitution(STARTERS, [], event_time=1200)
        self.store.adjust_clock(-600)
        self.store.record_substitution(["p6"], ["p1"])
        self.store.record_foul("p6")
        self.store.record_foul("p2")
        self.store.record_foul("p2")
        self.store.adjust_clock(-300)
        self.analytics = AnalyticsService(self.store)

    def test_game_report_player_lines(self) -> None:
        report = self.analytics.generate_game_report()
        lines = {line.player_id: line for line in report.players}

        self.assertEqual(report.team_name, "Hawks")
        self.assertEqual(report.time_remaining, 300)
        self.assertEqual(lines["p1"].total_seconds, 600)
        self.assertFalse(lines["p1"].on_court)
        self.assertEqual(lines["p2"].total_seconds, 900)
        self.assertEqual(lines["p2"].total_fouls, 2)
        self.assertEqual(lines["p6"].period_seconds, {1: 300})
        self.assertTrue(lines["p6"].on_court)

    def test_team_stats(self) -> None:
        stats = self.analytics.get_team_stats()
        self.assertEqual(stats.total_substitutions, 2)
        self.assertEqual(stats.total_fouls, 3)
        self.assertEqual(stats.players_with_fouls, 2)
        self.assertEqual(stats.total_play_seconds, 600 + 4 * 900 + 300)
        self.assertEqual(stats.most_active_player_id, "p2")
        self.assertEqual(stats.most_active_seconds, 900)

    def test_game_status(self) -> None:
        status = self.analytics.get_game_status()
        self.assertEqual(status.current_period_number, 1)
        self.assertEqual(status.total_periods, 2)
        self.assertEqual(status.active_player_count, 5)
        self.assertEqual(status.total_fouls, 3)
        self.assertFalse(status.is_running)
        self.assertFalse(status.is_game_over)

    def test_csv_export(self) -> None:
        csv_text = self.analytics.export_game_report_csv()
        rows = csv_text.strip().split("\n")

        self.assertEqual(rows[0], "Number,Name,On Court,Minutes,P1,Fouls,Foul Status")
        self.assertEqual(rows[1], "11,Player 1,no,10:00,10:00,0,ok")
        self.assertEqual(rows[2], "12,Player 2,yes,15:00,15:00,2,ok")
        self.assertEqual(len(rows), 7)

    def test_custom_exporter(self) -> None:
        class CountExporter:
            def export_to_csv(self, report):
                return str(len(report.players))

        analytics = AnalyticsService(self.store, export_service=CountExporter())
        self.assertEqual(analytics.export_game_report_csv(), "6")


if __name__ == "__main__":
    unittest.main()
