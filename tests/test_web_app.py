import shutil
import tempfile
import unittest
from unittest.mock import patch

from courtside.config import Config
from courtside.ui import create_app

PLAYERS = [
    {"id": f"p{i}", "number": str(i), "name": f"Player {i}"} for i in range(1, 8)
]
STARTERS = ["p1", "p2", "p3", "p4", "p5"]
NOW = "courtside.services.game_clock.now_ts"


class WebAppTests(unittest.TestCase):
    def setUp(self) -> None:
        self.data_dir = tempfile.mkdtemp()

        class TestConfig(Config):
            TESTING = True
            DATA_DIR = self.data_dir

        self.app = create_app(TestConfig)
        self.client = self.app.test_client()
        response = self.client.post("/api/games", json={
            "team_name": "Hawks",
            "opponent": "Owls",
            "players": PLAYERS,
        })
        self.assertEqual(response.status_code, 201)
        self.game_id = response.get_json()["game"]["id"]

    def tearDown(self) -> None:
        shutil.rmtree(self.data_dir, ignore_errors=True)

    def url(self, path: str = "") -> str:
        return f"/api/games/{self.game_id}{path}"

    def test_get_game_state(self) -> None:
        data = self.client.get(self.url()).get_json()
        self.assertTrue(data["success"])
        self.assertEqual(data["clock"]["display"], "20:00")
        self.assertEqual(data["clock"]["period_label"], "Half")
        self.assertEqual(data["clock"]["adjust_steps"], [10, 60])
        self.assertEqual(data["substitutions"], [])
        self.assertFalse(data["game_over"])

    def test_list_games(self) -> None:
        data = self.client.get("/api/games").get_json()
        self.assertEqual(data["games"], [self.game_id])

    def test_create_game_validation(self) -> None:
        response = self.client.post("/api/games", json={
            "team_name": "Hawks", "players": PLAYERS, "period_count": 3,
        })
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["success"])

        response = self.client.post("/api/games", json={"team_name": "Hawks", "players": []})
        self.assertEqual(response.status_code, 400)

    def test_unknown_game(self) -> None:
        response = self.client.get("/api/games/missing")
        self.assertEqual(response.status_code, 404)

    def test_too_many_players_rejected(self) -> None:
        response = self.client.post(self.url("/substitutions"), json={
            "subbed_in": STARTERS + ["p6"], "subbed_out": [],
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("Too many players on court", response.get_json()["error"])

        response = self.client.post(self.url("/substitutions"), json={
            "subbed_in": STARTERS, "subbed_out": [],
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.get_json()["game"]["active_players"]), 5)

    def test_preview(self) -> None:
        self.client.post(self.url("/substitutions"), json={"subbed_in": STARTERS})
        data = self.client.post(self.url("/substitutions/preview"), json={
            "subbed_in": ["p6"],
        }).get_json()
        self.assertEqual(data["on_court_count"], 6)
        self.assertTrue(data["too_many_players"])

    def test_edit_and_delete_substitution(self) -> None:
        self.client.post(self.url("/clock/adjust"), json={"seconds": -600})
        data = self.client.post(self.url("/substitutions"), json={"subbed_in": ["p1"]}).get_json()
        event_id = data["substitutions"][0]["id"]
        self.assertEqual(data["substitutions"][0]["time"], "10:00")
        self.client.post(self.url("/clock/adjust"), json={"seconds": -100})

        data = self.client.put(self.url(f"/substitutions/{event_id}"), json={"event_time": 500}).get_json()
        self.assertEqual(data["substitutions"][0]["time"], "8:20")

        data = self.client.delete(self.url(f"/substitutions/{event_id}")).get_json()
        self.assertEqual(data["substitutions"], [])

        response = self.client.delete(self.url(f"/substitutions/{event_id}"))
        self.assertEqual(response.status_code, 404)

    def test_clock_controls(self) -> None:
        data = self.client.post(self.url("/clock/adjust"), json={"seconds": -60}).get_json()
        self.assertEqual(data["clock"]["time_remaining"], 1140)

        data = self.client.post(self.url("/clock/start")).get_json()
        self.assertTrue(data["clock"]["is_running"])

        response = self.client.post(self.url("/clock/adjust"), json={"seconds": 10})
        self.assertEqual(response.status_code, 409)

        data = self.client.post(self.url("/clock/pause")).get_json()
        self.assertFalse(data["clock"]["is_running"])

        response = self.client.post(self.url("/clock/adjust"), json={"seconds": "ten"})
        self.assertEqual(response.status_code, 400)

    def test_tick_charges_exactly_one_second(self) -> None:
        with patch(NOW, return_value=1000):
            self.client.post(self.url("/clock/start"))
        with patch(NOW, return_value=1001):
            data = self.client.post(self.url("/clock/tick")).get_json()
            self.assertEqual(data["clock"]["time_remaining"], 1199)
            self.assertTrue(data["clock"]["is_running"])

            # A later state read at the same instant agrees with the tick
            data = self.client.get(self.url()).get_json()
            self.assertEqual(data["clock"]["time_remaining"], 1199)

    def test_fouls(self) -> None:
        response = self.client.post(self.url("/fouls"), json={"player_id": "p1"})
        self.assertEqual(response.status_code, 400)

        self.client.post(self.url("/substitutions"), json={"subbed_in": ["p1"]})
        response = self.client.post(self.url("/fouls"), json={"player_id": "p1"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["period_fouls"], 1)

        response = self.client.post(self.url("/fouls"), json={})
        self.assertEqual(response.status_code, 400)

    def test_end_periods_until_game_over(self) -> None:
        data = self.client.post(self.url("/periods/end")).get_json()
        self.assertEqual(data["message"], "Period 2 ready")
        self.assertEqual(data["clock"]["period_number"], 2)

        data = self.client.post(self.url("/periods/end")).get_json()
        self.assertEqual(data["message"], "Game over")
        self.assertTrue(data["game_over"])

        response = self.client.post(self.url("/periods/end"))
        self.assertEqual(response.status_code, 409)

    def test_report_and_csv(self) -> None:
        self.client.post(self.url("/substitutions"), json={"subbed_in": ["p1"]})
        data = self.client.get(self.url("/report")).get_json()
        self.assertTrue(data["success"])
        self.assertEqual(len(data["report"]["players"]), 7)

        response = self.client.get(self.url("/report.csv"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "text/csv")
        self.assertTrue(response.get_data(as_text=True).startswith("Number,Name,On Court"))

    def test_game_reloads_from_disk(self) -> None:
        self.client.post(self.url("/substitutions"), json={"subbed_in": STARTERS})

        class TestConfig(Config):
            TESTING = True
            DATA_DIR = self.data_dir

        fresh = create_app(TestConfig).test_client()
        data = fresh.get(self.url()).get_json()
        self.assertEqual(sorted(data["game"]["active_players"]), STARTERS)


if __name__ == "__main__":
    unittest.main()
