import os
import shutil
import tempfile
import unittest

from courtside.errors import NotFoundError, ValidationError
from courtside.models import Player
from courtside.services import GameStore, PersistenceService


def make_store(persistence=None) -> GameStore:
    players = [Player(id=f"p{i}", number=str(i), name=f"Player {i}") for i in range(1, 7)]
    return GameStore.create("Hawks", "Owls", players, persistence=persistence)


class PersistenceServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.data_dir = tempfile.mkdtemp()
        self.service = PersistenceService(os.path.join(self.data_dir, "games"))

    def tearDown(self) -> None:
        shutil.rmtree(self.data_dir, ignore_errors=True)

    def test_save_and_load_round_trip(self) -> None:
        store = make_store()
        store.record_substitution(["p1", "p2"], [], event_time=1200)
        game = store.snapshot()

        saved = self.service.save(game)
        loaded = self.service.load(game.id)

        self.assertEqual(saved, game)
        self.assertEqual(loaded, game)
        self.assertEqual(self.service.list_games(), [game.id])

    def test_store_saves_after_each_command(self) -> None:
        store = make_store(persistence=self.service)
        store.record_substitution(["p1"], [])

        loaded = self.service.load(store.game_id)
        self.assertEqual(loaded.active_players, frozenset({"p1"}))

    def test_load_missing_game(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.load("nope")
        with self.assertRaises(NotFoundError):
            self.service.load("../escape")

    def test_load_corrupt_file(self) -> None:
        os.makedirs(self.service.data_dir)
        with open(os.path.join(self.service.data_dir, "broken.json"), "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(ValidationError):
            self.service.load("broken")

        with open(os.path.join(self.service.data_dir, "partial.json"), "w", encoding="utf-8") as f:
            f.write('{"id": "partial"}')
        with self.assertRaises(ValidationError):
            self.service.load("partial")

    def test_delete_and_list(self) -> None:
        self.assertEqual(self.service.list_games(), [])
        first = make_store().snapshot()
        second = make_store().snapshot()
        self.service.save(first)
        self.service.save(second)

        self.assertEqual(set(self.service.list_games()), {first.id, second.id})
        self.assertEqual(len(self.service.list_games(limit=1)), 1)

        self.service.delete(first.id)
        self.assertEqual(self.service.list_games(), [second.id])
        with self.assertRaises(NotFoundError):
            self.service.delete(first.id)


if __name__ == "__main__":
    unittest.main()
