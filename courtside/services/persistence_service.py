"""
Persistence service for the Courtside basketball bench tracker.

This module handles saving and loading game snapshots to/from JSON files,
one file per game.
"""
import json
import logging
import os
from typing import List, Optional

from ..errors import NotFoundError, ValidationError
from ..models import Game

logger = logging.getLogger(__name__)


class PersistenceService:
    """
    Service for persisting game snapshots to JSON files.

    The game store treats this as its persistence collaborator: it hands
    over every new snapshot through :meth:`save`.
    """

    def __init__(self, data_dir: str = "games"):
        """
        Initialize the service.

        Args:
            data_dir: Directory holding one ``<game id>.json`` file per game
        """
        self.data_dir = data_dir

    def save(self, game: Game) -> Game:
        """
        Save a game snapshot.

        Args:
            game: The snapshot to save

        Returns:
            The canonicalized copy read back from its JSON form

        Raises:
            OSError: If the file cannot be written
        """
        data = game.to_json()

        # Ensure directory exists
        if not os.path.exists(self.data_dir):
            os.makedirs(self.data_dir)

        file_path = self._path(game.id)
        tmp_path = file_path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, file_path)

        return Game.from_json(data)

    def load(self, game_id: str) -> Game:
        """
        Load a game snapshot.

        Raises:
            NotFoundError: If no game with this id was saved
            ValidationError: If the file is not a valid game snapshot
        """
        file_path = self._path(game_id)
        if not os.path.exists(file_path):
            raise NotFoundError(f"Game '{game_id}' not found")

        with open(file_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValidationError(f"Game file {file_path} is not valid JSON") from exc

        try:
            return Game.from_json(data)
        except (KeyError, TypeError) as exc:
            raise ValidationError(f"Game file {file_path} is missing data: {exc}") from exc

    def delete(self, game_id: str) -> None:
        file_path = self._path(game_id)
        if not os.path.exists(file_path):
            raise NotFoundError(f"Game '{game_id}' not found")
        os.remove(file_path)
        logger.info("Deleted game %s", game_id)

    def list_games(self, limit: Optional[int] = None) -> List[str]:
        """
        Get ids of saved games.

        Args:
            limit: Maximum number of ids to return

        Returns:
            Game ids sorted by newest save first
        """
        if not os.path.exists(self.data_dir):
            return []

        saves = []
        for filename in os.listdir(self.data_dir):
            if filename.endswith(".json"):
                file_path = os.path.join(self.data_dir, filename)
                if os.path.isfile(file_path):
                    saves.append((filename[: -len(".json")], os.path.getmtime(file_path)))

        # Sort by modification time, newest first
        saves.sort(key=lambda x: x[1], reverse=True)
        ids = [game_id for game_id, _ in saves]
        return ids[:limit] if limit is not None else ids

    def _path(self, game_id: str) -> str:
        safe_id = os.path.basename(str(game_id))
        if not safe_id or safe_id != str(game_id):
            raise NotFoundError(f"Game '{game_id}' not found")
        return os.path.join(self.data_dir, f"{safe_id}.json")
