"""
Service factory for the Courtside basketball bench tracker.

This module wires game stores to their persistence collaborator and builds
the report services that read from them.
"""
import logging
import threading
from typing import Dict, Iterable, Optional

from ..models import Player
from ..utils import DEFAULT_FOUL_LIMIT, DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_LENGTH_MIN
from .analytics_service import AnalyticsService, ExportServiceInterface, GameReportExporter
from .game_store import GameStore
from .persistence_service import PersistenceService

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for game stores and their services.

    Keeps one live store per game id so that every request for a game acts
    on the same state container.
    """

    def __init__(self, data_dir: str = "games", foul_limit: int = DEFAULT_FOUL_LIMIT):
        """
        Initialize factory.

        Args:
            data_dir: Directory for saved game snapshots
            foul_limit: Cumulative fouls at which a player is fouled out
        """
        self.data_dir = data_dir
        self.foul_limit = foul_limit
        self._persistence_service: Optional[PersistenceService] = None
        self._export_service: Optional[ExportServiceInterface] = None
        self._stores: Dict[str, GameStore] = {}
        self._stores_lock = threading.Lock()

    def create_game(
        self,
        team_name: str,
        opponent: str,
        players: Iterable[Player],
        period_count: int = DEFAULT_PERIOD_COUNT,
        period_length_minutes: int = DEFAULT_PERIOD_LENGTH_MIN,
    ) -> GameStore:
        """Create a new game, save its first snapshot and keep its store live."""
        store = GameStore.create(
            team_name,
            opponent,
            players,
            period_count=period_count,
            period_length_minutes=period_length_minutes,
            persistence=self.get_persistence_service(),
            foul_limit=self.foul_limit,
        )
        self.get_persistence_service().save(store.snapshot())
        with self._stores_lock:
            self._stores[store.game_id] = store
        return store

    def get_game_store(self, game_id: str) -> GameStore:
        """
        Get the live store for a game, loading it from disk on first use.

        Raises:
            NotFoundError: If the game was never saved
        """
        with self._stores_lock:
            if game_id not in self._stores:
                game = self.get_persistence_service().load(game_id)
                self._stores[game_id] = GameStore.from_game(
                    game,
                    persistence=self.get_persistence_service(),
                    foul_limit=self.foul_limit,
                )
                logger.info("Loaded game %s", game_id)
            return self._stores[game_id]

    def create_analytics_service(self, store: GameStore) -> AnalyticsService:
        return AnalyticsService(store, export_service=self._get_export_service())

    def get_persistence_service(self) -> PersistenceService:
        """Get singleton persistence service."""
        if self._persistence_service is None:
            self._persistence_service = PersistenceService(self.data_dir)
        return self._persistence_service

    def _get_export_service(self) -> ExportServiceInterface:
        """Get singleton export service."""
        if self._export_service is None:
            self._export_service = GameReportExporter()
        return self._export_service

    def configure_custom_export_service(self, exporter: ExportServiceInterface) -> None:
        """Configure custom export service - supports OCP."""
        self._export_service = exporter
