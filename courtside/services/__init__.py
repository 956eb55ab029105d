"""
Services package for the Courtside basketball bench tracker.

This package contains the game clock, the on-court roster, the substitution
ledger, the foul log, the period lifecycle and the game store that owns them,
plus persistence and reporting.
"""
from .game_clock import GameClock
from .roster_tracker import ActiveRosterTracker
from .substitution_ledger import SubstitutionLedger, replay_events
from .foul_tracker import FoulTracker
from .period_manager import PeriodLifecycleManager
from .game_store import GameStore, SubstitutionPreview
from .persistence_service import PersistenceService
from .analytics_service import AnalyticsService, GameReportExporter
from .service_factory import ServiceFactory

__all__ = [
    "GameClock", "ActiveRosterTracker", "SubstitutionLedger", "replay_events",
    "FoulTracker", "PeriodLifecycleManager", "GameStore", "SubstitutionPreview",
    "PersistenceService", "AnalyticsService", "GameReportExporter", "ServiceFactory"
]
