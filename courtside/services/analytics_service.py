"""Box score helpers for the Courtside basketball bench tracker."""

from __future__ import annotations

import csv
import io
from typing import List, Optional, Protocol

from ..models import GameReport, GameStatusSummary, PlayerStatLine, TeamStats
from ..utils import fmt_clock, now_ts
from .game_store import GameStore


class ExportServiceInterface(Protocol):
    """Interface for data export - supports ISP."""

    def export_to_csv(self, report: GameReport) -> str:
        """Export report to CSV format."""
        ...


class GameReportExporter:
    """Writes a box score as CSV, one row per player."""

    def export_to_csv(self, report: GameReport) -> str:
        period_numbers = sorted(
            {number for line in report.players for number in line.period_seconds}
        )
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(
            ["Number", "Name", "On Court", "Minutes"]
            + [f"P{number}" for number in period_numbers]
            + ["Fouls", "Foul Status"]
        )

        for line in report.players:
            writer.writerow(
                [line.number, line.name, "yes" if line.on_court else "no", fmt_clock(line.total_seconds)]
                + [fmt_clock(line.period_seconds.get(number, 0)) for number in period_numbers]
                + [line.total_fouls, line.foul_status]
            )

        return buffer.getvalue()


class AnalyticsService:
    """
    Generate box score reports for a game store.

    Uses dependency injection for the exporter so alternative formats can be
    plugged in.
    """

    def __init__(
        self,
        store: GameStore,
        export_service: Optional[ExportServiceInterface] = None,
    ) -> None:
        self.store = store
        self.export_service = export_service or GameReportExporter()

    def generate_game_report(self) -> GameReport:
        """Build a :class:`GameReport` snapshot for the active game."""

        with self.store.lock:
            game = self.store.snapshot()
            lines = [self._player_line(player.id) for player in game.players]
            return GameReport(
                generated_ts=now_ts(),
                game_id=game.id,
                team_name=game.team_name,
                opponent=game.opponent,
                time_remaining=game.time_remaining,
                status=self.get_game_status(),
                team=self._team_stats(lines),
                players=lines,
            )

    def get_game_status(self) -> GameStatusSummary:
        game = self.store.snapshot()
        return GameStatusSummary(
            is_running=game.is_running,
            current_period_number=game.current_period.period_number,
            total_periods=game.period_count,
            active_player_count=len(game.active_players),
            total_fouls=self.store.fouls.total_fouls(),
            is_game_over=game.is_game_over,
        )

    def get_team_stats(self) -> TeamStats:
        with self.store.lock:
            game = self.store.snapshot()
            return self._team_stats([self._player_line(p.id) for p in game.players])

    def export_game_report_csv(self) -> str:
        return self.export_service.export_to_csv(self.generate_game_report())

    def _player_line(self, player_id: str) -> PlayerStatLine:
        game = self.store.snapshot()
        player = game.player(player_id)
        ledger = self.store.ledger
        fouls = self.store.fouls
        return PlayerStatLine(
            player_id=player.id,
            number=player.number,
            name=player.name,
            on_court=player.id in game.active_players,
            total_seconds=ledger.total_seconds_played(player.id),
            period_seconds={
                period.period_number: ledger.minutes_played(player.id, period.id)
                for period in game.periods
            },
            period_fouls=fouls.player_period_fouls(player.id, game.current_period.id),
            total_fouls=fouls.cumulative_foul_count(player.id),
            foul_status=fouls.foul_status(player.id),
        )

    def _team_stats(self, lines: List[PlayerStatLine]) -> TeamStats:
        stats = TeamStats(
            total_play_seconds=sum(line.total_seconds for line in lines),
            total_substitutions=self.store.ledger.event_count(),
            total_fouls=self.store.fouls.total_fouls(),
            players_with_fouls=sum(1 for line in lines if line.total_fouls > 0),
        )
        if lines:
            stats.average_play_seconds = stats.total_play_seconds / len(lines)
        for line in lines:
            if line.total_seconds > stats.most_active_seconds:
                stats.most_active_seconds = line.total_seconds
                stats.most_active_player_id = line.player_id
        return stats
