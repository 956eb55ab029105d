"""
Substitution ledger for the Courtside basketball bench tracker.

The ledger keeps the ordered substitution events of every period and derives
playing time by replaying a period's events from the opening tip. Totals are
never patched incrementally: every change to a period replays that period in
full, which is cheap because a period only ever holds a handful of events.
"""
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Union

from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..models import Period, Player, SubstitutionEvent
from ..utils import MAX_PLAYERS_ON_COURT, fmt_clock
from .roster_tracker import ActiveRosterTracker

logger = logging.getLogger(__name__)

PlayerRef = Union[Player, str]


@dataclass
class PeriodReplay:
    """Result of replaying one period's events in game-time order."""

    active: FrozenSet[str] = frozenset()
    closed_seconds: Dict[str, int] = field(default_factory=dict)
    open_since: Dict[str, int] = field(default_factory=dict)

    def seconds_for(self, player_id: str, close_at: int) -> int:
        """Closed intervals plus the open one, if any, closed at ``close_at``."""
        seconds = self.closed_seconds.get(player_id, 0)
        if player_id in self.open_since:
            seconds += max(0, self.open_since[player_id] - close_at)
        return seconds


def game_time_order(events: Iterable[SubstitutionEvent]) -> List[SubstitutionEvent]:
    """Sort events as they happened: most time remaining first, ties by insertion."""
    return sorted(events, key=lambda e: (-e.event_time, e.sequence))


def replay_events(
    events: Iterable[SubstitutionEvent],
    max_on_court: int = MAX_PLAYERS_ON_COURT,
    strict_event_id: Optional[str] = None,
) -> PeriodReplay:
    """
    Replay a period's substitution events from an empty court.

    Args:
        events: The period's events, in any order
        max_on_court: Cap checked after every event
        strict_event_id: Event whose players must match the court at that
            point (subbed-out players on court, subbed-in players on the bench)

    Returns:
        The on-court set after the last event and the per-player intervals

    Raises:
        ValidationError: If the court ever exceeds the cap, or the strict
            event does not match the court
    """
    active: Set[str] = set()
    open_since: Dict[str, int] = {}
    closed: Dict[str, int] = {}

    for event in game_time_order(events):
        if event.id == strict_event_id:
            _check_against_court(event, active)

        for player_id in event.subbed_out_ids:
            if player_id in active:
                active.remove(player_id)
                closed[player_id] = closed.get(player_id, 0) + open_since.pop(player_id) - event.event_time

        for player_id in event.subbed_in_ids:
            if player_id not in active:
                active.add(player_id)
                open_since[player_id] = event.event_time

        if len(active) > max_on_court:
            raise ValidationError(
                f"Too many players on court: cannot exceed {max_on_court}. "
                f"This would result in {len(active)} players."
            )

    return PeriodReplay(active=frozenset(active), closed_seconds=closed, open_since=open_since)


def _check_against_court(event: SubstitutionEvent, active: Set[str]) -> None:
    for player in event.subbed_out:
        if player.id not in active:
            raise ValidationError(f"{player.label} is not currently on court")
    for player in event.subbed_in:
        if player.id in active:
            raise ValidationError(f"{player.label} is already on the court")


class SubstitutionLedger:
    """
    Ordered log of substitution events per period.

    Events keep two orders: game-time order (by ``event_time``, used for
    replay) and recency order (by insertion ``sequence``, used for the
    substitution table, newest first). Edits never change an event's
    sequence, so an edited row stays where it was.
    """

    def __init__(
        self,
        roster: ActiveRosterTracker,
        players: Iterable[Player],
        time_source: Callable[[], int],
        max_on_court: int = MAX_PLAYERS_ON_COURT,
    ):
        """
        Initialize the ledger.

        Args:
            roster: On-court view kept consistent with the current period
            players: Players available for this game
            time_source: Returns the clock's current time remaining
            max_on_court: On-court cap enforced on every commit
        """
        self._roster = roster
        self._players: Dict[str, Player] = {p.id: p for p in players}
        self._time_source = time_source
        self._max_on_court = max_on_court

        self._events: Dict[str, List[SubstitutionEvent]] = {}
        self._period_lengths: Dict[str, int] = {}
        self._replays: Dict[str, PeriodReplay] = {}
        self._closed: Set[str] = set()
        self._current_period_id: Optional[str] = None
        self._next_sequence = 1

    # ------------------------------------------------------------------
    # Period bookkeeping
    # ------------------------------------------------------------------
    @property
    def current_period_id(self) -> Optional[str]:
        return self._current_period_id

    def open_period(self, period_id: str, length_seconds: int) -> None:
        """Register a new period and make it the current one."""

        if period_id in self._events:
            raise InvalidStateError(f"Period '{period_id}' is already open")
        self._events[period_id] = []
        self._period_lengths[period_id] = int(length_seconds)
        self._replays[period_id] = PeriodReplay()
        self._current_period_id = period_id

    def load_period(self, period: Period, current: bool = False) -> None:
        """Restore a period's events from a snapshot."""

        self._events[period.id] = list(period.substitution_events)
        self._period_lengths[period.id] = period.length_seconds
        if period.ended:
            self._closed.add(period.id)
        for event in period.substitution_events:
            for player in event.subbed_in + event.subbed_out:
                self._players.setdefault(player.id, player)
            self._next_sequence = max(self._next_sequence, event.sequence + 1)
        self._replays[period.id] = replay_events(self._events[period.id], self._max_on_court)
        if current:
            self._current_period_id = period.id

    def close_period(self, period_id: str) -> Dict[str, int]:
        """
        Close a period: every player still on court is subbed out at 0:00.

        Returns:
            Seconds played in the period for each player whose open interval
            was closed
        """

        replay = self._replay_for(period_id)
        closed_out = {pid: replay.seconds_for(pid, 0) for pid in replay.open_since}
        self._closed.add(period_id)
        if period_id == self._current_period_id:
            self._roster.clear()
        logger.info(
            "Closed period %s with %d player(s) on court", period_id, len(closed_out)
        )
        return closed_out

    def is_closed(self, period_id: str) -> bool:
        return period_id in self._closed

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def record_substitution(
        self,
        period_id: str,
        subbed_in: Sequence[PlayerRef],
        subbed_out: Sequence[PlayerRef],
        event_time: int,
    ) -> SubstitutionEvent:
        """
        Record a new substitution event.

        Args:
            period_id: Period the substitution happens in
            subbed_in: Players entering the court
            subbed_out: Players leaving the court
            event_time: Seconds remaining when the substitution happened

        Returns:
            The new event

        Raises:
            ValidationError: Empty substitution, player on both sides, player
                already on court or not on court, too many players on court, or
                an event time the current period's clock has not reached yet
            NotFoundError: Unknown period or player
            InvalidStateError: The period has already ended
        """

        self._require_open(period_id)
        players_in = self._resolve(subbed_in)
        players_out = self._resolve(subbed_out)
        self._validate_sides(players_in, players_out)
        event_time = self._validate_time(period_id, event_time)

        event = SubstitutionEvent(
            id=str(uuid.uuid4()),
            period_id=period_id,
            event_time=event_time,
            subbed_in=tuple(players_in),
            subbed_out=tuple(players_out),
            sequence=self._next_sequence,
        )
        candidate = self._events[period_id] + [event]
        replay = replay_events(candidate, self._max_on_court, strict_event_id=event.id)

        self._events[period_id] = candidate
        self._next_sequence += 1
        self._commit_replay(period_id, replay)
        logger.info(
            "Substitution at %s: in=%s out=%s",
            event.formatted_time,
            [p.label for p in players_in],
            [p.label for p in players_out],
        )
        return event

    def edit_substitution(
        self,
        event_id: str,
        event_time: Optional[int] = None,
        subbed_in: Optional[Sequence[PlayerRef]] = None,
        subbed_out: Optional[Sequence[PlayerRef]] = None,
    ) -> SubstitutionEvent:
        """
        Change an event's time and/or players in place.

        The event keeps its id and its position in the recency order; the
        whole period is replayed to recompute playing time and the court.

        Raises:
            NotFoundError: Unknown event or player
            ValidationError: The edited event or the replayed period is invalid
        """

        period_id, index = self._locate(event_id)
        original = self._events[period_id][index]

        players_in = self._resolve(subbed_in) if subbed_in is not None else list(original.subbed_in)
        players_out = self._resolve(subbed_out) if subbed_out is not None else list(original.subbed_out)
        self._validate_sides(players_in, players_out)
        new_time = (
            self._validate_time(period_id, event_time)
            if event_time is not None
            else original.event_time
        )

        edited = replace(
            original,
            event_time=new_time,
            subbed_in=tuple(players_in),
            subbed_out=tuple(players_out),
        )
        candidate = list(self._events[period_id])
        candidate[index] = edited
        replay = replay_events(candidate, self._max_on_court, strict_event_id=edited.id)

        self._events[period_id] = candidate
        self._commit_replay(period_id, replay)
        logger.info("Edited substitution %s (now at %s)", event_id, edited.formatted_time)
        return edited

    def delete_substitution(self, event_id: str) -> SubstitutionEvent:
        """
        Remove an event and replay its period.

        Raises:
            NotFoundError: Unknown event
            ValidationError: Removing the event would leave too many players on court
        """

        period_id, index = self._locate(event_id)
        candidate = list(self._events[period_id])
        removed = candidate.pop(index)
        replay = replay_events(candidate, self._max_on_court)

        self._events[period_id] = candidate
        self._commit_replay(period_id, replay)
        logger.info("Deleted substitution %s", event_id)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def minutes_played(self, player_id: str, period_id: str) -> int:
        """
        Playing time for a player in one period, in seconds.

        For the current period a player still on court is counted up to the
        clock's time remaining; for a closed period the open interval closes
        at 0:00.
        """

        if player_id not in self._players:
            raise NotFoundError(f"Player '{player_id}' is not part of this game")
        replay = self._replay_for(period_id)
        return replay.seconds_for(player_id, self._close_time(period_id))

    def total_seconds_played(self, player_id: str) -> int:
        return sum(self.minutes_played(player_id, period_id) for period_id in self._events)

    def events(self, period_id: str) -> List[SubstitutionEvent]:
        """Events of a period, most recently recorded first."""
        if period_id not in self._events:
            raise NotFoundError(f"Period '{period_id}' not found")
        return sorted(self._events[period_id], key=lambda e: e.sequence, reverse=True)

    def history(self) -> List[SubstitutionEvent]:
        """Events of every period, most recently recorded first."""
        all_events = [e for events in self._events.values() for e in events]
        return sorted(all_events, key=lambda e: e.sequence, reverse=True)

    def period_events(self, period_id: str) -> Tuple[SubstitutionEvent, ...]:
        """Events of a period in insertion order, for snapshots."""
        return tuple(self._events.get(period_id, ()))

    def find(self, event_id: str) -> SubstitutionEvent:
        period_id, index = self._locate(event_id)
        return self._events[period_id][index]

    def active_after_replay(self, period_id: str) -> FrozenSet[str]:
        return self._replay_for(period_id).active

    def event_count(self) -> int:
        return sum(len(events) for events in self._events.values())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _commit_replay(self, period_id: str, replay: PeriodReplay) -> None:
        self._replays[period_id] = replay
        if period_id == self._current_period_id and period_id not in self._closed:
            self._roster.replace(replay.active)

    def _replay_for(self, period_id: str) -> PeriodReplay:
        if period_id not in self._replays:
            raise NotFoundError(f"Period '{period_id}' not found")
        return self._replays[period_id]

    def _close_time(self, period_id: str) -> int:
        if period_id == self._current_period_id and period_id not in self._closed:
            return int(self._time_source())
        return 0

    def _require_open(self, period_id: str) -> None:
        if period_id not in self._events:
            raise NotFoundError(f"Period '{period_id}' not found")
        if period_id in self._closed:
            raise InvalidStateError("Cannot record a substitution in a period that has ended")

    def _locate(self, event_id: str) -> Tuple[str, int]:
        for period_id, events in self._events.items():
            for index, event in enumerate(events):
                if event.id == event_id:
                    return period_id, index
        raise NotFoundError(f"Substitution '{event_id}' not found")

    def _resolve(self, refs: Sequence[PlayerRef]) -> List[Player]:
        players: List[Player] = []
        seen: Set[str] = set()
        for ref in refs:
            player_id = ref.id if isinstance(ref, Player) else str(ref)
            if player_id not in self._players:
                raise NotFoundError(f"Player '{player_id}' is not part of this game")
            if player_id not in seen:
                seen.add(player_id)
                players.append(self._players[player_id])
        return players

    def _validate_sides(self, players_in: List[Player], players_out: List[Player]) -> None:
        if not players_in and not players_out:
            raise ValidationError("Substitution must involve at least one player")
        both = {p.id for p in players_in} & {p.id for p in players_out}
        if both:
            raise ValidationError(
                "A player cannot be substituted in and out in the same event"
            )

    def _validate_time(self, period_id: str, event_time: int) -> int:
        length = self._period_lengths[period_id]
        event_time = int(event_time)
        if not 0 <= event_time <= length:
            raise ValidationError(f"Event time must be between 0 and {length} seconds")
        if period_id == self._current_period_id and period_id not in self._closed:
            clock_time = int(self._time_source())
            if event_time < clock_time:
                raise ValidationError(
                    f"Event time {fmt_clock(event_time)} has not been reached yet "
                    f"(clock shows {fmt_clock(clock_time)})"
                )
        return event_time
