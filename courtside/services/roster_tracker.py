"""Active roster tracking for the Courtside basketball bench tracker."""

from typing import FrozenSet, Iterable, Iterator, Set


class ActiveRosterTracker:
    """
    The set of player ids currently on court for the active period.

    The tracker stores whatever set it is given. The on-court cap is a
    commit-time rule of the substitution workflow, which may let a user
    over-select transiently before correcting the selection.
    """

    def __init__(self, player_ids: Iterable[str] = ()):
        self._active: Set[str] = set(player_ids)

    def add(self, player_id: str) -> None:
        self._active.add(player_id)

    def remove(self, player_id: str) -> None:
        """Take a player off court; removing a bench player does nothing."""
        self._active.discard(player_id)

    def current(self) -> FrozenSet[str]:
        return frozenset(self._active)

    def replace(self, player_ids: Iterable[str]) -> None:
        self._active = set(player_ids)

    def clear(self) -> None:
        self._active.clear()

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._active

    def __len__(self) -> int:
        return len(self._active)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._active))
