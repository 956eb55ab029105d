"""
Player model for the Courtside basketball bench tracker.

Players are supplied by the team roster at game start and are only ever
referenced by games, periods, substitution events and fouls.
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Player:
    """
    A rostered basketball player.

    Attributes:
        id: Unique player identifier
        number: Jersey number as entered on the roster (e.g. "00", "23")
        name: Player's display name
    """
    id: str
    number: str
    name: str

    @property
    def label(self) -> str:
        """Short label used in substitution tables, e.g. '#23 Jordan'."""
        return f"#{self.number} {self.name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"id": self.id, "number": self.number, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Create from dictionary for JSON deserialization."""
        return cls(
            id=str(data["id"]),
            number=str(data.get("number", "")),
            name=str(data.get("name", "")),
        )
