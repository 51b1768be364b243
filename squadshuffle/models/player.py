"""
Player model for the SquadShuffle application.

This module contains the Player dataclass which represents a rostered player,
the closed set of field positions, and the 1-5 skill scale used by the
team formation engine.
"""
import uuid
from dataclasses import dataclass, field
from typing import Dict, Any
from enum import Enum


class Position(Enum):
    """Field positions a player can be registered under."""
    GOALKEEPER = "GK"
    DEFENDER = "DEF"
    MIDFIELDER = "MID"
    FORWARD = "FWD"

    @property
    def label(self) -> str:
        return POSITION_LABELS[self]

    @property
    def color(self) -> str:
        return POSITION_COLORS[self]

    @classmethod
    def parse(cls, value: Any) -> "Position":
        """
        Resolve a Position from an enum member or its short code.

        Raises:
            ValueError: If the value is not a known position code
        """
        if isinstance(value, cls):
            return value
        code = str(value or "").strip().upper()
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Invalid position: {value!r}") from None


POSITION_LABELS = {
    Position.GOALKEEPER: "Goalkeeper",
    Position.DEFENDER: "Defender",
    Position.MIDFIELDER: "Midfielder",
    Position.FORWARD: "Forward",
}

POSITION_COLORS = {
    Position.GOALKEEPER: "#ffc107",
    Position.DEFENDER: "#007bff",
    Position.MIDFIELDER: "#28a745",
    Position.FORWARD: "#dc3545",
}


class SkillLevel(Enum):
    """Skill level enumeration for the 1-5 player rating."""
    BEGINNER = 1
    DEVELOPING = 2
    PROFICIENT = 3
    ADVANCED = 4
    EXPERT = 5

    @property
    def label(self) -> str:
        return self.name.title()


MIN_SKILL_LEVEL = SkillLevel.BEGINNER.value
MAX_SKILL_LEVEL = SkillLevel.EXPERT.value
DEFAULT_SKILL_LEVEL = SkillLevel.PROFICIENT.value


@dataclass
class PlayerStats:
    """Career totals for a player across recorded matches."""
    matches: int = 0
    goals: int = 0
    wins: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "matches": self.matches,
            "goals": self.goals,
            "wins": self.wins,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerStats':
        """Create from dictionary for JSON deserialization."""
        if not data:
            return cls()
        return cls(
            matches=int(data.get("matches", 0)),
            goals=int(data.get("goals", 0)),
            wins=int(data.get("wins", 0)),
        )


def new_player_id() -> str:
    """Generate a fresh opaque player identifier."""
    return uuid.uuid4().hex


@dataclass
class Player:
    """
    Represents a rostered player.

    The team formation engine only reads ``id``, ``position`` and
    ``skill_level``; the remaining fields travel through untouched.

    Attributes:
        name: Display name
        position: Registered field position
        skill_level: Rating from 1 (beginner) to 5 (expert)
        id: Unique, stable identifier
        stats: Match totals (matches, goals, wins)
    """
    name: str
    position: Position = Position.MIDFIELDER
    skill_level: int = DEFAULT_SKILL_LEVEL
    id: str = field(default_factory=new_player_id)
    stats: PlayerStats = field(default_factory=PlayerStats)

    def __post_init__(self) -> None:
        self.position = Position.parse(self.position)

    @property
    def skill_label(self) -> str:
        """Human readable skill label, e.g. "Advanced"."""
        try:
            return SkillLevel(self.skill_level).label
        except ValueError:
            return "Unrated"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position.value,
            "skill_level": self.skill_level,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        """
        Create player from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance

        Raises:
            KeyError: If the name is missing
            ValueError: If the position is unknown
        """
        # Older exports used camelCase for the rating
        skill_level = data.get("skill_level", data.get("skillLevel", DEFAULT_SKILL_LEVEL))
        return cls(
            id=data.get("id") or new_player_id(),
            name=data["name"],
            position=Position.parse(data.get("position", Position.MIDFIELDER.value)),
            skill_level=int(skill_level) if isinstance(skill_level, str) else skill_level,
            stats=PlayerStats.from_dict(data.get("stats")),
        )
