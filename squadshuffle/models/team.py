"""
Team formation value types for the SquadShuffle application.

These are built fresh by the team formation engine on every shuffle and handed
to the caller; nothing here is cached between calls.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from .player import Player, Position


@dataclass
class Team:
    """A formed team with its display identity."""
    name: str
    color: str
    players: List[Player] = field(default_factory=list)

    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "color": self.color,
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Team':
        """Create from dictionary for JSON deserialization."""
        return cls(
            name=data["name"],
            color=data.get("color", ""),
            players=[Player.from_dict(p) for p in data.get("players", [])],
        )


@dataclass
class FormationResult:
    """Teams and substitutes produced by a single shuffle."""
    teams: List[Team]
    substitutes: List[Player]
    total_teams: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teams": [t.to_dict() for t in self.teams],
            "substitutes": [p.to_dict() for p in self.substitutes],
            "total_teams": self.total_teams,
        }


@dataclass(frozen=True)
class ValidationWarning:
    """Non-blocking advisory raised while validating a team formation."""
    code: str
    message: str

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass
class ValidationResult:
    """
    Outcome of checking whether a pool can be split into teams.

    Attributes:
        valid: True when at least two full teams can be formed
        message: Human readable summary
        suggestion: What to do about a failed validation
        max_teams: Number of full teams that can be formed (valid only)
        substitute_count: Players left over as substitutes (valid only)
        shortfall: Players missing for two full teams (0 when valid)
        warnings: Advisories that never change ``valid``
    """
    valid: bool
    message: str
    suggestion: Optional[str] = None
    max_teams: Optional[int] = None
    substitute_count: Optional[int] = None
    shortfall: int = 0
    warnings: List[ValidationWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "message": self.message,
            "suggestion": self.suggestion,
            "max_teams": self.max_teams,
            "substitute_count": self.substitute_count,
            "shortfall": self.shortfall,
            "warnings": [w.message for w in self.warnings],
        }


@dataclass
class TeamBalance:
    """Position counts and skill totals for one team."""
    position_counts: Dict[Position, int]
    average_skill: float
    total_skill: int


@dataclass
class TeamStats:
    """Display-ready summary of a team."""
    average_skill: str
    total_skill: int
    positions: str
    player_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_skill": self.average_skill,
            "total_skill": self.total_skill,
            "positions": self.positions,
            "player_count": self.player_count,
        }
