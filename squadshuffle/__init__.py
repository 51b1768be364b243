"""
SquadShuffle

Organizes pickup futsal and soccer matches: keeps a roster of rated players,
shuffles them into balanced teams, runs a countdown match timer and records
live scores.

The team formation engine lives in ``squadshuffle.services.team_formation``;
a Flask JSON API is available through ``squadshuffle.ui``.
"""
from .models import Player, Position, Team, FormationResult, MatchState
from .services import (
    InsufficientPlayersError, validate_team_formation, shuffle_into_teams, get_team_stats
)
from .utils import fmt_mmss, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "Position", "Team", "FormationResult", "MatchState",
    "InsufficientPlayersError", "validate_team_formation", "shuffle_into_teams",
    "get_team_stats", "fmt_mmss", "APP_TITLE"
]
