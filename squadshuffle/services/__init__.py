"""
Services package for SquadShuffle.

This package contains the team formation engine and the service classes that
handle roster, match, timer and scoreboard logic.
"""
from .team_formation import (
    InsufficientPlayersError, validate_team_formation, shuffle_into_teams,
    get_team_stats, fisher_yates_shuffle, partition_players, balance_teams,
    name_and_color_teams, calculate_team_balance
)
from .persistence_service import PersistenceService
from .roster_service import RosterService, PlayerValidationError
from .timer_service import TimerService
from .scoreboard_service import ScoreboardService, MatchResult
from .match_service import MatchService, CoinTossResult
from .service_factory import ServiceFactory

__all__ = [
    "InsufficientPlayersError", "validate_team_formation", "shuffle_into_teams",
    "get_team_stats", "fisher_yates_shuffle", "partition_players", "balance_teams",
    "name_and_color_teams", "calculate_team_balance",
    "PersistenceService", "RosterService", "PlayerValidationError",
    "TimerService", "ScoreboardService", "MatchResult",
    "MatchService", "CoinTossResult", "ServiceFactory"
]
