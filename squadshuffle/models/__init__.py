"""
Models package for SquadShuffle.

This package contains the core data models used throughout the application.
"""
from .player import Player, PlayerStats, Position, SkillLevel
from .team import (
    Team, FormationResult, ValidationResult, ValidationWarning, TeamBalance, TeamStats
)
from .match import MatchState, MatchStateError, TeamScore, GoalRecord

__all__ = [
    "Player", "PlayerStats", "Position", "SkillLevel",
    "Team", "FormationResult", "ValidationResult", "ValidationWarning",
    "TeamBalance", "TeamStats", "MatchState", "MatchStateError", "TeamScore", "GoalRecord"
]
