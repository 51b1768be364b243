"""
MatchState model for the SquadShuffle application.

This module contains the MatchState dataclass which represents the "current
match": the teams saved from a shuffle, the countdown timer, and live scores,
together with its JSON persistence methods.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .player import Player
from .team import Team
from ..utils.constants import DEFAULT_MATCH_DURATION_SECONDS, DEFAULT_TEAM_SIZE


class MatchStateError(Exception):
    """Raised when a match operation is not allowed in the current state."""
    pass


@dataclass
class GoalRecord:
    """A single goal: who scored and at which match time (MM:SS)."""
    player: str
    time: str
    player_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"player": self.player, "time": self.time, "player_id": self.player_id}

    @classmethod
    def from_dict(cls, data: dict) -> "GoalRecord":
        return cls(
            player=data.get("player", ""),
            time=data.get("time", "00:00"),
            player_id=data.get("player_id"),
        )


@dataclass
class TeamScore:
    """Goals scored by one team, in the order they were recorded."""
    scorers: List[GoalRecord] = field(default_factory=list)

    @property
    def goals(self) -> int:
        return len(self.scorers)

    def to_dict(self) -> dict:
        return {"goals": self.goals, "scorers": [g.to_dict() for g in self.scorers]}

    @classmethod
    def from_dict(cls, data: dict) -> "TeamScore":
        return cls(scorers=[GoalRecord.from_dict(g) for g in data.get("scorers", [])])


@dataclass
class MatchState:
    """
    Represents the complete state of the current match.

    Attributes:
        teams: Teams saved from the last shuffle
        substitutes: Players left over from the shuffle
        team_size: Players per side
        starting_team: Name of the team that won the coin toss, if any
        timestamp: ISO timestamp of when the teams were saved
        duration_seconds: Configured match length
        match_started: Whether the countdown has been started
        match_ended: Whether the match has finished (stopped or expired)
        paused: Whether the countdown is currently paused
        elapsed_seconds: Seconds played before the current running segment
        run_start_ts: Epoch timestamp when the current running segment began
        scores: Score per team, keyed by team name
    """
    teams: List[Team] = field(default_factory=list)
    substitutes: List[Player] = field(default_factory=list)
    team_size: int = DEFAULT_TEAM_SIZE
    starting_team: Optional[str] = None
    timestamp: Optional[str] = None
    duration_seconds: int = DEFAULT_MATCH_DURATION_SECONDS
    match_started: bool = False
    match_ended: bool = False
    paused: bool = False
    elapsed_seconds: int = 0
    run_start_ts: Optional[float] = None
    scores: Dict[str, TeamScore] = field(default_factory=dict)

    @property
    def is_running(self) -> bool:
        return self.match_started and not self.match_ended and not self.paused

    def team_names(self) -> List[str]:
        return [t.name for t in self.teams]

    def ensure_scores(self) -> None:
        """Ensure there is exactly one score entry per team."""
        names = self.team_names()
        self.scores = {name: self.scores.get(name, TeamScore()) for name in names}

    def reset_scores(self) -> None:
        self.scores = {name: TeamScore() for name in self.team_names()}

    def to_json(self) -> dict:
        """
        Convert MatchState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "teams": [t.to_dict() for t in self.teams],
            "substitutes": [p.to_dict() for p in self.substitutes],
            "team_size": self.team_size,
            "starting_team": self.starting_team,
            "timestamp": self.timestamp,
            "duration_seconds": self.duration_seconds,
            "match_started": self.match_started,
            "match_ended": self.match_ended,
            "paused": self.paused,
            "elapsed_seconds": self.elapsed_seconds,
            "run_start_ts": self.run_start_ts,
            "scores": {name: score.to_dict() for name, score in self.scores.items()},
        }

    @staticmethod
    def from_json(data: dict) -> "MatchState":
        """
        Create MatchState from JSON dictionary.

        Args:
            data: Dictionary with match state data

        Returns:
            New MatchState instance
        """
        ms = MatchState()
        ms.teams = [Team.from_dict(t) for t in data.get("teams", [])]
        ms.substitutes = [Player.from_dict(p) for p in data.get("substitutes", [])]
        ms.team_size = int(data.get("team_size", DEFAULT_TEAM_SIZE))
        ms.starting_team = data.get("starting_team")
        ms.timestamp = data.get("timestamp")
        ms.duration_seconds = int(data.get("duration_seconds", DEFAULT_MATCH_DURATION_SECONDS))
        ms.match_started = bool(data.get("match_started", False))
        ms.match_ended = bool(data.get("match_ended", False))
        ms.paused = bool(data.get("paused", False))
        ms.elapsed_seconds = int(data.get("elapsed_seconds", 0))
        ms.run_start_ts = data.get("run_start_ts")
        ms.scores = {
            name: TeamScore.from_dict(score)
            for name, score in (data.get("scores") or {}).items()
        }
        ms.ensure_scores()
        return ms
