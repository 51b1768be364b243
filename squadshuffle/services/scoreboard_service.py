"""
Scoreboard service for the SquadShuffle application.

Records goals against the current match and decides the winner when the
match ends.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models import GoalRecord, MatchState, MatchStateError, TeamScore
from ..utils import fmt_mmss
from ..utils.constants import UNKNOWN_SCORER
from .timer_service import TimerService

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Final (or current) standing of a match."""
    winner: Optional[str]
    is_draw: bool
    standings: List[Dict[str, object]]
    message: str

    def to_dict(self) -> dict:
        return {
            "winner": self.winner,
            "is_draw": self.is_draw,
            "standings": self.standings,
            "message": self.message,
        }


def determine_result(match_state: MatchState) -> Optional[MatchResult]:
    """
    Rank teams by goals and compare the top two.

    Returns:
        MatchResult, or None when the match has fewer than two teams
    """
    if len(match_state.scores) < 2:
        return None

    standings = sorted(
        ({"team": name, "goals": score.goals} for name, score in match_state.scores.items()),
        key=lambda s: s["goals"],
        reverse=True,
    )
    first, second = standings[0], standings[1]

    if first["goals"] > second["goals"]:
        return MatchResult(
            winner=first["team"],
            is_draw=False,
            standings=standings,
            message=f"{first['team']} wins {first['goals']}-{second['goals']}!",
        )
    return MatchResult(
        winner=None,
        is_draw=True,
        standings=standings,
        message=f"It's a draw {first['goals']}-{second['goals']}!",
    )


class ScoreboardService:
    """Service for live goal tracking."""

    def __init__(self, match_state: MatchState, timer_service: Optional[TimerService] = None):
        self.match_state = match_state
        self.timer_service = timer_service or TimerService(match_state)
        self.match_state.ensure_scores()

    def _score_for(self, team_name: str) -> TeamScore:
        if team_name not in self.match_state.team_names():
            raise MatchStateError(f"Unknown team: {team_name}")
        self.match_state.ensure_scores()
        return self.match_state.scores[team_name]

    def add_goal(
        self,
        team_name: str,
        scorer: Optional[str] = None,
        player_id: Optional[str] = None,
    ) -> GoalRecord:
        """
        Record a goal for a team at the current match time.

        Args:
            team_name: Name of the scoring team
            scorer: Scorer's name as entered; defaults to "Unknown"
            player_id: Rostered player id, if the scorer is known

        Returns:
            The recorded goal

        Raises:
            MatchStateError: If the team is not part of the match, or the
                player id is not on that team
        """
        score = self._score_for(team_name)
        if player_id is not None:
            team = next(t for t in self.match_state.teams if t.name == team_name)
            if player_id not in team.player_ids():
                raise MatchStateError(f"Player {player_id} is not on {team_name}")
        goal = GoalRecord(
            player=(scorer or "").strip() or UNKNOWN_SCORER,
            time=fmt_mmss(self.timer_service.get_elapsed_seconds()),
            player_id=player_id,
        )
        score.scorers.append(goal)
        logger.info("Goal for %s by %s at %s", team_name, goal.player, goal.time)
        return goal

    def remove_goal(self, team_name: str) -> Optional[GoalRecord]:
        """Remove the most recent goal for a team, if it has any."""
        score = self._score_for(team_name)
        if not score.scorers:
            return None
        return score.scorers.pop()

    def get_scores(self) -> Dict[str, dict]:
        self.match_state.ensure_scores()
        return {name: score.to_dict() for name, score in self.match_state.scores.items()}

    def get_result(self) -> Optional[MatchResult]:
        return determine_result(self.match_state)
