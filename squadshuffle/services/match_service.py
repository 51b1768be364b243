"""
Match service for the SquadShuffle application.

Bridges the roster and the team formation engine: shuffles the roster into
teams, runs the kick-off coin toss and saves the teams as the current match.
"""
import logging
import random
from dataclasses import dataclass
from typing import Optional

from ..models import FormationResult, MatchState, MatchStateError, Team, ValidationResult
from ..utils import now_iso
from ..utils.constants import DEFAULT_MATCH_DURATION_SECONDS
from .persistence_service import PersistenceService
from .roster_service import RosterService
from .team_formation import RandomSource, shuffle_into_teams, validate_team_formation

logger = logging.getLogger(__name__)

HEADS = "heads"
TAILS = "tails"


@dataclass
class CoinTossResult:
    """Outcome of the kick-off coin toss."""
    result: str
    starting_team: Team

    def to_dict(self) -> dict:
        return {"result": self.result, "starting_team": self.starting_team.name}


class MatchService:
    """Service for turning the roster into a playable match."""

    def __init__(
        self,
        roster_service: RosterService,
        persistence_service: PersistenceService,
        rng: Optional[RandomSource] = None,
    ):
        self.roster_service = roster_service
        self.persistence_service = persistence_service
        self.rng = rng or random.Random()
        self.last_formation: Optional[FormationResult] = None
        self.coin_toss_result: Optional[CoinTossResult] = None

    def validate(self) -> ValidationResult:
        """Validate the current roster against the chosen team size."""
        return validate_team_formation(
            self.roster_service.players, self.roster_service.team_size
        )

    def shuffle_teams(self) -> FormationResult:
        """
        Shuffle the roster into teams.

        Raises:
            MatchStateError: If the roster is empty
            InsufficientPlayersError: If two full teams cannot be formed
        """
        players = self.roster_service.players
        if not players:
            raise MatchStateError("Please add some players first!")

        validation = self.validate()
        for warning in validation.warnings:
            logger.warning("Team formation warning: %s", warning.message)

        result = shuffle_into_teams(players, self.roster_service.team_size, self.rng)
        self.last_formation = result
        self.coin_toss_result = None
        logger.info(
            "Formed %d teams of %d with %d substitutes",
            result.total_teams, self.roster_service.team_size, len(result.substitutes),
        )
        return result

    def coin_toss(self) -> CoinTossResult:
        """
        Toss a coin between the first two teams: heads means the first team starts.

        Raises:
            MatchStateError: If fewer than two teams have been formed
        """
        if self.last_formation is None or len(self.last_formation.teams) < 2:
            raise MatchStateError("Please shuffle teams first!")

        teams = self.last_formation.teams
        result = HEADS if self.rng.random() < 0.5 else TAILS
        starting_team = teams[0] if result == HEADS else teams[1]
        self.coin_toss_result = CoinTossResult(result=result, starting_team=starting_team)
        logger.info("Coin toss: %s, %s kicks off", result, starting_team.name)
        return self.coin_toss_result

    def save_teams_for_match(self, duration_seconds: Optional[int] = None) -> MatchState:
        """
        Save the last shuffle as the current match with zeroed scores.

        Raises:
            MatchStateError: If no teams have been formed
            ValueError: If a non-positive duration is given
        """
        if self.last_formation is None or not self.last_formation.teams:
            raise MatchStateError("Please shuffle teams first!")
        if duration_seconds is not None and duration_seconds <= 0:
            raise ValueError("Duration must be positive")

        match_state = MatchState(
            teams=list(self.last_formation.teams),
            substitutes=list(self.last_formation.substitutes),
            team_size=self.roster_service.team_size,
            starting_team=(
                self.coin_toss_result.starting_team.name if self.coin_toss_result else None
            ),
            timestamp=now_iso(),
            duration_seconds=duration_seconds or DEFAULT_MATCH_DURATION_SECONDS,
        )
        match_state.reset_scores()
        self.persistence_service.save_current_match(match_state)
        logger.info("Saved %d teams for the match", len(match_state.teams))
        return match_state

    def load_match(self) -> Optional[MatchState]:
        return self.persistence_service.load_current_match()
