"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service instances
with their dependencies injected.
"""
from typing import Optional

from ..models import MatchState
from ..utils.constants import DEFAULT_DATA_DIR
from .match_service import MatchService
from .persistence_service import PersistenceService
from .roster_service import RosterService
from .scoreboard_service import ScoreboardService
from .team_formation import RandomSource
from .timer_service import TimerService


class ServiceFactory:
    """
    Factory for creating service instances that share one persistence
    service and one random source.
    """

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR, rng: Optional[RandomSource] = None):
        """
        Initialize factory.

        Args:
            data_dir: Directory where roster and match files are stored
            rng: Random source for shuffles and coin tosses (None for system entropy)
        """
        self.data_dir = data_dir
        self.rng = rng
        self._persistence_service: Optional[PersistenceService] = None
        self._roster_service: Optional[RosterService] = None

    def create_roster_service(self) -> RosterService:
        """Get the singleton roster service."""
        if self._roster_service is None:
            self._roster_service = RosterService(self._get_persistence_service())
        return self._roster_service

    def create_match_service(self) -> MatchService:
        return MatchService(
            roster_service=self.create_roster_service(),
            persistence_service=self._get_persistence_service(),
            rng=self.rng,
        )

    def create_timer_service(self, match_state: MatchState) -> TimerService:
        return TimerService(match_state)

    def create_scoreboard_service(
        self,
        match_state: MatchState,
        timer_service: Optional[TimerService] = None,
    ) -> ScoreboardService:
        return ScoreboardService(match_state, timer_service or self.create_timer_service(match_state))

    def create_complete_service_suite(self) -> dict:
        """
        Create the roster-side services.

        Returns:
            Dictionary containing all configured services
        """
        return {
            'roster': self.create_roster_service(),
            'match': self.create_match_service(),
            'persistence': self._get_persistence_service(),
        }

    def _get_persistence_service(self) -> PersistenceService:
        """Get singleton persistence service."""
        if self._persistence_service is None:
            self._persistence_service = PersistenceService(self.data_dir)
        return self._persistence_service
