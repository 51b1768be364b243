"""
Roster service for the SquadShuffle application.

This module provides business logic for managing the player pool, including
validation, the chosen team size, post-match statistics and JSON
import/export. It is the roster provider the team formation engine consumes.
"""
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models import MatchState, MatchStateError, Player, Position
from ..models.player import DEFAULT_SKILL_LEVEL, MAX_SKILL_LEVEL, MIN_SKILL_LEVEL
from ..utils.constants import SUPPORTED_TEAM_SIZES
from .persistence_service import PersistenceService
from .scoreboard_service import determine_result

logger = logging.getLogger(__name__)


class PlayerValidationError(Exception):
    """Custom exception for player validation errors."""
    pass


class RosterService:
    """
    Service class for managing the roster and team size.

    Every mutation is written through the persistence service so the roster
    survives restarts.
    """

    VALID_POSITIONS = {position.value: position.label for position in Position}

    def __init__(self, persistence_service: Optional[PersistenceService] = None):
        """
        Initialize RosterService and load any saved roster.

        Args:
            persistence_service: Optional persistence service instance
        """
        self.persistence_service = persistence_service or PersistenceService()
        self._players: List[Player] = self.persistence_service.load_players()
        self._team_size: int = self.persistence_service.load_team_size()

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def team_size(self) -> int:
        return self._team_size

    def validate_player_data(self, player: Player) -> List[str]:
        """
        Validate player data and return list of validation errors.

        Args:
            player: Player instance to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not player.name or not player.name.strip():
            errors.append("Please enter a player name")

        if not isinstance(player.position, Position):
            errors.append(f"Invalid position: {player.position}")

        if (isinstance(player.skill_level, bool)
                or not isinstance(player.skill_level, int)
                or not MIN_SKILL_LEVEL <= player.skill_level <= MAX_SKILL_LEVEL):
            errors.append(
                f"Skill level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}"
            )

        return errors

    def create_player(
        self,
        name: str,
        position: Any = Position.MIDFIELDER,
        skill_level: int = DEFAULT_SKILL_LEVEL,
    ) -> Player:
        """
        Create a new player with validation.

        Raises:
            PlayerValidationError: If player data is invalid
        """
        try:
            parsed_position = Position.parse(position)
        except ValueError as e:
            raise PlayerValidationError(f"Player validation failed: {e}") from e

        player = Player(
            name=(name or "").strip(),
            position=parsed_position,
            skill_level=skill_level,
        )

        errors = self.validate_player_data(player)
        if errors:
            raise PlayerValidationError(f"Player validation failed: {'; '.join(errors)}")

        return player

    def add_player(
        self,
        name: str,
        position: Any = Position.MIDFIELDER,
        skill_level: int = DEFAULT_SKILL_LEVEL,
    ) -> Player:
        """Create, store and persist a new player."""
        player = self.create_player(name, position, skill_level)
        self._players.append(player)
        self._save_players()
        logger.info("Added player %s (%s, skill %d)", player.name, player.position.value, player.skill_level)
        return player

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self._players if p.id == player_id), None)

    def remove_player(self, player_id: str) -> Player:
        """
        Remove a player from the roster.

        Raises:
            PlayerValidationError: If no player has the given id
        """
        player = self.get_player(player_id)
        if player is None:
            raise PlayerValidationError(f"Player not found: {player_id}")

        self._players = [p for p in self._players if p.id != player_id]
        self._save_players()
        logger.info("Removed player %s", player.name)
        return player

    def set_team_size(self, team_size: int) -> None:
        """
        Set the players-per-side used for shuffling.

        Raises:
            PlayerValidationError: If the size is not a supported format
        """
        if team_size not in SUPPORTED_TEAM_SIZES:
            supported = ", ".join(str(s) for s in SUPPORTED_TEAM_SIZES)
            raise PlayerValidationError(f"Team size must be one of: {supported}")

        self._team_size = team_size
        self.persistence_service.save_team_size(team_size)

    def record_match_result(self, match_state: MatchState) -> None:
        """
        Fold a finished match into player statistics.

        Every team player gets a match, the winning side gets a win, and goals
        credited to a rostered player id count towards that player.

        Raises:
            MatchStateError: If the match has not ended
        """
        if not match_state.match_ended:
            raise MatchStateError("Match has not ended yet")

        result = determine_result(match_state)
        winner = result.winner if result else None
        roster = {p.id: p for p in self._players}

        for team in match_state.teams:
            for team_player in team.players:
                player = roster.get(team_player.id)
                if player is None:
                    continue  # removed from the roster since the shuffle
                player.stats.matches += 1
                if team.name == winner:
                    player.stats.wins += 1

        for score in match_state.scores.values():
            for goal in score.scorers:
                player = roster.get(goal.player_id) if goal.player_id else None
                if player is not None:
                    player.stats.goals += 1

        self._save_players()

    def get_player_summary(self, player: Player) -> Dict[str, Any]:
        """
        Get a display summary of player information.

        Args:
            player: Player instance

        Returns:
            Dictionary containing player summary data
        """
        return {
            "id": player.id,
            "name": player.name,
            "position": player.position.value,
            "position_label": player.position.label,
            "position_color": player.position.color,
            "skill_level": player.skill_level,
            "skill_label": player.skill_label,
            "statistics": player.stats.to_dict(),
        }

    def export_player_data(self, filename: str) -> None:
        """
        Export the roster to a JSON file.

        Args:
            filename: Output filename
        """
        data = {
            "exported_at": datetime.now().isoformat(),
            "player_count": len(self._players),
            "players": [player.to_dict() for player in self._players]
        }

        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def import_player_data(self, filename: str) -> List[Player]:
        """
        Replace the roster with players from a JSON export.

        Args:
            filename: Input filename

        Returns:
            List of imported Player instances

        Raises:
            FileNotFoundError: If import file doesn't exist
            json.JSONDecodeError: If file contains invalid JSON
            ValueError: If the file has no 'players' field
            PlayerValidationError: If imported data is invalid
        """
        if not os.path.exists(filename):
            raise FileNotFoundError(f"Import file not found: {filename}")

        with open(filename, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if "players" not in data:
            raise ValueError("Invalid import file format: missing 'players' field")

        players = []
        validation_errors = []

        for i, player_data in enumerate(data["players"]):
            try:
                player = Player.from_dict(player_data)
            except (KeyError, TypeError, ValueError) as e:
                validation_errors.append(f"Player {i+1}: Failed to parse - {e}")
                continue

            errors = self.validate_player_data(player)
            if errors:
                validation_errors.append(f"Player {i+1}: {'; '.join(errors)}")
            else:
                players.append(player)

        if validation_errors:
            error_msg = "Import validation errors:\n" + "\n".join(validation_errors)
            raise PlayerValidationError(error_msg)

        self._players = players
        self._save_players()
        logger.info("Imported %d players from %s", len(players), filename)
        return list(players)

    def _save_players(self) -> None:
        self.persistence_service.save_players(self._players)
