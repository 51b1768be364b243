"""
Persistence service for the SquadShuffle application.

Stores the roster, the chosen team size and the current match as JSON files
in a single data directory, one file per key.
"""
import json
import logging
import os
from typing import Any, List, Optional

from ..models import MatchState, Player
from ..utils.constants import DEFAULT_DATA_DIR, DEFAULT_TEAM_SIZE

logger = logging.getLogger(__name__)

PLAYERS_KEY = "players"
TEAM_SIZE_KEY = "team_size"
CURRENT_MATCH_KEY = "current_match"


class PersistenceService:
    """
    Service for persisting application data to JSON files.

    Missing files load as defaults; malformed files raise
    ``json.JSONDecodeError`` so corruption is never silently discarded.
    """

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR):
        self.data_dir = data_dir

    def _path_for(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def _write(self, key: str, value: Any) -> None:
        """
        Write a value under ``key``.

        Raises:
            IOError: If file cannot be written
            OSError: If path is invalid
        """
        file_path = self._path_for(key)

        # Ensure directory exists
        directory = os.path.dirname(file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
        logger.debug("Saved %s to %s", key, file_path)

    def _read(self, key: str) -> Optional[Any]:
        file_path = self._path_for(key)
        if not os.path.exists(file_path):
            return None

        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _remove(self, key: str) -> None:
        file_path = self._path_for(key)
        if os.path.exists(file_path):
            os.remove(file_path)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------
    def save_players(self, players: List[Player]) -> None:
        self._write(PLAYERS_KEY, [p.to_dict() for p in players])

    def load_players(self) -> List[Player]:
        data = self._read(PLAYERS_KEY)
        if not data:
            return []
        return [Player.from_dict(p) for p in data]

    def save_team_size(self, team_size: int) -> None:
        self._write(TEAM_SIZE_KEY, int(team_size))

    def load_team_size(self) -> int:
        data = self._read(TEAM_SIZE_KEY)
        if data is None:
            return DEFAULT_TEAM_SIZE
        return int(data)

    # ------------------------------------------------------------------
    # Current match
    # ------------------------------------------------------------------
    def save_current_match(self, match_state: MatchState) -> None:
        self._write(CURRENT_MATCH_KEY, match_state.to_json())

    def load_current_match(self) -> Optional[MatchState]:
        data = self._read(CURRENT_MATCH_KEY)
        if data is None:
            return None
        return MatchState.from_json(data)

    def clear_current_match(self) -> None:
        self._remove(CURRENT_MATCH_KEY)
        logger.info("Cleared saved match")
