"""Abstract repository interface for Mountain Goats storage.

Both file-based (JSON) and SQLite backends implement this interface, so a
session can be saved and resumed without knowing which backend is active.
The engine has no opinion on encoding: it hands over a JSON-compatible dict
and validates the snapshot again when it is loaded.
"""

from abc import ABC, abstractmethod
from typing import Optional


class GameRecordRepository(ABC):
    """Abstract base class for saved-game storage."""

    @abstractmethod
    def save_game(self, game_id: str, record: dict) -> None:
        """Persist a game record, replacing any record with the same id.

        Args:
            game_id: Unique identifier for the game
            record: JSON-compatible dict; the snapshot lives under "state"
        """
        pass

    @abstractmethod
    def load_game(self, game_id: str) -> Optional[dict]:
        """Load a game record by ID.

        Args:
            game_id: ID of game to load

        Returns:
            Game record dict, or None if not found
        """
        pass

    @abstractmethod
    def list_games(self) -> list[dict]:
        """List saved games, most recently updated first.

        Returns:
            List of metadata dicts: {id, status, turn_count, player_names, updated_at}
        """
        pass

    @abstractmethod
    def delete_game(self, game_id: str) -> bool:
        """Delete a game record.

        Args:
            game_id: ID of game to delete

        Returns:
            True if deleted, False if not found
        """
        pass
