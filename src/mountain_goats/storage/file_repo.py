"""File-based repository implementation using JSON files.

Each saved game is one JSON file named after its id in the games directory.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .repository import GameRecordRepository

logger = logging.getLogger(__name__)


class FileGameRecordRepository(GameRecordRepository):
    """JSON file-based game record repository."""

    def __init__(self, games_path: str | Path = "games"):
        """Initialize repository.

        Args:
            games_path: Path to games directory
        """
        self.games_path = Path(games_path)
        self.games_path.mkdir(parents=True, exist_ok=True)

    def _get_game_path(self, game_id: str) -> Path:
        """Get path to game file."""
        return self.games_path / f"{game_id}.json"

    def save_game(self, game_id: str, record: dict) -> None:
        """Persist a game record."""
        path = self._get_game_path(game_id)
        now = datetime.now(timezone.utc).isoformat()

        created_at = now
        if path.exists():
            with open(path, encoding="utf-8") as f:
                created_at = json.load(f).get("created_at", now)

        record_with_meta = {
            **record,
            "id": game_id,
            "created_at": created_at,
            "updated_at": now,
        }

        with open(path, "w", encoding="utf-8") as f:
            json.dump(record_with_meta, f, indent=2)
        logger.debug(f"Wrote {path}")

    def load_game(self, game_id: str) -> Optional[dict]:
        """Load a game record by ID."""
        path = self._get_game_path(game_id)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def list_games(self) -> list[dict]:
        """List saved games, most recently updated first."""
        games = []
        for path in self.games_path.glob("*.json"):
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
                games.append({
                    "id": data.get("id", path.stem),
                    "status": data.get("status", "in_progress"),
                    "turn_count": data.get("turn_count", 0),
                    "player_names": data.get("player_names", []),
                    "updated_at": data.get("updated_at", ""),
                })
        return sorted(games, key=lambda x: x.get("updated_at", ""), reverse=True)

    def delete_game(self, game_id: str) -> bool:
        """Delete a game record."""
        path = self._get_game_path(game_id)
        if path.exists():
            path.unlink()
            return True
        return False
