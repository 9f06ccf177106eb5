"""SQLite-based repository implementation.

Stores game records in a SQLite database using the standard library sqlite3
module, with the full record serialized as JSON.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .repository import GameRecordRepository

logger = logging.getLogger(__name__)


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    """Convert sqlite3 row to dict."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class SQLiteGameRecordRepository(GameRecordRepository):
    """SQLite-based game record repository."""

    def __init__(self, database_uri: str = "instance/mountain_goats.db"):
        """Initialize repository.

        Args:
            database_uri: Path to SQLite database file
        """
        self.database_path = Path(database_uri)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = dict_factory
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS games (
                id TEXT PRIMARY KEY,
                status TEXT DEFAULT 'in_progress',
                turn_count INTEGER DEFAULT 0,
                player_names TEXT,
                data TEXT NOT NULL,
                created_at TEXT,
                updated_at TEXT
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_games_updated_at ON games(updated_at)")
        conn.commit()
        conn.close()

    def save_game(self, game_id: str, record: dict) -> None:
        """Persist a game record."""
        now = datetime.now(timezone.utc).isoformat()

        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO games (id, status, turn_count, player_names, data, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                status = excluded.status,
                turn_count = excluded.turn_count,
                player_names = excluded.player_names,
                data = excluded.data,
                updated_at = excluded.updated_at
        """, (
            game_id,
            record.get("status", "in_progress"),
            record.get("turn_count", 0),
            json.dumps(record.get("player_names", [])),
            json.dumps({**record, "id": game_id}),
            now,
            now,
        ))

        conn.commit()
        conn.close()
        logger.debug(f"Stored game {game_id} in {self.database_path}")

    def load_game(self, game_id: str) -> Optional[dict]:
        """Load a game record by ID."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT data, created_at, updated_at FROM games WHERE id = ?", (game_id,))
        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None

        data = json.loads(row["data"])
        data["created_at"] = row["created_at"]
        data["updated_at"] = row["updated_at"]
        return data

    def list_games(self) -> list[dict]:
        """List saved games, most recently updated first."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            SELECT id, status, turn_count, player_names, updated_at
            FROM games
            ORDER BY updated_at DESC
        """)
        rows = cursor.fetchall()
        conn.close()

        for row in rows:
            row["player_names"] = json.loads(row["player_names"] or "[]")
        return rows

    def delete_game(self, game_id: str) -> bool:
        """Delete a game record."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("DELETE FROM games WHERE id = ?", (game_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return deleted
