"""Storage module for Mountain Goats.

This module provides the repository interface and implementations for
saving and resuming games.

Usage:
    from mountain_goats.engine import GameEngine
    from mountain_goats.storage import get_game_repository

    repo = get_game_repository()
    game_id = engine.save(repo)
    resumed = GameEngine.load(repo, game_id)

Configuration via environment variables:
    MOUNTAIN_GOATS_STORAGE_BACKEND: "file" or "sqlite" (default: "file")
    MOUNTAIN_GOATS_GAMES_PATH: Path to games directory (default: "games")
    MOUNTAIN_GOATS_DATABASE_URI: SQLite database path (default: "instance/mountain_goats.db")
"""

from .config import (
    StorageBackend,
    StorageSettings,
    get_database_uri,
    get_game_repository,
    get_games_path,
    get_storage_backend,
)
from .file_repo import FileGameRecordRepository
from .repository import GameRecordRepository
from .sqlite_repo import SQLiteGameRecordRepository

__all__ = [
    # Abstract interface
    "GameRecordRepository",
    # Implementations
    "FileGameRecordRepository",
    "SQLiteGameRecordRepository",
    # Configuration
    "StorageBackend",
    "StorageSettings",
    "get_storage_backend",
    "get_games_path",
    "get_database_uri",
    # Factory function
    "get_game_repository",
]
