"""Where saved games live.

Settings come from the environment so the engine, the simulation script and
the tests can point at different stores without code changes:

    MOUNTAIN_GOATS_STORAGE_BACKEND  "file" or "sqlite", case-insensitive
    MOUNTAIN_GOATS_GAMES_PATH       directory of JSON game records
    MOUNTAIN_GOATS_DATABASE_URI     SQLite database file

Unset variables take the defaults below. An unrecognized backend name falls
back to the file store with a warning.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum

from .file_repo import FileGameRecordRepository
from .repository import GameRecordRepository
from .sqlite_repo import SQLiteGameRecordRepository

logger = logging.getLogger(__name__)

BACKEND_ENV = "MOUNTAIN_GOATS_STORAGE_BACKEND"
GAMES_PATH_ENV = "MOUNTAIN_GOATS_GAMES_PATH"
DATABASE_URI_ENV = "MOUNTAIN_GOATS_DATABASE_URI"


class StorageBackend(Enum):
    """Kinds of game record store."""

    FILE = "file"
    SQLITE = "sqlite"


DEFAULT_STORAGE_BACKEND = StorageBackend.FILE
DEFAULT_GAMES_PATH = "games"
DEFAULT_DATABASE_URI = "instance/mountain_goats.db"


@dataclass(frozen=True)
class StorageSettings:
    """Snapshot of the storage environment.

    Attributes:
        backend: Which store to open
        games_path: Directory used by the file store
        database_uri: Database file used by the SQLite store
    """

    backend: StorageBackend = DEFAULT_STORAGE_BACKEND
    games_path: str = DEFAULT_GAMES_PATH
    database_uri: str = DEFAULT_DATABASE_URI

    @classmethod
    def from_env(cls) -> "StorageSettings":
        return cls(
            backend=_parse_backend(os.environ.get(BACKEND_ENV)),
            games_path=os.environ.get(GAMES_PATH_ENV, DEFAULT_GAMES_PATH),
            database_uri=os.environ.get(DATABASE_URI_ENV, DEFAULT_DATABASE_URI),
        )


def _parse_backend(value: str | None) -> StorageBackend:
    if not value:
        return DEFAULT_STORAGE_BACKEND
    try:
        return StorageBackend(value.strip().lower())
    except ValueError:
        logger.warning(
            f"Unknown storage backend {value!r}, using {DEFAULT_STORAGE_BACKEND.value}"
        )
        return DEFAULT_STORAGE_BACKEND


def get_storage_backend() -> StorageBackend:
    """Backend named by the environment."""
    return StorageSettings.from_env().backend


def get_games_path() -> str:
    return StorageSettings.from_env().games_path


def get_database_uri() -> str:
    return StorageSettings.from_env().database_uri


def get_game_repository(
    backend: StorageBackend | None = None,
    settings: StorageSettings | None = None,
) -> GameRecordRepository:
    """Open the configured game record store.

    Args:
        backend: Overrides the backend from the settings
        settings: Storage settings; read from the environment when omitted

    Returns:
        A repository ready for saving and loading games
    """
    if settings is None:
        settings = StorageSettings.from_env()
    if backend is None:
        backend = settings.backend

    if backend == StorageBackend.SQLITE:
        return SQLiteGameRecordRepository(settings.database_uri)
    return FileGameRecordRepository(settings.games_path)
