"""Mountain Goats game models.

This module exports the core data structures for the game.
"""

from .state import (
    BASE_TOKEN_COUNTS,
    BONUS_TOKENS,
    DICE_COUNT,
    MAX_PLAYERS,
    MIN_PLAYERS,
    MOUNTAIN_IDS,
    MOUNTAIN_PATH_LENGTHS,
    PLAYER_COLORS,
    TOKEN_DEDUCTIONS,
    Die,
    GamePhase,
    GameState,
    Mountain,
    Player,
    PlayerColor,
)

__all__ = [
    # Enums
    "GamePhase",
    "PlayerColor",
    # State Models
    "Die",
    "Mountain",
    "Player",
    "GameState",
    # Board constants
    "MOUNTAIN_IDS",
    "MOUNTAIN_PATH_LENGTHS",
    "BASE_TOKEN_COUNTS",
    "TOKEN_DEDUCTIONS",
    "BONUS_TOKENS",
    "PLAYER_COLORS",
    "DICE_COUNT",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
]
