"""Exceptions raised by the Mountain Goats engine.

All rule violations derive from GameRuleError so callers can catch the whole
family, while each kind stays distinguishable:

- InvalidPlayerCountError: game created with fewer than 2 or more than 4 players
- PlayerNotFoundError: player id not present in the game
- IllegalPhaseTransitionError: action requested in the wrong phase
- InvalidGroupingError: dice grouping is not a partition of the four dice
- InvalidModificationError: extra-ones modification targets a die it may not
- GameNotEndedError: results requested before the game has ended
- GameNotFoundError: no saved game under the requested id

Benign no-ops (no bonus to award, nobody to knock off, empty token pile) are
normal game conditions and never raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mountain_goats.models.state import GamePhase


class GameRuleError(Exception):
    """Base class for all engine rule violations."""


class InvalidPlayerCountError(GameRuleError, ValueError):
    """Raised when a game is created with an unsupported number of players."""

    def __init__(self, player_count: int) -> None:
        self.player_count = player_count
        super().__init__(f"Game requires 2-4 players, got {player_count}")


class PlayerNotFoundError(GameRuleError, LookupError):
    """Raised when a player id does not match any player in the game."""

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"Player {player_id} not found")


class IllegalPhaseTransitionError(GameRuleError):
    """Raised when an action is not allowed in the current phase."""

    def __init__(self, action: str, phase: GamePhase) -> None:
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} during {phase.value} phase")


class InvalidGroupingError(GameRuleError, ValueError):
    """Raised when a grouping does not cover every die exactly once."""

    def __init__(self, groups: object) -> None:
        self.groups = groups
        super().__init__(f"Grouping must assign every die to exactly one group, got {groups}")


class InvalidModificationError(GameRuleError, ValueError):
    """Raised when an extra-ones modification is not allowed."""


class GameNotEndedError(GameRuleError):
    """Raised when results are requested for a game still in progress."""

    def __init__(self) -> None:
        super().__init__("Cannot get results for a game that has not ended")


class GameNotFoundError(GameRuleError, LookupError):
    """Raised when no saved game exists under the requested id."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"Game not found: {game_id}")
