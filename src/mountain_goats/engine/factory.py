"""Entity construction and scoring helpers.

Builds the initial values for players, mountains, dice and the aggregate game
state, and provides the per-player queries used by the rules and the final
scoring.
"""

from __future__ import annotations

from typing import Sequence

from mountain_goats.engine.errors import InvalidPlayerCountError
from mountain_goats.models.state import (
    BASE_TOKEN_COUNTS,
    BONUS_TOKENS,
    DICE_COUNT,
    MAX_PLAYERS,
    MIN_PLAYERS,
    MOUNTAIN_IDS,
    MOUNTAIN_PATH_LENGTHS,
    TOKEN_DEDUCTIONS,
    Die,
    GamePhase,
    GameState,
    Mountain,
    Player,
    PlayerColor,
)


def create_player(player_id: str, name: str, color: PlayerColor | str) -> Player:
    """Create a player with every goat at base and nothing collected."""
    return Player(id=player_id, name=name, color=PlayerColor(color))


def create_token_pile(mountain_id: int, player_count: int) -> list[int]:
    """Create the token pile for a mountain.

    Every token is worth the mountain id. Four players get the full pile,
    three players one token fewer, two players two tokens fewer.

    Args:
        mountain_id: Mountain id (5-10)
        player_count: Number of players (2-4)

    Returns:
        List of token values; the end of the list is the top of the pile

    Raises:
        InvalidPlayerCountError: If player_count is outside 2-4
    """
    if player_count not in TOKEN_DEDUCTIONS:
        raise InvalidPlayerCountError(player_count)
    count = max(0, BASE_TOKEN_COUNTS[mountain_id] - TOKEN_DEDUCTIONS[player_count])
    return [mountain_id] * count


def create_mountains(player_count: int) -> dict[int, Mountain]:
    """Create all six mountains with fresh token piles."""
    return {
        mountain_id: Mountain(
            id=mountain_id,
            path_length=MOUNTAIN_PATH_LENGTHS[mountain_id],
            token_pile=create_token_pile(mountain_id, player_count),
        )
        for mountain_id in MOUNTAIN_IDS
    }


def create_initial_dice() -> list[Die]:
    """Create four unrolled dice."""
    return [Die(id=slot) for slot in range(DICE_COUNT)]


def create_initial_game_state(players: Sequence[Player]) -> GameState:
    """Create the state for a new game.

    The first player starts, in the rolling phase, with all four bonus
    tokens available.

    Raises:
        InvalidPlayerCountError: If there are fewer than 2 or more than 4 players
    """
    if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
        raise InvalidPlayerCountError(len(players))

    return GameState(
        players=[player.model_copy(deep=True) for player in players],
        current_player_index=0,
        mountains=create_mountains(len(players)),
        bonus_token_pile=list(BONUS_TOKENS),
        current_dice=create_initial_dice(),
        phase=GamePhase.ROLLING,
        turn_count=0,
        last_round_started=False,
        starting_player_index=0,
    )


def clone_game_state(state: GameState) -> GameState:
    """Return a fully independent copy of a snapshot."""
    return state.model_copy(deep=True)


def calculate_player_score(player: Player) -> int:
    """Total of all collected mountain tokens plus bonus tokens."""
    mountain_points = sum(sum(tokens) for tokens in player.collected_tokens.values())
    return mountain_points + sum(player.bonus_tokens)


def has_token_from_each_mountain(player: Player) -> bool:
    """True if the player holds at least one token from every mountain."""
    return all(player.collected_tokens[mountain_id] for mountain_id in MOUNTAIN_IDS)


def count_goats_at_summit(player: Player, mountains: dict[int, Mountain]) -> int:
    """Number of mountains on which the player's goat stands at the summit."""
    return sum(
        1
        for mountain_id in MOUNTAIN_IDS
        if player.goat_positions[mountain_id] == mountains[mountain_id].path_length
    )


def get_highest_summit_mountain(player: Player, mountains: dict[int, Mountain]) -> int | None:
    """Highest mountain id with the player's goat at its summit, or None."""
    for mountain_id in reversed(MOUNTAIN_IDS):
        if player.goat_positions[mountain_id] == mountains[mountain_id].path_length:
            return mountain_id
    return None
