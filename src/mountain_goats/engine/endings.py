"""End-of-game conditions and final ranking for Mountain Goats.

End Trigger (checked after every confirmed grouping):
1. The bonus token pile is empty, OR
2. At least 3 of the 6 mountains have empty token piles

Once triggered, the last round runs until play returns to the starting
player, so every player gets the same number of turns. The game then ends and
players are ranked by score.

Scoring:
    Score = sum of collected mountain tokens + sum of bonus tokens

Tiebreakers (applied to adjacent equal scores, one pass down the ranking):
1. More goats currently on a summit
2. Goat on the summit of the highest-numbered mountain (none counts as 0)
Players still equal after both remain tied in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mountain_goats.engine.errors import GameNotEndedError
from mountain_goats.engine.factory import (
    calculate_player_score,
    clone_game_state,
    count_goats_at_summit,
    get_highest_summit_mountain,
)
from mountain_goats.models.state import GamePhase, GameState, Player

EMPTY_MOUNTAINS_TO_END = 3


class EndTrigger(Enum):
    """Why the last round started."""

    BONUS_TOKENS_EXHAUSTED = "bonus_tokens_exhausted"
    MOUNTAINS_EXHAUSTED = "mountains_exhausted"


@dataclass(frozen=True)
class PlayerRanking:
    """One player's final standing with score breakdown.

    Attributes:
        player: Copy of the player at game end
        rank: Rank, 1 = best; equal scores share a rank
        score: Total score
        mountain_tokens: Collected tokens per mountain
        bonus_tokens: Collected bonus tokens
        goats_at_summit: Goats standing on a summit at game end
        highest_summit: Highest mountain with this player on its summit, or None
        tiebreaker_reason: Tiebreaker explanation, set on the top entry only
    """

    player: Player
    rank: int
    score: int
    mountain_tokens: dict[int, list[int]]
    bonus_tokens: list[int]
    goats_at_summit: int
    highest_summit: int | None
    tiebreaker_reason: str | None = None


@dataclass(frozen=True)
class GameResults:
    """Final results of a finished game.

    Attributes:
        rankings: All players, best first
        winner: Player ranked first
        is_tie: Top score shared and no tiebreaker separated anyone
        tiebreaker_applied: A tiebreaker decided the order of some pair
        tiebreaker_explanation: Human-readable note on the last tiebreaker used
    """

    rankings: list[PlayerRanking]
    winner: Player
    is_tie: bool
    tiebreaker_applied: bool
    tiebreaker_explanation: str | None = None


def check_end_condition(state: GameState) -> bool:
    """True if the bonus pile is empty or 3+ mountains have no tokens left."""
    if not state.bonus_token_pile:
        return True
    return len(state.empty_mountains()) >= EMPTY_MOUNTAINS_TO_END


def start_last_round(state: GameState) -> GameState:
    """Mark the last round as started. Calling it again changes nothing."""
    new_state = clone_game_state(state)
    new_state.last_round_started = True
    return new_state


def should_game_end(state: GameState) -> bool:
    """True once the last round has started and play is back at the starting player."""
    if not state.last_round_started:
        return False
    return state.current_player_index == state.starting_player_index


def end_game(state: GameState) -> GameState:
    """Move the game to the terminal ended phase."""
    new_state = clone_game_state(state)
    new_state.phase = GamePhase.ENDED
    return new_state


@dataclass
class _Standing:
    player: Player
    score: int
    goats_at_summit: int
    highest_summit: int | None


def get_game_results(state: GameState) -> GameResults:
    """Rank the players of a finished game.

    Players are sorted by score, highest first (stable for equal scores).
    A single pass then compares each adjacent pair with equal scores and
    swaps them when the lower one wins a tiebreaker. Ranks are shared by
    equal scores; after a shared rank the next rank skips the shared places.

    Args:
        state: Game state in the ended phase

    Returns:
        GameResults with rankings, winner and tie information

    Raises:
        GameNotEndedError: If the phase is not ended
    """
    if state.phase != GamePhase.ENDED:
        raise GameNotEndedError()

    standings = [
        _Standing(
            player=player,
            score=calculate_player_score(player),
            goats_at_summit=count_goats_at_summit(player, state.mountains),
            highest_summit=get_highest_summit_mountain(player, state.mountains),
        )
        for player in state.players
    ]
    standings.sort(key=lambda s: s.score, reverse=True)

    tiebreaker_applied = False
    tiebreaker_explanation: str | None = None

    for i in range(len(standings) - 1):
        current, following = standings[i], standings[i + 1]
        if current.score != following.score:
            continue

        if current.goats_at_summit != following.goats_at_summit:
            tiebreaker_applied = True
            if current.goats_at_summit < following.goats_at_summit:
                standings[i], standings[i + 1] = following, current
                current, following = following, current
            tiebreaker_explanation = (
                f"{current.player.name} wins tiebreaker with {current.goats_at_summit} "
                f"goats at summit vs {following.goats_at_summit}"
            )
            continue

        current_high = current.highest_summit or 0
        following_high = following.highest_summit or 0
        if current_high != following_high:
            tiebreaker_applied = True
            if current_high < following_high:
                standings[i], standings[i + 1] = following, current
                current, following = following, current
                current_high, following_high = following_high, current_high
            tiebreaker_explanation = (
                f"{current.player.name} wins tiebreaker with goat on mountain "
                f"{current_high} vs mountain {following_high}"
            )

    rankings: list[PlayerRanking] = []
    rank = 1
    previous_score: int | None = None
    for i, standing in enumerate(standings):
        if standing.score != previous_score:
            rank = i + 1
        player = standing.player.model_copy(deep=True)
        rankings.append(
            PlayerRanking(
                player=player,
                rank=rank,
                score=standing.score,
                mountain_tokens={
                    mountain_id: list(tokens)
                    for mountain_id, tokens in player.collected_tokens.items()
                },
                bonus_tokens=list(player.bonus_tokens),
                goats_at_summit=standing.goats_at_summit,
                highest_summit=standing.highest_summit,
                tiebreaker_reason=tiebreaker_explanation if i == 0 and tiebreaker_applied else None,
            )
        )
        previous_score = standing.score

    is_tie = (
        len(rankings) > 1
        and rankings[0].score == rankings[1].score
        and not tiebreaker_applied
    )

    return GameResults(
        rankings=rankings,
        winner=rankings[0].player,
        is_tie=is_tie,
        tiebreaker_applied=tiebreaker_applied,
        tiebreaker_explanation=tiebreaker_explanation,
    )


def get_remaining_turns(state: GameState) -> int | None:
    """Turns left before the game ends, counting the current one.

    None while the last round has not started. Display only.
    """
    if not state.last_round_started:
        return None

    player_count = len(state.players)
    if state.current_player_index >= state.starting_player_index:
        return player_count - state.current_player_index + state.starting_player_index
    return state.starting_player_index - state.current_player_index


def get_end_trigger(state: GameState) -> EndTrigger | None:
    """Which end condition holds once the last round has started."""
    if not state.last_round_started:
        return None
    if not state.bonus_token_pile:
        return EndTrigger.BONUS_TOKENS_EXHAUSTED
    if len(state.empty_mountains()) >= EMPTY_MOUNTAINS_TO_END:
        return EndTrigger.MOUNTAINS_EXHAUSTED
    return None


def get_end_game_reason(state: GameState) -> str | None:
    """Diagnostic note on why the game is ending. Not meant for display."""
    trigger = get_end_trigger(state)
    if trigger == EndTrigger.BONUS_TOKENS_EXHAUSTED:
        return "All bonus tokens have been claimed"
    if trigger == EndTrigger.MOUNTAINS_EXHAUSTED:
        empty = state.empty_mountains()
        listed = ", ".join(str(mountain_id) for mountain_id in empty)
        return f"{len(empty)} mountains have run out of tokens: {listed}"
    return None
