"""Game engine module for Mountain Goats.

This module contains the core game logic including:
- factory: Initial players, mountains, dice and game state; scoring helpers
- rules: Dice, groupings, goat movement, tokens and the multiple-ones rule
- turn_flow: The rolling -> grouping -> moving turn state machine
- endings: End trigger, last round countdown and final ranking
- game_engine: Stateful session sequencing all of the above

Usage:
    from mountain_goats.engine import GameEngine

    game = GameEngine.from_names(["Ann", "Ben"], random_seed=42)
    game.roll()
    options = game.get_valid_groupings()
    result = game.confirm_groups(options[0].groups)
    game.end_turn()

    if game.is_game_over():
        results = game.get_results()
        print(f"Winner: {results.winner.name}")
"""

from mountain_goats.engine.endings import (
    EndTrigger,
    GameResults,
    PlayerRanking,
    check_end_condition,
    end_game,
    get_end_game_reason,
    get_end_trigger,
    get_game_results,
    get_remaining_turns,
    should_game_end,
    start_last_round,
)
from mountain_goats.engine.errors import (
    GameNotEndedError,
    GameNotFoundError,
    GameRuleError,
    IllegalPhaseTransitionError,
    InvalidGroupingError,
    InvalidModificationError,
    InvalidPlayerCountError,
    PlayerNotFoundError,
)
from mountain_goats.engine.factory import (
    calculate_player_score,
    clone_game_state,
    count_goats_at_summit,
    create_initial_dice,
    create_initial_game_state,
    create_mountains,
    create_player,
    create_token_pile,
    get_highest_summit_mountain,
    has_token_from_each_mountain,
)
from mountain_goats.engine.game_engine import GameEngine, TurnRecord
from mountain_goats.engine.rules import (
    GroupingOption,
    apply_one_modifications,
    calculate_group_sum,
    check_and_award_bonus_token,
    count_ones,
    create_dice_from_roll,
    find_modifiable_ones,
    generate_all_groupings,
    get_valid_groupings,
    get_valid_moves_from_groups,
    is_valid_mountain_sum,
    move_goat,
    roll_dice,
    validate_groups,
    will_collect_token,
    will_knock_off,
)
from mountain_goats.engine.turn_flow import (
    MoveOutcome,
    TurnResult,
    TurnState,
    are_all_dice_grouped,
    assign_die_to_group,
    execute_end_turn,
    execute_groups,
    execute_modify_ones,
    execute_roll,
    get_groups_from_dice,
    get_turn_state,
    have_dice_been_rolled,
)

__all__ = [
    # Session
    "GameEngine",
    "TurnRecord",
    # Errors
    "GameRuleError",
    "InvalidPlayerCountError",
    "PlayerNotFoundError",
    "IllegalPhaseTransitionError",
    "InvalidGroupingError",
    "InvalidModificationError",
    "GameNotEndedError",
    "GameNotFoundError",
    # Factory
    "create_player",
    "create_token_pile",
    "create_mountains",
    "create_initial_dice",
    "create_initial_game_state",
    "clone_game_state",
    "calculate_player_score",
    "has_token_from_each_mountain",
    "count_goats_at_summit",
    "get_highest_summit_mountain",
    # Rules
    "GroupingOption",
    "roll_dice",
    "create_dice_from_roll",
    "is_valid_mountain_sum",
    "validate_groups",
    "calculate_group_sum",
    "get_valid_moves_from_groups",
    "move_goat",
    "check_and_award_bonus_token",
    "count_ones",
    "find_modifiable_ones",
    "apply_one_modifications",
    "generate_all_groupings",
    "get_valid_groupings",
    "will_knock_off",
    "will_collect_token",
    # Turn flow
    "MoveOutcome",
    "TurnResult",
    "TurnState",
    "execute_roll",
    "execute_modify_ones",
    "execute_groups",
    "execute_end_turn",
    "get_turn_state",
    "have_dice_been_rolled",
    "assign_die_to_group",
    "get_groups_from_dice",
    "are_all_dice_grouped",
    # Endings
    "EndTrigger",
    "PlayerRanking",
    "GameResults",
    "check_end_condition",
    "start_last_round",
    "should_game_end",
    "end_game",
    "get_game_results",
    "get_remaining_turns",
    "get_end_trigger",
    "get_end_game_reason",
]
