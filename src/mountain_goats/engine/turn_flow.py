"""Turn flow for Mountain Goats.

Sequences the rules primitives into the per-turn state machine:

    rolling -> grouping -> moving -> rolling (next player) ... -> ended

1. ROLLING  - execute_roll rolls four dice and moves to grouping
2. GROUPING - execute_modify_ones optionally changes extra 1s;
              execute_groups applies the player's grouping and moves to moving
3. MOVING   - execute_end_turn passes play to the next player

"setup" is only the placeholder shown before a game exists; "ended" is
terminal and entered through the end-game evaluator.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from mountain_goats.engine.errors import IllegalPhaseTransitionError, InvalidGroupingError
from mountain_goats.engine.factory import clone_game_state, create_initial_dice
from mountain_goats.engine.rules import (
    apply_one_modifications,
    check_and_award_bonus_token,
    create_dice_from_roll,
    find_modifiable_ones,
    get_valid_moves_from_groups,
    move_goat,
    roll_dice,
    validate_groups,
    will_knock_off,
)
from mountain_goats.models.state import Die, GamePhase, GameState


@dataclass(frozen=True)
class MoveOutcome:
    """What happened on one mountain move.

    Attributes:
        mountain_id: Mountain the goat climbed
        token_collected: Value of the token taken, or None
        knocked_off: Name of the player knocked off the summit, or None
    """

    mountain_id: int
    token_collected: int | None = None
    knocked_off: str | None = None


@dataclass(frozen=True)
class TurnResult:
    """Result of confirming a grouping.

    Attributes:
        state: New game state, in the moving phase
        moves: One outcome per valid group, in the order the groups were given
        bonus_awarded: Bonus token value taken this turn, or None
    """

    state: GameState
    moves: list[MoveOutcome] = field(default_factory=list)
    bonus_awarded: int | None = None


@dataclass(frozen=True)
class TurnState:
    """Read-only view of which actions are currently available."""

    phase: GamePhase
    current_player_name: str
    can_roll: bool
    can_group: bool
    can_end_turn: bool
    has_modifiable_ones: bool
    modifiable_ones_indices: list[int]


def execute_roll(state: GameState, rng: random.Random | None = None) -> GameState:
    """Roll four fresh dice and move to the grouping phase.

    Any extra 1s are offered to the player through find_modifiable_ones and
    execute_modify_ones while the state is in the grouping phase.

    Raises:
        IllegalPhaseTransitionError: If the phase is not rolling
    """
    if state.phase != GamePhase.ROLLING:
        raise IllegalPhaseTransitionError("roll", state.phase)

    new_state = clone_game_state(state)
    new_state.current_dice = create_dice_from_roll(roll_dice(rng))
    new_state.phase = GamePhase.GROUPING
    return new_state


def execute_modify_ones(state: GameState, modifications: Mapping[int, int]) -> GameState:
    """Change extra 1s on the current dice. The phase is unchanged.

    The engine does not track whether modification already happened this
    roll; applying the same map again gives the same dice.

    Raises:
        IllegalPhaseTransitionError: If the phase is not grouping
        InvalidModificationError: If the map targets a die that may not change
    """
    if state.phase != GamePhase.GROUPING:
        raise IllegalPhaseTransitionError("modify ones", state.phase)

    new_state = clone_game_state(state)
    new_state.current_dice = apply_one_modifications(state.current_dice, modifications)
    return new_state


def execute_groups(state: GameState, groups: Sequence[Sequence[int]]) -> TurnResult:
    """Apply a grouping for the current player.

    Every group summing to 5-10 moves the current player's goat on that
    mountain, in the order the groups were given. Two groups naming the same
    mountain are applied one after the other, the second seeing the result of
    the first. Dice are then tagged with their group index, the bonus token is
    checked once, and the phase becomes moving.

    Args:
        state: Current game state, in the grouping phase
        groups: Die slot indices per group; must cover each die exactly once

    Returns:
        TurnResult with the new state, per-move outcomes and any bonus awarded

    Raises:
        IllegalPhaseTransitionError: If the phase is not grouping
        InvalidGroupingError: If the groups are not a partition of the dice
    """
    if state.phase != GamePhase.GROUPING:
        raise IllegalPhaseTransitionError("confirm groups", state.phase)
    if not validate_groups(state.current_dice, groups):
        raise InvalidGroupingError([list(group) for group in groups])

    new_state = clone_game_state(state)
    player_id = new_state.current_player.id
    moves: list[MoveOutcome] = []

    for mountain_id in get_valid_moves_from_groups(new_state.current_dice, groups):
        victim = will_knock_off(new_state, player_id, mountain_id)
        pile_before = len(new_state.mountains[mountain_id].token_pile)

        new_state = move_goat(new_state, player_id, mountain_id)

        pile_after = len(new_state.mountains[mountain_id].token_pile)
        moves.append(
            MoveOutcome(
                mountain_id=mountain_id,
                token_collected=mountain_id if pile_after < pile_before else None,
                knocked_off=victim.name if victim is not None else None,
            )
        )

    for group_index, group in enumerate(groups):
        for die_index in group:
            new_state.current_dice[die_index].group_index = group_index

    bonus_before = len(new_state.current_player.bonus_tokens)
    new_state = check_and_award_bonus_token(new_state, player_id)
    bonus_tokens = new_state.current_player.bonus_tokens
    bonus_awarded = bonus_tokens[-1] if len(bonus_tokens) > bonus_before else None

    new_state.phase = GamePhase.MOVING
    return TurnResult(state=new_state, moves=moves, bonus_awarded=bonus_awarded)


def execute_end_turn(state: GameState) -> GameState:
    """Pass play to the next player.

    Advances the current player, counts the turn, clears the dice and returns
    to the rolling phase. Allowed from any phase except ended.

    Raises:
        IllegalPhaseTransitionError: If the game has ended
    """
    if state.phase == GamePhase.ENDED:
        raise IllegalPhaseTransitionError("end turn", state.phase)

    new_state = clone_game_state(state)
    new_state.current_player_index = (new_state.current_player_index + 1) % len(new_state.players)
    new_state.turn_count += 1
    new_state.current_dice = create_initial_dice()
    new_state.phase = GamePhase.ROLLING
    return new_state


def get_turn_state(state: GameState) -> TurnState:
    """Which actions are legal now, and whether extra 1s await a decision.

    Modification is pending only in the grouping phase, while at least one
    extra 1 exists and no die has been modified yet. Grouping waits until
    that decision is made.
    """
    modifiable = find_modifiable_ones(state.current_dice)
    has_modifiable_ones = (
        state.phase == GamePhase.GROUPING
        and len(modifiable) > 0
        and not any(die.is_modified for die in state.current_dice)
    )

    return TurnState(
        phase=state.phase,
        current_player_name=state.current_player.name,
        can_roll=state.phase == GamePhase.ROLLING,
        can_group=state.phase == GamePhase.GROUPING and not has_modifiable_ones,
        can_end_turn=state.phase == GamePhase.MOVING,
        has_modifiable_ones=has_modifiable_ones,
        modifiable_ones_indices=modifiable,
    )


# =============================================================================
# Dice assignment helpers
# =============================================================================


def have_dice_been_rolled(dice: Sequence[Die]) -> bool:
    """True once every die shows a value."""
    return all(die.value > 0 for die in dice)


def assign_die_to_group(dice: Sequence[Die], die_index: int, group_index: int | None) -> list[Die]:
    """Return new dice with one die moved to a group (None clears it)."""
    return [
        die.model_copy(update={"group_index": group_index}) if index == die_index else die.model_copy()
        for index, die in enumerate(dice)
    ]


def get_groups_from_dice(dice: Sequence[Die]) -> list[list[int]]:
    """Rebuild a grouping from die assignments.

    Groups are ordered by the first die assigned to them; unassigned dice
    are left out.
    """
    groups: dict[int, list[int]] = {}
    for index, die in enumerate(dice):
        if die.group_index is not None:
            groups.setdefault(die.group_index, []).append(index)
    return list(groups.values())


def are_all_dice_grouped(dice: Sequence[Die]) -> bool:
    """True if every die has a group."""
    return all(die.group_index is not None for die in dice)
