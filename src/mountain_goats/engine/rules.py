"""Core rules primitives for Mountain Goats.

Stateless functions covering dice, groupings, goat movement, token and bonus
collection, and the multiple-ones rule. Apart from roll_dice, every function
is a pure function of its inputs; functions taking a GameState return a new
snapshot and never mutate the one they were given.

Rules summary:
- Roll 4 dice. If several 1s are rolled, the first stays a 1 and every extra
  1 may be changed to any value 1-6.
- Split the dice into 1-4 groups. Each group summing to 5-10 moves the
  player's goat one step up that mountain; other groups are wasted.
- Reaching a summit knocks any other goat there back to base and takes the
  top token of that mountain's pile. A goat already on the summit takes
  another token instead of moving.
- The first time a player holds a token from all six mountains they take the
  highest remaining bonus token.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from mountain_goats.engine.errors import InvalidModificationError, PlayerNotFoundError
from mountain_goats.engine.factory import clone_game_state, has_token_from_each_mountain
from mountain_goats.models.state import DICE_COUNT, MOUNTAIN_IDS, Die, GameState, Player

MIN_MOUNTAIN_SUM = 5
MAX_MOUNTAIN_SUM = 10


@dataclass(frozen=True)
class GroupingOption:
    """A grouping of the dice together with the moves it produces."""

    groups: list[list[int]]
    moves: list[int]


# =============================================================================
# Dice
# =============================================================================


def roll_dice(rng: random.Random | None = None) -> list[int]:
    """Roll four dice.

    Args:
        rng: Random source; pass a seeded random.Random for reproducible rolls

    Returns:
        Four values, each uniform in 1-6
    """
    source = rng if rng is not None else random
    return [source.randint(1, 6) for _ in range(DICE_COUNT)]


def create_dice_from_roll(values: Sequence[int]) -> list[Die]:
    """Wrap rolled values into fresh dice (no group, not modified)."""
    return [Die(id=slot, value=value) for slot, value in enumerate(values)]


def is_valid_mountain_sum(total: int) -> bool:
    """True if a group total names a mountain (5-10)."""
    return MIN_MOUNTAIN_SUM <= total <= MAX_MOUNTAIN_SUM


# =============================================================================
# Groupings
# =============================================================================


def validate_groups(dice: Sequence[Die], groups: Sequence[Sequence[int]]) -> bool:
    """Check that every die is assigned to exactly one group.

    No group may be empty, and no die may be left out, listed twice, or
    referenced by an index outside the dice list.
    """
    if any(len(group) == 0 for group in groups):
        return False
    assigned = [die_index for group in groups for die_index in group]

    if len(assigned) != len(dice):
        return False
    if len(set(assigned)) != len(assigned):
        return False
    return all(0 <= die_index < len(dice) for die_index in assigned)


def calculate_group_sum(dice: Sequence[Die], group: Sequence[int]) -> int:
    """Sum of the referenced dice. Indices with no die count as 0."""
    return sum(dice[die_index].value for die_index in group if 0 <= die_index < len(dice))


def get_valid_moves_from_groups(dice: Sequence[Die], groups: Sequence[Sequence[int]]) -> list[int]:
    """Mountain ids moved by a grouping, one entry per group summing to 5-10.

    The same mountain may appear more than once; each entry is a separate move.
    """
    moves = []
    for group in groups:
        total = calculate_group_sum(dice, group)
        if is_valid_mountain_sum(total):
            moves.append(total)
    return moves


def _partitions(items: list[int]) -> Iterator[list[list[int]]]:
    """Yield every set partition of items.

    The first item either forms its own group or joins one of the groups of
    each partition of the remaining items.
    """
    if not items:
        yield []
        return

    first, rest = items[0], items[1:]
    for partition in _partitions(rest):
        yield [[first], *partition]
        for i in range(len(partition)):
            yield [[first, *group] if j == i else group for j, group in enumerate(partition)]


def generate_all_groupings() -> list[list[list[int]]]:
    """All 15 ways to split the four dice into 1-4 non-empty groups.

    Every grouping gets its own group lists.
    """
    return [
        [list(group) for group in groups]
        for groups in _partitions(list(range(DICE_COUNT)))
    ]


def get_valid_groupings(dice: Sequence[Die]) -> list[GroupingOption]:
    """Groupings of the current dice that move at least one goat."""
    options = []
    for groups in generate_all_groupings():
        moves = get_valid_moves_from_groups(dice, groups)
        if moves:
            options.append(GroupingOption(groups=groups, moves=moves))
    return options


# =============================================================================
# Movement and collection
# =============================================================================


def _find_player_index(state: GameState, player_id: str) -> int:
    for index, player in enumerate(state.players):
        if player.id == player_id:
            return index
    raise PlayerNotFoundError(player_id)


def _check_mountain_id(mountain_id: int) -> None:
    if mountain_id not in MOUNTAIN_IDS:
        raise ValueError(f"Unknown mountain id {mountain_id}, expected one of {MOUNTAIN_IDS}")


def move_goat(state: GameState, player_id: str, mountain_id: int) -> GameState:
    """Move a player's goat one step up a mountain.

    A goat already on the summit stays there and takes a token if any are
    left. Otherwise the goat advances one step; on reaching the summit every
    other goat on that summit is knocked back to base, then the mover takes
    a token if any are left.

    Args:
        state: Current game state
        player_id: Id of the moving player
        mountain_id: Mountain to climb (5-10)

    Returns:
        New game state with the move applied

    Raises:
        PlayerNotFoundError: If no player has this id
    """
    _check_mountain_id(mountain_id)
    new_state = clone_game_state(state)
    player_index = _find_player_index(new_state, player_id)
    player = new_state.players[player_index]
    mountain = new_state.mountains[mountain_id]
    summit = mountain.path_length

    if player.goat_positions[mountain_id] == summit:
        if mountain.token_pile:
            player.collected_tokens[mountain_id].append(mountain.token_pile.pop())
        return new_state

    new_position = player.goat_positions[mountain_id] + 1
    player.goat_positions[mountain_id] = new_position

    if new_position == summit:
        # Knock off everyone else on the summit, not just the first occupant
        for index, other in enumerate(new_state.players):
            if index != player_index and other.goat_positions[mountain_id] == summit:
                other.goat_positions[mountain_id] = 0

        if mountain.token_pile:
            player.collected_tokens[mountain_id].append(mountain.token_pile.pop())

    return new_state


def check_and_award_bonus_token(state: GameState, player_id: str) -> GameState:
    """Award the highest remaining bonus token if the player qualifies.

    A player qualifies by holding at least one token from every mountain.
    Unknown players, unqualified players and an empty bonus pile are no-ops.
    """
    new_state = clone_game_state(state)
    player = new_state.get_player(player_id)

    if player is None or not has_token_from_each_mountain(player):
        return new_state
    if not new_state.bonus_token_pile:
        return new_state

    player.bonus_tokens.append(new_state.bonus_token_pile.pop(0))
    return new_state


# =============================================================================
# Multiple ones
# =============================================================================


def count_ones(dice: Sequence[Die]) -> int:
    """Number of dice showing 1."""
    return sum(1 for die in dice if die.value == 1)


def find_modifiable_ones(dice: Sequence[Die]) -> list[int]:
    """Slot indices of the extra 1s: every die showing 1 except the first."""
    one_indices = [index for index, die in enumerate(dice) if die.value == 1]
    return one_indices[1:]


def _locked_one_index(dice: Sequence[Die]) -> int | None:
    for index, die in enumerate(dice):
        if die.value == 1 and not die.is_modified:
            return index
    return None


def apply_one_modifications(dice: Sequence[Die], modifications: Mapping[int, int]) -> list[Die]:
    """Change extra 1s to new values.

    Dice whose slot is a key of `modifications` take the mapped value and are
    marked modified; all other dice are returned unchanged. Applying the same
    map twice gives the same dice.

    Args:
        dice: Current dice
        modifications: Slot index -> new value (1-6)

    Returns:
        New list of dice

    Raises:
        InvalidModificationError: If a key is out of range, targets the locked
            first 1 or a die that is not an extra 1, or a value is outside 1-6
    """
    locked = _locked_one_index(dice)
    for index, value in modifications.items():
        if not 0 <= index < len(dice):
            raise InvalidModificationError(f"No die in slot {index}")
        if index == locked:
            raise InvalidModificationError(f"Die {index} is the first 1 and must stay a 1")
        die = dice[index]
        if die.value != 1 and not die.is_modified:
            raise InvalidModificationError(f"Die {index} shows {die.value}, only extra 1s may change")
        if not 1 <= value <= 6:
            raise InvalidModificationError(f"Die {index} cannot be set to {value}")

    return [
        die.model_copy(update={"value": modifications[die.id], "is_modified": True})
        if die.id in modifications
        else die.model_copy()
        for die in dice
    ]


# =============================================================================
# Move previews
# =============================================================================


def will_knock_off(state: GameState, player_id: str, mountain_id: int) -> Player | None:
    """Player who would be knocked off if this player climbed this mountain.

    Only a goat one step below the summit can knock anyone off. Returns None
    if nobody would be knocked off or the player is unknown.
    """
    _check_mountain_id(mountain_id)
    player = state.get_player(player_id)
    if player is None:
        return None

    summit = state.mountains[mountain_id].path_length
    if player.goat_positions[mountain_id] != summit - 1:
        return None

    for other in state.players:
        if other.id != player_id and other.goat_positions[mountain_id] == summit:
            return other
    return None


def will_collect_token(state: GameState, player_id: str, mountain_id: int) -> bool:
    """True if climbing this mountain now would take a token."""
    _check_mountain_id(mountain_id)
    mountain = state.mountains[mountain_id]
    player = state.get_player(player_id)

    if player is None or not mountain.token_pile:
        return False
    return player.goat_positions[mountain_id] >= mountain.path_length - 1
