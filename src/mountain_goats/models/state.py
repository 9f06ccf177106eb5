"""Game state models for Mountain Goats.

This module defines the pydantic models that make up a game snapshot and the
fixed constants of the board.

Board constants:
- Mountains are numbered 5-10; a dice group summing to N moves a goat on N.
- Path lengths (steps from base to summit): 5:4, 6:5, 7:6, 8:5, 9:4, 10:3
- Token piles hold N tokens worth N points each (4 players), minus 1 token per
  pile for 3 players and 2 tokens per pile for 2 players.
- Bonus tokens: 15, 12, 9, 6, claimed highest first.

Snapshots are plain mutable models. Engine functions never mutate their input;
they work on a deep copy (`model_copy(deep=True)`) and return it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

MOUNTAIN_IDS: tuple[int, ...] = (5, 6, 7, 8, 9, 10)

MOUNTAIN_PATH_LENGTHS: dict[int, int] = {
    5: 4,
    6: 5,
    7: 6,
    8: 5,
    9: 4,
    10: 3,
}

# Pile sizes for a four-player game
BASE_TOKEN_COUNTS: dict[int, int] = {
    5: 5,
    6: 6,
    7: 7,
    8: 8,
    9: 9,
    10: 10,
}

# Tokens removed from every pile, by player count
TOKEN_DEDUCTIONS: dict[int, int] = {
    2: 2,
    3: 1,
    4: 0,
}

BONUS_TOKENS: tuple[int, ...] = (15, 12, 9, 6)

DICE_COUNT = 4
MIN_PLAYERS = 2
MAX_PLAYERS = 4


class GamePhase(Enum):
    """Phase of the turn state machine."""

    SETUP = "setup"
    ROLLING = "rolling"
    GROUPING = "grouping"
    MOVING = "moving"
    ENDED = "ended"


class PlayerColor(Enum):
    """Goat colors. Uniqueness across players is the caller's concern."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


PLAYER_COLORS: tuple[PlayerColor, ...] = tuple(PlayerColor)


class Die(BaseModel):
    """One of the four dice.

    Attributes:
        id: Slot index 0-3
        value: Face value, 0 while unrolled, otherwise 1-6
        group_index: Group this die was assigned to, if any
        is_modified: True if this die was an extra "1" that was changed
    """

    id: int = Field(ge=0, lt=DICE_COUNT)
    value: int = Field(default=0, ge=0, le=6)
    group_index: int | None = Field(default=None, ge=0)
    is_modified: bool = Field(default=False)


class Mountain(BaseModel):
    """A numbered track with a pile of point tokens at its summit.

    The pile is a stack: tokens are taken from the end of the list.
    """

    id: int
    path_length: int = Field(ge=1)
    token_pile: list[int] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def check_mountain_id(cls, v: int) -> int:
        """Mountain ids are fixed to 5-10."""
        if v not in MOUNTAIN_IDS:
            raise ValueError(f"Unknown mountain id {v}, expected one of {MOUNTAIN_IDS}")
        return v

    @model_validator(mode="after")
    def check_board_constants(self) -> Mountain:
        """Path length and token values are fixed by the mountain id."""
        expected = MOUNTAIN_PATH_LENGTHS[self.id]
        if self.path_length != expected:
            raise ValueError(
                f"Mountain {self.id} must have path length {expected}, got {self.path_length}"
            )
        if any(token != self.id for token in self.token_pile):
            raise ValueError(f"Mountain {self.id} pile may only hold tokens worth {self.id}")
        if len(self.token_pile) > BASE_TOKEN_COUNTS[self.id]:
            raise ValueError(f"Mountain {self.id} pile holds more tokens than the base count")
        return self

    @property
    def summit(self) -> int:
        """Position of the summit (same as path length)."""
        return self.path_length

    @property
    def is_empty(self) -> bool:
        """No tokens left on this mountain."""
        return not self.token_pile


class Player(BaseModel):
    """Per-player state.

    Attributes:
        id: Stable player identifier
        name: Display name
        color: Goat color
        goat_positions: Position per mountain id, 0 = base, path length = summit
        collected_tokens: Tokens taken from each mountain, in collection order
        bonus_tokens: Bonus token values, in collection order
    """

    id: str
    name: str
    color: PlayerColor
    goat_positions: dict[int, int] = Field(
        default_factory=lambda: {mountain_id: 0 for mountain_id in MOUNTAIN_IDS}
    )
    collected_tokens: dict[int, list[int]] = Field(
        default_factory=lambda: {mountain_id: [] for mountain_id in MOUNTAIN_IDS}
    )
    bonus_tokens: list[int] = Field(default_factory=list)

    @field_validator("goat_positions", "collected_tokens")
    @classmethod
    def check_mountain_keys(cls, v: dict) -> dict:
        """Every mountain must have an entry, and nothing else."""
        if set(v) != set(MOUNTAIN_IDS):
            raise ValueError(f"Expected entries for mountains {MOUNTAIN_IDS}, got {sorted(v)}")
        return v

    @field_validator("bonus_tokens")
    @classmethod
    def check_bonus_values(cls, v: list[int]) -> list[int]:
        """Only the four fixed bonus values exist."""
        for token in v:
            if token not in BONUS_TOKENS:
                raise ValueError(f"Unknown bonus token value {token}")
        return v


class GameState(BaseModel):
    """Complete game snapshot.

    Attributes:
        players: 2-4 players in turn order
        current_player_index: Index of the player whose turn it is
        mountains: Mountains keyed by id
        bonus_token_pile: Remaining bonus tokens, highest first
        current_dice: Exactly four dice
        phase: Current phase of the turn state machine
        turn_count: Number of completed turns
        last_round_started: Set once the end condition has triggered
        starting_player_index: Player who took the first turn
    """

    players: list[Player]
    current_player_index: int = Field(default=0, ge=0)
    mountains: dict[int, Mountain]
    bonus_token_pile: list[int] = Field(default_factory=lambda: list(BONUS_TOKENS))
    current_dice: list[Die]
    phase: GamePhase = Field(default=GamePhase.ROLLING)
    turn_count: int = Field(default=0, ge=0)
    last_round_started: bool = Field(default=False)
    starting_player_index: int = Field(default=0, ge=0)

    @field_validator("players")
    @classmethod
    def check_player_count(cls, v: list[Player]) -> list[Player]:
        """A game seats 2-4 players with distinct ids."""
        if not MIN_PLAYERS <= len(v) <= MAX_PLAYERS:
            raise ValueError(f"Game requires {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(v)}")
        if len({player.id for player in v}) != len(v):
            raise ValueError("Player ids must be unique")
        return v

    @field_validator("mountains")
    @classmethod
    def check_mountains(cls, v: dict[int, Mountain]) -> dict[int, Mountain]:
        """Exactly the six mountains, each stored under its own id."""
        if set(v) != set(MOUNTAIN_IDS):
            raise ValueError(f"Expected mountains {MOUNTAIN_IDS}, got {sorted(v)}")
        for mountain_id, mountain in v.items():
            if mountain.id != mountain_id:
                raise ValueError(f"Mountain {mountain.id} stored under key {mountain_id}")
        return v

    @field_validator("bonus_token_pile")
    @classmethod
    def check_bonus_pile(cls, v: list[int]) -> list[int]:
        """The pile is a strictly decreasing subset of the bonus values."""
        if any(token not in BONUS_TOKENS for token in v):
            raise ValueError(f"Bonus pile may only hold {BONUS_TOKENS}, got {v}")
        if any(a <= b for a, b in zip(v, v[1:])):
            raise ValueError(f"Bonus pile must be strictly decreasing, got {v}")
        return v

    @field_validator("current_dice")
    @classmethod
    def check_dice(cls, v: list[Die]) -> list[Die]:
        """Exactly four dice in slot order."""
        if len(v) != DICE_COUNT:
            raise ValueError(f"Expected {DICE_COUNT} dice, got {len(v)}")
        if [die.id for die in v] != list(range(DICE_COUNT)):
            raise ValueError("Dice must be stored in slot order 0-3")
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> GameState:
        """Cross-field checks: indices in range, goats on their tracks."""
        player_count = len(self.players)
        if self.current_player_index >= player_count:
            raise ValueError(f"current_player_index {self.current_player_index} out of range")
        if self.starting_player_index >= player_count:
            raise ValueError(f"starting_player_index {self.starting_player_index} out of range")
        for player in self.players:
            for mountain_id, position in player.goat_positions.items():
                summit = self.mountains[mountain_id].path_length
                if not 0 <= position <= summit:
                    raise ValueError(
                        f"{player.name} goat on mountain {mountain_id} at {position}, "
                        f"outside [0, {summit}]"
                    )
        return self

    @property
    def current_player(self) -> Player:
        """Player whose turn it is."""
        return self.players[self.current_player_index]

    def get_player(self, player_id: str) -> Player | None:
        """Find a player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def empty_mountains(self) -> list[int]:
        """Ids of mountains whose token pile is exhausted, ascending."""
        return [mountain_id for mountain_id in MOUNTAIN_IDS if self.mountains[mountain_id].is_empty]

    # Serialization methods
    def to_json(self) -> str:
        """Serialize state to JSON string."""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> GameState:
        """Deserialize state from JSON string."""
        return cls.model_validate_json(json_str)

    def to_dict(self) -> dict:
        """Serialize state to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> GameState:
        """Deserialize state from dictionary."""
        return cls.model_validate(data)
