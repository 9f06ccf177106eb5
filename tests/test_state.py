"""Unit tests for mountain_goats.models.state module.

Tests cover:
- Die, Mountain, Player: field constraints and board constants
- GameState: structural validation of snapshots, helpers
- Serialization: JSON and dict round trips keep every field
"""

import json

import pytest
from pydantic import ValidationError

from mountain_goats.models.state import (
    BONUS_TOKENS,
    MOUNTAIN_IDS,
    MOUNTAIN_PATH_LENGTHS,
    Die,
    GamePhase,
    GameState,
    Mountain,
    Player,
    PlayerColor,
)


class TestDie:
    """Tests for the Die model."""

    def test_default_die_is_unrolled(self):
        """A new die shows 0, has no group and is not modified."""
        die = Die(id=2)
        assert die.value == 0
        assert die.group_index is None
        assert die.is_modified is False

    @pytest.mark.parametrize("value", [-1, 7])
    def test_value_out_of_range_rejected(self, value):
        """Face values are limited to 0-6."""
        with pytest.raises(ValidationError):
            Die(id=0, value=value)

    def test_slot_out_of_range_rejected(self):
        """Only slots 0-3 exist."""
        with pytest.raises(ValidationError):
            Die(id=4)


class TestMountain:
    """Tests for the Mountain model."""

    def test_summit_is_path_length(self):
        """The summit position equals the path length."""
        mountain = Mountain(id=7, path_length=6, token_pile=[7, 7])
        assert mountain.summit == 6
        assert not mountain.is_empty

    def test_unknown_id_rejected(self):
        """Mountains only exist for ids 5-10."""
        with pytest.raises(ValidationError, match="Unknown mountain id"):
            Mountain(id=11, path_length=3)

    def test_wrong_path_length_rejected(self):
        """Path lengths are fixed per mountain."""
        with pytest.raises(ValidationError, match="path length"):
            Mountain(id=10, path_length=4)

    def test_foreign_token_value_rejected(self):
        """A pile may only hold tokens worth its own id."""
        with pytest.raises(ValidationError, match="tokens worth 8"):
            Mountain(id=8, path_length=5, token_pile=[8, 9])

    def test_oversized_pile_rejected(self):
        """A pile can never exceed the four-player base count."""
        with pytest.raises(ValidationError):
            Mountain(id=5, path_length=4, token_pile=[5] * 6)


class TestPlayer:
    """Tests for the Player model."""

    def test_defaults_cover_every_mountain(self):
        """New players have a base position and empty list per mountain."""
        player = Player(id="x", name="X", color=PlayerColor.RED)
        assert player.goat_positions == {mountain_id: 0 for mountain_id in MOUNTAIN_IDS}
        assert player.collected_tokens == {mountain_id: [] for mountain_id in MOUNTAIN_IDS}
        assert player.bonus_tokens == []

    def test_missing_mountain_rejected(self):
        """Every mountain needs a position entry."""
        with pytest.raises(ValidationError, match="Expected entries"):
            Player(id="x", name="X", color="red", goat_positions={5: 0, 6: 0})

    def test_unknown_bonus_value_rejected(self):
        """Bonus tokens are limited to the four fixed values."""
        with pytest.raises(ValidationError, match="Unknown bonus token"):
            Player(id="x", name="X", color="red", bonus_tokens=[10])


class TestGameState:
    """Tests for GameState validation and helpers."""

    def test_current_player(self, four_player_state):
        """current_player follows current_player_index."""
        state = four_player_state.model_copy(deep=True)
        state.current_player_index = 2
        assert state.current_player.name == "Cat"

    def test_get_player(self, two_player_state):
        """Players are found by id; unknown ids give None."""
        assert two_player_state.get_player("p2").name == "Ben"
        assert two_player_state.get_player("nobody") is None

    def test_empty_mountains(self, two_player_state):
        """empty_mountains lists exhausted piles in ascending order."""
        state = two_player_state.model_copy(deep=True)
        state.mountains[9].token_pile = []
        state.mountains[6].token_pile = []
        assert state.empty_mountains() == [6, 9]

    def test_single_player_rejected(self, two_player_state):
        """Snapshots with fewer than two players fail validation."""
        data = json.loads(two_player_state.to_json())
        data["players"] = data["players"][:1]
        with pytest.raises(ValidationError, match="2-4 players"):
            GameState.from_dict(data)

    def test_duplicate_player_ids_rejected(self, two_player_state):
        """Player ids must be unique."""
        data = json.loads(two_player_state.to_json())
        data["players"][1]["id"] = data["players"][0]["id"]
        with pytest.raises(ValidationError, match="unique"):
            GameState.from_dict(data)

    def test_goat_beyond_summit_rejected(self, two_player_state):
        """A goat cannot stand above its mountain's summit."""
        data = json.loads(two_player_state.to_json())
        data["players"][0]["goat_positions"]["10"] = MOUNTAIN_PATH_LENGTHS[10] + 1
        with pytest.raises(ValidationError, match="outside"):
            GameState.from_dict(data)

    def test_wrong_dice_count_rejected(self, two_player_state):
        """Exactly four dice are required."""
        data = json.loads(two_player_state.to_json())
        data["current_dice"] = data["current_dice"][:3]
        with pytest.raises(ValidationError, match="Expected 4 dice"):
            GameState.from_dict(data)

    def test_bonus_pile_must_decrease(self, two_player_state):
        """The bonus pile is consumed from the front, so it stays decreasing."""
        data = json.loads(two_player_state.to_json())
        data["bonus_token_pile"] = [6, 15]
        with pytest.raises(ValidationError, match="strictly decreasing"):
            GameState.from_dict(data)

    def test_current_player_index_out_of_range(self, two_player_state):
        """current_player_index must point at a player."""
        data = json.loads(two_player_state.to_json())
        data["current_player_index"] = 2
        with pytest.raises(ValidationError, match="out of range"):
            GameState.from_dict(data)

    def test_missing_mountain_rejected(self, two_player_state):
        """All six mountains must be present."""
        data = json.loads(two_player_state.to_json())
        del data["mountains"]["7"]
        with pytest.raises(ValidationError, match="Expected mountains"):
            GameState.from_dict(data)


class TestSerialization:
    """Tests for snapshot serialization."""

    def _played_state(self, four_player_state, place_goat, give_tokens):
        state = place_goat(four_player_state, 1, 8, 3)
        state = give_tokens(state, 1, [5, 6])
        state.mountains[5].token_pile.pop()
        state.mountains[6].token_pile.pop()
        state.bonus_token_pile = [12, 9, 6]
        state.players[0].bonus_tokens = [15]
        state.current_player_index = 3
        state.turn_count = 7
        state.phase = GamePhase.MOVING
        state.current_dice[2].group_index = 1
        state.current_dice[2].is_modified = True
        return state

    def test_json_round_trip(self, four_player_state, place_goat, give_tokens):
        """to_json/from_json reproduces an identical state."""
        state = self._played_state(four_player_state, place_goat, give_tokens)
        restored = GameState.from_json(state.to_json())
        assert restored == state

    def test_dict_round_trip(self, four_player_state, place_goat, give_tokens):
        """to_dict/from_dict reproduces an identical state."""
        state = self._played_state(four_player_state, place_goat, give_tokens)
        restored = GameState.from_dict(json.loads(json.dumps(state.to_dict())))
        assert restored == state

    def test_mountain_keys_restored_as_ints(self, two_player_state):
        """JSON object keys come back as integer mountain ids."""
        restored = GameState.from_json(two_player_state.to_json())
        assert set(restored.mountains) == set(MOUNTAIN_IDS)
        assert set(restored.players[0].goat_positions) == set(MOUNTAIN_IDS)

    def test_enums_serialize_as_strings(self, two_player_state):
        """Phase and color are stored by value."""
        data = two_player_state.to_dict()
        assert data["phase"] == "rolling"
        assert data["players"][0]["color"] == "red"
        assert data["bonus_token_pile"] == list(BONUS_TOKENS)
