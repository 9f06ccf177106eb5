"""Tests for the GameEngine session.

Tests cover:
- Construction from players, names and snapshots
- Action sequencing and turn history
- Last round trigger and game end
- Undo
"""

import pytest

from mountain_goats.engine.errors import (
    GameNotEndedError,
    IllegalPhaseTransitionError,
    InvalidPlayerCountError,
)
from mountain_goats.engine.game_engine import GameEngine
from mountain_goats.engine.turn_flow import MoveOutcome
from mountain_goats.models.state import GamePhase, PlayerColor


@pytest.fixture
def engine():
    """Two-player engine with a fixed seed."""
    return GameEngine.from_names(["Ann", "Ben"], random_seed=42)


@pytest.fixture
def near_end_state(two_player_state, place_goat):
    """Two mountains exhausted and Ann one step from taking the last 7."""
    state = two_player_state.model_copy(deep=True)
    state.mountains[5].token_pile = []
    state.mountains[6].token_pile = []
    state.mountains[7].token_pile = [7]
    return place_goat(state, 0, 7, 5)


class TestConstruction:
    """Tests for creating engines."""

    def test_from_names(self, engine):
        """Names get sequential ids and colors in order."""
        players = engine.state.players
        assert [p.id for p in players] == ["player-1", "player-2"]
        assert [p.color for p in players] == [PlayerColor.RED, PlayerColor.BLUE]
        assert engine.state.phase == GamePhase.ROLLING

    def test_invalid_player_count(self):
        """A single player cannot start a game."""
        with pytest.raises(InvalidPlayerCountError):
            GameEngine.from_names(["Solo"])

    def test_from_state_copies(self, two_player_state):
        """Engines resumed from a snapshot do not share it."""
        engine = GameEngine.from_state(two_player_state)
        engine.roll()
        assert two_player_state.phase == GamePhase.ROLLING

    def test_from_state_starts_like_a_new_game(self, two_player_state):
        """A resumed engine seeds its dice and starts with no history or undo."""
        resumed = GameEngine.from_state(two_player_state, random_seed=9)
        fresh = GameEngine(two_player_state.players, random_seed=9)
        assert resumed.history == []
        assert resumed.undo() is False
        assert resumed.roll().current_dice == fresh.roll().current_dice

    def test_seed_reproducible(self):
        """The same seed rolls the same dice."""
        first = GameEngine.from_names(["Ann", "Ben"], random_seed=9)
        second = GameEngine.from_names(["Ann", "Ben"], random_seed=9)
        assert first.roll() == second.roll()

    def test_get_current_state_is_a_copy(self, engine):
        """Mutating the returned state leaves the engine alone."""
        snapshot = engine.get_current_state()
        snapshot.turn_count = 99
        assert engine.state.turn_count == 0


class TestActions:
    """Tests for action sequencing."""

    def test_full_turn(self, engine, with_dice):
        """Roll, group and end turn in sequence."""
        engine.roll()
        assert engine.get_turn_state().phase == GamePhase.GROUPING

        engine.state = with_dice(engine.state, [3, 4, 2, 6])
        result = engine.confirm_groups([[0, 1], [2, 3]])
        assert result.moves == [MoveOutcome(mountain_id=7), MoveOutcome(mountain_id=8)]
        assert engine.get_turn_state().can_end_turn

        state = engine.end_turn()
        assert state.current_player_index == 1
        assert state.turn_count == 1
        assert engine.get_remaining_turns() is None

    def test_roll_twice_rejected(self, engine):
        """Rolling again before grouping fails."""
        engine.roll()
        with pytest.raises(IllegalPhaseTransitionError):
            engine.roll()

    def test_modify_ones(self, engine, with_dice):
        """Extra 1s can be changed before grouping."""
        engine.state = with_dice(engine.state, [1, 1, 4, 2])
        assert engine.get_turn_state().has_modifiable_ones

        engine.modify_ones({1: 6})
        assert [d.value for d in engine.state.current_dice] == [1, 6, 4, 2]
        assert engine.get_turn_state().can_group

    def test_valid_groupings_follow_dice(self, engine, with_dice):
        """Available groupings come from the current dice."""
        engine.state = with_dice(engine.state, [6, 6, 6, 6])
        assert len(engine.get_valid_groupings()) == 11

    def test_history_records_turn(self, engine, with_dice):
        """Every confirmed grouping adds a turn record."""
        engine.state = with_dice(engine.state, [3, 4, 6, 6])
        engine.confirm_groups([[0, 1], [2, 3]])

        (record,) = engine.get_history()
        assert record.turn == 0
        assert record.player_id == "player-1"
        assert record.dice == [3, 4, 6, 6]
        assert record.groups == [[0, 1], [2, 3]]
        assert record.moves == [MoveOutcome(mountain_id=7)]
        assert record.state_before.phase == GamePhase.GROUPING
        assert record.state_after.phase == GamePhase.MOVING

    def test_results_before_end(self, engine):
        """Results are unavailable while the game runs."""
        with pytest.raises(GameNotEndedError):
            engine.get_results()


class TestGameEnd:
    """Tests for the last round and game end."""

    def test_last_round_and_end(self, near_end_state, with_dice):
        """The last round starts on the trigger and ends back at the first player."""
        engine = GameEngine.from_state(near_end_state, random_seed=1)

        engine.state = with_dice(engine.state, [3, 4, 6, 6])
        result = engine.confirm_groups([[0, 1], [2, 3]])
        assert result.moves == [MoveOutcome(mountain_id=7, token_collected=7)]
        assert result.state.last_round_started
        assert engine.get_end_game_reason() == "3 mountains have run out of tokens: 5, 6, 7"
        assert engine.get_remaining_turns() == 2

        engine.end_turn()
        assert not engine.is_game_over()
        assert engine.get_remaining_turns() == 1

        engine.state = with_dice(engine.state, [6, 6, 6, 6])
        engine.confirm_groups([[0, 1, 2, 3]])
        engine.end_turn()

        assert engine.is_game_over()
        results = engine.get_results()
        assert results.winner.name == "Ann"
        assert results.rankings[0].score == 7

    def test_no_actions_after_end(self, near_end_state, with_dice):
        """Ending the turn of a finished game fails."""
        engine = GameEngine.from_state(near_end_state)
        engine.state = with_dice(engine.state, [3, 4, 6, 6])
        engine.confirm_groups([[0, 1], [2, 3]])
        engine.end_turn()
        engine.state = with_dice(engine.state, [6, 6, 6, 6])
        engine.confirm_groups([[0, 1, 2, 3]])
        engine.end_turn()

        with pytest.raises(IllegalPhaseTransitionError):
            engine.end_turn()
        with pytest.raises(IllegalPhaseTransitionError):
            engine.roll()


class TestUndo:
    """Tests for undo."""

    def test_nothing_to_undo(self, engine):
        """A fresh engine has nothing to undo."""
        assert engine.undo() is False

    def test_undo_roll(self, engine):
        """Undoing a roll returns to the rolling phase."""
        engine.roll()
        assert engine.undo() is True
        assert engine.state.phase == GamePhase.ROLLING

    def test_undo_grouping_drops_history(self, engine, with_dice):
        """Undoing a grouping removes its turn record and restores positions."""
        engine.state = with_dice(engine.state, [3, 4, 6, 6])
        before = engine.get_current_state()
        engine.confirm_groups([[0, 1], [2, 3]])

        assert engine.undo() is True
        assert engine.get_history() == []
        assert engine.state == before

    def test_undo_steps_back_one_action_at_a_time(self, engine, with_dice):
        """Each undo reverts exactly one action."""
        engine.roll()
        engine.state = with_dice(engine.state, [3, 4, 6, 6])
        engine.confirm_groups([[0, 1], [2, 3]])
        engine.end_turn()

        engine.undo()
        assert engine.state.phase == GamePhase.MOVING
        engine.undo()
        assert engine.state.phase == GamePhase.GROUPING
        engine.undo()
        assert engine.state.phase == GamePhase.ROLLING
        assert engine.undo() is False
