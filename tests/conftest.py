"""Shared pytest fixtures and markers for all tests."""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def players():
    """Four players in turn order."""
    from mountain_goats.engine.factory import create_player
    return [
        create_player("p1", "Ann", "red"),
        create_player("p2", "Ben", "blue"),
        create_player("p3", "Cat", "green"),
        create_player("p4", "Dan", "yellow"),
    ]


@pytest.fixture
def two_player_state(players):
    """Fresh two-player game state."""
    from mountain_goats.engine.factory import create_initial_game_state
    return create_initial_game_state(players[:2])


@pytest.fixture
def four_player_state(players):
    """Fresh four-player game state."""
    from mountain_goats.engine.factory import create_initial_game_state
    return create_initial_game_state(players)


@pytest.fixture
def with_dice():
    """Return a helper that copies a state with fixed dice values and phase."""
    from mountain_goats.engine.rules import create_dice_from_roll
    from mountain_goats.models.state import GamePhase

    def _with_dice(state, values, phase=GamePhase.GROUPING):
        new_state = state.model_copy(deep=True)
        new_state.current_dice = create_dice_from_roll(values)
        new_state.phase = phase
        return new_state

    return _with_dice


@pytest.fixture
def place_goat():
    """Return a helper that copies a state with one goat moved to a position."""

    def _place_goat(state, player_index, mountain_id, position):
        new_state = state.model_copy(deep=True)
        new_state.players[player_index].goat_positions[mountain_id] = position
        return new_state

    return _place_goat


@pytest.fixture
def give_tokens():
    """Return a helper that copies a state with tokens credited to a player."""

    def _give_tokens(state, player_index, mountain_ids):
        new_state = state.model_copy(deep=True)
        for mountain_id in mountain_ids:
            new_state.players[player_index].collected_tokens[mountain_id].append(mountain_id)
        return new_state

    return _give_tokens
