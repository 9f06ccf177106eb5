"""Game session for Mountain Goats.

The GameEngine owns the canonical game state and sequences the pure turn-flow
and end-game functions. Callers (a display layer, a test harness, a saved-game
loader) drive it one action at a time:

    engine = GameEngine.from_names(["Ann", "Ben", "Cat"], random_seed=7)
    engine.roll()
    if engine.get_turn_state().has_modifiable_ones:
        engine.modify_ones({2: 5})
    result = engine.confirm_groups([[0, 1], [2, 3]])
    engine.end_turn()

    if engine.is_game_over():
        results = engine.get_results()

After every confirmed grouping the engine checks the end condition and starts
the last round the first time it holds. After every end of turn it ends the
game once play is back at the starting player.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from mountain_goats.engine.endings import (
    GameResults,
    check_end_condition,
    end_game,
    get_end_game_reason,
    get_game_results,
    get_remaining_turns,
    should_game_end,
    start_last_round,
)
from mountain_goats.engine.errors import GameNotFoundError
from mountain_goats.engine.factory import (
    clone_game_state,
    create_initial_game_state,
    create_player,
)
from mountain_goats.engine.rules import GroupingOption, get_valid_groupings
from mountain_goats.engine.turn_flow import (
    MoveOutcome,
    TurnResult,
    TurnState,
    execute_end_turn,
    execute_groups,
    execute_modify_ones,
    execute_roll,
    get_turn_state,
)
from mountain_goats.models.state import PLAYER_COLORS, GamePhase, GameState, Player

if TYPE_CHECKING:
    from mountain_goats.storage import GameRecordRepository

logger = logging.getLogger(__name__)


@dataclass
class TurnRecord:
    """Record of one confirmed grouping.

    Attributes:
        turn: Turn number (turn_count at the time, 0-indexed)
        player_id: Player who moved
        dice: Dice values used, after any ones modification
        groups: Grouping the player confirmed
        moves: Outcome of each mountain move
        bonus_awarded: Bonus token taken, or None
        state_before: Game state before the grouping
        state_after: Game state after the grouping
    """

    turn: int
    player_id: str
    dice: list[int]
    groups: list[list[int]]
    moves: list[MoveOutcome] = field(default_factory=list)
    bonus_awarded: Optional[int] = None
    state_before: Optional[GameState] = None
    state_after: Optional[GameState] = None


class GameEngine:
    """Stateful game session wrapping the pure rules functions.

    Attributes:
        state: Current game state
        history: One TurnRecord per confirmed grouping
    """

    def __init__(
        self,
        players: Sequence[Player],
        random_seed: Optional[int] = None,
    ) -> None:
        """Start a new game.

        Args:
            players: 2-4 players in turn order
            random_seed: Seed for dice rolls (for reproducibility)

        Raises:
            InvalidPlayerCountError: If there are not 2-4 players
        """
        self._start(create_initial_game_state(players), random_seed)
        logger.info(
            f"New game: {', '.join(p.name for p in self.state.players)} "
            f"({len(self.state.players)} players)"
        )

    @classmethod
    def from_names(
        cls,
        names: Sequence[str],
        random_seed: Optional[int] = None,
    ) -> GameEngine:
        """Start a game from player names, assigning ids and colors in order."""
        players = [
            create_player(f"player-{index + 1}", name, PLAYER_COLORS[index % len(PLAYER_COLORS)])
            for index, name in enumerate(names)
        ]
        return cls(players, random_seed=random_seed)

    @classmethod
    def from_state(
        cls,
        state: GameState,
        random_seed: Optional[int] = None,
    ) -> GameEngine:
        """Resume a session from an existing snapshot (history starts empty)."""
        engine = cls.__new__(cls)
        engine._start(clone_game_state(state), random_seed)
        return engine

    def _start(self, state: GameState, random_seed: Optional[int]) -> None:
        self.state = state
        self.history: list[TurnRecord] = []
        self._random = random.Random(random_seed)
        self._undo_stack: list[tuple[str, GameState]] = []

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_state(self) -> GameState:
        """Get a copy of the current game state."""
        return clone_game_state(self.state)

    def get_turn_state(self) -> TurnState:
        """Which actions are currently available."""
        return get_turn_state(self.state)

    def get_valid_groupings(self) -> list[GroupingOption]:
        """Groupings of the current dice that move at least one goat."""
        return get_valid_groupings(self.state.current_dice)

    def get_history(self) -> list[TurnRecord]:
        """Get the complete turn history."""
        return list(self.history)

    def get_remaining_turns(self) -> Optional[int]:
        """Turns left in the last round, or None before it starts."""
        return get_remaining_turns(self.state)

    def get_end_game_reason(self) -> Optional[str]:
        """Why the last round started, or None."""
        return get_end_game_reason(self.state)

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self.state.phase == GamePhase.ENDED

    def get_results(self) -> GameResults:
        """Final rankings.

        Raises:
            GameNotEndedError: If the game is still in progress
        """
        return get_game_results(self.state)

    # =========================================================================
    # Actions
    # =========================================================================

    def roll(self) -> GameState:
        """Roll the dice for the current player.

        Raises:
            IllegalPhaseTransitionError: If not in the rolling phase
        """
        new_state = execute_roll(self.state, self._random)
        self._commit("roll", new_state)
        logger.debug(
            f"{new_state.current_player.name} rolled {[d.value for d in new_state.current_dice]}"
        )
        return new_state

    def modify_ones(self, modifications: Mapping[int, int]) -> GameState:
        """Change extra 1s on the current dice.

        Raises:
            IllegalPhaseTransitionError: If not in the grouping phase
            InvalidModificationError: If the map targets a die that may not change
        """
        new_state = execute_modify_ones(self.state, modifications)
        self._commit("modify_ones", new_state)
        logger.debug(f"Dice modified to {[d.value for d in new_state.current_dice]}")
        return new_state

    def confirm_groups(self, groups: Sequence[Sequence[int]]) -> TurnResult:
        """Apply a grouping, then start the last round if the end condition holds.

        Raises:
            IllegalPhaseTransitionError: If not in the grouping phase
            InvalidGroupingError: If the groups are not a partition of the dice
        """
        state_before = self.state
        result = execute_groups(state_before, groups)
        new_state = result.state

        if not new_state.last_round_started and check_end_condition(new_state):
            new_state = start_last_round(new_state)
            result = TurnResult(state=new_state, moves=result.moves, bonus_awarded=result.bonus_awarded)
            logger.info(f"Last round started: {get_end_game_reason(new_state)}")

        self._commit("confirm_groups", new_state)
        self.history.append(
            TurnRecord(
                turn=state_before.turn_count,
                player_id=state_before.current_player.id,
                dice=[die.value for die in state_before.current_dice],
                groups=[list(group) for group in groups],
                moves=list(result.moves),
                bonus_awarded=result.bonus_awarded,
                state_before=clone_game_state(state_before),
                state_after=clone_game_state(new_state),
            )
        )

        for move in result.moves:
            logger.debug(
                f"{state_before.current_player.name} climbed mountain {move.mountain_id}"
                + (f", took a {move.token_collected}" if move.token_collected else "")
                + (f", knocked off {move.knocked_off}" if move.knocked_off else "")
            )
        if result.bonus_awarded is not None:
            logger.info(f"{state_before.current_player.name} took bonus token {result.bonus_awarded}")

        return result

    def end_turn(self) -> GameState:
        """Pass play to the next player, ending the game when the last round is over.

        Raises:
            IllegalPhaseTransitionError: If the game has already ended
        """
        new_state = execute_end_turn(self.state)
        if should_game_end(new_state):
            new_state = end_game(new_state)
            logger.info(f"Game over after {new_state.turn_count} turns")
        self._commit("end_turn", new_state)
        return new_state

    def undo(self) -> bool:
        """Restore the state before the last action.

        Returns:
            True if an action was undone, False if there was nothing to undo
        """
        if not self._undo_stack:
            return False

        action, previous = self._undo_stack.pop()
        if action == "confirm_groups" and self.history:
            self.history.pop()
        self.state = previous
        logger.debug(f"Undid {action}")
        return True

    def _commit(self, action: str, new_state: GameState) -> None:
        self._undo_stack.append((action, self.state))
        self.state = new_state

    # =========================================================================
    # Persistence
    # =========================================================================

    def save(self, repo: GameRecordRepository, game_id: Optional[str] = None) -> str:
        """Save the current state.

        Args:
            repo: Game record repository
            game_id: Id to save under (a new UUID if omitted)

        Returns:
            The game id
        """
        game_id = game_id or str(uuid.uuid4())
        repo.save_game(
            game_id,
            {
                "status": "ended" if self.is_game_over() else "in_progress",
                "turn_count": self.state.turn_count,
                "player_names": [player.name for player in self.state.players],
                "state": self.state.to_dict(),
            },
        )
        logger.info(f"Saved game {game_id} at turn {self.state.turn_count}")
        return game_id

    @classmethod
    def load(
        cls,
        repo: GameRecordRepository,
        game_id: str,
        random_seed: Optional[int] = None,
    ) -> GameEngine:
        """Resume a saved game.

        Raises:
            GameNotFoundError: If no game is saved under game_id
            pydantic.ValidationError: If the saved state is corrupt
        """
        record = repo.load_game(game_id)
        if record is None or "state" not in record:
            raise GameNotFoundError(game_id)

        state = GameState.from_dict(record["state"])
        logger.info(f"Loaded game {game_id} at turn {state.turn_count}")
        return cls.from_state(state, random_seed=random_seed)
