"""Headless playtesting tools for Mountain Goats.

Key classes:
- GameRunner: Plays one full game on the real GameEngine with random choices
- GameResult: Summary of a finished game

Usage:
    from mountain_goats.testing import run_games, summarize_results

    results = run_games(100, ["Ann", "Ben", "Cat"], random_seed=1)
    print(summarize_results(results))
"""

from .game_runner import GameResult, GameRunner, run_games, summarize_results

__all__ = [
    "GameRunner",
    "GameResult",
    "run_games",
    "summarize_results",
]
