#!/usr/bin/env python3
"""
Batch Simulation for Mountain Goats

Plays many random games on the real engine and prints aggregate statistics:
win share per seat, how often the game ends on bonus tokens versus empty
mountains, average game length, score and knockoffs.

Usage:
    python scripts/run_simulation.py --games 500 --players 3 --seed 1
"""

import argparse
import json
import logging

from mountain_goats.testing import run_games, summarize_results

DEFAULT_NAMES = ["Red", "Blue", "Green", "Yellow"]


def main():
    """Run the simulation."""
    parser = argparse.ArgumentParser(description="Run Mountain Goats batch simulation")
    parser.add_argument("--games", type=int, default=200,
                        help="Number of games to play (default: 200)")
    parser.add_argument("--players", type=int, default=4, choices=[2, 3, 4],
                        help="Number of players (default: 4)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--json", action="store_true",
                        help="Print the summary as JSON")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    names = DEFAULT_NAMES[:args.players]
    results = run_games(args.games, names, random_seed=args.seed)
    summary = summarize_results(results)

    if args.json:
        print(json.dumps(summary, indent=2))
        return

    games = summary["games"]
    if games == 0:
        print("No games played")
        return
    print(f"\nTotal games simulated: {games}")
    print(f"Average game length: {summary['mean_turns']:.1f} turns")
    print(f"Average score: {summary['mean_score']:.1f} points")
    print(f"Average knockoffs per game: {summary['mean_knockoffs']:.2f}")
    print(f"Ties: {summary['ties']} ({summary['ties']/games*100:.1f}%)")
    print(f"Decided by tiebreaker: {summary['tiebreakers']}")
    print("\nWins by seat:")
    for name in names:
        wins = summary["wins"].get(name, 0)
        print(f"  {name:<8} {wins:>5} ({wins/games*100:.1f}%)")
    print("\nEnd triggers:")
    for trigger, count in summary["end_triggers"].items():
        print(f"  {trigger}: {count} ({count/games*100:.1f}%)")


if __name__ == "__main__":
    main()
