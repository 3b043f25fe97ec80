"""
Entry point for the civsim engine.
Runs a seeded demo game with AI players and prints the final scoreboard.
"""

import argparse
import logging
import sys

from civsim.config import END_YEAR, MAX_PLAYERS, MIN_PLAYERS, make_config
from civsim.engine.scheduler import TurnScheduler
from civsim.engine.utils import format_year, print_game_state, print_scoreboard


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a civsim demo game between AI players.")
    parser.add_argument("--players", type=int, default=2,
                        help=f"number of players ({MIN_PLAYERS}-{MAX_PLAYERS})")
    parser.add_argument("--seed", type=int, default=None, help="random seed (same seed, same game)")
    parser.add_argument("--max-rounds", type=int, default=None,
                        help="stop after this many years even without a winner")
    parser.add_argument("--end-year", type=int, default=END_YEAR,
                        help="year the time victory is evaluated (negative = BC)")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging and full state dump")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("civsim - turn-based civilization simulation")
    print("=" * 60)

    try:
        config = make_config(num_players=args.players, end_year=args.end_year, human_players=[])
        scheduler = TurnScheduler.new_game(config, seed=args.seed)

        print("\n[INITIAL STATE]")
        print_game_state(scheduler.state, scheduler.defs, verbose=args.verbose)

        state = scheduler.run(max_rounds=args.max_rounds)
    except ValueError as e:
        print(f"✗ Game aborted: {e}", file=sys.stderr)
        return 1

    print("\n[FINAL STATE]")
    print_game_state(state, scheduler.defs, verbose=args.verbose)
    if state.winner is None:
        print(f"No winner yet after {state.turn_count} rounds ({format_year(state.year)}).")
    else:
        winner = state.get_player(state.winner)
        print(f"✓ {winner.name} wins in {format_year(state.year)}!")
    print_scoreboard(state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
