"""Main entry point: headless self-play between two strategies."""

import argparse
import asyncio
import logging
import random
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path

from caravan.config import Config, ConfigError, load_config
from caravan.logging import GameLogConfig, GameLogger
from caravan.models.game_state import Side
from caravan.rules import format_rules
from caravan.session import GameSession
from caravan.strategy import Strategy, create_strategy
from caravan.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_MOVES = 300


def generate_log_filename(log_dir: str, seed: int | None) -> str:
    """Generate log filename with timestamp and seed.

    Format: {ISO timestamp}_seed{seed}.jsonl
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    suffix = f"seed{seed}" if seed is not None else "random"
    return str(Path(log_dir) / f"{timestamp}_{suffix}.jsonl")


async def play_game(
    session: GameSession,
    player_strategy: Strategy,
    display: GameDisplay,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> None:
    """Play the session's current game to the end.

    The human side is played by player_strategy; the AI side goes through
    the session's scheduled decisions. The game stops early when both sides
    skip in a row or the move limit is reached.
    """
    skips = 0
    while not session.state.game_over and session.state.move_count < max_moves:
        side = session.state.turn
        if side == Side.AI and session.state.ai_enabled:
            move = await session.wait_for_ai()
        elif side == Side.AI:
            move = session.play_turn(Side.AI)
        else:
            move = session.play_turn(Side.PLAYER, player_strategy)

        if move is None:
            skips += 1
            display.print_skip(side, session.state.message)
            if skips >= 2:
                logger.info("Both sides are stuck; stopping game")
                break
            continue

        skips = 0
        display.print_move(session.state.move_log[-1], session.snapshot())


async def run_games(
    config: Config,
    num_games: int,
    seed: int | None,
    display: GameDisplay,
    game_logger: GameLogger,
    player_strategy_name: str = "random",
    check_invariants: bool = False,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> Counter:
    """Run several self-play games.

    Returns:
        Counter of outcomes ("player", "ai", "tie", "unfinished")
    """
    rng = random.Random(seed)
    session = GameSession(config, rng=rng, game_logger=game_logger)
    player_strategy = create_strategy(player_strategy_name, rng)
    results: Counter = Counter()

    for game_num in range(1, num_games + 1):
        if game_num > 1:
            session.reset_game()
        display.print_game_start(game_num, num_games)

        await play_game(session, player_strategy, display, max_moves)

        snapshot = session.snapshot()
        display.print_game_end(game_num, snapshot)
        results[snapshot.winner.value if snapshot.winner else "unfinished"] += 1

        if check_invariants:
            display.print_invariants(session.run_invariants())

    return results


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = argparse.ArgumentParser(
        description="Caravan card game engine: headless self-play"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-n",
        "--num-games",
        type=int,
        default=1,
        help="Number of games to play",
    )
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        help="Random seed for shuffles and strategies",
    )
    parser.add_argument(
        "--player-strategy",
        default="random",
        help="Strategy for the human side (random, first)",
    )
    parser.add_argument(
        "--max-moves",
        type=int,
        default=DEFAULT_MAX_MOVES,
        help="Stop a game after this many moves",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Keep the AI deliberation delay from the config",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show both hands after each move",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )
    parser.add_argument(
        "--check-invariants",
        action="store_true",
        help="Run the invariant self-check after each game",
    )
    parser.add_argument(
        "--rules",
        action="store_true",
        help="Print the rules and exit",
    )

    args = parser.parse_args()

    if args.rules:
        print(format_rules())
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Could not load config: {e}", file=sys.stderr)
        return 1

    # Apply command-line overrides
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True
    if not args.realtime:
        config.ai.delay_min_ms = 0
        config.ai.delay_max_ms = 0

    # Determine game log directory (CLI argument overrides config file)
    game_log_enabled = args.game_log is not None or config.game_log.enabled
    game_log_dir = str(args.game_log) if args.game_log else config.game_log.output_path

    setup_logging(config.logging.level)
    display = GameDisplay(show_hands=config.logging.show_hands)

    if game_log_enabled:
        log_path = generate_log_filename(game_log_dir, args.seed)
        game_log_config = GameLogConfig(enabled=True, output_path=log_path)
        print(f"Game log: {log_path}")
    else:
        game_log_config = GameLogConfig(enabled=False)

    try:
        with GameLogger(game_log_config) as game_logger:
            results = asyncio.run(
                run_games(
                    config,
                    args.num_games,
                    args.seed,
                    display,
                    game_logger,
                    player_strategy_name=args.player_strategy,
                    check_invariants=args.check_invariants,
                    max_moves=args.max_moves,
                )
            )
        display.print_final_results(dict(results))
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Self-play error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
