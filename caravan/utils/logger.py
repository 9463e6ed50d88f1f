"""Logging utilities and game state display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caravan.game.engine import GameSnapshot
    from caravan.game.invariants import InvariantReport
    from caravan.models.game_state import MoveLogEntry, Side


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class GameDisplay:
    """Display game state to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show hands after each move
        """
        self.show_hands = show_hands

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_game_start(self, game_number: int, num_games: int) -> None:
        """Print game start message."""
        self.print_separator()
        print(f"GAME {game_number}/{num_games}")
        self.print_separator()

    def print_move(self, entry: "MoveLogEntry", snapshot: "GameSnapshot") -> None:
        """Print a committed move and the resulting totals."""
        where = "own" if entry.actor == entry.target else "opponent's"
        on_card = f" on card {entry.target_index}" if entry.target_index is not None else ""
        print(
            f"Move {snapshot.move_count}: {entry.actor.value} plays {entry.card_rank.value} "
            f"to {where} pile {entry.pile_index + 1}{on_card}"
        )
        for side, totals in snapshot.totals.items():
            piles = " | ".join(str(t) for t in totals.per_pile)
            print(f"  {side.value:>6}: {piles}  (total {totals.total})")
        self.print_hands(snapshot)

    def print_skip(self, side: "Side", message: str | None) -> None:
        print(f"  {side.value} -> SKIP ({message or 'no valid moves'})")

    def print_hands(self, snapshot: "GameSnapshot") -> None:
        """Print both hands (if show_hands is enabled)."""
        if not self.show_hands:
            return
        for side, hand in snapshot.hands.items():
            print(f"  {side.value} hand: {', '.join(str(c) for c in hand) or '-'}")

    def print_piles(self, snapshot: "GameSnapshot") -> None:
        """Print every pile with its cards and direction."""
        for side, views in snapshot.piles.items():
            for i, view in enumerate(views):
                cards = ", ".join(str(c) for c in view.cards) or "(empty)"
                direction = view.direction.value if view.direction else "-"
                print(f"  {side.value} pile {i + 1} [{view.total}, {direction}]: {cards}")

    def print_game_end(self, game_number: int, snapshot: "GameSnapshot") -> None:
        """Print game end results."""
        print(f"\nGame {game_number} finished after {snapshot.move_count} moves")
        if snapshot.banner:
            print(snapshot.banner)
        else:
            print("No winner (game stalled or move limit reached)")
        self.print_piles(snapshot)

    def print_invariants(self, report: "InvariantReport") -> None:
        print(report.summary())

    def print_final_results(self, results: dict[str, int]) -> None:
        """Print results over all games."""
        self.print_separator()
        print("FINAL RESULTS")
        self.print_separator()
        for outcome, count in sorted(results.items(), key=lambda x: x[1], reverse=True):
            print(f"  {outcome}: {count}")
