"""Simple strategy implementations.

- RandomStrategy: uniform pick among legal moves (the default opponent)
- FirstMoveStrategy: always the first legal move, for reproducible tests
"""

import random
from collections.abc import Sequence

from caravan.models.game_state import GameState, Side

from .base import CandidateMove, Strategy


class RandomStrategy(Strategy):
    """Pick a legal move uniformly at random."""

    name = "random"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def select_move(
        self,
        state: GameState,
        side: Side,
        moves: Sequence[CandidateMove],
    ) -> CandidateMove | None:
        if not moves:
            return None
        return self.rng.choice(list(moves))


class FirstMoveStrategy(Strategy):
    """Pick the first legal move."""

    name = "first"

    def select_move(
        self,
        state: GameState,
        side: Side,
        moves: Sequence[CandidateMove],
    ) -> CandidateMove | None:
        return moves[0] if moves else None


STRATEGIES: dict[str, type[Strategy]] = {
    RandomStrategy.name: RandomStrategy,
    FirstMoveStrategy.name: FirstMoveStrategy,
}


def create_strategy(name: str, rng: random.Random | None = None) -> Strategy:
    """Create a strategy by name.

    Raises:
        ValueError: If the name is unknown.
    """
    if name not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name!r} (choose from {sorted(STRATEGIES)})")
    if name == RandomStrategy.name:
        return RandomStrategy(rng)
    return STRATEGIES[name]()
