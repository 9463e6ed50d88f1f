"""Base strategy class for automated players.

Defines the interface that all AI strategies must implement.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from caravan.models.game_state import GameState, Side


@dataclass(frozen=True)
class CandidateMove:
    """A legal placement that can be handed to GameEngine.place_card."""

    actor: Side
    target: Side
    card_id: str
    pile_index: int
    target_index: int | None = None


class Strategy(ABC):
    """Abstract base class for move selection.

    Strategies only choose among moves that were already validated; they
    never commit anything themselves.
    """

    name: str = "base"

    @abstractmethod
    def select_move(
        self,
        state: GameState,
        side: Side,
        moves: Sequence[CandidateMove],
    ) -> CandidateMove | None:
        """Select one of the legal moves.

        Args:
            state: Current game state
            side: Side to move
            moves: Legal moves for that side

        Returns:
            Chosen move, or None to pass
        """
        pass
