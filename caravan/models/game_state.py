"""Game state models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .card import Card, Rank

Pile = tuple[Card, ...]


class Side(str, Enum):
    """One of the two seats at the table."""

    PLAYER = "player"
    AI = "ai"

    @property
    def opponent(self) -> "Side":
        return Side.AI if self is Side.PLAYER else Side.PLAYER


class Outcome(str, Enum):
    """Final result of a game."""

    PLAYER = "player"
    AI = "ai"
    TIE = "tie"


class PlayerState(BaseModel, frozen=True):
    """One side's hand and piles."""

    hand: tuple[Card, ...] = ()
    piles: tuple[Pile, ...] = ((), (), ())

    def find_card(self, card_id: str) -> Card | None:
        """Get a card from the hand by id."""
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def without_card(self, card_id: str) -> tuple[Card, ...]:
        """Get the hand with the given card taken out."""
        return tuple(c for c in self.hand if c.id != card_id)

    def with_pile(self, pile_index: int, cards: Pile) -> "PlayerState":
        """Return a copy with one pile replaced."""
        piles = tuple(
            cards if i == pile_index else pile for i, pile in enumerate(self.piles)
        )
        return self.model_copy(update={"piles": piles})

    def with_hand(self, hand: tuple[Card, ...]) -> "PlayerState":
        return self.model_copy(update={"hand": hand})


class MoveLogEntry(BaseModel, frozen=True):
    """Record of one committed move."""

    actor: Side
    target: Side
    card_rank: Rank
    pile_index: int
    target_index: int | None = None
    pile_before_size: int = 0
    ai_enabled_at_move: bool = True
    prev_turn: Side
    next_turn: Side
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def is_opponent_target(self) -> bool:
        return self.actor != self.target


class GameState(BaseModel, frozen=True):
    """Overall game state.

    Never mutated in place; every transition returns a new value.
    """

    deck: tuple[Card, ...] = ()
    player: PlayerState = Field(default_factory=PlayerState)
    ai: PlayerState = Field(default_factory=PlayerState)

    turn: Side = Side.PLAYER
    ai_enabled: bool = True
    game_over: bool = False
    winner: Outcome | None = None
    message: str | None = None  # Pending non-fatal message for the UI

    move_count: int = 0
    move_log: tuple[MoveLogEntry, ...] = ()

    @property
    def deck_count(self) -> int:
        return len(self.deck)

    def side(self, side: Side) -> PlayerState:
        """Get the state of one side."""
        return self.player if side == Side.PLAYER else self.ai

    def with_side(self, side: Side, state: PlayerState) -> "GameState":
        """Return a copy with one side replaced."""
        return self.model_copy(update={side.value: state})

    def with_message(self, message: str | None) -> "GameState":
        return self.model_copy(update={"message": message})

    def __str__(self) -> str:
        parts = [f"Move {self.move_count}"]
        if self.game_over:
            parts.append(f"[GAME OVER: {self.winner.value if self.winner else '-'}]")
        else:
            parts.append(f"{self.turn.value}'s turn")
        parts.append(f"deck={self.deck_count}")
        return " ".join(parts)
