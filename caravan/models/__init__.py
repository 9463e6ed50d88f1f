"""Game models."""

from .card import Card, Color, Rank, Suit
from .game_state import GameState, MoveLogEntry, Outcome, Pile, PlayerState, Side
from .intent import MoveIntent, parse_intent

__all__ = [
    "Card",
    "Color",
    "Rank",
    "Suit",
    "GameState",
    "MoveLogEntry",
    "Outcome",
    "Pile",
    "PlayerState",
    "Side",
    "MoveIntent",
    "parse_intent",
]
