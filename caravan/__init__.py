"""Rules engine for the two-player Caravan card game."""

from caravan.config import Config, load_config
from caravan.game import (
    GameEngine,
    MoveValidator,
    can_place_card_on_target_with_reason,
    compute_pile_view,
    compute_player_totals,
    run_invariants,
)
from caravan.models import Card, GameState, Rank, Side, Suit
from caravan.session import GameSession

__version__ = "0.1.0"

__all__ = [
    "Card",
    "Config",
    "GameEngine",
    "GameSession",
    "GameState",
    "MoveValidator",
    "Rank",
    "Side",
    "Suit",
    "can_place_card_on_target_with_reason",
    "compute_pile_view",
    "compute_player_totals",
    "load_config",
    "run_invariants",
]
