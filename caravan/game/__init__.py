"""Game logic."""

from .deck import create_full_deck, create_shuffled_deck, deal_cards, draw_one
from .engine import GameEngine, GameSnapshot
from .evaluator import (
    Direction,
    PileEntry,
    PileView,
    PlayerTotals,
    compute_pile_view,
    compute_player_totals,
    latest_live_index,
)
from .invariants import InvariantReport, recent_moves, run_invariants
from .validator import (
    MoveValidator,
    ValidationResult,
    can_place_card_on_target,
    can_place_card_on_target_with_reason,
)

__all__ = [
    "Direction",
    "GameEngine",
    "GameSnapshot",
    "InvariantReport",
    "MoveValidator",
    "PileEntry",
    "PileView",
    "PlayerTotals",
    "ValidationResult",
    "can_place_card_on_target",
    "can_place_card_on_target_with_reason",
    "compute_pile_view",
    "compute_player_totals",
    "create_full_deck",
    "create_shuffled_deck",
    "deal_cards",
    "draw_one",
    "latest_live_index",
    "recent_moves",
    "run_invariants",
]
