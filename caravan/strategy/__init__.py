"""Strategy module for automated players."""

from caravan.strategy.base import CandidateMove, Strategy
from caravan.strategy.moves import enumerate_moves
from caravan.strategy.simple import FirstMoveStrategy, RandomStrategy, create_strategy

__all__ = [
    "CandidateMove",
    "FirstMoveStrategy",
    "RandomStrategy",
    "Strategy",
    "create_strategy",
    "enumerate_moves",
]
