"""Deck construction, dealing and drawing.

All functions treat decks as immutable tuples and return new ones.
"""

import random
from collections.abc import Sequence

from caravan.models.card import Card, Rank, Suit


def create_full_deck() -> tuple[Card, ...]:
    """Create the standard 52-card deck in suit/rank order."""
    return tuple(Card.of(suit, rank) for suit in Suit for rank in Rank)


def create_shuffled_deck(rng: random.Random | None = None) -> tuple[Card, ...]:
    """Create a freshly shuffled 52-card deck.

    Args:
        rng: Random source. Uses the module RNG if not provided.

    Returns:
        Shuffled deck; index 0 is the top card.
    """
    cards = list(create_full_deck())
    (rng or random).shuffle(cards)
    return tuple(cards)


def deal_cards(
    deck: Sequence[Card], n: int
) -> tuple[tuple[Card, ...], tuple[Card, ...]]:
    """Deal n cards from the top of the deck.

    Dealing more cards than remain returns everything left.

    Returns:
        Tuple of (dealt, remaining)
    """
    n = max(0, n)
    return tuple(deck[:n]), tuple(deck[n:])


def draw_one(deck: Sequence[Card]) -> tuple[Card | None, tuple[Card, ...]]:
    """Draw the top card.

    Returns:
        Tuple of (card, remaining); card is None when the deck is empty.
    """
    if not deck:
        return None, tuple(deck)
    return deck[0], tuple(deck[1:])
