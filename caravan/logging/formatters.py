"""Formatters for game log output."""

from collections.abc import Sequence

from caravan.models.card import SUIT_CODES, Card
from caravan.models.game_state import GameState, Side


def format_card(card: Card) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Formatted string (e.g., "HA" for Ace of hearts, "S10x" for a
        ghosted 10 of spades).
    """
    ghost = "x" if card.removed else ""
    return f"{SUIT_CODES[card.suit]}{card.rank.value}{ghost}"


def format_cards(cards: Sequence[Card]) -> str:
    """Format cards to a comma-separated string in the given order.

    Returns:
        Comma-separated card strings (e.g., "HA,D5,SK").
        Empty string if no cards.
    """
    return ",".join(format_card(c) for c in cards)


def format_piles(piles: Sequence[Sequence[Card]]) -> list[str]:
    """Format each pile of a side."""
    return [format_cards(p) for p in piles]


def format_hands(state: GameState) -> dict[str, str]:
    """Format both hands to dict keyed by side name."""
    return {side.value: format_cards(state.side(side).hand) for side in Side}
