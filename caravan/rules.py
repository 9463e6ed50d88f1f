"""Rules text shown to players."""

RULES_TEXT: tuple[str, ...] = (
    "Deck: Standard 52-card deck. Suits: hearts and diamonds (red), spades and clubs (black).",
    "Each player has three piles (caravans) and starts with 5 cards in hand.",
    "Turns: Play one card to a pile, then draw one card (if the deck has cards).",
    "Number cards (2-10) and Ace (1) are appended to a pile and add to its total.",
    "Direction: Once the first two different numbers on a pile set a direction "
    "(ascending or descending), every later number must continue it strictly. "
    "Equal values never set or continue a direction.",
    "Jack: Place onto a specific card to remove it (the Jack stays as 0). "
    "A Jack cannot remove another Jack.",
    "Queen: Place anywhere on your own piles; it reverses the pile's direction.",
    "King: Place onto a number or Ace to double it; Kings on the same card stack "
    "(x2, x4, x8).",
    "Opponent piles: You may only play J/Q/K there, onto a specific card "
    "(the pile must not be empty).",
    "End: As soon as all three of a player's piles are between 21 and 26, "
    "that player wins. If both qualify at once, the higher total wins.",
)


def format_rules() -> str:
    """Render the rules as a bulleted list."""
    return "\n".join(f"- {line}" for line in RULES_TEXT)
