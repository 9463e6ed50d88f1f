"""Card models."""

from enum import Enum

from pydantic import BaseModel


class Suit(str, Enum):
    """Card suit."""

    HEART = "hearts"
    DIAMOND = "diamonds"
    SPADE = "spades"
    CLUB = "clubs"


class Color(str, Enum):
    """Card color, derived from the suit."""

    RED = "red"
    BLACK = "black"


class Rank(str, Enum):
    """Card rank.

    Value is the label printed on the card.
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


# Base pile value of each rank (face cards are effect-only)
RANK_VALUES: dict[Rank, int] = {
    Rank.ACE: 1,
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 0,
    Rank.QUEEN: 0,
    Rank.KING: 0,
}

FACE_RANKS = frozenset({Rank.JACK, Rank.QUEEN, Rank.KING})

SUIT_SYMBOLS = {
    Suit.HEART: "♥",
    Suit.DIAMOND: "♦",
    Suit.SPADE: "♠",
    Suit.CLUB: "♣",
}

SUIT_COLORS = {
    Suit.HEART: Color.RED,
    Suit.DIAMOND: Color.RED,
    Suit.SPADE: Color.BLACK,
    Suit.CLUB: Color.BLACK,
}

# Short suit codes used in card ids and logs
SUIT_CODES: dict[Suit, str] = {
    Suit.HEART: "H",
    Suit.DIAMOND: "D",
    Suit.SPADE: "S",
    Suit.CLUB: "C",
}


class Card(BaseModel, frozen=True):
    """Single card representation.

    Cards are immutable; ghosting a card with a Jack produces a new card
    with ``removed`` set.
    """

    id: str
    suit: Suit
    rank: Rank
    removed: bool = False

    @classmethod
    def of(cls, suit: Suit, rank: Rank) -> "Card":
        """Create a card with the standard id for its suit and rank."""
        return cls(id=f"{SUIT_CODES[suit]}-{rank.value}", suit=suit, rank=rank)

    @property
    def color(self) -> Color:
        return SUIT_COLORS[self.suit]

    @property
    def is_face(self) -> bool:
        """Check if this is a Jack, Queen or King."""
        return self.rank in FACE_RANKS

    @property
    def is_numeric_or_ace(self) -> bool:
        """Check if this card adds to a pile total."""
        return self.rank not in FACE_RANKS

    @property
    def base_value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def is_live(self) -> bool:
        return not self.removed

    def mark_removed(self) -> "Card":
        """Return a ghosted copy of this card."""
        return self.model_copy(update={"removed": True})

    def __str__(self) -> str:
        ghost = " (removed)" if self.removed else ""
        return f"{self.rank.value}{SUIT_SYMBOLS[self.suit]}{ghost}"

    def __repr__(self) -> str:
        return str(self)
