"""Pile evaluation: visible order, scoring and direction.

Everything here is derived from a pile's raw insertion order. Nothing is
stored between calls, so views can never drift from the pile contents.

Scoring:
- A=1, 2-10 literal, J/Q/K are worth 0.
- A King doubles the numeric card it was played on. Kings bound to the same
  card stack multiplicatively (x2, x4, x8, ...).
- Cards ghosted by a Jack contribute 0.

Direction:
- The first two distinct consecutive live numeric values fix ascending or
  descending. Equal values never set a direction.
- Every live Queen flips the direction context from its position onward.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from caravan.models.card import Card, Rank


class Direction(str, Enum):
    """Ordering constraint on a pile's numeric cards."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    @property
    def flipped(self) -> "Direction":
        if self is Direction.ASCENDING:
            return Direction.DESCENDING
        return Direction.ASCENDING

    def allows(self, last_value: int, value: int) -> bool:
        """Check if value strictly continues this direction after last_value."""
        if self is Direction.ASCENDING:
            return value > last_value
        return value < last_value


@dataclass(frozen=True)
class PileEntry:
    """One card of a pile as seen by scoring."""

    card: Card
    index: int
    live: bool
    multiplier: int = 1
    effective_value: int = 0


@dataclass(frozen=True)
class PileView:
    """Computed view of a pile."""

    entries: tuple[PileEntry, ...]
    total: int
    direction: Direction | None
    last_value: int | None  # Value of the last live numeric/Ace card
    live_values: tuple[int, ...]

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(e.card for e in self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class PlayerTotals:
    """Per-pile totals and grand total for one side."""

    per_pile: tuple[int, ...]
    total: int

    def all_in_range(self, low: int, high: int) -> bool:
        """Check if every pile total lies in [low, high]."""
        return bool(self.per_pile) and all(low <= t <= high for t in self.per_pile)

    def locked(self, threshold: int) -> tuple[bool, ...]:
        """Flag piles whose total reached the threshold."""
        return tuple(t >= threshold for t in self.per_pile)


def _slot_multipliers(cards: Sequence[Card]) -> list[int]:
    """Fold raw order into a multiplier per card.

    Each numeric/Ace card opens a slot; a live King multiplies the slot it
    sits in.
    """
    multipliers = [1] * len(cards)
    slot: int | None = None
    for i, card in enumerate(cards):
        if card.is_numeric_or_ace:
            slot = i
        elif card.rank == Rank.KING and card.is_live and slot is not None:
            multipliers[slot] *= 2
    return multipliers


def _scan_direction(cards: Iterable[Card]) -> tuple[Direction | None, int | None]:
    """Fold raw order into (direction, last live numeric value)."""
    direction: Direction | None = None
    reversed_ = False
    last: int | None = None

    for card in cards:
        if not card.is_live:
            continue
        if card.rank == Rank.QUEEN:
            reversed_ = not reversed_
            if direction is not None:
                direction = direction.flipped
            continue
        if not card.is_numeric_or_ace:
            continue

        value = card.base_value
        if direction is None and last is not None and value != last:
            direction = Direction.ASCENDING if value > last else Direction.DESCENDING
            if reversed_:
                direction = direction.flipped
        last = value

    return direction, last


@lru_cache(maxsize=512)
def _compute_pile_view(cards: tuple[Card, ...]) -> PileView:
    multipliers = _slot_multipliers(cards)
    entries = []
    live_values = []
    for i, card in enumerate(cards):
        value = 0
        if card.is_numeric_or_ace and card.is_live:
            value = card.base_value * multipliers[i]
            live_values.append(card.base_value)
        entries.append(
            PileEntry(
                card=card,
                index=i,
                live=card.is_live,
                multiplier=multipliers[i],
                effective_value=value,
            )
        )

    direction, last = _scan_direction(cards)
    return PileView(
        entries=tuple(entries),
        total=sum(e.effective_value for e in entries),
        direction=direction,
        last_value=last,
        live_values=tuple(live_values),
    )


def compute_pile_view(raw_cards: Sequence[Card]) -> PileView:
    """Compute the visible, scored view of a pile.

    Args:
        raw_cards: Pile cards in raw insertion order.

    Returns:
        PileView (memoized per distinct pile).
    """
    return _compute_pile_view(tuple(raw_cards))


def compute_player_totals(piles: Sequence[Sequence[Card]]) -> PlayerTotals:
    """Compute per-pile totals and the grand total."""
    per_pile = tuple(compute_pile_view(pile).total for pile in piles)
    return PlayerTotals(per_pile=per_pile, total=sum(per_pile))


def latest_live_index(raw_cards: Sequence[Card]) -> int | None:
    """Get the index of the last live card in raw order."""
    for i in range(len(raw_cards) - 1, -1, -1):
        if raw_cards[i].is_live:
            return i
    return None
