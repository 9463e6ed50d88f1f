"""Move validation for card placements."""

from collections.abc import Sequence
from dataclasses import dataclass

from caravan.models.card import Card, Rank
from caravan.models.game_state import Side

from .evaluator import Direction, compute_pile_view


@dataclass
class ValidationResult:
    """Result of move validation."""

    is_valid: bool
    error_message: str = ""

    def __bool__(self) -> bool:
        return self.is_valid


def _reject(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error_message=message)


def can_place_card_on_target_with_reason(
    card: Card,
    pile_cards: Sequence[Card],
    actor_side: Side,
    target_side: Side,
    target_index: int | None = None,
) -> ValidationResult:
    """Check whether a card may be placed on a pile.

    Checks run in a fixed order: opponent pile rules, then the rules of the
    card's rank. Nothing is mutated.

    Args:
        card: Card being played
        pile_cards: Target pile in raw order
        actor_side: Side playing the card
        target_side: Side owning the pile
        target_index: Targeted card for face cards. None probes whether any
            target would do.

    Returns:
        ValidationResult
    """
    is_empty = len(pile_cards) == 0

    # Opponent piles only take picture cards, and only on existing cards
    if target_side != actor_side:
        if not card.is_face:
            return _reject("Only J/Q/K can be played on an opponent's pile.")
        if is_empty:
            return _reject("Opponent pile is empty; picture cards need a card to target.")

    if card.is_numeric_or_ace:
        return _check_numeric(card, pile_cards)

    if target_index is not None and not 0 <= target_index < len(pile_cards):
        return _reject("Target card does not exist.")

    if card.rank == Rank.KING:
        return _check_king(pile_cards, target_index)

    if card.rank == Rank.JACK:
        if is_empty:
            return _reject("Jack must be placed on an existing card.")
        if target_index is not None and pile_cards[target_index].rank == Rank.JACK:
            return _reject("A Jack cannot be removed by another Jack.")
        return ValidationResult(is_valid=True)

    # Queen: any own pile at any time
    return ValidationResult(is_valid=True)


def _check_numeric(card: Card, pile_cards: Sequence[Card]) -> ValidationResult:
    """Numbers and Aces append and must continue the pile direction."""
    view = compute_pile_view(pile_cards)
    if view.direction is None or view.last_value is None:
        return ValidationResult(is_valid=True)

    if view.direction.allows(view.last_value, card.base_value):
        return ValidationResult(is_valid=True)

    if card.base_value == view.last_value:
        return _reject(f"Equal values cannot continue a direction ({card.base_value}).")
    comparison = "higher" if view.direction is Direction.ASCENDING else "lower"
    return _reject(
        f"Pile is {view.direction.value}: play {comparison} than {view.last_value}."
    )


def _is_king_target(card: Card) -> bool:
    return card.is_numeric_or_ace and card.is_live


def _check_king(pile_cards: Sequence[Card], target_index: int | None) -> ValidationResult:
    """Kings need a live number or Ace to double."""
    if not pile_cards:
        return _reject("King must be placed on a number or Ace.")

    if target_index is None:
        if any(_is_king_target(c) for c in pile_cards):
            return ValidationResult(is_valid=True)
        return _reject("King must be placed on a number or Ace that is not removed.")

    if not _is_king_target(pile_cards[target_index]):
        return _reject("King must be placed on a number or Ace that is not removed.")
    return ValidationResult(is_valid=True)


def can_place_card_on_target(
    card: Card,
    pile_cards: Sequence[Card],
    actor_side: Side,
    target_side: Side,
    target_index: int | None = None,
) -> bool:
    """Boolean form of can_place_card_on_target_with_reason."""
    return can_place_card_on_target_with_reason(
        card, pile_cards, actor_side, target_side, target_index
    ).is_valid


class MoveValidator:
    """Validates card placements."""

    def validate(
        self,
        card: Card,
        pile_cards: Sequence[Card],
        actor_side: Side,
        target_side: Side,
        target_index: int | None = None,
    ) -> ValidationResult:
        """Validate a placement.

        Args:
            card: Card being played
            pile_cards: Target pile in raw order
            actor_side: Side playing the card
            target_side: Side owning the pile
            target_index: Targeted card for face cards

        Returns:
            ValidationResult
        """
        return can_place_card_on_target_with_reason(
            card, pile_cards, actor_side, target_side, target_index
        )

    def is_legal(
        self,
        card: Card,
        pile_cards: Sequence[Card],
        actor_side: Side,
        target_side: Side,
        target_index: int | None = None,
    ) -> bool:
        """Check a placement without the reason."""
        return self.validate(card, pile_cards, actor_side, target_side, target_index).is_valid
