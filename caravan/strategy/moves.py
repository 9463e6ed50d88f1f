"""Legal move enumeration."""

from caravan.game.evaluator import latest_live_index
from caravan.game.validator import MoveValidator
from caravan.models.game_state import GameState, Side

from .base import CandidateMove


def enumerate_moves(
    state: GameState,
    side: Side,
    validator: MoveValidator | None = None,
) -> list[CandidateMove]:
    """List every legal placement for a side.

    Own piles take numbers/Aces at the end and picture cards on the last
    live card. Opponent piles only take picture cards on their last live
    card. Empty piles never receive picture cards here.

    Args:
        state: Current game state
        side: Side to enumerate for
        validator: Validator to filter with

    Returns:
        Candidate moves in hand order, own piles before opponent piles
    """
    validator = validator or MoveValidator()
    opponent = side.opponent
    own_piles = state.side(side).piles
    opponent_piles = state.side(opponent).piles
    moves: list[CandidateMove] = []

    for card in state.side(side).hand:
        for i, pile in enumerate(own_piles):
            if card.is_numeric_or_ace:
                if validator.is_legal(card, pile, side, side):
                    moves.append(CandidateMove(side, side, card.id, i, None))
                continue
            target = latest_live_index(pile)
            if target is not None and validator.is_legal(card, pile, side, side, target):
                moves.append(CandidateMove(side, side, card.id, i, target))

        if not card.is_face:
            continue
        for i, pile in enumerate(opponent_piles):
            target = latest_live_index(pile)
            if target is not None and validator.is_legal(card, pile, side, opponent, target):
                moves.append(CandidateMove(side, opponent, card.id, i, target))

    return moves
