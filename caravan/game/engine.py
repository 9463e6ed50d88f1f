"""Game engine for Caravan.

The engine is a pure reducer: every operation takes a GameState and returns
a new one. ``place_card`` is the only operation that commits a move.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from caravan.config import Config, RulesConfig
from caravan.models.card import Card, Rank
from caravan.models.game_state import (
    GameState,
    MoveLogEntry,
    Outcome,
    Pile,
    PlayerState,
    Side,
)
from caravan.models.intent import parse_intent

from .deck import create_shuffled_deck, deal_cards, draw_one
from .evaluator import PileView, PlayerTotals, compute_pile_view, compute_player_totals
from .validator import MoveValidator

logger = logging.getLogger(__name__)

MSG_NOT_YOUR_TURN = "Not your turn."
MSG_NO_SUCH_PILE = "No such pile."
MSG_CHOOSE_TARGET = "Choose a specific card to place J/Q/K onto."
MSG_KING_TARGET = "King must be placed on a number or Ace that is not removed."
MSG_PICTURE_ON_CONTAINER = "Picture cards (J/Q/K) must be dropped onto a specific card."
MSG_INVALID_MOVE = "Invalid move."


def _parse_side(value: Side | str) -> Side | None:
    """Get the Side for a descriptor value, or None if it names no side."""
    try:
        return Side(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a game for rendering layers."""

    hands: dict[Side, tuple[Card, ...]]
    piles: dict[Side, tuple[PileView, ...]]
    totals: dict[Side, PlayerTotals]
    locked: dict[Side, tuple[bool, ...]]
    turn: Side
    ai_enabled: bool
    game_over: bool
    winner: Outcome | None
    banner: str | None
    deck_count: int
    message: str | None
    move_count: int


class GameEngine:
    """Rules and state transitions for a two-sided Caravan game."""

    def __init__(self, config: Config | None = None):
        """Initialize game engine.

        Args:
            config: Configuration (uses defaults if not provided)
        """
        self.config = config or Config()
        self.rules: RulesConfig = self.config.rules
        self.validator = MoveValidator()

    def new_game(
        self,
        rng: random.Random | None = None,
        ai_enabled: bool | None = None,
    ) -> GameState:
        """Shuffle a fresh deck and deal both hands.

        Args:
            rng: Random source for the shuffle
            ai_enabled: Initial AI toggle (config default if None)

        Returns:
            New GameState with the human to move
        """
        deck = create_shuffled_deck(rng)
        player_hand, deck = deal_cards(deck, self.rules.hand_size)
        ai_hand, deck = deal_cards(deck, self.rules.hand_size)

        empty_piles: tuple[Pile, ...] = tuple(() for _ in range(self.rules.pile_count))
        state = GameState(
            deck=deck,
            player=PlayerState(hand=player_hand, piles=empty_piles),
            ai=PlayerState(hand=ai_hand, piles=empty_piles),
            turn=Side.PLAYER,
            ai_enabled=self.config.ai.enabled if ai_enabled is None else ai_enabled,
        )
        logger.debug(f"New game dealt, {state.deck_count} cards left in deck")
        return state

    def place_card(
        self,
        state: GameState,
        actor_side: Side | str,
        target_side: Side | str,
        card_id: str,
        pile_index: int,
        target_index: int | None = None,
    ) -> GameState:
        """Play a card from a hand onto a pile.

        Numbers and Aces are appended; face cards are inserted right after
        the card they target. A rejected move returns the same state with
        only ``message`` changed.

        Args:
            state: Current state
            actor_side: Side playing the card
            target_side: Side owning the pile
            card_id: Id of the card in the actor's hand
            pile_index: Pile of the target side
            target_index: Raw index of the targeted card (face cards)

        Returns:
            New GameState
        """
        if state.game_over:
            return state

        actor_side = _parse_side(actor_side)
        target_side = _parse_side(target_side)
        if actor_side is None or target_side is None:
            logger.debug("Move with an unknown side ignored")
            return state

        if actor_side != state.turn:
            return self._reject(state, MSG_NOT_YOUR_TURN)

        actor = state.side(actor_side)
        card = actor.find_card(card_id)
        if card is None:
            logger.debug(f"{actor_side.value} does not hold {card_id}; ignored")
            return state

        target = state.side(target_side)
        if not 0 <= pile_index < len(target.piles):
            return self._reject(state, MSG_NO_SUCH_PILE)
        pile = target.piles[pile_index]

        validation = self.validator.validate(
            card, pile, actor_side, target_side, target_index
        )
        if not validation.is_valid:
            return self._reject(state, validation.error_message or MSG_INVALID_MOVE)

        new_pile, error = self._resolve_placement(card, pile, target_index)
        if new_pile is None:
            return self._reject(state, error)

        # Draw replaces the played card
        drawn, deck = draw_one(state.deck)
        hand = actor.without_card(card.id)
        if drawn is not None:
            hand = hand + (drawn,)

        next_state = state.with_side(actor_side, actor.with_hand(hand))
        target = next_state.side(target_side)
        next_state = next_state.with_side(target_side, target.with_pile(pile_index, new_pile))

        next_turn = actor_side.opponent
        entry = MoveLogEntry(
            actor=actor_side,
            target=target_side,
            card_rank=card.rank,
            pile_index=pile_index,
            target_index=target_index if card.is_face else None,
            pile_before_size=len(pile),
            ai_enabled_at_move=state.ai_enabled,
            prev_turn=state.turn,
            next_turn=next_turn,
        )

        next_state = next_state.model_copy(
            update={
                "deck": deck,
                "turn": next_turn,
                "message": None,
                "move_count": state.move_count + 1,
                "move_log": state.move_log + (entry,),
            }
        )
        logger.debug(
            f"{actor_side.value} played {card} on {target_side.value} pile {pile_index}"
        )
        return self._check_game_end(next_state)

    def _resolve_placement(
        self,
        card: Card,
        pile: Pile,
        target_index: int | None,
    ) -> tuple[Pile | None, str]:
        """Work out the new pile for an already validated card.

        Returns:
            Tuple of (new_pile, error); new_pile is None when the placement
            cannot be resolved.
        """
        if card.is_numeric_or_ace:
            return pile + (card,), ""

        if target_index is None:
            if pile:
                return None, MSG_CHOOSE_TARGET
            # Only a Queen gets this far on an empty pile
            if card.rank == Rank.KING:
                return None, "King must be placed on a number or Ace."
            return (card,), ""

        cards = list(pile)
        target_card = cards[target_index]
        if card.rank == Rank.KING and not (
            target_card.is_numeric_or_ace and target_card.is_live
        ):
            return None, MSG_KING_TARGET

        cards.insert(target_index + 1, card)
        if card.rank == Rank.JACK:
            cards[target_index] = target_card.mark_removed()
        return tuple(cards), ""

    def _reject(self, state: GameState, message: str) -> GameState:
        logger.debug(f"Move rejected: {message}")
        return state.with_message(message)

    def totals(self, state: GameState, side: Side) -> PlayerTotals:
        """Get pile totals for one side."""
        return compute_player_totals(state.side(side).piles)

    def decide_winner(self, state: GameState) -> Outcome | None:
        """Check the end condition.

        A side qualifies once every one of its piles is within the winning
        range. If both qualify at the same time the higher grand total wins.

        Returns:
            Outcome, or None if nobody qualifies yet
        """
        low, high = self.rules.win_min, self.rules.win_max
        player_totals = self.totals(state, Side.PLAYER)
        ai_totals = self.totals(state, Side.AI)
        player_in = player_totals.all_in_range(low, high)
        ai_in = ai_totals.all_in_range(low, high)

        if not player_in and not ai_in:
            return None
        if player_in and not ai_in:
            return Outcome.PLAYER
        if ai_in and not player_in:
            return Outcome.AI
        if player_totals.total > ai_totals.total:
            return Outcome.PLAYER
        if ai_totals.total > player_totals.total:
            return Outcome.AI
        return Outcome.TIE

    def _check_game_end(self, state: GameState) -> GameState:
        if state.game_over:
            return state
        winner = self.decide_winner(state)
        if winner is None:
            return state
        logger.info(f"Game over after {state.move_count} moves, winner: {winner.value}")
        return state.model_copy(update={"game_over": True, "winner": winner})

    def skip_turn(self, state: GameState, side: Side, message: str | None = None) -> GameState:
        """Pass the turn without playing.

        No card is drawn, nothing is logged and the move count is unchanged.
        """
        if state.game_over or state.turn != side:
            return state
        logger.info(f"{side.value} skipped: {message or 'no move'}")
        return state.model_copy(update={"turn": side.opponent, "message": message})

    def set_ai_enabled(self, state: GameState, enabled: bool) -> GameState:
        """Toggle the automated opponent."""
        return state.model_copy(update={"ai_enabled": enabled})

    # Drop probes and routing for the input layer

    def _intent_card(
        self, state: GameState, payload: str | Mapping[str, Any] | None
    ) -> tuple[Side, Card] | None:
        """Resolve a payload to (actor, card) if it may act right now."""
        intent = parse_intent(payload)
        if intent is None:
            return None
        if state.game_over or intent.owner != state.turn:
            return None
        card = state.side(intent.owner).find_card(intent.card_id)
        if card is None:
            return None
        return intent.owner, card

    def _pile(self, state: GameState, side: Side, pile_index: int) -> Pile | None:
        piles = state.side(side).piles
        if not 0 <= pile_index < len(piles):
            return None
        return piles[pile_index]

    def can_drop_on_pile_container(
        self,
        state: GameState,
        target_side: Side | str,
        pile_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> bool:
        """Check if a dragged card may be dropped on a pile as a whole.

        Only numbers and Aces are dropped on the pile container.
        """
        resolved = self._intent_card(state, payload)
        if resolved is None:
            return False
        actor, card = resolved
        if not card.is_numeric_or_ace:
            return False
        target_side = _parse_side(target_side)
        if target_side is None:
            return False
        pile = self._pile(state, target_side, pile_index)
        if pile is None:
            return False
        return self.validator.is_legal(card, pile, actor, target_side)

    def can_drop_on_pile_card(
        self,
        state: GameState,
        target_side: Side | str,
        pile_index: int,
        target_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> bool:
        """Check if a dragged picture card may be dropped on a specific card."""
        resolved = self._intent_card(state, payload)
        if resolved is None:
            return False
        actor, card = resolved
        if not card.is_face:
            return False
        target_side = _parse_side(target_side)
        if target_side is None:
            return False
        pile = self._pile(state, target_side, pile_index)
        if pile is None:
            return False
        return self.validator.is_legal(card, pile, actor, target_side, target_index)

    def drop_on_pile_container(
        self,
        state: GameState,
        target_side: Side | str,
        pile_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> GameState:
        """Route a drop on a pile container to place_card."""
        resolved = self._intent_card(state, payload)
        if resolved is None or _parse_side(target_side) is None:
            return state
        actor, card = resolved
        if not card.is_numeric_or_ace:
            return state.with_message(MSG_PICTURE_ON_CONTAINER)
        return self.place_card(state, actor, target_side, card.id, pile_index, None)

    def drop_on_pile_card(
        self,
        state: GameState,
        target_side: Side | str,
        pile_index: int,
        target_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> GameState:
        """Route a drop on a specific pile card to place_card."""
        resolved = self._intent_card(state, payload)
        if resolved is None or _parse_side(target_side) is None:
            return state
        actor, card = resolved
        if not card.is_face:
            return state
        return self.place_card(state, actor, target_side, card.id, pile_index, target_index)

    def banner(self, state: GameState) -> str | None:
        """Get the game-over banner text."""
        if not state.game_over:
            return None
        piles = f"all {self.rules.pile_count} piles are {self.rules.win_min}-{self.rules.win_max}"
        if state.winner == Outcome.PLAYER:
            return f"You win ({piles})!"
        if state.winner == Outcome.AI:
            return f"Opponent wins ({piles})!"
        return "It's a tie!"

    def snapshot(self, state: GameState) -> GameSnapshot:
        """Build the read-only view consumed by rendering layers."""
        sides = (Side.PLAYER, Side.AI)
        totals = {side: self.totals(state, side) for side in sides}
        return GameSnapshot(
            hands={side: state.side(side).hand for side in sides},
            piles={
                side: tuple(compute_pile_view(p) for p in state.side(side).piles)
                for side in sides
            },
            totals=totals,
            locked={side: totals[side].locked(self.rules.win_min) for side in sides},
            turn=state.turn,
            ai_enabled=state.ai_enabled,
            game_over=state.game_over,
            winner=state.winner,
            banner=self.banner(state),
            deck_count=state.deck_count,
            message=state.message,
            move_count=state.move_count,
        )
