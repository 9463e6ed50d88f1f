"""Tests for the game engine."""

import json
import random

import pytest

from caravan.config import Config, RulesConfig
from caravan.game.engine import (
    MSG_CHOOSE_TARGET,
    MSG_NOT_YOUR_TURN,
    MSG_NO_SUCH_PILE,
    MSG_PICTURE_ON_CONTAINER,
    GameEngine,
)
from caravan.game.evaluator import Direction
from caravan.models.card import Card, Rank, Suit
from caravan.models.game_state import GameState, Outcome, PlayerState, Side


def _c(rank: str, suit: Suit = Suit.HEART, removed: bool = False) -> Card:
    card = Card.of(suit, Rank(rank))
    return card.mark_removed() if removed else card


def _payload(owner: str, card_id: str) -> dict:
    return {"source": "hand", "owner": owner, "cardId": card_id}


@pytest.fixture
def engine():
    return GameEngine()


@pytest.fixture
def state():
    """Hand-built opening position with the human to move."""
    return GameState(
        deck=tuple(_c(r, Suit.CLUB) for r in ("2", "3", "4", "5", "6", "7")),
        player=PlayerState(
            hand=(_c("A"), _c("5"), _c("3"), _c("7"), _c("Q", Suit.SPADE)),
        ),
        ai=PlayerState(
            hand=(
                _c("2", Suit.DIAMOND),
                _c("9", Suit.DIAMOND),
                _c("J", Suit.DIAMOND),
                _c("K", Suit.DIAMOND),
                _c("Q", Suit.DIAMOND),
            ),
        ),
    )


def _pile_view(engine: GameEngine, state: GameState, side: Side, index: int):
    return engine.snapshot(state).piles[side][index]


class TestNewGame:
    """Tests for dealing a new game."""

    def test_fresh_game(self, engine):
        """Test deal sizes and the starting turn."""
        state = engine.new_game(random.Random(1))

        assert state.deck_count == 42
        assert len(state.player.hand) == 5
        assert len(state.ai.hand) == 5
        assert state.turn == Side.PLAYER
        assert state.move_count == 0
        assert not state.game_over
        assert state.player.piles == ((), (), ())
        assert state.ai.piles == ((), (), ())

    def test_all_cards_accounted_for(self, engine):
        state = engine.new_game(random.Random(7))
        ids = [c.id for c in state.deck + state.player.hand + state.ai.hand]

        assert len(ids) == 52
        assert len(set(ids)) == 52

    def test_rules_config(self):
        engine = GameEngine(Config(rules=RulesConfig(hand_size=8, pile_count=2)))
        state = engine.new_game(random.Random(3))

        assert len(state.player.hand) == 8
        assert state.deck_count == 36
        assert len(state.ai.piles) == 2

    def test_ai_enabled_override(self, engine):
        assert not engine.new_game(random.Random(1), ai_enabled=False).ai_enabled


class TestPlaceCard:
    """Tests for committing moves."""

    def test_number_on_empty_pile(self, engine, state):
        """Test a successful move draws, flips the turn and logs."""
        next_state = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 0)

        assert next_state.player.piles[0] == (_c("A"),)
        assert _c("A") not in next_state.player.hand
        assert next_state.player.hand[-1] == state.deck[0]
        assert len(next_state.player.hand) == 5
        assert next_state.deck_count == state.deck_count - 1
        assert next_state.turn == Side.AI
        assert next_state.move_count == 1
        assert next_state.message is None

        entry = next_state.move_log[-1]
        assert entry.actor == Side.PLAYER
        assert entry.target == Side.PLAYER
        assert entry.card_rank == Rank.ACE
        assert entry.pile_index == 0
        assert entry.target_index is None
        assert entry.pile_before_size == 0
        assert entry.prev_turn == Side.PLAYER
        assert entry.next_turn == Side.AI

    def test_original_state_untouched(self, engine, state):
        before = state.model_copy()
        engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 0)
        assert state == before

    def test_accepts_side_strings(self, engine, state):
        next_state = engine.place_card(state, "player", "player", "H-A", 0)
        assert next_state.move_count == 1

    def test_empty_deck_shrinks_hand(self, engine, state):
        state = state.model_copy(update={"deck": ()})
        next_state = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 0)

        assert len(next_state.player.hand) == 4
        assert next_state.deck_count == 0

    def test_direction_scenario(self, engine, state):
        """Test Ace then 5 ascending, a rejected 3, then a Queen flip."""
        s = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 0)
        s = engine.place_card(s, Side.AI, Side.AI, "D-9", 0)
        s = engine.place_card(s, Side.PLAYER, Side.PLAYER, "H-5", 0)

        view = _pile_view(engine, s, Side.PLAYER, 0)
        assert view.total == 6
        assert view.direction == Direction.ASCENDING

        s = engine.place_card(s, Side.AI, Side.AI, "D-2", 0)
        rejected = engine.place_card(s, Side.PLAYER, Side.PLAYER, "H-3", 0)
        assert rejected.message == "Pile is ascending: play higher than 5."
        assert rejected.player == s.player
        assert rejected.deck == s.deck
        assert rejected.turn == Side.PLAYER
        assert rejected.move_count == s.move_count

        s = engine.place_card(s, Side.PLAYER, Side.PLAYER, "S-Q", 0, 1)
        assert s.player.piles[0] == (_c("A"), _c("5"), _c("Q", Suit.SPADE))
        assert _pile_view(engine, s, Side.PLAYER, 0).direction == Direction.DESCENDING

        s = engine.place_card(s, Side.AI, Side.AI, "D-Q", 0, 1)
        rejected = engine.place_card(s, Side.PLAYER, Side.PLAYER, "H-7", 0)
        assert rejected.message == "Pile is descending: play lower than 5."

        s = engine.place_card(s, Side.PLAYER, Side.PLAYER, "H-3", 0)
        assert s.message is None
        assert _pile_view(engine, s, Side.PLAYER, 0).total == 9

    def test_not_your_turn(self, engine, state):
        next_state = engine.place_card(state, Side.AI, Side.AI, "D-9", 0)

        assert next_state.message == MSG_NOT_YOUR_TURN
        assert next_state.ai == state.ai
        assert next_state.turn == Side.PLAYER

    def test_card_not_in_hand(self, engine, state):
        assert engine.place_card(state, Side.PLAYER, Side.PLAYER, "S-10", 0) is state

    @pytest.mark.parametrize("actor, target", [("bogus", "player"), ("player", "dealer")])
    def test_unknown_side_ignored(self, engine, state, actor, target):
        """Test a move naming no real side leaves the state untouched."""
        assert engine.place_card(state, actor, target, "H-A", 0) is state

    def test_no_such_pile(self, engine, state):
        next_state = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 5)
        assert next_state.message == MSG_NO_SUCH_PILE
        assert next_state.player == state.player

    def test_number_on_opponent_pile(self, engine, state):
        state = state.model_copy(update={"ai": state.ai.with_pile(0, (_c("4", Suit.DIAMOND),))})
        next_state = engine.place_card(state, Side.PLAYER, Side.AI, "H-A", 0)

        assert next_state.message == "Only J/Q/K can be played on an opponent's pile."
        assert next_state.ai == state.ai

    def test_face_card_needs_target(self, engine, state):
        state = state.model_copy(update={"player": state.player.with_pile(0, (_c("4", Suit.SPADE),))})
        next_state = engine.place_card(state, Side.PLAYER, Side.PLAYER, "S-Q", 0)

        assert next_state.message == MSG_CHOOSE_TARGET
        assert next_state.player == state.player

    def test_queen_on_empty_own_pile(self, engine, state):
        next_state = engine.place_card(state, Side.PLAYER, Side.PLAYER, "S-Q", 1)
        assert next_state.player.piles[1] == (_c("Q", Suit.SPADE),)

    def test_king_on_empty_pile(self, engine, state):
        state = state.model_copy(update={"turn": Side.AI})
        next_state = engine.place_card(state, Side.AI, Side.AI, "D-K", 0)

        assert next_state.message == "King must be placed on a number or Ace."
        assert next_state.ai == state.ai

    def test_king_doubles(self, engine, state):
        state = state.model_copy(
            update={"turn": Side.AI, "ai": state.ai.with_pile(2, (_c("10", Suit.DIAMOND),))}
        )
        next_state = engine.place_card(state, Side.AI, Side.AI, "D-K", 2, 0)

        assert next_state.ai.piles[2] == (_c("10", Suit.DIAMOND), _c("K", Suit.DIAMOND))
        assert engine.totals(next_state, Side.AI).per_pile == (0, 0, 20)
        assert next_state.move_log[-1].target_index == 0

    def test_face_card_inserted_after_target(self, engine, state):
        pile = (_c("A", Suit.SPADE), _c("5", Suit.SPADE))
        state = state.model_copy(update={"player": state.player.with_pile(0, pile)})
        next_state = engine.place_card(state, Side.PLAYER, Side.PLAYER, "S-Q", 0, 0)

        assert next_state.player.piles[0] == (
            _c("A", Suit.SPADE),
            _c("Q", Suit.SPADE),
            _c("5", Suit.SPADE),
        )

    def test_jack_ghosts_opponent_card(self, engine, state):
        """Test a Jack marks its target removed and the card stays in the pile."""
        state = state.model_copy(
            update={"player": state.player.with_pile(0, (_c("8", Suit.SPADE), _c("9", Suit.SPADE)))}
        )
        s = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 1)
        s = engine.place_card(s, Side.AI, Side.PLAYER, "D-J", 0, 1)

        assert s.player.piles[0] == (
            _c("8", Suit.SPADE),
            _c("9", Suit.SPADE, removed=True),
            _c("J", Suit.DIAMOND),
        )
        assert engine.totals(s, Side.PLAYER).per_pile == (8, 1, 0)

        entry = s.move_log[-1]
        assert entry.is_opponent_target
        assert entry.target_index == 1
        assert entry.pile_before_size == 2

    def test_jack_cannot_target_jack(self, engine, state):
        pile = (_c("8", Suit.SPADE, removed=True), _c("J", Suit.SPADE))
        state = state.model_copy(
            update={"turn": Side.AI, "player": state.player.with_pile(0, pile)}
        )
        next_state = engine.place_card(state, Side.AI, Side.PLAYER, "D-J", 0, 1)

        assert next_state.message == "A Jack cannot be removed by another Jack."
        assert next_state.player == state.player

    def test_message_cleared_by_next_move(self, engine, state):
        s = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 9)
        assert s.message == MSG_NO_SUCH_PILE
        s = engine.place_card(s, Side.PLAYER, Side.PLAYER, "H-A", 0)
        assert s.message is None


@pytest.fixture
def near_win():
    """Player one Ace away from 21/22/22, AI with empty piles."""
    return GameState(
        deck=(_c("2", Suit.CLUB),),
        player=PlayerState(
            hand=(_c("A"), _c("3", Suit.CLUB)),
            piles=(
                (_c("10"), _c("10", Suit.DIAMOND)),
                (_c("10", Suit.SPADE), _c("10", Suit.CLUB), _c("2")),
                (_c("9", Suit.SPADE), _c("9", Suit.CLUB), _c("4", Suit.DIAMOND)),
            ),
        ),
        ai=PlayerState(hand=(_c("5", Suit.DIAMOND),)),
    )


class TestGameEnd:
    """Tests for the end condition."""

    def test_player_wins(self, engine, near_win):
        s = engine.place_card(near_win, Side.PLAYER, Side.PLAYER, "H-A", 0)

        assert s.game_over
        assert s.winner == Outcome.PLAYER
        assert engine.totals(s, Side.PLAYER).per_pile == (21, 22, 22)
        assert engine.banner(s) == "You win (all 3 piles are 21-26)!"

    def test_no_op_after_game_over(self, engine, near_win):
        s = engine.place_card(near_win, Side.PLAYER, Side.PLAYER, "H-A", 0)

        assert engine.place_card(s, Side.AI, Side.AI, "D-5", 0) is s
        assert engine.skip_turn(s, Side.AI) is s

    def test_both_qualify_higher_total_wins(self, engine, near_win):
        ai_piles = (
            (_c("10"), _c("10", Suit.DIAMOND), _c("2", Suit.SPADE)),
            near_win.player.piles[1],
            near_win.player.piles[2],
        )
        state = near_win.model_copy(update={"ai": near_win.ai.model_copy(update={"piles": ai_piles})})
        s = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 0)

        assert s.game_over
        assert s.winner == Outcome.AI
        assert engine.banner(s) == "Opponent wins (all 3 piles are 21-26)!"

    def test_both_qualify_equal_totals_tie(self, engine, near_win):
        ai_piles = (
            (_c("10"), _c("10", Suit.DIAMOND), _c("A", Suit.SPADE)),
            near_win.player.piles[1],
            near_win.player.piles[2],
        )
        state = near_win.model_copy(update={"ai": near_win.ai.model_copy(update={"piles": ai_piles})})
        s = engine.place_card(state, Side.PLAYER, Side.PLAYER, "H-A", 0)

        assert s.winner == Outcome.TIE
        assert engine.banner(s) == "It's a tie!"

    def test_not_over_below_range(self, engine, near_win):
        s = engine.place_card(near_win, Side.PLAYER, Side.PLAYER, "C-3", 2)

        assert not s.game_over
        assert s.winner is None
        assert engine.decide_winner(s) is None
        assert engine.banner(s) is None

    def test_over_range(self, engine, near_win):
        """Test 27 on one pile does not qualify."""
        player = near_win.player.with_pile(
            0, (_c("10"), _c("10", Suit.DIAMOND), _c("7", Suit.SPADE))
        )
        assert engine.decide_winner(near_win.model_copy(update={"player": player})) is None


class TestSkipAndToggle:
    def test_skip_turn(self, engine, state):
        s = engine.skip_turn(state, Side.PLAYER, "You skipped (no valid moves).")

        assert s.turn == Side.AI
        assert s.message == "You skipped (no valid moves)."
        assert s.move_count == state.move_count
        assert s.move_log == state.move_log
        assert s.deck == state.deck

    def test_skip_wrong_side(self, engine, state):
        assert engine.skip_turn(state, Side.AI) is state

    def test_set_ai_enabled(self, engine, state):
        assert not engine.set_ai_enabled(state, False).ai_enabled


class TestDrops:
    """Tests for drop probes and routing."""

    def test_can_drop_number_on_container(self, engine, state):
        assert engine.can_drop_on_pile_container(state, Side.PLAYER, 0, _payload("player", "H-A"))
        assert engine.can_drop_on_pile_container(
            state, "player", 0, json.dumps(_payload("player", "H-A"))
        )

    def test_cannot_drop_picture_on_container(self, engine, state):
        assert not engine.can_drop_on_pile_container(state, Side.PLAYER, 0, _payload("player", "S-Q"))

    def test_cannot_drop_out_of_turn(self, engine, state):
        assert not engine.can_drop_on_pile_container(state, Side.AI, 0, _payload("ai", "D-9"))

    @pytest.mark.parametrize(
        "payload",
        [None, "garbage", {"source": "hand", "owner": "player"}, _payload("player", "S-10")],
    )
    def test_bad_payloads(self, engine, state, payload):
        assert not engine.can_drop_on_pile_container(state, Side.PLAYER, 0, payload)
        assert engine.drop_on_pile_container(state, Side.PLAYER, 0, payload) is state

    def test_unknown_target_side(self, engine, state):
        """Test drops onto an unknown side are refused without raising."""
        number, picture = _payload("player", "H-A"), _payload("player", "S-Q")

        assert not engine.can_drop_on_pile_container(state, "bogus", 0, number)
        assert not engine.can_drop_on_pile_card(state, "bogus", 0, 0, picture)
        assert engine.drop_on_pile_container(state, "bogus", 0, number) is state
        assert engine.drop_on_pile_container(state, "bogus", 0, picture) is state
        assert engine.drop_on_pile_card(state, "bogus", 0, 0, picture) is state

    def test_cannot_drop_on_missing_pile(self, engine, state):
        assert not engine.can_drop_on_pile_container(state, Side.PLAYER, 3, _payload("player", "H-A"))

    def test_drop_on_container_places_card(self, engine, state):
        s = engine.drop_on_pile_container(state, Side.PLAYER, 2, _payload("player", "H-5"))

        assert s.player.piles[2] == (_c("5"),)
        assert s.turn == Side.AI

    def test_drop_picture_on_container_sets_message(self, engine, state):
        s = engine.drop_on_pile_container(state, Side.PLAYER, 0, _payload("player", "S-Q"))

        assert s.message == MSG_PICTURE_ON_CONTAINER
        assert s.player == state.player
        assert s.turn == Side.PLAYER

    def test_drop_on_card(self, engine, state):
        state = state.model_copy(update={"ai": state.ai.with_pile(0, (_c("6", Suit.DIAMOND),))})
        payload = _payload("player", "S-Q")

        assert engine.can_drop_on_pile_card(state, Side.AI, 0, 0, payload)
        s = engine.drop_on_pile_card(state, Side.AI, 0, 0, payload)
        assert s.ai.piles[0] == (_c("6", Suit.DIAMOND), _c("Q", Suit.SPADE))

    def test_number_dropped_on_card_is_ignored(self, engine, state):
        state = state.model_copy(update={"player": state.player.with_pile(0, (_c("6", Suit.SPADE),))})
        payload = _payload("player", "H-7")

        assert not engine.can_drop_on_pile_card(state, Side.PLAYER, 0, 0, payload)
        assert engine.drop_on_pile_card(state, Side.PLAYER, 0, 0, payload) is state


class TestSnapshot:
    def test_snapshot(self, engine, near_win):
        snap = engine.snapshot(near_win)

        assert snap.totals[Side.PLAYER].per_pile == (20, 22, 22)
        assert snap.locked[Side.PLAYER] == (False, True, True)
        assert snap.locked[Side.AI] == (False, False, False)
        assert snap.hands[Side.PLAYER] == near_win.player.hand
        assert snap.banner is None
        assert snap.deck_count == 1
        assert snap.turn == Side.PLAYER
