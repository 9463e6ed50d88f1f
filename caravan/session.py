"""Game session: current state plus the automated opponent's turn.

The session is the single place where the current GameState is replaced.
The AI turn runs as one asyncio task per decision. Every decision carries
a token and the move count captured when it was scheduled; it is dropped if
either no longer matches when the deliberation delay ends.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping
from typing import Any

from caravan.config import Config
from caravan.game.engine import GameEngine, GameSnapshot
from caravan.game.invariants import InvariantReport, run_invariants
from caravan.logging import GameLogger
from caravan.models.game_state import GameState, Side
from caravan.strategy import CandidateMove, Strategy, create_strategy, enumerate_moves

logger = logging.getLogger(__name__)

SKIP_MESSAGES = {
    Side.AI: "Opponent skipped (no valid moves).",
    Side.PLAYER: "You skipped (no valid moves).",
}


class GameSession:
    """Holds one game at a time and drives the AI side."""

    def __init__(
        self,
        config: Config | None = None,
        strategy: Strategy | None = None,
        rng: random.Random | None = None,
        game_logger: GameLogger | None = None,
    ):
        """Initialize session and deal the first game.

        Args:
            config: Configuration (uses defaults if not provided)
            strategy: AI strategy (built from config if not provided)
            rng: Random source for shuffles and AI delays
            game_logger: GameLogger instance for detailed logging
        """
        self.config = config or Config()
        self.engine = GameEngine(self.config)
        self.rng = rng or random.Random(self.config.ai.seed)
        self.strategy = strategy or create_strategy(self.config.ai.strategy, self.rng)
        self.game_logger = game_logger

        self._token = 0
        self._ai_task: asyncio.Task | None = None

        self.game_number = 1
        self.state: GameState = self.engine.new_game(self.rng)
        if self.game_logger:
            self.game_logger.log_game_start(self.game_number, self.state)

    @property
    def token(self) -> int:
        """Current AI decision token."""
        return self._token

    @property
    def ai_pending(self) -> bool:
        return self._ai_task is not None and not self._ai_task.done()

    def snapshot(self) -> GameSnapshot:
        return self.engine.snapshot(self.state)

    def run_invariants(self) -> InvariantReport:
        return run_invariants(self.state)

    # State transitions

    def _apply(self, next_state: GameState) -> GameState:
        """Replace the current state and react to what changed."""
        before = self.state
        self.state = next_state

        if self.game_logger and next_state.move_count > before.move_count:
            self.game_logger.log_move(self.game_number, next_state.move_log[-1], next_state)
        if self.game_logger and next_state.game_over and not before.game_over:
            self.game_logger.log_game_end(self.game_number, next_state)

        self._maybe_schedule_ai()
        return next_state

    def place_card(
        self,
        actor_side: Side | str,
        target_side: Side | str,
        card_id: str,
        pile_index: int,
        target_index: int | None = None,
    ) -> GameState:
        """Commit a move through the engine.

        Returns:
            The new current state
        """
        return self._apply(
            self.engine.place_card(
                self.state, actor_side, target_side, card_id, pile_index, target_index
            )
        )

    def drop_on_pile_container(
        self,
        target_side: Side | str,
        pile_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> GameState:
        return self._apply(
            self.engine.drop_on_pile_container(self.state, target_side, pile_index, payload)
        )

    def drop_on_pile_card(
        self,
        target_side: Side | str,
        pile_index: int,
        target_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> GameState:
        return self._apply(
            self.engine.drop_on_pile_card(
                self.state, target_side, pile_index, target_index, payload
            )
        )

    def can_drop_on_pile_container(
        self,
        target_side: Side | str,
        pile_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> bool:
        return self.engine.can_drop_on_pile_container(
            self.state, target_side, pile_index, payload
        )

    def can_drop_on_pile_card(
        self,
        target_side: Side | str,
        pile_index: int,
        target_index: int,
        payload: str | Mapping[str, Any] | None,
    ) -> bool:
        return self.engine.can_drop_on_pile_card(
            self.state, target_side, pile_index, target_index, payload
        )

    def reset_game(self) -> GameState:
        """Deal a fresh game, dropping any pending AI decision."""
        self._invalidate_ai()
        self.game_number += 1
        self.state = self.engine.new_game(self.rng)
        logger.info(f"Game {self.game_number} dealt")
        if self.game_logger:
            self.game_logger.log_game_start(self.game_number, self.state)
        self._maybe_schedule_ai()
        return self.state

    def set_ai_enabled(self, enabled: bool) -> GameState:
        """Toggle the AI; any pending decision is dropped."""
        self._invalidate_ai()
        return self._apply(self.engine.set_ai_enabled(self.state, enabled))

    def play_turn(self, side: Side, strategy: Strategy | None = None) -> CandidateMove | None:
        """Let a strategy make one move for a side right now.

        If the side has no legal move its turn is skipped.

        Args:
            side: Side to move (must hold the turn)
            strategy: Strategy to use (session AI strategy if None)

        Returns:
            The committed move, or None if the turn was skipped or not ours
        """
        if self.state.game_over or self.state.turn != side:
            return None

        strategy = strategy or self.strategy
        moves = enumerate_moves(self.state, side, self.engine.validator)
        choice = strategy.select_move(self.state, side, moves)

        if choice is None:
            self._apply(self.engine.skip_turn(self.state, side, SKIP_MESSAGES[side]))
            if self.game_logger:
                self.game_logger.log_skip(self.game_number, side, self.state)
            return None

        self.place_card(
            choice.actor, choice.target, choice.card_id, choice.pile_index, choice.target_index
        )
        return choice

    # AI scheduling

    def _ai_should_move(self) -> bool:
        state = self.state
        return state.ai_enabled and not state.game_over and state.turn == Side.AI

    def _invalidate_ai(self) -> None:
        """Advance the token and cancel the pending decision, if any."""
        self._token += 1
        if self._ai_task is not None and not self._ai_task.done():
            self._ai_task.cancel()
        self._ai_task = None

    def _think_delay(self) -> float:
        ai = self.config.ai
        return self.rng.randint(ai.delay_min_ms, ai.delay_max_ms) / 1000

    def is_decision_stale(self, token: int, scheduled_move_count: int) -> bool:
        """Check whether a scheduled AI decision may still be applied."""
        return (
            token != self._token
            or scheduled_move_count != self.state.move_count
            or not self._ai_should_move()
        )

    def schedule_ai_turn(self) -> asyncio.Task | None:
        """Schedule the AI's decision on the running event loop.

        Returns:
            The decision task, or None if the AI is not due to move
        """
        if not self._ai_should_move():
            return None

        self._invalidate_ai()
        token = self._token
        scheduled_move_count = self.state.move_count
        delay = self._think_delay()

        loop = asyncio.get_running_loop()
        self._ai_task = loop.create_task(self._ai_decision(token, scheduled_move_count, delay))
        logger.debug(f"AI decision {token} scheduled in {delay:.2f}s")
        return self._ai_task

    def _maybe_schedule_ai(self) -> None:
        if not self._ai_should_move() or self.ai_pending:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the caller drives the AI with play_turn/wait_for_ai
            return
        self.schedule_ai_turn()

    async def _ai_decision(
        self, token: int, scheduled_move_count: int, delay: float
    ) -> CandidateMove | None:
        await asyncio.sleep(delay)

        if self.is_decision_stale(token, scheduled_move_count):
            logger.debug(f"AI decision {token} is stale; discarded")
            return None

        self._ai_task = None
        return self.play_turn(Side.AI, self.strategy)

    async def wait_for_ai(self) -> CandidateMove | None:
        """Wait for the AI's pending decision, scheduling one if needed.

        Returns:
            The AI's committed move, or None if it skipped or was cancelled
        """
        task = self._ai_task if self.ai_pending else self.schedule_ai_turn()
        if task is None:
            return None
        await asyncio.wait([task])
        if task.cancelled():
            return None
        return task.result()
