"""Game logger for detailed game replay."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel

from caravan.game.evaluator import compute_player_totals
from caravan.models.game_state import GameState, MoveLogEntry, Side

from .formatters import format_hands, format_piles


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "caravan_log.jsonl"


class GameLogger:
    """Logger for game events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    This allows step-by-step replay of the game.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        if self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def _piles(self, state: GameState) -> dict[str, list[str]]:
        return {side.value: format_piles(state.side(side).piles) for side in Side}

    def _totals(self, state: GameState) -> dict[str, list[int]]:
        return {
            side.value: list(compute_player_totals(state.side(side).piles).per_pile)
            for side in Side
        }

    def log_game_start(self, game_num: int, state: GameState) -> None:
        """Log game start with the dealt hands.

        Args:
            game_num: Game number.
            state: Freshly dealt state.
        """
        self._write({
            "type": "game_start",
            "timestamp": datetime.now().isoformat(),
            "game": game_num,
            "hands": format_hands(state),
            "deck": state.deck_count,
            "first": state.turn.value,
        })

    def log_move(self, game_num: int, entry: MoveLogEntry, state: GameState) -> None:
        """Log a committed move.

        Args:
            game_num: Game number.
            entry: Move log entry appended by the move.
            state: State after the move.
        """
        self._write({
            "type": "move",
            "game": game_num,
            "move": state.move_count,
            "actor": entry.actor.value,
            "target": entry.target.value,
            "card": entry.card_rank.value,
            "pile": entry.pile_index,
            "target_index": entry.target_index,
            "piles": self._piles(state),
            "totals": self._totals(state),
            "deck": state.deck_count,
        })

    def log_skip(self, game_num: int, side: Side, state: GameState) -> None:
        """Log a turn passed without a move."""
        self._write({
            "type": "skip",
            "game": game_num,
            "move": state.move_count,
            "side": side.value,
            "message": state.message,
        })

    def log_game_end(self, game_num: int, state: GameState) -> None:
        """Log game end with results.

        Args:
            game_num: Game number.
            state: Final state.
        """
        self._write({
            "type": "game_end",
            "game": game_num,
            "winner": state.winner.value if state.winner else None,
            "moves": state.move_count,
            "totals": self._totals(state),
        })
