"""Self-diagnosis checks over the move log.

These checks only report. Enforcement happens in the validator; nothing in
here raises or changes state.
"""

from dataclasses import dataclass, field
from typing import Any

from caravan.models.card import FACE_RANKS, Rank
from caravan.models.game_state import GameState


@dataclass
class InvariantReport:
    """Result of an invariant run."""

    errors: list[str] = field(default_factory=list)
    checked: int = 0
    move_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Render the report as shown in the debug panel."""
        if self.ok:
            return f"No issues detected. Checked {self.checked} conditions across {self.move_count} moves."
        lines = ["Issues found:"]
        lines.extend(f"- {e}" for e in self.errors)
        return "\n".join(lines)


def run_invariants(state: GameState) -> InvariantReport:
    """Replay the move log against the consistency rules.

    Each rule reports at most its first violation.

    Args:
        state: Game state whose log and current values are checked

    Returns:
        InvariantReport
    """
    report = InvariantReport(move_count=len(state.move_log))
    log = state.move_log

    # Consecutive moves alternate between actors
    for i in range(1, len(log)):
        prev, curr = log[i - 1], log[i]
        report.checked += 1
        if prev.actor == curr.actor:
            report.errors.append(
                f"Turn alternation violated between moves {i - 1} and {i}: "
                f"{prev.actor.value} moved twice."
            )
            break

    # Turn belongs to the opponent of the last actor
    if not state.game_over and log:
        last = log[-1]
        report.checked += 1
        expected = last.actor.opponent
        if state.turn != expected:
            report.errors.append(
                f"Turn state mismatch: expected {expected.value} after last move by "
                f"{last.actor.value}, but turn is {state.turn.value}."
            )

    for i, entry in enumerate(log):
        if entry.card_rank == Rank.JACK and entry.pile_before_size == 0:
            report.checked += 1
            report.errors.append(f"Invalid Jack play detected at move {i}: Jack on empty pile.")
            break

    for i, entry in enumerate(log):
        if entry.is_opponent_target:
            report.checked += 1
            if entry.card_rank not in FACE_RANKS:
                report.errors.append(
                    f"Invalid opponent-target play at move {i}: "
                    f"{entry.card_rank.value} onto opponent pile."
                )
                break

    report.checked += 1
    if state.deck_count < 0:
        report.errors.append(f"Deck length negative: {state.deck_count}")

    return report


def recent_moves(state: GameState, limit: int = 10) -> list[dict[str, Any]]:
    """Get the last moves as plain dicts for display."""
    return [entry.model_dump(mode="json") for entry in state.move_log[-limit:]]
