"""Move intent payloads produced by the input layer."""

import json
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .game_state import Side


class MoveIntent(BaseModel):
    """A card picked up from a hand.

    Wire form: ``{"source": "hand", "owner": "player", "cardId": "H-5"}``
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: Literal["hand"]
    owner: Side
    card_id: str = Field(alias="cardId")


def parse_intent(payload: str | Mapping[str, Any] | None) -> MoveIntent | None:
    """Parse a move intent, returning None for anything malformed.

    Args:
        payload: JSON string or mapping from the input layer.

    Returns:
        MoveIntent, or None if the payload cannot be used.
    """
    if payload is None:
        return None

    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError:
            return None

    if not isinstance(payload, Mapping):
        return None

    try:
        return MoveIntent.model_validate(payload)
    except ValidationError:
        return None
