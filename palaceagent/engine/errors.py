"""Rule rejections and action results."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from palaceagent.engine.card import Card


class ErrorCode(str, Enum):
    """Why the engine refused an action. A refused action changes nothing."""

    INVALID_PHASE = "invalid_phase"
    NOT_YOUR_TURN = "not_your_turn"
    PLAYER_NOT_FOUND = "player_not_found"
    ALREADY_READY = "already_ready"
    ALREADY_FINISHED = "already_finished"
    INVALID_SELECTION = "invalid_selection"
    MIXED_RANK_SELECTION = "mixed_rank_selection"
    ILLEGAL_CARD = "illegal_card"
    EMPTY_PILE = "empty_pile"
    EMPTY_DECK = "empty_deck"
    OBLIGATION_PENDING = "obligation_pending"
    NO_OBLIGATION = "no_obligation"


@dataclass
class ActionResult:
    """Outcome of one engine operation."""

    ok: bool
    error: Optional[ErrorCode] = None
    message: str = ""
    burned: bool = False
    picked_up: bool = False
    finished: bool = False
    same_player_continues: bool = False
    game_started: bool = False
    game_over: bool = False
    drawn_card: Optional[Card] = None
    forced_card: Optional[Card] = None
    revealed_card: Optional[Card] = None

    @classmethod
    def fail(cls, error: ErrorCode, message: str) -> "ActionResult":
        return cls(ok=False, error=error, message=message)
