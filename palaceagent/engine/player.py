"""Per-player card zones."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from palaceagent.engine.card import Card


class Zone(str, Enum):
    """The three card areas a player owns, in play order."""

    HAND = "hand"
    FACE_UP = "face_up"
    FACE_DOWN = "face_down"


@dataclass
class Player:
    """A seated player and their three zones.

    hand is private to the owner, face_up is public, face_down is hidden
    from everyone (including the owner) and played blind.
    """

    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    face_up: List[Card] = field(default_factory=list)
    face_down: List[Card] = field(default_factory=list)
    ready: bool = False
    finished: bool = False
    finish_order: Optional[int] = None

    def zone(self, zone: Zone) -> List[Card]:
        if zone is Zone.HAND:
            return self.hand
        if zone is Zone.FACE_UP:
            return self.face_up
        return self.face_down

    def active_zone(self) -> Optional[Zone]:
        """First non-empty zone of hand, face_up, face_down."""
        for zone in Zone:
            if self.zone(zone):
                return zone
        return None

    def card_count(self) -> int:
        return len(self.hand) + len(self.face_up) + len(self.face_down)

    def is_empty(self) -> bool:
        return self.card_count() == 0

    def sort_hand(self) -> None:
        self.hand.sort(key=lambda c: c.effective_rank)
