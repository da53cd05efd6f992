"""Card and Suit types for Palace."""

from dataclasses import dataclass
from enum import Enum


class Suit(str, Enum):
    """Card suits."""

    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"


RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")

# Comparison value used only for legality checks. 2 outranks everything,
# 3 is never compared (it is skipped when reading the pile).
EFFECTIVE_RANK = {
    "2": 15, "3": 3, "4": 4, "5": 5, "6": 6, "7": 7, "8": 8,
    "9": 9, "10": 10, "J": 11, "Q": 12, "K": 13, "A": 14,
}

ALWAYS_PLAYABLE = frozenset({"2", "3", "10"})
TRANSPARENT = "3"
RESET = "2"
BURN = "10"
LOW_GATE = "7"
LOW_GATE_LIMIT = 7


@dataclass(frozen=True)
class Card:
    """A playing card.

    rank is one of RANKS, suit one of the four Suits. Two cards are equal
    when rank and suit match; a standard deck holds each pair once.
    """

    rank: str
    suit: Suit

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid card rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid card suit: {self.suit}")

    @property
    def id(self) -> str:
        return f"{self.rank}{self.suit.value}"

    @property
    def effective_rank(self) -> int:
        return EFFECTIVE_RANK[self.rank]

    @property
    def is_transparent(self) -> bool:
        return self.rank == TRANSPARENT

    def __str__(self) -> str:
        return self.id
