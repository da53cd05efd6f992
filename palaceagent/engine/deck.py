"""Deck creation and shuffling."""

import random
from typing import List, Optional

from palaceagent.engine.card import RANKS, Card, Suit

DECK_SIZE = len(Suit) * len(RANKS)


def create_deck(
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """Create a shuffled 52-card deck.

    - 4 suits × 13 ranks, one of each
    - rng wins over seed when both are given; with neither, the
      module-level random source is used
    """
    cards: List[Card] = [Card(rank=rank, suit=suit) for suit in Suit for rank in RANKS]

    if rng is None and seed is not None:
        rng = random.Random(seed)
    if rng is not None:
        rng.shuffle(cards)
    else:
        random.shuffle(cards)

    return cards
