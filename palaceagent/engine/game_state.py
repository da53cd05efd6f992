"""Game state for Palace."""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from palaceagent.engine.card import Card
from palaceagent.engine.player import Player


class Phase(str, Enum):
    """Table phases. Transitions only move forward."""

    SETUP = "setup"
    SWAPPING = "swapping"
    PLAYING = "playing"
    ENDED = "ended"


@dataclass(frozen=True)
class Obligation:
    """A drawn card that its owner must play or decline before anything else."""

    player_id: str
    card: Card


@dataclass
class GameState:
    """Mutable Palace table state. Operations in rules.py mutate it."""

    seats: List[Player]
    seat_index: Dict[str, int]  # player_id -> position in seats
    deck: List[Card] = field(default_factory=list)  # drawn from the front
    pile: List[Card] = field(default_factory=list)  # top is last
    burn_pile: List[Card] = field(default_factory=list)
    phase: Phase = Phase.SETUP
    current_seat: int = 0
    must_play_low: bool = False
    forced: Optional[Obligation] = None
    abandoned_by: Optional[str] = None
    history: List[str] = field(default_factory=list)  # Log of events
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def player(self, player_id: str) -> Optional[Player]:
        idx = self.seat_index.get(player_id)
        return self.seats[idx] if idx is not None else None

    def current_player(self) -> Player:
        return self.seats[self.current_seat]

    def pile_top(self) -> Optional[Card]:
        """Return the most recently played card."""
        return self.pile[-1] if self.pile else None

    def effective_top(self) -> Optional[Card]:
        """Most recent non-3 on the pile, or None if there is none."""
        for card in reversed(self.pile):
            if not card.is_transparent:
                return card
        return None

    def card_total(self) -> int:
        """Cards in every location. Constant for the life of a dealt game."""
        total = len(self.deck) + len(self.pile) + len(self.burn_pile)
        total += sum(p.card_count() for p in self.seats)
        if self.forced is not None:
            total += 1
        return total


@dataclass
class OpponentView:
    """What a player may see of somebody else."""

    id: str
    name: str
    hand_count: int
    face_up: List[Card]
    face_down_count: int
    ready: bool
    finished: bool
    finish_order: Optional[int]


@dataclass
class PlayerView:
    """Filtered game state visible to a single player.

    Contains only that player's hand, a count of their own face-down
    cards, and public info about the table and opponents.
    """

    player_id: str
    phase: Phase
    current_player: str
    current_player_name: str
    is_my_turn: bool
    pile: List[Card]
    pile_top: Optional[Card]
    pile_count: int
    effective_top: Optional[Card]
    deck_count: int
    burn_count: int
    must_play_low: bool
    my_hand: List[Card]
    my_face_up: List[Card]
    my_face_down_count: int
    ready: bool
    finished: bool
    finish_order: Optional[int]
    forced_card: Optional[Card]
    forced_card_playable: Optional[bool]
    opponents: List[OpponentView]
    winner: Optional[str]
    loser: Optional[str]
    history: List[str]  # Recent game events

    @classmethod
    def from_state(cls, state: GameState, player_id: str) -> "PlayerView":
        """Create a player view from full game state, hiding private cards."""
        from palaceagent.engine.rules import can_play, get_loser, get_winner

        me = state.player(player_id)
        if me is None:
            raise ValueError(f"Unknown player: {player_id}")

        current = state.current_player()
        forced_card = None
        forced_playable = None
        if state.forced is not None and state.forced.player_id == player_id:
            forced_card = state.forced.card
            forced_playable = can_play(state, forced_card)

        opponents = [
            OpponentView(
                id=p.id,
                name=p.name,
                hand_count=len(p.hand),
                face_up=list(p.face_up),
                face_down_count=len(p.face_down),
                ready=p.ready,
                finished=p.finished,
                finish_order=p.finish_order,
            )
            for p in state.seats
            if p.id != player_id
        ]

        winner = loser = None
        if state.phase is Phase.ENDED:
            won = get_winner(state)
            lost = get_loser(state)
            winner = won.name if won else None
            loser = lost.name if lost else None

        return cls(
            player_id=player_id,
            phase=state.phase,
            current_player=current.id,
            current_player_name=current.name,
            is_my_turn=current.id == player_id and state.phase is Phase.PLAYING,
            pile=list(state.pile),
            pile_top=state.pile_top(),
            pile_count=len(state.pile),
            effective_top=state.effective_top(),
            deck_count=len(state.deck),
            burn_count=len(state.burn_pile),
            must_play_low=state.must_play_low,
            my_hand=list(me.hand),
            my_face_up=list(me.face_up),
            my_face_down_count=len(me.face_down),
            ready=me.ready,
            finished=me.finished,
            finish_order=me.finish_order,
            forced_card=forced_card,
            forced_card_playable=forced_playable,
            opponents=opponents,
            winner=winner,
            loser=loser,
            history=list(state.history[-10:]),  # Last 10 events
        )
