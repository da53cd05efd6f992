"""Helpers for arranging tables in tests."""

from palaceagent.engine import Card, GameState, Phase, Suit, init_game

SUITS = {"s": Suit.SPADES, "h": Suit.HEARTS, "d": Suit.DIAMONDS, "c": Suit.CLUBS}


def card(label: str) -> Card:
    """'10h' -> ten of hearts, 'Qs' -> queen of spades."""
    return Card(rank=label[:-1], suit=SUITS[label[-1]])


def cards(*labels: str) -> list[Card]:
    return [card(label) for label in labels]


def ranks(seq) -> list[str]:
    return [c.rank for c in seq]


def build_table(
    hands,
    face_up=None,
    face_down=None,
    pile=(),
    deck=(),
    current=0,
    must_play_low=False,
) -> GameState:
    """A table already in the playing phase with the given zones."""
    roster = [(f"p{i + 1}", f"Player {i + 1}") for i in range(len(hands))]
    state = init_game(roster, seed=0)
    for i, player in enumerate(state.seats):
        player.hand = cards(*hands[i])
        player.face_up = cards(*(face_up[i] if face_up else ()))
        player.face_down = cards(*(face_down[i] if face_down else ()))
    state.pile = cards(*pile)
    state.deck = cards(*deck)
    state.current_seat = current
    state.must_play_low = must_play_low
    state.phase = Phase.PLAYING
    return state
