"""Unit tests for deck, dealing and the swap phase."""

import random

import pytest
from helpers import card
from palaceagent.engine import (
    Card,
    Suit,
    ErrorCode,
    Phase,
    confirm_ready,
    create_deck,
    deal,
    init_game,
    swap_card,
)

ROSTER = [("p1", "Alice"), ("p2", "Bob"), ("p3", "Cleo")]


def test_create_deck_size() -> None:
    deck = create_deck(seed=42)
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52


def test_create_deck_reproducible() -> None:
    d1 = create_deck(seed=123)
    d2 = create_deck(seed=123)
    assert [str(c) for c in d1] == [str(c) for c in d2]


def test_create_deck_uses_injected_rng() -> None:
    d1 = create_deck(rng=random.Random(5))
    d2 = create_deck(rng=random.Random(5))
    assert d1 == d2


def test_card_effective_rank() -> None:
    assert card("2s").effective_rank == 15
    assert card("As").effective_rank == 14
    assert card("Jd").effective_rank == 11
    assert card("3h").effective_rank == 3
    assert card("3h").is_transparent
    assert str(card("10h")) == "10♥"


def test_card_rejects_bad_rank() -> None:
    with pytest.raises(ValueError):
        Card(rank="1", suit=Suit.SPADES)


@pytest.mark.parametrize("size", [0, 1, 6])
def test_init_game_roster_size(size: int) -> None:
    roster = [(f"p{i}", f"P{i}") for i in range(size)]
    with pytest.raises(ValueError):
        init_game(roster)


def test_init_game_rejects_duplicate_ids() -> None:
    with pytest.raises(ValueError):
        init_game([("p1", "A"), ("p1", "B")])


def test_deal() -> None:
    state = init_game(ROSTER, seed=1)
    assert state.phase is Phase.SETUP
    result = deal(state)
    assert result.ok
    assert state.phase is Phase.SWAPPING
    for player in state.seats:
        assert len(player.hand) == 3
        assert len(player.face_up) == 3
        assert len(player.face_down) == 3
    assert len(state.deck) == 52 - 9 * 3
    assert state.current_seat == 0
    assert state.pile == []
    assert state.burn_pile == []
    assert state.card_total() == 52


def test_deal_order_from_deck_front() -> None:
    state = init_game(ROSTER, seed=9)
    expected = create_deck(rng=random.Random(9))
    deal(state)
    first = state.seats[0]
    assert first.face_down == expected[0:3]
    assert first.face_up == expected[3:6]
    assert first.hand == expected[6:9]
    assert state.seats[1].face_down == expected[9:12]


def test_deal_only_in_setup() -> None:
    state = init_game(ROSTER, seed=1)
    deal(state)
    before = [list(p.hand) for p in state.seats]
    result = deal(state)
    assert not result.ok
    assert result.error is ErrorCode.INVALID_PHASE
    assert [list(p.hand) for p in state.seats] == before


def test_deal_deterministic_with_seed() -> None:
    s1 = init_game(ROSTER, seed=77)
    s2 = init_game(ROSTER, rng=random.Random(77))
    deal(s1)
    deal(s2)
    for a, b in zip(s1.seats, s2.seats):
        assert (a.hand, a.face_up, a.face_down) == (b.hand, b.face_up, b.face_down)
    assert s1.deck == s2.deck


def test_swap_card() -> None:
    state = init_game(ROSTER, seed=3)
    deal(state)
    p1 = state.seats[0]
    hand_card, up_card = p1.hand[0], p1.face_up[2]
    assert swap_card(state, "p1", 0, 2).ok
    assert p1.hand[0] == up_card
    assert p1.face_up[2] == hand_card
    assert state.card_total() == 52


def test_swap_card_rejections() -> None:
    state = init_game(ROSTER, seed=3)
    assert swap_card(state, "p1", 0, 0).error is ErrorCode.INVALID_PHASE
    deal(state)
    assert swap_card(state, "p1", 3, 0).error is ErrorCode.INVALID_SELECTION
    assert swap_card(state, "p1", 0, -1).error is ErrorCode.INVALID_SELECTION
    assert swap_card(state, "nobody", 0, 0).error is ErrorCode.PLAYER_NOT_FOUND
    assert confirm_ready(state, "p1").ok
    assert swap_card(state, "p1", 0, 0).error is ErrorCode.ALREADY_READY


def test_confirm_ready_starts_play() -> None:
    state = init_game(ROSTER, seed=3)
    deal(state)
    assert not confirm_ready(state, "p1").game_started
    assert confirm_ready(state, "p1").error is ErrorCode.ALREADY_READY
    assert not confirm_ready(state, "p2").game_started
    assert state.phase is Phase.SWAPPING
    result = confirm_ready(state, "p3")
    assert result.ok
    assert result.game_started
    assert state.phase is Phase.PLAYING
    assert state.current_seat == 0
    assert all(not p.ready for p in state.seats)
    assert confirm_ready(state, "p1").error is ErrorCode.INVALID_PHASE
