"""Unit tests for drawing from the deck and forced cards."""

from helpers import build_table, card, cards
from palaceagent.engine import (
    ErrorCode,
    ForcedDecision,
    draw_from_deck,
    pick_up_pile,
    play_cards,
    resolve_forced,
)


def test_draw_into_short_hand() -> None:
    state = build_table([["4s", "9s"], ["4d"]], deck=["5h", "6h"])
    result = draw_from_deck(state, "p1")
    assert result.ok
    assert result.drawn_card == card("5h")
    assert result.forced_card is None
    assert state.seats[0].hand == cards("4s", "5h", "9s")
    assert state.deck == cards("6h")
    assert state.forced is None
    assert state.current_seat == 0


def test_draw_with_full_hand_creates_obligation() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["5h", "6h"])
    total = state.card_total()
    result = draw_from_deck(state, "p1")
    assert result.ok
    assert result.forced_card == card("5h")
    assert state.forced.player_id == "p1"
    assert state.forced.card == card("5h")
    assert state.seats[0].hand == cards("4s", "9s", "Js")
    assert state.card_total() == total


def test_obligation_blocks_other_actions() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["5h", "6h"], pile=["4c"])
    draw_from_deck(state, "p1")
    assert play_cards(state, "p1", [0]).error is ErrorCode.OBLIGATION_PENDING
    assert draw_from_deck(state, "p1").error is ErrorCode.OBLIGATION_PENDING
    assert play_cards(state, "p2", [0]).error is ErrorCode.NOT_YOUR_TURN


def test_decline_with_empty_pile() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["5h", "6h"])
    draw_from_deck(state, "p1")
    result = resolve_forced(state, "p1", ForcedDecision.DECLINE)
    assert result.ok
    assert result.picked_up
    assert state.seats[0].hand == cards("4s", "5h", "9s", "Js")
    assert state.pile == []
    assert state.forced is None
    assert state.current_seat == 1


def test_decline_takes_pile() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["Ah"], pile=["Kc", "7d"], must_play_low=True)
    draw_from_deck(state, "p1")
    resolve_forced(state, "p1", ForcedDecision.DECLINE)
    assert state.seats[0].hand == cards("4s", "7d", "9s", "Js", "Kc", "Ah")
    assert not state.must_play_low


def test_play_legal_forced_card() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["9h"], pile=["5s"])
    draw_from_deck(state, "p1")
    result = resolve_forced(state, "p1", ForcedDecision.PLAY)
    assert result.ok
    assert not result.picked_up
    assert state.pile == cards("5s", "9h")
    assert state.forced is None
    assert state.current_seat == 1


def test_play_illegal_forced_card_picks_up() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["4h"], pile=["Ks"])
    draw_from_deck(state, "p1")
    result = resolve_forced(state, "p1", ForcedDecision.PLAY)
    assert result.ok
    assert result.picked_up
    assert state.seats[0].hand == cards("4s", "4h", "9s", "Js", "Ks")
    assert state.pile == []
    assert state.current_seat == 1


def test_forced_seven_sets_gate() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["7h"], pile=["5s"])
    draw_from_deck(state, "p1")
    resolve_forced(state, "p1", "play")
    assert state.must_play_low


def test_forced_ten_burns() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["10h"], pile=["As"])
    draw_from_deck(state, "p1")
    result = resolve_forced(state, "p1", ForcedDecision.PLAY)
    assert result.burned
    assert result.same_player_continues
    assert state.current_seat == 0
    assert state.burn_pile == cards("As", "10h")


def test_pick_up_pile_declines_obligation() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["Ah"], pile=["Kc"])
    draw_from_deck(state, "p1")
    result = pick_up_pile(state, "p1")
    assert result.ok
    assert result.picked_up
    assert state.forced is None
    assert state.seats[0].hand == cards("4s", "9s", "Js", "Kc", "Ah")
    assert state.current_seat == 1


def test_resolve_without_obligation() -> None:
    state = build_table([["4s", "9s", "Js"], ["4d"]], deck=["Ah"])
    assert resolve_forced(state, "p1", ForcedDecision.PLAY).error is ErrorCode.NO_OBLIGATION
    draw_from_deck(state, "p1")
    assert resolve_forced(state, "p2", ForcedDecision.DECLINE).error is ErrorCode.NO_OBLIGATION
    assert state.forced is not None


def test_draw_rejections() -> None:
    state = build_table([["4s"], ["4d"]])
    assert draw_from_deck(state, "p1").error is ErrorCode.EMPTY_DECK
    assert draw_from_deck(state, "p2").error is ErrorCode.NOT_YOUR_TURN

    state = build_table([[], ["4d"]], face_up=[["9s"], []], deck=["5h"])
    assert draw_from_deck(state, "p1").error is ErrorCode.INVALID_SELECTION
    assert state.deck == cards("5h")
