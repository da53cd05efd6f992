"""Palace rules: legal actions and state transitions.

Every operation validates first and mutates only once the action is
known to be accepted, so a rejected ActionResult leaves the state as it
was. The engine is not thread-safe; one game must be driven by a single
caller at a time.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from palaceagent.engine.card import (
    ALWAYS_PLAYABLE,
    BURN,
    LOW_GATE,
    LOW_GATE_LIMIT,
    RESET,
    TRANSPARENT,
    Card,
)
from palaceagent.engine.deck import create_deck
from palaceagent.engine.errors import ActionResult, ErrorCode
from palaceagent.engine.game_state import GameState, Obligation, Phase
from palaceagent.engine.player import Player, Zone

MIN_PLAYERS = 2
MAX_PLAYERS = 5
ZONE_SIZE = 3
BURN_RUN = 4


@dataclass
class SwapCard:
    """Action: exchange a hand card with a face-up card before play starts."""

    hand_index: int
    face_up_index: int


@dataclass
class ConfirmReady:
    """Action: finish swapping."""

    pass


@dataclass
class PlayCards:
    """Action: play one or more same-rank cards from the active zone."""

    indices: Tuple[int, ...]


@dataclass
class PickUpPile:
    """Action: take the whole pile into hand."""

    pass


@dataclass
class DrawFromDeck:
    """Action: draw one card from the deck."""

    pass


class ForcedDecision(str, Enum):
    """What to do with a forced card."""

    PLAY = "play"
    DECLINE = "decline"


@dataclass
class ResolveForced:
    """Action: play or decline the forced card."""

    decision: ForcedDecision


Action = Union[SwapCard, ConfirmReady, PlayCards, PickUpPile, DrawFromDeck, ResolveForced]


def init_game(
    roster: Sequence[Tuple[str, str]],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> GameState:
    """Create a table for an ordered roster of (player_id, name) pairs."""
    if not MIN_PLAYERS <= len(roster) <= MAX_PLAYERS:
        raise ValueError(
            f"Palace needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(roster)}"
        )
    ids = [pid for pid, _ in roster]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate player ids in roster: {ids}")

    seats = [Player(id=pid, name=name) for pid, name in roster]
    return GameState(
        seats=seats,
        seat_index={p.id: i for i, p in enumerate(seats)},
        rng=rng if rng is not None else random.Random(seed),
    )


def can_play(state: GameState, card: Card) -> bool:
    """Check if a card can be played on the current pile."""
    if not state.pile:
        return True
    if card.rank in ALWAYS_PLAYABLE:
        return True
    if state.must_play_low:
        return card.effective_rank <= LOW_GATE_LIMIT
    top = state.effective_top()
    if top is None:
        return True
    # A 2 resets the pile: anything may follow it
    if top.rank == RESET:
        return True
    return card.effective_rank >= top.effective_rank


def deal(state: GameState) -> ActionResult:
    """Shuffle a fresh deck and deal face-down, face-up, then hand cards."""
    if state.phase is not Phase.SETUP:
        return ActionResult.fail(ErrorCode.INVALID_PHASE, "Cards have already been dealt")

    deck = create_deck(rng=state.rng)
    for player in state.seats:
        player.face_down = deck[:ZONE_SIZE]
        del deck[:ZONE_SIZE]
        player.face_up = deck[:ZONE_SIZE]
        del deck[:ZONE_SIZE]
        player.hand = deck[:ZONE_SIZE]
        del deck[:ZONE_SIZE]
        player.ready = False
        player.finished = False
        player.finish_order = None

    state.deck = deck
    state.pile = []
    state.burn_pile = []
    state.must_play_low = False
    state.forced = None
    state.current_seat = 0
    state.phase = Phase.SWAPPING
    state.history.append(f"Dealt {len(state.seats)} players, {len(deck)} cards left in deck")
    return ActionResult(ok=True)


def swap_card(
    state: GameState, player_id: str, hand_index: int, face_up_index: int
) -> ActionResult:
    """Exchange a hand card with a face-up card before play starts."""
    if state.phase is not Phase.SWAPPING:
        return ActionResult.fail(ErrorCode.INVALID_PHASE, "Cannot swap cards now")
    player = state.player(player_id)
    if player is None:
        return ActionResult.fail(ErrorCode.PLAYER_NOT_FOUND, f"Unknown player: {player_id}")
    if player.ready:
        return ActionResult.fail(ErrorCode.ALREADY_READY, "Already ready")
    if not (0 <= hand_index < len(player.hand) and 0 <= face_up_index < len(player.face_up)):
        return ActionResult.fail(ErrorCode.INVALID_SELECTION, "Invalid card index")

    player.hand[hand_index], player.face_up[face_up_index] = (
        player.face_up[face_up_index],
        player.hand[hand_index],
    )
    state.history.append(f"{player_id} swapped {player.face_up[face_up_index]} to face-up")
    return ActionResult(ok=True)


def confirm_ready(state: GameState, player_id: str) -> ActionResult:
    """Mark a player done swapping; start play once everyone is."""
    if state.phase is not Phase.SWAPPING:
        return ActionResult.fail(ErrorCode.INVALID_PHASE, "Not in the swapping phase")
    player = state.player(player_id)
    if player is None:
        return ActionResult.fail(ErrorCode.PLAYER_NOT_FOUND, f"Unknown player: {player_id}")
    if player.ready:
        return ActionResult.fail(ErrorCode.ALREADY_READY, "Already ready")

    player.ready = True
    state.history.append(f"{player_id} is ready")
    if not all(p.ready for p in state.seats):
        return ActionResult(ok=True)

    # ready is reused later; it no longer means "done swapping" once play starts
    for p in state.seats:
        p.ready = False
    state.phase = Phase.PLAYING
    state.current_seat = 0
    state.history.append(f"Play started, {state.seats[0].id} leads")
    return ActionResult(ok=True, game_started=True)


def _check_turn(
    state: GameState, player_id: str
) -> Tuple[Optional[Player], Optional[ActionResult]]:
    """Return the acting player, or the rejection if they may not act now."""
    if state.phase is not Phase.PLAYING:
        return None, ActionResult.fail(ErrorCode.INVALID_PHASE, "Game not in playing phase")
    player = state.player(player_id)
    if player is None:
        return None, ActionResult.fail(ErrorCode.PLAYER_NOT_FOUND, f"Unknown player: {player_id}")
    if player.finished:
        return None, ActionResult.fail(ErrorCode.ALREADY_FINISHED, "You have already finished")
    if state.current_player().id != player_id:
        return None, ActionResult.fail(ErrorCode.NOT_YOUR_TURN, "Not your turn")
    return player, None


def _owes(state: GameState, player_id: str) -> bool:
    return state.forced is not None and state.forced.player_id == player_id


def _format(cards: Sequence[Card]) -> str:
    return ", ".join(str(c) for c in cards)


def _pick_up(state: GameState, player: Player, extra: List[Card]) -> int:
    """Move extra cards plus the whole pile into the player's hand."""
    taken = extra + state.pile
    player.hand.extend(taken)
    player.sort_hand()
    state.pile = []
    state.must_play_low = False
    return len(taken)


def _replenish(state: GameState, player: Player) -> None:
    drew = False
    while state.deck and len(player.hand) < ZONE_SIZE:
        player.hand.append(state.deck.pop(0))
        drew = True
    if drew:
        player.sort_hand()


def _four_of_a_kind(pile: List[Card]) -> bool:
    if len(pile) < BURN_RUN:
        return False
    tail = pile[-BURN_RUN:]
    return all(c.rank == tail[0].rank for c in tail)


def _mark_finished(state: GameState, player: Player) -> bool:
    if not player.is_empty():
        return False
    if not player.finished:
        player.finish_order = 1 + sum(1 for p in state.seats if p.finished)
        player.finished = True
        state.history.append(f"{player.id} finished in place {player.finish_order}")
    return True


def _resolve_play(
    state: GameState, player: Player, cards: List[Card], revealed: Optional[Card] = None
) -> ActionResult:
    """Apply special-card effects of a successful play, then finish and turn checks.

    The cards are already on the pile.
    """
    rank = cards[0].rank
    result = ActionResult(ok=True, revealed_card=revealed)

    if _four_of_a_kind(state.pile) or rank == BURN:
        state.burn_pile.extend(state.pile)
        state.pile = []
        state.must_play_low = False
        result.burned = True
        state.history.append(f"{player.id} burned the pile")
    elif rank == LOW_GATE:
        state.must_play_low = True
    elif rank == TRANSPARENT:
        # Transparent: the gate keeps whatever value it had
        pass
    else:
        # 2 resets the pile; every other rank clears the gate too
        state.must_play_low = False

    if _mark_finished(state, player):
        result.finished = True
        if is_game_over(state):
            state.phase = Phase.ENDED
            result.game_over = True
            loser = get_loser(state)
            state.history.append(f"Game over, {loser.id if loser else 'nobody'} lost")

    # A burn repeats the turn, but a finished player cannot act again
    if result.burned and not result.finished:
        result.same_player_continues = True
    else:
        advance_turn(state)
    return result


def play_cards(state: GameState, player_id: str, indices: Sequence[int]) -> ActionResult:
    """Play same-rank cards from the player's active zone.

    Face-down cards are flipped one at a time and blind: an unplayable
    flip is not an error, the flipped card and the pile go to the hand.
    """
    player, failure = _check_turn(state, player_id)
    if failure is not None:
        return failure
    if _owes(state, player_id):
        return ActionResult.fail(ErrorCode.OBLIGATION_PENDING, "Must play or decline forced card")

    zone = player.active_zone()
    if zone is None:
        return ActionResult.fail(ErrorCode.ALREADY_FINISHED, "No cards left to play")
    source = player.zone(zone)

    indices = list(indices)
    if not indices:
        return ActionResult.fail(ErrorCode.INVALID_SELECTION, "No cards selected")
    if len(set(indices)) != len(indices):
        return ActionResult.fail(ErrorCode.INVALID_SELECTION, "Duplicate card index")
    if any(not 0 <= i < len(source) for i in indices):
        return ActionResult.fail(ErrorCode.INVALID_SELECTION, "Invalid card index")
    if zone is Zone.FACE_DOWN and len(indices) != 1:
        return ActionResult.fail(
            ErrorCode.INVALID_SELECTION, "Face-down cards are flipped one at a time"
        )

    cards = [source[i] for i in indices]
    if any(c.rank != cards[0].rank for c in cards):
        return ActionResult.fail(
            ErrorCode.MIXED_RANK_SELECTION, "All cards must have the same rank"
        )

    if zone is Zone.FACE_DOWN:
        card = source.pop(indices[0])
        if not can_play(state, card):
            count = _pick_up(state, player, [card])
            state.history.append(f"{player_id} flipped a face-down card and picked up {count} cards")
            advance_turn(state)
            return ActionResult(ok=True, picked_up=True, revealed_card=card)
        state.pile.append(card)
        state.history.append(f"{player_id} flipped and played {card}")
        return _resolve_play(state, player, [card], revealed=card)

    if not can_play(state, cards[0]):
        return ActionResult.fail(ErrorCode.ILLEGAL_CARD, f"Cannot play {cards[0]} now")

    for i in sorted(indices, reverse=True):
        del source[i]
    state.pile.extend(cards)
    if zone is Zone.HAND:
        _replenish(state, player)
    state.history.append(f"{player_id} played {_format(cards)}")
    return _resolve_play(state, player, cards)


def pick_up_pile(state: GameState, player_id: str) -> ActionResult:
    """Take the pile into hand. The player keeps the turn."""
    player, failure = _check_turn(state, player_id)
    if failure is not None:
        return failure
    if _owes(state, player_id):
        return resolve_forced(state, player_id, ForcedDecision.DECLINE)
    if not state.pile:
        return ActionResult.fail(ErrorCode.EMPTY_PILE, "Pile is empty")

    count = _pick_up(state, player, [])
    state.history.append(f"{player_id} picked up the pile ({count} cards)")
    return ActionResult(ok=True, picked_up=True, same_player_continues=True)


def draw_from_deck(state: GameState, player_id: str) -> ActionResult:
    """Draw one card. With a full hand the card becomes a forced card."""
    player, failure = _check_turn(state, player_id)
    if failure is not None:
        return failure
    if _owes(state, player_id):
        return ActionResult.fail(ErrorCode.OBLIGATION_PENDING, "Must resolve forced card first")
    if player.active_zone() is not Zone.HAND:
        return ActionResult.fail(
            ErrorCode.INVALID_SELECTION, "Can only draw when playing from hand"
        )
    if not state.deck:
        return ActionResult.fail(ErrorCode.EMPTY_DECK, "Deck is empty")

    card = state.deck.pop(0)
    if len(player.hand) >= ZONE_SIZE:
        state.forced = Obligation(player_id=player_id, card=card)
        state.history.append(f"{player_id} drew a forced card")
        return ActionResult(ok=True, forced_card=card)

    player.hand.append(card)
    player.sort_hand()
    state.history.append(f"{player_id} drew a card")
    return ActionResult(ok=True, drawn_card=card, same_player_continues=True)


def resolve_forced(
    state: GameState, player_id: str, decision: ForcedDecision
) -> ActionResult:
    """Play or decline the caller's forced card.

    An unplayable card played anyway resolves like a decline: the forced
    card and the pile go to the hand and the turn passes.
    """
    decision = ForcedDecision(decision)
    if state.phase is not Phase.PLAYING:
        return ActionResult.fail(ErrorCode.INVALID_PHASE, "Game not in playing phase")
    player = state.player(player_id)
    if player is None:
        return ActionResult.fail(ErrorCode.PLAYER_NOT_FOUND, f"Unknown player: {player_id}")
    if not _owes(state, player_id):
        return ActionResult.fail(ErrorCode.NO_OBLIGATION, "No forced card to resolve")

    card = state.forced.card
    state.forced = None
    if decision is ForcedDecision.PLAY and can_play(state, card):
        state.pile.append(card)
        _replenish(state, player)
        state.history.append(f"{player_id} played forced {card}")
        return _resolve_play(state, player, [card])

    count = _pick_up(state, player, [card])
    state.history.append(f"{player_id} took the forced card and the pile ({count} cards)")
    advance_turn(state)
    return ActionResult(ok=True, picked_up=True, revealed_card=card)


def abandon(state: GameState, player_id: str) -> ActionResult:
    """End the game because a player left. No cards move."""
    if state.phase is Phase.ENDED:
        return ActionResult.fail(ErrorCode.INVALID_PHASE, "Game already ended")
    if state.player(player_id) is None:
        return ActionResult.fail(ErrorCode.PLAYER_NOT_FOUND, f"Unknown player: {player_id}")

    state.phase = Phase.ENDED
    state.abandoned_by = player_id
    state.history.append(f"{player_id} left the game")
    return ActionResult(ok=True, game_over=True)


def advance_turn(state: GameState) -> None:
    """Move to the next unfinished seat, at most one full lap."""
    n = len(state.seats)
    for _ in range(n):
        state.current_seat = (state.current_seat + 1) % n
        if not state.current_player().finished:
            return


def is_game_over(state: GameState) -> bool:
    return sum(1 for p in state.seats if not p.finished) <= 1


def get_loser(state: GameState) -> Optional[Player]:
    """The player left holding cards, or the one who abandoned the game."""
    if state.abandoned_by is not None:
        return state.player(state.abandoned_by)
    if not is_game_over(state):
        return None
    return next((p for p in state.seats if not p.finished), None)


def get_winner(state: GameState) -> Optional[Player]:
    return next((p for p in state.seats if p.finish_order == 1), None)


def get_legal_actions(state: GameState, player_id: str) -> List[Action]:
    """Return every action the engine would accept from this player now."""
    player = state.player(player_id)
    if player is None:
        return []

    if state.phase is Phase.SWAPPING:
        if player.ready:
            return []
        actions: List[Action] = [
            SwapCard(hand_index=h, face_up_index=f)
            for h in range(len(player.hand))
            for f in range(len(player.face_up))
        ]
        actions.append(ConfirmReady())
        return actions

    if state.phase is not Phase.PLAYING or player.finished:
        return []
    if state.current_player().id != player_id:
        return []

    if _owes(state, player_id):
        return [ResolveForced(ForcedDecision.PLAY), ResolveForced(ForcedDecision.DECLINE)]

    zone = player.active_zone()
    if zone is None:
        return []
    cards = player.zone(zone)

    actions = []
    if zone is Zone.FACE_DOWN:
        actions.extend(PlayCards(indices=(i,)) for i in range(len(cards)))
    else:
        by_rank: Dict[str, List[int]] = {}
        for i, card in enumerate(cards):
            by_rank.setdefault(card.rank, []).append(i)
        for positions in by_rank.values():
            if not can_play(state, cards[positions[0]]):
                continue
            for k in range(1, len(positions) + 1):
                actions.append(PlayCards(indices=tuple(positions[:k])))

    if state.pile:
        actions.append(PickUpPile())
    if zone is Zone.HAND and state.deck:
        actions.append(DrawFromDeck())
    return actions


def apply_action(state: GameState, player_id: str, action: Action) -> ActionResult:
    """Apply an action to the state in place and report the outcome."""
    if isinstance(action, PlayCards):
        return play_cards(state, player_id, action.indices)
    if isinstance(action, PickUpPile):
        return pick_up_pile(state, player_id)
    if isinstance(action, DrawFromDeck):
        return draw_from_deck(state, player_id)
    if isinstance(action, ResolveForced):
        return resolve_forced(state, player_id, action.decision)
    if isinstance(action, SwapCard):
        return swap_card(state, player_id, action.hand_index, action.face_up_index)
    if isinstance(action, ConfirmReady):
        return confirm_ready(state, player_id)
    raise ValueError(f"Unknown action: {action!r}")
