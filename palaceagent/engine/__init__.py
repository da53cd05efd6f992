"""Game engine for Palace."""

from palaceagent.engine.card import Card, Suit
from palaceagent.engine.deck import create_deck
from palaceagent.engine.errors import ActionResult, ErrorCode
from palaceagent.engine.game_state import GameState, Obligation, OpponentView, Phase, PlayerView
from palaceagent.engine.player import Player, Zone
from palaceagent.engine.rules import (
    Action,
    SwapCard,
    ConfirmReady,
    PlayCards,
    PickUpPile,
    DrawFromDeck,
    ForcedDecision,
    ResolveForced,
    abandon,
    advance_turn,
    apply_action,
    can_play,
    confirm_ready,
    deal,
    draw_from_deck,
    get_legal_actions,
    get_loser,
    get_winner,
    init_game,
    is_game_over,
    pick_up_pile,
    play_cards,
    resolve_forced,
    swap_card,
)

__all__ = [
    "Card",
    "Suit",
    "create_deck",
    "ActionResult",
    "ErrorCode",
    "GameState",
    "Obligation",
    "OpponentView",
    "Phase",
    "PlayerView",
    "Player",
    "Zone",
    "Action",
    "SwapCard",
    "ConfirmReady",
    "PlayCards",
    "PickUpPile",
    "DrawFromDeck",
    "ForcedDecision",
    "ResolveForced",
    "abandon",
    "advance_turn",
    "apply_action",
    "can_play",
    "confirm_ready",
    "deal",
    "draw_from_deck",
    "get_legal_actions",
    "get_loser",
    "get_winner",
    "init_game",
    "is_game_over",
    "pick_up_pile",
    "play_cards",
    "resolve_forced",
    "swap_card",
]
