"""Single game runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from palaceagent.engine import (
    Action,
    ConfirmReady,
    GameState,
    Phase,
    PlayCards,
    PlayerView,
    apply_action,
    deal,
    get_legal_actions,
    get_loser,
    get_winner,
    init_game,
)

if TYPE_CHECKING:
    from palaceagent.agent.protocol import AgentProtocol

MAX_SWAPS = 10


@dataclass
class GameResult:
    """Result of a completed game."""

    winner: Optional[str]
    loser: Optional[str]
    finish_order: tuple[str, ...]
    num_turns: int
    player_ids: tuple[str, ...]


def _default_action(legal: list[Action]) -> Action:
    return next((a for a in legal if isinstance(a, (ConfirmReady, PlayCards))), legal[0])


class GameRunner:
    """Runs a single Palace game to completion.

    All actions for the game go through this one loop, so the engine never
    sees two actions at once.
    """

    def __init__(
        self,
        agents: dict[str, "AgentProtocol"],
        seed: Optional[int] = None,
        max_turns: int = 2000,
    ):
        self._agents = agents
        self._seed = seed
        self._max_turns = max_turns
        self.state: Optional[GameState] = None

    def _step(self, state: GameState, pid: str) -> bool:
        """Ask one agent for an action and apply it. False if it had none."""
        legal = get_legal_actions(state, pid)
        if not legal:
            return False

        action = self._agents[pid].get_action(PlayerView.from_state(state, pid), legal, pid)
        if action is None or action not in legal:
            action = _default_action(legal)

        apply_action(state, pid, action)
        return True

    def _swap_phase(self, state: GameState) -> None:
        for pid in self._agents:
            for _ in range(MAX_SWAPS):
                player = state.player(pid)
                if player is None or player.ready or state.phase is not Phase.SWAPPING:
                    break
                self._step(state, pid)
            if state.phase is Phase.SWAPPING and not state.player(pid).ready:
                apply_action(state, pid, ConfirmReady())

    def run(self) -> GameResult:
        """Run the game and return the result."""
        player_ids = list(self._agents.keys())
        roster = [(pid, agent.name) for pid, agent in self._agents.items()]
        state = init_game(roster, seed=self._seed)
        self.state = state
        deal(state)
        self._swap_phase(state)

        num_turns = 0
        while state.phase is Phase.PLAYING and num_turns < self._max_turns:
            pid = state.current_player().id
            if not self._step(state, pid):
                break
            num_turns += 1

        finished = sorted(
            (p for p in state.seats if p.finish_order is not None),
            key=lambda p: p.finish_order,
        )
        winner = get_winner(state)
        loser = get_loser(state)
        return GameResult(
            winner=winner.id if winner else None,
            loser=loser.id if loser else None,
            finish_order=tuple(p.id for p in finished),
            num_turns=num_turns,
            player_ids=tuple(player_ids),
        )
