"""Random agent - plays a uniformly random legal action, preferring plays."""

import random
from typing import Optional

from palaceagent.engine import Action, ConfirmReady, PlayCards, PlayerView, ResolveForced, ForcedDecision


class RandomAgent:
    """Agent that picks random legal actions. Skips swapping."""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        self._name = name
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return self._name

    def get_action(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None

        if any(isinstance(a, ConfirmReady) for a in legal_actions):
            return ConfirmReady()

        if player_view.forced_card is not None:
            decision = ForcedDecision.PLAY if player_view.forced_card_playable else ForcedDecision.DECLINE
            return ResolveForced(decision)

        # Prefer playing over picking up to make game progress
        play_actions = [a for a in legal_actions if isinstance(a, PlayCards)]
        if play_actions:
            return self._rng.choice(play_actions)
        return self._rng.choice(legal_actions)
