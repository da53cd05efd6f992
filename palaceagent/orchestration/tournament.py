"""Tournament - run many games and aggregate results."""

import random
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from palaceagent.orchestration.game_runner import GameRunner


@dataclass
class TournamentResult:
    """Wins (finished first) and losses (left holding cards) per player."""

    games: int
    wins: dict[str, int] = field(default_factory=dict)
    losses: dict[str, int] = field(default_factory=dict)


def run_tournament(
    agents: dict[str, Any],
    num_games: int = 100,
    seed: int | None = None,
) -> TournamentResult:
    """Run a tournament: the same table plays num_games games.

    Seat order alternates between games so nobody always leads.
    """
    player_ids = list(agents.keys())
    wins: dict[str, int] = defaultdict(int)
    losses: dict[str, int] = defaultdict(int)

    rng = random.Random(seed)
    for g in range(num_games):
        order = player_ids if g % 2 == 0 else list(reversed(player_ids))
        ordered_agents = {pid: agents[pid] for pid in order}
        runner = GameRunner(ordered_agents, seed=rng.randint(0, 2**31 - 1))
        result = runner.run()
        if result.winner:
            wins[result.winner] += 1
        if result.loser:
            losses[result.loser] += 1

    return TournamentResult(games=num_games, wins=dict(wins), losses=dict(losses))
