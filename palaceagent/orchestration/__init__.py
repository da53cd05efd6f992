"""Game orchestration."""

from palaceagent.orchestration.game_runner import GameResult, GameRunner
from palaceagent.orchestration.tournament import TournamentResult, run_tournament

__all__ = ["GameResult", "GameRunner", "TournamentResult", "run_tournament"]
