"""CLI entry point."""

from __future__ import annotations

from typing import Optional

import typer
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="Palace card game with LLM, human and random agents")


def _parse_agents(
    agent_specs: str,
    llm_provider: str,
    llm_model: str,
    seed: Optional[int] = None,
) -> dict[str, "AgentProtocol"]:
    from palaceagent.agent.protocol import AgentProtocol
    from palaceagent.agents.human_agent import HumanAgent
    from palaceagent.agents.llm_agent import LLMAgent
    from palaceagent.agents.random_agent import RandomAgent
    from palaceagent.engine.rules import MAX_PLAYERS, MIN_PLAYERS

    parts = [s.strip().lower() for s in agent_specs.split(",") if s.strip()]
    if not MIN_PLAYERS <= len(parts) <= MAX_PLAYERS:
        raise typer.BadParameter(f"Palace needs {MIN_PLAYERS}-{MAX_PLAYERS} agents, got {len(parts)}.")

    agents: dict[str, AgentProtocol] = {}
    for i, part in enumerate(parts):
        pid = f"player_{i}"
        if ":" in part:
            kind, model = part.split(":", 1)
        else:
            kind, model = part, llm_model

        if kind == "llm":
            agents[pid] = LLMAgent(provider=llm_provider, model=model)
        elif kind == "human":
            agents[pid] = HumanAgent(name=f"Human_{i}")
        elif kind == "random":
            agents[pid] = RandomAgent(name=f"Random_{i}", seed=None if seed is None else seed + i)
        else:
            raise typer.BadParameter(f"Unknown agent type: {kind}. Use 'llm', 'human' or 'random'.")
    return agents


@app.command()
def play(
    agents: str = typer.Option(
        "llm,random,random",
        "--agents",
        "-a",
        help="Comma-separated: llm, human, random, or llm:model_name (e.g. llm:gpt-4o,human,random)",
    ),
    llm_provider: str = typer.Option(
        "openrouter",
        "--llm-provider",
        "-p",
        help="LLM provider: openrouter, groq, huggingface, or ollama",
    ),
    llm_model: str = typer.Option(
        "openai/gpt-4o-mini",
        "--llm-model",
        "-m",
        help="Model name (e.g. openai/gpt-4o-mini, meta-llama/llama-3-8b-instruct)",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """Run a single Palace game."""
    from palaceagent.orchestration.game_runner import GameRunner

    agent_map = _parse_agents(agents, llm_provider, llm_model, seed)
    runner = GameRunner(agent_map, seed=seed)
    result = runner.run()
    typer.echo(f"Winner: {result.winner or 'None'}")
    typer.echo(f"Loser: {result.loser or 'None (unfinished)'}")
    typer.echo(f"Finish order: {', '.join(result.finish_order) or '-'}")
    typer.echo(f"Turns: {result.num_turns}")


@app.command()
def tournament(
    agents: str = typer.Option(
        "random,random",
        "--agents",
        "-a",
        help="Comma-separated agent types or llm:model_name (e.g. llm:gpt-4o,random)",
    ),
    games: int = typer.Option(100, "--games", "-g", help="Number of games"),
    llm_provider: str = typer.Option(
        "openrouter",
        "--llm-provider",
        "-p",
        help="LLM provider: openrouter, groq, huggingface, or ollama",
    ),
    llm_model: str = typer.Option(
        "openai/gpt-4o-mini",
        "--llm-model",
        "-m",
        help="Model name",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """Run a tournament."""
    from palaceagent.orchestration.tournament import run_tournament

    agent_map = _parse_agents(agents, llm_provider, llm_model, seed)
    result = run_tournament(agent_map, num_games=games, seed=seed)
    typer.echo(f"Tournament results ({result.games} games):")
    for pid in sorted(agent_map, key=lambda p: (result.losses.get(p, 0), -result.wins.get(p, 0))):
        typer.echo(f"  {pid}: {result.wins.get(pid, 0)} wins, {result.losses.get(pid, 0)} losses")


if __name__ == "__main__":
    app()
