"""Simulate a game with random agents."""

from palaceagent.agents.random_agent import RandomAgent
from palaceagent.orchestration.game_runner import GameRunner


def main():
    agents = {
        "p1": RandomAgent("Bot1", seed=1),
        "p2": RandomAgent("Bot2", seed=2),
        "p3": RandomAgent("Bot3", seed=3),
        "p4": RandomAgent("Bot4", seed=4),
    }

    runner = GameRunner(agents, seed=42)
    result = runner.run()

    for event in runner.state.history:
        print(f"> {event}")

    print(f"Game finished! Winner: {result.winner}, loser: {result.loser}")
    print(f"Finish order: {', '.join(result.finish_order)}")
    print(f"Turns: {result.num_turns}")


if __name__ == "__main__":
    main()
