"""Built-in agents."""

from palaceagent.agents.llm_agent import LLMAgent
from palaceagent.agents.human_agent import HumanAgent
from palaceagent.agents.random_agent import RandomAgent

__all__ = ["LLMAgent", "HumanAgent", "RandomAgent"]
