"""Players: the MCTS controller and baselines."""

from quartobot.agents.base import Agent
from quartobot.agents.controller import AiController
from quartobot.agents.random_agent import RandomAgent

__all__ = ['Agent', 'AiController', 'RandomAgent']
