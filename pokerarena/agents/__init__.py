"""
PokerArena Agents - Decision makers for table seats

This module provides the base agent interface, baseline agents, and the
fallback policy the game service substitutes for slow or illegal proposals.
"""

from pokerarena.agents.base import BaseAgent
from pokerarena.agents.fallback import FallbackAgent, fallback_action
from pokerarena.agents.random_agent import CallAgent, RandomAgent

__all__ = ["BaseAgent", "CallAgent", "FallbackAgent", "RandomAgent", "fallback_action"]
