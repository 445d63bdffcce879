"""
Base Agent Interface for PokerArena.

This module defines the abstract base class for all poker agents. An agent
sits behind one seat and turns a game state into a decided Action; it
never touches the state itself.

Usage:
    class MyAgent(BaseAgent):
        def act(self, state):
            player = state.current_player
            return Action.call(state.current_bet - player.current_bet)
"""

from abc import ABC, abstractmethod
import asyncio
from typing import Optional

from pokerarena.core.actions import Action
from pokerarena.core.game import GameState


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    This interface is designed to support:
    - Rule-based agents
    - Random baselines
    - LLM-backed agents, which override `act_async` to await a remote call

    Attributes:
        model: Identifier of the seat this agent plays
        name: Human-readable name
    """

    def __init__(self, model: str, name: Optional[str] = None):
        """
        Initialize the agent.

        Args:
            model: Identifier of the seat this agent plays
            name: Optional human-readable name
        """
        self.model = model
        self.name = name or f"Agent-{model}"

    @abstractmethod
    def act(self, state: GameState) -> Action:
        """
        Choose an action for the current player of `state`.

        The returned action is a proposal: the caller checks it with
        `is_legal` before it reaches the engine.
        """

    async def act_async(self, state: GameState) -> Action:
        """
        Awaitable form of `act`, used by the game service.

        The default runs `act` in a worker thread so a slow agent can be
        bounded by a timeout.
        """
        return await asyncio.to_thread(self.act, state)

    def observe(self, state: GameState) -> None:
        """Called whenever the game state changes. Override to keep memory."""

    def reset(self) -> None:
        """Reset internal state for a new game."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.model}, {self.name})"
