"""
In-memory game repository.

Holds the latest GameState per game id and one asyncio.Lock per game, so
callers can guarantee that only one action is applied to a game at a time.
Different games never share a lock.
"""

from __future__ import annotations
from typing import Dict, List
import asyncio
import logging

from pokerarena.core.game import GameState, attach_reasoning


logger = logging.getLogger(__name__)


class GameNotFound(KeyError):
    """No game is stored under the requested id."""

    def __str__(self) -> str:
        return f"Game not found: {self.args[0]}"


class GameRepository:
    """
    Stores game snapshots by id.

    Usage:
        repo = GameRepository()
        repo.put(state)
        async with repo.lock(state.id):
            state = repo.get(state.id)
            ...
            repo.put(new_state)
    """

    def __init__(self):
        self._games: Dict[str, GameState] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, game_id: str) -> GameState:
        """
        Raises:
            GameNotFound: If no game has this id
        """
        try:
            return self._games[game_id]
        except KeyError:
            raise GameNotFound(game_id) from None

    def put(self, state: GameState) -> None:
        self._games[state.id] = state

    def delete(self, game_id: str) -> None:
        self._games.pop(game_id, None)
        self._locks.pop(game_id, None)

    def list_ids(self) -> List[str]:
        return list(self._games)

    def lock(self, game_id: str) -> asyncio.Lock:
        """
        The lock serializing writes to one game.

        Raises:
            GameNotFound: If no game has this id
        """
        if game_id not in self._games:
            raise GameNotFound(game_id)
        return self._locks.setdefault(game_id, asyncio.Lock())

    def attach_reasoning(self, game_id: str, action_index: int, reasoning: str) -> str:
        """
        Store a rationale for one action, first write wins.

        Returns:
            The reasoning stored for that action (the earlier one if it
            was already set)

        Raises:
            GameNotFound: If no game has this id
            IndexError: If the action index does not exist
        """
        state = self.get(game_id)
        if not 0 <= action_index < len(state.action_history):
            raise IndexError(f"No action at index {action_index}")

        existing = state.action_history[action_index].reasoning
        if existing is not None:
            logger.debug(f"Reasoning for action {action_index} of {game_id} already set")
            return existing

        self.put(attach_reasoning(state, action_index, reasoning))
        return reasoning

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def __len__(self) -> int:
        return len(self._games)
