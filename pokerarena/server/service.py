"""
Game service: the decision pipeline around the engine.

For each step the service asks the current seat's agent for an action,
bounds the wait by the game's action timeout, substitutes the fallback
action on timeout, agent error or an illegal proposal, and then applies
the decided action. All of this runs under the game's lock.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple
import asyncio
import logging
import random
import time
import uuid

from pokerarena.agents.base import BaseAgent
from pokerarena.agents.fallback import FallbackAgent, fallback_action
from pokerarena.core.actions import Action, is_legal
from pokerarena.core.errors import GameOver
from pokerarena.core.game import (
    ActionLog, GameSettings, GameState,
    apply_action, create_game, start_new_hand,
)
from pokerarena.core.rules import GameMode
from pokerarena.server.storage import GameRepository


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one service step."""
    state: GameState
    log: ActionLog
    used_fallback: bool
    hand_ended: bool


class GameService:
    """
    Runs games stored in a repository.

    Usage:
        service = GameService()
        state = service.start_game(GameMode.FAST, agents=[RandomAgent("openai")])
        while not state.is_finished:
            state = (await service.step(state.id)).state
    """

    def __init__(
        self,
        repository: Optional[GameRepository] = None,
        rng: Optional[random.Random] = None,
    ):
        self.repository = repository or GameRepository()
        self.rng = rng
        self._agents: Dict[str, Dict[str, BaseAgent]] = {}

    def start_game(
        self,
        mode: GameMode,
        settings: Optional[GameSettings] = None,
        agents: Optional[Iterable[BaseAgent]] = None,
        game_id: Optional[str] = None,
    ) -> GameState:
        """Create a game, deal its first hand and store it."""
        game_id = game_id or str(uuid.uuid4())
        state = start_new_hand(create_game(mode, game_id, settings), self.rng)
        self.repository.put(state)
        self._agents[game_id] = {}
        for agent in agents or ():
            self.register_agent(game_id, agent)
        logger.info(f"Started game {game_id} ({GameMode(mode).value})")
        return state

    def register_agent(self, game_id: str, agent: BaseAgent) -> None:
        """Seat `agent` for its model in a stored game."""
        state = self.repository.get(game_id)
        if state.player_by_model(agent.model) is None:
            raise ValueError(f"No seat for model {agent.model} in game {game_id}")
        self._agents.setdefault(game_id, {})[agent.model] = agent

    def end_game(self, game_id: str) -> None:
        """Forget a game and the agents seated in it."""
        self.repository.delete(game_id)
        for agent in self._agents.pop(game_id, {}).values():
            agent.reset()
        logger.info(f"Removed game {game_id}")

    def agent_for(self, game_id: str, model: str) -> BaseAgent:
        """The registered agent for a seat, or a FallbackAgent."""
        agents = self._agents.setdefault(game_id, {})
        if model not in agents:
            agents[model] = FallbackAgent(model)
        return agents[model]

    async def _decide(self, agent: BaseAgent, state: GameState) -> Tuple[Optional[Action], int]:
        """Ask the agent, bounded by the action timeout."""
        timeout_ms = state.action_timeout_ms
        started = time.monotonic()
        try:
            action = await asyncio.wait_for(agent.act_async(state), timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.warning(f"{agent.model} timed out after {timeout_ms}ms in game {state.id}")
            return None, timeout_ms
        except Exception:
            logger.warning(f"{agent.model} failed to decide in game {state.id}", exc_info=True)
            return None, int((time.monotonic() - started) * 1000)
        return action, int((time.monotonic() - started) * 1000)

    async def step(self, game_id: str) -> StepResult:
        """
        Play one action for the current seat of a stored game.

        Raises:
            GameNotFound: If the game does not exist
            GameOver: If the game has finished
        """
        async with self.repository.lock(game_id):
            state = self.repository.get(game_id)
            if state.is_finished:
                raise GameOver(f"Game {game_id} is finished")

            player = state.current_player
            agent = self.agent_for(game_id, player.model)
            action, response_time_ms = await self._decide(agent, state)

            used_fallback = False
            if not isinstance(action, Action) or not is_legal(action, player, state):
                if action is not None:
                    logger.warning(f"{player.model} proposed illegal action {action!r}, using fallback")
                action = fallback_action(player, state)
                used_fallback = True

            new_state, log = apply_action(state, action, player.model, response_time_ms, self.rng)
            self.repository.put(new_state)

        for seat_agent in self._agents.get(game_id, {}).values():
            seat_agent.observe(new_state)

        return StepResult(
            state=new_state,
            log=log,
            used_fallback=used_fallback,
            hand_ended=new_state.hand_number != state.hand_number or new_state.is_finished,
        )

    async def play(self, game_id: str, max_actions: int = 10_000) -> GameState:
        """Step a game until it finishes or `max_actions` have been applied."""
        state = self.repository.get(game_id)
        for _ in range(max_actions):
            if state.is_finished:
                break
            state = (await self.step(game_id)).state
        return state
