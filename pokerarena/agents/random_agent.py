"""
Random and fixed-strategy agents.

Simple agents that pick from the legal actions. Useful for testing and as
baselines for evaluation.
"""

import random
from typing import Optional

from pokerarena.agents.base import BaseAgent
from pokerarena.core.actions import Action, ActionType, enumerate_legal_actions
from pokerarena.core.game import GameState


class RandomAgent(BaseAgent):
    """
    An agent that selects random legal actions.

    The agent has configurable tendencies:
    - fold_probability: How likely to fold when facing a bet
    - raise_probability: How likely to raise vs check/call
    """

    def __init__(
        self,
        model: str,
        name: Optional[str] = None,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the random agent.

        Args:
            model: Seat identifier
            name: Optional name
            fold_probability: Probability of folding (0-1)
            raise_probability: Probability of raising (0-1)
            rng: Random source, for reproducible runs
        """
        super().__init__(model, name or f"Random-{model}")
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability
        self.rng = rng or random.Random()

    def act(self, state: GameState) -> Action:
        """Select a random legal action, biased by the configured tendencies."""
        actions = enumerate_legal_actions(state.current_player, state)
        by_type = {}
        for action in actions:
            by_type.setdefault(action.type, []).append(action)

        roll = self.rng.random()

        if ActionType.CHECK not in by_type and roll < self.fold_probability:
            return Action.fold()

        raises = by_type.get(ActionType.RAISE, [])
        if raises and roll < self.fold_probability + self.raise_probability:
            # Bias towards smaller raises
            return raises[min(int(self.rng.expovariate(1.0)), len(raises) - 1)]

        if ActionType.CHECK in by_type:
            return Action.check()
        if ActionType.CALL in by_type:
            return by_type[ActionType.CALL][0]

        return self.rng.choice(actions)


class CallAgent(BaseAgent):
    """
    An agent that always checks or calls.

    A short stack that cannot cover the call goes all-in.
    """

    def __init__(self, model: str, name: Optional[str] = None):
        super().__init__(model, name or f"Caller-{model}")

    def act(self, state: GameState) -> Action:
        """Always check or call."""
        actions = enumerate_legal_actions(state.current_player, state)
        for preferred in (ActionType.CHECK, ActionType.CALL, ActionType.ALL_IN):
            for action in actions:
                if action.type == preferred:
                    return action
        return Action.fold()
