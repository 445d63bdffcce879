"""
Fallback decisions used when an agent is too slow or proposes nonsense.
"""

from typing import Optional

from pokerarena.agents.base import BaseAgent
from pokerarena.core.actions import Action, amount_to_call, is_legal
from pokerarena.core.game import GameState
from pokerarena.core.player import Player


def fallback_action(player: Player, state: GameState) -> Action:
    """
    A simple legal action for `player`.

    - Nothing to call: raise two big blinds (or shove if that is not a
      legal raise, or check with an empty stack)
    - Calling needs the whole stack: go all-in
    - Otherwise: call
    """
    to_call = amount_to_call(player, state)

    if to_call == 0:
        raise_amount = min(state.big_blind * 2, player.chips)
        if raise_amount <= 0:
            return Action.check()
        action = Action.raise_(raise_amount)
        return action if is_legal(action, player, state) else Action.all_in()

    if to_call >= player.chips:
        return Action.all_in()

    return Action.call(to_call)


class FallbackAgent(BaseAgent):
    """Agent that always plays `fallback_action`. Default for unclaimed seats."""

    def __init__(self, model: str, name: Optional[str] = None):
        super().__init__(model, name or f"Fallback-{model}")

    def act(self, state: GameState) -> Action:
        return fallback_action(state.current_player, state)
