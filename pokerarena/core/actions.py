"""
Player actions and the action legality engine.

An Action is a small tagged variant: CALL and RAISE carry the number of
chips the player moves into the pot, FOLD, CHECK and ALL_IN carry nothing.

`is_legal` is the only legality gate the state machine consults. What to do
with an illegal proposal (substitute a fallback, reject it) is up to the
caller.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from pokerarena.core.game import GameState
    from pokerarena.core.player import Player


class ActionType(str, Enum):
    """Possible player actions."""
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"
    ALL_IN = "all-in"


AMOUNT_ACTIONS = (ActionType.CALL, ActionType.RAISE)


@dataclass(frozen=True)
class Action:
    """
    A single player decision.

    Usage:
        Action.fold()
        Action.call(20)
        Action.raise_(60)
        Action.from_dict({"type": "raise", "amount": 60})
    """
    type: ActionType
    amount: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "type", ActionType(self.type))
        if self.type in AMOUNT_ACTIONS:
            if isinstance(self.amount, bool) or not isinstance(self.amount, int):
                raise ValueError(f"{self.type.value} requires an integer amount")
            if self.amount < 0:
                raise ValueError(f"{self.type.value} amount cannot be negative")
        elif self.amount is not None:
            raise ValueError(f"{self.type.value} does not take an amount")

    @classmethod
    def fold(cls) -> Action:
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> Action:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls, amount: int) -> Action:
        return cls(ActionType.CALL, amount)

    @classmethod
    def raise_(cls, amount: int) -> Action:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def all_in(cls) -> Action:
        return cls(ActionType.ALL_IN)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Action:
        """
        Build an action from a wire payload like {"type": "call", "amount": 20}.

        Raises:
            ValueError: If the type is unknown or the amount does not fit it
        """
        try:
            action_type = ActionType(data["type"])
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid action payload: {data!r}") from e
        amount = data.get("amount") if action_type in AMOUNT_ACTIONS else None
        return cls(action_type, amount)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type.value}
        if self.amount is not None:
            result["amount"] = self.amount
        return result

    def __str__(self) -> str:
        if self.amount is None:
            return self.type.value
        return f"{self.type.value} {self.amount}"


def amount_to_call(player: Player, state: GameState) -> int:
    """Chips the player must add to match the table's current bet."""
    return max(0, state.current_bet - player.current_bet)


def raise_bounds(player: Player, state: GameState) -> Optional[Tuple[int, int]]:
    """
    Range of legal raise contributions for the player.

    Returns:
        (minimum, maximum) chips moved by a raise, or None if no raise fits
    """
    minimum = amount_to_call(player, state) + state.big_blind
    if player.chips < minimum:
        return None
    return minimum, player.chips


def enumerate_legal_actions(player: Player, state: GameState) -> List[Action]:
    """
    List the legal actions for a player.

    Raise sizes are stepped by the big blind from the minimum raise up to
    the player's stack; any amount in between is also legal for `is_legal`.
    """
    to_call = amount_to_call(player, state)
    actions = [Action.fold()]

    if state.current_bet == player.current_bet:
        actions.append(Action.check())
    elif player.chips >= to_call:
        actions.append(Action.call(to_call))

    bounds = raise_bounds(player, state)
    if bounds is not None:
        minimum, maximum = bounds
        step = max(state.big_blind, 1)
        actions.extend(Action.raise_(amount) for amount in range(minimum, maximum + 1, step))

    if player.chips > 0:
        actions.append(Action.all_in())

    return actions


def is_legal(action: Action, player: Player, state: GameState) -> bool:
    """Check whether `action` is legal for `player` in `state`."""
    to_call = state.current_bet - player.current_bet

    if action.type == ActionType.FOLD:
        return True

    if action.type == ActionType.CHECK:
        return state.current_bet == player.current_bet

    if action.type == ActionType.CALL:
        return action.amount == to_call and player.chips >= to_call

    if action.type == ActionType.RAISE:
        return (
            action.amount is not None
            and action.amount >= to_call + state.big_blind
            and action.amount <= player.chips
        )

    if action.type == ActionType.ALL_IN:
        return player.chips > 0

    return False
