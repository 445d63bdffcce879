"""
Error taxonomy for the poker engine.

Every engine call either returns a fully consistent new state or raises one
of these without touching its inputs.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pokerarena.core.actions import Action


class PokerError(Exception):
    """Base class for all engine errors."""


class WrongPlayer(PokerError):
    """An action was submitted for a seat that is not the current player."""

    def __init__(self, expected: str, actual: str):
        super().__init__(f"Wrong player acting: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class IllegalAction(PokerError):
    """The action fails the legality check for the acting player."""

    def __init__(self, action: "Action", reason: Optional[str] = None):
        message = f"Illegal action: {action}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.action = action


class InsufficientCards(PokerError, ValueError):
    """The hand evaluator was given fewer than 5 cards."""


class DeckExhausted(PokerError):
    """A card was requested from an empty deck."""


class GameOver(PokerError):
    """The game has finished; no further actions are accepted."""


class ReasoningAlreadySet(PokerError):
    """A reasoning string was already attached to this action log entry."""
