"""
PokerArena - Texas Hold'em Arena for Automated Agents

A multi-agent Texas Hold'em project with:
- Pure Python rules engine over immutable game state (no poker dependencies)
- Agent interface with timeout and fallback handling
- FastAPI server for running games over HTTP

Usage:
    from pokerarena.core import GameMode, create_game, start_new_hand, apply_action
    from pokerarena.agents import BaseAgent, RandomAgent
"""

__version__ = "0.2.0"

from pokerarena.core.card import Card, Deck
from pokerarena.core.player import Player
from pokerarena.core.hand import HandRank, evaluate
from pokerarena.core.actions import Action
from pokerarena.core.game import GameState, create_game, start_new_hand, apply_action

__all__ = [
    "Card",
    "Deck",
    "Player",
    "HandRank",
    "evaluate",
    "Action",
    "GameState",
    "create_game",
    "start_new_hand",
    "apply_action",
    "__version__",
]
