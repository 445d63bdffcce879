"""
PokerArena Core - Pure Python Texas Hold'em Rules Engine

This module contains all game logic without any network dependencies.
"""

from pokerarena.core.card import Card, Deck, Rank, Suit, new_shuffled_deck
from pokerarena.core.player import Player
from pokerarena.core.hand import HandCategory, HandRank, compare, evaluate
from pokerarena.core.actions import Action, ActionType, enumerate_legal_actions, is_legal
from pokerarena.core.rules import GameMode, GamePhase
from pokerarena.core.errors import (
    PokerError, WrongPlayer, IllegalAction, InsufficientCards,
    DeckExhausted, GameOver, ReasoningAlreadySet,
)
from pokerarena.core.game import (
    GameSettings, GameState, ActionLog,
    create_game, start_new_hand, apply_action, attach_reasoning,
)

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "new_shuffled_deck",
    "Player",
    "HandCategory",
    "HandRank",
    "compare",
    "evaluate",
    "Action",
    "ActionType",
    "enumerate_legal_actions",
    "is_legal",
    "GameMode",
    "GamePhase",
    "PokerError",
    "WrongPlayer",
    "IllegalAction",
    "InsufficientCards",
    "DeckExhausted",
    "GameOver",
    "ReasoningAlreadySet",
    "GameSettings",
    "GameState",
    "ActionLog",
    "create_game",
    "start_new_hand",
    "apply_action",
    "attach_reasoning",
]
