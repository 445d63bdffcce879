"""
Pytest configuration and shared fixtures for PokerArena tests.
"""

import random
from dataclasses import replace

import pytest
from pokerarena.core.card import Card, Rank, Suit, parse_cards
from pokerarena.core.game import GameSettings, create_game, start_new_hand
from pokerarena.core.player import Player
from pokerarena.core.rules import GameMode, GamePhase


@pytest.fixture
def rng():
    """Seeded random source so shuffles are reproducible."""
    return random.Random(1234)


@pytest.fixture
def five_player_game(rng):
    """Default 5-seat game with the first hand dealt."""
    return start_new_hand(create_game(GameMode.SMART, "game-5"), rng)


@pytest.fixture
def three_player_game(rng):
    """
    3-seat game, first hand dealt.

    Seats: alpha (0, big blind), beta (1, dealer, first to act),
    gamma (2, small blind). Threshold 1.0 so the game only ends on
    elimination.
    """
    settings = GameSettings(models=("alpha", "beta", "gamma"), win_threshold=1.0)
    return start_new_hand(create_game(GameMode.SMART, "game-3", settings), rng)


@pytest.fixture
def heads_up_game(rng):
    """
    2-seat game with the default majority threshold, first hand dealt.

    Seats: alpha (0, small blind, first to act), beta (1, dealer and big blind).
    """
    settings = GameSettings(models=("alpha", "beta"))
    return start_new_hand(create_game(GameMode.SMART, "game-2", settings), rng)


@pytest.fixture
def river_game(three_player_game):
    """
    Build a 3-seat state at the river with rigged cards.

    Returns a function taking hole cards per seat (None for a folded seat),
    the board, and the pot.
    """
    def build(holes, board, pot=60, current_player_index=0):
        players = []
        for player, hole in zip(three_player_game.players, holes):
            players.append(replace(
                player,
                hole_cards=tuple(parse_cards(hole)) if hole else None,
                is_active=hole is not None,
                current_bet=0,
                total_bet_this_round=0,
            ))
        return replace(
            three_player_game,
            players=tuple(players),
            community_cards=tuple(parse_cards(board)),
            pot=pot,
            current_bet=0,
            phase=GamePhase.RIVER,
            current_player_index=current_player_index,
        )
    return build


@pytest.fixture
def sample_player():
    """A player with 1000 chips and no bet."""
    return Player(player_id="player-0", model="alpha", chips=1000)


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
