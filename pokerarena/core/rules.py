"""
Texas Hold'em Rules and Constants.

This module defines the table rules used by the arena:

1. Seats never move. Dealer, small blind and big blind rotate each hand to
   the next three seats that still have chips, in seating order.

2. Each blind is min(blind amount, poster's chips); a blind that uses up a
   stack leaves the poster all-in.

3. A betting round closes as soon as every active player who is not all-in
   has matched the table's current bet.

4. Showdown splits the whole pot evenly among the best hands. Side pots are
   not modeled.

5. Fast mode doubles the blinds every few hands.
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class GamePhase(str, Enum):
    """Phases of a hand. Values are the wire names."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"
    FINISHED = "finished"


class GameMode(str, Enum):
    """Arena modes. The engine only uses the mode for the blind schedule."""
    FAST = "fast"
    SMART = "smart"


# Order in which a hand moves forward
PHASE_ORDER = (
    GamePhase.PREFLOP,
    GamePhase.FLOP,
    GamePhase.TURN,
    GamePhase.RIVER,
    GamePhase.SHOWDOWN,
)

# Community cards dealt when leaving each betting phase
CARDS_FOR_NEXT_STREET = {
    GamePhase.PREFLOP: 3,
    GamePhase.FLOP: 1,
    GamePhase.TURN: 1,
}

# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_STARTING_CHIPS = 1000
DEFAULT_WIN_THRESHOLD = 0.5
DEFAULT_MODELS = ("openai", "anthropic", "google", "grok", "meta")
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# How long an external decision maker may take, per mode
DEFAULT_ACTION_TIMEOUT_MS = {
    GameMode.FAST: 500,
    GameMode.SMART: 5000,
}

# Blinds double every N hands (None disables escalation)
DEFAULT_BLIND_ESCALATION_HANDS: Dict[GameMode, Optional[int]] = {
    GameMode.FAST: 5,
    GameMode.SMART: None,
}

# Model tier per mode, opaque metadata for the decision layer
MODEL_TIERS = {
    GameMode.FAST: {
        "openai": "gpt-4o-mini",
        "anthropic": "claude-3-haiku-20240307",
        "google": "gemini-1.5-flash",
        "grok": "grok-2-1212",
        "meta": "llama-3.1-8b-instruct",
    },
    GameMode.SMART: {
        "openai": "gpt-4o",
        "anthropic": "claude-3-5-sonnet-20241022",
        "google": "gemini-1.5-pro",
        "grok": "grok-2-1212",
        "meta": "llama-3.1-70b-instruct",
    },
}

# Cards per phase
HOLE_CARDS = 2
TOTAL_COMMUNITY_CARDS = 5


def next_phase(phase: GamePhase) -> GamePhase:
    """The phase that follows `phase` within a hand."""
    index = PHASE_ORDER.index(phase)
    if index + 1 >= len(PHASE_ORDER):
        raise ValueError(f"No phase follows {phase.value}")
    return PHASE_ORDER[index + 1]


def blinds_for_hand(
    hand_number: int,
    small_blind: int,
    big_blind: int,
    escalation_hands: Optional[int],
) -> Tuple[int, int]:
    """
    Blind amounts for a hand under the escalation schedule.

    Hand numbers start at 1. With escalation every N hands, hands 1..N use
    the base blinds, hands N+1..2N double them, and so on.

    Args:
        hand_number: Number of the hand about to be dealt
        small_blind: Base small blind
        big_blind: Base big blind
        escalation_hands: Double every this many hands, or None

    Returns:
        Tuple of (small_blind, big_blind)
    """
    if not escalation_hands or hand_number <= 1:
        return small_blind, big_blind
    level = (hand_number - 1) // escalation_hands
    return small_blind * 2 ** level, big_blind * 2 ** level


def model_name_for(mode: GameMode, provider: str) -> Optional[str]:
    """Concrete model name for a provider in the given mode, or None for custom seats."""
    return MODEL_TIERS[GameMode(mode)].get(provider)
