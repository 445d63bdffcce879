"""
Player seat record for Texas Hold'em.

Players are immutable; the state machine produces updated copies with
`dataclasses.replace`. A seat tracks:
- Stack (chip count)
- Hole cards, present only while the seat holds a live hand
- Bets in the current betting round
- Whether the seat is still contesting (active) or all-in
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from pokerarena.core.card import Card


@dataclass(frozen=True)
class Player:
    """
    A seat at the table.

    Attributes:
        player_id: Unique seat identifier ("player-0", ...)
        model: Identifier of the agent playing this seat
        chips: Current chip count (never negative)
        hole_cards: The two private cards, or None
        is_active: Still contesting the current hand and the game
        is_all_in: Has committed the whole stack
        current_bet: Amount bet in the current betting round
        total_bet_this_round: Amount put in this round, including blinds
    """
    player_id: str
    model: str
    chips: int
    hole_cards: Optional[Tuple[Card, Card]] = None
    is_active: bool = True
    is_all_in: bool = False
    current_bet: int = 0
    total_bet_this_round: int = 0

    def __post_init__(self):
        if self.chips < 0:
            raise ValueError(f"Player {self.player_id} cannot have negative chips")
        if self.hole_cards is not None:
            object.__setattr__(self, "hole_cards", tuple(self.hole_cards))

    @property
    def can_act(self) -> bool:
        """Active with chips left to bet."""
        return self.is_active and self.chips > 0

    @property
    def has_live_hand(self) -> bool:
        """Active and holding hole cards (eligible at showdown)."""
        return self.is_active and self.hole_cards is not None

    def reset_for_new_hand(self) -> Player:
        """Clear cards and bets; a seat without chips is out for good."""
        return replace(
            self,
            hole_cards=None,
            is_all_in=False,
            current_bet=0,
            total_bet_this_round=0,
            is_active=self.chips > 0,
        )

    def reset_for_new_round(self) -> Player:
        """Clear per-round bet counters (flop, turn, river)."""
        return replace(self, current_bet=0, total_bet_this_round=0)

    def deal_cards(self, cards: Tuple[Card, Card]) -> Player:
        return replace(self, hole_cards=tuple(cards))

    def bet(self, amount: int) -> Player:
        """
        Move `amount` chips from the stack into this round's bet.

        Raises:
            ValueError: If the amount is negative or exceeds the stack
        """
        if amount < 0 or amount > self.chips:
            raise ValueError(f"Player {self.player_id} cannot bet {amount} with {self.chips} chips")
        chips = self.chips - amount
        return replace(
            self,
            chips=chips,
            current_bet=self.current_bet + amount,
            total_bet_this_round=self.total_bet_this_round + amount,
            is_all_in=chips == 0,
        )

    def fold(self) -> Player:
        """Fold the hand."""
        return replace(self, is_active=False, hole_cards=None)

    def bust(self) -> Player:
        """Out of chips: leaves the hand and the game."""
        return replace(self, is_active=False, hole_cards=None)

    def win(self, amount: int) -> Player:
        return replace(self, chips=self.chips + amount)

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result: Dict[str, Any] = {
            "id": self.player_id,
            "model": self.model,
            "chips": self.chips,
            "is_active": self.is_active,
            "is_all_in": self.is_all_in,
            "current_bet": self.current_bet,
            "total_bet_this_round": self.total_bet_this_round,
        }

        if not hide_cards:
            result["hole_cards"] = (
                [card.to_dict() for card in self.hole_cards] if self.hole_cards else None
            )

        return result

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"Player {self.model} [{cards_str}] ${self.chips}"
