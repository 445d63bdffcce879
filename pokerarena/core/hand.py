"""
Hand Evaluation for Texas Hold'em.

This module evaluates 5-7 cards and returns the best 5-card hand as a
HandRank: a category plus a primary value and an ordered kicker list.
HandRanks are totally ordered by `compare`: category first, then primary
value, then kickers lexicographically (missing kickers count as 0).

Hand Rankings (best to worst):
9. Royal Flush: A♠ K♠ Q♠ J♠ 10♠
8. Straight Flush: 5 consecutive cards of same suit
7. Four of a Kind: 4 cards of same rank
6. Full House: 3 of a kind + pair
5. Flush: 5 cards of same suit
4. Straight: 5 consecutive cards
3. Three of a Kind: 3 cards of same rank
2. Two Pair: 2 different pairs
1. One Pair: 2 cards of same rank
0. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which is 5-high.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import total_ordering
from itertools import combinations
from enum import IntEnum
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from pokerarena.core.card import Card, Rank
from pokerarena.core.errors import InsufficientCards


class HandCategory(IntEnum):
    """Hand categories from worst (0) to best (9)."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


HAND_CATEGORY_NAMES = {
    HandCategory.ROYAL_FLUSH: "Royal Flush",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.HIGH_CARD: "High Card",
}

WHEEL = [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]


@total_ordering
@dataclass(frozen=True, eq=False)
class HandRank:
    """
    The value of a 5-card poker hand.

    Attributes:
        category: Hand category (HIGH_CARD .. ROYAL_FLUSH)
        primary: The defining rank value (e.g. the trips in a full house)
        kickers: Tie-break rank values, most significant first
        best_cards: The five cards that make this hand (not compared)
    """
    category: HandCategory
    primary: int
    kickers: Tuple[int, ...] = ()
    best_cards: Tuple[Card, ...] = field(default=(), repr=False)

    @property
    def name(self) -> str:
        return HAND_CATEGORY_NAMES[self.category]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandRank):
            return NotImplemented
        return compare(self, other) == 0

    def __lt__(self, other: HandRank) -> bool:
        return compare(self, other) < 0

    def __hash__(self) -> int:
        kickers = tuple(self.kickers)
        while kickers and kickers[-1] == 0:
            kickers = kickers[:-1]
        return hash((int(self.category), self.primary, kickers))

    def describe(self) -> str:
        """Human-readable description like 'Full House, Kings full of Twos'."""
        return _describe(self)

    def to_dict(self) -> dict:
        return {
            "category": int(self.category),
            "name": self.name,
            "primary": self.primary,
            "kickers": list(self.kickers),
            "description": self.describe(),
            "cards": [c.to_dict() for c in self.best_cards],
        }


def compare(a: HandRank, b: HandRank) -> int:
    """
    Compare two hand ranks.

    Returns:
        1 if a is better, -1 if b is better, 0 if they tie
    """
    key_a = (int(a.category), a.primary)
    key_b = (int(b.category), b.primary)
    if key_a != key_b:
        return 1 if key_a > key_b else -1

    for i in range(max(len(a.kickers), len(b.kickers))):
        kicker_a = a.kickers[i] if i < len(a.kickers) else 0
        kicker_b = b.kickers[i] if i < len(b.kickers) else 0
        if kicker_a != kicker_b:
            return 1 if kicker_a > kicker_b else -1
    return 0


def evaluate(cards: Sequence[Card]) -> HandRank:
    """
    Evaluate a poker hand (5-7 cards).

    Every 5-card subset is scored and the best one is returned.

    Raises:
        InsufficientCards: If fewer than 5 cards are given
        ValueError: If more than 7 cards are given
    """
    if len(cards) < 5:
        raise InsufficientCards(f"Need at least 5 cards to evaluate a hand, got {len(cards)}")
    if len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")

    best: Optional[HandRank] = None
    for combo in combinations(cards, 5):
        hand = _evaluate_5_cards(combo)
        if best is None or compare(hand, best) > 0:
            best = hand
    return best


def _evaluate_5_cards(cards: Sequence[Card]) -> HandRank:
    """Evaluate exactly 5 cards."""
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [c.rank for c in sorted_cards]

    is_flush = len({c.suit for c in sorted_cards}) == 1
    straight_high = _straight_high(ranks)

    rank_counts = Counter(ranks)
    # Ranks ordered by (count, rank) descending: quads/trips/pairs first
    grouped = sorted(rank_counts, key=lambda r: (rank_counts[r], r), reverse=True)
    counts = [rank_counts[r] for r in grouped]
    best_cards = tuple(sorted(sorted_cards, key=lambda c: (rank_counts[c.rank], c.rank), reverse=True))

    if straight_high is not None and is_flush:
        category = HandCategory.ROYAL_FLUSH if straight_high == Rank.ACE else HandCategory.STRAIGHT_FLUSH
        return HandRank(category, int(straight_high), (), _straight_order(sorted_cards, straight_high))

    if counts == [4, 1]:
        return HandRank(HandCategory.FOUR_OF_A_KIND, int(grouped[0]), (int(grouped[1]),), best_cards)

    if counts == [3, 2]:
        return HandRank(HandCategory.FULL_HOUSE, int(grouped[0]), (int(grouped[1]),), best_cards)

    if is_flush:
        return HandRank(HandCategory.FLUSH, int(ranks[0]), tuple(int(r) for r in ranks[1:]), tuple(sorted_cards))

    if straight_high is not None:
        return HandRank(HandCategory.STRAIGHT, int(straight_high), (), _straight_order(sorted_cards, straight_high))

    if counts == [3, 1, 1]:
        return HandRank(HandCategory.THREE_OF_A_KIND, int(grouped[0]),
                        tuple(int(r) for r in grouped[1:]), best_cards)

    if counts == [2, 2, 1]:
        return HandRank(HandCategory.TWO_PAIR, int(grouped[0]),
                        (int(grouped[1]), int(grouped[2])), best_cards)

    if counts == [2, 1, 1, 1]:
        return HandRank(HandCategory.ONE_PAIR, int(grouped[0]),
                        tuple(int(r) for r in grouped[1:]), best_cards)

    return HandRank(HandCategory.HIGH_CARD, int(ranks[0]), tuple(int(r) for r in ranks[1:]), tuple(sorted_cards))


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """High card of the straight formed by five ranks, or None."""
    unique_ranks = sorted(set(ranks), reverse=True)
    if len(unique_ranks) != 5:
        return None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return unique_ranks[0]

    if unique_ranks == WHEEL:
        return Rank.FIVE

    return None


def _straight_order(cards: List[Card], straight_high: Rank) -> Tuple[Card, ...]:
    """Order straight cards high to low, with the Ace last in a wheel."""
    if straight_high == Rank.FIVE:
        ace = [c for c in cards if c.rank == Rank.ACE]
        others = [c for c in cards if c.rank != Rank.ACE]
        return tuple(others + ace)
    return tuple(cards)


def compare_hands(cards1: Sequence[Card], cards2: Sequence[Card]) -> int:
    """
    Evaluate and compare two sets of cards.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    return compare(evaluate(cards1), evaluate(cards2))


def get_hand_description(cards: Sequence[Card]) -> str:
    """Get a human-readable description of the best hand in `cards`."""
    if len(cards) < 5:
        return "Incomplete hand"
    return evaluate(cards).describe()


_RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}


def _rank_name(value: int) -> str:
    return _RANK_NAMES[Rank(value)]


def _plural(value: int) -> str:
    name = _rank_name(value)
    return f"{name}es" if name == "Six" else f"{name}s"


def _describe(hand: HandRank) -> str:
    category = hand.category
    if category == HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    if category == HandCategory.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(hand.primary)} high"
    if category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(hand.primary)}"
    if category == HandCategory.FULL_HOUSE:
        return f"Full House, {_plural(hand.primary)} full of {_plural(hand.kickers[0])}"
    if category == HandCategory.FLUSH:
        return f"Flush, {_rank_name(hand.primary)} high"
    if category == HandCategory.STRAIGHT:
        if hand.primary == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(hand.primary)} high"
    if category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(hand.primary)}"
    if category == HandCategory.TWO_PAIR:
        return f"Two Pair, {_plural(hand.primary)} and {_plural(hand.kickers[0])}"
    if category == HandCategory.ONE_PAIR:
        return f"Pair of {_plural(hand.primary)}"
    return f"High Card, {_rank_name(hand.primary)}"
