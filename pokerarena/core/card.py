"""
Card and Deck classes for Texas Hold'em.

Cards are immutable values compared by (rank, suit). A Deck is consumed
front-to-back and never holds the same card twice.

Dealing between streets uses a fresh shuffled deck filtered against every
card already in play (see `deck_without`), so no deck object has to be
carried inside the game state.
"""

from __future__ import annotations
import random
from typing import Iterable, List, Optional
from enum import IntEnum

from pokerarena.core.errors import DeckExhausted


class Suit(IntEnum):
    """Card suits."""
    CLUBS = 0     # ♣
    DIAMONDS = 1  # ♦
    HEARTS = 2    # ♥
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks, valued 2 (lowest) to 14 (Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_NAMES = {
    Suit.CLUBS: "clubs",
    Suit.DIAMONDS: "diamonds",
    Suit.HEARTS: "hearts",
    Suit.SPADES: "spades",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_LABELS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

# Reverse mappings
LABEL_TO_RANK = {v: k for k, v in RANK_LABELS.items()}
LABEL_TO_RANK["T"] = Rank.TEN
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}
NAME_TO_SUIT = {v: k for k, v in SUIT_NAMES.items()}

DECK_SIZE = 52


class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10♥")
    - A wire dict: Card.from_dict({"rank": "A", "suit": "spades"})

    Cards are immutable; equality and hashing use (rank, suit).
    """

    __slots__ = ("_rank", "_suit")

    def __init__(self, rank: Rank, suit: Suit):
        object.__setattr__(self, "_rank", Rank(rank))
        object.__setattr__(self, "_suit", Suit(suit))

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def suit(self) -> Suit:
        return self._suit

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "10d", "2c" (rank + suit char)
        - "A♠", "K♥", "10♦", "2♣" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_part = s[:-1].upper()
        suit_part = s[-1]

        if rank_part not in LABEL_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(LABEL_TO_RANK[rank_part], suit)

    @classmethod
    def from_dict(cls, data: dict) -> Card:
        """Create a card from {"rank": "10", "suit": "hearts"}."""
        try:
            return cls(LABEL_TO_RANK[str(data["rank"]).upper()], NAME_TO_SUIT[data["suit"]])
        except KeyError as e:
            raise ValueError(f"Invalid card payload: {data!r}") from e

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self._rank == other._rank and self._suit == other._suit
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._rank, self._suit))

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self._rank < other._rank

    def __repr__(self) -> str:
        return f"Card({RANK_LABELS[self._rank]}{SUIT_CHARS[self._suit]})"

    def __str__(self) -> str:
        return f"{RANK_LABELS[self._rank]}{SUIT_SYMBOLS[self._suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', '10h'."""
        return f"{RANK_LABELS[self._rank]}{SUIT_CHARS[self._suit]}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": RANK_LABELS[self._rank],
            "suit": SUIT_NAMES[self._suit],
            "text": str(self),
        }


def full_deck() -> List[Card]:
    """All 52 cards in a fixed order."""
    return [Card(rank, suit) for rank in Rank for suit in Suit]


class Deck:
    """
    An ordered sequence of unique cards, dealt from the front.

    Usage:
        deck = new_shuffled_deck(random.Random(7))
        hole_cards = deck.deal_many(2)
        card = deck.deal()
    """

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: List[Card] = list(full_deck() if cards is None else cards)
        if len(set(self._cards)) != len(self._cards):
            raise ValueError("Deck cannot contain duplicate cards")

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """Shuffle the remaining cards in place (Fisher-Yates)."""
        (rng or random).shuffle(self._cards)

    def deal(self) -> Card:
        """
        Remove and return the front card.

        Raises:
            DeckExhausted: If the deck is empty.
        """
        if not self._cards:
            raise DeckExhausted("Cannot deal from an empty deck")
        return self._cards.pop(0)

    def deal_many(self, n: int) -> List[Card]:
        """Deal n cards from the front of the deck."""
        if n > len(self._cards):
            raise DeckExhausted(f"Cannot deal {n} cards, only {len(self._cards)} remain")
        return [self.deal() for _ in range(n)]

    @property
    def cards(self) -> List[Card]:
        return self._cards.copy()

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def new_shuffled_deck(rng: Optional[random.Random] = None) -> Deck:
    """A full 52-card deck in uniformly random order."""
    deck = Deck()
    deck.shuffle(rng)
    return deck


def deck_without(in_play: Iterable[Card], rng: Optional[random.Random] = None) -> Deck:
    """
    A freshly shuffled deck with every card in `in_play` removed.

    Used to deal each street without carrying deck state between calls.
    """
    excluded = set(in_play)
    deck = new_shuffled_deck(rng)
    return Deck(card for card in deck.cards if card not in excluded)


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse space-separated cards, e.g. "As Kh 10d" or "A♠ K♥ T♦".
    """
    return [Card.from_string(s) for s in cards_str.split()]
