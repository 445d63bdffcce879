"""
Tests for Card and Deck classes.
"""

import random

import pytest
from pokerarena.core.card import (
    Card, Deck, Rank, Suit, DECK_SIZE,
    deck_without, full_deck, new_shuffled_deck, parse_cards,
)
from pokerarena.core.errors import DeckExhausted


class TestCard:
    """Tests for Card class."""

    def test_card_creation(self):
        """Test creating a card."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_from_string(self):
        """Test creating cards from string notation."""
        card1 = Card.from_string("As")
        assert card1.rank == Rank.ACE
        assert card1.suit == Suit.SPADES

        card2 = Card.from_string("K♥")
        assert card2.rank == Rank.KING
        assert card2.suit == Suit.HEARTS

        assert Card.from_string("10d") == Card.from_string("Td")

    def test_invalid_card_string(self):
        """Test that bad notation is rejected."""
        with pytest.raises(ValueError):
            Card.from_string("Xs")
        with pytest.raises(ValueError):
            Card.from_string("Az")
        with pytest.raises(ValueError):
            Card.from_string("A")

    def test_card_equality(self):
        """Cards are equal by rank and suit."""
        assert Card(Rank.ACE, Suit.SPADES) == Card(Rank.ACE, Suit.SPADES)
        assert Card(Rank.ACE, Suit.SPADES) != Card(Rank.ACE, Suit.HEARTS)
        assert Card(Rank.ACE, Suit.SPADES) != Card(Rank.KING, Suit.SPADES)
        assert len({Card(Rank.TWO, Suit.CLUBS), Card(Rank.TWO, Suit.CLUBS)}) == 1

    def test_card_is_immutable(self):
        """Cards cannot be modified after creation."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_dict_round_trip(self):
        """Wire dicts use the long suit names."""
        card = Card(Rank.TEN, Suit.HEARTS)
        data = card.to_dict()
        assert data["rank"] == "10"
        assert data["suit"] == "hearts"
        assert Card.from_dict(data) == card

    def test_card_string(self):
        """Test string representations."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert str(card) == "A♠"
        assert card.short_str == "As"

    def test_parse_cards(self):
        """Space-separated notation parses in order."""
        cards = parse_cards("As Kh 10d")
        assert cards == [
            Card(Rank.ACE, Suit.SPADES),
            Card(Rank.KING, Suit.HEARTS),
            Card(Rank.TEN, Suit.DIAMONDS),
        ]


class TestDeck:
    """Tests for Deck class."""

    def test_full_deck_is_unique(self):
        """A full deck holds 52 distinct cards."""
        cards = full_deck()
        assert len(cards) == DECK_SIZE
        assert len(set(cards)) == DECK_SIZE

    def test_shuffled_deck_has_all_cards(self):
        """A shuffled deck still holds every card."""
        deck = new_shuffled_deck(random.Random(3))
        assert len(deck) == DECK_SIZE
        assert set(deck.cards) == set(full_deck())

    def test_shuffle_is_seeded(self):
        """The same seed gives the same order."""
        first = new_shuffled_deck(random.Random(42)).cards
        second = new_shuffled_deck(random.Random(42)).cards
        assert first == second

    def test_deal_takes_front_card(self):
        """Dealing removes the front card."""
        deck = Deck()
        front = deck.cards[0]
        assert deck.deal() == front
        assert deck.remaining == DECK_SIZE - 1
        assert front not in deck

    def test_deal_never_repeats(self):
        """Dealing the whole deck yields each card once."""
        deck = new_shuffled_deck(random.Random(9))
        dealt = [deck.deal() for _ in range(DECK_SIZE)]
        assert len(set(dealt)) == DECK_SIZE

    def test_deal_from_empty_deck(self):
        """An empty deck raises DeckExhausted."""
        deck = Deck([])
        with pytest.raises(DeckExhausted):
            deck.deal()

    def test_deal_many_too_many(self):
        """Asking for more cards than remain deals nothing."""
        deck = Deck(full_deck()[:3])
        with pytest.raises(DeckExhausted):
            deck.deal_many(4)
        assert deck.remaining == 3

    def test_duplicate_cards_rejected(self):
        """A deck cannot be built with the same card twice."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(ValueError):
            Deck([card, card])

    def test_deck_without_excludes_cards(self):
        """Filtering removes exactly the cards in play."""
        in_play = parse_cards("As Kh 10d 2c 7s")
        deck = deck_without(in_play, random.Random(5))
        assert len(deck) == DECK_SIZE - len(in_play)
        assert not set(in_play) & set(deck.cards)
