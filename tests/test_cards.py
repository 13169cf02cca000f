"""Tests for card and hand representation."""

import numpy as np
import pytest

from holdem.game.cards import Card, Deck, Hand, Rank, Suit, parse_cards


class TestCard:
    def test_from_string(self):
        card = Card.from_string("As")
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_from_string_ten(self):
        assert Card.from_string("Th") == Card(Rank.TEN, Suit.HEARTS)
        assert Card.from_string("10d") == Card(Rank.TEN, Suit.DIAMONDS)

    def test_from_string_lowercase(self):
        card = Card.from_string("kd")
        assert card.rank == Rank.KING
        assert card.suit == Suit.DIAMONDS

    def test_str(self):
        assert str(Card(Rank.ACE, Suit.SPADES)) == "As"

    def test_pretty(self):
        assert Card.from_string("Qh").pretty == "Q♥"

    def test_invalid_rank(self):
        with pytest.raises(ValueError):
            Card.from_string("Xs")

    def test_invalid_suit(self):
        with pytest.raises(ValueError):
            Card.from_string("Ax")

    def test_hashable(self):
        assert len({Card.from_string("As"), Card.from_string("As")}) == 1

    def test_to_treys(self):
        assert isinstance(Card.from_string("As").to_treys(), int)


class TestParseCards:
    def test_spaced(self):
        assert [str(c) for c in parse_cards("As Kd 7c")] == ["As", "Kd", "7c"]

    def test_compact(self):
        assert [str(c) for c in parse_cards("AsKd10c")] == ["As", "Kd", "Tc"]

    def test_odd_chunk(self):
        with pytest.raises(ValueError):
            parse_cards("AsK")


class TestHand:
    def test_from_string_specific(self):
        hand = Hand.from_string("KsAh")
        assert hand.card1.rank == Rank.ACE
        assert hand.card2.rank == Rank.KING

    def test_canonical(self):
        assert Hand.from_string("AsAh").canonical == "AA"
        assert Hand.from_string("AsKs").canonical == "AKs"
        assert Hand.from_string("AsKh").canonical == "AKo"

    def test_shorthand(self):
        assert Hand.from_string("AKs").is_suited
        assert Hand.from_string("QQ").is_pair
        assert not Hand.from_string("72o").is_suited

    def test_gap(self):
        assert Hand.from_string("JsTh").gap == 1

    def test_from_cards_needs_two(self):
        with pytest.raises(ValueError):
            Hand.from_cards(parse_cards("As"))


class TestDeck:
    def test_full_deck(self):
        deck = Deck()
        assert len(deck) == 52
        assert len(set(deck.cards)) == 52

    def test_deal_from_top(self):
        deck = Deck()
        top = deck.cards[:5]
        assert deck.deal(5) == top
        assert len(deck) == 47

    def test_deal_too_many(self):
        deck = Deck()
        with pytest.raises(ValueError):
            deck.deal(53)

    def test_burn(self):
        deck = Deck()
        top = deck.cards[0]
        assert deck.burn() == top
        assert top not in deck

    def test_remove(self):
        deck = Deck()
        card = Card.from_string("As")
        deck.remove([card])
        assert len(deck) == 51
        assert card not in deck

    def test_seeded_shuffle_replays(self):
        first = Deck(np.random.default_rng(7))
        second = Deck(np.random.default_rng(7))
        first.shuffle()
        second.shuffle()
        assert first.cards == second.cards

    def test_shuffle_keeps_cards(self):
        deck = Deck(np.random.default_rng(3))
        before = set(deck.cards)
        deck.shuffle()
        assert set(deck.cards) == before

    def test_reset(self):
        deck = Deck()
        deck.deal(20)
        deck.reset()
        assert len(deck) == 52
