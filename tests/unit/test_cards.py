"""牌定义测试"""
import random

import numpy as np
import pytest

from core.cards import (
    Card,
    Rank,
    Suit,
    FULL_DECK,
    DECK_SIZE,
    card_index,
    new_deck,
    sort_cards,
    cards_to_str,
    str_to_card,
    str_to_cards,
    cards_to_array,
    array_to_cards,
)


class TestCard:
    """Card 测试"""

    def test_make_uses_canonical_id(self):
        card = Card.make(Rank.TWO, Suit.SPADES)
        assert card.id == 0
        assert Card.make(Rank.ACE, Suit.HEARTS).id == 51

    def test_ordering_rank_then_suit(self):
        five_hearts = Card.make(5, Suit.HEARTS)
        six_spades = Card.make(6, Suit.SPADES)
        five_spades = Card.make(5, Suit.SPADES)
        assert five_spades < five_hearts < six_spades

    def test_str(self):
        assert str(Card.make(10, Suit.HEARTS)) == "10♥"
        assert str(Card.make(Rank.ACE, Suit.SPADES)) == "A♠"

    def test_frozen(self):
        card = Card.make(3, Suit.CLUBS)
        with pytest.raises(Exception):
            card.rank = Rank.FOUR


class TestDeck:
    """牌组测试"""

    def test_full_deck(self):
        assert len(FULL_DECK) == DECK_SIZE
        assert len({c.id for c in FULL_DECK}) == DECK_SIZE
        assert [c.id for c in FULL_DECK] == list(range(DECK_SIZE))

    def test_new_deck_is_permutation(self):
        deck = new_deck(random.Random(1))
        assert sorted(c.id for c in deck) == list(range(DECK_SIZE))

    def test_new_deck_deterministic(self):
        assert new_deck(random.Random(7)) == new_deck(random.Random(7))

    def test_card_index(self):
        assert card_index(3, 1) == 4
        assert card_index(14, 4) == 51


class TestConversions:
    """转换函数测试"""

    def test_str_to_card_symbols_and_letters(self):
        assert str_to_card("10♥") == Card.make(10, Suit.HEARTS)
        assert str_to_card("qs") == Card.make(12, Suit.SPADES)
        assert str_to_card("TD") == Card.make(10, Suit.DIAMONDS)

    def test_str_to_card_invalid(self):
        with pytest.raises(ValueError):
            str_to_card("1X")
        with pytest.raises(ValueError):
            str_to_card("Z")

    def test_str_to_cards_separators(self):
        assert str_to_cards("7S,7C") == str_to_cards("7S 7C")
        assert len(str_to_cards("4♠ 5♦ 10♥")) == 3

    def test_cards_to_str_sorted(self):
        assert cards_to_str(str_to_cards("10H 4S 5D")) == "4♠ 5♦ 10♥"

    def test_sort_cards(self):
        cards = str_to_cards("KH 2C 2S")
        assert [str(c) for c in sort_cards(cards)] == ["2♠", "2♣", "K♥"]

    def test_array_round_trip(self):
        cards = str_to_cards("3S 9D AH")
        array = cards_to_array(cards)
        assert array.shape == (DECK_SIZE,)
        assert array.dtype == np.float32
        assert array.sum() == 3
        assert array_to_cards(array) == sort_cards(cards)
