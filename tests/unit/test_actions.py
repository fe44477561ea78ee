"""牌型与出牌生成测试"""
import pytest

from core.cards import str_to_cards
from core.actions import ActionGenerator, Play, PlayType, RequiredKind


def play_of(s: str) -> Play:
    return Play.from_cards(str_to_cards(s))


class TestRequiredKind:
    """RequiredKind 测试"""

    def test_sizes(self):
        assert RequiredKind.SINGLE.size == 1
        assert RequiredKind.PAIR.size == 2
        assert RequiredKind.FIVE_CARD.size == 5

    def test_of(self):
        assert RequiredKind.of(PlayType.SINGLE) == RequiredKind.SINGLE
        assert RequiredKind.of(PlayType.PAIR) == RequiredKind.PAIR
        assert RequiredKind.of(PlayType.STRAIGHT) == RequiredKind.FIVE_CARD
        assert RequiredKind.of(PlayType.TRIPLE_PLUS_TWO) == RequiredKind.FIVE_CARD

    def test_triple_sets_no_constraint(self):
        with pytest.raises(ValueError):
            RequiredKind.of(PlayType.TRIPLE)


class TestPlay:
    """Play 测试"""

    def test_from_cards(self):
        play = play_of("7S 7H")
        assert play.play_type == PlayType.PAIR
        assert len(play) == 2
        assert play.required_kind == RequiredKind.PAIR

    def test_from_cards_invalid(self):
        assert Play.from_cards(str_to_cards("7S 8H")) is None

    def test_card_ids(self):
        play = play_of("2S 2C")
        assert play.card_ids == frozenset({0, 1})

    def test_is_five_card(self):
        assert play_of("3S 4D 5C 6H 7S").is_five_card
        assert not play_of("3S").is_five_card


class TestActionGenerator:
    """ActionGenerator 测试"""

    def test_singles(self):
        gen = ActionGenerator(str_to_cards("3S 5D 9H"))
        assert len(gen.gen_singles()) == 3

    def test_pairs_all_combinations(self):
        gen = ActionGenerator(str_to_cards("7S 7C 7H 9D"))
        # 三张 7 组成 3 个不同对子
        assert len(gen.gen_pairs()) == 3

    def test_straights(self):
        gen = ActionGenerator(str_to_cards("3S 4D 5C 6H 7S 8S"))
        straights = gen.gen_straights()
        assert {p.rank_key for p in straights} == {7, 8}

    def test_straight_uses_highest_suit(self):
        gen = ActionGenerator(str_to_cards("3S 4D 5C 6H 7S 7H"))
        (straight,) = gen.gen_straights()
        assert str(straight.cards[-1]) == "7♥"

    def test_low_ace_straight(self):
        gen = ActionGenerator(str_to_cards("AS 2D 3C 4H 5S"))
        (straight,) = gen.gen_straights()
        assert straight.play_type == PlayType.STRAIGHT
        assert straight.rank_key == 5

    def test_no_straight_with_gap(self):
        gen = ActionGenerator(str_to_cards("3S 4D 5C 6H 8S"))
        assert gen.gen_straights() == []

    def test_triple_plus_two_lowest_kickers(self):
        gen = ActionGenerator(str_to_cards("9S 9C 9H 3D 4S KH"))
        (tpt,) = gen.gen_triple_plus_two()
        assert tpt.play_type == PlayType.TRIPLE_PLUS_TWO
        assert tpt.rank_key == 9
        assert {str(c) for c in tpt.cards} == {"9♠", "9♣", "9♥", "3♦", "4♠"}

    def test_triple_plus_two_exhaustive(self):
        gen = ActionGenerator(str_to_cards("9S 9C 9H 3D 4S KH"), exhaustive_kickers=True)
        # C(3, 2) 种带牌
        assert len(gen.gen_triple_plus_two()) == 3

    def test_quad_kickers_skip_same_rank(self):
        gen = ActionGenerator(str_to_cards("7S 7C 7D 7H 2S 3S"))
        plays = gen.gen_triple_plus_two()
        # 4 个三张组合，各带 2♠ 3♠
        assert len(plays) == 4
        assert all(p.play_type == PlayType.TRIPLE_PLUS_TWO for p in plays)

    def test_triple_plus_two_needs_five_cards(self):
        gen = ActionGenerator(str_to_cards("9S 9C 9H 3D"))
        assert gen.gen_triple_plus_two() == []

    def test_generate_all_first_play_singles_only(self):
        gen = ActionGenerator(str_to_cards("7S 7H 8D"))
        plays = gen.generate_all(first_play=True)
        assert all(p.play_type == PlayType.SINGLE for p in plays)
        assert len(plays) == 3

    def test_generate_all(self):
        gen = ActionGenerator(str_to_cards("7S 7H 8D"))
        assert len(gen.generate_all()) == 4  # 3 单张 + 1 对子

    def test_generate_responses_single(self):
        gen = ActionGenerator(str_to_cards("3S 5D 5H 9C"))
        responses = gen.generate_responses(play_of("5D"))
        assert {str(p) for p in responses} == {"5♥", "9♣"}

    def test_generate_responses_five_card_cross_type(self):
        hand = str_to_cards("7S 8D 9C 10H JS 2D")
        gen = ActionGenerator(hand)
        responses = gen.generate_responses(play_of("KS KC KH 3S 4S"))
        assert len(responses) == 1
        assert responses[0].play_type == PlayType.STRAIGHT

    def test_generate_responses_none(self):
        gen = ActionGenerator(str_to_cards("3S 4D"))
        assert gen.generate_responses(play_of("AH")) == []
