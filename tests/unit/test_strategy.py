"""AI 出牌策略测试"""
import random

import pytest

from core.cards import str_to_cards
from core.actions import Play, PlayType
from core.config import StrategyConfig
from core.state import GameState, Player
from core.strategy import DefensiveStrategy, rank_candidates, choose_play


class FixedRandom:
    """random() 返回固定值的随机源"""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def cards_of(s: str):
    return str_to_cards(s)


def play_of(s: str) -> Play:
    return Play.from_cards(str_to_cards(s))


# 一个顺子、一个对子和若干单张
OPENING_HAND = "3S 4D 5C 6H 7S 9D 9H"


class TestRankCandidates:
    """候选排序测试"""

    def test_five_card_then_pair_then_single(self):
        plays = [play_of("9D"), play_of("3S 3H"), play_of("3S 4D 5C 6H 7S"), play_of("2C")]
        ranked = rank_candidates(plays)
        assert [p.play_type for p in ranked] == [
            PlayType.STRAIGHT, PlayType.PAIR, PlayType.SINGLE, PlayType.SINGLE,
        ]
        assert str(ranked[2]) == "2♣"

    def test_suit_breaks_ties(self):
        ranked = rank_candidates([play_of("9H"), play_of("9S")])
        assert [str(p) for p in ranked] == ["9♠", "9♥"]


class TestDefensiveStrategy:
    """防守策略测试"""

    def test_opening_sheds_weakest_five_card(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, opponent_card_count=10)
        assert play.play_type == PlayType.STRAIGHT
        assert play.rank_key == 7

    def test_endgame_plays_strongest(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, opponent_card_count=2)
        assert str(play) == "9♥"

    def test_endgame_boundary(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, opponent_card_count=3)
        assert str(play) == "9♥"

    def test_caution_picks_second_strongest(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.1))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, opponent_card_count=5)
        assert str(play) == "9♦"

    def test_caution_miss_falls_through(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, opponent_card_count=4)
        assert play.play_type == PlayType.STRAIGHT

    def test_caution_single_candidate(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.1))
        play = strategy.choose(str_to_cards("3S 8D"), play_of("7C"), opponent_card_count=4)
        assert str(play) == "8♦"

    def test_unknown_opponent_count(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.1))
        play = strategy.choose(str_to_cards(OPENING_HAND), None)
        assert play.play_type == PlayType.STRAIGHT

    def test_first_play_singles_only(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, 10, first_play=True)
        assert str(play) == "3♠"

    def test_follow_weakest_beater(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards("3S 8D KH"), play_of("7C"), opponent_card_count=10)
        assert str(play) == "8♦"

    def test_follow_endgame_strongest(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        play = strategy.choose(str_to_cards("3S 8D KH"), play_of("7C"), opponent_card_count=1)
        assert str(play) == "K♥"

    def test_follow_five_card_by_cardinality(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        hand = str_to_cards("7S 8D 9C 10H JS 2D")
        play = strategy.choose(hand, play_of("KS KC KH 3S 4S"), opponent_card_count=10)
        assert play.play_type == PlayType.STRAIGHT

    def test_no_candidates_returns_none(self):
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        assert strategy.choose(str_to_cards("3S 4D"), play_of("AH"), opponent_card_count=10) is None

    def test_custom_thresholds(self):
        config = StrategyConfig(endgame_threshold=1, caution_threshold=2)
        strategy = DefensiveStrategy(config, rng=FixedRandom(0.1))
        play = strategy.choose(str_to_cards(OPENING_HAND), None, opponent_card_count=3)
        assert play.play_type == PlayType.STRAIGHT

    def test_choose_for_state(self):
        state = GameState.from_hands(
            human=cards_of("5D 6S"),
            computer=cards_of("4S 6H KD"),
        ).with_play(cards_of("5D"))
        strategy = DefensiveStrategy(rng=FixedRandom(0.9))
        # 对手只剩 1 张，出最大的
        assert str(strategy.choose_for_state(state)) == "K♦"


class TestChoosePlay:
    """choose_play 函数测试"""

    def test_seeded_rng_is_deterministic(self):
        hand = str_to_cards(OPENING_HAND)
        picks = {
            str(choose_play(hand, None, 5, rng=random.Random(11)))
            for _ in range(5)
        }
        assert len(picks) == 1

    def test_returns_legal_play(self):
        hand = str_to_cards("3S 8D KH")
        play = choose_play(hand, play_of("7C"), 10, rng=random.Random(0))
        assert play is not None
        assert play.card_ids <= {c.id for c in hand}
