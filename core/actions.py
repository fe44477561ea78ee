"""
牌型定义与出牌生成器

基础规则共有 5 种牌型: 单张、对子、三张、顺子、三带二
其中三张只作为三带二的组成部分，不能单独打出
"""
from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
from collections import defaultdict
import itertools

from .cards import Card, sort_cards


class PlayType(IntEnum):
    """牌型类型"""
    SINGLE = 1            # 单张
    PAIR = 2              # 对子
    TRIPLE = 3            # 三张 (仅用于组成三带二)
    STRAIGHT = 4          # 顺子 (5 张)
    TRIPLE_PLUS_TWO = 5   # 三带二 (带的两张不要求成对)


# 各牌型的张数
PLAY_TYPE_SIZE: Dict[PlayType, int] = {
    PlayType.SINGLE: 1,
    PlayType.PAIR: 2,
    PlayType.TRIPLE: 3,
    PlayType.STRAIGHT: 5,
    PlayType.TRIPLE_PLUS_TWO: 5,
}

# 可以单独打出的张数
PLAYABLE_SIZES: Tuple[int, ...] = (1, 2, 5)

# 低位 A 顺子 A-2-3-4-5
LOW_ACE_RANKS: Tuple[int, ...] = (2, 3, 4, 5, 14)


class RequiredKind(Enum):
    """跟牌约束: 下一手必须匹配的张数类别"""
    SINGLE = "single"
    PAIR = "pair"
    FIVE_CARD = "five_card"

    @property
    def size(self) -> int:
        return {"single": 1, "pair": 2, "five_card": 5}[self.value]

    @classmethod
    def of(cls, play_type: PlayType) -> 'RequiredKind':
        """由牌型得到约束类别"""
        if play_type == PlayType.SINGLE:
            return cls.SINGLE
        if play_type == PlayType.PAIR:
            return cls.PAIR
        if play_type in (PlayType.STRAIGHT, PlayType.TRIPLE_PLUS_TWO):
            return cls.FIVE_CARD
        raise ValueError(f"{play_type.name} cannot set a constraint")


@dataclass(frozen=True)
class Play:
    """
    不可变的牌型识别结果

    Attributes:
        cards: 组成牌型的牌 (已按牌面值、花色排序)
        play_type: 牌型
        rank_key: 主比较值
        tiebreak_suit: 次比较值 (花色)，无则为 0
    """
    cards: Tuple[Card, ...]
    play_type: PlayType
    rank_key: int
    tiebreak_suit: int = 0

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> Optional['Play']:
        """从牌列表识别牌型，不成牌型返回 None"""
        from .rules import RuleEngine
        return RuleEngine.classify(cards)

    @property
    def is_five_card(self) -> bool:
        return self.play_type in (PlayType.STRAIGHT, PlayType.TRIPLE_PLUS_TWO)

    @property
    def required_kind(self) -> RequiredKind:
        return RequiredKind.of(self.play_type)

    @property
    def card_ids(self) -> frozenset:
        return frozenset(c.id for c in self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        return ' '.join(str(c) for c in self.cards)


class ActionGenerator:
    """
    合法出牌生成器

    根据手牌生成所有可能的出牌组合
    """

    def __init__(self, hand_cards: Iterable[Card], exhaustive_kickers: bool = False):
        """
        Args:
            hand_cards: 手牌
            exhaustive_kickers: 三带二是否枚举所有带牌组合 (默认只带最小的两张)
        """
        self.hand = sort_cards(hand_cards)
        self.exhaustive_kickers = exhaustive_kickers

        # 按牌面值分组，组内按花色升序
        self.rank_groups: Dict[int, List[Card]] = defaultdict(list)
        for card in self.hand:
            self.rank_groups[int(card.rank)].append(card)

    def _classify(self, cards: List[Card]) -> Optional[Play]:
        from .rules import RuleEngine
        return RuleEngine.classify(cards)

    def gen_singles(self) -> List[Play]:
        """生成所有单张"""
        return [self._classify([card]) for card in self.hand]

    def gen_pairs(self) -> List[Play]:
        """生成所有对子 (同牌面值任意两张)"""
        result = []
        for rank in sorted(self.rank_groups):
            for combo in itertools.combinations(self.rank_groups[rank], 2):
                result.append(self._classify(list(combo)))
        return result

    def _best_of_rank(self, rank: int) -> Card:
        """同牌面值中花色最大的一张"""
        return self.rank_groups[rank][-1]

    def gen_straights(self) -> List[Play]:
        """
        生成所有顺子

        在去重排序后的牌面值上滑动长度为 5 的窗口，
        每个牌面值取花色最大的一张；另外单独检查 A-2-3-4-5
        """
        unique_ranks = sorted(self.rank_groups)
        sequences: List[Tuple[int, ...]] = []

        for start in range(len(unique_ranks) - 4):
            window = tuple(unique_ranks[start:start + 5])
            if window[-1] - window[0] == 4:
                sequences.append(window)

        if all(r in self.rank_groups for r in LOW_ACE_RANKS):
            sequences.append(LOW_ACE_RANKS)

        result = []
        for seq in sequences:
            play = self._classify([self._best_of_rank(r) for r in seq])
            if play is not None and play.play_type == PlayType.STRAIGHT:
                result.append(play)
        return result

    def gen_triple_plus_two(self) -> List[Play]:
        """
        生成所有三带二

        每个三张组合默认带其他牌面值中最小的两张，保留大牌；
        exhaustive_kickers 时枚举所有两张组合
        """
        result = []
        for rank in sorted(self.rank_groups):
            group = self.rank_groups[rank]
            if len(group) < 3:
                continue
            for triple in itertools.combinations(group, 3):
                remaining = [c for c in self.hand if int(c.rank) != rank]
                if len(remaining) < 2:
                    continue
                if self.exhaustive_kickers:
                    kicker_sets = itertools.combinations(remaining, 2)
                else:
                    kicker_sets = [remaining[:2]]
                for kickers in kicker_sets:
                    play = self._classify(list(triple) + list(kickers))
                    if play is not None and play.play_type == PlayType.TRIPLE_PLUS_TWO:
                        result.append(play)
        return result

    def gen_five_card(self) -> List[Play]:
        """生成所有五张牌型"""
        return self.gen_straights() + self.gen_triple_plus_two()

    def generate(self, kind: RequiredKind) -> List[Play]:
        """生成指定约束类别下的所有牌型"""
        if kind == RequiredKind.SINGLE:
            return self.gen_singles()
        if kind == RequiredKind.PAIR:
            return self.gen_pairs()
        return self.gen_five_card()

    def generate_all(self, first_play: bool = False) -> List[Play]:
        """
        生成所有可能的出牌 (主动出牌)

        Args:
            first_play: 是否为整局第一手 (只能出单张)

        Returns:
            所有合法出牌列表
        """
        if first_play:
            return self.gen_singles()
        return self.gen_singles() + self.gen_pairs() + self.gen_five_card()

    def generate_responses(self, last_play: Play) -> List[Play]:
        """
        生成能压过上一手的出牌

        只枚举与上一手张数相同的牌型，
        五张牌时顺子与三带二都会参与比较

        Args:
            last_play: 桌面上的上一手

        Returns:
            所有能压过的出牌列表
        """
        from .rules import RuleEngine

        candidates = self.generate(last_play.required_kind)
        return [p for p in candidates if RuleEngine.beats(p, last_play)]

