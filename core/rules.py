"""
规则引擎 - 牌型识别、大小比较、合法性验证

所有方法都是纯函数，无状态
"""
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple
from collections import Counter

from .cards import Card, Rank, sort_cards
from .actions import (
    ActionGenerator, Play, PlayType, RequiredKind, PLAYABLE_SIZES, LOW_ACE_RANKS,
)


class ErrorCategory(Enum):
    """校验失败的类别"""
    STRUCTURAL = "structural"    # 张数或结构不成牌型
    CONSTRAINT = "constraint"    # 牌型合法但不符合当前约束
    DOMINANCE = "dominance"      # 牌型正确但压不过桌面
    TURN = "turn"                # 不是自己的回合或游戏已结束


class RejectionReason(Enum):
    """出牌被拒绝的原因"""
    WRONG_SIZE = "wrong_size"
    NOT_CLASSIFIABLE = "not_classifiable"
    KIND_MISMATCH = "kind_mismatch"
    DOES_NOT_BEAT = "does_not_beat"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_OVER = "game_over"
    CARDS_NOT_IN_HAND = "cards_not_in_hand"

    @property
    def category(self) -> ErrorCategory:
        return REASON_CATEGORY[self]

    @property
    def message(self) -> str:
        return REASON_MESSAGE[self]


REASON_CATEGORY: Dict[RejectionReason, ErrorCategory] = {
    RejectionReason.WRONG_SIZE: ErrorCategory.STRUCTURAL,
    RejectionReason.NOT_CLASSIFIABLE: ErrorCategory.STRUCTURAL,
    RejectionReason.CARDS_NOT_IN_HAND: ErrorCategory.STRUCTURAL,
    RejectionReason.KIND_MISMATCH: ErrorCategory.CONSTRAINT,
    RejectionReason.DOES_NOT_BEAT: ErrorCategory.DOMINANCE,
    RejectionReason.NOT_YOUR_TURN: ErrorCategory.TURN,
    RejectionReason.GAME_OVER: ErrorCategory.TURN,
}

REASON_MESSAGE: Dict[RejectionReason, str] = {
    RejectionReason.WRONG_SIZE: "Play 1, 2 or 5 cards.",
    RejectionReason.NOT_CLASSIFIABLE: "Those cards do not form a single, pair, straight or triple plus two.",
    RejectionReason.KIND_MISMATCH: "That hand does not match the kind on the table.",
    RejectionReason.DOES_NOT_BEAT: "That hand does not beat the last play.",
    RejectionReason.NOT_YOUR_TURN: "It is not your turn.",
    RejectionReason.GAME_OVER: "The game is over.",
    RejectionReason.CARDS_NOT_IN_HAND: "Those cards are not all in your hand.",
}


class RuleEngine:
    """
    Pusoy Dos 规则引擎

    提供牌型识别、大小比较、合法性验证等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_consecutive(ranks: List[int]) -> bool:
        """
        检查牌面值列表是否连续

        Args:
            ranks: 已排序的牌面值列表
        """
        for i in range(len(ranks) - 1):
            if ranks[i + 1] - ranks[i] != 1:
                return False
        return True

    @staticmethod
    def is_straight(cards: List[Card]) -> bool:
        """
        检查 5 张牌是否为顺子

        5 个不同牌面值连续，或为 A-2-3-4-5
        """
        if len(cards) != 5:
            return False
        unique_ranks = sorted(set(int(c.rank) for c in cards))
        if len(unique_ranks) != 5:
            return False
        return RuleEngine.is_consecutive(unique_ranks) or tuple(unique_ranks) == LOW_ACE_RANKS

    @staticmethod
    def is_triple_plus_two(cards: List[Card]) -> bool:
        """检查 5 张牌中是否恰有一个牌面值出现 3 次 (带的两张不限)"""
        if len(cards) != 5:
            return False
        counts = Counter(c.rank for c in cards)
        return list(counts.values()).count(3) == 1

    @staticmethod
    def straight_rank_key(cards: List[Card]) -> int:
        """顺子的主比较值: 最大牌面值，A-2-3-4-5 记为 5"""
        unique_ranks = tuple(sorted(set(int(c.rank) for c in cards)))
        if unique_ranks == LOW_ACE_RANKS:
            return int(Rank.FIVE)
        return unique_ranks[-1]

    @staticmethod
    def classify(cards: Iterable[Card]) -> Optional[Play]:
        """
        识别牌型

        Args:
            cards: 牌集合

        Returns:
            识别出的 Play，不成牌型返回 None
        """
        cards = sort_cards(cards)
        n = len(cards)

        # 同一张牌不能出现两次
        if len({c.id for c in cards}) != n:
            return None

        if n == 1:
            card = cards[0]
            return Play(tuple(cards), PlayType.SINGLE, int(card.rank), int(card.suit))

        if n == 2:
            if cards[0].rank == cards[1].rank:
                return Play(
                    tuple(cards), PlayType.PAIR, int(cards[0].rank),
                    max(int(c.suit) for c in cards),
                )
            return None

        if n == 3:
            if len({c.rank for c in cards}) == 1:
                return Play(tuple(cards), PlayType.TRIPLE, int(cards[0].rank))
            return None

        if n == 5:
            # 顺子优先
            if RuleEngine.is_straight(cards):
                # 花色比较取最大牌面值那张 (A-2-3-4-5 中为 A)
                top = max(cards, key=lambda c: c.sort_key)
                return Play(
                    tuple(cards), PlayType.STRAIGHT,
                    RuleEngine.straight_rank_key(cards), int(top.suit),
                )
            if RuleEngine.is_triple_plus_two(cards):
                counts = Counter(c.rank for c in cards)
                triple_rank = next(r for r, k in counts.items() if k == 3)
                return Play(tuple(cards), PlayType.TRIPLE_PLUS_TWO, int(triple_rank))

        return None

    @staticmethod
    def beats(challenger: Play, incumbent: Play) -> bool:
        """
        判断 challenger 是否压过 incumbent

        - 同牌型: 先比 rank_key，再比 tiebreak_suit
        - 顺子总是压过三带二，三带二压不过顺子
        - 其他不同牌型不可比较，返回 False
        """
        if challenger.is_five_card and incumbent.is_five_card:
            if challenger.play_type != incumbent.play_type:
                return challenger.play_type == PlayType.STRAIGHT

        if challenger.play_type != incumbent.play_type:
            return False

        return (challenger.rank_key, challenger.tiebreak_suit) > \
            (incumbent.rank_key, incumbent.tiebreak_suit)

    @staticmethod
    def compare_plays(a: Play, b: Play) -> int:
        """
        比较两手牌的大小

        Returns:
            1 if a > b, -1 if a < b, 0 if 不可比较或相等
        """
        if RuleEngine.beats(a, b):
            return 1
        if RuleEngine.beats(b, a):
            return -1
        return 0

    @staticmethod
    def check_play(
        cards: List[Card],
        required: Optional[RequiredKind],
        incumbent: Optional[Play],
        first_play: bool = False,
    ) -> Tuple[Optional[Play], Optional[RejectionReason]]:
        """
        验证一手出牌 (不含回合与手牌检查)

        Args:
            cards: 要出的牌
            required: 当前约束，None 表示主动出牌
            incumbent: 桌面上要压的牌，None 表示无需比较
            first_play: 是否为整局第一手 (只能出单张)

        Returns:
            (识别出的 Play, None) 或 (None, 拒绝原因)
        """
        if len(cards) not in PLAYABLE_SIZES:
            return None, RejectionReason.WRONG_SIZE

        play = RuleEngine.classify(cards)
        if play is None:
            return None, RejectionReason.NOT_CLASSIFIABLE

        if first_play and play.play_type != PlayType.SINGLE:
            return None, RejectionReason.KIND_MISMATCH

        if required is not None and required.size != len(play):
            return None, RejectionReason.KIND_MISMATCH

        if incumbent is not None and not RuleEngine.beats(play, incumbent):
            return None, RejectionReason.DOES_NOT_BEAT

        return play, None

    @staticmethod
    def can_beat(hand: List[Card], last_play: Play) -> bool:
        """检查手牌中是否有能压过上一手的牌"""
        return bool(ActionGenerator(hand).generate_responses(last_play))
