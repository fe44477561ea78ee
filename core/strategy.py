"""
AI 出牌策略

枚举所有合法出牌，按从弱到强排序，
再根据对手剩余牌数做简单的防守调整 (非搜索)
"""
from typing import Dict, Iterable, List, Optional
import random

from .cards import Card
from .actions import ActionGenerator, Play, PlayType
from .config import StrategyConfig
from .state import GameState, Player


# 主动出牌时优先出五张，其次对子，最后单张
TYPE_PRIORITY: Dict[PlayType, int] = {
    PlayType.STRAIGHT: 0,
    PlayType.TRIPLE_PLUS_TWO: 0,
    PlayType.PAIR: 1,
    PlayType.SINGLE: 2,
    PlayType.TRIPLE: 3,
}


def rank_candidates(plays: Iterable[Play]) -> List[Play]:
    """
    候选出牌排序

    排序键: 牌型优先级 -> rank_key -> tiebreak_suit，结果从弱到强
    """
    return sorted(
        plays,
        key=lambda p: (TYPE_PRIORITY[p.play_type], p.rank_key, p.tiebreak_suit),
    )


class DefensiveStrategy:
    """
    防守型出牌策略

    - 对手剩余牌数 <= endgame_threshold: 出最强的一手
    - 对手剩余牌数 <= caution_threshold: 按概率出次强的一手
    - 其他情况: 出最弱的一手，保留大牌
    """

    def __init__(
        self,
        config: Optional[StrategyConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            config: 策略配置
            rng: 随机源 (测试时传入固定种子)
        """
        self.config = config or StrategyConfig()
        self.rng = rng or random.Random()

    def candidates(
        self,
        hand: Iterable[Card],
        required_play: Optional[Play],
        first_play: bool = False,
    ) -> List[Play]:
        """枚举并排序所有合法出牌"""
        generator = ActionGenerator(hand, self.config.exhaustive_kickers)
        if required_play is None:
            plays = generator.generate_all(first_play=first_play)
        else:
            plays = generator.generate_responses(required_play)
        return rank_candidates(plays)

    def select(self, ranked: List[Play], opponent_card_count: Optional[int]) -> Play:
        """
        在排好序的候选中按对手剩余牌数选择

        Args:
            ranked: 从弱到强的候选 (非空)
            opponent_card_count: 对手剩余牌数，None 表示未知
        """
        if opponent_card_count is not None:
            if opponent_card_count <= self.config.endgame_threshold:
                return ranked[-1]
            if opponent_card_count <= self.config.caution_threshold:
                if self.rng.random() < self.config.caution_probability:
                    return ranked[-2] if len(ranked) >= 2 else ranked[-1]
        return ranked[0]

    def choose(
        self,
        hand: Iterable[Card],
        required_play: Optional[Play],
        opponent_card_count: Optional[int] = None,
        first_play: bool = False,
    ) -> Optional[Play]:
        """
        选择出牌

        Args:
            hand: 手牌
            required_play: 需要压过的上一手，None 表示主动出牌
            opponent_card_count: 对手剩余牌数
            first_play: 是否为整局第一手 (只能出单张)

        Returns:
            选中的出牌，None 表示摸牌/过
        """
        ranked = self.candidates(hand, required_play, first_play)
        if not ranked:
            return None
        return self.select(ranked, opponent_card_count)

    def choose_for_state(self, state: GameState, player: Optional[Player] = None) -> Optional[Play]:
        """根据游戏状态为指定玩家选择出牌"""
        player = player or state.current_player
        return self.choose(
            state.get_hand(player),
            state.incumbent(),
            state.card_count(player.opponent),
            first_play=state.first_play_single and state.is_first_play,
        )


def choose_play(
    hand: Iterable[Card],
    required_play: Optional[Play],
    opponent_card_count: Optional[int] = None,
    rng: Optional[random.Random] = None,
    first_play: bool = False,
    config: Optional[StrategyConfig] = None,
) -> Optional[Play]:
    """
    AI 出牌决策

    Returns:
        选中的出牌，None 表示摸牌/过
    """
    strategy = DefensiveStrategy(config=config, rng=rng)
    return strategy.choose(hand, required_play, opponent_card_count, first_play)
