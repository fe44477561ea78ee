"""
奖励函数

支持两种奖励设计:
- 终局奖励 (sparse)
- 过程奖励 (shaped): 终局奖励 + 每张手牌变化的小奖励
"""
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from core.state import GameState, Player


class RewardType(Enum):
    """奖励类型"""
    SPARSE = "sparse"      # 仅终局奖励
    SHAPED = "shaped"      # 过程奖励


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.SPARSE
    win_reward: float = 1.0
    lose_reward: float = -1.0
    card_reward: float = 0.01     # 每少一张手牌的奖励 (摸牌为负)
    illegal_penalty: float = -1.0  # 非法动作惩罚


class RewardCalculator:
    """
    奖励计算器

    根据配置计算指定玩家视角的奖励
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(
        self,
        state: GameState,
        prev_state: Optional[GameState] = None,
        player: Player = Player.HUMAN,
    ) -> float:
        """
        计算奖励

        Args:
            state: 当前状态
            prev_state: 前一状态 (用于 shaped 奖励)
            player: 计算奖励的玩家视角

        Returns:
            奖励值
        """
        reward = self._sparse_reward(state, player)
        if self.config.reward_type == RewardType.SHAPED and prev_state is not None:
            shed = prev_state.card_count(player) - state.card_count(player)
            reward += shed * self.config.card_reward
        return reward

    def _sparse_reward(self, state: GameState, player: Player) -> float:
        """
        稀疏奖励：仅在游戏结束时给予

        Returns:
            胜利: win_reward, 失败: lose_reward, 其他: 0
        """
        if not state.is_finished:
            return 0.0
        if state.winner == player:
            return self.config.win_reward
        return self.config.lose_reward


def create_reward_calculator(reward_type: str = "sparse", **kwargs) -> RewardCalculator:
    """
    工厂函数：创建奖励计算器

    Args:
        reward_type: 奖励类型 ("sparse", "shaped")
        **kwargs: 其他配置参数
    """
    return RewardCalculator(RewardConfig(reward_type=RewardType(reward_type), **kwargs))
