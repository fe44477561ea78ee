"""
游戏配置

定义发牌、规则与 AI 策略相关的参数
"""
from dataclasses import dataclass
from typing import Optional


# 支持的手牌张数范围
MIN_HAND_SIZE = 7
MAX_HAND_SIZE = 10


@dataclass
class GameConfig:
    """
    对局配置

    Attributes:
        hand_size: 每位玩家初始手牌数
        first_play_single: 整局第一手是否必须为单张
        seed: 随机种子 (洗牌与先手)
    """
    hand_size: int = 10
    first_play_single: bool = True
    seed: Optional[int] = None

    def __post_init__(self):
        if not MIN_HAND_SIZE <= self.hand_size <= MAX_HAND_SIZE:
            raise ValueError(
                f"hand_size must be between {MIN_HAND_SIZE} and {MAX_HAND_SIZE}, "
                f"got {self.hand_size}"
            )

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)


@dataclass
class StrategyConfig:
    """
    AI 策略配置

    Attributes:
        endgame_threshold: 对手剩余牌数不超过该值时出最大的牌
        caution_threshold: 对手剩余牌数不超过该值时按概率出次大的牌
        caution_probability: 次大牌的触发概率
        exhaustive_kickers: 三带二是否枚举所有带牌组合
    """
    endgame_threshold: int = 3
    caution_threshold: int = 5
    caution_probability: float = 0.5
    exhaustive_kickers: bool = False

    def __post_init__(self):
        if self.endgame_threshold > self.caution_threshold:
            raise ValueError("endgame_threshold must not exceed caution_threshold")
        if not 0.0 <= self.caution_probability <= 1.0:
            raise ValueError("caution_probability must be within [0, 1]")

    @classmethod
    def from_dict(cls, d: dict) -> 'StrategyConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
