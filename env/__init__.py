"""
Environment Layer - Gymnasium 兼容环境

Modules:
    pusoy_env: 主环境类
    observation: 观测与动作编码
    reward: 奖励函数
    wrappers: 环境包装器
"""
from .pusoy_env import (
    PusoyDosEnv,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
    ActionEncoder,
    MAX_LEGAL_PLAYS,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
    create_reward_calculator,
)

from .wrappers import (
    FlattenObservationWrapper,
    RecordEpisodeStatistics,
    wrap_env,
)

__all__ = [
    # env
    "PusoyDosEnv",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
    "ActionEncoder",
    "MAX_LEGAL_PLAYS",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
    "create_reward_calculator",
    # wrappers
    "FlattenObservationWrapper",
    "RecordEpisodeStatistics",
    "wrap_env",
]
