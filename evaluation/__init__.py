"""
Evaluation Layer - 评估框架

Modules:
    evaluator: 评估器和智能体
    arena: 对战竞技场
    metrics: 评估指标
    elo: ELO 评分系统
"""
from .evaluator import (
    EvalResult,
    Agent,
    RandomAgent,
    GreedyAgent,
    DefensiveAgent,
    Evaluator,
    play_game,
)
from .arena import (
    MatchResult,
    TournamentResult,
    Arena,
    LeaderBoard,
)
from .metrics import (
    GameMetrics,
    MetricsCollector,
    RunningStats,
    compute_play_type_distribution,
)
from .elo import (
    PlayerRating,
    EloSystem,
)

__all__ = [
    # evaluator
    "EvalResult",
    "Agent",
    "RandomAgent",
    "GreedyAgent",
    "DefensiveAgent",
    "Evaluator",
    "play_game",
    # arena
    "MatchResult",
    "TournamentResult",
    "Arena",
    "LeaderBoard",
    # metrics
    "GameMetrics",
    "MetricsCollector",
    "RunningStats",
    "compute_play_type_distribution",
    # elo
    "PlayerRating",
    "EloSystem",
]
