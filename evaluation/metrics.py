"""
评估指标

从终局状态提取单局指标，并汇总为胜率、局长等统计
"""
from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass, field
from collections import defaultdict
import numpy as np

from core.actions import PlayType
from core.rules import RuleEngine
from core.state import GameState, Player


@dataclass
class GameMetrics:
    """
    单局游戏指标

    Attributes:
        seats: 座位到智能体名称的映射
        winner: 胜者名称，未分胜负 (步数上限) 为 None
        first_player: 先手智能体名称
        length: 总步数 (出牌 + 摸牌)
        draws: 摸牌/过的次数
        cards_left: 终局时各智能体剩余牌数
        play_types: 各牌型出现次数
    """
    seats: Dict[Player, str]
    winner: Optional[str]
    first_player: str
    length: int
    draws: int
    cards_left: Dict[str, int] = field(default_factory=dict)
    play_types: Dict[PlayType, int] = field(default_factory=dict)

    @classmethod
    def from_state(cls, state: GameState, seats: Dict[Player, str]) -> 'GameMetrics':
        """由终局状态构造"""
        first_seat = state.play_history[0][0] if state.play_history else state.current_player
        play_types: Dict[PlayType, int] = defaultdict(int)
        draws = 0
        for _, cards in state.play_history:
            if not cards:
                draws += 1
                continue
            play = RuleEngine.classify(cards)
            if play is not None:
                play_types[play.play_type] += 1

        return cls(
            seats=dict(seats),
            winner=seats[state.winner] if state.winner is not None else None,
            first_player=seats[first_seat],
            length=state.step_count,
            draws=draws,
            cards_left={seats[p]: state.card_count(p) for p in seats},
            play_types=dict(play_types),
        )

    @property
    def finished(self) -> bool:
        return self.winner is not None


class MetricsCollector:
    """
    指标收集器

    按智能体累计胜负、先手胜率、局长等数据
    """

    def __init__(self):
        self.games: List[GameMetrics] = []
        self._stats: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))

    def add_game(self, metrics: GameMetrics):
        """添加游戏指标"""
        self.games.append(metrics)

        for name in metrics.seats.values():
            stats = self._stats[name]
            won = 1 if metrics.winner == name else 0
            stats["wins"].append(won)
            stats["lengths"].append(metrics.length)
            stats["cards_left"].append(metrics.cards_left.get(name, 0))
            if metrics.first_player == name:
                stats["first_move_wins"].append(won)

    def compute_metrics(self, player: Optional[str] = None) -> Dict[str, float]:
        """
        计算指标

        Args:
            player: 智能体名称，None 表示全局

        Returns:
            指标字典
        """
        if player is not None:
            stats = self._stats[player]
            n_games = len(stats["wins"])
            if n_games == 0:
                return {}

            return {
                "games": n_games,
                "win_rate": float(np.mean(stats["wins"])),
                "first_move_games": len(stats["first_move_wins"]),
                "first_move_win_rate": (
                    float(np.mean(stats["first_move_wins"]))
                    if stats["first_move_wins"] else 0.0
                ),
                "avg_length": float(np.mean(stats["lengths"])),
                "avg_cards_left": float(np.mean(stats["cards_left"])),
            }

        n_games = len(self.games)
        if n_games == 0:
            return {}

        finished = [g for g in self.games if g.finished]
        first_mover_wins = sum(1 for g in finished if g.winner == g.first_player)
        return {
            "total_games": n_games,
            "unfinished_rate": 1.0 - len(finished) / n_games,
            "first_mover_win_rate": first_mover_wins / len(finished) if finished else 0.0,
            "avg_length": float(np.mean([g.length for g in self.games])),
            "avg_draws": float(np.mean([g.draws for g in self.games])),
        }

    def play_type_distribution(self) -> Dict[PlayType, float]:
        """各牌型在所有出牌中的占比"""
        return compute_play_type_distribution(self.games)

    def reset(self):
        """重置"""
        self.games.clear()
        self._stats.clear()


class RunningStats:
    """
    运行时统计

    在线计算均值和方差 (Welford)
    """

    def __init__(self):
        self.n = 0
        self.mean = 0.0
        self.M2 = 0.0
        self.min_val = float('inf')
        self.max_val = float('-inf')

    def update(self, x: float):
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        self.M2 += delta * (x - self.mean)
        self.min_val = min(self.min_val, x)
        self.max_val = max(self.max_val, x)

    @property
    def variance(self) -> float:
        """样本方差"""
        if self.n < 2:
            return 0.0
        return self.M2 / (self.n - 1)

    @property
    def std(self) -> float:
        return float(np.sqrt(self.variance))

    def to_dict(self) -> Dict[str, float]:
        return {
            "count": self.n,
            "mean": self.mean,
            "std": self.std,
            "min": self.min_val if self.n > 0 else 0.0,
            "max": self.max_val if self.n > 0 else 0.0,
        }


def compute_play_type_distribution(games: Iterable[GameMetrics]) -> Dict[PlayType, float]:
    """
    计算牌型分布

    Args:
        games: 单局指标

    Returns:
        牌型 -> 占比，无出牌时为空
    """
    types = [t for t in PlayType if t != PlayType.TRIPLE]
    counts = np.zeros(len(types), dtype=np.float64)
    for game in games:
        for i, t in enumerate(types):
            counts[i] += game.play_types.get(t, 0)

    total = counts.sum()
    if total == 0:
        return {}
    return {t: float(c / total) for t, c in zip(types, counts)}
