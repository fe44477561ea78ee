"""
ELO 评分系统

两人对局的标准 ELO，步数截断的对局记为平局
"""
from typing import Dict, List, Tuple
from dataclasses import dataclass, asdict
import json
from pathlib import Path


@dataclass
class PlayerRating:
    """智能体评分"""
    name: str
    rating: float = 1500.0
    games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    peak_rating: float = 1500.0

    @property
    def win_rate(self) -> float:
        if self.games == 0:
            return 0.0
        return self.wins / self.games

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> "PlayerRating":
        return cls(**d)


class EloSystem:
    """
    ELO 评分系统

    rating 不会低于 floor_rating
    """

    def __init__(
        self,
        k_factor: float = 32.0,
        initial_rating: float = 1500.0,
        floor_rating: float = 100.0,
    ):
        self.k_factor = k_factor
        self.initial_rating = initial_rating
        self.floor_rating = floor_rating
        self.players: Dict[str, PlayerRating] = {}

    def get_player(self, name: str) -> PlayerRating:
        """获取或创建智能体评分"""
        if name not in self.players:
            self.players[name] = PlayerRating(
                name=name, rating=self.initial_rating, peak_rating=self.initial_rating,
            )
        return self.players[name]

    @staticmethod
    def expected_score(rating_a: float, rating_b: float) -> float:
        """A 对 B 的期望得分"""
        return 1.0 / (1.0 + 10.0 ** ((rating_b - rating_a) / 400.0))

    def _apply(self, player: PlayerRating, opponent_rating: float, score: float):
        expected = self.expected_score(player.rating, opponent_rating)
        player.rating = max(player.rating + self.k_factor * (score - expected), self.floor_rating)
        player.peak_rating = max(player.peak_rating, player.rating)
        player.games += 1
        if score == 1.0:
            player.wins += 1
        elif score == 0.0:
            player.losses += 1
        else:
            player.draws += 1

    def record_game(self, name_a: str, name_b: str, score_a: float) -> Tuple[float, float]:
        """
        记录一局

        Args:
            name_a: 智能体 A
            name_b: 智能体 B
            score_a: A 的得分 (1=胜, 0.5=平, 0=负)

        Returns:
            (A 新评分, B 新评分)
        """
        a = self.get_player(name_a)
        b = self.get_player(name_b)
        rating_a, rating_b = a.rating, b.rating

        self._apply(a, rating_b, score_a)
        self._apply(b, rating_a, 1.0 - score_a)
        return a.rating, b.rating

    def record_result(self, result) -> Tuple[float, float]:
        """按竞技场的 MatchResult 记录一局"""
        name_a, name_b = result.agents
        if result.winner is None:
            score_a = 0.5
        else:
            score_a = 1.0 if result.winner == name_a else 0.0
        return self.record_game(name_a, name_b, score_a)

    def get_ranking(self) -> List[PlayerRating]:
        """按评分从高到低排名"""
        return sorted(self.players.values(), key=lambda p: p.rating, reverse=True)

    def save(self, path: str):
        """保存评分"""
        data = {
            "k_factor": self.k_factor,
            "initial_rating": self.initial_rating,
            "floor_rating": self.floor_rating,
            "players": {name: p.to_dict() for name, p in self.players.items()},
        }
        Path(path).write_text(json.dumps(data, indent=2))

    def load(self, path: str):
        """加载评分"""
        data = json.loads(Path(path).read_text())
        self.k_factor = data.get("k_factor", self.k_factor)
        self.initial_rating = data.get("initial_rating", self.initial_rating)
        self.floor_rating = data.get("floor_rating", self.floor_rating)
        self.players = {
            name: PlayerRating.from_dict(p)
            for name, p in data.get("players", {}).items()
        }
