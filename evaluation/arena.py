"""
对战竞技场

组织智能体两两对战
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
from collections import defaultdict
from itertools import combinations
import random
import logging

from core.config import GameConfig
from core.state import GameState, Player
from .evaluator import Agent, DEFAULT_MAX_STEPS, play_game
from .elo import EloSystem

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """对局结果"""
    agents: Tuple[str, str]  # (player 座位, computer 座位)
    winner: Optional[str]    # 胜者名称，截断时为 None
    first_player: str
    length: int
    cards_left: Tuple[int, int]

    @property
    def loser(self) -> Optional[str]:
        if self.winner is None:
            return None
        return self.agents[1] if self.winner == self.agents[0] else self.agents[0]


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_games: int
    matches: List[MatchResult]

    def get_ranking(self) -> List[Tuple[str, float]]:
        """获取排名"""
        return sorted(
            [(name, stats["win_rate"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, win_rate) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {win_rate:.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    组织智能体之间的对战，双方交替坐两个座位
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        max_steps: int = DEFAULT_MAX_STEPS,
        seed: Optional[int] = None,
    ):
        self.config = config or GameConfig()
        self.max_steps = max_steps
        self.rng = random.Random(seed if seed is not None else self.config.seed)

    def play_match(
        self,
        agent_a: Agent,
        agent_b: Agent,
        n_games: int = 1,
    ) -> List[MatchResult]:
        """
        进行对局

        Args:
            agent_a: 智能体 A (偶数局坐 player 座位)
            agent_b: 智能体 B
            n_games: 对局数

        Returns:
            对局结果列表
        """
        if agent_a.name == agent_b.name:
            raise ValueError("agents in a match need distinct names")

        results = []
        for game_idx in range(n_games):
            if game_idx % 2 == 0:
                seats = {Player.HUMAN: agent_a, Player.COMPUTER: agent_b}
            else:
                seats = {Player.HUMAN: agent_b, Player.COMPUTER: agent_a}

            state = GameState.initial(
                hand_size=self.config.hand_size,
                rng=self.rng,
                first_play_single=self.config.first_play_single,
            )
            first = seats[state.current_player].name
            final = play_game(seats, state, self.max_steps)

            results.append(MatchResult(
                agents=(seats[Player.HUMAN].name, seats[Player.COMPUTER].name),
                winner=seats[final.winner].name if final.winner is not None else None,
                first_player=first,
                length=final.step_count,
                cards_left=(final.card_count(Player.HUMAN), final.card_count(Player.COMPUTER)),
            ))

        return results

    def round_robin(
        self,
        agents: List[Agent],
        games_per_match: int = 10,
        elo: Optional[EloSystem] = None,
    ) -> TournamentResult:
        """
        循环赛

        每对智能体对战 games_per_match 局

        Args:
            agents: 智能体列表
            games_per_match: 每场比赛的对局数
            elo: 传入时按对局结果更新评分

        Returns:
            锦标赛结果
        """
        standings = {agent.name: defaultdict(float) for agent in agents}
        all_matches = []

        for agent_a, agent_b in combinations(agents, 2):
            results = self.play_match(agent_a, agent_b, games_per_match)
            all_matches.extend(results)

            for result in results:
                for name in result.agents:
                    standings[name]["games"] += 1
                if result.winner is None:
                    for name in result.agents:
                        standings[name]["unfinished"] += 1
                else:
                    standings[result.winner]["wins"] += 1
                    standings[result.loser]["losses"] += 1
                if elo is not None:
                    elo.record_result(result)

            logger.info(
                "%s vs %s: %d games played",
                agent_a.name, agent_b.name, len(results),
            )

        # 计算胜率
        for name, stats in standings.items():
            stats["win_rate"] = stats["wins"] / stats["games"] if stats["games"] > 0 else 0.0

        return TournamentResult(
            standings=dict(standings),
            total_games=len(all_matches),
            matches=all_matches,
        )


class LeaderBoard:
    """
    排行榜

    追踪智能体历史表现
    """

    def __init__(self):
        self.records: Dict[str, Dict[str, float]] = {}
        self.history: List[Dict] = []

    def update(self, tournament_result: TournamentResult):
        """更新排行榜"""
        for name, stats in tournament_result.standings.items():
            record = self.records.setdefault(name, defaultdict(float))
            record["total_games"] += stats.get("games", 0)
            record["total_wins"] += stats.get("wins", 0)
            if record["total_games"] > 0:
                record["overall_win_rate"] = record["total_wins"] / record["total_games"]

        self.history.append({
            "standings": tournament_result.standings,
            "total_games": tournament_result.total_games,
        })

    def get_ranking(self) -> List[Tuple[str, float, int]]:
        """获取排名 (名称, 胜率, 总场次)"""
        return sorted(
            [
                (name, stats.get("overall_win_rate", 0.0), int(stats.get("total_games", 0)))
                for name, stats in self.records.items()
            ],
            key=lambda x: (x[1], x[2]),
            reverse=True,
        )

    def __repr__(self) -> str:
        lines = ["Leaderboard:"]
        for i, (name, win_rate, games) in enumerate(self.get_ranking()):
            lines.append(f"  {i+1}. {name}: {win_rate:.2%} ({games} games)")
        return "\n".join(lines)
