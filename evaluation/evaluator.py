"""
评估器

让智能体在完整对局中对战并统计表现
"""
from typing import Dict, List, Optional
from dataclasses import dataclass, field
import random
import logging

from core.actions import Play
from core.config import GameConfig, StrategyConfig
from core.state import GameState, Player
from core.strategy import DefensiveStrategy
from .metrics import GameMetrics, MetricsCollector

logger = logging.getLogger(__name__)


# 单局步数上限，双方一直摸牌/过时截断
DEFAULT_MAX_STEPS = 1000


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    avg_length: float
    games_played: int
    first_move_win_rate: float = 0.0
    avg_cards_left: float = 0.0
    unfinished: int = 0
    extra_stats: Dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"avg_length={self.avg_length:.1f}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, state: GameState, legal_plays: List[Play]) -> Optional[Play]:
        """
        选择动作

        Args:
            state: 当前状态 (轮到该智能体)
            legal_plays: 当前所有合法出牌

        Returns:
            要出的牌，None 表示摸牌/过
        """
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass


class RandomAgent(Agent):
    """随机智能体"""

    def __init__(self, name: str = "random", seed: Optional[int] = None, draw_probability: float = 0.0):
        super().__init__(name)
        self.rng = random.Random(seed)
        self.draw_probability = draw_probability

    def act(self, state: GameState, legal_plays: List[Play]) -> Optional[Play]:
        if not legal_plays or self.rng.random() < self.draw_probability:
            return None
        return self.rng.choice(legal_plays)


class GreedyAgent(Agent):
    """贪心智能体: 每次出张数最多的一手，同张数出最小的"""

    def __init__(self, name: str = "greedy"):
        super().__init__(name)

    def act(self, state: GameState, legal_plays: List[Play]) -> Optional[Play]:
        if not legal_plays:
            return None
        return min(legal_plays, key=lambda p: (-len(p), p.rank_key, p.tiebreak_suit))


class DefensiveAgent(Agent):
    """使用防守型出牌策略的智能体 (即电脑方的策略)"""

    def __init__(
        self,
        name: str = "defensive",
        config: Optional[StrategyConfig] = None,
        seed: Optional[int] = None,
    ):
        super().__init__(name)
        self.strategy = DefensiveStrategy(config, rng=random.Random(seed))

    def act(self, state: GameState, legal_plays: List[Play]) -> Optional[Play]:
        # 按策略自身的配置枚举候选 (exhaustive_kickers 在此生效)
        return self.strategy.choose_for_state(state)


def play_game(
    agents: Dict[Player, Agent],
    state: GameState,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> GameState:
    """
    进行一局对战直到结束或达到步数上限

    Args:
        agents: 座位 -> 智能体
        state: 初始状态
        max_steps: 步数上限

    Returns:
        终局状态
    """
    for agent in agents.values():
        agent.reset()

    while not state.is_finished and state.step_count < max_steps:
        player = state.current_player
        legal_plays = state.get_legal_plays(player)
        play = agents[player].act(state, legal_plays)
        if play is None:
            state = state.with_draw(player)
        else:
            state = state.with_play(play.cards, player)

    if not state.is_finished:
        logger.warning("Game truncated after %d steps", state.step_count)
    return state


class Evaluator:
    """
    评估器

    智能体与对手轮流坐两个座位，统计胜率
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

    def new_state(self) -> GameState:
        return GameState.initial(
            hand_size=self.config.hand_size,
            rng=self.rng,
            first_play_single=self.config.first_play_single,
        )

    def evaluate(
        self,
        agent: Agent,
        n_games: int = 100,
        opponent: Optional[Agent] = None,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体
            n_games: 游戏数量
            opponent: 对手，默认为随机智能体
            verbose: 是否输出进度

        Returns:
            评估结果
        """
        if opponent is None:
            opponent = RandomAgent("opponent", seed=self.rng.randrange(2 ** 31))
        if opponent.name == agent.name:
            raise ValueError("agent and opponent need distinct names")

        collector = MetricsCollector()
        unfinished = 0

        for game_idx in range(n_games):
            # 轮流坐两个座位
            agent_seat = Player.HUMAN if game_idx % 2 == 0 else Player.COMPUTER
            seats = {agent_seat: agent, agent_seat.opponent: opponent}

            final = play_game(seats, self.new_state(), self.max_steps)
            metrics = GameMetrics.from_state(final, {p: a.name for p, a in seats.items()})
            collector.add_game(metrics)
            if not metrics.finished:
                unfinished += 1

            if verbose and (game_idx + 1) % 10 == 0:
                stats = collector.compute_metrics(agent.name)
                logger.info(f"Game {game_idx + 1}/{n_games}, Win rate: {stats['win_rate']:.2%}")

        stats = collector.compute_metrics(agent.name)
        if not stats:
            return EvalResult(win_rate=0.0, avg_length=0.0, games_played=0)

        return EvalResult(
            win_rate=stats["win_rate"],
            avg_length=stats["avg_length"],
            games_played=n_games,
            first_move_win_rate=stats["first_move_win_rate"],
            avg_cards_left=stats["avg_cards_left"],
            unfinished=unfinished,
            extra_stats={
                "opponent_avg_cards_left": collector.compute_metrics(opponent.name)["avg_cards_left"],
            },
        )

    def compare(
        self,
        agent1: Agent,
        agent2: Agent,
        n_games: int = 100,
    ) -> Dict[str, float]:
        """
        对比两个智能体

        Returns:
            双方胜场与胜率
        """
        result = self.evaluate(agent1, n_games=n_games, opponent=agent2)
        agent1_wins = round(result.win_rate * n_games)
        agent2_wins = n_games - agent1_wins - result.unfinished

        return {
            "agent1_wins": agent1_wins,
            "agent2_wins": agent2_wins,
            "agent1_win_rate": agent1_wins / n_games if n_games > 0 else 0.0,
            "agent2_win_rate": agent2_wins / n_games if n_games > 0 else 0.0,
        }
