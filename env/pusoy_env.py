"""
Pusoy Dos Gymnasium 环境

遵循标准 Gymnasium API，智能体坐 player 座位，
computer 座位由对手 Agent 自动行动
"""
from typing import Dict, Any, Tuple, Optional
import random
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from core.cards import cards_to_str, DECK_SIZE
from core.config import GameConfig
from core.state import GameState, Player
from evaluation.evaluator import Agent, DefensiveAgent

from .observation import ObservationBuilder, ActionEncoder, MAX_LEGAL_PLAYS, REQUIRED_KIND_ORDER
from .reward import RewardCalculator, RewardConfig, RewardType


class PusoyDosEnv(gym.Env):
    """
    Pusoy Dos Gymnasium 环境

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info

    动作 0 = 摸牌/过，动作 i = 第 i 个合法出牌，
    合法动作见 info["legal_action_mask"]
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "PusoyDos-v0",
    }

    def __init__(
        self,
        opponent: Optional[Agent] = None,
        config: Optional[GameConfig] = None,
        reward_type: str = "sparse",
        render_mode: Optional[str] = None,
        max_steps: int = 500,
        max_plays: int = MAX_LEGAL_PLAYS,
        seed: Optional[int] = None,
    ):
        """
        Args:
            opponent: computer 座位的智能体，None 时使用 DefensiveAgent
            config: 对局配置
            reward_type: 奖励类型 ("sparse", "shaped")
            render_mode: 渲染模式 ("human", "ansi", None)
            max_steps: 单局步数上限 (超过则 truncated)
            max_plays: 动作空间可编码的出牌数
            seed: 随机种子
        """
        super().__init__()

        if opponent is None:
            opponent = DefensiveAgent("computer", seed=seed)

        self.opponent = opponent
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.max_steps = max_steps
        self._seed = seed if seed is not None else self.config.seed
        self._rng = random.Random(self._seed)

        self._obs_builder = ObservationBuilder()
        self._action_encoder = ActionEncoder(max_plays)
        self._reward_calculator = RewardCalculator(
            RewardConfig(reward_type=RewardType(reward_type))
        )

        self._state: Optional[GameState] = None
        self._prev_state: Optional[GameState] = None
        self._last_opponent_action = ""

        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        self.action_space = spaces.Discrete(self._action_encoder.num_actions)
        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(DECK_SIZE,), dtype=np.float32),
            "table": spaces.Box(0, 1, shape=(DECK_SIZE,), dtype=np.float32),
            "incumbent": spaces.Box(0, 1, shape=(DECK_SIZE,), dtype=np.float32),
            "required_kind": spaces.Box(0, 1, shape=(len(REQUIRED_KIND_ORDER),), dtype=np.float32),
            "cards_left": spaces.Box(0, 1, shape=(2,), dtype=np.float32),
            "deck_left": spaces.Box(0, 1, shape=(1,), dtype=np.float32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        Args:
            seed: 随机种子
            options: 额外选项 ("first_player": "player" / "computer")

        Returns:
            (observation, info) 元组
        """
        super().reset(seed=seed)
        if seed is not None:
            self._rng = random.Random(seed)

        first_player = None
        if options and options.get("first_player"):
            first_player = Player(options["first_player"])

        self._state = GameState.initial(
            hand_size=self.config.hand_size,
            rng=self._rng,
            first_player=first_player,
            first_play_single=self.config.first_play_single,
        )
        self._prev_state = None
        self._last_opponent_action = ""
        self.opponent.reset()

        # 电脑先手时先替它行动
        self._run_opponent()

        if self.render_mode == "human":
            self.render()

        return self._build_observation(), self._build_info()

    def step(self, action) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 动作索引

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._state is None:
            raise RuntimeError("Environment not reset. Call reset() first.")
        if self._state.is_finished:
            raise RuntimeError("Episode finished. Call reset() first.")

        try:
            play = self._action_encoder.decode(int(action), self._state, Player.HUMAN)
        except IndexError:
            # 非法动作：给予惩罚并保持状态
            info = self._build_info()
            info["error"] = "Invalid action"
            return self._build_observation(), self._reward_calculator.config.illegal_penalty, False, False, info

        self._prev_state = self._state
        if play is None:
            self._state = self._state.with_draw(Player.HUMAN)
        else:
            self._state = self._state.with_play(play.cards, Player.HUMAN)

        self._run_opponent()

        reward = self._reward_calculator.compute(self._state, self._prev_state, Player.HUMAN)
        terminated = self._state.is_finished
        truncated = not terminated and self._state.step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._build_observation(), reward, terminated, truncated, self._build_info()

    def _run_opponent(self):
        """对手行动直到轮回智能体或游戏结束"""
        while not self._state.is_finished and self._state.current_player == Player.COMPUTER:
            legal_plays = self._state.get_legal_plays(Player.COMPUTER)
            play = self.opponent.act(self._state, legal_plays)
            if play is None:
                self._state = self._state.with_draw(Player.COMPUTER)
                self._last_opponent_action = "draw"
            else:
                self._state = self._state.with_play(play.cards, Player.COMPUTER)
                self._last_opponent_action = str(play)

    def _build_observation(self) -> Dict[str, np.ndarray]:
        return self._obs_builder.build(self._state, Player.HUMAN).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        info = {
            "current_player": self._state.current_player.value,
            "phase": self._state.phase.value,
            "step_count": self._state.step_count,
            "deck_count": self._state.deck_count,
            "legal_action_mask": self._action_encoder.build_legal_mask(self._state, Player.HUMAN),
            "opponent_action": self._last_opponent_action,
        }
        if self._state.is_finished:
            info["winner"] = self._state.winner.value
        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode in ("ansi", "human"):
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        state = self._state
        lines = ["=" * 50, f"Phase: {state.phase.value}", f"Current Player: {state.current_player.value}"]
        for player in Player:
            hand = state.get_hand(player)
            lines.append(f"{player.value}: {cards_to_str(hand)} ({len(hand)})")
        incumbent = state.incumbent()
        if incumbent is not None:
            lines.append(f"To beat: {incumbent}")
        lines.append(f"Deck: {state.deck_count}")
        if state.is_finished:
            lines.append(f"Winner: {state.winner.value}")
        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        pass

    @property
    def state(self) -> Optional[GameState]:
        """获取当前状态 (用于调试)"""
        return self._state

    def get_legal_plays(self):
        """获取 player 座位当前可编码的合法出牌"""
        if self._state is None or self._state.is_finished:
            return []
        return self._action_encoder.legal_plays(self._state, Player.HUMAN)

    def sample_action(self) -> int:
        """随机采样一个合法动作"""
        legal = np.flatnonzero(self._action_encoder.build_legal_mask(self._state, Player.HUMAN))
        if len(legal) == 0:
            return 0
        return int(self.np_random.choice(legal))


def make_env(env_id: str = "PusoyDos-v0", **kwargs) -> PusoyDosEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        PusoyDosEnv 实例
    """
    if env_id != "PusoyDos-v0":
        raise ValueError(f"Unknown env id: {env_id}")
    return PusoyDosEnv(**kwargs)
