"""
环境包装器
"""
from typing import Dict, Tuple
import numpy as np

import gymnasium as gym
from gymnasium import Wrapper


class FlattenObservationWrapper(Wrapper):
    """
    将字典观测展平为单一向量

    用于不支持字典观测的算法
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)

        flat_dim = sum(
            int(np.prod(space.shape)) for space in env.observation_space.spaces.values()
        )
        self.observation_space = gym.spaces.Box(
            low=0.0,
            high=1.0,
            shape=(flat_dim,),
            dtype=np.float32,
        )

    def observation(self, obs: Dict[str, np.ndarray]) -> np.ndarray:
        """按观测空间的键顺序展平"""
        return np.concatenate([
            obs[key].flatten() for key in self.env.observation_space.spaces
        ]).astype(np.float32)

    def reset(self, **kwargs) -> Tuple[np.ndarray, Dict]:
        obs, info = self.env.reset(**kwargs)
        return self.observation(obs), info

    def step(self, action) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        obs, reward, terminated, truncated, info = self.env.step(action)
        return self.observation(obs), reward, terminated, truncated, info


class RecordEpisodeStatistics(Wrapper):
    """
    记录回合统计信息

    回合结束时在 info["episode"] 中给出总奖励、步数、摸牌次数和胜者
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self._episode_reward = 0.0
        self._episode_length = 0
        self._episode_draws = 0

    def reset(self, **kwargs) -> Tuple[Dict, Dict]:
        obs, info = self.env.reset(**kwargs)
        self._episode_reward = 0.0
        self._episode_length = 0
        self._episode_draws = 0
        return obs, info

    def step(self, action) -> Tuple[Dict, float, bool, bool, Dict]:
        obs, reward, terminated, truncated, info = self.env.step(action)

        self._episode_reward += reward
        self._episode_length += 1
        if int(action) == 0:
            self._episode_draws += 1

        if terminated or truncated:
            info["episode"] = {
                "r": self._episode_reward,
                "l": self._episode_length,
                "draws": self._episode_draws,
                "winner": info.get("winner"),
            }

        return obs, reward, terminated, truncated, info


def wrap_env(
    env: gym.Env,
    flatten_obs: bool = False,
    record_stats: bool = True,
) -> gym.Env:
    """
    应用常用包装器组合

    Args:
        env: 基础环境
        flatten_obs: 是否展平观测
        record_stats: 是否记录统计

    Returns:
        包装后的环境
    """
    if record_stats:
        env = RecordEpisodeStatistics(env)
    if flatten_obs:
        env = FlattenObservationWrapper(env)
    return env
