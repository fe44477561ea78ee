"""
观察空间编码

将游戏状态转换为定长 numpy 特征，并把离散动作索引映射到合法出牌
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import numpy as np

from core.state import GameState, Player, RoundPhase
from core.cards import cards_to_array, DECK_SIZE
from core.actions import Play, RequiredKind


# 约束类别的 one-hot 顺序: 无约束, 单张, 对子, 五张
REQUIRED_KIND_ORDER = (None, RequiredKind.SINGLE, RequiredKind.PAIR, RequiredKind.FIVE_CARD)

# 动作空间中可编码的出牌数上限 (动作 0 为摸牌/过)
MAX_LEGAL_PLAYS = 256


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        hand: 自己的手牌 (52,)
        table: 整局已出的牌 (52,)
        incumbent: 需要压过的一手 (52,)，无约束时全 0
        required_kind: 约束类别 one-hot (4,)
        cards_left: 自己与对手剩余牌数 / 52 (2,)
        deck_left: 牌堆剩余 / 52 (1,)
        phase: 回合阶段
    """
    hand: np.ndarray
    table: np.ndarray
    incumbent: np.ndarray
    required_kind: np.ndarray
    cards_left: np.ndarray
    deck_left: np.ndarray
    phase: str

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "table": self.table,
            "incumbent": self.incumbent,
            "required_kind": self.required_kind,
            "cards_left": self.cards_left,
            "deck_left": self.deck_left,
        }

    def to_flat_array(self) -> np.ndarray:
        """展平为单一向量 (52 * 3 + 4 + 2 + 1 = 163 维)"""
        return np.concatenate([
            self.hand,
            self.table,
            self.incumbent,
            self.required_kind,
            self.cards_left,
            self.deck_left,
        ])


class ObservationBuilder:
    """
    观测构建器

    负责将 GameState 转换为 Observation，对手手牌不可见
    """

    def build(self, state: GameState, perspective: Optional[Player] = None) -> Observation:
        """
        从游戏状态构建观测

        Args:
            state: 游戏状态
            perspective: 视角玩家 (默认为当前玩家)

        Returns:
            Observation 对象
        """
        if perspective is None:
            perspective = state.current_player

        incumbent = state.incumbent()

        return Observation(
            hand=cards_to_array(state.get_hand(perspective)),
            table=cards_to_array(state.table),
            incumbent=cards_to_array(incumbent.cards) if incumbent else np.zeros(DECK_SIZE, dtype=np.float32),
            required_kind=self._encode_required_kind(state),
            cards_left=np.array([
                state.card_count(perspective) / DECK_SIZE,
                state.card_count(perspective.opponent) / DECK_SIZE,
            ], dtype=np.float32),
            deck_left=np.array([state.deck_count / DECK_SIZE], dtype=np.float32),
            phase=state.phase.value,
        )

    def _encode_required_kind(self, state: GameState) -> np.ndarray:
        result = np.zeros(len(REQUIRED_KIND_ORDER), dtype=np.float32)
        if state.phase != RoundPhase.GAME_OVER:
            result[REQUIRED_KIND_ORDER.index(state.required_kind)] = 1.0
        return result


class ActionEncoder:
    """
    动作编码器

    动作 0 = 摸牌/过，动作 i (i >= 1) = 排序后第 i 个合法出牌；
    合法出牌按张数、rank_key、花色从弱到强排列
    """

    def __init__(self, max_plays: int = MAX_LEGAL_PLAYS):
        self.max_plays = max_plays

    @property
    def num_actions(self) -> int:
        """动作空间大小"""
        return self.max_plays + 1

    def legal_plays(self, state: GameState, player: Optional[Player] = None) -> List[Play]:
        """当前可编码的合法出牌 (已排序并截断)"""
        plays = state.get_legal_plays(player)
        plays.sort(key=lambda p: (len(p), p.rank_key, p.tiebreak_suit, sorted(p.card_ids)))
        return plays[:self.max_plays]

    def decode(self, idx: int, state: GameState, player: Optional[Player] = None) -> Optional[Play]:
        """
        将索引解码为出牌

        Returns:
            Play，动作 0 返回 None

        Raises:
            IndexError: 索引不对应任何合法出牌
        """
        if idx == 0:
            return None
        plays = self.legal_plays(state, player)
        if not 1 <= idx <= len(plays):
            raise IndexError(f"action {idx} does not map to a legal play (have {len(plays)})")
        return plays[idx - 1]

    def encode(self, play: Optional[Play], state: GameState, player: Optional[Player] = None) -> int:
        """
        将出牌编码为索引

        Returns:
            动作索引，None 为 0，找不到返回 -1
        """
        if play is None:
            return 0
        for i, candidate in enumerate(self.legal_plays(state, player)):
            if candidate.card_ids == play.card_ids:
                return i + 1
        return -1

    def build_legal_mask(self, state: GameState, player: Optional[Player] = None) -> np.ndarray:
        """
        构建合法动作掩码

        Returns:
            (num_actions,) int8 数组，游戏结束时全 0
        """
        mask = np.zeros(self.num_actions, dtype=np.int8)
        if state.is_finished:
            return mask
        mask[0] = 1
        mask[1:len(self.legal_plays(state, player)) + 1] = 1
        return mask
