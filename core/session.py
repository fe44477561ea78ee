"""
对局会话

引擎对外的边界: 开局、出牌、摸牌、AI 行动、再来一局
所有校验失败都以 Rejection 返回，不抛异常，状态保持不变
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union
import logging
import random

from .cards import Card, RANK_TO_STR, cards_to_str
from .actions import Play, PlayType, RequiredKind
from .config import GameConfig, StrategyConfig
from .rules import ErrorCategory, RejectionReason
from .state import GameState, Player, RoundPhase
from .strategy import DefensiveStrategy

logger = logging.getLogger(__name__)

CardRef = Union[Card, int]


@dataclass(frozen=True)
class GameSnapshot:
    """对局快照 (供展示层读取)"""
    hands: Dict[Player, Tuple[Card, ...]]
    deck_count: int
    current_player: Player
    table: Tuple[Card, ...]
    phase: RoundPhase
    required_kind: Optional[RequiredKind]
    winner: Optional[Player]

    @classmethod
    def from_state(cls, state: GameState) -> 'GameSnapshot':
        return cls(
            hands={p: state.get_hand(p) for p in Player},
            deck_count=state.deck_count,
            current_player=state.current_player,
            table=state.table,
            phase=state.phase,
            required_kind=state.required_kind,
            winner=state.winner,
        )


@dataclass(frozen=True)
class PlayOutcome:
    """出牌成功的结果"""
    player: Player
    play: Play
    snapshot: GameSnapshot
    message: str

    @property
    def table_delta(self) -> Tuple[Card, ...]:
        return self.play.cards

    @property
    def next_player(self) -> Player:
        return self.snapshot.current_player

    @property
    def winner(self) -> Optional[Player]:
        return self.snapshot.winner


@dataclass(frozen=True)
class DrawOutcome:
    """摸牌的结果，牌堆为空时 card 为 None (过)"""
    player: Player
    card: Optional[Card]
    snapshot: GameSnapshot
    message: str

    @property
    def passed(self) -> bool:
        return self.card is None

    @property
    def deck_count(self) -> int:
        return self.snapshot.deck_count

    @property
    def next_player(self) -> Player:
        return self.snapshot.current_player


@dataclass(frozen=True)
class Rejection:
    """校验失败"""
    reason: RejectionReason
    message: str

    @property
    def category(self) -> ErrorCategory:
        return self.reason.category


def describe_play(play: Play) -> str:
    """出牌的简短描述"""
    if play.play_type == PlayType.SINGLE:
        return str(play.cards[0])
    if play.play_type == PlayType.PAIR:
        return f"2 cards ({RANK_TO_STR[play.cards[0].rank]}s)"
    if play.play_type == PlayType.STRAIGHT:
        return f"a straight ({cards_to_str(play.cards)})"
    return f"a triple plus two ({cards_to_str(play.cards)})"


class GameSession:
    """
    人机对局会话

    持有当前 GameState、随机源和胜局统计；
    AI 的出牌与人类走同样的校验路径
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        strategy_config: Optional[StrategyConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            config: 对局配置
            strategy_config: AI 策略配置
            rng: 随机源，None 时按 config.seed 创建
        """
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.strategy = DefensiveStrategy(strategy_config, rng=self.rng)
        self.state: Optional[GameState] = None
        self.player_wins = 0
        self.computer_wins = 0
        self.message = ""

    def start_game(self, first_player: Optional[Player] = None) -> GameSnapshot:
        """
        开始新的一局

        洗牌、发牌、随机决定先手，旧状态整体丢弃
        """
        self.state = GameState.initial(
            hand_size=self.config.hand_size,
            rng=self.rng,
            first_player=first_player,
            first_play_single=self.config.first_play_single,
        )
        self.message = f"Game started. {self.state.current_player.display_name}'s turn."
        logger.info(
            "New game: hand_size=%d, deck=%d, first=%s",
            self.config.hand_size, self.state.deck_count, self.state.current_player.value,
        )
        return self.snapshot()

    def play_again(self) -> GameSnapshot:
        """再来一局 (保留胜局统计)"""
        return self.start_game()

    def load_state(self, state: GameState):
        """载入指定状态 (用于残局)"""
        self.state = state

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot.from_state(self._require_state())

    def _require_state(self) -> GameState:
        if self.state is None:
            raise RuntimeError("Game not started. Call start_game() first.")
        return self.state

    def _resolve(self, refs: Iterable[CardRef], player: Player) -> Optional[List[Card]]:
        """把牌或牌编号解析为手牌中的牌，有不在手中的返回 None"""
        by_id = {c.id: c for c in self._require_state().get_hand(player)}
        cards = []
        for ref in refs:
            if isinstance(ref, Card):
                card_id = ref.id
            else:
                try:
                    card_id = int(ref)
                except (TypeError, ValueError):
                    return None
            if card_id not in by_id:
                return None
            cards.append(by_id[card_id])
        return cards

    def _reject(self, player: Player, reason: RejectionReason) -> Rejection:
        logger.debug("Rejected %s: %s", player.value, reason.value)
        message = f"Invalid move: {reason.message}"
        self.message = message
        return Rejection(reason=reason, message=message)

    def _record_winner(self, winner: Player):
        if winner == Player.HUMAN:
            self.player_wins += 1
        else:
            self.computer_wins += 1
        logger.info(
            "%s wins (player %d - computer %d)",
            winner.display_name, self.player_wins, self.computer_wins,
        )

    def attempt_play(
        self,
        selected: Iterable[CardRef],
        player: Player = Player.HUMAN,
    ) -> Union[PlayOutcome, Rejection]:
        """
        尝试出牌

        Args:
            selected: 选中的牌或牌编号
            player: 出牌玩家

        Returns:
            PlayOutcome 或 Rejection (状态不变)
        """
        state = self._require_state()
        selected = list(selected)

        # 回合检查先于手牌检查
        if state.is_finished:
            return self._reject(player, RejectionReason.GAME_OVER)
        if player != state.current_player:
            return self._reject(player, RejectionReason.NOT_YOUR_TURN)

        cards = self._resolve(selected, player)
        if cards is None:
            return self._reject(player, RejectionReason.CARDS_NOT_IN_HAND)

        play, reason = state.validate_play(cards, player)
        if reason is not None:
            return self._reject(player, reason)

        self.state = state.with_play(cards, player)
        logger.debug("%s played %s", player.value, play)

        if self.state.winner is not None:
            self._record_winner(player)
            message = f"{player.display_name} wins the game!"
        else:
            message = (
                f"{player.display_name} played {describe_play(play)}. "
                f"{player.opponent.display_name}'s turn."
            )
        self.message = message
        return PlayOutcome(player=player, play=play, snapshot=self.snapshot(), message=message)

    def draw(self, player: Player = Player.HUMAN) -> Union[DrawOutcome, Rejection]:
        """
        摸一张牌并换手

        牌堆为空时视为过，同样换手并解除约束
        """
        state = self._require_state()
        if state.is_finished:
            return self._reject(player, RejectionReason.GAME_OVER)
        if player != state.current_player:
            return self._reject(player, RejectionReason.NOT_YOUR_TURN)

        card = state.deck[-1] if state.deck else None
        self.state = state.with_draw(player)

        if card is None:
            logger.debug("%s passed (deck empty)", player.value)
            message = f"{player.display_name} passed. {player.opponent.display_name}'s turn."
        else:
            logger.debug("%s drew a card, deck=%d", player.value, self.state.deck_count)
            message = f"{player.display_name} drew a card. {player.opponent.display_name}'s turn."
        self.message = message
        return DrawOutcome(player=player, card=card, snapshot=self.snapshot(), message=message)

    def ai_take_turn(self) -> Union[PlayOutcome, DrawOutcome, Rejection]:
        """
        电脑行动

        由策略选牌后走与人类相同的 attempt_play / draw 路径
        """
        state = self._require_state()
        if state.is_finished:
            return self._reject(Player.COMPUTER, RejectionReason.GAME_OVER)
        if state.current_player != Player.COMPUTER:
            return self._reject(Player.COMPUTER, RejectionReason.NOT_YOUR_TURN)

        play = self.strategy.choose_for_state(state, Player.COMPUTER)
        if play is None:
            return self.draw(Player.COMPUTER)

        outcome = self.attempt_play(play.cards, Player.COMPUTER)
        if isinstance(outcome, Rejection):
            logger.warning("AI choice %s rejected (%s), drawing instead", play, outcome.reason.value)
            return self.draw(Player.COMPUTER)
        return outcome
