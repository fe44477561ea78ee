"""
游戏状态定义

使用不可变数据结构，支持:
- 哈希
- 多局并存互不干扰
- 非法操作不改变任何状态
"""
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple
from enum import Enum
import random

from .cards import Card, new_deck, sort_cards
from .actions import ActionGenerator, Play, RequiredKind
from .rules import RejectionReason, RuleEngine


class Player(Enum):
    """玩家"""
    HUMAN = "player"
    COMPUTER = "computer"

    @property
    def opponent(self) -> 'Player':
        return Player.COMPUTER if self == Player.HUMAN else Player.HUMAN

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


# 座位顺序
PLAYERS: Tuple[Player, ...] = (Player.HUMAN, Player.COMPUTER)


class RoundPhase(Enum):
    """回合阶段"""
    AWAITING_FIRST_PLAY = "awaiting_first_play"  # 整局尚未出牌
    AWAITING_FOLLOW = "awaiting_follow"          # 必须按约束跟牌
    ROUND_OPEN = "round_open"                    # 摸牌后约束解除
    GAME_OVER = "game_over"                      # 游戏结束


@dataclass(frozen=True)
class RoundState:
    """
    回合状态

    只有 AWAITING_FOLLOW 带约束，只有 GAME_OVER 带赢家，
    其他组合在构造时拒绝

    Attributes:
        phase: 回合阶段
        required_kind: 跟牌约束
        winner: 赢家
    """
    phase: RoundPhase
    required_kind: Optional[RequiredKind] = None
    winner: Optional[Player] = None

    def __post_init__(self):
        if (self.phase == RoundPhase.AWAITING_FOLLOW) != (self.required_kind is not None):
            raise ValueError("required_kind is set exactly when awaiting a follow")
        if (self.phase == RoundPhase.GAME_OVER) != (self.winner is not None):
            raise ValueError("winner is set exactly when the game is over")

    @classmethod
    def awaiting_first_play(cls) -> 'RoundState':
        return cls(RoundPhase.AWAITING_FIRST_PLAY)

    @classmethod
    def awaiting_follow(cls, kind: RequiredKind) -> 'RoundState':
        return cls(RoundPhase.AWAITING_FOLLOW, required_kind=kind)

    @classmethod
    def round_open(cls) -> 'RoundState':
        return cls(RoundPhase.ROUND_OPEN)

    @classmethod
    def game_over(cls, winner: Player) -> 'RoundState':
        return cls(RoundPhase.GAME_OVER, winner=winner)


class IllegalPlayError(ValueError):
    """非法出牌或摸牌"""

    def __init__(self, reason: RejectionReason):
        super().__init__(reason.message)
        self.reason = reason


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    Attributes:
        hands: 各玩家手牌 ((player, cards), ...)
        deck: 牌堆，从尾部摸牌
        current_player: 当前行动玩家
        round: 回合状态
        table: 整局已出的牌 (按出牌顺序)
        play_history: 行动历史 ((player, cards), ...)，空元组表示摸牌或过
        step_count: 当前步数
        first_play_single: 整局第一手是否必须为单张
    """
    hands: Tuple[Tuple[str, Tuple[Card, ...]], ...]
    deck: Tuple[Card, ...]
    current_player: Player
    round: RoundState = RoundState.awaiting_first_play()
    table: Tuple[Card, ...] = ()
    play_history: Tuple[Tuple[Player, Tuple[Card, ...]], ...] = ()
    step_count: int = 0
    first_play_single: bool = True

    @classmethod
    def initial(
        cls,
        hand_size: int = 10,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        first_player: Optional[Player] = None,
        first_play_single: bool = True,
    ) -> 'GameState':
        """
        创建初始游戏状态

        Args:
            hand_size: 每位玩家的手牌数
            seed: 随机种子 (rng 为 None 时使用)
            rng: 随机源
            first_player: 先手玩家，None 表示随机

        Returns:
            初始状态
        """
        rng = rng or random.Random(seed)

        # 洗牌
        deck = new_deck(rng)

        # 从牌堆尾部轮流发牌
        dealt: Dict[Player, List[Card]] = {p: [] for p in PLAYERS}
        for _ in range(hand_size):
            for player in PLAYERS:
                dealt[player].append(deck.pop())

        if first_player is None:
            first_player = rng.choice(PLAYERS)

        return cls(
            hands=tuple((p.value, tuple(sort_cards(dealt[p]))) for p in PLAYERS),
            deck=tuple(deck),
            current_player=first_player,
            first_play_single=first_play_single,
        )

    @classmethod
    def from_hands(
        cls,
        human: Iterable[Card],
        computer: Iterable[Card],
        deck: Iterable[Card] = (),
        current_player: Player = Player.HUMAN,
        table: Iterable[Card] = (),
        round: Optional[RoundState] = None,
        first_play_single: bool = True,
    ) -> 'GameState':
        """由指定手牌构造状态 (用于残局与测试)"""
        table = tuple(table)
        if round is None:
            round = RoundState.awaiting_first_play() if not table else RoundState.round_open()
        return cls(
            hands=(
                (Player.HUMAN.value, tuple(sort_cards(human))),
                (Player.COMPUTER.value, tuple(sort_cards(computer))),
            ),
            deck=tuple(deck),
            current_player=current_player,
            round=round,
            table=table,
            first_play_single=first_play_single,
        )

    def get_hand(self, player: Player) -> Tuple[Card, ...]:
        """获取指定玩家的手牌"""
        for p, cards in self.hands:
            if p == player.value:
                return cards
        return ()

    def get_hands_dict(self) -> Dict[Player, List[Card]]:
        """获取手牌字典"""
        return {Player(p): list(cards) for p, cards in self.hands}

    def card_count(self, player: Player) -> int:
        return len(self.get_hand(player))

    @property
    def deck_count(self) -> int:
        return len(self.deck)

    @property
    def phase(self) -> RoundPhase:
        return self.round.phase

    @property
    def winner(self) -> Optional[Player]:
        return self.round.winner

    @property
    def is_finished(self) -> bool:
        return self.round.phase == RoundPhase.GAME_OVER

    @property
    def is_first_play(self) -> bool:
        """整局尚未有人出牌"""
        return not self.table

    @property
    def required_kind(self) -> Optional[RequiredKind]:
        return self.round.required_kind

    def incumbent(self) -> Optional[Play]:
        """
        桌面上需要压过的牌

        按当前约束的张数读取出牌记录的尾部，约束解除时为 None
        """
        kind = self.round.required_kind
        if kind is None or len(self.table) < kind.size:
            return None
        return RuleEngine.classify(self.table[-kind.size:])

    def all_cards(self) -> List[Card]:
        """牌堆、手牌、桌面上的全部牌"""
        cards = list(self.deck) + list(self.table)
        for _, hand in self.hands:
            cards.extend(hand)
        return cards

    def validate_play(
        self,
        cards: Iterable[Card],
        player: Optional[Player] = None,
    ) -> Tuple[Optional[Play], Optional[RejectionReason]]:
        """
        验证出牌

        Args:
            cards: 要出的牌
            player: 出牌玩家，默认为当前玩家

        Returns:
            (识别出的 Play, None) 或 (None, 拒绝原因)
        """
        player = player or self.current_player
        if self.is_finished:
            return None, RejectionReason.GAME_OVER
        if player != self.current_player:
            return None, RejectionReason.NOT_YOUR_TURN

        cards = list(cards)
        hand_ids = {c.id for c in self.get_hand(player)}
        selected_ids = [c.id for c in cards]
        if len(set(selected_ids)) != len(selected_ids) or not set(selected_ids) <= hand_ids:
            return None, RejectionReason.CARDS_NOT_IN_HAND

        return RuleEngine.check_play(
            cards,
            self.round.required_kind,
            self.incumbent(),
            first_play=self.first_play_single and self.is_first_play,
        )

    def with_play(self, cards: Iterable[Card], player: Optional[Player] = None) -> 'GameState':
        """
        出牌后的新状态

        Args:
            cards: 要出的牌
            player: 出牌玩家，默认为当前玩家

        Returns:
            新状态

        Raises:
            IllegalPlayError: 出牌不合法
        """
        player = player or self.current_player
        play, reason = self.validate_play(cards, player)
        if reason is not None:
            raise IllegalPlayError(reason)

        # 更新手牌
        played_ids = play.card_ids
        new_hand = tuple(c for c in self.get_hand(player) if c.id not in played_ids)
        new_hands = tuple(
            (p, new_hand if p == player.value else hand)
            for p, hand in self.hands
        )

        # 出完牌立即结束
        if new_hand:
            new_round = RoundState.awaiting_follow(play.required_kind)
        else:
            new_round = RoundState.game_over(player)

        return replace(
            self,
            hands=new_hands,
            current_player=player.opponent,
            round=new_round,
            table=self.table + play.cards,
            play_history=self.play_history + ((player, play.cards),),
            step_count=self.step_count + 1,
        )

    def with_draw(self, player: Optional[Player] = None) -> 'GameState':
        """
        摸牌后的新状态

        牌堆为空时视为过，同样换手并解除约束

        Raises:
            IllegalPlayError: 不是该玩家回合或游戏已结束
        """
        player = player or self.current_player
        if self.is_finished:
            raise IllegalPlayError(RejectionReason.GAME_OVER)
        if player != self.current_player:
            raise IllegalPlayError(RejectionReason.NOT_YOUR_TURN)

        new_hands = self.hands
        new_deck = self.deck
        if self.deck:
            card = self.deck[-1]
            new_deck = self.deck[:-1]
            new_hands = tuple(
                (p, tuple(sort_cards(hand + (card,))) if p == player.value else hand)
                for p, hand in self.hands
            )

        return replace(
            self,
            hands=new_hands,
            deck=new_deck,
            current_player=player.opponent,
            round=RoundState.round_open(),
            play_history=self.play_history + ((player, ()),),
            step_count=self.step_count + 1,
        )

    def get_legal_plays(
        self,
        player: Optional[Player] = None,
        exhaustive_kickers: bool = False,
    ) -> List[Play]:
        """
        获取玩家在当前约束下的所有合法出牌

        Returns:
            合法出牌列表 (不含摸牌)
        """
        player = player or self.current_player
        if self.is_finished:
            return []

        generator = ActionGenerator(self.get_hand(player), exhaustive_kickers)
        incumbent = self.incumbent()
        if incumbent is not None:
            # 跟牌
            return generator.generate_responses(incumbent)
        # 主动出牌
        return generator.generate_all(first_play=self.first_play_single and self.is_first_play)
