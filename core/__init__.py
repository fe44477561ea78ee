"""
Core Layer - 纯游戏逻辑 (无 ML 依赖)

Modules:
    cards: 牌定义与编码
    actions: 牌型与出牌生成
    rules: 规则引擎
    state: 游戏状态
    strategy: AI 出牌策略
    session: 对局会话
    config: 配置
"""
from .cards import (
    Card,
    Rank,
    Suit,
    FULL_DECK,
    DECK_SIZE,
    RANK_TO_STR,
    SUIT_TO_STR,
    new_deck,
    sort_cards,
    cards_to_array,
    array_to_cards,
    cards_to_str,
    str_to_card,
    str_to_cards,
)

from .actions import (
    PlayType,
    RequiredKind,
    Play,
    ActionGenerator,
    PLAYABLE_SIZES,
)

from .rules import (
    ErrorCategory,
    RejectionReason,
    RuleEngine,
)

from .state import (
    Player,
    PLAYERS,
    RoundPhase,
    RoundState,
    IllegalPlayError,
    GameState,
)

from .config import GameConfig, StrategyConfig

from .strategy import (
    DefensiveStrategy,
    rank_candidates,
    choose_play,
)

from .session import (
    GameSnapshot,
    PlayOutcome,
    DrawOutcome,
    Rejection,
    GameSession,
)

__all__ = [
    # cards
    "Card",
    "Rank",
    "Suit",
    "FULL_DECK",
    "DECK_SIZE",
    "RANK_TO_STR",
    "SUIT_TO_STR",
    "new_deck",
    "sort_cards",
    "cards_to_array",
    "array_to_cards",
    "cards_to_str",
    "str_to_card",
    "str_to_cards",
    # actions
    "PlayType",
    "RequiredKind",
    "Play",
    "ActionGenerator",
    "PLAYABLE_SIZES",
    # rules
    "ErrorCategory",
    "RejectionReason",
    "RuleEngine",
    # state
    "Player",
    "PLAYERS",
    "RoundPhase",
    "RoundState",
    "IllegalPlayError",
    "GameState",
    # config
    "GameConfig",
    "StrategyConfig",
    # strategy
    "DefensiveStrategy",
    "rank_candidates",
    "choose_play",
    # session
    "GameSnapshot",
    "PlayOutcome",
    "DrawOutcome",
    "Rejection",
    "GameSession",
]
