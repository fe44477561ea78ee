"""
牌的定义与编码

Pusoy Dos 使用一副 52 张标准牌:
- 2-10, J, Q, K, A 各 4 张 (A 最大)
- 花色顺序 ♠ < ♣ < ♦ < ♥
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Tuple
import random

import numpy as np


class Rank(IntEnum):
    """牌面值定义 (A 为 14)"""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(IntEnum):
    """花色定义"""
    SPADES = 1
    CLUBS = 2
    DIAMONDS = 3
    HEARTS = 4


# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    2: '2', 3: '3', 4: '4', 5: '5', 6: '6', 7: '7', 8: '8',
    9: '9', 10: '10', 11: 'J', 12: 'Q', 13: 'K', 14: 'A',
}

# 显示字符到牌面值的映射
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}
STR_TO_RANK['T'] = 10

SUIT_TO_STR: Dict[int, str] = {1: '♠', 2: '♣', 3: '♦', 4: '♥'}

# 花色符号及 ASCII 别名
STR_TO_SUIT: Dict[str, int] = {
    '♠': 1, '♣': 2, '♦': 3, '♥': 4,
    'S': 1, 'C': 2, 'D': 3, 'H': 4,
}

DECK_SIZE = 52


@dataclass(frozen=True, order=True)
class Card:
    """
    不可变的牌

    字段顺序决定了排序: 先比牌面值，再比花色

    Attributes:
        rank: 牌面值
        suit: 花色
        id: 整副牌中的唯一编号
    """
    rank: Rank
    suit: Suit
    id: int

    @classmethod
    def make(cls, rank: int, suit: int) -> 'Card':
        """按牌面值和花色创建牌，编号取标准编号"""
        return cls(Rank(rank), Suit(suit), card_index(rank, suit))

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (int(self.rank), int(self.suit))

    def __str__(self) -> str:
        return RANK_TO_STR[self.rank] + SUIT_TO_STR[self.suit]


def card_index(rank: int, suit: int) -> int:
    """标准编号: 0..51，按牌面值为主、花色为次"""
    return (int(rank) - Rank.TWO) * 4 + (int(suit) - Suit.SPADES)


# 完整牌组 (52 张，已按编号排序)
FULL_DECK: Tuple[Card, ...] = tuple(
    Card.make(rank, suit) for rank in Rank for suit in Suit
)


def new_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    生成洗好的一副牌

    Args:
        rng: 随机源，None 时新建一个未设种子的随机源

    Returns:
        52 张牌的列表，从尾部发牌
    """
    rng = rng or random.Random()
    deck = list(FULL_DECK)
    rng.shuffle(deck)
    return deck


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    """按牌面值、花色升序排列"""
    return sorted(cards, key=lambda c: c.sort_key)


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "4♠ 5♦ 10♥"
    """
    return ' '.join(str(c) for c in sort_cards(cards))


def str_to_card(token: str) -> Card:
    """
    解析单张牌

    Args:
        token: 如 "10♥"、"QS"、"td"

    Returns:
        对应的牌 (标准编号)
    """
    token = token.strip().upper()
    if len(token) < 2:
        raise ValueError(f"Invalid card: {token!r}")
    rank_str, suit_str = token[:-1], token[-1]
    if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
        raise ValueError(f"Invalid card: {token!r}")
    return Card.make(STR_TO_RANK[rank_str], STR_TO_SUIT[suit_str])


def str_to_cards(s: str) -> List[Card]:
    """
    将字符串转换为牌列表

    Args:
        s: 以空白或逗号分隔，如 "4♠ 5♦" 或 "7S,7C"
    """
    tokens = s.replace(',', ' ').split()
    return [str_to_card(t) for t in tokens]


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 52 维 one-hot 向量

    下标即标准编号 (牌面值为主、花色为次)

    Returns:
        52 维 numpy 数组
    """
    array = np.zeros(DECK_SIZE, dtype=np.float32)
    for card in cards:
        array[card_index(card.rank, card.suit)] = 1
    return array


def array_to_cards(array: np.ndarray) -> List[Card]:
    """将 52 维数组转换回牌列表"""
    return [FULL_DECK[i] for i in np.flatnonzero(array[:DECK_SIZE] > 0)]
