"""
牌的定义与编码

大富豪使用 52 张牌 + 2 张王 (可配置):
- 3-10, J, Q, K, A, 2 各 4 种花色
- 大小: 3 最弱 ... 2 最强, 王最强
- 革命时大小反转
"""
from enum import Enum
from dataclasses import dataclass
from typing import List, Dict, Iterable, Optional
import random

import numpy as np


class Suit(Enum):
    """花色 (声明顺序即排序顺序)"""
    SPADE = "spade"
    HEART = "heart"
    DIAMOND = "diamond"
    CLUB = "club"


SUIT_ORDER: List[Suit] = [Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB]

# 牌面值到强度序数的映射 (3 最弱, 2 最强)
RANK_ORDINAL: Dict[int, int] = {
    3: 1, 4: 2, 5: 3, 6: 4, 7: 5, 8: 6, 9: 7,
    10: 8, 11: 9, 12: 10, 13: 11, 1: 12, 2: 13,
}

JOKER_RANK = 0
JOKER_STRENGTH = 14

# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    1: 'A', 2: '2', 3: '3', 4: '4', 5: '5', 6: '6', 7: '7',
    8: '8', 9: '9', 10: '10', 11: 'J', 12: 'Q', 13: 'K',
}
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}

SUIT_TO_STR: Dict[Suit, str] = {
    Suit.SPADE: 'S', Suit.HEART: 'H', Suit.DIAMOND: 'D', Suit.CLUB: 'C',
}
STR_TO_SUIT: Dict[str, Suit] = {v: k for k, v in SUIT_TO_STR.items()}

JOKER_STR = 'JK'


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的牌

    Attributes:
        suit: 花色 (王为 None)
        rank: 牌面值 1-13 (A=1, 2=2, 王=0)
        joker_index: 王的编号 (区分两张王), 普通牌为 -1
    """
    suit: Optional[Suit]
    rank: int
    joker_index: int = -1

    @classmethod
    def joker(cls, index: int = 0) -> 'Card':
        """创建王"""
        return cls(suit=None, rank=JOKER_RANK, joker_index=index)

    @property
    def is_joker(self) -> bool:
        return self.joker_index >= 0

    @property
    def card_id(self) -> str:
        """稳定标识"""
        if self.is_joker:
            return f"joker-{self.joker_index}"
        return f"{self.suit.value}-{self.rank}"

    @property
    def is_spade_three(self) -> bool:
        return not self.is_joker and self.suit is Suit.SPADE and self.rank == 3

    @property
    def is_eight(self) -> bool:
        return not self.is_joker and self.rank == 8

    @property
    def display(self) -> str:
        if self.is_joker:
            return 'JOKER'
        return RANK_TO_STR[self.rank]

    def __str__(self) -> str:
        if self.is_joker:
            return JOKER_STR
        return f"{SUIT_TO_STR[self.suit]}{RANK_TO_STR[self.rank]}"


def strength(card: Card, is_revolution: bool = False) -> int:
    """
    牌的强度 (由牌面值推导, 不存储)

    Args:
        card: 牌
        is_revolution: 是否处于革命状态

    Returns:
        强度值, 越大越强. 普通牌 1-13, 革命时为 14 - 序数;
        王通常为 14, 革命时为 0
    """
    if card.is_joker:
        return 0 if is_revolution else JOKER_STRENGTH
    ordinal = RANK_ORDINAL[card.rank]
    if is_revolution:
        return JOKER_STRENGTH - ordinal
    return ordinal


def sort_key(card: Card, is_revolution: bool = False) -> int:
    """排序键: 强度优先, 同强度按花色"""
    suit_order = len(SUIT_ORDER) if card.is_joker else SUIT_ORDER.index(card.suit)
    return strength(card, is_revolution) * 10 + suit_order


def sort_cards(cards: Iterable[Card], is_revolution: bool = False) -> List[Card]:
    """按当前强度排序 (返回新列表)"""
    return sorted(cards, key=lambda c: sort_key(c, is_revolution))


def create_deck(include_jokers: bool = True, joker_count: int = 2) -> List[Card]:
    """
    生成一副牌

    Args:
        include_jokers: 是否包含王
        joker_count: 王的张数

    Returns:
        52 (+ joker_count) 张牌
    """
    deck = []
    for suit in SUIT_ORDER:
        for rank in range(3, 14):
            deck.append(Card(suit, rank))
        deck.append(Card(suit, 1))
        deck.append(Card(suit, 2))

    if include_jokers:
        for i in range(joker_count):
            deck.append(Card.joker(i))

    return deck


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    洗牌 (Fisher-Yates), 不修改原列表

    Args:
        deck: 牌列表
        rng: 随机源 (默认新建未设种子的 Random)

    Returns:
        打乱后的新列表
    """
    rng = rng or random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def parse_card(s: str) -> Card:
    """
    解析单张牌

    Args:
        s: 如 "S3", "H10", "DA", "JK" (第二张王写作 "JK2")

    Returns:
        Card
    """
    s = s.strip().upper()
    if s.startswith(JOKER_STR):
        index = int(s[2:]) - 1 if len(s) > 2 else 0
        return Card.joker(index)
    if len(s) < 2 or s[0] not in STR_TO_SUIT or s[1:] not in STR_TO_RANK:
        raise ValueError(f"Unknown card code: {s!r}")
    return Card(STR_TO_SUIT[s[0]], STR_TO_RANK[s[1:]])


def str_to_cards(s: str) -> List[Card]:
    """将空格分隔的字符串转换为牌列表, 如 "S3 H3 JK" """
    return [parse_card(token) for token in s.split()]


def cards_to_str(cards: Iterable[Card]) -> str:
    """将牌列表转换为可读字符串"""
    return ' '.join(str(c) for c in cards)


def card_index(card: Card) -> int:
    """牌在 54 维编码中的位置"""
    if card.is_joker:
        return 52 + min(card.joker_index, 1)
    return SUIT_ORDER.index(card.suit) * 13 + RANK_ORDINAL[card.rank] - 1


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 54 维 one-hot 向量

    编码方式:
    - 前 52 维: 4 花色 × 13 种牌面 (按花色展开, 牌面按强度序数)
    - 后 2 维: 两张王

    Args:
        cards: 牌列表

    Returns:
        54 维 numpy 数组
    """
    array = np.zeros(54, dtype=np.float32)
    for card in cards:
        array[card_index(card)] = 1
    return array
