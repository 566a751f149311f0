"""
牌型定义与候选出牌枚举

大富豪共有 5 种牌型 (含 PASS 共 6 种):
单张 / 对子 / 三张 / 四张以上 (革命) / 同花连续 (阶段)
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Tuple, Dict, ClassVar, Optional
from collections import defaultdict
import itertools

from .cards import Card, Suit, SUIT_ORDER, sort_cards, strength


class CombinationType(IntEnum):
    """牌型类型"""
    PASS = 0       # 过
    SINGLE = 1     # 单张
    PAIR = 2       # 对子
    TRIPLE = 3     # 三张
    QUAD = 4       # 四张及以上 (革命)
    SEQUENCE = 5   # 阶段 (同花顺)


# 阶段至少 3 张, 5 张以上触发革命
MIN_SEQUENCE_LEN = 3
REVOLUTION_SEQUENCE_LEN = 5


@dataclass(frozen=True)
class Combination:
    """
    牌型判定结果 (不可变)

    每种牌型一个子类, 只携带该牌型需要的字段

    Attributes:
        cards: 组成牌 (已按强度排序)
        strength: 比较用强度
    """
    cards: Tuple[Card, ...]
    strength: int

    kind: ClassVar[CombinationType]

    @property
    def triggers_revolution(self) -> bool:
        return False

    @property
    def is_pass(self) -> bool:
        return self.kind == CombinationType.PASS

    @property
    def contains_eight(self) -> bool:
        return any(c.is_eight for c in self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        if self.is_pass:
            return "Pass"
        return f"{self.kind.name}({' '.join(str(c) for c in self.cards)})"


@dataclass(frozen=True)
class Pass(Combination):
    kind: ClassVar[CombinationType] = CombinationType.PASS

    @classmethod
    def create(cls) -> 'Pass':
        return cls(cards=(), strength=0)


@dataclass(frozen=True)
class Single(Combination):
    is_joker_single: bool = False

    kind: ClassVar[CombinationType] = CombinationType.SINGLE


@dataclass(frozen=True)
class Pair(Combination):
    kind: ClassVar[CombinationType] = CombinationType.PAIR


@dataclass(frozen=True)
class Triple(Combination):
    kind: ClassVar[CombinationType] = CombinationType.TRIPLE


@dataclass(frozen=True)
class Quad(Combination):
    """四张及以上同点数, 总是触发革命 (与是否用王补齐无关)"""
    kind: ClassVar[CombinationType] = CombinationType.QUAD

    @property
    def triggers_revolution(self) -> bool:
        return True


@dataclass(frozen=True)
class Sequence(Combination):
    """同花连续, 强度为最大一张非王牌的强度"""
    suit: Optional[Suit] = None

    kind: ClassVar[CombinationType] = CombinationType.SEQUENCE

    @property
    def length(self) -> int:
        return len(self.cards)

    @property
    def triggers_revolution(self) -> bool:
        return self.length >= REVOLUTION_SEQUENCE_LEN


class HandEnumerator:
    """
    候选出牌枚举器

    根据手牌生成所有可能的出牌组合 (只负责取牌, 不判定能否压过场上的牌)
    """

    def __init__(self, hand: List[Card], is_revolution: bool = False):
        """
        Args:
            hand: 手牌
            is_revolution: 是否革命中 (影响阶段的连续判定)
        """
        self.hand = list(hand)
        self.is_revolution = is_revolution

        self.rank_groups: Dict[int, List[Card]] = defaultdict(list)
        self.suit_groups: Dict[Suit, List[Card]] = defaultdict(list)

        for card in self.hand:
            if card.is_joker:
                continue
            self.rank_groups[card.rank].append(card)
            self.suit_groups[card.suit].append(card)

    def gen_singles(self) -> List[List[Card]]:
        """生成所有单张 (含王)"""
        return [[card] for card in self.hand]

    def _gen_subsets(self, size: int) -> List[List[Card]]:
        result = []
        for group in self.rank_groups.values():
            if len(group) >= size:
                result.extend(list(combo) for combo in itertools.combinations(group, size))
        return result

    def gen_pairs(self) -> List[List[Card]]:
        """生成所有对子 (同点数任取两张)"""
        return self._gen_subsets(2)

    def gen_triples(self) -> List[List[Card]]:
        """生成所有三张"""
        return self._gen_subsets(3)

    def gen_quads(self) -> List[List[Card]]:
        """生成四张 (整组只出一次)"""
        return [list(group) for group in self.rank_groups.values() if len(group) >= 4]

    def gen_sequences(self) -> List[List[Card]]:
        """
        生成阶段

        每种花色按强度排序后, 找出所有长度 >= 3 的连续子段

        Returns:
            阶段牌组列表
        """
        result = []

        for suit in SUIT_ORDER:
            cards = self.suit_groups.get(suit, [])
            if len(cards) < MIN_SEQUENCE_LEN:
                continue

            ordered = sort_cards(cards, self.is_revolution)
            strengths = [strength(c, self.is_revolution) for c in ordered]

            for start in range(len(ordered)):
                end = start + 1
                while end < len(ordered) and strengths[end] == strengths[end - 1] + 1:
                    end += 1
                    if end - start >= MIN_SEQUENCE_LEN:
                        result.append(ordered[start:end])

        return result
