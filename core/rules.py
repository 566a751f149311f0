"""
规则引擎 - 牌型判定、出牌合法性、出牌结算

牌型判定 (classify) 是纯函数;
牌桌状态由 RuleEngine 实例独占持有, 不存在全局状态
"""
from enum import Enum
from dataclasses import dataclass, field as dataclass_field
from typing import List, Optional, Iterable, Union
import logging

from .cards import Card, JOKER_STRENGTH, sort_cards, strength
from .combinations import (
    CombinationType,
    Combination,
    Pass,
    Single,
    Pair,
    Triple,
    Quad,
    Sequence,
    HandEnumerator,
    MIN_SEQUENCE_LEN,
)
from .config import RuleSettings
from .state import TableState

logger = logging.getLogger(__name__)


class PlayerRank(Enum):
    """玩家名次称号"""
    DAIFUGO = ("大富豪", 0)
    FUGO = ("富豪", 1)
    HEIMIN = ("平民", 2)
    HINMIN = ("貧民", 3)
    DAIHINMIN = ("大貧民", 4)

    def __init__(self, title: str, order: int):
        self.title = title
        self.order = order


# 人数 -> 上岸顺序对应的称号
RANKS_BY_PLAYER_COUNT = {
    4: (PlayerRank.DAIFUGO, PlayerRank.FUGO, PlayerRank.HINMIN, PlayerRank.DAIHINMIN),
    3: (PlayerRank.DAIFUGO, PlayerRank.HEIMIN, PlayerRank.DAIHINMIN),
}


class PlayFailure(Enum):
    """出牌失败原因"""
    INVALID_COMBINATION = "invalid_combination"  # 不成牌型
    KIND_MISMATCH = "kind_mismatch"              # 与场上牌型不同
    LENGTH_MISMATCH = "length_mismatch"          # 阶段张数不同
    TOO_WEAK = "too_weak"                        # 压不过
    NOT_IN_HAND = "not_in_hand"                  # 手里没有这些牌


@dataclass(frozen=True)
class PlayCheck:
    """合法性检查结果"""
    ok: bool
    combination: Optional[Combination] = None
    reason: Optional[PlayFailure] = None

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class PlayResult:
    """
    出牌结算结果

    Attributes:
        success: 是否出牌成功
        combination: 打出的牌型
        revolution: 是否触发革命
        eight_cut: 是否触发 8 切
        reason: 失败原因
        message: 提示文字
    """
    success: bool = False
    combination: Optional[Combination] = None
    revolution: bool = False
    eight_cut: bool = False
    reason: Optional[PlayFailure] = None
    messages: List[str] = dataclass_field(default_factory=list)

    @property
    def message(self) -> str:
        return ' '.join(self.messages)

    @classmethod
    def failure(cls, reason: PlayFailure) -> 'PlayResult':
        return cls(success=False, reason=reason, messages=["Cannot play those cards"])


FieldLike = Union[Combination, Iterable[Card], None]


class RuleEngine:
    """
    大富豪规则引擎

    持有一个 TableState, 所有状态修改都经过本类的方法
    (play_cards / pass_turn / clear_field)
    """

    def __init__(self, settings: Optional[RuleSettings] = None, table: Optional[TableState] = None):
        """
        Args:
            settings: 规则开关
            table: 牌桌状态 (默认新建空桌)
        """
        self.settings = settings or RuleSettings()
        self.table = table if table is not None else TableState()

    @property
    def is_revolution(self) -> bool:
        return self.table.is_revolution

    # ------------------------------------------------------------------
    # 牌型判定
    # ------------------------------------------------------------------

    @staticmethod
    def classify(
        cards: Iterable[Card],
        is_revolution: bool = False,
        stairs_enabled: bool = True,
    ) -> Optional[Combination]:
        """
        判定牌型

        Args:
            cards: 牌
            is_revolution: 是否革命中
            stairs_enabled: 是否允许阶段

        Returns:
            牌型; 不成牌型时返回 None; 空牌返回 Pass
        """
        ordered = tuple(sort_cards(cards, is_revolution))
        n = len(ordered)

        if n == 0:
            return Pass.create()

        # 单张
        if n == 1:
            card = ordered[0]
            return Single(
                cards=ordered,
                strength=strength(card, is_revolution),
                is_joker_single=card.is_joker,
            )

        jokers = [c for c in ordered if c.is_joker]
        normal = [c for c in ordered if not c.is_joker]

        # 同点数 (王可补任意点数)
        if len({c.rank for c in normal}) <= 1:
            group_strength = strength(normal[0], is_revolution) if normal else JOKER_STRENGTH
            if n == 2:
                return Pair(cards=ordered, strength=group_strength)
            if n == 3:
                return Triple(cards=ordered, strength=group_strength)
            return Quad(cards=ordered, strength=group_strength)

        # 阶段
        if stairs_enabled and n >= MIN_SEQUENCE_LEN:
            highest = RuleEngine._sequence_strength(normal, len(jokers), is_revolution)
            if highest is not None:
                return Sequence(cards=ordered, strength=highest, suit=normal[0].suit)

        return None

    @staticmethod
    def _sequence_strength(normal: List[Card], joker_count: int, is_revolution: bool) -> Optional[int]:
        """
        检查非王牌能否 (借助王补空) 组成同花连续

        Returns:
            最大强度; 不成阶段返回 None
        """
        if not normal:
            return None

        suit = normal[0].suit
        if any(c.suit is not suit for c in normal):
            return None

        strengths = sorted(strength(c, is_revolution) for c in normal)

        gaps = 0
        for prev, cur in zip(strengths, strengths[1:]):
            diff = cur - prev
            if diff == 0:  # 同强度不能连续
                return None
            gaps += diff - 1

        if gaps > joker_count:
            return None
        return strengths[-1]

    # ------------------------------------------------------------------
    # 合法性
    # ------------------------------------------------------------------

    def _classify(self, cards: Iterable[Card]) -> Optional[Combination]:
        return self.classify(cards, self.table.is_revolution, self.settings.stairs_enabled)

    def check_play(self, cards: Iterable[Card], field: FieldLike = None) -> PlayCheck:
        """
        检查能否出牌, 并给出失败原因

        Args:
            cards: 要出的牌
            field: 场上的牌 (默认当前牌桌; 传入空序列表示空场)

        Returns:
            PlayCheck
        """
        combination = self._classify(cards)
        if combination is None or combination.is_pass:
            return PlayCheck(False, reason=PlayFailure.INVALID_COMBINATION)

        if field is None:
            field_cards = self.table.field_cards
        elif isinstance(field, Combination):
            field_cards = field.cards
        else:
            field_cards = tuple(field)

        # 空场: 任意牌型都可以出
        if not field_cards:
            return PlayCheck(True, combination)

        # 场上的牌按当前革命状态重新判定
        field_combination = self._classify(field_cards)
        if field_combination is None or field_combination.is_pass:
            return PlayCheck(False, combination, PlayFailure.INVALID_COMBINATION)

        if combination.kind != field_combination.kind:
            return PlayCheck(False, combination, PlayFailure.KIND_MISMATCH)

        if combination.kind == CombinationType.SEQUENCE and len(combination) != len(field_combination):
            return PlayCheck(False, combination, PlayFailure.LENGTH_MISMATCH)

        # 黑桃 3 反击单王
        if (
            self.settings.spade3_return_enabled
            and combination.kind == CombinationType.SINGLE
            and field_combination.is_joker_single
            and combination.cards[0].is_spade_three
        ):
            return PlayCheck(True, combination)

        if combination.strength > field_combination.strength:
            return PlayCheck(True, combination)
        return PlayCheck(False, combination, PlayFailure.TOO_WEAK)

    def can_play(self, cards: Iterable[Card], field: FieldLike = None) -> bool:
        """能否出牌"""
        return self.check_play(cards, field).ok

    # ------------------------------------------------------------------
    # 状态修改
    # ------------------------------------------------------------------

    def play_cards(self, cards: Iterable[Card], player_id: int) -> PlayResult:
        """
        出牌 (先验证后修改, 失败时不改变牌桌)

        Args:
            cards: 要出的牌
            player_id: 出牌玩家

        Returns:
            PlayResult
        """
        cards = list(cards)
        check = self.check_play(cards)
        if not check.ok:
            logger.debug(f"Player {player_id} rejected play {cards}: {check.reason.value}")
            return PlayResult.failure(check.reason)

        combination = check.combination
        table = self.table

        table.current_field = combination
        table.last_player_id = player_id
        table.pass_count = 0

        result = PlayResult(success=True, combination=combination)

        if self.settings.revolution_enabled and combination.triggers_revolution:
            table.is_revolution = not table.is_revolution
            result.revolution = True
            result.messages.append("Revolution!")

        if self.settings.eight_cut_enabled and combination.contains_eight:
            result.eight_cut = True
            result.messages.append("Eight-cut!")
            self.clear_field()

        logger.debug(
            f"Player {player_id} played {combination} "
            f"(revolution={result.revolution}, eight_cut={result.eight_cut})"
        )
        return result

    def pass_turn(self) -> None:
        """过牌"""
        self.table.pass_count += 1

    def should_clear_field(self, active_player_count: int) -> bool:
        """除最后出牌者以外全员都过了"""
        return self.table.pass_count >= active_player_count - 1

    def clear_field(self) -> None:
        """清空场上的牌 (不重置过牌数)"""
        self.table.current_field = None

    def reset_pass_count(self) -> None:
        self.table.pass_count = 0

    def reset(self) -> None:
        """新一局"""
        self.table = TableState()

    # ------------------------------------------------------------------
    # 候选出牌
    # ------------------------------------------------------------------

    def get_playable_hands(self, hand: Iterable[Card]) -> List[Combination]:
        """
        枚举手牌中所有能压过当前场上牌的组合

        Args:
            hand: 手牌

        Returns:
            合法牌型列表 (单张, 对子, 三张, 四张, 阶段 的顺序)
        """
        enumerator = HandEnumerator(list(hand), self.table.is_revolution)

        candidates = (
            enumerator.gen_singles()
            + enumerator.gen_pairs()
            + enumerator.gen_triples()
            + enumerator.gen_quads()
        )
        if self.settings.stairs_enabled:
            candidates += enumerator.gen_sequences()

        playable = []
        for cards in candidates:
            check = self.check_play(cards)
            if check.ok:
                playable.append(check.combination)
        return playable

    # ------------------------------------------------------------------
    # 名次
    # ------------------------------------------------------------------

    @staticmethod
    def get_rank_for_position(position: int, total_players: int) -> PlayerRank:
        """
        上岸顺序 -> 称号

        Args:
            position: 上岸顺序 (0 开始)
            total_players: 人数

        Returns:
            称号; 未定义的人数或位置返回平民
        """
        ranks = RANKS_BY_PLAYER_COUNT.get(total_players)
        if ranks is None or not 0 <= position < len(ranks):
            return PlayerRank.HEIMIN
        return ranks[position]
