"""
CPU 出牌策略

按难度分层的启发式:
随机失误 -> 革命 -> 快上岸 -> 主动出牌 -> 跟牌
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
import random
import logging

from core.cards import strength
from core.combinations import CombinationType, Combination, Pass
from core.player import Player
from core.rules import RuleEngine

from .difficulty import Difficulty, DifficultyConfig, get_difficulty_config

logger = logging.getLogger(__name__)

# 手牌 <= 该张数时不革命 (优先上岸)
MIN_HAND_FOR_REVOLUTION = 4
# 手牌 <= 该张数时出最强的牌
FINISHING_HAND_SIZE = 3
# 主动出牌且手牌 <= 该张数时出最强的牌
ENDGAME_LEAD_HAND_SIZE = 5
# 弱牌比例达到该值才革命
WEAK_CARD_RATIO = 0.6
# 弱牌的强度分界
WEAK_STRENGTH = 7

# 主动出牌时的牌型优先级
LEAD_PRIORITY: Tuple[CombinationType, ...] = (
    CombinationType.TRIPLE,
    CombinationType.PAIR,
    CombinationType.SINGLE,
)


@dataclass
class GameContext:
    """决策时的对局概况 (编排层提供)"""
    active_player_count: int = 0
    hand_counts: List[int] = field(default_factory=list)
    finished_count: int = 0
    turn: int = 0


class Policy:
    """出牌策略基类"""

    def __init__(self, name: str = "policy"):
        self.name = name

    def select_move(
        self,
        player: Player,
        engine: RuleEngine,
        context: Optional[GameContext] = None,
    ) -> Combination:
        """选择出牌, 返回 Pass 表示过牌"""
        raise NotImplementedError

    def think_time(self) -> float:
        """模拟思考时间 (秒)"""
        return 0.0

    def reset(self):
        """重置状态"""
        pass


class RandomPolicy(Policy):
    """随机策略: 能出就随机出一手"""

    def __init__(self, name: str = "random", rng: Optional[random.Random] = None):
        super().__init__(name)
        self.rng = rng or random.Random()

    def select_move(self, player, engine, context=None) -> Combination:
        playable = engine.get_playable_hands(player.hand)
        if not playable:
            return Pass.create()
        return self.rng.choice(playable)


class CPUPolicy(Policy):
    """
    规则型 CPU

    所有出牌都取自 RuleEngine.get_playable_hands, 不会出非法牌
    """

    def __init__(
        self,
        difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
        rng: Optional[random.Random] = None,
        name: Optional[str] = None,
    ):
        """
        Args:
            difficulty: 难度
            rng: 随机源 (传入带种子的 Random 可复现)
            name: 名称 (默认 "cpu-<难度>")
        """
        self.difficulty = Difficulty(difficulty)
        super().__init__(name or f"cpu-{self.difficulty.value}")
        self.config: DifficultyConfig = get_difficulty_config(self.difficulty)
        self.rng = rng or random.Random()

    def think_time(self) -> float:
        low, high = self.config.think_time
        return low + self.rng.random() * (high - low)

    def select_move(
        self,
        player: Player,
        engine: RuleEngine,
        context: Optional[GameContext] = None,
    ) -> Combination:
        """
        选择出牌

        Args:
            player: 当前玩家
            engine: 规则引擎 (提供当前牌桌)
            context: 对局概况

        Returns:
            要出的牌型, Pass 表示过牌
        """
        playable = engine.get_playable_hands(player.hand)
        if not playable:
            return Pass.create()

        # 失误: 随机过牌或随机出牌
        if self.config.mistake_rate > 0 and self.rng.random() < self.config.mistake_rate:
            if self.rng.random() < self.config.pass_rate:
                logger.debug(f"{self.name}: careless pass")
                return Pass.create()
            return self.rng.choice(playable)

        selected = self.select_strategic_move(playable, player, engine, context)
        if selected is None:
            return Pass.create()
        return selected

    def select_strategic_move(
        self,
        playable: List[Combination],
        player: Player,
        engine: RuleEngine,
        context: Optional[GameContext] = None,
    ) -> Optional[Combination]:
        """按优先级选择"""
        hand_count = player.get_hand_count()

        quads = [c for c in playable if c.kind == CombinationType.QUAD]
        if quads and self.should_revolution(player, engine):
            return min(quads, key=lambda c: c.strength)

        if hand_count <= FINISHING_HAND_SIZE:
            return self.select_for_finishing(playable)

        if engine.table.is_field_empty:
            return self.select_for_empty_field(playable, player)

        return self.select_to_counter(playable)

    def should_revolution(self, player: Player, engine: RuleEngine) -> bool:
        """
        是否革命

        手牌多于难度阈值, 且至少六成是弱牌时才革命.
        弱牌按序数判断: 平时强度 < 7, 革命中反转后的强度 > 7 (两种情况都是序数 < 7)
        """
        hand_count = player.get_hand_count()
        if hand_count <= MIN_HAND_FOR_REVOLUTION:
            return False
        if hand_count <= self.config.revolution_threshold:
            return False

        if engine.is_revolution:
            weak_cards = [c for c in player.hand if strength(c, True) > WEAK_STRENGTH]
        else:
            weak_cards = [c for c in player.hand if strength(c) < WEAK_STRENGTH]
        return len(weak_cards) >= hand_count * WEAK_CARD_RATIO

    def select_for_finishing(self, playable: List[Combination]) -> Combination:
        """快上岸: 出最强的"""
        return max(playable, key=lambda c: c.strength)

    def select_for_empty_field(self, playable: List[Combination], player: Player) -> Combination:
        """主动出牌"""
        if player.get_hand_count() <= ENDGAME_LEAD_HAND_SIZE:
            return max(playable, key=lambda c: c.strength)

        # 多张一起出, 从弱的开始
        for kind in LEAD_PRIORITY:
            options = [c for c in playable if c.kind == kind]
            if options:
                return min(options, key=lambda c: c.strength)

        return playable[0]

    def select_to_counter(self, playable: List[Combination]) -> Combination:
        """跟牌: 优先带 8 的 (8 切), 否则出最弱的"""
        eight_cuts = [c for c in playable if c.contains_eight]
        if eight_cuts:
            return min(eight_cuts, key=lambda c: c.strength)
        return min(playable, key=lambda c: c.strength)
