"""
回合编排

发牌、轮转、过牌流局、上岸与名次.
编排层是牌桌状态唯一的写入方, 每次只有一个出牌/过牌在执行
"""
from enum import Enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple, Iterable
import random
import time
import logging

from .cards import Card, Suit, create_deck, shuffle_deck, cards_to_str
from .combinations import Combination
from .config import GameSettings
from .player import Player
from .rules import RuleEngine, PlayResult, PlayFailure, PlayerRank

if TYPE_CHECKING:
    from ai.policy import GameContext, Policy

logger = logging.getLogger(__name__)

HUMAN_NAME = "You"
CPU_NAMES = ("Taro", "Hanako", "Jiro", "Misaki")

# 拥有方块 3 的玩家先出
FIRST_PLAYER_SUIT = Suit.DIAMOND
FIRST_PLAYER_RANK = 3


class EventKind(Enum):
    """回合事件类型 (供表现层消费)"""
    PLAY = "play"
    PASS = "pass"
    REVOLUTION = "revolution"
    EIGHT_CUT = "eight_cut"
    FIELD_CLEAR = "field_clear"
    FINISH = "finish"
    ROUND_END = "round_end"


@dataclass(frozen=True)
class RoundEvent:
    """回合事件"""
    kind: EventKind
    player_id: Optional[int] = None
    cards: Tuple[Card, ...] = ()
    rank: Optional[PlayerRank] = None


@dataclass
class RoundResult:
    """
    一局的结果

    Attributes:
        finish_order: 按上岸顺序排列的玩家 ID
        ranks: 玩家 ID -> 称号
        turns: 行动次数 (出牌 + 过牌)
        revolutions: 革命次数
        eight_cuts: 8 切次数
    """
    finish_order: List[int]
    ranks: Dict[int, PlayerRank]
    turns: int
    revolutions: int = 0
    eight_cuts: int = 0


def create_players(count: int, human_seat: Optional[int] = None) -> List[Player]:
    """
    创建玩家 (座位号即 ID)

    Args:
        count: 人数
        human_seat: 人类玩家的座位, None 表示全是 CPU
    """
    players = []
    cpu_names = iter(CPU_NAMES)
    for seat in range(count):
        if seat == human_seat:
            players.append(Player(seat, HUMAN_NAME, is_human=True))
        else:
            players.append(Player(seat, next(cpu_names, f"CPU {seat}")))
    return players


class Round:
    """
    一局大富豪

    用法:
        round_ = Round(settings)
        round_.start()
        result = round_.run()   # 全 CPU 时
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        players: Optional[List[Player]] = None,
        policies: Optional[Dict[int, "Policy"]] = None,
        rng: Optional[random.Random] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Args:
            settings: 游戏配置
            players: 玩家 (默认按人数创建全 CPU)
            policies: 玩家 ID -> 出牌策略 (未指定的座位使用默认难度的 CPUPolicy)
            rng: 随机源 (洗牌, 决定先手)
            sleep: 思考延时函数 (仅 settings.think_delay 时使用)
        """
        self.settings = settings or GameSettings()
        self.players = players if players is not None else create_players(self.settings.player_count)
        if len(self.players) != self.settings.player_count:
            raise ValueError(
                f"Expected {self.settings.player_count} players, got {len(self.players)}"
            )

        self.rng = rng or random.Random()
        self.engine = RuleEngine(self.settings.rules())
        self.policies = dict(policies or {})
        self.sleep = sleep or time.sleep

        self._seat_by_id = {p.player_id: seat for seat, p in enumerate(self.players)}
        self._default_policy = None

        self.current_index = 0
        self.finish_order: List[Player] = []
        self.events: List[RoundEvent] = []
        self.turns = 0
        self.is_running = False

    # ------------------------------------------------------------------
    # 开局
    # ------------------------------------------------------------------

    def start(self, deck: Optional[Sequence[Card]] = None) -> None:
        """
        开始新的一局

        Args:
            deck: 指定牌序 (默认新建一副并洗牌)
        """
        for player in self.players:
            player.reset()
        self.engine.reset()
        self.finish_order = []
        self.events = []
        self.turns = 0

        if deck is None:
            deck = shuffle_deck(create_deck(self.settings.include_jokers), self.rng)
        self.deal(list(deck))

        self.current_index = self.determine_first_player()
        self.is_running = True
        logger.debug(f"Round started, {self.current_player.name} leads")

    def deal(self, deck: List[Card]) -> None:
        """平均发牌, 余牌给第一个玩家"""
        n = len(self.players)
        per_player = len(deck) // n
        for i, player in enumerate(self.players):
            player.receive_cards(deck[i * per_player:(i + 1) * per_player])

        remainder = deck[n * per_player:]
        if remainder:
            self.players[0].receive_cards(remainder)

    def determine_first_player(self) -> int:
        """拥有方块 3 的玩家先出, 没有则随机"""
        for seat, player in enumerate(self.players):
            if player.has_card_matching(FIRST_PLAYER_SUIT, FIRST_PLAYER_RANK):
                return seat
        return self.rng.randrange(len(self.players))

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> Player:
        return self.players[self.current_index]

    @property
    def is_finished(self) -> bool:
        return not self.is_running and len(self.finish_order) == len(self.players)

    def active_players(self) -> List[Player]:
        return [p for p in self.players if p.is_active]

    def seat_of(self, player_id: int) -> int:
        return self._seat_by_id[player_id]

    def get_player(self, player_id: int) -> Player:
        return self.players[self.seat_of(player_id)]

    def context(self) -> "GameContext":
        from ai.policy import GameContext

        return GameContext(
            active_player_count=len(self.active_players()),
            hand_counts=[p.get_hand_count() for p in self.players],
            finished_count=len(self.finish_order),
            turn=self.turns,
        )

    def policy_for(self, player: Player) -> "Policy":
        """玩家对应的出牌策略"""
        if player.player_id in self.policies:
            return self.policies[player.player_id]
        if self._default_policy is None:
            from ai.policy import CPUPolicy

            self._default_policy = CPUPolicy(
                self.settings.cpu_difficulty,
                rng=random.Random(self.rng.getrandbits(32)),
            )
        return self._default_policy

    # ------------------------------------------------------------------
    # 行动
    # ------------------------------------------------------------------

    def _ensure_running(self) -> None:
        if not self.is_running:
            raise RuntimeError("Round is not running. Call start() first.")

    def _emit(self, kind: EventKind, player: Optional[Player] = None,
              cards: Iterable[Card] = (), rank: Optional[PlayerRank] = None) -> None:
        event = RoundEvent(
            kind=kind,
            player_id=player.player_id if player is not None else None,
            cards=tuple(cards),
            rank=rank,
        )
        self.events.append(event)

    def play(self, cards: Iterable[Card]) -> PlayResult:
        """
        当前玩家出牌

        Args:
            cards: 要出的牌

        Returns:
            PlayResult; 失败时牌桌与手牌都不变
        """
        self._ensure_running()
        player = self.current_player
        cards = list(cards)

        if not player.has_cards(cards):
            return PlayResult.failure(PlayFailure.NOT_IN_HAND)

        result = self.engine.play_cards(cards, player.player_id)
        if not result.success:
            return result

        player.play_cards(cards)
        player.clear_selection()
        self.turns += 1
        self._emit(EventKind.PLAY, player, result.combination.cards)
        logger.debug(f"{player.name} plays {cards_to_str(result.combination.cards)}")

        if result.revolution:
            self._emit(EventKind.REVOLUTION, player)
            for p in self.players:
                p.sort_hand(self.engine.is_revolution)

        if result.eight_cut:
            self._emit(EventKind.EIGHT_CUT, player)

        if player.has_empty_hand():
            self._finish(player)

        if self.is_running:
            self._advance()
        return result

    def pass_turn(self) -> bool:
        """
        当前玩家过牌

        Returns:
            是否因全员过牌而流局 (清空场上)
        """
        self._ensure_running()
        player = self.current_player

        self.engine.pass_turn()
        player.clear_selection()
        self.turns += 1
        self._emit(EventKind.PASS, player)

        if self.engine.should_clear_field(len(self.active_players())):
            self._flow()
            return True

        self._advance()
        return False

    def _flow(self) -> None:
        """流局: 清空场上, 由最后出牌者 (或其后第一个仍在局中的玩家) 出牌"""
        self.engine.clear_field()
        self.engine.reset_pass_count()
        self._emit(EventKind.FIELD_CLEAR)

        last_player_id = self.engine.table.last_player_id
        if last_player_id is None:
            return

        self.current_index = self.seat_of(last_player_id)
        while not self.current_player.is_active:
            self.current_index = (self.current_index + 1) % len(self.players)

    def _advance(self) -> None:
        """轮到下一个仍在局中的玩家"""
        for _ in range(len(self.players)):
            self.current_index = (self.current_index + 1) % len(self.players)
            if self.current_player.is_active:
                return

    def _finish(self, player: Player) -> None:
        """上岸处理; 只剩一人时该玩家排在最后并结束本局"""
        self._assign_next_rank(player)

        remaining = self.active_players()
        if len(remaining) <= 1:
            for last in remaining:
                self._assign_next_rank(last)
            self.is_running = False
            self._emit(EventKind.ROUND_END)
            logger.debug(
                "Round finished: " + ", ".join(f"{p.name}={p.rank.title}" for p in self.finish_order)
            )

    def _assign_next_rank(self, player: Player) -> None:
        position = len(self.finish_order)
        rank = self.engine.get_rank_for_position(position, len(self.players))
        player.assign_rank(position, rank)
        self.finish_order.append(player)
        self._emit(EventKind.FINISH, player, rank=rank)

    def play_cpu_turn(self) -> Combination:
        """
        由 CPU 策略替当前玩家行动

        Returns:
            选择的出牌 (Pass 表示过牌)
        """
        self._ensure_running()
        player = self.current_player
        if player.is_human:
            raise RuntimeError(f"{player.name} is a human player")

        policy = self.policy_for(player)
        if self.settings.think_delay:
            self.sleep(policy.think_time())

        move = policy.select_move(player, self.engine, self.context())
        if move.is_pass:
            self.pass_turn()
            return move

        result = self.play(move.cards)
        if not result.success:
            raise RuntimeError(f"{policy.name} chose an illegal move {move}: {result.reason}")
        return move

    def run(self, max_turns: int = 2000) -> RoundResult:
        """
        全 CPU 自动进行到本局结束

        Args:
            max_turns: 行动次数上限 (超过说明逻辑有误)

        Returns:
            RoundResult
        """
        self._ensure_running()
        while self.is_running:
            if self.turns >= max_turns:
                raise RuntimeError(f"Round did not finish within {max_turns} turns")
            self.play_cpu_turn()
        return self.result()

    def result(self) -> RoundResult:
        return RoundResult(
            finish_order=[p.player_id for p in self.finish_order],
            ranks={p.player_id: p.rank for p in self.finish_order},
            turns=self.turns,
            revolutions=sum(1 for e in self.events if e.kind == EventKind.REVOLUTION),
            eight_cuts=sum(1 for e in self.events if e.kind == EventKind.EIGHT_CUT),
        )
