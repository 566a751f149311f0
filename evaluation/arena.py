"""
对战竞技场

组织 CPU 策略之间的对局, 统计上岸名次
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from collections import defaultdict
import random
import logging

import numpy as np

from ai.policy import Policy
from core.config import GameSettings
from core.game import Round, create_players
from core.rules import PlayerRank

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """对局结果"""
    seats: Tuple[str, ...]             # 各座位的策略名
    finish_order: List[int]            # 按上岸顺序的座位号
    ranks: Dict[int, PlayerRank]
    turns: int
    revolutions: int = 0
    eight_cuts: int = 0

    def position_of(self, seat: int) -> int:
        return self.finish_order.index(seat)


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_games: int
    matches: List[MatchResult] = field(default_factory=list)

    def get_ranking(self) -> List[Tuple[str, float]]:
        """按平均名次排序 (越小越好)"""
        return sorted(
            [(name, stats["avg_position"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
        )

    def __repr__(self) -> str:
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, avg_position) in enumerate(self.get_ranking()):
            top_rate = self.standings[name]["top_rate"]
            lines.append(f"  {i+1}. {name}: avg position {avg_position:.2f}, top {top_rate:.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    每局新建 Round, 按座位分配策略
    """

    def __init__(self, settings: Optional[GameSettings] = None, seed: Optional[int] = None):
        """
        Args:
            settings: 游戏配置 (人数与规则开关)
            seed: 随机种子
        """
        self.settings = settings or GameSettings()
        self.rng = np.random.default_rng(seed)

    def play_match(
        self,
        policies: List[Policy],
        n_games: int = 1,
    ) -> List[MatchResult]:
        """
        进行对局

        Args:
            policies: 每个座位一个策略
            n_games: 对局数

        Returns:
            对局结果列表
        """
        if len(policies) != self.settings.player_count:
            raise ValueError(
                f"Expected {self.settings.player_count} policies, got {len(policies)}"
            )

        results = []
        for _ in range(n_games):
            round_ = Round(
                self.settings,
                players=create_players(self.settings.player_count),
                policies=dict(enumerate(policies)),
                rng=random.Random(int(self.rng.integers(2**32))),
            )
            round_.start()
            outcome = round_.run()

            results.append(MatchResult(
                seats=tuple(p.name for p in policies),
                finish_order=outcome.finish_order,
                ranks=outcome.ranks,
                turns=outcome.turns,
                revolutions=outcome.revolutions,
                eight_cuts=outcome.eight_cuts,
            ))

        return results

    def round_robin(
        self,
        policies: List[Policy],
        games_per_seating: int = 10,
    ) -> TournamentResult:
        """
        循环赛

        策略轮流占据各座位 (策略数少于人数时会重复入座)

        Args:
            policies: 策略列表
            games_per_seating: 每种座位安排的对局数

        Returns:
            锦标赛结果
        """
        player_count = self.settings.player_count
        all_matches = []

        for shift in range(len(policies)):
            seating = [policies[(seat + shift) % len(policies)] for seat in range(player_count)]
            results = self.play_match(seating, games_per_seating)
            all_matches.extend(results)
            logger.info(
                f"Seating {shift + 1}/{len(policies)}: "
                f"{', '.join(p.name for p in seating)} ({len(results)} games)"
            )

        return TournamentResult(
            standings=compute_standings(all_matches, player_count),
            total_games=len(all_matches),
            matches=all_matches,
        )


def compute_standings(matches: List[MatchResult], player_count: int) -> Dict[str, Dict[str, float]]:
    """
    汇总各策略的名次统计

    Returns:
        名称 -> {games, avg_position, top_rate, bottom_rate}
    """
    standings: Dict[str, Dict[str, float]] = {}
    raw = defaultdict(lambda: defaultdict(float))

    for match in matches:
        for seat, name in enumerate(match.seats):
            position = match.position_of(seat)
            stats = raw[name]
            stats["games"] += 1
            stats["position_sum"] += position
            if position == 0:
                stats["top"] += 1
            if position == player_count - 1:
                stats["bottom"] += 1

    for name, stats in raw.items():
        games = stats["games"]
        standings[name] = {
            "games": games,
            "avg_position": stats["position_sum"] / games,
            "top_rate": stats["top"] / games,
            "bottom_rate": stats["bottom"] / games,
        }

    return standings
