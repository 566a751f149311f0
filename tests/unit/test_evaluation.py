"""评估模块测试"""
import random

import pytest

from ai.policy import CPUPolicy, RandomPolicy
from core.config import GameSettings
from core.rules import PlayerRank
from evaluation.arena import Arena, MatchResult, TournamentResult, compute_standings


class TestMatchResult:
    """MatchResult 测试"""

    def test_position_of(self):
        result = MatchResult(
            seats=("a", "b", "c"),
            finish_order=[2, 0, 1],
            ranks={2: PlayerRank.DAIFUGO, 0: PlayerRank.HEIMIN, 1: PlayerRank.DAIHINMIN},
            turns=30,
        )
        assert result.position_of(2) == 0
        assert result.position_of(1) == 2


class TestComputeStandings:
    """compute_standings 测试"""

    def test_standings(self):
        matches = [
            MatchResult(seats=("a", "b", "a"), finish_order=[0, 1, 2], ranks={}, turns=10),
            MatchResult(seats=("a", "b", "a"), finish_order=[1, 2, 0], ranks={}, turns=10),
        ]
        standings = compute_standings(matches, 3)

        assert standings["a"]["games"] == 4
        assert standings["a"]["avg_position"] == pytest.approx((0 + 2 + 1 + 2) / 4)
        assert standings["a"]["top_rate"] == pytest.approx(0.25)
        assert standings["b"]["top_rate"] == pytest.approx(0.5)
        assert standings["b"]["bottom_rate"] == pytest.approx(0.0)

    def test_ranking(self):
        result = TournamentResult(
            standings={
                "a": {"games": 1, "avg_position": 2.0, "top_rate": 0.0, "bottom_rate": 1.0},
                "b": {"games": 1, "avg_position": 0.5, "top_rate": 0.5, "bottom_rate": 0.0},
            },
            total_games=1,
        )
        assert [name for name, _ in result.get_ranking()] == ["b", "a"]
        assert "Tournament Results" in repr(result)


class TestArena:
    """Arena 测试"""

    def test_play_match(self):
        arena = Arena(seed=42)
        policies = [CPUPolicy("normal", rng=random.Random(i)) for i in range(4)]
        results = arena.play_match(policies, n_games=2)

        assert len(results) == 2
        for result in results:
            assert sorted(result.finish_order) == [0, 1, 2, 3]
            assert result.turns > 0
            assert set(result.ranks.values()) == {
                PlayerRank.DAIFUGO, PlayerRank.FUGO, PlayerRank.HINMIN, PlayerRank.DAIHINMIN,
            }

    def test_policy_count_mismatch(self):
        arena = Arena(seed=0)
        with pytest.raises(ValueError):
            arena.play_match([RandomPolicy()], n_games=1)

    def test_round_robin(self):
        arena = Arena(GameSettings(player_count=3), seed=1)
        policies = [
            CPUPolicy("easy", rng=random.Random(1)),
            CPUPolicy("hard", rng=random.Random(2)),
            RandomPolicy(rng=random.Random(3)),
        ]
        result = arena.round_robin(policies, games_per_seating=2)

        assert result.total_games == 6
        assert set(result.standings) == {"cpu-easy", "cpu-hard", "random"}
        for stats in result.standings.values():
            assert stats["games"] == 6
            assert 0 <= stats["avg_position"] <= 2

    def test_reproducible(self):
        def run():
            arena = Arena(seed=7)
            policies = [CPUPolicy("hard", rng=random.Random(i)) for i in range(4)]
            return [r.finish_order for r in arena.play_match(policies, n_games=3)]

        assert run() == run()
