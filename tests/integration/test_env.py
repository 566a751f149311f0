"""环境层测试"""
import random

import pytest
import numpy as np

from core.cards import str_to_cards, create_deck, shuffle_deck
from core.combinations import Pass
from core.config import GameSettings
from core.game import Round, create_players


class TestObservationBuilder:
    """ObservationBuilder 测试"""

    def _round(self, seed=0):
        round_ = Round(GameSettings(), rng=random.Random(seed))
        round_.start()
        return round_

    def test_build_shapes(self):
        from env.observation import ObservationBuilder

        builder = ObservationBuilder(history_length=6)
        obs = builder.build(self._round(), seat=2)

        assert obs.hand.shape == (54,)
        assert obs.field.shape == (54,)
        assert obs.played_cards.shape == (4, 54)
        assert obs.history.shape == (6, 54)
        assert obs.position[2] == 1
        assert obs.position.sum() == 1  # one-hot

    def test_hand_matches_player(self):
        from env.observation import ObservationBuilder

        round_ = self._round()
        obs = ObservationBuilder().build(round_, seat=1)
        assert obs.hand.sum() == round_.players[1].get_hand_count()

    def test_history_after_plays(self):
        from env.observation import ObservationBuilder

        round_ = self._round(seed=4)
        for _ in range(6):
            round_.play_cpu_turn()
        obs = ObservationBuilder().build(round_, seat=0)

        played = sum(len(e.cards) for e in round_.events if e.cards)
        assert obs.played_cards.sum() == played
        assert obs.history.sum() > 0

    def test_to_flat_array(self):
        from env.observation import ObservationBuilder

        obs = ObservationBuilder(history_length=8).build(self._round(), seat=0)
        flat = obs.to_flat_array()

        assert isinstance(flat, np.ndarray)
        assert flat.ndim == 1
        assert flat.shape == (54 + 54 + 4 * 54 + 8 * 54 + 4 + 4 + 1 + 1,)


class TestFinishReward:
    """上岸奖励测试"""

    def test_reward(self):
        from env import finish_reward

        assert finish_reward(0, 4) == 1.0
        assert finish_reward(3, 4) == -1.0
        assert finish_reward(1, 3) == 0.0


class TestDaifugoEnv:
    """DaifugoEnv 测试"""

    def test_reset(self):
        from env import DaifugoEnv

        env = DaifugoEnv()
        obs, info = env.reset(seed=42)

        assert "hand" in obs
        assert env.observation_space.contains(obs)
        assert info["current_player"] == 0
        assert isinstance(info["legal_actions"][0], Pass)

    def test_reset_with_deck(self):
        from env import DaifugoEnv

        deck = str_to_cards(
            "S3 H3 C3 S4 H4 D4 C4 S5 H5 D5 C5 S6 H6 "
            "D3 D6 C6 S7 H7 D7 C7 S8 H8 D8 C8 S9 H9 "
            "D9 C9 S10 H10 D10 C10 SJ HJ DJ CJ SQ HQ DQ "
            "CQ SK HK DK CK SA HA DA CA S2 H2 D2 C2"
        )
        env = DaifugoEnv(settings=GameSettings(include_jokers=False))
        obs, info = env.reset(seed=0, options={"deck": deck})

        assert env.round.turns > 0  # 座位 1 先出
        assert obs["hand"].sum() == env.round.players[0].get_hand_count()

    def test_step(self):
        from env import DaifugoEnv

        env = DaifugoEnv()
        obs, info = env.reset(seed=42)
        hand_before = obs["hand"].sum()
        # 下标 0 是 PASS, 1 是第一手可出的牌
        action = 1 if len(info["legal_actions"]) > 1 else 0

        obs, reward, terminated, truncated, info = env.step(action)

        assert not truncated
        assert "error" not in info
        if action == 1:
            assert obs["hand"].sum() < hand_before
        assert reward == 0.0 or terminated

    def test_step_with_combination(self):
        from env import DaifugoEnv

        env = DaifugoEnv()
        _, info = env.reset(seed=1)
        move = info["legal_actions"][-1]
        obs, reward, terminated, truncated, info = env.step(move)
        assert "error" not in info

    def test_invalid_action(self):
        from env import DaifugoEnv

        env = DaifugoEnv()
        obs, info = env.reset(seed=42)
        turns = env.round.turns

        obs, reward, terminated, truncated, info = env.step(len(info["legal_actions"]))

        assert reward == -1.0
        assert not terminated
        assert info["error"] == "Invalid action"
        assert env.round.turns == turns

    def test_full_episode(self):
        from env import DaifugoEnv

        env = DaifugoEnv(seed=7)
        obs, info = env.reset()

        terminated = False
        reward = 0.0
        for _ in range(500):
            obs, reward, terminated, truncated, info = env.step(env.sample_action())
            if terminated:
                break

        assert terminated
        assert -1.0 <= reward <= 1.0
        assert "finish_position" in info
        assert env.get_legal_actions() == []
        with pytest.raises(RuntimeError):
            env.step(0)

    def test_step_before_reset(self):
        from env import DaifugoEnv

        env = DaifugoEnv()
        with pytest.raises(RuntimeError):
            env.step(0)

    def test_three_players(self):
        from env import DaifugoEnv

        env = DaifugoEnv(settings=GameSettings(player_count=3), agent_seat=2)
        obs, info = env.reset(seed=3)
        assert obs["played_cards"].shape == (3, 54)
        assert info["current_player"] == 2

    def test_agent_seat_out_of_range(self):
        from env import DaifugoEnv

        with pytest.raises(ValueError):
            DaifugoEnv(agent_seat=4)

    def test_render(self):
        from env import DaifugoEnv

        env = DaifugoEnv(render_mode="ansi")
        env.reset(seed=0)
        output = env.render()
        assert "Current Player" in output
        assert "Field" in output

    def test_make_env(self):
        from env import make_env, DaifugoEnv

        env = make_env(opponent_difficulty="hard")
        assert isinstance(env, DaifugoEnv)
        assert env.opponent_difficulty.value == "hard"
