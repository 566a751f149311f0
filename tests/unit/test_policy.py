"""CPU 策略测试"""
import random

import pytest

from ai.difficulty import Difficulty, DIFFICULTY_PRESETS, get_difficulty_config
from ai.policy import CPUPolicy, RandomPolicy, GameContext
from core.cards import create_deck, shuffle_deck, str_to_cards, cards_to_str
from core.combinations import CombinationType
from core.player import Player
from core.rules import RuleEngine
from core.state import TableState


def make_player(s):
    player = Player(1, "Taro")
    player.receive_cards(str_to_cards(s))
    return player


def engine_with_field(s=None):
    engine = RuleEngine()
    if s:
        engine.play_cards(str_to_cards(s), 0)
    return engine


class TestDifficulty:
    """难度配置测试"""

    def test_presets(self):
        assert get_difficulty_config("easy").mistake_rate == 0.3
        assert get_difficulty_config("easy").pass_rate == 0.2
        assert get_difficulty_config(Difficulty.NORMAL).revolution_threshold == 8
        assert get_difficulty_config("hard").revolution_threshold == 10
        assert get_difficulty_config("hard").mistake_rate == 0

    def test_think_time_ranges(self):
        for config in DIFFICULTY_PRESETS.values():
            low, high = config.think_time
            assert 0 < low <= high

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_difficulty_config("expert")


class TestCPUPolicy:
    """CPUPolicy 测试"""

    def test_name(self):
        assert CPUPolicy("hard").name == "cpu-hard"
        assert CPUPolicy(name="bob").name == "bob"

    def test_think_time(self):
        policy = CPUPolicy("easy", rng=random.Random(0))
        for _ in range(20):
            assert 1.0 <= policy.think_time() <= 2.0

    def test_pass_when_nothing_playable(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("H3 H4"), engine_with_field("S2"))
        assert move.is_pass

    def test_lead_prefers_triple(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("S3 H3 D3 S5 H5 S9 SK"), engine_with_field())
        assert move.kind == CombinationType.TRIPLE
        assert cards_to_str(move.cards) == "S3 H3 D3"

    def test_lead_prefers_weakest_pair(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("S4 H4 S9 H9 DK C2"), engine_with_field())
        assert cards_to_str(move.cards) == "S4 H4"

    def test_endgame_lead_plays_strongest(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("S3 H5 D9 SK C2"), engine_with_field())
        assert cards_to_str(move.cards) == "C2"

    def test_finishing_plays_strongest(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("S6 SK D9"), engine_with_field("H5"))
        assert cards_to_str(move.cards) == "SK"

    def test_counter_prefers_eight(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("S6 H8 SK D2 C4 H9"), engine_with_field("H5"))
        assert cards_to_str(move.cards) == "H8"

    def test_counter_plays_weakest(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        move = policy.select_move(make_player("S6 H7 SK D2 C4 H9"), engine_with_field("H5"))
        assert cards_to_str(move.cards) == "S6"

    def test_revolution_with_weak_hand(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        player = make_player("S3 H3 D3 C3 S4 H4 D4 S5 H5 S6 H6")
        move = policy.select_move(player, engine_with_field())
        assert move.kind == CombinationType.QUAD
        assert policy.should_revolution(player, engine_with_field())

    def test_revolution_check_while_revolutionized(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        engine = RuleEngine(table=TableState(is_revolution=True))
        # 革命中仍按序数计弱牌: 3-6 占多数时再次革命
        weak = make_player("S3 H3 D3 C3 S4 H4 D4 S5 H5 S6 H6")
        assert policy.should_revolution(weak, engine)

        strong = make_player("S5 H5 D5 C5 SK HK DK SA HA S2 H2")
        assert not policy.should_revolution(strong, engine)

    def test_no_revolution_with_strong_hand(self):
        policy = CPUPolicy("normal", rng=random.Random(0))
        player = make_player("S5 H5 D5 C5 SK HK DK SA HA S2 H2")
        assert not policy.should_revolution(player, engine_with_field())
        move = policy.select_move(player, engine_with_field())
        assert move.kind != CombinationType.QUAD

    def test_no_revolution_below_threshold(self):
        player = make_player("S3 H3 D3 C3 S4 H4 S5 H5 S6")
        # 9 张: 超过 normal 阈值, 未超过 hard 阈值
        assert CPUPolicy("normal").should_revolution(player, engine_with_field())
        assert not CPUPolicy("hard").should_revolution(player, engine_with_field())

    def test_normal_never_passes_when_playable(self):
        policy = CPUPolicy("normal", rng=random.Random(1))
        for _ in range(50):
            move = policy.select_move(make_player("S6 H7 SK D2 C4 H9"), engine_with_field("H5"))
            assert not move.is_pass

    def test_easy_sometimes_passes(self):
        policy = CPUPolicy("easy", rng=random.Random(3))
        moves = [
            policy.select_move(make_player("S6 H7 SK D2 C4 H9"), engine_with_field("H5"))
            for _ in range(300)
        ]
        assert any(m.is_pass for m in moves)
        assert any(not m.is_pass for m in moves)

    @pytest.mark.parametrize("difficulty", ["easy", "normal", "hard"])
    def test_moves_always_legal(self, difficulty):
        rng = random.Random(11)
        policy = CPUPolicy(difficulty, rng=random.Random(5))
        for _ in range(30):
            deck = shuffle_deck(create_deck(), rng)
            engine = RuleEngine()
            engine.table.is_revolution = rng.random() < 0.3
            lead = engine.get_playable_hands(deck[:3])
            if lead and rng.random() < 0.7:
                engine.play_cards(rng.choice(lead).cards, 0)

            player = Player(1, "Taro")
            player.receive_cards(deck[3:16], engine.is_revolution)
            playable = engine.get_playable_hands(player.hand)

            move = policy.select_move(player, engine, GameContext(active_player_count=4))
            assert move.is_pass or move in playable


class TestRandomPolicy:
    """RandomPolicy 测试"""

    def test_random_legal(self):
        policy = RandomPolicy(rng=random.Random(0))
        engine = engine_with_field("H5")
        player = make_player("S6 H7 SK D2 C4")
        playable = engine.get_playable_hands(player.hand)
        for _ in range(20):
            assert policy.select_move(player, engine) in playable

    def test_random_pass(self):
        policy = RandomPolicy(rng=random.Random(0))
        assert policy.select_move(make_player("H3"), engine_with_field("S2")).is_pass
