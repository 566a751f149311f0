"""
大富豪 Gymnasium 环境

遵循标准 Gymnasium API, 智能体坐一个座位, 其余座位由 CPUPolicy 代打
"""
from typing import Dict, Any, Tuple, Optional, List, Union
import random

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from ai.difficulty import Difficulty
from ai.policy import CPUPolicy
from core.cards import cards_to_str
from core.combinations import Combination, Pass
from core.config import GameSettings
from core.game import Round, create_players

from .observation import ObservationBuilder, CARD_DIM

# 合法动作数上限 (单张 + 对子 + 三张 + 四张 + 阶段 远小于该值)
MAX_LEGAL_ACTIONS = 512


def finish_reward(position: int, player_count: int) -> float:
    """上岸名次奖励: 第一名 +1, 最后一名 -1, 中间线性"""
    if player_count <= 1:
        return 0.0
    return 1.0 - 2.0 * position / (player_count - 1)


class DaifugoEnv(gym.Env):
    """
    大富豪 Gymnasium 环境

    动作是 info["legal_actions"] 的下标, 下标 0 总是 PASS

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "Daifugo-v1",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        settings: Optional[GameSettings] = None,
        opponent_difficulty: Union[Difficulty, str, None] = None,
        agent_seat: int = 0,
        history_length: int = 8,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            settings: 游戏配置
            opponent_difficulty: 对手难度 (默认使用 settings.cpu_difficulty)
            agent_seat: 智能体座位
            history_length: 出牌历史长度
            seed: 随机种子
        """
        super().__init__()

        self.render_mode = render_mode
        self.settings = settings or GameSettings()
        self.opponent_difficulty = Difficulty(opponent_difficulty or self.settings.cpu_difficulty)
        self.agent_seat = agent_seat
        self._seed = seed

        if not 0 <= agent_seat < self.settings.player_count:
            raise ValueError(f"agent_seat {agent_seat} out of range")

        self._obs_builder = ObservationBuilder(history_length=history_length)
        self._round: Optional[Round] = None

        self._define_spaces(history_length)

    def _define_spaces(self, history_length: int):
        """定义观测和动作空间"""
        n = self.settings.player_count

        self.action_space = spaces.Discrete(MAX_LEGAL_ACTIONS)

        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(CARD_DIM,), dtype=np.float32),
            "field": spaces.Box(0, 1, shape=(CARD_DIM,), dtype=np.float32),
            "played_cards": spaces.Box(0, 1, shape=(n, CARD_DIM), dtype=np.float32),
            "history": spaces.Box(0, 1, shape=(history_length, CARD_DIM), dtype=np.float32),
            "cards_left": spaces.Box(0, 2, shape=(n,), dtype=np.float32),
            "position": spaces.Box(0, 1, shape=(n,), dtype=np.float32),
            "revolution": spaces.Box(0, 1, shape=(1,), dtype=np.float32),
            "pass_count": spaces.Box(0, n, shape=(1,), dtype=np.float32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        Args:
            seed: 随机种子
            options: 额外选项 ("deck": 指定牌序)

        Returns:
            (observation, info) 元组
        """
        super().reset(seed=seed if seed is not None else self._seed)
        self._seed = None

        n = self.settings.player_count
        policies = {
            seat: CPUPolicy(
                self.opponent_difficulty,
                rng=random.Random(int(self.np_random.integers(2**32))),
            )
            for seat in range(n)
            if seat != self.agent_seat
        }

        self._round = Round(
            self.settings,
            players=create_players(n, human_seat=self.agent_seat),
            policies=policies,
            rng=random.Random(int(self.np_random.integers(2**32))),
        )
        self._round.start(deck=(options or {}).get("deck"))
        self._run_opponents()

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Union[int, Combination],
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 合法动作下标或 Combination

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._round is None:
            raise RuntimeError("Environment not reset. Call reset() first.")
        if self._is_done():
            raise RuntimeError("Episode has terminated. Call reset() first.")

        move = self._decode_action(action)
        if move is None:
            # 非法动作：给予惩罚并保持状态
            info = self._build_info()
            info["error"] = "Invalid action"
            return self._build_observation(), -1.0, False, False, info

        if move.is_pass:
            self._round.pass_turn()
        else:
            self._round.play(move.cards)

        self._run_opponents()

        terminated = self._is_done()
        reward = self._compute_reward() if terminated else 0.0

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, False, info

    def _decode_action(self, action: Union[int, Combination]) -> Optional[Combination]:
        """解码动作, 非法时返回 None"""
        legal_actions = self.get_legal_actions()
        if isinstance(action, Combination):
            return action if action in legal_actions else None
        if isinstance(action, (int, np.integer)):
            if 0 <= action < len(legal_actions):
                return legal_actions[int(action)]
            return None
        raise ValueError(f"Invalid action type: {type(action)}")

    def _run_opponents(self):
        """CPU 座位行动, 直到轮到智能体或智能体上岸"""
        round_ = self._round
        while round_.is_running and round_.current_index != self.agent_seat:
            if not round_.players[self.agent_seat].is_active:
                break
            round_.play_cpu_turn()

    def _agent(self):
        return self._round.players[self.agent_seat]

    def _is_done(self) -> bool:
        return not self._round.is_running or not self._agent().is_active

    def _compute_reward(self) -> float:
        agent = self._agent()
        if agent.finish_order is None:
            return 0.0
        return finish_reward(agent.finish_order, self.settings.player_count)

    def _build_observation(self) -> Dict[str, np.ndarray]:
        """构建观测"""
        return self._obs_builder.build(self._round, self.agent_seat).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        round_ = self._round
        info = {
            "current_player": round_.current_index,
            "legal_actions": self.get_legal_actions(),
            "turns": round_.turns,
            "is_revolution": round_.engine.is_revolution,
        }

        agent = self._agent()
        if agent.finish_order is not None:
            info["finish_position"] = agent.finish_order
            info["rank"] = agent.rank.title

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode in ("ansi", "human"):
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        round_ = self._round
        table = round_.engine.table

        lines = ["=" * 50]
        lines.append(f"Current Player: {round_.current_player.name}")
        lines.append(f"Revolution: {table.is_revolution}")
        for player in round_.players:
            marker = "*" if player.player_id == self._agent().player_id else " "
            if player.is_active:
                lines.append(f"{marker}{player.name}: {cards_to_str(player.hand)} ({player.get_hand_count()})")
            else:
                lines.append(f"{marker}{player.name}: {player.rank.title}")
        field = cards_to_str(table.field_cards) if not table.is_field_empty else "-"
        lines.append(f"Field: {field}")
        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        """关闭环境"""
        pass

    @property
    def round(self) -> Optional[Round]:
        """当前回合 (用于调试)"""
        return self._round

    def get_legal_actions(self) -> List[Combination]:
        """获取智能体当前合法动作 (PASS 在首位)"""
        if self._round is None or self._is_done():
            return []
        if self._round.current_index != self.agent_seat:
            return []
        hand = self._agent().hand
        return [Pass.create()] + self._round.engine.get_playable_hands(hand)

    def sample_action(self) -> int:
        """随机采样一个合法动作下标"""
        legal_actions = self.get_legal_actions()
        if not legal_actions:
            return 0
        return int(self.np_random.integers(len(legal_actions)))


def make_env(**kwargs) -> DaifugoEnv:
    """
    工厂函数：创建环境

    Args:
        **kwargs: 环境参数

    Returns:
        DaifugoEnv 实例
    """
    return DaifugoEnv(**kwargs)
