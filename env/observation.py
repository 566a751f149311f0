"""
观察空间编码

将回合状态转换为 numpy 特征
"""
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from core.cards import cards_to_array
from core.game import EventKind, Round

CARD_DIM = 54


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        hand: 自己的手牌 (54,)
        field: 场上的牌 (54,)
        played_cards: 各玩家已出牌累计 (player_count, 54)
        history: 最近 N 次出牌 (N, 54)
        cards_left: 各玩家剩余牌数 / 13 (player_count,)
        position: 座位 one-hot (player_count,)
        revolution: 是否革命中 (1,)
        pass_count: 连续过牌数 (1,)
    """
    hand: np.ndarray
    field: np.ndarray
    played_cards: np.ndarray
    history: np.ndarray
    cards_left: np.ndarray
    position: np.ndarray
    revolution: np.ndarray
    pass_count: np.ndarray

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "field": self.field,
            "played_cards": self.played_cards,
            "history": self.history,
            "cards_left": self.cards_left,
            "position": self.position,
            "revolution": self.revolution,
            "pass_count": self.pass_count,
        }

    def to_flat_array(self) -> np.ndarray:
        """展平为单一向量"""
        return np.concatenate([v.flatten() for v in self.to_dict().values()])


class ObservationBuilder:
    """
    观测构建器

    负责将 Round 转换为某个座位视角的 Observation
    """

    def __init__(self, history_length: int = 8):
        """
        Args:
            history_length: 出牌历史长度
        """
        self.history_length = history_length

    def build(self, round_: Round, seat: int) -> Observation:
        """
        构建观测

        Args:
            round_: 进行中的回合
            seat: 视角座位

        Returns:
            Observation 对象
        """
        n = len(round_.players)
        table = round_.engine.table

        hand = cards_to_array(round_.players[seat].hand)
        field = cards_to_array(table.field_cards)

        played_cards = self._encode_played_cards(round_)
        history = self._encode_history(round_)

        cards_left = np.array(
            [p.get_hand_count() / 13.0 for p in round_.players],
            dtype=np.float32,
        )

        position = np.zeros(n, dtype=np.float32)
        position[seat] = 1

        return Observation(
            hand=hand,
            field=field,
            played_cards=played_cards,
            history=history,
            cards_left=cards_left,
            position=position,
            revolution=np.array([float(table.is_revolution)], dtype=np.float32),
            pass_count=np.array([float(table.pass_count)], dtype=np.float32),
        )

    def _plays(self, round_: Round) -> List:
        return [e for e in round_.events if e.kind == EventKind.PLAY]

    def _encode_played_cards(self, round_: Round) -> np.ndarray:
        """
        编码各玩家已出的牌

        Returns:
            (player_count, 54) 数组，按座位顺序
        """
        result = np.zeros((len(round_.players), CARD_DIM), dtype=np.float32)
        for event in self._plays(round_):
            seat = round_.seat_of(event.player_id)
            result[seat] += cards_to_array(event.cards)
        return result

    def _encode_history(self, round_: Round) -> np.ndarray:
        """
        编码最近 N 次出牌

        Returns:
            (history_length, 54) 数组
        """
        result = np.zeros((self.history_length, CARD_DIM), dtype=np.float32)
        if self.history_length == 0:
            return result

        recent = self._plays(round_)[-self.history_length:]
        for i, event in enumerate(recent):
            result[i] = cards_to_array(event.cards)
        return result
