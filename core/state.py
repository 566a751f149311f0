"""
牌桌状态

场上牌、连续过牌数、革命标志、最后出牌者.
由 RuleEngine 独占修改, 编排层只读.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .cards import Card
from .combinations import Combination


@dataclass
class TableState:
    """
    牌桌状态

    Attributes:
        current_field: 场上的牌型 (None 表示空场)
        pass_count: 连续过牌数
        is_revolution: 是否革命中
        last_player_id: 最后出牌的玩家
    """
    current_field: Optional[Combination] = None
    pass_count: int = 0
    is_revolution: bool = False
    last_player_id: Optional[int] = None

    @property
    def is_field_empty(self) -> bool:
        return self.current_field is None

    @property
    def field_cards(self) -> Tuple[Card, ...]:
        if self.current_field is None:
            return ()
        return self.current_field.cards

    def copy(self) -> 'TableState':
        """浅拷贝 (Combination 不可变, 可共享)"""
        return replace(self)
