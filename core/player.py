"""
玩家

手牌只由玩家本人修改 (receive_cards / play_cards / sort_hand)
"""
from typing import List, Optional, Iterable, Set

from .cards import Card, Suit, sort_cards
from .rules import PlayerRank


class Player:
    """
    玩家

    Attributes:
        player_id: 座位号
        name: 显示名
        is_human: 是否为人类玩家
        hand: 手牌 (按显示顺序)
        is_active: 是否仍在本局中
        rank: 名次称号 (上岸后设置)
        finish_order: 上岸顺序 (0 开始)
    """

    def __init__(self, player_id: int, name: str, is_human: bool = False):
        self.player_id = player_id
        self.name = name
        self.is_human = is_human
        self.hand: List[Card] = []
        self.is_active = True
        self.rank: Optional[PlayerRank] = None
        self.finish_order: Optional[int] = None
        self._selected: Set[str] = set()

    def receive_cards(self, cards: Iterable[Card], is_revolution: bool = False) -> None:
        """接收牌并整理手牌"""
        self.hand.extend(cards)
        self.sort_hand(is_revolution)

    def sort_hand(self, is_revolution: bool = False) -> None:
        self.hand = sort_cards(self.hand, is_revolution)

    def play_cards(self, cards: Iterable[Card]) -> List[Card]:
        """从手牌中移除打出的牌"""
        played = list(cards)
        played_ids = {c.card_id for c in played}
        self.hand = [c for c in self.hand if c.card_id not in played_ids]
        self._selected -= played_ids
        return played

    def has_empty_hand(self) -> bool:
        return len(self.hand) == 0

    def get_hand_count(self) -> int:
        return len(self.hand)

    def has_card(self, card_id: str) -> bool:
        return any(c.card_id == card_id for c in self.hand)

    def has_cards(self, cards: Iterable[Card]) -> bool:
        """是否持有全部这些牌 (同一张牌重复出现视为不持有)"""
        ids = [c.card_id for c in cards]
        if len(set(ids)) != len(ids):
            return False
        hand_ids = {c.card_id for c in self.hand}
        return all(card_id in hand_ids for card_id in ids)

    def has_spade_three(self) -> bool:
        return any(c.is_spade_three for c in self.hand)

    def has_card_matching(self, suit: Suit, rank: int) -> bool:
        return any(not c.is_joker and c.suit is suit and c.rank == rank for c in self.hand)

    # 选牌 (界面用, 与规则无关)

    def toggle_selection(self, card: Card) -> bool:
        """
        切换选中状态

        Returns:
            切换后是否选中
        """
        if not self.has_card(card.card_id):
            raise ValueError(f"{card} is not in {self.name}'s hand")
        if card.card_id in self._selected:
            self._selected.discard(card.card_id)
            return False
        self._selected.add(card.card_id)
        return True

    def select(self, cards: Iterable[Card]) -> None:
        for card in cards:
            if card.card_id not in self._selected:
                self.toggle_selection(card)

    def get_selected_cards(self) -> List[Card]:
        """选中的牌 (按手牌顺序)"""
        return [c for c in self.hand if c.card_id in self._selected]

    def clear_selection(self) -> None:
        self._selected.clear()

    def assign_rank(self, position: int, rank: PlayerRank) -> None:
        """
        设置上岸顺序与称号 (每局只能设置一次)

        Args:
            position: 上岸顺序
            rank: 称号
        """
        if self.finish_order is not None:
            raise RuntimeError(f"{self.name} already finished at position {self.finish_order}")
        self.is_active = False
        self.finish_order = position
        self.rank = rank

    def reset(self) -> None:
        self.hand = []
        self.is_active = True
        self.rank = None
        self.finish_order = None
        self._selected.clear()

    def __repr__(self) -> str:
        return f"Player(id={self.player_id}, name={self.name!r}, cards={len(self.hand)})"
