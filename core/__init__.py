"""
Core Layer - 纯规则逻辑 (无 AI 依赖)

Modules:
    cards: 牌定义与编码
    combinations: 牌型与候选出牌枚举
    rules: 规则引擎
    state: 牌桌状态
    player: 玩家
    config: 游戏配置
    game: 回合编排
"""
from .cards import (
    Suit,
    Card,
    SUIT_ORDER,
    RANK_ORDINAL,
    JOKER_STRENGTH,
    strength,
    sort_cards,
    create_deck,
    shuffle_deck,
    parse_card,
    str_to_cards,
    cards_to_str,
    cards_to_array,
)

from .combinations import (
    CombinationType,
    Combination,
    Pass,
    Single,
    Pair,
    Triple,
    Quad,
    Sequence,
    HandEnumerator,
    MIN_SEQUENCE_LEN,
    REVOLUTION_SEQUENCE_LEN,
)

from .config import RuleSettings, GameSettings, load_settings, save_settings

from .state import TableState

from .rules import (
    PlayerRank,
    PlayFailure,
    PlayCheck,
    PlayResult,
    RuleEngine,
)

from .player import Player

from .game import (
    EventKind,
    RoundEvent,
    RoundResult,
    Round,
    create_players,
)

__all__ = [
    # cards
    "Suit",
    "Card",
    "SUIT_ORDER",
    "RANK_ORDINAL",
    "JOKER_STRENGTH",
    "strength",
    "sort_cards",
    "create_deck",
    "shuffle_deck",
    "parse_card",
    "str_to_cards",
    "cards_to_str",
    "cards_to_array",
    # combinations
    "CombinationType",
    "Combination",
    "Pass",
    "Single",
    "Pair",
    "Triple",
    "Quad",
    "Sequence",
    "HandEnumerator",
    "MIN_SEQUENCE_LEN",
    "REVOLUTION_SEQUENCE_LEN",
    # config
    "RuleSettings",
    "GameSettings",
    "load_settings",
    "save_settings",
    # state
    "TableState",
    # rules
    "PlayerRank",
    "PlayFailure",
    "PlayCheck",
    "PlayResult",
    "RuleEngine",
    # player
    "Player",
    # game
    "EventKind",
    "RoundEvent",
    "RoundResult",
    "Round",
    "create_players",
]
