"""
AI Layer - CPU 出牌策略

Modules:
    difficulty: 难度配置
    policy: 启发式出牌策略
"""
from .difficulty import (
    Difficulty,
    DifficultyConfig,
    DIFFICULTY_PRESETS,
    get_difficulty_config,
)

from .policy import (
    GameContext,
    Policy,
    RandomPolicy,
    CPUPolicy,
)

__all__ = [
    # difficulty
    "Difficulty",
    "DifficultyConfig",
    "DIFFICULTY_PRESETS",
    "get_difficulty_config",
    # policy
    "GameContext",
    "Policy",
    "RandomPolicy",
    "CPUPolicy",
]
