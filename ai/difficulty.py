"""
CPU 难度配置
"""
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Tuple, Union


class Difficulty(Enum):
    """CPU 难度"""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyConfig:
    """
    难度参数

    Attributes:
        think_time: 思考时间范围 (秒)
        mistake_rate: 放弃策略、随机行动的概率
        pass_rate: 随机行动时直接过牌的概率
        revolution_threshold: 手牌多于该张数才考虑革命
    """
    think_time: Tuple[float, float]
    mistake_rate: float
    pass_rate: float
    revolution_threshold: int


DIFFICULTY_PRESETS: Dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(
        think_time=(1.0, 2.0),
        mistake_rate=0.3,
        pass_rate=0.2,
        revolution_threshold=5,
    ),
    Difficulty.NORMAL: DifficultyConfig(
        think_time=(0.8, 1.5),
        mistake_rate=0.0,
        pass_rate=0.0,
        revolution_threshold=8,
    ),
    Difficulty.HARD: DifficultyConfig(
        think_time=(0.5, 1.0),
        mistake_rate=0.0,
        pass_rate=0.0,
        revolution_threshold=10,
    ),
}


def get_difficulty_config(difficulty: Union[Difficulty, str]) -> DifficultyConfig:
    """按名称或枚举获取难度参数"""
    return DIFFICULTY_PRESETS[Difficulty(difficulty)]
