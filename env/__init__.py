"""
Environment Layer - Gymnasium 兼容环境

Modules:
    daifugo_env: 主环境类
    observation: 观测空间构建
"""
from .daifugo_env import (
    DaifugoEnv,
    MAX_LEGAL_ACTIONS,
    finish_reward,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
)

__all__ = [
    # env
    "DaifugoEnv",
    "MAX_LEGAL_ACTIONS",
    "finish_reward",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
]
