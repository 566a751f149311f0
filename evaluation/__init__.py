"""
Evaluation Layer - 策略对战评估

Modules:
    arena: 对战竞技场
"""
from .arena import (
    MatchResult,
    TournamentResult,
    Arena,
    compute_standings,
)

__all__ = [
    "MatchResult",
    "TournamentResult",
    "Arena",
    "compute_standings",
]
