"""
游戏配置

规则开关、人数、CPU 难度. 一局内不变.
"""
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Union
import json
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleSettings:
    """
    规则开关

    Attributes:
        revolution_enabled: 革命
        eight_cut_enabled: 8 切
        spade3_return_enabled: 黑桃 3 反击单王
        stairs_enabled: 阶段 (同花连续)
    """
    revolution_enabled: bool = True
    eight_cut_enabled: bool = True
    spade3_return_enabled: bool = True
    stairs_enabled: bool = True


@dataclass
class GameSettings:
    """
    游戏配置

    Attributes:
        player_count: 人数 (3 或 4)
        cpu_difficulty: CPU 难度 ("easy" / "normal" / "hard")
        include_jokers: 是否使用王
        think_delay: CPU 是否模拟思考时间
    """
    # 规则
    revolution_enabled: bool = True
    eight_cut_enabled: bool = True
    spade3_return_enabled: bool = True
    stairs_enabled: bool = True

    # 对局
    player_count: int = 4
    cpu_difficulty: str = "normal"
    include_jokers: bool = True

    # 表现
    think_delay: bool = False

    def rules(self) -> RuleSettings:
        return RuleSettings(
            revolution_enabled=self.revolution_enabled,
            eight_cut_enabled=self.eight_cut_enabled,
            spade3_return_enabled=self.spade3_return_enabled,
            stairs_enabled=self.stairs_enabled,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> 'GameSettings':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)


def load_settings(path: Union[str, Path]) -> GameSettings:
    """
    读取配置

    文件不存在或无法解析时返回默认配置; 未知的 CPU 难度改用默认难度

    Args:
        path: JSON 文件路径

    Returns:
        GameSettings
    """
    path = Path(path)
    if not path.exists():
        return GameSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to load settings from {path}: {e}")
        return GameSettings()

    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings file {path}: expected an object")
        return GameSettings()

    settings = GameSettings.from_dict(data)

    from ai.difficulty import Difficulty

    valid_difficulties = {d.value for d in Difficulty}
    if settings.cpu_difficulty not in valid_difficulties:
        default = GameSettings.cpu_difficulty
        logger.warning(
            f"Unknown cpu_difficulty {settings.cpu_difficulty!r} in {path}, using {default!r}"
        )
        settings.cpu_difficulty = default

    return settings


def save_settings(settings: GameSettings, path: Union[str, Path]) -> None:
    """保存配置为 JSON"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.debug(f"Saved settings to {path}")
