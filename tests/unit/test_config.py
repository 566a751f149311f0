"""配置测试"""
import json

import pytest

from core.config import RuleSettings, GameSettings, load_settings, save_settings


class TestGameSettings:
    """GameSettings 测试"""

    def test_defaults(self):
        settings = GameSettings()
        assert settings.player_count == 4
        assert settings.cpu_difficulty == "normal"
        assert settings.rules() == RuleSettings()

    def test_rules(self):
        settings = GameSettings(eight_cut_enabled=False, stairs_enabled=False)
        rules = settings.rules()
        assert rules.revolution_enabled
        assert not rules.eight_cut_enabled
        assert not rules.stairs_enabled

    def test_from_dict_ignores_unknown(self):
        settings = GameSettings.from_dict({"player_count": 3, "volume": 0.5})
        assert settings.player_count == 3

    def test_dict_roundtrip(self):
        settings = GameSettings(player_count=3, cpu_difficulty="hard", include_jokers=False)
        assert GameSettings.from_dict(settings.to_dict()) == settings


class TestSettingsFile:
    """配置文件读写测试"""

    def test_missing_file(self, tmp_path):
        assert load_settings(tmp_path / "missing.json") == GameSettings()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        settings = GameSettings(revolution_enabled=False, player_count=3)
        save_settings(settings, path)

        assert json.loads(path.read_text(encoding="utf-8"))["player_count"] == 3
        assert load_settings(path) == settings

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_settings(path) == GameSettings()

    def test_non_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_settings(path) == GameSettings()

    def test_unknown_difficulty(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"cpu_difficulty": "expert", "player_count": 3}), encoding="utf-8")
        settings = load_settings(path)
        assert settings.cpu_difficulty == "normal"
        assert settings.player_count == 3
