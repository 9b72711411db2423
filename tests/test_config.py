# tests/test_config.py
"""
Tests for configuration loading and rule settings coercion.
"""

import json
from dataclasses import dataclass, field
from typing import List

import pytest

from phanalist.config import Config, load_config
from phanalist.errors import ConfigError, SettingsError
from phanalist.rules.base import coerce_settings
from phanalist.rules.metrics import CyclomaticComplexityRule


@dataclass
class _Settings:
    limit: int = 3
    strict: bool = True
    names: List[str] = field(default_factory=list)


class TestCoerceSettings:

    def test_missing_keys_keep_defaults(self):
        assert coerce_settings(_Settings, {"limit": 7}) == _Settings(limit=7)

    def test_unknown_keys_are_ignored(self):
        assert coerce_settings(_Settings, {"other": 1}) == _Settings()

    def test_base_values_are_kept(self):
        base = _Settings(limit=9)
        assert coerce_settings(_Settings, {"strict": False}, base) == _Settings(limit=9, strict=False)

    @pytest.mark.parametrize("blob", [
        {"limit": "7"},
        {"limit": True},
        {"strict": 1},
        {"names": "App"},
        {"names": [1]},
        ["limit"],
    ])
    def test_wrong_types_raise(self, blob):
        with pytest.raises(SettingsError):
            coerce_settings(_Settings, blob)


class TestRuleConfigure:

    def test_configure_applies_blob(self):
        rule = CyclomaticComplexityRule()
        assert rule.configure({"max_complexity": 3})
        assert rule.settings.max_complexity == 3

    def test_bad_blob_keeps_settings_and_warns(self, caplog):
        rule = CyclomaticComplexityRule()
        assert not rule.configure({"max_complexity": "high"})
        assert rule.settings.max_complexity == 10
        assert "Unable to parse config for rule E0009, so default values will be used" in caplog.text


class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.src == "./src"
        assert config.output == "text"
        assert config.enabled_rules == [] and config.disable_rules == []

    def test_default_lists_rule_settings(self):
        rules = Config.default().rules
        assert rules["E0007"] == {"max_parameters": 5, "check_constructor": True}
        assert rules["E0009"] == {"max_complexity": 10}
        assert rules["E0010"] == {"max_paths": 200}
        assert rules["E0012"]["include_namespaces"] == ["App\\Service\\", "App\\Controller\\"]
        assert "E0001" not in rules

    def test_from_mapping(self):
        config = Config.from_mapping({
            "src": "lib",
            "disable_rules": ["E0009"],
            "rules": {"E0007": {"max_parameters": 3}},
            "output": "json",
            "unknown": True,
        })
        assert config.src == "lib"
        assert config.disable_rules == ["E0009"]
        assert config.rules == {"E0007": {"max_parameters": 3}}
        assert config.output == "json"

    @pytest.mark.parametrize("data", [
        [],
        {"src": 1},
        {"enabled_rules": "E0001"},
        {"disable_rules": [1]},
        {"rules": []},
        {"output": "xml"},
    ])
    def test_bad_shapes(self, data):
        with pytest.raises(ConfigError):
            Config.from_mapping(data)

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "phanalist.json"
        Config.default().save(path)
        loaded = load_config(path)
        assert loaded == Config.default()
        assert json.loads(path.read_text(encoding="utf-8"))["src"] == "./src"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "phanalist.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "absent.json")
