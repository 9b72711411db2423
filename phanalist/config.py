# phanalist/config.py
"""
Run configuration.

The configuration file is JSON::

    {
        "src": "./src",
        "enabled_rules": [],
        "disable_rules": ["E0009"],
        "rules": {
            "E0007": {"max_parameters": 4, "check_constructor": false}
        }
    }

Every key is optional.  Settings blobs under ``rules`` are handed to the
matching rule's :meth:`~phanalist.rules.base.Rule.configure`, which
coerces them or keeps its defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .errors import ConfigError
from .rules import all_rules

_log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "phanalist.json"
OUTPUT_FORMATS = ("text", "json")


@dataclass
class Config:
    src: str = "./src"
    enabled_rules: List[str] = field(default_factory=list)
    disable_rules: List[str] = field(default_factory=list)
    rules: Dict[str, Any] = field(default_factory=dict)
    output: str = "text"

    @classmethod
    def default(cls) -> "Config":
        """A config whose ``rules`` section lists every rule's defaults."""
        rules = {}
        for rule in all_rules():
            if rule.settings is not None:
                rules[rule.code] = asdict(rule.settings)
        return cls(rules=rules)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Config":
        if not isinstance(data, Mapping):
            raise ConfigError(
                f"Configuration must be an object, got {type(data).__name__}"
            )
        config = cls()
        if "src" in data:
            config.src = _expect(data, "src", str)
        if "enabled_rules" in data:
            config.enabled_rules = _expect_codes(data, "enabled_rules")
        if "disable_rules" in data:
            config.disable_rules = _expect_codes(data, "disable_rules")
        if "rules" in data:
            config.rules = dict(_expect(data, "rules", dict))
        if "output" in data:
            output = _expect(data, "output", str)
            if output not in OUTPUT_FORMATS:
                raise ConfigError(
                    f"Unknown output format {output!r}, expected one of "
                    f"{', '.join(OUTPUT_FORMATS)}"
                )
            config.output = output
        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_text(
            json.dumps(self.to_dict(), indent=4) + "\n", encoding="utf-8"
        )


def _expect(data: Mapping[str, Any], key: str, kind: type) -> Any:
    value = data[key]
    if not isinstance(value, kind):
        raise ConfigError(
            f"Configuration key {key!r} must be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _expect_codes(data: Mapping[str, Any], key: str) -> List[str]:
    codes = _expect(data, key, list)
    if not all(isinstance(code, str) for code in codes):
        raise ConfigError(f"Configuration key {key!r} must be a list of rule codes")
    return list(codes)


def load_config(path: Union[str, Path]) -> Config:
    """Read *path* as JSON.

    Raises
    ------
    ConfigError
        When the file cannot be read, is not JSON, or has the wrong shape.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path} is not valid JSON: {exc}") from exc
    _log.info("Loaded configuration from %s", path)
    return Config.from_mapping(data)


__all__ = ["Config", "DEFAULT_CONFIG_FILE", "OUTPUT_FORMATS", "load_config"]
