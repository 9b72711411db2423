# phanalist/rules/base.py
"""
Rule contract and registry.

Subclass Contract
─────────────────
  - Set ``code`` and ``description``
  - Optionally set ``Settings`` to a dataclass of tunables; an instance
    with default values is created for every rule object
  - Implement ``validate(file, statement)``
  - Optionally override ``is_applicable(file)`` (default: the file has a
    fully qualified name) or ``flatten(statement)`` (default: the
    statement and everything nested in it)

A rule holds no state between statements apart from its settings.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Sequence, Type

from ..errors import RuleRegistryError, SettingsError
from ..flatten import flatten
from ..results import Violation
from ..source import SourceFile
from ..syntax import Span, Statement

_log = logging.getLogger(__name__)


# ── Settings coercion ────────────────────────────────────────────

def coerce_settings(settings_cls: Type[Any], blob: Any, base: Optional[Any] = None) -> Any:
    """
    Build a *settings_cls* instance from a loosely typed *blob*.

    Keys missing from *blob* keep their value from *base* (or the class
    defaults); unknown keys are ignored.

    Raises
    ------
    SettingsError
        When *blob* is not a mapping or a value has the wrong type.
    """
    if not isinstance(blob, Mapping):
        raise SettingsError(f"expected an object, got {type(blob).__name__}")
    hints = typing.get_type_hints(settings_cls)
    values: Dict[str, Any] = {}
    for f in dataclasses.fields(settings_cls):
        if f.name not in blob:
            continue
        value = blob[f.name]
        if not _matches(hints[f.name], value):
            raise SettingsError(
                f"invalid type for {f.name!r}: {type(value).__name__}"
            )
        values[f.name] = list(value) if isinstance(value, list) else value
    if base is None:
        return settings_cls(**values)
    return dataclasses.replace(base, **values)


def _matches(expected: Any, value: Any) -> bool:
    origin = typing.get_origin(expected)
    if origin in (list, List):
        (item_type,) = typing.get_args(expected) or (Any,)
        return isinstance(value, list) and all(_matches(item_type, v) for v in value)
    if expected is Any:
        return True
    if expected is bool:
        return isinstance(value, bool)
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if expected is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, expected)


def do_validate_namespace(
    fqn: Optional[str],
    include: Sequence[str],
    exclude: Sequence[str],
) -> bool:
    """Namespace filter on a fully qualified name.

    Excludes win over includes; an empty include list lets everything
    through.  Matching is by substring.
    """
    if fqn is None:
        return False
    if any(namespace in fqn for namespace in exclude):
        return False
    if include:
        return any(namespace in fqn for namespace in include)
    return True


# ── Rule ─────────────────────────────────────────────────────────

class Rule(ABC):
    """Abstract base class for all rules."""

    code: ClassVar[str] = ""
    description: ClassVar[str] = ""
    Settings: ClassVar[Optional[Type[Any]]] = None

    def __init__(self) -> None:
        self.settings: Any = self.Settings() if self.Settings is not None else None

    def configure(self, blob: Any) -> bool:
        """
        Apply a settings blob from the configuration.

        Returns True when the blob was applied.  A blob that does not
        coerce leaves the current settings untouched and is logged.
        """
        if self.Settings is None:
            return False
        try:
            self.settings = coerce_settings(self.Settings, blob, self.settings)
        except SettingsError as exc:
            _log.warning(
                "Unable to parse config for rule %s, so default values will be used. "
                "Parsing error: %s",
                self.code,
                exc,
            )
            return False
        return True

    def is_applicable(self, file: SourceFile) -> bool:
        return file.fqn is not None

    def flatten(self, statement: Statement) -> List[Statement]:
        return flatten(statement)

    @abstractmethod
    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        ...

    def new_violation(self, file: SourceFile, suggestion: str, span: Span) -> Violation:
        return Violation(
            rule=self.code,
            line=file.line_text(span.line),
            suggestion=suggestion,
            span=span,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.code}'>"


# ── Registry ─────────────────────────────────────────────────────

class RuleRegistry:
    """
    Rule code → rule instance, for one run.

    Usage
    -----
    >>> registry = RuleRegistry(all_rules())
    >>> registry.configure(config.rules)
    >>> rules = registry.enabled(config.enabled_rules, config.disable_rules)
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: Dict[str, Rule] = {}
        for rule in rules:
            self.register(rule)

    def register(self, rule: Rule) -> None:
        if rule.code in self._rules:
            raise RuleRegistryError(f"Rule {rule.code} is already registered")
        self._rules[rule.code] = rule

    def get(self, code: str) -> Rule:
        try:
            return self._rules[code]
        except KeyError:
            raise RuleRegistryError(f"Unknown rule {code}") from None

    def __contains__(self, code: str) -> bool:
        return code in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def codes(self) -> List[str]:
        return sorted(self._rules)

    def all(self) -> List[Rule]:
        return [self._rules[code] for code in self.codes]

    def configure(self, settings: Mapping[str, Any]) -> None:
        for code, blob in settings.items():
            rule = self._rules.get(code)
            if rule is None:
                _log.warning("Settings given for unknown rule %s", code)
                continue
            rule.configure(blob)

    def enabled(
        self,
        enabled_rules: Sequence[str] = (),
        disable_rules: Sequence[str] = (),
    ) -> List[Rule]:
        """Rules to run, in ascending code order.

        A non-empty *enabled_rules* is an allow-list; otherwise every
        registered rule not in *disable_rules* runs.
        """
        for code in list(enabled_rules) + list(disable_rules):
            if code not in self._rules:
                _log.warning("Unknown rule code %s in configuration", code)
        if enabled_rules:
            wanted = set(enabled_rules)
            return [rule for rule in self.all() if rule.code in wanted]
        unwanted = set(disable_rules)
        return [rule for rule in self.all() if rule.code not in unwanted]


__all__ = [
    "Rule",
    "RuleRegistry",
    "coerce_settings",
    "do_validate_namespace",
]
