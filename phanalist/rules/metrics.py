# phanalist/rules/metrics.py
"""Method-body complexity rules: E0009 and E0010."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..complexity import cyclomatic_complexity, path_count
from ..results import Violation
from ..source import SourceFile
from ..syntax import CLASS_LIKE, Statement, methods_of
from .base import Rule


@dataclass
class CyclomaticComplexitySettings:
    max_complexity: int = 10


class CyclomaticComplexityRule(Rule):
    code = "E0009"
    description = "Cyclomatic complexity"
    Settings = CyclomaticComplexitySettings

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        violations = []
        for method in methods_of(statement):
            if method.body is None:
                continue
            score = cyclomatic_complexity(method.body.statements)
            if score > self.settings.max_complexity:
                violations.append(self.new_violation(
                    file,
                    f"The body of {method.name.value} method has {score} complexity. "
                    f"Make it easier to understand.",
                    method.span,
                ))
        return violations


@dataclass
class NpathComplexitySettings:
    max_paths: int = 200


class NpathComplexityRule(Rule):
    code = "E0010"
    description = "Npath complexity"
    Settings = NpathComplexitySettings

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        violations = []
        for method in methods_of(statement):
            if method.body is None:
                continue
            paths = path_count(method.body.statements)
            if paths > self.settings.max_paths:
                violations.append(self.new_violation(
                    file,
                    f"The body of {method.name.value} method has {paths} paths. "
                    f"Reduce the amount of paths.",
                    method.span,
                ))
        return violations


__all__ = [
    "CyclomaticComplexityRule",
    "CyclomaticComplexitySettings",
    "NpathComplexityRule",
    "NpathComplexitySettings",
]
