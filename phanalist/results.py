# phanalist/results.py
"""Violations and the aggregate scan result."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .syntax import Span


@dataclass(frozen=True)
class Violation:
    """
    A single reported issue.

    Attributes
    ----------
    rule       : Code of the rule that produced it (e.g. ``"E0005"``)
    line       : Text of the offending source line
    suggestion : Human-readable message
    span       : Location of the offending node
    """
    rule: str
    line: str
    suggestion: str
    span: Span

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.rule,
            "line": self.line,
            "suggestion": self.suggestion,
            "span": {
                "line": self.span.line,
                "column": self.span.column,
                "position": self.span.position,
            },
        }


@dataclass
class Results:
    """
    Aggregate result of one scan.

    Attributes
    ----------
    files             : path → violations, in analysis order
    codes_count       : rule code → number of violations
    total_files_count : number of files analysed, clean ones included
    duration          : elapsed seconds, set once the scan finishes
    """
    files: Dict[str, List[Violation]] = field(default_factory=dict)
    codes_count: Counter = field(default_factory=Counter)
    total_files_count: int = 0
    duration: Optional[float] = None

    def add_file_violations(self, path: str, violations: Iterable[Violation]) -> None:
        current = self.files.setdefault(path, [])
        for violation in violations:
            current.append(violation)
            self.codes_count[violation.rule] += 1

    def has_any_violations(self) -> bool:
        return self.total_violations > 0

    @property
    def total_violations(self) -> int:
        return sum(self.codes_count.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": {
                path: [v.to_dict() for v in violations]
                for path, violations in self.files.items()
            },
            "codes_count": dict(sorted(self.codes_count.items())),
            "total_files_count": self.total_files_count,
            "duration": self.duration,
        }


__all__ = ["Violation", "Results"]
