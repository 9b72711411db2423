# phanalist/source.py
"""
One parsed PHP file.

A :class:`SourceFile` is built once per discovered file, read by every
enabled rule, and dropped once its violations have been collected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional, Tuple

from .parser import parse_statements
from .syntax import CLASS_LIKE, Namespace, Statement
from .type_flow import TypeRegistry

_log = logging.getLogger(__name__)


@dataclass
class SourceFile:
    """
    A file's text and syntax tree.

    Attributes
    ----------
    path       : Path the file was read from (as given to the scanner)
    lines      : Raw text lines, used for violation context
    statements : Top-level statements; empty when the file failed to parse
    """
    path: str
    lines: Tuple[str, ...]
    statements: Tuple[Statement, ...] = field(default=())

    @classmethod
    def parse(cls, path: str, content: str) -> "SourceFile":
        statements = parse_statements(content, path)
        _log.debug("%s: %d top-level statements", path, len(statements))
        return cls(path, tuple(content.splitlines()), statements)

    # ── names ────────────────────────────────────────────────────

    @cached_property
    def namespace(self) -> Optional[str]:
        for statement in self.statements:
            if isinstance(statement, Namespace) and statement.name:
                return statement.name.lstrip("\\")
        return None

    @cached_property
    def type_name(self) -> Optional[str]:
        """Name of the first class, interface, trait or enum in the file."""
        for statement in self.statements:
            if isinstance(statement, CLASS_LIKE):
                return statement.name.value
            if isinstance(statement, Namespace):
                for inner in statement.statements:
                    if isinstance(inner, CLASS_LIKE):
                        return inner.name.value
        return None

    @cached_property
    def fqn(self) -> Optional[str]:
        if self.type_name is None:
            return None
        if self.namespace is None:
            return self.type_name
        return f"{self.namespace}\\{self.type_name}"

    # ── per-file analysis state ──────────────────────────────────

    @cached_property
    def type_registry(self) -> TypeRegistry:
        return TypeRegistry.build(self.statements)

    def line_text(self, line: int) -> str:
        """1-indexed line text; ``""`` outside the file."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""


__all__ = ["SourceFile"]
