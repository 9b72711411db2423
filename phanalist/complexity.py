# phanalist/complexity.py
"""
Method-body complexity approximations.

Two scores are computed over the statement list of one method body:

``ComplexityGraph``
    A cyclomatic-like score, ``nodes - edges + 2 * exit_points``.  Every
    ``if`` and ``while`` adds a node, every other statement is a leaf
    edge.  An ``if`` with a single bare statement as its body counts an
    extra node for the implicit branch and also walks its ``else``.

``PathGraph``
    A path-count-like tally: one edge per ``if`` and per ``while``
    reached, walking every branch body.

Neither is the textbook metric: switch arms, short-circuit operators and
ternaries are not counted.  Statements are consumed from the end of the list;
every step is an increment, so the order does not change the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .syntax import (
    Block,
    If,
    Statement,
    While,
    body_statements,
    is_delimited,
)


# ── Cyclomatic-like ──────────────────────────────────────────────

@dataclass
class ComplexityGraph:
    nodes: int = 0
    edges: int = 0
    exit_points: int = 0

    @property
    def score(self) -> int:
        return self.nodes - self.edges + 2 * self.exit_points

    def consume(self, statements: Sequence[Statement]) -> "ComplexityGraph":
        pending: List[Statement] = list(statements)
        while pending:
            self._visit(pending.pop())
        return self

    def _visit(self, statement: Statement) -> None:
        if isinstance(statement, If):
            self.nodes += 1
            if is_delimited(statement.body):
                self.consume(body_statements(statement.body))
                return
            self.nodes += 1
            self.consume(body_statements(statement.body))
            if statement.else_clause is not None:
                self.consume(body_statements(statement.else_clause.body))
        elif isinstance(statement, While):
            self.nodes += 1
            self.consume(body_statements(statement.body))
        elif isinstance(statement, Block):
            self.consume(statement.statements)
        else:
            self.edges += 1


def cyclomatic_complexity(statements: Sequence[Statement]) -> int:
    return ComplexityGraph().consume(statements).score


# ── Path-count-like ──────────────────────────────────────────────

@dataclass
class PathGraph:
    edges: int = 0

    def consume(self, statements: Sequence[Statement]) -> "PathGraph":
        pending: List[Statement] = list(statements)
        while pending:
            self._visit(pending.pop())
        return self

    def _visit(self, statement: Statement) -> None:
        if isinstance(statement, If):
            self.edges += 1
            self.consume(body_statements(statement.body))
            for clause in statement.elseifs:
                self.consume(body_statements(clause.body))
            if statement.else_clause is not None:
                self.consume(body_statements(statement.else_clause.body))
        elif isinstance(statement, While):
            self.edges += 1
            self.consume(body_statements(statement.body))
        elif isinstance(statement, Block):
            self.consume(statement.statements)


def path_count(statements: Sequence[Statement]) -> int:
    return PathGraph().consume(statements).edges


__all__ = ["ComplexityGraph", "PathGraph", "cyclomatic_complexity", "path_count"]
