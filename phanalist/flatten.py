# phanalist/flatten.py
"""
Statement flattening.

Rules are written against a flat stream of statements instead of walking
the tree themselves.  :func:`flatten` yields a statement followed by every
statement nested inside it, in source order::

    if ($a) {          # If (1), Block (2)
        foo();         # ExpressionStatement (3)
        while ($b)     # While (4)
            bar();     # ExpressionStatement (5)
    }

Closure, arrow-function and anonymous-class bodies are separate scopes and
are never entered, and neither are the bodies of named functions.
"""

from __future__ import annotations

from typing import Iterator, List, Tuple

from .syntax import (
    CLASS_LIKE,
    Block,
    Declare,
    DoWhile,
    For,
    Foreach,
    If,
    Namespace,
    Statement,
    Switch,
    Try,
    While,
    body_statements,
    methods_of,
)


def child_statements(statement: Statement) -> Tuple[Statement, ...]:
    """Direct children of *statement* that the flattener descends into."""
    if isinstance(statement, Block):
        return statement.statements
    if isinstance(statement, If):
        children: List[Statement] = list(body_statements(statement.body))
        for clause in statement.elseifs:
            children.extend(body_statements(clause.body))
        if statement.else_clause is not None:
            children.extend(body_statements(statement.else_clause.body))
        return tuple(children)
    if isinstance(statement, (While, For, Foreach)):
        return body_statements(statement.body)
    if isinstance(statement, DoWhile):
        return (statement.body,)
    if isinstance(statement, Switch):
        return tuple(s for case in statement.cases for s in case.statements)
    if isinstance(statement, Try):
        children = list(statement.block.statements)
        for catch in statement.catches:
            children.extend(catch.block.statements)
        if statement.finally_block is not None:
            children.extend(statement.finally_block.statements)
        return tuple(children)
    if isinstance(statement, Namespace):
        return statement.statements
    if isinstance(statement, Declare) and statement.body is not None:
        return statement.body.statements
    if isinstance(statement, CLASS_LIKE):
        return tuple(
            s
            for method in methods_of(statement)
            if method.body is not None
            for s in method.body.statements
        )
    return ()


def flatten(statement: Statement) -> List[Statement]:
    """Pre-order list of *statement* and everything nested inside it."""
    return list(iter_flatten(statement))


def iter_flatten(statement: Statement) -> Iterator[Statement]:
    stack = [statement]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(child_statements(current)))


__all__ = ["child_statements", "flatten", "iter_flatten"]
