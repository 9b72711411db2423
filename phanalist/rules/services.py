# phanalist/rules/services.py
"""
E0012: services must not mutate their own state.

A service instance is shared between requests when the application runs
on a long-lived worker, so writing to ``$this->…`` or to a static
property outside the constructor leaks state from one request into the
next.  Classes that implement a reset interface clear that state
themselves and are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from ..flatten import iter_flatten
from ..results import Violation
from ..source import SourceFile
from ..syntax import (
    ArrayAccess,
    Assignment,
    Class,
    DoWhile,
    Echo,
    Expression,
    ExpressionStatement,
    For,
    Foreach,
    If,
    PropertyFetch,
    Return,
    Statement,
    StaticPropertyFetch,
    Switch,
    Unary,
    Variable,
    While,
    methods_of,
    walk_expression,
)
from .base import Rule, do_validate_namespace

PROPERTY_SUGGESTION = "Properties in service must be immutable. Violating Shared Memory Model."
STATIC_PROPERTY_SUGGESTION = (
    "Static properties in service must be immutable. Violating Shared Memory Model."
)

_MUTATING_UNARY = frozenset({"++", "--"})


def statement_expressions(statement: Statement) -> Iterator[Expression]:
    """Expressions owned by *statement* itself, not by its nested statements."""
    if isinstance(statement, ExpressionStatement):
        yield statement.expression
    elif isinstance(statement, Return):
        if statement.value is not None:
            yield statement.value
    elif isinstance(statement, Echo):
        yield from statement.values
    elif isinstance(statement, If):
        yield statement.condition
        for clause in statement.elseifs:
            yield clause.condition
    elif isinstance(statement, (While, DoWhile)):
        yield statement.condition
    elif isinstance(statement, For):
        yield from statement.initializers
        yield from statement.conditions
        yield from statement.steps
    elif isinstance(statement, Foreach):
        yield statement.expression
    elif isinstance(statement, Switch):
        yield statement.subject
        for case in statement.cases:
            if case.condition is not None:
                yield case.condition


def mutated_target(expression: Expression):
    """The write target of an assignment or ``++``/``--``, else None."""
    if isinstance(expression, Assignment):
        return expression.target
    if isinstance(expression, Unary) and expression.operator in _MUTATING_UNARY:
        return expression.operand
    return None


def _strip_indexes(target: Expression) -> Expression:
    while isinstance(target, ArrayAccess):
        target = target.array
    return target


@dataclass
class ServiceCompatibilitySettings:
    include_namespaces: List[str] = field(
        default_factory=lambda: ["App\\Service\\", "App\\Controller\\"]
    )
    exclude_namespaces: List[str] = field(default_factory=list)
    reset_interfaces: List[str] = field(default_factory=lambda: ["ResetInterface"])


class ServiceCompatibilityRule(Rule):
    code = "E0012"
    description = "Service compatibility with Shared Memory Model"
    Settings = ServiceCompatibilitySettings

    def is_applicable(self, file: SourceFile) -> bool:
        return do_validate_namespace(
            file.fqn,
            self.settings.include_namespaces,
            self.settings.exclude_namespaces,
        )

    def implements_reset_interface(self, declaration: Class) -> bool:
        for interface in declaration.implements:
            short_name = interface.rsplit("\\", 1)[-1]
            if short_name in self.settings.reset_interfaces:
                return True
        return False

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, Class) or self.implements_reset_interface(statement):
            return []
        violations = []
        for method in methods_of(statement):
            if method.body is None or method.name.value.lower() == "__construct":
                continue
            for nested in iter_flatten(method.body):
                for expression in statement_expressions(nested):
                    for candidate in walk_expression(expression):
                        violation = self._check_target(file, mutated_target(candidate))
                        if violation is not None:
                            violations.append(violation)
        return violations

    def _check_target(self, file: SourceFile, target):
        if target is None:
            return None
        target = _strip_indexes(target)
        if isinstance(target, PropertyFetch):
            receiver = target.object
            if isinstance(receiver, Variable) and receiver.name == "$this":
                return self.new_violation(file, PROPERTY_SUGGESTION, target.span)
        elif isinstance(target, StaticPropertyFetch):
            return self.new_violation(file, STATIC_PROPERTY_SUGGESTION, target.span)
        return None


__all__ = [
    "ServiceCompatibilityRule",
    "ServiceCompatibilitySettings",
    "mutated_target",
    "statement_expressions",
]
