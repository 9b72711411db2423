# phanalist/rules/structural.py
"""
Structural rules: E0001 – E0008.

Each rule looks at one flattened statement at a time and matches only
the node kinds it cares about.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..flatten import flatten
from ..results import Violation
from ..source import SourceFile
from ..syntax import (
    CLASS_LIKE,
    CLASS_LIKE_KINDS,
    ArrayLiteral,
    ClassConstant,
    Constant,
    Expression,
    Literal,
    Method,
    OpeningTag,
    Property,
    Return,
    Statement,
    Try,
    Unary,
    methods_of,
)
from .base import Rule


# ── E0001 ────────────────────────────────────────────────────────

class OpeningTagRule(Rule):
    code = "E0001"
    description = "Opening tag position"

    def is_applicable(self, file: SourceFile) -> bool:
        return True

    def flatten(self, statement: Statement) -> List[Statement]:
        return [statement] if isinstance(statement, OpeningTag) else []

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, OpeningTag):
            return []
        if file.lines and file.lines[0].strip().startswith("#!"):
            return []
        first = next(s for s in file.statements if isinstance(s, OpeningTag))
        if statement is not first:
            return []

        violations = []
        span = statement.span
        if span.line > 1:
            violations.append(self.new_violation(
                file,
                "The opening tag is not on the right line. "
                "This should always be the first line in a PHP file.",
                span,
            ))
        if span.column > 1:
            violations.append(self.new_violation(
                file,
                f"The opening tag doesn't start at the right column: {span.column}.",
                span,
            ))
        return violations


# ── E0002 ────────────────────────────────────────────────────────

class EmptyCatchRule(Rule):
    code = "E0002"
    description = "Empty catch"

    SUGGESTION = (
        "There is an empty catch. It's not recommended to catch an "
        "Exception without doing anything with it."
    )

    def is_applicable(self, file: SourceFile) -> bool:
        return True

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, Try):
            return []
        return [
            self.new_violation(file, self.SUGGESTION, catch.span)
            for catch in statement.catches
            if not catch.block.statements
        ]


# ── E0003 ────────────────────────────────────────────────────────

class MethodModifiersRule(Rule):
    code = "E0003"
    description = "Method modifiers"

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        return [
            self.new_violation(
                file,
                f'Method name "{method.name.value}" should be declared with a '
                f"visibility modifier.",
                method.span,
            )
            for method in methods_of(statement)
            if not method.modifiers
        ]


# ── E0004 ────────────────────────────────────────────────────────

class UppercaseConstantsRule(Rule):
    code = "E0004"
    description = "Uppercase constants"

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if isinstance(statement, Constant):
            entries = list(statement.entries)
        elif isinstance(statement, CLASS_LIKE):
            entries = [
                entry
                for member in statement.members
                if isinstance(member, ClassConstant)
                for entry in member.entries
            ]
        else:
            return []

        violations = []
        for entry in entries:
            name = entry.name.value
            if name != name.upper():
                violations.append(self.new_violation(
                    file, f"The constant {name} should be uppercase.", entry.name.span
                ))
        return violations


# ── E0005 ────────────────────────────────────────────────────────

class CapitalizedClassNameRule(Rule):
    code = "E0005"
    description = "Capitalized class name"

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        name = statement.name.value
        if name[:1].isupper():
            return []
        kind = CLASS_LIKE_KINDS[type(statement)]
        return [self.new_violation(
            file,
            f"The {kind} name {name} is not capitalized. The first letter of "
            f"the name of the {kind} should be in uppercase.",
            statement.name.span,
        )]


# ── E0006 ────────────────────────────────────────────────────────

class PropertyModifiersRule(Rule):
    code = "E0006"
    description = "Property modifiers"

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        violations = []
        seen = set()
        for member in statement.members:
            if not isinstance(member, Property) or member.modifiers:
                continue
            for entry in member.entries:
                if entry.name in seen:
                    continue
                seen.add(entry.name)
                violations.append(self.new_violation(
                    file, f"The variables {entry.name} have no modifier.", entry.span
                ))
        return violations


# ── E0007 ────────────────────────────────────────────────────────

@dataclass
class MethodParametersSettings:
    max_parameters: int = 5
    check_constructor: bool = True


class MethodParametersRule(Rule):
    code = "E0007"
    description = "Method parameters count"
    Settings = MethodParametersSettings

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        maximum = self.settings.max_parameters
        violations = []
        for method in methods_of(statement):
            if len(method.parameters) <= maximum:
                continue
            if method.name.value.lower() == "__construct":
                if not self.settings.check_constructor:
                    continue
                suggestion = (
                    f"Constructor has too many parameters. More than {maximum} "
                    f"parameters is considered a too much."
                )
            else:
                suggestion = (
                    f"Method {method.name.value} has too many parameters. More than "
                    f"{maximum} parameters is considered a too much."
                )
            violations.append(self.new_violation(file, suggestion, method.span))
        return violations


# ── E0008 ────────────────────────────────────────────────────────

def is_literal_value(expression: Optional[Expression]) -> bool:
    """Scalars, ``true``/``false``/``null`` and arrays of literals."""
    if isinstance(expression, Literal):
        return True
    if isinstance(expression, Unary) and expression.operator in ("-", "+"):
        return isinstance(expression.operand, Literal) and expression.operand.kind in ("int", "float")
    if isinstance(expression, ArrayLiteral) and expression.kind != "list":
        return all(
            item.value is not None
            and not item.unpack
            and is_literal_value(item.value)
            and (item.key is None or is_literal_value(item.key))
            for item in expression.items
        )
    return False


def returns_literal(method: Method) -> bool:
    if method.body is None:
        return False
    return any(
        isinstance(statement, Return) and is_literal_value(statement.value)
        for body_statement in method.body.statements
        for statement in flatten(body_statement)
    )


class ReturnTypeSignatureRule(Rule):
    code = "E0008"
    description = "Return type signature"

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        if not isinstance(statement, CLASS_LIKE):
            return []
        return [
            self.new_violation(
                file,
                f"The method {method.name.value} has a return statement but it "
                f"has no return type signature.",
                method.span,
            )
            for method in methods_of(statement)
            if method.return_type is None and returns_literal(method)
        ]


__all__ = [
    "OpeningTagRule",
    "EmptyCatchRule",
    "MethodModifiersRule",
    "UppercaseConstantsRule",
    "CapitalizedClassNameRule",
    "PropertyModifiersRule",
    "MethodParametersSettings",
    "MethodParametersRule",
    "ReturnTypeSignatureRule",
    "is_literal_value",
    "returns_literal",
]
