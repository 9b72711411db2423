# phanalist/syntax.py
"""
Syntax tree model for the supported PHP subset.

Every node is an immutable dataclass carrying a :class:`Span`.  Statements,
expressions, class-like members and type hints each derive from their own
base class so that rules can match with ``isinstance`` against exactly the
variants they care about and ignore everything else.

Bodies of control-flow statements are either a single :class:`Statement`
(which may itself be a braced :class:`Block`) or a :class:`ColonBody` for
the alternative ``if: ... endif;`` syntax.  :func:`body_statements` hides
that difference from callers that only want the statement list.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterator, Optional, Tuple, Union


# ── Source Location ──────────────────────────────────────────────

@dataclass(frozen=True)
class Span:
    """1-indexed line/column plus the 0-based byte offset into the file."""
    line: int = 1
    column: int = 1
    position: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ── Base classes ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Node:
    span: Span


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class Member(Node):
    """A class-like member: method, property, constant, trait use, case."""


@dataclass(frozen=True)
class Hint(Node):
    """A type hint on a parameter, property or return type."""


@dataclass(frozen=True)
class Identifier(Node):
    value: str


# ── Type hints ───────────────────────────────────────────────────

@dataclass(frozen=True)
class NamedHint(Hint):
    name: str


@dataclass(frozen=True)
class KeywordHint(Hint):
    """``self``, ``static`` or ``parent``."""
    name: str


@dataclass(frozen=True)
class BuiltinHint(Hint):
    name: str


@dataclass(frozen=True)
class NullableHint(Hint):
    inner: Hint


@dataclass(frozen=True)
class UnionHint(Hint):
    types: Tuple[Hint, ...]


@dataclass(frozen=True)
class IntersectionHint(Hint):
    types: Tuple[Hint, ...]


# ── Expressions ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Variable(Expression):
    name: str


@dataclass(frozen=True)
class VariableVariable(Expression):
    inner: Expression


@dataclass(frozen=True)
class Name(Expression):
    """A bare or qualified name used as a value or class reference."""
    name: str


@dataclass(frozen=True)
class Literal(Expression):
    kind: str   # "int", "float", "string", "bool" or "null"
    raw: str


@dataclass(frozen=True)
class ArrayItem(Node):
    key: Optional[Expression]
    value: Optional[Expression]
    by_ref: bool = False
    unpack: bool = False


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    items: Tuple[ArrayItem, ...]
    kind: str = "short"   # "short", "array" or "list"


@dataclass(frozen=True)
class Argument(Node):
    value: Expression
    name: Optional[str] = None
    unpack: bool = False


@dataclass(frozen=True)
class CallablePlaceholder(Expression):
    """The ``...`` of a first-class callable such as ``strlen(...)``."""


@dataclass(frozen=True)
class AnonymousClass(Expression):
    extends: Optional[str]
    implements: Tuple[str, ...]
    members: Tuple[Member, ...]


@dataclass(frozen=True)
class New(Expression):
    class_ref: Expression
    arguments: Tuple[Argument, ...]


@dataclass(frozen=True)
class FunctionCall(Expression):
    target: Expression
    arguments: Tuple[Argument, ...]


@dataclass(frozen=True)
class MethodCall(Expression):
    object: Expression
    method: str
    arguments: Tuple[Argument, ...]


@dataclass(frozen=True)
class NullsafeMethodCall(Expression):
    object: Expression
    method: str
    arguments: Tuple[Argument, ...]


@dataclass(frozen=True)
class StaticMethodCall(Expression):
    class_ref: Expression
    method: str
    arguments: Tuple[Argument, ...]


@dataclass(frozen=True)
class PropertyFetch(Expression):
    object: Expression
    property: str


@dataclass(frozen=True)
class NullsafePropertyFetch(Expression):
    object: Expression
    property: str


@dataclass(frozen=True)
class StaticPropertyFetch(Expression):
    class_ref: Expression
    property: str


@dataclass(frozen=True)
class ClassConstantFetch(Expression):
    class_ref: Expression
    name: str


@dataclass(frozen=True)
class ArrayAccess(Expression):
    array: Expression
    index: Optional[Expression]


@dataclass(frozen=True)
class Assignment(Expression):
    target: Expression
    operator: str
    value: Expression
    by_ref: bool = False


@dataclass(frozen=True)
class Binary(Expression):
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True)
class Unary(Expression):
    """Prefix/postfix operators, casts and keyword operators (clone, print...)."""
    operator: str
    operand: Expression
    postfix: bool = False


@dataclass(frozen=True)
class Ternary(Expression):
    condition: Expression
    then: Optional[Expression]
    otherwise: Expression


@dataclass(frozen=True)
class Parenthesized(Expression):
    expression: Expression


@dataclass(frozen=True)
class Yield(Expression):
    key: Optional[Expression]
    value: Optional[Expression]
    delegate: bool = False


@dataclass(frozen=True)
class ClosureUse(Node):
    name: str
    by_ref: bool = False


@dataclass(frozen=True)
class Closure(Expression):
    parameters: Tuple["Parameter", ...]
    uses: Tuple[ClosureUse, ...]
    return_type: Optional[Hint]
    body: "Block"
    static: bool = False
    by_ref: bool = False


@dataclass(frozen=True)
class ArrowFunction(Expression):
    parameters: Tuple["Parameter", ...]
    return_type: Optional[Hint]
    expression: Expression
    static: bool = False
    by_ref: bool = False


@dataclass(frozen=True)
class MatchArm(Node):
    conditions: Optional[Tuple[Expression, ...]]   # None for ``default``
    expression: Expression


@dataclass(frozen=True)
class Match(Expression):
    subject: Expression
    arms: Tuple[MatchArm, ...]


# ── Members ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Parameter(Node):
    name: str
    type_hint: Optional[Hint]
    default: Optional[Expression]
    modifiers: Tuple[str, ...] = ()
    by_ref: bool = False
    variadic: bool = False


@dataclass(frozen=True)
class Method(Member):
    name: Identifier
    modifiers: Tuple[str, ...]
    parameters: Tuple[Parameter, ...]
    return_type: Optional[Hint]
    body: Optional["Block"]   # None for abstract and interface methods
    by_ref: bool = False


@dataclass(frozen=True)
class PropertyEntry(Node):
    name: str
    default: Optional[Expression]


@dataclass(frozen=True)
class Property(Member):
    modifiers: Tuple[str, ...]
    type_hint: Optional[Hint]
    entries: Tuple[PropertyEntry, ...]
    var: bool = False


@dataclass(frozen=True)
class ConstantEntry(Node):
    name: Identifier
    value: Expression


@dataclass(frozen=True)
class ClassConstant(Member):
    modifiers: Tuple[str, ...]
    type_hint: Optional[Hint]
    entries: Tuple[ConstantEntry, ...]


@dataclass(frozen=True)
class TraitUse(Member):
    traits: Tuple[str, ...]


@dataclass(frozen=True)
class EnumCase(Member):
    name: Identifier
    value: Optional[Expression]


# ── Statements ───────────────────────────────────────────────────

@dataclass(frozen=True)
class OpeningTag(Statement):
    tag: str


@dataclass(frozen=True)
class ClosingTag(Statement):
    pass


@dataclass(frozen=True)
class InlineHtml(Statement):
    text: str


@dataclass(frozen=True)
class Noop(Statement):
    pass


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression


@dataclass(frozen=True)
class Echo(Statement):
    values: Tuple[Expression, ...]


@dataclass(frozen=True)
class Return(Statement):
    value: Optional[Expression]


@dataclass(frozen=True)
class Block(Statement):
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class ColonBody(Node):
    """Statements of an alternative-syntax body (``: ... endif;``)."""
    statements: Tuple[Statement, ...]


Body = Union[Statement, ColonBody]


@dataclass(frozen=True)
class ElseIf(Node):
    condition: Expression
    body: Body


@dataclass(frozen=True)
class Else(Node):
    body: Body


@dataclass(frozen=True)
class If(Statement):
    condition: Expression
    body: Body
    elseifs: Tuple[ElseIf, ...]
    else_clause: Optional[Else]


@dataclass(frozen=True)
class While(Statement):
    condition: Expression
    body: Body


@dataclass(frozen=True)
class DoWhile(Statement):
    body: Statement
    condition: Expression


@dataclass(frozen=True)
class For(Statement):
    initializers: Tuple[Expression, ...]
    conditions: Tuple[Expression, ...]
    steps: Tuple[Expression, ...]
    body: Body


@dataclass(frozen=True)
class Foreach(Statement):
    expression: Expression
    key: Optional[Expression]
    value: Expression
    body: Body
    by_ref: bool = False


@dataclass(frozen=True)
class SwitchCase(Node):
    condition: Optional[Expression]   # None for ``default``
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class Switch(Statement):
    subject: Expression
    cases: Tuple[SwitchCase, ...]


@dataclass(frozen=True)
class Catch(Node):
    types: Tuple[str, ...]
    variable: Optional[str]
    block: Block


@dataclass(frozen=True)
class Try(Statement):
    block: Block
    catches: Tuple[Catch, ...]
    finally_block: Optional[Block]


@dataclass(frozen=True)
class Break(Statement):
    level: Optional[Expression]


@dataclass(frozen=True)
class Continue(Statement):
    level: Optional[Expression]


@dataclass(frozen=True)
class Global(Statement):
    variables: Tuple[str, ...]


@dataclass(frozen=True)
class StaticVariable(Node):
    name: str
    default: Optional[Expression]


@dataclass(frozen=True)
class StaticVariables(Statement):
    entries: Tuple[StaticVariable, ...]


@dataclass(frozen=True)
class UseItem(Node):
    name: str
    alias: Optional[str]


@dataclass(frozen=True)
class Use(Statement):
    kind: str   # "class", "function" or "const"
    items: Tuple[UseItem, ...]


@dataclass(frozen=True)
class Constant(Statement):
    entries: Tuple[ConstantEntry, ...]


@dataclass(frozen=True)
class Declare(Statement):
    directives: Tuple[Tuple[str, Expression], ...]
    body: Optional[Block]


@dataclass(frozen=True)
class Namespace(Statement):
    name: Optional[str]
    statements: Tuple[Statement, ...]
    braced: bool = False


@dataclass(frozen=True)
class Function(Statement):
    name: Identifier
    parameters: Tuple[Parameter, ...]
    return_type: Optional[Hint]
    body: Block
    by_ref: bool = False


@dataclass(frozen=True)
class Class(Statement):
    name: Identifier
    modifiers: Tuple[str, ...]
    extends: Optional[str]
    implements: Tuple[str, ...]
    members: Tuple[Member, ...]


@dataclass(frozen=True)
class Interface(Statement):
    name: Identifier
    extends: Tuple[str, ...]
    members: Tuple[Member, ...]


@dataclass(frozen=True)
class Trait(Statement):
    name: Identifier
    members: Tuple[Member, ...]


@dataclass(frozen=True)
class Enum(Statement):
    name: Identifier
    backing_type: Optional[Hint]
    implements: Tuple[str, ...]
    members: Tuple[Member, ...]


ClassLike = Union[Class, Interface, Trait, Enum]
CLASS_LIKE = (Class, Interface, Trait, Enum)

CLASS_LIKE_KINDS = {
    Class: "class",
    Interface: "interface",
    Trait: "trait",
    Enum: "enum",
}


# ── Helpers ──────────────────────────────────────────────────────

def body_statements(body: Body) -> Tuple[Statement, ...]:
    """Statements held by a control-flow body.

    A colon-delimited body yields its statement list; a single-statement
    body yields a 1-tuple holding that statement (a braced block stays a
    :class:`Block`, it is not unwrapped).
    """
    if isinstance(body, ColonBody):
        return body.statements
    return (body,)


def is_delimited(body: Body) -> bool:
    """True for ``{ ... }`` and ``: ... endif;`` bodies."""
    return isinstance(body, (Block, ColonBody))


def methods_of(declaration: ClassLike) -> Iterator[Method]:
    for member in declaration.members:
        if isinstance(member, Method):
            yield member


def iter_subexpressions(expression: Expression) -> Iterator[Expression]:
    """Yield the direct child expressions of *expression*.

    Closure and arrow-function bodies and anonymous class members are
    separate scopes and are not entered.
    """
    if isinstance(expression, (Closure, ArrowFunction, AnonymousClass)):
        return
    for f in fields(expression):
        if f.name == "span":
            continue
        yield from _expressions_in(getattr(expression, f.name))


def _expressions_in(value) -> Iterator[Expression]:
    if isinstance(value, Expression):
        yield value
    elif isinstance(value, tuple):
        for item in value:
            yield from _expressions_in(item)
    elif isinstance(value, ArrayItem):
        yield from _expressions_in(value.key)
        yield from _expressions_in(value.value)
    elif isinstance(value, Argument):
        yield value.value
    elif isinstance(value, MatchArm):
        yield from _expressions_in(value.conditions)
        yield value.expression


def walk_expression(expression: Expression) -> Iterator[Expression]:
    """Pre-order walk over *expression* and all of its sub-expressions."""
    stack = [expression]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_subexpressions(current))))


__all__ = [
    "Span", "Node", "Statement", "Expression", "Member", "Hint", "Identifier",
    "NamedHint", "KeywordHint", "BuiltinHint", "NullableHint", "UnionHint",
    "IntersectionHint",
    "Variable", "VariableVariable", "Name", "Literal", "ArrayItem",
    "ArrayLiteral", "Argument", "CallablePlaceholder", "AnonymousClass", "New",
    "FunctionCall", "MethodCall", "NullsafeMethodCall", "StaticMethodCall",
    "PropertyFetch", "NullsafePropertyFetch", "StaticPropertyFetch",
    "ClassConstantFetch", "ArrayAccess", "Assignment", "Binary", "Unary",
    "Ternary", "Parenthesized", "Yield", "ClosureUse", "Closure",
    "ArrowFunction", "MatchArm", "Match",
    "Parameter", "Method", "PropertyEntry", "Property", "ConstantEntry",
    "ClassConstant", "TraitUse", "EnumCase",
    "OpeningTag", "ClosingTag", "InlineHtml", "Noop", "ExpressionStatement",
    "Echo", "Return", "Block", "ColonBody", "Body", "ElseIf", "Else", "If",
    "While", "DoWhile", "For", "Foreach", "SwitchCase", "Switch", "Catch",
    "Try", "Break", "Continue", "Global", "StaticVariable", "StaticVariables",
    "UseItem", "Use", "Constant", "Declare", "Namespace", "Function", "Class",
    "Interface", "Trait", "Enum", "ClassLike", "CLASS_LIKE", "CLASS_LIKE_KINDS",
    "body_statements", "is_delimited", "methods_of", "iter_subexpressions",
    "walk_expression",
]
