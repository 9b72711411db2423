# phanalist/parser.py
"""
Parse PHP source text into the :mod:`phanalist.syntax` tree.

Usage::

    >>> from phanalist.parser import parse_statements
    >>> statements = parse_statements("<?php\\nclass Foo {}\\n")
    >>> [type(s).__name__ for s in statements]
    ['OpeningTag', 'Class']

:func:`parse_statements` is fail-soft: source the grammar cannot handle is
logged and yields an empty tuple, so one bad file never stops a scan.
:func:`parse_program` raises :class:`~phanalist.errors.PhpSyntaxError`
instead.
"""

from __future__ import annotations

import bisect
import logging
import re
import sys
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

from parsimonious.exceptions import ParseError, VisitationError
from parsimonious.expressions import Literal as _LiteralExpr
from parsimonious.expressions import OneOf, Regex
from parsimonious.nodes import Node, NodeVisitor

from .errors import PhpSyntaxError
from .grammar import PHP_GRAMMAR
from .syntax import (
    AnonymousClass,
    Argument,
    ArrayAccess,
    ArrayItem,
    ArrayLiteral,
    ArrowFunction,
    Assignment,
    Binary,
    Block,
    BuiltinHint,
    CallablePlaceholder,
    Catch,
    Class,
    ClassConstant,
    ClassConstantFetch,
    Closure,
    ClosingTag,
    ClosureUse,
    ColonBody,
    Constant,
    ConstantEntry,
    Continue,
    Break,
    Declare,
    DoWhile,
    Echo,
    Else,
    ElseIf,
    Enum,
    EnumCase,
    Expression,
    ExpressionStatement,
    For,
    Foreach,
    Function,
    FunctionCall,
    Global,
    Hint,
    Identifier,
    If,
    InlineHtml,
    Interface,
    IntersectionHint,
    KeywordHint,
    Literal,
    Match,
    MatchArm,
    Member,
    Method,
    MethodCall,
    NamedHint,
    Name,
    Namespace,
    New,
    Noop,
    NullableHint,
    NullsafeMethodCall,
    NullsafePropertyFetch,
    OpeningTag,
    Parameter,
    Parenthesized,
    Property,
    PropertyEntry,
    PropertyFetch,
    Return,
    Span,
    Statement,
    StaticMethodCall,
    StaticPropertyFetch,
    StaticVariable,
    StaticVariables,
    Switch,
    SwitchCase,
    Ternary,
    Trait,
    TraitUse,
    Try,
    Unary,
    UnionHint,
    Use,
    UseItem,
    Variable,
    VariableVariable,
    While,
    Yield,
)

_log = logging.getLogger(__name__)

# parsimonious recurses once per grammar level; deeply nested PHP needs
# more headroom than the interpreter default.
_RECURSION_LIMIT = 8000

BUILTIN_TYPES: FrozenSet[str] = frozenset({
    "array", "bool", "callable", "false", "float", "int", "iterable",
    "mixed", "never", "null", "object", "string", "true", "void",
})

KEYWORD_TYPES: FrozenSet[str] = frozenset({"self", "static", "parent"})

# PHP operator precedence, higher binds tighter.
BINARY_PRECEDENCE: Dict[str, int] = {
    "or": 1, "xor": 2, "and": 3,
    "??": 7,
    "||": 8,
    "&&": 9,
    "|": 10,
    "^": 11,
    "&": 12,
    "==": 13, "!=": 13, "===": 13, "!==": 13, "<>": 13, "<=>": 13,
    "<": 14, "<=": 14, ">": 14, ">=": 14,
    ".": 15,
    "<<": 16, ">>": 16,
    "+": 17, "-": 17,
    "*": 18, "/": 18, "%": 18,
    "instanceof": 20,
    "**": 21,
}

RIGHT_ASSOCIATIVE: FrozenSet[str] = frozenset({"??", "**"})


class _Args(NamedTuple):
    items: Tuple[Argument, ...]


class _Postfix(NamedTuple):
    kind: str                 # "->", "?->", "::", "[]", "++", "--"
    name: Optional[str]
    value: object


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — SOURCE POSITIONS
# ═══════════════════════════════════════════════════════════════════

class LineIndex:
    """Map character offsets of *text* to :class:`Span` values."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._starts: List[int] = [0]
        self._starts.extend(m.end() for m in re.finditer("\n", text))
        self._byte_starts: List[int] = [0]
        for previous, start in zip(self._starts, self._starts[1:]):
            self._byte_starts.append(
                self._byte_starts[-1] + _utf8_len(text[previous:start])
            )

    def span(self, offset: int) -> Span:
        index = bisect.bisect_right(self._starts, offset) - 1
        start = self._starts[index]
        return Span(
            line=index + 1,
            column=offset - start + 1,
            position=self._byte_starts[index] + _utf8_len(self._text[start:offset]),
        )


def _utf8_len(chunk: str) -> int:
    return len(chunk.encode("utf-8", "surrogatepass"))


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — TREE BUILDER
# ═══════════════════════════════════════════════════════════════════

class PhpTreeBuilder(NodeVisitor):
    """Transforms the parsimonious parse tree into syntax nodes."""

    def __init__(self, text: str) -> None:
        self._index = LineIndex(text)

    # ── plumbing ─────────────────────────────────────────────────

    def generic_visit(self, node, visited_children):
        if isinstance(node.expr, (_LiteralExpr, Regex)):
            return node
        if isinstance(node.expr, OneOf):
            return visited_children[0]
        return visited_children

    def _span(self, node: Node) -> Span:
        return self._index.span(node.start)

    @classmethod
    def _flatten(cls, value) -> List[object]:
        if not isinstance(value, list):
            return [value]
        out: List[object] = []
        for item in value:
            out.extend(cls._flatten(item))
        return out

    def _of(self, value, kind) -> list:
        return [item for item in self._flatten(value) if isinstance(item, kind)]

    def _first(self, value, kind):
        found = self._of(value, kind)
        return found[0] if found else None

    def _statement(self, value, node: Node) -> Statement:
        statements = self._of(value, Statement)
        if len(statements) == 1:
            return statements[0]
        return Block(self._span(node), tuple(statements))

    @staticmethod
    def _fold_binary(operands: Sequence[Expression], operators: Sequence[str]) -> Expression:
        output: List[Expression] = [operands[0]]
        pending: List[str] = []

        def reduce() -> None:
            operator = pending.pop()
            right = output.pop()
            left = output.pop()
            output.append(Binary(left.span, left, operator, right))

        for operator, operand in zip(operators, operands[1:]):
            precedence = BINARY_PRECEDENCE[operator]
            while pending:
                top = BINARY_PRECEDENCE[pending[-1]]
                if top > precedence or (top == precedence and operator not in RIGHT_ASSOCIATIVE):
                    reduce()
                else:
                    break
            pending.append(operator)
            output.append(operand)
        while pending:
            reduce()
        return output[0]

    def _binary_chain(self, visited_children) -> Expression:
        first, rest = visited_children
        operands = [first]
        operators = []
        for _, operator, _, operand in rest:
            operators.append(operator)
            operands.append(operand)
        if not operators:
            return first
        return self._fold_binary(operands, operators)

    # ── file structure ───────────────────────────────────────────

    def visit_program(self, node, visited_children):
        return tuple(self._of(visited_children, Statement))

    def visit_statement_list(self, node, visited_children):
        return self._of(visited_children, Statement)

    def visit_inline_html(self, node, visited_children):
        return InlineHtml(self._span(node), node.text)

    def visit_opening_tag(self, node, visited_children):
        return OpeningTag(self._span(node), node.text.lower())

    def visit_closing_tag(self, node, visited_children):
        return [ClosingTag(self._span(node))] + self._of(visited_children[1:], Statement)

    # ── statements ───────────────────────────────────────────────

    def visit_block(self, node, visited_children):
        return Block(self._span(node), tuple(self._of(visited_children, Statement)))

    def visit_noop_statement(self, node, visited_children):
        return Noop(self._span(node))

    def visit_expression_statement(self, node, visited_children):
        return ExpressionStatement(self._span(node), visited_children[0])

    def visit_condition(self, node, visited_children):
        return visited_children[2]

    def visit_if_statement(self, node, visited_children):
        condition = visited_children[2]
        body, elseifs, else_clause = visited_children[4]
        return If(self._span(node), condition, body, elseifs, else_clause)

    def visit_if_statement_body(self, node, visited_children):
        statement, elseifs, else_clause = visited_children
        return (
            self._statement(statement, node),
            tuple(self._of(elseifs, ElseIf)),
            self._first(else_clause, Else),
        )

    def visit_else_if_clause(self, node, visited_children):
        _, keyword, _, condition, _, statement = visited_children
        return ElseIf(self._span(keyword), condition, self._statement(statement, keyword))

    def visit_else_clause(self, node, visited_children):
        _, keyword, _, statement = visited_children
        return Else(self._span(keyword), self._statement(statement, keyword))

    def visit_if_colon_body(self, node, visited_children):
        colon, _, statements, elseifs, else_clause = visited_children[:5]
        return (
            ColonBody(self._span(colon), tuple(statements)),
            tuple(self._of(elseifs, ElseIf)),
            self._first(else_clause, Else),
        )

    def visit_else_if_colon_clause(self, node, visited_children):
        keyword, _, condition, _, colon, _, statements = visited_children
        return ElseIf(
            self._span(keyword),
            condition,
            ColonBody(self._span(colon), tuple(statements)),
        )

    def visit_else_colon_clause(self, node, visited_children):
        keyword, _, colon, _, statements = visited_children
        return Else(self._span(keyword), ColonBody(self._span(colon), tuple(statements)))

    def _loop_body(self, value, node: Node):
        if isinstance(value, ColonBody):
            return value
        return self._statement(value, node)

    def visit_while_statement(self, node, visited_children):
        condition = visited_children[2]
        return While(self._span(node), condition, self._loop_body(visited_children[4], node))

    def _colon_body(self, node, visited_children):
        return ColonBody(self._span(node), tuple(visited_children[2]))

    visit_while_colon_body = _colon_body
    visit_for_colon_body = _colon_body
    visit_foreach_colon_body = _colon_body

    def visit_do_while_statement(self, node, visited_children):
        body = self._statement(visited_children[2], node)
        return DoWhile(self._span(node), body, visited_children[6])

    def visit_for_statement(self, node, visited_children):
        return For(
            self._span(node),
            initializers=visited_children[4],
            conditions=visited_children[8],
            steps=visited_children[12],
            body=self._loop_body(visited_children[16], node),
        )

    def visit_for_expressions(self, node, visited_children):
        return tuple(self._of(visited_children, Expression))

    def visit_foreach_statement(self, node, visited_children):
        key, value, by_ref = visited_children[8]
        return Foreach(
            self._span(node),
            expression=visited_children[4],
            key=key,
            value=value,
            body=self._loop_body(visited_children[12], node),
            by_ref=by_ref,
        )

    def visit_foreach_target(self, node, visited_children):
        key, by_ref, value = visited_children
        return self._first(key, Expression), bool(by_ref), value

    def visit_foreach_key(self, node, visited_children):
        return visited_children[0]

    def visit_by_ref(self, node, visited_children):
        return True

    def visit_variadic(self, node, visited_children):
        return True

    def visit_switch_statement(self, node, visited_children):
        return Switch(self._span(node), visited_children[2], visited_children[4])

    def visit_switch_brace_body(self, node, visited_children):
        return tuple(self._of(visited_children[3], SwitchCase))

    def visit_switch_colon_body(self, node, visited_children):
        return tuple(self._of(visited_children[3], SwitchCase))

    def visit_switch_case(self, node, visited_children):
        label, _, _, _, statements = visited_children
        condition = label if isinstance(label, Expression) else None
        return SwitchCase(self._span(node), condition, tuple(statements))

    def visit_case_label(self, node, visited_children):
        return visited_children[2]

    def visit_try_statement(self, node, visited_children):
        _, _, block, catches, finally_clause = visited_children
        return Try(
            self._span(node),
            block,
            tuple(self._of(catches, Catch)),
            self._first(finally_clause, Block),
        )

    def visit_catch_clause(self, node, visited_children):
        keyword = visited_children[1]
        types = visited_children[5]
        variable = self._first(visited_children[7], Variable)
        return Catch(
            self._span(keyword),
            types,
            variable.name if variable is not None else None,
            visited_children[11],
        )

    def visit_catch_types(self, node, visited_children):
        return tuple(name.name for name in self._of(visited_children, Name))

    def visit_finally_clause(self, node, visited_children):
        return visited_children[3]

    def visit_return_statement(self, node, visited_children):
        return Return(self._span(node), visited_children[1])

    def visit_break_statement(self, node, visited_children):
        return Break(self._span(node), visited_children[1])

    def visit_continue_statement(self, node, visited_children):
        return Continue(self._span(node), visited_children[1])

    def visit_optional_expression(self, node, visited_children):
        return self._first(visited_children, Expression)

    def visit_echo_statement(self, node, visited_children):
        return Echo(self._span(node), visited_children[2])

    def visit_expression_list(self, node, visited_children):
        return tuple(self._of(visited_children, Expression))

    def visit_global_statement(self, node, visited_children):
        names = tuple(v.name for v in self._of(visited_children, Variable))
        return Global(self._span(node), names)

    def visit_static_statement(self, node, visited_children):
        return StaticVariables(
            self._span(node), tuple(self._of(visited_children, StaticVariable))
        )

    def visit_static_variable(self, node, visited_children):
        variable, default = visited_children
        return StaticVariable(self._span(node), variable.name, self._first(default, Expression))

    def visit_braced_namespace(self, node, visited_children):
        name = self._first(visited_children[2], Name)
        return Namespace(
            self._span(node),
            name.name if name is not None else None,
            tuple(visited_children[5]),
            braced=True,
        )

    def visit_unbraced_namespace(self, node, visited_children):
        return Namespace(
            self._span(node),
            visited_children[2].name,
            tuple(self._of(visited_children[6], Statement)),
            braced=False,
        )

    def visit_use_statement(self, node, visited_children):
        kind = self._first(visited_children[2], str) or "class"
        return Use(self._span(node), kind, tuple(self._of(visited_children[3:], UseItem)))

    def visit_use_kind(self, node, visited_children):
        return visited_children[0].text.lower()

    def visit_group_use(self, node, visited_children):
        prefix = visited_children[0].name
        return [
            UseItem(item.span, f"{prefix}\\{item.name}", item.alias)
            for item in self._of(visited_children[4:], UseItem)
        ]

    def visit_use_item(self, node, visited_children):
        _, name, alias = visited_children
        alias_identifier = self._first(alias, Identifier)
        return UseItem(
            self._span(node),
            name.name,
            alias_identifier.value if alias_identifier is not None else None,
        )

    def visit_const_statement(self, node, visited_children):
        return Constant(self._span(node), tuple(self._of(visited_children, ConstantEntry)))

    def visit_const_entry(self, node, visited_children):
        name, _, _, _, value = visited_children
        return ConstantEntry(self._span(node), name, value)

    def visit_declare_statement(self, node, visited_children):
        directives = tuple(
            d for d in self._flatten(visited_children[4:6]) if isinstance(d, tuple)
        )
        body = visited_children[9]
        return Declare(self._span(node), directives, body if isinstance(body, Block) else None)

    def visit_declare_directive(self, node, visited_children):
        name, _, _, _, value = visited_children
        return (name.value, value)

    # ── declarations ─────────────────────────────────────────────

    @staticmethod
    def _identifier(name: Name) -> Identifier:
        return Identifier(name.span, name.name)

    def visit_function_declaration(self, node, visited_children):
        _, _, _, by_ref, name, _, parameters, _, return_type, body = visited_children
        return Function(
            self._span(node),
            self._identifier(name),
            parameters,
            self._first(return_type, Hint),
            body,
            by_ref=bool(by_ref),
        )

    def visit_class_declaration(self, node, visited_children):
        _, modifiers, _, _, name, _, extends, implements, members = visited_children
        return Class(
            self._span(node),
            self._identifier(name),
            modifiers,
            self._first(extends, str),
            self._first(implements, tuple) or (),
            members,
        )

    def visit_class_modifiers(self, node, visited_children):
        return tuple(self._of(visited_children, str))

    def visit_class_modifier(self, node, visited_children):
        return node.text.lower()

    def visit_extends_clause(self, node, visited_children):
        return visited_children[2].name

    def visit_implements_clause(self, node, visited_children):
        return visited_children[2]

    def visit_interface_extends(self, node, visited_children):
        return visited_children[2]

    def visit_name_list(self, node, visited_children):
        return tuple(name.name for name in self._of(visited_children, Name))

    def visit_interface_declaration(self, node, visited_children):
        _, _, _, name, _, extends, members = visited_children
        return Interface(
            self._span(node),
            self._identifier(name),
            self._first(extends, tuple) or (),
            members,
        )

    def visit_trait_declaration(self, node, visited_children):
        _, _, _, name, _, members = visited_children
        return Trait(self._span(node), self._identifier(name), members)

    def visit_enum_declaration(self, node, visited_children):
        _, _, _, name, _, backing, implements, members = visited_children
        return Enum(
            self._span(node),
            self._identifier(name),
            self._first(backing, Hint),
            self._first(implements, tuple) or (),
            members,
        )

    def visit_enum_backing(self, node, visited_children):
        return visited_children[2]

    def visit_class_body(self, node, visited_children):
        return tuple(self._of(visited_children, Member))

    def visit_member(self, node, visited_children):
        return visited_children[1]

    def visit_trait_use(self, node, visited_children):
        return TraitUse(self._span(node), visited_children[2])

    def visit_enum_case(self, node, visited_children):
        _, _, name, value, _, _ = visited_children
        return EnumCase(self._span(node), name, self._first(value, Expression))

    def visit_class_constant(self, node, visited_children):
        modifiers, _, _, type_hint, first, rest, _, _ = visited_children
        return ClassConstant(
            self._span(node),
            modifiers,
            self._first(type_hint, Hint),
            tuple(self._of([first, rest], ConstantEntry)),
        )

    def visit_constant_type(self, node, visited_children):
        return visited_children[0]

    def visit_method_declaration(self, node, visited_children):
        modifiers, _, _, by_ref, name, _, parameters, _, return_type, body = visited_children
        return Method(
            self._span(node),
            name,
            modifiers,
            parameters,
            self._first(return_type, Hint),
            body if isinstance(body, Block) else None,
            by_ref=bool(by_ref),
        )

    def visit_property_declaration(self, node, visited_children):
        modifiers, type_hint, first, rest, _, _ = visited_children
        return Property(
            self._span(node),
            tuple(m for m in modifiers if m != "var"),
            self._first(type_hint, Hint),
            tuple(self._of([first, rest], PropertyEntry)),
            var="var" in modifiers,
        )

    def visit_property_type(self, node, visited_children):
        return visited_children[0]

    def visit_property_entry(self, node, visited_children):
        variable, default = visited_children
        return PropertyEntry(self._span(node), variable.name, self._first(default, Expression))

    def visit_member_modifiers(self, node, visited_children):
        return tuple(self._of(visited_children, str))

    visit_property_modifiers = visit_member_modifiers

    def visit_member_modifier(self, node, visited_children):
        return node.text.lower()

    def visit_parameter_list(self, node, visited_children):
        return tuple(self._of(visited_children, Parameter))

    def visit_parameter(self, node, visited_children):
        _, modifiers, type_hint, by_ref, variadic, variable, default = visited_children
        return Parameter(
            self._span(node),
            variable.name,
            self._first(type_hint, Hint),
            self._first(default, Expression),
            modifiers=tuple(self._of(modifiers, str)),
            by_ref=bool(by_ref),
            variadic=bool(variadic),
        )

    def visit_parameter_type(self, node, visited_children):
        return visited_children[0]

    def visit_parameter_modifier(self, node, visited_children):
        return node.text.lower()

    def visit_return_type(self, node, visited_children):
        return visited_children[2]

    def visit_attributes(self, node, visited_children):
        return []

    # ── type hints ───────────────────────────────────────────────

    def visit_nullable_hint(self, node, visited_children):
        return NullableHint(self._span(node), visited_children[2])

    def visit_union_hint(self, node, visited_children):
        return UnionHint(self._span(node), tuple(self._of(visited_children, Hint)))

    def visit_intersection_hint(self, node, visited_children):
        return IntersectionHint(self._span(node), tuple(self._of(visited_children, Hint)))

    def visit_dnf_group(self, node, visited_children):
        return visited_children[2]

    def visit_type_name(self, node, visited_children):
        text = node.text
        lowered = text.lower()
        if lowered in KEYWORD_TYPES:
            return KeywordHint(self._span(node), lowered)
        if lowered in BUILTIN_TYPES:
            return BuiltinHint(self._span(node), lowered)
        return NamedHint(self._span(node), text)

    # ── expressions ──────────────────────────────────────────────

    def visit_expression(self, node, visited_children):
        return self._binary_chain(visited_children)

    def visit_binary(self, node, visited_children):
        return self._binary_chain(visited_children)

    def visit_low_logical_operator(self, node, visited_children):
        return node.text.lower()

    def visit_binary_operator(self, node, visited_children):
        return node.text.lower()

    def visit_ternary(self, node, visited_children):
        result, tails = visited_children
        for _, (then, otherwise) in tails:
            result = Ternary(result.span, result, then, otherwise)
        return result

    def visit_short_ternary(self, node, visited_children):
        return (None, visited_children[2])

    def visit_full_ternary(self, node, visited_children):
        then, otherwise = self._of(visited_children, Expression)
        return (then, otherwise)

    def visit_prefix_operation(self, node, visited_children):
        operator, _, operand = visited_children
        return Unary(self._span(node), operator, operand)

    def visit_prefix_operator(self, node, visited_children):
        child = visited_children[0]
        if isinstance(child, str):
            return child
        return child.text.lower()

    def visit_cast(self, node, visited_children):
        return re.sub(r"\s+", "", node.text).lower()

    def visit_print_expression(self, node, visited_children):
        return Unary(self._span(node), "print", visited_children[2])

    def visit_throw_expression(self, node, visited_children):
        return Unary(self._span(node), "throw", visited_children[2])

    def visit_include_expression(self, node, visited_children):
        return Unary(self._span(node), visited_children[0].text.lower(), visited_children[2])

    def visit_yield_from(self, node, visited_children):
        return Yield(self._span(node), None, visited_children[4], delegate=True)

    def visit_yield_expression(self, node, visited_children):
        _, key, value = visited_children
        return Yield(self._span(node), self._first(key, Expression), self._first(value, Expression))

    def visit_yield_key(self, node, visited_children):
        return visited_children[1]

    def visit_yield_value(self, node, visited_children):
        return visited_children[1]

    def visit_assignment(self, node, visited_children):
        target, _, operator, _, by_ref, value = visited_children
        return Assignment(self._span(node), target, operator.text, value, by_ref=bool(by_ref))

    # ── postfix chains ───────────────────────────────────────────

    def visit_postfix_expression(self, node, visited_children):
        result, operations = visited_children
        for operation in operations:
            result = self._apply_postfix(result, operation)
        return result

    def _apply_postfix(self, target: Expression, operation) -> Expression:
        span = target.span
        if isinstance(operation, _Args):
            if isinstance(target, PropertyFetch):
                return MethodCall(span, target.object, target.property, operation.items)
            if isinstance(target, NullsafePropertyFetch):
                return NullsafeMethodCall(span, target.object, target.property, operation.items)
            if isinstance(target, ClassConstantFetch):
                return StaticMethodCall(span, target.class_ref, target.name, operation.items)
            if isinstance(target, StaticPropertyFetch):
                return StaticMethodCall(span, target.class_ref, target.property, operation.items)
            return FunctionCall(span, target, operation.items)
        if operation.kind == "->":
            return PropertyFetch(span, target, operation.name)
        if operation.kind == "?->":
            return NullsafePropertyFetch(span, target, operation.name)
        if operation.kind == "::":
            if operation.value == "variable":
                return StaticPropertyFetch(span, target, operation.name)
            return ClassConstantFetch(span, target, operation.name)
        if operation.kind == "[]":
            return ArrayAccess(span, target, operation.value)
        return Unary(span, operation.kind, target, postfix=True)

    def visit_postfix_operator(self, node, visited_children):
        return visited_children[1]

    def visit_member_access(self, node, visited_children):
        return _Postfix("->", visited_children[2], None)

    def visit_nullsafe_access(self, node, visited_children):
        return _Postfix("?->", visited_children[2], None)

    def visit_static_access(self, node, visited_children):
        kind, name = visited_children[2]
        return _Postfix("::", name, kind)

    def visit_member_selector(self, node, visited_children):
        return node.text

    def visit_static_selector(self, node, visited_children):
        if isinstance(visited_children[0], Variable):
            return ("variable", node.text)
        return ("name", node.text)

    def visit_brace_expression(self, node, visited_children):
        return visited_children[2]

    def visit_index_access(self, node, visited_children):
        return _Postfix("[]", None, self._first(visited_children[2], Expression))

    def visit_postfix_increment(self, node, visited_children):
        return _Postfix(node.text, None, None)

    def visit_arguments(self, node, visited_children):
        return _Args(tuple(self._of(visited_children, Argument)))

    def visit_argument(self, node, visited_children):
        child = visited_children[0]
        if isinstance(child, Argument):
            return child
        return Argument(child.span, child)

    def visit_callable_placeholder(self, node, visited_children):
        span = self._span(node)
        return Argument(span, CallablePlaceholder(span))

    def visit_spread_argument(self, node, visited_children):
        return Argument(self._span(node), visited_children[2], unpack=True)

    def visit_named_argument(self, node, visited_children):
        name = visited_children[0]
        return Argument(self._span(node), visited_children[5], name=name.value)

    # ── primaries ────────────────────────────────────────────────

    def visit_parenthesized(self, node, visited_children):
        return Parenthesized(self._span(node), visited_children[2])

    def visit_closure(self, node, visited_children):
        static, _, _, by_ref, parameters, _, uses, return_type, body = visited_children
        return Closure(
            self._span(node),
            parameters,
            tuple(self._of(uses, ClosureUse)),
            self._first(return_type, Hint),
            body,
            static=bool(static),
            by_ref=bool(by_ref),
        )

    def visit_static_prefix(self, node, visited_children):
        return True

    def visit_closure_uses(self, node, visited_children):
        return self._of(visited_children, ClosureUse)

    def visit_closure_use(self, node, visited_children):
        by_ref, variable = visited_children
        return ClosureUse(self._span(node), variable.name, by_ref=bool(by_ref))

    def visit_arrow_function(self, node, visited_children):
        static, _, _, by_ref, parameters, _, return_type, _, _, expression = visited_children
        return ArrowFunction(
            self._span(node),
            parameters,
            self._first(return_type, Hint),
            expression,
            static=bool(static),
            by_ref=bool(by_ref),
        )

    def visit_new_expression(self, node, visited_children):
        _, _, target, arguments = visited_children
        if isinstance(target, tuple):
            anonymous, anonymous_arguments = target
            return New(self._span(node), anonymous, anonymous_arguments)
        new_arguments = self._first(arguments, _Args)
        return New(
            self._span(node),
            target,
            new_arguments.items if new_arguments is not None else (),
        )

    def visit_new_arguments(self, node, visited_children):
        return visited_children[1]

    def visit_anonymous_class(self, node, visited_children):
        _, _, _, arguments, _, extends, implements, members = visited_children
        anonymous_arguments = self._first(arguments, _Args)
        anonymous = AnonymousClass(
            self._span(node),
            self._first(extends, str),
            self._first(implements, tuple) or (),
            members,
        )
        return (
            anonymous,
            anonymous_arguments.items if anonymous_arguments is not None else (),
        )

    def visit_dynamic_class_reference(self, node, visited_children):
        result, steps = visited_children
        for operator, selector in steps:
            span = result.span
            if operator == "::":
                if isinstance(selector, Variable):
                    result = StaticPropertyFetch(span, result, selector.name)
                else:
                    result = ClassConstantFetch(span, result, selector.value)
            else:
                name = selector.name if isinstance(selector, Variable) else selector.value
                result = PropertyFetch(span, result, name)
        return result

    def visit_dynamic_class_step(self, node, visited_children):
        _, operator, _, selector = visited_children
        return operator.text, selector

    def visit_match_expression(self, node, visited_children):
        return Match(
            self._span(node),
            visited_children[4],
            tuple(self._of(visited_children[10], MatchArm)),
        )

    def visit_match_arm(self, node, visited_children):
        conditions, _, _, _, expression = visited_children
        if not isinstance(conditions, tuple):
            conditions = None
        return MatchArm(self._span(node), conditions, expression)

    def visit_short_array(self, node, visited_children):
        return ArrayLiteral(self._span(node), visited_children[2], "short")

    def visit_long_array(self, node, visited_children):
        return ArrayLiteral(self._span(node), visited_children[4], "array")

    def visit_list_literal(self, node, visited_children):
        return ArrayLiteral(self._span(node), visited_children[4], "list")

    def visit_array_items(self, node, visited_children):
        return tuple(self._of(visited_children, ArrayItem))

    def visit_spread_item(self, node, visited_children):
        return ArrayItem(self._span(node), None, visited_children[2], unpack=True)

    def visit_keyed_item(self, node, visited_children):
        key, _, _, _, by_ref, value = visited_children
        return ArrayItem(self._span(node), key, value, by_ref=bool(by_ref))

    def visit_value_item(self, node, visited_children):
        by_ref, value = visited_children
        return ArrayItem(self._span(node), None, value, by_ref=bool(by_ref))

    def visit_string(self, node, visited_children):
        return Literal(self._span(node), "string", node.text)

    def visit_heredoc(self, node, visited_children):
        return Literal(self._span(node), "string", node.text)

    def visit_number(self, node, visited_children):
        text = node.text
        is_float = text[:2].lower() not in ("0x", "0b") and any(c in text for c in ".eE")
        return Literal(self._span(node), "float" if is_float else "int", text)

    def visit_variable(self, node, visited_children):
        return Variable(self._span(node), node.text)

    def visit_variable_variable(self, node, visited_children):
        return VariableVariable(self._span(node), visited_children[1])

    def visit_name(self, node, visited_children):
        lowered = node.text.lower()
        if lowered in ("true", "false"):
            return Literal(self._span(node), "bool", node.text)
        if lowered == "null":
            return Literal(self._span(node), "null", node.text)
        return Name(self._span(node), node.text)

    def visit_member_name(self, node, visited_children):
        return Identifier(self._span(node), node.text)


# ═══════════════════════════════════════════════════════════════════
#  PART 3 — ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════

def parse_program(text: str) -> Tuple[Statement, ...]:
    """Parse *text* strictly.

    Raises
    ------
    PhpSyntaxError
        When the grammar rejects the text.
    """
    limit = sys.getrecursionlimit()
    if limit < _RECURSION_LIMIT:
        sys.setrecursionlimit(_RECURSION_LIMIT)
    try:
        try:
            tree = PHP_GRAMMAR.parse(text)
        except ParseError as exc:
            raise PhpSyntaxError(
                "Unable to parse PHP source", exc.line(), exc.column()
            ) from exc
        return PhpTreeBuilder(text).visit(tree)
    finally:
        sys.setrecursionlimit(limit)


def parse_statements(text: str, path: Optional[str] = None) -> Tuple[Statement, ...]:
    """Parse *text*, returning ``()`` when it cannot be parsed."""
    try:
        return parse_program(text)
    except (PhpSyntaxError, VisitationError, RecursionError) as exc:
        _log.warning("Unable to parse %s: %s", path or "<string>", exc)
        return ()


__all__ = [
    "BINARY_PRECEDENCE",
    "BUILTIN_TYPES",
    "KEYWORD_TYPES",
    "LineIndex",
    "PhpTreeBuilder",
    "parse_program",
    "parse_statements",
]
