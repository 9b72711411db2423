# phanalist/type_flow.py
"""
Per-file type registry and method-chain type tracking.

Usage
-----
>>> registry = TypeRegistry.build(source.statements)
>>> for statement in source.statements:
...     for call in foreign_calls(statement, registry):
...         print(call.method, call.receiver_type, call.span)

The analysis is purely syntactic and runs in three phases:

  1. **Registry**: every class, interface, trait and enum in the file is
     mapped to ``{method name: declared return type}``.  Only named types
     and ``self`` / ``static`` / ``parent`` are recorded; anything else
     (builtins, unions, missing hints) is left out and reads as unknown.
  2. **Method map**: a declaration's own map merged with the maps of the
     traits it uses.  Its own methods win, and a return type naming the
     declaration itself becomes ``self``.
  3. **Walk**: each method body is walked with a fresh variable → type
     map.  A method call whose receiver is not the declaration itself is
     reported as a :class:`ForeignCall`, whether the receiver's type is a
     different known type or cannot be resolved at all.

Type names are plain strings with any leading ``\\`` removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .syntax import (
    CLASS_LIKE,
    AnonymousClass,
    Argument,
    ArrowFunction,
    Assignment,
    Block,
    Class,
    ClassConstantFetch,
    ClassLike,
    Closure,
    DoWhile,
    Echo,
    Enum,
    Expression,
    ExpressionStatement,
    For,
    Foreach,
    Function,
    FunctionCall,
    Hint,
    If,
    Interface,
    KeywordHint,
    MethodCall,
    Name,
    NamedHint,
    Namespace,
    New,
    NullableHint,
    NullsafeMethodCall,
    NullsafePropertyFetch,
    PropertyFetch,
    Return,
    Span,
    Statement,
    StaticMethodCall,
    StaticPropertyFetch,
    Switch,
    Trait,
    TraitUse,
    Try,
    Variable,
    While,
    body_statements,
    iter_subexpressions,
    methods_of,
)

_log = logging.getLogger(__name__)

SELF = "self"
STATIC = "static"
PARENT = "parent"
REFLEXIVE_TYPES: FrozenSet[str] = frozenset({SELF, STATIC, PARENT})

MethodMap = Dict[str, str]
VarTypes = Dict[str, str]


def normalize_type_name(name: str) -> str:
    return name.lstrip("\\")


def hint_type_name(hint: Optional[Hint]) -> Optional[str]:
    """Canonical type name for a return-type hint, or None when unknown."""
    if isinstance(hint, NullableHint):
        return hint_type_name(hint.inner)
    if isinstance(hint, KeywordHint):
        return hint.name
    if isinstance(hint, NamedHint):
        return normalize_type_name(hint.name)
    return None


def _declared_return_types(declaration: ClassLike) -> MethodMap:
    types: MethodMap = {}
    for method in methods_of(declaration):
        returned = hint_type_name(method.return_type)
        if returned is not None:
            types[method.name.value] = returned
    return types


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — TYPE REGISTRY
# ═══════════════════════════════════════════════════════════════════

class TypeRegistry:
    """
    Declaration name → method name → declared return type, for one file.

    Built once per file, before any lookup, and read-only afterwards.
    """

    def __init__(self, declarations: Optional[Mapping[str, MethodMap]] = None) -> None:
        self._declarations: Dict[str, MethodMap] = {
            name: dict(methods) for name, methods in (declarations or {}).items()
        }

    @classmethod
    def build(cls, statements: Iterable[Statement]) -> "TypeRegistry":
        registry = cls()
        registry._collect(statements)
        _log.debug("type registry: %s", sorted(registry._declarations))
        return registry

    def _collect(self, statements: Iterable[Statement]) -> None:
        for statement in statements:
            if isinstance(statement, Namespace):
                self._collect(statement.statements)
            elif isinstance(statement, CLASS_LIKE):
                self._declarations[statement.name.value] = _declared_return_types(statement)

    def __contains__(self, name: str) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    @property
    def names(self) -> List[str]:
        return sorted(self._declarations)

    def get(self, name: str) -> Optional[MethodMap]:
        methods = self._declarations.get(name)
        if methods is None and "\\" in name:
            methods = self._declarations.get(name.rsplit("\\", 1)[1])
        return methods

    def method_map(self, declaration: ClassLike) -> MethodMap:
        """Own return types merged with those of the used traits."""
        own_name = declaration.name.value
        own_methods = {method.name.value for method in methods_of(declaration)}
        merged = _declared_return_types(declaration)
        for member in declaration.members:
            if not isinstance(member, TraitUse):
                continue
            for trait in member.traits:
                trait_methods = self.get(normalize_type_name(trait))
                if trait_methods is None:
                    continue
                for method, returned in trait_methods.items():
                    if method not in own_methods:
                        merged.setdefault(method, returned)
        return {
            method: SELF if returned == own_name else returned
            for method, returned in merged.items()
        }


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — CHAINING RESOLVER
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ForeignCall:
    """A method called on something other than the current declaration.

    ``receiver_type`` is None when the receiver's type is unknown.
    """
    method: str
    receiver_type: Optional[str]
    span: Span


class ChainingResolver:
    """
    Walks the statements of one method body, tracking local variable
    types and recording :class:`ForeignCall` findings.

    Parameters
    ----------
    registry     : The file's :class:`TypeRegistry`
    current_type : Name of the enclosing declaration, None outside one
    method_map   : Merged method map of the enclosing declaration
    """

    def __init__(
        self,
        registry: TypeRegistry,
        current_type: Optional[str] = None,
        method_map: Optional[MethodMap] = None,
    ) -> None:
        self.registry = registry
        self.current_type = current_type
        self.method_map: MethodMap = dict(method_map or {})
        self.var_types: VarTypes = {}
        self.findings: List[ForeignCall] = []

    def is_own_type(self, type_name: str) -> bool:
        if type_name in REFLEXIVE_TYPES:
            return True
        if self.current_type is None:
            return False
        # qualified names match on their last segment, as in TypeRegistry.get
        return type_name.rsplit("\\", 1)[-1] == self.current_type

    # ── statements ───────────────────────────────────────────────

    def walk(self, statements: Sequence[Statement]) -> List[ForeignCall]:
        for statement in statements:
            self.walk_statement(statement)
        return self.findings

    def walk_statement(self, statement: Statement) -> None:
        if isinstance(statement, ExpressionStatement):
            expression = statement.expression
            if isinstance(expression, Assignment) and expression.operator == "=":
                self._track_assignment(expression)
            else:
                self.resolve(expression)
        elif isinstance(statement, Return):
            if statement.value is not None:
                self.resolve(statement.value)
        elif isinstance(statement, Echo):
            self._resolve_all(statement.values)
        elif isinstance(statement, If):
            self.resolve(statement.condition)
            self.walk(body_statements(statement.body))
            for clause in statement.elseifs:
                self.resolve(clause.condition)
                self.walk(body_statements(clause.body))
            if statement.else_clause is not None:
                self.walk(body_statements(statement.else_clause.body))
        elif isinstance(statement, While):
            self.resolve(statement.condition)
            self.walk(body_statements(statement.body))
        elif isinstance(statement, DoWhile):
            self.walk_statement(statement.body)
            self.resolve(statement.condition)
        elif isinstance(statement, For):
            self._resolve_all(statement.initializers)
            self._resolve_all(statement.conditions)
            self._resolve_all(statement.steps)
            self.walk(body_statements(statement.body))
        elif isinstance(statement, Foreach):
            self.resolve(statement.expression)
            self.walk(body_statements(statement.body))
        elif isinstance(statement, Switch):
            self.resolve(statement.subject)
            for case in statement.cases:
                if case.condition is not None:
                    self.resolve(case.condition)
                self.walk(case.statements)
        elif isinstance(statement, Try):
            self.walk(statement.block.statements)
            for catch in statement.catches:
                self.walk(catch.block.statements)
            if statement.finally_block is not None:
                self.walk(statement.finally_block.statements)
        elif isinstance(statement, Block):
            self.walk(statement.statements)

    def _track_assignment(self, assignment: Assignment) -> None:
        value_type = self.resolve(assignment.value)
        target = assignment.target
        if isinstance(target, Variable):
            if value_type is not None:
                self.var_types[target.name] = value_type
            else:
                self.var_types.pop(target.name, None)
        self.resolve(target)

    # ── expressions ──────────────────────────────────────────────

    def _resolve_all(self, expressions: Iterable[Optional[Expression]]) -> None:
        for expression in expressions:
            if expression is not None:
                self.resolve(expression)

    def _resolve_arguments(self, arguments: Sequence[Argument]) -> None:
        self._resolve_all(argument.value for argument in arguments)

    def resolve(self, expression: Expression) -> Optional[str]:
        """Type name of *expression*, recording foreign calls on the way."""
        if isinstance(expression, Variable):
            if expression.name == "$this":
                return SELF
            return self.var_types.get(expression.name)
        if isinstance(expression, New):
            return self._resolve_new(expression)
        if isinstance(expression, (MethodCall, NullsafeMethodCall)):
            receiver = self.resolve(expression.object)
            self._resolve_arguments(expression.arguments)
            return self._call_on(receiver, expression.method, expression.span)
        if isinstance(expression, StaticMethodCall):
            receiver = self._resolve_class_reference(expression.class_ref)
            self._resolve_arguments(expression.arguments)
            return self._call_on(receiver, expression.method, expression.span)
        if isinstance(expression, FunctionCall):
            if not isinstance(expression.target, Name):
                self.resolve(expression.target)
            self._resolve_arguments(expression.arguments)
            return None
        if isinstance(expression, (PropertyFetch, NullsafePropertyFetch)):
            self.resolve(expression.object)
            return None
        if isinstance(expression, (StaticPropertyFetch, ClassConstantFetch)):
            if not isinstance(expression.class_ref, Name):
                self.resolve(expression.class_ref)
            return None
        if isinstance(expression, (Closure, ArrowFunction, AnonymousClass, Name)):
            return None
        self._resolve_all(iter_subexpressions(expression))
        return None

    def _resolve_new(self, expression: New) -> Optional[str]:
        self._resolve_arguments(expression.arguments)
        class_ref = expression.class_ref
        if isinstance(class_ref, Name):
            return normalize_type_name(class_ref.name)
        if not isinstance(class_ref, AnonymousClass):
            self.resolve(class_ref)
        return None

    def _resolve_class_reference(self, class_ref: Expression) -> Optional[str]:
        if isinstance(class_ref, Name):
            name = normalize_type_name(class_ref.name)
            if name.lower() in (SELF, STATIC):
                return SELF
            if name.lower() == PARENT:
                return PARENT
            return name
        return self.resolve(class_ref)

    def _call_on(self, receiver: Optional[str], method: str, span: Span) -> Optional[str]:
        if receiver is not None and self.is_own_type(receiver):
            if receiver == PARENT:
                return None
            return self.method_map.get(method)
        self.findings.append(ForeignCall(method, receiver, span))
        return None


# ═══════════════════════════════════════════════════════════════════
#  PART 3 — DRIVER
# ═══════════════════════════════════════════════════════════════════

_WALKED_DECLARATIONS = (Class, Trait, Enum)


def foreign_calls(statement: Statement, registry: TypeRegistry) -> List[ForeignCall]:
    """Foreign calls inside one top-level *statement*.

    Declarations are walked method by method with their merged method map;
    any other statement is walked without a declaration context.  Function
    declarations and interfaces are skipped.
    """
    if isinstance(statement, Namespace):
        findings: List[ForeignCall] = []
        for inner in statement.statements:
            findings.extend(foreign_calls(inner, registry))
        return findings
    if isinstance(statement, _WALKED_DECLARATIONS):
        return _declaration_foreign_calls(statement, registry)
    if isinstance(statement, (Function, Interface)):
        return []
    return ChainingResolver(registry).walk((statement,))


def _declaration_foreign_calls(declaration: ClassLike, registry: TypeRegistry) -> List[ForeignCall]:
    name = declaration.name.value
    method_map = registry.method_map(declaration)
    findings: List[ForeignCall] = []
    for method in methods_of(declaration):
        if method.body is None:
            continue
        resolver = ChainingResolver(registry, name, method_map)
        findings.extend(resolver.walk(method.body.statements))
    return findings


__all__ = [
    "ChainingResolver",
    "ForeignCall",
    "MethodMap",
    "PARENT",
    "REFLEXIVE_TYPES",
    "SELF",
    "STATIC",
    "TypeRegistry",
    "VarTypes",
    "foreign_calls",
    "hint_type_name",
    "normalize_type_name",
]
