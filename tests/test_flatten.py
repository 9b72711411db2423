# tests/test_flatten.py
"""
Tests for statement flattening.
"""

from phanalist.flatten import child_statements, flatten
from phanalist.parser import parse_program
from phanalist.syntax import (
    Block,
    Break,
    Class,
    DoWhile,
    Echo,
    ExpressionStatement,
    For,
    Foreach,
    Function,
    If,
    Namespace,
    Return,
    Switch,
    Try,
    While,
)


def _kinds(statements):
    return [type(s) for s in statements]


def _first_statement(source: str):
    return parse_program(f"<?php\n{source}\n")[1]


class TestPreOrder:

    def test_if_block_while(self):
        statement = _first_statement(
            "if ($a) {\n    foo();\n    while ($b)\n        bar();\n}"
        )
        assert _kinds(flatten(statement)) == [
            If, Block, ExpressionStatement, While, ExpressionStatement,
        ]

    def test_leaf_flattens_to_itself(self):
        statement = _first_statement("echo 1;")
        assert flatten(statement) == [statement]

    def test_else_and_elseif_bodies_in_source_order(self):
        statement = _first_statement(
            "if ($a) echo 1; elseif ($b) echo 2; else echo 3;"
        )
        echoes = [s for s in flatten(statement) if isinstance(s, Echo)]
        assert [e.values[0].raw for e in echoes] == ["1", "2", "3"]

    def test_try_catch_finally(self):
        statement = _first_statement(
            "try { a(); } catch (E $e) { b(); } finally { c(); }"
        )
        assert _kinds(flatten(statement)) == [
            Try, ExpressionStatement, ExpressionStatement, ExpressionStatement,
        ]

    def test_switch_cases_and_default(self):
        statement = _first_statement(
            "switch ($a) {\n    case 1:\n        a();\n        break;\n    default:\n        b();\n}"
        )
        assert _kinds(flatten(statement)) == [
            Switch, ExpressionStatement, Break, ExpressionStatement,
        ]

    def test_for_body(self):
        statement = _first_statement("for ($i = 0; $i < 3; $i++) { a(); }")
        assert _kinds(flatten(statement)) == [For, Block, ExpressionStatement]

    def test_foreach_body(self):
        statement = _first_statement("foreach ($items as $item) b($item);")
        assert _kinds(flatten(statement)) == [Foreach, ExpressionStatement]

    def test_do_while_body(self):
        statement = _first_statement("do { a(); } while ($b);")
        assert _kinds(flatten(statement)) == [DoWhile, Block, ExpressionStatement]

    def test_loops_nested_in_switch_keep_source_order(self):
        statement = _first_statement(
            "switch ($a) {\n"
            "    case 1:\n"
            "        foreach ($xs as $x) { a(); }\n"
            "        break;\n"
            "    default:\n"
            "        do b(); while ($c);\n"
            "}"
        )
        assert _kinds(flatten(statement)) == [
            Switch, Foreach, Block, ExpressionStatement, Break,
            DoWhile, ExpressionStatement,
        ]


class TestScopes:

    def test_class_methods_are_entered(self):
        statement = _first_statement(
            "class Foo { public function a() { return 1; } public function b() { echo 2; } }"
        )
        assert _kinds(flatten(statement)) == [Class, Return, Echo]

    def test_namespace_is_entered(self):
        statement = _first_statement("namespace App { class Foo {} }")
        assert _kinds(flatten(statement)) == [Namespace, Class]

    def test_unbraced_namespace_is_entered(self):
        statement = _first_statement(
            "namespace App;\n\nclass Foo { public function a() { return 1; } }"
        )
        assert _kinds(flatten(statement)) == [Namespace, Class, Return]

    def test_named_function_body_is_not_entered(self):
        statement = _first_statement("function foo() { return 1; }")
        assert isinstance(statement, Function)
        assert child_statements(statement) == ()

    def test_closure_body_is_not_entered(self):
        statement = _first_statement("$f = function () { return 1; };")
        assert _kinds(flatten(statement)) == [ExpressionStatement]
