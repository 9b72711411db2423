# tests/test_parser.py
"""
Tests for the PHP parser: source text → syntax tree.
"""

import logging

import pytest

from phanalist.errors import PhpSyntaxError
from phanalist.parser import LineIndex, parse_program, parse_statements
from phanalist.syntax import (
    Assignment,
    Binary,
    Block,
    Class,
    ColonBody,
    Echo,
    ExpressionStatement,
    If,
    InlineHtml,
    Literal,
    Method,
    MethodCall,
    Namespace,
    OpeningTag,
    Property,
    Return,
    Try,
    Variable,
    is_delimited,
    methods_of,
)


def _expression(source: str):
    (_, statement) = parse_program(f"<?php\n{source}\n")
    assert isinstance(statement, ExpressionStatement)
    return statement.expression


class TestFileStructure:

    def test_opening_tag_and_class(self):
        statements = parse_statements("<?php\nclass Foo {}\n")
        assert [type(s).__name__ for s in statements] == ["OpeningTag", "Class"]

    def test_empty_source(self):
        assert parse_statements("") == ()

    def test_leading_html_before_tag(self):
        statements = parse_program("<html>\n<?php echo 1;")
        assert isinstance(statements[0], InlineHtml)
        assert isinstance(statements[1], OpeningTag)
        assert statements[1].span.line == 2

    def test_unbraced_namespace_holds_following_statements(self):
        statements = parse_program("<?php\nnamespace App\\Model;\n\nclass Invoice {}\n")
        namespace = statements[1]
        assert isinstance(namespace, Namespace)
        assert namespace.name == "App\\Model"
        assert not namespace.braced
        assert isinstance(namespace.statements[-1], Class)

    def test_braced_namespace(self):
        statements = parse_program("<?php\nnamespace App { class Foo {} }\n")
        namespace = statements[1]
        assert namespace.braced
        assert namespace.statements[0].name.value == "Foo"

    def test_comments_are_not_statements(self):
        statements = parse_program("<?php\n// one\n/* two */\n# three\necho 1;\n")
        assert [type(s) for s in statements] == [OpeningTag, Echo]


class TestSpans:

    def test_line_and_column_are_one_indexed(self):
        statements = parse_program("<?php\n\n    class Foo {}\n")
        assert statements[1].span.line == 3
        assert statements[1].span.column == 5

    def test_position_is_utf8_byte_offset(self):
        source = "<?php\n// é\nclass Foo {}\n"
        statements = parse_program(source)
        expected = len("<?php\n// é\n".encode("utf-8"))
        assert statements[1].span.position == expected
        assert statements[1].span.column == 1

    def test_line_index(self):
        index = LineIndex("ab\ncd\n")
        span = index.span(4)
        assert (span.line, span.column, span.position) == (2, 2, 4)


class TestDeclarations:

    SOURCE = """<?php
class Invoice extends Document implements Countable, \\JsonSerializable
{
    var $legacy;
    private ?int $total = null;

    public function __construct(private int $id, string ...$tags) {}

    abstract protected function render(): string;

    public static function make(): static
    {
        return new static(1);
    }
}
"""

    @pytest.fixture(scope="class")
    def declaration(self):
        return parse_program(self.SOURCE)[1]

    def test_class_header(self, declaration):
        assert isinstance(declaration, Class)
        assert declaration.name.value == "Invoice"
        assert declaration.extends == "Document"
        assert len(declaration.implements) == 2

    def test_var_property_has_no_modifiers(self, declaration):
        properties = [m for m in declaration.members if isinstance(m, Property)]
        assert properties[0].modifiers == ()
        assert properties[0].var
        assert properties[1].modifiers == ("private",)

    def test_methods(self, declaration):
        methods = list(methods_of(declaration))
        assert [m.name.value for m in methods] == ["__construct", "render", "make"]
        assert all(isinstance(m, Method) for m in methods)
        assert len(methods[0].parameters) == 2
        assert methods[1].body is None
        assert methods[2].return_type is not None


class TestControlFlow:

    def test_single_statement_if_body(self):
        statement = parse_program("<?php\nif ($a) echo 1;\n")[1]
        assert isinstance(statement, If)
        assert isinstance(statement.body, Echo)
        assert not is_delimited(statement.body)

    def test_braced_if_body(self):
        statement = parse_program("<?php\nif ($a) { echo 1; } else { echo 2; }\n")[1]
        assert isinstance(statement.body, Block)
        assert is_delimited(statement.body)
        assert statement.else_clause is not None

    def test_colon_if_body(self):
        source = "<?php\nif ($a):\n echo 1;\nelseif ($b):\n echo 2;\nelse:\n echo 3;\nendif;\n"
        statement = parse_program(source)[1]
        assert isinstance(statement.body, ColonBody)
        assert len(statement.elseifs) == 1
        assert isinstance(statement.else_clause.body, ColonBody)

    def test_try_catch_finally(self):
        source = "<?php\ntry { run(); } catch (A | B $e) {} finally { done(); }\n"
        statement = parse_program(source)[1]
        assert isinstance(statement, Try)
        assert statement.catches[0].types == ("A", "B")
        assert statement.catches[0].block.statements == ()
        assert statement.finally_block is not None


class TestExpressions:

    def test_multiplication_binds_tighter(self):
        expression = _expression("$a = 1 + 2 * 3;")
        assert isinstance(expression, Assignment)
        value = expression.value
        assert isinstance(value, Binary) and value.operator == "+"
        assert isinstance(value.right, Binary) and value.right.operator == "*"

    def test_power_is_right_associative(self):
        expression = _expression("2 ** 3 ** 2;")
        assert expression.operator == "**"
        assert isinstance(expression.left, Literal)
        assert isinstance(expression.right, Binary)

    def test_method_chain_folds_left_to_right(self):
        expression = _expression("$a->b()->c();")
        assert isinstance(expression, MethodCall)
        assert expression.method == "c"
        assert isinstance(expression.object, MethodCall)
        assert isinstance(expression.object.object, Variable)

    def test_return_literal(self):
        statement = parse_program("<?php\nreturn [1, 'a' => true];\n")[1]
        assert isinstance(statement, Return)


class TestFailSoft:

    def test_unparseable_source_yields_no_statements(self, caplog):
        with caplog.at_level(logging.WARNING, logger="phanalist.parser"):
            assert parse_statements("<?php\nclass {\n", "Broken.php") == ()
        assert "Broken.php" in caplog.text

    def test_strict_parse_raises(self):
        with pytest.raises(PhpSyntaxError) as info:
            parse_program("<?php\nclass {\n")
        assert info.value.line is not None
