# tests/test_type_flow.py
"""
Tests for the per-file type registry and the chaining resolver behind E0014.
"""

import pytest

from phanalist.parser import parse_program
from phanalist.type_flow import (
    SELF,
    ChainingResolver,
    TypeRegistry,
    foreign_calls,
    normalize_type_name,
)

from tests.conftest import (
    CROSS_CLASS_PHP,
    FLUENT_PHP,
    FOREIGN_CHAIN_PHP,
    TRAIT_FLUENT_PHP,
    analyse_php,
    only,
)


def _calls(source: str):
    statements = parse_program(source)
    registry = TypeRegistry.build(statements)
    found = []
    for statement in statements:
        found.extend(foreign_calls(statement, registry))
    return found


def _wrap(body: str) -> str:
    return f"""<?php
class Local
{{
    public function me(): self {{ return $this; }}

    public function run($dependency): void
    {{
        {body}
    }}
}}

class Other
{{
    public function next(): Other {{ return $this; }}
}}
"""


class TestRegistry:

    def test_records_named_and_reflexive_return_types(self):
        registry = TypeRegistry.build(parse_program(FOREIGN_CHAIN_PHP))
        assert registry.names == ["Customer", "Order"]
        assert registry.get("Order") == {"getCustomer": "Customer"}
        assert registry.get("Customer") == {}

    def test_nullable_unwraps_and_builtins_are_unknown(self):
        source = "<?php\nclass A { public function b(): ?B {} public function c(): int {} }\n"
        registry = TypeRegistry.build(parse_program(source))
        assert registry.get("A") == {"b": "B"}

    def test_declarations_inside_namespace(self):
        source = "<?php\nnamespace App;\nclass A { public function me(): static {} }\n"
        registry = TypeRegistry.build(parse_program(source))
        assert "A" in registry
        assert registry.get("App\\A") == {"me": "static"}

    def test_trait_methods_merge_and_normalize_own_name(self):
        source = """<?php
trait Named { public function rename(): Person {} public function name(): self {} }
class Person { use Named; public function name(): string {} }
"""
        statements = parse_program(source)
        registry = TypeRegistry.build(statements)
        person = statements[2]
        assert registry.method_map(person) == {"rename": SELF}

    def test_normalize_type_name(self):
        assert normalize_type_name("\\App\\Foo") == "App\\Foo"


class TestChaining:

    def test_fluent_self_chain_is_clean(self):
        assert _calls(FLUENT_PHP) == []

    def test_trait_fluent_chain_is_clean(self):
        assert _calls(TRAIT_FLUENT_PHP) == []

    def test_chain_on_returned_foreign_type(self):
        calls = _calls(FOREIGN_CHAIN_PHP)
        assert [(c.method, c.receiver_type) for c in calls] == [("getName", "Customer")]

    def test_cross_class_chains(self):
        calls = _calls(CROSS_CLASS_PHP)
        assert [(c.method, c.receiver_type) for c in calls] == [
            ("getCustomer", None),
            ("getName", None),
            ("query", "Builder"),
            ("execute", None),
        ]

    def test_nullsafe_chain(self):
        calls = _calls(_wrap("$x = $this->me()?->next();"))
        assert calls == []

    def test_call_on_parameter_is_unknown(self):
        calls = _calls(_wrap("$dependency->handle();"))
        assert [(c.method, c.receiver_type) for c in calls] == [("handle", None)]

    def test_reassignment_drops_stale_type(self):
        calls = _calls(_wrap("$o = new Local();\n$o = make();\n$o->me();"))
        assert [(c.method, c.receiver_type) for c in calls] == [("me", None)]

    def test_tracked_own_type_is_clean(self):
        assert _calls(_wrap("$o = new Local();\n$o->me()->me();")) == []

    def test_arguments_are_validated(self):
        calls = _calls(_wrap("strlen($dependency->name());"))
        assert [c.method for c in calls] == ["name"]

    def test_property_result_is_unknown(self):
        calls = _calls(_wrap("$this->repo->find();"))
        assert [(c.method, c.receiver_type) for c in calls] == [("find", None)]

    def test_static_self_call_is_clean(self):
        assert _calls(_wrap("self::me()->me();")) == []

    def test_closure_bodies_are_not_walked(self):
        assert _calls(_wrap("$f = function ($x) { return $x->go(); };")) == []

    def test_branch_bodies_are_walked(self):
        body = "if ($a) { $dependency->a(); } elseif ($b) $dependency->b(); else { $dependency->c(); }"
        assert [c.method for c in _calls(_wrap(body))] == ["a", "b", "c"]

    def test_loop_switch_echo_and_return_are_walked(self):
        body = (
            "while ($a) { $dependency->a(); }\n"
            "do { $dependency->b(); } while ($c);\n"
            "switch ($d) { case 1: $dependency->c(); }\n"
            "foreach ($e as $f) { $dependency->d(); }\n"
            "echo $dependency->e();\n"
            "return $dependency->f();"
        )
        assert [c.method for c in _calls(_wrap(body))] == ["a", "b", "c", "d", "e", "f"]

    def test_static_call_on_other_class_is_foreign(self):
        calls = _calls(_wrap("Bar::create();"))
        assert [(c.method, c.receiver_type) for c in calls] == [("create", "Bar")]

    def test_parent_call_is_own_with_unknown_result(self):
        calls = _calls(_wrap("parent::boot()->x();"))
        assert [(c.method, c.receiver_type) for c in calls] == [("x", None)]

    def test_qualified_own_class_name_is_own_type(self):
        source = """<?php
namespace App\\Model;

class Foo
{
    public function me(): self { return $this; }

    public function run(): void
    {
        $x = new \\App\\Model\\Foo();
        $x->me()->me();
    }
}
"""
        assert _calls(source) == []

    def test_resolver_state_is_per_method(self):
        source = """<?php
class Split
{
    public function first(): void { $o = new Split(); }
    public function second(): void { $o->go(); }
}
"""
        assert [(c.method, c.receiver_type) for c in _calls(source)] == [("go", None)]

    def test_resolver_outside_declaration(self):
        statements = parse_program("<?php\n$a = new Foo();\n$a->bar();\n")
        resolver = ChainingResolver(TypeRegistry.build(statements))
        findings = resolver.walk(statements)
        assert [(c.method, c.receiver_type) for c in findings] == [("bar", "Foo")]


class TestDemeterRule:

    @pytest.mark.parametrize("source", [FLUENT_PHP, TRAIT_FLUENT_PHP])
    def test_valid_examples(self, source):
        assert only(analyse_php(source), "E0014") == []

    def test_foreign_message_names_type(self):
        (violation,) = only(analyse_php(FOREIGN_CHAIN_PHP), "E0014")
        assert violation.suggestion == (
            "Law of Demeter violation. Method 'getName' is called on 'Customer', "
            "which is a foreign object."
        )
        assert "getCustomer()->getName()" in violation.line

    def test_unknown_message(self):
        violations = only(analyse_php(CROSS_CLASS_PHP), "E0014")
        assert violations[0].suggestion == (
            "Law of Demeter violation. Method 'getCustomer' is called on an object "
            "of unknown type (possible foreign object)."
        )
        assert len(violations) == 4
