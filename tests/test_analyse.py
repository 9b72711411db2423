# tests/test_analyse.py
"""
Tests for rule orchestration, discovery and results.
"""

import json
import logging

import pytest

from phanalist.analyse import Analyse, iter_php_files, scan
from phanalist.config import Config
from phanalist.errors import RuleRegistryError
from phanalist.results import Results
from phanalist.rules import RuleRegistry, all_rules
from phanalist.rules.structural import OpeningTagRule
from phanalist.source import SourceFile

from tests.conftest import CLEAN_CLASS_PHP, LOWERCASE_CLASS_PHP, codes


class TestRuleSelection:

    def test_all_rules_sorted_by_code(self):
        assert [rule.code for rule in all_rules()] == [
            "E0001", "E0002", "E0003", "E0004", "E0005", "E0006",
            "E0007", "E0008", "E0009", "E0010", "E0012", "E0014",
        ]

    def test_enabled_rules_allow_list(self):
        analyse = Analyse(Config(enabled_rules=["E0008"]))
        assert codes(analyse.analyse_source("foo.php", LOWERCASE_CLASS_PHP)) == ["E0008"]

    def test_disable_rules(self):
        analyse = Analyse(Config(disable_rules=["E0008"]))
        assert codes(analyse.analyse_source("foo.php", LOWERCASE_CLASS_PHP)) == ["E0005"]

    def test_unknown_codes_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="phanalist"):
            Analyse(Config(disable_rules=["E9999"], rules={"E8888": {}}))
        assert "E9999" in caplog.text
        assert "E8888" in caplog.text

    def test_duplicate_registration(self):
        with pytest.raises(RuleRegistryError):
            RuleRegistry([OpeningTagRule(), OpeningTagRule()])

    def test_rule_repr(self):
        assert repr(OpeningTagRule()) == "<OpeningTagRule 'E0001'>"


class TestAnalyseFile:

    def test_violations_grouped_by_rule(self):
        source = "<?php\nclass foo\n{\n    function bar() { return 1; }\n}\n"
        assert codes(Analyse().analyse_source("foo.php", source)) == ["E0003", "E0005", "E0008"]

    def test_violation_carries_line_text(self):
        (violation, _) = Analyse().analyse_source("foo.php", LOWERCASE_CLASS_PHP)
        assert violation.line == "class foo"
        assert violation.span.line == 3

    def test_running_twice_is_idempotent(self):
        analyse = Analyse()
        first = analyse.analyse_source("foo.php", LOWERCASE_CLASS_PHP)
        second = analyse.analyse_source("foo.php", LOWERCASE_CLASS_PHP)
        assert first == second

    def test_unparseable_file_has_no_violations(self):
        file = SourceFile.parse("broken.php", "<?php\nclass {\n")
        assert file.statements == ()
        assert Analyse().analyse_file(file) == []


class TestSourceFile:

    def test_fqn_with_namespace(self, source_file):
        file = source_file(CLEAN_CLASS_PHP)
        assert file.namespace == "App\\Model"
        assert file.type_name == "Invoice"
        assert file.fqn == "App\\Model\\Invoice"

    def test_fqn_without_namespace(self, source_file):
        assert source_file(LOWERCASE_CLASS_PHP).fqn == "foo"

    def test_no_declaration_no_fqn(self, source_file):
        assert source_file("<?php\necho 1;\n").fqn is None

    def test_line_text_is_clamped(self, source_file):
        file = source_file("<?php\necho 1;\n")
        assert file.line_text(2) == "echo 1;"
        assert file.line_text(0) == ""
        assert file.line_text(99) == ""

    def test_type_registry_is_cached(self, source_file):
        file = source_file(CLEAN_CLASS_PHP)
        assert file.type_registry is file.type_registry
        assert "Invoice" in file.type_registry


class TestScan:

    def test_discovery_is_sorted_and_php_only(self, php_tree):
        found = [path.relative_to(php_tree).as_posix() for path in iter_php_files(php_tree)]
        assert found == ["foo.php", "Model/Invoice.php"]

    def test_scan_counts_clean_files(self, php_tree):
        results = scan(Config(src=str(php_tree)))
        assert results.total_files_count == 2
        assert results.total_violations == 2
        assert results.codes_count == {"E0005": 1, "E0008": 1}
        assert results.duration is not None and results.duration >= 0

    def test_single_file_source(self, php_tree):
        results = scan(Config(src=str(php_tree / "foo.php")))
        assert results.total_files_count == 1
        assert results.has_any_violations()

    def test_results_to_dict_is_json(self, php_tree):
        results = scan(Config(src=str(php_tree)))
        data = json.loads(json.dumps(results.to_dict()))
        assert data["total_files_count"] == 2
        assert data["codes_count"] == {"E0005": 1, "E0008": 1}
        dirty = [path for path, violations in data["files"].items() if violations]
        assert len(dirty) == 1 and dirty[0].endswith("foo.php")


class TestResults:

    def test_empty(self):
        results = Results()
        assert not results.has_any_violations()
        assert results.total_violations == 0
        assert results.duration is None

    def test_add_file_violations_counts_codes(self):
        violations = Analyse().analyse_source("foo.php", LOWERCASE_CLASS_PHP)
        results = Results()
        results.add_file_violations("foo.php", violations)
        results.add_file_violations("clean.php", [])
        assert results.total_violations == 2
        assert results.files["clean.php"] == []
