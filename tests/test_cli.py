# tests/test_cli.py
"""
Tests for the command line entry point.
"""

import json
from pathlib import Path

import pytest

from phanalist.__main__ import EXIT_IOERR, EXIT_OK, EXIT_USAGE, EXIT_VIOLATION, main
from phanalist.config import Config
from phanalist.rules import all_rules


@pytest.fixture
def clean_tree(php_tree):
    (php_tree / "foo.php").unlink()
    return php_tree


class TestExitCodes:

    def test_violations(self, php_tree, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--src", str(php_tree), "--quiet"]) == EXIT_VIOLATION

    def test_clean(self, clean_tree, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--src", str(clean_tree), "--quiet"]) == EXIT_OK

    def test_missing_source(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--src", str(tmp_path / "nowhere"), "--quiet"]) == EXIT_IOERR

    def test_bad_config(self, php_tree, tmp_path):
        config = tmp_path / "bad.json"
        config.write_text('{"src": 1}', encoding="utf-8")
        assert main(["--config", str(config), "--src", str(php_tree)]) == EXIT_USAGE

    def test_bad_output_format_is_usage_error(self):
        with pytest.raises(SystemExit) as info:
            main(["--output-format", "xml"])
        assert info.value.code == 2


class TestConfiguration:

    def test_missing_config_falls_back_with_warning(self, php_tree, tmp_path, caplog):
        code = main(["--config", str(tmp_path / "absent.json"), "--src", str(php_tree), "-q"])
        assert code == EXIT_VIOLATION
        assert "No configuration file" in caplog.text

    def test_config_disables_rules(self, php_tree, tmp_path):
        config = tmp_path / "phanalist.json"
        Config(src=str(php_tree), disable_rules=["E0005", "E0008"]).save(config)
        assert main(["--config", str(config), "--quiet"]) == EXIT_OK

    def test_default_config_ignores_file(self, php_tree, tmp_path):
        config = tmp_path / "phanalist.json"
        config.write_text("not json", encoding="utf-8")
        code = main(["--config", str(config), "--default-config", "--src", str(php_tree), "-q"])
        assert code == EXIT_VIOLATION


class TestOutput:

    def test_json_output(self, php_tree, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        main(["--src", str(php_tree), "--output-format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["total_files_count"] == 2
        assert data["codes_count"] == {"E0005": 1, "E0008": 1}

    def test_text_output(self, php_tree, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.chdir(tmp_path)
        main(["--src", str(php_tree)])
        out = capsys.readouterr().out
        assert "foo.php" in out
        assert "E0005: The class name foo is not capitalized." in out
        assert "3:7 | class foo" in out
        assert "Analysed 2 files in" in out

    def test_summary_only(self, php_tree, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.chdir(tmp_path)
        main(["--src", str(php_tree), "--summary-only"])
        out = capsys.readouterr().out
        assert "class foo" not in out
        assert "E0008" in out

    def test_quiet_prints_nothing(self, php_tree, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        main(["--src", str(php_tree), "--quiet"])
        assert capsys.readouterr().out == ""

    def test_list_rules(self, capsys):
        assert main(["--list-rules"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "E0001  Opening tag position" in out
        assert "E0014" in out


class TestReadme:

    def test_rule_table_lists_every_rule(self):
        readme = Path(__file__).resolve().parent.parent / "README.md"
        rows = [line for line in readme.read_text(encoding="utf-8").splitlines() if line.startswith("| E")]
        assert [row.split("|")[1].strip() for row in rows] == [rule.code for rule in all_rules()]
