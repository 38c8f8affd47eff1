"""
Functional tests for the validate CLI command.

Tests:
- Verdict text and exit status (valid, invalid, undetermined, input error)
- Trace output as a table and as JSON
- Global options (--rules, --log-level, --version)
"""

import json

import pytest
from click.testing import CliRunner

from sortcheck.__main__ import cli


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


class TestValidateHelp:
    """Tests for command help."""

    def test_help_shows_usage(self, runner):
        result = runner.invoke(cli, ["validate", "--help"])
        assert result.exit_code == 0
        assert "SORT_CODE" in result.output
        assert "ACCOUNT_NUMBER" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output


class TestValidateVerdicts:
    """Tests for verdicts and exit codes."""

    def test_valid(self, runner):
        result = runner.invoke(cli, ["validate", "08-99-99", "66374958"])
        assert result.exit_code == 0
        assert "089999 66374958: valid" in result.output

    def test_invalid(self, runner):
        result = runner.invoke(cli, ["validate", "089999", "66374959"])
        assert result.exit_code == 1
        assert "invalid" in result.output

    def test_undetermined(self, runner):
        result = runner.invoke(cli, ["validate", "000000", "12345678"])
        assert result.exit_code == 3
        assert "undetermined" in result.output

    def test_non_numeric_input(self, runner):
        result = runner.invoke(cli, ["validate", "ab3456", "12345678"])
        assert result.exit_code == 2
        assert "Error:" in result.output

    def test_short_account(self, runner):
        result = runner.invoke(cli, ["validate", "089999", "1234"])
        assert result.exit_code == 2
        assert "account number" in result.output


class TestValidateTrace:
    """Tests for --trace output."""

    def test_trace_table(self, runner):
        result = runner.invoke(cli, ["validate", "871427", "09123496", "--trace"])
        assert result.exit_code == 0
        assert "Exception Code" in result.output
        assert "StandardModulus(11)" in result.output
        assert "121" in result.output

    def test_trace_for_uncovered_sort_code(self, runner):
        result = runner.invoke(cli, ["validate", "000000", "12345678", "--trace"])
        assert result.exit_code == 3
        assert "not covered" in result.output

    def test_json_without_trace(self, runner):
        result = runner.invoke(cli, ["validate", "180002", "00000190", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "sort_code": "180002",
            "account_number": "00000190",
            "status": "valid",
            "rule_count": 1,
        }

    def test_json_with_trace(self, runner):
        result = runner.invoke(cli, ["validate", "872427", "46238510", "-f", "json", "--trace"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [entry["result"] for entry in data["trace"]] == ["FAIL", "PASS"]
        assert [entry["exception_code"] for entry in data["trace"]] == [10, 11]


class TestGlobalOptions:
    """Tests for options on the command group."""

    def test_custom_rules_file(self, runner, tmp_path):
        rules = tmp_path / "valacdos.txt"
        rules.write_text("000000 000099 MOD10 0 0 0 0 0 0 0 0 0 0 0 0 0 0\n")
        result = runner.invoke(cli, ["--rules", str(rules), "validate", "000001", "12345678"])
        assert result.exit_code == 0
        # The bundled rows are not loaded
        result = runner.invoke(cli, ["--rules", str(rules), "validate", "089999", "66374958"])
        assert result.exit_code == 3

    def test_malformed_rules_file(self, runner, tmp_path):
        rules = tmp_path / "valacdos.txt"
        rules.write_text("000000 000099 MOD10 0 0 0\n")
        result = runner.invoke(cli, ["--rules", str(rules), "validate", "000001", "12345678"])
        assert result.exit_code == 2
        assert "Error:" in result.output

    def test_missing_rules_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["--rules", str(tmp_path / "nope.txt"), "validate", "000001", "12345678"])
        assert result.exit_code == 2

    def test_custom_substitutions_file(self, runner, tmp_path):
        substitutions = tmp_path / "scsubtab.txt"
        substitutions.write_text("# nothing substituted\n")
        # 938600 is only valid for 42368003 when checked as 938611
        result = runner.invoke(cli, ["--substitutions", str(substitutions), "validate", "938600", "42368003"])
        assert result.exit_code == 1

    def test_log_level_option(self, runner):
        result = runner.invoke(cli, ["--log-level", "debug", "validate", "089999", "66374958"])
        assert result.exit_code == 0
