"""
Functional tests for the batch CLI command.
"""

import csv
import json

import pytest
from click.testing import CliRunner

from sortcheck.__main__ import cli
from sortcheck.core.validator import SortCodeValidator
from sortcheck.logging import get_check_id


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def pairs_file(tmp_path):
    """CSV file with one pair of every outcome."""
    path = tmp_path / "accounts.csv"
    path.write_text(
        "sort_code,account_number\n"
        "08-99-99,66374958\n"
        "089999,66374959\n"
        "000000,12345678\n"
        "ab3456,12345678\n"
    )
    return path


class TestBatch:
    """Tests for CSV batch validation."""

    def test_json_results(self, runner, pairs_file):
        result = runner.invoke(cli, ["batch", str(pairs_file), "--format", "json", "--quiet"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [r["status"] for r in rows] == ["valid", "invalid", "undetermined", "error"]
        assert rows[0]["sort_code"] == "089999"
        assert rows[0]["row"] == 1
        assert rows[3]["error"].startswith("Invalid bank sort code")

    def test_csv_output_file(self, runner, pairs_file, tmp_path):
        output = tmp_path / "results.csv"
        result = runner.invoke(
            cli, ["batch", str(pairs_file), "--format", "csv", "--output", str(output), "--quiet"]
        )
        assert result.exit_code == 0
        with open(output, newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["status"] for r in rows] == ["valid", "invalid", "undetermined", "error"]
        assert rows[0]["error"] == ""

    def test_summary(self, runner, pairs_file, tmp_path):
        output = tmp_path / "results.json"
        result = runner.invoke(cli, ["batch", str(pairs_file), "-f", "json", "-o", str(output)])
        assert result.exit_code == 0
        assert "Checked 4 pairs: 1 valid, 1 invalid, 1 undetermined, 1 errors" in result.output
        assert len(json.loads(output.read_text())) == 4

    def test_table_output(self, runner, pairs_file):
        result = runner.invoke(cli, ["batch", str(pairs_file), "--quiet"])
        assert result.exit_code == 0
        assert "Account Number" in result.output
        assert "undetermined" in result.output

    def test_missing_columns(self, runner, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("sort,account\n089999,66374958\n")
        result = runner.invoke(cli, ["batch", str(path)])
        assert result.exit_code == 2
        assert "account_number" in result.output

    def test_empty_file_with_header(self, runner, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("sort_code,account_number\n")
        result = runner.invoke(cli, ["batch", str(path), "-f", "json", "-q"])
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_undecodable_file(self, runner, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"sort_code,account_number\n08\xff99\xfe99,66374958\n")
        result = runner.invoke(cli, ["batch", str(path)])
        assert result.exit_code == 2
        assert "Cannot read" in result.output

    def test_check_id_cleared_after_unexpected_failure(self, runner, pairs_file, monkeypatch):
        def broken(self, sort_code, account_number):
            raise RuntimeError("table corrupted")

        monkeypatch.setattr(SortCodeValidator, "validate", broken)
        result = runner.invoke(cli, ["batch", str(pairs_file), "--quiet"])
        assert isinstance(result.exception, RuntimeError)
        assert get_check_id() is None
