"""
Batch command: validate every pair in a CSV file.
"""

from __future__ import annotations

import csv
from collections import Counter
from pathlib import Path

import click

from sortcheck.cli.base import common_options, file_progress, format_option, get_validator, handle_errors
from sortcheck.cli.output import OutputFormatter
from sortcheck.exceptions import InputError, InvalidFormatError
from sortcheck.logging import set_check_id

REQUIRED_COLUMNS = ("sort_code", "account_number")
RESULT_COLUMNS = ["row", "sort_code", "account_number", "status", "error"]


def read_pairs(path: Path) -> list[dict[str, str]]:
    """Read the rows of a CSV file with sort_code and account_number columns."""
    try:
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise InvalidFormatError(
                    f"{path} is missing column(s): {', '.join(missing)}",
                    field="file",
                    value=str(path),
                )
            return list(reader)
    except (UnicodeDecodeError, csv.Error) as e:
        raise InvalidFormatError(
            f"Cannot read {path} as UTF-8 CSV: {e}", field="file", value=str(path)
        ) from e


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write results to a file")
@format_option()
@common_options
@click.pass_context
@handle_errors
def batch(ctx: click.Context, file: Path, output: Path | None, output_format: str, quiet: bool):
    """Validate every sort code / account number pair in a CSV file.

    The file needs a header row with ``sort_code`` and ``account_number``
    columns. Rows that cannot be normalized are reported with status
    ``error`` and do not stop the run.

    Examples:
        sortcheck batch accounts.csv
        sortcheck batch accounts.csv --format csv --output results.csv
    """
    validator = get_validator(ctx)
    rows = read_pairs(file)
    results = []

    with file_progress(len(rows), "Validating", disable=quiet) as progress:
        task = progress.add_task("Validating", total=len(rows))
        try:
            for number, row in enumerate(rows, start=1):
                set_check_id(f"row-{number}")
                sort_code = (row.get("sort_code") or "").strip()
                account_number = (row.get("account_number") or "").strip()
                record = {
                    "row": number,
                    "sort_code": sort_code,
                    "account_number": account_number,
                    "status": None,
                    "error": None,
                }
                try:
                    result = validator.validate(sort_code, account_number)
                except InputError as e:
                    record["status"] = "error"
                    record["error"] = e.message
                else:
                    record["sort_code"] = result.sort_code
                    record["account_number"] = result.account_number
                    record["status"] = result.status
                results.append(record)
                progress.advance(task)
        finally:
            set_check_id(None)

    if output:
        with open(output, "w", newline="", encoding="utf-8") as f:
            OutputFormatter(output_format, quiet, stream=f).print_table(results, RESULT_COLUMNS)
    else:
        OutputFormatter(output_format, quiet).print_table(results, RESULT_COLUMNS)

    fmt = OutputFormatter(output_format, quiet)
    counts = Counter(r["status"] for r in results)
    fmt.print_message(
        f"Checked {len(results)} pairs: {counts['valid']} valid, {counts['invalid']} invalid, "
        f"{counts['undetermined']} undetermined, {counts['error']} errors"
    )
    if output:
        fmt.print_message(f"Results written to: {output}")
