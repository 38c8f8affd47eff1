"""
Validate command for a single sort code / account number pair.
"""

from __future__ import annotations

import sys

import click

from sortcheck.cli.base import common_options, format_option, get_validator, handle_errors
from sortcheck.cli.output import OutputFormatter

EXIT_CODES = {
    "valid": 0,
    "invalid": 1,
    "undetermined": 3,
}

TRACE_COLUMNS = ["exception_code", "checksum_kind", "total", "remainder", "result"]


@click.command()
@click.argument("sort_code")
@click.argument("account_number")
@click.option("--trace", "show_trace", is_flag=True, help="Show the rules evaluated")
@format_option(choices=["table", "json"])
@common_options
@click.pass_context
@handle_errors
def validate(
    ctx: click.Context,
    sort_code: str,
    account_number: str,
    show_trace: bool,
    output_format: str,
    quiet: bool,
):
    """Validate a sort code and account number.

    Exit status is 0 when valid, 1 when invalid, 3 when the rules cannot
    decide and 2 when the input is unusable.

    Examples:
        sortcheck validate 08-99-99 66374958
        sortcheck validate 871427 09123496 --trace
        sortcheck validate 180002 00000190 --format json
    """
    result = get_validator(ctx).validate(sort_code, account_number)
    fmt = OutputFormatter(output_format, quiet)

    if output_format == "json":
        data = result.to_dict()
        if not show_trace:
            data.pop("trace")
        fmt.print_single(data)
    else:
        click.echo(f"{result.sort_code} {result.account_number}: {result.status}")
        if show_trace:
            if result.trace:
                fmt.print_table([entry.to_dict() for entry in result.trace], TRACE_COLUMNS)
            elif result.rule_count == 0:
                fmt.print_message("Sort code is not covered by the weight table")

    sys.exit(EXIT_CODES[result.status])
