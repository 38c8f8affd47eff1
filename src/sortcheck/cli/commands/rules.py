"""
Rules command: show the weight table rows for a sort code.
"""

from __future__ import annotations

import click

from sortcheck.cli.base import common_options, format_option, get_validator, handle_errors
from sortcheck.cli.output import OutputFormatter

RULE_COLUMNS = ["start", "end", "method", "weights", "exception"]


@click.command()
@click.argument("sort_code")
@format_option()
@common_options
@click.pass_context
@handle_errors
def rules(ctx: click.Context, sort_code: str, output_format: str, quiet: bool):
    """List the weight table rows that apply to a sort code.

    Examples:
        sortcheck rules 87-14-27
        sortcheck rules 938611 --format json
    """
    validator = get_validator(ctx)
    matching = validator.rules_for(sort_code)
    fmt = OutputFormatter(output_format, quiet)
    fmt.print_table([rule.to_dict() for rule in matching], RULE_COLUMNS)
    if not matching:
        fmt.print_message("Sort code is not covered by the weight table")
