"""
sortcheck CLI entry point.

Usage:
    sortcheck validate SORT_CODE ACCOUNT_NUMBER [--trace] [--format table|json]
    sortcheck batch FILE [--format table|json|csv] [--output PATH]
    sortcheck rules SORT_CODE
    sortcheck config show
"""

import sys
from pathlib import Path

import click

from sortcheck import __version__
from sortcheck.cli.base import EXIT_INPUT_ERROR
from sortcheck.cli.commands import batch, config, rules, validate
from sortcheck.config import get_settings
from sortcheck.exceptions import ConfigurationError
from sortcheck.logging import setup_logging

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, prog_name="sortcheck")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (overrides configuration)",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
@click.option(
    "--rules", "rules_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Weight table file (valacdos.txt)",
)
@click.option(
    "--substitutions", "substitutions_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Sort code substitution file (scsubtab.txt)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    json_logs: bool,
    rules_path: Path | None,
    substitutions_path: Path | None,
):
    """sortcheck - UK sort code and account number modulus checking"""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    setup_logging(
        level=log_level or settings.logging.level,
        json_format=json_logs or settings.logging.json_format,
        log_file=settings.logging.file,
    )

    obj = ctx.ensure_object(dict)
    obj["settings"] = settings
    obj["rules_path"] = rules_path
    obj["substitutions_path"] = substitutions_path


cli.add_command(validate)
cli.add_command(batch)
cli.add_command(rules)
cli.add_command(config)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
