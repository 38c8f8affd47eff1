"""Shared CLI decorators and utilities."""

from __future__ import annotations

import functools
import sys
from collections.abc import Callable
from typing import Any

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from sortcheck.core.validator import SortCodeValidator
from sortcheck.exceptions import SortCheckError

# Exit status when input, rule data or configuration is unusable
EXIT_INPUT_ERROR = 2


def common_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--quiet`` flag to any command."""
    @click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return f(*args, **kwargs)
    return wrapper


def format_option(
    choices: list[str] | None = None,
    default: str | None = None,
) -> Callable[..., Any]:
    """Add ``--format`` / ``-f`` option with configurable choices.

    The Python parameter is named ``output_format`` to avoid shadowing the
    built-in ``format``.
    """
    if choices is None:
        choices = ["table", "json", "csv"]
    if default is None:
        default = choices[0]

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        @click.option(
            "--format", "-f", "output_format",
            type=click.Choice(choices),
            default=default,
            help="Output format",
        )
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return f(*args, **kwargs)
        return wrapper
    return decorator


def handle_errors(f: Callable[..., Any]) -> Callable[..., Any]:
    """Report :class:`SortCheckError` on stderr and exit with status 2."""
    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except SortCheckError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(EXIT_INPUT_ERROR)
    return wrapper


def file_progress(total: int, description: str = "Processing", disable: bool = False) -> Progress:
    """Create a :class:`rich.progress.Progress` bar on stderr.

    Usage::

        with file_progress(len(rows), "Validating") as progress:
            task = progress.add_task("Validating", total=len(rows))
            for row in rows:
                process(row)
                progress.advance(task)
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
        console=Console(stderr=True),
        transient=True,
        disable=disable,
    )


def get_validator(ctx: click.Context) -> SortCodeValidator:
    """Return the validator for this invocation, building it on first use.

    ``--rules`` / ``--substitutions`` override the configured paths.
    """
    obj = ctx.ensure_object(dict)
    validator = obj.get("validator")
    if validator is None:
        settings = obj["settings"]
        validator = SortCodeValidator.from_paths(
            obj.get("rules_path") or settings.rules.rules_path,
            obj.get("substitutions_path") or settings.rules.substitutions_path,
        )
        obj["validator"] = validator
    return validator
