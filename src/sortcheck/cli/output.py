"""Structured output formatting for CLI commands."""

from __future__ import annotations

import csv
import io
import json
from typing import IO, Any

import click


class OutputFormatter:
    """Format command output as table, JSON, or CSV.

    Usage::

        fmt = OutputFormatter(output_format, quiet)
        fmt.print_table(rows, columns=["sort_code", "account_number", "status"])
        fmt.print_message("Checked 3 pairs")

    Data goes to ``stream`` (stdout by default); messages go to stderr so
    that redirected output stays machine readable.
    """

    def __init__(
        self,
        output_format: str = "table",
        quiet: bool = False,
        stream: IO[str] | None = None,
    ) -> None:
        self.format = output_format
        self.quiet = quiet
        self.stream = stream

    def _echo(self, text: str) -> None:
        click.echo(text, file=self.stream)

    def print_table(
        self,
        data: list[dict[str, Any]],
        columns: list[str] | None = None,
    ) -> None:
        """Print *data* as a formatted table, JSON array, or CSV.

        Always prints the header row even when *data* is empty so callers
        can tell the command succeeded.
        """
        if columns is None:
            columns = list(data[0].keys()) if data else []

        if self.format == "json":
            self._echo(json.dumps(data, indent=2, default=str))
            return

        if self.format == "csv":
            buf = io.StringIO()
            writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(data)
            self._echo(buf.getvalue().rstrip())
            return

        if not columns:
            return

        headers = {c: c.replace("_", " ").title() for c in columns}
        widths: dict[str, int] = {c: len(headers[c]) for c in columns}
        for row in data:
            for c in columns:
                widths[c] = max(widths[c], len(_cell(row.get(c))))
        # Cap widths at 50 chars
        widths = {c: min(w, 50) for c, w in widths.items()}

        header = "  ".join(headers[c].ljust(widths[c]) for c in columns)
        self._echo(header)
        self._echo("-" * len(header))

        for row in data:
            parts: list[str] = []
            for c in columns:
                val = _cell(row.get(c))
                if len(val) > widths[c]:
                    val = val[: widths[c] - 3] + "..."
                parts.append(val.ljust(widths[c]))
            self._echo("  ".join(parts).rstrip())

    def print_single(self, data: dict[str, Any]) -> None:
        """Print a single key-value record."""
        if self.format == "json":
            self._echo(json.dumps(data, indent=2, default=str))
        else:
            for key, value in data.items():
                self._echo(f"  {key}: {_cell(value)}")

    def print_message(self, message: str) -> None:
        """Print an informational message to stderr (suppressed in quiet mode)."""
        if not self.quiet:
            click.echo(message, err=True)


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)
