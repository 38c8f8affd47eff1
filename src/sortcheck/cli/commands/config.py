"""
Configuration commands.
"""

import click

from sortcheck.config import config_candidates


@click.group()
def config():
    """Configuration management."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Display current configuration."""
    settings = ctx.ensure_object(dict)["settings"]
    click.echo(settings.model_dump_json(indent=2))


@config.command("paths")
def config_paths():
    """List the YAML files searched for configuration, in order."""
    for candidate in config_candidates():
        marker = "*" if candidate.exists() else " "
        click.echo(f"{marker} {candidate}")
