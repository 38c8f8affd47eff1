"""
CLI command modules.

This module provides all CLI commands for sortcheck.
"""

# Single pair validation
from sortcheck.cli.commands.validate import validate

# CSV batch validation
from sortcheck.cli.commands.batch import batch

# Weight table inspection
from sortcheck.cli.commands.rules import rules

# Configuration commands
from sortcheck.cli.commands.config import config

__all__ = [
    "validate",
    "batch",
    "rules",
    "config",
]
