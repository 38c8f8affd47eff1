"""CLI command tests for sortcheck."""
