"""
sortcheck CLI module.

Provides shared command options, output formatting and the command groups
registered on the ``sortcheck`` entry point.
"""
