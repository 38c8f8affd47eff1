"""
sortcheck - UK sort code and account number modulus validation

This package provides:
- Core: the published modulus checking rules (weight table, exceptions,
  standard and double alternate checksums)
- CLI: command-line validation of single pairs and CSV batches
"""

from .core import SortCodeValidator, TraceEntry, ValidationResult
from .exceptions import (
    ConfigurationError,
    InputError,
    InvalidFormatError,
    MissingInputError,
    RuleTableError,
    SortCheckError,
)

__version__ = "1.0.0"

__all__ = [
    "SortCodeValidator",
    "TraceEntry",
    "ValidationResult",
    "SortCheckError",
    "InputError",
    "MissingInputError",
    "InvalidFormatError",
    "RuleTableError",
    "ConfigurationError",
]
