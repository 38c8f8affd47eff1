"""
sortcheck core modulus engine.

This module provides the weight table, the exception preprocessing and the
checksum algorithms used to decide whether a UK account number can exist
under a sort code.

Usage:
    from sortcheck.core import SortCodeValidator

    validator = SortCodeValidator()
    validator.is_valid("089999", "66374958")   # True
    for entry in validator.get_trace():
        print(entry.to_dict())
"""

from .types import (
    ExceptionCode,
    Method,
    CheckResult,
    Rule,
    TraceEntry,
    ValidationResult,
)

from .digits import (
    DigitVector,
    parse_literal,
    sort_code_vector,
    account_vector,
)

from .rules import (
    RuleTable,
    parse_rules,
    parse_substitutions,
    load_rule_table,
    load_substitutions,
    default_rule_table,
    default_substitutions,
)

from .checksum import (
    fold_product,
    weighted_total,
    standard_check,
    double_alternate_check,
    run_checksum,
)

from .preprocess import (
    ExceptionPreprocessor,
    Outcome,
    WorkingSet,
)

from .normalize import (
    normalize_pair,
    normalize_sort_code,
)

from .session import (
    ValidationContext,
    ValidationSession,
)

from .validator import SortCodeValidator

__all__ = [
    # Types
    "ExceptionCode",
    "Method",
    "CheckResult",
    "Rule",
    "TraceEntry",
    "ValidationResult",
    # Digits
    "DigitVector",
    "parse_literal",
    "sort_code_vector",
    "account_vector",
    # Rule table
    "RuleTable",
    "parse_rules",
    "parse_substitutions",
    "load_rule_table",
    "load_substitutions",
    "default_rule_table",
    "default_substitutions",
    # Checksums
    "fold_product",
    "weighted_total",
    "standard_check",
    "double_alternate_check",
    "run_checksum",
    # Preprocessing
    "ExceptionPreprocessor",
    "Outcome",
    "WorkingSet",
    # Normalization
    "normalize_pair",
    "normalize_sort_code",
    # Sessions
    "ValidationContext",
    "ValidationSession",
    "SortCodeValidator",
]
