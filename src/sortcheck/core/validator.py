"""
Public entry point for UK sort code / account number validation.

SortCodeValidator owns the weight table and the exception 5 substitution
table (both read-only) and creates a ValidationSession per call, so a single
instance can be shared between threads.

Usage:
    from sortcheck import SortCodeValidator

    validator = SortCodeValidator()
    validator.is_valid("18-00-02", "00000190")   # True
    result = validator.validate("871427", "09123496")
    result.status                                # "valid"
    result.trace[0].total                        # 121
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, List, Mapping, Optional, Union

from .constants import SORT_CODE_LENGTH
from .normalize import normalize_pair, normalize_sort_code, require_digits
from .preprocess import ExceptionPreprocessor
from .rules import (
    RuleTable,
    default_rule_table,
    default_substitutions,
    load_rule_table,
    load_substitutions,
)
from .session import ValidationSession
from .types import Rule, TraceEntry, ValidationResult

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

__all__ = ["SortCodeValidator"]

RawValue = Union[str, int, None]


class SortCodeValidator:
    """
    Validates sort code / account number pairs against the modulus rules.

    Args:
        rule_table: Weight table; the bundled table when omitted
        substitutions: Exception 5 sort code substitutions; the bundled
            table when omitted
    """

    def __init__(
        self,
        rule_table: Optional[RuleTable] = None,
        substitutions: Optional[Mapping[str, str]] = None,
    ):
        self.rule_table = rule_table if rule_table is not None else default_rule_table()
        if substitutions is None:
            substitutions = default_substitutions()
        self.preprocessor = ExceptionPreprocessor(substitutions)
        # Trace of the latest is_valid() call, per thread
        self._local = threading.local()

    @classmethod
    def from_paths(
        cls,
        rules_path: Optional[Path] = None,
        substitutions_path: Optional[Path] = None,
    ) -> SortCodeValidator:
        """Build a validator from table files (bundled data for missing paths)."""
        table = load_rule_table(rules_path) if rules_path else None
        substitutions = load_substitutions(substitutions_path) if substitutions_path else None
        return cls(rule_table=table, substitutions=substitutions)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> SortCodeValidator:
        """Build a validator from application settings."""
        if settings is None:
            from ..config import get_settings
            settings = get_settings()
        return cls.from_paths(settings.rules.rules_path, settings.rules.substitutions_path)

    def session(self) -> ValidationSession:
        """Create a session sharing this validator's read-only tables."""
        return ValidationSession(self.rule_table, self.preprocessor)

    def rules_for(self, sort_code: RawValue) -> List[Rule]:
        """Rules that apply to a (raw) sort code, in evaluation order."""
        sc = require_digits(normalize_sort_code(sort_code), SORT_CODE_LENGTH, "sort_code")
        return self.rule_table.rules_matching(sc)

    def validate(
        self,
        sort_code: RawValue = None,
        account_number: RawValue = None,
    ) -> ValidationResult:
        """
        Normalize and validate a pair, returning verdict and trace together.

        Raises:
            MissingInputError: Either value is None
            InvalidFormatError: Input cannot be normalized to 6 + 8 digits
        """
        sc, an = normalize_pair(sort_code, account_number)
        session = self.session()
        verdict = session.is_valid(sc, an)
        context = session.context
        result = ValidationResult(
            sort_code=sc,
            account_number=an,
            verdict=verdict,
            trace=session.get_trace(),
            rule_count=context.rule_count if context else 0,
        )
        self._local.trace = result.trace
        logger.debug(f"{sc} {an}: {result.status}")
        return result

    def is_valid(
        self,
        sort_code: RawValue = None,
        account_number: RawValue = None,
    ) -> Optional[bool]:
        """
        Check whether the account number can exist under the sort code.

        Returns:
            True, False, or None when the rules cannot decide
        """
        return self.validate(sort_code, account_number).verdict

    def get_trace(self) -> List[TraceEntry]:
        """Trace of this thread's most recent :meth:`is_valid` / :meth:`validate` call."""
        return list(getattr(self._local, "trace", []))
