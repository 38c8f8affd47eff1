"""
Validation session: evaluates every rule for one sort code and combines the
partial results into a verdict.

A session owns a fresh ValidationContext per call (attempt counter, last
exception code, last outcome, trace), so nothing leaks between calls or
between sessions. The rule table and preprocessor it uses are read-only and
may be shared.

Verdicts:
    True   the pair passes the modulus check
    False  the pair fails
    None   undetermined (sort code not in the table, or no decisive rule)
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import MissingInputError
from .checksum import run_checksum
from .constants import ACCOUNT_NUMBER_LENGTH, SORT_CODE_LENGTH
from .digits import account_vector, sort_code_vector
from .normalize import require_digits
from .preprocess import ExceptionPreprocessor, Outcome
from .rules import RuleTable
from .types import CheckResult, ExceptionCode, Rule, TraceEntry

logger = logging.getLogger(__name__)

__all__ = [
    "ValidationContext",
    "ValidationSession",
]

# Combination policy groups
PASS_ON_ANY_ATTEMPT = frozenset({
    ExceptionCode.SUBSTITUTE_WEIGHTS,
    ExceptionCode.ZERO_U_TO_B_IF_AB_09_OR_99,
    ExceptionCode.FIRST_OF_PAIR,
})
PASS_ON_SECOND_ATTEMPT = frozenset({
    ExceptionCode.SORT_CODE_309634,
    ExceptionCode.SECOND_OF_10,
    ExceptionCode.SECOND_OF_PAIR,
})
FAIL_ON_ANY_ATTEMPT = frozenset({
    ExceptionCode.CHECK_DIGITS_G_AND_H,
    ExceptionCode.FOREIGN_CURRENCY,
})


@dataclass
class ValidationContext:
    """Call-scoped state of one validation."""
    rule_count: int = 0
    attempts: int = 0
    last_exception: Optional[ExceptionCode] = None
    last_check_passed: bool = False
    trace: List[TraceEntry] = field(default_factory=list)

    @property
    def multi_rule(self) -> bool:
        return self.rule_count > 1

    def record(self, entry: TraceEntry) -> None:
        self.trace.append(entry)
        self.last_exception = entry.exception_code
        self.last_check_passed = entry.passed

    def decide(self) -> Optional[bool]:
        """
        Apply the combination policy after a rule has been evaluated.

        Returns the final verdict, or None to continue with the next rule.
        """
        if not self.multi_rule:
            return self.last_check_passed

        code = self.last_exception
        passed = self.last_check_passed
        if code in PASS_ON_ANY_ATTEMPT and passed:
            return True
        if code in PASS_ON_SECOND_ATTEMPT and passed and self.attempts == 2:
            return True
        if code in FAIL_ON_ANY_ATTEMPT and not passed:
            return False
        if code == ExceptionCode.NONE and passed:
            return True
        if self.attempts == 2:
            return passed
        return None

    def conclude(self) -> Optional[bool]:
        """Verdict once every rule has been evaluated without a decision."""
        if self.multi_rule and self.last_exception == ExceptionCode.FOREIGN_CURRENCY:
            return self.last_check_passed
        return None


class ValidationSession:
    """
    Runs the modulus check for one caller.

    The session remembers the trace of its most recent call; use one session
    per thread, or call :meth:`SortCodeValidator.validate` which creates a
    session per call.

    Usage:
        session = ValidationSession(table, ExceptionPreprocessor())
        session.is_valid("871427", "09123496")  # True
        session.get_trace()                     # [TraceEntry(...)]
    """

    def __init__(self, rule_table: RuleTable, preprocessor: ExceptionPreprocessor):
        self.rule_table = rule_table
        self.preprocessor = preprocessor
        self._context: Optional[ValidationContext] = None

    @property
    def context(self) -> Optional[ValidationContext]:
        """State of the most recent completed call."""
        return self._context

    def get_trace(self) -> List[TraceEntry]:
        """Ordered trace of the rules evaluated by the most recent call."""
        if self._context is None:
            return []
        return list(self._context.trace)

    def is_valid(
        self,
        sort_code: Optional[str] = None,
        account_number: Optional[str] = None,
    ) -> Optional[bool]:
        """
        Validate an already-normalized sort code and account number.

        Args:
            sort_code: Exactly 6 ASCII digits
            account_number: Exactly 8 ASCII digits

        Returns:
            True, False, or None when undetermined

        Raises:
            MissingInputError: Either value is None
            InvalidFormatError: Either value has the wrong shape
        """
        if sort_code is None:
            raise MissingInputError("sort_code")
        if account_number is None:
            raise MissingInputError("account_number")
        require_digits(sort_code, SORT_CODE_LENGTH, "sort_code")
        require_digits(account_number, ACCOUNT_NUMBER_LENGTH, "account_number")

        context = ValidationContext()
        self._context = context
        rules = self.rule_table.rules_matching(sort_code)
        context.rule_count = len(rules)

        if not rules:
            logger.debug(f"Sort code {sort_code} is not covered by the weight table")
            return None

        for rule in rules:
            context.attempts += 1
            entry = self._evaluate(rule, sort_code, account_number, context)
            if entry is None:
                continue
            if entry.result is CheckResult.UNRESOLVED:
                return None
            verdict = context.decide()
            if verdict is not None:
                return verdict

        return context.conclude()

    def _evaluate(
        self,
        rule: Rule,
        sort_code: str,
        account_number: str,
        context: ValidationContext,
    ) -> Optional[TraceEntry]:
        """Preprocess and check one rule; None when the rule is skipped."""
        work = self.preprocessor.apply(
            rule, sort_code_vector(sort_code), account_vector(account_number)
        )

        if work.outcome is Outcome.SKIP:
            context.last_exception = rule.exception
            return None

        if work.outcome is Outcome.ACCEPT:
            entry = TraceEntry(
                exception_code=rule.exception,
                method=rule.method,
                result=CheckResult.VALID,
            )
        else:
            entry = run_checksum(work.sort_code, work.account, work.rule, account_number)

        context.record(entry)
        logger.debug(
            f"Attempt {context.attempts}/{context.rule_count} for {sort_code}: "
            f"{rule.method.value} exception {int(rule.exception)} -> {entry.result.value}"
        )

        return entry
