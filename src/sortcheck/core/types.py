"""
Core data types for the sortcheck modulus engine.

This module defines the fundamental types used throughout the engine:
- ExceptionCode: the 15 published special-case tags
- Method: checking method of a rule (standard modulus 10/11, double alternate)
- CheckResult: outcome recorded for one rule evaluation
- Rule: one row of the weight table
- TraceEntry: diagnostic record of one evaluated rule
- ValidationResult: verdict plus trace for one call

These types are shared by the rule table, the preprocessor, the checksum
engine and the validation session.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

from .constants import SORT_CODE_LENGTH, WEIGHT_COUNT

__all__ = [
    # Enums
    "ExceptionCode",
    "Method",
    "CheckResult",
    # Data classes
    "Rule",
    "TraceEntry",
    "ValidationResult",
]


class ExceptionCode(IntEnum):
    """
    Special-case tag attached to a weight table row.

    The numeric values are the ones printed in the published table.
    """
    NONE = 0
    ADD_27 = 1                    # add 27 to the total before the check
    SUBSTITUTE_WEIGHTS = 2        # paired with 9; weights depend on a and g
    SKIP_IF_C_6_OR_9 = 3          # second check ignored when c is 6 or 9
    REMAINDER_MATCHES_GH = 4      # remainder must equal the number gh
    CHECK_DIGITS_G_AND_H = 5      # g and h are check digits, sort code substitution
    FOREIGN_CURRENCY = 6          # a in 4..8 and g == h is always valid
    ZERO_U_TO_B_IF_G_IS_9 = 7     # zeroise u..b when g == 9
    SORT_CODE_090126 = 8          # check against sort code 090126
    SORT_CODE_309634 = 9          # check against sort code 309634
    ZERO_U_TO_B_IF_AB_09_OR_99 = 10  # zeroise u..b when ab is 09/99 and g == 9
    SECOND_OF_10 = 11             # partner of exception 10
    FIRST_OF_PAIR = 12            # first half of a 12/13 pair
    SECOND_OF_PAIR = 13           # second half of a 12/13 pair
    SHIFT_AND_RETRY = 14          # retry with the account shifted right

    @classmethod
    def from_value(cls, value: int) -> "ExceptionCode":
        """Convert int to ExceptionCode with validation."""
        if value not in cls._value2member_map_:
            raise ValueError(f"Invalid exception code: {value}. Must be 0-14.")
        return cls(value)


class Method(str, Enum):
    """Checking method named in the third column of the weight table."""
    MOD10 = "MOD10"
    MOD11 = "MOD11"
    DBLAL = "DBLAL"

    @property
    def divisor(self) -> int:
        """Modulus applied to the weighted total."""
        return 11 if self is Method.MOD11 else 10

    @property
    def is_double_alternate(self) -> bool:
        return self is Method.DBLAL

    @property
    def label(self) -> str:
        """Human-readable form used in traces and CLI output."""
        if self.is_double_alternate:
            return "DoubleAlternate"
        return f"StandardModulus({self.divisor})"


class CheckResult(str, Enum):
    """Outcome of evaluating a single rule."""
    PASS = "PASS"
    FAIL = "FAIL"
    VALID = "VALID"            # exception 6 early accept, no checksum run
    UNRESOLVED = "UNRESOLVED"  # double alternate exception 5, r == 0 and h != 0

    @property
    def passed(self) -> bool:
        return self in (CheckResult.PASS, CheckResult.VALID)


@dataclass(frozen=True)
class Rule:
    """
    One row of the published weight table.

    Attributes:
        start: First sort code of the range (inclusive)
        end: Last sort code of the range (inclusive)
        method: Checking method
        weights: 14 weights, u..z followed by a..h
        exception: Special-case tag
    """
    start: int
    end: int
    method: Method
    weights: Tuple[int, ...]
    exception: ExceptionCode = ExceptionCode.NONE

    def __post_init__(self):
        if len(self.weights) != WEIGHT_COUNT:
            raise ValueError(
                f"Rule needs {WEIGHT_COUNT} weights, got {len(self.weights)}"
            )
        if self.start > self.end:
            raise ValueError(f"Rule range start {self.start} is after end {self.end}")

    @property
    def sort_code_weights(self) -> Tuple[int, ...]:
        return self.weights[:SORT_CODE_LENGTH]

    @property
    def account_weights(self) -> Tuple[int, ...]:
        return self.weights[SORT_CODE_LENGTH:]

    def contains(self, sort_code: int) -> bool:
        """Check whether a numeric sort code falls in this rule's range."""
        return self.start <= sort_code <= self.end

    def with_weights(
        self,
        sort_code: Optional[Tuple[int, ...]] = None,
        account: Optional[Tuple[int, ...]] = None,
    ) -> "Rule":
        """
        Return a copy with the leading sort code and/or account weights replaced.

        Shorter replacement tuples overwrite from the first position and keep
        the remaining weights, so ``account=(0, 0)`` zeroes only a and b.
        """
        sc = list(self.sort_code_weights)
        an = list(self.account_weights)
        if sort_code is not None:
            sc[:len(sort_code)] = sort_code
        if account is not None:
            an[:len(account)] = account
        return dataclasses.replace(self, weights=tuple(sc + an))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": f"{self.start:0{SORT_CODE_LENGTH}d}",
            "end": f"{self.end:0{SORT_CODE_LENGTH}d}",
            "method": self.method.value,
            "weights": list(self.weights),
            "exception": int(self.exception),
        }


@dataclass(frozen=True)
class TraceEntry:
    """
    Diagnostic record of one evaluated rule.

    ``remainder`` and ``total`` are None for VALID entries, which never run
    a checksum.
    """
    exception_code: ExceptionCode
    method: Method
    result: CheckResult
    remainder: Optional[int] = None
    total: Optional[int] = None

    @property
    def passed(self) -> bool:
        return self.result.passed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exception_code": int(self.exception_code),
            "checksum_kind": self.method.label,
            "remainder": self.remainder,
            "total": self.total,
            "result": self.result.value,
        }


@dataclass
class ValidationResult:
    """
    Result of validating one sort code / account number pair.

    ``verdict`` is True (valid), False (invalid) or None (undetermined:
    no rule covers the sort code, or the rules did not reach a decision).
    """
    sort_code: str
    account_number: str
    verdict: Optional[bool]
    trace: List[TraceEntry] = field(default_factory=list)
    rule_count: int = 0

    @property
    def status(self) -> str:
        if self.verdict is None:
            return "undetermined"
        return "valid" if self.verdict else "invalid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sort_code": self.sort_code,
            "account_number": self.account_number,
            "status": self.status,
            "rule_count": self.rule_count,
            "trace": [entry.to_dict() for entry in self.trace],
        }

