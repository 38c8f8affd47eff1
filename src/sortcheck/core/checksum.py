"""
Modulus checksum algorithms.

Two algorithms are published:
- Standard modulus (MOD10 / MOD11): sum of digit x weight, remainder by the
  divisor must be zero
- Double alternate (DBLAL): every product over 9 is folded into the sum of
  its own digits before accumulating, remainder by 10 must be zero

Exceptions 1, 4, 5 and 14 change how the remainder is judged. Every check
returns a TraceEntry; arithmetic never raises.
"""

import logging
from typing import Optional

from .constants import ACCOUNT_LABELS, EXCEPTION_1_BIAS, EXCEPTION_14_RETRY_DIGITS
from .digits import DigitVector, account_vector
from .types import CheckResult, ExceptionCode, Rule, TraceEntry

logger = logging.getLogger(__name__)

__all__ = [
    "fold_product",
    "weighted_total",
    "standard_check",
    "double_alternate_check",
    "run_checksum",
]


def fold_product(product: int) -> int:
    """Fold a product over 9 into the sum of its digits (18 -> 9)."""
    if product > 9:
        tens, units = divmod(product, 10)
        return tens + units
    return product


def weighted_total(
    sort_code: DigitVector,
    account: DigitVector,
    rule: Rule,
    fold: bool = False,
) -> int:
    """
    Sum digit x weight over u..z then a..h.

    Args:
        fold: Apply the double alternate digit folding to each product
    """
    total = EXCEPTION_1_BIAS if rule.exception == ExceptionCode.ADD_27 else 0
    digits = sort_code.values + account.values
    for digit, weight in zip(digits, rule.weights):
        product = digit * weight
        total += fold_product(product) if fold else product
    return total


def _entry(rule: Rule, result: CheckResult, remainder: int, total: int) -> TraceEntry:
    logger.debug(
        f"{rule.method.value} check, exception {int(rule.exception)}: "
        f"total={total} remainder={remainder} result={result.value}"
    )
    return TraceEntry(
        exception_code=rule.exception,
        method=rule.method,
        result=result,
        remainder=remainder,
        total=total,
    )


def _verdict(condition: bool) -> CheckResult:
    return CheckResult.PASS if condition else CheckResult.FAIL


def standard_check(
    sort_code: DigitVector,
    account: DigitVector,
    rule: Rule,
    original_account: Optional[str] = None,
) -> TraceEntry:
    """
    Standard modulus 10 / 11 check.

    Args:
        sort_code: Working sort code (possibly substituted)
        account: Working account number
        rule: Rule with the weights to apply (possibly overridden)
        original_account: Caller's account number, used by the exception 14
            retry; defaults to the working account
    """
    divisor = rule.method.divisor
    total = weighted_total(sort_code, account, rule)
    remainder = total % divisor

    if rule.exception == ExceptionCode.REMAINDER_MATCHES_GH:
        return _entry(rule, _verdict(remainder == int(account.pair("g", "h"))), remainder, total)

    if rule.exception == ExceptionCode.CHECK_DIGITS_G_AND_H and divisor == 11:
        if remainder == 0:
            return _entry(rule, _verdict(account["g"] == 0), remainder, total)
        if remainder == 1:
            return _entry(rule, CheckResult.FAIL, remainder, total)
        check_digit = 11 - remainder
        return _entry(rule, _verdict(account["g"] == check_digit), check_digit, total)

    if remainder == 0:
        return _entry(rule, CheckResult.PASS, remainder, total)

    if rule.exception == ExceptionCode.SHIFT_AND_RETRY:
        if account["h"] not in EXCEPTION_14_RETRY_DIGITS:
            return _entry(rule, CheckResult.FAIL, remainder, total)
        # Drop the last digit and shift the rest right by one
        original = original_account or account.as_string()
        shifted = account_vector("0" + original[:len(ACCOUNT_LABELS) - 1])
        logger.debug(f"Exception 14 retry with account {shifted.as_string()}")
        total = weighted_total(sort_code, shifted, rule)
        remainder = total % 11
        return _entry(rule, _verdict(remainder == 0), remainder, total)

    return _entry(rule, CheckResult.FAIL, remainder, total)


def double_alternate_check(
    sort_code: DigitVector,
    account: DigitVector,
    rule: Rule,
) -> TraceEntry:
    """
    Double alternate check.

    Exception 5 judges h as a check digit. A zero remainder with a non-zero
    h is reported as UNRESOLVED rather than guessed.
    """
    total = weighted_total(sort_code, account, rule, fold=True)
    remainder = total % 10

    if rule.exception == ExceptionCode.CHECK_DIGITS_G_AND_H:
        if remainder == 0:
            if account["h"] == 0:
                return _entry(rule, CheckResult.PASS, remainder, total)
            logger.warning(
                "Double alternate exception 5 check left undecided "
                f"(remainder 0, h={account['h']})"
            )
            return _entry(rule, CheckResult.UNRESOLVED, remainder, total)
        check_digit = 10 - remainder
        return _entry(rule, _verdict(account["h"] == check_digit), check_digit, total)

    return _entry(rule, _verdict(remainder == 0), remainder, total)


def run_checksum(
    sort_code: DigitVector,
    account: DigitVector,
    rule: Rule,
    original_account: Optional[str] = None,
) -> TraceEntry:
    """Dispatch to the algorithm named by the rule's method."""
    if rule.method.is_double_alternate:
        return double_alternate_check(sort_code, account, rule)
    return standard_check(sort_code, account, rule, original_account)
