"""
Per-exception preprocessing applied before a rule's checksum.

Each exception code has exactly one handler, registered with the
``@handles`` decorator. A handler receives the working state for one rule
evaluation and returns a new one; it may substitute the working sort code,
override the rule's weights on a copy, accept the rule outright (exception 6)
or skip it (exception 3).

The registry is checked at import time: a code without a handler is a
programming error, not a silent no-op.

Usage::

    preprocessor = ExceptionPreprocessor(substitutions={"938600": "938611"})
    work = preprocessor.apply(rule, sort_code, account)
    if work.outcome is Outcome.PROCEED:
        entry = run_checksum(work.sort_code, work.account, work.rule)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from .constants import (
    EXCEPTION_10_AB_PREFIXES,
    EXCEPTION_2_WEIGHTS,
    EXCEPTION_2_WEIGHTS_G9,
    EXCEPTION_8_SORT_CODE,
    EXCEPTION_9_SORT_CODE,
    FOREIGN_CURRENCY_LEADING_DIGITS,
    SKIP_IF_C_IN,
    ZERO_AB_WEIGHTS,
    ZERO_SORT_CODE_WEIGHTS,
)
from .digits import DigitVector, parse_literal
from .types import ExceptionCode, Rule

logger = logging.getLogger(__name__)

__all__ = [
    "Outcome",
    "WorkingSet",
    "ExceptionPreprocessor",
    "handles",
    "registered_codes",
    "substitute_sort_code",
]


class Outcome(Enum):
    """What the session should do with the rule after preprocessing."""
    PROCEED = "proceed"  # run the checksum
    ACCEPT = "accept"    # record VALID without a checksum
    SKIP = "skip"        # ignore the rule entirely


@dataclass(frozen=True)
class WorkingSet:
    """Working copies for one rule evaluation."""
    rule: Rule
    sort_code: DigitVector
    account: DigitVector
    outcome: Outcome = Outcome.PROCEED

    def evolve(self, **changes) -> WorkingSet:
        return dataclasses.replace(self, **changes)

    def with_weights(self, sort_code: str, account: str) -> WorkingSet:
        """Override the leading weights on a copy of the rule."""
        rule = self.rule.with_weights(
            sort_code=parse_literal(sort_code),
            account=parse_literal(account),
        )
        return self.evolve(rule=rule)


Handler = Callable[[WorkingSet, Mapping[str, str]], WorkingSet]

_HANDLERS: Dict[ExceptionCode, Handler] = {}


def handles(*codes: ExceptionCode) -> Callable[[Handler], Handler]:
    """Register a handler for one or more exception codes.

    Raises ``ValueError`` if a code already has a handler.
    """
    def decorator(func: Handler) -> Handler:
        for code in codes:
            if code in _HANDLERS:
                raise ValueError(
                    f"Exception code {int(code)} already handled by {_HANDLERS[code].__name__}"
                )
            _HANDLERS[code] = func
        return func
    return decorator


def registered_codes() -> frozenset:
    """Return the exception codes that have a handler."""
    return frozenset(_HANDLERS)


def substitute_sort_code(sort_code: DigitVector, literal: str) -> DigitVector:
    """Replace the whole working sort code. Applying it twice changes nothing."""
    return sort_code.overwrite(literal)


# =============================================================================
# HANDLERS
# =============================================================================

@handles(
    ExceptionCode.NONE,
    ExceptionCode.ADD_27,
    ExceptionCode.REMAINDER_MATCHES_GH,
    ExceptionCode.SECOND_OF_10,
    ExceptionCode.FIRST_OF_PAIR,
    ExceptionCode.SECOND_OF_PAIR,
    ExceptionCode.SHIFT_AND_RETRY,
)
def _unchanged(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    # These codes only affect the checksum or the combination policy
    return work


@handles(ExceptionCode.FOREIGN_CURRENCY)
def _foreign_currency(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    account = work.account
    if account["a"] in FOREIGN_CURRENCY_LEADING_DIGITS and account["g"] == account["h"]:
        logger.debug("Exception 6: foreign currency account accepted")
        return work.evolve(outcome=Outcome.ACCEPT)
    return work


@handles(ExceptionCode.ZERO_U_TO_B_IF_G_IS_9)
def _zero_when_g_is_9(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    if work.account["g"] == 9:
        return work.with_weights(ZERO_SORT_CODE_WEIGHTS, ZERO_AB_WEIGHTS)
    return work


@handles(ExceptionCode.SORT_CODE_090126)
def _sort_code_090126(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    return work.evolve(sort_code=substitute_sort_code(work.sort_code, EXCEPTION_8_SORT_CODE))


@handles(ExceptionCode.SORT_CODE_309634)
def _sort_code_309634(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    return work.evolve(sort_code=substitute_sort_code(work.sort_code, EXCEPTION_9_SORT_CODE))


@handles(ExceptionCode.SUBSTITUTE_WEIGHTS)
def _substitute_weights(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    account = work.account
    if account["a"] == 0:
        return work
    if account["g"] == 9:
        return work.with_weights(*EXCEPTION_2_WEIGHTS_G9)
    return work.with_weights(*EXCEPTION_2_WEIGHTS)


@handles(ExceptionCode.ZERO_U_TO_B_IF_AB_09_OR_99)
def _zero_when_ab_09_or_99(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    account = work.account
    if account.pair("a", "b") in EXCEPTION_10_AB_PREFIXES and account["g"] == 9:
        return work.with_weights(ZERO_SORT_CODE_WEIGHTS, ZERO_AB_WEIGHTS)
    return work


@handles(ExceptionCode.SKIP_IF_C_6_OR_9)
def _skip_if_c_6_or_9(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    if work.account["c"] in SKIP_IF_C_IN:
        logger.debug(f"Exception 3: c={work.account['c']}, rule skipped")
        return work.evolve(outcome=Outcome.SKIP)
    return work


@handles(ExceptionCode.CHECK_DIGITS_G_AND_H)
def _check_digits_g_and_h(work: WorkingSet, substitutions: Mapping[str, str]) -> WorkingSet:
    substitute = substitutions.get(work.sort_code.as_string())
    if substitute is None:
        return work
    logger.debug(f"Exception 5: sort code {work.sort_code.as_string()} checked as {substitute}")
    return work.evolve(sort_code=substitute_sort_code(work.sort_code, substitute))


_unhandled = sorted(int(code) for code in set(ExceptionCode) - set(_HANDLERS))
if _unhandled:
    raise RuntimeError(f"No preprocessing handler for exception codes {_unhandled}")


class ExceptionPreprocessor:
    """
    Applies the registered handler for a rule's exception code.

    Holds the exception 5 substitution table; otherwise stateless, so one
    instance can serve concurrent sessions.
    """

    def __init__(self, substitutions: Optional[Mapping[str, str]] = None):
        self.substitutions: Mapping[str, str] = MappingProxyType(dict(substitutions or {}))

    def apply(self, rule: Rule, sort_code: DigitVector, account: DigitVector) -> WorkingSet:
        work = WorkingSet(rule=rule, sort_code=sort_code, account=account)
        return _HANDLERS[rule.exception](work, self.substitutions)
