"""
Caller-side normalization of raw sort codes and account numbers.

The modulus engine only accepts a 6-digit sort code and an 8-digit account
number. This module turns what users actually type into that shape:

- Sort code: dashes and whitespace removed ("18-00-02" -> "180002")
- Account number: whitespace removed, then by length
    - 10 characters: the part after a dash if there is one ("12-3456789"),
      otherwise the first 8 digits
    - 9 digits: the first digit replaces the last digit of the sort code,
      the remaining 8 are the account number
    - 7 digits: one leading zero
    - 6 digits: two leading zeros
"""

import re
from typing import Tuple, Union

from ..exceptions import InvalidFormatError, MissingInputError
from .constants import ACCOUNT_NUMBER_LENGTH, SORT_CODE_LENGTH

__all__ = [
    "normalize_sort_code",
    "normalize_pair",
    "require_digits",
]

_DIGITS = re.compile(r"[0-9]+")
_SORT_CODE_SEPARATORS = re.compile(r"[-\s]+")
_WHITESPACE = re.compile(r"\s+")
_DASHED_ACCOUNT = re.compile(r"([0-9]+)-([0-9]+)")

RawValue = Union[str, int, None]


def _as_text(value: RawValue, field: str) -> str:
    if value is None:
        raise MissingInputError(field)
    return str(value)


def require_digits(value: str, length: int, field: str) -> str:
    """
    Check that a value is exactly ``length`` ASCII digits.

    Raises:
        InvalidFormatError: Otherwise
    """
    label = field.replace("_", " ")
    if not isinstance(value, str):
        raise InvalidFormatError(
            f"Invalid {label}: expected a string, got {type(value).__name__}",
            field=field,
            value=repr(value),
        )
    if len(value) != length or not _DIGITS.fullmatch(value):
        raise InvalidFormatError(
            f"Invalid {label}: expected {length} digits",
            field=field,
            value=value,
        )
    return value


def normalize_sort_code(sort_code: RawValue) -> str:
    """Strip separators from a sort code and check it is numeric."""
    text = _SORT_CODE_SEPARATORS.sub("", _as_text(sort_code, "sort_code"))
    if not _DIGITS.fullmatch(text):
        raise InvalidFormatError(
            "Invalid bank sort code: not numeric", field="sort_code", value=text
        )
    return text


def normalize_pair(
    sort_code: RawValue = None,
    account_number: RawValue = None,
) -> Tuple[str, str]:
    """
    Normalize a raw sort code / account number pair.

    Returns:
        (sort_code, account_number) as 6 and 8 digit strings

    Raises:
        MissingInputError: Either value is None (sort code checked first)
        InvalidFormatError: Non-numeric input or a length that cannot be
            normalized
    """
    sc_text = _as_text(sort_code, "sort_code")
    an_text = _as_text(account_number, "account_number")

    sc = normalize_sort_code(sc_text)
    an = _WHITESPACE.sub("", an_text)

    if len(an) == 10:
        dashed = _DASHED_ACCOUNT.fullmatch(an)
        if dashed:
            an = dashed.group(2)

    if not _DIGITS.fullmatch(an):
        raise InvalidFormatError(
            "Invalid bank account number: not numeric", field="account_number", value=an
        )

    if len(an) == 10:
        an = an[:ACCOUNT_NUMBER_LENGTH]
    elif len(an) == 9 and len(sc) == SORT_CODE_LENGTH:
        sc = sc[:SORT_CODE_LENGTH - 1] + an[0]
        an = an[1:]
    elif len(an) == 7:
        an = "0" + an
    elif len(an) == 6:
        an = "00" + an

    return (
        require_digits(sc, SORT_CODE_LENGTH, "sort_code"),
        require_digits(an, ACCOUNT_NUMBER_LENGTH, "account_number"),
    )
