"""
Fixed-width digit vectors for sort codes and account numbers.

A sort code decomposes into positions u..z and an account number into
positions a..h. Checksum arithmetic and the exception rules address digits
by these letters, so a DigitVector supports lookup by letter as well as by
index.

Vectors are immutable: every overwrite returns a new vector, leaving the
caller's digits untouched for the next rule evaluation.
"""

from __future__ import annotations

import re
from typing import Iterator, Sequence, Tuple, Union

from .constants import ACCOUNT_LABELS, SORT_CODE_LABELS

__all__ = [
    "DigitVector",
    "parse_literal",
    "sort_code_vector",
    "account_vector",
]

_DIGITS = re.compile(r"[0-9]+")


def parse_literal(literal: str) -> Tuple[int, ...]:
    """
    Parse an overwrite literal into one value per position.

    Two forms are accepted:
    - ``"090126"``: one digit per character
    - ``"6,4,8,7,10,9,3,1"``: one integer per comma-separated item, for
      values that do not fit in a single digit
    """
    if "," in literal:
        return tuple(int(part) for part in literal.split(","))
    if not _DIGITS.fullmatch(literal):
        raise ValueError(f"Digit literal must be numeric: {literal!r}")
    return tuple(int(ch) for ch in literal)


class DigitVector:
    """
    Immutable vector of digits addressable by index or position letter.

    Usage:
        account = DigitVector.from_string("09123496", "abcdefgh")
        account["g"]            # 9
        account[0]              # 0
        account.replace("g", 0) # new vector, account unchanged
    """

    __slots__ = ("_values", "_labels")

    def __init__(self, values: Sequence[int], labels: str):
        if len(values) != len(labels):
            raise ValueError(
                f"Expected {len(labels)} values for positions {labels!r}, got {len(values)}"
            )
        self._values: Tuple[int, ...] = tuple(values)
        self._labels = labels

    @classmethod
    def from_string(cls, value: str, labels: str) -> DigitVector:
        if len(value) != len(labels) or not _DIGITS.fullmatch(value):
            raise ValueError(f"Expected {len(labels)} digits, got {value!r}")
        return cls(parse_literal(value), labels)

    @property
    def labels(self) -> str:
        return self._labels

    @property
    def values(self) -> Tuple[int, ...]:
        return self._values

    def _index(self, key: Union[int, str]) -> int:
        if isinstance(key, str):
            index = self._labels.find(key)
            if index < 0:
                raise KeyError(f"Unknown position {key!r}, expected one of {self._labels!r}")
            return index
        if not -len(self._values) <= key < len(self._values):
            raise IndexError(f"Position {key} out of range")
        return key if key >= 0 else key + len(self._values)

    def __getitem__(self, key: Union[int, str]) -> int:
        return self._values[self._index(key)]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DigitVector):
            return NotImplemented
        return self._values == other._values and self._labels == other._labels

    def __hash__(self) -> int:
        return hash((self._values, self._labels))

    def __repr__(self) -> str:
        return f"DigitVector({self.as_string()!r}, labels={self._labels!r})"

    def as_string(self) -> str:
        """Render the vector back to its literal form."""
        if all(0 <= v <= 9 for v in self._values):
            return "".join(str(v) for v in self._values)
        return ",".join(str(v) for v in self._values)

    def pair(self, first: str, second: str) -> str:
        """Two positions rendered as a string, e.g. ``pair("g", "h") == "03"``."""
        return f"{self[first]}{self[second]}"

    def replace(self, key: Union[int, str], value: int) -> DigitVector:
        """Return a copy with a single position overwritten."""
        values = list(self._values)
        values[self._index(key)] = value
        return DigitVector(values, self._labels)

    def overwrite(self, literal: str, start: Union[int, str] = 0) -> DigitVector:
        """
        Return a copy with consecutive positions overwritten from a literal.

        The literal may be a digit string or a comma list (see
        :func:`parse_literal`); positions not covered keep their values.
        """
        replacement = parse_literal(literal)
        offset = self._index(start)
        if offset + len(replacement) > len(self._values):
            raise ValueError(
                f"Literal {literal!r} does not fit from position {start!r}"
            )
        values = list(self._values)
        values[offset:offset + len(replacement)] = replacement
        return DigitVector(values, self._labels)


def sort_code_vector(sort_code: str) -> DigitVector:
    """Decompose a 6-digit sort code into positions u..z."""
    return DigitVector.from_string(sort_code, SORT_CODE_LABELS)


def account_vector(account_number: str) -> DigitVector:
    """Decompose an 8-digit account number into positions a..h."""
    return DigitVector.from_string(account_number, ACCOUNT_LABELS)
