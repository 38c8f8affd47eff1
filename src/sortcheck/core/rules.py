"""
Weight table and sort code substitution table.

The weight table is the published ``valacdos.txt`` layout, one rule per line:

    start  end  method  u v w x y z a b c d e f g h  [exception]

The substitution table is the published ``scsubtab.txt`` layout, used by
exception 5:

    original  substitute

Both tables are loaded once and never mutated afterwards. A RuleTable is
safe to share between threads.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..exceptions import RuleTableError
from .constants import (
    DEFAULT_RULES_FILE,
    DEFAULT_SUBSTITUTIONS_FILE,
    SORT_CODE_LENGTH,
    WEIGHT_COUNT,
)
from .types import ExceptionCode, Method, Rule

logger = logging.getLogger(__name__)

_SORT_CODE = re.compile(rf"[0-9]{{{SORT_CODE_LENGTH}}}")

__all__ = [
    "RuleTable",
    "parse_rules",
    "parse_substitutions",
    "load_rule_table",
    "load_substitutions",
    "default_rule_table",
    "default_substitutions",
]


def _data_lines(lines: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    """Yield (line_number, fields) for every non-blank, non-comment line."""
    for line_number, line in enumerate(lines, start=1):
        stripped = line.split("#", 1)[0].strip()
        if stripped:
            yield line_number, stripped.split()


def _parse_sort_code(value: str, source: str, line_number: int) -> int:
    if not _SORT_CODE.fullmatch(value):
        raise RuleTableError(
            f"Invalid sort code {value!r}", source=source, line_number=line_number
        )
    return int(value)


def parse_rules(lines: Iterable[str], source: str = "<rules>") -> List[Rule]:
    """
    Parse weight table lines into rules, preserving table order.

    Args:
        lines: Lines of a ``valacdos.txt``-style file
        source: Name used in error messages

    Raises:
        RuleTableError: If a line has the wrong shape or invalid values
    """
    rules: List[Rule] = []
    for line_number, fields in _data_lines(lines):
        if len(fields) not in (3 + WEIGHT_COUNT, 4 + WEIGHT_COUNT):
            raise RuleTableError(
                f"Expected {3 + WEIGHT_COUNT} or {4 + WEIGHT_COUNT} columns, got {len(fields)}",
                source=source,
                line_number=line_number,
            )

        start = _parse_sort_code(fields[0], source, line_number)
        end = _parse_sort_code(fields[1], source, line_number)

        try:
            method = Method(fields[2].upper())
        except ValueError:
            raise RuleTableError(
                f"Unknown checking method {fields[2]!r}",
                source=source,
                line_number=line_number,
            ) from None

        try:
            weights = tuple(int(w) for w in fields[3:3 + WEIGHT_COUNT])
            exception = ExceptionCode.NONE
            if len(fields) > 3 + WEIGHT_COUNT:
                exception = ExceptionCode.from_value(int(fields[3 + WEIGHT_COUNT]))
            rule = Rule(start=start, end=end, method=method, weights=weights, exception=exception)
        except ValueError as e:
            raise RuleTableError(str(e), source=source, line_number=line_number) from e

        rules.append(rule)
    return rules


def parse_substitutions(lines: Iterable[str], source: str = "<substitutions>") -> Mapping[str, str]:
    """
    Parse substitution table lines into a read-only mapping.

    Raises:
        RuleTableError: If a line does not hold exactly two sort codes
    """
    substitutions = {}
    for line_number, fields in _data_lines(lines):
        if len(fields) != 2:
            raise RuleTableError(
                f"Expected 2 columns, got {len(fields)}",
                source=source,
                line_number=line_number,
            )
        original, substitute = fields
        _parse_sort_code(original, source, line_number)
        _parse_sort_code(substitute, source, line_number)
        substitutions[original] = substitute
    return MappingProxyType(substitutions)


class RuleTable:
    """
    Immutable, ordered collection of weighting rules.

    Usage:
        table = load_rule_table()
        for rule in table.rules_matching("871427"):
            print(rule.method, rule.exception)
    """

    def __init__(self, rules: Iterable[Rule], source: Optional[str] = None):
        self._rules: Tuple[Rule, ...] = tuple(rules)
        self.source = source

    def rules_matching(self, sort_code: Union[str, int]) -> List[Rule]:
        """
        Return every rule whose range contains the sort code, in table order.

        An empty list means the sort code is not covered by the table, which
        is a legitimate outcome rather than an error.
        """
        numeric = int(sort_code)
        return [rule for rule in self._rules if rule.contains(numeric)]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"RuleTable(rules={len(self._rules)}, source={self.source!r})"


def load_rule_table(path: Optional[Path] = None) -> RuleTable:
    """
    Load a weight table from disk.

    Args:
        path: Table file; the bundled table when omitted

    Raises:
        RuleTableError: If the file cannot be read or parsed
    """
    path = Path(path) if path else DEFAULT_RULES_FILE
    try:
        with open(path, encoding="ascii") as f:
            rules = parse_rules(f, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise RuleTableError(f"Cannot read weight table: {e}", source=str(path)) from e

    logger.info(
        f"Loaded {len(rules)} modulus rules from {path}",
        extra={"rule_count": len(rules), "table": str(path)},
    )
    return RuleTable(rules, source=str(path))


def load_substitutions(path: Optional[Path] = None) -> Mapping[str, str]:
    """
    Load an exception 5 substitution table from disk.

    Raises:
        RuleTableError: If the file cannot be read or parsed
    """
    path = Path(path) if path else DEFAULT_SUBSTITUTIONS_FILE
    try:
        with open(path, encoding="ascii") as f:
            substitutions = parse_substitutions(f, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise RuleTableError(f"Cannot read substitution table: {e}", source=str(path)) from e

    logger.info(
        f"Loaded {len(substitutions)} sort code substitutions from {path}",
        extra={"substitution_count": len(substitutions), "table": str(path)},
    )
    return substitutions


@lru_cache(maxsize=1)
def default_rule_table() -> RuleTable:
    """Get the cached bundled weight table."""
    return load_rule_table()


@lru_cache(maxsize=1)
def default_substitutions() -> Mapping[str, str]:
    """Get the cached bundled substitution table."""
    return load_substitutions()
