"""
Test configuration for sortcheck.

Provides rule table builders for exercising individual exception codes with
purpose-built tables, and resets process-wide state (settings cache, root
logger handlers) around every test.
"""

import logging

import pytest

from sortcheck.config import get_settings
from sortcheck.core.preprocess import ExceptionPreprocessor
from sortcheck.core.rules import RuleTable, parse_rules
from sortcheck.core.session import ValidationSession
from sortcheck.core.validator import SortCodeValidator
from sortcheck.logging import DevelopmentFormatter, JSONFormatter


# =============================================================================
# WEIGHT ROWS
# =============================================================================

def build_row(method: str, weights: str, exception: int = 0, start: str = "000000", end: str = "000099") -> str:
    """Build one weight table line covering ``start``..``end``."""
    line = f"{start} {end} {method} {weights}"
    if exception:
        line += f" {exception}"
    return line


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def reset_global_state():
    """Clear cached settings and drop log handlers installed by setup_logging."""
    root = logging.getLogger()
    level = root.level
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (JSONFormatter, DevelopmentFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def row():
    """Factory: method, weights and exception -> weight table line."""
    return build_row


@pytest.fixture
def make_table():
    """Factory: weight table lines -> RuleTable."""
    def _make(*lines: str) -> RuleTable:
        return RuleTable(parse_rules(lines, source="<test>"), source="<test>")
    return _make


@pytest.fixture
def make_session(make_table):
    """Factory: weight table lines (and substitutions) -> ValidationSession."""
    def _make(*lines: str, substitutions=None) -> ValidationSession:
        return ValidationSession(make_table(*lines), ExceptionPreprocessor(substitutions))
    return _make


@pytest.fixture
def make_validator(make_table):
    """Factory: weight table lines (and substitutions) -> SortCodeValidator."""
    def _make(*lines: str, substitutions=None) -> SortCodeValidator:
        return SortCodeValidator(rule_table=make_table(*lines), substitutions=substitutions or {})
    return _make


@pytest.fixture
def validator():
    """Validator over the bundled tables."""
    return SortCodeValidator()
