"""
Tests for per-exception preprocessing.
"""

import pytest

from sortcheck.core.digits import account_vector, sort_code_vector
from sortcheck.core.preprocess import (
    ExceptionPreprocessor,
    Outcome,
    handles,
    registered_codes,
    substitute_sort_code,
)
from sortcheck.core.rules import parse_rules
from sortcheck.core.types import ExceptionCode

BASE_WEIGHTS = "0 0 1 2 5 3 6 4 8 7 10 9 3 1"


def rule(exception, method="MOD11", weights=BASE_WEIGHTS):
    return parse_rules([f"000000 999999 {method} {weights} {exception}"])[0]


@pytest.fixture
def preprocessor():
    return ExceptionPreprocessor({"938600": "938611"})


def apply(preprocessor, exception, sort_code="871427", account="12345678"):
    return preprocessor.apply(rule(exception), sort_code_vector(sort_code), account_vector(account))


# =============================================================================
# REGISTRY
# =============================================================================

class TestRegistry:
    """Tests for the handler registry."""

    def test_every_exception_code_has_a_handler(self):
        assert registered_codes() == frozenset(ExceptionCode)

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already handled"):
            @handles(ExceptionCode.NONE)
            def duplicate(work, substitutions):
                return work


# =============================================================================
# HANDLERS
# =============================================================================

class TestUnchangedCodes:
    """Codes that only affect the checksum or the combination policy."""

    @pytest.mark.parametrize("exception", [0, 1, 4, 11, 12, 13, 14])
    def test_working_set_untouched(self, preprocessor, exception):
        work = apply(preprocessor, exception)
        assert work.outcome is Outcome.PROCEED
        assert work.rule == rule(exception)
        assert work.sort_code.as_string() == "871427"
        assert work.account.as_string() == "12345678"


class TestWeightOverrides:
    """Exceptions 2, 7 and 10 override weights on a copy of the rule."""

    def test_exception_2_a_zero_keeps_weights(self, preprocessor):
        work = apply(preprocessor, 2, account="02345678")
        assert work.rule.weights == rule(2).weights

    def test_exception_2_g_not_9(self, preprocessor):
        work = apply(preprocessor, 2, account="12345678")
        assert work.rule.weights == (0, 0, 1, 2, 5, 3, 6, 4, 8, 7, 10, 9, 3, 1)

    def test_exception_2_g_not_9_overrides_other_weights(self, preprocessor):
        original = rule(2, weights="0 0 0 0 0 0 8 7 6 5 4 3 2 1")
        work = preprocessor.apply(original, sort_code_vector("309070"), account_vector("12345678"))
        assert work.rule.weights == (0, 0, 1, 2, 5, 3, 6, 4, 8, 7, 10, 9, 3, 1)
        assert original.weights == (0, 0, 0, 0, 0, 0, 8, 7, 6, 5, 4, 3, 2, 1)

    def test_exception_2_g_is_9(self, preprocessor):
        work = apply(preprocessor, 2, account="12345698")
        assert work.rule.weights == (0, 0, 0, 0, 0, 0, 0, 0, 8, 7, 10, 9, 3, 1)

    def test_exception_7_g_is_9(self, preprocessor):
        work = apply(preprocessor, 7, account="99345694")
        assert work.rule.weights == (0, 0, 0, 0, 0, 0, 0, 0, 8, 7, 10, 9, 3, 1)
        assert rule(7).weights == (0, 0, 1, 2, 5, 3, 6, 4, 8, 7, 10, 9, 3, 1)

    def test_exception_7_g_not_9(self, preprocessor):
        work = apply(preprocessor, 7, account="99345684")
        assert work.rule.weights == rule(7).weights

    @pytest.mark.parametrize("account", ["09123496", "99123496"])
    def test_exception_10_ab_09_or_99_and_g_is_9(self, preprocessor, account):
        work = apply(preprocessor, 10, account=account)
        assert work.rule.weights[:8] == (0,) * 8
        assert work.rule.weights[8:] == (8, 7, 10, 9, 3, 1)

    @pytest.mark.parametrize("account", ["09123486", "19123496"])
    def test_exception_10_not_applicable(self, preprocessor, account):
        work = apply(preprocessor, 10, account=account)
        assert work.rule.weights == rule(10).weights


class TestSortCodeSubstitution:
    """Exceptions 5, 8 and 9 replace the working sort code."""

    def test_exception_8(self, preprocessor):
        work = apply(preprocessor, 8, sort_code="090128")
        assert work.sort_code.as_string() == "090126"

    def test_exception_9(self, preprocessor):
        work = apply(preprocessor, 9, sort_code="309070")
        assert work.sort_code.as_string() == "309634"

    def test_exception_5_substitution_found(self, preprocessor):
        work = apply(preprocessor, 5, sort_code="938600")
        assert work.sort_code.as_string() == "938611"

    def test_exception_5_substitution_absent(self, preprocessor):
        work = apply(preprocessor, 5, sort_code="938063")
        assert work.sort_code.as_string() == "938063"

    def test_substitution_is_idempotent(self):
        once = substitute_sort_code(sort_code_vector("090128"), "090126")
        twice = substitute_sort_code(once, "090126")
        assert once == twice

    def test_caller_vector_unchanged(self, preprocessor):
        sort_code = sort_code_vector("090128")
        preprocessor.apply(rule(8), sort_code, account_vector("12345678"))
        assert sort_code.as_string() == "090128"


class TestOutcomes:
    """Exceptions 3 and 6 decide whether the checksum runs at all."""

    @pytest.mark.parametrize("account", ["40000011", "59999988", "80000000"])
    def test_exception_6_foreign_currency_accepted(self, preprocessor, account):
        assert apply(preprocessor, 6, account=account).outcome is Outcome.ACCEPT

    @pytest.mark.parametrize("account", ["30000011", "90000011", "40000012"])
    def test_exception_6_other_accounts_checked(self, preprocessor, account):
        assert apply(preprocessor, 6, account=account).outcome is Outcome.PROCEED

    @pytest.mark.parametrize("account", ["12645678", "12945678"])
    def test_exception_3_skips_when_c_is_6_or_9(self, preprocessor, account):
        assert apply(preprocessor, 3, account=account).outcome is Outcome.SKIP

    def test_exception_3_checks_otherwise(self, preprocessor):
        assert apply(preprocessor, 3, account="12345678").outcome is Outcome.PROCEED


class TestExceptionPreprocessor:
    """Tests for the preprocessor object itself."""

    def test_substitutions_are_read_only(self):
        preprocessor = ExceptionPreprocessor({"938600": "938611"})
        with pytest.raises(TypeError):
            preprocessor.substitutions["938600"] = "000000"

    def test_defaults_to_no_substitutions(self):
        assert dict(ExceptionPreprocessor().substitutions) == {}
