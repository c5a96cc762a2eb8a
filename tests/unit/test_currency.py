"""
Tests for the ISO 4217 currency registry and the Currency value object.

Currency codes are validated at the domain boundary.
"""

import pytest

from erp_kernel.domain.currency import CurrencyRegistry
from erp_kernel.domain.values import Currency
from erp_kernel.exceptions import CurrencyError, InvalidCurrencyError


class TestCurrencyRegistry:
    """Lookup and validation of registered codes."""

    def test_valid_currency_codes_accepted(self):
        for code in ["USD", "EUR", "GBP", "JPY", "CHF", "CAD", "AUD"]:
            assert CurrencyRegistry.is_valid(code)

    def test_lookup_is_case_and_whitespace_insensitive(self):
        assert CurrencyRegistry.is_valid("eur")
        assert CurrencyRegistry.is_valid(" CHF ")
        assert CurrencyRegistry.get_info("usd").code == "USD"

    def test_invalid_currency_codes_rejected(self):
        for code in ["XXY", "ABC", "123", "US", "USDD", "", "X", None]:
            assert not CurrencyRegistry.is_valid(code)

    def test_unknown_code_has_no_info(self):
        assert CurrencyRegistry.get_info("ABC") is None

    def test_all_codes(self):
        codes = CurrencyRegistry.all_codes()
        assert "EUR" in codes
        assert "CHF" in codes
        assert all(len(code) == 3 for code in codes)


class TestCurrencyValueObject:
    """Currency construction."""

    def test_normalizes_code(self):
        assert Currency("eur").code == "EUR"
        assert Currency(" chf ").code == "CHF"

    def test_invalid_code_raises(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            Currency("XYZ")
        assert exc_info.value.currency == "XYZ"
        assert exc_info.value.code == "INVALID_CURRENCY"

    def test_invalid_code_is_value_error_and_currency_error(self):
        with pytest.raises(ValueError):
            Currency("XYZ")
        with pytest.raises(CurrencyError):
            Currency("XYZ")

    def test_str_and_equality(self):
        assert str(Currency("EUR")) == "EUR"
        assert Currency("eur") == Currency("EUR")
