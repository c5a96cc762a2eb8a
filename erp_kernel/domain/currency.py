"""Currency -- ISO 4217 registry of the currencies the ERP books in."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies the ERP books in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        info.code: info
        for info in (
            # Euro area and European neighbours
            CurrencyInfo("EUR", 2, "Euro"),
            CurrencyInfo("CHF", 2, "Swiss Franc"),
            CurrencyInfo("GBP", 2, "Pound Sterling"),
            CurrencyInfo("DKK", 2, "Danish Krone"),
            CurrencyInfo("SEK", 2, "Swedish Krona"),
            CurrencyInfo("NOK", 2, "Norwegian Krone"),
            CurrencyInfo("PLN", 2, "Polish Zloty"),
            CurrencyInfo("CZK", 2, "Czech Koruna"),
            CurrencyInfo("HUF", 2, "Hungarian Forint"),
            CurrencyInfo("RON", 2, "Romanian Leu"),
            CurrencyInfo("BGN", 2, "Bulgarian Lev"),
            CurrencyInfo("ISK", 0, "Icelandic Krona"),
            CurrencyInfo("TRY", 2, "Turkish Lira"),
            # Americas
            CurrencyInfo("USD", 2, "US Dollar"),
            CurrencyInfo("CAD", 2, "Canadian Dollar"),
            CurrencyInfo("MXN", 2, "Mexican Peso"),
            CurrencyInfo("BRL", 2, "Brazilian Real"),
            CurrencyInfo("CLP", 0, "Chilean Peso"),
            # Asia / Pacific
            CurrencyInfo("JPY", 0, "Japanese Yen"),
            CurrencyInfo("KRW", 0, "South Korean Won"),
            CurrencyInfo("CNY", 2, "Chinese Yuan"),
            CurrencyInfo("INR", 2, "Indian Rupee"),
            CurrencyInfo("SGD", 2, "Singapore Dollar"),
            CurrencyInfo("AUD", 2, "Australian Dollar"),
            CurrencyInfo("NZD", 2, "New Zealand Dollar"),
            # Middle East / Africa
            CurrencyInfo("AED", 2, "UAE Dirham"),
            CurrencyInfo("BHD", 3, "Bahraini Dinar"),
            CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
            CurrencyInfo("ZAR", 2, "South African Rand"),
        )
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is registered."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES.keys())
