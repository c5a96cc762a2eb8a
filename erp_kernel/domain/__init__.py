"""Pure domain value types shared by every ERP module."""

from erp_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from erp_kernel.domain.values import Currency, Money, Quantity

__all__ = [
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "Money",
    "Quantity",
]
