"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the value types for monetary and quantity computations:
    Currency, Money and Quantity. These replace primitive types (Decimal,
    str) wherever amounts or product quantities appear in domain logic.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every module. No outward dependencies except
    erp_kernel.domain.currency (CurrencyRegistry) and erp_kernel.exceptions.

Invariants enforced:
    - Money always pairs a Decimal amount with a registered Currency.
    - Arithmetic and comparison between two Money values require the same
      currency; mixing raises CurrencyMismatchError.
    - Quantity arithmetic requires the same unit of measure.

Failure modes:
    - InvalidCurrencyError on unknown currency codes
    - TypeError when a float is passed as an amount
    - CurrencyMismatchError when Money operations mix currencies
    - ValueError when Quantity operations mix units
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from erp_kernel.domain.currency import CurrencyRegistry
from erp_kernel.exceptions import CurrencyMismatchError, InvalidCurrencyError

_ZERO = Decimal("0")


def _to_decimal(value: object, what: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError(f"{what} must not be a float: {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid {what}: {value}") from e


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Contract:
        Wraps a three-letter ISO 4217 code, normalized to upper case and
        validated against CurrencyRegistry on construction.

    Non-goals:
        - Does NOT perform currency conversion.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if not CurrencyRegistry.is_valid(normalized):
            raise InvalidCurrencyError(str(self.code))
        object.__setattr__(self, "code", normalized)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency -- they are never separated.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount is always a Decimal (never float)
        - Arithmetic operations enforce the same-currency constraint

    Non-goals:
        - Does NOT perform currency conversion
        - Does NOT round; amounts keep the precision they were given
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount, "amount"))

        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """
        Factory method for creating Money.

        Args:
            amount: The monetary amount (Decimal, str or int -- never float).
            currency: ISO 4217 currency code or Currency object.

        Raises:
            TypeError: If amount is a float.
            InvalidCurrencyError: If the currency code is not registered.
        """
        return cls(amount=_to_decimal(amount, "amount"), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=_ZERO, currency=currency)

    @staticmethod
    def common_currency_of_all(*amounts: Money) -> Currency:
        """
        Return the currency shared by all given amounts.

        Raises:
            ValueError: If no amount is given.
            CurrencyMismatchError: If two amounts disagree on currency.
        """
        if not amounts:
            raise ValueError("At least one amount is required")
        currency = amounts[0].currency
        for other in amounts[1:]:
            if other.currency != currency:
                raise CurrencyMismatchError(currency.code, other.currency.code)
        return currency

    @property
    def signum(self) -> int:
        """-1, 0 or 1 depending on the sign of the amount."""
        if self.amount > _ZERO:
            return 1
        if self.amount < _ZERO:
            return -1
        return 0

    @property
    def is_zero(self) -> bool:
        return self.amount == _ZERO

    @property
    def is_positive(self) -> bool:
        return self.amount > _ZERO

    @property
    def is_negative(self) -> bool:
        return self.amount < _ZERO

    def negate(self) -> Money:
        return -self

    def to_zero(self) -> Money:
        """Zero of the same currency; returns self if already zero."""
        return self if self.is_zero else Money.zero(self.currency)

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


@dataclass(frozen=True, slots=True)
class Quantity:
    """
    Product quantity with unit of measure.

    Contract:
        Pairs a Decimal value with its unit. Used for the CU storage
        quantities of handling units.

    Non-goals:
        - Does NOT perform unit conversion
    """

    value: Decimal
    unit: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _to_decimal(self.value, "quantity value"))
        if not self.unit or not self.unit.strip():
            raise ValueError("Quantity unit is required")
        object.__setattr__(self, "unit", self.unit.strip())

    @classmethod
    def of(cls, value: Decimal | str | int, unit: str) -> Quantity:
        return cls(value=_to_decimal(value, "quantity value"), unit=unit)

    @classmethod
    def zero(cls, unit: str) -> Quantity:
        return cls(value=_ZERO, unit=unit)

    @property
    def is_zero(self) -> bool:
        return self.value == _ZERO

    def _check_unit(self, other: Quantity, verb: str) -> None:
        if self.unit != other.unit:
            raise ValueError(
                f"Cannot {verb} Quantity with different units: {self.unit} and {other.unit}"
            )

    def __add__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_unit(other, "add")
        return Quantity(value=self.value + other.value, unit=self.unit)

    def __sub__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_unit(other, "subtract")
        return Quantity(value=self.value - other.value, unit=self.unit)

    def __lt__(self, other: Quantity) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_unit(other, "compare")
        return self.value < other.value

    def __le__(self, other: Quantity) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        self._check_unit(other, "compare")
        return self.value <= other.value

    def __str__(self) -> str:
        return f"{self.value} {self.unit}"

    def __repr__(self) -> str:
        return f"Quantity({self.value!r}, {self.unit!r})"
