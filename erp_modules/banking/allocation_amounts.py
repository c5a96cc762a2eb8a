"""
Allocation Amounts (``erp_modules.banking.allocation_amounts``).

Responsibility
--------------
Immutable decomposition of an allocated payment into five buckets: the
amount actually paid, the discount granted, the amount written off, the
invoice processing fee and the bank fee.  Payment reconciliation moves
money between these buckets and sums them up; it never mutates an
instance.

Architecture
------------
Layer: **Modules** -- pure value object.  Depends only on
``erp_kernel.domain.values`` (Money / Currency).

Invariants
----------
- At least one bucket is supplied at construction; the others default to
  zero of the supplied bucket's currency.
- All five buckets share one currency, exposed as ``currency``.
- Every operation returns ``self`` when it would not change anything,
  otherwise a new instance.  Equality and hashing are structural.

Failure Modes
-------------
- ``MissingAllocationAmountError`` when no bucket is supplied
  (use ``AllocationAmounts.zero(currency)`` instead).
- ``CurrencyMismatchError`` when buckets disagree on currency, or when
  combining instances of different currencies.

Usage::

    amounts = AllocationAmounts(
        pay_amt=Money.of("90.00", "EUR"),
        discount_amt=Money.of("10.00", "EUR"),
    )
    amounts.total_amt              # Money(100.00, EUR)
    amounts.move_pay_amt_to_write_off()
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from erp_kernel.domain.values import Currency, Money
from erp_kernel.exceptions import CurrencyMismatchError, MissingAllocationAmountError

_BUCKETS = (
    "pay_amt",
    "discount_amt",
    "write_off_amt",
    "invoice_processing_fee",
    "bank_fee_amt",
)


@dataclass(frozen=True)
class AllocationAmounts:
    """
    Pay, discount, write-off, invoice processing fee and bank fee amounts.

    Contract:
        Construct with any non-empty subset of the five buckets (keyword
        arguments act as the builder).  Unset buckets become zero.

    Guarantees:
        - All buckets are ``Money`` in ``currency`` after construction.
        - Instances are never mutated.
    """

    pay_amt: Money | None = None
    discount_amt: Money | None = None
    write_off_amt: Money | None = None
    invoice_processing_fee: Money | None = None
    bank_fee_amt: Money | None = None
    currency: Currency = field(init=False)

    def __post_init__(self) -> None:
        first_non_null = next(
            (getattr(self, name) for name in _BUCKETS if getattr(self, name) is not None),
            None,
        )
        if first_non_null is None:
            raise MissingAllocationAmountError()

        zero = first_non_null.to_zero()
        for name in _BUCKETS:
            if getattr(self, name) is None:
                object.__setattr__(self, name, zero)

        currency = Money.common_currency_of_all(*(getattr(self, name) for name in _BUCKETS))
        object.__setattr__(self, "currency", currency)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls, currency: Currency | str) -> AllocationAmounts:
        """All five buckets zero in the given currency."""
        zero = Money.zero(currency)
        return cls(pay_amt=zero, discount_amt=zero, write_off_amt=zero)

    @classmethod
    def of_pay_amt(cls, pay_amt: Money) -> AllocationAmounts:
        return cls(pay_amt=pay_amt)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def total_amt(self) -> Money:
        """Sum of all five buckets."""
        return (
            self.pay_amt
            + self.discount_amt
            + self.write_off_amt
            + self.invoice_processing_fee
            + self.bank_fee_amt
        )

    @property
    def is_zero(self) -> bool:
        return all(getattr(self, name).signum == 0 for name in _BUCKETS)

    # ------------------------------------------------------------------
    # Single bucket updates
    # ------------------------------------------------------------------

    def _with(self, name: str, value: Money) -> AllocationAmounts:
        if getattr(self, name) == value:
            return self
        return replace(self, **{name: value})

    def with_pay_amt(self, pay_amt: Money) -> AllocationAmounts:
        return self._with("pay_amt", pay_amt)

    def with_zero_pay_amt(self) -> AllocationAmounts:
        return self.with_pay_amt(self.pay_amt.to_zero())

    def add_pay_amt(self, pay_amt_to_add: Money) -> AllocationAmounts:
        return self.with_pay_amt(self.pay_amt + pay_amt_to_add)

    def with_discount_amt(self, discount_amt: Money) -> AllocationAmounts:
        return self._with("discount_amt", discount_amt)

    def add_discount_amt(self, discount_amt_to_add: Money) -> AllocationAmounts:
        return self.with_discount_amt(self.discount_amt + discount_amt_to_add)

    def with_write_off_amt(self, write_off_amt: Money) -> AllocationAmounts:
        return self._with("write_off_amt", write_off_amt)

    def add_write_off_amt(self, write_off_amt_to_add: Money) -> AllocationAmounts:
        return self.with_write_off_amt(self.write_off_amt + write_off_amt_to_add)

    def with_invoice_processing_fee(self, invoice_processing_fee: Money) -> AllocationAmounts:
        return self._with("invoice_processing_fee", invoice_processing_fee)

    def with_bank_fee_amt(self, bank_fee_amt: Money) -> AllocationAmounts:
        return self._with("bank_fee_amt", bank_fee_amt)

    # ------------------------------------------------------------------
    # Moving the pay amount
    # ------------------------------------------------------------------

    def move_pay_amt_to_discount(self) -> AllocationAmounts:
        """Book the whole pay amount as discount; no-op if nothing is paid."""
        if self.pay_amt.signum == 0:
            return self
        return replace(
            self,
            pay_amt=self.pay_amt.to_zero(),
            discount_amt=self.discount_amt + self.pay_amt,
        )

    def move_pay_amt_to_write_off(self) -> AllocationAmounts:
        """Book the whole pay amount as write-off; no-op if nothing is paid."""
        if self.pay_amt.signum == 0:
            return self
        return replace(
            self,
            pay_amt=self.pay_amt.to_zero(),
            write_off_amt=self.write_off_amt + self.pay_amt,
        )

    # ------------------------------------------------------------------
    # Componentwise arithmetic
    # ------------------------------------------------------------------

    def _check_currency(self, other: AllocationAmounts) -> None:
        if other.currency != self.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)

    def add(self, other: AllocationAmounts) -> AllocationAmounts:
        self._check_currency(other)
        if other.is_zero:
            return self
        return AllocationAmounts(
            **{name: getattr(self, name) + getattr(other, name) for name in _BUCKETS}
        )

    def subtract(self, other: AllocationAmounts) -> AllocationAmounts:
        self._check_currency(other)
        if other.is_zero:
            return self
        return AllocationAmounts(
            **{name: getattr(self, name) - getattr(other, name) for name in _BUCKETS}
        )

    def negate(self) -> AllocationAmounts:
        if self.is_zero:
            return self
        return AllocationAmounts(**{name: -getattr(self, name) for name in _BUCKETS})

    def negate_if(self, condition: bool) -> AllocationAmounts:
        return self.negate() if condition else self

    def to_zero(self) -> AllocationAmounts:
        return self if self.is_zero else AllocationAmounts.zero(self.currency)

    def __str__(self) -> str:
        amounts = ", ".join(f"{name}={getattr(self, name).amount}" for name in _BUCKETS)
        return f"AllocationAmounts{{currency={self.currency.code}, {amounts}}}"
