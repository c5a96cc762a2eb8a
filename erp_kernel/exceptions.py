"""
Typed Exception Hierarchy for the ERP Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers must be able to tell a user-recoverable condition (a missing process
parameter) from a configuration defect (an unknown action code) or a broken
domain invariant (mixed currencies) without parsing message strings.

Every exception therefore:
  1. Has its own class (catch by type, not by message)
  2. Carries a ``code`` class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (rendered by the structured logger)

Example:
    try:
        service.run(context, parameters)
    except FillMandatoryError as e:
        show_field_error(e.parameter_name)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ErpKernelError (base)
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- AllocationError
    |   +-- MissingAllocationAmountError
    |
    +-- ProcessError
    |   +-- FillMandatoryError
    |   +-- UnknownActionError
    |   +-- InvalidParameterValueError
    |
    +-- HandlingUnitError
    |   +-- HandlingUnitNotFoundError
    |   +-- PackingInstructionNotFoundError
    |   +-- InvalidHUSourceError
    |   +-- InvalidHUQuantityError
    |   +-- IncompatiblePackingInstructionError
    |
    +-- ConfigError
        +-- ActionCatalogOutOfSyncError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|--------------------------------------
Currency        | INVALID_CURRENCY              | Not a valid ISO 4217 code
                | CURRENCY_MISMATCH             | Mixed currencies in one operation
----------------|-------------------------------|--------------------------------------
Allocation      | ALLOCATION_AMOUNT_REQUIRED    | AllocationAmounts built from no amount
----------------|-------------------------------|--------------------------------------
Process         | FILL_MANDATORY                | Required process parameter missing
                | UNKNOWN_ACTION                | Action code outside the known set
                | INVALID_PARAMETER_VALUE       | Process parameter cannot be parsed
----------------|-------------------------------|--------------------------------------
Handling unit   | HANDLING_UNIT_NOT_FOUND       | HU id not in the working tree
                | PACKING_INSTRUCTION_NOT_FOUND | PI item (product) id unknown
                | INVALID_HU_SOURCE             | HU has the wrong unit type for a split
                | INVALID_HU_QUANTITY           | Quantity <= 0 or above the maximum
                | INCOMPATIBLE_PACKING          | PI / product does not match the HU
----------------|-------------------------------|--------------------------------------
Config          | ACTION_CATALOG_OUT_OF_SYNC    | Reference dictionary != action enum
"""

from __future__ import annotations

from decimal import Decimal


class ErpKernelError(Exception):
    """
    Base exception for all ERP kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "ERP_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(ErpKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError, ValueError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


class CurrencyMismatchError(CurrencyError, ValueError):
    """Attempted operation on mismatched currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, currency1: str, currency2: str):
        self.currency1 = currency1
        self.currency2 = currency2
        super().__init__(f"Currency mismatch: {currency1} vs {currency2}")


# Payment allocation exceptions


class AllocationError(ErpKernelError):
    """Base exception for payment allocation errors."""

    code: str = "ALLOCATION_ERROR"


class MissingAllocationAmountError(AllocationError):
    """AllocationAmounts was constructed without any amount."""

    code: str = "ALLOCATION_AMOUNT_REQUIRED"

    def __init__(self) -> None:
        super().__init__(
            "Provide at least one amount. If you want to create a ZERO "
            "instance, use AllocationAmounts.zero(currency)."
        )


# Process exceptions


class ProcessError(ErpKernelError):
    """Base exception for business process execution errors."""

    code: str = "PROCESS_ERROR"


class FillMandatoryError(ProcessError):
    """A mandatory process parameter was not provided."""

    code: str = "FILL_MANDATORY"

    def __init__(self, parameter_name: str):
        self.parameter_name = parameter_name
        super().__init__(f"Fill mandatory field: {parameter_name}")


class UnknownActionError(ProcessError):
    """Action code is not one of the known process actions."""

    code: str = "UNKNOWN_ACTION"

    def __init__(self, action: object):
        self.action = action
        super().__init__(f"Unknown action: {action!r}")


class InvalidParameterValueError(ProcessError):
    """A process parameter holds a value of the wrong form."""

    code: str = "INVALID_PARAMETER_VALUE"

    def __init__(self, parameter_name: str, value: object):
        self.parameter_name = parameter_name
        self.value = value
        super().__init__(f"Invalid value for {parameter_name}: {value!r}")


# Handling unit exceptions


class HandlingUnitError(ErpKernelError):
    """Base exception for handling unit errors."""

    code: str = "HANDLING_UNIT_ERROR"


class HandlingUnitNotFoundError(HandlingUnitError):
    """HU id does not exist in the working tree."""

    code: str = "HANDLING_UNIT_NOT_FOUND"

    def __init__(self, hu_id: int):
        self.hu_id = hu_id
        super().__init__(f"Handling unit {hu_id} not found")


class PackingInstructionNotFoundError(HandlingUnitError):
    """PI item product or PI item id is unknown to the catalog."""

    code: str = "PACKING_INSTRUCTION_NOT_FOUND"

    def __init__(self, kind: str, record_id: int):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class InvalidHUSourceError(HandlingUnitError):
    """HU has the wrong unit type for the requested operation."""

    code: str = "INVALID_HU_SOURCE"

    def __init__(self, hu_id: int, unit_type: str, expected: str):
        self.hu_id = hu_id
        self.unit_type = unit_type
        self.expected = expected
        super().__init__(
            f"Handling unit {hu_id} is a {unit_type}, expected {expected}"
        )


class InvalidHUQuantityError(HandlingUnitError):
    """Requested quantity is not positive or exceeds what the HU holds."""

    code: str = "INVALID_HU_QUANTITY"

    def __init__(self, hu_id: int, requested: Decimal, maximum: Decimal):
        self.hu_id = hu_id
        self.requested = requested
        self.maximum = maximum
        super().__init__(
            f"Invalid quantity {requested} for handling unit {hu_id} "
            f"(maximum {maximum})"
        )


class IncompatiblePackingInstructionError(HandlingUnitError):
    """Packing instruction does not fit the handling unit."""

    code: str = "INCOMPATIBLE_PACKING"

    def __init__(self, hu_id: int, reason: str):
        self.hu_id = hu_id
        self.reason = reason
        super().__init__(
            f"Packing instruction not applicable to handling unit {hu_id}: {reason}"
        )


# Configuration exceptions


class ConfigError(ErpKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class ActionCatalogOutOfSyncError(ConfigError):
    """Reference dictionary of action codes does not match the action enum."""

    code: str = "ACTION_CATALOG_OUT_OF_SYNC"

    def __init__(self, missing: tuple[str, ...], unknown: tuple[str, ...]):
        self.missing = missing
        self.unknown = unknown
        super().__init__(
            f"Action catalog out of sync: missing={list(missing)}, "
            f"unknown={list(unknown)}"
        )
