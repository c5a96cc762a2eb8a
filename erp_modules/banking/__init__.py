"""
Banking Module (``erp_modules.banking``).

Payment allocation value objects used while reconciling bank statement
lines and payments against open invoices.
"""

from erp_modules.banking.allocation_amounts import AllocationAmounts

__all__ = ["AllocationAmounts"]
