"""
ERP Kernel

Shared foundation for the ERP modules:
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging with request-scoped context
- Currency, Money and Quantity value objects (Decimal-only arithmetic)
"""

__version__ = "0.1.0"
