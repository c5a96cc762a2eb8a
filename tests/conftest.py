"""
Pytest fixtures for the ERP test suite.

Provides:
- Structured logging configured for every test, plus a log capture fixture
- Master data (products, packing instructions) and a small HU tree builder
- In-memory transfer service, packing-instruction catalog and the
  HU transform process service wired together
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from erp_config import get_action_catalog
from erp_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from erp_modules.handling_units import (
    HandlingUnit,
    HUTransformService,
    HUUnitType,
    HUView,
    InMemoryHUTransferService,
    InMemoryPackingInstructionCatalog,
    PackingInstruction,
    PIItem,
    PIItemProduct,
    Product,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture erp_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, transform_service):
            transform_service.run(context, parameters)
            logs = captured_logs()
            assert any(r["message"] == "hu_transform_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("erp_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Handling unit master data
# =============================================================================


TOMATO = Product(product_id=100, name="Tomato", uom="PCE")
SALAD = Product(product_id=200, name="Salad", uom="PCE")

IFCO = PackingInstruction(pi_id=10, name="IFCO", unit_type=HUUnitType.TU)
CARTON = PackingInstruction(pi_id=11, name="Carton", unit_type=HUUnitType.TU)
PALLET = PackingInstruction(pi_id=20, name="Pallet", unit_type=HUUnitType.LU)
HALF_PALLET = PackingInstruction(pi_id=21, name="Half pallet", unit_type=HUUnitType.LU)

TOMATO_IFCO = PIItemProduct(
    pi_item_product_id=1000,
    name="IFCO x 10 Tomato",
    tu_pi=IFCO,
    product_id=TOMATO.product_id,
    qty_cu_per_tu=Decimal("10"),
)
TOMATO_CARTON = PIItemProduct(
    pi_item_product_id=1001,
    name="Carton x 4 Tomato",
    tu_pi=CARTON,
    product_id=TOMATO.product_id,
    qty_cu_per_tu=Decimal("4"),
)
SALAD_IFCO = PIItemProduct(
    pi_item_product_id=1002,
    name="IFCO x 6 Salad",
    tu_pi=IFCO,
    product_id=SALAD.product_id,
    qty_cu_per_tu=Decimal("6"),
)

PALLET_OF_IFCOS = PIItem(
    pi_item_id=2000,
    lu_pi=PALLET,
    included_pi=IFCO,
    qty_tu_per_lu=Decimal("4"),
)
HALF_PALLET_OF_IFCOS = PIItem(
    pi_item_id=2001,
    lu_pi=HALF_PALLET,
    included_pi=IFCO,
    qty_tu_per_lu=Decimal("2"),
)
PALLET_OF_CARTONS = PIItem(
    pi_item_id=2002,
    lu_pi=PALLET,
    included_pi=CARTON,
    qty_tu_per_lu=Decimal("20"),
)


class HUBuilder:
    """Creates handling units with increasing ids."""

    def __init__(self, first_id: int = 1):
        self._next_id = first_id

    def _id(self) -> int:
        hu_id = self._next_id
        self._next_id += 1
        return hu_id

    def cu(self, qty, product: Product = TOMATO, parent: HandlingUnit | None = None) -> HandlingUnit:
        hu = HandlingUnit(
            hu_id=self._id(),
            unit_type=HUUnitType.CU,
            product=product,
            qty=Decimal(str(qty)),
        )
        if parent is not None:
            parent.add_child(hu)
        return hu

    def tu(
        self,
        pi: PackingInstruction = IFCO,
        tu_count: int = 1,
        parent: HandlingUnit | None = None,
    ) -> HandlingUnit:
        hu = HandlingUnit(
            hu_id=self._id(),
            unit_type=HUUnitType.TU,
            pi=pi,
            tu_count=tu_count,
        )
        if parent is not None:
            parent.add_child(hu)
        return hu

    def lu(self, pi: PackingInstruction = PALLET) -> HandlingUnit:
        return HandlingUnit(hu_id=self._id(), unit_type=HUUnitType.LU, pi=pi)


@pytest.fixture
def hu_builder() -> HUBuilder:
    return HUBuilder()


@pytest.fixture
def pi_catalog() -> InMemoryPackingInstructionCatalog:
    return InMemoryPackingInstructionCatalog(
        pi_item_products=[TOMATO_IFCO, TOMATO_CARTON, SALAD_IFCO],
        pi_items=[PALLET_OF_IFCOS, HALF_PALLET_OF_IFCOS, PALLET_OF_CARTONS],
    )


@pytest.fixture
def action_catalog():
    return get_action_catalog()


def make_transform_service(view: HUView, pi_catalog, action_catalog) -> HUTransformService:
    return HUTransformService(
        transfer_service=InMemoryHUTransferService(view),
        pi_catalog=pi_catalog,
        action_catalog=action_catalog,
    )


def total_cu_qty(view: HUView, product: Product = TOMATO) -> Decimal:
    """Sum of all CU quantities of ``product`` in the view.

    CUs inside an aggregate TU hold the content of all its TUs.
    """
    return sum(
        (
            hu.qty
            for hu in view.stream_all_recursive()
            if hu.is_cu and hu.product == product
        ),
        Decimal("0"),
    )
