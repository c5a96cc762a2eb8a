"""
erp_modules.handling_units.catalog -- Packing-instruction master data lookup.

Responsibility:
    Answers which TU PI item products fit a product (optionally restricted
    to a business partner) and which LU PI items take a given TU packing
    instruction, and resolves PI item (product) ids chosen by the user.

Architecture position:
    Modules layer.  ``PackingInstructionCatalog`` is the structural protocol
    the process service and the transform engine consume;
    ``InMemoryPackingInstructionCatalog`` is the in-process implementation.

Failure modes:
    - PackingInstructionNotFoundError for unknown ids.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from erp_kernel.exceptions import PackingInstructionNotFoundError
from erp_modules.handling_units.models import (
    PackingInstruction,
    PIItem,
    PIItemProduct,
    Product,
)


@runtime_checkable
class PackingInstructionCatalog(Protocol):
    def retrieve_tu_pi_item_products(
        self, product: Product, bpartner_id: int | None
    ) -> list[PIItemProduct]: ...

    def retrieve_lu_pi_items(self, included_pi: PackingInstruction) -> list[PIItem]: ...

    def get_pi_item_product(self, pi_item_product_id: int) -> PIItemProduct: ...

    def get_pi_item(self, pi_item_id: int) -> PIItem: ...


class InMemoryPackingInstructionCatalog:
    """Catalog over lists of master-data records."""

    def __init__(
        self,
        pi_item_products: Iterable[PIItemProduct] = (),
        pi_items: Iterable[PIItem] = (),
    ):
        self._pi_item_products = {p.pi_item_product_id: p for p in pi_item_products}
        self._pi_items = {item.pi_item_id: item for item in pi_items}

    def retrieve_tu_pi_item_products(
        self, product: Product, bpartner_id: int | None
    ) -> list[PIItemProduct]:
        """Active item products for ``product``; partner-less ones match any partner."""
        return [
            p
            for p in self._pi_item_products.values()
            if p.is_active
            and p.product_id == product.product_id
            and (p.bpartner_id is None or p.bpartner_id == bpartner_id)
        ]

    def retrieve_lu_pi_items(self, included_pi: PackingInstruction) -> list[PIItem]:
        # Inactive items are returned too; the lookup filters them.
        return [
            item
            for item in self._pi_items.values()
            if item.included_pi.pi_id == included_pi.pi_id
        ]

    def get_pi_item_product(self, pi_item_product_id: int) -> PIItemProduct:
        try:
            return self._pi_item_products[pi_item_product_id]
        except KeyError:
            raise PackingInstructionNotFoundError(
                "PI item product", pi_item_product_id
            ) from None

    def get_pi_item(self, pi_item_id: int) -> PIItem:
        try:
            return self._pi_items[pi_item_id]
        except KeyError:
            raise PackingInstructionNotFoundError("PI item", pi_item_id) from None
