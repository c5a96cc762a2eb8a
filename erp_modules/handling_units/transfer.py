"""
erp_modules.handling_units.transfer -- HU transfer (split / move) primitives.

Responsibility:
    Performs the physical side of the HU transform actions on a working
    tree: splitting quantities off CUs, packing CUs into TUs, splitting TUs
    off aggregates and putting TUs onto LUs.  Each split returns the list of
    newly created HUs, possibly empty.

Architecture position:
    Modules layer.  ``HUTransferService`` is the collaborator protocol the
    process service calls; ``InMemoryHUTransferService`` implements it over
    an ``HUView``.  The full-quantity comparison comes from
    ``erp_engines.hu_transform.is_full_quantity`` so the engine and this
    service agree on when nothing needs splitting.

Invariants enforced:
    - Product quantity and TU counts are conserved by every split.
    - New containers honour their packing-instruction capacity; existing
      target TUs and LUs do not.
    - An aggregate TU (``tu_count > 1``) is split proportionally: taking
      ``n`` of its TUs moves ``n / tu_count`` of each CU it holds.
    - A source holding exactly the requested quantity is moved, not split.

Failure modes:
    - InvalidHUSourceError: source or target has the wrong unit type.
    - InvalidHUQuantityError: quantity not positive, above the maximum or
      a fractional number of TUs.
    - IncompatiblePackingInstructionError: PI item product is for another
      product, or the LU PI item does not take the TU's packing instruction.
"""

from __future__ import annotations

import itertools
from decimal import Decimal
from typing import Protocol, runtime_checkable

from erp_engines.hu_transform import is_full_quantity
from erp_kernel.exceptions import (
    IncompatiblePackingInstructionError,
    InvalidHUQuantityError,
    InvalidHUSourceError,
)
from erp_kernel.logging_config import get_logger
from erp_modules.handling_units.models import (
    HandlingUnit,
    HUUnitType,
    HUView,
    PIItem,
    PIItemProduct,
)

logger = get_logger("modules.handling_units.transfer")


@runtime_checkable
class HUTransferService(Protocol):
    def get_maximum_qty_cu(self, hu: HandlingUnit) -> Decimal: ...

    def get_maximum_qty_tu(self, hu: HandlingUnit) -> Decimal: ...

    def split_cu_to_new_cu(self, cu: HandlingUnit, qty_cu: Decimal) -> list[HandlingUnit]: ...

    def split_cu_to_existing_tu(
        self, cu: HandlingUnit, qty_cu: Decimal, tu: HandlingUnit
    ) -> list[HandlingUnit]: ...

    def split_cu_to_new_tus(
        self,
        cu: HandlingUnit,
        qty_cu: Decimal,
        pi_item_product: PIItemProduct,
        own_packing_materials: bool,
    ) -> list[HandlingUnit]: ...

    def split_tu_to_new_tus(
        self, tu: HandlingUnit, qty_tu: Decimal, own_packing_materials: bool
    ) -> list[HandlingUnit]: ...

    def split_tu_to_new_lus(
        self,
        tu: HandlingUnit,
        qty_tu: Decimal,
        pi_item: PIItem,
        own_packing_materials: bool,
    ) -> list[HandlingUnit]: ...

    def split_tu_to_existing_lu(
        self, tu: HandlingUnit, qty_tu: Decimal, lu: HandlingUnit
    ) -> list[HandlingUnit]: ...


def _require(hu: HandlingUnit, unit_type: HUUnitType) -> None:
    if hu.unit_type != unit_type:
        raise InvalidHUSourceError(hu.hu_id, hu.unit_type.value, unit_type.value)


def _check_quantity(hu: HandlingUnit, requested: Decimal, maximum: Decimal) -> None:
    if requested <= 0 or requested > maximum:
        raise InvalidHUQuantityError(hu.hu_id, requested, maximum)


def _check_tu_count(hu: HandlingUnit, requested: Decimal) -> int:
    maximum = Decimal(hu.tu_count)
    _check_quantity(hu, requested, maximum)
    if requested != requested.to_integral_value():
        raise InvalidHUQuantityError(hu.hu_id, requested, maximum)
    return int(requested)


class InMemoryHUTransferService:
    """
    Transfer service operating directly on an ``HUView``.

    New HU ids continue after the highest id in the view unless
    ``first_hu_id`` is given.
    """

    def __init__(self, view: HUView, first_hu_id: int | None = None):
        self._view = view
        if first_hu_id is None:
            first_hu_id = max((hu.hu_id for hu in view.stream_all_recursive()), default=0) + 1
        self._ids = itertools.count(first_hu_id)

    # -- maximum quantities ---------------------------------------------

    def get_maximum_qty_cu(self, hu: HandlingUnit) -> Decimal:
        """Product quantity held by ``hu`` (for a TU or LU, by all its CUs)."""
        return sum(
            (node.qty for node in hu.iter_recursive() if node.is_cu),
            Decimal("0"),
        )

    def get_maximum_qty_tu(self, hu: HandlingUnit) -> Decimal:
        """Number of TUs ``hu`` stands for; zero for anything but a TU."""
        if not hu.is_tu:
            return Decimal("0")
        return Decimal(hu.tu_count)

    # -- CU splits -------------------------------------------------------

    def split_cu_to_new_cu(self, cu: HandlingUnit, qty_cu: Decimal) -> list[HandlingUnit]:
        _require(cu, HUUnitType.CU)
        _check_quantity(cu, qty_cu, cu.qty)

        if is_full_quantity(qty_cu, cu.qty):
            # Nothing to split; a nested CU is only taken out of its TU.
            if not cu.is_top_level:
                self._make_top_level(cu)
            self._log("hu_split_cu_to_new_cu", cu, qty_cu, [])
            return []

        cu.qty -= qty_cu
        new_cu = self._new_cu(cu, qty_cu)
        self._view.add_top_level(new_cu)
        self._log("hu_split_cu_to_new_cu", cu, qty_cu, [new_cu])
        return [new_cu]

    def split_cu_to_existing_tu(
        self, cu: HandlingUnit, qty_cu: Decimal, tu: HandlingUnit
    ) -> list[HandlingUnit]:
        """Move ``qty_cu`` into ``tu``, ignoring the TU's capacity."""
        _require(cu, HUUnitType.CU)
        _require(tu, HUUnitType.TU)
        _check_quantity(cu, qty_cu, cu.qty)

        if is_full_quantity(qty_cu, cu.qty):
            self._attach(tu, cu)
            self._log("hu_split_cu_to_existing_tu", cu, qty_cu, [])
            return []

        cu.qty -= qty_cu
        new_cu = self._new_cu(cu, qty_cu)
        tu.add_child(new_cu)
        self._log("hu_split_cu_to_existing_tu", cu, qty_cu, [new_cu])
        return [new_cu]

    def split_cu_to_new_tus(
        self,
        cu: HandlingUnit,
        qty_cu: Decimal,
        pi_item_product: PIItemProduct,
        own_packing_materials: bool,
    ) -> list[HandlingUnit]:
        """
        Pack ``qty_cu`` into as many new TUs as the PI item product needs.

        Completely filled TUs become one aggregate TU; a partially filled
        remainder gets a TU of its own.
        """
        _require(cu, HUUnitType.CU)
        _check_quantity(cu, qty_cu, cu.qty)
        if pi_item_product.product_id != cu.product.product_id:
            raise IncompatiblePackingInstructionError(
                cu.hu_id,
                f"PI item product {pi_item_product.pi_item_product_id} is for "
                f"product {pi_item_product.product_id}",
            )

        if pi_item_product.is_infinite_capacity:
            capacity = qty_cu
        else:
            capacity = pi_item_product.qty_cu_per_tu

        if is_full_quantity(qty_cu, cu.qty) and is_full_quantity(capacity, qty_cu):
            # Whole CU fits into one TU: pack the CU itself.
            tu = self._new_tu(pi_item_product, cu, own_packing_materials)
            self._attach(tu, cu)
            self._view.add_top_level(tu)
            self._log("hu_split_cu_to_new_tus", cu, qty_cu, [tu])
            return [tu]

        full_tus = int(qty_cu // capacity)
        remainder = qty_cu - capacity * full_tus

        created: list[HandlingUnit] = []
        if full_tus:
            tu = self._new_tu(pi_item_product, cu, own_packing_materials, tu_count=full_tus)
            tu.add_child(self._new_cu(cu, capacity * full_tus))
            created.append(tu)
        if remainder:
            tu = self._new_tu(pi_item_product, cu, own_packing_materials)
            tu.add_child(self._new_cu(cu, remainder))
            created.append(tu)

        cu.qty -= qty_cu
        if cu.qty == 0:
            self._discard(cu)
        for tu in created:
            self._view.add_top_level(tu)
        self._log("hu_split_cu_to_new_tus", cu, qty_cu, created)
        return created

    # -- TU splits -------------------------------------------------------

    def split_tu_to_new_tus(
        self, tu: HandlingUnit, qty_tu: Decimal, own_packing_materials: bool
    ) -> list[HandlingUnit]:
        _require(tu, HUUnitType.TU)
        count = _check_tu_count(tu, qty_tu)

        if is_full_quantity(qty_tu, Decimal(tu.tu_count)):
            if not tu.is_top_level:
                self._make_top_level(tu)
            self._log("hu_split_tu_to_new_tus", tu, qty_tu, [])
            return []

        new_tu = self._split_off_tus(tu, count, own_packing_materials)
        self._view.add_top_level(new_tu)
        self._log("hu_split_tu_to_new_tus", tu, qty_tu, [new_tu])
        return [new_tu]

    def split_tu_to_new_lus(
        self,
        tu: HandlingUnit,
        qty_tu: Decimal,
        pi_item: PIItem,
        own_packing_materials: bool,
    ) -> list[HandlingUnit]:
        """Put ``qty_tu`` TUs onto as many new LUs as the PI item needs."""
        _require(tu, HUUnitType.TU)
        count = _check_tu_count(tu, qty_tu)
        if tu.pi is None or pi_item.included_pi.pi_id != tu.pi.pi_id:
            raise IncompatiblePackingInstructionError(
                tu.hu_id,
                f"PI item {pi_item.pi_item_id} does not take packing instruction "
                f"{tu.pi.name if tu.pi else None}",
            )

        capacity = int(pi_item.qty_tu_per_lu)
        created: list[HandlingUnit] = []
        remaining = count
        while remaining:
            take = min(capacity, remaining)
            if is_full_quantity(Decimal(take), Decimal(tu.tu_count)):
                part = tu
            else:
                part = self._split_off_tus(tu, take, own_packing_materials)
            lu = self._new_lu(pi_item, tu, own_packing_materials)
            self._attach(lu, part)
            self._view.add_top_level(lu)
            created.append(lu)
            remaining -= take

        self._log("hu_split_tu_to_new_lus", tu, qty_tu, created)
        return created

    def split_tu_to_existing_lu(
        self, tu: HandlingUnit, qty_tu: Decimal, lu: HandlingUnit
    ) -> list[HandlingUnit]:
        """Put ``qty_tu`` TUs onto ``lu``, ignoring the LU's capacity."""
        _require(tu, HUUnitType.TU)
        _require(lu, HUUnitType.LU)
        count = _check_tu_count(tu, qty_tu)

        if is_full_quantity(qty_tu, Decimal(tu.tu_count)):
            self._attach(lu, tu)
            self._log("hu_split_tu_to_existing_lu", tu, qty_tu, [])
            return []

        new_tu = self._split_off_tus(tu, count, tu.is_own_packing_materials)
        lu.add_child(new_tu)
        self._log("hu_split_tu_to_existing_lu", tu, qty_tu, [new_tu])
        return [new_tu]

    # -- helpers ---------------------------------------------------------

    def _next_id(self) -> int:
        return next(self._ids)

    def _new_cu(self, source: HandlingUnit, qty: Decimal) -> HandlingUnit:
        return HandlingUnit(
            hu_id=self._next_id(),
            unit_type=HUUnitType.CU,
            product=source.product,
            qty=qty,
            bpartner_id=source.bpartner_id,
        )

    def _new_tu(
        self,
        pi_item_product: PIItemProduct,
        source: HandlingUnit,
        own_packing_materials: bool,
        tu_count: int = 1,
    ) -> HandlingUnit:
        return HandlingUnit(
            hu_id=self._next_id(),
            unit_type=HUUnitType.TU,
            pi=pi_item_product.tu_pi,
            tu_count=tu_count,
            bpartner_id=source.bpartner_id,
            is_own_packing_materials=own_packing_materials,
        )

    def _new_lu(
        self, pi_item: PIItem, source: HandlingUnit, own_packing_materials: bool
    ) -> HandlingUnit:
        return HandlingUnit(
            hu_id=self._next_id(),
            unit_type=HUUnitType.LU,
            pi=pi_item.lu_pi,
            bpartner_id=source.bpartner_id,
            is_own_packing_materials=own_packing_materials,
        )

    def _split_off_tus(
        self, tu: HandlingUnit, count: int, own_packing_materials: bool
    ) -> HandlingUnit:
        """Detach ``count`` TUs from aggregate ``tu`` into a new, parentless TU."""
        new_tu = HandlingUnit(
            hu_id=self._next_id(),
            unit_type=HUUnitType.TU,
            pi=tu.pi,
            tu_count=count,
            bpartner_id=tu.bpartner_id,
            is_own_packing_materials=own_packing_materials,
        )
        for child in [c for c in tu.children if c.is_cu]:
            moved = child.qty * count / tu.tu_count
            child.qty -= moved
            new_tu.add_child(self._new_cu(child, moved))
        tu.tu_count -= count
        return new_tu

    def _attach(self, parent: HandlingUnit, child: HandlingUnit) -> None:
        self._view.discard_top_level(child)
        parent.add_child(child)

    def _make_top_level(self, hu: HandlingUnit) -> None:
        hu.detach()
        self._view.add_top_level(hu)

    def _discard(self, hu: HandlingUnit) -> None:
        hu.detach()
        self._view.discard_top_level(hu)

    def _log(
        self,
        event: str,
        source: HandlingUnit,
        qty: Decimal,
        created: list[HandlingUnit],
    ) -> None:
        logger.info(
            event,
            extra={
                "hu_id": source.hu_id,
                "qty": str(qty),
                "created_hu_ids": [hu.hu_id for hu in created],
            },
        )
