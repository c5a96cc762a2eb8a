"""
Handling Unit Domain Models (``erp_modules.handling_units.models``).

Responsibility
--------------
The nouns of the logistics hierarchy: products, packing instructions (PI),
PI item products (how many CUs of a product fit into one TU), PI items (how
many TUs fit onto one LU), the handling units themselves and the working
tree (``HUView``) a user edits.

Architecture
------------
Layer: **Modules** -- domain data structures.  Master data is frozen;
``HandlingUnit`` is a mutable tree node because the transfer service
re-parents and re-sizes units in place.  Handling units compare by identity.

Invariants
----------
- A CU holds a product quantity and has no children.
- A TU holds CUs; ``tu_count > 1`` marks an aggregate TU standing for that
  many identical TUs which share the CU content evenly.
- An LU holds TUs.
- ``PIItemProduct.qty_cu_per_tu`` is positive unless the capacity is
  infinite; ``PIItem.qty_tu_per_lu`` is a positive whole number.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from erp_kernel.domain.values import Quantity
from erp_kernel.exceptions import HandlingUnitNotFoundError
from erp_kernel.logging_config import get_logger

logger = get_logger("modules.handling_units.models")


class HUUnitType(str, Enum):
    """Level of a handling unit in the logistics hierarchy."""

    CU = "CU"  # consumer unit
    TU = "TU"  # transport unit
    LU = "LU"  # logistics unit


@dataclass(frozen=True)
class Product:
    product_id: int
    name: str
    uom: str


@dataclass(frozen=True)
class PackingInstruction:
    """Packing instruction (PI) of a TU or LU."""

    pi_id: int
    name: str
    unit_type: HUUnitType


@dataclass(frozen=True)
class PIItemProduct:
    """
    How many CUs of one product go into one TU of a given PI.

    Contract: ``bpartner_id`` of None means the item product applies to
    every business partner.
    """

    pi_item_product_id: int
    name: str
    tu_pi: PackingInstruction
    product_id: int
    qty_cu_per_tu: Decimal
    bpartner_id: int | None = None
    is_infinite_capacity: bool = False
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.tu_pi.unit_type != HUUnitType.TU:
            raise ValueError(f"PI item product {self.pi_item_product_id} needs a TU packing instruction")
        if not self.is_infinite_capacity and self.qty_cu_per_tu <= 0:
            raise ValueError(f"qty_cu_per_tu must be positive, got {self.qty_cu_per_tu}")


@dataclass(frozen=True)
class PIItem:
    """An LU packing instruction item: ``qty_tu_per_lu`` TUs of ``included_pi``."""

    pi_item_id: int
    lu_pi: PackingInstruction
    included_pi: PackingInstruction
    qty_tu_per_lu: Decimal
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.lu_pi.unit_type != HUUnitType.LU:
            raise ValueError(f"PI item {self.pi_item_id} needs an LU packing instruction")
        if self.qty_tu_per_lu <= 0 or self.qty_tu_per_lu != self.qty_tu_per_lu.to_integral_value():
            raise ValueError(f"qty_tu_per_lu must be a positive whole number, got {self.qty_tu_per_lu}")

    @property
    def display_name(self) -> str:
        return f"{self.lu_pi.name} ({self.qty_tu_per_lu} x {self.included_pi.name})"


@dataclass(eq=False)
class HandlingUnit:
    """
    One node of the HU tree.

    ``qty`` is only meaningful for CUs, ``tu_count`` only for TUs.
    """

    hu_id: int
    unit_type: HUUnitType
    value: str = ""
    pi: PackingInstruction | None = None
    product: Product | None = None
    qty: Decimal = Decimal("0")
    tu_count: int = 1
    bpartner_id: int | None = None
    is_own_packing_materials: bool = False
    parent: HandlingUnit | None = field(default=None, repr=False)
    children: list[HandlingUnit] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.value:
            self.value = str(self.hu_id)
        if self.unit_type == HUUnitType.CU and self.product is None:
            raise ValueError(f"CU {self.hu_id} needs a product")
        if self.tu_count < 1:
            raise ValueError(f"tu_count must be at least 1, got {self.tu_count}")

    @property
    def is_cu(self) -> bool:
        return self.unit_type == HUUnitType.CU

    @property
    def is_tu(self) -> bool:
        return self.unit_type == HUUnitType.TU

    @property
    def is_lu(self) -> bool:
        return self.unit_type == HUUnitType.LU

    @property
    def is_aggregate(self) -> bool:
        return self.is_tu and self.tu_count > 1

    @property
    def is_top_level(self) -> bool:
        return self.parent is None

    @property
    def quantity(self) -> Quantity:
        """Storage quantity of a CU in the product's unit of measure."""
        if not self.is_cu:
            raise ValueError(f"HU {self.hu_id} is a {self.unit_type.value}, not a CU")
        return Quantity(value=self.qty, unit=self.product.uom)

    @property
    def display_name(self) -> str:
        if self.is_cu:
            return f"{self.value} {self.product.name} {self.quantity}"
        pi_name = self.pi.name if self.pi else self.unit_type.value
        if self.is_aggregate:
            return f"{self.value} {self.tu_count} x {pi_name}"
        return f"{self.value} {pi_name}"

    def iter_recursive(self) -> Iterator[HandlingUnit]:
        """This HU followed by all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_recursive()

    def add_child(self, child: HandlingUnit) -> None:
        child.detach()
        child.parent = self
        self.children.append(child)

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def __str__(self) -> str:
        return self.display_name

    def __repr__(self) -> str:
        return f"HandlingUnit({self.hu_id}, {self.unit_type.value}, {self.display_name!r})"


class HUView:
    """
    The working tree of handling units the user is editing.

    Contract
    --------
    Holds the top-level HUs; children are reached through them.  After an
    action the caller reports created and changed HUs through
    ``add_hus_and_invalidate`` so the presentation layer knows which rows
    to refresh.
    """

    def __init__(self, top_level_hus: Iterable[HandlingUnit] = ()):
        self._top_level: list[HandlingUnit] = []
        self._invalidated: dict[int, HandlingUnit] = {}
        for hu in top_level_hus:
            self.add_top_level(hu)

    @property
    def top_level_hus(self) -> tuple[HandlingUnit, ...]:
        return tuple(self._top_level)

    @property
    def invalidated_hu_ids(self) -> tuple[int, ...]:
        return tuple(self._invalidated)

    def stream_all_recursive(self) -> Iterator[HandlingUnit]:
        for hu in list(self._top_level):
            yield from hu.iter_recursive()

    def get_hu(self, hu_id: int) -> HandlingUnit:
        for hu in self.stream_all_recursive():
            if hu.hu_id == hu_id:
                return hu
        raise HandlingUnitNotFoundError(hu_id)

    def contains(self, hu: HandlingUnit) -> bool:
        return any(candidate is hu for candidate in self.stream_all_recursive())

    def add_top_level(self, hu: HandlingUnit) -> None:
        if hu.parent is not None:
            raise ValueError(f"HU {hu.hu_id} has a parent and cannot be top level")
        if not any(existing is hu for existing in self._top_level):
            self._top_level.append(hu)

    def discard_top_level(self, hu: HandlingUnit) -> None:
        self._top_level = [existing for existing in self._top_level if existing is not hu]

    def add_hu_and_invalidate(self, hu: HandlingUnit) -> None:
        self.add_hus_and_invalidate((hu,))

    def add_hus_and_invalidate(self, hus: Iterable[HandlingUnit]) -> None:
        """Make sure the HUs are part of the view and mark them for refresh."""
        for hu in hus:
            if hu.parent is None:
                self.add_top_level(hu)
            self._invalidated[hu.hu_id] = hu
        logger.debug(
            "hu_view_invalidated",
            extra={"hu_ids": list(self._invalidated)},
        )

    def clear_invalidated(self) -> None:
        self._invalidated.clear()
