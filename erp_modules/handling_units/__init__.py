"""
Handling Units Module (``erp_modules.handling_units``).

Responsibility
--------------
The CU / TU / LU logistics hierarchy and the HU transform process that
splits, packs and moves handling units inside a user's working tree.

Architecture position
---------------------
**Modules layer** -- domain models, a packing-instruction catalog, the
transfer service performing the splits, and ``HUTransformService``
delegating every decision to ``erp_engines.hu_transform``.

Failure modes
-------------
* ``TransformResult.status == NOT_APPLICABLE`` -- the selection does not
  qualify; nothing was changed.
* ``FillMandatoryError`` / ``UnknownActionError`` -- raised before any
  mutation.
* ``HandlingUnitError`` subclasses from the transfer service propagate.
"""

from erp_modules.handling_units.catalog import (
    InMemoryPackingInstructionCatalog,
    PackingInstructionCatalog,
)
from erp_modules.handling_units.models import (
    HandlingUnit,
    HUUnitType,
    HUView,
    PackingInstruction,
    PIItem,
    PIItemProduct,
    Product,
)
from erp_modules.handling_units.service import (
    HUTransformService,
    TransformContext,
    TransformResult,
    TransformStatus,
)
from erp_modules.handling_units.transfer import (
    HUTransferService,
    InMemoryHUTransferService,
)

__all__ = [
    "HandlingUnit",
    "HUTransferService",
    "HUTransformService",
    "HUUnitType",
    "HUView",
    "InMemoryHUTransferService",
    "InMemoryPackingInstructionCatalog",
    "PackingInstruction",
    "PackingInstructionCatalog",
    "PIItem",
    "PIItemProduct",
    "Product",
    "TransformContext",
    "TransformResult",
    "TransformStatus",
]
