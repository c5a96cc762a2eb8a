"""
Module: erp_engines.hu_transform
Responsibility:
    Pure policy for the handling-unit (HU) transform process: the closed set
    of transform actions and their reference-dictionary codes, the
    single-selection preconditions, which actions are offered for a source
    row, lookup candidates for the action-specific parameters, parameter
    visibility and defaults, mandatory-parameter validation and the shared
    full-quantity rule.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Works against the small protocols declared here (HU rows, working tree,
    packing-instruction catalog, maximum-quantity provider) so that it never
    imports erp_modules.  Everything it needs is passed in explicitly.

Invariants enforced:
    - A transform source is exactly one selected row and never an LU.
    - Actions are offered by source type: CU rows get CU actions, TU rows get
      TU actions; the "existing" variants only when a matching target exists
      anywhere in the working tree.
    - CU_To_NewTUs needs a TU PI item product, TU_To_NewLUs needs an LU PI
      item, the "existing" actions need their target and every action needs
      its quantity.  Missing ones raise FillMandatoryError naming the
      parameter key.
    - Default quantities always come from the transfer service's maximum for
      the selected source.

Failure modes:
    - UnknownActionError for codes outside the six known actions.
    - FillMandatoryError for missing action-specific parameters.
    - Precondition violations are returned as PreconditionsResolution values,
      never raised.

Usage:
    from erp_engines.hu_transform import HUTransformAction, check_preconditions

    resolution = check_preconditions(selection)
    if resolution.is_accepted:
        action = HUTransformAction.from_code("CU_To_NewCU")
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from erp_engines.tracer import traced_engine
from erp_kernel.exceptions import FillMandatoryError, UnknownActionError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.hu_transform")


# ---------------------------------------------------------------------------
# Process parameter names
# ---------------------------------------------------------------------------

PARAM_ACTION = "Action"
PARAM_M_HU_PI_ITEM_PRODUCT_ID = "M_HU_PI_Item_Product_ID"
PARAM_M_HU_PI_ITEM_ID = "M_HU_PI_ITEM_ID"
PARAM_M_TU_HU_ID = "M_TU_HU_ID"
PARAM_M_LU_HU_ID = "M_LU_HU_ID"
PARAM_QTY_CU = "QtyCU"
PARAM_QTY_TU = "QtyTU"
PARAM_HU_PLANNING_RECEIPT_OWNER_PM = "HUPlanningReceiptOwnerPM"


class _NotAvailable:
    """Marker for "this parameter has no computed default"."""

    _instance: _NotAvailable | None = None

    def __new__(cls) -> _NotAvailable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT_VALUE_NOT_AVAILABLE"

    def __bool__(self) -> bool:
        return False


DEFAULT_VALUE_NOT_AVAILABLE = _NotAvailable()


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


class HURow(Protocol):
    """A handling unit as seen by the transform policy."""

    hu_id: int
    product: Any
    bpartner_id: int | None
    pi: Any

    @property
    def display_name(self) -> str: ...

    @property
    def is_cu(self) -> bool: ...

    @property
    def is_tu(self) -> bool: ...

    @property
    def is_lu(self) -> bool: ...


class WorkingTree(Protocol):
    """The HU tree the user is currently editing."""

    def stream_all_recursive(self) -> Iterator[HURow]: ...


class ReferenceListItem(Protocol):
    """One entry of the reference dictionary backing the Action parameter."""

    value: str
    name: str


class MaximumQtyProvider(Protocol):
    def get_maximum_qty_cu(self, hu: Any) -> Decimal: ...

    def get_maximum_qty_tu(self, hu: Any) -> Decimal: ...


class PIItemProductCandidate(Protocol):
    pi_item_product_id: int
    name: str


class PIItemCandidate(Protocol):
    pi_item_id: int
    is_active: bool

    @property
    def display_name(self) -> str: ...


class PackingInstructionLookup(Protocol):
    def retrieve_tu_pi_item_products(
        self, product: Any, bpartner_id: int | None
    ) -> Sequence[PIItemProductCandidate]: ...

    def retrieve_lu_pi_items(self, included_pi: Any) -> Sequence[PIItemCandidate]: ...


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


class HUTransformAction(str, Enum):
    """The six transform actions; see ACTION_CODES for the dictionary codes."""

    CU_TO_NEW_CU = "cu_to_new_cu"  # split a quantity off a CU into a new CU
    CU_TO_EXISTING_TU = "cu_to_existing_tu"  # ignores the TU's capacity
    CU_TO_NEW_TUS = "cu_to_new_tus"  # as many TUs as the PI item product needs
    TU_TO_NEW_TUS = "tu_to_new_tus"  # take TUs off an LU or an aggregate
    TU_TO_NEW_LUS = "tu_to_new_lus"  # as many LUs as the PI item needs
    TU_TO_EXISTING_LU = "tu_to_existing_lu"  # ignores the LU's TU capacity

    @property
    def code(self) -> str:
        """Value of this action in the reference dictionary."""
        return ACTION_CODES[self]

    @property
    def is_cu_action(self) -> bool:
        return self in CU_ACTIONS

    @property
    def is_tu_action(self) -> bool:
        return self in TU_ACTIONS

    @classmethod
    def from_code(cls, code: str | HUTransformAction) -> HUTransformAction:
        """Resolve a reference-dictionary code.

        Raises:
            UnknownActionError: If the code is not one of the six actions.
        """
        if isinstance(code, HUTransformAction):
            return code
        try:
            return _ACTIONS_BY_CODE[code]
        except (KeyError, TypeError):
            raise UnknownActionError(code) from None


# Must stay in sync with the M_HU_Transform_Action reference list
# (erp_config/sets/hu_transform_actions.yaml).
ACTION_CODES: dict[HUTransformAction, str] = {
    HUTransformAction.CU_TO_NEW_CU: "CU_To_NewCU",
    HUTransformAction.CU_TO_EXISTING_TU: "CU_To_ExistingTU",
    HUTransformAction.CU_TO_NEW_TUS: "CU_To_NewTUs",
    HUTransformAction.TU_TO_NEW_TUS: "TU_To_NewTUs",
    HUTransformAction.TU_TO_NEW_LUS: "TU_To_NewLUs",
    HUTransformAction.TU_TO_EXISTING_LU: "TU_To_ExistingLU",
}

_ACTIONS_BY_CODE: dict[str, HUTransformAction] = {
    code: action for action, code in ACTION_CODES.items()
}

CU_ACTIONS: frozenset[HUTransformAction] = frozenset({
    HUTransformAction.CU_TO_NEW_CU,
    HUTransformAction.CU_TO_EXISTING_TU,
    HUTransformAction.CU_TO_NEW_TUS,
})

TU_ACTIONS: frozenset[HUTransformAction] = frozenset({
    HUTransformAction.TU_TO_NEW_TUS,
    HUTransformAction.TU_TO_NEW_LUS,
    HUTransformAction.TU_TO_EXISTING_LU,
})

# Parameters each action cannot run without, in the order they are checked.
_REQUIRED_PARAMETERS: dict[HUTransformAction, tuple[tuple[str, str], ...]] = {
    HUTransformAction.CU_TO_NEW_CU: (
        ("qty_cu", PARAM_QTY_CU),
    ),
    HUTransformAction.CU_TO_EXISTING_TU: (
        ("target_tu", PARAM_M_TU_HU_ID),
        ("qty_cu", PARAM_QTY_CU),
    ),
    HUTransformAction.CU_TO_NEW_TUS: (
        ("pi_item_product", PARAM_M_HU_PI_ITEM_PRODUCT_ID),
        ("qty_cu", PARAM_QTY_CU),
    ),
    HUTransformAction.TU_TO_NEW_TUS: (
        ("qty_tu", PARAM_QTY_TU),
    ),
    HUTransformAction.TU_TO_NEW_LUS: (
        ("pi_item", PARAM_M_HU_PI_ITEM_ID),
        ("qty_tu", PARAM_QTY_TU),
    ),
    HUTransformAction.TU_TO_EXISTING_LU: (
        ("target_lu", PARAM_M_LU_HU_ID),
        ("qty_tu", PARAM_QTY_TU),
    ),
}

# The owner-packing-material flag is shown whenever new TUs or LUs come into
# existence, including a grown aggregate TU.
_DISPLAYED_PARAMETERS: dict[HUTransformAction, frozenset[str]] = {
    HUTransformAction.CU_TO_NEW_CU: frozenset({PARAM_QTY_CU}),
    HUTransformAction.CU_TO_EXISTING_TU: frozenset({PARAM_M_TU_HU_ID, PARAM_QTY_CU}),
    HUTransformAction.CU_TO_NEW_TUS: frozenset({
        PARAM_M_HU_PI_ITEM_PRODUCT_ID,
        PARAM_QTY_CU,
        PARAM_HU_PLANNING_RECEIPT_OWNER_PM,
    }),
    HUTransformAction.TU_TO_NEW_TUS: frozenset({
        PARAM_QTY_TU,
        PARAM_HU_PLANNING_RECEIPT_OWNER_PM,
    }),
    HUTransformAction.TU_TO_NEW_LUS: frozenset({
        PARAM_M_HU_PI_ITEM_ID,
        PARAM_QTY_TU,
        PARAM_HU_PLANNING_RECEIPT_OWNER_PM,
    }),
    HUTransformAction.TU_TO_EXISTING_LU: frozenset({PARAM_M_LU_HU_ID, PARAM_QTY_TU}),
}


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LookupValue:
    """Key / display name pair offered for a process parameter."""

    key: int | str
    display_name: str


@dataclass(frozen=True)
class PreconditionsResolution:
    """
    Whether the transform process may be started for the current selection.

    Contract:
        A rejection carries a human-readable reason and is returned, not
        raised, so callers can grey the action out before it runs.
    """

    accepted: bool
    reason: str | None = None

    @classmethod
    def accept(cls) -> PreconditionsResolution:
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: str) -> PreconditionsResolution:
        return cls(accepted=False, reason=reason)

    @classmethod
    def reject_because_not_single_selection(cls) -> PreconditionsResolution:
        return cls.reject("Select exactly one row")

    @property
    def is_accepted(self) -> bool:
        return self.accepted

    @property
    def is_rejected(self) -> bool:
        return not self.accepted


@dataclass(frozen=True)
class TransformParameters:
    """
    Resolved parameters of one transform invocation.

    Contract:
        Holds domain objects (HUs, PI item products, PI items) rather than
        ids; resolution from the raw process parameters happens in the
        process service.  Which fields are required depends on ``action``
        (see ``validate_transform_parameters``).
    """

    action: HUTransformAction
    pi_item_product: Any = None
    pi_item: Any = None
    target_tu: Any = None
    target_lu: Any = None
    qty_cu: Decimal | None = None
    qty_tu: Decimal | None = None
    own_packing_materials: bool = False


# ---------------------------------------------------------------------------
# Policy functions
# ---------------------------------------------------------------------------


def is_full_quantity(requested: Decimal, maximum: Decimal) -> bool:
    """True if the requested quantity takes everything the source holds.

    The transfer service then moves or joins the source as it is instead of
    splitting it.
    """
    return requested >= maximum


@traced_engine("hu_transform.preconditions", "1.0")
def check_preconditions(selection: Sequence[HURow]) -> PreconditionsResolution:
    """Exactly one row must be selected and it must be a CU or a TU."""
    if len(selection) != 1:
        return PreconditionsResolution.reject_because_not_single_selection()
    if selection[0].is_lu:
        return PreconditionsResolution.reject("Only applicable for CUs and TUs")
    return PreconditionsResolution.accept()


def validate_transform_parameters(params: TransformParameters) -> None:
    """
    Check that every parameter the action needs is present.

    Raises:
        FillMandatoryError: naming the first missing parameter key.
    """
    for attribute, parameter_name in _REQUIRED_PARAMETERS[params.action]:
        if getattr(params, attribute) is None:
            logger.info(
                "hu_transform_mandatory_parameter_missing",
                extra={"action": params.action.code, "parameter": parameter_name},
            )
            raise FillMandatoryError(parameter_name)


def is_parameter_displayed(parameter_name: str, action: HUTransformAction | None) -> bool:
    """Whether the parameter is shown to the user for the chosen action."""
    if parameter_name == PARAM_ACTION:
        return True
    if action is None:
        return False
    return parameter_name in _DISPLAYED_PARAMETERS[action]


def default_parameter_value(
    parameter_name: str,
    source: HURow,
    transfer_service: MaximumQtyProvider,
) -> Any:
    """
    Default for a quantity parameter: the maximum the source holds.

    Returns DEFAULT_VALUE_NOT_AVAILABLE for every other parameter.
    """
    if parameter_name == PARAM_QTY_CU:
        return transfer_service.get_maximum_qty_cu(source)
    if parameter_name == PARAM_QTY_TU:
        return transfer_service.get_maximum_qty_tu(source)
    return DEFAULT_VALUE_NOT_AVAILABLE


def no_split_message(
    action: HUTransformAction,
    requested: Decimal,
    maximum: Decimal,
) -> str | None:
    """User message for CU->NewCU / TU->NewTUs when nothing was split off."""
    if action not in (HUTransformAction.CU_TO_NEW_CU, HUTransformAction.TU_TO_NEW_TUS):
        return None
    if not is_full_quantity(requested, maximum):
        return None
    return f"Nothing to split: {requested} is the full quantity of the source"


def _exists(tree: WorkingTree, predicate: str) -> bool:
    return any(getattr(row, predicate) for row in tree.stream_all_recursive())


@traced_engine("hu_transform.actions", "1.0", fingerprint_fields=("source",))
def available_actions(
    *,
    source: HURow,
    tree: WorkingTree,
    catalog_items: Iterable[ReferenceListItem],
) -> tuple[LookupValue, ...]:
    """
    Actions offered for the selected source row.

    CU rows get CU->NewCU and CU->NewTUs, plus CU->ExistingTU when any TU
    exists in the tree; TU rows get TU->NewTUs and TU->NewLUs, plus
    TU->ExistingLU when any LU exists.  The result contains only actions the
    reference dictionary knows, sorted by their display name.
    """
    selectable: set[HUTransformAction] = set()

    if source.is_cu:
        selectable.add(HUTransformAction.CU_TO_NEW_CU)
        selectable.add(HUTransformAction.CU_TO_NEW_TUS)
        if _exists(tree, "is_tu"):
            selectable.add(HUTransformAction.CU_TO_EXISTING_TU)

    if source.is_tu:
        selectable.add(HUTransformAction.TU_TO_NEW_TUS)
        selectable.add(HUTransformAction.TU_TO_NEW_LUS)
        if _exists(tree, "is_lu"):
            selectable.add(HUTransformAction.TU_TO_EXISTING_LU)

    selectable_codes = {action.code for action in selectable}
    items = sorted(
        (item for item in catalog_items if item.value in selectable_codes),
        key=lambda item: item.name,
    )
    return tuple(LookupValue(key=item.value, display_name=item.name) for item in items)


def _hu_lookup(tree: WorkingTree, predicate: str) -> tuple[LookupValue, ...]:
    rows = sorted(
        (row for row in tree.stream_all_recursive() if getattr(row, predicate)),
        key=lambda row: (row.display_name, row.hu_id),
    )
    return tuple(LookupValue(key=row.hu_id, display_name=row.display_name) for row in rows)


def existing_tu_lookup(
    action: HUTransformAction | None,
    tree: WorkingTree,
) -> tuple[LookupValue, ...]:
    """Target TUs for CU->ExistingTU; empty for any other action."""
    if action != HUTransformAction.CU_TO_EXISTING_TU:
        return ()
    return _hu_lookup(tree, "is_tu")


def existing_lu_lookup(
    action: HUTransformAction | None,
    tree: WorkingTree,
) -> tuple[LookupValue, ...]:
    """Target LUs for TU->ExistingLU; empty for any other action."""
    if action != HUTransformAction.TU_TO_EXISTING_LU:
        return ()
    return _hu_lookup(tree, "is_lu")


def pi_item_product_lookup(
    action: HUTransformAction | None,
    source: HURow,
    pi_catalog: PackingInstructionLookup,
) -> tuple[LookupValue, ...]:
    """TU PI item products matching the CU's product and partner, by name."""
    if action != HUTransformAction.CU_TO_NEW_TUS:
        return ()
    candidates = pi_catalog.retrieve_tu_pi_item_products(source.product, source.bpartner_id)
    ordered = sorted(candidates, key=lambda p: (p.name, p.pi_item_product_id))
    return tuple(LookupValue(key=p.pi_item_product_id, display_name=p.name) for p in ordered)


def pi_item_lookup(
    action: HUTransformAction | None,
    source: HURow,
    pi_catalog: PackingInstructionLookup,
) -> tuple[LookupValue, ...]:
    """Active LU PI items that take the selected TU's packing instruction."""
    if action != HUTransformAction.TU_TO_NEW_LUS:
        return ()
    candidates = [item for item in pi_catalog.retrieve_lu_pi_items(source.pi) if item.is_active]
    values = [LookupValue(key=item.pi_item_id, display_name=item.display_name) for item in candidates]
    return tuple(sorted(values, key=lambda v: (v.display_name, v.key)))
