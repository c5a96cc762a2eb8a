"""
erp_modules.handling_units.service -- The HU transform process.

Responsibility:
    Runs one HU transform action for the single selected row of a working
    tree: checks preconditions, resolves the raw process parameters (codes,
    ids, decimals) into domain objects, validates them, dispatches to the
    transfer service and reports created and changed HUs back to the view.
    Also answers the "pull" queries of the process dialog: offered actions,
    lookup values, parameter visibility and default values.

Architecture position:
    Modules layer.  Thin coordinator: every decision is delegated to the
    pure engine ``erp_engines.hu_transform``; every mutation to the
    ``HUTransferService`` collaborator.  The selection and the view are
    passed in explicitly through ``TransformContext``.

Invariants enforced:
    - Nothing is mutated when preconditions reject or a mandatory
      parameter is missing.
    - Only parameters displayed for the chosen action are resolved.
    - After a successful action the view is told about every created HU,
      the existing target (for the ``*_To_Existing*`` actions) and the
      source if it is still part of the tree.

Failure modes:
    - Precondition rejection -> TransformResult with NOT_APPLICABLE.
    - FillMandatoryError / UnknownActionError / InvalidParameterValueError
      before any mutation.
    - HandlingUnitNotFoundError / PackingInstructionNotFoundError while
      resolving ids.
    - Transfer-service errors propagate unmodified.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from erp_config import get_action_catalog
from erp_config.schema import ActionCatalog
from erp_engines.hu_transform import (
    PARAM_ACTION,
    PARAM_HU_PLANNING_RECEIPT_OWNER_PM,
    PARAM_M_HU_PI_ITEM_ID,
    PARAM_M_HU_PI_ITEM_PRODUCT_ID,
    PARAM_M_LU_HU_ID,
    PARAM_M_TU_HU_ID,
    PARAM_QTY_CU,
    PARAM_QTY_TU,
    HUTransformAction,
    LookupValue,
    PreconditionsResolution,
    TransformParameters,
    available_actions,
    check_preconditions,
    default_parameter_value,
    existing_lu_lookup,
    existing_tu_lookup,
    is_parameter_displayed,
    no_split_message,
    pi_item_lookup,
    pi_item_product_lookup,
    validate_transform_parameters,
)
from erp_kernel.exceptions import FillMandatoryError, InvalidParameterValueError
from erp_kernel.logging_config import LogContext, get_logger
from erp_modules.handling_units.catalog import PackingInstructionCatalog
from erp_modules.handling_units.models import HandlingUnit, HUView
from erp_modules.handling_units.transfer import HUTransferService

logger = get_logger("modules.handling_units.service")

PROCESS_NAME = "M_HU_Transform"


@dataclass(frozen=True)
class TransformContext:
    """
    The rows the user selected and the tree they belong to.

    ``session_id`` and ``actor_id`` identify the UI session and user running
    the process; they are only used as log context.
    """

    selection: Sequence[HandlingUnit]
    view: HUView
    session_id: str | None = None
    actor_id: str | None = None

    @property
    def source(self) -> HandlingUnit:
        return self.selection[0]


class TransformStatus(str, Enum):
    SUCCESS = "success"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class TransformResult:
    """Outcome of one ``HUTransformService.run`` call."""

    status: TransformStatus
    action: HUTransformAction | None = None
    created_hus: tuple[HandlingUnit, ...] = ()
    changed_hus: tuple[HandlingUnit, ...] = ()
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == TransformStatus.SUCCESS


_HandlerResult = tuple[list[HandlingUnit], list[HandlingUnit]]
_Handler = Callable[[HandlingUnit, TransformParameters], _HandlerResult]


_TRUE_FLAGS = frozenset({"y", "true"})
_FALSE_FLAGS = frozenset({"n", "false"})


def _to_decimal(parameter_name: str, value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidParameterValueError(parameter_name, value)
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise InvalidParameterValueError(parameter_name, value) from None
    if not result.is_finite():
        raise InvalidParameterValueError(parameter_name, value)
    return result


def _to_id(parameter_name: str, value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidParameterValueError(parameter_name, value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidParameterValueError(parameter_name, value) from None


def _to_flag(parameter_name: str, value: Any) -> bool:
    """Yes/no parameter: a bool, ``Y``/``N`` or ``true``/``false``; unset is no."""
    if value is None or value == "":
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_FLAGS:
            return True
        if normalized in _FALSE_FLAGS:
            return False
    raise InvalidParameterValueError(parameter_name, value)


class HUTransformService:
    """
    Coordinates the HU transform process.

    Args:
        transfer_service: Performs the splits and answers maximum quantities.
        pi_catalog: Packing-instruction master data.
        action_catalog: Reference list of action codes; loaded through
            ``erp_config.get_action_catalog()`` on first use when omitted.
    """

    def __init__(
        self,
        transfer_service: HUTransferService,
        pi_catalog: PackingInstructionCatalog,
        action_catalog: ActionCatalog | None = None,
    ):
        self._transfer = transfer_service
        self._pi_catalog = pi_catalog
        self._action_catalog = action_catalog
        self._handlers: dict[HUTransformAction, _Handler] = {
            HUTransformAction.CU_TO_NEW_CU: self._cu_to_new_cu,
            HUTransformAction.CU_TO_EXISTING_TU: self._cu_to_existing_tu,
            HUTransformAction.CU_TO_NEW_TUS: self._cu_to_new_tus,
            HUTransformAction.TU_TO_NEW_TUS: self._tu_to_new_tus,
            HUTransformAction.TU_TO_NEW_LUS: self._tu_to_new_lus,
            HUTransformAction.TU_TO_EXISTING_LU: self._tu_to_existing_lu,
        }

    @property
    def action_catalog(self) -> ActionCatalog:
        if self._action_catalog is None:
            self._action_catalog = get_action_catalog()
        return self._action_catalog

    # -- dialog queries ----------------------------------------------------

    def check_preconditions(self, context: TransformContext) -> PreconditionsResolution:
        return check_preconditions(context.selection)

    def is_parameter_displayed(self, parameter_name: str, action_code: str | None) -> bool:
        action = HUTransformAction.from_code(action_code) if action_code else None
        return is_parameter_displayed(parameter_name, action)

    def get_parameter_default_value(
        self, context: TransformContext, parameter_name: str
    ) -> Any:
        return default_parameter_value(parameter_name, context.source, self._transfer)

    def get_action_lookup_values(self, context: TransformContext) -> tuple[LookupValue, ...]:
        return available_actions(
            source=context.source,
            tree=context.view,
            catalog_items=self.action_catalog.active_entries,
        )

    def get_lookup_values(
        self,
        context: TransformContext,
        parameter_name: str,
        action_code: str | None,
    ) -> tuple[LookupValue, ...]:
        """Lookup values of any lookup parameter, given the chosen action."""
        if parameter_name == PARAM_ACTION:
            return self.get_action_lookup_values(context)
        action = HUTransformAction.from_code(action_code) if action_code else None
        if parameter_name == PARAM_M_TU_HU_ID:
            return existing_tu_lookup(action, context.view)
        if parameter_name == PARAM_M_LU_HU_ID:
            return existing_lu_lookup(action, context.view)
        if parameter_name == PARAM_M_HU_PI_ITEM_PRODUCT_ID:
            return pi_item_product_lookup(action, context.source, self._pi_catalog)
        if parameter_name == PARAM_M_HU_PI_ITEM_ID:
            return pi_item_lookup(action, context.source, self._pi_catalog)
        return ()

    # -- execution ---------------------------------------------------------

    def resolve_parameters(
        self, context: TransformContext, parameters: Mapping[str, Any]
    ) -> TransformParameters:
        """
        Turn raw process parameters into ``TransformParameters``.

        Parameters not displayed for the chosen action are ignored.

        Raises:
            FillMandatoryError: if ``Action`` is missing.
            UnknownActionError: if ``Action`` is not a known code.
            InvalidParameterValueError: if an id, quantity or yes/no flag
                cannot be parsed.
        """
        action_code = parameters.get(PARAM_ACTION)
        if not action_code:
            raise FillMandatoryError(PARAM_ACTION)
        action = HUTransformAction.from_code(action_code)

        def raw(name: str) -> Any:
            if not is_parameter_displayed(name, action):
                return None
            return parameters.get(name)

        pi_item_product_id = _to_id(
            PARAM_M_HU_PI_ITEM_PRODUCT_ID, raw(PARAM_M_HU_PI_ITEM_PRODUCT_ID)
        )
        pi_item_id = _to_id(PARAM_M_HU_PI_ITEM_ID, raw(PARAM_M_HU_PI_ITEM_ID))
        tu_id = _to_id(PARAM_M_TU_HU_ID, raw(PARAM_M_TU_HU_ID))
        lu_id = _to_id(PARAM_M_LU_HU_ID, raw(PARAM_M_LU_HU_ID))

        return TransformParameters(
            action=action,
            pi_item_product=(
                self._pi_catalog.get_pi_item_product(pi_item_product_id)
                if pi_item_product_id is not None
                else None
            ),
            pi_item=(
                self._pi_catalog.get_pi_item(pi_item_id)
                if pi_item_id is not None
                else None
            ),
            target_tu=context.view.get_hu(tu_id) if tu_id is not None else None,
            target_lu=context.view.get_hu(lu_id) if lu_id is not None else None,
            qty_cu=_to_decimal(PARAM_QTY_CU, raw(PARAM_QTY_CU)),
            qty_tu=_to_decimal(PARAM_QTY_TU, raw(PARAM_QTY_TU)),
            own_packing_materials=_to_flag(
                PARAM_HU_PLANNING_RECEIPT_OWNER_PM, raw(PARAM_HU_PLANNING_RECEIPT_OWNER_PM)
            ),
        )

    def run(
        self, context: TransformContext, parameters: Mapping[str, Any]
    ) -> TransformResult:
        """
        Execute the chosen action for the selected row.

        Returns a NOT_APPLICABLE result, without touching anything, when the
        selection does not qualify.
        """
        resolution = check_preconditions(context.selection)
        if resolution.is_rejected:
            logger.info(
                "hu_transform_not_applicable",
                extra={"reason": resolution.reason, "selection_size": len(context.selection)},
            )
            return TransformResult(
                status=TransformStatus.NOT_APPLICABLE,
                message=resolution.reason,
            )

        source = context.source
        params = self.resolve_parameters(context, parameters)
        validate_transform_parameters(params)

        with LogContext.bind(
            session_id=context.session_id,
            actor_id=context.actor_id,
            process_name=PROCESS_NAME,
            hu_id=str(source.hu_id),
        ):
            logger.info(
                "hu_transform_started",
                extra={"action": params.action.code},
            )

            if params.action.is_cu_action:
                requested = params.qty_cu
                maximum = self._transfer.get_maximum_qty_cu(source)
            else:
                requested = params.qty_tu
                maximum = self._transfer.get_maximum_qty_tu(source)

            created, changed = self._handlers[params.action](source, params)
            if context.view.contains(source):
                changed.append(source)
            context.view.add_hus_and_invalidate([*created, *changed])

            message = None
            if not created:
                message = no_split_message(params.action, requested, maximum)

            logger.info(
                "hu_transform_completed",
                extra={
                    "action": params.action.code,
                    "created_hu_ids": [hu.hu_id for hu in created],
                    "changed_hu_ids": [hu.hu_id for hu in changed],
                },
            )

        return TransformResult(
            status=TransformStatus.SUCCESS,
            action=params.action,
            created_hus=tuple(created),
            changed_hus=tuple(changed),
            message=message,
        )

    # -- action handlers ---------------------------------------------------

    def _cu_to_new_cu(self, source: HandlingUnit, params: TransformParameters) -> _HandlerResult:
        return self._transfer.split_cu_to_new_cu(source, params.qty_cu), []

    def _cu_to_existing_tu(self, source: HandlingUnit, params: TransformParameters) -> _HandlerResult:
        created = self._transfer.split_cu_to_existing_tu(source, params.qty_cu, params.target_tu)
        return created, [params.target_tu]

    def _cu_to_new_tus(self, source: HandlingUnit, params: TransformParameters) -> _HandlerResult:
        created = self._transfer.split_cu_to_new_tus(
            source, params.qty_cu, params.pi_item_product, params.own_packing_materials
        )
        return created, []

    def _tu_to_new_tus(self, source: HandlingUnit, params: TransformParameters) -> _HandlerResult:
        created = self._transfer.split_tu_to_new_tus(
            source, params.qty_tu, params.own_packing_materials
        )
        return created, []

    def _tu_to_new_lus(self, source: HandlingUnit, params: TransformParameters) -> _HandlerResult:
        created = self._transfer.split_tu_to_new_lus(
            source, params.qty_tu, params.pi_item, params.own_packing_materials
        )
        return created, []

    def _tu_to_existing_lu(self, source: HandlingUnit, params: TransformParameters) -> _HandlerResult:
        created = self._transfer.split_tu_to_existing_lu(source, params.qty_tu, params.target_lu)
        return created, [params.target_lu]
