"""
Tests for HUTransformService, the HU transform process.

Covers precondition handling, parameter resolution, mandatory-parameter
checks before any mutation, the end-to-end actions against the in-memory
transfer service, view invalidation, dialog lookups and logging.
"""

from decimal import Decimal

import pytest

from erp_engines.hu_transform import DEFAULT_VALUE_NOT_AVAILABLE, HUTransformAction
from erp_kernel.exceptions import (
    ErpKernelError,
    FillMandatoryError,
    HandlingUnitNotFoundError,
    InvalidHUQuantityError,
    InvalidParameterValueError,
    PackingInstructionNotFoundError,
    UnknownActionError,
)
from erp_kernel.logging_config import LogContext
from erp_modules.handling_units import (
    HUTransformService,
    HUView,
    InMemoryHUTransferService,
    TransformContext,
    TransformStatus,
)
from tests.conftest import (
    HALF_PALLET_OF_IFCOS,
    IFCO,
    PALLET_OF_IFCOS,
    TOMATO_CARTON,
    TOMATO_IFCO,
    HUBuilder,
    make_transform_service,
    total_cu_qty,
)


class RecordingTransferService:
    """Transfer service double that only records what it was asked to do."""

    def __init__(self, maximum: Decimal = Decimal("10")):
        self.maximum = maximum
        self.calls: list[str] = []

    def get_maximum_qty_cu(self, hu):
        return self.maximum

    def get_maximum_qty_tu(self, hu):
        return self.maximum

    def __getattr__(self, name):
        if not name.startswith("split_"):
            raise AttributeError(name)

        def _record(*args, **kwargs):
            self.calls.append(name)
            return []

        return _record


class TestPreconditions:
    """A transform needs exactly one CU or TU row."""

    def setup_method(self):
        self.hu = HUBuilder()

    def test_empty_selection_not_applicable(self, pi_catalog, action_catalog):
        view = HUView([self.hu.cu(10)])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(TransformContext([], view), {"Action": "CU_To_NewCU", "QtyCU": 1})

        assert result.status == TransformStatus.NOT_APPLICABLE
        assert not result.is_success
        assert result.message == "Select exactly one row"
        assert view.invalidated_hu_ids == ()

    def test_multi_selection_not_applicable(self, pi_catalog, action_catalog):
        cu1, cu2 = self.hu.cu(10), self.hu.cu(5)
        view = HUView([cu1, cu2])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([cu1, cu2], view), {"Action": "CU_To_NewCU", "QtyCU": 1}
        )

        assert result.status == TransformStatus.NOT_APPLICABLE
        assert cu1.qty == Decimal("10")
        assert len(view.top_level_hus) == 2

    @pytest.mark.parametrize(
        "action_code",
        [
            "CU_To_NewCU",
            "CU_To_ExistingTU",
            "CU_To_NewTUs",
            "TU_To_NewTUs",
            "TU_To_NewLUs",
            "TU_To_ExistingLU",
            None,
            "",
            "LU_To_Nowhere",
        ],
    )
    def test_lu_not_applicable_for_any_action(self, pi_catalog, action_catalog, action_code):
        lu = self.hu.lu()
        tu = self.hu.tu(tu_count=2, parent=lu)
        self.hu.cu(20, parent=tu)
        other_tu = self.hu.tu()
        other_lu = self.hu.lu()
        view = HUView([lu, other_tu, other_lu])
        service = make_transform_service(view, pi_catalog, action_catalog)
        parameters = {
            "Action": action_code,
            "QtyCU": 5,
            "QtyTU": 1,
            "M_TU_HU_ID": other_tu.hu_id,
            "M_LU_HU_ID": other_lu.hu_id,
            "M_HU_PI_Item_Product_ID": TOMATO_IFCO.pi_item_product_id,
            "M_HU_PI_ITEM_ID": PALLET_OF_IFCOS.pi_item_id,
        }

        result = service.run(TransformContext([lu], view), parameters)

        assert result.status == TransformStatus.NOT_APPLICABLE
        assert result.message == "Only applicable for CUs and TUs"
        assert lu.children == [tu]
        assert tu.tu_count == 2
        assert view.top_level_hus == (lu, other_tu, other_lu)
        assert view.invalidated_hu_ids == ()

    def test_check_preconditions_accepts_cu(self, pi_catalog, action_catalog):
        cu = self.hu.cu(1)
        view = HUView([cu])
        service = make_transform_service(view, pi_catalog, action_catalog)
        assert service.check_preconditions(TransformContext([cu], view)).is_accepted

    def test_rejection_logged(self, pi_catalog, action_catalog, captured_logs):
        view = HUView()
        service = make_transform_service(view, pi_catalog, action_catalog)
        service.run(TransformContext([], view), {})

        records = [r for r in captured_logs() if r["message"] == "hu_transform_not_applicable"]
        assert records[-1]["selection_size"] == 0


class TestMandatoryParameters:
    """Missing parameters are reported before the transfer service is touched."""

    def setup_method(self):
        self.hu = HUBuilder()
        self.transfer = RecordingTransferService()

    def _service(self, pi_catalog, action_catalog):
        return HUTransformService(self.transfer, pi_catalog, action_catalog)

    def test_missing_action(self, pi_catalog, action_catalog):
        cu = self.hu.cu(10)
        view = HUView([cu])
        with pytest.raises(FillMandatoryError) as exc_info:
            self._service(pi_catalog, action_catalog).run(TransformContext([cu], view), {})
        assert exc_info.value.parameter_name == "Action"

    def test_unknown_action(self, pi_catalog, action_catalog):
        cu = self.hu.cu(10)
        view = HUView([cu])
        with pytest.raises(UnknownActionError):
            self._service(pi_catalog, action_catalog).run(
                TransformContext([cu], view), {"Action": "CU_To_Nowhere"}
            )

    def test_cu_to_new_tus_without_pi_item_product(self, pi_catalog, action_catalog):
        cu = self.hu.cu(10)
        view = HUView([cu])
        with pytest.raises(FillMandatoryError) as exc_info:
            self._service(pi_catalog, action_catalog).run(
                TransformContext([cu], view), {"Action": "CU_To_NewTUs", "QtyCU": 5}
            )
        assert exc_info.value.parameter_name == "M_HU_PI_Item_Product_ID"
        assert self.transfer.calls == []

    def test_tu_to_new_lus_without_pi_item(self, pi_catalog, action_catalog):
        tu = self.hu.tu()
        view = HUView([tu])
        with pytest.raises(FillMandatoryError) as exc_info:
            self._service(pi_catalog, action_catalog).run(
                TransformContext([tu], view), {"Action": "TU_To_NewLUs", "QtyTU": 1}
            )
        assert exc_info.value.parameter_name == "M_HU_PI_ITEM_ID"
        assert self.transfer.calls == []

    def test_missing_quantity(self, pi_catalog, action_catalog):
        cu = self.hu.cu(10)
        view = HUView([cu])
        with pytest.raises(FillMandatoryError) as exc_info:
            self._service(pi_catalog, action_catalog).run(
                TransformContext([cu], view), {"Action": "CU_To_NewCU", "QtyCU": ""}
            )
        assert exc_info.value.parameter_name == "QtyCU"
        assert self.transfer.calls == []

    def test_existing_tu_target_required(self, pi_catalog, action_catalog):
        cu = self.hu.cu(10)
        view = HUView([cu, self.hu.tu()])
        with pytest.raises(FillMandatoryError) as exc_info:
            self._service(pi_catalog, action_catalog).run(
                TransformContext([cu], view), {"Action": "CU_To_ExistingTU", "QtyCU": 5}
            )
        assert exc_info.value.parameter_name == "M_TU_HU_ID"

    def test_dispatches_to_transfer_service(self, pi_catalog, action_catalog):
        cu = self.hu.cu(10)
        view = HUView([cu])
        result = self._service(pi_catalog, action_catalog).run(
            TransformContext([cu], view), {"Action": "CU_To_NewCU", "QtyCU": 3}
        )
        assert self.transfer.calls == ["split_cu_to_new_cu"]
        assert result.is_success


class TestParameterResolution:
    """Raw parameters are turned into domain objects."""

    def setup_method(self):
        self.hu = HUBuilder()
        self.cu = self.hu.cu(10)
        self.tu = self.hu.tu()
        self.view = HUView([self.cu, self.tu])
        self.context = TransformContext([self.cu], self.view)

    def test_resolves_ids_and_decimals(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        params = service.resolve_parameters(
            self.context,
            {"Action": "CU_To_ExistingTU", "M_TU_HU_ID": str(self.tu.hu_id), "QtyCU": "2.5"},
        )
        assert params.action == HUTransformAction.CU_TO_EXISTING_TU
        assert params.target_tu is self.tu
        assert params.qty_cu == Decimal("2.5")

    def test_resolves_pi_item_product(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        params = service.resolve_parameters(
            self.context,
            {
                "Action": "CU_To_NewTUs",
                "M_HU_PI_Item_Product_ID": TOMATO_CARTON.pi_item_product_id,
                "QtyCU": 4,
                "HUPlanningReceiptOwnerPM": True,
            },
        )
        assert params.pi_item_product == TOMATO_CARTON
        assert params.own_packing_materials is True

    def test_hidden_parameters_ignored(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        params = service.resolve_parameters(
            self.context,
            {
                "Action": "CU_To_NewCU",
                "QtyCU": 1,
                "QtyTU": 5,
                "M_TU_HU_ID": 999,
                "M_HU_PI_ITEM_ID": 999,
                "HUPlanningReceiptOwnerPM": True,
            },
        )
        assert params.target_tu is None
        assert params.pi_item is None
        assert params.qty_tu is None
        assert params.own_packing_materials is False

    def test_unknown_hu_id(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        with pytest.raises(HandlingUnitNotFoundError) as exc_info:
            service.resolve_parameters(
                self.context, {"Action": "CU_To_ExistingTU", "M_TU_HU_ID": 999, "QtyCU": 1}
            )
        assert exc_info.value.hu_id == 999

    def test_unknown_pi_item_product(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        with pytest.raises(PackingInstructionNotFoundError) as exc_info:
            service.resolve_parameters(
                self.context,
                {"Action": "CU_To_NewTUs", "M_HU_PI_Item_Product_ID": 9999, "QtyCU": 1},
            )
        assert exc_info.value.record_id == 9999

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (True, True),
            (False, False),
            ("Y", True),
            ("N", False),
            ("true", True),
            ("false", False),
            (" False ", False),
            (None, False),
            ("", False),
        ],
    )
    def test_own_packing_materials_flag(self, pi_catalog, action_catalog, raw, expected):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        params = service.resolve_parameters(
            self.context,
            {
                "Action": "CU_To_NewTUs",
                "M_HU_PI_Item_Product_ID": TOMATO_IFCO.pi_item_product_id,
                "QtyCU": 10,
                "HUPlanningReceiptOwnerPM": raw,
            },
        )
        assert params.own_packing_materials is expected

    @pytest.mark.parametrize("raw", ["yes please", "0", 1, "maybe"])
    def test_own_packing_materials_flag_rejects_other_values(
        self, pi_catalog, action_catalog, raw
    ):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        with pytest.raises(InvalidParameterValueError) as exc_info:
            service.resolve_parameters(
                self.context,
                {
                    "Action": "CU_To_NewTUs",
                    "M_HU_PI_Item_Product_ID": TOMATO_IFCO.pi_item_product_id,
                    "QtyCU": 10,
                    "HUPlanningReceiptOwnerPM": raw,
                },
            )
        assert exc_info.value.parameter_name == "HUPlanningReceiptOwnerPM"
        assert exc_info.value.code == "INVALID_PARAMETER_VALUE"

    def test_no_flag_leaves_new_tu_without_own_packing(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)

        result = service.run(
            self.context,
            {
                "Action": "CU_To_NewTUs",
                "M_HU_PI_Item_Product_ID": TOMATO_IFCO.pi_item_product_id,
                "QtyCU": 10,
                "HUPlanningReceiptOwnerPM": "N",
            },
        )

        assert result.created_hus[0].is_own_packing_materials is False

    @pytest.mark.parametrize("raw", ["ten", "1,5", "NaN", True])
    def test_unparseable_quantity(self, pi_catalog, action_catalog, raw):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        with pytest.raises(InvalidParameterValueError) as exc_info:
            service.run(self.context, {"Action": "CU_To_NewCU", "QtyCU": raw})
        assert exc_info.value.parameter_name == "QtyCU"
        assert isinstance(exc_info.value, ErpKernelError)
        assert self.cu.qty == Decimal("10")
        assert self.view.invalidated_hu_ids == ()

    def test_unparseable_hu_id(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        with pytest.raises(InvalidParameterValueError) as exc_info:
            service.resolve_parameters(
                self.context, {"Action": "CU_To_ExistingTU", "M_TU_HU_ID": "tu-2", "QtyCU": 1}
            )
        assert exc_info.value.parameter_name == "M_TU_HU_ID"
        assert exc_info.value.value == "tu-2"


class TestCUActions:
    """CU actions end to end against the in-memory transfer service."""

    def setup_method(self):
        self.hu = HUBuilder()
        self.cu = self.hu.cu(10)

    def test_full_quantity_split_reports_nothing_to_split(self, pi_catalog, action_catalog):
        view = HUView([self.cu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.cu], view), {"Action": "CU_To_NewCU", "QtyCU": "10"}
        )

        assert result.is_success
        assert result.action == HUTransformAction.CU_TO_NEW_CU
        assert result.created_hus == ()
        assert self.cu.qty == Decimal("10")
        assert view.top_level_hus == (self.cu,)
        assert result.message.startswith("Nothing to split")

    def test_partial_split(self, pi_catalog, action_catalog):
        view = HUView([self.cu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.cu], view), {"Action": "CU_To_NewCU", "QtyCU": "4"}
        )

        assert len(result.created_hus) == 1
        assert result.created_hus[0].qty == Decimal("4")
        assert self.cu.qty == Decimal("6")
        assert result.message is None
        assert result.changed_hus == (self.cu,)
        assert view.invalidated_hu_ids == (result.created_hus[0].hu_id, self.cu.hu_id)

    def test_cu_to_existing_tu_invalidates_target(self, pi_catalog, action_catalog):
        tu = self.hu.tu()
        view = HUView([self.cu, tu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.cu], view),
            {"Action": "CU_To_ExistingTU", "M_TU_HU_ID": tu.hu_id, "QtyCU": 10},
        )

        assert result.created_hus == ()
        assert result.changed_hus == (tu, self.cu)
        assert self.cu.parent is tu
        assert result.message is None
        assert set(view.invalidated_hu_ids) == {tu.hu_id, self.cu.hu_id}

    def test_cu_to_new_tus(self, pi_catalog, action_catalog):
        cu = self.hu.cu(25)
        view = HUView([cu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([cu], view),
            {
                "Action": "CU_To_NewTUs",
                "M_HU_PI_Item_Product_ID": TOMATO_IFCO.pi_item_product_id,
                "QtyCU": 25,
            },
        )

        assert [tu.tu_count for tu in result.created_hus] == [2, 1]
        assert all(tu.pi == IFCO for tu in result.created_hus)
        # the source was fully packed and left the tree
        assert result.changed_hus == ()
        assert total_cu_qty(view) == Decimal("25")

    def test_transfer_errors_propagate(self, pi_catalog, action_catalog):
        view = HUView([self.cu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        with pytest.raises(InvalidHUQuantityError):
            service.run(TransformContext([self.cu], view), {"Action": "CU_To_NewCU", "QtyCU": 11})
        assert self.cu.qty == Decimal("10")
        assert view.invalidated_hu_ids == ()


class TestTUActions:
    """TU actions end to end against the in-memory transfer service."""

    def setup_method(self):
        self.hu = HUBuilder()
        self.tu = self.hu.tu(tu_count=3)
        self.hu.cu(30, parent=self.tu)

    def test_full_tu_split_reports_nothing_to_split(self, pi_catalog, action_catalog):
        view = HUView([self.tu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.tu], view), {"Action": "TU_To_NewTUs", "QtyTU": 3}
        )

        assert result.created_hus == ()
        assert self.tu.tu_count == 3
        assert result.message.startswith("Nothing to split")

    def test_tu_to_new_tus(self, pi_catalog, action_catalog):
        view = HUView([self.tu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.tu], view), {"Action": "TU_To_NewTUs", "QtyTU": 1}
        )

        assert len(result.created_hus) == 1
        assert self.tu.tu_count == 2
        assert total_cu_qty(view) == Decimal("30")

    def test_tu_to_new_lus(self, pi_catalog, action_catalog):
        view = HUView([self.tu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.tu], view),
            {"Action": "TU_To_NewLUs", "M_HU_PI_ITEM_ID": PALLET_OF_IFCOS.pi_item_id, "QtyTU": 3},
        )

        assert len(result.created_hus) == 1
        lu = result.created_hus[0]
        assert lu.is_lu
        assert self.tu.parent is lu
        assert result.changed_hus == (self.tu,)
        assert view.top_level_hus == (lu,)

    def test_tu_to_existing_lu(self, pi_catalog, action_catalog):
        lu = self.hu.lu()
        view = HUView([self.tu, lu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(
            TransformContext([self.tu], view),
            {"Action": "TU_To_ExistingLU", "M_LU_HU_ID": lu.hu_id, "QtyTU": 3},
        )

        assert result.created_hus == ()
        assert result.changed_hus == (lu, self.tu)
        assert self.tu.parent is lu
        assert result.message is None


class TestDialogQueries:
    """Lookups, defaults and parameter visibility."""

    def setup_method(self):
        self.hu = HUBuilder()
        self.cu = self.hu.cu(10)
        self.tu = self.hu.tu(tu_count=3)
        self.lu = self.hu.lu()
        self.view = HUView([self.cu, self.tu, self.lu])

    def test_cu_actions_offered(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        values = service.get_lookup_values(TransformContext([self.cu], self.view), "Action", None)
        assert [v.key for v in values] == ["CU_To_ExistingTU", "CU_To_NewCU", "CU_To_NewTUs"]

    def test_tu_actions_offered(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        values = service.get_action_lookup_values(TransformContext([self.tu], self.view))
        assert [v.key for v in values] == ["TU_To_ExistingLU", "TU_To_NewLUs", "TU_To_NewTUs"]

    def test_existing_tu_lookup(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        context = TransformContext([self.cu], self.view)
        values = service.get_lookup_values(context, "M_TU_HU_ID", "CU_To_ExistingTU")
        assert [v.key for v in values] == [self.tu.hu_id]
        assert service.get_lookup_values(context, "M_TU_HU_ID", "CU_To_NewCU") == ()

    def test_existing_lu_lookup(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        context = TransformContext([self.tu], self.view)
        values = service.get_lookup_values(context, "M_LU_HU_ID", "TU_To_ExistingLU")
        assert [v.key for v in values] == [self.lu.hu_id]

    def test_pi_item_product_lookup(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        context = TransformContext([self.cu], self.view)
        values = service.get_lookup_values(context, "M_HU_PI_Item_Product_ID", "CU_To_NewTUs")
        assert [v.key for v in values] == [
            TOMATO_CARTON.pi_item_product_id,
            TOMATO_IFCO.pi_item_product_id,
        ]

    def test_pi_item_lookup(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        context = TransformContext([self.tu], self.view)
        values = service.get_lookup_values(context, "M_HU_PI_ITEM_ID", "TU_To_NewLUs")
        assert [v.key for v in values] == [
            HALF_PALLET_OF_IFCOS.pi_item_id,
            PALLET_OF_IFCOS.pi_item_id,
        ]

    def test_non_lookup_parameter(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        context = TransformContext([self.cu], self.view)
        assert service.get_lookup_values(context, "QtyCU", "CU_To_NewCU") == ()

    def test_default_values(self, pi_catalog, action_catalog):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        cu_context = TransformContext([self.cu], self.view)
        tu_context = TransformContext([self.tu], self.view)

        assert service.get_parameter_default_value(cu_context, "QtyCU") == Decimal("10")
        assert service.get_parameter_default_value(tu_context, "QtyTU") == Decimal("3")
        assert service.get_parameter_default_value(cu_context, "QtyTU") == Decimal("0")
        assert (
            service.get_parameter_default_value(cu_context, "M_TU_HU_ID")
            is DEFAULT_VALUE_NOT_AVAILABLE
        )

    @pytest.mark.parametrize(
        "parameter, action_code, expected",
        [
            ("Action", None, True),
            ("QtyCU", None, False),
            ("QtyCU", "CU_To_NewCU", True),
            ("QtyTU", "CU_To_NewCU", False),
            ("HUPlanningReceiptOwnerPM", "CU_To_NewTUs", True),
            ("HUPlanningReceiptOwnerPM", "TU_To_ExistingLU", False),
            ("M_LU_HU_ID", "TU_To_ExistingLU", True),
        ],
    )
    def test_parameter_visibility(self, pi_catalog, action_catalog, parameter, action_code, expected):
        service = make_transform_service(self.view, pi_catalog, action_catalog)
        assert service.is_parameter_displayed(parameter, action_code) is expected

    def test_action_catalog_loaded_on_first_use(self, pi_catalog):
        service = HUTransformService(InMemoryHUTransferService(self.view), pi_catalog)
        assert service.action_catalog.reference == "M_HU_Transform_Action"
        assert service.action_catalog is service.action_catalog


class TestLogging:
    """Completion is logged with the process context bound."""

    def test_completed_event(self, pi_catalog, action_catalog, captured_logs):
        cu = HUBuilder().cu(10)
        view = HUView([cu])
        service = make_transform_service(view, pi_catalog, action_catalog)

        result = service.run(TransformContext([cu], view), {"Action": "CU_To_NewCU", "QtyCU": 4})

        records = [r for r in captured_logs() if r["message"] == "hu_transform_completed"]
        assert len(records) == 1
        record = records[0]
        assert record["process_name"] == "M_HU_Transform"
        assert record["hu_id"] == str(cu.hu_id)
        assert record["action"] == "CU_To_NewCU"
        assert record["created_hu_ids"] == [result.created_hus[0].hu_id]

    def test_context_unbound_afterwards(self, pi_catalog, action_catalog):
        cu = HUBuilder().cu(10)
        view = HUView([cu])
        make_transform_service(view, pi_catalog, action_catalog).run(
            TransformContext([cu], view), {"Action": "CU_To_NewCU", "QtyCU": 4}
        )
        assert "process_name" not in LogContext.get_all()
