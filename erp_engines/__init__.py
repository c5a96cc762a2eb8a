"""
Module: erp_engines
Responsibility:
    Package entrypoint re-exporting the public symbols of the pure engine
    sub-modules.  This is the import surface for erp_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import erp_kernel (and sibling engine modules).
    MUST NOT import erp_modules or erp_config.

Audit relevance:
    Traced engine functions emit ERP_ENGINE_TRACE log records via
    ``erp_engines.tracer.traced_engine``.
"""

from erp_engines.hu_transform import (
    ACTION_CODES,
    DEFAULT_VALUE_NOT_AVAILABLE,
    HUTransformAction,
    LookupValue,
    PreconditionsResolution,
    TransformParameters,
    available_actions,
    check_preconditions,
    default_parameter_value,
    existing_lu_lookup,
    existing_tu_lookup,
    is_full_quantity,
    is_parameter_displayed,
    no_split_message,
    pi_item_lookup,
    pi_item_product_lookup,
    validate_transform_parameters,
)
from erp_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "ACTION_CODES",
    "DEFAULT_VALUE_NOT_AVAILABLE",
    "HUTransformAction",
    "LookupValue",
    "PreconditionsResolution",
    "TransformParameters",
    "available_actions",
    "check_preconditions",
    "compute_input_fingerprint",
    "default_parameter_value",
    "existing_lu_lookup",
    "existing_tu_lookup",
    "is_full_quantity",
    "is_parameter_displayed",
    "no_split_message",
    "pi_item_lookup",
    "pi_item_product_lookup",
    "traced_engine",
    "validate_transform_parameters",
]
