"""
erp_config -- single public entrypoint for reference-list configuration.

Responsibility:
    Provides the reference dictionaries the ERP processes depend on through
    ``get_action_catalog()``.  YAML loading is internal tooling and never
    exposed to callers.

Architecture position:
    Configuration -- YAML-driven, validated at load time.  Sits above
    ``erp_kernel`` and ``erp_engines`` and below ``erp_modules``.

Invariants enforced:
    - The HU transform action catalog and ``HUTransformAction`` are in sync:
      every action has a catalog entry and every catalog value is an action.

Failure modes:
    - ``FileNotFoundError`` -- no catalog file in the configuration directory.
    - ``ActionCatalogOutOfSyncError`` -- catalog and action enum disagree.

Audit relevance:
    Every successful ``get_action_catalog()`` call emits an
    ``ERP_CONFIG_TRACE`` log entry with the reference name, entry count and
    checksum.
"""

from __future__ import annotations

from pathlib import Path

from erp_config.loader import load_action_catalog
from erp_config.schema import ActionCatalog, ActionCatalogEntry
from erp_engines.hu_transform import ACTION_CODES
from erp_kernel.exceptions import ActionCatalogOutOfSyncError
from erp_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

ACTION_CATALOG_FILE = "hu_transform_actions.yaml"


def validate_action_catalog(catalog: ActionCatalog) -> None:
    """
    Check the catalog against ``HUTransformAction``.

    Raises:
        ActionCatalogOutOfSyncError: listing codes missing from the catalog
            and catalog values no action maps to.
    """
    codes = set(ACTION_CODES.values())
    missing = tuple(sorted(codes - catalog.values))
    unknown = tuple(sorted(catalog.values - codes))
    if missing or unknown:
        raise ActionCatalogOutOfSyncError(missing=missing, unknown=unknown)


def get_action_catalog(config_dir: Path | None = None) -> ActionCatalog:
    """The reference list backing the HU transform ``Action`` parameter.

    Args:
        config_dir: Directory holding ``hu_transform_actions.yaml``.
            Defaults to the catalogs shipped with the package.
    """
    path = (config_dir or _DEFAULT_CONFIG_DIR) / ACTION_CATALOG_FILE
    catalog = load_action_catalog(path)
    validate_action_catalog(catalog)

    _logger.info(
        "ERP_CONFIG_TRACE",
        extra={
            "trace_type": "ERP_CONFIG_TRACE",
            "reference": catalog.reference,
            "entry_count": len(catalog.entries),
            "checksum": catalog.checksum,
        },
    )
    return catalog


__all__ = [
    "ACTION_CATALOG_FILE",
    "ActionCatalog",
    "ActionCatalogEntry",
    "get_action_catalog",
    "validate_action_catalog",
]
