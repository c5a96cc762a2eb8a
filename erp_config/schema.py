"""
Reference dictionary schema.

Typed, frozen representation of the reference lists the ERP processes
depend on.  YAML files are parsed into these types by the loader and
handed to callers through ``erp_config.get_action_catalog()``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActionCatalogEntry:
    """One selectable value of a reference list."""

    value: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class ActionCatalog:
    """
    A reference list (e.g. ``M_HU_Transform_Action``) with its entries.

    ``checksum`` identifies the exact YAML content the catalog was built
    from.
    """

    reference: str
    entries: tuple[ActionCatalogEntry, ...]
    checksum: str = ""

    @property
    def active_entries(self) -> tuple[ActionCatalogEntry, ...]:
        return tuple(entry for entry in self.entries if entry.is_active)

    @property
    def values(self) -> frozenset[str]:
        return frozenset(entry.value for entry in self.entries)

    def get(self, value: str) -> ActionCatalogEntry | None:
        for entry in self.entries:
            if entry.value == value:
                return entry
        return None
