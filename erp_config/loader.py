"""
Configuration Loader (``erp_config.loader``).

Responsibility
--------------
Loads YAML reference-list files and parses them into the frozen
``erp_config.schema`` dataclasses.  Runtime callers go through
``erp_config.get_action_catalog()`` instead of calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Duplicate entry values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from erp_config.schema import ActionCatalog, ActionCatalogEntry


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_entry(data: dict[str, Any]) -> ActionCatalogEntry:
    """Parse an ActionCatalogEntry from a dict."""
    return ActionCatalogEntry(
        value=str(data["value"]),
        name=str(data["name"]),
        is_active=bool(data.get("is_active", True)),
    )


def parse_action_catalog(data: dict[str, Any]) -> ActionCatalog:
    """
    Parse an ``ActionCatalog`` from a dict.

    Raises:
        KeyError: if ``reference`` or an entry's ``value``/``name`` is missing.
        ValueError: if two entries share a value.
    """
    entries = tuple(parse_entry(item) for item in data.get("items", ()))

    seen: set[str] = set()
    for entry in entries:
        if entry.value in seen:
            raise ValueError(f"Duplicate reference list value: {entry.value!r}")
        seen.add(entry.value)

    return ActionCatalog(
        reference=data["reference"],
        entries=entries,
        checksum=compute_checksum(data),
    )


def load_action_catalog(path: Path) -> ActionCatalog:
    return parse_action_catalog(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
