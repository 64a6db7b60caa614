"""
Catalog serializer - converts a SchemaCatalog to a stable, versioned dict.

The field layout is the storage contract; CatalogLoader is its inverse.
Bump FORMAT_VERSION whenever a field is renamed or re-nested.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ..assets.types import AssetSchema, ChangeEntry
from ..attributes.types import AttributeRef, AttributeType

if TYPE_CHECKING:
    from ..config import Config
    from .catalog import SchemaCatalog

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class CatalogSerializer:
    """Serializes catalog objects to plain dictionaries."""

    def serialize_catalog(self, catalog: SchemaCatalog) -> dict[str, Any]:
        """Serialize a whole catalog."""
        return {
            "format_version": FORMAT_VERSION,
            "attribute_types": [
                self.serialize_attribute_type(t) for t in catalog.attribute_type_list()
            ],
            "assets": [self.serialize_asset(a) for a in catalog.asset_list()],
            "units": catalog.list_units(),
        }

    def serialize_attribute_type(self, attribute_type: AttributeType) -> dict[str, Any]:
        return {
            "name": attribute_type.name,
            "data_type": attribute_type.data_type,
            "data_type_history": list(attribute_type.data_type_history),
            "version": attribute_type.version,
        }

    def serialize_attribute_ref(self, ref: AttributeRef) -> dict[str, Any]:
        return {
            "name": ref.name,
            "version": ref.version,
            "data_type": ref.data_type,
        }

    def serialize_change_entry(self, entry: ChangeEntry) -> dict[str, Any]:
        return {
            "kind": entry.kind.value,
            "attribute": self.serialize_attribute_ref(entry.attribute),
        }

    def serialize_asset(self, asset: AssetSchema) -> dict[str, Any]:
        return {
            "name": asset.name,
            "version": asset.version,
            "attributes": [self.serialize_attribute_ref(r) for r in asset.attributes],
            "change_history": [self.serialize_change_entry(e) for e in asset.change_history],
        }


def dumps_catalog(catalog: SchemaCatalog, fmt: str = "json") -> str:
    """
    Encode a catalog as an opaque text blob.

    Args:
        catalog: The catalog to encode
        fmt: "json" or "yaml"

    Returns:
        The encoded catalog
    """
    data = catalog.to_dict()
    if fmt == "json":
        return json.dumps(data, sort_keys=False)
    if fmt == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported catalog format: {fmt}")


def save_catalog(catalog: SchemaCatalog, file_path: str | Path) -> None:
    """
    Save a catalog to a YAML or JSON file, chosen by suffix.

    Args:
        catalog: The catalog to save
        file_path: Path to write (.yaml, .yml or .json)
    """
    path = Path(file_path).resolve()
    fmt = "json" if path.suffix == ".json" else "yaml"

    with open(path, "w", encoding="utf-8") as f:
        if fmt == "yaml":
            f.write("# Schema Catalog\n")
            f.write("# Attribute types, asset schemas and units\n\n")
        f.write(dumps_catalog(catalog, fmt))
        f.flush()
        os.fsync(f.fileno())

    logger.info(f"Saved catalog to {path}")


def save_catalog_from_config(catalog: SchemaCatalog, config: Config) -> Path:
    """
    Save a catalog where the store configuration points.

    Raises:
        ValueError: If neither output_file nor definition_file is set
    """
    target = config.store.output_file or config.store.definition_file
    if not target:
        raise ValueError("No output_file or definition_file configured")
    save_catalog(catalog, target)
    return Path(target)
