"""Catalog loader - rebuilds a SchemaCatalog from its serialized form."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..assets.types import AssetSchema, ChangeEntry, ChangeKind
from ..attributes.types import AttributeRef, AttributeType
from ..config import Config
from ..errors import CatalogFormatError
from .catalog import SchemaCatalog
from .serializer import FORMAT_VERSION

logger = logging.getLogger(__name__)


class CatalogLoader:
    """
    Loads catalogs from dictionaries, YAML or JSON.

    Inverse of CatalogSerializer. Counters and asset members are checked
    against their histories so a corrupted blob is rejected instead of loaded.
    """

    def __init__(self, strict_registration: bool = False):
        self.strict_registration = strict_registration

    def load_dict(self, data: dict[str, Any]) -> SchemaCatalog:
        """Load a catalog from a dictionary."""
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Catalog must be a mapping, got {type(data).__name__}")

        format_version = data.get("format_version")
        if format_version != FORMAT_VERSION:
            raise CatalogFormatError(
                f"Unsupported catalog format_version: {format_version!r} (expected {FORMAT_VERSION})"
            )

        catalog = SchemaCatalog(strict_registration=self.strict_registration)

        for item in data.get("attribute_types") or []:
            attribute_type = self._parse_attribute_type(item)
            if catalog.attribute_types.exists(attribute_type.name):
                raise CatalogFormatError(f"Duplicate attribute type '{attribute_type.name}'")
            catalog.attribute_types.restore(attribute_type)

        for item in data.get("assets") or []:
            asset = self._parse_asset(item)
            if catalog.asset_schemas.exists(asset.name):
                raise CatalogFormatError(f"Duplicate asset '{asset.name}'")
            catalog.asset_schemas.restore(asset)

        for unit in data.get("units") or []:
            if not isinstance(unit, str) or not unit:
                raise CatalogFormatError(f"Invalid unit label: {unit!r}")
            catalog.add_unit(unit)

        logger.debug(
            f"Loaded catalog: {len(catalog.attribute_types)} attribute types, "
            f"{len(catalog.asset_schemas)} assets, {len(catalog.list_units())} units"
        )
        return catalog

    def load_yaml(self, text: str) -> SchemaCatalog:
        """Load a catalog from a YAML string."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CatalogFormatError(f"Invalid YAML catalog: {e}") from e
        return self.load_dict(data or {})

    def load_json(self, text: str) -> SchemaCatalog:
        """Load a catalog from a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogFormatError(f"Invalid JSON catalog: {e}") from e
        return self.load_dict(data)

    def load_file(self, file_path: str | Path) -> SchemaCatalog:
        """Load a catalog from a YAML or JSON file."""
        path = Path(file_path)
        text = path.read_text(encoding="utf-8")
        logger.info(f"Loading catalog file: {path}")
        if path.suffix == ".json":
            return self.load_json(text)
        return self.load_yaml(text)

    def _parse_attribute_type(self, data: Any) -> AttributeType:
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Attribute type must be a mapping, got {data!r}")
        name = self._require_str(data, "name", "attribute type")
        data_type = self._require_str(data, "data_type", f"attribute type '{name}'")

        history = data.get("data_type_history") or []
        if not isinstance(history, list) or not all(isinstance(t, str) for t in history):
            raise CatalogFormatError(f"Attribute type '{name}' has an invalid data_type_history")

        version = data.get("version", len(history) + 1)
        if version != len(history) + 1:
            raise CatalogFormatError(
                f"Attribute type '{name}' is at version {version} "
                f"but has {len(history)} history entries"
            )

        return AttributeType(
            name=name,
            data_type=data_type,
            data_type_history=list(history),
            version=version,
        )

    def _parse_attribute_ref(self, data: Any, context: str) -> AttributeRef:
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Attribute reference in {context} must be a mapping")
        version = data.get("version")
        if isinstance(version, bool) or not isinstance(version, int) or version < 1:
            raise CatalogFormatError(f"Attribute reference in {context} has an invalid version: {version!r}")
        return AttributeRef(
            name=self._require_str(data, "name", context),
            version=version,
            data_type=self._require_str(data, "data_type", context),
        )

    def _parse_change_entry(self, data: Any, context: str) -> ChangeEntry:
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Change entry in {context} must be a mapping")
        try:
            kind = ChangeKind(data.get("kind"))
        except ValueError as e:
            raise CatalogFormatError(f"Unknown change kind {data.get('kind')!r} in {context}") from e
        return ChangeEntry(kind, self._parse_attribute_ref(data.get("attribute"), context))

    def _parse_asset(self, data: Any) -> AssetSchema:
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Asset must be a mapping, got {data!r}")
        name = self._require_str(data, "name", "asset")
        context = f"asset '{name}'"

        attributes = [self._parse_attribute_ref(r, context) for r in data.get("attributes") or []]
        history = [self._parse_change_entry(e, context) for e in data.get("change_history") or []]

        version = data.get("version", len(history) + 1)
        if version != len(history) + 1:
            raise CatalogFormatError(
                f"Asset '{name}' is at version {version} but has {len(history)} change entries"
            )
        self._check_membership(name, attributes, history)

        return AssetSchema(
            name=name,
            attributes=attributes,
            version=version,
            change_history=history,
        )

    @staticmethod
    def _check_membership(name: str, attributes: list[AttributeRef], history: list[ChangeEntry]) -> None:
        """
        Check that the members agree with the change history.

        Undoes the whole log on a copy of the members, newest entry first.
        An undone ADD must find its member, an undone DELETE must not.
        """
        members: dict[tuple[str, int], AttributeRef] = {}
        for ref in attributes:
            if ref.key in members:
                raise CatalogFormatError(f"Asset '{name}' lists {ref.name} v{ref.version} twice")
            members[ref.key] = ref

        for position, entry in reversed(list(enumerate(history, start=1))):
            ref = entry.attribute
            if entry.kind is ChangeKind.ADD:
                if members.pop(ref.key, None) is None:
                    raise CatalogFormatError(
                        f"Asset '{name}' change {position} adds {ref.name} v{ref.version}, "
                        f"which is not a member afterwards"
                    )
            else:
                if ref.key in members:
                    raise CatalogFormatError(
                        f"Asset '{name}' change {position} deletes {ref.name} v{ref.version}, "
                        f"which is still a member afterwards"
                    )
                members[ref.key] = ref

    @staticmethod
    def _require_str(data: dict, key: str, context: str) -> str:
        value = data.get(key)
        if not isinstance(value, str) or not value:
            raise CatalogFormatError(f"Missing or invalid '{key}' in {context}")
        return value


def loads_catalog(text: str, strict_registration: bool = False) -> SchemaCatalog:
    """
    Decode a catalog blob produced by dumps_catalog().

    JSON is a subset of YAML, so one parser handles both formats.
    """
    return CatalogLoader(strict_registration=strict_registration).load_yaml(text)


def load_catalog(source: str | Path | dict, strict_registration: bool = False) -> SchemaCatalog:
    """
    Convenience function to load a catalog.

    Args:
        source: File path or dictionary
        strict_registration: Raise on re-registration of an existing asset

    Returns:
        The loaded catalog
    """
    loader = CatalogLoader(strict_registration=strict_registration)

    if isinstance(source, dict):
        return loader.load_dict(source)
    return loader.load_file(source)


def load_catalog_from_config(config: Config) -> SchemaCatalog:
    """
    Load the catalog a configuration points at.

    Returns an empty catalog when no definition file is configured or the
    file does not exist yet.
    """
    strict = config.registry.strict_registration
    definition_file = config.store.definition_file
    if not definition_file:
        return SchemaCatalog(strict_registration=strict)

    path = Path(definition_file)
    if not path.exists():
        logger.info(f"Catalog file {path} not found, starting empty")
        return SchemaCatalog(strict_registration=strict)

    return load_catalog(path, strict_registration=strict)
