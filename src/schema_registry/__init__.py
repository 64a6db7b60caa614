"""
Versioned schema registry.

Tracks attribute types, asset schemas composed of them and unit labels for
one logical domain. Asset schemas keep an append-only change log, so their
composition at any past version can be rebuilt:

    AttributeTypeRegistry  →  AssetSchemaRegistry  →  SchemaCatalog
     "what a field is"        "which fields, when"     "what a host stores"
"""

from .attributes import AttributeRef, AttributeType, AttributeTypeRegistry
from .assets import AssetSchema, AssetSchemaRegistry, ChangeEntry, ChangeKind
from .catalog import (
    SchemaCatalog,
    dumps_catalog,
    load_catalog,
    load_catalog_from_config,
    loads_catalog,
    save_catalog,
    save_catalog_from_config,
)
from .config import Config, configure_logging
from .errors import (
    AssetNotFoundError,
    AttributeNotFoundError,
    CatalogFormatError,
    DuplicateAssetError,
    InvalidArgumentError,
    InvalidVersionError,
    NotFoundError,
    SchemaRegistryError,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeRef",
    "AttributeType",
    "AttributeTypeRegistry",
    "AssetSchema",
    "AssetSchemaRegistry",
    "ChangeEntry",
    "ChangeKind",
    "SchemaCatalog",
    "dumps_catalog",
    "loads_catalog",
    "load_catalog",
    "load_catalog_from_config",
    "save_catalog",
    "save_catalog_from_config",
    "Config",
    "configure_logging",
    "SchemaRegistryError",
    "NotFoundError",
    "AttributeNotFoundError",
    "AssetNotFoundError",
    "InvalidArgumentError",
    "InvalidVersionError",
    "DuplicateAssetError",
    "CatalogFormatError",
]
