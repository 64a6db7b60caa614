"""Asset schemas - versioned composites of attribute types."""

from .types import AssetSchema, ChangeEntry, ChangeKind
from .registry import AssetSchemaRegistry

__all__ = [
    "AssetSchema",
    "ChangeEntry",
    "ChangeKind",
    "AssetSchemaRegistry",
]
