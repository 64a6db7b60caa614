"""Attribute types - named, versioned data-type declarations."""

from .types import AttributeRef, AttributeType
from .registry import AttributeTypeRegistry

__all__ = [
    "AttributeRef",
    "AttributeType",
    "AttributeTypeRegistry",
]
