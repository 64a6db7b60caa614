"""Shared test fixtures for the schema registry tests."""

import pytest

from schema_registry.attributes.types import AttributeRef
from schema_registry.catalog.catalog import SchemaCatalog


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def catalog() -> SchemaCatalog:
    """Empty catalog."""
    return SchemaCatalog()


@pytest.fixture
def car_catalog() -> SchemaCatalog:
    """
    Catalog walked through the Car history:

        v1 {color}  ->  v2 {color, weight}  ->  v3 {weight}
    """
    cat = SchemaCatalog()
    cat.upsert_attribute("color", "string")
    cat.upsert_attribute("weight", "int")
    cat.register_asset("Car", ["color"])
    cat.add_attribute_to_asset("Car", "weight")
    cat.remove_attribute_from_asset("Car", "color")
    cat.add_unit("kg")
    cat.add_unit("km/h")
    return cat


# =============================================================================
# Attribute Fixtures
# =============================================================================

@pytest.fixture
def color() -> AttributeRef:
    return AttributeRef(name="color", version=1, data_type="string")


@pytest.fixture
def weight() -> AttributeRef:
    return AttributeRef(name="weight", version=1, data_type="int")
