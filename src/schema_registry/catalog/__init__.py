"""Schema catalog - aggregate registry and its serialization boundary."""

from .catalog import SchemaCatalog
from .serializer import CatalogSerializer, dumps_catalog, save_catalog, save_catalog_from_config
from .loader import CatalogLoader, load_catalog, load_catalog_from_config, loads_catalog

__all__ = [
    "SchemaCatalog",
    "CatalogSerializer",
    "CatalogLoader",
    "dumps_catalog",
    "loads_catalog",
    "save_catalog",
    "save_catalog_from_config",
    "load_catalog",
    "load_catalog_from_config",
]
