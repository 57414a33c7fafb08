# catalog package — read-only park/attraction accessor
from services.waylight.catalog.catalog import (
    DEFAULT_PARKS,
    AttractionCatalog,
    catalog_from_dict,
    load_catalog,
)

__all__ = [
    "DEFAULT_PARKS",
    "AttractionCatalog",
    "catalog_from_dict",
    "load_catalog",
]
