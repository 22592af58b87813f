"""Schema catalog: property schemas per resource type."""

from .errors import SchemaLoadError, SchemaValidationError
from .models import (
    ListKind,
    ObjectKind,
    PropertyKind,
    ScalarKind,
    ScalarType,
    SchemaCatalog,
    SchemaEntry,
)
from .loader import load_catalog, load_default_catalog, parse_catalog_from_string

__all__ = [
    "SchemaLoadError",
    "SchemaValidationError",
    "ListKind",
    "ObjectKind",
    "PropertyKind",
    "ScalarKind",
    "ScalarType",
    "SchemaCatalog",
    "SchemaEntry",
    "load_catalog",
    "load_default_catalog",
    "parse_catalog_from_string",
]
