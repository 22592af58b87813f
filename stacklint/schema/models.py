"""Pydantic models for the resource schema catalog."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScalarType(str, Enum):
    """Primitive property types."""

    STRING = "String"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    DOUBLE = "Double"
    LONG = "Long"
    JSON = "Json"


_SCALAR_NAMES = {t.value for t in ScalarType}


class ScalarKind(BaseModel):
    """A primitive property value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    type: ScalarType

    def describe(self) -> str:
        return self.type.value


class ListKind(BaseModel):
    """A list of values of one kind."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    item: "PropertyKind"

    def describe(self) -> str:
        return f"List of {self.item.describe()}"


class ObjectKind(BaseModel):
    """A nested object described by a named property type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    type_name: str

    def describe(self) -> str:
        return self.type_name


PropertyKind = Annotated[
    Union[ScalarKind, ListKind, ObjectKind], Field(discriminator="kind")
]

ListKind.model_rebuild()


def normalize_property_kind(value: object) -> object:
    """Convert the catalog shorthand into PropertyKind data.

    ``String`` becomes a scalar, ``[Tag]`` a list of ``Tag`` objects and any
    other name an object. Values already in model form pass through.
    """
    if isinstance(value, str):
        name = value.strip()
        if name in _SCALAR_NAMES:
            return {"kind": "scalar", "type": name}
        return {"kind": "object", "type_name": name}
    if isinstance(value, list):
        if len(value) != 1:
            # Let pydantic report the bad shape
            return {"kind": "list", "item": value}
        return {"kind": "list", "item": normalize_property_kind(value[0])}
    return value


class SchemaEntry(BaseModel):
    """Schema of one resource type or property type."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Type", min_length=1)
    properties: dict[str, PropertyKind] = Field(
        alias="Properties", default_factory=dict
    )
    attributes: frozenset[str] | None = Field(alias="Attributes", default=None)

    @model_validator(mode="before")
    @classmethod
    def normalize_entry(cls, data: object) -> object:
        """Expand property shorthand and treat empty sections as absent."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        properties = data.get("Properties", data.get("properties"))
        if properties is None:
            properties = {}
        if isinstance(properties, dict):
            properties = {
                name: normalize_property_kind(kind)
                for name, kind in properties.items()
            }
        if "properties" in data:
            data["properties"] = properties
        else:
            data["Properties"] = properties

        return data

    @property
    def is_resource_type(self) -> bool:
        """Resource types are namespaced (``AWS::EC2::Instance``)."""
        return "::" in self.name

    def get_property(self, name: str) -> ScalarKind | ListKind | ObjectKind | None:
        """Get the kind of a property by name."""
        return self.properties.get(name)


class SchemaCatalog(BaseModel):
    """All known schema entries, keyed by type name."""

    model_config = ConfigDict(frozen=True)

    entries: dict[str, SchemaEntry] = Field(default_factory=dict)

    def get_resource_type(self, name: str) -> SchemaEntry | None:
        """Get a resource type entry by name."""
        entry = self.entries.get(name)
        if entry is not None and entry.is_resource_type:
            return entry
        return None

    def get_property_type(self, name: str) -> SchemaEntry | None:
        """Get a property type entry (``Tag``, ``Ingress``...) by name."""
        entry = self.entries.get(name)
        if entry is not None and not entry.is_resource_type:
            return entry
        return None

    def get_resource_type_names(self) -> list[str]:
        """Get all resource type names."""
        return [name for name, entry in self.entries.items() if entry.is_resource_type]

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)
