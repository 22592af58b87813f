"""Resource type and property schema validator."""

import re

from ..schema.models import ListKind, ObjectKind, ScalarKind, ScalarType, SchemaCatalog, SchemaEntry
from ..template.nodes import FunctionCall, MappingNode, ScalarNode, SequenceNode, TemplateNode, node_kind
from ..template.sections import RESOURCES, TemplateSections
from .base import DiagnosticCode, ValidationResult

_INTEGER = re.compile(r"^[+-]?\d+$")
_BOOLEAN_STRINGS = {"true", "false"}


def check_resource_schemas(
    sections: TemplateSections, catalog: SchemaCatalog
) -> ValidationResult:
    """Check resources against the schema catalog.

    This validator checks:
    - Each resource type exists in the catalog
    - Each property is declared for its type (recursing into known
      property types)
    - Each property value has a compatible kind

    Property checks are skipped for resources of unknown type, and function
    calls are accepted wherever a value is expected.

    Args:
        sections: The extracted template sections.
        catalog: The schema catalog.

    Returns:
        ValidationResult with errors for schema violations.
    """
    result = ValidationResult()

    for name, resource in sections.resources.items():
        if resource.type is None:
            continue  # Reported as MalformedResource while building

        entry = catalog.get_resource_type(resource.type)
        if entry is None:
            result.add_error(
                code=DiagnosticCode.UNKNOWN_RESOURCE_TYPE,
                message=f"Resource type '{resource.type}' is not in the schema catalog",
                section=RESOURCES,
                name=name,
                path=f"{RESOURCES}.{name}.Type",
                resource_type=resource.type,
            )
            continue

        checker = _PropertyChecker(result, catalog, name)
        checker.check_properties(entry, resource.properties, f"{RESOURCES}.{name}.Properties")

    return result


class _PropertyChecker:
    def __init__(self, result: ValidationResult, catalog: SchemaCatalog, resource_name: str):
        self._result = result
        self._catalog = catalog
        self._name = resource_name

    def check_properties(self, entry: SchemaEntry, properties: MappingNode, path: str) -> None:
        for key, value in properties.items():
            kind = entry.get_property(key)
            if kind is None:
                self._result.add_error(
                    code=DiagnosticCode.UNKNOWN_PROPERTY,
                    message=f"Property '{key}' is not defined for {entry.name}",
                    section=RESOURCES,
                    name=self._name,
                    path=f"{path}.{key}",
                    schema_type=entry.name,
                )
                continue
            self.check_value(kind, value, f"{path}.{key}")

    def check_value(
        self, kind: ScalarKind | ListKind | ObjectKind, node: TemplateNode, path: str
    ) -> None:
        # The value of a function is only known at deploy time
        if isinstance(node, FunctionCall):
            return

        if isinstance(kind, ListKind):
            if not isinstance(node, SequenceNode):
                self._mismatch(kind, node, path)
                return
            for index, item in enumerate(node.items):
                self.check_value(kind.item, item, f"{path}[{index}]")

        elif isinstance(kind, ObjectKind):
            if not isinstance(node, MappingNode):
                self._mismatch(kind, node, path)
                return
            property_type = self._catalog.get_property_type(kind.type_name)
            if property_type is not None:
                self.check_properties(property_type, node, path)

        elif not _scalar_matches(kind.type, node):
            self._mismatch(kind, node, path)

    def _mismatch(
        self, kind: ScalarKind | ListKind | ObjectKind, node: TemplateNode, path: str
    ) -> None:
        self._result.add_error(
            code=DiagnosticCode.PROPERTY_KIND_MISMATCH,
            message=f"Expected {kind.describe()}, got {node_kind(node)}",
            section=RESOURCES,
            name=self._name,
            path=path,
            expected=kind.describe(),
            actual=node_kind(node),
        )


def _scalar_matches(expected: ScalarType, node: TemplateNode) -> bool:
    if expected is ScalarType.JSON:
        return isinstance(node, MappingNode) or (
            isinstance(node, ScalarNode) and node.is_string
        )

    if not isinstance(node, ScalarNode) or node.value is None:
        return False

    value = node.value
    if expected is ScalarType.STRING:
        return True
    if expected is ScalarType.BOOLEAN:
        return isinstance(value, bool) or (
            isinstance(value, str) and value.lower() in _BOOLEAN_STRINGS
        )
    if isinstance(value, bool):
        return False
    if expected in (ScalarType.INTEGER, ScalarType.LONG):
        return isinstance(value, int) or (
            isinstance(value, str) and _INTEGER.match(value.strip()) is not None
        )
    # Double
    if isinstance(value, (int, float)):
        return True
    try:
        float(value)
    except ValueError:
        return False
    return True
