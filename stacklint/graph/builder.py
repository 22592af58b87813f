"""Builder for converting a parsed template into a ReferenceGraph."""

import logging
import re

from ..template.nodes import (
    FunctionCall,
    FunctionTag,
    MappingNode,
    ScalarNode,
    SequenceNode,
    TemplateNode,
    node_kind,
)
from ..template.sections import (
    CONDITIONS,
    KNOWN_SECTIONS,
    MAPPINGS,
    OUTPUTS,
    PARAMETERS,
    RESOURCE_KEYS,
    RESOURCES,
    Output,
    Parameter,
    Resource,
    TemplateSections,
)
from ..validators.base import DiagnosticCode, ValidationResult
from .node_types import PSEUDO_PARAMETERS, EdgeType
from .reference_graph import ReferenceEdge, ReferenceGraph

logger = logging.getLogger(__name__)

TEMPLATE_SECTION = "Template"

# ${Name} or ${Resource.Attribute}; ${!Literal} is escaped text
_SUB_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")

# Resource keys handled outside the generic scan
_SPECIAL_RESOURCE_KEYS = ("Type", "DependsOn", "Condition")


def build_graph(template: MappingNode) -> tuple[ReferenceGraph, ValidationResult]:
    """Build a ReferenceGraph from a parsed template.

    Args:
        template: The root node returned by the template loader.

    Returns:
        The graph (carrying the extracted sections) and the structural
        issues found while building it.
    """
    issues = ValidationResult()
    sections = extract_sections(template, issues)
    graph = ReferenceGraph(sections)

    # Add all declarations first so that references can resolve
    for name in sections.parameters:
        graph.add_declaration(PARAMETERS, name)
    for name in sections.mappings:
        graph.add_declaration(MAPPINGS, name)
    for name in sections.conditions:
        graph.add_declaration(CONDITIONS, name)
    for name in sections.resources:
        graph.add_declaration(RESOURCES, name)
    for name in sections.outputs:
        graph.add_declaration(OUTPUTS, name)

    scanner = _ReferenceScanner(graph, issues)

    for name, condition in sections.conditions.items():
        scanner.scan(CONDITIONS, name, condition, f"{CONDITIONS}.{name}")

    for resource in sections.resources.values():
        scanner.scan_resource(resource)

    for output in sections.outputs.values():
        scanner.scan_output(output)

    logger.debug(
        "Built reference graph: %d resources, %d edges, %d structural issues",
        len(sections.resources),
        len(graph.edges()),
        len(issues.issues),
    )
    return graph, issues


def extract_sections(template: MappingNode, issues: ValidationResult) -> TemplateSections:
    """Split a template into its named sections.

    Shape problems are added to ``issues``; the offending entries are kept
    with whatever could be read from them so that references still resolve.
    """
    sections = TemplateSections()

    for key in template.keys():
        if key not in KNOWN_SECTIONS:
            issues.add_error(
                code=DiagnosticCode.UNKNOWN_SECTION,
                message=f"Unknown top-level section '{key}'",
                section=TEMPLATE_SECTION,
                name=key,
                path=key,
            )

    for name, node in _section_entries(template, PARAMETERS, issues):
        if not isinstance(node, MappingNode):
            issues.add_error(
                code=DiagnosticCode.MALFORMED_SECTION,
                message=f"Parameter '{name}' must be a mapping, got {node_kind(node)}",
                section=PARAMETERS,
                name=name,
                path=f"{PARAMETERS}.{name}",
            )
            node = MappingNode()
        sections.parameters[name] = Parameter(name, _string_value(node.get("Type")), node)

    for name, node in _section_entries(template, MAPPINGS, issues):
        sections.mappings[name] = node

    for name, node in _section_entries(template, CONDITIONS, issues):
        sections.conditions[name] = node

    for name, node in _section_entries(template, RESOURCES, issues):
        sections.resources[name] = _extract_resource(name, node, issues)

    for name, node in _section_entries(template, OUTPUTS, issues):
        sections.outputs[name] = Output(name, node)

    return sections


def _section_entries(
    template: MappingNode, section: str, issues: ValidationResult
) -> list[tuple[str, TemplateNode]]:
    node = template.get(section)
    if node is None:
        return []
    if not isinstance(node, MappingNode):
        issues.add_error(
            code=DiagnosticCode.MALFORMED_SECTION,
            message=f"Section '{section}' must be a mapping, got {node_kind(node)}",
            section=section,
            path=section,
        )
        return []
    return node.items()


def _extract_resource(name: str, node: TemplateNode, issues: ValidationResult) -> Resource:
    path = f"{RESOURCES}.{name}"

    if not isinstance(node, MappingNode):
        issues.add_error(
            code=DiagnosticCode.MALFORMED_RESOURCE,
            message=f"Resource '{name}' must be a mapping, got {node_kind(node)}",
            section=RESOURCES,
            name=name,
            path=path,
        )
        return Resource(name, None, MappingNode(), MappingNode())

    resource_type = _string_value(node.get("Type"))
    if resource_type is None:
        issues.add_error(
            code=DiagnosticCode.MALFORMED_RESOURCE,
            message=f"Resource '{name}' has no Type",
            section=RESOURCES,
            name=name,
            path=f"{path}.Type",
        )

    properties = node.get("Properties", MappingNode())
    if not isinstance(properties, MappingNode):
        issues.add_error(
            code=DiagnosticCode.MALFORMED_RESOURCE,
            message=f"Properties of '{name}' must be a mapping, got {node_kind(properties)}",
            section=RESOURCES,
            name=name,
            path=f"{path}.Properties",
        )
        properties = MappingNode()

    for key in node.keys():
        if key not in RESOURCE_KEYS:
            issues.add_error(
                code=DiagnosticCode.UNKNOWN_RESOURCE_KEY,
                message=f"Unknown key '{key}' in resource '{name}'",
                section=RESOURCES,
                name=name,
                path=f"{path}.{key}",
            )

    depends_on: tuple[str, ...] = ()
    depends_node = node.get("DependsOn")
    if depends_node is not None:
        items = depends_node.items if isinstance(depends_node, SequenceNode) else (depends_node,)
        names = [_string_value(item) for item in items]
        if any(n is None for n in names):
            issues.add_error(
                code=DiagnosticCode.MALFORMED_RESOURCE,
                message="DependsOn must be a resource name or a list of names",
                section=RESOURCES,
                name=name,
                path=f"{path}.DependsOn",
            )
        depends_on = tuple(n for n in names if n is not None)

    condition = None
    condition_node = node.get("Condition")
    if condition_node is not None:
        condition = _string_value(condition_node)
        if condition is None:
            issues.add_error(
                code=DiagnosticCode.MALFORMED_RESOURCE,
                message="Condition must be a condition name",
                section=RESOURCES,
                name=name,
                path=f"{path}.Condition",
            )

    return Resource(
        name=name,
        type=resource_type,
        properties=properties,
        node=node,
        depends_on=depends_on,
        condition=condition,
    )


def _string_value(node: TemplateNode | None) -> str | None:
    if isinstance(node, ScalarNode) and node.is_string:
        return node.value
    return None


class _ReferenceScanner:
    """Walks node trees post-order, turning function calls into edges."""

    def __init__(self, graph: ReferenceGraph, issues: ValidationResult):
        self._graph = graph
        self._issues = issues

    def scan_resource(self, resource: Resource) -> None:
        path = f"{RESOURCES}.{resource.name}"

        for key, child in resource.node.items():
            if key not in _SPECIAL_RESOURCE_KEYS:
                self.scan(RESOURCES, resource.name, child, f"{path}.{key}")

        for target in resource.depends_on:
            self._add(RESOURCES, resource.name, target, EdgeType.DEPENDS_ON, f"{path}.DependsOn")

        if resource.condition is not None:
            self._add(
                RESOURCES, resource.name, resource.condition, EdgeType.CONDITION, f"{path}.Condition"
            )

    def scan_output(self, output: Output) -> None:
        path = f"{OUTPUTS}.{output.name}"
        node = output.node

        if not isinstance(node, MappingNode):
            self.scan(OUTPUTS, output.name, node, path)
            return

        for key, child in node.items():
            condition = _string_value(child) if key == "Condition" else None
            if condition is not None:
                self._add(OUTPUTS, output.name, condition, EdgeType.CONDITION, f"{path}.Condition")
            else:
                self.scan(OUTPUTS, output.name, child, f"{path}.{key}")

    def scan(self, section: str, name: str, node: TemplateNode, path: str) -> None:
        """Record every reference in ``node`` as made by ``section.name``."""
        if isinstance(node, MappingNode):
            for key, child in node.items():
                self.scan(section, name, child, f"{path}.{key}")
        elif isinstance(node, SequenceNode):
            for index, item in enumerate(node.items):
                self.scan(section, name, item, f"{path}[{index}]")
        elif isinstance(node, FunctionCall):
            for arg in node.args:
                self.scan(section, name, arg, path)
            self._record(section, name, node, path)

    def _record(self, section: str, name: str, call: FunctionCall, path: str) -> None:
        tag = call.tag
        args = call.args

        if tag is FunctionTag.REF:
            target = _string_value(args[0]) if len(args) == 1 else None
            if target is None:
                self._malformed(section, name, path, "Ref expects a single logical name")
            elif target not in PSEUDO_PARAMETERS:
                self._add(section, name, target, EdgeType.REF, path)

        elif tag is FunctionTag.GET_ATT:
            target = _string_value(args[0]) if len(args) == 2 else None
            attribute_node = args[1] if len(args) == 2 else None
            attribute = _string_value(attribute_node)
            if target is None or (attribute is None and not isinstance(attribute_node, FunctionCall)):
                self._malformed(section, name, path, "Fn::GetAtt expects a resource name and an attribute")
            else:
                self._add(section, name, target, EdgeType.GET_ATT, path, attribute=attribute)

        elif tag is FunctionTag.FIND_IN_MAP:
            if len(args) not in (3, 4):
                self._malformed(section, name, path, "Fn::FindInMap expects a map name and two keys")
                return
            target = _string_value(args[0])
            if target is not None:
                self._add(section, name, target, EdgeType.FIND_IN_MAP, path)
            elif not isinstance(args[0], FunctionCall):
                self._malformed(section, name, path, "Fn::FindInMap map name must be a string")

        elif tag is FunctionTag.IMPORT_VALUE:
            if len(args) != 1 or isinstance(args[0], (MappingNode, SequenceNode)):
                self._malformed(section, name, path, "Fn::ImportValue expects an export name")
                return
            export = _string_value(args[0]) or "*"
            self._add(section, name, export, EdgeType.IMPORT_VALUE, path)

        elif tag is FunctionTag.SUB:
            self._record_sub(section, name, call, path)

        elif tag is FunctionTag.IF:
            condition = _string_value(args[0]) if args else None
            if condition is None:
                self._malformed(section, name, path, "Fn::If expects a condition name first")
            else:
                self._add(section, name, condition, EdgeType.CONDITION, path)

        elif tag is FunctionTag.CONDITION:
            condition = _string_value(args[0]) if len(args) == 1 else None
            if condition is None:
                self._malformed(section, name, path, "Condition expects a condition name")
            else:
                self._add(section, name, condition, EdgeType.CONDITION, path)

    def _record_sub(self, section: str, name: str, call: FunctionCall, path: str) -> None:
        args = call.args
        text = _string_value(args[0]) if args else None
        variables = args[1] if len(args) == 2 else MappingNode()

        if text is None or len(args) > 2 or not isinstance(variables, MappingNode):
            self._malformed(section, name, path, "Fn::Sub expects a string and an optional variable map")
            return

        local_names = set(variables.keys())
        for match in _SUB_PLACEHOLDER.finditer(text):
            placeholder = match.group(1).strip()
            if not placeholder or placeholder.startswith("!"):
                continue
            if placeholder in local_names or placeholder in PSEUDO_PARAMETERS:
                continue

            if "." in placeholder:
                target, attribute = placeholder.split(".", 1)
                self._add(section, name, target, EdgeType.SUB, path, attribute=attribute)
            else:
                self._add(section, name, placeholder, EdgeType.SUB, path)

    def _add(
        self,
        section: str,
        name: str,
        target: str,
        via: EdgeType,
        path: str,
        attribute: str | None = None,
    ) -> None:
        self._graph.add_reference(
            ReferenceEdge(
                source=name,
                source_section=section,
                target=target,
                via=via,
                path=path,
                attribute=attribute,
            )
        )

    def _malformed(self, section: str, name: str, path: str, message: str) -> None:
        self._issues.add_error(
            code=DiagnosticCode.MALFORMED_REFERENCE,
            message=message,
            section=section,
            name=name,
            path=path,
        )
