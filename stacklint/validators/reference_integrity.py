"""Reference integrity validators."""

from ..graph.node_types import EdgeType
from ..graph.reference_graph import ReferenceGraph
from ..schema.models import SchemaCatalog
from ..template.sections import RESOURCES
from .base import DiagnosticCode, ValidationResult


def check_dangling_references(graph: ReferenceGraph) -> ValidationResult:
    """Check that every reference names a declared entity.

    Each unresolved edge gives exactly one error, so repeated references to
    the same missing name are all reported at their own paths. Imports of
    other stacks' exports are never checked.

    Args:
        graph: The reference graph.

    Returns:
        ValidationResult with errors for dangling references.
    """
    result = ValidationResult()

    for edge in graph.unresolved_edges():
        result.add_error(
            code=DiagnosticCode.DANGLING_REFERENCE,
            message=f"{edge.via.value} references undeclared name '{edge.target}'",
            section=edge.source_section,
            name=edge.source,
            path=edge.path,
            target=edge.target,
            via=edge.via.value,
        )

    return result


def check_attributes(graph: ReferenceGraph, catalog: SchemaCatalog) -> ValidationResult:
    """Check attribute lookups against the catalog.

    This validator checks:
    - Fn::GetAtt targets a resource, not a parameter or mapping
    - The requested attribute exists for the target's type, when the
      catalog lists attributes for that type

    Args:
        graph: The reference graph.
        catalog: The schema catalog.

    Returns:
        ValidationResult with errors for bad attribute lookups.
    """
    result = ValidationResult()
    resources = graph.sections.resources

    for edge in graph.edges():
        if edge.via == EdgeType.GET_ATT and edge.is_resolved and edge.target_section != RESOURCES:
            result.add_error(
                code=DiagnosticCode.MALFORMED_REFERENCE,
                message=f"Fn::GetAtt target '{edge.target}' is not a resource",
                section=edge.source_section,
                name=edge.source,
                path=edge.path,
                target=edge.target,
            )
            continue

        if edge.attribute is None or edge.target_section != RESOURCES:
            continue

        resource = resources.get(edge.target)
        if resource is None or resource.type is None:
            continue

        entry = catalog.get_resource_type(resource.type)
        if entry is None or entry.attributes is None:
            continue  # No attribute data to check against

        # Nested attributes (Endpoint.Address) may be listed whole or by root
        root = edge.attribute.split(".", 1)[0]
        if edge.attribute in entry.attributes or root in entry.attributes:
            continue

        result.add_error(
            code=DiagnosticCode.UNKNOWN_ATTRIBUTE,
            message=(
                f"{resource.type} has no attribute '{edge.attribute}' "
                f"(requested from '{edge.target}')"
            ),
            section=edge.source_section,
            name=edge.source,
            path=edge.path,
            target=edge.target,
            attribute=edge.attribute,
        )

    return result
