"""Creation-order dependency cycle detection."""

import networkx as nx

from ..graph.reference_graph import ReferenceGraph
from ..template.sections import RESOURCES
from .base import DiagnosticCode, ValidationResult


def check_dependency_cycles(graph: ReferenceGraph) -> ValidationResult:
    """Check that resources can be created in some order.

    Ref, GetAtt, Sub placeholders and DependsOn between resources all force
    an order. Each strongly connected group of resources is reported once,
    on its alphabetically first member, with one cycle through the group.

    Args:
        graph: The reference graph.

    Returns:
        ValidationResult with an error per dependency cycle.
    """
    result = ValidationResult()
    dependencies = graph.dependency_graph()

    components = []
    for component in nx.strongly_connected_components(dependencies):
        members = sorted(component)
        if len(members) > 1 or dependencies.has_edge(members[0], members[0]):
            components.append(members)

    for members in sorted(components):
        start = members[0]
        cycle_edges = nx.find_cycle(dependencies.subgraph(members), source=start)
        cycle = _rotate([source for source, _ in cycle_edges])
        path = " -> ".join(cycle + [cycle[0]])

        result.add_error(
            code=DiagnosticCode.DEPENDENCY_CYCLE,
            message=f"Circular dependency: {path}",
            section=RESOURCES,
            name=start,
            path=f"{RESOURCES}.{start}",
            cycle=cycle,
            members=members,
        )

    return result


def _rotate(cycle: list[str]) -> list[str]:
    """Start a cycle at its smallest name so the output is stable."""
    first = cycle.index(min(cycle))
    return cycle[first:] + cycle[:first]
