"""ReferenceGraph wrapper around networkx for template cross-references."""

from dataclasses import dataclass, replace

import networkx as nx

from ..template.sections import (
    CONDITIONS,
    MAPPINGS,
    PARAMETERS,
    RESOURCES,
    TemplateSections,
)
from .node_types import DEPENDENCY_EDGE_TYPES, EdgeType, NodeType

EXTERNAL_NODE = "External"

# Namespaces each kind of reference may resolve to, in lookup order.
# Conditions are only reachable through condition uses, and DependsOn only
# names resources.
_TARGET_SECTIONS: dict[EdgeType, tuple[str, ...]] = {
    EdgeType.REF: (RESOURCES, PARAMETERS, MAPPINGS),
    EdgeType.GET_ATT: (RESOURCES, PARAMETERS, MAPPINGS),
    EdgeType.SUB: (RESOURCES, PARAMETERS, MAPPINGS),
    EdgeType.FIND_IN_MAP: (MAPPINGS, RESOURCES, PARAMETERS),
    EdgeType.DEPENDS_ON: (RESOURCES,),
    EdgeType.CONDITION: (CONDITIONS,),
}


@dataclass(frozen=True)
class ReferenceEdge:
    """A cross-reference from one declaration to a name.

    ``target_section`` is filled in when the edge is added to a graph:
    the section the name resolved to, ``External`` for imports, or None
    when the name is not declared anywhere.
    """

    source: str
    source_section: str
    target: str
    via: EdgeType
    path: str
    attribute: str | None = None
    target_section: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.target_section is not None


class ReferenceGraph:
    """A graph of the cross-references in a template.

    Wraps a networkx MultiDiGraph so that several references between the
    same pair of declarations are all kept.
    """

    def __init__(self, sections: TemplateSections | None = None):
        """Initialize an empty reference graph."""
        self._graph = nx.MultiDiGraph()
        self._edges: list[ReferenceEdge] = []
        self.sections = sections or TemplateSections()

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    @staticmethod
    def node_id(section: str, name: str) -> str:
        return f"{section}:{name}"

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_declaration(self, section: str, name: str) -> str:
        """Add a declared parameter, mapping, condition, resource or output.

        Returns:
            The node ID.
        """
        node_id = self.node_id(section, name)
        self._graph.add_node(node_id, node_type=NodeType(section), name=name)
        return node_id

    def add_reference(self, edge: ReferenceEdge) -> ReferenceEdge:
        """Resolve an edge's target and add it to the graph.

        Returns:
            The edge with ``target_section`` set.
        """
        source_id = self.node_id(edge.source_section, edge.source)
        if not self._graph.has_node(source_id):
            self.add_declaration(edge.source_section, edge.source)

        target_section = self._resolve(edge.target, edge.via)
        edge = replace(edge, target_section=target_section)

        if target_section is None:
            target_id = self.node_id(NodeType.UNRESOLVED.value, edge.target)
            self._graph.add_node(target_id, node_type=NodeType.UNRESOLVED, name=edge.target)
        elif target_section == EXTERNAL_NODE:
            target_id = EXTERNAL_NODE
            self._graph.add_node(target_id, node_type=NodeType.EXTERNAL, name=EXTERNAL_NODE)
        else:
            target_id = self.node_id(target_section, edge.target)

        self._graph.add_edge(source_id, target_id, edge=edge)
        self._edges.append(edge)
        return edge

    def _resolve(self, name: str, via: EdgeType) -> str | None:
        if via == EdgeType.IMPORT_VALUE:
            return EXTERNAL_NODE

        for section in _TARGET_SECTIONS.get(via, ()):
            if self._graph.has_node(self.node_id(section, name)):
                return section
        return None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def edges(self, via: EdgeType | None = None) -> list[ReferenceEdge]:
        """Get all edges in the order they were found."""
        if via is None:
            return list(self._edges)
        return [e for e in self._edges if e.via == via]

    def unresolved_edges(self) -> list[ReferenceEdge]:
        """Get edges whose target is not declared anywhere."""
        return [e for e in self._edges if not e.is_resolved]

    def edges_from(self, section: str, name: str) -> list[ReferenceEdge]:
        """Get the references made by one declaration."""
        return [
            e for e in self._edges if e.source_section == section and e.source == name
        ]

    def edges_to(self, section: str, name: str) -> list[ReferenceEdge]:
        """Get the references that resolved to one declaration."""
        node_id = self.node_id(section, name)
        if not self._graph.has_node(node_id):
            return []
        return [data["edge"] for _, _, data in self._graph.in_edges(node_id, data=True)]

    def is_referenced(self, section: str, name: str) -> bool:
        """Check if anything refers to a declaration."""
        node_id = self.node_id(section, name)
        return self._graph.has_node(node_id) and self._graph.in_degree(node_id) > 0

    def get_declared_names(self, section: str) -> list[str]:
        """Get the names declared in a section, in template order."""
        node_type = NodeType(section)
        return [
            data["name"]
            for _, data in self._graph.nodes(data=True)
            if data.get("node_type") == node_type
        ]

    def dependency_graph(self) -> nx.DiGraph:
        """Build the creation-order graph between resources.

        An edge A -> B means A needs B to exist first.
        """
        dependencies = nx.DiGraph()
        dependencies.add_nodes_from(self.get_declared_names(RESOURCES))

        for edge in self._edges:
            if (
                edge.via in DEPENDENCY_EDGE_TYPES
                and edge.source_section == RESOURCES
                and edge.target_section == RESOURCES
            ):
                dependencies.add_edge(edge.source, edge.target)

        return dependencies
