"""Graph layer for representing template cross-references as networkx graphs."""

from .node_types import DEPENDENCY_EDGE_TYPES, PSEUDO_PARAMETERS, EdgeType, NodeType
from .reference_graph import EXTERNAL_NODE, ReferenceEdge, ReferenceGraph
from .builder import build_graph, extract_sections

__all__ = [
    "DEPENDENCY_EDGE_TYPES",
    "PSEUDO_PARAMETERS",
    "EdgeType",
    "NodeType",
    "EXTERNAL_NODE",
    "ReferenceEdge",
    "ReferenceGraph",
    "build_graph",
    "extract_sections",
]
