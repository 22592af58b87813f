"""Node and edge type definitions for the reference graph."""

from enum import Enum


class NodeType(str, Enum):
    """Types of nodes in the reference graph."""

    PARAMETER = "Parameters"
    MAPPING = "Mappings"
    CONDITION = "Conditions"
    RESOURCE = "Resources"
    OUTPUT = "Outputs"
    EXTERNAL = "External"  # Exports of other stacks
    UNRESOLVED = "Unresolved"  # Referenced but never declared


class EdgeType(str, Enum):
    """How a cross-reference was made."""

    REF = "Ref"
    GET_ATT = "Fn::GetAtt"
    SUB = "Fn::Sub"
    FIND_IN_MAP = "Fn::FindInMap"
    IMPORT_VALUE = "Fn::ImportValue"
    DEPENDS_ON = "DependsOn"
    CONDITION = "Condition"


# Edges that force the target resource to be created first
DEPENDENCY_EDGE_TYPES = frozenset(
    {EdgeType.REF, EdgeType.GET_ATT, EdgeType.SUB, EdgeType.DEPENDS_ON}
)

PSEUDO_PARAMETERS = frozenset(
    {
        "AWS::AccountId",
        "AWS::NotificationARNs",
        "AWS::NoValue",
        "AWS::Partition",
        "AWS::Region",
        "AWS::StackId",
        "AWS::StackName",
        "AWS::URLSuffix",
    }
)
