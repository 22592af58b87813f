"""Tests for ReferenceGraph."""

from stacklint.graph.node_types import EdgeType, NodeType
from stacklint.graph.reference_graph import EXTERNAL_NODE, ReferenceEdge, ReferenceGraph


def _edge(source, target, via=EdgeType.REF, section="Resources", **kwargs):
    return ReferenceEdge(
        source=source,
        source_section=section,
        target=target,
        via=via,
        path=f"{section}.{source}",
        **kwargs,
    )


class TestReferenceGraph:
    def test_add_declaration(self):
        graph = ReferenceGraph()
        node_id = graph.add_declaration("Resources", "Bucket")

        assert node_id == "Resources:Bucket"
        assert graph.graph.nodes[node_id]["node_type"] == NodeType.RESOURCE
        assert graph.get_declared_names("Resources") == ["Bucket"]

    def test_resolves_to_declared_section(self):
        graph = ReferenceGraph()
        graph.add_declaration("Parameters", "Env")
        graph.add_declaration("Resources", "Bucket")

        edge = graph.add_reference(_edge("Bucket", "Env"))

        assert edge.target_section == "Parameters"
        assert edge.is_resolved
        assert graph.is_referenced("Parameters", "Env")
        assert not graph.is_referenced("Resources", "Bucket")

    def test_ref_prefers_resources(self):
        graph = ReferenceGraph()
        graph.add_declaration("Parameters", "Name")
        graph.add_declaration("Resources", "Name")

        edge = graph.add_reference(_edge("Other", "Name"))

        assert edge.target_section == "Resources"

    def test_condition_edges_use_condition_namespace(self):
        graph = ReferenceGraph()
        graph.add_declaration("Resources", "IsProd")
        graph.add_declaration("Conditions", "IsProd")

        edge = graph.add_reference(_edge("Bucket", "IsProd", via=EdgeType.CONDITION))

        assert edge.target_section == "Conditions"

    def test_condition_reachable_only_from_condition_edges(self):
        graph = ReferenceGraph()
        graph.add_declaration("Conditions", "IsProd")

        assert graph.add_reference(_edge("Bucket", "IsProd")).target_section is None
        assert graph.add_reference(_edge("Bucket", "IsProd", via=EdgeType.SUB)).target_section is None
        depends = graph.add_reference(_edge("Bucket", "IsProd", via=EdgeType.DEPENDS_ON))
        assert depends.target_section is None

    def test_depends_on_only_resolves_resources(self):
        graph = ReferenceGraph()
        graph.add_declaration("Parameters", "Env")

        edge = graph.add_reference(_edge("Bucket", "Env", via=EdgeType.DEPENDS_ON))

        assert not edge.is_resolved

    def test_unresolved_edge(self):
        graph = ReferenceGraph()
        edge = graph.add_reference(_edge("Bucket", "Missing"))

        assert edge.target_section is None
        assert graph.unresolved_edges() == [edge]
        assert graph.graph.nodes["Unresolved:Missing"]["node_type"] == NodeType.UNRESOLVED

    def test_import_value_always_external(self):
        graph = ReferenceGraph()
        graph.add_declaration("Resources", "SharedVpc")

        edge = graph.add_reference(_edge("Bucket", "SharedVpc", via=EdgeType.IMPORT_VALUE))

        assert edge.target_section == EXTERNAL_NODE
        assert graph.unresolved_edges() == []

    def test_edge_queries(self):
        graph = ReferenceGraph()
        graph.add_declaration("Resources", "A")
        graph.add_declaration("Resources", "B")
        graph.add_reference(_edge("A", "B"))
        graph.add_reference(_edge("A", "B", via=EdgeType.GET_ATT, attribute="Arn"))
        graph.add_reference(_edge("B", "Missing"))

        assert len(graph.edges()) == 3
        assert len(graph.edges(EdgeType.GET_ATT)) == 1
        assert len(graph.edges_from("Resources", "A")) == 2
        assert len(graph.edges_to("Resources", "B")) == 2
        assert graph.edges_to("Resources", "Nothing") == []


class TestDependencyGraph:
    def test_only_resource_dependencies(self, graph_of):
        graph = graph_of(
            """
Parameters:
  Env:
    Type: String
Conditions:
  IsProd: !Equals [!Ref Env, prod]
Resources:
  Key:
    Type: AWS::KMS::Key
  Alias:
    Type: AWS::KMS::Alias
    Condition: IsProd
    Properties:
      TargetKeyId: !Ref Key
      AliasName: !Sub 'alias/${Env}'
  Secret:
    Type: AWS::SecretsManager::Secret
    DependsOn: Alias
    Properties:
      KmsKeyId: !GetAtt Key.Arn
Outputs:
  KeyArn:
    Value: !GetAtt Key.Arn
"""
        )

        dependencies = graph.dependency_graph()

        assert set(dependencies.nodes) == {"Key", "Alias", "Secret"}
        assert set(dependencies.edges) == {
            ("Alias", "Key"),
            ("Secret", "Alias"),
            ("Secret", "Key"),
        }

    def test_find_in_map_is_not_a_dependency(self, graph_of):
        graph = graph_of(
            """
Mappings:
  Key:
    a: {b: c}
Resources:
  Key2:
    Type: AWS::KMS::Key
    Properties:
      Description: !FindInMap [Key, a, b]
"""
        )
        assert list(graph.dependency_graph().edges) == []
