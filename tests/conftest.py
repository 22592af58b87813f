"""Shared fixtures for tests."""

from pathlib import Path

import pytest

from stacklint.graph.builder import build_graph
from stacklint.schema.loader import load_default_catalog, parse_catalog_from_string
from stacklint.template.loader import parse_template


@pytest.fixture
def examples_dir() -> Path:
    """Return the path to the examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def catalog():
    """Return the bundled schema catalog."""
    return load_default_catalog()


@pytest.fixture
def small_catalog_yaml() -> str:
    """Return a small catalog in the reference-sheet layout."""
    return """
Type: AWS::EC2::SecurityGroup
Properties:
  GroupDescription: String
  VpcId: String
  SecurityGroupIngress:
    - Ingress
  Tags:
    - Tag
Attributes: [GroupId]

Type: AWS::KMS::Key
Properties:
  Description: String
  Enabled: Boolean
  KeyPolicy: Json
  PendingWindowInDays: Integer

Type: Ingress
Properties:
  CidrIp: String
  FromPort: Integer
  ToPort: Integer
  IpProtocol: String

Type: Tag
Properties:
  Key: String
  Value: String
"""


@pytest.fixture
def small_catalog(small_catalog_yaml):
    """Return the parsed small catalog."""
    return parse_catalog_from_string(small_catalog_yaml)


@pytest.fixture
def minimal_template_yaml() -> str:
    """Return a minimal valid template."""
    return """
AWSTemplateFormatVersion: '2010-09-09'
Parameters:
  SomeParam:
    Type: String
Resources:
  Group:
    Type: AWS::EC2::SecurityGroup
    Properties:
      VpcId: !Ref 'SomeParam'
      GroupDescription: Web access
Outputs:
  GroupId:
    Value: !GetAtt Group.GroupId
"""


@pytest.fixture
def minimal_template(minimal_template_yaml):
    """Return the parsed minimal template."""
    return parse_template(minimal_template_yaml)


@pytest.fixture
def minimal_graph(minimal_template):
    """Return the reference graph of the minimal template."""
    graph, _ = build_graph(minimal_template)
    return graph


@pytest.fixture
def graph_of():
    """Return a helper that parses YAML and builds its reference graph."""

    def build(text: str):
        graph, _ = build_graph(parse_template(text))
        return graph

    return build
