"""Serialize node trees back to YAML text."""

import yaml
from yaml.representer import SafeRepresenter

from .nodes import FunctionCall, FunctionTag, MappingNode, ScalarNode, SequenceNode, TemplateNode

_STR_TAG = "tag:yaml.org,2002:str"
_SEQ_TAG = "tag:yaml.org,2002:seq"
_MAP_TAG = "tag:yaml.org,2002:map"


def dump_template(template: TemplateNode) -> str:
    """Serialize a node tree as YAML.

    Functions are written in long form (``Fn::GetAtt: [A, B]``) so that
    nested calls never need two tags on one node. Parsing the output gives a
    tree equal to ``template``.
    """
    representer = SafeRepresenter()
    yaml_node = _to_yaml_node(template, representer)
    return yaml.serialize(yaml_node, Dumper=yaml.SafeDumper, allow_unicode=True)


def _to_yaml_node(node: TemplateNode, representer: SafeRepresenter) -> yaml.Node:
    if isinstance(node, MappingNode):
        return yaml.MappingNode(
            _MAP_TAG,
            [
                (yaml.ScalarNode(_STR_TAG, key), _to_yaml_node(value, representer))
                for key, value in node.entries
            ],
            flow_style=False,
        )

    if isinstance(node, SequenceNode):
        return yaml.SequenceNode(
            _SEQ_TAG,
            [_to_yaml_node(item, representer) for item in node.items],
            flow_style=False,
        )

    if isinstance(node, FunctionCall):
        return yaml.MappingNode(
            _MAP_TAG,
            [(yaml.ScalarNode(_STR_TAG, node.tag.value), _function_value(node, representer))],
            flow_style=False,
        )

    return representer.represent_data(node.value)


def _function_value(node: FunctionCall, representer: SafeRepresenter) -> yaml.Node:
    if node.tag.takes_single_value and len(node.args) == 1:
        return _to_yaml_node(node.args[0], representer)

    if (
        len(node.args) == 1
        and not isinstance(node.args[0], SequenceNode)
        and not (
            node.tag is FunctionTag.GET_ATT
            and isinstance(node.args[0], ScalarNode)
            and node.args[0].is_string
            and "." in node.args[0].value
        )
    ):
        # A lone non-list argument parses back as itself
        return _to_yaml_node(node.args[0], representer)

    return _to_yaml_node(SequenceNode(node.args), representer)
