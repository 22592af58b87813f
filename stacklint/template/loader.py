"""YAML/JSON loading of templates into node trees."""

import json
import logging
from pathlib import Path

import yaml

from .errors import ParseError, ParseErrorKind, TemplateLoadError
from .nodes import (
    FunctionCall,
    FunctionTag,
    MappingNode,
    ScalarNode,
    SequenceNode,
    TemplateNode,
    node_kind,
)

logger = logging.getLogger(__name__)


class TemplateYamlLoader(yaml.SafeLoader):
    """Safe loader that keeps date-like strings (``2012-10-17``) as strings."""


TemplateYamlLoader.yaml_implicit_resolvers = {
    key: [r for r in resolvers if r[0] != "tag:yaml.org,2002:timestamp"]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_template(path: str | Path) -> MappingNode:
    """Load and parse a template file.

    Args:
        path: Path to a YAML or JSON template.

    Returns:
        The root MappingNode.

    Raises:
        TemplateLoadError: If the file cannot be read.
        ParseError: If the content cannot be parsed.
    """
    path = Path(path)

    if not path.exists():
        raise TemplateLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise TemplateLoadError(f"Not a file: {path}", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadError(f"Cannot read file: {e}", str(path)) from e

    try:
        template = parse_template(text)
    except ParseError as e:
        e.path = str(path)
        raise

    logger.debug("Parsed %s with %d top-level keys", path, len(template))
    return template


def parse_template(text: str) -> MappingNode:
    """Parse template text into a node tree.

    Text starting with ``{`` is read as JSON first, the way CloudFormation
    itself accepts JSON templates; anything else, or JSON that fails to
    parse, is read as YAML. An empty document gives an empty mapping.

    Raises:
        ParseError: If the text is not a well-formed template document.
    """
    try:
        template = _parse(text)
    except RecursionError as e:
        raise ParseError(
            ParseErrorKind.MALFORMED_SYNTAX, "Template is nested too deeply"
        ) from e

    if not isinstance(template, MappingNode):
        raise ParseError(
            ParseErrorKind.MALFORMED_SYNTAX,
            f"Expected mapping at template root, got {node_kind(template)}",
            line=template.line,
        )

    return template


def _parse(text: str) -> TemplateNode:
    json_error = None
    if text.lstrip().startswith("{"):
        try:
            return _parse_json(text)
        except json.JSONDecodeError as e:
            # A YAML flow mapping starts with a brace too
            json_error = e

    try:
        return _parse_yaml(text)
    except ParseError:
        if json_error is None:
            raise
        raise _from_json_error(json_error, text) from json_error


def _parse_yaml(text: str) -> TemplateNode:
    loader = TemplateYamlLoader(text)
    try:
        root = loader.get_single_node()
        if root is None:
            return MappingNode()
        return _NodeConverter(loader).convert(root)
    except yaml.MarkedYAMLError as e:
        raise _from_yaml_error(e) from e
    except yaml.YAMLError as e:
        raise ParseError(ParseErrorKind.MALFORMED_SYNTAX, str(e)) from e
    finally:
        loader.dispose()


def _parse_json(text: str) -> TemplateNode:
    return _from_json_value(json.loads(text, object_pairs_hook=_json_object))


def _json_object(pairs: list[tuple[str, object]]) -> dict[str, object]:
    result: dict[str, object] = {}
    for key, value in pairs:
        if key in result:
            raise ParseError(ParseErrorKind.DUPLICATE_KEY, f"Duplicate key '{key}'")
        result[key] = value
    return result


def _from_json_value(value: object) -> TemplateNode:
    if isinstance(value, dict):
        entries = tuple((key, _from_json_value(item)) for key, item in value.items())
        if len(entries) == 1:
            function = _long_form(entries[0], None)
            if function is not None:
                return function
        return MappingNode(entries)

    if isinstance(value, list):
        return SequenceNode(tuple(_from_json_value(item) for item in value))

    return ScalarNode(value)


def normalize_arguments(tag: FunctionTag, value: TemplateNode) -> tuple[TemplateNode, ...]:
    """Turn the value written after a function into its argument list.

    Short and long forms share this, so ``!GetAtt A.B`` and
    ``{"Fn::GetAtt": ["A", "B"]}`` give the same arguments.
    """
    if tag.takes_single_value:
        return (value,)

    if isinstance(value, SequenceNode):
        return value.items

    if (
        tag is FunctionTag.GET_ATT
        and isinstance(value, ScalarNode)
        and value.is_string
        and "." in value.value
    ):
        name, attribute = value.value.split(".", 1)
        return (ScalarNode(name, line=value.line), ScalarNode(attribute, line=value.line))

    return (value,)


class _NodeConverter:
    """Converts a composed PyYAML node graph into TemplateNodes."""

    def __init__(self, loader: TemplateYamlLoader):
        self._loader = loader
        # ids of the YAML nodes currently being converted
        self._active: set[int] = set()

    def convert(self, node: yaml.Node) -> TemplateNode:
        if id(node) in self._active:
            raise ParseError(
                ParseErrorKind.MALFORMED_SYNTAX,
                "Recursive alias",
                line=node.start_mark.line + 1,
                column=node.start_mark.column + 1,
            )

        self._active.add(id(node))
        try:
            return self._convert(node)
        finally:
            self._active.discard(id(node))

    def _convert(self, node: yaml.Node) -> TemplateNode:
        if node.tag.startswith("!"):
            return self._convert_function(node)

        line = node.start_mark.line + 1

        if isinstance(node, yaml.MappingNode):
            return self._convert_mapping(node, line)

        if isinstance(node, yaml.SequenceNode):
            return SequenceNode(tuple(self.convert(item) for item in node.value), line=line)

        value = self._loader.construct_object(node)
        if not isinstance(value, (str, int, float, bool)) and value is not None:
            value = str(value)
        return ScalarNode(value, line=line)

    def _convert_function(self, node: yaml.Node) -> FunctionCall:
        line = node.start_mark.line + 1
        tag = FunctionTag.from_short_tag(node.tag)
        if tag is None:
            raise ParseError(
                ParseErrorKind.MALFORMED_SYNTAX,
                f"Unknown tag '{node.tag}'",
                line=line,
                column=node.start_mark.column + 1,
            )

        if isinstance(node, yaml.ScalarNode):
            # Tagged scalars are never resolved to numbers or booleans
            value: TemplateNode = ScalarNode(node.value, line=line)
        elif isinstance(node, yaml.SequenceNode):
            value = SequenceNode(tuple(self.convert(item) for item in node.value), line=line)
        else:
            value = self._convert_mapping(node, line, allow_long_form=False)

        return FunctionCall(tag, normalize_arguments(tag, value), line=line)

    def _convert_mapping(
        self, node: yaml.MappingNode, line: int, allow_long_form: bool = True
    ) -> TemplateNode:
        entries: list[tuple[str, TemplateNode]] = []
        seen: dict[str, int] = {}

        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode) or key_node.tag.startswith("!"):
                raise ParseError(
                    ParseErrorKind.MALFORMED_SYNTAX,
                    "Mapping keys must be plain scalars",
                    line=key_node.start_mark.line + 1,
                    column=key_node.start_mark.column + 1,
                )

            key = key_node.value
            key_line = key_node.start_mark.line + 1
            if key in seen:
                raise ParseError(
                    ParseErrorKind.DUPLICATE_KEY,
                    f"Duplicate key '{key}' (first defined on line {seen[key]})",
                    line=key_line,
                    column=key_node.start_mark.column + 1,
                )
            seen[key] = key_line
            entries.append((key, self.convert(value_node)))

        if allow_long_form and len(entries) == 1:
            function = _long_form(entries[0], line)
            if function is not None:
                return function

        return MappingNode(tuple(entries), line=line)


def _long_form(entry: tuple[str, TemplateNode], line: int | None) -> FunctionCall | None:
    """Read a single-key mapping such as ``{"Fn::GetAtt": [...]}`` as a call."""
    key, value = entry
    tag = FunctionTag.from_long_name(key)
    if tag is None:
        return None

    # A lone "Condition" key is only a function when it names a condition
    if tag is FunctionTag.CONDITION and not (
        isinstance(value, ScalarNode) and value.is_string
    ):
        return None

    return FunctionCall(tag, normalize_arguments(tag, value), line=line)


def _from_json_error(error: json.JSONDecodeError, text: str) -> ParseError:
    """Classify a JSON decoding error as a ParseError."""
    if error.pos >= len(text.rstrip()) or error.msg.startswith("Unterminated string"):
        kind = ParseErrorKind.UNTERMINATED_BLOCK
    else:
        kind = ParseErrorKind.MALFORMED_SYNTAX
    return ParseError(kind, error.msg, line=error.lineno, column=error.colno)


def _from_yaml_error(error: yaml.MarkedYAMLError) -> ParseError:
    """Classify a PyYAML error as a ParseError."""
    problem = error.problem or ""
    if "end of stream" in problem or "<stream end>" in problem:
        kind = ParseErrorKind.UNTERMINATED_BLOCK
    else:
        kind = ParseErrorKind.MALFORMED_SYNTAX

    message = "; ".join(part for part in (error.context, error.problem) if part)
    mark = error.problem_mark or error.context_mark
    if mark is None:
        return ParseError(kind, message or str(error))
    return ParseError(kind, message, line=mark.line + 1, column=mark.column + 1)
