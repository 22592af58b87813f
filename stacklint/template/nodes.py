"""Immutable node tree for parsed templates."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union


class FunctionTag(str, Enum):
    """Intrinsic functions recognized in templates.

    Values are the long-form names; ``short_tag`` gives the YAML tag.
    """

    REF = "Ref"
    GET_ATT = "Fn::GetAtt"
    JOIN = "Fn::Join"
    SUB = "Fn::Sub"
    FIND_IN_MAP = "Fn::FindInMap"
    IMPORT_VALUE = "Fn::ImportValue"
    BASE64 = "Fn::Base64"
    SELECT = "Fn::Select"
    SPLIT = "Fn::Split"
    GET_AZS = "Fn::GetAZs"
    CIDR = "Fn::Cidr"
    IF = "Fn::If"
    EQUALS = "Fn::Equals"
    AND = "Fn::And"
    OR = "Fn::Or"
    NOT = "Fn::Not"
    CONDITION = "Condition"

    @property
    def short_tag(self) -> str:
        return "!" + self.value.split("::")[-1]

    @property
    def takes_single_value(self) -> bool:
        """Whether the function takes one value rather than a list."""
        return self in _SINGLE_VALUE_TAGS

    @classmethod
    def from_short_tag(cls, tag: str) -> "FunctionTag | None":
        return _SHORT_TAGS.get(tag)

    @classmethod
    def from_long_name(cls, name: str) -> "FunctionTag | None":
        try:
            return cls(name)
        except ValueError:
            return None


_SINGLE_VALUE_TAGS = frozenset(
    {
        FunctionTag.REF,
        FunctionTag.IMPORT_VALUE,
        FunctionTag.BASE64,
        FunctionTag.GET_AZS,
        FunctionTag.CONDITION,
    }
)

_SHORT_TAGS = {tag.short_tag: tag for tag in FunctionTag}


@dataclass(frozen=True)
class ScalarNode:
    """A plain value: string, number, boolean or null."""

    value: str | int | float | bool | None
    line: int | None = field(default=None, compare=False, repr=False)

    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)


@dataclass(frozen=True)
class SequenceNode:
    """An ordered list of nodes."""

    items: tuple["TemplateNode", ...] = ()
    line: int | None = field(default=None, compare=False, repr=False)

    def __iter__(self) -> Iterator["TemplateNode"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "TemplateNode":
        return self.items[index]


@dataclass(frozen=True)
class MappingNode:
    """An ordered mapping from string keys to nodes."""

    entries: tuple[tuple[str, "TemplateNode"], ...] = ()
    line: int | None = field(default=None, compare=False, repr=False)

    def get(self, key: str, default: "TemplateNode | None" = None) -> "TemplateNode | None":
        for name, node in self.entries:
            if name == key:
                return node
        return default

    def keys(self) -> list[str]:
        return [name for name, _ in self.entries]

    def items(self) -> list[tuple[str, "TemplateNode"]]:
        return list(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.entries)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class FunctionCall:
    """An intrinsic function call such as ``!Ref Name``."""

    tag: FunctionTag
    args: tuple["TemplateNode", ...] = ()
    line: int | None = field(default=None, compare=False, repr=False)


TemplateNode = Union[MappingNode, SequenceNode, ScalarNode, FunctionCall]


def node_kind(node: TemplateNode) -> str:
    """Short human name of a node's kind, for messages."""
    if isinstance(node, MappingNode):
        return "mapping"
    if isinstance(node, SequenceNode):
        return "list"
    if isinstance(node, FunctionCall):
        return node.tag.short_tag
    if node.value is None:
        return "null"
    return type(node.value).__name__
