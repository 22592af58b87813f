"""Typed views of the top-level template sections."""

from dataclasses import dataclass, field

from .nodes import MappingNode, TemplateNode

PARAMETERS = "Parameters"
MAPPINGS = "Mappings"
CONDITIONS = "Conditions"
RESOURCES = "Resources"
OUTPUTS = "Outputs"

# Order used when sorting diagnostics
SECTION_ORDER = (
    "Template",
    PARAMETERS,
    MAPPINGS,
    CONDITIONS,
    RESOURCES,
    OUTPUTS,
)

KNOWN_SECTIONS = frozenset(
    {
        "AWSTemplateFormatVersion",
        "Description",
        "Metadata",
        "Parameters",
        "Rules",
        "Mappings",
        "Conditions",
        "Transform",
        "Resources",
        "Outputs",
    }
)

RESOURCE_KEYS = frozenset(
    {
        "Type",
        "Properties",
        "DependsOn",
        "Condition",
        "Metadata",
        "DeletionPolicy",
        "UpdateReplacePolicy",
        "CreationPolicy",
        "UpdatePolicy",
    }
)


def section_rank(section: str) -> int:
    """Position of a section in diagnostic order."""
    try:
        return SECTION_ORDER.index(section)
    except ValueError:
        return len(SECTION_ORDER)


@dataclass(frozen=True)
class Parameter:
    """A declared template parameter."""

    name: str
    type: str | None
    node: MappingNode


@dataclass(frozen=True)
class Resource:
    """A declared resource."""

    name: str
    type: str | None
    properties: MappingNode
    node: MappingNode
    depends_on: tuple[str, ...] = ()
    condition: str | None = None


@dataclass(frozen=True)
class Output:
    """A declared stack output."""

    name: str
    node: TemplateNode


@dataclass
class TemplateSections:
    """Named sections extracted from a template."""

    parameters: dict[str, Parameter] = field(default_factory=dict)
    mappings: dict[str, TemplateNode] = field(default_factory=dict)
    conditions: dict[str, TemplateNode] = field(default_factory=dict)
    resources: dict[str, Resource] = field(default_factory=dict)
    outputs: dict[str, Output] = field(default_factory=dict)

    def names_in(self, section: str) -> set[str]:
        """Get the logical names declared in a section."""
        return set(self._section(section))

    def declares(self, section: str, name: str) -> bool:
        return name in self._section(section)

    def _section(self, section: str) -> dict:
        return {
            PARAMETERS: self.parameters,
            MAPPINGS: self.mappings,
            CONDITIONS: self.conditions,
            RESOURCES: self.resources,
            OUTPUTS: self.outputs,
        }.get(section, {})
