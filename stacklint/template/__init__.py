"""Template layer: parsing templates into immutable node trees."""

from .errors import ParseError, ParseErrorKind, TemplateLoadError
from .nodes import (
    FunctionCall,
    FunctionTag,
    MappingNode,
    ScalarNode,
    SequenceNode,
    TemplateNode,
)
from .loader import load_template, parse_template
from .sections import Output, Parameter, Resource, TemplateSections
from .serializer import dump_template

__all__ = [
    "ParseError",
    "ParseErrorKind",
    "TemplateLoadError",
    "FunctionCall",
    "FunctionTag",
    "MappingNode",
    "ScalarNode",
    "SequenceNode",
    "TemplateNode",
    "load_template",
    "parse_template",
    "Output",
    "Parameter",
    "Resource",
    "TemplateSections",
    "dump_template",
]
