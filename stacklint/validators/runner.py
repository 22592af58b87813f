"""Validation runner that orchestrates all validators."""

import logging
from pathlib import Path

from ..graph.builder import build_graph
from ..graph.reference_graph import ReferenceGraph
from ..schema.loader import load_catalog, load_default_catalog
from ..schema.models import SchemaCatalog
from ..template.loader import load_template, parse_template
from ..template.nodes import MappingNode
from .base import ValidationResult
from .cycles import check_dependency_cycles
from .names import check_duplicate_names
from .parameters import check_parameter_types, check_unused_parameters
from .reference_integrity import check_attributes, check_dangling_references
from .resource_types import check_resource_schemas

logger = logging.getLogger(__name__)


def run_validators(
    graph: ReferenceGraph,
    catalog: SchemaCatalog,
    structural: ValidationResult | None = None,
) -> ValidationResult:
    """Run all validators on a built reference graph.

    Every check runs even when others report problems.

    Args:
        graph: The reference graph, carrying the template sections.
        catalog: The schema catalog.
        structural: Issues found while building the graph, if any.

    Returns:
        Combined ValidationResult, sorted by section, name and path.
    """
    result = ValidationResult()

    if structural is not None:
        result.merge(structural)

    sections = graph.sections

    # Schema checks
    result.merge(check_resource_schemas(sections, catalog))

    # Reference checks
    result.merge(check_dangling_references(graph))
    result.merge(check_attributes(graph, catalog))
    result.merge(check_dependency_cycles(graph))

    # Declaration checks
    result.merge(check_duplicate_names(sections))
    result.merge(check_parameter_types(sections))
    result.merge(check_unused_parameters(graph))

    logger.debug(
        "Validation finished: %d error(s), %d warning(s)",
        len(result.errors),
        len(result.warnings),
    )
    return result.sorted()


def validate_template_node(
    template: MappingNode, catalog: SchemaCatalog | None = None
) -> ValidationResult:
    """Validate an already parsed template.

    Args:
        template: The root node of the template.
        catalog: The schema catalog; the bundled one when omitted.

    Returns:
        ValidationResult from all validators.
    """
    if catalog is None:
        catalog = load_default_catalog()
    graph, structural = build_graph(template)
    return run_validators(graph, catalog, structural)


def validate_template(text: str, catalog: SchemaCatalog | None = None) -> ValidationResult:
    """Parse and validate template text.

    Raises:
        ParseError: If the template cannot be parsed.
    """
    return validate_template_node(parse_template(text), catalog)


def validate_template_file(
    path: str | Path, catalog_path: str | Path | None = None
) -> ValidationResult:
    """Load and validate a template file.

    Args:
        path: Path to the template.
        catalog_path: Path to a schema catalog; the bundled one when omitted.

    Returns:
        ValidationResult from all validators.

    Raises:
        TemplateLoadError: If the template file cannot be read.
        ParseError: If the template cannot be parsed.
        SchemaLoadError: If the catalog cannot be loaded.
        SchemaValidationError: If the catalog is invalid.
    """
    catalog = load_catalog(catalog_path) if catalog_path is not None else None
    template = load_template(path)
    return validate_template_node(template, catalog)
