"""Validators for structural validation of templates.

The runner lives in ``stacklint.validators.runner``; it is not imported
here because the graph builder itself depends on ``validators.base``.
"""

from .base import DiagnosticCode, Severity, ValidationIssue, ValidationResult
from .cycles import check_dependency_cycles
from .names import check_duplicate_names
from .parameters import check_parameter_types, check_unused_parameters
from .reference_integrity import check_attributes, check_dangling_references
from .resource_types import check_resource_schemas

__all__ = [
    "DiagnosticCode",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "check_dependency_cycles",
    "check_duplicate_names",
    "check_parameter_types",
    "check_unused_parameters",
    "check_attributes",
    "check_dangling_references",
    "check_resource_schemas",
]
