"""Output formatting for validation results."""

import json
from typing import Literal

from ..graph.reference_graph import ReferenceGraph
from ..validators.base import Severity, ValidationIssue, ValidationResult

OutputFormat = Literal["lines", "text", "json"]


def format_validation_result(
    result: ValidationResult,
    format: OutputFormat = "lines",
) -> str:
    """Format a validation result for output.

    Args:
        result: The validation result to format.
        format: Output format ("lines", "text" or "json").

    Returns:
        Formatted string representation.
    """
    if format == "json":
        return _format_json(result)
    if format == "text":
        return _format_text(result)
    return _format_lines(result)


def _format_lines(result: ValidationResult) -> str:
    """One tab-separated line per issue, for scripts and CI logs."""
    return "\n".join(issue.to_line() for issue in result.issues)


def _format_text(result: ValidationResult) -> str:
    """Format result as human-readable text."""
    lines: list[str] = []

    errors = result.errors
    warnings = result.warnings

    # Errors section
    lines.append("ERRORS:")
    if errors:
        for issue in errors:
            lines.append(f"  {_format_issue_text(issue)}")
    else:
        lines.append("  (none)")

    lines.append("")

    # Warnings section
    lines.append("WARNINGS:")
    if warnings:
        for issue in warnings:
            lines.append(f"  {_format_issue_text(issue)}")
    else:
        lines.append("  (none)")

    # Summary
    lines.append("")
    if result.is_valid:
        if warnings:
            lines.append(f"Validation passed with {len(warnings)} warning(s)")
        else:
            lines.append("Validation passed")
    else:
        lines.append(
            f"Validation failed: {len(errors)} error(s), {len(warnings)} warning(s)"
        )

    return "\n".join(lines)


def _format_issue_text(issue: ValidationIssue) -> str:
    """Format a single issue as text."""
    location = f"[{issue.location}] " if issue.location else ""

    if issue.severity == Severity.ERROR:
        symbol = "✘"
    else:
        symbol = "⚠"

    return f"{symbol} {issue.code.value}: {location}{issue.message}"


def _format_json(result: ValidationResult) -> str:
    """Format result as JSON."""
    data = {
        "valid": result.is_valid,
        "error_count": len(result.errors),
        "warning_count": len(result.warnings),
        "issues": [
            {
                "code": issue.code.value,
                "message": issue.message,
                "severity": issue.severity.value,
                "section": issue.section,
                "name": issue.name,
                "path": issue.location,
                "details": issue.details,
            }
            for issue in result.issues
        ],
    }
    return json.dumps(data, indent=2, default=str)


def format_reference_graph(graph: ReferenceGraph) -> str:
    """List every reference as ``<source>\\t<via>\\t<target>\\t<path>``.

    Unresolved targets are marked with a trailing ``?``.
    """
    lines = []
    for edge in graph.edges():
        source = f"{edge.source_section}.{edge.source}"
        if edge.target_section is None:
            target = f"{edge.target}?"
        else:
            target = f"{edge.target_section}.{edge.target}"
        if edge.attribute:
            target += f".{edge.attribute}"
        lines.append("\t".join([source, edge.via.value, target, edge.path]))
    return "\n".join(lines)
