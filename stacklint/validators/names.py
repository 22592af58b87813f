"""Duplicate logical name validator."""

from ..template.sections import OUTPUTS, PARAMETERS, RESOURCES, TemplateSections
from .base import DiagnosticCode, ValidationResult

# Sections sharing one namespace of logical names
_NAMESPACE_SECTIONS = (PARAMETERS, RESOURCES, OUTPUTS)


def check_duplicate_names(sections: TemplateSections) -> ValidationResult:
    """Check that no name is declared in more than one section.

    The first declaration (Parameters, then Resources, then Outputs) is
    taken as the original; every later one is reported.

    Args:
        sections: The extracted template sections.

    Returns:
        ValidationResult with errors for duplicated names.
    """
    result = ValidationResult()
    first_seen: dict[str, str] = {}

    for section in _NAMESPACE_SECTIONS:
        for name in sorted(sections.names_in(section)):
            original = first_seen.setdefault(name, section)
            if original == section:
                continue
            result.add_error(
                code=DiagnosticCode.DUPLICATE_NAME,
                message=f"'{name}' in {section} is already declared in {original}",
                section=section,
                name=name,
                path=f"{section}.{name}",
                first_section=original,
            )

    return result
