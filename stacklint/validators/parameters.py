"""Parameter validators."""

from ..graph.reference_graph import ReferenceGraph
from ..template.sections import PARAMETERS, TemplateSections
from .base import DiagnosticCode, ValidationResult

BASIC_PARAMETER_TYPES = frozenset({"String", "Number", "List<Number>", "CommaDelimitedList"})

AWS_PARAMETER_TYPES = frozenset(
    {
        "AWS::EC2::AvailabilityZone::Name",
        "AWS::EC2::Image::Id",
        "AWS::EC2::Instance::Id",
        "AWS::EC2::KeyPair::KeyName",
        "AWS::EC2::SecurityGroup::GroupName",
        "AWS::EC2::SecurityGroup::Id",
        "AWS::EC2::Subnet::Id",
        "AWS::EC2::Volume::Id",
        "AWS::EC2::VPC::Id",
        "AWS::Route53::HostedZone::Id",
    }
)

SSM_NAME_TYPE = "AWS::SSM::Parameter::Name"
SSM_VALUE_PREFIX = "AWS::SSM::Parameter::Value<"


def is_valid_parameter_type(parameter_type: str) -> bool:
    """Check a parameter Type against the types the provider accepts."""
    if parameter_type in BASIC_PARAMETER_TYPES or parameter_type == SSM_NAME_TYPE:
        return True

    if parameter_type.startswith(SSM_VALUE_PREFIX) and parameter_type.endswith(">"):
        inner = parameter_type[len(SSM_VALUE_PREFIX):-1]
        return inner in ("String", "List<String>", "CommaDelimitedList") or _is_aws_type(inner)

    return _is_aws_type(parameter_type)


def _is_aws_type(parameter_type: str) -> bool:
    if parameter_type.startswith("List<") and parameter_type.endswith(">"):
        parameter_type = parameter_type[len("List<"):-1]
    return parameter_type in AWS_PARAMETER_TYPES


def check_unused_parameters(graph: ReferenceGraph) -> ValidationResult:
    """Check for parameters that nothing references.

    Args:
        graph: The reference graph.

    Returns:
        ValidationResult with a warning per unused parameter.
    """
    result = ValidationResult()

    for name in graph.get_declared_names(PARAMETERS):
        if not graph.is_referenced(PARAMETERS, name):
            result.add_warning(
                code=DiagnosticCode.UNUSED_PARAMETER,
                message=f"Parameter '{name}' is declared but never referenced",
                section=PARAMETERS,
                name=name,
                path=f"{PARAMETERS}.{name}",
            )

    return result


def check_parameter_types(sections: TemplateSections) -> ValidationResult:
    """Check that every parameter declares a valid Type.

    Args:
        sections: The extracted template sections.

    Returns:
        ValidationResult with errors for missing or invalid types.
    """
    result = ValidationResult()

    for name, parameter in sections.parameters.items():
        if parameter.type is None:
            message = f"Parameter '{name}' has no Type"
        elif not is_valid_parameter_type(parameter.type):
            message = f"Parameter '{name}' has invalid Type '{parameter.type}'"
        else:
            continue

        result.add_error(
            code=DiagnosticCode.INVALID_PARAMETER_TYPE,
            message=message,
            section=PARAMETERS,
            name=name,
            path=f"{PARAMETERS}.{name}.Type",
            parameter_type=parameter.type,
        )

    return result
