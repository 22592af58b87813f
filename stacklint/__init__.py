"""stacklint: cross-reference and schema linter for CloudFormation templates."""

__version__ = "0.1.0"
