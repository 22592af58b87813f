"""Command-line interface for stacklint."""

import logging
import sys

import click

from .logging_utils import configure_logging
from .output.formatter import format_reference_graph, format_validation_result
from .schema.errors import SchemaLoadError, SchemaValidationError
from .template.errors import ParseError, TemplateLoadError


@click.group()
@click.version_option(package_name="stacklint")
def main():
    """stacklint: a cross-reference linter for CloudFormation templates."""
    pass


@main.command()
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--schema",
    "schema_file",
    type=click.Path(exists=True, dir_okay=False),
    envvar="STACKLINT_SCHEMA",
    default=None,
    help="Schema catalog file (defaults to STACKLINT_SCHEMA, then the bundled catalog)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["lines", "text", "json"]),
    default="lines",
    help="Output format",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log progress to stderr",
)
def validate(template_file: str, schema_file: str | None, output_format: str, verbose: bool):
    """Validate a CloudFormation template.

    TEMPLATE_FILE is the path to a YAML or JSON template.

    Exit codes:
      0 - No errors (warnings allowed)
      1 - Errors found
      2 - Template or catalog could not be loaded
    """
    from .validators.runner import validate_template_file

    if verbose:
        configure_logging(level=logging.DEBUG)

    try:
        result = validate_template_file(template_file, schema_file)
    except (TemplateLoadError, SchemaLoadError) as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(2)
    except SchemaValidationError as e:
        click.echo(f"Schema catalog error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)

    output = format_validation_result(result, output_format)  # type: ignore
    if output:
        click.echo(output)

    # Warnings never fail the run
    if result.has_errors:
        sys.exit(1)
    else:
        sys.exit(0)


@main.command()
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
def graph(template_file: str):
    """Print the cross-references found in a template.

    TEMPLATE_FILE is the path to a YAML or JSON template.

    Each line is SOURCE, FUNCTION, TARGET and PATH, tab-separated;
    undeclared targets end with '?'.

    Exit codes:
      0 - Success
      2 - Template could not be loaded
    """
    from .graph.builder import build_graph
    from .template.loader import load_template

    try:
        template = load_template(template_file)
    except TemplateLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(2)

    reference_graph, _ = build_graph(template)
    output = format_reference_graph(reference_graph)
    if output:
        click.echo(output)
    sys.exit(0)


if __name__ == "__main__":
    main()
