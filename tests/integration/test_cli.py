"""Integration tests for CLI."""

import json
import logging

import pytest
from click.testing import CliRunner

from stacklint.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def reset_logging():
    yield
    logger = logging.getLogger("stacklint")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestValidateCommand:
    def test_validate_valid_file(self, runner, examples_dir):
        result = runner.invoke(main, ["validate", str(examples_dir / "minimal_valid.yml")])

        assert result.exit_code == 0
        assert result.output == ""

    def test_validate_with_errors(self, runner, examples_dir):
        result = runner.invoke(
            main, ["validate", str(examples_dir / "invalid" / "dependency_cycle.yml")]
        )

        assert result.exit_code == 1
        lines = result.output.strip().splitlines()
        assert len(lines) == 1
        severity, code, path, message = lines[0].split("\t")
        assert (severity, code, path) == ("Error", "DependencyCycle", "Resources.KeyA")
        assert "KeyA -> KeyB -> KeyA" in message

    def test_validate_with_warnings(self, runner, examples_dir):
        result = runner.invoke(
            main, ["validate", str(examples_dir / "invalid" / "unused_parameter.yml")]
        )

        # Warnings don't cause failure
        assert result.exit_code == 0
        assert "UnusedParameter" in result.output

    def test_validate_text_output(self, runner, examples_dir):
        result = runner.invoke(
            main,
            [
                "validate",
                str(examples_dir / "invalid" / "unknown_type.yml"),
                "--format",
                "text",
            ],
        )

        assert result.exit_code == 1
        assert "ERRORS:" in result.output
        assert "UnknownResourceType" in result.output
        assert "Validation failed: 1 error(s), 0 warning(s)" in result.output

    def test_validate_text_output_passes(self, runner, examples_dir):
        result = runner.invoke(
            main, ["validate", str(examples_dir / "minimal_valid.json"), "--format", "text"]
        )

        assert result.exit_code == 0
        assert "Validation passed" in result.output

    def test_validate_json_output(self, runner, examples_dir):
        result = runner.invoke(
            main,
            [
                "validate",
                str(examples_dir / "presidio_instance_fixed.yml"),
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert data["error_count"] == 4
        assert data["warning_count"] == 0
        assert [issue["code"] for issue in data["issues"]] == [
            "InvalidParameterType",
            "DanglingReference",
            "DanglingReference",
            "DuplicateName",
        ]

    def test_validate_custom_schema(self, runner, examples_dir):
        result = runner.invoke(
            main,
            [
                "validate",
                str(examples_dir / "minimal_valid.yml"),
                "--schema",
                str(examples_dir / "catalog.yml"),
            ],
        )

        assert result.exit_code == 1
        assert "UnknownProperty" in result.output
        assert "SecurityGroupIngress" in result.output

    def test_schema_from_environment(self, runner, examples_dir):
        result = runner.invoke(
            main,
            ["validate", str(examples_dir / "minimal_valid.yml")],
            env={"STACKLINT_SCHEMA": str(examples_dir / "catalog.yml")},
        )

        assert result.exit_code == 1
        assert "UnknownProperty" in result.output

    def test_invalid_schema(self, runner, examples_dir, tmp_path):
        schema = tmp_path / "schema.yml"
        schema.write_text("Properties:\n  A: String\n")

        result = runner.invoke(
            main, ["validate", str(examples_dir / "minimal_valid.yml"), "--schema", str(schema)]
        )

        assert result.exit_code == 2

    def test_parse_error(self, runner, examples_dir):
        result = runner.invoke(
            main, ["validate", str(examples_dir / "invalid" / "unterminated.yml")]
        )

        assert result.exit_code == 2
        assert "Parse error" in result.output
        assert "UnterminatedBlock" in result.output

    def test_duplicate_key_in_original_template(self, runner, examples_dir):
        result = runner.invoke(main, ["validate", str(examples_dir / "presidio_instance.yml")])

        assert result.exit_code == 2
        assert "DuplicateKey" in result.output

    def test_missing_file(self, runner):
        result = runner.invoke(main, ["validate", "/nonexistent/template.yml"])

        # click rejects the path before the command runs
        assert result.exit_code == 2

    def test_verbose_logs_to_stderr(self, runner, examples_dir, reset_logging):
        result = runner.invoke(
            main, ["validate", str(examples_dir / "minimal_valid.yml"), "--verbose"]
        )

        assert result.exit_code == 0
        assert "Validation finished" in result.stderr
        assert "Validation finished" not in result.stdout


class TestGraphCommand:
    def test_graph_edges(self, runner, examples_dir):
        result = runner.invoke(main, ["graph", str(examples_dir / "minimal_valid.yml")])

        assert result.exit_code == 0
        assert result.output.strip().splitlines() == [
            "Resources.WebSecurityGroup\tRef\tParameters.VpcId\tResources.WebSecurityGroup.Properties.VpcId",
            "Outputs.GroupId\tFn::GetAtt\tResources.WebSecurityGroup.GroupId\tOutputs.GroupId.Value",
        ]

    def test_graph_marks_unresolved(self, runner, examples_dir):
        result = runner.invoke(main, ["graph", str(examples_dir / "presidio_instance_fixed.yml")])

        assert result.exit_code == 0
        assert "\tSecurityGroup?\t" in result.output
        assert "\tS3Bucket?.Arn\t" in result.output

    def test_graph_parse_error(self, runner, examples_dir):
        result = runner.invoke(main, ["graph", str(examples_dir / "invalid" / "unterminated.yml")])

        assert result.exit_code == 2


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
