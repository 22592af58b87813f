"""Tests for schema catalog loader."""

import pytest

from stacklint.schema.errors import SchemaLoadError, SchemaValidationError
from stacklint.schema.loader import (
    load_catalog,
    load_default_catalog,
    parse_catalog_from_string,
)
from stacklint.schema.models import ListKind, ObjectKind, ScalarKind


class TestParseCatalogFromString:
    def test_reference_sheet_layout(self, small_catalog_yaml):
        catalog = parse_catalog_from_string(small_catalog_yaml)

        assert set(catalog.entries) == {
            "AWS::EC2::SecurityGroup",
            "AWS::KMS::Key",
            "Ingress",
            "Tag",
        }
        group = catalog.get_resource_type("AWS::EC2::SecurityGroup")
        assert isinstance(group.get_property("VpcId"), ScalarKind)
        assert group.attributes == frozenset({"GroupId"})

    def test_document_separators(self):
        catalog = parse_catalog_from_string(
            """
Type: AWS::S3::Bucket
Properties:
  BucketName: String
---
Type: Tag
Properties:
  Key: String
"""
        )
        assert set(catalog.entries) == {"AWS::S3::Bucket", "Tag"}

    def test_leading_comments(self):
        catalog = parse_catalog_from_string(
            "# header\n\nType: AWS::S3::Bucket\nProperties:\n  BucketName: String\n"
        )
        assert "AWS::S3::Bucket" in catalog

    def test_nested_type_key_does_not_split(self):
        catalog = parse_catalog_from_string(
            "Type: Thing\nProperties:\n  Type: String\n  Name: String\n"
        )
        assert set(catalog.get_property_type("Thing").properties) == {"Type", "Name"}

    def test_keys_above_type_belong_to_next_entry(self):
        catalog = parse_catalog_from_string(
            """
Type: AWS::S3::Bucket
Properties:
  BucketName: String

Attributes: [Arn]
Type: AWS::KMS::Key
Properties:
  Description: String
"""
        )

        assert catalog.get_resource_type("AWS::S3::Bucket").attributes is None
        assert catalog.get_resource_type("AWS::KMS::Key").attributes == frozenset({"Arn"})

    def test_indented_lines_after_blank_stay_with_entry(self):
        catalog = parse_catalog_from_string(
            "Type: Thing\nProperties:\n  A: String\n\n  B: String\nType: Other\n"
        )
        assert set(catalog.get_property_type("Thing").properties) == {"A", "B"}

    def test_empty_catalog(self):
        catalog = parse_catalog_from_string("")
        assert len(catalog) == 0

    def test_identical_duplicates_tolerated(self):
        entry = "Type: AWS::IAM::InstanceProfile\nProperties:\n  Path: String\n\n"
        catalog = parse_catalog_from_string(entry + entry)
        assert len(catalog) == 1

    def test_conflicting_duplicates_rejected(self):
        text = (
            "Type: AWS::IAM::InstanceProfile\nProperties:\n  Path: String\n\n"
            "Type: AWS::IAM::InstanceProfile\nProperties:\n  Path: Integer\n"
        )
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_catalog_from_string(text)
        assert exc_info.value.errors[0]["type"] == "duplicate_entry"

    def test_invalid_yaml(self):
        with pytest.raises(SchemaLoadError) as exc_info:
            parse_catalog_from_string("Type: [unclosed")
        assert "Invalid YAML" in str(exc_info.value)

    def test_non_mapping_entry(self):
        with pytest.raises(SchemaLoadError) as exc_info:
            parse_catalog_from_string("- a\n- b\n")
        assert "mapping" in str(exc_info.value).lower()

    def test_validation_errors_collected(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_catalog_from_string("Properties:\n  A: String\n")
        assert exc_info.value.errors


class TestLoadCatalog:
    def test_file_not_found(self):
        with pytest.raises(SchemaLoadError) as exc_info:
            load_catalog("/nonexistent/catalog.yml")
        assert "not found" in str(exc_info.value).lower()

    def test_load_example_catalog(self, examples_dir):
        catalog = load_catalog(examples_dir / "catalog.yml")
        assert catalog.get_resource_type("AWS::S3::Bucket") is not None
        assert catalog.get_property_type("Tag") is not None

    def test_error_carries_path(self, tmp_path):
        catalog_file = tmp_path / "bad.yml"
        catalog_file.write_text("Type: [unclosed")

        with pytest.raises(SchemaLoadError) as exc_info:
            load_catalog(catalog_file)
        assert exc_info.value.path == str(catalog_file)


class TestDefaultCatalog:
    def test_loaded_once(self):
        assert load_default_catalog() is load_default_catalog()

    def test_covers_presidio_resources(self, catalog):
        for type_name in [
            "AWS::KMS::Key",
            "AWS::SecretsManager::Secret",
            "AWS::IAM::Role",
            "AWS::IAM::InstanceProfile",
            "AWS::EC2::SecurityGroup",
            "AWS::EC2::NetworkInterface",
            "AWS::EC2::Instance",
            "AWS::EC2::EIP",
            "AWS::EC2::EIPAssociation",
        ]:
            assert catalog.get_resource_type(type_name) is not None, type_name

    def test_property_types_resolve(self, catalog):
        instance = catalog.get_resource_type("AWS::EC2::Instance")
        interfaces = instance.get_property("NetworkInterfaces")
        assert interfaces == ListKind(item=ObjectKind(type_name="NetworkInterface"))
        assert catalog.get_property_type("NetworkInterface") is not None
