"""Tests for work configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sweeper.config.work import WorkConfigurator, load_work_configurations, parse_work_configurations
from sweeper.errors import ConfigurationError

WORK_YAML = """
defaults:
  retention_days: 10
  dry_run: false
namespaces:
  - cloud_provider: aws
    account_id: "123456789012"
    account_name: prod
    region: us-east-1
    resource_type: image
    exclusions:
      - exclusion_id: keep-golden
        exclusion_type: name
        patterns:
          name_patterns: ["golden-*"]
  - cloud_provider: aws
    account_id: "123456789012"
    account_name: prod
    region: eu-west-1
    resource_type: image
    dry_run: true
    retention_days: 3
"""


@pytest.fixture
def work_file(tmp_path: Path) -> Path:
    path = tmp_path / "namespaces.yaml"
    path.write_text(WORK_YAML)
    return path


class TestLoadWorkConfigurations:
    """Test suite for YAML loading and validation."""

    def test_defaults_are_merged_into_entries(self, work_file: Path) -> None:
        east, west = load_work_configurations(str(work_file))

        assert east.namespace == "aws:prod:us-east-1:image"
        assert east.retention_days == 10
        assert east.dry_run is False
        assert east.exclusions[0].exclusion_id == "keep-golden"
        assert west.retention_days == 3
        assert west.dry_run is True

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_work_configurations(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("namespaces: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_work_configurations(str(path))

    def test_missing_required_field(self) -> None:
        with pytest.raises(ConfigurationError, match="#1"):
            parse_work_configurations({"namespaces": [{"cloud_provider": "aws", "region": "us-east-1"}]})

    def test_invalid_exclusion(self) -> None:
        entry = {
            "cloud_provider": "aws",
            "account_id": "1",
            "region": "us-east-1",
            "resource_type": "image",
            "exclusions": [{"exclusion_id": "x", "exclusion_type": "tag", "priority": 500, "patterns": {"tag_key": "k"}}],
        }

        with pytest.raises(ConfigurationError, match="Priority"):
            parse_work_configurations({"namespaces": [entry]})

    def test_duplicate_namespace(self) -> None:
        entry = {"cloud_provider": "aws", "account_id": "1", "region": "us-east-1", "resource_type": "image"}

        with pytest.raises(ConfigurationError, match="Duplicate namespace"):
            parse_work_configurations({"namespaces": [entry, dict(entry)]})

    def test_empty_document(self) -> None:
        assert parse_work_configurations({}) == []


class TestWorkConfigurator:
    """Test suite for namespace lookup."""

    def test_find_by_namespace(self, work_file: Path) -> None:
        configurator = WorkConfigurator.from_file(str(work_file))

        assert configurator.find("aws:prod:eu-west-1:image").retention_days == 3
        assert configurator.find("aws:prod:ap-south-1:image") is None
        assert len(configurator.list()) == 2

    def test_handler_pairs_are_distinct(self, work_file: Path) -> None:
        assert WorkConfigurator.from_file(str(work_file)).handler_pairs() == [("image", "aws")]
