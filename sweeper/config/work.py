"""Work configuration loading.

Work configurations are declared in YAML::

    defaults:
      retention_days: 14
      dry_run: true
    namespaces:
      - cloud_provider: aws
        account_id: "123456789012"
        account_name: prod
        region: us-east-1
        resource_type: image
        retention_days: 7
        dry_run: false
        exclusions:
          - exclusion_id: keep-golden
            exclusion_type: name
            patterns:
              name_patterns: ["golden-*"]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from sweeper.errors import ConfigurationError
from sweeper.models.work_configuration import WorkConfiguration

logger = logging.getLogger(__name__)


def load_work_configurations(path: str) -> List[WorkConfiguration]:
    """Load and validate work configurations from a YAML file.

    Args:
        path: YAML file path

    Returns:
        Work configurations in file order

    Raises:
        ConfigurationError: If the file is missing or any entry is invalid
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise ConfigurationError(f"Work configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    return parse_work_configurations(data)


def parse_work_configurations(data: Dict) -> List[WorkConfiguration]:
    """Build work configurations from parsed YAML, applying shared defaults."""
    defaults = data.get("defaults") or {}
    configurations = []

    for index, entry in enumerate(data.get("namespaces") or []):
        merged = {**defaults, **(entry or {})}
        try:
            configuration = WorkConfiguration.from_dict(merged)
            configuration.validate()
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid work configuration #{index + 1}: {e}") from e
        configurations.append(configuration)

    seen = set()
    for configuration in configurations:
        if configuration.namespace in seen:
            raise ConfigurationError(f"Duplicate namespace: {configuration.namespace}")
        seen.add(configuration.namespace)

    return configurations


class WorkConfigurator:
    """Lookup of configured namespaces."""

    def __init__(self, configurations: Iterable[WorkConfiguration]) -> None:
        self._by_namespace: Dict[str, WorkConfiguration] = {c.namespace: c for c in configurations}

    @classmethod
    def from_file(cls, path: str) -> "WorkConfigurator":
        return cls(load_work_configurations(path))

    def list(self) -> List[WorkConfiguration]:
        return list(self._by_namespace.values())

    def find(self, namespace: str) -> Optional[WorkConfiguration]:
        return self._by_namespace.get(namespace)

    def handler_pairs(self) -> List[tuple[str, str]]:
        """Distinct (resource_type, cloud_provider) pairs across configured namespaces."""
        return sorted({(c.resource_type, c.cloud_provider) for c in self._by_namespace.values()})
