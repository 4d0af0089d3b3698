"""Process configuration for the sweeper CLI and agents.

Values are read from ``~/.sweeper/config.yaml`` (or the file named by
``$SWEEPER_CONFIG``) and then overridden by ``SWEEPER_*`` environment
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sweeper.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".sweeper" / "config.yaml"


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Sweeper process configuration.

    Attributes:
        log_level: Default log level
        storage_path: Base directory for tracking entries and audit logs
        work_config_path: YAML file of work configurations
        lock_db_path: SQLite file shared by workers for namespace locks
        aws_profile: AWS profile for provider and notification clients (optional)
        mark_interval_seconds: Marker agent period
        clean_interval_seconds: Cleaner agent period
        notify_interval_seconds: Notifier agent period
        max_workers: Worker pool size shared by all agents
        clean_enabled: Whether the cleaner agent runs at all
        lock_ttl_seconds: Namespace clean lock TTL
        sns_topic_arn: Topic for owner notifications; log-only when unset
        max_age_days: Age after which resources violate the age rule
        required_tag: Tag every resource must carry (optional)
    """

    log_level: str = "INFO"
    storage_path: Optional[str] = None
    work_config_path: Optional[str] = None
    lock_db_path: Optional[str] = None
    aws_profile: Optional[str] = None
    mark_interval_seconds: float = 3600.0
    clean_interval_seconds: float = 3600.0
    notify_interval_seconds: float = 3600.0
    max_workers: int = 8
    clean_enabled: bool = False
    lock_ttl_seconds: int = 3600
    sns_topic_arn: Optional[str] = None
    max_age_days: int = 30
    required_tag: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load configuration from file and environment.

        Args:
            path: Explicit config file (optional)

        Raises:
            ConfigurationError: If the file exists but is not valid YAML
        """
        config_path = Path(path or os.environ.get("SWEEPER_CONFIG") or DEFAULT_CONFIG_PATH).expanduser()
        values: Dict[str, Any] = {}

        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    values.update(yaml.safe_load(f) or {})
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
            logger.debug(f"Loaded configuration from {config_path}")

        config = cls()
        for f in fields(cls):
            env_value = os.environ.get(f"SWEEPER_{f.name.upper()}")
            raw = env_value if env_value is not None else values.get(f.name)
            if raw is None:
                continue
            setattr(config, f.name, config._coerce(f.name, raw))

        return config

    def _coerce(self, name: str, raw: Any) -> Any:
        default = getattr(type(self)(), name)
        try:
            if isinstance(default, bool):
                return _to_bool(raw)
            if isinstance(default, int):
                return int(raw)
            if isinstance(default, float):
                return float(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {name}: {raw}") from e
        return str(raw)

    @property
    def base_path(self) -> Path:
        return Path(self.storage_path).expanduser() if self.storage_path else Path.home() / ".sweeper"

    @property
    def tracking_path(self) -> str:
        return str(self.base_path / "tracking")

    @property
    def audit_path(self) -> str:
        return str(self.base_path / "audit-logs")

    @property
    def locks_path(self) -> str:
        return self.lock_db_path or str(self.base_path / "locks.db")

    @property
    def work_path(self) -> str:
        return self.work_config_path or str(self.base_path / "namespaces.yaml")
