"""Exception hierarchy for cloud-sweeper."""

from __future__ import annotations


class SweeperError(Exception):
    """Base class for all sweeper errors."""


class ConfigurationError(SweeperError):
    """Raised when configuration files or work configurations are invalid."""


class HandlerConfigurationError(SweeperError):
    """Raised when more than one handler claims the same resource type and provider."""


class HandlerNotFoundError(SweeperError):
    """Raised when no registered handler claims a resource type and provider."""

    def __init__(self, resource_type: str, cloud_provider: str, subject: object = None) -> None:
        self.resource_type = resource_type
        self.cloud_provider = cloud_provider
        message = f"No suitable handler found for {cloud_provider}:{resource_type}"
        if subject is not None:
            message = f"{message} ({subject})"
        super().__init__(message)
