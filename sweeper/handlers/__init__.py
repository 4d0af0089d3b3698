"""Provider-specific resource handlers."""

from __future__ import annotations

from sweeper.handlers.aws_image import AwsImageHandler

__all__ = ["AwsImageHandler"]
