"""boto3 client construction."""

from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig

RETRY_CONFIG = BotoConfig(retries={"max_attempts": 5, "mode": "standard"})


def create_boto_client(service_name: str, region_name: Optional[str] = None, profile_name: Optional[str] = None) -> Any:
    """Create a boto3 client with standard retries.

    Args:
        service_name: AWS service (e.g., "ec2", "sns")
        region_name: AWS region (optional)
        profile_name: AWS profile name (optional)

    Returns:
        boto3 client
    """
    session = boto3.Session(profile_name=profile_name) if profile_name else boto3.Session()
    return session.client(service_name, region_name=region_name, config=RETRY_CONFIG)
