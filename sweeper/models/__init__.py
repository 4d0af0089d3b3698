"""Data models for tracked cloud resources.

Classes:
    Resource: Upstream resource snapshot fetched per scan
    ViolationSummary: Rule violation produced by a rule
    MarkedResource: Persisted tracking entity for a violating resource
    NotificationInfo: Owner notification state attached to a MarkedResource
    Exclusion: Configured override removing resources from consideration
    WorkConfiguration: One namespace scope of scheduling and locking
"""

from __future__ import annotations

from sweeper.models.exclusion import Exclusion, ExclusionType
from sweeper.models.marked_resource import MarkedResource, NotificationInfo
from sweeper.models.resource import Resource
from sweeper.models.summary import ViolationSummary
from sweeper.models.work_configuration import WorkConfiguration

__all__ = [
    "Exclusion",
    "ExclusionType",
    "MarkedResource",
    "NotificationInfo",
    "Resource",
    "ViolationSummary",
    "WorkConfiguration",
]
