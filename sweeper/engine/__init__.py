"""Mark/notify/clean lifecycle engine.

Classes:
    ResourceHandler: Per-resource-type mark() and clean() state transitions
    HandlerRegistry: (resource_type, cloud_provider) to handler lookup
    ExclusionChecker: Exclusion evaluation
    OwnerResolver: Resource owner resolution
"""

from __future__ import annotations

from sweeper.engine.exclusions import ExclusionChecker
from sweeper.engine.handler import CleanOutcome, MarkResult, ResourceHandler
from sweeper.engine.owner import OwnerResolver, TagOwnerResolver
from sweeper.engine.registry import HandlerRegistry

__all__ = [
    "CleanOutcome",
    "ExclusionChecker",
    "HandlerRegistry",
    "MarkResult",
    "OwnerResolver",
    "ResourceHandler",
    "TagOwnerResolver",
]
