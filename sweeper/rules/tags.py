"""Tag-based rules."""

from __future__ import annotations

from typing import Optional

from sweeper.models.resource import Resource
from sweeper.models.summary import ViolationSummary
from sweeper.rules.base import Rule


class MissingTagRule(Rule):
    """Flags resources that lack a required tag."""

    def __init__(self, tag_key: str) -> None:
        if not tag_key:
            raise ValueError("tag_key cannot be empty")
        self.tag_key = tag_key

    @property
    def rule_id(self) -> str:
        return f"missing_tag:{self.tag_key}"

    def apply(self, resource: Resource) -> Optional[ViolationSummary]:
        if resource.tags.get(self.tag_key):
            return None
        return self.violation(f"{resource.resource_type} '{resource.resource_id}' is missing required tag '{self.tag_key}'")
