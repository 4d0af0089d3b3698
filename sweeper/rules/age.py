"""Age-based rule."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sweeper.models.resource import Resource
from sweeper.models.summary import ViolationSummary
from sweeper.rules.base import Rule
from sweeper.utils.timestamps import utcnow


class AgeRule(Rule):
    """Flags resources older than a maximum age.

    Resources without a creation timestamp are never flagged.
    """

    def __init__(self, max_age_days: int, clock: Callable[[], datetime] = utcnow) -> None:
        if max_age_days < 0:
            raise ValueError("max_age_days cannot be negative")
        self.max_age_days = max_age_days
        self.clock = clock

    @property
    def rule_id(self) -> str:
        return "age_exceeded"

    def apply(self, resource: Resource) -> Optional[ViolationSummary]:
        age = resource.age_days(self.clock())
        if age is None or age <= self.max_age_days:
            return None

        return self.violation(
            f"{resource.resource_type} '{resource.resource_id}' is {int(age)} days old "
            f"(older than {self.max_age_days} days)"
        )
