"""Base class for violation rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from sweeper.models.resource import Resource
from sweeper.models.summary import ViolationSummary


class Rule(ABC):
    """Abstract base class for all violation rules.

    Each rule should:
    1. Have a unique rule_id
    2. Implement apply() as a pure predicate over a resource
    3. Return a ViolationSummary when violated, None when compliant
    """

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique identifier for this rule.

        Returns:
            String identifier (e.g., "age_exceeded")
        """
        pass

    @abstractmethod
    def apply(self, resource: Resource) -> Optional[ViolationSummary]:
        """Evaluate the rule against a resource.

        Args:
            resource: Resource snapshot to evaluate

        Returns:
            ViolationSummary if the resource violates the rule, None otherwise
        """
        pass

    def violation(self, description: str) -> ViolationSummary:
        return ViolationSummary(rule_id=self.rule_id, description=description)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_id})"
