"""Violation summary model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ViolationSummary:
    """Rule violation recorded against a resource.

    Attributes:
        rule_id: Identifier of the rule that fired (e.g., "age_exceeded")
        description: Human-readable explanation of the violation
    """

    rule_id: str
    description: str

    def __post_init__(self) -> None:
        if not self.rule_id:
            raise ValueError("rule_id cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {"rule_id": self.rule_id, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViolationSummary":
        return cls(rule_id=data["rule_id"], description=data.get("description", ""))
