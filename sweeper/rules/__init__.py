"""Pluggable violation rules."""

from __future__ import annotations

from sweeper.rules.age import AgeRule
from sweeper.rules.base import Rule
from sweeper.rules.tags import MissingTagRule

__all__ = ["AgeRule", "MissingTagRule", "Rule"]
