"""Resource owner resolution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from sweeper.models.resource import Resource

DEFAULT_OWNER_TAGS = ("owner", "Owner", "email", "creator")


class OwnerResolver(ABC):
    """Maps a resource to a human or team owner string."""

    @abstractmethod
    def resolve(self, resource: Resource) -> Optional[str]:
        pass


class TagOwnerResolver(OwnerResolver):
    """Resolves owners from resource tags, falling back to a default recipient.

    Tag keys are consulted in order; the first non-empty value wins.
    """

    def __init__(self, tag_keys: Sequence[str] = DEFAULT_OWNER_TAGS, default_owner: Optional[str] = None) -> None:
        self.tag_keys = list(tag_keys)
        self.default_owner = default_owner

    def resolve(self, resource: Resource) -> Optional[str]:
        for key in self.tag_keys:
            value = resource.tags.get(key)
            if value:
                return value
        return self.default_owner
