"""Handler registry keyed on (resource_type, cloud_provider)."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sweeper.engine.handler import ResourceHandler
from sweeper.errors import HandlerConfigurationError, HandlerNotFoundError

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Resolves the single handler responsible for a resource type and provider.

    Handlers are registered at process start. Registration fails when a new
    handler would share a claimed pair with an existing one, so ambiguity
    surfaces as a startup error instead of a runtime race.

    Example:
        >>> registry = HandlerRegistry()
        >>> registry.register(image_handler, claims=[("image", "aws")])
        >>> registry.find("image", "aws") is image_handler
        True
    """

    def __init__(self, handlers: Optional[Iterable[ResourceHandler]] = None) -> None:
        self._handlers: List[ResourceHandler] = []
        self._claims: List[tuple[str, str]] = []
        for handler in handlers or []:
            self.register(handler)

    @property
    def handlers(self) -> List[ResourceHandler]:
        return list(self._handlers)

    def register(self, handler: ResourceHandler, claims: Iterable[tuple[str, str]] = ()) -> None:
        """Register a handler.

        Args:
            handler: Handler to add
            claims: (resource_type, cloud_provider) pairs the handler is expected
                to own; each is checked against every registered handler

        Raises:
            HandlerConfigurationError: If a claimed pair is already handled
        """
        claims = list(claims)
        for resource_type, cloud_provider in claims + self._claims:
            owners = [h for h in [*self._handlers, handler] if h.handles(resource_type, cloud_provider)]
            if len(owners) > 1:
                names = ", ".join(type(h).__name__ for h in owners)
                raise HandlerConfigurationError(
                    f"Ambiguous handlers for {cloud_provider}:{resource_type}: {names}"
                )

        self._handlers.append(handler)
        self._claims.extend(claims)
        logger.debug(f"Registered handler {type(handler).__name__}")

    def validate(self, pairs: Iterable[tuple[str, str]]) -> None:
        """Check that each (resource_type, cloud_provider) pair has exactly one handler.

        Raises:
            HandlerNotFoundError: If a pair has no handler
            HandlerConfigurationError: If a pair has more than one handler
        """
        for resource_type, cloud_provider in pairs:
            self.find(resource_type, cloud_provider)

    def find(self, resource_type: str, cloud_provider: str) -> ResourceHandler:
        """Return the handler claiming the pair.

        Raises:
            HandlerNotFoundError: If no handler claims the pair
            HandlerConfigurationError: If more than one handler claims it
        """
        owners = [h for h in self._handlers if h.handles(resource_type, cloud_provider)]
        if not owners:
            raise HandlerNotFoundError(resource_type, cloud_provider)
        if len(owners) > 1:
            names = ", ".join(type(h).__name__ for h in owners)
            raise HandlerConfigurationError(f"Ambiguous handlers for {cloud_provider}:{resource_type}: {names}")
        return owners[0]
