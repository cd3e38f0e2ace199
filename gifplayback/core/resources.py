"""Teardown registry for resources tied to a renderer's lifetime."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Unloadable(Protocol):
    """Anything holding an external resource that must be released."""

    def unload(self) -> None: ...


T = TypeVar("T", bound=Unloadable)


class ResourceRegistry:
    """Collects unloadable resources and releases them in one sweep.

    Owned by whichever context manages the renderer. Not thread-safe: callers
    serialize access. Each registered resource is unloaded at most once by the
    registry, and removing something that is not registered is a no-op.
    """

    def __init__(self) -> None:
        self._resources: list[Unloadable] = []
        self._draining = False

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, resource: object) -> bool:
        return any(item is resource for item in self._resources)

    def __enter__(self) -> "ResourceRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unload_all()

    def register(self, resource: T) -> T:
        if resource not in self:
            self._resources.append(resource)
            logger.debug("Registered %r (%s tracked)", resource, len(self._resources))
        return resource

    def remove(self, resource: Unloadable) -> None:
        if self._draining:
            return
        for index, item in enumerate(self._resources):
            if item is resource:
                del self._resources[index]
                logger.debug("Removed %r", resource)
                return

    def unload(self, resource: Unloadable) -> None:
        """Deregister and release a single resource."""

        self.remove(resource)
        resource.unload()

    def unload_all(self) -> int:
        """Release everything still registered; returns how many were unloaded."""

        pending, self._resources = self._resources, []
        logger.info("Unloading %s resources", len(pending))
        self._draining = True
        tally = 0
        try:
            for resource in pending:
                resource.unload()
                tally += 1
        finally:
            self._draining = False
        logger.info("Unloaded %s resources", tally)
        return tally

    @contextmanager
    def track(self, resource: T) -> Iterator[T]:
        """Register ``resource`` for the duration of a block, then release it."""

        self.register(resource)
        try:
            yield resource
        finally:
            self.unload(resource)
