"""Docker-backed inventory: one observation per collection round."""

from __future__ import annotations

from json import JSONDecodeError
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from loomsync.domain.reconciliation import EnumerationFailure, UniverseSnapshot
from loomsync.domain.resource_types import DEFAULT_RESOURCE_TYPES

from .client import DockerEngineClient, DockerEngineError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loomsync.domain.model import Resource, ResourceKind
    from loomsync.domain.reconciliation import ResourceTypeConfig

log = getLogger(__name__)


class DockerResourceSource:
    def __init__(self, inventory: DockerInventory, kind: ResourceKind) -> None:
        self._inventory = inventory
        self._kind = kind

    def enumerate(self) -> tuple[Resource, ...]:
        return self._inventory.resources_of(self._kind)


class DockerInventory:
    """Inventory over the configured Docker Engine endpoints.

    ``refresh()`` reads every endpoint once; sources and the universe snapshot then
    serve that observation until the next refresh. If the observation failed, every
    enumeration raises ``EnumerationFailure`` so the cycles of the round abort.
    """

    def __init__(
        self,
        client: DockerEngineClient | None = None,
        *,
        configs: Mapping[ResourceKind, ResourceTypeConfig] | None = None,
    ) -> None:
        self._client = client or DockerEngineClient()
        self._configs = configs or DEFAULT_RESOURCE_TYPES
        self._resources: tuple[Resource, ...] | None = None
        self._universe: UniverseSnapshot | None = None
        self._failure: str | None = "Docker inventory has not been refreshed yet"

    def refresh(self) -> None:
        try:
            resources = self._client.observe()
        except (httpx.HTTPError, DockerEngineError, ValidationError, JSONDecodeError) as exc:
            log.exception("Docker observation failed")
            self._resources = None
            self._universe = None
            self._failure = f"Docker observation failed: {exc}"
            return
        self._resources = resources
        self._universe = UniverseSnapshot.build(resources, configs=self._configs)
        self._failure = None
        log.info("Observed %s docker resources", len(resources))

    def source(self, kind: ResourceKind) -> DockerResourceSource:
        return DockerResourceSource(self, kind)

    def resources_of(self, kind: ResourceKind) -> tuple[Resource, ...]:
        resources = self._observed()
        return tuple(resource for resource in resources if resource.kind is kind)

    def snapshot(self) -> UniverseSnapshot:
        self._observed()
        if self._universe is None:
            raise EnumerationFailure("Docker universe is not available")
        return self._universe

    def _observed(self) -> tuple[Resource, ...]:
        if self._failure is not None or self._resources is None:
            raise EnumerationFailure(self._failure or "Docker inventory is empty")
        return self._resources
