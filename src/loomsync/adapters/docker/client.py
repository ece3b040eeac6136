"""HTTP client for the Docker Engine API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel

from loomsync.adapters.http_resilience import ResilientClient
from loomsync.config import get_docker_config

from .schema import ContainerListResponse, InfoPayload, VolumeListResponse
from .translator import host_id_for, parse_container, parse_host, parse_volume

if TYPE_CHECKING:
    from collections.abc import Callable

    from loomsync.config import DockerConfig, DockerHost, ResilienceConfig
    from loomsync.domain.model import Resource

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class DockerEngineError(RuntimeError):
    """Raised when a Docker Engine endpoint cannot be read or returns unexpected data."""

    def __init__(self, message: str, *, host: str) -> None:
        super().__init__(message)
        self.host = host


@dataclass(slots=True)
class DockerEngineClient:
    """Read-only observer of one or more Docker Engine endpoints.

    ``observe()`` queries every configured host concurrently and returns all
    hosts, containers and volumes as one flat resource tuple.
    """

    config: DockerConfig = field(default_factory=get_docker_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def observe(self) -> tuple[Resource, ...]:
        return asyncio.run(self._observe_async())

    async def _observe_async(self) -> tuple[Resource, ...]:
        per_host = await asyncio.gather(*(self._observe_host(host) for host in self.config.hosts))
        return tuple(resource for resources in per_host for resource in resources)

    async def _observe_host(self, endpoint: DockerHost) -> list[Resource]:
        resilience = endpoint.resilience(
            timeout_seconds=self.config.timeout_seconds,
            ratelimit=self.config.ratelimit,
        )
        async with self.client_factory(resilience) as client:
            info = await self._get(client, endpoint, "info", InfoPayload)
            volumes = await self._get(client, endpoint, "volumes", VolumeListResponse)
            containers = await self._get(
                client,
                endpoint,
                "containers/json",
                ContainerListResponse,
                params={"all": "true"},
                wrap="containers",
            )

        host_id = host_id_for(endpoint, info)
        resources: list[Resource] = [parse_host(endpoint, info)]
        resources.extend(parse_container(host_id, payload) for payload in containers.containers)
        resources.extend(
            parse_volume(host_id, payload, containers.containers) for payload in volumes.items
        )
        log.debug(
            "Observed docker host %s: containers=%s, volumes=%s",
            endpoint.name,
            len(containers.containers),
            len(volumes.items),
        )
        return resources

    async def _get[M: BaseModel](
        self,
        client: ResilientClient,
        endpoint: DockerHost,
        path: str,
        model: type[M],
        *,
        params: dict[str, str] | None = None,
        wrap: str | None = None,
    ) -> M:
        response = await client.get(path, params=params)
        if response.is_error:
            raise DockerEngineError(
                f"GET {path} on {endpoint.name} returned HTTP {response.status_code}",
                host=endpoint.name,
            )
        payload = response.json()
        # list endpoints return a bare JSON array
        return model.model_validate({wrap: payload} if wrap is not None else payload)
