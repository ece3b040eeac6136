"""Translate Docker Engine payloads into observed resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loomsync.domain.model import Container, Host, Volume

if TYPE_CHECKING:
    from collections.abc import Sequence

    from loomsync.config import DockerHost

    from .schema import ContainerPayload, InfoPayload, VolumePayload


def host_id_for(endpoint: DockerHost, info: InfoPayload) -> str:
    """Prefer the daemon ID; fall back to the configured endpoint name."""

    return info.id or endpoint.name


def parse_host(endpoint: DockerHost, info: InfoPayload) -> Host:
    return Host(
        host_id=host_id_for(endpoint, info),
        address=endpoint.url,
        name=info.name or endpoint.name,
        server_version=info.server_version,
        containers_running=info.containers_running,
        memory_total=info.mem_total,
    )


def parse_container(host_id: str, payload: ContainerPayload) -> Container:
    return Container(
        container_id=payload.id,
        host_id=host_id,
        name=payload.display_name,
        image=payload.image,
        state=payload.state,
        status=payload.status,
    )


def parse_volume(
    host_id: str,
    payload: VolumePayload,
    containers: Sequence[ContainerPayload],
) -> Volume:
    mounted_by = sorted(
        container.id for container in containers if container.mounts_volume(payload)
    )
    return Volume(
        path=payload.mountpoint,
        host_id=host_id,
        name=payload.name,
        driver=payload.driver,
        size_bytes=payload.size_bytes,
        mounted_by=tuple(mounted_by),
    )
