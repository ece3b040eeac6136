from __future__ import annotations

from loomsync.domain.model import Container, Host, Volume


def make_host(host_id: str = "h1", **overrides: object) -> Host:
    values: dict[str, object] = {
        "host_id": host_id,
        "address": f"unix:///run/{host_id}.sock",
        "name": host_id,
        "server_version": "25.0.3",
        "containers_running": 1,
        "memory_total": 8_000_000_000,
    }
    values.update(overrides)
    return Host(**values)  # pyright: ignore[reportArgumentType]


def make_container(
    container_id: str = "c1",
    host_id: str = "h1",
    **overrides: object,
) -> Container:
    values: dict[str, object] = {
        "container_id": container_id,
        "host_id": host_id,
        "name": f"app-{container_id}",
        "image": "nginx:1.27",
        "state": "running",
        "status": "Up 3 minutes",
    }
    values.update(overrides)
    return Container(**values)  # pyright: ignore[reportArgumentType]


def make_volume(
    path: str = "/data",
    host_id: str = "h1",
    *,
    mounted_by: tuple[str, ...] = (),
    **overrides: object,
) -> Volume:
    values: dict[str, object] = {
        "path": path,
        "host_id": host_id,
        "name": path.strip("/") or "root",
        "driver": "local",
        "size_bytes": 1024,
        "mounted_by": mounted_by,
    }
    values.update(overrides)
    return Volume(**values)  # pyright: ignore[reportArgumentType]
