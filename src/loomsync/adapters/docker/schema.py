"""Pydantic models describing the Docker Engine API payloads we read."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class DockerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class InfoPayload(DockerBaseModel):
    id: str | None = Field(default=None, alias="ID")
    name: str | None = Field(default=None, alias="Name")
    server_version: str | None = Field(default=None, alias="ServerVersion")
    containers_running: int = Field(default=0, alias="ContainersRunning")
    mem_total: int | None = Field(default=None, alias="MemTotal")

    _normalize_id = field_validator("id", "name", mode="before")(_blank_to_none)


class VolumeUsage(DockerBaseModel):
    # -1 when the daemon did not compute usage
    size: int = Field(default=-1, alias="Size")


class VolumePayload(DockerBaseModel):
    name: str = Field(alias="Name")
    driver: str | None = Field(default=None, alias="Driver")
    mountpoint: str = Field(alias="Mountpoint")
    usage: VolumeUsage | None = Field(default=None, alias="UsageData")

    @property
    def size_bytes(self) -> int | None:
        if self.usage is None or self.usage.size < 0:
            return None
        return self.usage.size


class VolumeListResponse(DockerBaseModel):
    volumes: list[VolumePayload] | None = Field(default=None, alias="Volumes")

    @property
    def items(self) -> list[VolumePayload]:
        return self.volumes or []


class MountPayload(DockerBaseModel):
    type: str | None = Field(default=None, alias="Type")
    name: str | None = Field(default=None, alias="Name")
    source: str | None = Field(default=None, alias="Source")
    destination: str | None = Field(default=None, alias="Destination")


class ContainerPayload(DockerBaseModel):
    id: str = Field(alias="Id")
    names: list[str] = Field(default_factory=list, alias="Names")
    image: str | None = Field(default=None, alias="Image")
    state: str | None = Field(default=None, alias="State")
    status: str | None = Field(default=None, alias="Status")
    mounts: list[MountPayload] = Field(default_factory=list, alias="Mounts")

    @property
    def display_name(self) -> str | None:
        if not self.names:
            return None
        return self.names[0].lstrip("/") or None

    def mounts_volume(self, volume: VolumePayload) -> bool:
        return any(
            mount.type == "volume"
            and (mount.name == volume.name or mount.source == volume.mountpoint)
            for mount in self.mounts
        )


class ContainerListResponse(DockerBaseModel):
    containers: list[ContainerPayload]
