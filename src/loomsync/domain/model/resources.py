"""
Observed resources:
read-only snapshots of one externally observed entity at the current instant.

Resources are rebuilt from scratch by the sources every cycle. They are frozen so
that a caller may keep references across cycles without seeing them change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from loomsync.domain.model.enums import ResourceKind


@dataclass(frozen=True, slots=True, kw_only=True)
class Resource:
    # class-level discriminator; subclasses must override
    RESOURCE_KIND: ClassVar[ResourceKind]

    @property
    def kind(self) -> ResourceKind:
        return self.RESOURCE_KIND


@dataclass(frozen=True, slots=True, kw_only=True)
class Host(Resource):
    RESOURCE_KIND: ClassVar[ResourceKind] = ResourceKind.HOST

    host_id: str
    address: str | None = None
    name: str | None = None
    server_version: str | None = None
    containers_running: int = 0
    memory_total: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Container(Resource):
    RESOURCE_KIND: ClassVar[ResourceKind] = ResourceKind.CONTAINER

    container_id: str
    host_id: str
    name: str | None = None
    image: str | None = None
    state: str | None = None
    # free-text uptime ("Up 3 minutes"), changes on every poll
    status: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Volume(Resource):
    RESOURCE_KIND: ClassVar[ResourceKind] = ResourceKind.VOLUME

    path: str
    host_id: str
    name: str | None = None
    driver: str | None = None
    size_bytes: int | None = None
    mounted_by: tuple[str, ...] = ()
