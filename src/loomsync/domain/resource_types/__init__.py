"""Resource-type policies shipped with loomsync."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from loomsync.domain.model import ResourceKind

from .container import CONTAINER_TYPE
from .host import HOST_TYPE
from .volume import VOLUME_MOUNTS, VOLUME_TYPE

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_RESOURCE_TYPES = MappingProxyType(
    {
        ResourceKind.HOST: HOST_TYPE,
        ResourceKind.CONTAINER: CONTAINER_TYPE,
        ResourceKind.VOLUME: VOLUME_TYPE,
    }
)

# hosts first so that dependent items link against freshly published targets
CYCLE_ORDER: tuple[ResourceKind, ...] = (
    ResourceKind.HOST,
    ResourceKind.CONTAINER,
    ResourceKind.VOLUME,
)


def ordered_kinds(kinds: Iterable[ResourceKind]) -> tuple[ResourceKind, ...]:
    """Return ``kinds`` in cycle order, dropping duplicates."""

    wanted = set(kinds)
    return tuple(kind for kind in CYCLE_ORDER if kind in wanted)


__all__ = [
    "CONTAINER_TYPE",
    "CYCLE_ORDER",
    "DEFAULT_RESOURCE_TYPES",
    "HOST_TYPE",
    "VOLUME_MOUNTS",
    "VOLUME_TYPE",
    "ordered_kinds",
]
