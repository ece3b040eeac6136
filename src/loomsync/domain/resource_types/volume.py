"""Volume policy.

Identity is ``(host_id, path)``: the same path on two hosts is two volumes.
``size_bytes`` is a metric and only refreshes the stored attributes. The mounting
containers are both a projected field (so a changed mount list classifies as an
update) and the source of the ``mounts`` edges, looked up per host in the universe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from loomsync.domain.model import RelationshipType, ResourceKind
from loomsync.domain.reconciliation import (
    Association,
    RelationshipLookupInconsistency,
    RelationshipSpec,
    ResourceTypeConfig,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from loomsync.domain.model import IdentityKey, Resource, Volume
    from loomsync.domain.reconciliation import UniverseSnapshot

VOLUME_DESCRIPTION = "Represents a docker volume"
VOLUME_MOUNTS = "volume_mounts"


def _volume_mounts(resource: Resource) -> Iterator[Association]:
    volume = cast("Volume", resource)
    for container_id in volume.mounted_by:
        yield Association(
            name=VOLUME_MOUNTS,
            owner_key=(volume.host_id, volume.path),
            related_key=(volume.host_id, container_id),
        )


def _mounting_containers(
    resource: Resource,
    universe: UniverseSnapshot,
) -> tuple[IdentityKey, ...]:
    volume = cast("Volume", resource)
    if not universe.contains(ResourceKind.HOST, (volume.host_id,)):
        raise RelationshipLookupInconsistency(
            f"Host {volume.host_id!r} of volume {volume.path!r} is not in this cycle's universe",
            kind=ResourceKind.VOLUME,
            relationship_type=RelationshipType.MOUNTS,
            target_kind=ResourceKind.HOST,
            target_key=(volume.host_id,),
        )
    return universe.associated(VOLUME_MOUNTS, (volume.host_id, volume.path))


VOLUME_TYPE = ResourceTypeConfig(
    kind=ResourceKind.VOLUME,
    identity_fields=("host_id", "path"),
    projected_fields=("host_id", "path", "name", "driver", "size_bytes", "mounted_by"),
    ignored_fields=frozenset({"size_bytes"}),
    name_field="path",
    description=VOLUME_DESCRIPTION,
    relationships=(
        RelationshipSpec(
            relationship_type=RelationshipType.MOUNTS,
            target_kind=ResourceKind.CONTAINER,
            lookup=_mounting_containers,
        ),
    ),
    associations=_volume_mounts,
)
