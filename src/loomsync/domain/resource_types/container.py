"""Container policy: containers run on hosts."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from loomsync.domain.model import RelationshipType, ResourceKind
from loomsync.domain.reconciliation import RelationshipSpec, ResourceTypeConfig

if TYPE_CHECKING:
    from loomsync.domain.model import Container, IdentityKey, Resource
    from loomsync.domain.reconciliation import UniverseSnapshot

CONTAINER_DESCRIPTION = "Represents a docker container"


def _host_of(resource: Resource, _universe: UniverseSnapshot) -> tuple[IdentityKey, ...]:
    container = cast("Container", resource)
    return ((container.host_id,),)


CONTAINER_TYPE = ResourceTypeConfig(
    kind=ResourceKind.CONTAINER,
    identity_fields=("host_id", "container_id"),
    projected_fields=("host_id", "container_id", "name", "image", "state", "status"),
    ignored_fields=frozenset({"status"}),
    name_field="name",
    description=CONTAINER_DESCRIPTION,
    relationships=(
        RelationshipSpec(
            relationship_type=RelationshipType.RUNS_ON,
            target_kind=ResourceKind.HOST,
            lookup=_host_of,
        ),
    ),
)
