"""Host policy: one item per observed container runtime."""

from __future__ import annotations

from loomsync.domain.model import ResourceKind
from loomsync.domain.reconciliation import ResourceTypeConfig

HOST_DESCRIPTION = "Represents a docker host"

HOST_TYPE = ResourceTypeConfig(
    kind=ResourceKind.HOST,
    identity_fields=("host_id",),
    projected_fields=(
        "host_id",
        "address",
        "name",
        "server_version",
        "containers_running",
        "memory_total",
    ),
    # the running-container count moves with every container start/stop and is
    # already represented by the container items' own runs_on edges
    ignored_fields=frozenset({"containers_running"}),
    name_field="name",
    description=HOST_DESCRIPTION,
)
