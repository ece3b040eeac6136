"""Per-cycle universe snapshot.

The linker needs the full resource universe of the cycle (a join point after the
per-resource map). Instead of a process-wide registry of hosts and resources, every
cycle builds one immutable ``UniverseSnapshot`` and threads it through the stages;
it is discarded after publishing.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import IdentityResolutionError
from .identity import identity_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from loomsync.domain.model import IdentityKey, Resource, ResourceKind

    from .policy import ResourceTypeConfig

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UniverseSnapshot:
    """Immutable lookup over every resource observed at one instant."""

    _resources: Mapping[ResourceKind, Mapping[IdentityKey, Resource]] = field(
        default_factory=lambda: MappingProxyType({}), repr=False
    )
    _associations: Mapping[str, Mapping[IdentityKey, tuple[IdentityKey, ...]]] = field(
        default_factory=lambda: MappingProxyType({}), repr=False
    )
    taken_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def build(
        cls,
        resources: Iterable[Resource],
        *,
        configs: Mapping[ResourceKind, ResourceTypeConfig],
        taken_at: datetime | None = None,
    ) -> UniverseSnapshot:
        """Index ``resources`` by kind and identity key, and collect their associations.

        Resources of kinds without a config, or without a resolvable identity, are left
        out; the cycle driver reports those separately. A repeated identity keeps the
        first resource and its associations.
        """

        by_kind: dict[ResourceKind, dict[IdentityKey, Resource]] = defaultdict(dict)
        associations: dict[str, dict[IdentityKey, list[IdentityKey]]] = defaultdict(
            lambda: defaultdict(list)
        )
        for resource in resources:
            config = configs.get(resource.kind)
            if config is None:
                log.debug("No resource type config for %s; not indexed", resource.kind)
                continue
            try:
                key = identity_key(resource, config=config)
            except IdentityResolutionError:
                log.debug("Unresolvable %s left out of the universe", resource.kind)
                continue
            if key in by_kind[resource.kind]:
                # first enumerated wins, as in the cycle driver
                log.debug("Duplicate %s %s left out of the universe", resource.kind, key)
                continue
            by_kind[resource.kind][key] = resource
            for association in config.associations_for(resource):
                associations[association.name][association.owner_key].append(
                    association.related_key
                )

        return cls(
            _resources=MappingProxyType(
                {kind: MappingProxyType(index) for kind, index in by_kind.items()}
            ),
            _associations=MappingProxyType(
                {
                    name: MappingProxyType(
                        {owner: tuple(related) for owner, related in owners.items()}
                    )
                    for name, owners in associations.items()
                }
            ),
            taken_at=taken_at or datetime.now(tz=UTC),
        )

    def contains(self, kind: ResourceKind, key: IdentityKey) -> bool:
        return key in self._resources.get(kind, {})

    def resource(self, kind: ResourceKind, key: IdentityKey) -> Resource | None:
        return self._resources.get(kind, {}).get(key)

    def resources(self, kind: ResourceKind) -> tuple[Resource, ...]:
        return tuple(self._resources.get(kind, {}).values())

    def associated(self, name: str, owner_key: IdentityKey) -> tuple[IdentityKey, ...]:
        return self._associations.get(name, {}).get(owner_key, ())
