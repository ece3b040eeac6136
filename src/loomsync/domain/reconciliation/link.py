"""Relationship linking against the cycle's universe snapshot.

Responsibilities of this stage:
- evaluate every ``RelationshipSpec`` of the resource type for one resource
- emit one directed edge per related resource present in the universe
- skip (and report) edges whose target or owning context is missing

Missing targets are expected to self-heal on a later cycle, so they are reported
through ``on_inconsistency`` and logged instead of failing the resource. Reverse
edges are left to the consuming query layer.
"""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from loomsync.domain.model import RelationshipEdge

from .errors import RelationshipLookupInconsistency
from .identity import logical_id_for

if TYPE_CHECKING:
    from loomsync.domain.model import Item, Resource

    from .policy import RelationshipSpec, ResourceTypeConfig
    from .snapshot import UniverseSnapshot

log = getLogger(__name__)

type InconsistencyHandler = Callable[[RelationshipLookupInconsistency], None]


class LinkRelationships(Protocol):
    """Compute the outgoing edges of one item."""

    def __call__(
        self,
        item: Item,
        resource: Resource,
        universe: UniverseSnapshot,
        *,
        config: ResourceTypeConfig,
        on_inconsistency: InconsistencyHandler | None = None,
    ) -> tuple[RelationshipEdge, ...]: ...


def link_relationships(
    item: Item,
    resource: Resource,
    universe: UniverseSnapshot,
    *,
    config: ResourceTypeConfig,
    on_inconsistency: InconsistencyHandler | None = None,
) -> tuple[RelationshipEdge, ...]:
    """Default linker; edges are grouped per spec and sorted by target id."""

    edges: list[RelationshipEdge] = []
    for spec in config.relationships:
        edges.extend(
            _edges_for_spec(
                item,
                resource,
                universe,
                spec=spec,
                config=config,
                on_inconsistency=on_inconsistency,
            )
        )
    return tuple(edges)


def _edges_for_spec(
    item: Item,
    resource: Resource,
    universe: UniverseSnapshot,
    *,
    spec: RelationshipSpec,
    config: ResourceTypeConfig,
    on_inconsistency: InconsistencyHandler | None,
) -> list[RelationshipEdge]:
    try:
        related_keys = tuple(spec.lookup(resource, universe))
    except RelationshipLookupInconsistency as exc:
        if exc.source_logical_id is None:
            exc.source_logical_id = item.logical_id
        _report(exc, on_inconsistency=on_inconsistency)
        return []

    edges: list[RelationshipEdge] = []
    for key in related_keys:
        if not universe.contains(spec.target_kind, key):
            _report(
                RelationshipLookupInconsistency(
                    f"{config.kind} {item.logical_id}: {spec.relationship_type} target "
                    f"{spec.target_kind} {key!r} is not in this cycle's universe",
                    kind=config.kind,
                    relationship_type=spec.relationship_type,
                    target_kind=spec.target_kind,
                    target_key=key,
                    source_logical_id=item.logical_id,
                ),
                on_inconsistency=on_inconsistency,
            )
            continue
        edges.append(
            RelationshipEdge(
                relationship_type=spec.relationship_type,
                target_item_type=spec.target_kind,
                target_logical_id=logical_id_for(spec.target_kind, key),
            )
        )
    edges.sort(key=lambda edge: edge.target_logical_id)
    return edges


def _report(
    inconsistency: RelationshipLookupInconsistency,
    *,
    on_inconsistency: InconsistencyHandler | None,
) -> None:
    log.warning("Skipping edge: %s", inconsistency)
    if on_inconsistency is not None:
        on_inconsistency(inconsistency)
