"""Port for the aggregation store that owns the published item sets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from loomsync.domain.model import Item, LogicalId, ResourceKind
    from loomsync.domain.reconciliation.contracts import Publication


@runtime_checkable
class AggregationStore(Protocol):
    """Single writer per item type (the cycle driver), any number of readers."""

    def snapshot(self, item_type: ResourceKind) -> Mapping[LogicalId, Item]:
        """Return the item set published by the previous cycle."""
        ...

    def publish(self, publication: Publication) -> None:
        """Atomically replace the published item set for ``publication.item_type``."""
        ...

    def invalidated(self, item_type: ResourceKind) -> tuple[LogicalId, ...]:
        """Logical ids whose derived caches were invalidated and not yet rebuilt."""
        ...


__all__ = ["AggregationStore"]
