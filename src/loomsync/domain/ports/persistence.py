"""Ports for persisting reconciled items."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from loomsync.domain.model import Item, LogicalId, ResourceKind


@runtime_checkable
class ItemRepository(Protocol):
    """Persistence contract for items and their outgoing edges."""

    def load(self, item_type: ResourceKind) -> dict[LogicalId, Item]: ...

    def save(self, item: Item, *, invalidate: bool) -> None:
        """Insert or fully replace ``item`` (attributes and edges)."""
        ...

    def refresh_attributes(self, item: Item) -> None:
        """Overwrite stored attributes only; edges and cache markers stay untouched."""
        ...

    def remove(self, item_type: ResourceKind, logical_ids: Iterable[LogicalId]) -> int: ...

    def invalidated(self, item_type: ResourceKind) -> tuple[LogicalId, ...]: ...

    def clear_invalidated(
        self,
        item_type: ResourceKind,
        logical_ids: Iterable[LogicalId] | None = None,
    ) -> None: ...
