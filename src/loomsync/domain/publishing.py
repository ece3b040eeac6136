"""Application service publishing reconciled items through a unit of work."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from loomsync.domain.model import ChangeStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from loomsync.domain.model import Item, LogicalId, ResourceKind
    from loomsync.domain.ports.unit_of_work import ItemUnitOfWork
    from loomsync.domain.reconciliation import Publication

log = getLogger(__name__)


class UnitOfWorkAggregationStore:
    """Aggregation store over an item repository.

    Each publication runs in one unit of work, so readers either see the item set
    of the previous cycle or the new one, never a mix.
    """

    def __init__(self, unit_of_work_factory: Callable[[], ItemUnitOfWork]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def snapshot(self, item_type: ResourceKind) -> dict[LogicalId, Item]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.items.load(item_type)

    def publish(self, publication: Publication) -> None:
        written = 0
        with self._unit_of_work_factory() as uow:
            repository = uow.repositories.items
            for update in publication.updates:
                if update.status is ChangeStatus.UNCHANGED:
                    continue
                if update.status is ChangeStatus.CHANGED_IGNORE:
                    repository.refresh_attributes(update.item)
                else:
                    repository.save(update.item, invalidate=True)
                written += 1
            removed = repository.remove(publication.item_type, publication.removed)
            uow.commit()
        log.debug(
            "Published %s items: written=%s, removed=%s",
            publication.item_type,
            written,
            removed,
        )

    def invalidated(self, item_type: ResourceKind) -> tuple[LogicalId, ...]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.items.invalidated(item_type)

    def clear_invalidated(
        self,
        item_type: ResourceKind,
        logical_ids: Iterable[LogicalId] | None = None,
    ) -> None:
        """Mark derived caches as rebuilt."""

        with self._unit_of_work_factory() as uow:
            uow.repositories.items.clear_invalidated(item_type, logical_ids)
            uow.commit()
